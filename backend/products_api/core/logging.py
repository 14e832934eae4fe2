"""Root logger setup shared by the API process."""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Install a single stream handler on the root logger.

    Calling this more than once only adjusts the level, so app factories
    built repeatedly in tests do not stack handlers.
    """
    root = logging.getLogger()
    root.setLevel(level.upper())
    if any(getattr(h, "_products_api", False) for h in root.handlers):
        return

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._products_api = True  # type: ignore[attr-defined]
    root.addHandler(handler)
