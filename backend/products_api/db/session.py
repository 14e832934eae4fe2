"""Engine and session factory wrapped in an explicitly managed client."""

from __future__ import annotations

from collections.abc import Generator
import logging
from typing import Any

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import QueuePool, StaticPool

from products_api.db.base import Base
import products_api.db.models  # noqa: F401  registers tables on Base.metadata

logger = logging.getLogger(__name__)


def engine_options(url: str) -> dict[str, Any]:
    """Pick pool and driver options suited to the database backend."""
    backend = make_url(url).get_backend_name()

    if backend == "sqlite":
        options: dict[str, Any] = {"connect_args": {"check_same_thread": False}}
        database = make_url(url).database
        if not database or database == ":memory:":
            # One shared connection, otherwise each session sees an empty db
            options["poolclass"] = StaticPool
        return options

    options = {
        "poolclass": QueuePool,
        "pool_pre_ping": True,  # Test connections before using
        "pool_recycle": 1800,  # Recycle connections after 30 minutes
        "pool_size": 5,
        "max_overflow": 10,
    }
    if backend == "postgresql":
        options["connect_args"] = {
            "connect_timeout": 10,
            "keepalives": 1,
            "keepalives_idle": 30,
            "keepalives_interval": 10,
            "keepalives_count": 5,
        }
    return options


class Database:
    """Owns the engine and session factory for one application instance."""

    def __init__(self, url: str, *, echo: bool = False):
        self.engine: Engine = create_engine(url, echo=echo, **engine_options(url))
        self.session_factory = sessionmaker(
            bind=self.engine, autoflush=False, expire_on_commit=False
        )

    def init(self) -> None:
        """Check connectivity and create missing tables."""
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            Base.metadata.create_all(self.engine)
        except SQLAlchemyError as e:
            logger.error(f"Error connecting to database: {e}", exc_info=True)
            raise
        logger.info(
            f"Database ready at {self.engine.url.render_as_string(hide_password=True)}"
        )

    def dispose(self) -> None:
        """Release pooled connections."""
        self.engine.dispose()
        logger.info("Database connections released")

    def ping(self) -> bool:
        with self.engine.connect() as conn:
            conn.execute(text("SELECT 1")).fetchone()
        return True

    def session(self) -> Generator[Session, None, None]:
        """Yield a session for one request, rolling back on failure."""
        db = self.session_factory()
        try:
            yield db
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()
