"""Request validation rules evaluated before a handler runs.

A route declares an ordered list of rules. Each rule inspects the parsed
request (path params + JSON body) and yields at most one error. When any
rule fails the request is answered with ``400 {"errors": [...]}`` and the
handler never runs; otherwise the handler receives the sanitized values.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
import json
import logging
from typing import Any

from fastapi import Request

from products_api.core.errors import RequestValidationFailed

logger = logging.getLogger(__name__)

PARAMS = "params"
BODY = "body"

_MISSING = object()

# A check returns the sanitized value, or raises CheckFailed
Check = Callable[[Any], Any]


class CheckFailed(Exception):
    pass


@dataclass
class RequestInput:
    params: dict[str, Any]
    body: dict[str, Any]
    cleaned: dict[str, Any] = field(default_factory=dict)

    def source(self, location: str) -> dict[str, Any]:
        return self.params if location == PARAMS else self.body


Rule = Callable[[RequestInput], dict[str, Any] | None]


def field_error(location: str, path: str, value: Any, msg: str) -> dict[str, Any]:
    return {
        "type": "field",
        "value": None if value is _MISSING else value,
        "msg": msg,
        "path": path,
        "location": location,
    }


def chain(location: str, name: str, *checks: tuple[Check, str]) -> Rule:
    """Build a rule running ``checks`` on one field, stopping at the first failure.

    Each check receives the output of the previous one, so a check may
    coerce the raw value (``"12"`` -> ``12.0``) for the ones after it.
    """

    def rule(data: RequestInput) -> dict[str, Any] | None:
        raw = data.source(location).get(name, _MISSING)
        value = raw
        for check, message in checks:
            try:
                value = check(value)
            except CheckFailed:
                return field_error(location, name, raw, message)
        data.cleaned[name] = value
        return None

    return rule


# -- checks -----------------------------------------------------------------


def required(value: Any) -> Any:
    if value is _MISSING or value is None:
        raise CheckFailed
    if isinstance(value, str) and not value.strip():
        raise CheckFailed
    return value


def text(value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise CheckFailed
    return value.strip()


def integer(value: Any) -> int:
    if isinstance(value, bool):
        raise CheckFailed
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        candidate = value.strip()
        if candidate[:1] in ("+", "-"):
            digits = candidate[1:]
        else:
            digits = candidate
        if digits.isdigit() and digits.isascii():
            return int(candidate)
    raise CheckFailed


def numeric(value: Any) -> float:
    if isinstance(value, bool):
        raise CheckFailed
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError as e:
            raise CheckFailed from e
    else:
        raise CheckFailed
    if number != number or number in (float("inf"), float("-inf")):
        raise CheckFailed
    return number


def positive(value: float) -> float:
    if value <= 0:
        raise CheckFailed
    return value


_BOOLEAN_STRINGS = {"true": True, "false": False, "1": True, "0": False}


def boolean(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value in _BOOLEAN_STRINGS:
        return _BOOLEAN_STRINGS[value]
    raise CheckFailed


# -- rules used by the product routes ----------------------------------------

INVALID_ID_MESSAGE = "Id must be an integer"


def valid_id(name: str = "id") -> Rule:
    return chain(PARAMS, name, (integer, INVALID_ID_MESSAGE))


NAME_MAX_LENGTH = 100


def max_length(limit: int) -> Check:
    def check(value: str) -> str:
        if len(value) > limit:
            raise CheckFailed
        return value

    return check


def valid_name() -> Rule:
    return chain(
        BODY,
        "name",
        (text, "Name is required"),
        (
            max_length(NAME_MAX_LENGTH),
            f"Name must be at most {NAME_MAX_LENGTH} characters",
        ),
    )


def valid_price() -> Rule:
    return chain(
        BODY,
        "price",
        (required, "Price is required"),
        (numeric, "Price must be a number"),
        (positive, "Price must be greater than 0"),
    )


def valid_availability() -> Rule:
    return chain(BODY, "availability", (boolean, "Availability must be a boolean"))


# -- FastAPI integration -----------------------------------------------------


async def read_json_body(request: Request) -> dict[str, Any]:
    """Return the JSON object body, or an empty dict when there is none."""
    raw = await request.body()
    if not raw:
        return {}
    try:
        payload = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError):
        logger.debug(f"Ignoring non-JSON body on {request.method} {request.url.path}")
        return {}
    return payload if isinstance(payload, dict) else {}


def run_rules(data: RequestInput, rules: Sequence[Rule]) -> RequestInput:
    errors = [error for error in (rule(data) for rule in rules) if error is not None]
    if errors:
        raise RequestValidationFailed(errors)
    return data


def validate(*rules: Rule, params: dict[str, str] | None = None):
    """Create a dependency that runs ``rules`` against the incoming request.

    ``params`` maps rule names to path parameter names when they differ,
    e.g. ``{"id": "product_id"}``.
    """
    aliases = params or {}

    async def dependency(request: Request) -> RequestInput:
        path_params = dict(request.path_params)
        for name, alias in aliases.items():
            if alias in path_params:
                path_params[name] = path_params[alias]
        body = await read_json_body(request) if request.method in ("POST", "PUT", "PATCH") else {}
        return run_rules(RequestInput(params=path_params, body=body), rules)

    return dependency
