"""API error taxonomy and the JSON envelopes each error is rendered as."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

SERVER_ERROR_MESSAGE = "Server error"


class ApiError(Exception):
    """Base class for errors that terminate a request with a JSON body."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def body(self) -> dict[str, Any]:
        raise NotImplementedError


class RequestValidationFailed(ApiError):
    """One or more validation rules rejected the request input."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, errors: list[dict[str, Any]]):
        super().__init__(f"{len(errors)} validation error(s)")
        self.errors = errors

    def body(self) -> dict[str, Any]:
        return {"errors": self.errors}


class NotFoundError(ApiError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, message: str = "Not found"):
        super().__init__(message)
        self.message = message

    def body(self) -> dict[str, Any]:
        return {"error": self.message}


class ServerError(ApiError):
    """Wraps an unexpected persistence failure; details stay in the logs."""

    def body(self) -> dict[str, Any]:
        return {"error": SERVER_ERROR_MESSAGE}


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.body())


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"Unhandled error on {request.method} {request.url.path}: {exc}",
        exc_info=exc,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": SERVER_ERROR_MESSAGE},
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
