"""Error taxonomy for the events API and its plain-text HTTP rendering."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class EventStoreError(Exception):
    """Base class for request-terminal errors; ``status_code`` picks the HTTP status."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ClientError(EventStoreError):
    status_code = status.HTTP_400_BAD_REQUEST


class NotFound(EventStoreError):
    status_code = status.HTTP_404_NOT_FOUND


class MethodNotAllowed(EventStoreError):
    status_code = status.HTTP_405_METHOD_NOT_ALLOWED


class StorageError(EventStoreError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


async def event_store_error_handler(request: Request, exc: EventStoreError) -> PlainTextResponse:
    return PlainTextResponse(exc.message, status_code=exc.status_code)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> PlainTextResponse:
    """Undecodable or ill-typed request bodies are client errors, not 422s."""
    logger.info("Rejected request body on %s: %s", request.url.path, exc.errors())
    return PlainTextResponse("Invalid JSON", status_code=status.HTTP_400_BAD_REQUEST)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> PlainTextResponse:
    # Covers the router's own 404/405 responses.
    if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        response = await event_store_error_handler(request, MethodNotAllowed("Method not allowed"))
        if exc.headers:
            response.headers.update(exc.headers)
        return response
    detail = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    return PlainTextResponse(detail, status_code=exc.status_code, headers=exc.headers)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(EventStoreError, event_store_error_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)


__all__ = [
    "ClientError",
    "EventStoreError",
    "MethodNotAllowed",
    "NotFound",
    "StorageError",
    "register_exception_handlers",
]
