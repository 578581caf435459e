"""Domain exceptions and HTTP exception handlers."""

from __future__ import annotations

import logging

from fastapi import Request
from fastapi.responses import JSONResponse

logger = logging.getLogger("llantera.errors")


class MapError(Exception):
    """A geocoding or directions request came back without an ``OK`` status."""

    def __init__(self, status: str, message: str | None = None) -> None:
        super().__init__(message or status)
        self.status = status


class MapNotReadyError(MapError):
    """The map surface is missing the configuration it needs to run queries."""

    def __init__(self, message: str) -> None:
        super().__init__("MAP_NOT_READY", message)


class InvalidTransitionError(Exception):
    """A service record was asked to skip or reverse its status."""

    def __init__(self, current: str, requested: str) -> None:
        super().__init__(f"Cannot move service from {current!r} to {requested!r}")
        self.current = current
        self.requested = requested


class NotFoundError(LookupError):
    """Requested record does not exist."""


async def invalid_transition_handler(request: Request, exc: InvalidTransitionError) -> JSONResponse:
    logger.info("Rejected transition on %s: %s", request.url.path, exc)
    return JSONResponse(
        status_code=409,
        content={
            "error": "invalid_transition",
            "message": str(exc),
            "current": exc.current,
            "requested": exc.requested,
        },
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:  # noqa: D401
    """Return a generic JSON error response while logging the exception."""

    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={
            "error": "internal_error",
            "message": "Something unexpected happened. Please try again later.",
        },
    )
