from __future__ import annotations

import logging
from typing import Any

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class OJTLogError(Exception):
    """Base class for errors raised by the log service."""


class UnauthenticatedError(OJTLogError):
    def __init__(self, message: str = "User is not authenticated.") -> None:
        super().__init__(message)


class StoreError(OJTLogError):
    """The backing data store rejected or failed an operation.

    The original driver exception is kept as ``__cause__``.
    """


class LegacyDataError(OJTLogError):
    """Some locally stored legacy records could not be read; nothing was imported."""

    def __init__(self, rejected_ids: list[object]) -> None:
        self.rejected_ids = list(rejected_ids)
        super().__init__(
            f"{len(self.rejected_ids)} legacy log record(s) are invalid; local data was kept."
        )


class ErrorEnvelope(JSONResponse):
    def __init__(
        self,
        *,
        status_code: int,
        code: str,
        message: str,
        details: Any | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        payload: dict[str, Any] = {"code": code, "message": message}
        if details is not None:
            payload["details"] = details
        super().__init__(payload, status_code=status_code, headers=headers)


async def unauthenticated_handler(request: Request, exc: UnauthenticatedError):
    return ErrorEnvelope(
        status_code=status.HTTP_401_UNAUTHORIZED,
        code="unauthenticated",
        message=str(exc),
        headers={"WWW-Authenticate": "Bearer"},
    )


async def legacy_data_handler(request: Request, exc: LegacyDataError):
    return ErrorEnvelope(
        status_code=422,
        code="legacy_data_invalid",
        message=str(exc),
        details={"rejectedIds": jsonable_encoder(exc.rejected_ids)},
    )


async def store_error_handler(request: Request, exc: StoreError):
    logger.error(
        "store.request_failed",
        exc_info=exc,
        extra={"extra_data": {"path": request.url.path, "method": request.method}},
    )
    return ErrorEnvelope(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        code="store_unavailable",
        message=str(exc) or "Data store unavailable",
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    detail = exc.detail
    message = detail if isinstance(detail, str) else "Error"
    details = detail if isinstance(detail, dict) else None
    return ErrorEnvelope(
        status_code=exc.status_code,
        code="http_error",
        message=message,
        details=details,
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return ErrorEnvelope(
        status_code=422,
        code="validation_error",
        message="Validation failed",
        details={"errors": jsonable_encoder(exc.errors())},
    )
