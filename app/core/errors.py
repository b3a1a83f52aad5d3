# /app/core/errors.py

"""
The error taxonomy shared by every service in the core.

Business-rule failures never cross the service boundary as exceptions. Each
service method returns a `ServiceResult`, and the HTTP layer turns a failed
result into an `HTTPException` with `to_http_exception`. The only exception
the core raises on purpose is `StorageUnavailable`, for database failures that
make the current call unrecoverable.
"""

import enum
from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

from fastapi import HTTPException, status

T = TypeVar("T")


class ErrorCode(str, enum.Enum):
    NOT_FOUND = "not_found"
    UNAUTHORIZED = "unauthorized"
    INVALID_INPUT = "invalid_input"
    DUPLICATE_SUBMISSION = "duplicate_submission"
    ALREADY_REGISTERED = "already_registered"
    EXPIRED = "expired"
    INVALID_CODE = "invalid_code"
    INVALID_CREDENTIALS = "invalid_credentials"
    INVALID_TOKEN = "invalid_token"
    DELIVERY_FAILED = "delivery_failed"
    STORAGE_UNAVAILABLE = "storage_unavailable"


class StorageUnavailable(Exception):
    """Raised when the persistence layer fails. Nothing from the call was committed."""


@dataclass(frozen=True)
class ServiceResult(Generic[T]):
    """
    Outcome of a core operation.

    `ok` results may still carry a soft `error` notice (for example
    ALREADY_REGISTERED), so callers should branch on `ok` first.
    """
    ok: bool
    value: Optional[T] = None
    error: Optional[ErrorCode] = None
    message: str = ""

    @classmethod
    def success(cls, value: Optional[T] = None, message: str = "", notice: Optional[ErrorCode] = None) -> "ServiceResult[T]":
        return cls(ok=True, value=value, error=notice, message=message)

    @classmethod
    def failure(cls, error: ErrorCode, message: str) -> "ServiceResult[T]":
        return cls(ok=False, error=error, message=message)


_HTTP_STATUS_BY_ERROR = {
    ErrorCode.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.UNAUTHORIZED: status.HTTP_403_FORBIDDEN,
    ErrorCode.INVALID_INPUT: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ErrorCode.DUPLICATE_SUBMISSION: status.HTTP_409_CONFLICT,
    ErrorCode.EXPIRED: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_CODE: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_CREDENTIALS: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.INVALID_TOKEN: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.DELIVERY_FAILED: status.HTTP_502_BAD_GATEWAY,
    ErrorCode.STORAGE_UNAVAILABLE: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def to_http_exception(result: ServiceResult) -> HTTPException:
    """Translates a failed ServiceResult into the matching HTTPException."""
    status_code = _HTTP_STATUS_BY_ERROR.get(result.error, status.HTTP_400_BAD_REQUEST)
    headers = None
    if status_code == status.HTTP_401_UNAUTHORIZED:
        headers = {"WWW-Authenticate": "Bearer"}
    return HTTPException(
        status_code=status_code,
        detail={"code": result.error.value if result.error else None, "message": result.message},
        headers=headers,
    )
