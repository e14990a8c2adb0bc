"""Exception hierarchy and HTTP error mapping for gdrivesa."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


class GDriveSAError(Exception):
    """
    Base exception for gdrivesa.

    Attributes:
        details: Optional structured information (e.g., HTTP status, reason).
        cause: Optional original exception that triggered this error.
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.details = details or {}
        self.cause = cause


class LocalIOError(GDriveSAError):
    """Raised when a local file is missing, unreadable or unwritable."""


class AuthError(GDriveSAError):
    """
    The service account token exchange failed.

    Only the token endpoint produces this error. A 401 from the Drive API is
    a TransientHTTPError like any other data-plane status.
    """


class InvalidArgumentError(GDriveSAError):
    """Raised when a required argument is missing or invalid."""


class NotFoundError(GDriveSAError):
    """A path segment or requested item has no match."""


class TransientHTTPError(GDriveSAError):
    """
    A Drive API request still failed after all retry attempts.

    details carries status_code, reason and, when the body had one, the
    Google error reason (reason_detail) and domain.
    """


class NetworkError(TransientHTTPError):
    """No HTTP response was received (connection failure, timeout)."""


class ApiError(GDriveSAError):
    """The service answered 2xx with a body that could not be used."""


@dataclass(frozen=True)
class HttpErrorInfo:
    """Lightweight HTTP error information for mapping to gdrivesa exceptions."""

    status_code: int
    reason: str | None = None
    message: str | None = None
    details: dict[str, Any] | None = None


def map_http_error(
    info: HttpErrorInfo,
    *,
    cause: Optional[BaseException] = None,
) -> TransientHTTPError:
    """
    Map an exhausted data-plane HTTP failure to a TransientHTTPError.

    Every status maps to the same class since every non-2xx status is retried
    alike; callers that care inspect details["status_code"].
    """
    details: dict[str, Any] = {
        "status_code": info.status_code,
        "reason": info.reason,
    }
    if info.details:
        details.update(info.details)

    message = info.message or f"HTTP error {info.status_code}"
    return TransientHTTPError(message, details=details, cause=cause)
