"""Public error exports for gdrivesa."""

from __future__ import annotations

from .exceptions import (
    ApiError,
    AuthError,
    GDriveSAError,
    HttpErrorInfo,
    InvalidArgumentError,
    LocalIOError,
    NetworkError,
    NotFoundError,
    TransientHTTPError,
    map_http_error,
)
from .recorder import ErrorRecorder

__all__ = [
    "GDriveSAError",
    "LocalIOError",
    "AuthError",
    "InvalidArgumentError",
    "NotFoundError",
    "TransientHTTPError",
    "NetworkError",
    "ApiError",
    "HttpErrorInfo",
    "map_http_error",
    "ErrorRecorder",
]
