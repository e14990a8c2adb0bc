"""gdrivesa public API."""

from __future__ import annotations

from gdrivesa.auth import ServiceAccountInfo, TokenManager
from gdrivesa.client import DriveClient
from gdrivesa.config import ClientConfig
from gdrivesa.errors import (
    ApiError,
    AuthError,
    ErrorRecorder,
    GDriveSAError,
    HttpErrorInfo,
    InvalidArgumentError,
    LocalIOError,
    NetworkError,
    NotFoundError,
    TransientHTTPError,
    map_http_error,
)
from gdrivesa.models import (
    ChildrenResult,
    CreatedItem,
    ListOptions,
    RemoteItem,
    ResolvedPath,
)

__all__ = [
    # High-level
    "DriveClient",
    "ClientConfig",
    # Auth
    "ServiceAccountInfo",
    "TokenManager",
    # Models
    "RemoteItem",
    "ListOptions",
    "ResolvedPath",
    "ChildrenResult",
    "CreatedItem",
    # Errors
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
