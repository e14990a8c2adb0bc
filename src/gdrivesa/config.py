"""Client configuration for gdrivesa."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

DEFAULT_SCOPE: str = "https://www.googleapis.com/auth/drive"
DEFAULT_TOKEN_URI: str = "https://www.googleapis.com/oauth2/v4/token"
DEFAULT_API_FILE_URL: str = "https://www.googleapis.com/drive/v2/files"
DEFAULT_API_UPLOAD_URL: str = "https://www.googleapis.com/upload/drive/v2/files"

_ENV_PREFIX = "GDRIVESA_"
_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass(slots=True, frozen=True)
class ClientConfig:
    """
    Settings shared by every component of a DriveClient.

    http_retry_count:
        Number of extra attempts for a failed HTTP request (0 = no retry).
    http_retry_interval:
        Fixed delay in seconds between attempts. Unused when
        http_retry_count is 0.
    show_trashed:
        When True, listings keep items whose trashed label is set.
    token_safety_margin:
        A token with less remaining life (seconds) is refreshed before use.
    timeout:
        Per-request transport timeout in seconds (None waits forever).
    """

    http_retry_count: int = 0
    http_retry_interval: float = 5.0
    show_trashed: bool = False
    scope: str = DEFAULT_SCOPE
    token_uri: str = DEFAULT_TOKEN_URI
    api_file_url: str = DEFAULT_API_FILE_URL
    api_upload_url: str = DEFAULT_API_UPLOAD_URL
    token_safety_margin: float = 300.0
    timeout: Optional[float] = 60.0

    def __post_init__(self) -> None:
        if not isinstance(self.http_retry_count, int) or self.http_retry_count < 0:
            raise ValueError("http_retry_count must be a non-negative integer")
        if self.http_retry_interval < 0:
            raise ValueError("http_retry_interval must be >= 0")
        if self.token_safety_margin < 0:
            raise ValueError("token_safety_margin must be >= 0")
        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be positive or None")

        for key in ("scope", "token_uri", "api_file_url", "api_upload_url"):
            value = getattr(self, key)
            if not isinstance(value, str) or not value.strip():
                raise ValueError(f"ClientConfig.{key} must be a non-empty string")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ClientConfig":
        """
        Build a config from GDRIVESA_* environment variables.

        Recognized: GDRIVESA_HTTP_RETRY_COUNT, GDRIVESA_HTTP_RETRY_INTERVAL,
        GDRIVESA_SHOW_TRASHED, GDRIVESA_SCOPE, GDRIVESA_TIMEOUT.
        Unset variables keep their defaults.
        """
        env = os.environ if environ is None else environ
        kwargs: dict[str, object] = {}

        def _get(name: str) -> Optional[str]:
            value = env.get(_ENV_PREFIX + name, "").strip()
            return value or None

        numeric = (
            ("HTTP_RETRY_COUNT", "http_retry_count", int),
            ("HTTP_RETRY_INTERVAL", "http_retry_interval", float),
            ("TIMEOUT", "timeout", float),
        )
        for env_name, field_name, convert in numeric:
            raw = _get(env_name)
            if raw is None:
                continue
            try:
                kwargs[field_name] = convert(raw)
            except ValueError as exc:
                raise ValueError(f"{_ENV_PREFIX}{env_name} must be numeric") from exc

        show_trashed = _get("SHOW_TRASHED")
        if show_trashed is not None:
            kwargs["show_trashed"] = show_trashed.lower() in _TRUE_VALUES
        scope = _get("SCOPE")
        if scope is not None:
            kwargs["scope"] = scope

        return cls(**kwargs)  # type: ignore[arg-type]
