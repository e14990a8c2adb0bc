"""Service account credentials for gdrivesa."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from typing import Any, Optional

from gdrivesa.errors import AuthError, LocalIOError


@dataclass(slots=True, frozen=True)
class ServiceAccountInfo:
    """
    Signing material and identity claims of a service account.

    Built from the JSON key file downloaded from the cloud console, which
    must provide:
        - client_email
        - private_key (PEM)
    """

    client_email: str
    private_key: str
    private_key_id: Optional[str] = None
    impersonate_as: Optional[str] = None

    def __post_init__(self) -> None:
        for key in ("client_email", "private_key"):
            value = getattr(self, key)
            if not isinstance(value, str) or not value.strip():
                raise ValueError(f"ServiceAccountInfo.{key} must be a non-empty string")

        if self.impersonate_as is not None and not self.impersonate_as.strip():
            raise ValueError("ServiceAccountInfo.impersonate_as must not be blank")

    @classmethod
    def from_dict(
        cls,
        data: dict[str, Any],
        *,
        impersonate_as: Optional[str] = None,
    ) -> "ServiceAccountInfo":
        if not isinstance(data, dict):
            raise AuthError("Service account data must be a JSON object")
        key_id = data.get("private_key_id")
        try:
            return cls(
                client_email=data.get("client_email"),  # type: ignore[arg-type]
                private_key=data.get("private_key"),  # type: ignore[arg-type]
                private_key_id=key_id if isinstance(key_id, str) else None,
                impersonate_as=impersonate_as,
            )
        except ValueError as exc:
            raise AuthError("Invalid service account data", cause=exc) from exc

    @classmethod
    def from_file(
        cls,
        secret_json: str,
        *,
        impersonate_as: Optional[str] = None,
    ) -> "ServiceAccountInfo":
        """
        Load credentials from a service account JSON key file.

        Raises:
            LocalIOError: if the file does not exist or cannot be read.
            AuthError: if the content is not a valid service account key.
        """
        if not secret_json or not os.path.isfile(secret_json):
            raise LocalIOError(
                f"Config JSON file {secret_json} does not exist",
                details={"secret_json": secret_json},
            )

        try:
            with open(secret_json, "r", encoding="utf-8") as f:
                data = json.load(f)
        except OSError as exc:
            raise LocalIOError(
                "Failed to read service account file",
                details={"secret_json": secret_json},
                cause=exc,
            ) from exc
        except ValueError as exc:
            raise AuthError(
                "Service account file is not valid JSON",
                details={"secret_json": secret_json},
                cause=exc,
            ) from exc

        return cls.from_dict(data, impersonate_as=impersonate_as)
