"""Access token lifecycle for the service account (JWT-bearer) flow."""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional

import requests
from google.auth import crypt, jwt

from gdrivesa.config import ClientConfig
from gdrivesa.errors import AuthError

from .service_account import ServiceAccountInfo

logger = logging.getLogger(__name__)

JWT_BEARER_GRANT_TYPE: str = "urn:ietf:params:oauth:grant-type:jwt-bearer"
ASSERTION_LIFETIME_SEC: int = 3600


@dataclass(frozen=True)
class _AccessToken:
    token: str
    expires_at: float


class TokenManager:
    """
    Hand out a bearer token that is valid for at least `safety_margin` seconds.

    The token is refreshed lazily: on first use, when its remaining life drops
    below the margin, or after expire() was called. Refresh and read happen
    under one lock so concurrent callers never see a half-updated token.
    """

    def __init__(
        self,
        credentials: ServiceAccountInfo,
        *,
        config: Optional[ClientConfig] = None,
        session: Optional[requests.Session] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        cfg = config or ClientConfig()
        self._credentials = credentials
        self._scope = cfg.scope
        self._token_uri = cfg.token_uri
        self._safety_margin = cfg.token_safety_margin
        self._timeout = cfg.timeout
        self._session = session or requests.Session()
        self._clock = clock
        self._lock = threading.RLock()
        self._current: Optional[_AccessToken] = None

    @property
    def credentials(self) -> ServiceAccountInfo:
        return self._credentials

    def get_token(self) -> str:
        """
        Return a usable access token, refreshing it first when needed.

        Raises:
            AuthError: if the token endpoint rejects the assertion.
        """
        with self._lock:
            current = self._current
            if current is None or current.expires_at - self._clock() < self._safety_margin:
                current = self.refresh()
            return current.token

    def authorization_header(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.get_token()}"}

    def expire(self) -> None:
        """Mark the current token as expired so the next get_token() refreshes."""
        with self._lock:
            if self._current is not None:
                self._current = _AccessToken(
                    token=self._current.token,
                    expires_at=self._clock() - 1,
                )

    def refresh(self) -> _AccessToken:
        """Exchange a freshly signed assertion for a new access token."""
        with self._lock:
            now = self._clock()
            assertion = self._build_assertion(now)

            logger.debug("Requesting access token for %s", self._credentials.client_email)
            try:
                response = self._session.post(
                    self._token_uri,
                    data={"grant_type": JWT_BEARER_GRANT_TYPE, "assertion": assertion},
                    timeout=self._timeout,
                )
            except requests.RequestException as exc:
                raise AuthError(
                    "Token request failed",
                    details={"token_uri": self._token_uri},
                    cause=exc,
                ) from exc

            if not response.ok:
                raise AuthError(
                    f"Google drive authentication failed: {response.status_code} {response.text}",
                    details={
                        "status_code": response.status_code,
                        "token_uri": self._token_uri,
                    },
                )

            self._current = _parse_token_response(response, now)
            return self._current

    def _build_assertion(self, now: float) -> str:
        creds = self._credentials
        issued_at = int(now)
        payload: dict[str, Any] = {
            "iss": creds.client_email,
            "scope": self._scope,
            "aud": self._token_uri,
            "iat": issued_at,
            "exp": issued_at + ASSERTION_LIFETIME_SEC,
        }
        if creds.impersonate_as:
            payload["sub"] = creds.impersonate_as

        try:
            signer = crypt.RSASigner.from_string(creds.private_key, creds.private_key_id)
            encoded = jwt.encode(signer, payload)
        except (ValueError, TypeError) as exc:
            raise AuthError("Failed to sign token assertion", cause=exc) from exc

        if isinstance(encoded, bytes):
            return encoded.decode("utf-8")
        return encoded


def _parse_token_response(response: requests.Response, now: float) -> _AccessToken:
    try:
        payload = response.json()
    except ValueError as exc:
        raise AuthError("Token endpoint returned invalid JSON", cause=exc) from exc

    token = payload.get("access_token") if isinstance(payload, dict) else None
    if not isinstance(token, str) or not token:
        raise AuthError("Token endpoint response has no access_token")

    expires_in = payload.get("expires_in", ASSERTION_LIFETIME_SEC)
    try:
        lifetime = float(expires_in)
    except (TypeError, ValueError) as exc:
        raise AuthError("Token endpoint returned invalid expires_in", cause=exc) from exc

    return _AccessToken(token=token, expires_at=now + lifetime)
