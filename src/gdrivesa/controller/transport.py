"""HTTP request envelope: bearer auth, fixed-delay retry, last-error tracking."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Mapping, Optional

import requests

from gdrivesa.auth import TokenManager
from gdrivesa.config import ClientConfig
from gdrivesa.errors import (
    AuthError,
    ErrorRecorder,
    HttpErrorInfo,
    NetworkError,
    TransientHTTPError,
    map_http_error,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _RetryPolicy:
    retry_count: int = 0
    interval_sec: float = 5.0


class HttpEnvelope:
    """
    Issue one logical request, retrying the whole exchange on failure.

    Every attempt asks the TokenManager for a bearer header, so a retry after
    a long sleep still goes out with a valid token. Token exchange failures
    (AuthError) are recorded, not retried, and propagate to the caller.
    """

    def __init__(
        self,
        token_manager: TokenManager,
        errors: ErrorRecorder,
        *,
        config: Optional[ClientConfig] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        cfg = config or ClientConfig()
        self._token_manager = token_manager
        self._errors = errors
        self._retry_policy = _RetryPolicy(
            retry_count=cfg.http_retry_count,
            interval_sec=cfg.http_retry_interval,
        )
        self._timeout = cfg.timeout
        self._session = session or requests.Session()
        self.last_response: Optional[requests.Response] = None

    @property
    def session(self) -> requests.Session:
        return self._session

    def close(self) -> None:
        self._session.close()

    def execute(
        self,
        method: str,
        url: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
        json_body: Optional[Any] = None,
        data: Optional[bytes] = None,
        content_type: Optional[str] = None,
        stream: bool = False,
    ) -> Optional[requests.Response]:
        """
        Send the request and return the successful response.

        Returns:
            The response on a 2xx status; None once all attempts failed. The
            failure is then available from the ErrorRecorder as a
            TransientHTTPError and the last failing response (if any) from
            `last_response`.

        Raises:
            AuthError: if no access token could be obtained.
        """
        attempts = self._retry_policy.retry_count + 1
        for attempt in range(attempts):
            logger.debug("Fetching %s %s", method, url)
            try:
                headers = self._token_manager.authorization_header()
            except AuthError as exc:
                self._errors.record(str(exc), exc)
                logger.error("Failed to obtain access token: %s", exc)
                raise
            if json_body is not None:
                headers["Content-Type"] = "application/json"
            elif content_type:
                headers["Content-Type"] = content_type

            try:
                response = self._session.request(
                    method,
                    url,
                    params=params,
                    json=json_body,
                    data=data,
                    headers=headers,
                    stream=stream,
                    timeout=self._timeout,
                )
            except requests.RequestException as exc:
                self.last_response = None
                message = f"Network error: {exc}"
                self._errors.record(message, NetworkError(message, cause=exc))
                logger.error("Failed with network error: %s", exc)
            else:
                self.last_response = response
                if response.ok:
                    if not stream:
                        logger.debug("Successfully fetched %d bytes.", len(response.content))
                    return response

                message, failure = _describe_failure(response)
                self._errors.record(message, failure)
                logger.error("Failed with %s: %s", response.status_code, message)
                if stream:
                    response.close()

            if attempt + 1 < attempts:
                logger.error(
                    "Retry (%d) in %s seconds",
                    attempt + 1,
                    self._retry_policy.interval_sec,
                )
                time.sleep(self._retry_policy.interval_sec)

        return None


def _describe_failure(response: requests.Response) -> tuple[str, TransientHTTPError]:
    info = _response_to_info(response)
    message = response.reason or f"HTTP {response.status_code}"
    return message, map_http_error(info)


def _response_to_info(response: requests.Response) -> HttpErrorInfo:
    reason = response.reason
    message = None
    details: dict[str, Any] = {"url": response.url}

    try:
        payload = response.json()
    except ValueError:
        payload = None

    if isinstance(payload, dict) and isinstance(payload.get("error"), dict):
        err = payload["error"]
        message = err.get("message") or None
        errors = err.get("errors") or []
        if errors and isinstance(errors, list) and isinstance(errors[0], dict):
            details["domain"] = errors[0].get("domain")
            details["reason_detail"] = errors[0].get("reason")
            if isinstance(errors[0].get("reason"), str):
                reason = errors[0]["reason"]

    return HttpErrorInfo(
        status_code=response.status_code,
        reason=reason if isinstance(reason, str) else None,
        message=message,
        details=details,
    )
