"""Thread-safe holder for the most recent failure of a client."""

from __future__ import annotations

import threading
from typing import Optional

from .exceptions import GDriveSAError


class ErrorRecorder:
    """
    Keeps the last human-readable error message and its mapped exception.

    Every component of one client shares a single recorder, so callers only
    need to check `message` after an operation returned None.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._message: Optional[str] = None
        self._failure: Optional[GDriveSAError] = None

    @property
    def message(self) -> Optional[str]:
        with self._lock:
            return self._message

    @property
    def failure(self) -> Optional[GDriveSAError]:
        with self._lock:
            return self._failure

    def record(self, message: str, failure: Optional[GDriveSAError] = None) -> None:
        with self._lock:
            self._message = message
            self._failure = failure

    def clear(self) -> None:
        with self._lock:
            self._message = None
            self._failure = None
