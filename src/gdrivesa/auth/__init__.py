"""Public auth exports for gdrivesa."""

from __future__ import annotations

from .service_account import ServiceAccountInfo
from .token_manager import TokenManager

__all__ = ["ServiceAccountInfo", "TokenManager"]
