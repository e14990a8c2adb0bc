"""Internal controller exports for gdrivesa."""

from __future__ import annotations

from .listing import ListingEngine
from .resolver import PathResolver
from .transport import HttpEnvelope

__all__ = ["HttpEnvelope", "ListingEngine", "PathResolver"]
