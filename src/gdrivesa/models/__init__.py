"""Public model exports for gdrivesa."""

from __future__ import annotations

from .options import ListOptions
from .remote_item import RemoteItem, is_trashed
from .results import ChildrenResult, CreatedItem, ResolvedPath

__all__ = [
    "RemoteItem",
    "is_trashed",
    "ListOptions",
    "ResolvedPath",
    "ChildrenResult",
    "CreatedItem",
]
