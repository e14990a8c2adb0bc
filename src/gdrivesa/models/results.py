"""Result models for resolver and mutation operations."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from .remote_item import RemoteItem


@dataclass(slots=True, frozen=True)
class ResolvedPath:
    """
    Outcome of walking a slash-delimited path.

    folder_id is the id of the last segment; parent_id is the folder that
    contains it (None when the path is the root itself).

    parent_id never repeats folder_id: resolving "/" yields
    ResolvedPath("root", None), not ("root", "root"). Callers that expect
    the resolved id twice must read folder_id.
    """

    folder_id: str
    parent_id: Optional[str] = None


@dataclass(slots=True)
class ChildrenResult:
    """Items listed under a resolved path."""

    items: list[RemoteItem]
    folder_id: str
    parent_id: Optional[str] = None


@dataclass(slots=True)
class CreatedItem:
    """A newly created remote entity plus the raw insert response."""

    item_id: str
    data: dict[str, Any] = field(default_factory=dict)
