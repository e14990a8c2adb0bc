"""Data model for Drive items returned by the files API."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from gdrivesa.util.mime import is_folder
from gdrivesa.util.time import parse_rfc3339


@dataclass(slots=True)
class RemoteItem:
    """
    A Drive file or folder as seen in one listing response.

    Notes:
        - Items are rebuilt from every response; nothing is cached.
        - `raw` keeps the full resource dict for fields not modelled here.
    """

    item_id: str
    title: str
    mime_type: str = ""
    kind: str = ""
    trashed: bool = False
    download_url: Optional[str] = None
    parents: list[str] = field(default_factory=list)
    original_filename: Optional[str] = None
    file_size: Optional[int] = None
    modified_time: Optional[datetime] = None
    raw: dict[str, Any] = field(default_factory=dict, repr=False)

    @property
    def is_folder(self) -> bool:
        return is_folder(self.mime_type)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RemoteItem":
        item_id = data.get("id")
        title = data.get("title")
        download_url = data.get("downloadUrl")
        original_filename = data.get("originalFilename")

        parents: list[str] = []
        for parent in data.get("parents") or []:
            if isinstance(parent, dict) and isinstance(parent.get("id"), str):
                parents.append(parent["id"])
            elif isinstance(parent, str):
                parents.append(parent)

        file_size = None
        size = data.get("fileSize")
        if isinstance(size, str) and size.isdigit():
            file_size = int(size)
        elif isinstance(size, int):
            file_size = size

        modified_time = None
        if isinstance(data.get("modifiedDate"), str):
            try:
                modified_time = parse_rfc3339(data["modifiedDate"])
            except ValueError:
                modified_time = None

        return cls(
            item_id=item_id if isinstance(item_id, str) else "",
            title=title if isinstance(title, str) else "",
            mime_type=data.get("mimeType") or "",
            kind=data.get("kind") or "",
            trashed=is_trashed(data),
            download_url=download_url if isinstance(download_url, str) else None,
            parents=parents,
            original_filename=(
                original_filename if isinstance(original_filename, str) else None
            ),
            file_size=file_size,
            modified_time=modified_time,
            raw=dict(data),
        )


def is_trashed(item: RemoteItem | dict[str, Any]) -> bool:
    """Return True if a RemoteItem or raw resource dict is marked as trashed."""
    if isinstance(item, RemoteItem):
        return item.trashed
    labels = item.get("labels")
    if isinstance(labels, dict) and labels.get("trashed"):
        return True
    return bool(item.get("trashed", False))
