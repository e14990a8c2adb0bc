"""Paginated listing with trashed-item filtering."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, TypeVar

from gdrivesa.errors import ApiError, ErrorRecorder, InvalidArgumentError
from gdrivesa.models import RemoteItem, is_trashed

from .fields import ITEMS_KEY, NEXT_PAGE_TOKEN_KEY, PAGE_TOKEN_PARAM
from .transport import HttpEnvelope

logger = logging.getLogger(__name__)

ItemT = TypeVar("ItemT", RemoteItem, dict)


class ListingEngine:
    """
    Fetch a collection endpoint page by page and merge the results.

    Notes:
        - A failed page aborts the whole listing (no partial results).
        - The caller's params mapping is copied, never mutated.
    """

    def __init__(
        self,
        envelope: HttpEnvelope,
        errors: ErrorRecorder,
        *,
        show_trashed: bool = False,
    ) -> None:
        self._envelope = envelope
        self._errors = errors
        self.show_trashed = show_trashed

    def list(
        self,
        url: str,
        params: Optional[Mapping[str, Any]] = None,
        *,
        paginate: bool = True,
    ) -> Optional[list[RemoteItem]]:
        query = dict(params or {})
        items: list[RemoteItem] = []

        while True:
            page = self._fetch_page(url, query)
            if page is None:
                return None
            page_items, next_token = page

            if not self.show_trashed:
                page_items = self.remove_trashed(page_items)
            items.extend(page_items)

            if not paginate or not next_token:
                break
            query[PAGE_TOKEN_PARAM] = next_token

        return items

    def remove_trashed(self, items: list[ItemT]) -> list[ItemT]:
        """Return a new list without trashed items."""
        if not isinstance(items, list):
            raise InvalidArgumentError(
                "remove_trashed expects a list",
                details={"type": type(items).__name__},
            )

        kept: list[ItemT] = []
        for item in items:
            if is_trashed(item):
                logger.debug("Skipping trashed item '%s'", _title_of(item))
                continue
            kept.append(item)
        return kept

    def _fetch_page(
        self,
        url: str,
        query: dict[str, Any],
    ) -> Optional[tuple[list[RemoteItem], Optional[str]]]:
        response = self._envelope.execute("GET", url, params=dict(query))
        if response is None:
            return None

        try:
            data = response.json()
        except ValueError as exc:
            message = "Invalid JSON response from server"
            self._errors.record(message, ApiError(message, details={"url": url}, cause=exc))
            logger.error("%s (%s)", message, url)
            return None

        if not isinstance(data, dict):
            message = "Unexpected listing response"
            self._errors.record(message, ApiError(message, details={"url": url}))
            logger.error("%s (%s)", message, url)
            return None

        raw_items = data.get(ITEMS_KEY) or []
        items = [RemoteItem.from_dict(d) for d in raw_items if isinstance(d, dict)]
        next_token = data.get(NEXT_PAGE_TOKEN_KEY)
        return items, next_token if isinstance(next_token, str) and next_token else None


def _title_of(item: RemoteItem | dict[str, Any]) -> str:
    if isinstance(item, RemoteItem):
        return item.title
    return str(item.get("title", ""))
