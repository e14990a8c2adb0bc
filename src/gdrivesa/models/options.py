"""Recognized listing options."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(slots=True, frozen=True)
class ListOptions:
    """
    Options accepted by listing calls (files, children, search).

    max_results:
        Page size (maxResults). None keeps the operation's default.
    page_token:
        Start from this continuation token instead of the first page.
    order_by:
        Sort keys understood by the service (orderBy), e.g. "title".
    fields:
        Partial response selector (fields).
    additional_filter:
        Extra query clause AND-ed to the operation's own query.
    """

    max_results: Optional[int] = None
    page_token: Optional[str] = None
    order_by: Optional[str] = None
    fields: Optional[str] = None
    additional_filter: Optional[str] = None

    def __post_init__(self) -> None:
        if self.max_results is not None and self.max_results <= 0:
            raise ValueError("max_results must be positive")

    def to_params(self, *, default_max_results: int, query: Optional[str] = None) -> dict[str, Any]:
        """Build query-string params, combining `query` with additional_filter."""
        params: dict[str, Any] = {
            "maxResults": self.max_results if self.max_results is not None else default_max_results,
        }
        if self.page_token:
            params["pageToken"] = self.page_token
        if self.order_by:
            params["orderBy"] = self.order_by
        if self.fields:
            params["fields"] = self.fields

        q = query
        if self.additional_filter:
            q = f"({q}) and ({self.additional_filter})" if q else self.additional_filter
        if q:
            params["q"] = q
        return params
