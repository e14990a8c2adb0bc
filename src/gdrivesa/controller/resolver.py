"""Resolve slash-delimited paths to Drive folder ids."""

from __future__ import annotations

import logging
from typing import Optional

from gdrivesa.errors import ErrorRecorder, InvalidArgumentError, NotFoundError
from gdrivesa.models import ListOptions, RemoteItem, ResolvedPath

from .fields import LOOKUP_MAX_RESULTS, ROOT_FOLDER_ID
from .listing import ListingEngine

logger = logging.getLogger(__name__)


def escape_query_value(value: str) -> str:
    """Escape a literal for use inside a single-quoted query string."""
    return value.replace("\\", "\\\\").replace("'", "\\'")


def build_children_query(folder_id: str, title: Optional[str] = None) -> str:
    q = f"'{escape_query_value(folder_id)}' in parents"
    if title is not None:
        q += f" and title = '{escape_query_value(title)}'"
    return q


def split_path(path: str) -> list[str]:
    """
    Split a path into lookup segments.

    The first component always stands for the root folder and is dropped;
    empty components ("/a//b/") are ignored.
    """
    return [part for part in path.split("/")[1:] if part]


class PathResolver:
    """
    Walk a path one segment at a time, querying the children of the current
    folder for an exact title match.

    Caveat:
        Drive does not enforce unique titles. When several children share the
        segment's title, the first one in the order returned by the service
        wins.
    """

    def __init__(
        self,
        listing: ListingEngine,
        errors: ErrorRecorder,
        *,
        api_file_url: str,
    ) -> None:
        self._listing = listing
        self._errors = errors
        self._api_file_url = api_file_url

    def resolve(self, path: str) -> Optional[ResolvedPath]:
        if not path:
            raise InvalidArgumentError("No path given")

        folder_id = ROOT_FOLDER_ID
        parent_id: Optional[str] = None
        logger.debug("Parent: %s", folder_id)

        for segment in split_path(path):
            logger.debug("Looking up part %s (folder_id=%s)", segment, folder_id)
            children = self.lookup(folder_id, segment)
            if children is None:
                logger.debug("Part %s not found in path %s", segment, path)
                return None

            match = _first_exact_match(children, segment)
            if match is None:
                message = f"Child {segment} not found"
                self._errors.record(
                    message,
                    NotFoundError(
                        message,
                        details={"path": path, "segment": segment, "folder_id": folder_id},
                    ),
                )
                logger.error(message)
                return None

            parent_id, folder_id = folder_id, match.item_id
            logger.debug("Parent: %s", folder_id)

        return ResolvedPath(folder_id=folder_id, parent_id=parent_id)

    def lookup(self, folder_id: str, title: str) -> Optional[list[RemoteItem]]:
        """List children of folder_id whose title equals `title` (server-side)."""
        params = ListOptions().to_params(
            default_max_results=LOOKUP_MAX_RESULTS,
            query=build_children_query(folder_id, title),
        )
        return self._listing.list(self._api_file_url, params, paginate=True)


def _first_exact_match(children: list[RemoteItem], title: str) -> Optional[RemoteItem]:
    for child in children:
        logger.debug("Found child %s", child.title)
        if child.title == title:
            return child
    return None
