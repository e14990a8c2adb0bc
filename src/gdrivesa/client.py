"""DriveClient: service-account access to Drive files, folders and paths."""

from __future__ import annotations

import logging
import os
from typing import Any, Mapping, Optional, Union

import requests

from gdrivesa.auth import ServiceAccountInfo, TokenManager
from gdrivesa.config import ClientConfig
from gdrivesa.controller import HttpEnvelope, ListingEngine, PathResolver
from gdrivesa.controller.fields import (
    CHILDREN_MAX_RESULTS,
    FILE_KIND,
    FILES_MAX_RESULTS,
    SEARCH_MAX_RESULTS,
)
from gdrivesa.controller.resolver import build_children_query
from gdrivesa.errors import (
    ApiError,
    ErrorRecorder,
    GDriveSAError,
    InvalidArgumentError,
    LocalIOError,
    NetworkError,
)
from gdrivesa.models import (
    ChildrenResult,
    CreatedItem,
    ListOptions,
    RemoteItem,
    ResolvedPath,
)
from gdrivesa.util.mime import FOLDER_MIME, detect_mime_type

logger = logging.getLogger(__name__)

DownloadSource = Union[str, RemoteItem, Mapping[str, Any]]

_DOWNLOAD_CHUNK_SIZE = 1024 * 1024


class DriveClient:
    """
    High-level Drive client authenticated as a service account.

    Error policy:
        - Expected remote failures return None (False for downloads to a
          file); the message is available from `last_error` and the mapped
          exception from `last_failure`.
        - Missing required arguments raise InvalidArgumentError.
        - Missing local files raise LocalIOError before any request is sent.
        - A rejected token exchange raises AuthError.

    Instances are meant for one logical session; token refresh and the last
    error are lock-protected but operations are not otherwise coordinated.
    """

    def __init__(
        self,
        secret_json: str,
        *,
        impersonate_as: Optional[str] = None,
        config: Optional[ClientConfig] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        """
        Load the service account key and prepare the token manager.

        Without an explicit config, ClientConfig.from_env() supplies the
        defaults and any GDRIVESA_* overrides.
        """
        if not secret_json:
            raise InvalidArgumentError("secret_json is required")

        credentials = ServiceAccountInfo.from_file(
            secret_json,
            impersonate_as=impersonate_as,
        )
        cfg = config or ClientConfig.from_env()
        http = session or requests.Session()
        token_manager = TokenManager(credentials, config=cfg, session=http)
        self._setup(token_manager, cfg, http)

    @classmethod
    def from_token_manager(
        cls,
        token_manager: TokenManager,
        *,
        config: Optional[ClientConfig] = None,
        session: Optional[requests.Session] = None,
    ) -> "DriveClient":
        """Create a client around an existing TokenManager (useful for tests)."""
        obj = cls.__new__(cls)
        obj._setup(
            token_manager,
            config or ClientConfig.from_env(),
            session or requests.Session(),
        )
        return obj

    def _setup(
        self,
        token_manager: TokenManager,
        config: ClientConfig,
        session: requests.Session,
    ) -> None:
        self._config = config
        self._token_manager = token_manager
        self._errors = ErrorRecorder()
        self._envelope = HttpEnvelope(
            token_manager,
            self._errors,
            config=config,
            session=session,
        )
        self._listing = ListingEngine(
            self._envelope,
            self._errors,
            show_trashed=config.show_trashed,
        )
        self._resolver = PathResolver(
            self._listing,
            self._errors,
            api_file_url=config.api_file_url,
        )

    def __enter__(self) -> "DriveClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        """Release pooled HTTP connections."""
        self._envelope.close()

    # ----------------------------
    # State
    # ----------------------------
    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def token_manager(self) -> TokenManager:
        return self._token_manager

    @property
    def last_error(self) -> Optional[str]:
        """Human-readable message of the most recent failure."""
        return self._errors.message

    @property
    def last_failure(self) -> Optional[GDriveSAError]:
        """Classified exception for the most recent failure (not raised)."""
        return self._errors.failure

    def clear_error(self) -> None:
        """Forget the last failure, e.g. before a batch of operations."""
        self._errors.clear()

    @property
    def show_trashed(self) -> bool:
        return self._listing.show_trashed

    def set_show_trashed(self, show: bool) -> None:
        """Enable/disable listing of trashed items."""
        self._listing.show_trashed = bool(show)

    # ----------------------------
    # Listing
    # ----------------------------
    def files(
        self,
        options: Optional[ListOptions] = None,
        *,
        paginate: bool = True,
    ) -> Optional[list[RemoteItem]]:
        """
        Return every regular file in the drive.

        Folders and native Google documents (no originalFilename) are skipped.
        """
        opts = options or ListOptions()
        params = opts.to_params(default_max_results=FILES_MAX_RESULTS)
        items = self._listing.list(self._config.api_file_url, params, paginate=paginate)
        if items is None:
            return None

        docs: list[RemoteItem] = []
        for item in items:
            if item.kind != FILE_KIND:
                logger.debug("Skipping %s (%s)", item.title, item.kind)
                continue
            if item.original_filename is None:
                logger.debug("Skipping %s (no originalFilename)", item.title)
                continue
            docs.append(item)
        return docs

    def resolve_path(self, path: str) -> Optional[ResolvedPath]:
        """Resolve a slash-delimited path ("/a/b") to its folder id."""
        return self._resolver.resolve(path)

    def children(
        self,
        path: str,
        options: Optional[ListOptions] = None,
        *,
        paginate: bool = True,
    ) -> Optional[ChildrenResult]:
        """List the items under `path`; also returns the resolved folder ids."""
        if not path:
            raise InvalidArgumentError("No path given")

        logger.debug("Determine children of %s", path)
        resolved = self._resolver.resolve(path)
        if resolved is None:
            logger.debug("Unable to resolve path %s", path)
            return None

        logger.debug("Getting content of folder %s, Path: %s", resolved.folder_id, path)
        items = self.children_by_folder_id(resolved.folder_id, options, paginate=paginate)
        if items is None:
            return None

        return ChildrenResult(
            items=items,
            folder_id=resolved.folder_id,
            parent_id=resolved.parent_id,
        )

    def children_by_folder_id(
        self,
        folder_id: str,
        options: Optional[ListOptions] = None,
        *,
        title: Optional[str] = None,
        paginate: bool = True,
    ) -> Optional[list[RemoteItem]]:
        """List items that have `folder_id` as a parent, optionally by title."""
        if not folder_id:
            raise InvalidArgumentError("folder_id is required")

        opts = options or ListOptions()
        params = opts.to_params(
            default_max_results=CHILDREN_MAX_RESULTS,
            query=build_children_query(folder_id, title),
        )
        return self._listing.list(self._config.api_file_url, params, paginate=paginate)

    def search(
        self,
        query: str,
        options: Optional[ListOptions] = None,
        *,
        paginate: bool = True,
    ) -> Optional[list[RemoteItem]]:
        """Run a Drive search query, e.g. "mimeType contains 'image/'"."""
        if not query:
            raise InvalidArgumentError("query is required")

        opts = options or ListOptions()
        params = opts.to_params(default_max_results=SEARCH_MAX_RESULTS, query=query)
        return self._listing.list(self._config.api_file_url, params, paginate=paginate)

    def remove_trashed(self, items: list[Any]) -> list[Any]:
        """Filter out items marked as trashed (RemoteItem or raw dicts)."""
        return self._listing.remove_trashed(items)

    # ----------------------------
    # Mutations
    # ----------------------------
    def create_folder(self, title: str, parent_id: str) -> Optional[CreatedItem]:
        if not title or not parent_id:
            raise InvalidArgumentError(
                "create_folder needs 2 arguments (title and parent_id)"
            )

        body = {
            "title": title,
            "parents": [{"id": parent_id}],
            "mimeType": FOLDER_MIME,
        }
        return self._insert(body)

    def new_file(
        self,
        local_path: str,
        parent_id: str,
        extra_fields: Optional[Mapping[str, Any]] = None,
    ) -> Optional[CreatedItem]:
        """
        Upload a local file into folder `parent_id`.

        Two requests: insert_metadata() then upload_content(). They are not
        atomic: if the content upload fails, the metadata record stays on
        Drive without content. None is returned, and the orphan's id is kept
        in `last_failure.details["file_id"]` so update_file() can finish it.
        """
        created = self.insert_metadata(local_path, parent_id, extra_fields)
        if created is None:
            return None

        mime_type = created.data.get("mimeType")
        uploaded = self.upload_content(
            created.item_id,
            local_path,
            mime_type=mime_type if isinstance(mime_type, str) else None,
        )
        if uploaded is None:
            self._record_orphan(created.item_id)
            return None
        return created

    def insert_metadata(
        self,
        local_path: str,
        parent_id: str,
        extra_fields: Optional[Mapping[str, Any]] = None,
    ) -> Optional[CreatedItem]:
        """Create the Drive record for a local file, without content."""
        if not parent_id:
            raise InvalidArgumentError("parent_id is required")
        _require_local_file(local_path)

        body: dict[str, Any] = {
            "mimeType": self.file_mime_type(local_path),
            "parents": [{"id": parent_id}],
            "title": os.path.basename(local_path),
        }
        if extra_fields:
            body.update(extra_fields)
        return self._insert(body)

    def upload_content(
        self,
        file_id: str,
        local_path: str,
        *,
        mime_type: Optional[str] = None,
    ) -> Optional[str]:
        """Replace the content of `file_id` with the bytes of `local_path`."""
        if not file_id:
            raise InvalidArgumentError("file_id is required")
        _require_local_file(local_path)

        # Uploads can be long; start with a fresh token.
        self._token_manager.expire()

        try:
            with open(local_path, "rb") as f:
                content = f.read()
        except OSError as exc:
            raise LocalIOError(
                f"Failed to read {local_path}",
                details={"local_path": local_path},
                cause=exc,
            ) from exc

        url = f"{self._config.api_upload_url}/{file_id}"
        response = self._envelope.execute(
            "PUT",
            url,
            params={"uploadType": "media"},
            data=content,
            content_type=mime_type or self.file_mime_type(local_path),
        )
        if response is None:
            return None
        return file_id

    def update_file(self, file_id: str, local_path: str) -> Optional[str]:
        """Replace an existing file's content; returns file_id on success."""
        return self.upload_content(file_id, local_path)

    def delete(self, item_id: str) -> Optional[str]:
        """Permanently delete a file or folder; returns item_id on success."""
        if not item_id:
            raise InvalidArgumentError("Deletion requires file_id")

        url = f"{self._config.api_file_url}/{item_id}"
        response = self._envelope.execute("DELETE", url)
        if response is None:
            return None
        return item_id

    # ----------------------------
    # Download
    # ----------------------------
    def download(
        self,
        source: DownloadSource,
        local_path: Optional[str] = None,
    ) -> Union[bytes, bool, None]:
        """
        Download a file by URL or by item (its downloadUrl).

        Returns:
            - local_path given: True on success, False on failure.
            - otherwise: the content bytes, or None on failure.
        """
        url = _download_url_of(source)
        if not url:
            message = "Can't download, download url not found"
            self._errors.record(message, InvalidArgumentError(message))
            logger.error(message)
            return False if local_path else None

        response = self._envelope.execute("GET", url, stream=local_path is not None)
        if response is None:
            reason = self.last_error or "unknown error"
            message = f"Can't download {url} ({reason})"
            self._errors.record(message, self.last_failure)
            logger.error(message)
            return False if local_path else None

        if not local_path:
            return response.content

        parent_dir = os.path.dirname(local_path)
        try:
            if parent_dir:
                os.makedirs(parent_dir, exist_ok=True)
            with open(local_path, "wb") as f:
                for chunk in response.iter_content(chunk_size=_DOWNLOAD_CHUNK_SIZE):
                    if chunk:
                        f.write(chunk)
        except requests.RequestException as exc:
            # requests errors are OSErrors too; this one is a remote failure.
            message = f"Can't download {url} (Network error: {exc})"
            self._errors.record(message, NetworkError(message, details={"url": url}, cause=exc))
            logger.error(message)
            _remove_partial(local_path)
            return False
        except OSError as exc:
            raise LocalIOError(
                f"Failed to write {local_path}",
                details={"local_path": local_path},
                cause=exc,
            ) from exc
        finally:
            response.close()
        return True

    def file_mime_type(self, local_path: str) -> str:
        """Return the detected MIME type of a local file."""
        try:
            return detect_mime_type(local_path)
        except OSError as exc:
            raise LocalIOError(
                f"Failed to read {local_path}",
                details={"local_path": local_path},
                cause=exc,
            ) from exc

    # ----------------------------
    # Internals
    # ----------------------------
    def _insert(self, body: dict[str, Any]) -> Optional[CreatedItem]:
        response = self._envelope.execute("POST", self._config.api_file_url, json_body=body)
        if response is None:
            return None

        try:
            data = response.json()
        except ValueError as exc:
            message = "Invalid JSON response from server"
            self._errors.record(message, ApiError(message, cause=exc))
            logger.error(message)
            return None

        item_id = data.get("id") if isinstance(data, dict) else None
        if not isinstance(item_id, str) or not item_id:
            message = "Drive did not return an id for the created item"
            self._errors.record(message, ApiError(message))
            logger.error(message)
            return None
        return CreatedItem(item_id=item_id, data=data)

    def _record_orphan(self, file_id: str) -> None:
        reason = self.last_error or "unknown error"
        message = f"Content upload failed for {file_id}: {reason}"
        previous = self.last_failure
        details: dict[str, Any] = dict(previous.details) if previous else {}
        details["file_id"] = file_id
        self._errors.record(message, ApiError(message, details=details, cause=previous))
        logger.error("%s (metadata record left without content)", message)


def _require_local_file(local_path: str) -> None:
    if not local_path:
        raise InvalidArgumentError("local_path is required")
    if not os.path.isfile(local_path):
        raise LocalIOError(
            f"{local_path} does not exist in your local machine",
            details={"local_path": local_path},
        )


def _download_url_of(source: DownloadSource) -> Optional[str]:
    if isinstance(source, RemoteItem):
        return source.download_url
    if isinstance(source, Mapping):
        url = source.get("downloadUrl")
        return url if isinstance(url, str) else None
    if isinstance(source, str):
        return source
    return None


def _remove_partial(local_path: str) -> None:
    try:
        os.remove(local_path)
    except FileNotFoundError:
        pass
    except OSError as exc:
        logger.error("Unable to remove partial download %s: %s", local_path, exc)
