from __future__ import annotations

import logging
import mimetypes
import os

import magic

logger = logging.getLogger(__name__)

FOLDER_MIME: str = "application/vnd.google-apps.folder"
DEFAULT_MIME: str = "application/octet-stream"

# libmagic answers for content it cannot classify; the extension is tried next.
_UNDECIDED_MIMES: frozenset[str] = frozenset(
    {DEFAULT_MIME, "inode/x-empty", "application/x-empty"}
)


def is_folder(mime_type: str) -> bool:
    return mime_type == FOLDER_MIME


def detect_mime_type(local_path: str) -> str:
    """
    Return the MIME type of a local file.

    libmagic inspects the content first, then the extension is consulted.
    Falls back to application/octet-stream.

    Raises:
        OSError: if the file cannot be opened.
    """
    with open(local_path, "rb"):
        pass

    mime_type = None
    try:
        mime_type = magic.from_file(local_path, mime=True)
    except magic.MagicException as exc:
        logger.debug("libmagic could not classify %s: %s", local_path, exc)

    if mime_type and mime_type not in _UNDECIDED_MIMES:
        return mime_type

    guessed, _ = mimetypes.guess_type(os.path.basename(local_path))
    return guessed or DEFAULT_MIME
