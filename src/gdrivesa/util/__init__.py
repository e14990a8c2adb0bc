from .mime import DEFAULT_MIME, FOLDER_MIME, detect_mime_type, is_folder
from .time import parse_rfc3339

__all__ = [
    "FOLDER_MIME",
    "DEFAULT_MIME",
    "is_folder",
    "detect_mime_type",
    "parse_rfc3339",
]
