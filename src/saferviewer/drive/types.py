"""Type definitions for Drive objects and transfer requests."""

import mimetypes
import pathlib
from dataclasses import dataclass
from typing import Callable, Optional

from ..errors import TransferError

DEFAULT_MIME_TYPE = "application/octet-stream"
FOLDER_MIME_TYPE = "application/vnd.google-apps.folder"

# built-in extension table only, so lookups don't depend on the host's mime.types
_MIME_TYPES = mimetypes.MimeTypes()

ProgressCallback = Callable[[int, int], None]


def guess_mime_type(path: pathlib.Path) -> str:
    if not path.suffix:
        return DEFAULT_MIME_TYPE
    mime_type, _ = _MIME_TYPES.guess_type(path.name, strict=True)
    return mime_type or DEFAULT_MIME_TYPE


@dataclass(frozen=True)
class TransferTask:
    """One file to upload, resolved from the command line."""

    local_path: pathlib.Path
    display_title: str
    mime_type: str
    destination_folder_name: str

    @classmethod
    def from_path(
        cls, path: str, title_override: Optional[str] = None, folder_name: str = ""
    ) -> "TransferTask":
        local_path = pathlib.Path(path)
        if not local_path.is_file():
            raise TransferError(f"Input is not a readable file: {path}")
        return cls(
            local_path=local_path,
            display_title=title_override or local_path.name,
            mime_type=guess_mime_type(local_path),
            destination_folder_name=folder_name,
        )


@dataclass(frozen=True)
class DriveFile:
    """An uploaded file."""

    id: str
    name: str
    web_link: str
