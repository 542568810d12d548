"""Google Drive storage client."""

from .client import GoogleDriveClient
from .folder import DriveFolder
from .types import DriveFile, TransferTask

__all__ = ["DriveFile", "DriveFolder", "GoogleDriveClient", "TransferTask"]
