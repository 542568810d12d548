from typing import TYPE_CHECKING, Optional

from .types import DriveFile, ProgressCallback, TransferTask

if TYPE_CHECKING:
    from .client import GoogleDriveClient


class DriveFolder:
    """Represents a folder in Google Drive."""

    def __init__(
        self,
        client: "GoogleDriveClient",  # using string to avoid circular import
        folder_id: str,
        name: str,
        web_link: Optional[str] = None,
    ):
        """Initialize a Google Drive folder.

        Args:
            client: The GoogleDriveClient instance
            folder_id: The folder's Google Drive ID
            name: The folder's name
            web_link: Optional web link to the folder
        """
        self.client = client
        self.id = folder_id
        self.name = name
        self.web_link = web_link or f"https://drive.google.com/drive/folders/{folder_id}"

    def upload_file(
        self, task: TransferTask, progress: Optional[ProgressCallback] = None
    ) -> DriveFile:
        """Upload a file into this folder.

        Returns:
            The uploaded DriveFile
        """
        return self.client.upload_resumable(task, parent_id=self.id, progress=progress)
