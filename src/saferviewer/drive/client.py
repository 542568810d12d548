from typing import Any, Optional

from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError
from googleapiclient.http import MediaFileUpload
from loguru import logger

from .folder import DriveFolder
from .types import FOLDER_MIME_TYPE, DriveFile, ProgressCallback, TransferTask

DEFAULT_CHUNK_SIZE = 10 * 1024 * 1024


def _quote(value: str) -> str:
    """Escape a literal for use inside a Drive query string."""
    return value.replace("\\", "\\\\").replace("'", "\\'")


class GoogleDriveClient:
    """Client for the Google Drive v3 API.

    Covers what an upload needs: finding or creating the destination folder
    and sending the file with a resumable upload.
    """

    def __init__(
        self,
        credentials: Credentials,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        anyone_with_link: bool = False,
    ):
        """Initialize the Google Drive client.

        Args:
            credentials: Authorized user credentials.
            chunk_size: Bytes per resumable upload request (multiple of 256 KiB).
            anyone_with_link: If True, uploaded files are readable by anyone with the link.
        """
        self.credentials = credentials
        self.chunk_size = chunk_size
        self.anyone_with_link = anyone_with_link
        self._service = None

    @property
    def service(self) -> Any:
        """Get or create the Drive API service."""
        if self._service is None:
            self._service = build(
                "drive", "v3", credentials=self.credentials, cache_discovery=False
            )
        return self._service

    def find_folder(self, name: str) -> Optional[DriveFolder]:
        """Find a folder by exact name anywhere in the user's Drive.

        Returns:
            DriveFolder if found, None otherwise

        Raises:
            HttpError: If the API request fails
        """
        query = " and ".join(
            [
                f"name = '{_quote(name)}'",
                f"mimeType = '{FOLDER_MIME_TYPE}'",
                "trashed = false",
            ]
        )
        try:
            results = (
                self.service.files()
                .list(q=query, spaces="drive", fields="files(id, name, webViewLink)", pageSize=1)
                .execute()
            )
        except HttpError as e:
            logger.error(f"Unable to retrieve folder {name!r}: {e}")
            raise

        items = results.get("files", [])
        if not items:
            return None
        item = items[0]
        return DriveFolder(self, folder_id=item["id"], name=item["name"], web_link=item.get("webViewLink"))

    def create_folder(self, name: str, description: str = "") -> DriveFolder:
        """Create a folder at the root of the user's Drive.

        Raises:
            HttpError: If the API request fails
        """
        body = {"name": name, "description": description, "mimeType": FOLDER_MIME_TYPE}
        folder = self.service.files().create(body=body, fields="id, name, webViewLink").execute()
        return DriveFolder(
            self, folder_id=folder["id"], name=folder.get("name", name), web_link=folder.get("webViewLink")
        )

    def upload_resumable(
        self,
        task: TransferTask,
        parent_id: str = "",
        progress: Optional[ProgressCallback] = None,
    ) -> DriveFile:
        """Upload a file in chunks, reporting progress after every chunk.

        Args:
            task: What to upload and under which title
            parent_id: Destination folder ID; empty uploads to the Drive root
            progress: Called with (bytes_sent, total_bytes)

        Returns:
            DriveFile with the shareable view link

        Raises:
            HttpError: If the API request fails
        """
        body: dict[str, Any] = {"name": task.display_title, "mimeType": task.mime_type}
        if parent_id:
            body["parents"] = [parent_id]

        media = MediaFileUpload(
            str(task.local_path), mimetype=task.mime_type, chunksize=self.chunk_size, resumable=True
        )
        request = self.service.files().create(
            body=body, media_body=media, fields="id, name, webViewLink"
        )

        response = None
        while response is None:
            status, response = request.next_chunk()
            if status is not None and progress is not None:
                progress(status.resumable_progress, status.total_size)
        if progress is not None:
            size = media.size()
            progress(size, size)

        if self.anyone_with_link:
            perm_body = {"role": "reader", "type": "anyone"}
            self.service.permissions().create(fileId=response["id"], body=perm_body).execute()

        return DriveFile(
            id=response["id"],
            name=response.get("name", task.display_title),
            web_link=response.get("webViewLink")
            or f"https://drive.google.com/file/d/{response['id']}/view",
        )
