"""Upload orchestration: destination folder, resumable upload, progress logging."""

from typing import TYPE_CHECKING, Callable, Optional

from googleapiclient.errors import HttpError
from loguru import logger

from .drive.types import DriveFile, TransferTask
from .units import measure_transfer_rate

if TYPE_CHECKING:
    from .drive.client import GoogleDriveClient
    from .drive.folder import DriveFolder


def get_or_create_folder(
    storage: "GoogleDriveClient", name: str, description: str = ""
) -> Optional["DriveFolder"]:
    """Find the destination folder by name, creating it when missing.

    Args:
        storage: The Drive client
        name: Folder name; empty means upload to the Drive root
        description: Description given to a newly created folder

    Returns:
        The folder, or None when uploads should go to the Drive root
        (empty name, or the folder could not be created)

    Raises:
        HttpError: If looking the folder up fails
    """
    if not name:
        return None

    folder = storage.find_folder(name)
    if folder is not None:
        return folder

    logger.info(f"Folder not found. Create new folder : {name}")
    try:
        return storage.create_folder(name, description)
    except HttpError as e:
        # the file still goes up, at the Drive root
        logger.error(f"An error occurred when create folder: {e}")
        return None


def upload(
    storage: "GoogleDriveClient",
    task: TransferTask,
    folder_description: str = "",
    rate_factory: Callable[[], Callable[[int], str]] = measure_transfer_rate,
) -> DriveFile:
    """Upload the task's file into its destination folder, logging the transfer rate."""
    folder = get_or_create_folder(storage, task.destination_folder_name, folder_description)
    get_rate = rate_factory()

    def show_progress(current: int, total: int) -> None:
        logger.info(f"Uploaded at {get_rate(current)}")

    if folder is None:
        return storage.upload_resumable(task, progress=show_progress)
    return folder.upload_file(task, progress=show_progress)
