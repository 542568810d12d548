import sys
from functools import partial
from typing import Callable, Optional

import httplib2
from google.auth.exceptions import GoogleAuthError
from googleapiclient.errors import HttpError
from loguru import logger

from .auth import AuthorizationFlow, CredentialStore, SessionBuilder
from .drive import GoogleDriveClient, TransferTask
from .errors import SaferViewerError
from .logging_conf import configure_logging, report_startup_failure
from .opener import open_target
from .settings import Settings, load_client_config
from .transfer import upload

FATAL_ERRORS = (SaferViewerError, HttpError, httplib2.HttpLib2Error, GoogleAuthError, OSError)


def run(
    argv: Optional[list[str]] = None,
    settings: Optional[Settings] = None,
    opener: Optional[Callable[[str], None]] = None,
) -> int:
    """Upload the file named on the command line and open its Drive view.

    Returns the process exit code.
    """
    argv = sys.argv[1:] if argv is None else argv
    settings = settings or Settings()
    opener = opener or partial(open_target, command=settings.open_command)

    try:
        configure_logging(settings)
    except (OSError, ValueError) as e:
        report_startup_failure(f"Unable to open log file {settings.log_file}: {e}")
        return 1
    logger.info("Starting")

    if not argv:
        logger.error("No command line arguments supplied")
        logger.info("This application only operates in Drag and Drop mode!")
        return 1

    try:
        task = TransferTask.from_path(argv[0], settings.output_title, settings.folder_name)
        logger.info(f"Read file: {task.local_path}")
        logger.info(f"Output name: {task.display_title}")
        logger.info(f"Mime is {task.mime_type}")

        client_config = load_client_config(settings)
        store = CredentialStore(settings)
        flow = AuthorizationFlow(settings, client_config, store, opener=opener)
        credentials = SessionBuilder(client_config, settings.scopes, store, flow).resolve()

        drive = GoogleDriveClient(
            credentials,
            chunk_size=settings.upload_chunk_size,
            anyone_with_link=settings.share_with_anyone,
        )
        result = upload(drive, task, settings.folder_description)
        logger.info(f"Document Link is {result.web_link!r}")

        opener(result.web_link)
    except FATAL_ERRORS as e:
        logger.opt(exception=e).critical(f"FATAL: {e}")
        return 1

    logger.info("Done")
    return 0


def main() -> None:
    sys.exit(run())


if __name__ == "__main__":
    main()
