import subprocess
import sys
from typing import Optional

from loguru import logger

from .errors import OpenError


def default_open_command() -> list[str]:
    """The platform's "open with default handler" command."""
    if sys.platform == "darwin":
        return ["open"]
    if sys.platform == "win32":
        return ["cmd", "/c", "start", ""]
    return ["xdg-open"]


def open_target(target: str, command: Optional[list[str]] = None) -> None:
    """Open a URL or file with the OS default handler and wait for the opener to exit.

    Raises:
        OpenError: If the opener cannot be started or exits non-zero.
    """
    argv = [*(command or default_open_command()), target]
    logger.debug(f"Running opener: {argv[0]}")
    try:
        subprocess.run(argv, check=True)
    except (OSError, subprocess.CalledProcessError) as e:
        raise OpenError(f"Unable to open {target}: {e}") from e
