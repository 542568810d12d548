import sys

from loguru import logger

from .settings import Settings

LOG_FORMAT = "{time:YYYY/MM/DD HH:mm:ss.SSSSSS} {file}:{line}: {level}: {message}"


def configure_logging(settings: Settings) -> None:
    """Send every record to the append-only log file; nothing goes to the terminal."""
    logger.remove()
    settings.log_file.parent.mkdir(parents=True, exist_ok=True)
    logger.add(
        str(settings.log_file),
        format=LOG_FORMAT,
        level="DEBUG",
        mode="a",
        encoding="utf-8",
        backtrace=False,
        diagnose=False,
    )


def report_startup_failure(message: str) -> None:
    """Last resort when the log file itself cannot be opened."""
    print(f"FATAL: {message}", file=sys.stderr)
