import time
from typing import Callable

UNITS = ["B", "KB", "MB", "GB", "TB", "PB"]


def format_file_size(num_bytes: int, force_bytes: bool = False) -> str:
    """Human readable size using decimal (1000-based) units.

    >>> format_file_size(1500)
    '1.5 KB'
    >>> format_file_size(1500, force_bytes=True)
    '1500 B'
    """
    if force_bytes:
        return f"{num_bytes} B"

    value = float(num_bytes)
    i = 0
    while value > 1000 and i < len(UNITS) - 1:
        value /= 1000
        i += 1
    return f"{value:.1f} {UNITS[i]}"


def measure_transfer_rate(clock: Callable[[], float] = time.monotonic) -> Callable[[int], str]:
    """Start a stopwatch; the returned function formats the average rate so far.

    Elapsed time is floored to whole seconds. Within the first second the
    byte count itself is reported as the rate.
    """
    start = clock()

    def rate(num_bytes: int) -> str:
        seconds = int(clock() - start)
        if seconds < 1:
            return f"{format_file_size(num_bytes)}/s"
        return f"{format_file_size(num_bytes // seconds)}/s"

    return rate
