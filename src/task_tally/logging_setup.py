# src/task_tally/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

LOG_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"
LOG_FILE_NAME = "task_tally.log"

# Client libraries used for the Asana and Sheets calls.
_CLIENT_LIBS = ("httpx", "httpcore", "gspread", "google", "urllib3")


class SyncConsoleFilter(logging.Filter):
    """
    Console view of an unattended sync run.

    Sync progress (task_tally.*) always shows; HTTP and Sheets client libraries
    only when something went wrong (WARNING+); captured Python warnings and any
    other library only at ERROR+. The log file is not filtered.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name
        if name == "task_tally" or name.startswith("task_tally."):
            return True
        if name.startswith(_CLIENT_LIBS) and name != "py.warnings":
            return record.levelno >= logging.WARNING
        return record.levelno >= logging.ERROR


def setup_logging(
    *,
    log_dir: str | Path = ".local/task_tally",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Route sync logs to stderr (filtered) and to `<log_dir>/task_tally.log` (full).

    Scheduled runs append to the same file, so page-level DEBUG lines from
    earlier cycles stay available when a sheet shows an undercount.
    Call once per process, before the first sync. Returns the log file path.
    """
    log_file = Path(log_dir) / LOG_FILE_NAME
    log_file.parent.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(fmt)
    console.addFilter(SyncConsoleFilter())
    root.addHandler(console)

    to_file = logging.FileHandler(str(log_file), encoding="utf-8")
    to_file.setLevel(file_level)
    to_file.setFormatter(fmt)
    root.addHandler(to_file)

    logging.captureWarnings(True)

    # One request line per page is already logged by the fetcher.
    for lib in ("httpx", "httpcore"):
        logging.getLogger(lib).setLevel(logging.WARNING)

    return log_file
