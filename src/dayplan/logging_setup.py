# src/dayplan/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

# Loggers whose INFO output repeats what the console already prints as a command reply
# (conflict rejections, store/storage startup lines). They reach the console only at WARNING+.
_ECHO_LOGGERS = (
    "dayplan.schedule.",
    "dayplan.storage.",
)


class _ConsoleNoiseFilter(logging.Filter):
    """
    Keep the REPL readable:
    - dayplan.cli / dayplan.connectors logs pass through
    - engine and storage logs only when something went wrong (WARNING+)
    - everything else (Python warnings, third-party) only at ERROR+
    """

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name

        if name.startswith("dayplan."):
            if name.startswith(_ECHO_LOGGERS):
                return record.levelno >= logging.WARNING
            return True

        return record.levelno >= logging.ERROR


def setup_logging(
    *,
    log_dir: str | Path = ".local/dayplan",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
    log_file_name: str = "dayplan.log",
) -> Path:
    """
    Configure the root logger with a filtered stderr handler and a full file log.

    Call this ONCE, before the first log record. Returns the log file path.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / log_file_name

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # stderr, so log lines don't interleave with replies printed on stdout
    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(console_level)
    ch.setFormatter(fmt)
    ch.addFilter(_ConsoleNoiseFilter())
    root.addHandler(ch)

    # file gets every record, including per-call storage debug lines
    fh = logging.FileHandler(str(log_file), encoding="utf-8")
    fh.setLevel(file_level)
    fh.setFormatter(fmt)
    root.addHandler(fh)

    logging.captureWarnings(True)
    return log_file
