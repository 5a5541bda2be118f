# crossarb/config/logging_config.py

"""Per-run logging for crossarb scans.

Every launch writes ``logs/run_<timestamp>.log`` at DEBUG, so adapter
failures that the scanner absorbs into ``ScanReport.errors`` still leave
a traceback behind. The console only shows ``Settings.CONSOLE_LOG_LEVEL``
and above on stderr, keeping stdout free for JSON output. Only the newest
``Settings.MAX_LOG_FILES`` run logs are kept.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

from crossarb.config.settings import Settings

_FILE_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)s | "
    "%(module)s:%(funcName)s:%(lineno)d | %(message)s"
)
_CONSOLE_FORMAT = "%(levelname)-8s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _prune_old_logs(logs_dir: Path, keep: int) -> None:
    runs = sorted(logs_dir.glob("run_*.log"))
    for stale in runs[: max(len(runs) - keep, 0)]:
        stale.unlink(missing_ok=True)


def _current_log_file(root_logger: logging.Logger) -> Path | None:
    for handler in root_logger.handlers:
        if isinstance(handler, logging.FileHandler):
            return Path(handler.baseFilename)
    return None


def setup_logging() -> Path:
    """Attach the run-log and console handlers to the ``crossarb`` logger.

    Calling it again is a no-op that returns the active log file.
    """
    root_logger = logging.getLogger("crossarb")
    root_logger.setLevel(logging.DEBUG)

    existing = _current_log_file(root_logger)
    if existing is not None:
        return existing

    logs_dir: Path = Settings.LOGS_DIR
    logs_dir.mkdir(parents=True, exist_ok=True)
    _prune_old_logs(logs_dir, Settings.MAX_LOG_FILES - 1)

    log_file = logs_dir / f"run_{datetime.now():%Y%m%d_%H%M%S}.log"

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        logging.Formatter(_FILE_FORMAT, datefmt=_DATE_FORMAT)
    )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(Settings.CONSOLE_LOG_LEVEL)
    console_handler.setFormatter(logging.Formatter(_CONSOLE_FORMAT))

    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)
    root_logger.debug("Run log opened at %s", log_file)

    return log_file
