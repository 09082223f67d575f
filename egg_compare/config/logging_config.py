# egg_compare/config/logging_config.py

"""Per-run logging for egg_compare.

Each launch writes ``logs/run_YYYYMMDD_HHMMSS.log``. Every record carries
a short ``source`` tag taken from its logger name, so lines from
``egg_compare.walmart`` read ``walmart`` and lines from the service read
``service``. That keeps a comparison readable when both retailers log
from their worker threads at the same time.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

from egg_compare.config.settings import Settings

_ROOT_LOGGER = "egg_compare"

_FILE_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(source)-10s | %(threadName)s | "
    "%(module)s:%(lineno)d | %(message)s"
)

# Console only sees warnings: degraded sub-fetches and failed comparisons
_CONSOLE_FORMAT = "%(levelname)s [%(source)s] %(message)s"

_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class _SourceFilter(logging.Filter):
    """Attach ``record.source``: the logger name below ``egg_compare``."""

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name
        if name.startswith(_ROOT_LOGGER + "."):
            name = name[len(_ROOT_LOGGER) + 1:]
        record.source = name
        return True


def setup_logging() -> Path:
    """Attach the per-run file and stderr handlers to ``egg_compare``.

    Calling it again keeps the handlers of the first call.

    Returns:
        Path of this run's log file.
    """
    logs_dir: Path = Settings.LOGS_DIR
    logs_dir.mkdir(parents=True, exist_ok=True)
    log_file = logs_dir / f"run_{datetime.now():%Y%m%d_%H%M%S}.log"

    root_logger = logging.getLogger(_ROOT_LOGGER)
    root_logger.setLevel(logging.DEBUG)
    if root_logger.handlers:
        return log_file

    source_filter = _SourceFilter()

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.addFilter(source_filter)
    file_handler.setFormatter(
        logging.Formatter(_FILE_FORMAT, datefmt=_DATE_FORMAT)
    )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.WARNING)
    console_handler.addFilter(source_filter)
    console_handler.setFormatter(logging.Formatter(_CONSOLE_FORMAT))

    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)
    root_logger.debug(
        "Logging to %s (mock fallback %s)",
        log_file,
        "on" if Settings.MOCK_FALLBACK else "off",
    )
    return log_file
