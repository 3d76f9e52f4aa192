# src/config/logging_config.py

"""Per-run logging for catalog_browser.

Every launch writes a DEBUG log to ``logs/run_YYYYMMDD_HHMMSS.log``.
The console side depends on the front end:

* headless CLI runs echo warnings and errors to stderr, leaving stdout
  free for JSON output;
* TUI runs hand warnings to :class:`textual.logging.TextualHandler`,
  which routes them into the Textual devtools console while the app is
  active instead of drawing over the screen.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

from textual.logging import TextualHandler

from src.config.settings import Settings

ROOT_LOGGER_NAME = "catalog_browser"

_FILE_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)s | "
    "%(module)s:%(funcName)s:%(lineno)d | %(message)s"
)
_CONSOLE_FORMAT = "%(levelname)-8s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _run_log_path() -> Path:
    Settings.LOGS_DIR.mkdir(parents=True, exist_ok=True)
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    return Settings.LOGS_DIR / f"run_{stamp}.log"


def _console_handler(tui: bool) -> logging.Handler:
    handler: logging.Handler
    if tui:
        handler = TextualHandler()
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(logging.WARNING)
    handler.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
    return handler


def setup_logging(tui: bool = False) -> Path:
    """Attach the run's file and console handlers to ``catalog_browser``.

    Args:
        tui: Route console output through Textual instead of stderr.

    Returns:
        Path of this run's log file.  A repeated call keeps the handlers
        already installed.
    """
    log_file = _run_log_path()
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(logging.DEBUG)
    if root_logger.handlers:
        return log_file

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        logging.Formatter(_FILE_FORMAT, datefmt=_DATE_FORMAT)
    )
    root_logger.addHandler(file_handler)
    root_logger.addHandler(_console_handler(tui))

    root_logger.info(
        "Logging to %s (console: %s)", log_file, "textual" if tui else "stderr"
    )
    return log_file
