from __future__ import annotations

import logging
import logging.handlers
import sys
from pathlib import Path
from threading import Lock
from typing import List, Optional

TRACE = 5
LOG_FILE_NAME = "app.log"

_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s [%(threadName)s] %(filename)s:%(lineno)d: %(message)s"
_DATEFMT = "%Y-%m-%d %H:%M:%S"

# Process-wide logging state, owned by setup_logging()/shutdown_logging().
_lock = Lock()
_installed: List[logging.Handler] = []
_log_file: Optional[Path] = None


def setup_logging(
    log_dir: str | Path,
    *,
    level: str | int = logging.INFO,
    console: bool = True,
) -> Path:
    """
    Configure root logging for the application:
    - File handler: logs/app.log, rotated at local midnight
    - Console handler (optional): same format on stderr

    Must run once at startup, before the database is opened. Calling it again
    replaces the previously installed handlers. Returns the log file path.
    """
    global _log_file

    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    logging.addLevelName(TRACE, "TRACE")
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    fmt = logging.Formatter(fmt=_FORMAT, datefmt=_DATEFMT)

    with _lock:
        _remove_handlers()

        root = logging.getLogger()
        root.setLevel(level)

        fh = logging.handlers.TimedRotatingFileHandler(
            str(log_file), when="midnight", encoding="utf-8"
        )
        fh.setFormatter(fmt)
        root.addHandler(fh)
        _installed.append(fh)

        if console:
            ch = logging.StreamHandler(sys.stderr)
            ch.setFormatter(fmt)
            root.addHandler(ch)
            _installed.append(ch)

        _log_file = log_file

    logging.getLogger(__name__).info("Logger initialized, logs directory: %s", log_dir)
    return log_file


def shutdown_logging() -> None:
    """Flush and detach the handlers installed by setup_logging()."""
    global _log_file
    with _lock:
        _remove_handlers()
        _log_file = None


def current_log_file() -> Optional[Path]:
    """Path of the active log file, or None before setup_logging()."""
    return _log_file


def _remove_handlers() -> None:
    root = logging.getLogger()
    while _installed:
        h = _installed.pop()
        root.removeHandler(h)
        h.close()
