"""Logging setup: console and file output, exception reporting, shutdown."""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from os import PathLike
from pathlib import Path

_PATTERN = "[%(asctime)s] [%(levelname)s] %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class _LowerLevelFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        copy = logging.makeLogRecord(record.__dict__)
        copy.levelname = copy.levelname.lower()
        return super().format(copy)


@dataclass
class _State:
    logger_name: str = "work_record"
    handlers: list[logging.Handler] = field(default_factory=list)
    previous_level: int | None = None


_state = _State()


def _level_name(level: int) -> str:
    return logging.getLevelName(level).lower()


def init_logging(
    logger_name: str = "app_logger",
    log_file: str | PathLike[str] = "logs/app.log",
    console_level: int = logging.DEBUG,
    file_level: int = logging.INFO,
) -> logging.Logger | None:
    """Send log records to the console and to a fresh log file; return the named logger."""
    shutdown()
    try:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, mode="w", encoding="utf-8")
    except OSError as exc:
        print(f"Log initialization failed: {exc}", file=sys.stderr)
        return None

    formatter = _LowerLevelFormatter(_PATTERN, _DATE_FORMAT)
    file_handler.setFormatter(formatter)
    file_handler.setLevel(file_level)
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(console_level)

    root = logging.getLogger()
    _state.previous_level = root.level
    for handler in (console_handler, file_handler):
        root.addHandler(handler)
    root.setLevel(min(console_level, file_level))
    _state.handlers = [console_handler, file_handler]
    _state.logger_name = logger_name

    logger = logging.getLogger(logger_name)
    logger.info(
        "Logger initialized successfully. Console level: %s, File level: %s",
        _level_name(console_level),
        _level_name(file_level),
    )
    return logger


def log_exception(exc: BaseException, context: str = "") -> None:
    """Log an exception as an error, prefixed with its context when given."""
    prefix = f"{context}: " if context else ""
    logging.getLogger(_state.logger_name).error("%sException: %s", prefix, exc)


def shutdown() -> None:
    """Flush and detach the handlers installed by init_logging."""
    try:
        root = logging.getLogger()
        for handler in _state.handlers:
            handler.flush()
            root.removeHandler(handler)
            handler.close()
        _state.handlers = []
        if _state.previous_level is not None:
            root.setLevel(_state.previous_level)
            _state.previous_level = None
    except Exception as exc:  # noqa: BLE001 - shutdown must never raise
        print(f"Log shutdown failed: {exc}", file=sys.stderr)