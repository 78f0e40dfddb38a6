"""Category loggers for the UDM, formatted as '[LEVEL][UDM][category] message'."""

from __future__ import annotations

import logging
from datetime import datetime

COMPONENT = "UDM"
TRACE = 5
logging.addLevelName(TRACE, "TRACE")

_ROOT_NAME = "nudm"

_LEVEL_LABELS = {
    logging.CRITICAL: "FATAL",
    logging.WARNING: "WARNING",
}

_LEVELS = {
    "panic": logging.CRITICAL,
    "fatal": logging.CRITICAL,
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
    "trace": TRACE,
}


class _NestedFormatter(logging.Formatter):
    """RFC 3339 timestamp, level and bracketed fields, then the trimmed message."""

    def __init__(self) -> None:
        super().__init__()
        self.report_caller = False

    def format(self, record: logging.LogRecord) -> str:
        stamp = datetime.fromtimestamp(record.created).astimezone().isoformat(timespec="seconds")
        level = _LEVEL_LABELS.get(record.levelno, record.levelname.upper())
        prefix = _ROOT_NAME + "."
        category = record.name[len(prefix):] if record.name.startswith(prefix) else ""
        fields = f"[{COMPONENT}]" + (f"[{category}]" if category else "")
        line = f"{stamp} [{level}]{fields} {record.getMessage().strip()}"
        if self.report_caller:
            line += f" ({record.pathname}:{record.lineno} {record.funcName})"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


_formatter = _NestedFormatter()
_root = logging.getLogger(_ROOT_NAME)
_handler = logging.StreamHandler()
_handler.setFormatter(_formatter)
_root.addHandler(_handler)
_root.propagate = False
_root.setLevel(logging.INFO)


def get_logger(category: str) -> logging.Logger:
    """Return the logger for one category, such as 'EE' or 'CFG'."""
    if not isinstance(category, str) or not category:
        raise ValueError("category must be a non-empty string")
    return logging.getLogger(f"{_ROOT_NAME}.{category}")


def set_log_level(level: int | str) -> None:
    """Set the level for all UDM loggers, by number or by name."""
    if isinstance(level, bool):
        raise ValueError(f"invalid log level: {level!r}")
    if isinstance(level, int):
        _root.setLevel(level)
        return
    if isinstance(level, str):
        try:
            _root.setLevel(_LEVELS[level.strip().lower()])
        except KeyError:
            raise ValueError(f"invalid log level: {level!r}") from None
        return
    raise ValueError(f"invalid log level: {level!r}")


def set_report_caller(flag: bool) -> None:
    """Turn the source location suffix on or off."""
    _formatter.report_caller = bool(flag)