# Area: Shared
"""
gamelift_server._shared.logging_formatters — Logging formatters and filters
===========================================================================

Formatters for the terminal and the JSON log file, plus the two pieces
of process-wide logging state: the protocol mode flag and the game
session currently bound to this process.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Optional

PACKAGE_LOGGER = "gamelift_server"

# Terminal output shows protocol lines only while this is set
_protocol_mode_enabled = False

# Stamped onto every record that passes a SessionContextFilter
_game_session_id: Optional[str] = None


class ProtocolFilter(logging.Filter):
    """Drops terminal records while protocol mode is on.

    The ProtocolLogger prints its own lines in that mode; the file
    handler is not filtered.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        return not _protocol_mode_enabled


class SessionContextFilter(logging.Filter):
    """Attach the bound game session id as ``record.game_session_id``."""

    def filter(self, record: logging.LogRecord) -> bool:
        if getattr(record, "game_session_id", None) is None:
            record.game_session_id = _game_session_id
        return True


class TerminalFormatter(logging.Formatter):
    """Colored level names and package-relative logger names."""

    LEVEL_COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        # Work on a copy; other handlers format the same record
        record = logging.makeLogRecord(record.__dict__)
        color = self.LEVEL_COLORS.get(record.levelname, self.RESET)
        record.levelname = f"{color}{record.levelname}{self.RESET}"
        record.name = short_logger_name(record.name)
        return super().format(record)


class JSONFormatter(logging.Formatter):
    """One JSON object per line for the log file."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "thread": record.threadName,
            "game_session_id": getattr(record, "game_session_id", None),
            "message": record.getMessage(),
        }
        error_type = getattr(record, "error_type", None)
        if error_type:
            entry["error_type"] = error_type
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry)


def short_logger_name(name: str) -> str:
    """'gamelift_server.correlator' -> 'correlator'."""
    if name.startswith(PACKAGE_LOGGER + "."):
        return name[len(PACKAGE_LOGGER) + 1:]
    return name


def set_log_game_session(game_session_id: Optional[str]) -> None:
    """Set (or clear with None) the session id stamped onto log records."""
    global _game_session_id
    _game_session_id = game_session_id


def get_log_game_session() -> Optional[str]:
    return _game_session_id


def enable_protocol_mode() -> None:
    """Enable protocol logging mode.

    In protocol mode:
    - Standard logs are suppressed from the terminal
    - Only protocol frames (green) and callbacks (orange) are shown
    - File logging is unchanged
    """
    global _protocol_mode_enabled
    _protocol_mode_enabled = True


def disable_protocol_mode() -> None:
    """Restore standard terminal logging."""
    global _protocol_mode_enabled
    _protocol_mode_enabled = False


def is_protocol_mode_enabled() -> bool:
    return _protocol_mode_enabled
