# Area: Shared
"""
gamelift_server._shared.logging_config — Structured logging setup
==================================================================

Configures dual logging: terminal (colored) + file (JSON).
The SDK never calls this on import; embedding applications (and the
demo CLI) opt in.
"""

from __future__ import annotations
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Optional, TextIO

from .logging_formatters import (
    JSONFormatter,
    ProtocolFilter,
    SessionContextFilter,
    TerminalFormatter,
)

if TYPE_CHECKING:
    from ..errors import GameLiftServerError

# Package logger
logger = logging.getLogger("gamelift_server")


def setup_logging(
    log_file_path: Optional[str] = "gamelift_server.log",
    level: int = logging.INFO,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """
    Configure the ``gamelift_server`` logger hierarchy.

    Parameters
    ----------
    log_file_path : str or None
        JSON log file. Parent directories are created. None disables the
        file handler.
    level : int
        Level for the package logger and both handlers.
    stream : TextIO, optional
        Terminal stream. Defaults to stdout.

    Returns
    -------
    logging.Logger
        The configured package logger. Calling again replaces its handlers.
    """
    pkg_logger = logging.getLogger("gamelift_server")
    pkg_logger.setLevel(level)
    for handler in list(pkg_logger.handlers):
        pkg_logger.removeHandler(handler)
        handler.close()

    terminal_handler = logging.StreamHandler(stream or sys.stdout)
    terminal_handler.setLevel(level)
    terminal_handler.setFormatter(TerminalFormatter(
        fmt="%(asctime)s │ %(levelname)s │ %(name)-16s │ %(message)s",
        datefmt="%H:%M:%S",
    ))
    terminal_handler.addFilter(ProtocolFilter())
    pkg_logger.addHandler(terminal_handler)

    if log_file_path:
        try:
            log_path = Path(log_file_path)
            log_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_path, encoding="utf-8")
        except OSError as e:
            pkg_logger.warning(f"Could not open log file {log_file_path}: {e}")
        else:
            file_handler.setLevel(level)
            file_handler.setFormatter(JSONFormatter())
            file_handler.addFilter(SessionContextFilter())
            pkg_logger.addHandler(file_handler)

    # Records stop at the package logger
    pkg_logger.propagate = False
    return pkg_logger


def log_sdk_error(error: "GameLiftServerError", level: int = logging.ERROR) -> None:
    """
    Log an SDK error with its structured error block.

    Parameters
    ----------
    error : GameLiftServerError
        The error to log. Errors that provide ``format_error_log()`` have
        the formatted block attached to the record.
    level : int
        Logging level. Defaults to ERROR.
    """
    formatter = getattr(error, "format_error_log", None)
    block = formatter() if formatter else str(error)
    logger.log(
        level,
        f"{error.__class__.__name__}: {error}\n{block}",
        extra={"error_type": error.__class__.__name__},
    )
