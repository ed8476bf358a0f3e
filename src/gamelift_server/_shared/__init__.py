# Area: Shared
"""
Shared utilities used by the agent, session and push layers.

This package contains:
- Logging configuration and formatters
- Protocol frame logging
"""

from .logging_config import setup_logging, log_sdk_error
from .logging_formatters import (
    enable_protocol_mode,
    disable_protocol_mode,
    is_protocol_mode_enabled,
)
from .protocol_logger import get_protocol_logger, ProtocolLogger

__all__ = [
    "setup_logging",
    "log_sdk_error",
    "enable_protocol_mode",
    "disable_protocol_mode",
    "is_protocol_mode_enabled",
    "get_protocol_logger",
    "ProtocolLogger",
]
