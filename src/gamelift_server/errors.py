"""
gamelift_server.errors — Custom exception classes
==================================================

Defines the exception hierarchy raised by the public call surface.
Each exception stores full context for structured logging.
"""

from __future__ import annotations
from typing import Any, Optional
import json


class GameLiftServerError(Exception):
    """Base exception for all GameLift server SDK errors."""
    pass


class PreconditionViolationError(GameLiftServerError, RuntimeError):
    """Raised when a call is issued in the wrong lifecycle state.

    Raised synchronously; the command never reaches the transport.
    """

    def __init__(self, operation: str, state: str, reason: str):
        self.operation = operation
        self.state = state
        self.reason = reason
        super().__init__(f"Cannot {operation} while {state}: {reason}")

    def format_error_log(self) -> str:
        return _format_error_block(
            error_type="PRECONDITION_VIOLATION",
            command=self.operation,
            details={"state": self.state, "reason": self.reason},
        )


class ProtocolFailureError(GameLiftServerError):
    """Raised when the agent acknowledges a command with a non-OK status."""

    def __init__(self, command: str, status: str, agent_message: Optional[str]):
        self.command = command
        self.status = status
        self.agent_message = agent_message
        super().__init__(
            f"Agent rejected '{command}' with {status}: {agent_message or 'no message'}"
        )

    def format_error_log(self) -> str:
        return _format_error_block(
            error_type="PROTOCOL_FAILURE",
            command=self.command,
            details={"status": self.status, "agent_message": self.agent_message},
        )


class AgentTimeoutError(GameLiftServerError, TimeoutError):
    """Raised when no acknowledgement arrives within the command deadline.

    The command may still have been applied by the agent.
    """

    def __init__(self, command: str, timeout_seconds: float):
        self.command = command
        self.timeout_seconds = timeout_seconds
        super().__init__(
            f"Did not receive a response to '{command}' within {timeout_seconds} seconds"
        )

    def format_error_log(self) -> str:
        return _format_error_block(
            error_type="AGENT_TIMEOUT",
            command=self.command,
            details={"timeout_seconds": self.timeout_seconds},
        )


class DecodeFailureError(GameLiftServerError):
    """Raised when a push or acknowledgement payload cannot be decoded."""

    def __init__(self, message_name: str, raw_payload: Any, reason: str):
        self.message_name = message_name
        self.raw_payload = raw_payload
        self.reason = reason
        super().__init__(f"Received a malformed {message_name}: {reason}")

    def format_error_log(self) -> str:
        return _format_error_block(
            error_type="DECODE_FAILURE",
            command=self.message_name,
            details={"reason": self.reason, "raw_payload": repr(self.raw_payload)},
        )


def _format_error_block(error_type: str, command: str, details: dict) -> str:
    """Format a structured error block for logs."""
    from datetime import datetime, timezone

    timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"

    lines = [
        "",
        "=" * 64,
        " GAMELIFT SERVER SDK ERROR",
        "=" * 64,
        f" Timestamp:    {timestamp}",
        f" Error Type:   {error_type}",
        f" Command:      {command}",
        "",
        " ── DETAILS " + "─" * 52,
        _indent_json(details),
        "",
        "=" * 64,
        "",
    ]
    return "\n".join(lines)


def _indent_json(data: dict, indent: int = 2) -> str:
    """Format JSON with indentation for error logs."""
    try:
        formatted = json.dumps(data, indent=indent, default=str)
        return "\n".join(" " + line for line in formatted.split("\n"))
    except (TypeError, ValueError):
        return f" {repr(data)}"
