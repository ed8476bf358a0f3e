# Area: Shared
"""
gamelift_server._shared.protocol_logger — Protocol frame logging
================================================================

One line per frame exchanged with the agent and per user callback.
In protocol mode the lines are printed in color to the terminal;
otherwise they go to the ``gamelift_server.protocol`` logger at DEBUG.
"""

from __future__ import annotations
import logging
import sys
from datetime import datetime
from typing import Optional

from .logging_formatters import is_protocol_mode_enabled, set_log_game_session

logger = logging.getLogger("gamelift_server.protocol")

# ══════════════════════════════════════════════════════════════
# ANSI COLOR CODES
# ══════════════════════════════════════════════════════════════

GREEN = "\033[32m"         # Protocol frames
ORANGE = "\033[38;5;208m"  # Callbacks
RED = "\033[31m"           # Errors
RESET = "\033[0m"

# ══════════════════════════════════════════════════════════════
# MESSAGE NAME → DISPLAY NAME MAPPINGS
# ══════════════════════════════════════════════════════════════

# Commands this process SENDS
SEND_DISPLAY_NAMES = {
    "ProcessReady": "PROCESS-READY",
    "ProcessEnding": "PROCESS-ENDING",
    "ReportHealth": "REPORT-HEALTH",
    "GameSessionActivate": "ACTIVATE-SESSION",
    "GameSessionTerminate": "TERMINATE-SESSION",
    "UpdatePlayerSessionCreationPolicy": "PLAYER-POLICY",
    "AcceptPlayerSession": "ACCEPT-PLAYER",
    "RemovePlayerSession": "REMOVE-PLAYER",
    "DescribePlayerSessionsRequest": "DESCRIBE-PLAYERS",
    "BackfillMatchmakingRequest": "START-BACKFILL",
    "StopMatchmakingRequest": "STOP-BACKFILL",
    "GetInstanceCertificate": "GET-CERTIFICATE",
}

# Pushes this process RECEIVES
RECEIVE_DISPLAY_NAMES = {
    "StartGameSession": "SESSION-START",
    "UpdateGameSession": "SESSION-UPDATE",
    "TerminateProcess": "PROCESS-TERMINATE",
}

# Callback internal name → display name
CALLBACK_DISPLAY_NAMES = {
    "on_start_game_session": "start_game_session",
    "on_update_game_session": "update_game_session",
    "on_process_terminate": "process_terminate",
}


class ProtocolLogger:
    """Logger for protocol frames and callbacks."""

    def __init__(self) -> None:
        self._game_session_id: Optional[str] = None

    def set_game_session_id(self, game_session_id: Optional[str]) -> None:
        """Set the bound game session for logging context."""
        self._game_session_id = game_session_id
        set_log_game_session(game_session_id)

    def _session(self) -> str:
        return self._game_session_id or "-"

    def _now_ms(self) -> str:
        return datetime.now().strftime("%H:%M:%S:%f")[:-3]

    def _emit(self, color: str, line: str) -> None:
        if is_protocol_mode_enabled():
            print(f"{color}{line}{RESET}", file=sys.stdout)
        else:
            logger.debug(line)

    def log_sent(self, message_name: str, call_id: Optional[str] = None) -> None:
        """Log a command frame written to the agent."""
        display = SEND_DISPLAY_NAMES.get(message_name, message_name)
        self._emit(GREEN, (
            f"{self._now_ms()} | SESSION: {self._session():40} | SENT     | "
            f"{display:20} | CALL: {call_id or 'fire-and-forget'}"
        ))

    def log_ack(self, message_name: str, status: str, call_id: Optional[str] = None) -> None:
        """Log an acknowledgement received for a command."""
        display = SEND_DISPLAY_NAMES.get(message_name, message_name)
        self._emit(GREEN, (
            f"{self._now_ms()} | SESSION: {self._session():40} | ACK      | "
            f"{display:20} | STATUS: {status} | CALL: {call_id or 'fire-and-forget'}"
        ))

    def log_received(self, event_name: str) -> None:
        """Log a push received from the agent."""
        display = RECEIVE_DISPLAY_NAMES.get(event_name, event_name)
        self._emit(GREEN, (
            f"{self._now_ms()} | SESSION: {self._session():40} | RECEIVED | {display:20}"
        ))

    def log_callback_call(self, callback_name: str) -> None:
        """Log a callback invocation."""
        display = CALLBACK_DISPLAY_NAMES.get(callback_name, callback_name)
        self._emit(ORANGE, f"{self._now_ms()} | CALLBACK: {display:20} | CALL")

    def log_callback_response(self, callback_name: str) -> None:
        """Log a callback returning."""
        display = CALLBACK_DISPLAY_NAMES.get(callback_name, callback_name)
        self._emit(ORANGE, f"{self._now_ms()} | CALLBACK: {display:20} | RESPONSE")

    def log_error(self, description: str) -> None:
        """Log an error line."""
        line = f"[ERROR] {self._now_ms()} | {description}"
        if is_protocol_mode_enabled():
            print(f"{RED}{line}{RESET}", file=sys.stderr)
        else:
            logger.debug(line)


# Global singleton instance
_protocol_logger: Optional[ProtocolLogger] = None


def get_protocol_logger() -> ProtocolLogger:
    """Get or create the global protocol logger instance."""
    global _protocol_logger
    if _protocol_logger is None:
        _protocol_logger = ProtocolLogger()
    return _protocol_logger
