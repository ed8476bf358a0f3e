# Area: Session
"""
gamelift_server._session.session_state — Session state record
==============================================================

Holds what the client knows about its bound game session, its active
readiness declaration and the scheduled termination time.

Writes go through methods that take the record's lock; reads are plain
attribute reads. A newer descriptor replaces the old one wholesale.
"""

from __future__ import annotations
import logging
import threading
from dataclasses import dataclass, field
from typing import Optional

from ..models import GameSession, GameSessionStatus, ProcessParameters

logger = logging.getLogger("gamelift_server.session_state")


@dataclass
class SessionState:
    """
    Mutable per-client session record.

    The bound session id is derived from ``game_session`` so the two can
    never disagree.
    """
    game_session: Optional[GameSession] = None
    activated: bool = False
    process_parameters: Optional[ProcessParameters] = None
    termination_time: int = 0                   # epoch seconds, 0 = not scheduled
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    @property
    def game_session_id(self) -> Optional[str]:
        session = self.game_session
        return session.game_session_id if session is not None else None

    def set_parameters(self, parameters: Optional[ProcessParameters]) -> Optional[ProcessParameters]:
        """Supersede the active readiness declaration; returns the previous one."""
        with self._lock:
            previous, self.process_parameters = self.process_parameters, parameters
        return previous

    def bind(self, game_session: GameSession) -> GameSession:
        """
        Bind a pushed session descriptor.

        The stored descriptor is marked ACTIVATING; a re-bind resets the
        activated flag.

        Returns:
            The descriptor as stored
        """
        bound = game_session.with_status(GameSessionStatus.ACTIVATING)
        with self._lock:
            self.game_session = bound
            self.activated = False
        logger.info(f"Bound game session {bound.game_session_id}")
        return bound

    def mark_activated(self) -> None:
        with self._lock:
            self.activated = True
            if self.game_session is not None:
                self.game_session = self.game_session.with_status(GameSessionStatus.ACTIVE)

    def clear_session(self) -> None:
        """Forget the bound session."""
        with self._lock:
            previous = self.game_session_id
            self.game_session = None
            self.activated = False
        if previous:
            logger.info(f"Released game session {previous}")

    def set_termination_time(self, epoch_seconds: int, keep_existing: bool = False) -> int:
        """
        Record when the process will be terminated.

        Args:
            epoch_seconds: Termination time in seconds since the epoch
            keep_existing: If True, an already scheduled time is not replaced

        Returns:
            The termination time now in effect
        """
        with self._lock:
            if not (keep_existing and self.termination_time):
                self.termination_time = int(epoch_seconds)
            return self.termination_time
