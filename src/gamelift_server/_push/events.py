# Area: Push
"""
gamelift_server._push.events — Typed push events
================================================

What a decoded agent push becomes before it is queued for dispatch.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import ClassVar, Union

from ..models import GameSession, UpdateGameSession


@dataclass(frozen=True)
class SessionStartEvent:
    event_name: ClassVar[str] = "StartGameSession"
    game_session: GameSession


@dataclass(frozen=True)
class SessionUpdateEvent:
    event_name: ClassVar[str] = "UpdateGameSession"
    update: UpdateGameSession


@dataclass(frozen=True)
class ProcessTerminateEvent:
    event_name: ClassVar[str] = "TerminateProcess"
    termination_time: int                       # epoch seconds


PushEvent = Union[SessionStartEvent, SessionUpdateEvent, ProcessTerminateEvent]
