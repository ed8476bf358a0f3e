"""
gamelift_server.models — Public data model
===========================================

Types passed to and returned from GameLiftServer. Game server code
builds requests and ProcessParameters from these and receives
GameSession / UpdateGameSession objects in its callbacks.

    from gamelift_server import GameLiftServer, ProcessParameters

    server.process_ready(ProcessParameters(
        port=1337,
        log_paths_to_upload=["logs/server.log"],
        on_start_game_session=lambda session: server.activate_game_session(),
    ))
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Callable, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class GameSessionStatus(str, Enum):
    ACTIVATING = "ACTIVATING"
    ACTIVE = "ACTIVE"
    TERMINATING = "TERMINATING"
    TERMINATED = "TERMINATED"


class UpdateReason(str, Enum):
    """Why the agent pushed a session update."""
    MATCHMAKING_DATA_UPDATED = "MATCHMAKING_DATA_UPDATED"
    BACKFILL_FAILED = "BACKFILL_FAILED"
    BACKFILL_TIMED_OUT = "BACKFILL_TIMED_OUT"
    BACKFILL_CANCELLED = "BACKFILL_CANCELLED"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def parse(cls, value: Optional[str]) -> "UpdateReason":
        """Map a wire string to a reason; unrecognised values become UNKNOWN."""
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN


class PlayerSessionCreationPolicy(str, Enum):
    ACCEPT_ALL = "ACCEPT_ALL"
    DENY_ALL = "DENY_ALL"


class PlayerSessionStatus(str, Enum):
    RESERVED = "RESERVED"
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    TIMEDOUT = "TIMEDOUT"


# ============================================
# Session descriptors (pushed by the agent)
# ============================================

class GameProperty(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: str
    value: str


class GameSession(BaseModel):
    """A game session assigned to this process.

    Frozen: a newer push replaces the whole object rather than mutating it.
    """

    model_config = ConfigDict(frozen=True)

    game_session_id: Optional[str] = None
    fleet_id: Optional[str] = None
    name: Optional[str] = None
    maximum_player_session_count: int = 0
    ip_address: Optional[str] = None
    port: int = 0
    dns_name: Optional[str] = None
    game_session_data: Optional[str] = None
    matchmaker_data: Optional[str] = None
    game_properties: List[GameProperty] = Field(default_factory=list)
    status: Optional[GameSessionStatus] = None

    def with_status(self, status: GameSessionStatus) -> "GameSession":
        return self.model_copy(update={"status": status})


class UpdateGameSession(BaseModel):
    """Payload of the session-update callback."""

    model_config = ConfigDict(frozen=True)

    game_session: GameSession
    update_reason: UpdateReason = UpdateReason.UNKNOWN
    backfill_ticket_id: Optional[str] = None


# ============================================
# Readiness declaration
# ============================================

def _healthy() -> bool:
    return True


def _ignore(*args) -> None:
    return None


class ProcessParameters(BaseModel):
    """Everything the agent needs to know when this process declares readiness.

    Fields
    ------
    port : int
        Port players connect to.
    log_paths_to_upload : List[str]
        Files the platform uploads when the process ends.
    on_health_check : Callable[[], bool]
        Polled on every heartbeat. Exceptions count as unhealthy.
    on_start_game_session : Callable[[GameSession], None]
        Called when the agent assigns a session. Call
        ``activate_game_session()`` once the game is ready for players.
    on_update_game_session : Callable[[UpdateGameSession], None]
        Called when matchmaking data of the bound session changes.
    on_process_terminate : Callable[[], None]
        Called when the platform wants this process to shut down.

    Callbacks run on the client's worker pool, never on the transport thread.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    port: int = Field(default=0, ge=0, le=65535)
    log_paths_to_upload: List[str] = Field(default_factory=list)
    on_health_check: Callable[[], bool] = _healthy
    on_start_game_session: Callable[[GameSession], None] = _ignore
    on_update_game_session: Callable[[UpdateGameSession], None] = _ignore
    on_process_terminate: Callable[[], None] = _ignore

    def __repr__(self) -> str:
        return f"ProcessParameters(port={self.port}, log_paths_to_upload={self.log_paths_to_upload})"


# ============================================
# Player sessions
# ============================================

class PlayerSession(BaseModel):
    model_config = ConfigDict(frozen=True)

    player_session_id: Optional[str] = None
    player_id: Optional[str] = None
    game_session_id: Optional[str] = None
    fleet_id: Optional[str] = None
    ip_address: Optional[str] = None
    dns_name: Optional[str] = None
    port: int = 0
    status: Optional[str] = None
    player_data: Optional[str] = None
    creation_time: Optional[datetime] = None
    termination_time: Optional[datetime] = None


class DescribePlayerSessionsRequest(BaseModel):
    """Search criteria for player sessions.

    By default all player sessions are returned, including those of other
    game sessions. ``limit`` is capped at 1024 when sent.
    """

    game_session_id: Optional[str] = None
    player_id: Optional[str] = None
    player_session_id: Optional[str] = None
    player_session_status_filter: Optional[PlayerSessionStatus] = None
    next_token: Optional[str] = None
    limit: Optional[int] = Field(default=None, gt=0)


class DescribePlayerSessionsResult(BaseModel):
    player_sessions: List[PlayerSession] = Field(default_factory=list)
    next_token: Optional[str] = None


# ============================================
# Matchmaking backfill
# ============================================

class AttributeValue(BaseModel):
    """A matchmaking attribute. At most one of the value fields may be set."""

    s: Optional[str] = None
    n: Optional[float] = None
    sl: Optional[List[str]] = None
    sdm: Optional[Dict[str, float]] = None

    @model_validator(mode="after")
    def check_single_value(self) -> "AttributeValue":
        set_fields = [name for name in ("s", "n", "sl", "sdm") if getattr(self, name) is not None]
        if len(set_fields) > 1:
            raise ValueError(f"only one attribute value may be set, got {', '.join(set_fields)}")
        return self


class Player(BaseModel):
    player_id: str = Field(min_length=1)
    team: Optional[str] = None
    player_attributes: Dict[str, AttributeValue] = Field(default_factory=dict)
    latency_in_ms: Dict[str, int] = Field(default_factory=dict)


class StartMatchBackfillRequest(BaseModel):
    """Ask the matchmaker for more players for a running session.

    ``configuration_name`` is the matchmaking configuration ARN and is
    required; ``ticket_id`` is generated by the agent when omitted.
    """

    configuration_name: str = Field(min_length=1)
    game_session_arn: str = Field(min_length=1)
    ticket_id: Optional[str] = None
    players: List[Player] = Field(default_factory=list)


class StartMatchBackfillResult(BaseModel):
    ticket_id: Optional[str] = None


class StopMatchBackfillRequest(BaseModel):
    ticket_id: str = Field(min_length=1)
    configuration_name: str = Field(min_length=1)
    game_session_arn: str = Field(min_length=1)


class GetInstanceCertificateResult(BaseModel):
    certificate_path: Optional[str] = None
    certificate_chain_path: Optional[str] = None
    private_key_path: Optional[str] = None
    host_name: Optional[str] = None
