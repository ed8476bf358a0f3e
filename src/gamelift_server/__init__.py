"""
gamelift_server — GameLift Server SDK
======================================

Lets a game server process take part in the GameLift hosting lifecycle
by talking to the agent that runs next to it.

Quick Start:
    from gamelift_server import GameLiftServer, ProcessParameters

    server = GameLiftServer()
    server.init_sdk()
    server.process_ready(ProcessParameters(
        port=1337,
        on_start_game_session=lambda session: server.activate_game_session(),
    ))

Demo:
    python -m gamelift_server --protocol-log

Logging is not configured on import; call ``setup_logging()`` to get
colored terminal output and a JSON log file.
"""

from .server import GameLiftServer
from .demo import DemoGameServer
from ._sdk_config import EndpointConfig, SDK_VERSION
from ._session.enums import ProcessState
from ._shared.logging_config import setup_logging
from ._shared.logging_formatters import enable_protocol_mode, disable_protocol_mode
from .errors import (
    GameLiftServerError,
    PreconditionViolationError,
    ProtocolFailureError,
    AgentTimeoutError,
    DecodeFailureError,
)
from .models import (
    # Sessions
    GameProperty,
    GameSession,
    GameSessionStatus,
    UpdateGameSession,
    UpdateReason,
    ProcessParameters,
    # Player sessions
    PlayerSession,
    PlayerSessionStatus,
    PlayerSessionCreationPolicy,
    DescribePlayerSessionsRequest,
    DescribePlayerSessionsResult,
    # Matchmaking
    AttributeValue,
    Player,
    StartMatchBackfillRequest,
    StartMatchBackfillResult,
    StopMatchBackfillRequest,
    # Instance
    GetInstanceCertificateResult,
)

__all__ = [
    # Main classes
    "GameLiftServer",
    "DemoGameServer",
    "EndpointConfig",
    "ProcessState",
    "SDK_VERSION",
    # Logging
    "setup_logging",
    "enable_protocol_mode",
    "disable_protocol_mode",
    # Errors
    "GameLiftServerError",
    "PreconditionViolationError",
    "ProtocolFailureError",
    "AgentTimeoutError",
    "DecodeFailureError",
    # Sessions
    "GameProperty",
    "GameSession",
    "GameSessionStatus",
    "UpdateGameSession",
    "UpdateReason",
    "ProcessParameters",
    # Player sessions
    "PlayerSession",
    "PlayerSessionStatus",
    "PlayerSessionCreationPolicy",
    "DescribePlayerSessionsRequest",
    "DescribePlayerSessionsResult",
    # Matchmaking
    "AttributeValue",
    "Player",
    "StartMatchBackfillRequest",
    "StartMatchBackfillResult",
    "StopMatchBackfillRequest",
    # Instance
    "GetInstanceCertificateResult",
]
__version__ = SDK_VERSION
__author__ = "Game Server SDK Team"
