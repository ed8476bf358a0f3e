# Area: Push
"""
gamelift_server._push.handler_session_start — StartGameSession handler
======================================================================

Binds the pushed session to this process and hands the descriptor,
marked ACTIVATING, to ``on_start_game_session``.
"""

import logging
from typing import Any

from .events import SessionStartEvent
from .handler_base import BasePushHandler
from .._agent.model_mapping import to_game_session
from .._session.enums import LifecycleEvent
from .._shared.protocol_logger import get_protocol_logger
from ..errors import DecodeFailureError

logger = logging.getLogger("gamelift_server.push.session_start")


class SessionStartHandler(BasePushHandler):
    """Handler for StartGameSession pushes."""

    event_name = "StartGameSession"
    message_name = "ActivateGameSession"

    def decode(self, payload: Any) -> SessionStartEvent:
        fields = self.parse_payload(payload)
        if "gameSession" not in fields:
            raise DecodeFailureError(self.message_name, payload, "missing gameSession")
        game_session = to_game_session(fields["gameSession"])
        if not game_session.game_session_id:
            raise DecodeFailureError(self.message_name, payload, "missing gameSessionId")
        return SessionStartEvent(game_session=game_session)

    def handle(self, event: SessionStartEvent) -> None:
        self.log_handling(event.game_session.game_session_id)

        with self.state_machine.lock:
            if not self.state_machine.can_transition(LifecycleEvent.SESSION_START):
                logger.error(
                    f"Ignoring session {event.game_session.game_session_id}: "
                    f"process is {self.state_machine.current_state.value}"
                )
                return
            bound = self.session.bind(event.game_session)
            self.state_machine.transition(LifecycleEvent.SESSION_START)

        get_protocol_logger().set_game_session_id(bound.game_session_id)
        self.executor.submit(
            "on_start_game_session",
            self.parameters.on_start_game_session,
            bound,
        )
