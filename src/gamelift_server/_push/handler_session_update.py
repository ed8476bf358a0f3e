# Area: Push
"""
gamelift_server._push.handler_session_update — UpdateGameSession handler
========================================================================

Forwards matchmaking updates for the bound session to
``on_update_game_session``. Updates for any other session are
rejected and logged.
"""

import logging
from typing import Any

from .events import SessionUpdateEvent
from .handler_base import BasePushHandler
from .._agent.model_mapping import to_game_session
from .._shared.protocol_logger import get_protocol_logger
from ..models import UpdateGameSession, UpdateReason

logger = logging.getLogger("gamelift_server.push.session_update")


class SessionUpdateHandler(BasePushHandler):
    """Handler for UpdateGameSession pushes."""

    event_name = "UpdateGameSession"
    message_name = "UpdateGameSession"

    def decode(self, payload: Any) -> SessionUpdateEvent:
        fields = self.parse_payload(payload)
        return SessionUpdateEvent(update=UpdateGameSession(
            game_session=to_game_session(fields.get("gameSession", {})),
            update_reason=UpdateReason.parse(fields.get("updateReason")),
            backfill_ticket_id=fields.get("backfillTicketId"),
        ))

    def handle(self, event: SessionUpdateEvent) -> None:
        update = event.update
        incoming_id = update.game_session.game_session_id
        self.log_handling(f"{incoming_id}, reason={update.update_reason.value}")

        bound_id = self.session.game_session_id
        if bound_id is None or incoming_id != bound_id:
            logger.error(
                f"Received an update for game session {incoming_id} "
                f"but this process is bound to {bound_id}"
            )
            get_protocol_logger().log_error(f"update for foreign session {incoming_id}")
            return

        self.executor.submit(
            "on_update_game_session",
            self.parameters.on_update_game_session,
            update,
        )
