# Area: Push
"""
gamelift_server._push.handler_base — Base Push Handler
======================================================

Abstract base class for agent push handlers.

A handler works in two halves:
- ``decode`` runs on the transport thread and turns the raw payload
  into a typed event (raising DecodeFailureError when it cannot)
- ``handle`` runs on the dispatch loop, applies the state change and
  schedules the user callback
"""

from __future__ import annotations
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from .events import PushEvent
from .callback_executor import CallbackExecutor
from .._agent import codec
from .._session.session_state import SessionState
from .._session.state_machine import ProcessStateMachine
from ..models import ProcessParameters

logger = logging.getLogger("gamelift_server.push")


class BasePushHandler(ABC):
    """
    Abstract base class for push handlers.

    Subclasses set ``event_name`` (the agent event) and ``message_name``
    (the schema message its payload decodes into).
    """

    event_name: str = ""
    message_name: str = ""

    def __init__(
        self,
        state_machine: ProcessStateMachine,
        session: SessionState,
        executor: CallbackExecutor,
    ):
        self.state_machine = state_machine
        self.session = session
        self.executor = executor

    @abstractmethod
    def decode(self, payload: Any) -> PushEvent:
        """
        Decode a raw push payload.

        Raises:
            DecodeFailureError: If the payload is malformed
        """
        pass

    @abstractmethod
    def handle(self, event: PushEvent) -> None:
        """Apply an event and schedule its callback."""
        pass

    def parse_payload(self, payload: Any) -> Dict[str, Any]:
        """Decode the payload against this handler's schema message."""
        return codec.decode(self.message_name, payload)

    @property
    def parameters(self) -> Optional[ProcessParameters]:
        return self.session.process_parameters

    def log_handling(self, detail: Optional[str] = None) -> None:
        if detail:
            logger.info(f"Handling {self.event_name} ({detail})")
        else:
            logger.info(f"Handling {self.event_name}")
