# Area: Push
"""
gamelift_server._push.handler_process_terminate — TerminateProcess handler
==========================================================================

Records when the platform will shut this process down and calls
``on_process_terminate``. A missing or unreadable termination time
falls back to now.
"""

import logging
import time
from typing import Any

from .events import ProcessTerminateEvent
from .handler_base import BasePushHandler
from ..errors import DecodeFailureError

logger = logging.getLogger("gamelift_server.push.process_terminate")


class ProcessTerminateHandler(BasePushHandler):
    """Handler for TerminateProcess pushes."""

    event_name = "TerminateProcess"
    message_name = "TerminateProcess"

    def decode(self, payload: Any) -> ProcessTerminateEvent:
        try:
            termination_time = int(self.parse_payload(payload).get("terminationTime", 0))
        except DecodeFailureError as e:
            logger.warning(f"Unreadable termination time, using now: {e.reason}")
            termination_time = 0
        return ProcessTerminateEvent(termination_time=termination_time or int(time.time()))

    def handle(self, event: ProcessTerminateEvent) -> None:
        self.log_handling(f"termination_time={event.termination_time}")
        self.session.set_termination_time(event.termination_time)
        self.executor.submit(
            "on_process_terminate",
            self.parameters.on_process_terminate,
        )
