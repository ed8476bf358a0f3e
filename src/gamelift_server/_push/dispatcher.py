# Area: Push
"""
gamelift_server._push.dispatcher — Push dispatch loop
=====================================================

Receives agent pushes on the transport thread, decodes and acks them
there, and hands the typed events to a single dispatch thread.

Transport thread (never blocks on user code):
    raw payload -> handler.decode() -> queue -> ack True
    no readiness declared, or malformed payload -> ack False

Dispatch thread:
    queue -> router.route(event) -> state change + callback submitted
    to the CallbackExecutor

A failure while handling one event is logged and the loop moves on.
"""

from __future__ import annotations

import logging
import queue
import threading
from functools import partial
from typing import Any, Optional

from .callback_executor import CallbackExecutor
from .router import PushRouter
from .._session.session_state import SessionState
from .._shared.logging_config import log_sdk_error
from .._shared.protocol_logger import get_protocol_logger
from ..errors import DecodeFailureError

logger = logging.getLogger("gamelift_server.dispatcher")

_STOP = object()


class PushDispatcher:
    """Decode-on-receive, handle-on-loop push pipeline."""

    def __init__(self, router: PushRouter, session: SessionState, executor: CallbackExecutor):
        self.router = router
        self.session = session
        self.executor = executor
        self._queue: "queue.Queue[Any]" = queue.Queue()
        self._thread: Optional[threading.Thread] = None

    def attach(self, transport) -> None:
        """Subscribe every registered push on the transport."""
        for event_name in self.router.event_names:
            transport.on(event_name, partial(self.receive, event_name))

    def start(self) -> None:
        if self._thread is not None and self._thread.is_alive():
            return
        self._thread = threading.Thread(
            target=self._run, name="gamelift-dispatch", daemon=True
        )
        self._thread.start()

    def stop(self, timeout: float = 1.0) -> None:
        """Stop the loop and the callback pool; pending events are dropped."""
        thread = self._thread
        if thread is not None:
            self._queue.put(_STOP)
            if thread is not threading.current_thread():
                thread.join(timeout)
            self._thread = None
        self.executor.shutdown(wait=False)

    def wait_idle(self) -> None:
        """Block until every queued event has been handled."""
        self._queue.join()

    def receive(self, event_name: str, *args) -> bool:
        """
        Transport-thread entry point; the return value is the ack.
        """
        get_protocol_logger().log_received(event_name)

        if self.session.process_parameters is None:
            logger.warning(f"Rejecting {event_name}: process_ready() has not been called")
            return False

        handler = self.router.get_handler(event_name)
        if handler is None:
            logger.warning(f"No handler for push: {event_name}")
            return False

        payload = args[0] if args else None
        try:
            event = handler.decode(payload)
        except DecodeFailureError as e:
            log_sdk_error(e)
            return False

        self._queue.put(event)
        return True

    def _run(self) -> None:
        while True:
            event = self._queue.get()
            try:
                if event is _STOP:
                    return
                self.router.route(event)
            except Exception:
                logger.exception(f"Failed to handle {getattr(event, 'event_name', event)}")
            finally:
                self._queue.task_done()
