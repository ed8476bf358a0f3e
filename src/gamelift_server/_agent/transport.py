# Area: Agent
"""
gamelift_server._agent.transport — Socket.IO connection to the agent
=====================================================================

Owns one full-duplex, non-reconnecting connection to the local agent.
Exposes a bounded-wait connect, raw send-with-ack and raw event
subscription. Everything above this module talks to the agent only
through ``AgentTransport``.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, List, Optional

import socketio
from socketio import exceptions as sio_exceptions

from .._sdk_config import DEFAULT_CONNECT_TIMEOUT_SECONDS, EndpointConfig
from ..errors import PreconditionViolationError

logger = logging.getLogger("gamelift_server.transport")

AckCallback = Callable[..., None]


class AgentTransport:
    """Socket.IO client bound to a single agent endpoint.

    The connection is attempted at most once per ``connect()`` call and is
    never re-established automatically. Frame writes are serialized so
    concurrent callers cannot interleave.
    """

    def __init__(self, config: EndpointConfig, client: Optional[socketio.Client] = None):
        self.config = config
        self._sio = client or socketio.Client(
            reconnection=False,
            logger=False,
            engineio_logger=False,
        )
        self._write_lock = threading.Lock()
        self._closed = False
        self._disconnect_listeners: List[Callable[[], None]] = []

        self._sio.on("connect", self._on_connect)
        self._sio.on("disconnect", self._on_disconnect)

    @property
    def connected(self) -> bool:
        return not self._closed and bool(self._sio.connected)

    def connect(self, timeout: float = DEFAULT_CONNECT_TIMEOUT_SECONDS) -> bool:
        """
        Connect to the agent once.

        Args:
            timeout: Seconds to wait for the handshake

        Returns:
            True when connected, False on refusal or timeout
        """
        if self._closed:
            logger.warning("Transport already closed; refusing to connect")
            return False
        if self._sio.connected:
            return True

        logger.info(f"Connecting to agent at {self.config.host}:{self.config.port}")
        try:
            self._sio.connect(
                self.config.url,
                transports=["websocket"],
                wait_timeout=timeout,
            )
        except sio_exceptions.ConnectionError as e:
            logger.error(f"Agent connection failed: {e}")
            return False
        return bool(self._sio.connected)

    def send(self, event_name: str, payload: Any, on_ack: Optional[AckCallback] = None) -> None:
        """
        Write one frame with an optional acknowledgement callback.

        Raises:
            PreconditionViolationError: If the connection is not open or drops
                during the write
        """
        with self._write_lock:
            if not self.connected:
                raise PreconditionViolationError(
                    operation=f"send {event_name}",
                    state="DISCONNECTED",
                    reason="agent connection is not open",
                )
            try:
                self._sio.emit(event_name, payload, callback=on_ack)
            except sio_exceptions.SocketIOError as e:
                raise PreconditionViolationError(
                    operation=f"send {event_name}",
                    state="DISCONNECTED",
                    reason=f"agent connection dropped: {e}",
                ) from e

    def on(self, event_name: str, handler: Callable[..., Any]) -> None:
        """Subscribe to a raw event; the handler's return value is the ack."""
        self._sio.on(event_name, handler)

    def add_disconnect_listener(self, listener: Callable[[], None]) -> None:
        """Register a function called when the connection drops."""
        self._disconnect_listeners.append(listener)

    def close(self) -> None:
        """Disconnect permanently."""
        self._closed = True
        if self._sio.connected:
            self._sio.disconnect()

    def _on_connect(self) -> None:
        logger.info("Agent connection established")

    def _on_disconnect(self, *args) -> None:
        logger.warning("Agent connection lost")
        for listener in self._disconnect_listeners:
            listener()
