# Area: Tests
"""Shared fixtures: an in-memory stand-in for the agent."""

import json
import threading
import time
from typing import Any, Callable, Dict, List, Optional, Tuple

import pytest

from gamelift_server import EndpointConfig, GameLiftServer
from gamelift_server._agent import codec


OK_ACK = ({"status": "OK"},)


def ok_with(data: Dict[str, Any]) -> Tuple[Any, ...]:
    """Ack arguments carrying response data."""
    return ({"status": "OK", "responseData": json.dumps(data)},)


class FakeTransport:
    """
    Records outbound frames and plays the agent's side.

    By default every command is acked immediately with status OK.
    ``respond()`` sets a per-command ack and ``hold()`` keeps acks back so
    tests can deliver them late. ``push()`` delivers an agent event and
    ``after_ack()`` schedules one to follow an ack immediately.
    """

    def __init__(self, connect_result: bool = True):
        self.connect_result = connect_result
        self.connected = False
        self.closed = False
        self.frames: List[Tuple[str, bytes]] = []
        self.handlers: Dict[str, Callable[..., Any]] = {}
        self.held: List[Tuple[str, Callable[..., None]]] = []
        self._responses: Dict[str, Tuple[Any, ...]] = {}
        self._holding = set()
        self._after_ack: Dict[str, Callable[[], None]] = {}
        self._disconnect_listeners: List[Callable[[], None]] = []
        self._lock = threading.Lock()

    # ── AgentTransport interface ──

    def connect(self, timeout: float = 5.0) -> bool:
        if self.closed:
            return False
        self.connected = self.connect_result
        return self.connected

    def send(self, event_name: str, payload: Any, on_ack=None) -> None:
        from gamelift_server.errors import PreconditionViolationError

        if not self.connected:
            raise PreconditionViolationError(f"send {event_name}", "DISCONNECTED", "not open")
        command = event_name[len(codec.PACKAGE) + 1:]
        with self._lock:
            self.frames.append((command, payload))
            if command in self._holding:
                self.held.append((command, on_ack))
                return
            ack = self._responses.get(command, OK_ACK)
            after = self._after_ack.get(command)
        if on_ack is not None:
            on_ack(*ack)
        if after is not None:
            after()

    def on(self, event_name: str, handler: Callable[..., Any]) -> None:
        self.handlers[event_name] = handler

    def add_disconnect_listener(self, listener: Callable[[], None]) -> None:
        self._disconnect_listeners.append(listener)

    def close(self) -> None:
        was_connected = self.connected
        self.closed = True
        self.connected = False
        if was_connected:
            for listener in self._disconnect_listeners:
                listener()

    # ── Agent side ──

    def respond(self, command: str, *ack_args: Any) -> None:
        self._responses[command] = ack_args

    def after_ack(self, command: str, action: Callable[[], None]) -> None:
        """Run an agent action as soon as a command has been acked."""
        self._after_ack[command] = action

    def hold(self, command: str) -> None:
        self._holding.add(command)

    def release(self, *ack_args: Any) -> None:
        """Deliver the oldest held ack."""
        _, on_ack = self.held.pop(0)
        on_ack(*(ack_args or OK_ACK))

    def push(self, event_name: str, payload: Any) -> Any:
        """Deliver an agent event; returns the ack the client sent back."""
        return self.handlers[event_name](payload)

    def drop(self) -> None:
        """Simulate the agent going away."""
        self.connected = False
        for listener in self._disconnect_listeners:
            listener()

    # ── Inspection ──

    def commands(self, exclude: Tuple[str, ...] = ("ReportHealth",)) -> List[str]:
        with self._lock:
            return [name for name, _ in self.frames if name not in exclude]

    def count(self, command: str) -> int:
        with self._lock:
            return sum(1 for name, _ in self.frames if name == command)

    def last(self, command: str) -> Dict[str, Any]:
        """Decoded fields of the most recent frame for a command."""
        with self._lock:
            payload = next(p for name, p in reversed(self.frames) if name == command)
        return codec.decode(command, payload)


def session_payload(game_session_id: str = "gs-1", **extra: Any) -> str:
    game_session = {
        "gameSessionId": game_session_id,
        "fleetId": "fleet-1",
        "name": "arena",
        "maxPlayers": 8,
        "ipAddress": "10.0.0.5",
        "port": 7777,
    }
    game_session.update(extra)
    return json.dumps({"gameSession": game_session})


def update_payload(game_session_id: str, reason: str = "MATCHMAKING_DATA_UPDATED",
                   ticket_id: Optional[str] = "ticket-9") -> str:
    body: Dict[str, Any] = {
        "gameSession": {"gameSessionId": game_session_id},
        "updateReason": reason,
    }
    if ticket_id is not None:
        body["backfillTicketId"] = ticket_id
    return json.dumps(body)


@pytest.fixture
def fake_transport():
    return FakeTransport()


@pytest.fixture
def server(fake_transport):
    server = GameLiftServer(
        config=EndpointConfig(process_id="4242"),
        transport=fake_transport,
        command_timeout=0.2,
        health_check_interval=3600,
    )
    yield server
    server.destroy()


@pytest.fixture
def wait_until():
    """Poll a predicate until it holds or the timeout passes."""
    def _wait(predicate: Callable[[], bool], timeout: float = 2.0) -> bool:
        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            if predicate():
                return True
            time.sleep(0.01)
        return predicate()
    return _wait
