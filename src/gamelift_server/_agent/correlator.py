# Area: Agent
"""
gamelift_server._agent.correlator — Command/acknowledgement correlation
========================================================================

Sends one command frame and blocks the caller until the agent's
acknowledgement for *that* frame arrives or the deadline passes.

Every call gets its own correlation id and its own ack callback, so
concurrent callers can never be resolved with each other's responses.
An ack that arrives after its caller gave up finds no pending entry
and is discarded.

Malformed payloads are fatal: an OK ack whose data does not decode into
the command's response message raises DecodeFailureError.
"""

from __future__ import annotations

import logging
import threading
import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from functools import partial
from typing import Any, Dict, Optional, Tuple

from . import codec
from .._sdk_config import DEFAULT_COMMAND_TIMEOUT_SECONDS
from .._shared.protocol_logger import get_protocol_logger
from ..errors import (
    AgentTimeoutError,
    DecodeFailureError,
    GameLiftServerError,
    ProtocolFailureError,
)

logger = logging.getLogger("gamelift_server.correlator")


class ResponseStatus(str, Enum):
    OK = "OK"
    ERROR_400 = "ERROR_400"
    ERROR_500 = "ERROR_500"
    UNRECOGNIZED = "UNRECOGNIZED"


@dataclass(frozen=True)
class AgentResponse:
    """Decoded acknowledgement envelope."""
    status: ResponseStatus
    response_data: Optional[str] = None
    error_message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status is ResponseStatus.OK


@dataclass
class PendingCall:
    """One outstanding command awaiting exactly one acknowledgement."""
    call_id: str
    command: str
    deadline: float
    done: threading.Event = field(default_factory=threading.Event)
    ack_args: Tuple[Any, ...] = ()


def decode_ack(args: Tuple[Any, ...]) -> AgentResponse:
    """
    Decode the arguments the agent passed to an ack callback.

    Accepted shapes:
        (True|False, data)            boolean success plus response data
        (GameLiftResponse,)           as dict, JSON text or protobuf bytes

    Raises:
        DecodeFailureError: If the ack matches none of the shapes
    """
    if not args or args[0] is None:
        raise DecodeFailureError("GameLiftResponse", args, "empty acknowledgement")

    first = args[0]
    if isinstance(first, bool) or (isinstance(first, str) and first.lower() in ("true", "false")):
        ok = first is True or (isinstance(first, str) and first.lower() == "true")
        data = args[1] if len(args) > 1 and args[1] is not None else None
        data = data if data is None or isinstance(data, str) else str(data)
        if ok:
            return AgentResponse(ResponseStatus.OK, response_data=data)
        return AgentResponse(ResponseStatus.ERROR_400, error_message=data)

    fields = codec.decode("GameLiftResponse", first)
    return AgentResponse(
        status=ResponseStatus(fields.get("status", ResponseStatus.OK.value)),
        response_data=fields.get("responseData"),
        error_message=fields.get("errorMessage"),
    )


class Correlator:
    """Blocking request/acknowledgement exchange over a transport."""

    def __init__(self, transport, timeout: float = DEFAULT_COMMAND_TIMEOUT_SECONDS):
        self.transport = transport
        self.timeout = timeout
        self._pending: Dict[str, PendingCall] = {}
        self._lock = threading.Lock()
        self._protocol_logger = get_protocol_logger()

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def send(
        self,
        command: str,
        fields: Optional[Dict[str, Any]] = None,
        response_type: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Send a command and wait for its acknowledgement.

        Args:
            command: Schema message name, e.g. "GameSessionActivate"
            fields: Message fields keyed by wire name
            response_type: Schema message the response data decodes into

        Returns:
            The decoded response fields, or {} when no response_type is given

        Raises:
            PreconditionViolationError: If the transport is not connected
            AgentTimeoutError: If no ack arrives within the timeout
            ProtocolFailureError: If the agent answers with a non-OK status
            DecodeFailureError: If the ack or its payload is malformed
        """
        payload = codec.encode(command, fields or {})
        call = PendingCall(
            call_id=uuid.uuid4().hex,
            command=command,
            deadline=time.monotonic() + self.timeout,
        )

        with self._lock:
            self._pending[call.call_id] = call
        try:
            self.transport.send(
                codec.full_name(command),
                payload,
                partial(self._resolve, call.call_id),
            )
            self._protocol_logger.log_sent(command, call.call_id)

            if not call.done.wait(self.timeout):
                raise AgentTimeoutError(command, self.timeout)
        finally:
            with self._lock:
                self._pending.pop(call.call_id, None)

        response = decode_ack(call.ack_args)
        self._protocol_logger.log_ack(command, response.status.value, call.call_id)
        if not response.ok:
            raise ProtocolFailureError(command, response.status.value, response.error_message)

        if response_type is None:
            return {}
        return codec.decode(response_type, response.response_data or "{}")

    def send_nowait(self, command: str, fields: Optional[Dict[str, Any]] = None) -> None:
        """
        Send a command without waiting; failures are logged, never raised.
        """
        try:
            payload = codec.encode(command, fields or {})
            self.transport.send(
                codec.full_name(command),
                payload,
                partial(self._log_unawaited_ack, command),
            )
            self._protocol_logger.log_sent(command)
        except GameLiftServerError as e:
            logger.warning(f"Could not deliver {command}: {e}")

    def _resolve(self, call_id: str, *args) -> None:
        """Ack callback for one call; runs on the transport thread."""
        with self._lock:
            call = self._pending.pop(call_id, None)
        if call is None:
            logger.debug(f"Discarding late acknowledgement for call {call_id}")
            return
        call.ack_args = args
        call.done.set()

    def _log_unawaited_ack(self, command: str, *args) -> None:
        try:
            response = decode_ack(args)
        except DecodeFailureError as e:
            logger.warning(f"Malformed acknowledgement for {command}: {e}")
            return
        self._protocol_logger.log_ack(command, response.status.value)
        if not response.ok:
            logger.warning(
                f"Agent rejected {command} with {response.status.value}: {response.error_message}"
            )
