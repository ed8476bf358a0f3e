"""
gamelift_server.server — GameLiftServer client
===============================================

The object a game server process owns to take part in the hosting
platform's lifecycle. One instance per process; nothing is global.

Usage:

    from gamelift_server import GameLiftServer, ProcessParameters

    server = GameLiftServer()
    if not server.init_sdk():
        raise SystemExit("agent not reachable")

    server.process_ready(ProcessParameters(
        port=1337,
        on_start_game_session=lambda session: server.activate_game_session(),
        on_process_terminate=server.destroy,
    ))

Every command blocks until the agent acknowledges it or the command
timeout passes. Nothing is retried and a dropped connection is never
re-established automatically.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Optional, Union

from ._agent import AgentTransport, Correlator
from ._agent.model_mapping import (
    describe_request_fields,
    players_fields,
    to_player_session,
)
from ._push import (
    CallbackExecutor,
    ProcessTerminateHandler,
    PushDispatcher,
    PushRouter,
    SessionStartHandler,
    SessionUpdateHandler,
)
from ._sdk_config import (
    DEFAULT_CALLBACK_WORKERS,
    DEFAULT_COMMAND_TIMEOUT_SECONDS,
    DEFAULT_CONNECT_TIMEOUT_SECONDS,
    DESCRIBE_PLAYER_SESSIONS_MAX_LIMIT,
    HEALTH_CHECK_INTERVAL_SECONDS,
    SDK_VERSION,
    EndpointConfig,
)
from ._session import (
    HeartbeatScheduler,
    LifecycleEvent,
    ProcessState,
    ProcessStateMachine,
    SessionState,
)
from ._shared.logging_config import log_sdk_error
from ._shared.protocol_logger import get_protocol_logger
from .errors import GameLiftServerError, PreconditionViolationError
from .models import (
    DescribePlayerSessionsRequest,
    DescribePlayerSessionsResult,
    GameSession,
    GetInstanceCertificateResult,
    PlayerSessionCreationPolicy,
    ProcessParameters,
    StartMatchBackfillRequest,
    StartMatchBackfillResult,
    StopMatchBackfillRequest,
)

logger = logging.getLogger("gamelift_server.server")


class GameLiftServer:
    """
    Client for the local GameLift agent.

    Parameters
    ----------
    config : EndpointConfig, optional
        Agent endpoint and process identity. Defaults to 127.0.0.1:5757
        and the current pid.
    transport : AgentTransport, optional
        Injected transport; built from ``config`` when omitted.
    command_timeout : float
        Seconds each command waits for its acknowledgement.
    connect_timeout : float
        Seconds ``init_sdk()`` waits for the handshake.
    callback_workers : int
        Size of the pool user callbacks run on.
    health_check_interval : float
        Seconds between health reports.
    """

    def __init__(
        self,
        config: Optional[EndpointConfig] = None,
        transport: Optional[AgentTransport] = None,
        command_timeout: float = DEFAULT_COMMAND_TIMEOUT_SECONDS,
        connect_timeout: float = DEFAULT_CONNECT_TIMEOUT_SECONDS,
        callback_workers: int = DEFAULT_CALLBACK_WORKERS,
        health_check_interval: float = HEALTH_CHECK_INTERVAL_SECONDS,
    ):
        self.config = config or EndpointConfig()
        self.connect_timeout = connect_timeout

        self._transport = transport or AgentTransport(self.config)
        self._state_machine = ProcessStateMachine()
        self._session = SessionState()
        self._correlator = Correlator(self._transport, timeout=command_timeout)
        self._executor = CallbackExecutor(max_workers=callback_workers)
        self._heartbeat = HeartbeatScheduler(
            send_report=self._send_health_report,
            is_ready=lambda: self._state_machine.is_ready,
            interval=health_check_interval,
        )
        self._destroy_lock = threading.Lock()

        router = PushRouter()
        for handler_cls in (SessionStartHandler, SessionUpdateHandler, ProcessTerminateHandler):
            router.register_handler(handler_cls(self._state_machine, self._session, self._executor))
        self._dispatcher = PushDispatcher(router, self._session, self._executor)
        self._dispatcher.attach(self._transport)
        self._transport.add_disconnect_listener(self._on_disconnect)

    # ══════════════════════════════════════════════════════════════
    # CONNECTION
    # ══════════════════════════════════════════════════════════════

    @property
    def state(self) -> ProcessState:
        return self._state_machine.current_state

    def get_sdk_version(self) -> str:
        return SDK_VERSION

    def init_sdk(self) -> bool:
        """
        Connect to the agent.

        Returns:
            True when connected (or already connected), False when the
            agent could not be reached or the client was destroyed
        """
        if self.state is ProcessState.DESTROYED:
            logger.warning("init_sdk() called after destroy()")
            return False
        if self._state_machine.is_connected:
            return True

        if not self._transport.connect(self.connect_timeout):
            return False

        with self._state_machine.lock:
            if not self._state_machine.can_transition(LifecycleEvent.CONNECT):
                return self._state_machine.is_connected
            self._state_machine.transition(LifecycleEvent.CONNECT)
        self._dispatcher.start()
        return True

    # ══════════════════════════════════════════════════════════════
    # PROCESS LIFECYCLE
    # ══════════════════════════════════════════════════════════════

    def process_ready(self, parameters: ProcessParameters) -> None:
        """
        Declare this process ready to host sessions.

        Replaces any earlier declaration and restarts health reporting.

        Raises:
            ValueError: If parameters is None
            PreconditionViolationError: If not connected
            AgentTimeoutError, ProtocolFailureError: If the agent does not accept it
        """
        if parameters is None:
            raise ValueError("process parameters are required")
        self._state_machine.require_connected("process_ready")

        self._heartbeat.cancel()
        # Staged before sending: the agent may push a session right after its ack
        with self._state_machine.lock:
            was_ready = self._state_machine.is_ready
            previous = self._session.set_parameters(parameters)
            if self._state_machine.can_transition(LifecycleEvent.PROCESS_READY):
                self._state_machine.transition(LifecycleEvent.PROCESS_READY)
        try:
            self._correlator.send("ProcessReady", {
                "port": parameters.port,
                "logPathsToUpload": list(parameters.log_paths_to_upload),
            })
        except GameLiftServerError:
            self._unstage_ready(parameters, previous, was_ready)
            raise
        self._heartbeat.start(parameters.on_health_check)

    def process_ending(self) -> None:
        """Tell the agent this process is about to exit."""
        self._state_machine.require_connected("process_ending")
        self._correlator.send("ProcessEnding")

    def get_termination_time(self) -> int:
        """Scheduled termination in epoch seconds, 0 if none."""
        return self._session.termination_time

    # ══════════════════════════════════════════════════════════════
    # GAME SESSION
    # ══════════════════════════════════════════════════════════════

    def get_game_session_id(self) -> Optional[str]:
        return self._session.game_session_id

    def get_game_session(self) -> Optional[GameSession]:
        return self._session.game_session

    def activate_game_session(self) -> None:
        """Report that the bound session is ready to accept players."""
        self._state_machine.require_session("activate_game_session")
        self._correlator.send("GameSessionActivate", {
            "gameSessionId": self._session.game_session_id,
        })
        with self._state_machine.lock:
            if self._state_machine.can_transition(LifecycleEvent.ACTIVATE):
                self._state_machine.transition(LifecycleEvent.ACTIVATE)
                self._session.mark_activated()

    def terminate_game_session(self) -> None:
        """End the bound session; the process stays ready for the next one."""
        self._state_machine.require_session("terminate_game_session")
        game_session_id = self._session.game_session_id
        self._correlator.send("GameSessionTerminate", {"gameSessionId": game_session_id})

        with self._state_machine.lock:
            # A newer session may have been bound while the command was in flight
            if self._session.game_session_id != game_session_id:
                return
            self._session.clear_session()
            if self._state_machine.can_transition(LifecycleEvent.TERMINATE):
                self._state_machine.transition(LifecycleEvent.TERMINATE)
        get_protocol_logger().set_game_session_id(None)

    # ══════════════════════════════════════════════════════════════
    # PLAYER SESSIONS
    # ══════════════════════════════════════════════════════════════

    def update_player_session_creation_policy(
        self, policy: Union[PlayerSessionCreationPolicy, str]
    ) -> None:
        """
        Raises:
            ValueError: If policy is not ACCEPT_ALL or DENY_ALL
        """
        policy = PlayerSessionCreationPolicy(policy)
        self._state_machine.require_session("update_player_session_creation_policy")
        self._correlator.send("UpdatePlayerSessionCreationPolicy", {
            "gameSessionId": self._session.game_session_id,
            "newPlayerSessionCreationPolicy": policy.value,
        })

    def accept_player_session(self, player_session_id: str) -> None:
        """Validate a player's session id on connect; requires an activated session."""
        _require_id(player_session_id, "player_session_id")
        self._state_machine.require_session("accept_player_session")
        if not self._session.activated:
            raise PreconditionViolationError(
                operation="accept_player_session",
                state=self.state.value,
                reason="game session has not been activated",
            )
        self._correlator.send("AcceptPlayerSession", {
            "gameSessionId": self._session.game_session_id,
            "playerSessionId": player_session_id,
        })

    def remove_player_session(self, player_session_id: str) -> None:
        """Report that a player left; frees the slot."""
        _require_id(player_session_id, "player_session_id")
        self._state_machine.require_session("remove_player_session")
        self._correlator.send("RemovePlayerSession", {
            "gameSessionId": self._session.game_session_id,
            "playerSessionId": player_session_id,
        })

    def describe_player_sessions(
        self, request: DescribePlayerSessionsRequest
    ) -> DescribePlayerSessionsResult:
        """
        Look up player sessions.

        ``request.limit`` is capped at 1024.
        """
        self._state_machine.require_connected("describe_player_sessions")
        response = self._correlator.send(
            "DescribePlayerSessionsRequest",
            describe_request_fields(request, DESCRIBE_PLAYER_SESSIONS_MAX_LIMIT),
            response_type="DescribePlayerSessionsResponse",
        )
        return DescribePlayerSessionsResult(
            player_sessions=[to_player_session(p) for p in response.get("playerSessions", [])],
            next_token=response.get("nextToken"),
        )

    # ══════════════════════════════════════════════════════════════
    # MATCHMAKING
    # ══════════════════════════════════════════════════════════════

    def start_match_backfill(self, request: StartMatchBackfillRequest) -> StartMatchBackfillResult:
        """Request more players; returns the backfill ticket id."""
        self._state_machine.require_connected("start_match_backfill")
        response = self._correlator.send(
            "BackfillMatchmakingRequest",
            {
                "ticketId": request.ticket_id,
                "gameSessionArn": request.game_session_arn,
                "matchmakingConfigurationArn": request.configuration_name,
                "players": players_fields(request.players),
            },
            response_type="BackfillMatchmakingResponse",
        )
        return StartMatchBackfillResult(ticket_id=response.get("ticketId", request.ticket_id))

    def stop_match_backfill(self, request: StopMatchBackfillRequest) -> None:
        self._state_machine.require_connected("stop_match_backfill")
        self._correlator.send("StopMatchmakingRequest", {
            "ticketId": request.ticket_id,
            "gameSessionArn": request.game_session_arn,
            "matchmakingConfigurationArn": request.configuration_name,
        })

    # ══════════════════════════════════════════════════════════════
    # INSTANCE
    # ══════════════════════════════════════════════════════════════

    def get_instance_certificate(self) -> GetInstanceCertificateResult:
        """Paths of the TLS certificate the fleet generated for this instance."""
        self._state_machine.require_connected("get_instance_certificate")
        response = self._correlator.send(
            "GetInstanceCertificate",
            response_type="GetInstanceCertificateResponse",
        )
        return GetInstanceCertificateResult(
            certificate_path=response.get("certificatePath"),
            certificate_chain_path=response.get("certificateChainPath"),
            private_key_path=response.get("privateKeyPath"),
            host_name=response.get("hostName"),
        )

    # ══════════════════════════════════════════════════════════════
    # TEARDOWN
    # ══════════════════════════════════════════════════════════════

    def destroy(self) -> None:
        """
        Shut the client down. Safe to call more than once.

        Steps, each attempted even if an earlier one fails:
        1. Terminate the bound session and send ProcessEnding (best effort)
        2. Cancel health reporting
        3. Close the connection and stop push dispatch
        4. Stamp the termination time unless the agent already set one
        5. Enter DESTROYED
        """
        with self._destroy_lock:
            if self.state is ProcessState.DESTROYED:
                return
            logger.info("Destroying GameLiftServer")

            self._run_step("notify agent", self._notify_ending)
            self._run_step("cancel heartbeat", self._heartbeat.cancel)
            self._run_step("close transport", self._transport.close)
            self._run_step("stop dispatcher", self._dispatcher.stop)
            self._run_step(
                "stamp termination time",
                lambda: self._session.set_termination_time(int(time.time()), keep_existing=True),
            )
            with self._state_machine.lock:
                self._state_machine.transition(LifecycleEvent.DESTROY)

    def __enter__(self) -> "GameLiftServer":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.destroy()
        return False

    # ══════════════════════════════════════════════════════════════
    # INTERNALS
    # ══════════════════════════════════════════════════════════════

    def _notify_ending(self) -> None:
        if self._state_machine.current_state is ProcessState.SESSION_BOUND:
            try:
                self.terminate_game_session()
            except GameLiftServerError as e:
                log_sdk_error(e, level=logging.WARNING)
        if self._state_machine.is_connected:
            try:
                self.process_ending()
            except GameLiftServerError as e:
                log_sdk_error(e, level=logging.WARNING)

    def _unstage_ready(
        self,
        staged: ProcessParameters,
        previous: Optional[ProcessParameters],
        was_ready: bool,
    ) -> None:
        """Undo a readiness declaration the agent did not accept."""
        with self._state_machine.lock:
            state = self._state_machine.current_state
            if not was_ready and state is ProcessState.SESSION_BOUND:
                logger.warning("ProcessReady failed after a session was bound; keeping its parameters")
                return
            if self._session.process_parameters is staged:
                self._session.set_parameters(previous)
            if not was_ready and state is ProcessState.READY:
                self._state_machine.transition(LifecycleEvent.READY_REJECTED)
        if was_ready and previous is not None and self._state_machine.is_ready:
            self._heartbeat.start(previous.on_health_check)

    def _run_step(self, name: str, step: Callable[[], object]) -> None:
        try:
            step()
        except Exception:
            logger.exception(f"destroy: '{name}' failed")

    def _send_health_report(self, healthy: bool) -> None:
        self._correlator.send_nowait("ReportHealth", {"healthStatus": healthy})

    def _on_disconnect(self) -> None:
        with self._state_machine.lock:
            if not self._state_machine.can_transition(LifecycleEvent.DISCONNECT):
                return
            self._state_machine.transition(LifecycleEvent.DISCONNECT)
        self._heartbeat.cancel()


def _require_id(value: Optional[str], name: str) -> None:
    if not value:
        raise ValueError(f"{name} is required")
