# Area: Demo
"""
gamelift_server.demo — Demo game server
========================================

A minimal embedding that exercises the whole lifecycle: it declares
readiness, activates every session it is given, accepts and removes
players, and shuts down cleanly when the platform asks it to.

Usage:
    from gamelift_server import DemoGameServer, GameLiftServer

    demo = DemoGameServer(GameLiftServer(), game_port=1337)
    raise SystemExit(demo.run())
"""

import logging
import threading
from typing import Dict, List, Optional

from .errors import GameLiftServerError
from .models import (
    DescribePlayerSessionsRequest,
    GameSession,
    PlayerSessionStatus,
    ProcessParameters,
    UpdateGameSession,
)
from .server import GameLiftServer

logger = logging.getLogger("gamelift_server.demo")

DEFAULT_LOG_PATHS = ["logs/latest.log", "logs/gamelift_server.log"]


class DemoGameServer:
    """
    Ready-made game server used by ``python -m gamelift_server``.

    Args:
        server: The client to drive
        game_port: Port players would connect to
        log_paths: Files the platform uploads when the process ends
    """

    def __init__(
        self,
        server: GameLiftServer,
        game_port: int = 1337,
        log_paths: Optional[List[str]] = None,
    ):
        self.server = server
        self.game_port = game_port
        self.log_paths = list(log_paths) if log_paths is not None else list(DEFAULT_LOG_PATHS)
        self.shutdown_requested = threading.Event()
        self.healthy = True
        # player id -> accepted player session id
        self._players: Dict[str, str] = {}

    def parameters(self) -> ProcessParameters:
        return ProcessParameters(
            port=self.game_port,
            log_paths_to_upload=self.log_paths,
            on_health_check=lambda: self.healthy,
            on_start_game_session=self.on_game_start,
            on_update_game_session=self.on_game_update,
            on_process_terminate=self.on_shutdown,
        )

    def start(self) -> bool:
        """Connect and declare readiness; False when the agent is unreachable."""
        if not self.server.init_sdk():
            logger.error("Unable to reach the GameLift agent")
            return False
        self.server.process_ready(self.parameters())
        logger.info(f"Process ready on port {self.game_port}")
        return True

    def run(self, timeout: Optional[float] = None) -> int:
        """
        Start, then block until the platform asks the process to end.

        Returns:
            Process exit code
        """
        if not self.start():
            return 1
        try:
            self.shutdown_requested.wait(timeout)
        except KeyboardInterrupt:
            logger.info("Interrupted")
        finally:
            self.server.destroy()
        return 0

    # ── Callbacks ──────────────────────────────────────────────

    def on_game_start(self, game: GameSession) -> None:
        logger.info(
            f"Assigned game session {game.game_session_id} at "
            f"{game.ip_address}:{game.port} with {game.maximum_player_session_count} players"
        )
        self.server.activate_game_session()

    def on_game_update(self, update: UpdateGameSession) -> None:
        logger.info(
            f"Updated game session {update.game_session.game_session_id} from ticket "
            f"{update.backfill_ticket_id} due to {update.update_reason.value}"
        )

    def on_shutdown(self) -> None:
        logger.info(f"Received signal to shut down at {self.server.get_termination_time()}")
        self.shutdown_requested.set()

    # ── Players ────────────────────────────────────────────────

    def player_joined(self, player_id: str) -> Optional[str]:
        """
        Find the player's reserved session in the bound game and accept it.

        Returns:
            The accepted player session id, or None
        """
        game_session_id = self.server.get_game_session_id()
        if game_session_id is None:
            logger.warning(f"No game has been assigned to find a session for {player_id}")
            return None

        result = self.server.describe_player_sessions(DescribePlayerSessionsRequest(
            player_id=player_id,
            player_session_status_filter=PlayerSessionStatus.RESERVED,
            limit=5,
        ))
        for player_session in result.player_sessions:
            if player_session.game_session_id != game_session_id:
                continue
            self.server.accept_player_session(player_session.player_session_id)
            self._players[player_id] = player_session.player_session_id
            logger.info(f"Accepted player session {player_session.player_session_id} for {player_id}")
            return player_session.player_session_id

        logger.warning(f"Unable to find a session for {player_id}")
        return None

    def player_left(self, player_id: str) -> None:
        player_session_id = self._players.pop(player_id, None)
        if player_session_id is None:
            return
        try:
            self.server.remove_player_session(player_session_id)
        except GameLiftServerError as e:
            logger.warning(f"Could not remove player session {player_session_id}: {e}")
            return
        logger.info(f"Removed player session {player_session_id} for {player_id}")
