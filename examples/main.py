"""
main.py — Embed the GameLift server SDK in your game
====================================================

A skeleton game server showing where each SDK call goes. Replace the
``start_match`` / ``end_match`` bodies with your game.

    python main.py

The process will:
  1. Connect to the GameLift agent on this host
  2. Declare itself ready on GAME_PORT
  3. Activate every game session it is given
  4. End the session after MATCH_SECONDS and wait for the next one
  5. Shut down when GameLift asks it to

Press Ctrl+C to stop.
"""

import logging
import threading

from gamelift_server import (
    EndpointConfig,
    GameLiftServer,
    GameSession,
    ProcessParameters,
    UpdateGameSession,
    setup_logging,
)

GAME_PORT = 7777
MATCH_SECONDS = 60

logger = logging.getLogger("gamelift_server.example")

# ── Setup logging (colored terminal + logs/example.log as JSON) ──
setup_logging("logs/example.log")

server = GameLiftServer(config=EndpointConfig.from_env())
stopped = threading.Event()


def start_match(game_session: GameSession) -> None:
    logger.info(f"Starting match in {game_session.game_session_id} "
                f"for up to {game_session.maximum_player_session_count} players")
    server.activate_game_session()
    threading.Timer(MATCH_SECONDS, end_match).start()


def end_match() -> None:
    if server.get_game_session_id() is None:
        return
    logger.info("Match over")
    server.terminate_game_session()


def matchmaking_changed(update: UpdateGameSession) -> None:
    logger.info(f"Matchmaking update: {update.update_reason.value}")


def shutdown() -> None:
    logger.info(f"GameLift will stop this process at {server.get_termination_time()}")
    stopped.set()


if not server.init_sdk():
    raise SystemExit("GameLift agent is not running on this host")

server.process_ready(ProcessParameters(
    port=GAME_PORT,
    log_paths_to_upload=["logs/example.log"],
    on_start_game_session=start_match,
    on_update_game_session=matchmaking_changed,
    on_process_terminate=shutdown,
))

try:
    stopped.wait()
except KeyboardInterrupt:
    pass
finally:
    server.destroy()
