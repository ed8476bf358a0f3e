# Area: CLI
"""
gamelift_server.cli — Command-line interface
=============================================

Runs the demo game server against a local agent.

Usage:
    python -m gamelift_server
    python -m gamelift_server --port 5757 --game-port 7777
    python -m gamelift_server --protocol-log

The endpoint can also be set with GAMELIFT_SDK_HOST, GAMELIFT_SDK_PORT
and GAMELIFT_SDK_PROCESS_ID (a .env file is honoured).
"""

import argparse
import logging
import sys
from typing import List, Optional

from ._sdk_config import EndpointConfig
from ._shared.logging_config import setup_logging
from ._shared.logging_formatters import enable_protocol_mode
from .demo import DemoGameServer
from .server import GameLiftServer


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="gamelift_server",
        description="GameLift server SDK - run the demo game server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m gamelift_server
  python -m gamelift_server --host 127.0.0.1 --port 5757 --game-port 7777
  GAMELIFT_SDK_PORT=5758 python -m gamelift_server --protocol-log
        """,
    )
    parser.add_argument("--host", type=str, help="Agent host (default: 127.0.0.1)")
    parser.add_argument("--port", type=int, help="Agent port (default: 5757)")
    parser.add_argument(
        "--game-port",
        type=int,
        default=1337,
        help="Port players connect to (default: 1337)",
    )
    parser.add_argument(
        "--log-file",
        type=str,
        default="logs/gamelift_server.log",
        help="JSON log file (default: logs/gamelift_server.log)",
    )
    parser.add_argument(
        "--protocol-log",
        action="store_true",
        help="Show only protocol frames and callbacks on the terminal",
    )
    parser.add_argument("--debug", action="store_true", help="Log at DEBUG level")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    args = parse_args(argv)

    setup_logging(args.log_file, level=logging.DEBUG if args.debug else logging.INFO)
    if args.protocol_log:
        enable_protocol_mode()

    try:
        config = EndpointConfig.from_env(host=args.host, port=args.port)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    demo = DemoGameServer(
        GameLiftServer(config=config),
        game_port=args.game_port,
        log_paths=[args.log_file],
    )
    return demo.run()
