# Area: Push
"""
gamelift_server._push.callback_executor — User callback execution
=================================================================

Runs user callbacks on a bounded, long-lived worker pool so a slow
callback never stalls the transport or the dispatch loop. Every call
is framed by CALLBACK CALL/RESPONSE protocol lines; exceptions are
logged and do not propagate.

No per-callback deadline is enforced: callbacks may legitimately call
back into the client and block on the agent.
"""

from __future__ import annotations
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable, Optional
import logging

from .._sdk_config import DEFAULT_CALLBACK_WORKERS
from .._shared.protocol_logger import get_protocol_logger

logger = logging.getLogger("gamelift_server.executor")


def execute_callback(callback_fn: Callable[..., Any], callback_name: str, *args) -> Any:
    """Invoke one callback with logging; exceptions are logged and swallowed."""
    logger.debug(f"[CALLBACK] Executing {callback_name}")
    protocol_logger = get_protocol_logger()
    protocol_logger.log_callback_call(callback_name)
    try:
        result = callback_fn(*args)
    except Exception:
        logger.exception(f"[CALLBACK] {callback_name} raised")
        protocol_logger.log_error(f"callback {callback_name} raised")
        return None
    logger.debug(f"[CALLBACK] {callback_name} completed successfully")
    protocol_logger.log_callback_response(callback_name)
    return result


class CallbackExecutor:
    """Owns the worker pool that user callbacks run on."""

    def __init__(self, max_workers: int = DEFAULT_CALLBACK_WORKERS):
        self._pool = ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix="gamelift-callback",
        )
        self._closed = False

    def submit(self, callback_name: str, callback_fn: Callable[..., Any], *args) -> Optional[Future]:
        """
        Schedule a callback.

        Returns:
            The future, or None once the executor is shut down
        """
        if self._closed:
            logger.warning(f"Executor shut down; dropping {callback_name}")
            return None
        try:
            return self._pool.submit(execute_callback, callback_fn, callback_name, *args)
        except RuntimeError:
            logger.warning(f"Executor shut down; dropping {callback_name}")
            return None

    def shutdown(self, wait: bool = False) -> None:
        self._closed = True
        self._pool.shutdown(wait=wait)
