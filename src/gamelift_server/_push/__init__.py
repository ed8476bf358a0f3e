# Area: Push
"""
Push layer - agent-initiated notifications.

This package handles:
- Decoding StartGameSession, UpdateGameSession and TerminateProcess
- Applying them to the session state off the transport thread
- Running user callbacks on the worker pool
"""

from .events import (
    ProcessTerminateEvent,
    PushEvent,
    SessionStartEvent,
    SessionUpdateEvent,
)
from .callback_executor import CallbackExecutor, execute_callback
from .handler_base import BasePushHandler
from .handler_session_start import SessionStartHandler
from .handler_session_update import SessionUpdateHandler
from .handler_process_terminate import ProcessTerminateHandler
from .router import PushRouter
from .dispatcher import PushDispatcher

__all__ = [
    "ProcessTerminateEvent",
    "PushEvent",
    "SessionStartEvent",
    "SessionUpdateEvent",
    "CallbackExecutor",
    "execute_callback",
    "BasePushHandler",
    "SessionStartHandler",
    "SessionUpdateHandler",
    "ProcessTerminateHandler",
    "PushRouter",
    "PushDispatcher",
]
