# Area: Session
"""
gamelift_server._session.enums — Lifecycle States and Events
============================================================

Defines the states and events of the process lifecycle state machine.
"""

from enum import Enum


class ProcessState(Enum):
    """
    Lifecycle states of one server process.

    State transitions:
    DISCONNECTED -> CONNECTED (on CONNECT)
    CONNECTED -> READY (on PROCESS_READY)
    READY -> READY (on PROCESS_READY, parameters replaced)
    READY -> CONNECTED (on READY_REJECTED)
    READY -> SESSION_BOUND (on SESSION_START)
    SESSION_BOUND -> SESSION_BOUND (on SESSION_START, PROCESS_READY or ACTIVATE)
    SESSION_BOUND -> READY (on TERMINATE)
    CONNECTED / READY / SESSION_BOUND -> DISCONNECTED (on DISCONNECT)
    Any state except DESTROYED -> DESTROYED (on DESTROY)
    """
    DISCONNECTED = "DISCONNECTED"
    CONNECTED = "CONNECTED"
    READY = "READY"
    SESSION_BOUND = "SESSION_BOUND"
    DESTROYED = "DESTROYED"


class LifecycleEvent(Enum):
    """
    Events that trigger state transitions.

    Events are triggered by:
    - CONNECT: init_sdk() reached the agent
    - PROCESS_READY: process_ready() about to send ProcessReady
    - READY_REJECTED: a first ProcessReady was refused or timed out
    - SESSION_START: StartGameSession pushed by the agent
    - ACTIVATE: GameSessionActivate acknowledged
    - TERMINATE: GameSessionTerminate acknowledged
    - DISCONNECT: the agent connection dropped
    - DESTROY: destroy() called
    """
    CONNECT = "CONNECT"
    PROCESS_READY = "PROCESS_READY"
    READY_REJECTED = "READY_REJECTED"
    SESSION_START = "SESSION_START"
    ACTIVATE = "ACTIVATE"
    TERMINATE = "TERMINATE"
    DISCONNECT = "DISCONNECT"
    DESTROY = "DESTROY"
