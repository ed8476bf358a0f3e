# Area: Session
"""
Session layer - lifecycle bookkeeping for one server process.

This package handles:
- Lifecycle states, events and the transition table
- The bound game session record
- Periodic health reports
"""

from .enums import LifecycleEvent, ProcessState
from .state_machine import ProcessStateMachine, TRANSITIONS
from .session_state import SessionState
from .heartbeat import HeartbeatScheduler, evaluate_health

__all__ = [
    "LifecycleEvent",
    "ProcessState",
    "ProcessStateMachine",
    "TRANSITIONS",
    "SessionState",
    "HeartbeatScheduler",
    "evaluate_health",
]
