# Area: Session
"""
gamelift_server._session.state_machine — Process Lifecycle State Machine
========================================================================

Tracks where the process is in its lifecycle and decides which calls
are legal. Guards raise PreconditionViolationError before anything
reaches the transport.
"""

import logging
import threading
from typing import Iterable

from .enums import LifecycleEvent, ProcessState
from ..errors import PreconditionViolationError

logger = logging.getLogger("gamelift_server.state_machine")

_LIVE_STATES = (ProcessState.CONNECTED, ProcessState.READY, ProcessState.SESSION_BOUND)

# Valid state transitions: {current_state: {event: next_state}}
TRANSITIONS = {
    ProcessState.DISCONNECTED: {
        LifecycleEvent.CONNECT: ProcessState.CONNECTED,
        LifecycleEvent.DESTROY: ProcessState.DESTROYED,
    },
    ProcessState.CONNECTED: {
        LifecycleEvent.PROCESS_READY: ProcessState.READY,
        LifecycleEvent.DISCONNECT: ProcessState.DISCONNECTED,
        LifecycleEvent.DESTROY: ProcessState.DESTROYED,
    },
    ProcessState.READY: {
        LifecycleEvent.PROCESS_READY: ProcessState.READY,
        LifecycleEvent.READY_REJECTED: ProcessState.CONNECTED,
        LifecycleEvent.SESSION_START: ProcessState.SESSION_BOUND,
        LifecycleEvent.DISCONNECT: ProcessState.DISCONNECTED,
        LifecycleEvent.DESTROY: ProcessState.DESTROYED,
    },
    ProcessState.SESSION_BOUND: {
        LifecycleEvent.PROCESS_READY: ProcessState.SESSION_BOUND,
        LifecycleEvent.SESSION_START: ProcessState.SESSION_BOUND,
        LifecycleEvent.ACTIVATE: ProcessState.SESSION_BOUND,
        LifecycleEvent.TERMINATE: ProcessState.READY,
        LifecycleEvent.DISCONNECT: ProcessState.DISCONNECTED,
        LifecycleEvent.DESTROY: ProcessState.DESTROYED,
    },
    ProcessState.DESTROYED: {},
}


class ProcessStateMachine:
    """
    State machine for the process lifecycle.

    Transitions are serialized by an internal lock; reads of
    ``current_state`` are plain attribute reads.

    Attributes:
        current_state: The current lifecycle state
    """

    def __init__(self):
        """Initialize state machine in DISCONNECTED."""
        self.current_state = ProcessState.DISCONNECTED
        self._lock = threading.RLock()

    @property
    def lock(self) -> threading.RLock:
        """Held while a transition and its side effects must be atomic."""
        return self._lock

    @property
    def is_connected(self) -> bool:
        return self.current_state in _LIVE_STATES

    @property
    def is_ready(self) -> bool:
        return self.current_state in (ProcessState.READY, ProcessState.SESSION_BOUND)

    def can_transition(self, event: LifecycleEvent) -> bool:
        """
        Check if a transition is valid from current state.

        Args:
            event: The event to check

        Returns:
            True if the transition is valid, False otherwise
        """
        return event in TRANSITIONS.get(self.current_state, {})

    def transition(self, event: LifecycleEvent) -> ProcessState:
        """
        Execute a state transition.

        Args:
            event: The event triggering the transition

        Returns:
            The new state after transition

        Raises:
            ValueError: If the transition is not valid
        """
        with self._lock:
            if not self.can_transition(event):
                raise ValueError(
                    f"Invalid transition: {event.value} from {self.current_state.value}"
                )
            previous = self.current_state
            self.current_state = TRANSITIONS[previous][event]
        if previous is not self.current_state:
            logger.info(f"State {previous.value} -> {self.current_state.value} ({event.value})")
        return self.current_state

    def require(self, operation: str, allowed: Iterable[ProcessState]) -> None:
        """
        Guard an operation on the current state.

        Raises:
            PreconditionViolationError: If the current state is not allowed
        """
        allowed = tuple(allowed)
        state = self.current_state
        if state not in allowed:
            raise PreconditionViolationError(
                operation=operation,
                state=state.value,
                reason="requires " + " or ".join(s.value for s in allowed),
            )

    def require_connected(self, operation: str) -> None:
        self.require(operation, _LIVE_STATES)

    def require_session(self, operation: str) -> None:
        self.require(operation, (ProcessState.SESSION_BOUND,))
