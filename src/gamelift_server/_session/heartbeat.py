# Area: Session
"""
gamelift_server._session.heartbeat — Health report scheduling
=============================================================

While the process is ready, polls the user's health predicate and
reports the result to the agent on a fixed period. The first report
goes out as soon as the task starts.

At most one task exists at a time: starting a new one cancels the
previous one first.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

from .._sdk_config import HEALTH_CHECK_INTERVAL_SECONDS

logger = logging.getLogger("gamelift_server.heartbeat")

HealthCheck = Callable[[], bool]


def evaluate_health(health_check: HealthCheck) -> bool:
    """Run the predicate; an exception counts as unhealthy."""
    try:
        return bool(health_check())
    except Exception as e:
        logger.warning(f"Health check raised {type(e).__name__}: {e}; reporting unhealthy")
        return False


class _HeartbeatTask(threading.Thread):
    """One repeating health report loop."""

    def __init__(self, scheduler: "HeartbeatScheduler", health_check: HealthCheck, generation: int):
        super().__init__(name=f"gamelift-heartbeat-{generation}", daemon=True)
        self._scheduler = scheduler
        self._health_check = health_check
        self.stopped = threading.Event()

    def run(self) -> None:
        while not self.stopped.is_set():
            try:
                self._scheduler.report_once(self._health_check)
            except Exception:
                logger.exception(f"{self.name}: health report failed")
            if self.stopped.wait(self._scheduler.interval):
                break

    def cancel(self) -> None:
        self.stopped.set()


class HeartbeatScheduler:
    """
    Owns the single repeating health report task.

    Args:
        send_report: Called with the health flag; sends ReportHealth
        is_ready: Reports are only sent while this returns True
        interval: Seconds between reports
    """

    def __init__(
        self,
        send_report: Callable[[bool], None],
        is_ready: Callable[[], bool],
        interval: float = HEALTH_CHECK_INTERVAL_SECONDS,
    ):
        self.send_report = send_report
        self.is_ready = is_ready
        self.interval = interval
        self._task: Optional[_HeartbeatTask] = None
        self._generation = 0
        self._lock = threading.Lock()

    @property
    def active(self) -> bool:
        task = self._task
        return task is not None and not task.stopped.is_set()

    def start(self, health_check: HealthCheck) -> None:
        """Cancel any running task and arm a new one."""
        with self._lock:
            self._cancel_locked()
            self._generation += 1
            self._task = _HeartbeatTask(self, health_check, self._generation)
            self._task.start()
        logger.debug(f"Heartbeat armed (every {self.interval}s)")

    def cancel(self) -> None:
        with self._lock:
            self._cancel_locked()

    def _cancel_locked(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None
            logger.debug("Heartbeat cancelled")

    def report_once(self, health_check: HealthCheck) -> Optional[bool]:
        """
        Evaluate health and send one report if the process is ready.

        Returns:
            The reported health flag, or None when nothing was sent
        """
        if not self.is_ready():
            return None
        healthy = evaluate_health(health_check)
        self.send_report(healthy)
        return healthy
