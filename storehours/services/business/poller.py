"""
Periodic status refresh.
Owns the timer that keeps a displayed status fresh; the evaluator itself
never waits or schedules anything.
"""
import logging
import threading
from datetime import datetime, timezone
from typing import Callable, Optional

from storehours.core.config import settings
from .hours import Status, evaluate_status
from .store import ScheduleSnapshot

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class StatusPoller:
    """re-evaluates business hours every `interval_seconds` on a background thread."""

    def __init__(
        self,
        loader: Callable[[], Optional[ScheduleSnapshot]],
        on_status: Callable[[Status], None],
        interval_seconds: Optional[float] = None,
        clock: Callable[[], datetime] = _utcnow,
        name: str = "StatusPoller",
    ):
        self.loader = loader
        self.on_status = on_status
        self.interval_seconds = interval_seconds if interval_seconds is not None else settings.STATUS_POLL_INTERVAL_SECONDS
        self.clock = clock
        self.name = name
        self.last_status: Optional[Status] = None

        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def poll_once(self) -> Optional[Status]:
        """load a fresh snapshot, evaluate it and publish the result."""
        try:
            snapshot = self.loader()
        except Exception as e:
            logger.error(f"Failed to load schedule: {e}")
            return None

        if snapshot is None:
            logger.warning("No schedule available, skipping evaluation")
            return None

        status = evaluate_status(self.clock(), snapshot.timezone, snapshot.weekly, snapshot.overrides)
        self.last_status = status

        try:
            self.on_status(status)
        except Exception as e:
            logger.error(f"Status callback failed: {e}")
        return status

    def start(self) -> None:
        if self.running:
            logger.warning("Status poller already running")
            return

        logger.info(f"Starting status poller every {self.interval_seconds} seconds")
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run, daemon=True, name=self.name)
        self._thread.start()

    def stop(self, timeout: float = 5) -> None:
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout=timeout)
            self._thread = None
        logger.info("Status poller stopped")

    def _run(self) -> None:
        # first evaluation right away, then once per interval
        while not self._stop_event.is_set():
            self.poll_once()
            if self._stop_event.wait(self.interval_seconds):
                break
