"""Debounced task store - coalesces rapid saves into one delayed write."""

import logging
import threading
from datetime import datetime, timedelta

from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.date import DateTrigger

from openmotion.core.tasks import Task
from openmotion.ports.task_store import TaskStore

logger = logging.getLogger(__name__)

SAVE_JOB_ID = "debounced_save"


class DebouncedTaskStore:
    """
    Timer-gated writer around another TaskStore.

    Implements TaskStore protocol. Every save() (re)starts a one-shot timer;
    when it fires, only the latest collection is written. load() sees
    pending state before it reaches disk.
    """

    def __init__(
        self,
        store: TaskStore,
        delay: float = 0.5,
        scheduler: BackgroundScheduler | None = None,
    ):
        self.store = store
        self.delay = delay
        self._scheduler = scheduler or BackgroundScheduler()
        self._lock = threading.Lock()
        self._write_lock = threading.Lock()
        self._pending: list[Task] | None = None

    @property
    def has_pending(self) -> bool:
        with self._lock:
            return self._pending is not None

    def load(self) -> list[Task]:
        with self._lock:
            if self._pending is not None:
                return list(self._pending)
        return self.store.load()

    def save(self, tasks: list[Task]) -> None:
        """Stage tasks and restart the write timer."""
        with self._lock:
            self._pending = list(tasks)
        self._arm()
        logger.debug(f"Save of {len(tasks)} tasks deferred by {self.delay}s")

    def flush(self) -> None:
        """Write pending state now, cancelling the timer."""
        try:
            self._scheduler.remove_job(SAVE_JOB_ID)
        except JobLookupError:
            pass
        self._write()

    def close(self) -> None:
        """Flush and stop the timer thread."""
        self.flush()
        # A save that landed mid-write is still staged
        while self.has_pending:
            self.flush()
        if self._scheduler.running:
            self._scheduler.shutdown(wait=False)

    def _arm(self) -> None:
        if not self._scheduler.running:
            self._scheduler.start()
        # Two instances: a timer firing mid-write queues on the write lock
        # instead of being skipped.
        self._scheduler.add_job(
            self._write,
            DateTrigger(run_date=datetime.now() + timedelta(seconds=self.delay)),
            id=SAVE_JOB_ID,
            replace_existing=True,
            misfire_grace_time=None,
            max_instances=2,
        )

    def _write(self) -> None:
        with self._write_lock:
            # Staged tasks stay visible to load() until they are on disk.
            with self._lock:
                tasks = self._pending
            if tasks is None:
                return
            self.store.save(tasks)
            with self._lock:
                if self._pending is tasks:
                    self._pending = None
                    newer_pending = False
                else:
                    newer_pending = True
        logger.info(f"Wrote {len(tasks)} tasks")
        if newer_pending:
            self._arm()

    def __enter__(self) -> "DebouncedTaskStore":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
