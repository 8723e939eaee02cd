"""Shared workflow layer between the CLI and the task store.

Each mutating workflow is one read-modify-write: load the latest collection,
apply a pure transition (which reschedules against `now`), save the result.
"""

import logging
import threading
from datetime import datetime
from pathlib import Path

from .adapters.debounced_store import DebouncedTaskStore
from .adapters.json_store import JsonTaskStore
from .config import Config
from .core import state
from .core.ics import to_calendar_document
from .core.tasks import Task, new_task
from .ports.task_store import TaskStore

logger = logging.getLogger(__name__)

# Serializes load -> transition -> save so no edit is lost to a stale read.
_state_lock = threading.Lock()


def get_store(config: Config) -> DebouncedTaskStore:
    """Resolve the task store from config."""
    return DebouncedTaskStore(JsonTaskStore(config.tasks_file), delay=config.save_delay)


def list_tasks(store: TaskStore, include_completed: bool = False) -> list[Task]:
    """Tasks in schedule order."""
    tasks = state.by_schedule(store.load())
    if include_completed:
        return tasks
    return [t for t in tasks if not t.completed]


def add(
    config: Config,
    store: TaskStore,
    title: str,
    duration: int | None = None,
    priority: str | None = None,
    due: datetime | None = None,
    tags: list[str] | None = None,
    now: datetime | None = None,
) -> Task:
    """Create a task, reschedule, save. Returns the scheduled task."""
    task = new_task(
        title,
        duration=duration if duration is not None else config.default_duration,
        priority=priority or config.default_priority,
        due=due,
        tags=tags,
    )
    with _state_lock:
        tasks = state.add_task(store.load(), task, now or datetime.now(), config.pin_started_tasks)
        store.save(list(tasks))
    logger.info(f"Added task {task.id}: {task.title}")
    return state.find_task(tasks, task.id)


def complete(config: Config, store: TaskStore, task_id: str, now: datetime | None = None) -> Task:
    """Toggle a task's completion, reschedule, save."""
    with _state_lock:
        current = store.load()
        target = state.find_task(current, task_id)
        tasks = state.toggle_task(current, target.id, now or datetime.now(), config.pin_started_tasks)
        store.save(list(tasks))
    updated = state.find_task(tasks, target.id)
    logger.info(f"Task {updated.id} marked {'done' if updated.completed else 'not done'}")
    return updated


def delete(config: Config, store: TaskStore, task_id: str, now: datetime | None = None) -> Task:
    """Remove a task, reschedule, save. Returns the removed task."""
    with _state_lock:
        current = store.load()
        target = state.find_task(current, task_id)
        tasks = state.delete_task(current, target.id, now or datetime.now(), config.pin_started_tasks)
        store.save(list(tasks))
    logger.info(f"Deleted task {target.id}: {target.title}")
    return target


def reschedule(config: Config, store: TaskStore, now: datetime | None = None) -> list[Task]:
    """Re-run the scheduler against the current time."""
    with _state_lock:
        tasks = state.reschedule(store.load(), now or datetime.now(), config.pin_started_tasks)
        store.save(list(tasks))
    return list(tasks)


def export_calendar(config: Config, store: TaskStore, output: Path | str | None = None) -> Path:
    """Write the latest schedule as an .ics file. Returns the path written."""
    path = Path(output or config.export_file).expanduser()
    document = to_calendar_document(store.load(), prodid=config.calendar_prodid)
    path.parent.mkdir(parents=True, exist_ok=True)
    # Bytes, so CRLF survives on every platform
    path.write_bytes(document.encode("utf-8"))
    logger.info(f"Exported calendar to {path}")
    return path
