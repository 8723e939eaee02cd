"""Task collection transitions - pure, by-value, always rescheduled.

Every transition takes the current collection and returns a new tuple that
has already been piped through `schedule()`. No Task is mutated in place.
"""

from collections.abc import Sequence
from datetime import datetime

from .scheduler import schedule
from .tasks import Task


class TaskNotFoundError(KeyError):
    """Raised when no single task matches an id."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else "Task not found"


def find_task(tasks: Sequence[Task], task_id: str) -> Task:
    """
    Find a task by exact id, or by a unique id prefix.

    Raises TaskNotFoundError on no match or an ambiguous prefix.
    """
    for t in tasks:
        if t.id == task_id:
            return t
    matches = [t for t in tasks if task_id and t.id.startswith(task_id)]
    if len(matches) == 1:
        return matches[0]
    if matches:
        raise TaskNotFoundError(f"Ambiguous task id {task_id!r} ({len(matches)} matches)")
    raise TaskNotFoundError(f"No task with id {task_id!r}")


def reschedule(tasks: Sequence[Task], now: datetime, pin_started: bool = False) -> tuple[Task, ...]:
    return tuple(schedule(list(tasks), now, pin_started=pin_started))


def add_task(tasks: Sequence[Task], task: Task, now: datetime, pin_started: bool = False) -> tuple[Task, ...]:
    """Append a task and reschedule."""
    return reschedule([*tasks, task], now, pin_started)


def toggle_task(tasks: Sequence[Task], task_id: str, now: datetime, pin_started: bool = False) -> tuple[Task, ...]:
    """Flip a task's completed flag and reschedule."""
    target = find_task(tasks, task_id)
    updated = [t.with_completed(not t.completed) if t.id == target.id else t for t in tasks]
    return reschedule(updated, now, pin_started)


def delete_task(tasks: Sequence[Task], task_id: str, now: datetime, pin_started: bool = False) -> tuple[Task, ...]:
    """Remove a task and reschedule."""
    target = find_task(tasks, task_id)
    return reschedule([t for t in tasks if t.id != target.id], now, pin_started)


def by_schedule(tasks: Sequence[Task]) -> list[Task]:
    """Pending tasks in start order, then completed tasks in input order."""
    pending = [t for t in tasks if not t.completed]
    pending.sort(key=lambda t: (t.scheduled_start is None, t.scheduled_start or datetime.min))
    return pending + [t for t in tasks if t.completed]
