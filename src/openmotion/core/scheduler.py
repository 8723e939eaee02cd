"""Pure auto-scheduling logic - no I/O dependencies.

Single-pass greedy list scheduling on one timeline: pending tasks are ordered
by priority, then due date, and laid end to end starting a fixed lead time
after `now`, with a fixed buffer between consecutive tasks.
"""

import logging
from dataclasses import replace
from datetime import datetime, timedelta

from .tasks import Task, TaskValidationError, validate_task

logger = logging.getLogger(__name__)

LEAD_TIME = timedelta(minutes=15)
BUFFER = timedelta(minutes=5)


def scheduling_order(pending: list[Task]) -> list[Task]:
    """
    Order pending tasks for placement.

    Higher priority first; within a priority, earliest due date first and
    tasks with a due date before tasks without one. Remaining ties keep
    their input order (sorted() is stable).
    """

    def sort_key(t: Task) -> tuple:
        # Only compared when priority and has-due agree, so datetime.min
        # never meets a real (possibly tz-aware) due date.
        return (-t.priority.value, t.due is None, t.due or datetime.min)

    return sorted(pending, key=sort_key)


def validate_tasks(tasks: list[Task]) -> None:
    """Validate every task and require unique ids."""
    seen: set[str] = set()
    for task in tasks:
        validate_task(task)
        if task.id in seen:
            raise TaskValidationError(f"Duplicate task id: {task.id!r}")
        seen.add(task.id)


def schedule(tasks: list[Task], now: datetime, pin_started: bool = False) -> list[Task]:
    """
    Assign `scheduled_start` to every incomplete task.

    Pure function - no I/O. Returns a new list in input order. Completed
    tasks are passed through untouched.

    Args:
        tasks: The full task collection
        now: Current instant; the first task starts at now + LEAD_TIME
        pin_started: Keep pending tasks whose scheduled start is already
            at or before `now` where they are, and place the rest after them

    Raises:
        TaskValidationError: on empty titles, non-positive durations or
            duplicate ids
    """
    tasks = list(tasks)
    validate_tasks(tasks)

    pending = [t for t in tasks if not t.completed]
    if not pending:
        return tasks

    cursor = now + LEAD_TIME
    starts: dict[str, datetime] = {}

    if pin_started:
        pinned = sorted(
            (t for t in pending if t.scheduled_start is not None and t.scheduled_start <= now),
            key=lambda t: t.scheduled_start,
        )
        for task in pinned:
            starts[task.id] = task.scheduled_start
            cursor = max(cursor, task.scheduled_start + timedelta(minutes=task.duration) + BUFFER)
        pending = [t for t in pending if t.id not in starts]

    for task in scheduling_order(pending):
        starts[task.id] = cursor
        logger.debug(f"Placed {task.id} ({task.priority.label}) at {cursor.isoformat()}")
        cursor = cursor + timedelta(minutes=task.duration) + BUFFER

    return [
        t if t.completed or t.scheduled_start == starts[t.id] else replace(t, scheduled_start=starts[t.id])
        for t in tasks
    ]
