"""Functional core - pure business logic with no I/O."""

from .tasks import Priority, Task, TaskValidationError, new_task, validate_task
from .scheduler import BUFFER, LEAD_TIME, schedule, scheduling_order
from .ics import escape_text, format_datetime, to_calendar_document
from .state import (
    TaskNotFoundError,
    add_task,
    by_schedule,
    delete_task,
    find_task,
    reschedule,
    toggle_task,
)

__all__ = [
    # Tasks
    "Priority",
    "Task",
    "TaskValidationError",
    "new_task",
    "validate_task",
    # Scheduler
    "BUFFER",
    "LEAD_TIME",
    "schedule",
    "scheduling_order",
    # Calendar export
    "escape_text",
    "format_datetime",
    "to_calendar_document",
    # State
    "TaskNotFoundError",
    "add_task",
    "by_schedule",
    "delete_task",
    "find_task",
    "reschedule",
    "toggle_task",
]
