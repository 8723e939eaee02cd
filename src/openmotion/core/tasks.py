"""Pure task domain logic - no I/O dependencies."""

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta
from enum import IntEnum


class TaskValidationError(ValueError):
    """Raised when a task (or task collection) violates the input contract."""

    pass


class Priority(IntEnum):
    """Task priority. The integer value is the scheduling weight."""

    LOW = 1
    MEDIUM = 2
    HIGH = 3
    ASAP = 4

    @property
    def label(self) -> str:
        """Human-readable label."""
        if self is Priority.ASAP:
            return "ASAP"
        return self.name.capitalize()

    @classmethod
    def parse(cls, value: "str | int | Priority") -> "Priority":
        """Parse a priority from its name ("high") or weight (3)."""
        if isinstance(value, Priority):
            return value
        if isinstance(value, int) and not isinstance(value, bool):
            try:
                return cls(value)
            except ValueError:
                raise TaskValidationError(f"Unknown priority weight: {value}") from None
        if isinstance(value, str):
            name = value.strip()
            if name.isdigit():
                return cls.parse(int(name))
            try:
                return cls[name.upper()]
            except KeyError:
                raise TaskValidationError(f"Unknown priority: {value!r}") from None
        raise TaskValidationError(f"Unknown priority: {value!r}")


@dataclass(frozen=True)
class Task:
    """A task on the personal timeline.

    `scheduled_start` is owned by the scheduler; treat it as meaningful only
    on collections returned from `schedule()`.
    """

    id: str
    title: str
    duration: int  # minutes
    priority: Priority = Priority.LOW
    due: datetime | None = None
    completed: bool = False
    scheduled_start: datetime | None = None
    tags: frozenset[str] = field(default_factory=frozenset)

    @property
    def scheduled_end(self) -> datetime | None:
        """End of the task's window, or None if unscheduled."""
        if self.scheduled_start is None:
            return None
        return self.scheduled_start + timedelta(minutes=self.duration)

    def with_completed(self, completed: bool) -> "Task":
        return replace(self, completed=completed)

    def to_dict(self) -> dict:
        """Serialize to a JSON-compatible record."""
        return {
            "id": self.id,
            "title": self.title,
            "duration": self.duration,
            "priority": self.priority.name.lower(),
            "due": self.due.isoformat() if self.due else None,
            "completed": self.completed,
            "scheduled_start": self.scheduled_start.isoformat() if self.scheduled_start else None,
            "tags": sorted(self.tags),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Task":
        """Create Task from a stored record.

        Accepts both the named priority form ("high") and the numeric
        1-4 form.
        """
        due = data.get("due")
        start = data.get("scheduled_start")
        task = cls(
            id=str(data["id"]),
            title=data["title"],
            duration=data["duration"],
            priority=Priority.parse(data.get("priority", Priority.LOW)),
            due=datetime.fromisoformat(due) if due else None,
            completed=bool(data.get("completed", False)),
            scheduled_start=datetime.fromisoformat(start) if start else None,
            tags=frozenset(data.get("tags") or ()),
        )
        validate_task(task)
        return task


def validate_task(task: Task) -> None:
    """Reject tasks that would corrupt a timeline."""
    if not isinstance(task.title, str) or not task.title.strip():
        raise TaskValidationError(f"Task {task.id!r} has an empty title")
    if isinstance(task.duration, bool) or not isinstance(task.duration, int):
        raise TaskValidationError(
            f"Task {task.id!r} duration must be an integer number of minutes, got {task.duration!r}"
        )
    if task.duration <= 0:
        raise TaskValidationError(f"Task {task.id!r} duration must be positive, got {task.duration}")
    if not isinstance(task.priority, Priority):
        raise TaskValidationError(f"Task {task.id!r} has invalid priority {task.priority!r}")
    # Timeline is naive local time; aware values can't be ordered against it
    for name in ("due", "scheduled_start"):
        value = getattr(task, name)
        if value is not None and value.tzinfo is not None:
            raise TaskValidationError(f"Task {task.id!r} {name} must be local time without an offset, got {value}")


def new_task(
    title: str,
    duration: int = 60,
    priority: Priority | str | int = Priority.LOW,
    due: datetime | None = None,
    tags: list[str] | None = None,
) -> Task:
    """Create a fresh, unscheduled, incomplete task with a new id."""
    task = Task(
        id=uuid.uuid4().hex,
        title=title.strip() if isinstance(title, str) else title,
        duration=duration,
        priority=Priority.parse(priority),
        due=due,
        tags=frozenset(t.strip() for t in (tags or []) if t.strip()),
    )
    validate_task(task)
    return task
