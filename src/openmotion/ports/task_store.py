"""Task store interface."""

from typing import Protocol

from openmotion.core.tasks import Task


class TaskStore(Protocol):
    """Interface for loading and saving the task collection."""

    def load(self) -> list[Task]:
        """Load all tasks. Returns an empty list if nothing is stored."""
        ...

    def save(self, tasks: list[Task]) -> None:
        """Persist the full collection, replacing what was stored."""
        ...
