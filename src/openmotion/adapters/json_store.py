"""File-based task storage adapter."""

import json
import logging
from pathlib import Path

from openmotion.core.tasks import Task

logger = logging.getLogger(__name__)


class JsonTaskStore:
    """
    File-based task storage.

    Implements TaskStore protocol. The whole collection is one JSON array.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path).expanduser()

    def load(self) -> list[Task]:
        """Load all tasks. Returns an empty list if the file doesn't exist."""
        if not self.path.exists():
            return []
        try:
            data = json.loads(self.path.read_text())
        except json.JSONDecodeError as e:
            raise ValueError(f"Corrupt task file {self.path}: {e}") from e
        if not isinstance(data, list):
            raise ValueError(f"Corrupt task file {self.path}: expected a JSON array")
        try:
            return [Task.from_dict(item) for item in data]
        except (KeyError, TypeError) as e:
            raise ValueError(f"Corrupt task file {self.path}: bad record ({e})") from e

    def save(self, tasks: list[Task]) -> None:
        """Write the full collection, replacing the file atomically."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(json.dumps([t.to_dict() for t in tasks], indent=2))
        tmp.replace(self.path)
        logger.debug(f"Saved {len(tasks)} tasks to {self.path}")
