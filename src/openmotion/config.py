"""Configuration management for OpenMotion."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)

OPENMOTION_HOME = Path(os.environ.get("OPENMOTION_HOME", Path.home() / "openmotion"))
CONFIG_FILE = OPENMOTION_HOME / "config" / "openmotion.conf"
DATA_DIR = OPENMOTION_HOME / "data"


@dataclass
class Config:
    """OpenMotion configuration."""

    tasks_file: str = field(default_factory=lambda: str(DATA_DIR / "tasks.json"))
    export_file: str = field(default_factory=lambda: str(DATA_DIR / "tasks.ics"))
    default_duration: int = 60
    default_priority: str = "low"
    # Seconds to coalesce writes before hitting disk
    save_delay: float = 0.5
    pin_started_tasks: bool = False
    calendar_prodid: str = "-//OpenMotion//Task Planner//EN"


def _parse_bool(value: str) -> bool | None:
    lowered = value.lower()
    if lowered in ("1", "true", "yes", "on"):
        return True
    if lowered in ("0", "false", "no", "off"):
        return False
    return None


def _strip_value(value: str) -> str:
    """Unquote a value and drop inline comments."""
    # Handle quoted values with inline comments: "value" # comment
    if value.startswith('"') or value.startswith("'"):
        quote = value[0]
        end_quote = value.find(quote, 1)
        if end_quote != -1:
            return value[1:end_quote]
        return value[1:]
    # Unquoted: strip inline comments
    if "#" in value:
        value = value.split("#")[0].strip()
    return value


def load_config(path: Path | None = None) -> Config:
    """Load configuration from openmotion.conf file."""
    config = Config()
    path = path or CONFIG_FILE

    if not path.exists():
        return config

    for line in path.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        if "=" not in line:
            continue

        key, _, value = line.partition("=")
        key = key.strip().lower()
        value = _strip_value(value.strip())

        match key:
            case "tasks_file":
                config.tasks_file = value
            case "export_file":
                config.export_file = value
            case "default_duration":
                try:
                    duration = int(value)
                except ValueError:
                    duration = 0
                if duration > 0:
                    config.default_duration = duration
                else:
                    logger.warning(f"Ignoring invalid DEFAULT_DURATION: {value!r}")
            case "default_priority":
                config.default_priority = value.lower()
            case "save_delay":
                try:
                    config.save_delay = max(0.0, float(value))
                except ValueError:
                    logger.warning(f"Ignoring invalid SAVE_DELAY: {value!r}")
            case "pin_started_tasks":
                flag = _parse_bool(value)
                if flag is None:
                    logger.warning(f"Ignoring invalid PIN_STARTED_TASKS: {value!r}")
                else:
                    config.pin_started_tasks = flag
            case "calendar_prodid":
                config.calendar_prodid = value
            case _:
                logger.warning(f"Unknown config key: {key}")

    return config
