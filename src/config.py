"""Settings resolved from environment variables.

TASK_CLI_FILE       path of the JSON task store (default ~/.task-cli/tasks.json)
TASK_CLI_STRICT     refuse to treat a corrupt store as empty (default off)
TASK_CLI_LOG_LEVEL  console log level (default WARNING)
TASK_CLI_LOG_FILE   optional file receiving DEBUG logs
"""
from __future__ import annotations
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from models import STATUSES

DEFAULT_TASKS_FILE = Path.home() / '.task-cli' / 'tasks.json'


def _truthy_env(value: Optional[str], default: bool = True) -> bool:
    if value is None:
        return default
    return value.strip().lower() not in {"0", "false", "no", "off", ""}


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True)
class StoreConfig:
    """Where tasks live and which statuses the store accepts.

    strict: when set, a store file that cannot be parsed raises
    CorruptStoreError instead of being read as an empty collection.
    """
    path: Path = DEFAULT_TASKS_FILE
    statuses: Tuple[str, ...] = STATUSES
    strict: bool = False

    @classmethod
    def from_env(cls) -> "StoreConfig":
        return cls(
            path=_env_path("TASK_CLI_FILE", DEFAULT_TASKS_FILE),
            strict=_truthy_env(os.getenv("TASK_CLI_STRICT"), False),
        )


def log_level() -> int:
    """Console log level; unknown names fall back to WARNING."""
    name = (os.getenv("TASK_CLI_LOG_LEVEL") or "WARNING").strip().upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.WARNING


def log_file() -> Optional[Path]:
    raw = os.getenv("TASK_CLI_LOG_FILE")
    if raw is None or raw.strip() == "":
        return None
    return Path(raw).expanduser()
