"""Persistence and mutation of the task collection.

Every public TaskStore operation is a full load -> mutate -> save cycle
against the JSON file named by its StoreConfig; nothing is cached between
calls. The file holds a JSON array of task records, rewritten in full on
each mutation.
"""
from __future__ import annotations
import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, List, Optional

from config import StoreConfig
from models import STATUSES, Task, TODO, format_timestamp

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


class TaskTrackerError(Exception):
    """Base class for errors reported to the user as 'Error: ...'."""


class TaskNotFoundError(TaskTrackerError):
    def __init__(self, task_id: int):
        super().__init__(f"Task {task_id} not found")
        self.task_id = task_id


class InvalidStatusError(TaskTrackerError):
    def __init__(self, status: str, statuses=STATUSES):
        allowed = list(statuses)
        if len(allowed) > 1:
            choices = f"{', '.join(allowed[:-1])}, or {allowed[-1]}"
        else:
            choices = ''.join(allowed)
        super().__init__(f"Invalid status. Use: {choices}")
        self.status = status


class CorruptStoreError(TaskTrackerError):
    def __init__(self, path: Path, reason: str):
        super().__init__(f"Task file {path} is unreadable: {reason}")
        self.path = path
        self.reason = reason


class StoreWriteError(TaskTrackerError):
    def __init__(self, path: Path, reason: str):
        super().__init__(f"Critical error: could not save tasks to {path}: {reason}")
        self.path = path
        self.reason = reason


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TaskStore:
    def __init__(self, config: Optional[StoreConfig] = None, clock: Clock = _utcnow):
        self.config: StoreConfig = config or StoreConfig()
        self._clock = clock

    @property
    def path(self) -> Path:
        return self.config.path

    # -------------------- load / save --------------------
    def load(self) -> List[Task]:
        """Read the task collection from disk.

        Missing file or whitespace-only content -> empty list.
        Unparseable content -> empty list with a warning, or
        CorruptStoreError when the config is strict.
        """
        if not self.path.exists():
            logger.info("No tasks file at %s; starting with an empty task list", self.path)
            return []
        try:
            data = self.path.read_text(encoding='utf-8')
        except (OSError, UnicodeDecodeError) as exc:
            return self._unreadable(str(exc))
        if not data.strip():
            logger.info("Tasks file %s is empty; starting with an empty task list", self.path)
            return []
        try:
            raw = json.loads(data)
            if not isinstance(raw, list):
                raise ValueError("expected a JSON array of tasks")
            tasks = [Task.from_dict(entry, self.config.statuses) for entry in raw]
        except ValueError as exc:
            return self._unreadable(str(exc))
        seen = set()
        for task in tasks:
            if task.id in seen:
                return self._unreadable(f"duplicate task id {task.id}")
            seen.add(task.id)
        return tasks

    def _unreadable(self, reason: str) -> List[Task]:
        if self.config.strict:
            raise CorruptStoreError(self.path, reason)
        logger.warning("Could not read tasks from %s (%s); treating it as empty", self.path, reason)
        return []

    def save(self, tasks: List[Task]) -> None:
        """Overwrite the store with the full collection.

        A missing store location is created (holding an empty list) and the
        write retried once. Any other failure raises StoreWriteError.
        """
        payload = json.dumps([t.to_dict() for t in tasks], indent=2, ensure_ascii=False)
        try:
            self._write(payload)
        except FileNotFoundError:
            logger.info("Creating new tasks file at %s", self.path)
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                self._write('[]')
                self._write(payload)
            except OSError as exc:
                logger.error("Retry saving tasks to %s failed: %s", self.path, exc)
                raise StoreWriteError(self.path, str(exc)) from exc
        except OSError as exc:
            logger.error("Error saving tasks to %s: %s", self.path, exc)
            raise StoreWriteError(self.path, str(exc)) from exc

    def _write(self, payload: str) -> None:
        with open(self.path, 'w', encoding='utf-8') as f:
            f.write(payload)

    # -------------------- id / time helpers --------------------
    @staticmethod
    def _next_id(tasks: List[Task]) -> int:
        return max(t.id for t in tasks) + 1 if tasks else 1

    @staticmethod
    def _index_of(tasks: List[Task], task_id: int) -> int:
        for idx, task in enumerate(tasks):
            if task.id == task_id:
                return idx
        raise TaskNotFoundError(task_id)

    def _now(self) -> str:
        return format_timestamp(self._clock())

    def _check_status(self, status: str) -> None:
        if status not in self.config.statuses:
            raise InvalidStatusError(status, self.config.statuses)

    # -------------------- task operations --------------------
    def add(self, description: str) -> int:
        """Append a new todo task and return its id."""
        if not description or not description.strip():
            raise ValueError("description is required")
        tasks = self.load()
        now = self._now()
        task = Task(
            id=self._next_id(tasks),
            description=description,
            status=TODO,
            created_at=now,
            updated_at=now,
        )
        tasks.append(task)
        self.save(tasks)
        logger.debug("Task added id=%s", task.id)
        return task.id

    def update(self, task_id: int, description: str) -> Task:
        """Replace a task's description and refresh its updated time."""
        if not description or not description.strip():
            raise ValueError("description is required")
        tasks = self.load()
        task = tasks[self._index_of(tasks, task_id)]
        task.description = description
        task.updated_at = self._now()
        self.save(tasks)
        logger.debug("Task updated id=%s", task_id)
        return task

    def delete(self, task_id: int) -> Task:
        """Remove a task, keeping the order of the rest; returns the removed task."""
        tasks = self.load()
        removed = tasks[self._index_of(tasks, task_id)]
        self.save([t for t in tasks if t.id != task_id])
        logger.debug("Task deleted id=%s", task_id)
        return removed

    def set_status(self, task_id: int, status: str) -> Task:
        """Change a task's status and refresh its updated time."""
        self._check_status(status)
        tasks = self.load()
        task = tasks[self._index_of(tasks, task_id)]
        task.status = status
        task.updated_at = self._now()
        self.save(tasks)
        logger.debug("Task %s status -> %s", task_id, status)
        return task

    def list(self, status: Optional[str] = None) -> List[Task]:
        """Tasks in stored order, optionally only those with ``status``."""
        if status is not None:
            self._check_status(status)
        tasks = self.load()
        if status is None:
            return tasks
        return [t for t in tasks if t.status == status]
