"""Data models for the task tracker.

Exposes the Task dataclass plus the status constants and timestamp helpers
shared by storage and the CLI. Persisted keys keep the camelCase names
(createdAt / updatedAt) used by existing task files; attributes are
snake_case on the Python side.
"""
from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Tuple

TODO = "todo"
IN_PROGRESS = "in-progress"
DONE = "done"
STATUSES: Tuple[str, ...] = (TODO, IN_PROGRESS, DONE)


def format_timestamp(dt: datetime) -> str:
    """Render an aware datetime as ISO-8601 UTC with millisecond precision.

    e.g. 2024-05-01T09:30:00.125Z
    """
    utc = dt.astimezone(timezone.utc)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(value: str) -> datetime:
    """Parse a stored timestamp; a trailing 'Z' is accepted for UTC."""
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    dt = datetime.fromisoformat(value)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


@dataclass
class Task:
    """A single tracked task.

    Fields:
        id: Positive integer, unique within the store, never reassigned.
        description: Non-empty text supplied by the user.
        status: One of: "todo", "in-progress", "done".
        created_at: ISO timestamp set once at creation.
        updated_at: ISO timestamp refreshed on every mutation.
    """
    id: int
    description: str
    status: str
    created_at: str
    updated_at: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "description": self.description,
            "status": self.status,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any], statuses: Tuple[str, ...] = STATUSES) -> "Task":
        """Build a Task from a stored record.

        Raises ValueError when the record is not a well-formed task.
        """
        if not isinstance(raw, Mapping):
            raise ValueError(f"task record must be an object, got {type(raw).__name__}")
        missing = [k for k in ("id", "description", "status", "createdAt", "updatedAt") if k not in raw]
        if missing:
            raise ValueError(f"task record missing field(s): {', '.join(missing)}")
        tid = raw["id"]
        # bool is an int subclass; reject it explicitly
        if not isinstance(tid, int) or isinstance(tid, bool) or tid < 1:
            raise ValueError(f"invalid task id: {tid!r}")
        if raw["status"] not in statuses:
            raise ValueError(f"task {tid} has unknown status {raw['status']!r}")
        for key in ("description", "createdAt", "updatedAt"):
            if not isinstance(raw[key], str):
                raise ValueError(f"task {tid} field {key} must be a string")
        return cls(
            id=tid,
            description=raw["description"],
            status=raw["status"],
            created_at=raw["createdAt"],
            updated_at=raw["updatedAt"],
        )

    def __repr__(self) -> str:  # pragma: no cover - convenience only
        return f"Task(id={self.id}, description={self.description}, status={self.status})"
