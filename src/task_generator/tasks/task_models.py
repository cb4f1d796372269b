# src/task_generator/tasks/task_models.py

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from enum import StrEnum
from typing import Any

logger = logging.getLogger(__name__)

# Keys owned by Task itself; anything else in a stored record goes to Task.extra.
_CORE_KEYS = ("id", "name", "description", "timeframe", "completed", "createdAt")

_EPOCH = datetime.fromtimestamp(0, tz=UTC)


class Severity(StrEnum):
    INFO = "info"
    SUCCESS = "success"
    ERROR = "error"


def format_timestamp(ts: datetime) -> str:
    """ISO-8601 UTC with millisecond precision and a 'Z' suffix (2024-05-01T10:00:00.000Z)."""
    return ts.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(raw: str | int | float | None) -> datetime:
    """Read an ISO-8601 string or epoch milliseconds (as Date.now() produces)."""
    if raw is None or raw == "":
        return _EPOCH
    if isinstance(raw, bool):
        raise ValueError(f"unsupported timestamp: {raw!r}")
    if isinstance(raw, (int, float)):
        try:
            return _EPOCH + timedelta(milliseconds=raw)
        except OverflowError as e:
            raise ValueError(f"timestamp out of range: {raw!r}") from e
    if not isinstance(raw, str):
        raise ValueError(f"unsupported timestamp type: {type(raw).__name__}")
    dt = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt


@dataclass(frozen=True, slots=True)
class Task:
    id: str
    name: str
    description: str
    timeframe: str
    created_at: datetime
    completed: bool = False

    # Unknown keys returned by the model, carried through storage untouched.
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = dict(self.extra)
        out.update(
            {
                "id": self.id,
                "name": self.name,
                "description": self.description,
                "timeframe": self.timeframe,
                "completed": self.completed,
                "createdAt": format_timestamp(self.created_at),
            }
        )
        return out

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> Task:
        if raw.get("id") is None:
            raise ValueError("task record without id")
        return cls(
            # Older data used millisecond timestamps as numeric ids.
            id=str(raw["id"]),
            name=str(raw.get("name") or ""),
            description=str(raw.get("description") or ""),
            timeframe=str(raw.get("timeframe") or ""),
            completed=bool(raw.get("completed", False)),
            created_at=parse_timestamp(raw.get("createdAt")),
            extra={k: v for k, v in raw.items() if k not in _CORE_KEYS},
        )


@dataclass(frozen=True, slots=True)
class Notification:
    id: int
    message: str
    severity: Severity
    created_at: float


def tasks_to_json(tasks: tuple[Task, ...] | list[Task]) -> str:
    return json.dumps([t.to_dict() for t in tasks], ensure_ascii=False)


def tasks_from_json(raw: str) -> list[Task]:
    """
    Decode a stored collection.

    A blob that is not a JSON array raises ValueError. A single unreadable
    record is logged and skipped so the rest of the collection survives.
    """
    data = json.loads(raw)
    if not isinstance(data, list):
        raise ValueError("stored task collection must be a JSON array")

    out: list[Task] = []
    for i, item in enumerate(data):
        if not isinstance(item, dict):
            logger.warning("Skipping stored task #%d: not an object (%s)", i, type(item).__name__)
            continue
        try:
            out.append(Task.from_dict(item))
        except (ValueError, TypeError) as e:
            logger.warning("Skipping stored task #%d: %s", i, e)
    return out
