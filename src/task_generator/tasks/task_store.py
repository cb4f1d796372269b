# src/task_generator/tasks/task_store.py

from __future__ import annotations

import dataclasses
import json
import logging
from collections.abc import Iterable
from typing import Any

from ..core.errors import ValidationError
from ..core.ports import KeyValueStore, Notifier
from .task_models import Task, tasks_from_json, tasks_to_json

logger = logging.getLogger(__name__)

TASKS_KEY = "ai-tasks"
CORRUPT_SUFFIX = ".corrupt"

_UPDATABLE_FIELDS = frozenset({"name", "description", "timeframe", "completed"})


class TaskStore:
    """
    Ordered task collection backed by a KeyValueStore.

    The collection is an immutable tuple that is replaced on every write, so a
    reader never observes a half-applied change. The whole collection is saved
    after each mutation.

    Completion hook:
    - update() calls notifier.notify(task) once when `completed` goes False -> True,
      after the new snapshot is committed and saved
    - notifier failures are logged and never undo the mutation
    """

    def __init__(
        self,
        kv: KeyValueStore,
        notifier: Notifier | None = None,
        *,
        key: str = TASKS_KEY,
    ) -> None:
        self._kv = kv
        self._key = key
        self.notifier = notifier
        self._tasks: tuple[Task, ...] = self._load()
        logger.info("TaskStore ready key=%s total=%d", self._key, len(self._tasks))

    # ---- persistence ----

    def _load(self) -> tuple[Task, ...]:
        raw = self._kv.load(self._key)
        if not raw:
            return ()
        try:
            tasks = tuple(tasks_from_json(raw))
        except (ValueError, TypeError):
            backup_key = self._backup(raw)
            logger.exception(
                "Stored tasks under key=%s are unreadable; saved a copy under key=%s and starting empty.",
                self._key,
                backup_key,
            )
            return ()

        # tasks_from_json skips bad records; keep the original blob so none is lost for good.
        if len(tasks) != len(json.loads(raw)):
            backup_key = self._backup(raw)
            logger.warning(
                "Some stored tasks under key=%s were skipped; saved a copy under key=%s.",
                self._key,
                backup_key,
            )
        return tasks

    def _backup(self, raw: str) -> str:
        # The next save overwrites the key, so keep the raw blob aside first.
        backup_key = self._key + CORRUPT_SUFFIX
        self._kv.save(backup_key, raw)
        return backup_key

    def _commit(self, tasks: tuple[Task, ...]) -> None:
        self._kv.save(self._key, tasks_to_json(tasks))
        self._tasks = tasks

    # ---- queries ----

    @property
    def tasks(self) -> tuple[Task, ...]:
        return self._tasks

    def __len__(self) -> int:
        return len(self._tasks)

    def get(self, task_id: str) -> Task | None:
        for t in self._tasks:
            if t.id == task_id:
                return t
        return None

    def completed_count(self) -> int:
        return sum(1 for t in self._tasks if t.completed)

    # ---- mutations ----

    def append(self, drafts: Iterable[Task]) -> None:
        batch = tuple(drafts)
        if not batch:
            return

        seen = {t.id for t in self._tasks}
        for d in batch:
            if d.id in seen:
                raise ValueError(f"duplicate task id: {d.id}")
            seen.add(d.id)

        self._commit(self._tasks + batch)
        logger.info("Appended %d task(s); total=%d", len(batch), len(self._tasks))

    def update(self, task_id: str, **fields: Any) -> Task | None:
        """
        Merge `fields` into the task with `task_id`.

        Unknown id -> no-op, returns None.
        """
        unknown = set(fields) - _UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"unknown task field(s): {', '.join(sorted(unknown))}")

        for key in ("name", "description"):
            if key in fields:
                value = fields[key]
                if not isinstance(value, str) or not value.strip():
                    raise ValidationError("Task name and description must not be empty.")

        for i, current in enumerate(self._tasks):
            if current.id == task_id:
                break
        else:
            logger.debug("update: no task id=%s", task_id)
            return None

        updated = dataclasses.replace(current, **fields)
        self._commit(self._tasks[:i] + (updated,) + self._tasks[i + 1 :])
        logger.debug("Task updated id=%s fields=%s", task_id, sorted(fields))

        if updated.completed and not current.completed:
            self._notify_completed(updated)

        return updated

    def toggle_complete(self, task_id: str) -> Task | None:
        current = self.get(task_id)
        if current is None:
            return None
        return self.update(task_id, completed=not current.completed)

    def remove(self, task_id: str) -> bool:
        kept = tuple(t for t in self._tasks if t.id != task_id)
        if len(kept) == len(self._tasks):
            return False
        self._commit(kept)
        logger.info("Task removed id=%s; total=%d", task_id, len(kept))
        return True

    def _notify_completed(self, task: Task) -> None:
        if self.notifier is None:
            return
        try:
            self.notifier.notify(task)
        except Exception:
            logger.exception("Completion notifier crashed for task id=%s", task.id)
