# src/task_generator/tasks/task_api.py

"""
Command handlers: take the app state plus an event payload and apply it.

Connectors call these instead of touching TaskStore / TaskIngestion directly,
so every surface gets the same validation and user feedback.
"""

from __future__ import annotations

import json
import logging

from ..core.errors import ValidationError
from ..core.state import AppState
from .task_models import Severity, Task

logger = logging.getLogger(__name__)

DARK_MODE_KEY = "dark-mode"


def generate_tasks(state: AppState, context_text: str | None = None) -> list[Task]:
    """
    Generate tasks for `context_text` (or the pending context draft) and append them.

    Errors propagate unchanged; the store is only touched after a fully
    successful generation.
    """
    if context_text is not None:
        state.context_draft = context_text

    drafts = state.ingestion.generate(state.context_draft, state.credential_override)
    state.store.append(drafts)
    state.context_draft = ""
    return drafts


def edit_task(state: AppState, task_id: str, *, name: str, description: str) -> Task | None:
    name = (name or "").strip()
    description = (description or "").strip()
    if not name or not description:
        raise ValidationError("Task name and description must not be empty.")

    updated = state.store.update(task_id, name=name, description=description)
    if updated is not None:
        state.notifications.push("Task updated successfully", Severity.SUCCESS)
    return updated


def toggle_task(state: AppState, task_id: str) -> Task | None:
    return state.store.toggle_complete(task_id)


def delete_task(state: AppState, task_id: str) -> bool:
    return state.store.remove(task_id)


def load_dark_mode(state: AppState) -> bool:
    raw = state.preferences.load(DARK_MODE_KEY)
    if raw is None:
        return False
    try:
        return bool(json.loads(raw))
    except ValueError:
        logger.warning("Unreadable %s preference %r; using light mode.", DARK_MODE_KEY, raw)
        return False


def set_dark_mode(state: AppState, enabled: bool) -> bool:
    state.dark_mode = bool(enabled)
    state.preferences.save(DARK_MODE_KEY, json.dumps(state.dark_mode))
    return state.dark_mode


def toggle_dark_mode(state: AppState) -> bool:
    return set_dark_mode(state, not state.dark_mode)


def progress_summary(state: AppState) -> str:
    total = len(state.store)
    if not total:
        return "No tasks yet."
    return f"{state.store.completed_count()} of {total} completed"


def resolve_task_ref(state: AppState, ref: str) -> Task | None:
    """Resolve a 1-based list position or a task id."""
    ref = (ref or "").strip()
    if not ref:
        return None

    task = state.store.get(ref)
    if task is not None:
        return task

    if ref.isdigit():
        pos = int(ref)
        tasks = state.store.tasks
        if 1 <= pos <= len(tasks):
            return tasks[pos - 1]
    return None
