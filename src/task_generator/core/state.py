# src/task_generator/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..notify.notifications import NotificationCenter
from ..tasks.ingestion import TaskIngestion
from ..tasks.task_store import TaskStore
from .ports import KeyValueStore


@dataclass
class AppState:
    # Store Settings on the state for easy access in other modules later.
    settings: Any

    store: TaskStore
    ingestion: TaskIngestion
    notifications: NotificationCenter
    preferences: KeyValueStore

    dark_mode: bool = False

    # Input buffers: the context is cleared after a successful generation,
    # the credential override never is.
    context_draft: str = ""
    credential_override: str = ""
