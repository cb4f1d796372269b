# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from task_generator.core.state import AppState
from task_generator.notify.notifications import NotificationCenter
from task_generator.storage.kv_store import InMemoryKVStore
from task_generator.tasks.ingestion import TaskIngestion
from task_generator.tasks.task_store import TaskStore

from .fakes import FIXED_NOW, FakeLLMClient, ManualClock, RecordingNotifier, SequentialIds


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and core modules.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="task-generator-test",
        log_level="DEBUG",
        openai_api_key=None,
        openai_base_url="https://llm.test/v1",
        llm_model="gpt-3.5-turbo",
        llm_max_tokens=500,
        llm_temperature=0.7,
        offline=False,
        webhook_url="https://hooks.test/done",
        webhook_timeout_seconds=5.0,
        notification_ttl_seconds=5.0,
        data_dir=tmp_path / "data",
    )


@pytest.fixture()
def llm() -> FakeLLMClient:
    return FakeLLMClient()


@pytest.fixture()
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture()
def kv() -> InMemoryKVStore:
    return InMemoryKVStore()


@pytest.fixture()
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture()
def state(settings, llm, notifier, kv, clock) -> AppState:
    """
    AppState wired with deterministic fakes.

    The TaskStore is real (over an in-memory KV store) because its behaviour
    is part of what we want to test.
    """
    return AppState(
        settings=settings,
        store=TaskStore(kv, notifier),
        ingestion=TaskIngestion(
            llm,
            default_credential="sk-default",
            clock=lambda: FIXED_NOW,
            id_factory=SequentialIds(),
        ),
        notifications=NotificationCenter(ttl_seconds=5.0, clock=clock),
        preferences=kv,
    )
