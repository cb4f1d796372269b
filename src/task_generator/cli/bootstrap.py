# src/task_generator/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures the local (gitignored) data directory exists,
- wires concrete implementations into AppState (LLM/storage/webhook/notifications).
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.ports import LLMClient
from ..core.state import AppState
from ..llm.client import OpenAIChatClient
from ..llm.offline import OfflineLLMClient
from ..notify.notifications import NotificationCenter, NotificationListener
from ..notify.webhook import WebhookNotifier
from ..storage.kv_store import JsonFileKVStore
from ..tasks import task_api
from ..tasks.ingestion import TaskIngestion
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)

OFFLINE_CREDENTIAL = "offline"


def create_initial_state(
    *,
    settings=None,
    listener: NotificationListener | None = None,
) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    settings.data_dir.mkdir(parents=True, exist_ok=True)
    kv = JsonFileKVStore(settings.data_dir)

    notifications = NotificationCenter(
        ttl_seconds=settings.notification_ttl_seconds,
        listener=listener,
    )
    notifier = WebhookNotifier(
        url=settings.webhook_url,
        notifications=notifications,
        timeout_seconds=settings.webhook_timeout_seconds,
    )

    llm_client: LLMClient
    default_credential = settings.openai_api_key
    if settings.offline:
        logger.info("Offline mode: using canned LLM responses.")
        llm_client = OfflineLLMClient()
        default_credential = default_credential or OFFLINE_CREDENTIAL
    else:
        llm_client = OpenAIChatClient(settings)

    state = AppState(
        settings=settings,
        store=TaskStore(kv, notifier),
        ingestion=TaskIngestion(llm_client, default_credential=default_credential),
        notifications=notifications,
        preferences=kv,
    )
    state.dark_mode = task_api.load_dark_mode(state)
    return state
