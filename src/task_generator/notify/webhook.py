# src/task_generator/notify/webhook.py

"""
Best-effort outbound webhook for task completion.

The caller (TaskStore) treats this as fire-and-forget: notify() never raises.
Internally the POST is awaited so the outcome can be reported to the user as
a success or error notification.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

import httpx

from ..core.errors import NotificationFailure
from ..tasks.task_models import Severity, Task, format_timestamp
from .notifications import NotificationCenter

logger = logging.getLogger(__name__)

ACTION_TASK_COMPLETED = "task_completed"


def build_completion_payload(task: Task, completed_at: datetime) -> dict[str, Any]:
    return {
        "taskId": task.id,
        "taskName": task.name,
        "taskDescription": task.description,
        "timeframe": task.timeframe,
        "completedAt": format_timestamp(completed_at),
        "action": ACTION_TASK_COMPLETED,
    }


class WebhookNotifier:
    def __init__(
        self,
        *,
        url: str,
        notifications: NotificationCenter,
        timeout_seconds: float = 5.0,
        http_client: httpx.Client | None = None,
        clock: Callable[[], datetime] = lambda: datetime.now(UTC),
    ) -> None:
        self._url = (url or "").strip()
        self._notifications = notifications
        self._timeout = float(timeout_seconds)
        self._http = http_client
        self._clock = clock

    def _post(self, payload: dict[str, Any]) -> httpx.Response:
        if self._http is not None:
            return self._http.post(self._url, json=payload, timeout=self._timeout)
        with httpx.Client() as client:
            return client.post(self._url, json=payload, timeout=self._timeout)

    def notify(self, task: Task) -> bool:
        if not self._url:
            logger.info("Webhook URL not configured; skipping completion notice for task id=%s", task.id)
            return False

        payload = build_completion_payload(task, self._clock())

        try:
            resp = self._post(payload)
            resp.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            failure = NotificationFailure(f'Failed to send webhook for "{task.name}"')
            logger.warning(
                "Webhook delivery failed task_id=%s url=%s: %s (%s)",
                task.id,
                self._url,
                failure,
                e.__class__.__name__,
            )
            self._notifications.push(failure.user_message, Severity.ERROR)
            return False

        logger.info("Webhook delivered task_id=%s status=%s", task.id, resp.status_code)
        self._notifications.push(f'Task "{task.name}" completion sent to webhook', Severity.SUCCESS)
        return True
