# tests/test_webhook.py

from __future__ import annotations

import json
from datetime import UTC, datetime

import httpx

from task_generator.notify.notifications import NotificationCenter
from task_generator.notify.webhook import WebhookNotifier, build_completion_payload
from task_generator.storage.kv_store import InMemoryKVStore
from task_generator.tasks.task_store import TaskStore
from task_generator.tasks.task_models import Severity

from .fakes import ManualClock, make_task

COMPLETED_AT = datetime(2024, 5, 2, 8, 30, 0, tzinfo=UTC)


def _notifier(handler, url: str = "https://hooks.test/done"):
    center = NotificationCenter(clock=ManualClock())
    notifier = WebhookNotifier(
        url=url,
        notifications=center,
        timeout_seconds=5.0,
        http_client=httpx.Client(transport=httpx.MockTransport(handler)),
        clock=lambda: COMPLETED_AT,
    )
    return notifier, center


def test_payload_shape() -> None:
    task = make_task("42", "Book flight", completed=True)
    assert build_completion_payload(task, COMPLETED_AT) == {
        "taskId": "42",
        "taskName": "Book flight",
        "taskDescription": "Book flight description",
        "timeframe": "1 hour",
        "completedAt": "2024-05-02T08:30:00.000Z",
        "action": "task_completed",
    }


def test_successful_delivery_posts_json_and_reports_success() -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json={"ok": True})

    notifier, center = _notifier(handler)
    assert notifier.notify(make_task("42", "Book flight", completed=True)) is True

    (req,) = requests
    assert req.method == "POST"
    assert str(req.url) == "https://hooks.test/done"
    assert req.headers["content-type"] == "application/json"
    assert json.loads(req.content)["action"] == "task_completed"

    (note,) = center.active()
    assert note.severity is Severity.SUCCESS
    assert note.message == 'Task "Book flight" completion sent to webhook'


def test_non_2xx_reports_error() -> None:
    notifier, center = _notifier(lambda request: httpx.Response(500))
    assert notifier.notify(make_task("1", "Write report")) is False

    (note,) = center.active()
    assert note.severity is Severity.ERROR
    assert note.message == 'Failed to send webhook for "Write report"'


def test_timeout_reports_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    notifier, center = _notifier(handler)
    assert notifier.notify(make_task("1", "Slow")) is False
    assert center.active()[0].severity is Severity.ERROR


def test_empty_url_skips_delivery() -> None:
    calls = []
    notifier, center = _notifier(lambda r: calls.append(r) or httpx.Response(200), url="")

    assert notifier.notify(make_task("1")) is False
    assert calls == []
    assert center.active() == []


def test_store_completion_with_failing_webhook_keeps_task_completed() -> None:
    notifier, center = _notifier(lambda request: httpx.Response(503))
    store = TaskStore(InMemoryKVStore(), notifier)
    store.append([make_task("1", "Ship it")])

    store.update("1", completed=True)

    assert store.get("1").completed is True
    assert [n.severity for n in center.active()] == [Severity.ERROR]
