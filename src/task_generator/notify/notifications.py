# src/task_generator/notify/notifications.py

from __future__ import annotations

import itertools
import logging
import time
from collections.abc import Callable

from ..tasks.task_models import Notification, Severity

logger = logging.getLogger(__name__)

NotificationListener = Callable[[Notification], None]


class NotificationCenter:
    """
    Ephemeral user feedback (toasts).

    A notification is visible until it is dismissed or `ttl_seconds` elapse,
    whichever comes first. Expiry is applied lazily on read. Nothing here is
    persisted and nothing here touches task data.
    """

    def __init__(
        self,
        *,
        ttl_seconds: float = 5.0,
        clock: Callable[[], float] = time.monotonic,
        listener: NotificationListener | None = None,
    ) -> None:
        self._ttl = float(ttl_seconds)
        self._clock = clock
        self._ids = itertools.count(1)
        self._items: list[Notification] = []
        self.listener = listener

    def _prune(self) -> None:
        now = self._clock()
        self._items = [n for n in self._items if now - n.created_at < self._ttl]

    def __len__(self) -> int:
        return len(self._items)

    def push(self, message: str, severity: Severity = Severity.INFO) -> Notification:
        self._prune()
        n = Notification(
            id=next(self._ids),
            message=message,
            severity=Severity(severity),
            created_at=self._clock(),
        )
        self._items.append(n)
        logger.debug("Notification #%d (%s): %s", n.id, n.severity, n.message)

        if self.listener is not None:
            try:
                self.listener(n)
            except Exception:
                logger.debug("Notification listener failed.", exc_info=True)
        return n

    def dismiss(self, notification_id: int) -> bool:
        before = len(self._items)
        self._items = [n for n in self._items if n.id != notification_id]
        return len(self._items) != before

    def active(self) -> list[Notification]:
        self._prune()
        return list(self._items)

    def clear(self) -> None:
        self._items = []
