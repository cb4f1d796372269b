# src/task_generator/tasks/ingestion.py

"""
Task ingestion: goal text -> prompt -> completion -> parsed, validated tasks.

Parsing policy (ordered, all-or-nothing):
1. the whole (trimmed) response is parsed as JSON;
2. otherwise the span from the first '[' to the last ']' is parsed;
3. otherwise MalformedResponse.

A bracket span can recover an array the model wrapped in prose. It is
accepted only if it parses completely, so a truncated array still fails.
"""

from __future__ import annotations

import json
import logging
import re
import uuid
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

from ..core.errors import MalformedResponse, ValidationError
from ..core.ports import ChatMessage, LLMClient
from .task_models import Task

logger = logging.getLogger(__name__)

TASKS_PER_REQUEST = 4

_ARRAY_RE = re.compile(r"\[[\s\S]*\]")

_PROMPT_TEMPLATE = """Based on the context: "{context}", generate exactly {count} tasks to help accomplish this goal.

Return ONLY a valid JSON array with this exact structure:
[
  {{
    "name": "Task name",
    "description": "Detailed description of what needs to be done",
    "timeframe": "estimated time (e.g., '2 hours', '1 day', '30 minutes')"
  }}
]

Make sure each task is actionable, specific, and includes a realistic timeframe estimate."""

# Keys the decoration step owns; a model-supplied value for these is replaced.
_DECORATED_KEYS = frozenset({"id", "completed", "createdAt"})


def build_prompt(context: str, count: int = TASKS_PER_REQUEST) -> str:
    return _PROMPT_TEMPLATE.format(context=context, count=count)


def _new_task_id() -> str:
    return uuid.uuid4().hex


def _utc_now_ms() -> datetime:
    now = datetime.now(UTC)
    # Stored timestamps carry milliseconds; truncate so a reload compares equal.
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


def extract_json_array(text: str) -> list[Any]:
    text = (text or "").strip()

    try:
        parsed = json.loads(text)
    except json.JSONDecodeError:
        m = _ARRAY_RE.search(text)
        if not m:
            raise MalformedResponse() from None
        try:
            parsed = json.loads(m.group(0))
        except json.JSONDecodeError as e:
            raise MalformedResponse() from e

    if not isinstance(parsed, list):
        raise MalformedResponse()
    return parsed


def _validate_descriptor(index: int, item: Any) -> dict[str, Any]:
    if not isinstance(item, dict):
        logger.info("Task #%d is not an object (%s)", index, type(item).__name__)
        raise MalformedResponse()

    for key in ("name", "description"):
        value = item.get(key)
        if not isinstance(value, str) or not value.strip():
            logger.info("Task #%d has empty or missing %r", index, key)
            raise MalformedResponse()

    timeframe = item.get("timeframe")
    if timeframe is not None and not isinstance(timeframe, (str, int, float)):
        raise MalformedResponse()
    return item


def parse_task_array(text: str) -> list[dict[str, Any]]:
    """Parse model output into validated task descriptors (dicts)."""
    items = extract_json_array(text)
    return [_validate_descriptor(i, item) for i, item in enumerate(items)]


def decorate(
    descriptors: list[dict[str, Any]],
    *,
    created_at: datetime,
    id_factory: Callable[[], str] = _new_task_id,
) -> list[Task]:
    """Attach id / completed=False / created_at; keep everything else as given."""
    out: list[Task] = []
    for d in descriptors:
        timeframe = d.get("timeframe")
        out.append(
            Task(
                id=id_factory(),
                name=d["name"],
                description=d["description"],
                timeframe="" if timeframe is None else str(timeframe),
                completed=False,
                created_at=created_at,
                extra={
                    k: v
                    for k, v in d.items()
                    if k not in _DECORATED_KEYS and k not in ("name", "description", "timeframe")
                },
            )
        )
    return out


class TaskIngestion:
    """
    Generate task drafts for a goal.

    `default_credential` is the process-wide key (from settings); a non-empty
    per-call credential takes precedence. Only one generation may be in
    flight at a time.
    """

    def __init__(
        self,
        llm: LLMClient,
        *,
        default_credential: str | None = None,
        clock: Callable[[], datetime] = _utc_now_ms,
        id_factory: Callable[[], str] = _new_task_id,
    ) -> None:
        self._llm = llm
        self._default_credential = (default_credential or "").strip() or None
        self._clock = clock
        self._id_factory = id_factory
        self._in_flight = False

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    def resolve_credential(self, credential: str | None) -> str | None:
        override = (credential or "").strip()
        return override or self._default_credential

    def generate(self, context_text: str, credential: str | None = None) -> list[Task]:
        context = (context_text or "").strip()
        if not context:
            raise ValidationError("Please enter a context to generate tasks.")

        key = self.resolve_credential(credential)
        if not key:
            raise ValidationError(
                "Please enter your OpenAI API key or set it in environment variables."
            )

        if self._in_flight:
            raise ValidationError("A generation request is already in progress.")

        self._in_flight = True
        try:
            messages: list[ChatMessage] = [{"role": "user", "content": build_prompt(context)}]
            text = self._llm.complete(messages, credential=key)
            descriptors = parse_task_array(text)
            drafts = decorate(descriptors, created_at=self._clock(), id_factory=self._id_factory)
        finally:
            self._in_flight = False

        logger.info("Generated %d task draft(s) for context of %d chars", len(drafts), len(context))
        return drafts
