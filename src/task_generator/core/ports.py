# src/task_generator/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps the LLM provider, the storage backend and the webhook transport
swappable and makes testing easier.
"""

from typing import Any, Protocol

ChatMessage = dict[str, str]
# OpenAI-style chat messages: {"role": "...", "content": "..."}.


class LLMClient(Protocol):
    """Blocking chat completion client (OpenAI-compatible)."""

    def complete(self, messages: list[ChatMessage], *, credential: str) -> str: ...


class KeyValueStore(Protocol):
    """
    Keyed string blobs (the role localStorage plays in a browser).

    load() returns None for a missing key.
    """

    def load(self, key: str) -> str | None: ...
    def save(self, key: str, value: str) -> None: ...


class Notifier(Protocol):
    """Called with the updated task after it transitions to completed."""

    def notify(self, task: Any) -> bool: ...
