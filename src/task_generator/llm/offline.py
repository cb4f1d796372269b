# src/task_generator/llm/offline.py

from __future__ import annotations

import json
import re

from ..core.ports import ChatMessage

_GOAL_RE = re.compile(r'context:\s*"(?P<goal>.*?)",\s*generate', re.DOTALL)


class OfflineLLMClient:
    """
    Offline deterministic LLM client used for demos when no external API is configured.

    Returns four generic tasks built around the goal quoted in the prompt,
    wrapped in a sentence so the bracket-scan fallback path is exercised too.
    """

    def complete(self, messages: list[ChatMessage], *, credential: str) -> str:
        prompt = ""
        for m in reversed(messages):
            if m["role"] == "user":
                prompt = m["content"]
                break

        m = _GOAL_RE.search(prompt)
        goal = (m.group("goal") if m else prompt).strip() or "your goal"

        tasks = [
            {
                "name": "Clarify the outcome",
                "description": f'Write down what "done" looks like for: {goal}',
                "timeframe": "30 minutes",
            },
            {
                "name": "List the steps",
                "description": f"Break {goal} into concrete steps and order them.",
                "timeframe": "1 hour",
            },
            {
                "name": "Gather what you need",
                "description": "Collect the tools, information and people the steps depend on.",
                "timeframe": "2 hours",
            },
            {
                "name": "Do the first step",
                "description": "Start with the smallest step and review progress afterwards.",
                "timeframe": "1 day",
            },
        ]
        return "Offline demo mode (no API key configured):\n" + json.dumps(tasks, ensure_ascii=False, indent=2)
