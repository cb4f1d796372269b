# src/task_generator/cli/commands.py

from __future__ import annotations

import logging
from collections.abc import Callable

from ..core.errors import TaskGeneratorError, friendly_error_message
from ..core.state import AppState
from ..tasks import task_api
from ..tasks.task_models import Task

CommandHandler = Callable[[AppState, list[str]], str]

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by connectors (/help, /list, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}
        self._max_args: dict[str, int] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
        max_args: int | None = None,
    ) -> None:
        """
        `max_args` caps the split: the last argument keeps the rest of the
        line with its original spacing.
        """
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for k in [key, *(a.lower() for a in aliases)]:
            self._handlers[k] = handler
            if max_args is not None:
                self._max_args[k] = max_args

    def handle(self, state: AppState, line: str) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split(maxsplit=1)
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        rest = parts[1] if len(parts) > 1 else ""

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        limit = self._max_args.get(name)
        args = rest.split() if limit is None else rest.split(maxsplit=limit - 1)

        try:
            return handler(state, args)
        except TaskGeneratorError as e:
            return friendly_error_message(e)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        lines.append("  (any other text) - generate tasks for that goal")
        return "\n".join(lines)


registry = CommandRegistry()


def format_task(pos: int, task: Task) -> str:
    mark = "x" if task.completed else " "
    timeframe = f" ({task.timeframe})" if task.timeframe else ""
    return f"{pos}. [{mark}] {task.name}{timeframe}\n     {task.description}"


def _task_or_error(state: AppState, args: list[str], usage: str) -> Task | str:
    if not args:
        return usage
    task = task_api.resolve_task_ref(state, args[0])
    if task is None:
        return f"No task {args[0]!r}. Use /list to see task numbers."
    return task


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    s = state.settings
    if state.credential_override:
        key_src = "session override"
    elif getattr(s, "openai_api_key", None):
        key_src = "environment"
    else:
        key_src = "not set"
    return (
        "Status:\n"
        f"  Model: {getattr(s, 'llm_model', '?')}\n"
        f"  API key: {key_src}\n"
        f"  Webhook: {getattr(s, 'webhook_url', '') or 'disabled'}\n"
        f"  Theme: {'dark' if state.dark_mode else 'light'}\n"
        f"  Tasks: {task_api.progress_summary(state)}"
    )


def cmd_list(state: AppState, args: list[str]) -> str:
    tasks = state.store.tasks
    if not tasks:
        return "No tasks yet. Describe a goal to generate some."
    lines = [f"Your tasks ({task_api.progress_summary(state)}):"]
    lines.extend(format_task(i, t) for i, t in enumerate(tasks, start=1))
    return "\n".join(lines)


def cmd_done(state: AppState, args: list[str]) -> str:
    """
    /done <n>  -> toggle completion of task n
    """
    found = _task_or_error(state, args, "Usage: /done <task number>")
    if isinstance(found, str):
        return found
    updated = task_api.toggle_task(state, found.id)
    if updated is None:
        return f"No task {args[0]!r}."
    state_text = "completed" if updated.completed else "reopened"
    return f'Task "{updated.name}" {state_text}.'


def cmd_edit(state: AppState, args: list[str]) -> str:
    """
    /edit <n> <name> | <description>
    """
    usage = "Usage: /edit <task number> <name> | <description>"
    found = _task_or_error(state, args, usage)
    if isinstance(found, str):
        return found

    rest = args[1] if len(args) > 1 else ""
    if "|" not in rest:
        return usage
    name, description = rest.split("|", 1)

    updated = task_api.edit_task(state, found.id, name=name, description=description)
    if updated is None:
        return f"No task {args[0]!r}."
    return f'Task "{updated.name}" saved.'


def cmd_delete(state: AppState, args: list[str]) -> str:
    found = _task_or_error(state, args, "Usage: /delete <task number>")
    if isinstance(found, str):
        return found
    task_api.delete_task(state, found.id)
    return f'Task "{found.name}" deleted.'


def cmd_key(state: AppState, args: list[str]) -> str:
    """
    /key <token>  -> use this API key for the session
    /key clear    -> fall back to the configured key
    """
    if not args:
        return "Usage: /key <api key> | /key clear"
    if args[0].lower() == "clear":
        state.credential_override = ""
        return "Session API key cleared."
    state.credential_override = args[0].strip()
    return "Session API key set."


def cmd_dark(state: AppState, args: list[str]) -> str:
    """
    /dark         -> toggle
    /dark on|off  -> set
    """
    if not args:
        enabled = task_api.toggle_dark_mode(state)
    else:
        arg = args[0].lower()
        if arg in ("on", "1", "true", "yes"):
            enabled = task_api.set_dark_mode(state, True)
        elif arg in ("off", "0", "false", "no"):
            enabled = task_api.set_dark_mode(state, False)
        else:
            return "Usage: /dark on or /dark off."
    return f"Theme: {'dark' if enabled else 'light'}."


def cmd_notes(state: AppState, args: list[str]) -> str:
    items = state.notifications.active()
    if not items:
        return "No notifications."
    return "\n".join(f"  #{n.id} [{n.severity}] {n.message}" for n in items)


def cmd_dismiss(state: AppState, args: list[str]) -> str:
    if not args or not args[0].lstrip("#").isdigit():
        return "Usage: /dismiss <notification id>"
    nid = int(args[0].lstrip("#"))
    if state.notifications.dismiss(nid):
        return f"Notification #{nid} dismissed."
    return f"No active notification #{nid}."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show model, key source, webhook and progress.")
registry.register("list", cmd_list, help_text="List tasks.", aliases=["ls"])
registry.register("done", cmd_done, help_text="Toggle completion: /done <n>.", aliases=["toggle"])
registry.register(
    "edit",
    cmd_edit,
    help_text="Edit a task: /edit <n> <name> | <description>.",
    max_args=2,
)
registry.register("delete", cmd_delete, help_text="Delete a task: /delete <n>.", aliases=["rm"])
registry.register("key", cmd_key, help_text="Session API key: /key <token> | /key clear.")
registry.register("dark", cmd_dark, help_text="Theme: /dark | /dark on | /dark off.")
registry.register("notes", cmd_notes, help_text="Show active notifications.")
registry.register("dismiss", cmd_dismiss, help_text="Dismiss a notification: /dismiss <id>.")
