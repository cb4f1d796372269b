# src/task_generator/connectors/console_connector.py

from __future__ import annotations

import logging
import os
import sys
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..core.errors import TaskGeneratorError, friendly_error_message
from ..core.state import AppState
from ..tasks import task_api
from ..tasks.task_models import Notification, Severity

logger = logging.getLogger(__name__)

_COLOR = sys.stdout.isatty() and os.environ.get("NO_COLOR") is None

# ANSI foreground codes per theme; dark terminals get the brighter variants.
_PALETTES: dict[bool, dict[str, str]] = {
    False: {Severity.INFO: "34", Severity.SUCCESS: "32", Severity.ERROR: "31", "dim": "2"},
    True: {Severity.INFO: "94", Severity.SUCCESS: "92", Severity.ERROR: "91", "dim": "90"},
}


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _paint(text: str, role: str, dark: bool) -> str:
    if not _COLOR:
        return text
    return f"\033[{_PALETTES[dark][role]}m{text}\033[0m"


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


def make_notification_printer(state_ref: list[AppState]):
    """Listener that prints notifications as they are pushed (state bound later)."""

    def _print(n: Notification) -> None:
        dark = state_ref[0].dark_mode if state_ref else False
        _print_ts(_paint(f"[{n.severity.upper()}] {n.message}", n.severity, dark))

    return _print


def _generate(state: AppState, context: str) -> None:
    words = len(context.split())
    _print_ts(_paint(f"Generating tasks for a {words}-word goal...", "dim", state.dark_mode))
    try:
        drafts = task_api.generate_tasks(state, context)
    except TaskGeneratorError as e:
        logger.info("Generation failed: %s", e.__class__.__name__)
        _print_ts(_paint(f"Error generating tasks: {friendly_error_message(e)}", Severity.ERROR, state.dark_mode))
        return

    offset = len(state.store) - len(drafts)
    lines = [f"Added {len(drafts)} task(s):"]
    for i, t in enumerate(drafts, start=offset + 1):
        timeframe = f" ({t.timeframe})" if t.timeframe else ""
        lines.append(f"  {i}. {t.name}{timeframe}")
    _print_ts("\n".join(lines))


def run_console_loop(state: AppState) -> None:
    logger.info("Console connector started (tasks=%d).", len(state.store))
    _print_ts("[CONSOLE] Describe a goal to generate tasks. Use /help for commands. Use /exit to quit.\n")

    while True:
        try:
            user_input = input(">>> Goal: ").strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        try:
            cmd_response = command_registry.handle(state, user_input)
        except Exception:
            logger.exception("Command handler crashed.")
            cmd_response = "Internal error while handling a command."

        if cmd_response is not None:
            _print_ts(cmd_response)
            continue

        try:
            _generate(state, user_input)
        except Exception:
            logger.exception("Console generate handler crashed.")
            _print_ts("Internal error while generating tasks.")

    logger.info("Console connector finished.")
