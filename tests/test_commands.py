# tests/test_commands.py

from __future__ import annotations

from task_generator.cli.commands import CommandRegistry, registry
from task_generator.tasks import task_api

TWO_TASKS = (
    '[{"name":"Book flight","description":"Find and book flight","timeframe":"2 hours"},'
    '{"name":"Pack","description":"Pack bags","timeframe":"1 hour"}]'
)


def test_command_registry_routes_handlers_and_aliases(state) -> None:
    reg = CommandRegistry()
    called = {"a": 0}

    def h(state, args):
        called["a"] += 1
        return "a:" + ",".join(args)

    reg.register("alpha", h, "alpha", aliases=["al"])

    assert reg.handle(state, "/alpha x y") == "a:x,y"
    assert reg.handle(state, "/AL") == "a:"
    assert called["a"] == 2


def test_max_args_keeps_trailing_text_verbatim(state) -> None:
    reg = CommandRegistry()
    reg.register("say", lambda state, args: "|".join(args), "say", aliases=["s"], max_args=2)

    assert reg.handle(state, "/say  to   a  b   c ") == "to|a  b   c "
    assert reg.handle(state, "/S to") == "to"
    assert reg.handle(state, "/say") == ""


def test_command_registry_unknown_and_non_command(state) -> None:
    reg = CommandRegistry()
    assert reg.handle(state, "hello") is None
    assert "Unknown command" in (reg.handle(state, "/nope") or "")
    assert "Empty command" in (reg.handle(state, "/") or "")


def test_list_done_edit_delete_flow(state, llm, notifier) -> None:
    llm.next_text = TWO_TASKS
    task_api.generate_tasks(state, "plan a trip")

    listing = registry.handle(state, "/list")
    assert "1. [ ] Book flight (2 hours)" in listing
    assert "0 of 2 completed" in listing

    assert registry.handle(state, "/done 1") == 'Task "Book flight" completed.'
    assert len(notifier.notified) == 1

    reply = registry.handle(state, "/edit 2 Pack light | Only carry-on")
    assert reply == 'Task "Pack light" saved.'
    assert state.store.tasks[1].description == "Only carry-on"

    assert registry.handle(state, "/delete 1") == 'Task "Book flight" deleted.'
    assert [t.name for t in state.store.tasks] == ["Pack light"]


def test_edit_with_empty_name_shows_validation_message(state, llm) -> None:
    llm.next_text = TWO_TASKS
    task_api.generate_tasks(state, "plan a trip")

    reply = registry.handle(state, "/edit 1 | new description")
    assert reply == "Task name and description must not be empty."
    assert state.store.tasks[0].name == "Book flight"


def test_edit_keeps_spacing_inside_name_and_description(state, llm) -> None:
    llm.next_text = TWO_TASKS
    task_api.generate_tasks(state, "plan a trip")

    reply = registry.handle(state, "/edit 1   Book  the flight |  line one   spaced  ")

    assert reply == 'Task "Book  the flight" saved.'
    task = state.store.tasks[0]
    assert task.name == "Book  the flight"
    assert task.description == "line one   spaced"


def test_unknown_task_reference(state) -> None:
    assert "No task" in registry.handle(state, "/done 7")
    assert registry.handle(state, "/delete").startswith("Usage")


def test_key_and_dark_commands(state) -> None:
    assert registry.handle(state, "/key sk-abc") == "Session API key set."
    assert state.credential_override == "sk-abc"
    assert "session override" in registry.handle(state, "/status")

    assert registry.handle(state, "/key clear") == "Session API key cleared."
    assert state.credential_override == ""

    assert registry.handle(state, "/dark on") == "Theme: dark."
    assert state.dark_mode is True
    assert registry.handle(state, "/dark") == "Theme: light."


def test_notes_and_dismiss(state) -> None:
    assert registry.handle(state, "/notes") == "No notifications."
    n = state.notifications.push("hello")

    assert f"#{n.id}" in registry.handle(state, "/notes")
    assert registry.handle(state, f"/dismiss {n.id}") == f"Notification #{n.id} dismissed."
    assert registry.handle(state, "/notes") == "No notifications."
