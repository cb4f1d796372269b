# src/task_generator/core/errors.py

"""
Error taxonomy.

Every error carries a human-readable `user_message` that connectors can show as-is.
Only NotificationFailure is non-fatal: it never aborts or reverts a task mutation.
"""

from __future__ import annotations


class TaskGeneratorError(Exception):
    """Base error. `user_message` is safe to display."""

    default_message = "Failed to generate tasks. Please check your API key and try again."

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)
        self.user_message = message or self.default_message


class ValidationError(TaskGeneratorError):
    """Bad or missing local input. No network call was attempted."""

    default_message = "Invalid input."


class AuthError(TaskGeneratorError):
    """The completion endpoint rejected the credential (HTTP 401)."""

    default_message = "Invalid API key. Please check your OpenAI API key and try again."


class RateLimited(TaskGeneratorError):
    """The completion endpoint throttled the request (HTTP 429)."""

    default_message = "Rate limit exceeded. Please wait a moment and try again."


class MalformedResponse(TaskGeneratorError):
    """The model output could not be read as a task list."""

    default_message = (
        "The AI response could not be read as a task list. Please try again."
    )


class TransportError(TaskGeneratorError):
    """Network failure, timeout or an unexpected HTTP status."""

    default_message = (
        "Failed to generate tasks. Please check your connection and API key and try again."
    )


class NotificationFailure(TaskGeneratorError):
    """Webhook delivery failed. Informational only."""

    default_message = "Failed to send webhook."


def friendly_error_message(err: BaseException) -> str:
    if isinstance(err, TaskGeneratorError):
        return err.user_message
    return TaskGeneratorError.default_message
