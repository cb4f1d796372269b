"""Generate actionable tasks for a goal with an LLM and keep them in a local store."""

__version__ = "0.1.0"
