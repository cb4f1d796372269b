# src/task_generator/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- No secrets required at import time.
- Components receive settings explicitly; nothing reads the environment mid-call.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

ENV_PREFIX = "TASKGEN"

load_dotenv(override=False)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _first_env(*names: str, default: str | None = None) -> str | None:
    for n in names:
        v = os.getenv(n)
        if v is not None and v.strip() != "":
            return v
    return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- LLM / OpenAI ----
    openai_api_key: Optional[str]
    openai_base_url: str
    llm_model: str
    llm_max_tokens: int
    llm_temperature: float
    offline: bool

    # ---- Webhook / notifications ----
    webhook_url: str
    webhook_timeout_seconds: float
    notification_ttl_seconds: float

    # ---- Local data (ignored by git) ----
    data_dir: Path

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "task-generator") or "task-generator"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        # The Vite name is accepted so an existing frontend .env keeps working.
        openai_api_key = _first_env(
            _k("OPENAI_API_KEY"),
            "OPENAI_API_KEY",
            "VITE_OPENAI_API_KEY",
            default=None,
        )
        openai_base_url = _env(_k("OPENAI_BASE_URL"), "https://api.openai.com/v1")
        llm_model = _env(_k("LLM_MODEL"), "gpt-3.5-turbo").strip() or "gpt-3.5-turbo"
        llm_max_tokens = _env_int(_k("LLM_MAX_TOKENS"), 500)
        llm_temperature = _env_float(_k("LLM_TEMPERATURE"), 0.7)
        offline = _env_bool(_k("OFFLINE"), False)

        webhook_url = _env(_k("WEBHOOK_URL"), "https://webhook.site/unique-id").strip()
        webhook_timeout_seconds = _env_float(_k("WEBHOOK_TIMEOUT_SECONDS"), 5.0)
        notification_ttl_seconds = _env_float(_k("NOTIFICATION_TTL_SECONDS"), 5.0)

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/task_generator"))

        return Settings(
            app_name=app_name,
            log_level=log_level,
            openai_api_key=openai_api_key,
            openai_base_url=openai_base_url,
            llm_model=llm_model,
            llm_max_tokens=llm_max_tokens,
            llm_temperature=llm_temperature,
            offline=offline,
            webhook_url=webhook_url,
            webhook_timeout_seconds=webhook_timeout_seconds,
            notification_ttl_seconds=notification_ttl_seconds,
            data_dir=data_dir,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
