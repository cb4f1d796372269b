# src/task_generator/llm/client.py

from __future__ import annotations

import logging
import time
from typing import Any

import httpx
import openai
from openai import OpenAI

from ..core.errors import AuthError, MalformedResponse, RateLimited, TransportError
from ..core.ports import ChatMessage

logger = logging.getLogger(__name__)


def _is_auth_error(exc: Exception) -> bool:
    if isinstance(exc, openai.AuthenticationError):
        return True
    return isinstance(exc, openai.APIStatusError) and exc.status_code == 401


def _is_rate_limit_error(exc: Exception) -> bool:
    if isinstance(exc, openai.RateLimitError):
        return True
    return isinstance(exc, openai.APIStatusError) and exc.status_code == 429


class OpenAIChatClient:
    """
    Single-shot chat completion against an OpenAI-compatible endpoint.

    - The credential is passed per call (a session override may differ from
      the configured default), so a lightweight SDK client is built per call.
    - SDK retries are disabled: failures surface to the user immediately.
    - No explicit request timeout; the transport default applies.
    """

    def __init__(self, settings: Any, *, http_client: httpx.Client | None = None) -> None:
        self._base_url = str(getattr(settings, "openai_base_url", "") or "").strip()
        self._model = str(getattr(settings, "llm_model", "gpt-3.5-turbo"))
        self._max_tokens = int(getattr(settings, "llm_max_tokens", 500))
        self._temperature = float(getattr(settings, "llm_temperature", 0.7))
        self._http_client = http_client

        if not self._base_url:
            raise RuntimeError("LLM base URL is not set. Set TASKGEN_OPENAI_BASE_URL in your .env.")

    def _client(self, credential: str) -> OpenAI:
        return OpenAI(
            api_key=credential,
            base_url=self._base_url,
            max_retries=0,
            http_client=self._http_client,
        )

    def complete(self, messages: list[ChatMessage], *, credential: str) -> str:
        client = self._client(credential)

        logger.info(
            "LLM: requesting completion model=%s max_tokens=%d temperature=%.2f",
            self._model,
            self._max_tokens,
            self._temperature,
        )
        t0 = time.monotonic()

        try:
            resp = client.chat.completions.create(
                model=self._model,
                messages=messages,  # type: ignore[arg-type]
                max_tokens=self._max_tokens,
                temperature=self._temperature,
            )
        except Exception as e:
            if _is_auth_error(e):
                raise AuthError() from e
            if _is_rate_limit_error(e):
                raise RateLimited() from e
            if isinstance(e, (openai.APIError, httpx.HTTPError)):
                logger.info("LLM: request failed (%s)", e.__class__.__name__)
                raise TransportError() from e
            raise

        logger.info("LLM: completion received (%.2fs)", time.monotonic() - t0)

        try:
            content = resp.choices[0].message.content
        except (AttributeError, IndexError, TypeError) as e:
            raise MalformedResponse() from e

        if not content or not content.strip():
            raise MalformedResponse()
        return content
