"""Chat-completion client with bounded retry and rate-limit model fallback.

The retry loop is driven by tenacity; *what* happens between attempts is
decided by ``ModelAttempt``, a small state machine:

    ModelAttempt(model, attempts_left)
        ── failure, attempts left, rate limited, fallback available ──▶ RETRY_FALLBACK
        ── failure, attempts left ───────────────────────────────────▶ RETRY_SAME
        ── failure, no attempts left ────────────────────────────────▶ FAIL (last error re-raised)
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

import anyio
import httpx
from openai import APIConnectionError, APIStatusError, APITimeoutError, AsyncOpenAI
from tenacity import AsyncRetrying, RetryCallState, retry_if_exception_type, wait_exponential, wait_fixed

from config import Settings
from engine.errors import CompletionError
from engine.extractor import extract

logger = logging.getLogger("distill.llm")


class RetryAction(str, Enum):
    RETRY_SAME = "retry_same"
    RETRY_FALLBACK = "retry_fallback"
    FAIL = "fail"


@dataclass
class ModelAttempt:
    """Mutable per-call retry state."""

    model: str
    attempts_left: int
    number: int = 1
    last_error: CompletionError | None = None

    def next_action(self, error: CompletionError, fallback_model: str | None) -> RetryAction:
        if self.attempts_left <= 0:
            return RetryAction.FAIL
        if error.rate_limited and fallback_model and fallback_model != self.model:
            return RetryAction.RETRY_FALLBACK
        return RetryAction.RETRY_SAME

    def advance(self, error: CompletionError, fallback_model: str | None) -> RetryAction:
        """Record *error* and move to the next attempt."""
        action = self.next_action(error, fallback_model)
        self.last_error = error
        if action is RetryAction.FAIL:
            return action
        if action is RetryAction.RETRY_FALLBACK:
            self.model = fallback_model  # type: ignore[assignment]
        self.attempts_left -= 1
        self.number += 1
        return action


def _error_detail(exc: APIStatusError) -> str:
    """Best-effort human-readable message from an API error body."""
    body = exc.body
    if isinstance(body, dict):
        inner = body.get("error", body)
        if isinstance(inner, dict) and inner.get("message"):
            return str(inner["message"])
        if body.get("message"):
            return str(body["message"])
    return exc.message


def _status_message(status: int, detail: str) -> str:
    if status == 429:
        return (
            f"Completion API rate limit reached (429): {detail}. The free tier quota may be exhausted; "
            "try again later or configure your own API key."
        )
    if status == 401:
        return "Completion API key is invalid or has expired (401)."
    return f"Completion API error ({status}): {detail}"


class CompletionClient:
    """Send system + user prompts to an OpenAI-compatible chat-completion API.

    Parameters
    ----------
    settings : Settings
        Supplies endpoint, key, models, retry policy and thresholds.
    http_client : httpx.AsyncClient, optional
        Custom HTTP client for the SDK (used by tests to fake the API).
    sleep : callable, optional
        Awaitable sleep used between retries; defaults to ``asyncio.sleep``.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        http_client: httpx.AsyncClient | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self._default_model = settings.default_model
        self._fallback_model = settings.fallback_model or None
        self._max_retries = max(0, settings.max_retries)
        self._max_tokens = settings.max_tokens
        self._timeout = settings.completion_timeout
        self._min_chars = settings.min_summary_chars
        self._sleep = sleep

        if settings.retry_exponential:
            self._wait = wait_exponential(multiplier=settings.retry_backoff_seconds, max=30)
        else:
            self._wait = wait_fixed(settings.retry_backoff_seconds)

        self._client: AsyncOpenAI | None = None
        if settings.api_key:
            self._client = AsyncOpenAI(
                api_key=settings.api_key,
                base_url=settings.completion_base_url,
                default_headers={"HTTP-Referer": settings.site_url, "X-Title": settings.app_name},
                max_retries=0,
                timeout=settings.completion_timeout,
                http_client=http_client,
            )

    @property
    def default_model(self) -> str:
        return self._default_model

    async def complete(self, system_prompt: str, user_prompt: str, model: str | None = None) -> str:
        """Return the raw generated text, retrying per the configured policy.

        Raises
        ------
        CompletionError
            The last error once retries are exhausted, or a missing API key.
        """
        client = self._client
        if client is None:
            raise CompletionError("Completion API key is not configured. Set OPENROUTER_API_KEY.")

        state = ModelAttempt(model=model or self._default_model, attempts_left=self._max_retries)

        def _should_stop(retry_state: RetryCallState) -> bool:
            error = retry_state.outcome.exception() if retry_state.outcome else None
            if not isinstance(error, CompletionError):
                return True
            return state.next_action(error, self._fallback_model) is RetryAction.FAIL

        def _before_retry(retry_state: RetryCallState) -> None:
            error = retry_state.outcome.exception()
            failed_model = state.model
            action = state.advance(error, self._fallback_model)
            logger.warning(
                "Completion attempt %d with %s failed (%s); %s with %s",
                state.number - 1,
                failed_model,
                error,
                "falling back" if action is RetryAction.RETRY_FALLBACK else "retrying",
                state.model,
            )

        retrying = AsyncRetrying(
            stop=_should_stop,
            wait=self._wait,
            retry=retry_if_exception_type(CompletionError),
            before_sleep=_before_retry,
            sleep=self._sleep,
            reraise=True,
        )

        async for attempt in retrying:
            with attempt:
                text = await self._request(client, state.model, system_prompt, user_prompt)
        logger.info("Completion succeeded with %s on attempt %d", state.model, state.number)
        return text

    async def _request(self, client: AsyncOpenAI, model: str, system_prompt: str, user_prompt: str) -> str:
        try:
            with anyio.fail_after(self._timeout):
                response = await client.chat.completions.create(
                    model=model,
                    messages=[
                        {"role": "system", "content": system_prompt},
                        {"role": "user", "content": user_prompt},
                    ],
                    max_tokens=self._max_tokens,
                )
        except (TimeoutError, APITimeoutError) as exc:
            raise CompletionError(f"Completion request timed out after {self._timeout:g} seconds.") from exc
        except APIConnectionError as exc:
            raise CompletionError(f"Could not reach the completion API: {exc}") from exc
        except APIStatusError as exc:
            raise CompletionError(
                _status_message(exc.status_code, _error_detail(exc)),
                status_code=exc.status_code,
            ) from exc

        text = self._message_content(response)
        if len(extract(text)) < self._min_chars:
            raise CompletionError("Failed to generate a meaningful summary (insufficient content).")
        return text

    @staticmethod
    def _message_content(response: Any) -> str:
        """Pull ``choices[0].message.content`` out of *response* or fail."""
        choices = getattr(response, "choices", None)
        if not choices:
            # Some gateways answer 200 with an {"error": {...}} body instead of choices.
            extra = getattr(response, "model_extra", None) or {}
            error = extra.get("error")
            if isinstance(error, dict):
                status = error.get("code") if isinstance(error.get("code"), int) else None
                raise CompletionError(
                    _status_message(status, str(error.get("message", error))) if status
                    else f"Completion API error: {error.get('message', error)}",
                    status_code=status,
                )
            raise CompletionError("Malformed completion API response: no choices returned.")

        message = getattr(choices[0], "message", None)
        content = getattr(message, "content", None)
        if not isinstance(content, str) or not content.strip():
            raise CompletionError("Malformed completion API response: message content is empty.")
        return content.strip()
