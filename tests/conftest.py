"""Shared fixtures: test settings and stub pipeline collaborators."""

from __future__ import annotations

import pytest

from config import Settings
from engine.pipeline import SummarizationPipeline

ARTICLE = (
    "The city council approved a new transit plan on Tuesday. The plan adds three bus lines, "
    "extends service hours on weekends and funds a study of a light rail corridor downtown."
)

MARKED_SUMMARY = "### START ###\nThe council approved a transit plan with three new bus lines.\n### END ###"


class StubFetcher:
    """Stands in for ``ContentFetcher``; records every URL it is asked for."""

    def __init__(self, text: str = ARTICLE, error: Exception | None = None) -> None:
        self.text = text
        self.error = error
        self.calls: list[str] = []

    async def fetch(self, url: str) -> str:
        self.calls.append(url)
        if self.error is not None:
            raise self.error
        return self.text


class StubCompletion:
    """Stands in for ``CompletionClient``; returns canned raw outputs in order."""

    def __init__(self, *responses: str | Exception) -> None:
        self.responses = list(responses) or [MARKED_SUMMARY]
        self.calls: list[dict] = []

    async def complete(self, system_prompt: str, user_prompt: str, model: str | None = None) -> str:
        self.calls.append({"system": system_prompt, "user": user_prompt, "model": model})
        response = self.responses[min(len(self.calls), len(self.responses)) - 1]
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"


@pytest.fixture
def settings() -> Settings:
    return Settings(
        openrouter_api_key="test-key",
        fallback_api_key="",
        completion_base_url="https://llm.test/v1",
        default_model="primary/model",
        fallback_model="fallback/model",
        content_proxy_url="https://proxy.test/",
        max_retries=1,
        retry_backoff_seconds=1.0,
        retry_exponential=False,
        block_script_clients=False,
    )


@pytest.fixture
def stub_fetcher() -> StubFetcher:
    return StubFetcher()


@pytest.fixture
def stub_completion() -> StubCompletion:
    return StubCompletion()


@pytest.fixture
def pipeline(settings, stub_fetcher, stub_completion) -> SummarizationPipeline:
    return SummarizationPipeline(settings, stub_fetcher, stub_completion)
