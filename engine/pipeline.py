"""Pipeline orchestrator: validate → fetch → resolve style → complete → extract."""

from __future__ import annotations

import logging
import time

from config import Settings
from engine.errors import CompletionError, ContentError, DistillError, ValidationFailure, classify_error
from engine.extractor import extract
from engine.prompt_builder import build_system_prompt, build_user_prompt
from engine.style_resolver import resolve
from engine.url_normalizer import normalize_url
from schemas.request import ContentRequest, SummarizeRequest, TargetRequest, UrlRequest
from schemas.response import ErrorResponse, SummarizeResponse
from services.content_fetcher import ContentFetcher
from services.llm_service import CompletionClient

logger = logging.getLogger("distill.pipeline")


def validate(request: SummarizeRequest) -> TargetRequest:
    """Narrow the wire request into exactly one target variant.

    Raises ``ValidationFailure`` when neither or both of ``url`` and
    ``content`` carry text.
    """
    url = (request.url or "").strip()
    content = (request.content or "").strip()
    options = {"style": request.style, "bullet_count": request.bullet_count, "model": request.model}

    if url and content:
        raise ValidationFailure("Provide either a URL or content, not both.")
    if url:
        return UrlRequest(url=url, **options)
    if content:
        return ContentRequest(content=content, **options)
    raise ValidationFailure("Either a URL or content is required.")


class SummarizationPipeline:
    """Run one summarize request end to end.

    Every failure is caught here and turned into an ``ErrorResponse``; the
    caller never sees an exception and never gets a partial result.
    """

    def __init__(self, settings: Settings, fetcher: ContentFetcher, completion_client: CompletionClient) -> None:
        self._fetcher = fetcher
        self._completion = completion_client
        self._default_model = settings.default_model
        self._min_content_chars = settings.min_content_chars
        self._min_summary_chars = settings.min_summary_chars

    async def run(self, request: SummarizeRequest) -> SummarizeResponse | ErrorResponse:
        t0 = time.perf_counter()
        try:
            result = await self._run(validate(request))
        except DistillError as exc:
            code = classify_error(exc)
            logger.warning("Pipeline failed with %s: %s", code.value, exc.message)
            return ErrorResponse(error=exc.message, error_code=code)
        except Exception as exc:
            logger.exception("Unexpected pipeline failure")
            return ErrorResponse(error=str(exc) or "An unexpected error occurred.", error_code=classify_error(exc))

        logger.info("Pipeline complete in %.2fs (%d chars → %d chars)",
                    time.perf_counter() - t0, len(result.original_content), len(result.summary))
        return result

    async def _run(self, target: TargetRequest) -> SummarizeResponse:
        source_url: str | None = None
        if isinstance(target, UrlRequest):
            source_url = normalize_url(target.url)
            content = await self._fetcher.fetch(source_url)
        else:
            content = target.content

        if len(content.strip()) < self._min_content_chars:
            raise ContentError(
                "Content is too short to summarize meaningfully "
                f"(less than {self._min_content_chars} characters)."
            )

        style = resolve(target.style, target.bullet_count)
        logger.info("Summarizing %d chars with style '%s'", len(content), style.style_id)

        raw = await self._completion.complete(
            build_system_prompt(style),
            build_user_prompt(content, style, source_url=source_url),
            model=target.model or self._default_model,
        )

        summary = extract(raw)
        if len(summary) < self._min_summary_chars:
            raise CompletionError("Failed to generate a meaningful summary (insufficient content).")

        return SummarizeResponse(original_content=content, summary=summary)


def build_pipeline(settings: Settings) -> SummarizationPipeline:
    """Wire the production collaborators from *settings*."""
    return SummarizationPipeline(settings, ContentFetcher(settings), CompletionClient(settings))
