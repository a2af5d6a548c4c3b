"""Distill: style-aware content summarization service.

FastAPI application entry-point.
"""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from functools import lru_cache

from fastapi import Depends, FastAPI, Header, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import settings
from engine.errors import DistillError, ValidationFailure, classify_error
from engine.pipeline import SummarizationPipeline, build_pipeline
from engine.style_resolver import catalogue, parse_path
from schemas.request import SummarizeRequest
from schemas.response import ErrorCode, ErrorResponse, StyleCatalogue, StyleInfo

__version__ = "1.0.0"

# ── Logging ────────────────────────────────────────────────────────────

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s | %(name)-30s | %(levelname)-7s | %(message)s",
    stream=sys.stdout,
)
logger = logging.getLogger("distill")

_SCRIPT_AGENTS = ("curl", "python-requests")


def _error_payload(message: str, code: ErrorCode) -> JSONResponse:
    """Render the single failure shape; always HTTP 200."""
    body = ErrorResponse(error=message, error_code=code)
    return JSONResponse(status_code=200, content=body.model_dump(mode="json", by_alias=True))


# ── Dependencies ───────────────────────────────────────────────────────

@lru_cache(maxsize=1)
def get_pipeline() -> SummarizationPipeline:
    return build_pipeline(settings)


async def reject_script_clients(user_agent: str | None = Header(default=None)) -> None:
    """Turn away obvious scripted clients when ``BLOCK_SCRIPT_CLIENTS`` is set."""
    if not settings.block_script_clients:
        return
    agent = (user_agent or "").lower()
    if not agent or any(marker in agent for marker in _SCRIPT_AGENTS):
        logger.info("Rejected scripted client (user-agent=%r)", user_agent)
        raise ValidationFailure("Automated requests are not allowed. Please use a browser.")


# ── Lifespan ───────────────────────────────────────────────────────────

@asynccontextmanager
async def lifespan(app: FastAPI):  # noqa: ARG001
    logger.info(
        "Distill starting: model=%s fallback=%s retries=%d api_key=%s",
        settings.default_model,
        settings.fallback_model or "none",
        settings.max_retries,
        "configured" if settings.api_key else "missing",
    )
    yield
    logger.info("Distill shutting down.")


# ── App ────────────────────────────────────────────────────────────────

app = FastAPI(
    title="Distill",
    description="Summarizes web pages or raw text in a preset or free-form creative style.",
    version=__version__,
    lifespan=lifespan,
)

# Parse allowed_origins (comma-separated string → list)
_origins = [o.strip() for o in settings.allowed_origins.split(",") if o.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=_origins,
    allow_credentials=False,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
)


# ── Exception handlers ─────────────────────────────────────────────────

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    detail = "; ".join(str(err.get("msg", "invalid value")) for err in errors) or "Invalid request body."
    logger.info("Rejected invalid request to %s: %s", request.url.path, detail)
    return _error_payload(f"Invalid request: {detail}", ErrorCode.PROCESSING_ERROR)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    logger.info("HTTP %d on %s %s", exc.status_code, request.method, request.url.path)
    return _error_payload(f"Request failed: {exc.detail}", ErrorCode.PROCESSING_ERROR)


@app.exception_handler(DistillError)
async def distill_exception_handler(request: Request, exc: DistillError) -> JSONResponse:  # noqa: ARG001
    return _error_payload(exc.message, classify_error(exc))


# ── Routes ─────────────────────────────────────────────────────────────

@app.get("/health")
async def health():
    return {
        "status": "ok",
        "engine": "distill",
        "version": __version__,
        "model": settings.default_model,
        "fallback_model": settings.fallback_model or None,
    }


@app.get("/styles", response_model=StyleCatalogue, summary="Preset styles and alias table")
async def styles() -> StyleCatalogue:
    presets, aliases = catalogue()
    return StyleCatalogue(
        presets=[StyleInfo(id=style_id, name=name, description=description) for style_id, name, description in presets],
        aliases=aliases,
    )


async def _summarize(payload: SummarizeRequest, pipeline: SummarizationPipeline) -> JSONResponse:
    result = await pipeline.run(payload)
    return JSONResponse(status_code=200, content=result.model_dump(mode="json", by_alias=True))


@app.post(
    "/",
    summary="Summarize a URL or raw content",
    dependencies=[Depends(reject_script_clients)],
)
@app.post(
    "/summarize",
    summary="Summarize a URL or raw content",
    description="Accepts `{url | content, style?, bulletCount?, model?}`. "
    "Always answers HTTP 200 with either `{originalContent, summary}` or "
    "`{error, errorCode, originalContent, summary}`.",
    dependencies=[Depends(reject_script_clients)],
)
async def summarize(
    payload: SummarizeRequest,
    pipeline: SummarizationPipeline = Depends(get_pipeline),
) -> JSONResponse:
    return await _summarize(payload, pipeline)


@app.get(
    "/rewrite/{locator:path}",
    summary="Style shortcut path",
    description="`/rewrite/eli5/example.com/post` or `/rewrite/3/example.com/post`.",
    dependencies=[Depends(reject_script_clients)],
)
async def rewrite(
    locator: str,
    request: Request,
    pipeline: SummarizationPipeline = Depends(get_pipeline),
) -> JSONResponse:
    parsed = parse_path(locator)
    target = parsed.target
    if target and request.url.query:
        target = f"{target}?{request.url.query}"
    payload = SummarizeRequest(
        url=target or None,
        style=parsed.style.style_id,
        bullet_count=parsed.style.bullet_count,
    )
    return await _summarize(payload, pipeline)


# ── Dev runner ─────────────────────────────────────────────────────────

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level,
        reload=True,
    )
