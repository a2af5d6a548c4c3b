"""Response schemas for the Distill API."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


# ── Enums ──────────────────────────────────────────────────────────────

class ErrorCode(str, Enum):
    URL_ERROR = "URL_ERROR"
    CONNECTION_ERROR = "CONNECTION_ERROR"
    CONTENT_ERROR = "CONTENT_ERROR"
    AI_SERVICE_ERROR = "AI_SERVICE_ERROR"
    PROCESSING_ERROR = "PROCESSING_ERROR"


# ── Top-level responses ────────────────────────────────────────────────

class SummarizeResponse(BaseModel):
    """Successful pipeline output."""

    original_content: str = Field(
        alias="originalContent",
        description="Text the summary was produced from (fetched page text or the supplied content).",
    )
    summary: str = Field(description="Cleaned, style-transformed summary.")

    model_config = {"populate_by_name": True}


class ErrorResponse(BaseModel):
    """Failure payload.  Always delivered with HTTP 200 so clients have a
    single failure shape to render."""

    error: str = Field(description="Human-readable error message.")
    error_code: ErrorCode = Field(alias="errorCode")
    original_content: str = Field(default="", alias="originalContent")
    summary: str = ""

    model_config = {"populate_by_name": True}


# ── Style catalogue ────────────────────────────────────────────────────

class StyleInfo(BaseModel):
    id: str
    name: str
    description: str


class StyleCatalogue(BaseModel):
    presets: list[StyleInfo] = Field(default_factory=list)
    aliases: dict[str, str] = Field(
        default_factory=dict,
        description="Alias spelling (hyphens and underscores removed) → canonical style id.",
    )
