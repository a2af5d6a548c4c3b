"""Request schemas for the Distill API.

``SummarizeRequest`` is the wire shape.  It is narrowed exactly once, at the
pipeline boundary, into one of the tagged variants ``UrlRequest`` or
``ContentRequest``; downstream code only ever sees the narrowed form.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class SummarizeRequest(BaseModel):
    """Payload sent by the browser client."""

    url: str | None = Field(
        default=None,
        description="Page to summarize.  A missing protocol defaults to https://.",
    )
    content: str | None = Field(
        default=None,
        description="Raw text to summarize instead of a URL.",
    )
    style: str | None = Field(
        default=None,
        description="Free-form style token (preset id, alias, bullet count or any creative style).",
    )
    bullet_count: int | None = Field(
        default=None,
        ge=1,
        alias="bulletCount",
        description="Number of key points for the bullets style.",
    )
    model: str | None = Field(
        default=None,
        description="Completion model id; the configured default is used when omitted.",
    )

    model_config = ConfigDict(populate_by_name=True, protected_namespaces=())


class _TargetBase(BaseModel):
    style: str | None = None
    bullet_count: int | None = None
    model: str | None = None

    model_config = ConfigDict(frozen=True, protected_namespaces=())


class UrlRequest(_TargetBase):
    kind: Literal["url"] = "url"
    url: str


class ContentRequest(_TargetBase):
    kind: Literal["content"] = "content"
    content: str


TargetRequest = UrlRequest | ContentRequest
