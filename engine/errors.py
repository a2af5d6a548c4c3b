"""Error taxonomy for the summarization pipeline.

Every failure the pipeline can surface maps onto one of the five
``ErrorCode`` values.  Exceptions raised by our own components carry an
explicit code; anything else is classified by sniffing its message.
"""

from __future__ import annotations

import re

from schemas.response import ErrorCode


class DistillError(Exception):
    """Base class for all pipeline errors."""

    code: ErrorCode | None = None

    def __init__(self, message: str, *, code: ErrorCode | None = None) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code


class ValidationFailure(DistillError):
    """The request itself is unusable (missing or conflicting fields)."""

    code = ErrorCode.PROCESSING_ERROR


class UrlError(DistillError):
    """The target URL is empty or malformed."""

    code = ErrorCode.URL_ERROR


class FetchError(DistillError):
    """The content proxy could not deliver the page."""

    code = ErrorCode.CONNECTION_ERROR

    def __init__(self, message: str, *, reason: str = "failed", status_code: int | None = None) -> None:
        super().__init__(message)
        self.reason = reason
        self.status_code = status_code


class ContentError(DistillError):
    """Fetched or supplied content is empty or too short to summarize."""

    code = ErrorCode.CONTENT_ERROR


class CompletionError(DistillError):
    """The completion API failed or produced unusable output."""

    code = ErrorCode.AI_SERVICE_ERROR

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code

    @property
    def rate_limited(self) -> bool:
        return self.status_code == 429 or bool(_RATE_LIMIT_PATTERN.search(self.message))


_RATE_LIMIT_PATTERN = re.compile(r"quota|rate[\s_-]?limit|capacity|too many requests", re.I)

# Order matters: the first table entry with a matching keyword wins.
_KEYWORD_RULES: list[tuple[ErrorCode, tuple[str, ...]]] = [
    (ErrorCode.URL_ERROR, ("url", "domain")),
    (
        ErrorCode.CONNECTION_ERROR,
        ("fetch", "connection", "timed out", "timeout", "network", "access denied", "403", "404"),
    ),
    (ErrorCode.CONTENT_ERROR, ("content", "extract", "empty", "too short", "javascript")),
    (ErrorCode.AI_SERVICE_ERROR, ("api", "openrouter", "quota", "rate limit", "model", "completion")),
]


def classify_message(message: str) -> ErrorCode:
    """Map a free-text error message onto the taxonomy."""
    lowered = (message or "").lower()
    if not lowered:
        return ErrorCode.PROCESSING_ERROR
    for code, keywords in _KEYWORD_RULES:
        if any(keyword in lowered for keyword in keywords):
            return code
    return ErrorCode.PROCESSING_ERROR


def classify_error(exc: BaseException) -> ErrorCode:
    """Return the error code for *exc*; an explicit code always wins."""
    explicit = getattr(exc, "code", None)
    if isinstance(explicit, ErrorCode):
        return explicit
    return classify_message(str(exc))
