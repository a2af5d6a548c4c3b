"""Response extraction: raw model output to clean summary text.

Two ordered tables drive the extraction:

``MARKER_PATTERNS``
    Tried in order; the first one that captures a non-blank span wins.
    1. a hashed pair (``### START ###`` … ``### END ###``, 1 to 3 hashes each
       side, any case)
    2. a bare upper-case ``START`` … ``END`` pair
    3. a start marker alone (everything after it is kept)
    With no match the whole text is cleaned.

``CLEANUP_RULES``
    Applied top to bottom, and the full pass is repeated until nothing
    changes, so ``extract(extract(x)) == extract(x)``.  Every rule either
    removes characters or leaves the text untouched, which guarantees the
    loop terminates.

If cleanup would leave nothing, the whitespace-normalized input is returned
instead: a non-blank input never yields an empty result.
"""

from __future__ import annotations

import re

_HASHED_START = r"#{1,3}\s*START\s*#{1,3}"
_HASHED_END = r"#{1,3}\s*END\s*#{1,3}"

MARKER_PATTERNS: list[tuple[str, re.Pattern[str]]] = [
    ("hashed pair", re.compile(rf"{_HASHED_START}(?P<body>.*?){_HASHED_END}", re.I | re.S)),
    ("bare pair", re.compile(r"\bSTART\b(?P<body>.*?)\bEND\b", re.S)),
    ("start only", re.compile(rf"(?:(?i:{_HASHED_START})|\bSTART\b)(?P<body>.*)", re.S)),
]

CLEANUP_RULES: list[tuple[str, re.Pattern[str], str]] = [
    ("line endings", re.compile(r"\r\n?"), "\n"),
    ("hashed markers", re.compile(rf"{_HASHED_START}|{_HASHED_END}", re.I), ""),
    ("bare markers", re.compile(r"\b(?:START|END)\b"), ""),
    ("code fence", re.compile(r"^\s*```[a-zA-Z]*[ \t]*\n(?P<body>.*?)\n?\s*```\s*$", re.S), r"\g<body>"),
    (
        "preamble",
        re.compile(
            r"^\s*(?:here\s+is|here\s+are|here['’]s|i['’]ve\s+created|i\s+have\s+created|below\s+is|below\s+are"
            r"|this\s+is|the\s+following\s+is)\b[^:\n]*:",
            re.I,
        ),
        "",
    ),
    (
        "bold banner",
        re.compile(r"^\s*(\*{1,2})[ \t]*[a-z ]*(?:summary|content|text|analysis)[ \t]*:?[ \t]*\1[ \t]*:?", re.I),
        "",
    ),
    (
        "heading banner",
        re.compile(r"^\s*#{1,3}[ \t]+[a-z ]*(?:summary|content|text|analysis)[ \t]*#{0,3}[ \t]*:?[ \t]*(?=\n|$)", re.I),
        "",
    ),
    (
        "closing banner",
        re.compile(
            r"(?:^|\n)[ \t]*(?:\*{1,2}[ \t]*|#{1,3}[ \t]+)(?:the[ \t]+)?(?:end|conclusion|summary|that['’]s\s+it)\b"
            r"[^\n]{0,60}\s*$",
            re.I,
        ),
        "",
    ),
    ("bold", re.compile(r"\*\*(?P<inner>[^*\n]+?)\*\*"), r"\g<inner>"),
    ("underline bold", re.compile(r"__(?P<inner>[^_\n]+?)__"), r"\g<inner>"),
    ("italics", re.compile(r"(?<![*\w])\*(?=\S)(?P<inner>[^*\n]+?)(?<=\S)\*(?![*\w])"), r"\g<inner>"),
    ("heading hashes", re.compile(r"(?m)^[ \t]*#{1,6}(?:[ \t]+|$)"), ""),
    ("trailing hashes", re.compile(r"(?m)[ \t]+#{1,6}[ \t]*$"), ""),
    ("horizontal whitespace", re.compile(r"[^\S\n]{2,}|[^\S\n ]"), " "),
    ("line edges", re.compile(r"(?m)^ +| +$"), ""),
    ("blank lines", re.compile(r"\n{3,}"), "\n\n"),
]


def _normalize_whitespace(text: str) -> str:
    text = re.sub(r"\r\n?", "\n", text)
    text = re.sub(r"[^\S\n]+", " ", text)
    text = re.sub(r"(?m)^ +| +$", "", text)
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()


def clean(text: str) -> str:
    """Apply ``CLEANUP_RULES`` until the text stops changing."""
    current = (text or "").strip()
    while True:
        updated = current
        for _name, pattern, replacement in CLEANUP_RULES:
            updated = pattern.sub(replacement, updated).strip()
        if updated == current:
            return current
        current = updated


def marked_span(text: str) -> str | None:
    """Return the text enclosed by the delimiter markers, or ``None``."""
    for _name, pattern in MARKER_PATTERNS:
        match = pattern.search(text)
        if match and match.group("body").strip():
            return match.group("body")
    return None


def extract(raw_text: str | None) -> str:
    """Extract the clean summary from raw model output."""
    if not raw_text or not raw_text.strip():
        return ""
    span = marked_span(raw_text)
    cleaned = clean(span if span is not None else raw_text)
    return cleaned or _normalize_whitespace(raw_text)
