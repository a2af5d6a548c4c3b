"""Target URL clean-up before the content fetch."""

from __future__ import annotations

import re
from urllib.parse import unquote, urlsplit, urlunsplit

from engine.errors import UrlError

_PROTOCOL = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*://")

# Share links of the form "rewrite.page/<N>/<target>" carry the real target
# after the prefix.
_SHARE_PREFIX = re.compile(r"^(?:[a-z]+://)?(?:www\.)?rewrite\.page/(?:\d+/)?(?P<target>.+)$", re.I)

# A target that is itself a fully percent-encoded URL ("https%3A%2F%2F...").
_ENCODED_URL = re.compile(r"^https?%3A", re.I)


def normalize_url(raw_url: str) -> str:
    """Return an absolute http(s) URL for *raw_url*.

    Trims, unwraps share-link prefixes, decodes a fully percent-encoded
    target, adds ``https://`` when no protocol is present and drops the
    fragment.  Escapes inside an ordinary URL (``C%23``, ``q=a%26b``) are
    kept as-is.  Raises ``UrlError`` for empty or unparseable input.
    """
    url = (raw_url or "").strip()
    if not url:
        raise UrlError("URL is empty. Please provide a page address to summarize.")

    share = _SHARE_PREFIX.match(url)
    if share:
        url = share.group("target")

    if _ENCODED_URL.match(url):
        url = unquote(url)

    if not _PROTOCOL.match(url):
        url = f"https://{url}"

    try:
        parts = urlsplit(url)
    except ValueError as exc:
        raise UrlError(f"Invalid URL format: {raw_url}") from exc

    if parts.scheme.lower() not in {"http", "https"}:
        raise UrlError(f"Unsupported URL scheme '{parts.scheme}'. Only http and https URLs can be summarized.")
    if not parts.netloc or " " in parts.netloc:
        raise UrlError(f"Invalid URL format: {raw_url}. Please check the domain name.")

    return urlunsplit((parts.scheme, parts.netloc, parts.path, parts.query, ""))
