"""Page text retrieval through the external content proxy."""

from __future__ import annotations

import logging

import anyio
import httpx

from config import Settings
from engine.errors import ContentError, FetchError

logger = logging.getLogger("distill.fetcher")

_HEADERS = {
    "User-Agent": "Mozilla/5.0 (compatible; Distill/1.0; +https://distill.app)",
    "Accept": "text/plain,text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
}


def _status_error(response: httpx.Response) -> FetchError:
    """Translate a non-2xx proxy response into a ``FetchError``."""
    status = response.status_code
    status_info = f"{status} {response.reason_phrase}".strip()
    if status in (401, 403):
        return FetchError(
            f"Access denied ({status_info}). The website may be blocking our requests.",
            reason="access_denied",
            status_code=status,
        )
    if status == 404:
        return FetchError(
            f"Page not found ({status_info}). Please check that the URL is correct.",
            reason="not_found",
            status_code=status,
        )
    if status >= 500:
        return FetchError(
            f"Website server error ({status_info}). The target website is experiencing issues.",
            reason="server_error",
            status_code=status,
        )
    return FetchError(f"Failed to fetch content: {status_info}", reason="failed", status_code=status)


class ContentFetcher:
    """Fetch readable text for a URL via the content proxy.

    Parameters
    ----------
    settings : Settings
        Supplies ``content_proxy_url``, ``fetch_timeout`` and
        ``max_content_chars``.
    transport : httpx.AsyncBaseTransport, optional
        Custom transport for the underlying client (used by tests).
    """

    def __init__(self, settings: Settings, *, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._proxy_url = settings.content_proxy_url
        self._timeout = settings.fetch_timeout
        self._max_chars = settings.max_content_chars
        self._transport = transport

    def proxied(self, url: str) -> str:
        if not self._proxy_url:
            return url
        return f"{self._proxy_url.rstrip('/')}/{url}"

    async def fetch(self, url: str) -> str:
        """Return the page text for *url*.

        Raises
        ------
        FetchError
            Timeout, network failure or non-2xx proxy response.
        ContentError
            The proxy answered with an empty body.
        """
        target = self.proxied(url)
        logger.info("Fetching content for %s", url)

        try:
            with anyio.fail_after(self._timeout):
                async with httpx.AsyncClient(
                    timeout=self._timeout,
                    headers=_HEADERS,
                    follow_redirects=True,
                    transport=self._transport,
                ) as client:
                    response = await client.get(target)
        except (TimeoutError, httpx.TimeoutException) as exc:
            raise FetchError(
                f"Request timed out after {self._timeout:g} seconds. The website may be slow or unavailable.",
                reason="timeout",
            ) from exc
        except httpx.HTTPError as exc:
            raise FetchError(f"Failed to fetch content: network error ({exc})", reason="network") from exc

        if not response.is_success:
            error = _status_error(response)
            logger.warning("Content fetch failed for %s: %s", url, error.message)
            raise error

        text = response.text.strip()
        if not text:
            raise ContentError(
                "Received empty content from the page. It may load its text dynamically with JavaScript."
            )

        if len(text) > self._max_chars:
            logger.info("Truncating fetched content from %d to %d chars", len(text), self._max_chars)
            text = text[: self._max_chars]

        logger.info("Fetched %d chars of content for %s", len(text), url)
        return text
