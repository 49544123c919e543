"""
HTTP fetching for web scraping.

Validates and normalizes URLs, then performs a bounded GET (timeout and
response-size cap) with browser-like headers. No retries: retry policy is
left to callers.
"""

import logging
from dataclasses import dataclass
from urllib.parse import urlsplit, urlunsplit

import httpx

from docindex_common.config import ScraperSettings
from docindex_common.constants import BROWSER_HEADERS
from docindex_common.exceptions import FetchError, InvalidUrlError

logger = logging.getLogger(__name__)

ALLOWED_SCHEMES = ("http", "https")


@dataclass
class FetchResult:
    """Result of a page fetch operation."""

    url: str
    content: str
    content_type: str
    is_html: bool


def normalize_absolute_url(url: str) -> str:
    """
    Re-serialize an absolute URL in canonical form.

    Lowercases scheme and host and gives an empty path its root slash.
    Userinfo, query and fragment are preserved as written.

    Raises:
        ValueError: If the URL cannot be parsed (bad IPv6 literal, bad port)
    """
    parsed = urlsplit(url)
    # Accessing port validates it
    _ = parsed.port
    userinfo, at, hostport = parsed.netloc.rpartition("@")
    netloc = f"{userinfo}{at}{hostport.lower()}"
    path = parsed.path or "/"
    return urlunsplit((parsed.scheme.lower(), netloc, path, parsed.query, parsed.fragment))


def validate_and_normalize_url(url: str) -> str:
    """
    Validate that a URL is absolute http(s) and return its normalized form.

    Args:
        url: URL to validate

    Returns:
        Normalized absolute URL

    Raises:
        InvalidUrlError: If the URL is malformed or not http/https
    """
    try:
        parsed = urlsplit(url.strip())
        normalized = normalize_absolute_url(url.strip())
    except (ValueError, AttributeError) as e:
        raise InvalidUrlError(str(url), str(e)) from e

    if parsed.scheme.lower() not in ALLOWED_SCHEMES:
        raise InvalidUrlError(url)
    if not parsed.hostname:
        raise InvalidUrlError(url, "URL has no host")

    return normalized


class ContentFetcher:
    """Bounded HTTP fetcher for HTML pages."""

    def __init__(self, settings: ScraperSettings | None = None):
        """
        Initialize the fetcher.

        Args:
            settings: Timeout, user agent and size cap (defaults if omitted)
        """
        self.settings = settings or ScraperSettings()

    @property
    def headers(self) -> dict[str, str]:
        return {"User-Agent": self.settings.user_agent, **BROWSER_HEADERS}

    async def fetch(self, url: str) -> FetchResult:
        """
        Fetch a page, enforcing the timeout and the response-size cap.

        Args:
            url: URL to fetch

        Returns:
            FetchResult whose content is the raw response text

        Raises:
            InvalidUrlError: If the URL is malformed or not http/https
            FetchError: On HTTP errors, timeouts, transport errors or oversize bodies
        """
        valid_url = validate_and_normalize_url(url)
        max_bytes = self.settings.max_content_length

        try:
            async with httpx.AsyncClient(
                timeout=self.settings.timeout,
                follow_redirects=True,
            ) as client:
                async with client.stream("GET", valid_url, headers=self.headers) as response:
                    response.raise_for_status()

                    declared = response.headers.get("content-length")
                    if declared and declared.isdigit() and int(declared) > max_bytes:
                        raise FetchError(
                            valid_url,
                            f"Content length {declared} exceeds limit of {max_bytes} bytes",
                        )

                    body = bytearray()
                    async for chunk in response.aiter_bytes():
                        body.extend(chunk)
                        if len(body) > max_bytes:
                            raise FetchError(
                                valid_url, f"Response exceeds limit of {max_bytes} bytes"
                            )

                    content_type = response.headers.get("content-type", "")
                    text = bytes(body).decode(response.encoding or "utf-8", errors="replace")

                    return FetchResult(
                        url=valid_url,
                        content=text,
                        content_type=content_type,
                        is_html=_is_html(content_type),
                    )

        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            raise FetchError(
                valid_url, f"HTTP {status}: {e.response.reason_phrase}", status_code=status
            ) from e
        except httpx.TimeoutException as e:
            raise FetchError(valid_url, f"Timeout after {self.settings.timeout}s: {e}") from e
        except httpx.RequestError as e:
            raise FetchError(valid_url, f"Request error: {e}") from e

    async def is_scrapeable(self, url: str) -> bool:
        """
        Probe a URL with a HEAD request and report whether it serves HTML.

        Never raises: invalid URLs and network failures yield False.
        """
        try:
            valid_url = validate_and_normalize_url(url)
            async with httpx.AsyncClient(
                timeout=self.settings.timeout,
                follow_redirects=True,
            ) as client:
                response = await client.head(
                    valid_url, headers={"User-Agent": self.settings.user_agent}
                )
                response.raise_for_status()
        except (InvalidUrlError, httpx.HTTPError) as e:
            logger.debug(f"URL not scrapeable {url}: {e}")
            return False

        return _is_html(response.headers.get("content-type", ""))


def _is_html(content_type: str) -> bool:
    return "text/html" in content_type or "application/xhtml" in content_type
