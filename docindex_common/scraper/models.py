"""
Data models for the scraping pipeline.

These models represent pages and links as they flow through discovery and
extraction: seed page -> extracted links -> scraped content.
"""

import re
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from docindex_common.constants import (
    DEFAULT_DOC_EXCLUDE_PATTERNS,
    DEFAULT_DOC_MAX_URLS,
    DEFAULT_DOC_PATH_PATTERN,
)


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string."""
    return datetime.now(UTC).isoformat()


@dataclass(frozen=True)
class ScrapeMetadata:
    """Structural metadata derived from a cleaned page."""

    scraped_at: str
    content_length: int
    has_images: bool
    has_links: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "scrapedAt": self.scraped_at,
            "contentLength": self.content_length,
            "hasImages": self.has_images,
            "hasLinks": self.has_links,
        }


@dataclass(frozen=True)
class ScrapedContent:
    """
    Result of fetching and cleaning one page.

    Attributes:
        url: Canonical absolute URL that was fetched
        title: Page title ("Untitled" if none found)
        content: Cleaned main-body text
        metadata: Timestamp, content length and image/link flags
    """

    url: str
    title: str
    content: str
    metadata: ScrapeMetadata

    def to_dict(self) -> dict[str, Any]:
        return {
            "url": self.url,
            "title": self.title,
            "content": self.content,
            "metadata": self.metadata.to_dict(),
        }


@dataclass(frozen=True)
class ExtractedUrl:
    """
    One discovered hyperlink.

    Attributes:
        url: Absolute, normalized URL
        text: Trimmed anchor text (may be empty)
        title: Optional title or aria-label attribute
        description: Optional description, at most 200 characters
    """

    url: str
    text: str = ""
    title: str | None = None
    description: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"url": self.url, "text": self.text}
        if self.title:
            data["title"] = self.title
        if self.description:
            data["description"] = self.description
        return data


@dataclass
class UrlExtractionResult:
    """
    Output of one discovery pass.

    Attributes:
        base_url: Page the links were extracted from
        extracted_urls: Final (possibly truncated) list of links
        total_found: Number of links before max_urls truncation
        scraped_at: When the extraction ran
    """

    base_url: str
    extracted_urls: list[ExtractedUrl] = field(default_factory=list)
    total_found: int = 0
    scraped_at: str = field(default_factory=utc_now_iso)

    @property
    def urls(self) -> list[str]:
        return [extracted.url for extracted in self.extracted_urls]

    def to_dict(self) -> dict[str, Any]:
        return {
            "baseUrl": self.base_url,
            "extractedUrls": [extracted.to_dict() for extracted in self.extracted_urls],
            "totalFound": self.total_found,
            "scrapedAt": self.scraped_at,
        }


@dataclass
class LinkExtractionOptions:
    """
    Selection and filter rules for link extraction.

    Attributes:
        filter_pattern: Absolute URLs must match this regex (string or compiled)
        include_external: Keep links whose host differs from the base host
        max_urls: Cap on the returned list (total_found is unaffected)
        url_selectors: CSS selectors for candidate anchors (default: all a[href])
    """

    filter_pattern: re.Pattern[str] | str | None = None
    include_external: bool = False
    max_urls: int | None = None
    url_selectors: list[str] | None = None


@dataclass
class DocumentationFilterOptions:
    """
    Overrides for the documentation URL filter.

    Any field supplied replaces the default wholesale; lists are not merged.
    """

    doc_path_pattern: re.Pattern[str] | str = DEFAULT_DOC_PATH_PATTERN
    exclude_patterns: list[re.Pattern[str] | str] = field(
        default_factory=lambda: list(DEFAULT_DOC_EXCLUDE_PATTERNS)
    )
    max_urls: int | None = DEFAULT_DOC_MAX_URLS
