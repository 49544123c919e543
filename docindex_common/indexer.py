"""
Bulk indexing of documentation sites.

Discovers candidate URLs on a seed page, derives per-page metadata and
writes each page into the vector index. Candidates are processed strictly
sequentially with a delay between them; one failing candidate never aborts
the batch.
"""

import asyncio
import logging
import re
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import urlsplit

from docindex_common.config import IndexerSettings
from docindex_common.constants import DEFAULT_TITLE
from docindex_common.rag_service import RagService, UrlDocumentInput
from docindex_common.scraper.models import ExtractedUrl, utc_now_iso
from docindex_common.scraper.service import ScraperService

logger = logging.getLogger(__name__)

_DOC_SEGMENT = re.compile(r"^docs?$", re.IGNORECASE)

MIN_KEYWORD_LENGTH = 3


@dataclass
class FailedUrl:
    url: str
    error: str

    def to_dict(self) -> dict[str, str]:
        return {"url": self.url, "error": self.error}


@dataclass
class BulkIndexResult:
    """
    Outcome of one bulk indexing run.

    Attributes:
        base_url: Seed page
        candidates: Discovered URLs, in discovery order
        successful: URLs written to the index, in discovery order
        failed: URLs that failed, with the error message
    """

    base_url: str
    candidates: list[str] = field(default_factory=list)
    successful: list[str] = field(default_factory=list)
    failed: list[FailedUrl] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.candidates)

    @property
    def success_rate(self) -> float:
        """Fraction of candidates indexed (0.0 when nothing was found)."""
        if not self.candidates:
            return 0.0
        return len(self.successful) / len(self.candidates)

    def to_dict(self) -> dict[str, Any]:
        return {
            "baseUrl": self.base_url,
            "totalUrls": self.total,
            "successful": list(self.successful),
            "failed": [failure.to_dict() for failure in self.failed],
            "successRate": round(self.success_rate * 100),
        }


def extract_section_from_url(url: str) -> str:
    """
    Derive a section name from the URL path.

    The segment following a "doc"/"docs" marker wins; otherwise the last
    path segment; otherwise "general".
    """
    try:
        path = urlsplit(url).path
    except ValueError:
        return "general"

    parts = [part for part in path.split("/") if part]
    for index, part in enumerate(parts):
        if _DOC_SEGMENT.match(part):
            if index < len(parts) - 1:
                return parts[index + 1]
            break

    return parts[-1] if parts else "general"


def build_keywords(library_name: str, version: str, category: str, anchor_text: str) -> list[str]:
    """
    Keywords for one page: library, version, category, then anchor words.

    Anchor words shorter than three characters are dropped. The result is
    deduplicated, keeping first-seen order.
    """
    candidates = [library_name.lower(), version, category.lower()]
    candidates.extend(
        word for word in anchor_text.lower().split() if len(word) >= MIN_KEYWORD_LENGTH
    )
    return list(dict.fromkeys(candidates))


def build_document_input(
    extracted: ExtractedUrl,
    library_name: str,
    version: str,
    category: str,
) -> UrlDocumentInput:
    return UrlDocumentInput(
        url=extracted.url,
        title=extracted.title or extracted.text or DEFAULT_TITLE,
        library_name=library_name.lower(),
        version=version,
        category=category.lower(),
        keywords=build_keywords(library_name, version, category, extracted.text),
        description=extracted.description or f"{library_name} documentation page",
        section=extract_section_from_url(extracted.url),
        last_updated=utc_now_iso(),
    )


class BulkIndexer:
    """
    Index every documentation page linked from a seed page.

    Usage:
        indexer = BulkIndexer(scraper, rag_service, settings.indexer)
        result = await indexer.bulk_index(
            "https://example.com/docs/", "react", "18.2", "documentation"
        )
    """

    def __init__(
        self,
        scraper: ScraperService,
        rag_service: RagService,
        settings: IndexerSettings | None = None,
    ):
        self.scraper = scraper
        self.rag_service = rag_service
        self.settings = settings or IndexerSettings()

    async def discover(self, seed_url: str, doc_mode: bool = True) -> list[ExtractedUrl]:
        """
        Discover candidate URLs on the seed page.

        Raises:
            ScraperError: If the seed page cannot be fetched or parsed
        """
        if doc_mode:
            result = await self.scraper.extract_documentation_urls(seed_url)
        else:
            result = await self.scraper.extract_urls(seed_url)
        return result.extracted_urls

    async def bulk_index(
        self,
        seed_url: str,
        library_name: str,
        version: str,
        default_category: str,
        extract_content: bool = False,
        doc_mode: bool = True,
    ) -> BulkIndexResult:
        """
        Discover and index documentation pages.

        Discovery failures propagate; per-candidate failures are recorded in
        the result and the batch continues.

        Args:
            seed_url: Page to discover links on
            library_name: Library the pages document
            version: Library version
            default_category: Category applied to every page
            extract_content: Scrape each page for its text
            doc_mode: Apply the documentation URL filter

        Returns:
            BulkIndexResult with successes and failures in discovery order

        Raises:
            ScraperError: If discovery fails
        """
        candidates = await self.discover(seed_url, doc_mode)
        result = BulkIndexResult(
            base_url=seed_url, candidates=[candidate.url for candidate in candidates]
        )

        if not candidates:
            logger.warning(f"No URLs found on {seed_url} (doc mode: {doc_mode})")
            return result

        logger.info(f"Indexing {len(candidates)} URLs from {seed_url} for {library_name} {version}")
        delay_seconds = self.settings.request_delay_ms / 1000

        for position, candidate in enumerate(candidates):
            if position > 0 and delay_seconds > 0:
                await asyncio.sleep(delay_seconds)

            try:
                document = build_document_input(candidate, library_name, version, default_category)
                await self.rag_service.add_url_document(document, extract_content)
                result.successful.append(candidate.url)
            except Exception as e:
                logger.warning(f"Failed to index {candidate.url}: {e}")
                result.failed.append(FailedUrl(url=candidate.url, error=str(e)))

        logger.info(
            f"Bulk index of {seed_url} complete: {len(result.successful)} succeeded, "
            f"{len(result.failed)} failed"
        )
        return result
