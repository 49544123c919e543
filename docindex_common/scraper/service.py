"""
Scraper service: fetch + extract + discover against live URLs.

Each instance owns its own settings; there is no module-level default
scraper.
"""

import logging

from docindex_common.config import ScraperSettings
from docindex_common.exceptions import ScraperError
from docindex_common.scraper.discovery import extract_documentation_links, extract_links
from docindex_common.scraper.extractor import extract_content
from docindex_common.scraper.fetcher import ContentFetcher, FetchResult
from docindex_common.scraper.models import (
    DocumentationFilterOptions,
    LinkExtractionOptions,
    ScrapedContent,
    UrlExtractionResult,
)

logger = logging.getLogger(__name__)


class ScraperService:
    """Scrapes single pages and discovers links on them."""

    def __init__(
        self,
        settings: ScraperSettings | None = None,
        fetcher: ContentFetcher | None = None,
    ):
        self.settings = settings or ScraperSettings()
        self.fetcher = fetcher or ContentFetcher(self.settings)

    async def _fetch_page(self, url: str) -> FetchResult:
        result = await self.fetcher.fetch(url)
        if not result.is_html:
            logger.warning(
                f"Parsing non-HTML response from {result.url} "
                f"(content-type: {result.content_type or 'unknown'})"
            )
        return result

    async def scrape_url(self, url: str) -> ScrapedContent:
        """
        Fetch a page and extract its title and main content.

        Raises:
            InvalidUrlError: If the URL is malformed or not http/https
            FetchError: If the fetch fails
            ScraperError: If parsing fails for any other reason
        """
        result = await self._fetch_page(url)
        try:
            scraped = extract_content(result.content, result.url)
        except ScraperError:
            raise
        except Exception as e:
            raise ScraperError(result.url, str(e)) from e

        logger.info(f"Scraped {result.url}: {scraped.metadata.content_length} chars")
        return scraped

    async def extract_urls(
        self,
        url: str,
        options: LinkExtractionOptions | None = None,
    ) -> UrlExtractionResult:
        """Fetch a page and extract its links."""
        result = await self._fetch_page(url)
        try:
            extraction = extract_links(result.content, result.url, options)
        except ScraperError:
            raise
        except Exception as e:
            raise ScraperError(result.url, str(e)) from e

        logger.info(
            f"Extracted {len(extraction.extracted_urls)} of {extraction.total_found} links "
            f"from {result.url}"
        )
        return extraction

    async def extract_documentation_urls(
        self,
        url: str,
        options: DocumentationFilterOptions | None = None,
    ) -> UrlExtractionResult:
        """Fetch a seed page and extract its probable documentation links."""
        result = await self._fetch_page(url)
        try:
            return extract_documentation_links(result.content, result.url, options)
        except ScraperError:
            raise
        except Exception as e:
            raise ScraperError(result.url, str(e)) from e

    async def is_scrapeable(self, url: str) -> bool:
        return await self.fetcher.is_scrapeable(url)
