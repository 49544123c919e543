"""
Web scraping module for docindex.

This module provides single-page content fetching, HTML-to-text extraction,
link discovery and the documentation URL filter used by bulk indexing.

Architecture:
- Fetcher: bounded HTTP GET with URL validation and a HEAD probe
- Extractor: noise removal, title/content resolution and text cleanup
- Discovery: link extraction and the documentation URL policy
- Service: the above composed against live URLs
"""

from docindex_common.scraper.models import (
    DocumentationFilterOptions,
    ExtractedUrl,
    LinkExtractionOptions,
    ScrapedContent,
    ScrapeMetadata,
    UrlExtractionResult,
)
from docindex_common.scraper.service import ScraperService

__all__ = [
    "DocumentationFilterOptions",
    "ExtractedUrl",
    "LinkExtractionOptions",
    "ScrapeMetadata",
    "ScrapedContent",
    "ScraperService",
    "UrlExtractionResult",
]
