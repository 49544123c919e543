"""
URL discovery logic for web scraping.

Single-page link extraction with same-origin enforcement, pattern filtering
and exact-match deduplication, plus the documentation URL policy layered on
top of it. There is no recursive crawling.
"""

import logging
import re
import warnings
from urllib.parse import urljoin, urlsplit

from bs4 import BeautifulSoup, Tag

from docindex_common.constants import DOC_URL_SELECTORS, MAX_DESCRIPTION_LENGTH
from docindex_common.exceptions import ExtractionWarning
from docindex_common.scraper.fetcher import ALLOWED_SCHEMES, normalize_absolute_url
from docindex_common.scraper.models import (
    DocumentationFilterOptions,
    ExtractedUrl,
    LinkExtractionOptions,
    UrlExtractionResult,
)

logger = logging.getLogger(__name__)

DEFAULT_LINK_SELECTORS = ["a[href]"]

_DESCRIPTION_SIBLING_SELECTOR = "p, .description, .summary"


def compile_pattern(pattern: re.Pattern[str] | str) -> re.Pattern[str]:
    """Accept either a compiled regex or a pattern string."""
    if isinstance(pattern, re.Pattern):
        return pattern
    return re.compile(pattern)


def resolve_href(href: str, base_url: str) -> str | None:
    """
    Resolve an href against the base URL.

    Args:
        href: Raw href attribute value
        base_url: URL of the page the link was found on

    Returns:
        Normalized absolute http(s) URL, or None for non-web schemes
        (mailto:, javascript:, tel:, data:)

    Raises:
        ValueError: If the href cannot be parsed
    """
    absolute = normalize_absolute_url(urljoin(base_url, href.strip()))
    if urlsplit(absolute).scheme not in ALLOWED_SCHEMES:
        return None
    return absolute


def extract_links(
    html: str,
    base_url: str,
    options: LinkExtractionOptions | None = None,
) -> UrlExtractionResult:
    """
    Extract hyperlinks from a page.

    Anchors are visited per selector, in document order. Each is resolved to
    an absolute URL, checked against the same-origin rule and the filter
    pattern, and deduplicated by exact URL string.

    Args:
        html: HTML content to parse
        base_url: URL of the page (for resolving relative links)
        options: Selection and filter rules

    Returns:
        UrlExtractionResult; total_found is the count before max_urls truncation
    """
    options = options or LinkExtractionOptions()
    soup = BeautifulSoup(html, "lxml")

    base_host = urlsplit(base_url).hostname
    filter_pattern = compile_pattern(options.filter_pattern) if options.filter_pattern else None
    selectors = options.url_selectors or DEFAULT_LINK_SELECTORS

    extracted: list[ExtractedUrl] = []
    seen: set[str] = set()

    for selector in selectors:
        for element in soup.select(selector):
            href = element.get("href")
            if not href:
                continue

            try:
                absolute = resolve_href(href, base_url)
                host = urlsplit(absolute).hostname if absolute else None
            except ValueError as e:
                message = f"Invalid URL found: {href} ({e})"
                logger.warning(message)
                warnings.warn(message, ExtractionWarning, stacklevel=2)
                continue

            if absolute is None:
                continue

            if not options.include_external and host != base_host:
                continue

            if filter_pattern and not filter_pattern.search(absolute):
                continue

            # Exact string match; trailing-slash variants stay distinct
            if absolute in seen:
                continue
            seen.add(absolute)

            extracted.append(
                ExtractedUrl(
                    url=absolute,
                    text=element.get_text().strip(),
                    title=element.get("title") or element.get("aria-label") or None,
                    description=_describe_link(element),
                )
            )

    total_found = len(extracted)
    if options.max_urls is not None:
        extracted = extracted[: options.max_urls]

    return UrlExtractionResult(
        base_url=base_url,
        extracted_urls=extracted,
        total_found=total_found,
    )


def extract_documentation_links(
    html: str,
    base_url: str,
    options: DocumentationFilterOptions | None = None,
) -> UrlExtractionResult:
    """
    Narrow a page's links down to probable documentation pages.

    Runs extract_links restricted to documentation, navigation, sidebar,
    table-of-contents, menu and main-content anchors on the same host, then
    drops URLs matching any exclusion pattern. total_found is the
    post-exclusion count before max_urls truncation.

    Args:
        html: HTML content of the seed page
        base_url: URL of the seed page
        options: Overrides for the inclusion pattern, exclusions and cap

    Returns:
        UrlExtractionResult with documentation links only
    """
    options = options or DocumentationFilterOptions()

    result = extract_links(
        html,
        base_url,
        LinkExtractionOptions(
            filter_pattern=options.doc_path_pattern,
            include_external=False,
            url_selectors=list(DOC_URL_SELECTORS),
        ),
    )

    exclude_patterns = [compile_pattern(pattern) for pattern in options.exclude_patterns]
    filtered = [
        extracted
        for extracted in result.extracted_urls
        if not any(pattern.search(extracted.url) for pattern in exclude_patterns)
    ]

    logger.info(
        f"Documentation filter kept {len(filtered)} of {result.total_found} links from {base_url}"
    )

    total_found = len(filtered)
    if options.max_urls is not None:
        filtered = filtered[: options.max_urls]

    return UrlExtractionResult(
        base_url=base_url,
        extracted_urls=filtered,
        total_found=total_found,
        scraped_at=result.scraped_at,
    )


def _describe_link(element: Tag) -> str | None:
    """
    Best-effort description for a link.

    Priority: data-description on the anchor > data-description on an
    ancestor > text of the immediately following p/.description/.summary.
    """
    description = element.get("data-description")

    if not description:
        ancestor = element.find_parent(attrs={"data-description": True})
        if ancestor is not None:
            description = ancestor.get("data-description")

    if not description:
        sibling = element.find_next_sibling()
        if sibling is not None and sibling.css.match(_DESCRIPTION_SIBLING_SELECTOR):
            description = sibling.get_text().strip()

    if not description:
        return None
    return description.strip()[:MAX_DESCRIPTION_LENGTH] or None
