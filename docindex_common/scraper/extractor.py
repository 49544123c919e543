"""
HTML to plain-text content extraction.

Strips navigation and other page chrome, resolves the title and the main
content container, and normalizes the resulting text for indexing.
"""

import re

from bs4 import BeautifulSoup, Tag

from docindex_common.constants import (
    CONTENT_SELECTORS,
    DEFAULT_TITLE,
    MIN_CONTENT_LENGTH,
    NOISE_SELECTORS,
    TITLE_SELECTORS,
)
from docindex_common.scraper.models import ScrapedContent, ScrapeMetadata, utc_now_iso

_WHITESPACE = re.compile(r"\s+")

# Pagination, edit links, share prompts and legal boilerplate
_BOILERPLATE_PATTERNS = (
    re.compile(r"Next\s*→", re.IGNORECASE),
    re.compile(r"←\s*Previous", re.IGNORECASE),
    re.compile(r"Edit this page on GitHub", re.IGNORECASE),
    re.compile(r"Share on Twitter", re.IGNORECASE),
    re.compile(r"Share on Facebook", re.IGNORECASE),
    re.compile(r"Copy link", re.IGNORECASE),
    re.compile(r"Copyright\s*©.*$", re.IGNORECASE | re.MULTILINE),
    re.compile(r"All rights reserved\.?", re.IGNORECASE),
    re.compile(r"Terms of Service", re.IGNORECASE),
    re.compile(r"Privacy Policy", re.IGNORECASE),
)

_PUNCTUATION_PATTERNS = (
    (re.compile(r"\.{3,}"), "..."),
    (re.compile(r"\?{2,}"), "?"),
    (re.compile(r"!{2,}"), "!"),
)


def clean_text(text: str) -> str:
    """
    Normalize extracted text.

    Collapses whitespace, strips boilerplate phrases and repeated punctuation.
    Applying it to already-cleaned text returns the text unchanged.

    Args:
        text: Raw text

    Returns:
        Cleaned, trimmed text
    """
    cleaned = _clean_pass(text)
    # A removal can splice together a new phrase; repeat until stable
    while True:
        again = _clean_pass(cleaned)
        if again == cleaned:
            return cleaned
        cleaned = again


def _clean_pass(text: str) -> str:
    cleaned = _WHITESPACE.sub(" ", text)

    for pattern in _BOILERPLATE_PATTERNS:
        cleaned = pattern.sub("", cleaned)

    for pattern, replacement in _PUNCTUATION_PATTERNS:
        cleaned = pattern.sub(replacement, cleaned)

    return _WHITESPACE.sub(" ", cleaned).strip()


def remove_noise(soup: BeautifulSoup, selectors: tuple[str, ...] = NOISE_SELECTORS) -> BeautifulSoup:
    """
    Remove structural and noise elements in place.

    Args:
        soup: Parsed document
        selectors: CSS selectors of elements to drop

    Returns:
        The same soup, for chaining
    """
    for selector in selectors:
        for element in soup.select(selector):
            element.decompose()
    return soup


def extract_title(soup: BeautifulSoup, selectors: tuple[str, ...] = TITLE_SELECTORS) -> str:
    """
    Resolve the page title from a prioritized selector list.

    Only the first element matching each selector is considered.

    Returns:
        Cleaned title, or "Untitled" if no selector yields text
    """
    for selector in selectors:
        element = soup.select_one(selector)
        if element is None:
            continue
        title = element.get_text().strip()
        if title:
            return clean_text(title)

    return DEFAULT_TITLE


def extract_main_content(
    soup: BeautifulSoup,
    selectors: tuple[str, ...] = CONTENT_SELECTORS,
    min_length: int = MIN_CONTENT_LENGTH,
) -> str:
    """
    Resolve the main content text.

    Takes the first container whose trimmed text exceeds min_length,
    falling back to the whole body text when none qualifies.

    Returns:
        Cleaned content text (possibly empty)
    """
    for selector in selectors:
        element = soup.select_one(selector)
        if element is None:
            continue
        raw_text = _element_text(element)
        if len(raw_text.strip()) > min_length:
            return clean_text(raw_text)

    body = soup.body or soup
    return clean_text(_element_text(body))


def extract_content(html: str, url: str) -> ScrapedContent:
    """
    Full extraction pipeline: parse -> strip noise -> title -> content.

    Noise removal happens first so navigation text cannot leak into either
    the title or the content. Never raises for "no content found".

    Args:
        html: Raw HTML
        url: URL the HTML was fetched from

    Returns:
        ScrapedContent with cleaned title, content and structural metadata
    """
    soup = BeautifulSoup(html, "lxml")
    remove_noise(soup)

    title = extract_title(soup)
    content = extract_main_content(soup)

    metadata = ScrapeMetadata(
        scraped_at=utc_now_iso(),
        content_length=len(content),
        has_images=soup.find("img") is not None,
        has_links=soup.find("a") is not None,
    )

    return ScrapedContent(url=url, title=title, content=content, metadata=metadata)


def _element_text(element: Tag | BeautifulSoup) -> str:
    return element.get_text(" ")
