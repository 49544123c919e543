"""
Constants used throughout docindex.

Centralizes magic numbers, metadata field names and the default selector
lists so the scraper, indexer and tools agree on them.
"""

import re

# =============================================================================
# Vector Index
# =============================================================================

# Collection holding both URL documents and legacy free-text documents
COLLECTION_NAME = "rag-collection"

# Values of the docType discriminator
DOC_TYPE_URL_DOCUMENT = "url-document"
DOC_TYPE_LEGACY_DOCUMENT = "legacy-document"
DOC_TYPES = (DOC_TYPE_URL_DOCUMENT, DOC_TYPE_LEGACY_DOCUMENT)

# Metadata field names stored alongside each document
FIELD_URL = "url"
FIELD_TITLE = "title"
FIELD_LIBRARY_NAME = "libraryName"
FIELD_VERSION = "version"
FIELD_CATEGORY = "category"
FIELD_KEYWORDS = "keywords"
FIELD_DESCRIPTION = "description"
FIELD_SECTION = "section"
FIELD_LAST_UPDATED = "lastUpdated"
FIELD_DOC_TYPE = "docType"
FIELD_CONTENT_EXTRACTED = "contentExtracted"
FIELD_ADDED_AT = "addedAt"
FIELD_SEARCHABLE_TEXT = "searchableText"

# Separator used to store keyword lists as a single scalar metadata value
KEYWORD_SEPARATOR = ", "


# =============================================================================
# Search & Listing
# =============================================================================

SEARCH_TYPE_GENERAL = "general"
SEARCH_TYPE_LIBRARY = "library"
SEARCH_TYPE_CATEGORY = "category"
SEARCH_TYPE_KEYWORDS = "keywords"

GROUP_BY_ALL = "all"
GROUP_BY_LIBRARY = "library"
GROUP_BY_CATEGORY = "category"

DOC_CATEGORIES = (
    "documentation",
    "api",
    "components",
    "utilities",
    "layout",
    "styling",
    "guides",
    "reference",
    "examples",
    "tutorials",
)

# Length of content snippet shown in listings
SNIPPET_LENGTH = 200


# =============================================================================
# Scraping defaults
# =============================================================================

DEFAULT_TIMEOUT_SECONDS = 10.0
DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; MCP-Scraper/1.0)"

# 1 MB cap on a single page body
DEFAULT_MAX_CONTENT_LENGTH = 1_000_000

# Delay between pages when scraping several explicit URLs
DEFAULT_SCRAPE_DELAY_MS = 500

# Delay between candidates during bulk indexing
DEFAULT_INDEX_DELAY_MS = 100

# Content containers shorter than this are not considered meaningful
MIN_CONTENT_LENGTH = 100

# Description captured for a link is truncated to this many characters
MAX_DESCRIPTION_LENGTH = 200

DEFAULT_TITLE = "Untitled"

BROWSER_HEADERS = {
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
    "Accept-Encoding": "gzip, deflate",
    "DNT": "1",
    "Connection": "keep-alive",
    "Upgrade-Insecure-Requests": "1",
}

# Structural and noise elements removed before title/content extraction
NOISE_SELECTORS = (
    "nav",
    "header",
    "footer",
    "aside",
    ".sidebar",
    ".menu",
    ".navigation",
    ".breadcrumb",
    ".comments",
    ".social-share",
    "script",
    "style",
    "noscript",
    ".ad",
    ".advertisement",
    ".popup",
)

# Tried in order; first non-empty match wins
TITLE_SELECTORS = ("title", "h1", ".title", ".post-title")

# Tried in order; first container with meaningful text wins
CONTENT_SELECTORS = ("main", "article", ".content", ".post-content", ".entry-content", "body")


# =============================================================================
# Documentation URL filter defaults
# =============================================================================

DEFAULT_DOC_PATH_PATTERN = re.compile(r"/docs?/", re.IGNORECASE)

DEFAULT_DOC_EXCLUDE_PATTERNS = (
    re.compile(r"\.(pdf|zip|tar\.gz|exe|dmg)$", re.IGNORECASE),
    re.compile(r"#"),
    re.compile(r"/api/", re.IGNORECASE),
    re.compile(r"/changelog", re.IGNORECASE),
    re.compile(r"/blog", re.IGNORECASE),
)

DOC_URL_SELECTORS = (
    'a[href*="/docs"]',
    "nav a[href]",
    ".sidebar a[href]",
    ".toc a[href]",
    ".menu a[href]",
    "main a[href]",
)

DEFAULT_DOC_MAX_URLS = 500


# =============================================================================
# Legacy document chunking
# =============================================================================

DEFAULT_CHUNK_SIZE = 1000
DEFAULT_CHUNK_OVERLAP = 200


# =============================================================================
# Parameter manager (key-value store)
# =============================================================================

PARAMETER_ENVIRONMENTS = ("qa", "dev", "prod")
PARAMETER_SCOPE_INDEX = "scopeIndex"
PARAMETER_UPDATED_BY = "docindex-mcp"
DEFAULT_PARAMETER_LAMBDAS = "'ALL'"
