"""
Custom exceptions for docindex scraping and indexing.

Errors local to one URL or one candidate carry the URL so batch callers
can report them as structured failure entries.
"""


class DocIndexError(Exception):
    """Base exception for docindex errors."""


class ScraperError(DocIndexError):
    """Error while scraping or parsing a single page."""

    def __init__(self, url: str, message: str):
        self.url = url
        super().__init__(f"Failed to scrape {url}: {message}")


class InvalidUrlError(ScraperError):
    """URL is malformed or uses a scheme other than http/https."""

    def __init__(self, url: str, message: str = "Only HTTP and HTTPS URLs are supported"):
        super().__init__(url, f"Invalid URL: {message}")


class FetchError(ScraperError):
    """Network, timeout or size-cap failure during a page fetch."""

    def __init__(self, url: str, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(url, message)


class IndexWriteError(DocIndexError):
    """The vector index rejected a document write."""

    def __init__(self, url: str, message: str):
        self.url = url
        super().__init__(f"Failed to index {url}: {message}")


class ExtractionWarning(UserWarning):
    """A link could not be resolved during discovery and was skipped."""
