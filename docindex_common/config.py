"""Configuration for docindex components.

Every component receives its settings object at construction; there is no
process-wide default scraper. ``ServerSettings.from_env()`` builds the whole
tree from environment variables for the MCP server entry point.
"""

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field

from docindex_common.constants import (
    COLLECTION_NAME,
    DEFAULT_CHUNK_OVERLAP,
    DEFAULT_CHUNK_SIZE,
    DEFAULT_INDEX_DELAY_MS,
    DEFAULT_MAX_CONTENT_LENGTH,
    DEFAULT_SCRAPE_DELAY_MS,
    DEFAULT_TIMEOUT_SECONDS,
    DEFAULT_USER_AGENT,
)

logger = logging.getLogger(__name__)


@dataclass
class ScraperSettings:
    """
    Settings for fetching and scraping pages.

    Attributes:
        timeout: Per-request timeout in seconds
        user_agent: User-Agent header sent with every request
        max_content_length: Maximum response body size in bytes
        request_delay_ms: Delay between pages when scraping several URLs
    """

    timeout: float = DEFAULT_TIMEOUT_SECONDS
    user_agent: str = DEFAULT_USER_AGENT
    max_content_length: int = DEFAULT_MAX_CONTENT_LENGTH
    request_delay_ms: int = DEFAULT_SCRAPE_DELAY_MS


@dataclass
class IndexerSettings:
    """
    Settings for writing documents into the vector index.

    Attributes:
        request_delay_ms: Delay between candidates during bulk indexing
        chunk_size: Chunk size for legacy free-text documents
        chunk_overlap: Overlap between consecutive legacy chunks
    """

    request_delay_ms: int = DEFAULT_INDEX_DELAY_MS
    chunk_size: int = DEFAULT_CHUNK_SIZE
    chunk_overlap: int = DEFAULT_CHUNK_OVERLAP


@dataclass
class ChromaSettings:
    """Connection settings for the Chroma vector index."""

    host: str = "chromadb"
    port: int = 8000
    collection_name: str = COLLECTION_NAME


@dataclass
class ServerSettings:
    """Aggregated settings for the MCP server."""

    scraper: ScraperSettings = field(default_factory=ScraperSettings)
    indexer: IndexerSettings = field(default_factory=IndexerSettings)
    chroma: ChromaSettings = field(default_factory=ChromaSettings)
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ServerSettings":
        """
        Build settings from environment variables.

        Args:
            environ: Mapping to read from (defaults to os.environ)

        Returns:
            ServerSettings with defaults for any unset variable

        Raises:
            ValueError: If a numeric variable holds a non-numeric value
        """
        env = os.environ if environ is None else environ

        scraper = ScraperSettings(
            timeout=_read_number(env, "SCRAPER_TIMEOUT", DEFAULT_TIMEOUT_SECONDS, float),
            user_agent=env.get("SCRAPER_USER_AGENT", DEFAULT_USER_AGENT),
            max_content_length=_read_number(
                env, "SCRAPER_MAX_CONTENT_LENGTH", DEFAULT_MAX_CONTENT_LENGTH, int
            ),
            request_delay_ms=_read_number(
                env, "SCRAPER_REQUEST_DELAY_MS", DEFAULT_SCRAPE_DELAY_MS, int
            ),
        )
        indexer = IndexerSettings(
            request_delay_ms=_read_number(env, "INDEX_REQUEST_DELAY_MS", DEFAULT_INDEX_DELAY_MS, int),
        )
        chroma = ChromaSettings(
            host=env.get("CHROMA_HOST", "chromadb"),
            port=_read_number(env, "CHROMA_PORT", 8000, int),
            collection_name=env.get("CHROMA_COLLECTION", COLLECTION_NAME),
        )

        settings = cls(
            scraper=scraper,
            indexer=indexer,
            chroma=chroma,
            log_level=env.get("LOG_LEVEL", "INFO").upper(),
        )
        logger.debug(f"Loaded settings: {settings}")
        return settings


def _read_number(env: Mapping[str, str], name: str, default, cast):
    """Read a numeric environment variable, failing fast on bad values."""
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    try:
        return cast(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None
