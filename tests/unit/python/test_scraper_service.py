"""Unit tests for ScraperService."""

import logging
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from docindex_common.exceptions import FetchError, ScraperError
from docindex_common.scraper.fetcher import FetchResult
from docindex_common.scraper.service import ScraperService

SEED_URL = "https://example.com/docs/"
SEED_HTML = """
<html>
    <head><title>Docs Home</title></head>
    <body>
        <nav>
            <a href="/docs/intro">Introduction</a>
            <a href="/docs/install">Installation</a>
            <a href="/blog/news">News</a>
        </nav>
        <main>
            <p>Welcome to the documentation. Everything you need to build, test and ship
            your project lives in the pages linked from here.</p>
            <a href="https://github.com/example/repo">Source</a>
        </main>
    </body>
</html>
"""


@pytest.fixture
def fetcher():
    mock = MagicMock()
    mock.fetch = AsyncMock(
        return_value=FetchResult(
            url=SEED_URL,
            content=SEED_HTML,
            content_type="text/html",
            is_html=True,
        )
    )
    mock.is_scrapeable = AsyncMock(return_value=True)
    return mock


class TestScraperService:
    """Tests for ScraperService."""

    @pytest.mark.asyncio
    async def test_scrape_url(self, fetcher):
        service = ScraperService(fetcher=fetcher)

        result = await service.scrape_url(SEED_URL)

        fetcher.fetch.assert_awaited_once_with(SEED_URL)
        assert result.title == "Docs Home"
        assert result.content.startswith("Welcome to the documentation.")
        assert "Introduction" not in result.content

    @pytest.mark.asyncio
    async def test_scrape_url_propagates_fetch_error(self, fetcher):
        fetcher.fetch.side_effect = FetchError(SEED_URL, "HTTP 500")
        service = ScraperService(fetcher=fetcher)

        with pytest.raises(FetchError):
            await service.scrape_url(SEED_URL)

    @pytest.mark.asyncio
    async def test_scrape_url_wraps_parse_failures(self, fetcher):
        service = ScraperService(fetcher=fetcher)

        with patch(
            "docindex_common.scraper.service.extract_content", side_effect=RuntimeError("boom")
        ):
            with pytest.raises(ScraperError) as exc_info:
                await service.scrape_url(SEED_URL)

        assert exc_info.value.url == SEED_URL
        assert "boom" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_non_html_response_is_parsed_with_warning(self, fetcher, caplog):
        fetcher.fetch.return_value = FetchResult(
            url=SEED_URL, content=SEED_HTML, content_type="text/plain", is_html=False
        )
        service = ScraperService(fetcher=fetcher)

        with caplog.at_level(logging.WARNING, logger="docindex_common.scraper.service"):
            result = await service.scrape_url(SEED_URL)

        assert result.title == "Docs Home"
        assert "non-HTML response from https://example.com/docs/" in caplog.text
        assert "text/plain" in caplog.text

    @pytest.mark.asyncio
    async def test_html_response_logs_no_warning(self, fetcher, caplog):
        service = ScraperService(fetcher=fetcher)

        with caplog.at_level(logging.WARNING, logger="docindex_common.scraper.service"):
            await service.extract_urls(SEED_URL)

        assert "non-HTML" not in caplog.text

    @pytest.mark.asyncio
    async def test_extract_urls(self, fetcher):
        service = ScraperService(fetcher=fetcher)

        result = await service.extract_urls(SEED_URL)

        assert result.base_url == SEED_URL
        assert result.urls == [
            "https://example.com/docs/intro",
            "https://example.com/docs/install",
            "https://example.com/blog/news",
        ]

    @pytest.mark.asyncio
    async def test_extract_documentation_urls(self, fetcher):
        service = ScraperService(fetcher=fetcher)

        result = await service.extract_documentation_urls(SEED_URL)

        assert result.urls == [
            "https://example.com/docs/intro",
            "https://example.com/docs/install",
        ]
        assert result.total_found == 2

    @pytest.mark.asyncio
    async def test_is_scrapeable_delegates(self, fetcher):
        service = ScraperService(fetcher=fetcher)

        assert await service.is_scrapeable(SEED_URL) is True
        fetcher.is_scrapeable.assert_awaited_once_with(SEED_URL)
