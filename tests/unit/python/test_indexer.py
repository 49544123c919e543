"""Unit tests for bulk indexing."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from docindex_common.config import IndexerSettings
from docindex_common.exceptions import FetchError, IndexWriteError
from docindex_common.indexer import (
    BulkIndexer,
    BulkIndexResult,
    FailedUrl,
    build_document_input,
    build_keywords,
    extract_section_from_url,
)
from docindex_common.scraper.models import ExtractedUrl, UrlExtractionResult

SEED_URL = "https://example.com/docs/"
U1 = "https://example.com/docs/intro"
U2 = "https://example.com/docs/install"
U3 = "https://example.com/docs/usage"


def _extraction(*urls):
    return UrlExtractionResult(
        base_url=SEED_URL,
        extracted_urls=[ExtractedUrl(url=url, text="Getting started") for url in urls],
        total_found=len(urls),
    )


@pytest.fixture
def scraper():
    mock = MagicMock()
    mock.extract_documentation_urls = AsyncMock(return_value=_extraction(U1, U2, U3))
    mock.extract_urls = AsyncMock(return_value=_extraction(U1))
    return mock


@pytest.fixture
def rag_service():
    mock = MagicMock()
    mock.add_url_document = AsyncMock(return_value=MagicMock())
    return mock


@pytest.fixture
def indexer(scraper, rag_service):
    return BulkIndexer(scraper, rag_service, IndexerSettings(request_delay_ms=0))


class TestExtractSectionFromUrl:
    @pytest.mark.parametrize(
        "url,expected",
        [
            ("https://example.com/docs/components/button", "components"),
            ("https://example.com/v2/doc/setup", "setup"),
            ("https://example.com/guide/getting-started", "getting-started"),
            ("https://example.com/docs", "docs"),
            ("https://example.com/", "general"),
        ],
    )
    def test_sections(self, url, expected):
        assert extract_section_from_url(url) == expected


class TestBuildKeywords:
    def test_order_and_short_word_filter(self):
        keywords = build_keywords("React", "18", "Guides", "Use the Hooks API")
        assert keywords == ["react", "18", "guides", "use", "the", "hooks", "api"]

    def test_deduplicates(self):
        assert build_keywords("react", "18", "guides", "React guides") == ["react", "18", "guides"]


class TestBuildDocumentInput:
    def test_title_fallbacks(self):
        assert build_document_input(ExtractedUrl(url=U1, title="T"), "react", "18", "docs").title == "T"
        assert build_document_input(ExtractedUrl(url=U1, text="Txt"), "react", "18", "docs").title == "Txt"
        assert build_document_input(ExtractedUrl(url=U1), "react", "18", "docs").title == "Untitled"

    def test_default_description_and_section(self):
        document = build_document_input(ExtractedUrl(url=U1, text="Intro"), "React", "18", "Guides")

        assert document.description == "React documentation page"
        assert document.section == "intro"
        assert document.library_name == "react"
        assert document.category == "guides"


class TestBulkIndexResult:
    def test_to_dict(self):
        result = BulkIndexResult(
            base_url=SEED_URL,
            candidates=[U1, U2, U3],
            successful=[U1, U3],
            failed=[FailedUrl(url=U2, error="boom")],
        )

        assert result.to_dict() == {
            "baseUrl": SEED_URL,
            "totalUrls": 3,
            "successful": [U1, U3],
            "failed": [{"url": U2, "error": "boom"}],
            "successRate": 67,
        }

    def test_success_rate_with_no_candidates(self):
        assert BulkIndexResult(base_url=SEED_URL).success_rate == 0.0


class TestBulkIndexer:
    @pytest.mark.asyncio
    async def test_indexes_every_candidate(self, indexer, rag_service):
        result = await indexer.bulk_index(SEED_URL, "React", "18", "Documentation")

        assert result.successful == [U1, U2, U3]
        assert result.failed == []
        assert result.success_rate == 1.0
        assert rag_service.add_url_document.await_count == 3

        document, extract_content = rag_service.add_url_document.await_args_list[0].args
        assert document.url == U1
        assert document.library_name == "react"
        assert extract_content is False

    @pytest.mark.asyncio
    async def test_partial_failure_continues(self, indexer, rag_service):
        rag_service.add_url_document.side_effect = [
            MagicMock(),
            IndexWriteError(U2, "boom"),
            MagicMock(),
        ]

        result = await indexer.bulk_index(SEED_URL, "react", "18", "docs")

        assert result.successful == [U1, U3]
        assert result.failed == [FailedUrl(url=U2, error=str(IndexWriteError(U2, "boom")))]
        assert len(result.successful) + len(result.failed) == result.total

    @pytest.mark.asyncio
    async def test_no_candidates(self, indexer, scraper, rag_service):
        scraper.extract_documentation_urls.return_value = _extraction()

        result = await indexer.bulk_index(SEED_URL, "react", "18", "docs")

        assert result.total == 0
        assert result.success_rate == 0.0
        rag_service.add_url_document.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_discovery_failure_propagates(self, indexer, scraper):
        scraper.extract_documentation_urls.side_effect = FetchError(SEED_URL, "HTTP 404", 404)

        with pytest.raises(FetchError):
            await indexer.bulk_index(SEED_URL, "react", "18", "docs")

    @pytest.mark.asyncio
    async def test_generic_mode_uses_plain_extraction(self, indexer, scraper):
        result = await indexer.bulk_index(SEED_URL, "react", "18", "docs", doc_mode=False)

        scraper.extract_urls.assert_awaited_once_with(SEED_URL)
        scraper.extract_documentation_urls.assert_not_awaited()
        assert result.successful == [U1]

    @pytest.mark.asyncio
    async def test_delay_between_candidates(self, scraper, rag_service):
        indexer = BulkIndexer(scraper, rag_service, IndexerSettings(request_delay_ms=250))

        with patch("docindex_common.indexer.asyncio.sleep", new=AsyncMock()) as sleep:
            await indexer.bulk_index(SEED_URL, "react", "18", "docs")

        assert sleep.await_count == 2
        sleep.assert_awaited_with(0.25)
