"""Unit tests for the free-text RAG tools."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from pydantic import ValidationError

from docindex_common.config import ServerSettings
from docindex_common.rag_service import DocumentResult
from docindex_mcp.rag_tools import RagMetadata, RagTools, snippet
from docindex_mcp.services import Services


@pytest.fixture
def rag_service():
    mock = MagicMock()
    mock.add_document = AsyncMock(return_value=["id-1", "id-2"])
    mock.query = AsyncMock(return_value=DocumentResult())
    mock.get_documents = AsyncMock(return_value=DocumentResult())
    mock.get_document_count = AsyncMock(return_value=0)
    mock.count_documents = AsyncMock(return_value=0)
    return mock


@pytest.fixture
def tools(rag_service):
    services = Services(
        settings=ServerSettings(), scraper=MagicMock(), rag_service=rag_service, indexer=MagicMock()
    )
    return RagTools(services)


@pytest.fixture
def metadata():
    return RagMetadata(
        sourceURI="https://react.dev/learn",
        sourceType="documentation",
        libraryName="React",
        version="18.2.0",
        language="TypeScript",
    )


class TestRagMetadata:
    def test_lower_cases_library_and_language(self, metadata):
        assert metadata.libraryName == "react"
        assert metadata.language == "typescript"

    def test_rejects_unknown_source_type(self):
        with pytest.raises(ValidationError):
            RagMetadata(sourceURI="x", sourceType="video", libraryName="react", version="1")


def test_snippet():
    assert snippet("short") == "short"
    assert snippet("x" * 250) == "x" * 200 + "..."
    assert snippet(None) == ""


class TestCreateRagInformation:
    @pytest.mark.asyncio
    async def test_adds_document(self, tools, rag_service, metadata):
        output = await tools.create_rag_information("Some text", metadata)

        assert output == "Document added to RAG successfully (2 chunks)"
        text, stored = rag_service.add_document.await_args.args
        assert text == "Some text"
        assert stored["libraryName"] == "react"
        assert stored["sourceType"] == "documentation"

    @pytest.mark.asyncio
    async def test_failure_is_error_payload(self, tools, rag_service, metadata):
        rag_service.add_document.side_effect = RuntimeError("index down")

        output = await tools.create_rag_information("Some text", metadata)

        assert output.startswith("Error: create-rag-information failed for https://react.dev/learn")
        assert "index down" in output


class TestQueryRagInformation:
    @pytest.mark.asyncio
    async def test_filters_legacy_documents(self, tools, rag_service):
        await tools.query_rag_information("hooks", source_type="documentation", library_name="React", limit=3)

        kwargs = rag_service.query.await_args.kwargs
        assert kwargs["query_texts"] == ["hooks"]
        assert kwargs["n_results"] == 3
        assert kwargs["where"].to_where() == {
            "$and": [
                {"docType": "legacy-document"},
                {"sourceType": "documentation"},
                {"libraryName": "react"},
            ]
        }

    @pytest.mark.asyncio
    async def test_formats_results(self, tools, rag_service):
        rag_service.query.return_value = DocumentResult(
            ids=["a"],
            documents=["Hooks let you use state."],
            metadatas=[{"sourceURI": "https://react.dev/learn"}],
            distances=[0.25],
        )

        output = await tools.query_rag_information("hooks")

        assert output.startswith("Found 1 results for query: hooks")
        assert "[1] (score: 0.75) https://react.dev/learn" in output
        assert "Hooks let you use state." in output


class TestListRagInformation:
    @pytest.mark.asyncio
    async def test_empty_collection(self, tools):
        assert await tools.list_rag_information() == "No documents found in the RAG system."

    @pytest.mark.asyncio
    async def test_url_documents_are_not_counted(self, tools, rag_service):
        rag_service.get_document_count.return_value = 100

        output = await tools.list_rag_information()

        assert output == "No documents found in the RAG system."
        assert rag_service.count_documents.await_args.args[0].to_where() == {
            "docType": "legacy-document"
        }
        rag_service.get_documents.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_groups_by_library(self, tools, rag_service):
        rag_service.count_documents.return_value = 30
        rag_service.get_documents.return_value = DocumentResult(
            ids=["a", "b"],
            documents=["first", "second"],
            metadatas=[{"libraryName": "react"}, {"libraryName": "vue"}],
        )

        output = await tools.list_rag_information(group_by="libraryName", limit=2)

        assert "grouped by libraryName" in output
        assert "has more: True" in output
        assert "react (1 items)" in output
        assert "vue (1 items)" in output
        assert rag_service.get_documents.await_args.kwargs["where"].to_where() == {
            "docType": "legacy-document"
        }
