"""Free-text (legacy) RAG tools."""

import json
import logging
from collections import defaultdict
from typing import Annotated, Literal

from pydantic import BaseModel, Field, field_validator

from docindex_common.constants import SNIPPET_LENGTH
from docindex_common.logging_utils import safe_log_event
from docindex_common.query_helpers import build_legacy_filter
from docindex_mcp.services import Services

logger = logging.getLogger(__name__)

SourceType = Literal["documentation", "source_code", "web_page"]
RagGroupBy = Literal["all", "libraryName", "sourceType"]


class RagMetadata(BaseModel):
    """Metadata attached to every chunk of a free-text document."""

    sourceURI: str = Field(description="URL for web pages or file path for local code")
    sourceType: SourceType = Field(description="Type of the source content")
    libraryName: str = Field(description="Library the content relates to, e.g. 'react'")
    version: str = Field(description="Library version, e.g. '18.2.0'")
    language: str | None = Field(default=None, description="Programming language, if any")

    @field_validator("libraryName", "language")
    @classmethod
    def lower_case(cls, value: str | None) -> str | None:
        return value.lower() if value else value


def snippet(text: str | None) -> str:
    text = text or ""
    if len(text) > SNIPPET_LENGTH:
        return text[:SNIPPET_LENGTH] + "..."
    return text


class RagTools:
    """Tool handlers for legacy free-text documents."""

    def __init__(self, services: Services):
        self.services = services

    async def create_rag_information(
        self,
        raw_text: Annotated[str, Field(description="Raw text content to index")],
        metadata: RagMetadata,
    ) -> str:
        """Split free text into chunks and add them to the index."""
        params = {"raw_text": raw_text, **metadata.model_dump()}
        logger.info(f"create-rag-information: {safe_log_event(params)}")
        try:
            ids = await self.services.rag_service.add_document(
                raw_text, metadata.model_dump(exclude_none=True)
            )
        except Exception as e:
            logger.exception("create-rag-information failed")
            return (
                f"Error: create-rag-information failed for {metadata.sourceURI} "
                f"(library: {metadata.libraryName}): {e}"
            )
        return f"Document added to RAG successfully ({len(ids)} chunks)"

    async def query_rag_information(
        self,
        query: Annotated[str, Field(description="Search query text")],
        source_type: Annotated[SourceType | None, Field(description="Filter by source type")] = None,
        library_name: Annotated[str | None, Field(description="Filter by library name")] = None,
        limit: Annotated[int, Field(ge=1, le=20, description="Maximum number of results")] = 5,
    ) -> str:
        """Similarity search over free-text documents."""
        where = build_legacy_filter(
            sourceType=source_type,
            libraryName=library_name.lower() if library_name else None,
        )
        try:
            results = await self.services.rag_service.query(
                query_texts=[query], n_results=limit, where=where
            )
        except Exception as e:
            logger.exception(f"query-rag-information failed for {query!r}")
            return f"Error: query-rag-information failed for query {query!r}: {e}"

        sections = [f"Found {len(results.ids)} results for query: {query}"]
        for index, doc_id in enumerate(results.ids):
            metadata = (results.metadatas[index] if index < len(results.metadatas) else None) or {}
            distance = results.distances[index] if results.distances else None
            score = round(1 - distance, 2) if distance is not None else "N/A"
            source = metadata.get("sourceURI") or f"#{doc_id}"
            document = results.documents[index] if index < len(results.documents) else ""
            sections.append(f"[{index + 1}] (score: {score}) {source}\n{document or ''}")
        return "\n\n".join(sections)

    async def list_rag_information(
        self,
        group_by: Annotated[
            RagGroupBy, Field(description="Group by libraryName or sourceType, or show all")
        ] = "all",
        limit: Annotated[int, Field(ge=1, le=100, description="Maximum number of items")] = 20,
        offset: Annotated[int, Field(ge=0, description="Items to skip for pagination")] = 0,
    ) -> str:
        """List indexed free-text documents, optionally grouped."""
        rag = self.services.rag_service
        try:
            legacy_filter = build_legacy_filter()
            total_count = await rag.count_documents(legacy_filter)
            if total_count == 0:
                return "No documents found in the RAG system."
            result = await rag.get_documents(where=legacy_filter, limit=limit, offset=offset)
        except Exception as e:
            logger.exception("list-rag-information failed")
            return f"Error: list-rag-information failed (group by: {group_by}): {e}"

        items = []
        for index, doc_id in enumerate(result.ids):
            metadata = (result.metadatas[index] if index < len(result.metadatas) else None) or {}
            document = result.documents[index] if index < len(result.documents) else ""
            items.append({"id": doc_id, "content": snippet(document), "metadata": metadata})

        has_more = total_count > offset + limit
        header = f"Found {total_count} documents in the RAG system"
        if group_by != "all":
            header += f", grouped by {group_by}"
        header += f" (showing {len(items)}, has more: {has_more})"

        def render(item: dict) -> str:
            metadata = item["metadata"]
            return (
                f"- {item['id']}: {metadata.get('libraryName', 'Unknown')} "
                f"({metadata.get('sourceURI', 'No source URI')})\n"
                f"  {item['content']}\n"
                f"  metadata: {json.dumps(metadata, default=str)}"
            )

        if group_by == "all":
            return header + "\n\n" + "\n".join(render(item) for item in items)

        groups: dict[str, list[dict]] = defaultdict(list)
        for item in items:
            groups[str(item["metadata"].get(group_by, "Unknown"))].append(item)
        return header + "\n\n" + "\n\n".join(
            f"{group} ({len(group_items)} items)\n" + "\n".join(render(item) for item in group_items)
            for group, group_items in groups.items()
        )
