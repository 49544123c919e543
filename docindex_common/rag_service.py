"""
Document-level operations over the vector index.

Two kinds of document share one collection, separated by the docType
discriminator:

- URL documents: one record per documentation page, with structured
  metadata (library, version, category, keywords, section).
- Legacy documents: free text split into overlapping chunks.
"""

import logging
import uuid
from dataclasses import dataclass, field
from typing import Any

from langchain_text_splitters import RecursiveCharacterTextSplitter

from docindex_common.chroma_gateway import ChromaGateway, Where
from docindex_common.config import IndexerSettings
from docindex_common.constants import (
    COLLECTION_NAME,
    DOC_TYPE_LEGACY_DOCUMENT,
    DOC_TYPE_URL_DOCUMENT,
    FIELD_ADDED_AT,
    FIELD_CATEGORY,
    FIELD_CONTENT_EXTRACTED,
    FIELD_DESCRIPTION,
    FIELD_DOC_TYPE,
    FIELD_KEYWORDS,
    FIELD_LAST_UPDATED,
    FIELD_LIBRARY_NAME,
    FIELD_SEARCHABLE_TEXT,
    FIELD_SECTION,
    FIELD_TITLE,
    FIELD_URL,
    FIELD_VERSION,
)
from docindex_common.exceptions import DocIndexError, IndexWriteError
from docindex_common.query_helpers import (
    build_keyword_filter,
    build_url_document_filter,
    format_keywords,
    generate_searchable_text,
)
from docindex_common.scraper.models import utc_now_iso
from docindex_common.scraper.service import ScraperService

logger = logging.getLogger(__name__)


@dataclass
class DocumentResult:
    """Flat view of index results; distances only set for similarity queries."""

    ids: list[str] = field(default_factory=list)
    documents: list[str | None] = field(default_factory=list)
    metadatas: list[dict[str, Any] | None] = field(default_factory=list)
    distances: list[float | None] | None = None

    def __len__(self) -> int:
        return len(self.ids)


@dataclass
class UrlDocumentInput:
    """
    Metadata for one documentation page to be indexed.

    Library name and category are expected lower-cased; add_url_document
    lower-cases them again before writing.
    """

    url: str
    title: str
    library_name: str
    version: str
    category: str
    keywords: list[str] = field(default_factory=list)
    description: str = ""
    section: str = "general"
    last_updated: str = field(default_factory=utc_now_iso)


@dataclass
class UrlDocumentRecord:
    """A URL document as written to the index."""

    id: str
    content: str
    metadata: dict[str, Any]
    content_extracted: bool


@dataclass(frozen=True)
class ContentResult:
    """
    Outcome of a best-effort content fetch.

    Either ``content`` is set, or ``degraded_reason`` explains why the caller
    should fall back to metadata-only content.
    """

    content: str | None = None
    degraded_reason: str | None = None

    @property
    def ok(self) -> bool:
        return self.content is not None


def metadata_only_content(document: UrlDocumentInput) -> str:
    """Fallback document text: title, description and keywords."""
    return "\n".join(
        [document.title, document.description, ", ".join(document.keywords)]
    )


def flatten_query_result(result: dict[str, Any]) -> DocumentResult:
    """Flatten Chroma's one-list-per-query-text nesting."""

    def flat(key: str) -> list:
        nested = result.get(key) or []
        return [item for group in nested for item in (group or [])]

    return DocumentResult(
        ids=[doc_id for doc_id in flat("ids") if doc_id is not None],
        documents=flat("documents"),
        metadatas=flat("metadatas"),
        distances=flat("distances"),
    )


class RagService:
    """
    Add, query, list and delete documents in one collection.

    Usage:
        service = RagService(ChromaGateway(settings.chroma))
        record = await service.add_url_document(document, extract_content=True)
        results = await service.search_by_library("react", limit=5)
    """

    def __init__(
        self,
        gateway: ChromaGateway,
        scraper: ScraperService | None = None,
        settings: IndexerSettings | None = None,
        collection_name: str = COLLECTION_NAME,
    ):
        self.gateway = gateway
        self.scraper = scraper or ScraperService()
        self.settings = settings or IndexerSettings()
        self.collection_name = collection_name
        self.text_splitter = RecursiveCharacterTextSplitter(
            chunk_size=self.settings.chunk_size,
            chunk_overlap=self.settings.chunk_overlap,
        )

    # =========================================================================
    # Writes
    # =========================================================================

    async def add_document(self, raw_text: str, metadata: dict[str, Any]) -> list[str]:
        """
        Add a legacy free-text document, split into chunks.

        Args:
            raw_text: Document text
            metadata: Scalar metadata copied onto every chunk

        Returns:
            Generated chunk ids, in chunk order
        """
        chunks = self.text_splitter.split_text(raw_text)
        if not chunks:
            logger.warning("Document text produced no chunks; nothing added")
            return []

        added_at = utc_now_iso()
        ids = [str(uuid.uuid4()) for _ in chunks]
        metadatas = [
            {
                **metadata,
                "chunkNumber": index + 1,
                "totalChunks": len(chunks),
                FIELD_ADDED_AT: added_at,
                FIELD_DOC_TYPE: DOC_TYPE_LEGACY_DOCUMENT,
            }
            for index in range(len(chunks))
        ]

        await self.gateway.add_items(
            self.collection_name, ids=ids, metadatas=metadatas, documents=chunks
        )
        logger.info(f"Added {len(chunks)} document chunks to collection '{self.collection_name}'")
        return ids

    async def fetch_document_content(self, url: str) -> ContentResult:
        """
        Scrape a page for indexing. Never raises.

        Returns:
            ContentResult with the cleaned page text, or with degraded_reason
            set when fetching or extraction failed
        """
        try:
            scraped = await self.scraper.scrape_url(url)
        except Exception as e:
            logger.warning(f"Falling back to metadata-only content for {url}: {e}")
            return ContentResult(degraded_reason=str(e))

        return ContentResult(content=scraped.content)

    async def add_url_document(
        self,
        document: UrlDocumentInput,
        extract_content: bool = False,
    ) -> UrlDocumentRecord:
        """
        Write one URL document.

        Args:
            document: Page metadata
            extract_content: Scrape the page and index its text; falls back
                to metadata-only content on failure

        Returns:
            The record as written, including its fresh id

        Raises:
            IndexWriteError: If the index rejects the write
        """
        content = None
        if extract_content:
            fetched = await self.fetch_document_content(document.url)
            content = fetched.content

        content_extracted = content is not None
        if content is None:
            content = metadata_only_content(document)

        library_name = document.library_name.lower()
        version = document.version.lower()
        category = document.category.lower()

        metadata = {
            FIELD_URL: document.url,
            FIELD_TITLE: document.title,
            FIELD_LIBRARY_NAME: library_name,
            FIELD_VERSION: version,
            FIELD_CATEGORY: category,
            FIELD_KEYWORDS: format_keywords(document.keywords),
            FIELD_DESCRIPTION: document.description,
            FIELD_SECTION: document.section,
            FIELD_LAST_UPDATED: document.last_updated,
            FIELD_DOC_TYPE: DOC_TYPE_URL_DOCUMENT,
            FIELD_CONTENT_EXTRACTED: content_extracted,
            FIELD_ADDED_AT: utc_now_iso(),
            FIELD_SEARCHABLE_TEXT: generate_searchable_text(
                library_name, version, category, document.keywords, document.title
            ),
        }
        doc_id = str(uuid.uuid4())

        try:
            await self.gateway.add_items(
                self.collection_name, ids=[doc_id], metadatas=[metadata], documents=[content]
            )
        except Exception as e:
            raise IndexWriteError(document.url, str(e)) from e

        logger.debug(f"Indexed {document.url} as {doc_id} (content extracted: {content_extracted})")
        return UrlDocumentRecord(
            id=doc_id, content=content, metadata=metadata, content_extracted=content_extracted
        )

    async def delete_documents(
        self, ids: list[str] | None = None, where: Where | None = None
    ) -> None:
        if ids is None and where is None:
            raise DocIndexError("delete_documents requires ids or a filter")
        await self.gateway.delete_items(self.collection_name, ids=ids, where=where)
        logger.info(f"Deleted documents from collection '{self.collection_name}'")

    # =========================================================================
    # Reads
    # =========================================================================

    async def query(
        self,
        query_texts: list[str] | None = None,
        query_embeddings: list[list[float]] | None = None,
        n_results: int = 5,
        where: Where | None = None,
        where_document: dict[str, Any] | None = None,
    ) -> DocumentResult:
        """Similarity query, flattened across query texts."""
        result = await self.gateway.query_items(
            self.collection_name,
            query_texts=query_texts,
            query_embeddings=query_embeddings,
            n_results=n_results,
            where=where,
            where_document=where_document,
        )
        return flatten_query_result(result)

    async def get_documents(
        self,
        ids: list[str] | None = None,
        where: Where | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> DocumentResult:
        result = await self.gateway.get_items(
            self.collection_name, ids=ids, where=where, limit=limit, offset=offset
        )
        return DocumentResult(
            ids=list(result.get("ids") or []),
            documents=list(result.get("documents") or []),
            metadatas=list(result.get("metadatas") or []),
        )

    async def get_document_count(self) -> int:
        return await self.gateway.count_items(self.collection_name)

    async def count_documents(self, where: Where | None = None) -> int:
        """Number of documents matching `where`; the whole collection when omitted."""
        if where is None:
            return await self.get_document_count()
        result = await self.gateway.get_items(self.collection_name, where=where)
        return len(result.get("ids") or [])

    async def search_by_library(
        self, library_name: str, version: str | None = None, limit: int = 10
    ) -> DocumentResult:
        return await self.query(
            query_texts=[library_name],
            n_results=limit,
            where=build_url_document_filter(library_name=library_name, version=version),
        )

    async def search_by_category(
        self, category: str, library_name: str | None = None, limit: int = 10
    ) -> DocumentResult:
        return await self.query(
            query_texts=[category],
            n_results=limit,
            where=build_url_document_filter(library_name=library_name, category=category),
        )

    async def search_by_keywords(self, keywords: list[str], limit: int = 10) -> DocumentResult:
        return await self.query(
            query_texts=[" ".join(keywords)],
            n_results=limit,
            where=build_keyword_filter(),
        )

    async def get_library_urls(
        self, library_name: str, version: str | None = None
    ) -> DocumentResult:
        """All URL documents of a library (a filtered get, not a similarity query)."""
        return await self.get_documents(
            where=build_url_document_filter(library_name=library_name, version=version)
        )
