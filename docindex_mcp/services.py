"""Service wiring for the MCP tools."""

from dataclasses import dataclass

from docindex_common.chroma_gateway import ChromaGateway
from docindex_common.config import ServerSettings
from docindex_common.indexer import BulkIndexer
from docindex_common.rag_service import RagService
from docindex_common.scraper.service import ScraperService


@dataclass
class Services:
    """Everything the documentation and RAG tools talk to."""

    settings: ServerSettings
    scraper: ScraperService
    rag_service: RagService
    indexer: BulkIndexer

    @classmethod
    def from_settings(cls, settings: ServerSettings) -> "Services":
        scraper = ScraperService(settings.scraper)
        rag_service = RagService(
            ChromaGateway(settings.chroma),
            scraper=scraper,
            settings=settings.indexer,
            collection_name=settings.chroma.collection_name,
        )
        indexer = BulkIndexer(scraper, rag_service, settings.indexer)
        return cls(settings=settings, scraper=scraper, rag_service=rag_service, indexer=indexer)
