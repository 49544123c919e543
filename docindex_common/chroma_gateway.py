"""
Chroma vector index adapter.

Thin async wrapper over ``chromadb.AsyncHttpClient``. Each operation
resolves (or creates) the named collection first. Filters may be passed as
FilterClause objects or raw where dicts.
"""

import asyncio
import logging
from typing import Any

import chromadb

from docindex_common.config import ChromaSettings
from docindex_common.query_helpers import AndClause, SingleCondition

logger = logging.getLogger(__name__)

Where = SingleCondition | AndClause | dict[str, Any]


def render_where(where: Where | None) -> dict[str, Any] | None:
    """Render a filter into the native where dict (None passes through)."""
    if where is None:
        return None
    if isinstance(where, (SingleCondition, AndClause)):
        return where.to_where()
    return where


class ChromaGateway:
    """
    Collection-level operations against a Chroma server.

    Usage:
        gateway = ChromaGateway(ChromaSettings(host="localhost"))
        await gateway.add_items("rag-collection", ids, metadatas, documents)
    """

    def __init__(self, settings: ChromaSettings | None = None, client: Any = None):
        """
        Initialize the gateway.

        Args:
            settings: Host and port of the Chroma server
            client: Pre-built async client (skips lazy connection)
        """
        self.settings = settings or ChromaSettings()
        self._client = client
        self._lock = asyncio.Lock()

    async def get_client(self):
        """Lazy-create the async HTTP client."""
        if self._client is None:
            async with self._lock:
                if self._client is None:
                    logger.info(
                        f"Connecting to Chroma at {self.settings.host}:{self.settings.port}"
                    )
                    self._client = await chromadb.AsyncHttpClient(
                        host=self.settings.host, port=self.settings.port
                    )
        return self._client

    async def get_or_create_collection(self, name: str, metadata: dict[str, Any] | None = None):
        client = await self.get_client()
        return await client.get_or_create_collection(name=name, metadata=metadata)

    async def list_collections(self) -> list:
        client = await self.get_client()
        return await client.list_collections()

    async def delete_collection(self, name: str) -> None:
        client = await self.get_client()
        await client.delete_collection(name=name)
        logger.info(f"Deleted collection '{name}'")

    async def add_items(
        self,
        collection_name: str,
        ids: list[str],
        metadatas: list[dict[str, Any]] | None = None,
        documents: list[str] | None = None,
    ) -> None:
        collection = await self.get_or_create_collection(collection_name)
        await collection.add(ids=ids, metadatas=metadatas, documents=documents)

    async def query_items(
        self,
        collection_name: str,
        query_texts: list[str] | None = None,
        query_embeddings: list[list[float]] | None = None,
        n_results: int = 5,
        where: Where | None = None,
        where_document: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """
        Similarity query.

        Returns:
            Chroma query result: ids, documents, metadatas and distances,
            each nested one list per query text/embedding
        """
        collection = await self.get_or_create_collection(collection_name)
        return await collection.query(
            query_texts=query_texts,
            query_embeddings=query_embeddings,
            n_results=n_results,
            where=render_where(where),
            where_document=where_document,
        )

    async def get_items(
        self,
        collection_name: str,
        ids: list[str] | None = None,
        where: Where | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> dict[str, Any]:
        collection = await self.get_or_create_collection(collection_name)
        return await collection.get(
            ids=ids, where=render_where(where), limit=limit, offset=offset
        )

    async def delete_items(
        self,
        collection_name: str,
        ids: list[str] | None = None,
        where: Where | None = None,
    ) -> None:
        collection = await self.get_or_create_collection(collection_name)
        await collection.delete(ids=ids, where=render_where(where))

    async def update_items(
        self,
        collection_name: str,
        ids: list[str],
        embeddings: list[list[float]] | None = None,
        metadatas: list[dict[str, Any]] | None = None,
        documents: list[str] | None = None,
    ) -> None:
        collection = await self.get_or_create_collection(collection_name)
        await collection.update(
            ids=ids, embeddings=embeddings, metadatas=metadatas, documents=documents
        )

    async def count_items(self, collection_name: str) -> int:
        collection = await self.get_or_create_collection(collection_name)
        return await collection.count()
