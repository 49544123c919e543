"""Documentation tools: bulk indexing, link discovery, search and listing."""

import asyncio
import logging
import time
from collections import defaultdict
from typing import Annotated, Any, Literal

from pydantic import Field

from docindex_common.constants import (
    DEFAULT_TITLE,
    GROUP_BY_ALL,
    GROUP_BY_CATEGORY,
    GROUP_BY_LIBRARY,
    SEARCH_TYPE_CATEGORY,
    SEARCH_TYPE_GENERAL,
    SEARCH_TYPE_KEYWORDS,
    SEARCH_TYPE_LIBRARY,
)
from docindex_common.logging_utils import log_summary, safe_log_event
from docindex_common.query_helpers import build_url_document_filter, parse_keywords
from docindex_common.rag_service import DocumentResult
from docindex_common.scraper.models import LinkExtractionOptions, utc_now_iso
from docindex_mcp.services import Services

logger = logging.getLogger(__name__)

SearchType = Literal["general", "library", "category", "keywords"]
GroupBy = Literal["all", "library", "category"]


def truncate_content(content: str, max_length: int) -> tuple[str, bool]:
    """
    Cut content to max_length characters.

    Prefers ending on a sentence (a "." beyond 80% of the cap), then on a
    word (a space beyond 90%), else cuts hard.

    Returns:
        (text, was_truncated)
    """
    content = content.strip()
    if len(content) <= max_length:
        return content, False

    cut = content[:max_length].strip()
    last_sentence = cut.rfind(".")
    last_word = cut.rfind(" ")
    if last_sentence > max_length * 0.8:
        cut = cut[: last_sentence + 1]
    elif last_word > max_length * 0.9:
        cut = cut[:last_word]
    return cut, True


def format_search_results(results: DocumentResult) -> list[dict[str, Any]]:
    """Per-result view; score is 1 - distance, rounded to 2 places."""
    formatted = []
    for index, doc_id in enumerate(results.ids):
        metadata = results.metadatas[index] if index < len(results.metadatas) else None
        metadata = metadata or {}
        score = None
        if results.distances and index < len(results.distances):
            distance = results.distances[index]
            score = round(1 - (distance or 0), 2)
        formatted.append(
            {
                "id": doc_id,
                "url": metadata.get("url", "N/A"),
                "title": metadata.get("title") or DEFAULT_TITLE,
                "libraryName": metadata.get("libraryName", "N/A"),
                "version": metadata.get("version", "N/A"),
                "category": metadata.get("category", "N/A"),
                "keywords": parse_keywords(metadata.get("keywords")),
                "description": metadata.get("description", ""),
                "section": metadata.get("section", ""),
                "score": score,
                "addedAt": metadata.get("addedAt", "N/A"),
            }
        )
    return formatted


class DocumentationTools:
    """Tool handlers over the scraper, the RAG service and the bulk indexer."""

    def __init__(self, services: Services):
        self.services = services

    async def bulk_add_urls(
        self,
        base_url: Annotated[str, Field(description="Base URL to extract documentation URLs from")],
        library_name: Annotated[str, Field(description="Library name, e.g. 'tailwindcss' or 'react'")],
        version: Annotated[str, Field(description="Library version, e.g. '3.4.1'")],
        default_category: Annotated[
            str, Field(description="Category for every URL, e.g. 'documentation' or 'api'")
        ],
        extract_content: Annotated[
            bool, Field(description="Scrape each URL and index its text")
        ] = False,
        doc_mode: Annotated[bool, Field(description="Use documentation URL filtering")] = True,
    ) -> str:
        """Extract URLs from a documentation site and bulk add them to the index."""
        params = {"base_url": base_url, "library_name": library_name, "version": version}
        logger.info(f"bulk-add-urls: {safe_log_event(params)}")
        start = time.time()

        try:
            result = await self.services.indexer.bulk_index(
                base_url,
                library_name,
                version,
                default_category,
                extract_content=extract_content,
                doc_mode=doc_mode,
            )
        except Exception as e:
            logger.exception(f"bulk-add-urls failed for {base_url}")
            logger.info(log_summary("bulk_add_urls", success=False, error=str(e), base_url=base_url))
            return f"Error: bulk-add-urls failed for {base_url} (library: {library_name}): {e}"

        if not result.candidates:
            return (
                f"Warning: no URLs found\n\n"
                f"Base URL: {base_url}\n"
                f"Doc mode: {doc_mode}\n\n"
                f"No URLs were found to process. Check the base URL."
            )

        logger.info(
            log_summary(
                "bulk_add_urls",
                duration_ms=(time.time() - start) * 1000,
                item_count=len(result.successful),
                failed=len(result.failed),
                library_name=library_name,
            )
        )

        lines = [
            "Bulk add URLs complete",
            "",
            f"URLs found: {result.total}",
            f"URLs indexed: {len(result.successful)}",
            f"URLs failed: {len(result.failed)}",
            f"Success rate: {round(result.success_rate * 100)}%",
            "",
            f"Library: {library_name}",
            f"Version: {version}",
            f"Category: {default_category}",
            f"Content extracted: {'yes' if extract_content else 'no'}",
        ]

        if result.successful:
            lines += ["", "Indexed URLs:"]
            lines += [f"{i}. {url}" for i, url in enumerate(result.successful[:10], 1)]
            if len(result.successful) > 10:
                lines.append(f"... and {len(result.successful) - 10} more")

        if result.failed:
            lines += ["", "Failed URLs:"]
            lines += [
                f"{i}. {failure.url} - {failure.error}"
                for i, failure in enumerate(result.failed[:5], 1)
            ]
            if len(result.failed) > 5:
                lines.append(f"... and {len(result.failed) - 5} more")

        lines += ["", f"Completed at: {utc_now_iso()}"]
        return "\n".join(lines)

    async def get_urls_from_url(
        self,
        url: Annotated[str, Field(description="URL to extract links from")],
        doc_mode: Annotated[bool, Field(description="Keep documentation URLs only")] = False,
        max_urls: Annotated[int, Field(ge=1, description="Maximum number of URLs to return")] = 100,
    ) -> str:
        """Extract the URLs linked from a web page."""
        scraper = self.services.scraper
        try:
            if doc_mode:
                result = await scraper.extract_documentation_urls(url)
            else:
                result = await scraper.extract_urls(url, LinkExtractionOptions())
        except Exception as e:
            logger.exception(f"get-urls-from-url failed for {url}")
            return f"Error: get-urls-from-url failed for {url}: {e}"

        urls = result.urls[:max_urls]
        listing = "\n".join(f"{i}. {link}" for i, link in enumerate(urls, 1))
        return (
            f"URLs extracted from: {url}\n\n"
            f"URLs returned: {len(urls)} (found: {result.total_found})\n"
            f"Doc mode: {'yes' if doc_mode else 'no'}\n"
            f"Limit: {max_urls}\n\n"
            f"{listing}\n\n"
            f"Extracted at: {result.scraped_at}"
        )

    async def search_documentation(
        self,
        query: Annotated[str, Field(description="Search text")],
        search_type: Annotated[
            SearchType,
            Field(
                description="general (semantic), library (by library name), "
                "category (by doc category) or keywords"
            ),
        ] = SEARCH_TYPE_GENERAL,
        library_name: Annotated[str | None, Field(description="Filter by library name")] = None,
        version: Annotated[str | None, Field(description="Filter by library version")] = None,
        category: Annotated[str | None, Field(description="Filter by documentation category")] = None,
        keywords: Annotated[list[str] | None, Field(description="Keywords to search for")] = None,
        limit: Annotated[int, Field(ge=1, le=50, description="Maximum number of results")] = 10,
    ) -> str:
        """Search indexed documentation URLs by query, library, category or keywords."""
        rag = self.services.rag_service
        try:
            if search_type == SEARCH_TYPE_LIBRARY:
                if not library_name:
                    raise ValueError("library_name is required for library search")
                results = await rag.search_by_library(library_name, version, limit)
            elif search_type == SEARCH_TYPE_CATEGORY:
                if not category:
                    raise ValueError("category is required for category search")
                results = await rag.search_by_category(category, library_name, limit)
            elif search_type == SEARCH_TYPE_KEYWORDS:
                if not keywords:
                    raise ValueError("keywords are required for keyword search")
                results = await rag.search_by_keywords(keywords, limit)
            else:
                results = await rag.query(
                    query_texts=[query],
                    n_results=limit,
                    where=build_url_document_filter(
                        library_name=library_name, version=version, category=category
                    ),
                )
        except Exception as e:
            logger.exception(f"search-documentation failed for {query!r}")
            return f"Error: search-documentation failed for query {query!r} (search type: {search_type}): {e}"

        formatted = format_search_results(results)
        if not formatted:
            filters = [
                f"Library: {library_name}" if library_name else "",
                f"Version: {version}" if version else "",
                f"Category: {category}" if category else "",
                f"Keywords: {', '.join(keywords)}" if keywords else "",
            ]
            return "\n".join(
                [f'No results found for "{query}"', f"Search type: {search_type}"]
                + [line for line in filters if line]
            )

        sections = [
            "\n".join(
                [
                    f"{i}. {item['title']}",
                    f"URL: {item['url']}",
                    f"Library: {item['libraryName']} v{item['version']}",
                    f"Category: {item['category']}",
                    f"Keywords: {', '.join(item['keywords']) or 'N/A'}",
                    f"Description: {item['description'] or 'N/A'}",
                    f"Score: {item['score'] if item['score'] is not None else 'N/A'}",
                    f"Added: {item['addedAt']}",
                ]
            )
            for i, item in enumerate(formatted, 1)
        ]
        header = (
            f'Documentation found for "{query}"\n'
            f"Search type: {search_type}\n"
            f"Results: {len(formatted)} of at most {limit}"
        )
        return header + "\n\n" + "\n\n".join(sections)

    async def search_specific_documentation(
        self,
        urls: Annotated[
            list[str], Field(min_length=1, max_length=10, description="Documentation URLs to scrape")
        ],
        include_metadata: Annotated[
            bool, Field(description="Include title, length and image/link flags")
        ] = True,
        max_content_length: Annotated[
            int, Field(ge=100, le=50000, description="Maximum characters of content per URL")
        ] = 10000,
    ) -> str:
        """Scrape specific documentation URLs and return their clean text content."""
        scraper = self.services.scraper
        delay_seconds = self.services.settings.scraper.request_delay_ms / 1000
        successful: list[dict[str, Any]] = []
        failed: list[tuple[str, str]] = []

        for position, url in enumerate(urls):
            if position > 0 and delay_seconds > 0:
                await asyncio.sleep(delay_seconds)
            try:
                scraped = await scraper.scrape_url(url)
            except Exception as e:
                logger.warning(f"Failed to scrape {url}: {e}")
                failed.append((url, str(e)))
                continue

            text, truncated = truncate_content(scraped.content, max_content_length)
            shown_length = len(text)
            if truncated:
                text += f"\n\n[CONTENT TRUNCATED - original: {len(scraped.content)} characters]"
            successful.append(
                {
                    "url": url,
                    "title": scraped.title or DEFAULT_TITLE,
                    "content": text,
                    "shown_length": shown_length,
                    "original_length": len(scraped.content),
                    "has_images": scraped.metadata.has_images,
                    "has_links": scraped.metadata.has_links,
                    "scraped_at": scraped.metadata.scraped_at,
                }
            )

        if not successful:
            errors = "\n".join(f"{i}. {url}: {error}" for i, (url, error) in enumerate(failed, 1))
            return (
                f"Error: search-specific-documentation could not scrape any of {len(urls)} URLs\n\n"
                f"{errors}"
            )

        total_length = sum(item["original_length"] for item in successful)
        summary = [
            "Documentation content extracted",
            f"URLs scraped: {len(successful)}/{len(urls)}",
            f"URLs failed: {len(failed)}",
            f"Total content: {total_length} characters",
        ]
        if failed:
            summary += ["", "Failed URLs:"]
            summary += [f"{i}. {url} - {error}" for i, (url, error) in enumerate(failed, 1)]

        sections = []
        for i, item in enumerate(successful, 1):
            if include_metadata:
                header = (
                    f"{i}. {item['title']}\n"
                    f"URL: {item['url']}\n"
                    f"Length: {item['original_length']} characters (shown: {item['shown_length']})\n"
                    f"Images: {'yes' if item['has_images'] else 'no'}\n"
                    f"Links: {'yes' if item['has_links'] else 'no'}\n"
                    f"Scraped: {item['scraped_at']}\n---\n"
                )
            else:
                header = f"{i}. Content of: {item['url']}\n---\n"
            sections.append(header + item["content"])

        separator = "\n\n" + "=" * 80 + "\n\n"
        return "\n".join(summary) + separator + separator.join(sections)

    async def list_documentation(
        self,
        group_by: Annotated[
            GroupBy, Field(description="all (flat list), library or category grouping")
        ] = GROUP_BY_ALL,
        library_name: Annotated[str | None, Field(description="Filter by library name")] = None,
        limit: Annotated[int, Field(ge=1, le=100, description="Maximum number of URLs")] = 20,
        offset: Annotated[int, Field(ge=0, description="Items to skip for pagination")] = 0,
    ) -> str:
        """List indexed documentation URLs, optionally grouped by library or category."""
        rag = self.services.rag_service
        try:
            results = await rag.get_documents(
                where=build_url_document_filter(library_name=library_name),
                limit=limit,
                offset=offset,
            )
            if not results.ids:
                scope = f"Library: {library_name}" if library_name else "Filter: all"
                return (
                    f"No documentation indexed\n{scope}\nGrouping: {group_by}\n\n"
                    f"Use bulk-add-urls to index documentation first."
                )
            total_count = await rag.get_document_count()
        except Exception as e:
            logger.exception("list-documentation failed")
            return f"Error: list-documentation failed (group by: {group_by}, library: {library_name}): {e}"

        docs = []
        for index, doc_id in enumerate(results.ids):
            metadata = (results.metadatas[index] if index < len(results.metadatas) else None) or {}
            docs.append(
                {
                    "id": doc_id,
                    "url": metadata.get("url", "N/A"),
                    "title": metadata.get("title") or DEFAULT_TITLE,
                    "libraryName": metadata.get("libraryName", "N/A"),
                    "version": metadata.get("version", "N/A"),
                    "category": metadata.get("category", "N/A"),
                    "addedAt": metadata.get("addedAt", "N/A"),
                }
            )

        if group_by == GROUP_BY_LIBRARY:
            groups: dict[str, list[dict]] = defaultdict(list)
            for doc in docs:
                groups[f"{doc['libraryName']} v{doc['version']}"].append(doc)
            body = "\n\n".join(
                f"{name} ({len(items)} URLs)\n"
                + "\n".join(f"- {doc['title']} - {doc['url']}" for doc in items)
                for name, items in groups.items()
            )
        elif group_by == GROUP_BY_CATEGORY:
            groups = defaultdict(list)
            for doc in docs:
                groups[doc["category"]].append(doc)
            body = "\n\n".join(
                f"{name} ({len(items)} URLs)\n"
                + "\n".join(f"- {doc['title']} - {doc['libraryName']} - {doc['url']}" for doc in items)
                for name, items in groups.items()
            )
        else:
            body = "\n\n".join(
                f"{offset + i}. {doc['title']}\n"
                f"{doc['url']}\n"
                f"{doc['libraryName']} v{doc['version']}\n"
                f"{doc['category']}\n"
                f"{doc['addedAt']}"
                for i, doc in enumerate(docs, 1)
            )

        header = [
            "Indexed documentation",
            f"Total in collection: {total_count} documents",
            f"Shown: {len(docs)} (from {offset + 1})",
            f"Grouping: {group_by}",
        ]
        if library_name:
            header.append(f"Library: {library_name}")
        return "\n".join(header) + "\n\n" + body
