"""docindex MCP Server - documentation indexing, search and AWS parameter tools."""

import asyncio
import logging
import sys

from mcp.server.fastmcp import FastMCP

from docindex_common.chroma_gateway import ChromaGateway
from docindex_common.config import ChromaSettings, ServerSettings
from docindex_mcp.documentation_tools import DocumentationTools
from docindex_mcp.dynamo_tools import DynamoTools
from docindex_mcp.rag_tools import RagTools
from docindex_mcp.services import Services
from docindex_mcp.weather_tool import get_weather

logger = logging.getLogger(__name__)

SERVER_NAME = "docindex-mcp"


def create_server(
    settings: ServerSettings | None = None,
    services: Services | None = None,
    dynamo_tools: DynamoTools | None = None,
) -> FastMCP:
    """
    Build the MCP server and register every tool.

    Args:
        settings: Server settings (read from the environment if omitted)
        services: Pre-built services (built from settings if omitted)
        dynamo_tools: Pre-built DynamoDB tools

    Returns:
        FastMCP server ready to run
    """
    settings = settings or ServerSettings.from_env()
    services = services or Services.from_settings(settings)
    dynamo_tools = dynamo_tools or DynamoTools()

    mcp = FastMCP(
        SERVER_NAME,
        instructions="Index documentation sites, search indexed documentation and "
        "manage DynamoDB parameters",
    )

    docs = DocumentationTools(services)
    mcp.tool(
        name="bulk-add-urls",
        description="Extract URLs from a documentation site and bulk add them to the index",
    )(docs.bulk_add_urls)
    mcp.tool(
        name="get-urls-from-url",
        description="Extract all URLs from a web page",
    )(docs.get_urls_from_url)
    mcp.tool(
        name="search-documentation",
        description="Search documentation URLs by query, library, category or keywords",
    )(docs.search_documentation)
    mcp.tool(
        name="search-specific-documentation",
        description="Scrape specific documentation URLs and return clean text content",
    )(docs.search_specific_documentation)
    mcp.tool(
        name="list-documentation",
        description="List indexed documentation URLs grouped by library or category",
    )(docs.list_documentation)

    rag = RagTools(services)
    mcp.tool(
        name="create-rag-information",
        description="Add free-text information to the RAG index",
    )(rag.create_rag_information)
    mcp.tool(
        name="query-rag-information",
        description="Query the RAG index for relevant free-text information",
    )(rag.query_rag_information)
    mcp.tool(
        name="list-rag-information",
        description="List free-text information in the RAG index",
    )(rag.list_rag_information)

    mcp.tool(name="get-item-dynamo", description="Get an item from a DynamoDB table")(
        dynamo_tools.get_item_dynamo
    )
    mcp.tool(
        name="put-parameter-dynamo",
        description="Create or update a parameter in the parameter manager table",
    )(dynamo_tools.put_parameter_dynamo)
    mcp.tool(
        name="query-parameters-dynamo",
        description="Query a microservice's parameters by scope",
    )(dynamo_tools.query_parameters_dynamo)
    mcp.tool(name="scan-table-dynamo", description="Scan a DynamoDB table")(
        dynamo_tools.scan_table_dynamo
    )
    mcp.tool(name="list-tables-dynamo", description="List DynamoDB tables in an AWS account")(
        dynamo_tools.list_tables_dynamo
    )

    mcp.tool(name="get-weather", description="Current weather for any city (simulated data)")(
        get_weather
    )

    return mcp


async def ensure_collection(settings: ChromaSettings) -> bool:
    """
    Make sure the configured collection exists.

    Returns:
        True on success; failures are logged, never raised
    """
    try:
        gateway = ChromaGateway(settings)
        await gateway.get_or_create_collection(settings.collection_name)
    except Exception:
        logger.exception(
            f"Failed to initialize Chroma collection '{settings.collection_name}' "
            f"at {settings.host}:{settings.port}"
        )
        return False

    logger.info(f"Connected to Chroma and ensured collection '{settings.collection_name}' exists")
    return True


def main():
    """Run the MCP server over stdio."""
    settings = ServerSettings.from_env()
    # stdout carries the protocol
    logging.basicConfig(
        level=settings.log_level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    server = create_server(settings)
    asyncio.run(ensure_collection(settings.chroma))
    server.run()


if __name__ == "__main__":
    main()
