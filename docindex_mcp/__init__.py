"""docindex MCP Server - documentation indexing and search tools for AI assistants."""

__version__ = "0.1.0"
