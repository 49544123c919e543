"""Common Library

Shared scraping, indexing and store utilities for the docindex MCP server.
"""

from docindex_common import constants
from docindex_common.config import ServerSettings
from docindex_common.logging_utils import log_summary, safe_log_event

__all__ = [
    "ServerSettings",
    "constants",
    "log_summary",
    "safe_log_event",
]
