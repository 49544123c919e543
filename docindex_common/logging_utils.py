"""
Redaction helpers for tool parameters written to the server log.

Tool calls carry AWS profile names, free-text documents and scraped page
bodies. Everything passed to the logger goes through ``safe_log_event``
or ``log_summary`` first.
"""

import logging
from typing import Any

logger = logging.getLogger(__name__)

MASK = "***"
PREVIEW_CHARS = 10
PREVIEW_THRESHOLD = 20
MAX_ERROR_CHARS = 500

# Matched as substrings of the lower-cased key ("AWS_PROFILE" hits "profile").
DEFAULT_SENSITIVE_KEYS = frozenset(
    {
        "rawtext",
        "raw_text",
        "content",
        "token",
        "password",
        "secret",
        "authorization",
        "credential",
        "apikey",
        "api_key",
        "profile",
    }
)


def _is_sensitive(key: str, sensitive_keys: frozenset[str]) -> bool:
    lowered = key.lower()
    return any(fragment in lowered for fragment in sensitive_keys)


def _redact(value: Any) -> str:
    if isinstance(value, str) and len(value) > PREVIEW_THRESHOLD:
        return f"{value[:PREVIEW_CHARS]}...({len(value)} chars)"
    if isinstance(value, (dict, list)):
        return f"[{type(value).__name__}: masked]"
    return MASK


def mask_value(key: str, value: Any, sensitive_keys: frozenset[str] | None = None) -> Any:
    """Redact ``value`` when ``key`` looks sensitive, walking nested dicts and lists."""
    keys = DEFAULT_SENSITIVE_KEYS if sensitive_keys is None else sensitive_keys

    if _is_sensitive(key, keys):
        return _redact(value)
    if isinstance(value, dict):
        return {child: mask_value(child, nested, keys) for child, nested in value.items()}
    if isinstance(value, list):
        # list items inherit the key of their container
        return [mask_value(key, element, keys) for element in value]
    return value


def safe_log_event(
    event: dict[str, Any],
    sensitive_keys: frozenset[str] | None = None,
) -> dict[str, Any]:
    """
    Masked copy of a tool's parameters, safe to interpolate into a log line.

    Non-dict input is stringified and cut to 100 characters under ``_raw``.
    The original mapping is never modified.
    """
    if not isinstance(event, dict):
        return {"_raw": str(event)[:100]}

    try:
        return {name: mask_value(name, value, sensitive_keys) for name, value in event.items()}
    except RecursionError as e:
        logger.warning(f"Could not mask tool parameters: {e}")
        return {"_error": "parameters too deeply nested to log", "_keys": list(event)[:10]}


def log_summary(
    operation: str,
    *,
    success: bool = True,
    duration_ms: float | None = None,
    item_count: int | None = None,
    error: str | None = None,
    **fields: Any,
) -> dict[str, Any]:
    """
    Build a flat dict describing the outcome of one tool operation.

    Extra keyword fields are kept when they are scalars; lists and tuples are
    reduced to their length and anything else is dropped.

        logger.info(log_summary("bulk_add_urls", duration_ms=1520.4, item_count=42, library_name="react"))
    """
    summary: dict[str, Any] = {"operation": operation, "success": success}

    if duration_ms is not None:
        summary["duration_ms"] = round(duration_ms, 2)
    if item_count is not None:
        summary["item_count"] = item_count
    if error:
        summary["error"] = error[:MAX_ERROR_CHARS]

    for name, value in fields.items():
        if isinstance(value, (list, tuple)):
            summary[name] = len(value)
        elif isinstance(value, (str, int, float, bool)):
            summary[name] = value

    return summary
