"""Tests for logging utilities."""

from docindex_common.logging_utils import log_summary, mask_value, safe_log_event


class TestMaskValue:
    """Tests for mask_value function."""

    def test_masks_short_sensitive_string(self):
        assert mask_value("password", "secret123") == "***"

    def test_long_sensitive_string_keeps_prefix(self):
        value = "a" * 50
        assert mask_value("raw_text", value) == "aaaaaaaaaa...(50 chars)"

    def test_substring_match(self):
        assert mask_value("access_token", "abc") == "***"
        assert mask_value("AWS_PROFILE", "prod-admin") == "***"

    def test_masks_containers_under_sensitive_key(self):
        assert mask_value("credentials", {"a": 1}) == "[dict: masked]"
        assert mask_value("content", ["x"]) == "[list: masked]"

    def test_recurses_into_dicts(self):
        value = mask_value("metadata", {"libraryName": "react", "apiKey": "k"})
        assert value == {"libraryName": "react", "apiKey": "***"}

    def test_leaves_safe_values(self):
        assert mask_value("library_name", "react") == "react"
        assert mask_value("limit", 5) == 5


class TestSafeLogEvent:
    """Tests for safe_log_event function."""

    def test_masks_tool_parameters(self):
        event = {"query": "hooks", "profile": "default", "raw_text": "x" * 30}
        safe = safe_log_event(event)

        assert safe["query"] == "hooks"
        assert safe["profile"] == "***"
        assert safe["raw_text"].endswith("(30 chars)")
        assert event["profile"] == "default"

    def test_non_dict_input(self):
        assert safe_log_event("plain string") == {"_raw": "plain string"}

    def test_custom_sensitive_keys(self):
        safe = safe_log_event({"url": "https://x", "query": "q"}, frozenset({"url"}))
        assert safe == {"url": "***", "query": "q"}


class TestLogSummary:
    """Tests for log_summary function."""

    def test_basic_summary(self):
        assert log_summary("bulk_add_urls") == {"operation": "bulk_add_urls", "success": True}

    def test_optional_fields(self):
        summary = log_summary(
            "bulk_add_urls",
            success=False,
            duration_ms=12.3456,
            item_count=3,
            error="e" * 600,
            library_name="react",
            urls=["a", "b"],
            ignored={"nested": True},
        )

        assert summary["success"] is False
        assert summary["duration_ms"] == 12.35
        assert summary["item_count"] == 3
        assert len(summary["error"]) == 500
        assert summary["library_name"] == "react"
        assert summary["urls"] == 2
        assert "ignored" not in summary
