"""Unit tests for filter clause construction."""

import pytest

from docindex_common.query_helpers import (
    AndClause,
    SingleCondition,
    build_keyword_filter,
    build_legacy_filter,
    build_url_document_filter,
    build_where_clause,
    combine_conditions,
    format_keywords,
    generate_searchable_text,
    parse_keywords,
)


class TestCombineConditions:
    def test_single_condition_is_not_wrapped(self):
        condition = SingleCondition("docType", "url-document")
        assert combine_conditions([condition]) is condition

    def test_multiple_conditions_become_and(self):
        clause = combine_conditions(
            [SingleCondition("docType", "url-document"), SingleCondition("version", "18")]
        )
        assert isinstance(clause, AndClause)
        assert clause.to_where() == {"$and": [{"docType": "url-document"}, {"version": "18"}]}

    def test_empty_list_raises(self):
        with pytest.raises(ValueError):
            combine_conditions([])


class TestBuildWhereClause:
    def test_doc_type_only(self):
        assert build_where_clause("url-document").to_where() == {"docType": "url-document"}

    def test_doc_type_leads(self):
        clause = build_where_clause("url-document", {"libraryName": "react"})
        assert clause.to_where()["$and"][0] == {"docType": "url-document"}

    def test_skips_none_and_empty_values(self):
        clause = build_where_clause("url-document", {"libraryName": None, "category": ""})
        assert clause == SingleCondition("docType", "url-document")


class TestBuildUrlDocumentFilter:
    def test_no_arguments(self):
        assert build_url_document_filter().to_where() == {"docType": "url-document"}

    def test_library_is_lowercased(self):
        where = build_url_document_filter(library_name="React").to_where()
        assert where == {"$and": [{"docType": "url-document"}, {"libraryName": "react"}]}

    def test_all_fields_in_order(self):
        where = build_url_document_filter("MUI", "V5", "Components").to_where()
        assert where == {
            "$and": [
                {"docType": "url-document"},
                {"libraryName": "mui"},
                {"version": "v5"},
                {"category": "components"},
            ]
        }


class TestOtherFilters:
    def test_keyword_filter_is_doc_type_only(self):
        assert build_keyword_filter().to_where() == {"docType": "url-document"}

    def test_legacy_filter_targets_legacy_documents(self):
        where = build_legacy_filter(sourceType="manual", libraryName=None).to_where()
        assert where == {"$and": [{"docType": "legacy-document"}, {"sourceType": "manual"}]}

    def test_legacy_filter_without_conditions(self):
        assert build_legacy_filter().to_where() == {"docType": "legacy-document"}


class TestKeywords:
    def test_format_keywords(self):
        assert format_keywords(["react", "hooks", "state"]) == "react, hooks, state"

    def test_parse_keywords(self):
        assert parse_keywords("react, hooks ,state,") == ["react", "hooks", "state"]

    def test_parse_empty(self):
        assert parse_keywords("") == []
        assert parse_keywords(None) == []

    def test_generate_searchable_text(self):
        text = generate_searchable_text("React", "18", "Guides", ["Hooks", "state"], "Using Hooks")
        assert text == "react 18 guides hooks state using hooks"
