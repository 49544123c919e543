"""
Filter clause construction for vector index queries.

A filter is either one field-equality condition or an AND of several.
Every filter starts from the docType discriminator so URL documents and
legacy free-text documents never share a search scope.
"""

from dataclasses import dataclass
from typing import Any

from docindex_common.constants import (
    DOC_TYPE_LEGACY_DOCUMENT,
    DOC_TYPE_URL_DOCUMENT,
    FIELD_CATEGORY,
    FIELD_DOC_TYPE,
    FIELD_LIBRARY_NAME,
    FIELD_VERSION,
    KEYWORD_SEPARATOR,
)


@dataclass(frozen=True)
class SingleCondition:
    """Equality condition on one metadata field."""

    field: str
    value: str | int | float | bool

    def to_where(self) -> dict[str, Any]:
        return {self.field: self.value}


@dataclass(frozen=True)
class AndClause:
    """Conjunction of two or more equality conditions."""

    conditions: tuple[SingleCondition, ...] = ()

    def to_where(self) -> dict[str, Any]:
        return {"$and": [condition.to_where() for condition in self.conditions]}


FilterClause = SingleCondition | AndClause


def combine_conditions(conditions: list[SingleCondition]) -> FilterClause:
    """
    Collapse a condition list into a filter clause.

    Raises:
        ValueError: If the list is empty
    """
    if not conditions:
        raise ValueError("At least one condition is required")
    if len(conditions) == 1:
        return conditions[0]
    return AndClause(tuple(conditions))


def build_where_clause(doc_type: str, conditions: dict[str, Any] | None = None) -> FilterClause:
    """
    Build a filter led by the docType condition.

    Args:
        doc_type: Value of the docType discriminator
        conditions: Extra field/value pairs; None or empty values are skipped

    Returns:
        SingleCondition when only docType applies, AndClause otherwise
    """
    clauses = [SingleCondition(FIELD_DOC_TYPE, doc_type)]
    for name, value in (conditions or {}).items():
        if value is None or value == "":
            continue
        clauses.append(SingleCondition(name, value))
    return combine_conditions(clauses)


def build_url_document_filter(
    library_name: str | None = None,
    version: str | None = None,
    category: str | None = None,
) -> FilterClause:
    """
    Filter over URL documents.

    Library, version and category are lower-cased to match how they are
    stored, making searches case-insensitive.
    """
    return build_where_clause(
        DOC_TYPE_URL_DOCUMENT,
        {
            FIELD_LIBRARY_NAME: library_name.lower() if library_name else None,
            FIELD_VERSION: version.lower() if version else None,
            FIELD_CATEGORY: category.lower() if category else None,
        },
    )


def build_keyword_filter() -> FilterClause:
    """Keyword search relies on the text query; only docType is structural."""
    return build_where_clause(DOC_TYPE_URL_DOCUMENT)


def build_legacy_filter(**conditions: Any) -> FilterClause:
    """Filter over legacy free-text documents."""
    return build_where_clause(DOC_TYPE_LEGACY_DOCUMENT, conditions)


def format_keywords(keywords: list[str]) -> str:
    """Keywords are stored as one scalar string in index metadata."""
    return KEYWORD_SEPARATOR.join(keywords)


def parse_keywords(value: str | None) -> list[str]:
    if not value:
        return []
    return [keyword.strip() for keyword in value.split(",") if keyword.strip()]


def generate_searchable_text(
    library_name: str,
    version: str,
    category: str,
    keywords: list[str],
    title: str,
) -> str:
    """Lower-cased concatenation used for naive text matching."""
    return f"{library_name} {version} {category} {' '.join(keywords)} {title}".lower()
