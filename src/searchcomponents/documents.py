"""Canonical document and result-set types.

Whichever backend answered the query, the presentation layer receives these
types. A ``Document`` is built once per raw backend record and never mutated;
the owning domain, which is only known after construction, is attached by
``Document.with_domain`` returning a new value.

Output Types:
    - PromotionCategory: How a promoted result was injected into the results
    - Document: One normalized search result
    - Documents: A page of documents plus result-set metadata

Usage:
    >>> from searchcomponents.documents import Document
    >>> doc = Document(reference="doc-1", index="wiki_eng", title="Python")
    >>> doc.with_domain("PUBLIC_INDEXES").domain
    'PUBLIC_INDEXES'
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Optional

from searchcomponents.fields import FieldValue


__all__ = ["Document", "Documents", "PromotionCategory"]


class PromotionCategory(Enum):
    """Category of a backend-curated result."""

    NONE = "NONE"
    SPOTLIGHT = "SPOTLIGHT"
    STATIC_CONTENT = "STATIC_CONTENT"
    CARDINAL_PLACEMENT = "CARDINAL_PLACEMENT"


def _isoformat(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


@dataclass(frozen=True)
class Document:
    """A single normalized search result.

    Attributes:
        reference: Document reference, unique within its index.
        index: Index (database) the backend reported for the result.
        domain: Owning domain; empty until resolved.
        title: Document title.
        summary: Summary text returned by the backend.
        content_type: First content type value.
        url: First URL value.
        offset: First offset value.
        authors: All author values, in backend order.
        categories: All category values, in backend order.
        date: The well-known document date.
        date_created: Creation date.
        date_modified: Last modification date.
        weight: Relevance weight.
        qms_id: Query manipulation id of a promoted result.
        promotion_name: Name of the promotion that injected the result.
        injected_promotion: Whether the result was injected by a promotion.
        promotion_category: Promotion category, None if unknown or absent.
        extra_fields: Configured fields keyed by canonical field id.
    """

    reference: str
    index: str
    domain: str = ""
    title: Optional[str] = None
    summary: Optional[str] = None
    content_type: Optional[str] = None
    url: Optional[str] = None
    offset: Optional[str] = None
    authors: tuple[str, ...] = ()
    categories: tuple[str, ...] = ()
    date: Optional[datetime] = None
    date_created: Optional[datetime] = None
    date_modified: Optional[datetime] = None
    weight: Optional[float] = None
    qms_id: Optional[str] = None
    promotion_name: Optional[str] = None
    injected_promotion: Optional[bool] = None
    promotion_category: Optional[PromotionCategory] = None
    extra_fields: Mapping[str, FieldValue] = field(
        default_factory=lambda: MappingProxyType({})
    )

    def __post_init__(self) -> None:
        object.__setattr__(self, "authors", tuple(self.authors))
        object.__setattr__(self, "categories", tuple(self.categories))
        if not isinstance(self.extra_fields, MappingProxyType):
            object.__setattr__(
                self, "extra_fields", MappingProxyType(dict(self.extra_fields))
            )

    def __hash__(self) -> int:
        return hash((self.reference, self.index, self.domain))

    def with_domain(self, domain: str) -> "Document":
        """Return a copy of this document owned by ``domain``."""
        return dataclasses.replace(self, domain=domain)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary representation.

        Returns:
            Dictionary with dates in ISO-8601 form and enums by value.
        """
        return {
            "reference": self.reference,
            "index": self.index,
            "domain": self.domain,
            "title": self.title,
            "summary": self.summary,
            "content_type": self.content_type,
            "url": self.url,
            "offset": self.offset,
            "authors": list(self.authors),
            "categories": list(self.categories),
            "date": _isoformat(self.date),
            "date_created": _isoformat(self.date_created),
            "date_modified": _isoformat(self.date_modified),
            "weight": self.weight,
            "qms_id": self.qms_id,
            "promotion_name": self.promotion_name,
            "injected_promotion": self.injected_promotion,
            "promotion_category": (
                self.promotion_category.value if self.promotion_category else None
            ),
            "fields": {
                field_id: value.to_dict()
                for field_id, value in self.extra_fields.items()
            },
        }


@dataclass
class Documents:
    """A page of normalized documents with result-set metadata.

    Attributes:
        documents: Normalized documents in backend order.
        total_results: Total hits reported by the backend.
        expanded_query: Query after backend expansion, if reported.
        suggestion: Suggested alternative query, if reported.
        auto_correction: Spelling correction applied by the backend, if any.
        warnings: Warnings reported by the backend.
    """

    documents: list[Document] = field(default_factory=list)
    total_results: int = 0
    expanded_query: Optional[str] = None
    suggestion: Optional[str] = None
    auto_correction: Optional[str] = None
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "documents": [document.to_dict() for document in self.documents],
            "total_results": self.total_results,
            "expanded_query": self.expanded_query,
            "suggestion": self.suggestion,
            "auto_correction": self.auto_correction,
            "warnings": list(self.warnings),
        }
