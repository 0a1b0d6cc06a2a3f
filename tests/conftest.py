"""Shared fixtures for searchcomponents tests.

Fixtures:
    registry: Field registry covering every field type.
    registry_holder: RegistryHolder publishing ``registry``.
    hod_record: A fully populated hosted-backend record.
    idol_hit: A fully populated IDOL hit.
"""

from typing import Any

import pytest

from searchcomponents.fields import (
    CanonicalField,
    FieldType,
    FieldTypeRegistry,
    RegistryHolder,
)


@pytest.fixture
def registry() -> FieldTypeRegistry:
    """Create a registry with string, number, date and boolean fields."""
    return FieldTypeRegistry(
        [
            CanonicalField(
                id="author",
                display_name="Author",
                type=FieldType.STRING,
                aliases=("author", "DRECONTENT_AUTHOR"),
                parametric=True,
            ),
            CanonicalField(
                id="price",
                display_name="Price",
                type=FieldType.NUMBER,
                aliases=("price", "PRICE"),
            ),
            CanonicalField(
                id="published",
                display_name="Published",
                type=FieldType.DATE,
                aliases=("published",),
                advanced=True,
            ),
            CanonicalField(
                id="archived",
                display_name="Archived",
                type=FieldType.BOOLEAN,
                aliases=("archived",),
            ),
            CanonicalField(
                id="category",
                display_name="Category",
                type=FieldType.STRING,
                aliases=("category", "CATEGORY"),
                parametric=True,
            ),
        ]
    )


@pytest.fixture
def registry_holder(registry: FieldTypeRegistry) -> RegistryHolder:
    """Publish the test registry."""
    return RegistryHolder(registry)


@pytest.fixture
def hod_record() -> dict[str, Any]:
    """Create a hosted-backend record with every well-known field."""
    return {
        "reference": "doc-1",
        "index": "wiki_eng",
        "title": "Python",
        "summary": "A programming language",
        "weight": 87.5,
        "promotion": "STATIC_CONTENT_PROMOTION",
        "date": ["2021-01-01T00:00:00Z"],
        "date_created": ["1609459200"],
        "date_modified": ["2021-06-01T12:00:00+02:00"],
        "content_type": ["text/html", "text/plain"],
        "url": ["http://example.com/python"],
        "offset": ["0"],
        "author": ["Guido", "Tim"],
        "category": ["language"],
        "qmsid": ["42"],
        "injectedpromotion": ["true"],
        "price": ["9.99"],
        "published": ["2020-05-01T00:00:00Z"],
        "archived": ["TRUE"],
    }


@pytest.fixture
def idol_hit() -> dict[str, Any]:
    """Create an IDOL hit with nested document content."""
    return {
        "autn:reference": "http://news.example.com/1",
        "autn:database": "News",
        "autn:title": "Headline",
        "autn:summary": "Something happened",
        "autn:weight": "87.25",
        "autn:promotionname": "Breaking",
        "autn:content": {
            "DOCUMENT": [
                {
                    "AUTHOR": ["Reporter"],
                    "DRECONTENT_AUTHOR": ["Desk Editor"],
                    "DATE": ["1609459200"],
                    "CATEGORY": ["world", "politics"],
                    "PRICE": ["3"],
                    "CONTENT_TYPE": ["text/plain"],
                }
            ]
        },
    }
