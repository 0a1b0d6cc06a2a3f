"""Tests for the canonical document converter."""

from datetime import datetime, timezone

import pytest
from haystack import Document as HaystackDocument
from langchain_core.documents import Document as LangchainDocument

from searchcomponents.documents import Document, PromotionCategory
from searchcomponents.fields import FieldType, FieldValue
from searchcomponents.utils.document_converter import DocumentConverter


@pytest.fixture
def documents() -> list[Document]:
    """Create one populated and one minimal canonical document."""
    return [
        Document(
            reference="doc-1",
            index="wiki_eng",
            domain="PUBLIC_INDEXES",
            title="Python",
            summary="A programming language",
            authors=("Guido",),
            date=datetime(2021, 1, 1, tzinfo=timezone.utc),
            weight=87.5,
            promotion_category=PromotionCategory.NONE,
            extra_fields={
                "price": FieldValue(
                    field_id="price", name="price", type=FieldType.NUMBER, values=(9.99,)
                )
            },
        ),
        Document(reference="doc-2", index="docs", domain="acme", title="Only title"),
    ]


class TestDocumentConverter:
    """Test cases for DocumentConverter class."""

    def test_content_falls_back_to_title(self, documents: list[Document]) -> None:
        """Test that the summary is preferred and the title used otherwise."""
        assert DocumentConverter.content_of(documents[0]) == "A programming language"
        assert DocumentConverter.content_of(documents[1]) == "Only title"
        assert DocumentConverter.content_of(Document(reference="r", index="i")) == ""

    def test_metadata_flattens_fields(self, documents: list[Document]) -> None:
        """Test that unset attributes are omitted and fields are flattened."""
        metadata = DocumentConverter.metadata_of(documents[0])

        assert metadata["reference"] == "doc-1"
        assert metadata["domain"] == "PUBLIC_INDEXES"
        assert metadata["authors"] == ["Guido"]
        assert metadata["date"] == "2021-01-01T00:00:00+00:00"
        assert metadata["promotion_category"] == "NONE"
        assert metadata["field_price"] == [9.99]
        assert "summary" not in metadata
        assert "fields" not in metadata
        assert "url" not in metadata
        assert "categories" not in metadata

    def test_to_haystack_documents(self, documents: list[Document]) -> None:
        """Test conversion into Haystack documents."""
        result = DocumentConverter.to_haystack_documents(documents)

        assert all(isinstance(doc, HaystackDocument) for doc in result)
        assert [doc.id for doc in result] == ["doc-1", "doc-2"]
        assert result[0].content == "A programming language"
        assert result[0].score == 87.5
        assert result[1].score is None
        assert result[0].meta["index"] == "wiki_eng"

    def test_to_langchain_documents(self, documents: list[Document]) -> None:
        """Test conversion into LangChain documents."""
        result = DocumentConverter.to_langchain_documents(documents)

        assert all(isinstance(doc, LangchainDocument) for doc in result)
        assert result[0].page_content == "A programming language"
        assert result[0].metadata["id"] == "doc-1"
        assert result[0].metadata["weight"] == 87.5
        assert result[1].metadata["domain"] == "acme"

    def test_empty_list(self) -> None:
        """Test that no documents convert to no documents."""
        assert DocumentConverter.to_haystack_documents([]) == []
        assert DocumentConverter.to_langchain_documents([]) == []
