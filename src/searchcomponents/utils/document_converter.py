"""Canonical document converter for Haystack and LangChain integration.

Normalized search results are often handed on to retrieval-augmented
generation pipelines. This module converts canonical ``Document`` values into
the document classes those frameworks consume.

Key Transformations:
    - Document.summary (falling back to title) -> content / page_content
    - Document.reference -> Haystack id / LangChain metadata['id']
    - Document.weight -> Haystack score
    - Core attributes and configured fields -> flat metadata dict with dates
      in ISO-8601 form and enums by value

Usage:
    >>> from searchcomponents.utils import DocumentConverter
    >>> haystack_docs = DocumentConverter.to_haystack_documents(documents)
    >>> langchain_docs = DocumentConverter.to_langchain_documents(documents)
"""

import logging
from typing import Any

from haystack import Document as HaystackDocument
from langchain_core.documents import Document as LangchainDocument

from searchcomponents.documents import Document
from searchcomponents.utils.logging import LoggerFactory


logger_factory = LoggerFactory(logger_name=__name__, log_level=logging.INFO)
logger = logger_factory.get_logger()

# Keys of Document.to_dict() that become content or ids rather than metadata
_NON_METADATA_KEYS = ("summary", "fields")


class DocumentConverter:
    """Converter from canonical documents to framework documents.

    The converter is stateless and all methods are static.
    """

    @staticmethod
    def content_of(document: Document) -> str:
        """Return the text used as framework document content."""
        return document.summary or document.title or ""

    @staticmethod
    def metadata_of(document: Document) -> dict[str, Any]:
        """Flatten a canonical document into framework metadata.

        Configured fields are stored under ``field_<id>`` keys holding their
        value lists. Unset attributes are omitted.
        """
        serialized = document.to_dict()
        metadata = {
            key: value
            for key, value in serialized.items()
            if key not in _NON_METADATA_KEYS and value not in (None, [])
        }
        for field_id, field_value in serialized["fields"].items():
            metadata[f"field_{field_id}"] = field_value["values"]
        return metadata

    @staticmethod
    def to_haystack_documents(documents: list[Document]) -> list[HaystackDocument]:
        """Convert canonical documents into Haystack Documents.

        Args:
            documents: Normalized documents.

        Returns:
            Haystack Documents with id = reference and score = weight.
        """
        haystack_docs = [
            HaystackDocument(
                id=document.reference,
                content=DocumentConverter.content_of(document),
                meta=DocumentConverter.metadata_of(document),
                score=document.weight,
            )
            for document in documents
        ]

        logger.info(f"Converted {len(haystack_docs)} documents into HaystackDocument objects.")
        return haystack_docs

    @staticmethod
    def to_langchain_documents(documents: list[Document]) -> list[LangchainDocument]:
        """Convert canonical documents into LangChain Documents.

        LangChain documents have no score or top-level id; the reference is
        placed in metadata['id'] and the weight stays in metadata['weight'].
        """
        langchain_docs = [
            LangchainDocument(
                page_content=DocumentConverter.content_of(document),
                metadata={"id": document.reference, **DocumentConverter.metadata_of(document)},
            )
            for document in documents
        ]

        logger.info(
            f"Converted {len(langchain_docs)} documents into LangChainDocument objects."
        )
        return langchain_docs
