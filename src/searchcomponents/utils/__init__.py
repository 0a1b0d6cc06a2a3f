"""Utility modules for searchcomponents.

Utilities Provided:
    - Document Converter: Canonical documents to Haystack/LangChain documents
    - Logging: Logger factory with environment-based configuration

Usage:
    >>> from searchcomponents.utils import DocumentConverter, LoggerFactory
"""

from searchcomponents.utils.document_converter import DocumentConverter
from searchcomponents.utils.logging import LoggerFactory


__all__ = [
    "DocumentConverter",
    "LoggerFactory",
]
