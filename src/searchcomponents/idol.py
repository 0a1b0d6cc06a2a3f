"""On-premise (IDOL) backend record normalizer and documents service.

IDOL hits carry their core attributes under ``autn:`` keys and nest the
document's fields under ``autn:content.DOCUMENT[0]``. Field names in the
content are conventionally upper case; the well-known fields are looked up
under both their canonical lower-case name and the upper-case form, while
configured aliases match exactly.

Hit Shape:
    {
        "autn:reference": "http://...",
        "autn:database": "News",
        "autn:title": "...",
        "autn:summary": "...",
        "autn:weight": "87.25",
        "autn:promotionname": "...",
        "autn:content": {"DOCUMENT": [{"AUTHOR": ["..."], "DATE": ["..."]}]}
    }

Response Shape:
    {
        "autn:hit": [...],
        "autn:totalhits": "42",
        "autn:expandedQuery": "...",
        "autn:spelling": "...",
        "autn:warning": ["..."]
    }
"""

import logging
from typing import Any, Mapping

from searchcomponents.base import BaseDocumentsService
from searchcomponents.normalizer import ResultNormalizer
from searchcomponents.utils.logging import LoggerFactory


__all__ = ["IdolDocumentsService", "IdolResultNormalizer"]


logger_factory = LoggerFactory(logger_name=__name__, log_level=logging.INFO)
logger = logger_factory.get_logger()


class IdolResultNormalizer(ResultNormalizer):
    """Normalizer for IDOL hits with nested document content."""

    reference_key = "autn:reference"
    index_key = "autn:database"
    title_key = "autn:title"
    summary_key = "autn:summary"
    weight_key = "autn:weight"
    promotion_key = "autn:promotion"
    promotion_name_key = "autn:promotionname"

    content_key = "autn:content"
    document_key = "DOCUMENT"

    def field_node(self, raw: Mapping[str, Any]) -> Mapping[str, Any]:
        content = raw.get(self.content_key)
        if not isinstance(content, Mapping):
            return {}

        document = content.get(self.document_key)
        if isinstance(document, (list, tuple)):
            document = document[0] if document else None
        if not isinstance(document, Mapping):
            logger.debug(f"Hit {raw.get(self.reference_key)!r} has no document content")
            return {}
        return document

    def fixed_value(self, node: Mapping[str, Any], name: str) -> Any:
        value = node.get(name)
        if value is None:
            value = node.get(name.upper())
        return value


class IdolDocumentsService(BaseDocumentsService):
    """Documents service for IDOL query responses."""

    BACKEND_NAME = "IDOL"

    hits_key = "autn:hit"
    total_results_key = "autn:totalhits"
    expanded_query_key = "autn:expandedQuery"
    suggestion_key = "autn:suggestion"
    auto_correction_key = "autn:spelling"
    warnings_key = "autn:warning"

    def default_normalizer(self) -> ResultNormalizer:
        return IdolResultNormalizer()
