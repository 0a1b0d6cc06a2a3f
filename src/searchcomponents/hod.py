"""Hosted (HOD) backend documents service.

The hosted backend returns each result as a flat JSON object: core attributes
(``reference``, ``index``, ``title``, ``summary``, ``weight``, ``promotion``)
sit beside arrays of strings keyed by the configured field names. It reports
the index of each result but not the owning domain, which is resolved here.

Response Shape:
    {
        "documents": [{"reference": "...", "index": "wiki_eng", ...}],
        "totalhits": 42,
        "expanded_query": "...",
        "suggestion": "...",
        "auto_correction": "...",
        "warnings": [{"message": "..."}]
    }

Usage:
    >>> from searchcomponents.hod import HodDocumentsService
    >>> service = HodDocumentsService(registry_holder, caller_domain="acme")
    >>> documents = service.query_text_index(response, [Namespace("docs", "acme")])
"""

from searchcomponents.base import BaseDocumentsService
from searchcomponents.normalizer import ResultNormalizer


__all__ = ["HodDocumentsService"]


class HodDocumentsService(BaseDocumentsService):
    """Documents service for the hosted backend's flat record layout."""

    BACKEND_NAME = "HOD"

    hits_key = "documents"
    total_results_key = "totalhits"
    expanded_query_key = "expanded_query"
    suggestion_key = "suggestion"
    auto_correction_key = "auto_correction"
    warnings_key = "warnings"

    def default_normalizer(self) -> ResultNormalizer:
        return ResultNormalizer()
