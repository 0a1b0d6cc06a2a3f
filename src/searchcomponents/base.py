"""Base class for backend documents services.

A documents service takes a raw search response from a backend transport
client, normalizes every hit into a canonical ``Document``, attaches the
owning domain and wraps the page in a ``Documents`` result set. Subclasses
describe where a backend keeps its hits and result-set metadata.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, ClassVar, Iterable, Mapping, Optional, Sequence

from searchcomponents.documents import Document, Documents
from searchcomponents.fields import FieldTypeRegistry, RegistryHolder
from searchcomponents.namespaces import DomainResolver, Namespace
from searchcomponents.normalizer import ResultNormalizer, as_strings, first_string
from searchcomponents.utils.logging import LoggerFactory


__all__ = ["BaseDocumentsService"]


logger_factory = LoggerFactory(logger_name=__name__, log_level=logging.INFO)
logger = logger_factory.get_logger()


class BaseDocumentsService(ABC):
    """Turns raw backend responses into canonical result sets.

    Attributes:
        registry_holder: Published field registry; one snapshot is taken per
            response.
        caller_domain: Domain of the authenticated caller, used when a
            result's domain cannot be inferred.
        resolver: Domain resolver.
        normalizer: Record normalizer for this backend's layout.
    """

    BACKEND_NAME: ClassVar[str] = ""

    hits_key: ClassVar[str]
    total_results_key: ClassVar[str]
    expanded_query_key: ClassVar[str]
    suggestion_key: ClassVar[str]
    auto_correction_key: ClassVar[str]
    warnings_key: ClassVar[str]

    def __init__(
        self,
        registry_holder: RegistryHolder,
        caller_domain: str,
        resolver: Optional[DomainResolver] = None,
        normalizer: Optional[ResultNormalizer] = None,
    ) -> None:
        self.registry_holder = registry_holder
        self.caller_domain = caller_domain
        self.resolver = resolver or DomainResolver()
        self.normalizer = normalizer or self.default_normalizer()

    @abstractmethod
    def default_normalizer(self) -> ResultNormalizer:
        """Return the normalizer for this backend's record layout."""

    def query_text_index(
        self,
        results: Mapping[str, Any],
        queried_namespaces: Sequence[Namespace],
    ) -> Documents:
        """Normalize a query response.

        Args:
            results: Raw response returned by the transport client.
            queried_namespaces: Namespaces the query was issued against.

        Returns:
            Documents with domains attached.
        """
        return self._to_documents(results, queried_namespaces, with_suggestion=False)

    def find_similar(
        self,
        results: Mapping[str, Any],
        queried_namespaces: Sequence[Namespace],
    ) -> Documents:
        """Normalize a find-similar response, keeping the backend's suggestion."""
        return self._to_documents(results, queried_namespaces, with_suggestion=True)

    def get_document_content(
        self, results: Mapping[str, Any], namespace: Namespace
    ) -> list[Document]:
        """Normalize a get-content response for documents of one namespace."""
        self._check_for_warnings(results)
        return self.add_domains(self._hits(results), [namespace])

    def add_domains(
        self,
        records: Iterable[Any],
        queried_namespaces: Sequence[Namespace],
    ) -> list[Document]:
        """Normalize records and attach the resolved domain to each."""
        registry: FieldTypeRegistry = self.registry_holder.current
        documents = []
        for record in records:
            document = self.normalizer.normalize(record, registry)
            domain = self.resolver.resolve(
                document.index, queried_namespaces, self.caller_domain
            )
            documents.append(document.with_domain(domain))
        return documents

    def _to_documents(
        self,
        results: Mapping[str, Any],
        queried_namespaces: Sequence[Namespace],
        with_suggestion: bool,
    ) -> Documents:
        warnings = self._check_for_warnings(results)
        documents = self.add_domains(self._hits(results), queried_namespaces)

        logger.info(
            f"Normalized {len(documents)} {self.BACKEND_NAME} documents "
            f"from {len(queried_namespaces)} namespaces."
        )

        return Documents(
            documents=documents,
            total_results=self._total_results(results),
            expanded_query=first_string(results.get(self.expanded_query_key)),
            suggestion=(
                first_string(results.get(self.suggestion_key))
                if with_suggestion
                else None
            ),
            auto_correction=first_string(results.get(self.auto_correction_key)),
            warnings=warnings,
        )

    def _hits(self, results: Mapping[str, Any]) -> list[Any]:
        hits = results.get(self.hits_key)
        if hits is None:
            return []
        if isinstance(hits, Mapping):
            return [hits]
        return list(hits)

    def _total_results(self, results: Mapping[str, Any]) -> int:
        value = first_string(results.get(self.total_results_key))
        if value is None:
            return 0
        try:
            return int(value)
        except ValueError:
            logger.debug(f"Ignoring non-numeric total results {value!r}")
            return 0

    def _check_for_warnings(self, results: Mapping[str, Any]) -> list[str]:
        node = results.get(self.warnings_key)
        if node is not None and not isinstance(node, (list, tuple)):
            node = [node]

        warnings = []
        for warning in node or []:
            if isinstance(warning, Mapping):
                warnings.extend(as_strings(warning.get("message")) or [str(dict(warning))])
            else:
                warnings.extend(as_strings(warning))

        for warning in warnings:
            logger.warning(f"{self.BACKEND_NAME} returned a warning: {warning}")
        return warnings
