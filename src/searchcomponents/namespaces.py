"""Namespace (index) ownership and domain resolution.

The hosted backend reports which index a result came from but not the domain
that owns the index. The domain is inferred from the namespaces the caller
queried, from the list of well-known public indexes, and finally from the
caller's own domain.

Resolution Order (first match wins):
    1. The first queried namespace whose name equals the reported index
    2. A well-known public index name -> ``PUBLIC_INDEXES_DOMAIN``
    3. The caller's domain

Index names are not guaranteed unique across domains. When the queried set
holds the same name under several domains the first one in iteration order
is used; the ambiguity is logged at debug level.

Usage:
    >>> from searchcomponents.namespaces import DomainResolver, Namespace
    >>> resolver = DomainResolver()
    >>> resolver.resolve("wiki_eng", [Namespace("wiki_eng", "public")], "acme")
    'public'
"""

import logging
from dataclasses import dataclass
from typing import AbstractSet, Iterable, Optional, Sequence

from searchcomponents.utils.logging import LoggerFactory


logger_factory = LoggerFactory(logger_name=__name__, log_level=logging.INFO)
logger = logger_factory.get_logger()


PUBLIC_INDEXES_DOMAIN = "PUBLIC_INDEXES"

PUBLIC_INDEX_NAMES: frozenset[str] = frozenset(
    {
        "wiki_chi",
        "wiki_eng",
        "wiki_fra",
        "wiki_ger",
        "wiki_ita",
        "wiki_spa",
        "world_factbook",
        "news_eng",
        "news_fra",
        "news_ger",
        "news_ita",
        "arxiv",
        "patents",
    }
)


@dataclass(frozen=True)
class Namespace:
    """A backend index together with the domain that owns it."""

    name: str
    domain: str

    @classmethod
    def parse(cls, identifier: str, default_domain: str = "") -> "Namespace":
        """Parse a ``domain:name`` identifier; a bare name gets the default domain."""
        domain, separator, name = identifier.partition(":")
        if not separator:
            return cls(name=identifier, domain=default_domain)
        return cls(name=name, domain=domain)

    def __str__(self) -> str:
        return f"{self.domain}:{self.name}" if self.domain else self.name


@dataclass(frozen=True)
class Database:
    """A database as listed by the on-premise backend's status action."""

    name: str
    internal: bool = False
    documents: int = 0


def public_databases(databases: Iterable[Database]) -> list[Database]:
    """Drop internal databases, keeping the backend's order."""
    return [database for database in databases if not database.internal]


def resolve_domain(
    reported_index: str,
    queried_namespaces: Sequence[Namespace],
    public_index_names: AbstractSet[str],
    caller_domain: str,
    public_domain: str = PUBLIC_INDEXES_DOMAIN,
) -> str:
    """Resolve the owning domain of a result's index.

    Args:
        reported_index: Index name reported by the backend for the result.
        queried_namespaces: Namespaces the request was issued against.
        public_index_names: Names of well-known public indexes.
        caller_domain: The authenticated caller's own domain.
        public_domain: Domain assigned to public indexes.

    Returns:
        The resolved domain.
    """
    resolved: Optional[str] = None
    for namespace in queried_namespaces:
        if namespace.name != reported_index:
            continue
        if resolved is None:
            resolved = namespace.domain
        elif namespace.domain != resolved:
            logger.debug(
                f"Index {reported_index!r} is queried under several domains; "
                f"keeping {resolved!r}, ignoring {namespace.domain!r}"
            )

    if resolved is not None:
        return resolved
    if reported_index in public_index_names:
        return public_domain
    return caller_domain


class DomainResolver:
    """Domain resolution bound to a fixed set of public index names.

    Instances are immutable and safe to share between requests.
    """

    def __init__(
        self,
        public_index_names: Iterable[str] = PUBLIC_INDEX_NAMES,
        public_domain: str = PUBLIC_INDEXES_DOMAIN,
    ) -> None:
        self._public_index_names = frozenset(public_index_names)
        self._public_domain = public_domain

    @property
    def public_index_names(self) -> frozenset[str]:
        return self._public_index_names

    @property
    def public_domain(self) -> str:
        return self._public_domain

    def resolve(
        self,
        reported_index: str,
        queried_namespaces: Sequence[Namespace],
        caller_domain: str,
    ) -> str:
        """Resolve the owning domain of ``reported_index``; see ``resolve_domain``."""
        return resolve_domain(
            reported_index,
            queried_namespaces,
            self._public_index_names,
            caller_domain,
            self._public_domain,
        )
