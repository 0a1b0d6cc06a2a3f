"""Tests for namespace ownership and domain resolution.

Tested functions:
    resolve_domain / DomainResolver: queried set, public set, caller domain.
    Namespace.parse: ``domain:name`` identifiers.
    public_databases: filtering of internal databases.
"""

from searchcomponents.namespaces import (
    PUBLIC_INDEX_NAMES,
    PUBLIC_INDEXES_DOMAIN,
    Database,
    DomainResolver,
    Namespace,
    public_databases,
    resolve_domain,
)


class TestResolveDomain:
    """Test suite for domain resolution order."""

    def test_queried_namespace_wins(self) -> None:
        """Test that a queried namespace's domain is used."""
        resolver = DomainResolver()
        queried = [Namespace(name="wiki_eng", domain="public")]
        assert resolver.resolve("wiki_eng", queried, "acme") == "public"

    def test_public_index_fallback(self) -> None:
        """Test that a well-known public index resolves to the public domain."""
        resolver = DomainResolver()
        queried = [Namespace(name="docs", domain="acme")]
        assert resolver.resolve("news_eng", queried, "acme") == PUBLIC_INDEXES_DOMAIN

    def test_caller_domain_fallback(self) -> None:
        """Test that an unknown index resolves to the caller's domain."""
        resolver = DomainResolver()
        queried = [Namespace(name="docs", domain="tenant_a")]
        assert resolver.resolve("other", queried, "acme") == "acme"

    def test_empty_queried_set(self) -> None:
        """Test resolution when nothing was queried explicitly."""
        assert DomainResolver().resolve("private", [], "acme") == "acme"

    def test_duplicate_names_first_match_wins(self) -> None:
        """Test that duplicate names across domains resolve to the first one.

        The backend does not say which domain answered; first match is a
        known ambiguity, not a correct answer.
        """
        queried = [
            Namespace(name="shared", domain="tenant_a"),
            Namespace(name="shared", domain="tenant_b"),
        ]
        assert DomainResolver().resolve("shared", queried, "acme") == "tenant_a"
        assert (
            DomainResolver().resolve("shared", list(reversed(queried)), "acme")
            == "tenant_b"
        )

    def test_queried_namespace_beats_public_list(self) -> None:
        """Test that a queried namespace takes precedence over public names."""
        queried = [Namespace(name="wiki_eng", domain="mirror")]
        assert DomainResolver().resolve("wiki_eng", queried, "acme") == "mirror"

    def test_custom_public_names_and_domain(self) -> None:
        """Test a resolver with configured public names."""
        resolver = DomainResolver(public_index_names=["open_data"], public_domain="OPEN")
        assert resolver.resolve("open_data", [], "acme") == "OPEN"
        assert resolver.resolve("wiki_eng", [], "acme") == "acme"

    def test_function_form(self) -> None:
        """Test the plain function with an explicit public set."""
        assert resolve_domain("arxiv", [], PUBLIC_INDEX_NAMES, "acme") == PUBLIC_INDEXES_DOMAIN


class TestNamespace:
    """Test suite for Namespace."""

    def test_parse_qualified(self) -> None:
        """Test parsing a domain-qualified identifier."""
        assert Namespace.parse("acme:docs") == Namespace(name="docs", domain="acme")

    def test_parse_bare_name_uses_default(self) -> None:
        """Test that a bare name gets the default domain."""
        assert Namespace.parse("docs", "acme") == Namespace(name="docs", domain="acme")

    def test_str(self) -> None:
        """Test the identifier form."""
        assert str(Namespace(name="docs", domain="acme")) == "acme:docs"
        assert str(Namespace(name="docs", domain="")) == "docs"


class TestPublicDatabases:
    """Test suite for public_databases."""

    def test_internal_databases_are_dropped(self) -> None:
        """Test that internal databases are removed and order is kept."""
        databases = [
            Database(name="News", documents=10),
            Database(name="Internal", internal=True),
            Database(name="Archive", documents=3),
        ]
        assert [db.name for db in public_databases(databases)] == ["News", "Archive"]
