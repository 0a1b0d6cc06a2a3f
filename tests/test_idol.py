"""Tests for the IDOL normalizer and documents service."""

from datetime import datetime, timezone
from typing import Any

import pytest

from searchcomponents.documents import PromotionCategory
from searchcomponents.fields import FieldTypeRegistry, RegistryHolder
from searchcomponents.idol import IdolDocumentsService, IdolResultNormalizer
from searchcomponents.namespaces import Namespace


@pytest.fixture
def normalizer() -> IdolResultNormalizer:
    """Create an IDOL normalizer."""
    return IdolResultNormalizer()


class TestIdolResultNormalizer:
    """Test suite for IDOL hit normalization."""

    def test_core_attributes(
        self,
        normalizer: IdolResultNormalizer,
        idol_hit: dict[str, Any],
        registry: FieldTypeRegistry,
    ) -> None:
        """Test that autn: attributes and upper-case content fields are read."""
        document = normalizer.normalize(idol_hit, registry)

        assert document.reference == "http://news.example.com/1"
        assert document.index == "News"
        assert document.title == "Headline"
        assert document.summary == "Something happened"
        assert document.weight == 87.25
        assert document.promotion_name == "Breaking"
        assert document.promotion_category is None
        assert document.authors == ("Reporter",)
        assert document.categories == ("world", "politics")
        assert document.content_type == "text/plain"
        assert document.date == datetime(2021, 1, 1, tzinfo=timezone.utc)

    def test_configured_aliases_match_exactly(
        self,
        normalizer: IdolResultNormalizer,
        idol_hit: dict[str, Any],
        registry: FieldTypeRegistry,
    ) -> None:
        """Test that configured fields are looked up by their exact alias."""
        fields = normalizer.normalize(idol_hit, registry).extra_fields

        assert fields["author"].name == "DRECONTENT_AUTHOR"
        assert fields["author"].values == ("Desk Editor",)
        assert fields["category"].values == ("world", "politics")
        assert fields["price"].values == (3.0,)

    def test_promotion_code(
        self, normalizer: IdolResultNormalizer, idol_hit: dict[str, Any], registry: FieldTypeRegistry
    ) -> None:
        """Test that the shared promotion table applies to IDOL hits."""
        idol_hit["autn:promotion"] = "DYNAMIC_PROMOTION"
        document = normalizer.normalize(idol_hit, registry)
        assert document.promotion_category is PromotionCategory.SPOTLIGHT

    @pytest.mark.parametrize(
        "content",
        [None, {}, {"DOCUMENT": []}, {"DOCUMENT": "text"}],
    )
    def test_missing_content(
        self,
        normalizer: IdolResultNormalizer,
        registry: FieldTypeRegistry,
        content: Any,
    ) -> None:
        """Test that a hit without document content keeps its core attributes."""
        hit = {"autn:reference": "r", "autn:database": "News", "autn:content": content}

        document = normalizer.normalize(hit, registry)

        assert document.reference == "r"
        assert document.authors == ()
        assert dict(document.extra_fields) == {}

    def test_lower_case_name_preferred(
        self, normalizer: IdolResultNormalizer, registry: FieldTypeRegistry
    ) -> None:
        """Test that the canonical lower-case name is tried before upper case."""
        hit = {
            "autn:reference": "r",
            "autn:database": "News",
            "autn:content": {"DOCUMENT": [{"url": ["lower"], "URL": ["upper"]}]},
        }
        assert normalizer.normalize(hit, registry).url == "lower"


class TestIdolDocumentsService:
    """Test suite for IDOL response normalization."""

    def test_query_text_index(
        self, registry_holder: RegistryHolder, idol_hit: dict[str, Any]
    ) -> None:
        """Test a full IDOL response."""
        service = IdolDocumentsService(registry_holder, caller_domain="acme")
        response = {
            "autn:hit": [idol_hit],
            "autn:totalhits": "12",
            "autn:expandedQuery": "headline*",
            "autn:spelling": "headline",
            "autn:warning": ["Database Archive unavailable"],
        }

        documents = service.query_text_index(
            response, [Namespace(name="News", domain="media")]
        )

        assert documents.total_results == 12
        assert documents.expanded_query == "headline*"
        assert documents.auto_correction == "headline"
        assert documents.warnings == ["Database Archive unavailable"]
        assert documents.documents[0].domain == "media"

    def test_single_warning_string(
        self, registry_holder: RegistryHolder, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Test that a lone warning string is one warning, not one per character."""
        service = IdolDocumentsService(registry_holder, caller_domain="acme")

        documents = service.query_text_index({"autn:hit": [], "autn:warning": "Index busy"}, [])

        assert documents.warnings == ["Index busy"]
        assert caplog.text.count("returned a warning") == 1

    def test_single_warning_object(self, registry_holder: RegistryHolder) -> None:
        """Test that a lone warning object is read by its message."""
        service = IdolDocumentsService(registry_holder, caller_domain="acme")

        documents = service.query_text_index(
            {"autn:hit": [], "autn:warning": {"message": "Index busy"}}, []
        )

        assert documents.warnings == ["Index busy"]

    def test_single_hit_object(
        self, registry_holder: RegistryHolder, idol_hit: dict[str, Any]
    ) -> None:
        """Test that a lone hit not wrapped in a list is accepted."""
        service = IdolDocumentsService(registry_holder, caller_domain="acme")

        documents = service.find_similar({"autn:hit": idol_hit}, [])

        assert len(documents.documents) == 1
        assert documents.documents[0].domain == "acme"

    def test_default_normalizer(self, registry_holder: RegistryHolder) -> None:
        """Test that the IDOL service reads the IDOL layout."""
        service = IdolDocumentsService(registry_holder, caller_domain="acme")
        assert isinstance(service.normalizer, IdolResultNormalizer)
