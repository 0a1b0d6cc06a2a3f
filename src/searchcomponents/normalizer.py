"""Normalization of raw backend records into canonical documents.

A raw record is a loosely-typed JSON-like mapping in which each field name
maps to zero or more string scalars. The normalizer reads a fixed set of core
attributes by fixed name and every configured field by alias lookup in the
``FieldTypeRegistry``, parsing each value according to the field's declared
type.

Failure Semantics:
    - A value that cannot be coerced to its field's type drops that field
      occurrence only; the rest of the document is kept.
    - An unparseable date is treated as absent.
    - A missing or empty node leaves the attribute unset.
    - A record without a reference or an index cannot identify a document
      and raises ``UnidentifiableRecordError``.

Record Layout:
    ``ResultNormalizer`` reads the flat layout of the hosted backend, where
    configured fields sit beside the core attributes. Subclasses override
    the key names and ``field_node`` for other layouts.

Usage:
    >>> from searchcomponents.normalizer import normalize
    >>> document = normalize(
    ...     {"reference": "doc-1", "index": "wiki_eng", "date": ["1609459200"]},
    ...     registry,
    ... )
    >>> document.date.year
    2021
"""

import logging
from types import MappingProxyType
from typing import Any, Callable, Iterable, Mapping, Optional

from searchcomponents.dates import parse_date
from searchcomponents.documents import Document, PromotionCategory
from searchcomponents.errors import FieldParseError, UnidentifiableRecordError
from searchcomponents.fields import (
    CanonicalField,
    FieldType,
    FieldTypeRegistry,
    FieldValue,
)
from searchcomponents.utils.logging import LoggerFactory


logger_factory = LoggerFactory(logger_name=__name__, log_level=logging.INFO)
logger = logger_factory.get_logger()


DateParser = Callable[[Optional[str]], Any]

PROMOTION_CATEGORIES: Mapping[str, PromotionCategory] = MappingProxyType(
    {
        "DYNAMIC_PROMOTION": PromotionCategory.SPOTLIGHT,
        "STATIC_REFERENCE_PROMOTION": PromotionCategory.SPOTLIGHT,
        "STATIC_CONTENT_PROMOTION": PromotionCategory.STATIC_CONTENT,
        "CARDINAL_PLACEMENT": PromotionCategory.CARDINAL_PLACEMENT,
        "NONE": PromotionCategory.NONE,
    }
)

# Well-known fields read by fixed name from the field node
CONTENT_TYPE_FIELD = "content_type"
URL_FIELD = "url"
OFFSET_FIELD = "offset"
AUTHOR_FIELD = "author"
CATEGORY_FIELD = "category"
DATE_FIELD = "date"
DATE_CREATED_FIELDS = ("date_created", "created_date")
DATE_MODIFIED_FIELDS = ("date_modified", "modified_date")
QMS_ID_FIELD = "qmsid"
INJECTED_PROMOTION_FIELD = "injectedpromotion"


def as_strings(node: Any) -> list[str]:
    """Coerce a raw node into a list of string scalars.

    Absent nodes and nested objects yield an empty list; a bare scalar is a
    one-element list.
    """
    if node is None or isinstance(node, Mapping):
        return []
    if isinstance(node, (list, tuple)):
        return [
            str(item)
            for item in node
            if item is not None and not isinstance(item, (Mapping, list, tuple))
        ]
    return [str(node)]


def first_string(node: Any) -> Optional[str]:
    """Return the first string scalar of a raw node, or None."""
    values = as_strings(node)
    return values[0] if values else None


class ResultNormalizer:
    """Builds one canonical ``Document`` per raw backend record.

    The normalizer holds no per-record state; one instance can normalize any
    number of records, concurrently, against any registry snapshot.
    """

    reference_key = "reference"
    index_key = "index"
    title_key = "title"
    summary_key = "summary"
    weight_key = "weight"
    promotion_key = "promotion"
    promotion_name_key: Optional[str] = None

    def __init__(
        self,
        date_parser: DateParser = parse_date,
        promotion_mapping: Mapping[str, PromotionCategory] = PROMOTION_CATEGORIES,
    ) -> None:
        """Initialize the normalizer.

        Args:
            date_parser: Converts a raw string into a datetime or None.
            promotion_mapping: Backend promotion code to promotion category.
        """
        self.date_parser = date_parser
        self.promotion_mapping = promotion_mapping

    def field_node(self, raw: Mapping[str, Any]) -> Mapping[str, Any]:
        """Return the mapping holding the record's configurable fields."""
        return raw

    def fixed_value(self, node: Mapping[str, Any], name: str) -> Any:
        """Look up a well-known field by its fixed name."""
        return node.get(name)

    def normalize(self, raw: Any, registry: FieldTypeRegistry) -> Document:
        """Normalize one raw record.

        Args:
            raw: Raw backend record.
            registry: Field registry snapshot to resolve configured fields.

        Returns:
            The canonical document, with an empty domain.

        Raises:
            UnidentifiableRecordError: If the record has no reference or index.
        """
        if not isinstance(raw, Mapping):
            msg = f"Expected a mapping record, got {type(raw).__name__}"
            raise UnidentifiableRecordError(msg)

        reference = first_string(raw.get(self.reference_key))
        index = first_string(raw.get(self.index_key))
        if not reference or not index:
            msg = (
                f"Record lacks '{self.reference_key}' or '{self.index_key}': "
                f"reference={reference!r}, index={index!r}"
            )
            raise UnidentifiableRecordError(msg)

        node = self.field_node(raw)

        return Document(
            reference=reference,
            index=index,
            title=first_string(raw.get(self.title_key)),
            summary=first_string(raw.get(self.summary_key)),
            weight=self._parse_weight(raw.get(self.weight_key), reference),
            content_type=first_string(self.fixed_value(node, CONTENT_TYPE_FIELD)),
            url=first_string(self.fixed_value(node, URL_FIELD)),
            offset=first_string(self.fixed_value(node, OFFSET_FIELD)),
            authors=tuple(as_strings(self.fixed_value(node, AUTHOR_FIELD))),
            categories=tuple(as_strings(self.fixed_value(node, CATEGORY_FIELD))),
            date=self._first_date(node, (DATE_FIELD,)),
            date_created=self._first_date(node, DATE_CREATED_FIELDS),
            date_modified=self._first_date(node, DATE_MODIFIED_FIELDS),
            qms_id=first_string(self.fixed_value(node, QMS_ID_FIELD)),
            injected_promotion=self._parse_injected_promotion(node),
            promotion_name=(
                first_string(raw.get(self.promotion_name_key))
                if self.promotion_name_key
                else None
            ),
            promotion_category=self._promotion_category(raw.get(self.promotion_key)),
            extra_fields=self.extract_fields(node, registry),
        )

    def normalize_all(
        self, records: Iterable[Any], registry: FieldTypeRegistry
    ) -> list[Document]:
        """Normalize records in order."""
        return [self.normalize(record, registry) for record in records]

    def extract_fields(
        self, node: Mapping[str, Any], registry: FieldTypeRegistry
    ) -> dict[str, FieldValue]:
        """Extract every configured field present in ``node``.

        When several aliases of one field are present, the last one in
        configuration order wins.
        """
        extracted: dict[str, FieldValue] = {}

        for canonical in registry:
            for alias in canonical.aliases:
                raw_values = as_strings(node.get(alias))
                if not raw_values:
                    continue

                values = self._parse_field_values(canonical, alias, raw_values)
                if not values:
                    continue

                extracted[canonical.id] = FieldValue(
                    field_id=canonical.id,
                    name=alias,
                    type=canonical.type,
                    values=values,
                )

        return extracted

    def _parse_field_values(
        self, canonical: CanonicalField, alias: str, raw_values: list[str]
    ) -> tuple[Any, ...]:
        if canonical.type is FieldType.DATE:
            parsed = [self.date_parser(raw) for raw in raw_values]
            dates = tuple(value for value in parsed if value is not None)
            if len(dates) != len(raw_values):
                logger.debug(
                    f"Dropped {len(raw_values) - len(dates)} unparseable date(s) "
                    f"from field '{alias}'"
                )
            return dates

        try:
            return canonical.parse_values(raw_values)
        except FieldParseError as e:
            logger.debug(f"Dropped field '{alias}' ({canonical.id}): {e}")
            return ()

    def _first_date(self, node: Mapping[str, Any], names: Iterable[str]) -> Any:
        # Later names override earlier ones when they parse
        result = None
        for name in names:
            value = first_string(self.fixed_value(node, name))
            if value is None:
                continue
            parsed = self.date_parser(value)
            if parsed is not None:
                result = parsed
        return result

    def _parse_weight(self, node: Any, reference: str) -> Optional[float]:
        value = first_string(node)
        if value is None:
            return None
        try:
            return float(value)
        except ValueError:
            logger.debug(f"Ignoring non-numeric weight {value!r} on {reference}")
            return None

    def _parse_injected_promotion(self, node: Mapping[str, Any]) -> Optional[bool]:
        value = first_string(self.fixed_value(node, INJECTED_PROMOTION_FIELD))
        if value is None:
            return None
        return value.strip().lower() == "true"

    def _promotion_category(self, node: Any) -> Optional[PromotionCategory]:
        code = first_string(node)
        if code is None:
            return None
        category = self.promotion_mapping.get(code)
        if category is None:
            logger.debug(f"Unknown promotion type {code!r}")
        return category


_DEFAULT_NORMALIZER = ResultNormalizer()


def normalize(
    raw: Any,
    registry: FieldTypeRegistry,
    date_parser: DateParser = parse_date,
    promotion_mapping: Mapping[str, PromotionCategory] = PROMOTION_CATEGORIES,
) -> Document:
    """Normalize one flat-layout raw record into a canonical document.

    Args:
        raw: Raw backend record.
        registry: Field registry snapshot.
        date_parser: Converts a raw string into a datetime or None.
        promotion_mapping: Backend promotion code to promotion category.

    Returns:
        The canonical document, with an empty domain.

    Raises:
        UnidentifiableRecordError: If the record has no reference or index.
    """
    if date_parser is parse_date and promotion_mapping is PROMOTION_CATEGORIES:
        normalizer = _DEFAULT_NORMALIZER
    else:
        normalizer = ResultNormalizer(date_parser, promotion_mapping)
    return normalizer.normalize(raw, registry)
