"""Canonical field configuration and typed field values.

A deployment configures which raw backend field names (aliases) feed which
canonical field, and what type the values have. The registry built from that
configuration is immutable: a configuration refresh builds a new registry and
publishes it through a ``RegistryHolder`` in a single reference swap, so
requests in flight keep reading a consistent snapshot.

Key Types:
    - FieldType: Tagged value type; each member owns its typed parser
    - CanonicalField: Stable field id with aliases, type and flags
    - FieldValue: Typed values extracted for one field of one document
    - FieldTypeRegistry: O(1) alias lookup built once at construction
    - RegistryHolder: Atomically swappable reference to the current registry

Usage:
    >>> from searchcomponents.fields import CanonicalField, FieldType, FieldTypeRegistry
    >>> registry = FieldTypeRegistry([
    ...     CanonicalField(id="author", display_name="Author",
    ...                    type=FieldType.STRING, aliases=("author", "AUTHOR")),
    ... ])
    >>> registry.resolve("AUTHOR").id
    'author'
"""

from __future__ import annotations

import math
import threading
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Iterable, Iterator, Mapping, Optional

from searchcomponents.dates import parse_date
from searchcomponents.errors import ConfigurationError, FieldParseError


__all__ = [
    "CanonicalField",
    "FieldCategory",
    "FieldType",
    "FieldTypeRegistry",
    "FieldValue",
    "RegistryHolder",
]


def _parse_string(raw: str) -> str:
    return raw


def _parse_number(raw: str) -> float:
    # Plain decimals only: no digit separators, nan or infinities
    if "_" in raw:
        raise FieldParseError("number", raw)
    try:
        number = float(raw.strip())
    except ValueError:
        raise FieldParseError("number", raw) from None
    if not math.isfinite(number):
        raise FieldParseError("number", raw)
    return number


def _parse_date(raw: str) -> Any:
    parsed = parse_date(raw)
    if parsed is None:
        raise FieldParseError("date", raw)
    return parsed


def _parse_boolean(raw: str) -> bool:
    literal = raw.strip().lower()
    if literal == "true":
        return True
    if literal == "false":
        return False
    raise FieldParseError("boolean", raw)


class FieldType(Enum):
    """Declared value type of a canonical field.

    The member selects one of a fixed set of parsers; dispatch happens on the
    tag, never by inspecting the raw value.
    """

    STRING = "string"
    DATE = "date"
    NUMBER = "number"
    BOOLEAN = "boolean"

    def parse(self, raw: str) -> Any:
        """Parse one raw string scalar as this type.

        Args:
            raw: Raw string value from the backend.

        Returns:
            The typed value (str, datetime, float or bool).

        Raises:
            FieldParseError: If the value cannot be coerced.
        """
        return _PARSERS[self](raw)

    @classmethod
    def from_name(cls, name: str) -> "FieldType":
        """Look up a type by its configuration name, case-insensitively."""
        try:
            return cls(name.strip().lower())
        except ValueError:
            msg = f"Unknown field type: {name!r}"
            raise ConfigurationError(msg) from None


_PARSERS = {
    FieldType.STRING: _parse_string,
    FieldType.DATE: _parse_date,
    FieldType.NUMBER: _parse_number,
    FieldType.BOOLEAN: _parse_boolean,
}


class FieldCategory(Enum):
    """Categories used to select field ids from the registry."""

    ALL = "all"
    PARAMETRIC = "parametric"
    NUMERIC = "numeric"
    DATE = "date"


@dataclass(frozen=True)
class CanonicalField:
    """A backend-independent field with the raw names that feed it.

    Attributes:
        id: Stable identifier, unique within a registry.
        display_name: Human-readable name for presentation.
        type: Declared value type.
        aliases: Raw backend field names, matched case-sensitively. Order is
            significant: later aliases win when several are present.
        advanced: Whether the field is shown only in advanced views.
        parametric: Whether the field is eligible for parametric summaries.
    """

    id: str
    display_name: str = ""
    type: FieldType = FieldType.STRING
    aliases: tuple[str, ...] = ()
    advanced: bool = False
    parametric: bool = False

    def __post_init__(self) -> None:
        if not self.id:
            raise ConfigurationError("Field id cannot be empty")
        if not self.display_name:
            object.__setattr__(self, "display_name", self.id)
        object.__setattr__(self, "aliases", tuple(self.aliases))

    def parse_values(self, raw_values: Iterable[str]) -> tuple[Any, ...]:
        """Parse every raw scalar of one field occurrence.

        Raises:
            FieldParseError: If any value cannot be coerced.
        """
        return tuple(self.type.parse(raw) for raw in raw_values)


@dataclass(frozen=True)
class FieldValue:
    """Typed values extracted for one canonical field of one document.

    Attributes:
        field_id: Canonical field id.
        name: Raw alias the values were read from.
        type: Declared value type.
        values: Typed scalars in backend order.
    """

    field_id: str
    name: str
    type: FieldType
    values: tuple[Any, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "id": self.field_id,
            "name": self.name,
            "type": self.type.value,
            "values": [
                value.isoformat() if hasattr(value, "isoformat") else value
                for value in self.values
            ],
        }


class FieldTypeRegistry:
    """Read-only lookup from raw field names to canonical fields.

    The alias index is built once in the constructor; nothing mutates the
    registry afterwards, so one instance can be shared by any number of
    concurrent normalizations.
    """

    def __init__(self, fields: Iterable[CanonicalField]) -> None:
        """Build the registry.

        Args:
            fields: Canonical field definitions.

        Raises:
            ConfigurationError: If two fields share an id.
        """
        by_id: dict[str, CanonicalField] = {}
        by_alias: dict[str, CanonicalField] = {}

        for canonical in fields:
            if canonical.id in by_id:
                msg = f"Duplicate field id: {canonical.id!r}"
                raise ConfigurationError(msg)
            by_id[canonical.id] = canonical
            for alias in canonical.aliases:
                by_alias[alias] = canonical

        self._fields = tuple(by_id.values())
        self._by_id = MappingProxyType(by_id)
        self._by_alias = MappingProxyType(by_alias)

    @classmethod
    def from_config(cls, fields_config: Mapping[str, Mapping[str, Any]]) -> "FieldTypeRegistry":
        """Build a registry from the ``fields`` configuration section.

        Each entry maps a field id to ``names`` (list of aliases), ``type``,
        and optional ``display_name``, ``advanced`` and ``parametric`` keys.

        Raises:
            ConfigurationError: If an entry has no names or an unknown type.
        """
        canonical_fields = []
        for field_id, entry in (fields_config or {}).items():
            entry = entry or {}
            names = entry.get("names") or []
            if isinstance(names, str):
                names = [names]
            if not names:
                msg = f"Field {field_id!r} must configure at least one name"
                raise ConfigurationError(msg)

            canonical_fields.append(
                CanonicalField(
                    id=str(field_id),
                    display_name=entry.get("display_name", ""),
                    type=FieldType.from_name(entry.get("type", "string")),
                    aliases=tuple(str(name) for name in names),
                    advanced=_as_flag(entry.get("advanced", False)),
                    parametric=_as_flag(entry.get("parametric", False)),
                )
            )
        return cls(canonical_fields)

    def resolve(self, raw_name: str) -> Optional[CanonicalField]:
        """Return the canonical field for a raw name, or None."""
        return self._by_alias.get(raw_name)

    def get(self, field_id: str) -> Optional[CanonicalField]:
        """Return the canonical field with the given id, or None."""
        return self._by_id.get(field_id)

    @property
    def fields(self) -> tuple[CanonicalField, ...]:
        """All canonical fields in configuration order."""
        return self._fields

    def field_ids(self, category: FieldCategory = FieldCategory.ALL) -> list[str]:
        """Return the ids of fields in a category, in configuration order."""
        return [f.id for f in self._fields if _in_category(f, category)]

    def __iter__(self) -> Iterator[CanonicalField]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __contains__(self, field_id: object) -> bool:
        return field_id in self._by_id


def _in_category(canonical: CanonicalField, category: FieldCategory) -> bool:
    if category is FieldCategory.PARAMETRIC:
        return canonical.parametric
    if category is FieldCategory.NUMERIC:
        return canonical.type is FieldType.NUMBER
    if category is FieldCategory.DATE:
        return canonical.type is FieldType.DATE
    return True


class RegistryHolder:
    """Published reference to the current registry snapshot.

    Readers call ``current`` once per request and keep that snapshot. A
    configuration refresh calls ``swap`` with a freshly built registry; the
    previous snapshot is left untouched for readers still holding it.
    """

    def __init__(self, registry: FieldTypeRegistry) -> None:
        self._registry = registry
        self._write_lock = threading.Lock()

    @property
    def current(self) -> FieldTypeRegistry:
        return self._registry

    def swap(self, registry: FieldTypeRegistry) -> FieldTypeRegistry:
        """Publish a new registry and return the one it replaced."""
        with self._write_lock:
            previous = self._registry
            self._registry = registry
        return previous


def _as_flag(value: Any) -> bool:
    # Env-resolved config values arrive as strings
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return bool(value)
