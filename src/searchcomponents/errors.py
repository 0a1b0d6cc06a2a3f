"""Exception taxonomy for the searchcomponents package.

Field-level failures are recovered inside the normalizers and never reach the
caller. Population-level and identity-level failures are surfaced, since the
caller asked for something that cannot be produced.

Hierarchy:
    SearchComponentsError
    ├── FieldParseError          (recovered: one field value is dropped)
    ├── UnidentifiableRecordError (surfaced: record has no reference/index)
    ├── EmptyPopulationError     (surfaced: statistics over zero values)
    └── ConfigurationError       (surfaced: invalid field configuration)
"""

from __future__ import annotations


__all__ = [
    "ConfigurationError",
    "EmptyPopulationError",
    "FieldParseError",
    "SearchComponentsError",
    "UnidentifiableRecordError",
]


class SearchComponentsError(Exception):
    """Base exception for all searchcomponents errors."""


class FieldParseError(SearchComponentsError, ValueError):
    """Raised when a raw field value cannot be coerced to its declared type."""

    def __init__(self, field_type: str, raw_value: str) -> None:
        self.field_type = field_type
        self.raw_value = raw_value
        super().__init__(f"Cannot parse {raw_value!r} as {field_type}")


class UnidentifiableRecordError(SearchComponentsError, ValueError):
    """Raised when a raw record lacks the attributes that identify a document."""


class EmptyPopulationError(SearchComponentsError, ValueError):
    """Raised when value statistics are requested for an empty population."""


class ConfigurationError(SearchComponentsError, ValueError):
    """Raised when the field configuration cannot be turned into a registry."""
