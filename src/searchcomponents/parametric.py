"""Parametric (faceted) value summaries.

Parametric fields are summarized for filtering in the UI: the distinct values
of a field with their document counts, value statistics of a numeric field,
and the counts of a numeric field in equal-width ranges.

Key Operations:
    - bucket: Partition [min, max] into N equal-width ranges
    - count_into_buckets: Count (weighted) values into those ranges
    - compute_details: min / max / average / sum / total over a population
    - ParametricValuesService: Requests tag values for registry-selected
      fields from the backend and decorates them, including the value tree
      of dependent fields

Range Semantics:
    Every bucket is half-open ``[lower, upper)`` except the last, which is
    closed at ``max`` so that the maximum itself, and any floating-point
    rounding at the top edge, is counted. When ``min == max`` there is a
    single bucket of zero width.

Usage:
    >>> from searchcomponents.parametric import bucket, compute_details
    >>> [(b.lower_bound, b.upper_bound) for b in bucket(0, 100, 4)]
    [(0.0, 25.0), (25.0, 50.0), (50.0, 75.0), (75.0, 100.0)]
    >>> compute_details([5.0]).average
    5.0
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional, Protocol, Sequence

import numpy as np

from searchcomponents.errors import EmptyPopulationError
from searchcomponents.fields import FieldCategory, FieldTypeRegistry, RegistryHolder
from searchcomponents.utils.logging import LoggerFactory


__all__ = [
    "BucketingParams",
    "FieldValues",
    "ParametricBackend",
    "ParametricValuesService",
    "RangeBucket",
    "RecursiveField",
    "TagValue",
    "ValueDetails",
    "bucket",
    "compute_details",
    "count_into_buckets",
]


logger_factory = LoggerFactory(logger_name=__name__, log_level=logging.INFO)
logger = logger_factory.get_logger()


@dataclass(frozen=True)
class RangeBucket:
    """A numeric range and the number of values that fall into it."""

    lower_bound: float
    upper_bound: float
    count: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {"min": self.lower_bound, "max": self.upper_bound, "count": self.count}


@dataclass(frozen=True)
class ValueDetails:
    """Statistics over a numeric population; ``min <= average <= max``."""

    min: float
    max: float
    average: float
    sum: float
    total_values: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "min": self.min,
            "max": self.max,
            "average": self.average,
            "sum": self.sum,
            "total_values": self.total_values,
        }


@dataclass(frozen=True)
class BucketingParams:
    """How to bucket one numeric field."""

    bucket_count: int
    min: float
    max: float


@dataclass(frozen=True)
class TagValue:
    """One distinct value of a parametric field and its document count."""

    value: str
    count: int


@dataclass(frozen=True)
class FieldValues:
    """The distinct values of one parametric field, most frequent first."""

    field_id: str
    display_name: str
    values: tuple[TagValue, ...] = ()

    @property
    def total_count(self) -> int:
        return sum(tag.count for tag in self.values)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.field_id,
            "display_name": self.display_name,
            "values": [{"value": tag.value, "count": tag.count} for tag in self.values],
        }


@dataclass(frozen=True)
class RecursiveField:
    """A value of a dependent field with the next field's values beneath it.

    Attributes:
        field_id: Canonical field id, or the raw backend name if unconfigured.
        display_name: Human-readable field name.
        value: The field value.
        count: Documents having this value together with every ancestor value.
        children: Values of the next dependent field, most frequent first.
    """

    field_id: str
    display_name: str
    value: str
    count: int
    children: tuple[RecursiveField, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.field_id,
            "display_name": self.display_name,
            "value": self.value,
            "count": self.count,
            "children": [child.to_dict() for child in self.children],
        }


def bucket(min_value: float, max_value: float, bucket_count: int) -> list[RangeBucket]:
    """Partition ``[min_value, max_value]`` into equal-width empty buckets.

    Args:
        min_value: Lower bound of the first bucket.
        max_value: Upper bound of the last bucket (inclusive).
        bucket_count: Number of buckets, at least 1.

    Returns:
        ``bucket_count`` buckets, or one zero-width bucket if the bounds are
        equal.

    Raises:
        ValueError: If ``bucket_count < 1`` or ``max_value < min_value``.
    """
    if bucket_count < 1:
        msg = f"bucket_count must be at least 1, got {bucket_count}"
        raise ValueError(msg)
    if max_value < min_value:
        msg = f"max ({max_value}) must not be less than min ({min_value})"
        raise ValueError(msg)

    if min_value == max_value:
        return [RangeBucket(float(min_value), float(max_value))]

    edges = np.linspace(min_value, max_value, bucket_count + 1)
    return [
        RangeBucket(float(edges[i]), float(edges[i + 1]))
        for i in range(bucket_count)
    ]


def _weights(values: np.ndarray, counts: Optional[Sequence[float]]) -> np.ndarray:
    if counts is None:
        return np.ones(values.shape[0])
    weights = np.asarray(list(counts), dtype=float)
    if weights.shape != values.shape:
        msg = f"Got {values.shape[0]} values but {weights.shape[0]} counts"
        raise ValueError(msg)
    return weights


def count_into_buckets(
    buckets: Sequence[RangeBucket],
    values: Iterable[float],
    counts: Optional[Sequence[float]] = None,
) -> list[RangeBucket]:
    """Count values into buckets produced by ``bucket``.

    Values outside ``[first lower bound, last upper bound]`` are ignored.

    Args:
        buckets: Contiguous buckets in ascending order.
        values: Numeric values.
        counts: Optional weight per value (e.g. documents per tag value).

    Returns:
        New buckets with counts filled in.
    """
    if not buckets:
        return []

    array = np.asarray(list(values), dtype=float)
    weights = _weights(array, counts)
    lower, upper = buckets[0].lower_bound, buckets[-1].upper_bound

    if lower == upper:
        totals = [weights[array == lower].sum()]
    else:
        edges = [b.lower_bound for b in buckets] + [upper]
        totals, _ = np.histogram(array, bins=edges, weights=weights)

    return [
        RangeBucket(b.lower_bound, b.upper_bound, int(round(float(total))))
        for b, total in zip(buckets, totals)
    ]


def compute_details(
    values: Iterable[float],
    counts: Optional[Sequence[float]] = None,
) -> ValueDetails:
    """Compute statistics over a (weighted) numeric population.

    Args:
        values: Numeric values; NaN and infinite values are ignored.
        counts: Optional weight per value.

    Returns:
        Value details with ``min <= average <= max``.

    Raises:
        EmptyPopulationError: If no value carries a positive weight.
    """
    array = np.asarray(list(values), dtype=float)
    weights = _weights(array, counts)

    mask = np.isfinite(array) & np.isfinite(weights) & (weights > 0)
    array, weights = array[mask], weights[mask]
    if array.size == 0:
        raise EmptyPopulationError("Cannot compute value details of an empty population")

    minimum = float(array.min())
    maximum = float(array.max())
    total_weight = float(weights.sum())
    total = float(np.sum(array * weights))
    # Clamp: rounding in the weighted mean may step just outside [min, max]
    average = min(max(total / total_weight, minimum), maximum)

    return ValueDetails(
        min=minimum,
        max=maximum,
        average=average,
        sum=total,
        total_values=int(round(total_weight)),
    )


class ParametricBackend(Protocol):
    """Transport collaborator that runs a tag-values request."""

    def get_tag_values(
        self, field_names: Sequence[str], query: Any
    ) -> Mapping[str, Iterable[tuple[str, int]]]:
        """Return ``(value, count)`` pairs per backend field name."""
        ...

    def get_dependent_tag_values(
        self, field_names: Sequence[str], query: Any
    ) -> Iterable[Mapping[str, Any]]:
        """Return the value tree of fields that depend on each other in order.

        Each node is ``{"name", "value", "count", "children"}``; the children
        of a node are values of the next field among documents having it.
        """
        ...


class ParametricValuesService:
    """Builds parametric summaries for fields selected from the registry.

    Field names passed to the service may be canonical field ids (expanded to
    all of the field's aliases) or raw backend names. Results are keyed by
    canonical field id when the backend name resolves, else by the raw name.
    """

    def __init__(self, registry_holder: RegistryHolder, backend: ParametricBackend) -> None:
        self.registry_holder = registry_holder
        self.backend = backend

    def get_parametric_field_names(
        self, category: FieldCategory = FieldCategory.PARAMETRIC
    ) -> list[str]:
        """Return the backend field names of every field in ``category``."""
        registry = self.registry_holder.current
        return self._backend_names(registry, registry.field_ids(category))

    def get_all_parametric_values(
        self,
        query: Any,
        field_names: Optional[Sequence[str]] = None,
        max_values: Optional[int] = None,
    ) -> list[FieldValues]:
        """Return the distinct values of each parametric field.

        Values of aliases of the same canonical field are merged. Empty values
        and values with no documents are dropped.

        Args:
            query: Opaque query passed through to the backend.
            field_names: Field ids or backend names; defaults to every
                parametric field in the registry.
            max_values: Keep at most this many values per field.

        Returns:
            One ``FieldValues`` per field that has values, in response order.
        """
        registry = self.registry_holder.current
        response = self._request(registry, field_names, FieldCategory.PARAMETRIC, query)

        merged: dict[str, dict[str, int]] = {}
        for name, pairs in response.items():
            counts = merged.setdefault(self._field_id(registry, name), {})
            for value, count in pairs:
                if value is None or str(value) == "" or int(count) <= 0:
                    continue
                counts[str(value)] = counts.get(str(value), 0) + int(count)

        results = []
        for field_id, counts in merged.items():
            if not counts:
                continue
            ordered = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
            if max_values is not None:
                ordered = ordered[:max_values]
            results.append(
                FieldValues(
                    field_id=field_id,
                    display_name=self._display_name(registry, field_id),
                    values=tuple(TagValue(value, count) for value, count in ordered),
                )
            )
        return results

    def get_value_details(
        self, query: Any, field_names: Optional[Sequence[str]] = None
    ) -> dict[str, ValueDetails]:
        """Return value statistics for each numeric field.

        Raises:
            EmptyPopulationError: If a requested field has no numeric values.
        """
        registry = self.registry_holder.current
        response = self._request(registry, field_names, FieldCategory.NUMERIC, query)

        details = {}
        for field_id, (values, counts) in self._numeric_values(registry, response).items():
            details[field_id] = compute_details(values, counts)
        return details

    def get_numeric_parametric_values_in_buckets(
        self, query: Any, bucketing_params: Mapping[str, BucketingParams]
    ) -> dict[str, list[RangeBucket]]:
        """Count each numeric field's values into its equal-width ranges.

        Args:
            query: Opaque query passed through to the backend.
            bucketing_params: Bucketing per field id or backend name.

        Returns:
            Buckets per field id; fields without values get empty buckets.
        """
        if not bucketing_params:
            return {}

        registry = self.registry_holder.current
        response = self._request(registry, list(bucketing_params), FieldCategory.NUMERIC, query)
        numeric = self._numeric_values(registry, response)

        ranges = {}
        for name, params in bucketing_params.items():
            field_id = self._field_id(registry, name)
            empty = bucket(params.min, params.max, params.bucket_count)
            values, counts = numeric.get(field_id, ([], []))
            ranges[field_id] = count_into_buckets(empty, values, counts)

        logger.info(f"Bucketed {len(ranges)} numeric fields.")
        return ranges

    def get_dependent_parametric_values(
        self, query: Any, field_names: Optional[Sequence[str]] = None
    ) -> list[RecursiveField]:
        """Return the values of dependent parametric fields as a tree.

        Nodes without a value or without documents are dropped together with
        their subtree. Siblings are ordered by count descending, then value.

        Args:
            query: Opaque query passed through to the backend.
            field_names: Field ids or backend names, outermost first; defaults
                to every parametric field in the registry.

        Returns:
            The top-level values, each carrying the next field's values.
        """
        registry = self.registry_holder.current
        names = self._requested_names(registry, field_names, FieldCategory.PARAMETRIC)
        if not names:
            return []

        nodes = self.backend.get_dependent_tag_values(names, query) or []
        fields = self._decorate(registry, nodes)

        logger.info(f"Built {len(fields)} top-level dependent values.")
        return fields

    def _decorate(
        self, registry: FieldTypeRegistry, nodes: Iterable[Any]
    ) -> list[RecursiveField]:
        fields = []
        for node in nodes:
            if not isinstance(node, Mapping):
                logger.debug(f"Skipping malformed dependent value {node!r}")
                continue

            value = node.get("value")
            try:
                count = int(node.get("count") or 0)
            except (TypeError, ValueError):
                logger.debug(f"Skipping dependent value {value!r} with bad count")
                continue
            if value is None or str(value) == "" or count <= 0:
                continue

            field_id = self._field_id(registry, str(node.get("name", "")))
            fields.append(
                RecursiveField(
                    field_id=field_id,
                    display_name=self._display_name(registry, field_id),
                    value=str(value),
                    count=count,
                    children=tuple(self._decorate(registry, node.get("children") or [])),
                )
            )
        return sorted(fields, key=lambda f: (-f.count, f.value))

    def _requested_names(
        self,
        registry: FieldTypeRegistry,
        field_names: Optional[Sequence[str]],
        default_category: FieldCategory,
    ) -> list[str]:
        if field_names is None:
            return self._backend_names(registry, registry.field_ids(default_category))
        return self._backend_names(registry, field_names)

    def _request(
        self,
        registry: FieldTypeRegistry,
        field_names: Optional[Sequence[str]],
        default_category: FieldCategory,
        query: Any,
    ) -> Mapping[str, Iterable[tuple[str, int]]]:
        names = self._requested_names(registry, field_names, default_category)
        if not names:
            return {}
        return self.backend.get_tag_values(names, query) or {}

    def _numeric_values(
        self,
        registry: FieldTypeRegistry,
        response: Mapping[str, Iterable[tuple[str, int]]],
    ) -> dict[str, tuple[list[float], list[int]]]:
        numeric: dict[str, tuple[list[float], list[int]]] = {}
        for name, pairs in response.items():
            values, counts = numeric.setdefault(self._field_id(registry, name), ([], []))
            for value, count in pairs:
                try:
                    number = float(value)
                except (TypeError, ValueError):
                    logger.debug(f"Skipping non-numeric value {value!r} of {name}")
                    continue
                if not np.isfinite(number):
                    logger.debug(f"Skipping non-finite value {value!r} of {name}")
                    continue
                values.append(number)
                counts.append(int(count))
        return numeric

    @staticmethod
    def _backend_names(registry: FieldTypeRegistry, names: Iterable[str]) -> list[str]:
        backend_names: list[str] = []
        for name in names:
            canonical = registry.get(name)
            for backend_name in canonical.aliases if canonical else (name,):
                if backend_name not in backend_names:
                    backend_names.append(backend_name)
        return backend_names

    @staticmethod
    def _field_id(registry: FieldTypeRegistry, name: str) -> str:
        if name in registry:
            return name
        canonical = registry.resolve(name)
        return canonical.id if canonical else name

    @staticmethod
    def _display_name(registry: FieldTypeRegistry, field_id: str) -> str:
        canonical = registry.get(field_id)
        return canonical.display_name if canonical else field_id
