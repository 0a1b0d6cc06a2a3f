"""Normalization layer for federated search backends.

This package turns raw responses from two search backend protocols (the
hosted HOD layout and the on-premise IDOL layout) into one canonical document
model, infers the owning domain of each result, and summarizes parametric
field values for faceted search.
"""

from searchcomponents.config import (
    build_domain_resolver,
    build_registry,
    load_config,
)
from searchcomponents.dates import parse_date
from searchcomponents.documents import Document, Documents, PromotionCategory
from searchcomponents.errors import (
    ConfigurationError,
    EmptyPopulationError,
    FieldParseError,
    SearchComponentsError,
    UnidentifiableRecordError,
)
from searchcomponents.fields import (
    CanonicalField,
    FieldCategory,
    FieldType,
    FieldTypeRegistry,
    FieldValue,
    RegistryHolder,
)
from searchcomponents.hod import HodDocumentsService
from searchcomponents.idol import IdolDocumentsService, IdolResultNormalizer
from searchcomponents.namespaces import (
    PUBLIC_INDEXES_DOMAIN,
    Database,
    DomainResolver,
    Namespace,
)
from searchcomponents.normalizer import ResultNormalizer, normalize
from searchcomponents.parametric import (
    BucketingParams,
    FieldValues,
    ParametricValuesService,
    RangeBucket,
    RecursiveField,
    TagValue,
    ValueDetails,
    bucket,
    compute_details,
    count_into_buckets,
)


__all__ = [
    "BucketingParams",
    "CanonicalField",
    "ConfigurationError",
    "Database",
    "Document",
    "Documents",
    "DomainResolver",
    "EmptyPopulationError",
    "FieldCategory",
    "FieldParseError",
    "FieldType",
    "FieldTypeRegistry",
    "FieldValue",
    "FieldValues",
    "HodDocumentsService",
    "IdolDocumentsService",
    "IdolResultNormalizer",
    "Namespace",
    "PUBLIC_INDEXES_DOMAIN",
    "ParametricValuesService",
    "PromotionCategory",
    "RangeBucket",
    "RecursiveField",
    "RegistryHolder",
    "ResultNormalizer",
    "SearchComponentsError",
    "TagValue",
    "UnidentifiableRecordError",
    "ValueDetails",
    "build_domain_resolver",
    "build_registry",
    "bucket",
    "compute_details",
    "count_into_buckets",
    "load_config",
    "normalize",
    "parse_date",
]
