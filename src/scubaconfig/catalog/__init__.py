"""Reference catalog of products, policies and exclusion types."""

from scubaconfig.catalog.loader import default_catalog, load_catalog, parse_catalog
from scubaconfig.catalog.models import (
    NO_EXCLUSION,
    ExclusionField,
    ExclusionType,
    FieldKind,
    PolicyEntry,
    ProductEntry,
    ReferenceCatalog,
    ValueType,
)

__all__ = [
    "NO_EXCLUSION",
    "ExclusionField",
    "ExclusionType",
    "FieldKind",
    "PolicyEntry",
    "ProductEntry",
    "ReferenceCatalog",
    "ValueType",
    "default_catalog",
    "load_catalog",
    "parse_catalog",
]
