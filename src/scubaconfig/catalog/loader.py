"""Catalog loading utilities."""

from functools import lru_cache
from importlib.resources import files
from pathlib import Path

import yaml
from pydantic import ValidationError

from scubaconfig.catalog.models import ReferenceCatalog
from scubaconfig.errors import CatalogError


def parse_catalog(text: str, source: str = "<string>") -> ReferenceCatalog:
    """
    Build a catalog from YAML text.

    Raises:
        CatalogError: If the YAML is invalid or does not match the schema.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise CatalogError(f"Invalid YAML in catalog {source}: {e}") from e

    if not isinstance(data, dict):
        raise CatalogError(f"Catalog {source} root must be a mapping, not {type(data).__name__}")

    try:
        return ReferenceCatalog(**data)
    except ValidationError as e:
        raise CatalogError(f"Invalid catalog {source}: {e}") from e


def load_catalog(catalog_path: Path | None) -> ReferenceCatalog:
    """
    Load a catalog from a YAML file, or the bundled one when no path is given.

    Raises:
        FileNotFoundError: If catalog_path doesn't exist.
        CatalogError: If the catalog is invalid.
    """
    if catalog_path is None:
        return default_catalog()

    if not catalog_path.exists():
        raise FileNotFoundError(f"Catalog file not found: {catalog_path}")

    return parse_catalog(catalog_path.read_text(encoding="utf-8"), str(catalog_path))


@lru_cache(maxsize=1)
def default_catalog() -> ReferenceCatalog:
    """Return the catalog shipped with the package."""
    resource = files("scubaconfig.catalog").joinpath("data", "catalog.yaml")
    return parse_catalog(resource.read_text(encoding="utf-8"), "scubaconfig/catalog/data/catalog.yaml")
