"""Tests for the package's public surface."""

import tomllib
from pathlib import Path

import scubaconfig

PYPROJECT = Path(__file__).resolve().parents[1] / "pyproject.toml"


def test_version_matches_packaging() -> None:
    """The runtime version and the packaged version agree."""
    with PYPROJECT.open("rb") as f:
        project = tomllib.load(f)["project"]
    assert scubaconfig.__version__ == project["version"]


def test_exports_resolve() -> None:
    """Every name in __all__ is importable from the package root."""
    missing = [name for name in scubaconfig.__all__ if not hasattr(scubaconfig, name)]
    assert missing == []


def test_bundled_workflow() -> None:
    """Load, validate and export using only root-level names."""
    catalog = scubaconfig.default_catalog()
    store = scubaconfig.ConfigStore(catalog)
    model = store.load({"ProductNames": ["*"]})
    assert model.product_names == sorted(catalog.product_codes)
    assert store.report.ok
    assert 'ProductNames:\n  - "*"\n' in scubaconfig.DocumentExporter(catalog).export(model)
