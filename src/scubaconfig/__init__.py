"""scubaconfig: compliance assessment configuration model and YAML engine."""

__version__ = "0.1.0"

from scubaconfig.catalog import ReferenceCatalog, default_catalog, load_catalog
from scubaconfig.document import DocumentExporter, DocumentImporter, read_document
from scubaconfig.errors import (
    CatalogError,
    ConfigurationError,
    DocumentStructureError,
    ScubaConfigError,
)
from scubaconfig.models import ConfigModel, ConfigWarning, ValidationReport, WarningCode
from scubaconfig.services import ConfigStore, validate_model

__all__ = [
    "CatalogError",
    "ConfigModel",
    "ConfigStore",
    "ConfigWarning",
    "ConfigurationError",
    "DocumentExporter",
    "DocumentImporter",
    "DocumentStructureError",
    "ReferenceCatalog",
    "ScubaConfigError",
    "ValidationReport",
    "WarningCode",
    "__version__",
    "default_catalog",
    "load_catalog",
    "read_document",
    "validate_model",
]
