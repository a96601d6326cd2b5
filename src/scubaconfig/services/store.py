"""Holder for the active configuration.

A ConfigStore owns at most one active ConfigModel. Loading replaces it
wholesale: the previous model is dropped first, and the new one is only
published once it has been fully built and validated. A failed load
leaves the store empty.
"""

from datetime import date
from pathlib import Path
from typing import Any

from loguru import logger

from scubaconfig.catalog.models import ReferenceCatalog
from scubaconfig.document.importer import DocumentImporter, expand_product_names
from scubaconfig.document.loader import read_document
from scubaconfig.models.config import WILDCARD, ConfigModel
from scubaconfig.models.report import ValidationReport
from scubaconfig.services.validation import validate_model


class ConfigStore:
    """Caller-owned home for the active configuration."""

    def __init__(self, catalog: ReferenceCatalog) -> None:
        self.catalog = catalog
        self._importer = DocumentImporter(catalog)
        self._active: ConfigModel | None = None
        self._report = ValidationReport()

    @property
    def active(self) -> ConfigModel | None:
        """The loaded configuration, or None if nothing is loaded."""
        return self._active

    @property
    def report(self) -> ValidationReport:
        """Warnings raised by the most recent load."""
        return self._report

    def reset(self) -> None:
        """Discard the active configuration."""
        self._active = None
        self._report = ValidationReport()

    def load(self, source: Any, today: date | None = None) -> ConfigModel:
        """
        Replace the active configuration.

        Args:
            source: A raw parsed document, or an existing ConfigModel.
            today: Reference date for omission expiry checks.

        Returns:
            The new active ConfigModel.

        Raises:
            DocumentStructureError: If the document is not a mapping or a
                section has the wrong shape.
        """
        self.reset()
        report = ValidationReport()

        if isinstance(source, ConfigModel):
            model = source
            if WILDCARD in model.product_names:
                model = model.model_copy(
                    update={"product_names": expand_product_names(model.product_names, self.catalog)}
                )
        else:
            # Omit/Annotate entries are kept as written so that bad ids are
            # reported rather than dropped.
            model = self._importer.import_document(source, infer_products=False, report=report)

        report.extend(validate_model(model, self.catalog, today))

        self._active = model
        self._report = report
        logger.info(
            "Configuration loaded: {} products, {} omissions, {} annotations, {} warnings",
            len(model.product_names),
            len(model.omissions),
            len(model.annotations),
            len(report.warnings),
        )
        return model

    def load_file(self, config_path: Path, today: date | None = None) -> ConfigModel:
        """
        Read a configuration file and make it the active configuration.

        Raises:
            FileNotFoundError: If config_path doesn't exist.
            ConfigurationError: If the file cannot be parsed.
        """
        self.reset()
        with logger.contextualize(source=str(config_path)):
            logger.debug("Loading configuration from {}", config_path)
            return self.load(read_document(config_path), today=today)
