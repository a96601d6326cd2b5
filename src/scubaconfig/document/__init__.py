"""Conversion between raw configuration documents and ConfigModel."""

from scubaconfig.document.exporter import DocumentExporter
from scubaconfig.document.importer import DocumentImporter
from scubaconfig.document.loader import parse_document, read_document

__all__ = ["DocumentExporter", "DocumentImporter", "parse_document", "read_document"]
