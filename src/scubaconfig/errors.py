"""scubaconfig error types.

All custom exceptions inherit from ScubaConfigError to allow
catching any scubaconfig-specific error.
"""

from typing import Any


class ScubaConfigError(Exception):
    """Base exception for all scubaconfig errors."""

    pass


class ConfigurationError(ScubaConfigError):
    """Configuration document cannot be turned into a model."""

    pass


class DocumentStructureError(ConfigurationError):
    """A node in the parsed document has the wrong shape."""

    def __init__(self, path: str, expected: str, actual: Any) -> None:
        self.path = path or "<root>"
        self.expected = expected
        self.actual = type(actual).__name__ if actual is not None else "null"
        super().__init__(f"'{self.path}' must be a {expected}, not {self.actual}")


class CatalogError(ScubaConfigError):
    """Reference catalog is missing or invalid."""

    pass
