"""scubaconfig utility modules."""

from scubaconfig.utils.logging import configure_logging

__all__ = ["configure_logging"]
