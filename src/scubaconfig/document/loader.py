"""Configuration document reading utilities."""

from pathlib import Path
from typing import Any

import yaml

from scubaconfig.errors import ConfigurationError


def parse_document(text: str, source: str = "<string>") -> dict[str, Any]:
    """
    Parse YAML (or JSON) text into a raw document.

    Raises:
        ConfigurationError: If the text is not valid YAML or its root is not a mapping.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in config file {source}: {e}") from e

    if data is None:
        data = {}

    if not isinstance(data, dict):
        raise ConfigurationError(
            f"YAML root of {source} must be a mapping, not {type(data).__name__}"
        )

    return data


def read_document(config_path: Path) -> dict[str, Any]:
    """
    Read a configuration document from disk.

    Args:
        config_path: Path to a YAML or JSON file.

    Returns:
        The parsed document.

    Raises:
        FileNotFoundError: If config_path doesn't exist.
        ConfigurationError: If the file cannot be read or parsed.
    """
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    try:
        text = config_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigurationError(f"Cannot read config file {config_path}: {e}") from e

    return parse_document(text, str(config_path))
