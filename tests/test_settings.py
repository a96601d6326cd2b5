"""Tests for tool settings and logging setup."""

from pathlib import Path

import pytest
from loguru import logger

from scubaconfig.catalog import ReferenceCatalog
from scubaconfig.services.store import ConfigStore
from scubaconfig.settings import LoggingConfig, Settings
from scubaconfig.utils.logging import configure_logging


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove SCUBACONFIG_* variables the outer environment may set."""
    for name in ("SCUBACONFIG_CATALOG_PATH", "SCUBACONFIG_LOGGING__LEVEL", "SCUBACONFIG_LOGGING__FORMAT"):
        monkeypatch.delenv(name, raising=False)


def test_settings_defaults() -> None:
    settings = Settings()
    assert settings.logging.level == "WARNING"
    assert settings.logging.format == "console"
    assert settings.logging.file is None
    assert settings.catalog_path is None


def test_settings_env_prefix() -> None:
    """Settings read SCUBACONFIG_ variables with __ for nesting."""
    assert Settings.model_config.get("env_prefix") == "SCUBACONFIG_"
    assert Settings.model_config.get("env_nested_delimiter") == "__"


def test_settings_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SCUBACONFIG_LOGGING__LEVEL", "DEBUG")
    monkeypatch.setenv("SCUBACONFIG_CATALOG_PATH", "~/catalog.yaml")
    settings = Settings()
    assert settings.logging.level == "DEBUG"
    assert settings.catalog_path == Path("~/catalog.yaml").expanduser()


def test_empty_catalog_path_is_none(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SCUBACONFIG_CATALOG_PATH", "")
    assert Settings().catalog_path is None


def test_configure_logging_to_file(tmp_path: Path) -> None:
    """Messages at or above the level reach the log file."""
    log_file = tmp_path / "scubaconfig.log"
    configure_logging(LoggingConfig(level="INFO", file=log_file))
    try:
        logger.info("loaded configuration")
        logger.debug("not written")
    finally:
        logger.remove()
    text = log_file.read_text()
    assert "loaded configuration" in text
    assert "not written" not in text


def test_log_lines_name_the_source(tmp_path: Path) -> None:
    """Records carry the bound document source, or '-' when none is bound."""
    log_file = tmp_path / "scubaconfig.log"
    configure_logging(LoggingConfig(level="INFO", file=log_file))
    try:
        logger.info("outside any document")
        with logger.contextualize(source="tenant.yaml"):
            logger.info("inside a document")
    finally:
        logger.remove()
    lines = log_file.read_text().splitlines()
    assert lines[0].endswith("| - | outside any document")
    assert lines[1].endswith("| tenant.yaml | inside a document")


def test_load_file_warnings_name_the_file(
    tmp_path: Path, catalog: ReferenceCatalog, write_config
) -> None:
    log_file = tmp_path / "scubaconfig.log"
    config_path = write_config("ProductNames:\n  - exo\nColour: blue\n")
    configure_logging(LoggingConfig(level="WARNING", file=log_file))
    try:
        ConfigStore(catalog).load_file(config_path)
    finally:
        logger.remove()
    text = log_file.read_text()
    assert f"| WARNING  | {config_path} | Setting 'Colour' is not recognised" in text
