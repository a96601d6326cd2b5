"""Settings for the scubaconfig tool itself."""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings


class LoggingConfig(BaseModel):
    """Logging configuration for loguru."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "WARNING"
    format: Literal["console", "json"] = "console"
    file: Path | None = None
    rotation: str = "10 MB"
    retention: str = "7 days"


class Settings(BaseSettings):
    """Root settings, overridable through SCUBACONFIG_* environment variables."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    catalog_path: Path | None = None

    model_config = {
        "env_prefix": "SCUBACONFIG_",
        "env_nested_delimiter": "__",
    }

    @field_validator("catalog_path", mode="before")
    @classmethod
    def expand_path(cls, v: Path | str | None) -> Path | None:
        """Expand user path."""
        if v is None or v == "":
            return None
        if isinstance(v, str):
            v = Path(v)
        return v.expanduser()
