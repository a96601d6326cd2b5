"""Domain models for scubaconfig."""

from scubaconfig.models.config import (
    DEFAULTS,
    PLACEHOLDERS,
    POLICY_ID_FORMAT,
    POLICY_ID_PATTERN,
    WILDCARD,
    Annotation,
    ConfigModel,
    Environment,
    ExclusionFieldSet,
    Omission,
    is_valid_policy_id,
    policy_product,
)
from scubaconfig.models.report import ConfigWarning, ValidationReport, WarningCode

__all__ = [
    "DEFAULTS",
    "PLACEHOLDERS",
    "POLICY_ID_FORMAT",
    "POLICY_ID_PATTERN",
    "WILDCARD",
    "Annotation",
    "ConfigModel",
    "ConfigWarning",
    "Environment",
    "ExclusionFieldSet",
    "Omission",
    "ValidationReport",
    "WarningCode",
    "is_valid_policy_id",
    "policy_product",
]
