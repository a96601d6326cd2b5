"""Non-fatal findings raised while loading a configuration."""

from dataclasses import dataclass, field
from enum import StrEnum

from loguru import logger


class WarningCode(StrEnum):
    """Kinds of non-fatal findings."""

    MALFORMED_POLICY_ID = "malformed-policy-id"
    PRODUCT_NOT_SELECTED = "product-not-selected"
    MISSING_RATIONALE = "missing-rationale"
    EXPIRED_OMISSION = "expired-omission"
    UNKNOWN_PRODUCT = "unknown-product"
    UNKNOWN_SETTING = "unknown-setting"
    INVALID_VALUE = "invalid-value"
    INVALID_EXCLUSION_VALUE = "invalid-exclusion-value"


@dataclass
class ConfigWarning:
    """A single non-fatal finding."""

    code: WarningCode
    message: str
    policy_id: str | None = None


@dataclass
class ValidationReport:
    """Warnings collected while loading or validating a configuration."""

    warnings: list[ConfigWarning] = field(default_factory=list)

    def add(self, code: WarningCode, message: str, policy_id: str | None = None) -> None:
        self.warnings.append(ConfigWarning(code=code, message=message, policy_id=policy_id))
        logger.warning(message)

    def extend(self, other: "ValidationReport") -> None:
        self.warnings.extend(other.warnings)

    def by_code(self, code: WarningCode) -> list[ConfigWarning]:
        return [w for w in self.warnings if w.code == code]

    @property
    def ok(self) -> bool:
        return not self.warnings
