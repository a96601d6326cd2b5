"""Configuration model for a compliance assessment run."""

import re
from datetime import date
from enum import StrEnum
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

WILDCARD = "*"

POLICY_ID_FORMAT = "MS.<PRODUCT>.<GROUP>.<NUMBER>v<VERSION>"
POLICY_ID_PATTERN = re.compile(r"MS\.([A-Za-z]+)\.[0-9]+\.[0-9]+v[0-9]+", re.IGNORECASE)


class Environment(StrEnum):
    """Cloud environment the tenant lives in."""

    COMMERCIAL = "commercial"
    GCC = "gcc"
    GCCHIGH = "gcchigh"
    DOD = "dod"


# Values applied to any setting a document leaves out, keyed by document key.
DEFAULTS: dict[str, Any] = {
    "ProductNames": ("aad", "defender", "exo", "sharepoint", "teams"),
    "M365Environment": Environment.COMMERCIAL,
    "OPAPath": Path("~/.scubagear/Tools"),
    "LogIn": True,
    "DisconnectOnExit": False,
    "OutPath": Path("."),
    "OutFolderName": "M365BaselineConformance",
    "OutProviderFileName": "ProviderSettingsExport",
    "OutRegoFileName": "TestResults",
    "OutReportName": "BaselineReports",
    "OutJsonFileName": "ScubaResults",
    "OutCsvFileName": "ScubaResults",
    "OutActionPlanFileName": "ActionPlan",
    "NumberOfUUIDCharactersToTruncate": 18,
    "KeepIndividualJSONFiles": False,
    "Organization": "",
    "OrgName": "",
    "OrgUnitName": "",
    "Description": "",
}


# Prompt text an editor shows in empty free-text fields. A document holding
# one of these verbatim is treated as leaving the field empty.
PLACEHOLDERS: dict[str, str] = {
    "Organization": "Enter tenant domain (e.g. example.onmicrosoft.com)",
    "OrgName": "Enter organization name",
    "OrgUnitName": "Enter organizational unit name",
    "Description": "Enter a description of this configuration",
}


def policy_product(policy_id: str) -> str | None:
    """Return the lowercase product code embedded in a policy id.

    Returns None when the id is not of the form MS.<PRODUCT>.<GROUP>.<NUMBER>v<VERSION>.
    """
    match = POLICY_ID_PATTERN.fullmatch(policy_id)
    return match.group(1).lower() if match else None


def is_valid_policy_id(policy_id: str) -> bool:
    return POLICY_ID_PATTERN.fullmatch(policy_id) is not None


def _default(key: str) -> Any:
    return Field(default=DEFAULTS[key], alias=key)


class Omission(BaseModel):
    """Request to skip a policy."""

    rationale: str = Field(default="", alias="Rationale")
    expiration: date | None = Field(default=None, alias="Expiration")

    model_config = {"frozen": True, "populate_by_name": True}

    def is_expired(self, today: date) -> bool:
        return self.expiration is not None and self.expiration < today


class Annotation(BaseModel):
    """Free-text note attached to a policy."""

    comment: str = Field(default="", alias="Comment")
    incorrect_result: bool = Field(default=False, alias="IncorrectResult")
    remediation_date: date | None = Field(default=None, alias="RemediationDate")

    model_config = {"frozen": True, "populate_by_name": True}


# field name -> scalar value or ordered list of values
ExclusionFieldSet = dict[str, str | list[str]]


class ConfigModel(BaseModel):
    """
    Canonical in-memory representation of one configuration.

    Attributes use snake_case; document keys are the aliases. Exclusions
    are keyed product code -> policy id -> exclusion type name.
    """

    product_names: list[str] = Field(
        default_factory=lambda: list(DEFAULTS["ProductNames"]), alias="ProductNames"
    )
    environment: Environment = _default("M365Environment")

    # Run settings
    opa_path: Path = _default("OPAPath")
    log_in: bool = _default("LogIn")
    disconnect_on_exit: bool = _default("DisconnectOnExit")
    out_path: Path = _default("OutPath")
    out_folder_name: str = _default("OutFolderName")
    out_provider_file_name: str = _default("OutProviderFileName")
    out_rego_file_name: str = _default("OutRegoFileName")
    out_report_name: str = _default("OutReportName")
    out_json_file_name: str = _default("OutJsonFileName")
    out_csv_file_name: str = _default("OutCsvFileName")
    out_action_plan_file_name: str = _default("OutActionPlanFileName")
    truncation_length: Literal[0, 13, 18, 36] = _default("NumberOfUUIDCharactersToTruncate")
    keep_individual_json_files: bool = _default("KeepIndividualJSONFiles")

    # Free text describing the tenant
    organization: str = _default("Organization")
    org_name: str = _default("OrgName")
    org_unit_name: str = _default("OrgUnitName")
    description: str = _default("Description")

    omissions: dict[str, Omission] = Field(default_factory=dict, alias="OmitPolicy")
    annotations: dict[str, Annotation] = Field(default_factory=dict, alias="AnnotatePolicy")
    exclusions: dict[str, dict[str, dict[str, ExclusionFieldSet]]] = Field(default_factory=dict)

    model_config = {"frozen": True, "populate_by_name": True}

    @field_validator("product_names", mode="before")
    @classmethod
    def normalize_products(cls, v: Any) -> Any:
        """Lowercase, deduplicate and sort product codes."""
        if isinstance(v, list | tuple | set):
            return sorted({str(item).lower() for item in v})
        return v

    @classmethod
    def setting_keys(cls) -> dict[str, str]:
        """Map document key -> attribute name for every scalar setting."""
        return {
            field.alias: name
            for name, field in cls.model_fields.items()
            if field.alias in DEFAULTS and field.alias != "ProductNames"
        }

    def is_in_scope(self, policy_id: str) -> bool:
        """True when the id is well formed and its product is selected."""
        product = policy_product(policy_id)
        return product is not None and product in self.product_names

    def enforced_omissions(self, today: date | None = None) -> dict[str, Omission]:
        """Omissions that take effect: in scope and not expired."""
        today = today or date.today()
        return {
            policy_id: omission
            for policy_id, omission in self.omissions.items()
            if self.is_in_scope(policy_id) and not omission.is_expired(today)
        }

    def enforced_annotations(self) -> dict[str, Annotation]:
        """Annotations whose policy id is in scope."""
        return {
            policy_id: annotation
            for policy_id, annotation in self.annotations.items()
            if self.is_in_scope(policy_id)
        }
