"""Cross-reference validation for configuration models.

Everything found here is non-fatal: offending entries stay in the
model and are reported as ConfigWarning records. Entries with a
malformed or out-of-scope policy id are left out of enforcement by
ConfigModel.enforced_omissions / enforced_annotations.
"""

import re
from datetime import date

from scubaconfig.catalog.models import FieldKind, ReferenceCatalog, ValueType
from scubaconfig.models.config import POLICY_ID_FORMAT, ConfigModel, policy_product
from scubaconfig.models.report import ValidationReport, WarningCode

_VALUE_PATTERNS: dict[ValueType, tuple[re.Pattern[str], str]] = {
    ValueType.EMAIL: (
        re.compile(r"[^@\s]+@[^@\s]+\.[^@\s]+"),
        "an email address such as user@example.gov",
    ),
    ValueType.GUID: (
        re.compile(r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}", re.IGNORECASE),
        "a GUID such as 00000000-0000-0000-0000-000000000000",
    ),
    ValueType.DOMAIN: (
        re.compile(
            r"(?=.{1,253}\Z)(?:[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?\.)+[A-Za-z]{2,63}"
        ),
        "a domain name such as example.gov",
    ),
    ValueType.SEMICOLON_LIST: (
        re.compile(r"[^;]*\S[^;]*(?:;[^;]*\S[^;]*)+"),
        "semicolon-separated values such as Display Name;user@example.gov",
    ),
}


def check_policy_id(policy_id: str, section: str, product_names: list[str]) -> tuple[WarningCode, str] | None:
    """Return a warning for an unusable policy id, or None if it is fine."""
    product = policy_product(policy_id)
    if product is None:
        return (
            WarningCode.MALFORMED_POLICY_ID,
            f"Policy id '{policy_id}' in {section} is malformed; expected format "
            f"{POLICY_ID_FORMAT} (for example MS.EXO.1.1v2). The entry is kept but ignored.",
        )
    if product not in product_names:
        selected = ", ".join(product_names) or "none"
        return (
            WarningCode.PRODUCT_NOT_SELECTED,
            f"Policy id '{policy_id}' in {section} refers to product '{product}', which is "
            f"not in ProductNames ({selected}). The entry is kept but ignored.",
        )
    return None


def validate_model(
    model: ConfigModel, catalog: ReferenceCatalog, today: date | None = None
) -> ValidationReport:
    """
    Check a model's cross-references.

    Args:
        model: Model to check.
        catalog: Catalog supplying known products and exclusion schemas.
        today: Reference date for omission expiry (defaults to today).

    Returns:
        ValidationReport listing every finding.
    """
    today = today or date.today()
    report = ValidationReport()

    known_products = set(catalog.product_codes)
    for code in model.product_names:
        if code not in known_products:
            report.add(
                WarningCode.UNKNOWN_PRODUCT,
                f"Product '{code}' in ProductNames is not a known product; expected one of "
                f"{', '.join(catalog.product_codes)}.",
            )

    for section, entries in (("OmitPolicy", model.omissions), ("AnnotatePolicy", model.annotations)):
        for policy_id in entries:
            problem = check_policy_id(policy_id, section, model.product_names)
            if problem:
                report.add(problem[0], problem[1], policy_id)

    for policy_id, omission in model.omissions.items():
        if not omission.rationale.strip():
            report.add(
                WarningCode.MISSING_RATIONALE,
                f"Omission for '{policy_id}' has no Rationale; a non-empty Rationale "
                "string is required.",
                policy_id,
            )
        if omission.is_expired(today):
            report.add(
                WarningCode.EXPIRED_OMISSION,
                f"Omission for '{policy_id}' expired on {omission.expiration.isoformat()}; "
                "the policy will be assessed. Expiration must be a future date (YYYY-MM-DD).",
                policy_id,
            )

    _validate_exclusions(model, catalog, report)
    return report


def _validate_exclusions(model: ConfigModel, catalog: ReferenceCatalog, report: ValidationReport) -> None:
    for product, policies in model.exclusions.items():
        entry = catalog.product(product)
        section = entry.section_key if entry else product.capitalize()
        for policy_id, types in policies.items():
            problem = check_policy_id(policy_id, section, model.product_names)
            if problem:
                report.add(problem[0], problem[1], policy_id)
            for type_name, fields in types.items():
                etype = catalog.exclusion_type(type_name)
                if etype is None:
                    continue
                for field_name, value in fields.items():
                    declared = etype.field(field_name)
                    if declared is None:
                        expected = ", ".join(f.name for f in etype.fields)
                        report.add(
                            WarningCode.INVALID_EXCLUSION_VALUE,
                            f"Exclusion field '{field_name}' under {etype.group_name} for "
                            f"'{policy_id}' ({product}) is not recognised; expected one of {expected}.",
                            policy_id,
                        )
                        continue
                    if declared.kind == FieldKind.SCALAR and isinstance(value, list):
                        report.add(
                            WarningCode.INVALID_EXCLUSION_VALUE,
                            f"Exclusion field {etype.group_name}.{field_name} for '{policy_id}' "
                            f"takes a single value, got {len(value)}.",
                            policy_id,
                        )
                    pattern = _VALUE_PATTERNS.get(declared.value_type)
                    if pattern is None:
                        continue
                    values = value if isinstance(value, list) else [value]
                    for item in values:
                        if not pattern[0].fullmatch(item):
                            report.add(
                                WarningCode.INVALID_EXCLUSION_VALUE,
                                f"Exclusion value '{item}' in {etype.group_name}.{field_name} for "
                                f"'{policy_id}' is not {pattern[1]}.",
                                policy_id,
                            )
