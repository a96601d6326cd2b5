"""Raw document to ConfigModel conversion.

A raw document is the nested mapping a YAML or JSON parser produces.
Top-level keys naming a catalog product hold that product's exclusion
data; every other key is a general setting.

Only a wrongly shaped document is fatal. A value that cannot be coerced
is reported and left out, so the rest of the document still loads.
"""

from typing import Any

from loguru import logger
from pydantic import BaseModel, TypeAdapter, ValidationError

from scubaconfig.catalog.models import FieldKind, ProductEntry, ReferenceCatalog
from scubaconfig.document.nodes import (
    child_path,
    expect_mapping,
    expect_scalar,
    expect_string,
    expect_string_list,
    lookup,
)
from scubaconfig.errors import DocumentStructureError
from scubaconfig.models.config import (
    DEFAULTS,
    PLACEHOLDERS,
    WILDCARD,
    Annotation,
    ConfigModel,
    ExclusionFieldSet,
    Omission,
)
from scubaconfig.models.report import ValidationReport, WarningCode

PRODUCT_NAMES_KEY = "ProductNames"
OMIT_KEY = "OmitPolicy"
ANNOTATE_KEY = "AnnotatePolicy"

# Expected formats of the typed Omit/Annotate fields, for warning text
_FIELD_FORMATS = {
    "Expiration": "a date (YYYY-MM-DD)",
    "RemediationDate": "a date (YYYY-MM-DD)",
    "IncorrectResult": "true or false",
}


def expand_product_names(names: list[str], catalog: ReferenceCatalog) -> list[str]:
    """Expand the wildcard to every catalog product, else dedupe and sort."""
    lowered = {name.strip().lower() for name in names}
    if WILDCARD in lowered:
        return sorted(catalog.product_codes)
    return sorted(lowered)


def apply_defaults(values: dict[str, Any]) -> dict[str, Any]:
    """Fill every setting missing from ``values`` from the default table."""
    for key, default in DEFAULTS.items():
        if key not in values:
            values[key] = list(default) if isinstance(default, tuple) else default
    return values


class DocumentImporter:
    """
    Builds ConfigModel instances from raw parsed documents.

    Exclusion-type names are resolved through the catalog: the field map
    stored under a policy's field-group key is lifted into the model
    under the exclusion type's name.
    """

    def __init__(self, catalog: ReferenceCatalog) -> None:
        self.catalog = catalog
        setting_keys = ConfigModel.setting_keys()
        self._setting_keys = {key.casefold(): key for key in setting_keys}
        self._adapters = {
            key: TypeAdapter(ConfigModel.model_fields[attr].annotation)
            for key, attr in setting_keys.items()
        }
        self._text_keys = {
            key for key, attr in setting_keys.items() if ConfigModel.model_fields[attr].annotation is str
        }

    def import_document(
        self,
        raw: Any,
        *,
        infer_products: bool = True,
        report: ValidationReport | None = None,
    ) -> ConfigModel:
        """
        Convert a raw document into a ConfigModel.

        Args:
            raw: Parsed document; must be a mapping at the top level.
            infer_products: When True, OmitPolicy and AnnotatePolicy entries
                whose id no catalog product owns are dropped without warning.
                When False they are kept as written.
            report: Optional report receiving non-fatal findings. Without
                one, findings are only logged.

        Returns:
            Fully defaulted ConfigModel.

        Raises:
            DocumentStructureError: If the root or a section has the wrong shape.
        """
        if not isinstance(raw, dict):
            raise DocumentStructureError("", "mapping", raw)

        document = expect_mapping(raw)
        values: dict[str, Any] = {}
        exclusions: dict[str, dict[str, dict[str, ExclusionFieldSet]]] = {}

        for key, node in document.items():
            product = self.catalog.product(key)
            if product is not None:
                section = self._import_exclusions(product, node, key)
                if section:
                    exclusions[product.code] = section
                continue

            folded = key.casefold()
            if folded == PRODUCT_NAMES_KEY.casefold():
                if node is None:
                    continue
                names = expect_string_list(node, key)
                values[PRODUCT_NAMES_KEY] = expand_product_names(names, self.catalog)
            elif folded == OMIT_KEY.casefold():
                values[OMIT_KEY] = self._import_policy_section(
                    node, key, self._omission_fields, Omission, infer_products, report
                )
            elif folded == ANNOTATE_KEY.casefold():
                values[ANNOTATE_KEY] = self._import_policy_section(
                    node, key, self._annotation_fields, Annotation, infer_products, report
                )
            elif folded in self._setting_keys:
                self._import_setting(self._setting_keys[folded], key, node, values, report)
            else:
                _warn(
                    report,
                    WarningCode.UNKNOWN_SETTING,
                    f"Setting '{key}' is not recognised and was ignored; expected a product "
                    f"section ({', '.join(p.section_key for p in self.catalog.products)}) "
                    f"or one of {', '.join(sorted(self._setting_keys.values()))}.",
                )

        apply_defaults(values)
        values["exclusions"] = exclusions
        return ConfigModel.model_validate(values)

    def _import_setting(
        self,
        canonical: str,
        key: str,
        node: Any,
        values: dict[str, Any],
        report: ValidationReport | None,
    ) -> None:
        value = expect_scalar(node, key)
        if value is None:
            return
        if canonical in self._text_keys:
            value = expect_string(value, key)
            if value == PLACEHOLDERS.get(canonical):
                value = ""
        try:
            values[canonical] = self._adapters[canonical].validate_python(value)
        except ValidationError as e:
            _warn(
                report,
                WarningCode.INVALID_VALUE,
                f"Setting '{key}' has invalid value {value!r}: {e.errors()[0]['msg']}. "
                f"The default ({DEFAULTS[canonical]}) is used instead.",
            )

    def _import_policy_section(
        self,
        node: Any,
        path: str,
        read_fields: Any,
        entry_type: type[BaseModel],
        infer_products: bool,
        report: ValidationReport | None,
    ) -> dict[str, BaseModel]:
        entries = expect_mapping(node, path)
        result: dict[str, BaseModel] = {}
        for policy_id, body in entries.items():
            entry_path = child_path(path, policy_id)
            if infer_products:
                product = self.catalog.product_for_policy(policy_id)
                if product is None:
                    logger.debug("Dropping {} entry '{}': no catalog product owns it", path, policy_id)
                    continue
                policy_id = product.policy(policy_id).id
            fields = read_fields(body, entry_path)
            result[policy_id] = _build_entry(entry_type, fields, entry_path, policy_id, report)
        return result

    def _omission_fields(self, body: Any, path: str) -> dict[str, Any]:
        fields = expect_mapping(body, path)
        out: dict[str, Any] = {}
        found = lookup(fields, "Rationale")
        if found:
            out["Rationale"] = expect_string(found[1], child_path(path, found[0]))
        found = lookup(fields, "Expiration")
        if found and found[1] not in (None, ""):
            out["Expiration"] = expect_scalar(found[1], child_path(path, found[0]))
        return out

    def _annotation_fields(self, body: Any, path: str) -> dict[str, Any]:
        fields = expect_mapping(body, path)
        out: dict[str, Any] = {}
        found = lookup(fields, "Comment")
        if found:
            out["Comment"] = expect_string(found[1], child_path(path, found[0]))
        found = lookup(fields, "IncorrectResult")
        if found and found[1] is not None:
            out["IncorrectResult"] = expect_scalar(found[1], child_path(path, found[0]))
        found = lookup(fields, "RemediationDate")
        if found and found[1] not in (None, ""):
            out["RemediationDate"] = expect_scalar(found[1], child_path(path, found[0]))
        return out

    def _import_exclusions(
        self, product: ProductEntry, node: Any, path: str
    ) -> dict[str, dict[str, ExclusionFieldSet]]:
        policies = expect_mapping(node, path)
        section: dict[str, dict[str, ExclusionFieldSet]] = {}
        for policy_id, body in policies.items():
            policy_path = child_path(path, policy_id)
            entry = product.policy(policy_id)
            if entry is None or not entry.supports_exclusions:
                logger.debug("Ignoring '{}': no exclusion type in catalog", policy_path)
                continue
            etype = self.catalog.exclusion_type(entry.exclusion_type)
            found = lookup(expect_mapping(body, policy_path), etype.group_name)
            if found is None:
                continue
            group_path = child_path(policy_path, found[0])
            fieldset: ExclusionFieldSet = {}
            for field_name, value in expect_mapping(found[1], group_path).items():
                items = expect_string_list(value, child_path(group_path, field_name))
                declared = etype.field(field_name)
                if declared is not None and declared.kind == FieldKind.SCALAR and len(items) == 1:
                    fieldset[field_name] = items[0]
                else:
                    fieldset[field_name] = items
            if fieldset:
                section.setdefault(entry.id, {})[etype.name] = fieldset
        return section


def _warn(
    report: ValidationReport | None, code: WarningCode, message: str, policy_id: str | None = None
) -> None:
    if report is not None:
        report.add(code, message, policy_id)
    else:
        logger.warning(message)


def _build_entry(
    entry_type: type[BaseModel],
    fields: dict[str, Any],
    path: str,
    policy_id: str,
    report: ValidationReport | None,
) -> BaseModel:
    """Validate one Omit/Annotate entry, leaving unusable fields unset."""
    try:
        return entry_type.model_validate(fields)
    except ValidationError as e:
        rejected = set()
        for error in e.errors():
            name = str(error["loc"][0])
            rejected.add(name)
            _warn(
                report,
                WarningCode.INVALID_VALUE,
                f"'{child_path(path, name)}' has invalid value {fields.get(name)!r}; expected "
                f"{_FIELD_FORMATS.get(name, error['msg'])}. The field is left unset.",
                policy_id,
            )
        return entry_type.model_validate({k: v for k, v in fields.items() if k not in rejected})
