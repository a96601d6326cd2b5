"""ConfigModel to document text rendering.

Output is deterministic: sections always appear in the same order,
products follow catalog order and policy ids are sorted naturally
within each product. Sections with nothing to say are left out.
"""

import re
from pathlib import Path
from typing import Any

from loguru import logger

from scubaconfig.catalog.models import FieldKind, ReferenceCatalog
from scubaconfig.document.importer import ANNOTATE_KEY, OMIT_KEY, PRODUCT_NAMES_KEY
from scubaconfig.document.writer import (
    Blank,
    Comment,
    DocumentWriter,
    Mapping,
    Node,
    Scalar,
    Sequence,
)
from scubaconfig.models.config import (
    DEFAULTS,
    PLACEHOLDERS,
    WILDCARD,
    Annotation,
    ConfigModel,
    ExclusionFieldSet,
    Omission,
    policy_product,
)

HEADER = (
    "Compliance assessment configuration",
    "Generated by scubaconfig; comments are rewritten on every export.",
)


def policy_sort_key(policy_id: str) -> list[Any]:
    """Sort key that orders MS.AAD.2.1v1 before MS.AAD.10.1v1."""
    return [int(part) if part.isdigit() else part.lower() for part in re.split(r"(\d+)", policy_id)]


class DocumentExporter:
    """Renders ConfigModel instances as configuration documents."""

    def __init__(self, catalog: ReferenceCatalog) -> None:
        self.catalog = catalog

    def export(self, model: ConfigModel) -> str:
        """Render ``model`` as YAML text."""
        doc = DocumentWriter()
        for line in HEADER:
            doc.add(Comment(line))
        doc.blank()

        doc.extend(self._free_text(model))
        doc.blank()
        doc.add(self._product_names(model))
        doc.extend(self._settings(model))
        doc.blank()

        exclusions = self._exclusions(model)
        if exclusions:
            doc.add(Comment("Exclusions"))
            doc.extend(exclusions)
            doc.blank()

        annotations = self._policy_section(model.annotations, self._annotation_body)
        if annotations:
            doc.add(Mapping(ANNOTATE_KEY, annotations))
            doc.blank()

        omissions = self._policy_section(model.omissions, self._omission_body)
        if omissions:
            doc.add(Mapping(OMIT_KEY, omissions))

        return doc.render()

    def export_file(self, model: ConfigModel, path: Path) -> None:
        """Render ``model`` and write it to ``path``."""
        path.write_text(self.export(model), encoding="utf-8")
        logger.info("Configuration written to {}", path)

    def _free_text(self, model: ConfigModel) -> list[Node]:
        nodes: list[Node] = []
        for key in PLACEHOLDERS:
            value = getattr(model, ConfigModel.setting_keys()[key])
            if value and value != PLACEHOLDERS[key]:
                nodes.append(Scalar(key, value))
        return nodes

    def _product_names(self, model: ConfigModel) -> Node:
        if set(model.product_names) == set(self.catalog.product_codes):
            return Sequence(PRODUCT_NAMES_KEY, [WILDCARD])
        return Sequence(PRODUCT_NAMES_KEY, sorted(model.product_names))

    def _settings(self, model: ConfigModel) -> list[Node]:
        nodes: list[Node] = []
        for key, attr in ConfigModel.setting_keys().items():
            if key in PLACEHOLDERS:
                continue
            value = getattr(model, attr)
            if value != DEFAULTS[key]:
                nodes.append(Scalar(key, value))
        return nodes

    def _exclusions(self, model: ConfigModel) -> list[Node]:
        nodes: list[Node] = []
        known = self.catalog.product_codes
        extra = sorted(code for code in model.exclusions if code not in known)
        for code in known + extra:
            policies = model.exclusions.get(code) or {}
            product = self.catalog.product(code)
            section_key = product.section_key if product else code.capitalize()

            children: list[Node] = []
            order = [p.id for p in product.policies] if product else []
            policy_ids = [pid for pid in order if pid in policies]
            policy_ids += sorted((pid for pid in policies if pid not in order), key=policy_sort_key)
            for policy_id in policy_ids:
                groups = [
                    self._exclusion_group(type_name, fieldset)
                    for type_name, fieldset in policies[policy_id].items()
                    if fieldset
                ]
                if not groups:
                    continue
                policy = product.policy(policy_id) if product else None
                children.append(Comment(policy.name if policy else policy_id))
                children.append(Mapping(policy_id, groups))
            if children:
                nodes.append(Mapping(section_key, children))
        return nodes

    def _exclusion_group(self, type_name: str, fieldset: ExclusionFieldSet) -> Node:
        etype = self.catalog.exclusion_type(type_name)
        if etype is None:
            logger.warning("Exclusion type '{}' is not in the catalog; writing it as-is", type_name)
            return Mapping(type_name, [_field_node(name, value) for name, value in fieldset.items()])

        declared = [f.name for f in etype.fields if f.name in fieldset]
        undeclared = sorted(name for name in fieldset if etype.field(name) is None)
        fields: list[Node] = []
        for name in declared + undeclared:
            value = fieldset[name]
            field = etype.field(name)
            if field is not None and field.kind == FieldKind.SCALAR and not isinstance(value, list):
                fields.append(Sequence(name, [value]))
            else:
                fields.append(_field_node(name, value))
        return Mapping(etype.group_name, fields)

    def _policy_section(self, entries: dict[str, Any], render_body: Any) -> list[Node]:
        """Group entries by product in catalog order, then sort by policy id."""
        groups: dict[str, list[str]] = {}
        for policy_id in entries:
            groups.setdefault(policy_product(policy_id) or "", []).append(policy_id)

        known = [code for code in self.catalog.product_codes if code in groups]
        unknown = sorted(code for code in groups if code and code not in known)
        nodes: list[Node] = []
        for code in known + unknown + ([""] if "" in groups else []):
            product = self.catalog.product(code) if code else None
            if product is not None:
                label = product.display_name
            else:
                label = f"{code} (not in catalog)" if code else "Unrecognised policy ids"
            if nodes:
                nodes.append(Blank())
            nodes.append(Comment(label))
            for policy_id in sorted(groups[code], key=policy_sort_key):
                nodes.append(Mapping(policy_id, render_body(entries[policy_id])))
        return nodes

    def _annotation_body(self, annotation: Annotation) -> list[Node]:
        body: list[Node] = []
        if annotation.comment:
            body.append(Scalar("Comment", annotation.comment))
        if annotation.incorrect_result:
            body.append(Scalar("IncorrectResult", True))
        if annotation.remediation_date is not None:
            body.append(Scalar("RemediationDate", annotation.remediation_date))
        return body

    def _omission_body(self, omission: Omission) -> list[Node]:
        body: list[Node] = [Scalar("Rationale", omission.rationale)]
        if omission.expiration is not None:
            body.append(Scalar("Expiration", omission.expiration))
        return body


def _field_node(name: str, value: str | list[str]) -> Node:
    return Sequence(name, value if isinstance(value, list) else [value])
