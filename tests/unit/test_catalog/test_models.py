"""Tests for reference catalog models."""

import pytest
from pydantic import ValidationError

from scubaconfig.catalog.models import (
    ExclusionType,
    FieldKind,
    PolicyEntry,
    ProductEntry,
    ReferenceCatalog,
    ValueType,
)


class TestProductEntry:
    """Tests for ProductEntry."""

    def test_code_is_lowercased(self) -> None:
        """Product codes are normalized to lowercase."""
        product = ProductEntry(code="EXO", display_name="Exchange Online")
        assert product.code == "exo"

    def test_section_key(self) -> None:
        """Documents use the capitalized code as the section key."""
        product = ProductEntry(code="defender", display_name="Defender")
        assert product.section_key == "Defender"

    def test_policy_lookup_ignores_case(self) -> None:
        """Policy lookup is case-insensitive."""
        product = ProductEntry(
            code="exo",
            display_name="Exchange Online",
            policies=[PolicyEntry(id="MS.EXO.1.1v1", name="Forwarding")],
        )
        assert product.policy("ms.exo.1.1V1").id == "MS.EXO.1.1v1"
        assert product.policy("MS.EXO.9.9v1") is None


class TestPolicyEntry:
    """Tests for PolicyEntry."""

    def test_defaults_to_no_exclusion(self) -> None:
        """Policies without an exclusion type do not support exclusions."""
        entry = PolicyEntry(id="MS.TEAMS.1.1v1")
        assert entry.exclusion_type == "none"
        assert entry.supports_exclusions is False

    def test_supports_exclusions(self) -> None:
        """A declared exclusion type enables exclusions."""
        entry = PolicyEntry(id="MS.AAD.1.1v1", exclusion_type="cap_exclusions")
        assert entry.supports_exclusions is True


class TestExclusionType:
    """Tests for ExclusionType."""

    def test_field_defaults(self) -> None:
        """Fields default to string arrays."""
        etype = ExclusionType(name="t", group_name="T", fields=[{"name": "Values"}])
        field = etype.field("Values")
        assert field.kind == FieldKind.ARRAY
        assert field.value_type == ValueType.STRING
        assert etype.field("Missing") is None

    def test_rejects_unknown_value_type(self) -> None:
        """Value types are limited to the known kinds."""
        with pytest.raises(ValidationError):
            ExclusionType(
                name="t", group_name="T", fields=[{"name": "x", "value_type": "phone"}]
            )


class TestReferenceCatalog:
    """Tests for ReferenceCatalog lookups and validation."""

    def test_product_codes_in_catalog_order(self, catalog: ReferenceCatalog) -> None:
        """Product codes keep catalog order."""
        assert catalog.product_codes == ["aad", "exo", "teams"]

    def test_product_lookup_ignores_case(self, catalog: ReferenceCatalog) -> None:
        """Products are found regardless of key case."""
        assert catalog.product("Aad").code == "aad"
        assert catalog.product("EXO").code == "exo"
        assert catalog.product("gmail") is None

    def test_product_for_policy(self, catalog: ReferenceCatalog) -> None:
        """The owning product is found by scanning policy lists."""
        assert catalog.product_for_policy("MS.EXO.4.3v1").code == "exo"
        assert catalog.product_for_policy("MS.GMAIL.1.1v1") is None

    def test_policy_lookup(self, catalog: ReferenceCatalog) -> None:
        """Policies are found across products."""
        assert catalog.policy("MS.AAD.1.1v1").exclusion_type == "cap_exclusions"
        assert catalog.policy("MS.AAD.9.9v9") is None

    def test_exclusion_type_lookup(self, catalog: ReferenceCatalog) -> None:
        """Exclusion types are found by name, not group name."""
        assert catalog.exclusion_type("cap_exclusions").group_name == "CapExclusions"
        assert catalog.exclusion_type("CapExclusions") is None

    def test_rejects_undeclared_exclusion_type(self) -> None:
        """Policies must reference declared exclusion types."""
        with pytest.raises(ValidationError) as exc_info:
            ReferenceCatalog(
                products=[
                    {
                        "code": "aad",
                        "display_name": "AAD",
                        "policies": [{"id": "MS.AAD.1.1v1", "exclusion_type": "missing"}],
                    }
                ]
            )
        assert "unknown exclusion type 'missing'" in str(exc_info.value)

    def test_rejects_duplicate_products(self) -> None:
        """Product codes must be unique."""
        with pytest.raises(ValidationError):
            ReferenceCatalog(
                products=[
                    {"code": "aad", "display_name": "A"},
                    {"code": "AAD", "display_name": "B"},
                ]
            )
