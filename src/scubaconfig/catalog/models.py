"""Pydantic models for the read-only reference catalog."""

from enum import StrEnum

from pydantic import BaseModel, Field, field_validator, model_validator

NO_EXCLUSION = "none"


class FieldKind(StrEnum):
    """Shape of an exclusion field value."""

    SCALAR = "scalar"
    ARRAY = "array"


class ValueType(StrEnum):
    """Kind of value an exclusion field holds."""

    EMAIL = "email"
    GUID = "guid"
    DOMAIN = "domain"
    STRING = "string"
    SEMICOLON_LIST = "semicolon-list"


class ExclusionField(BaseModel):
    """One field of an exclusion type."""

    name: str = Field(min_length=1)
    kind: FieldKind = FieldKind.ARRAY
    value_type: ValueType = ValueType.STRING
    description: str = ""

    model_config = {"frozen": True}


class ExclusionType(BaseModel):
    """
    Schema for exclusion data attached to a policy.

    ``group_name`` is the key the field map lives under in a
    configuration document; ``name`` is how the model refers to it.
    """

    name: str = Field(min_length=1)
    group_name: str = Field(min_length=1)
    description: str = ""
    fields: list[ExclusionField] = Field(default_factory=list)

    model_config = {"frozen": True}

    def field(self, name: str) -> ExclusionField | None:
        """Look up a field by name."""
        for item in self.fields:
            if item.name == name:
                return item
        return None


class PolicyEntry(BaseModel):
    """A single policy control."""

    id: str = Field(min_length=1)
    name: str = ""
    rationale: str = ""
    exclusion_type: str = NO_EXCLUSION

    model_config = {"frozen": True}

    @property
    def supports_exclusions(self) -> bool:
        return self.exclusion_type != NO_EXCLUSION


class ProductEntry(BaseModel):
    """A product and its policies."""

    code: str = Field(min_length=1)
    display_name: str
    supports_exclusions: bool = False
    policies: list[PolicyEntry] = Field(default_factory=list)

    model_config = {"frozen": True}

    @field_validator("code")
    @classmethod
    def lowercase_code(cls, v: str) -> str:
        """Product codes are stored lowercase."""
        return v.lower()

    @property
    def section_key(self) -> str:
        """Key used for this product's exclusion section in a document."""
        return self.code.capitalize()

    def policy(self, policy_id: str) -> PolicyEntry | None:
        """Look up a policy by id, ignoring case."""
        folded = policy_id.casefold()
        for entry in self.policies:
            if entry.id.casefold() == folded:
                return entry
        return None


class ReferenceCatalog(BaseModel):
    """Products, policies and exclusion-type schemas known to the tool."""

    products: list[ProductEntry] = Field(default_factory=list)
    exclusion_types: list[ExclusionType] = Field(default_factory=list)

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def check_references(self) -> "ReferenceCatalog":
        """Every policy must name a declared exclusion type."""
        codes = [product.code for product in self.products]
        if len(codes) != len(set(codes)):
            raise ValueError("product codes must be unique")
        known = {etype.name for etype in self.exclusion_types}
        for product in self.products:
            for entry in product.policies:
                if entry.supports_exclusions and entry.exclusion_type not in known:
                    raise ValueError(
                        f"policy {entry.id} declares unknown exclusion type "
                        f"'{entry.exclusion_type}'"
                    )
        return self

    @property
    def product_codes(self) -> list[str]:
        """All product codes, in catalog order."""
        return [product.code for product in self.products]

    def product(self, code: str) -> ProductEntry | None:
        """Look up a product by code, ignoring case."""
        folded = code.casefold()
        for product in self.products:
            if product.code == folded:
                return product
        return None

    def product_for_policy(self, policy_id: str) -> ProductEntry | None:
        """Return the first product whose policy list contains ``policy_id``."""
        for product in self.products:
            if product.policy(policy_id) is not None:
                return product
        return None

    def policy(self, policy_id: str) -> PolicyEntry | None:
        """Look up a policy across all products."""
        product = self.product_for_policy(policy_id)
        return product.policy(policy_id) if product else None

    def exclusion_type(self, name: str) -> ExclusionType | None:
        """Look up an exclusion type by name."""
        for etype in self.exclusion_types:
            if etype.name == name:
                return etype
        return None
