"""Medicine Catalog Schema Definitions.

This module defines the canonical data models for the medicine catalog: the
polymorphic medicine record and the version, certificate, pack and dosage
records nested inside it.

Equality Contract:
    - Every model is frozen: immutable after construction and hashable
    - Equality and hashing are based purely on field values, never on identity
    - Records of different variants never compare equal, even with equal fields
    - Collections are frozensets, so value-equal duplicates collapse to one entry

Architecture:
    - Pure domain models with zero infrastructure dependencies
    - Models are validated by Pydantic V2 at construction time
    - Builders assemble field values in a draft and construct the model once
"""

from datetime import date
from typing import ClassVar, Optional

from pydantic import BaseModel, ConfigDict, Field


class CatalogModel(BaseModel):
    """Base for all catalog records: frozen, hashable, no unknown fields."""

    model_config = ConfigDict(frozen=True, extra="forbid")


class Certificate(CatalogModel):
    """Registration certificate of a medicine version.

    Registration date is expected to precede the expiry date, but this is
    not enforced here.

    Parameters:
        registered_by: Issuing authority
        registration_date: Date of registration
        expire_date: Date the certificate expires
    """

    registered_by: Optional[str] = Field(None, description="Issuing authority")
    registration_date: Optional[date] = Field(None, description="Registration date")
    expire_date: Optional[date] = Field(None, description="Expiry date")


class Pack(CatalogModel):
    """Packaging option of a medicine version.

    Parameters:
        size: Optional size descriptor (e.g. "10")
        quantity: Number of packs
        price: Unit price
    """

    size: Optional[str] = Field(None, description="Size descriptor")
    quantity: Optional[int] = Field(None, ge=0, description="Quantity (non-negative)")
    price: Optional[float] = Field(None, ge=0, description="Unit price (non-negative)")


class Dosage(CatalogModel):
    """Free-form dosage of a medicine version (e.g. "500mg", "twice a day")."""

    amount: Optional[str] = Field(None, description="Amount per intake")
    frequency: Optional[str] = Field(None, description="Intake frequency")


class Version(CatalogModel):
    """A marketed version of a medicine.

    Parameters:
        trade_name: Trade name the version is sold under
        producer: Manufacturer
        form: Pharmaceutical form (tablets, capsules, ...)
        certificate: Registration certificate (owned, 1:1)
        dosage: Dosage (owned, 1:1)
        packs: Packaging options (owned, 1:N, unordered)
    """

    trade_name: str = Field(..., description="Trade name")
    producer: str = Field(..., description="Producer")
    form: str = Field(..., description="Pharmaceutical form")
    certificate: Certificate = Field(..., description="Registration certificate")
    dosage: Dosage = Field(..., description="Dosage")
    packs: frozenset[Pack] = Field(default_factory=frozenset, description="Packaging options")


class Medicine(CatalogModel):
    """Common part of every medicine variant.

    Concrete variants add exactly one typed field, named by ``variant_field``.

    Parameters:
        name: International name of the medicine
        cas: CAS registry number
        drug_bank: DrugBank identifier
        pharm: Pharmacological description
        versions: Marketed versions
    """

    variant_field: ClassVar[Optional[str]] = None

    name: str = Field(..., min_length=1, description="Medicine name")
    cas: Optional[str] = Field(None, description="CAS registry number")
    drug_bank: Optional[str] = Field(None, description="DrugBank identifier")
    pharm: str = Field(..., description="Pharmacological description")
    versions: frozenset[Version] = Field(default_factory=frozenset, description="Marketed versions")

    @property
    def variant_value(self):
        """Value of the variant-specific field, or None for the base record."""
        if self.variant_field is None:
            return None
        return getattr(self, self.variant_field)


class Antibiotic(Medicine):
    """Antibiotic; ``recipe`` tells whether a prescription is required."""

    variant_field: ClassVar[Optional[str]] = "recipe"

    recipe: Optional[bool] = Field(None, description="Prescription required")


class Vitamin(Medicine):
    """Vitamin; ``solution`` names the solvent it is sold in."""

    variant_field: ClassVar[Optional[str]] = "solution"

    solution: Optional[str] = Field(None, description="Solution type")


class Analgetic(Medicine):
    """Analgetic; ``narcotic`` flags controlled substances."""

    variant_field: ClassVar[Optional[str]] = "narcotic"

    narcotic: Optional[bool] = Field(None, description="Narcotic substance")
