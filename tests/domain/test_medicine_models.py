"""Unit tests for the medicine catalog models.

These tests pin down the equality contract the catalog depends on: records
are immutable, compare and hash by value, and never compare equal across
variants.
"""

from datetime import date

import pytest
from pydantic import ValidationError

from pharmacopoeia.domain.medicine import (
    Analgetic,
    Antibiotic,
    Certificate,
    Dosage,
    Medicine,
    Pack,
    Version,
    Vitamin,
)


def make_version(trade_name="Amoxil", packs=None):
    return Version(
        trade_name=trade_name,
        producer="GlaxoSmithKline",
        form="capsules",
        certificate=Certificate(
            registered_by="FDA",
            registration_date=date(2015, 3, 1),
            expire_date=date(2025, 3, 1),
        ),
        dosage=Dosage(amount="500mg", frequency="every 8 hours"),
        packs=frozenset(packs if packs is not None else [Pack(size="10", quantity=3, price=9.99)]),
    )


class TestValueEquality:
    """Test value-based equality and hashing."""

    def test_equal_leaves_are_equal_and_hash_alike(self):
        """Test that leaf records with equal fields are interchangeable."""
        first = Dosage(amount="500mg", frequency="twice a day")
        second = Dosage(amount="500mg", frequency="twice a day")

        assert first == second
        assert hash(first) == hash(second)
        assert first is not second

    def test_unset_fields_take_part_in_equality(self):
        """Test that an unset field differs from a set one."""
        assert Pack(size="10", quantity=3, price=9.99) != Pack(quantity=3, price=9.99)
        assert Certificate() == Certificate()

    def test_duplicate_packs_collapse_in_set(self):
        """Test that value-equal packs collapse to one set entry."""
        packs = {Pack(size="10", quantity=3, price=9.99), Pack(size="10", quantity=3, price=9.99)}
        assert len(packs) == 1

    def test_nested_records_compare_by_value(self):
        """Test that equality recurses through versions, certificates and packs."""
        first = Antibiotic(name="Amoxicillin", pharm="antibacterial", versions=frozenset([make_version()]), recipe=True)
        second = Antibiotic(name="Amoxicillin", pharm="antibacterial", versions=frozenset([make_version()]), recipe=True)

        assert first == second
        assert len({first, second}) == 1

    def test_differing_nested_value_breaks_equality(self):
        """Test that a change deep in the tree makes records unequal."""
        cheap = make_version(packs=[Pack(size="10", quantity=3, price=9.99)])
        dear = make_version(packs=[Pack(size="10", quantity=3, price=19.99)])

        assert cheap != dear
        assert Vitamin(name="D3", pharm="x", versions=frozenset([cheap])) != \
            Vitamin(name="D3", pharm="x", versions=frozenset([dear]))

    def test_pack_order_does_not_matter(self):
        """Test that packs are an unordered collection."""
        a = Pack(size="10", quantity=1, price=1.0)
        b = Pack(size="20", quantity=2, price=2.0)
        assert make_version(packs=[a, b]) == make_version(packs=[b, a])

    def test_variants_never_equal_each_other(self):
        """Test that records of different variants are unequal even with equal common fields."""
        antibiotic = Antibiotic(name="X", pharm="p")
        vitamin = Vitamin(name="X", pharm="p")
        analgetic = Analgetic(name="X", pharm="p")

        assert antibiotic != vitamin
        assert vitamin != analgetic
        assert antibiotic != analgetic
        assert len({antibiotic, vitamin, analgetic}) == 3


class TestImmutability:
    """Test that records cannot change after construction."""

    def test_assignment_rejected(self):
        """Test that field assignment raises."""
        dosage = Dosage(amount="500mg", frequency="daily")
        with pytest.raises(ValidationError):
            dosage.amount = "250mg"

    def test_unknown_field_rejected(self):
        """Test that construction rejects fields the model does not declare."""
        with pytest.raises(ValidationError):
            Antibiotic(name="X", pharm="p", narcotic=True)

    def test_versions_are_frozenset(self):
        """Test that collections are stored as frozensets."""
        medicine = Analgetic(name="Morphine", pharm="opioid", versions=frozenset([make_version()]))
        assert isinstance(medicine.versions, frozenset)
        assert isinstance(next(iter(medicine.versions)).packs, frozenset)


class TestModelValidation:
    """Test model-level validation rules."""

    def test_negative_quantity_rejected(self):
        """Test that pack quantity must be non-negative."""
        with pytest.raises(ValidationError):
            Pack(quantity=-1)

    def test_negative_price_rejected(self):
        """Test that pack price must be non-negative."""
        with pytest.raises(ValidationError):
            Pack(price=-0.01)

    def test_zero_quantity_and_price_allowed(self):
        """Test boundary values."""
        pack = Pack(quantity=0, price=0.0)
        assert pack.quantity == 0
        assert pack.price == 0.0

    def test_empty_name_rejected(self):
        """Test that a medicine must have a non-empty name."""
        with pytest.raises(ValidationError):
            Antibiotic(name="", pharm="p")

    def test_version_requires_certificate_and_dosage(self):
        """Test that a version cannot be built without its owned leaves."""
        with pytest.raises(ValidationError):
            Version(trade_name="Amoxil", producer="GSK", form="capsules")

    def test_version_without_packs_allowed(self):
        """Test that packs default to an empty set."""
        version = make_version(packs=[])
        assert version.packs == frozenset()


class TestVariantField:
    """Test the variant-specific field accessors."""

    @pytest.mark.parametrize("record,field,value", [
        (Antibiotic(name="A", pharm="p", recipe=True), "recipe", True),
        (Vitamin(name="V", pharm="p", solution="oil"), "solution", "oil"),
        (Analgetic(name="N", pharm="p", narcotic=False), "narcotic", False),
    ])
    def test_variant_value(self, record, field, value):
        """Test that each variant exposes its one extra field."""
        assert record.variant_field == field
        assert record.variant_value == value

    def test_variant_value_defaults_to_none(self):
        """Test that an absent variant attribute is None."""
        assert Antibiotic(name="A", pharm="p").variant_value is None

    def test_base_record_has_no_variant_field(self):
        """Test the common part on its own."""
        medicine = Medicine(name="Generic", pharm="p")
        assert medicine.variant_field is None
        assert medicine.variant_value is None
