"""Field Dispatch Tables.

Static mappings from element tag and attribute names to the semantic fields
they populate. Names are compared in a canonical form (see normalize_name), so
"registeredBy", "registered-by" and "REGISTERED_BY" all resolve to the same tag.

Two name tables exist, one for element tags and one for attribute names. On top
of them, per-record tables say which model field a tag or attribute fills and
which parser its value goes through.
"""

from enum import Enum
from typing import Dict, NamedTuple, Optional


class ValueKind(str, Enum):
    """Parser selector for a field value."""
    TEXT = "text"
    DATE = "date"
    INTEGER = "integer"
    DOUBLE = "double"
    BOOLEAN = "boolean"


class ElementTag(str, Enum):
    """Element tags of a medicine document (values are the canonical spellings)."""
    PHARM = "pharm"
    VERSION = "version"
    PRODUCER = "producer"
    FORM = "form"
    CERTIFICATE = "certificate"
    PACK = "pack"
    DOSAGE = "dosage"
    REGISTERED_BY = "registeredBy"
    REGISTRATION_DATE = "registrationDate"
    EXPIRE_DATE = "expireDate"
    QUANTITY = "quantity"
    PRICE = "price"
    AMOUNT = "amount"
    FREQUENCY = "frequency"


class AttributeName(str, Enum):
    """Attribute names of a medicine document (values are the canonical spellings)."""
    NAME = "name"
    CAS = "cas"
    DRUG_BANK = "drug-bank"
    RECIPE = "recipe"
    SOLUTION = "solution"
    NARCOTIC = "narcotic"
    TRADE_NAME = "trade-name"
    SIZE = "size"


class FieldSpec(NamedTuple):
    """Target of a dispatch: model field name, parser kind and optional lower bound."""
    field: str
    kind: ValueKind
    minimum: Optional[float] = None


def normalize_name(raw: str) -> str:
    """Reduce a tag or attribute name to its canonical lookup key.

    Drops any "{namespace}" or "prefix:" qualifier, lowercases, and removes
    "-", "_" and "." separators.
    """
    name = str(raw)
    if name.startswith("{"):
        name = name.split("}", 1)[-1]
    elif ":" in name:
        name = name.rsplit(":", 1)[-1]
    return name.lower().replace("-", "").replace("_", "").replace(".", "")


# Spellings found in older documents
_ELEMENT_ALIASES: Dict[str, ElementTag] = {
    "registredby": ElementTag.REGISTERED_BY,
    "registreddate": ElementTag.REGISTRATION_DATE,
    "expirydate": ElementTag.EXPIRE_DATE,
}

ELEMENT_TABLE: Dict[str, ElementTag] = {normalize_name(tag.value): tag for tag in ElementTag}
ELEMENT_TABLE.update(_ELEMENT_ALIASES)

ATTRIBUTE_TABLE: Dict[str, AttributeName] = {normalize_name(attr.value): attr for attr in AttributeName}


def lookup_element(tag: str) -> Optional[ElementTag]:
    """Resolve an element tag to its semantic tag, or None if unknown."""
    return ELEMENT_TABLE.get(normalize_name(tag))


def lookup_attribute(name: str) -> Optional[AttributeName]:
    """Resolve an attribute name to its semantic attribute, or None if unknown."""
    return ATTRIBUTE_TABLE.get(normalize_name(name))


# ============================================================================
# Per-record dispatch tables
# ============================================================================

MEDICINE_ATTRIBUTES: Dict[AttributeName, FieldSpec] = {
    AttributeName.NAME: FieldSpec("name", ValueKind.TEXT),
    AttributeName.CAS: FieldSpec("cas", ValueKind.TEXT),
    AttributeName.DRUG_BANK: FieldSpec("drug_bank", ValueKind.TEXT),
    # variant-specific
    AttributeName.RECIPE: FieldSpec("recipe", ValueKind.BOOLEAN),
    AttributeName.SOLUTION: FieldSpec("solution", ValueKind.TEXT),
    AttributeName.NARCOTIC: FieldSpec("narcotic", ValueKind.BOOLEAN),
}

VERSION_ATTRIBUTES: Dict[AttributeName, FieldSpec] = {
    AttributeName.TRADE_NAME: FieldSpec("trade_name", ValueKind.TEXT),
}

PACK_ATTRIBUTES: Dict[AttributeName, FieldSpec] = {
    AttributeName.SIZE: FieldSpec("size", ValueKind.TEXT),
}

CERTIFICATE_FIELDS: Dict[ElementTag, FieldSpec] = {
    ElementTag.REGISTERED_BY: FieldSpec("registered_by", ValueKind.TEXT),
    ElementTag.REGISTRATION_DATE: FieldSpec("registration_date", ValueKind.DATE),
    ElementTag.EXPIRE_DATE: FieldSpec("expire_date", ValueKind.DATE),
}

PACK_FIELDS: Dict[ElementTag, FieldSpec] = {
    ElementTag.QUANTITY: FieldSpec("quantity", ValueKind.INTEGER, minimum=0),
    ElementTag.PRICE: FieldSpec("price", ValueKind.DOUBLE, minimum=0),
}

DOSAGE_FIELDS: Dict[ElementTag, FieldSpec] = {
    ElementTag.AMOUNT: FieldSpec("amount", ValueKind.TEXT),
    ElementTag.FREQUENCY: FieldSpec("frequency", ValueKind.TEXT),
}
