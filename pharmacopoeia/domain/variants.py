"""Variant Factory and Record Drafts.

The medicine variants form a closed set: each tag token maps to exactly one
concrete model class, and new variants are added only by registering a new
token/class pair in VARIANT_REGISTRY.

Records are immutable, so builders accumulate field values in a RecordDraft and
freeze it once the element is complete. The draft checks that the record type
declares a field before accepting a value, so a variant-specific attribute on
the wrong variant raises VariantFieldError instead of slipping through.
"""

from enum import Enum
from typing import Any, Dict, Generic, Optional, Type, TypeVar

from pydantic import ValidationError as PydanticValidationError

from pharmacopoeia.domain.fields import normalize_name
from pharmacopoeia.domain.medicine import Analgetic, Antibiotic, CatalogModel, Medicine, Vitamin
from pharmacopoeia.domain.ports import RecordValidationError, UnknownVariantError, VariantFieldError

M = TypeVar('M', bound=CatalogModel)


class MedicineKind(str, Enum):
    """Tag tokens of the known medicine variants."""
    ANTIBIOTIC = "antibiotic"
    VITAMIN = "vitamin"
    ANALGETIC = "analgetic"


VARIANT_REGISTRY: Dict[MedicineKind, Type[Medicine]] = {
    MedicineKind.ANTIBIOTIC: Antibiotic,
    MedicineKind.VITAMIN: Vitamin,
    MedicineKind.ANALGETIC: Analgetic,
}

_KIND_TABLE: Dict[str, MedicineKind] = {normalize_name(kind.value): kind for kind in MedicineKind}


class RecordDraft(Generic[M]):
    """Mutable accumulator for the fields of one record under construction.

    Parameters:
        model: Record class the draft will be frozen into
        path: Element path of the source element (for error messages)
    """

    def __init__(self, model: Type[M], path: Optional[str] = None):
        self.model = model
        self.path = path
        self._values: Dict[str, Any] = {}

    @property
    def record_type(self) -> str:
        return self.model.__name__

    def supports(self, field: str) -> bool:
        """Check whether the record type declares ``field``."""
        return field in self.model.model_fields

    def ensure_supports(self, field: str, path: Optional[str] = None) -> None:
        """Raise VariantFieldError unless the record type declares ``field``."""
        if not self.supports(field):
            raise VariantFieldError(
                f"{self.record_type} has no field '{field}'",
                variant=self.record_type,
                field=field,
                path=path or self.path
            )

    def set(self, field: str, value: Any) -> None:
        """Assign a field value.

        Raises:
            VariantFieldError: If the record type does not declare the field
        """
        self.ensure_supports(field)
        self._values[field] = value

    def has(self, field: str) -> bool:
        return field in self._values

    def get(self, field: str, default: Any = None) -> Any:
        return self._values.get(field, default)

    def freeze(self) -> M:
        """Construct the immutable record from the accumulated values.

        Raises:
            RecordValidationError: If model validation rejects the values
        """
        try:
            return self.model(**self._values)
        except PydanticValidationError as e:
            raise RecordValidationError(
                f"{self.record_type} failed validation: {str(e)}",
                path=self.path,
                details={
                    'record_type': self.record_type,
                    'validation_errors': str(e),
                    'error_count': len(e.errors()),
                }
            ) from e

    def __repr__(self) -> str:
        return f"RecordDraft({self.record_type}, path={self.path!r}, fields={sorted(self._values)})"


def resolve_kind(tag: str) -> Optional[MedicineKind]:
    """Resolve a tag token to a medicine kind, or None if it names no variant."""
    return _KIND_TABLE.get(normalize_name(tag))


def variant_for(tag: str, path: Optional[str] = None) -> Type[Medicine]:
    """Return the model class registered for a tag token.

    Raises:
        UnknownVariantError: If the tag names no registered variant
    """
    kind = resolve_kind(tag)
    if kind is None:
        raise UnknownVariantError(
            f"Unknown medicine variant <{tag}>. "
            f"Known variants: {', '.join(k.value for k in VARIANT_REGISTRY)}",
            tag=tag,
            path=path
        )
    return VARIANT_REGISTRY[kind]


def create_variant(tag: str, path: Optional[str] = None) -> RecordDraft[Medicine]:
    """Return a fresh, empty draft of the variant named by ``tag``.

    Raises:
        UnknownVariantError: If the tag names no registered variant
    """
    return RecordDraft(variant_for(tag, path=path), path=path)
