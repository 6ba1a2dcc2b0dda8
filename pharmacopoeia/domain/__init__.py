"""Domain layer for Pharmacopoeia.

This module contains the medicine catalog models, the field dispatch tables,
the variant factory and the typed value parsers.
All domain models are pure Python with no external dependencies beyond Pydantic.
"""

from .medicine import (
    Medicine,
    Antibiotic,
    Vitamin,
    Analgetic,
    Version,
    Certificate,
    Pack,
    Dosage,
)

__all__ = [
    "Medicine",
    "Antibiotic",
    "Vitamin",
    "Analgetic",
    "Version",
    "Certificate",
    "Pack",
    "Dosage",
]
