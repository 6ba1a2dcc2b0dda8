"""Adapters layer for Pharmacopoeia.

This module contains the XML adapters: the document loader, the XSD
validator and the catalog builder. Adapters implement Port interfaces
defined in the domain layer and convert parser-specific failures into
domain errors.
"""

from pharmacopoeia.adapters.xml_builder import XMLMedicineBuilder
from pharmacopoeia.adapters.xml_loader import load_document, parse_document
from pharmacopoeia.adapters.xml_validator import XSDValidator, validate

__all__ = ["XMLMedicineBuilder", "XSDValidator", "load_document", "parse_document", "validate"]
