"""Pharmacopoeia: builds an immutable medicine catalog from XML documents."""

__version__ = "1.0.0"
