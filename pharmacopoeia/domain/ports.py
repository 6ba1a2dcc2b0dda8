"""Domain Ports - Result Type, Error Taxonomy and Builder Contracts.

This module defines the Port interfaces (abstract contracts) that Adapters must implement
to turn a medicine document into the catalog domain model, together with the Result type
used to report the outcome of a build pass and the exception hierarchy raised inside it.

Error Policy:
    - Structural errors (unknown variant tag, missing required element, variant field
      misuse, unreadable document) abort the whole build pass
    - Scalar value errors (dates, numbers) are recoverable: lenient builders log them and
      leave the field unset, strict builders treat them as structural
    - Public build entry points never raise BuildError; they return a failed Result

Architecture:
    - Pure abstract interfaces with zero infrastructure dependencies
    - Adapters (XML builder, XSD validator) implement these ports
    - Domain Core is isolated from parser specifics (lxml, defusedxml)
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, FrozenSet, Generic, Optional, TypeVar, Union

from pharmacopoeia.domain.medicine import Medicine

# Type variable for Result generic
T = TypeVar('T')


# ============================================================================
# Result Type for Success/Failure Communication
# ============================================================================

@dataclass(frozen=True)
class Result(Generic[T]):
    """Result type for communicating success or failure without exceptions.

    A build pass either produces the complete record set or fails atomically;
    this type carries whichever of the two happened, so callers never confuse
    an empty-but-successful catalog with a failed one.

    Attributes:
        success: True if the operation succeeded, False otherwise
        value: The successful result value (only present if success=True)
        error: Error message (only present if success=False)
        error_type: Type of error (UnknownVariantError, DateFormatError, etc.)
        error_details: Additional error context (element path, value, record index)

    Example:
        ```python
        result = builder.build(root)
        if result.is_success():
            for medicine in result.value:
                ...
        else:
            log_error(result.error_type, result.error, result.error_details)
        ```
    """

    success: bool
    value: Optional[T] = None
    error: Optional[str] = None
    error_type: Optional[str] = None
    error_details: Optional[dict] = None

    @classmethod
    def success_result(cls, value: T) -> 'Result[T]':
        """Create a successful result.

        Parameters:
            value: The successful result value

        Returns:
            Result: Success result with the value
        """
        return cls(
            success=True,
            value=value,
            error=None,
            error_type=None,
            error_details=None
        )

    @classmethod
    def failure_result(
        cls,
        error: Union[str, Exception],
        error_type: Optional[str] = None,
        error_details: Optional[dict] = None
    ) -> 'Result[T]':
        """Create a failure result.

        Parameters:
            error: Error message or exception
            error_type: Type of error (e.g., "UnknownVariantError")
            error_details: Additional context (path, value, record_index, etc.)

        Returns:
            Result: Failure result with error information
        """
        error_message = str(error) if isinstance(error, Exception) else error
        error_type_name = error_type or (type(error).__name__ if isinstance(error, Exception) else "UnknownError")

        return cls(
            success=False,
            value=None,
            error=error_message,
            error_type=error_type_name,
            error_details=error_details or {}
        )

    def is_success(self) -> bool:
        """Check if result is successful."""
        return self.success

    def is_failure(self) -> bool:
        """Check if result is a failure."""
        return not self.success


# ============================================================================
# Custom Exception Hierarchy
# ============================================================================

class BuildError(Exception):
    """Base exception for everything that can go wrong while building a catalog.

    Attributes:
        path: Element path of the offending node (e.g. "antibiotic[1]/version[2]/pack[1]")
        details: Additional error details for diagnosis
    """

    def __init__(self, message: str, path: Optional[str] = None, details: Optional[dict] = None):
        super().__init__(message)
        self.path = path
        self.details = details or {}

    def to_details(self) -> dict:
        """Flatten the error context into a Result-friendly dictionary."""
        details = dict(self.details)
        if self.path is not None:
            details['path'] = self.path
        return details


class DocumentLoadError(BuildError):
    """Raised when the source document cannot be read or is not well-formed XML.

    Attributes:
        source: The source identifier that failed to load
    """

    def __init__(self, message: str, source: Optional[str] = None, details: Optional[dict] = None):
        super().__init__(message, path=None, details=details)
        self.source = source

    def to_details(self) -> dict:
        details = super().to_details()
        if self.source is not None:
            details['source'] = self.source
        return details


class UnknownVariantError(BuildError):
    """Raised when a top-level element tag does not name a known medicine variant.

    Attributes:
        tag: The unrecognized tag token
    """

    def __init__(self, message: str, tag: str, path: Optional[str] = None):
        super().__init__(message, path=path, details={'tag': tag})
        self.tag = tag


class MissingRequiredElementError(BuildError):
    """Raised when a required child element or attribute is absent.

    Attributes:
        name: Tag or attribute name that was expected
    """

    def __init__(self, message: str, name: str, path: Optional[str] = None):
        super().__init__(message, path=path, details={'missing': name})
        self.name = name


class VariantFieldError(BuildError):
    """Raised when a field is applied to a record type that does not declare it.

    This is a contract violation (e.g. a narcotic flag on an antibiotic) and is
    always fatal, independent of the scalar value policy.

    Attributes:
        variant: Name of the record type
        field: Field that was applied
    """

    def __init__(self, message: str, variant: str, field: str, path: Optional[str] = None):
        super().__init__(message, path=path, details={'variant': variant, 'field': field})
        self.variant = variant
        self.field = field


class RecordValidationError(BuildError):
    """Raised when a completed draft is rejected by model validation."""
    pass


class ValueFormatError(BuildError):
    """Raised when a scalar value cannot be parsed into its typed form.

    Attributes:
        value: The raw text that failed to parse
    """

    def __init__(self, message: str, value: Any, path: Optional[str] = None, details: Optional[dict] = None):
        merged = {'value': value}
        merged.update(details or {})
        super().__init__(message, path=path, details=merged)
        self.value = value


class DateFormatError(ValueFormatError):
    """Raised when text does not match the expected calendar date format."""
    pass


class NumberFormatError(ValueFormatError):
    """Raised when text is not a valid (non-negative, finite) number."""
    pass


# ============================================================================
# Ports
# ============================================================================

class DocumentBuilderPort(ABC):
    """Abstract contract for catalog builders.

    A builder turns one parsed document into the complete set of medicine
    records in a single synchronous pass. The pass is all-or-nothing: either
    every top-level medicine element is materialized, or the Result is a
    failure describing the first fatal error.

    Example Usage:
        ```python
        builder = XMLMedicineBuilder()
        result = builder.build_from_source("medicins.xml")
        if result.is_success():
            catalog = result.value
        ```
    """

    @abstractmethod
    def build(self, root: Any) -> Result[FrozenSet[Medicine]]:
        """Build the record set from an already parsed document root.

        Parameters:
            root: Root element of the parsed document

        Returns:
            Result[FrozenSet[Medicine]]: The distinct records, or the failure
        """
        pass

    @abstractmethod
    def build_from_source(self, source: str) -> Result[FrozenSet[Medicine]]:
        """Load a document from a source and build the record set from it.

        Parameters:
            source: Path to the document

        Returns:
            Result[FrozenSet[Medicine]]: The distinct records, or the failure
            (including DocumentLoadError when the source cannot be read)
        """
        pass

    @abstractmethod
    def can_build(self, source: str) -> bool:
        """Check if this builder can handle the given source.

        Parameters:
            source: Source identifier to check

        Returns:
            bool: True if this builder can handle the source, False otherwise
        """
        pass


class SchemaValidatorPort(ABC):
    """Abstract contract for preflight document validation.

    Validation is a pure pass/fail check run before (and independently of)
    the build; builders never depend on it internally.
    """

    @abstractmethod
    def validate(self, document: str, schema: str) -> bool:
        """Check a document against a schema.

        Parameters:
            document: Path to the document
            schema: Path to the schema

        Returns:
            bool: True if the document conforms, False otherwise
        """
        pass
