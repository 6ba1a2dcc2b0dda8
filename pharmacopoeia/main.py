"""Catalog ingestion entry point.

Combines the optional XSD preflight check with the catalog build: a document
that fails validation never reaches the builder.
"""

import logging
from pathlib import Path
from typing import FrozenSet, Optional, Union

from pharmacopoeia.adapters.xml_builder import XMLMedicineBuilder
from pharmacopoeia.adapters.xml_validator import XSDValidator
from pharmacopoeia.domain.medicine import Medicine
from pharmacopoeia.domain.ports import Result
from pharmacopoeia.infrastructure.settings import settings

logger = logging.getLogger(__name__)


def process_catalog(
    source: Union[str, Path],
    schema_path: Optional[Union[str, Path]] = None,
    validate_schema: bool = True,
    strict_values: Optional[bool] = None,
    builder: Optional[XMLMedicineBuilder] = None
) -> Result[FrozenSet[Medicine]]:
    """Validate (optionally) and build a medicine catalog from an XML file.

    Parameters:
        source: Path to the XML document
        schema_path: XSD for the preflight check (defaults to settings)
        validate_schema: Run the preflight check
        strict_values: Scalar failure policy for the builder (None = settings)
        builder: Builder to use instead of a fresh XMLMedicineBuilder

    Returns:
        Result[FrozenSet[Medicine]]: The catalog, or the failure. A failed
        preflight check yields error_type "SchemaValidationError" with the
        validator messages in error_details["errors"].
    """
    if validate_schema:
        schema = Path(schema_path) if schema_path else settings.schema_path
        validator = XSDValidator()
        if not validator.validate(source, schema):
            logger.error(
                f"Preflight validation of {source} against {schema} failed; build skipped",
                extra={'source': str(source), 'error_type': 'SchemaValidationError'}
            )
            return Result.failure_result(
                f"{source} does not conform to schema {schema}",
                error_type="SchemaValidationError",
                error_details={
                    'source': str(source),
                    'schema': str(schema),
                    'errors': list(validator.errors),
                }
            )

    if builder is None:
        builder = XMLMedicineBuilder(strict_values=strict_values)
    logger.info(f"Building catalog from {source} (strict_values={builder.strict_values})")
    return builder.build_from_source(str(source))
