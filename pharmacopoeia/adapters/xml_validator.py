"""XSD Schema Validator.

Preflight pass/fail check of a medicine document against an XML Schema,
run before the build and independently of it.

Security Impact:
    - Documents and schemas are parsed with entity resolution and network
      access disabled
    - Malformed input fails validation instead of raising
"""

import logging
from pathlib import Path
from typing import List, Union

from lxml import etree

from pharmacopoeia.domain.ports import SchemaValidatorPort

logger = logging.getLogger(__name__)


class XSDValidator(SchemaValidatorPort):
    """Validates XML documents against an XSD using lxml.

    Attributes:
        errors: Messages collected by the most recent validate() call

    Example Usage:
        ```python
        validator = XSDValidator()
        if not validator.validate("medicins.xml", "medicins.xsd"):
            for message in validator.errors:
                print(message)
        ```
    """

    def __init__(self):
        self.errors: List[str] = []

    def _create_parser(self) -> etree.XMLParser:
        """Create secure XML parser.

        Returns:
            XMLParser: Parser with entity expansion and network access disabled
        """
        return etree.XMLParser(
            huge_tree=False,
            resolve_entities=False,
            no_network=True,
            recover=False,
        )

    def validate(self, document: Union[str, Path], schema: Union[str, Path]) -> bool:
        """Check a document against an XSD.

        Parameters:
            document: Path to the XML document
            schema: Path to the XSD

        Returns:
            bool: True if the document is valid; False if it is invalid or if
            either file cannot be read or parsed
        """
        self.errors = []
        try:
            xml_schema = etree.XMLSchema(etree.parse(str(schema), self._create_parser()))
            tree = etree.parse(str(document), self._create_parser())
            xml_schema.assertValid(tree)
            logger.info(f"{document} is valid", extra={'source': str(document)})
            return True
        except etree.DocumentInvalid as e:
            self.errors = [f"line {entry.line}: {entry.message}" for entry in e.error_log] or [str(e)]
            logger.error(
                f"Schema validation failed for {document}: {str(e)}",
                extra={'source': str(document), 'error_type': 'DocumentInvalid'}
            )
        except etree.XMLSchemaParseError as e:
            self.errors = [str(e)]
            logger.error(
                f"Invalid schema {schema}: {str(e)}",
                extra={'source': str(schema), 'error_type': 'XMLSchemaParseError'}
            )
        except etree.XMLSyntaxError as e:
            self.errors = [str(e)]
            logger.error(
                f"XML syntax error: {str(e)}",
                extra={'source': str(document), 'error_type': 'XMLSyntaxError'}
            )
        except OSError as e:
            self.errors = [str(e)]
            logger.error(
                f"I/O error during validation: {str(e)}",
                extra={'source': str(document), 'error_type': 'OSError'}
            )

        logger.info(f"{document} is invalid", extra={'source': str(document)})
        return False


def validate(document: Union[str, Path], schema: Union[str, Path]) -> bool:
    """Check a document against an XSD (see XSDValidator.validate)."""
    return XSDValidator().validate(document, schema)
