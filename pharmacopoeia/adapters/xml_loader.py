"""XML Document Loader.

Reads a medicine document into a parsed element tree using defusedxml, which
refuses entity expansion and external references. Every failure (missing
file, oversized file, I/O error, malformed XML, forbidden construct) surfaces
as DocumentLoadError so the build can fail before any records are produced.
"""

import logging
from pathlib import Path
from typing import Any, Optional, Union

from defusedxml import DefusedXmlException
from defusedxml import ElementTree as SafeET
from defusedxml.ElementTree import ParseError as SafeParseError

from pharmacopoeia.domain.ports import DocumentLoadError
from pharmacopoeia.infrastructure.settings import settings

logger = logging.getLogger(__name__)


def load_document(source: Union[str, Path], max_size: Optional[int] = None) -> Any:
    """Load and parse an XML document from a file.

    Parameters:
        source: Path to the XML document
        max_size: Largest accepted file size in bytes (defaults to settings)

    Returns:
        Element: Root element of the parsed document

    Raises:
        DocumentLoadError: If the document cannot be read or parsed
    """
    source_path = Path(source)
    if not source_path.exists():
        raise DocumentLoadError(f"XML source not found: {source}", source=str(source))
    if not source_path.is_file():
        raise DocumentLoadError(f"XML source is not a file: {source}", source=str(source))

    limit = max_size if max_size is not None else settings.max_document_size
    file_size = source_path.stat().st_size
    if file_size > limit:
        raise DocumentLoadError(
            f"XML source {source} is {file_size} bytes, larger than the {limit} byte limit",
            source=str(source),
            details={'size': file_size, 'max_size': limit}
        )

    try:
        tree = SafeET.parse(str(source_path))
    except SafeParseError as e:
        raise DocumentLoadError(f"Invalid XML format in {source}: {str(e)}", source=str(source)) from e
    except DefusedXmlException as e:
        raise DocumentLoadError(
            f"Forbidden XML construct in {source}: {str(e)}",
            source=str(source),
            details={'reason': type(e).__name__}
        ) from e
    except OSError as e:
        raise DocumentLoadError(f"Cannot read XML source {source}: {str(e)}", source=str(source)) from e

    logger.debug(f"Loaded XML document {source} ({file_size} bytes)", extra={'source': str(source)})
    return tree.getroot()


def parse_document(text: Union[str, bytes], source: str = "<string>") -> Any:
    """Parse an XML document held in memory.

    Parameters:
        text: Document text
        source: Label used in error messages

    Returns:
        Element: Root element of the parsed document

    Raises:
        DocumentLoadError: If the text is not well-formed or uses forbidden constructs
    """
    try:
        return SafeET.fromstring(text)
    except SafeParseError as e:
        raise DocumentLoadError(f"Invalid XML format in {source}: {str(e)}", source=source) from e
    except DefusedXmlException as e:
        raise DocumentLoadError(
            f"Forbidden XML construct in {source}: {str(e)}",
            source=source,
            details={'reason': type(e).__name__}
        ) from e
