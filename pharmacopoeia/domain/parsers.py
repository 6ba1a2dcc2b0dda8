"""Typed Value Parsers.

Pure functions converting element text and attribute values into typed field
values. Each parser either returns the value or raises a ValueFormatError
subclass; deciding whether that aborts the build or leaves the field unset is
the builder's job, not the parser's.

The date format is always passed in explicitly so that no formatting state is
shared between builds.
"""

import logging
import math
import re
from datetime import date, datetime
from functools import lru_cache
from typing import Optional

from pharmacopoeia.domain.ports import DateFormatError, NumberFormatError

logger = logging.getLogger(__name__)

DEFAULT_DATE_FORMAT = "%Y-%m-%d"

_TRUE_TOKEN = "true"
_FALSE_TOKEN = "false"

# Fixed-width rendering of strptime directives; unlisted directives match loosely
_DIRECTIVE_PATTERNS = {
    "Y": "[0-9]{4}",
    "y": "[0-9]{2}",
    "m": "[0-9]{2}",
    "d": "[0-9]{2}",
    "j": "[0-9]{3}",
    "H": "[0-9]{2}",
    "I": "[0-9]{2}",
    "M": "[0-9]{2}",
    "S": "[0-9]{2}",
    "a": "[A-Za-z]+",
    "A": "[A-Za-z]+",
    "b": "[A-Za-z]+",
    "B": "[A-Za-z]+",
    "p": "[A-Za-z]+",
    "%": "%",
}


@lru_cache(maxsize=32)
def _format_pattern(date_format: str) -> re.Pattern:
    """Regex matching exactly the text strftime would produce for ``date_format``."""
    parts = []
    for literal, directive in re.findall(r"([^%]*)(?:%(.))?", date_format):
        parts.append(re.escape(literal))
        if directive:
            parts.append(_DIRECTIVE_PATTERNS.get(directive, ".+?"))
    return re.compile("".join(parts))


def _check_numeral(text: str, raw: str) -> None:
    """Reject spellings Python accepts but plain decimal notation does not."""
    if not text.isascii() or "_" in text:
        raise NumberFormatError(f"Not a plain decimal number: '{text}'", value=raw)


def parse_text(raw: str) -> str:
    """Return the text with surrounding whitespace removed."""
    return raw.strip()


def parse_date(raw: str, date_format: str = DEFAULT_DATE_FORMAT) -> date:
    """Parse a calendar date in a fixed format.

    The text must match the format exactly, including zero padding: with the
    default format "2020-01-15" is accepted, "2020-1-15" and "15-01-2020" are not.

    Parameters:
        raw: Date text
        date_format: strptime-style format

    Returns:
        date: Parsed calendar date (no time component)

    Raises:
        DateFormatError: If the text does not match the format
    """
    text = raw.strip()
    try:
        parsed = datetime.strptime(text, date_format).date()
    except ValueError as e:
        raise DateFormatError(
            f"Cannot parse date '{text}' with format '{date_format}': {e}",
            value=raw,
            details={'format': date_format}
        ) from e

    # strptime tolerates missing zero padding
    if not _format_pattern(date_format).fullmatch(text):
        raise DateFormatError(
            f"Date '{text}' does not match format '{date_format}' exactly",
            value=raw,
            details={'format': date_format}
        )
    return parsed


def parse_int(raw: str, minimum: Optional[int] = None) -> int:
    """Parse a decimal integer.

    Raises:
        NumberFormatError: If the text is not an integer or is below ``minimum``
    """
    text = raw.strip()
    _check_numeral(text, raw)
    try:
        value = int(text)
    except ValueError as e:
        raise NumberFormatError(f"Not an integer: '{text}'", value=raw) from e

    if minimum is not None and value < minimum:
        raise NumberFormatError(
            f"Integer {value} is below the minimum of {minimum}",
            value=raw,
            details={'minimum': minimum}
        )
    return value


def parse_float(raw: str, minimum: Optional[float] = None) -> float:
    """Parse a finite floating point number.

    Raises:
        NumberFormatError: If the text is not a finite number or is below ``minimum``
    """
    text = raw.strip()
    _check_numeral(text, raw)
    try:
        value = float(text)
    except ValueError as e:
        raise NumberFormatError(f"Not a number: '{text}'", value=raw) from e

    if not math.isfinite(value):
        raise NumberFormatError(f"Number is not finite: '{text}'", value=raw)

    if minimum is not None and value < minimum:
        raise NumberFormatError(
            f"Number {value} is below the minimum of {minimum}",
            value=raw,
            details={'minimum': minimum}
        )
    return value


def parse_bool(raw: str) -> bool:
    """Parse a boolean leniently.

    Only a case-insensitive "true" yields True. Every other token, including
    garbage, yields False; this is permissive parsing, not validation.
    """
    token = raw.strip().lower()
    if token == _TRUE_TOKEN:
        return True
    if token != _FALSE_TOKEN:
        logger.debug(f"Unrecognized boolean token '{raw}' treated as false")
    return False
