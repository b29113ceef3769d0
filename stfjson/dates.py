"""
Date handling for STF exports.

Agenda writes category dates using one of twelve numbered formats (the
table from Appendix B-7 of the manual), selected with the {d} tag. The
{STF} header always uses its own fixed format. All dates are re-emitted as
YYYY-MM-DDTHH:MM:SSZ; the clock fields are copied as-is and the Z is only a
label, no timezone conversion happens.
"""

import re
from datetime import datetime
from typing import List, Optional

from .errors import DateParseError, InvalidDateFormatError


JSON_DATE_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

# Appendix B-5
HEADER_DATE_FORMAT = "%m/%d/%y;%H:%M:%S;002"

# Appendix B-6
DEFAULT_DATE_FORMAT = 1

# Year used when the selected format carries no year field.
DEFAULT_YEAR = 1900
PARSE_LEAP_YEAR = 2000

# Appendix B-7, index 0 is unused. The manual claims 2-digit years but
# exports use four, so both are accepted.
LOTUS_DATE_FORMATS = (
    None,
    "%m/%d/%Y %H:%M",
    "%m/%d/%Y %H:%M",
    "%d.%m.%Y %H:%M",
    "%Y-%m-%d %H:%M",
    "%d-%b %H:%M",
    "%d-%b-%Y %H:%M",
    "%m/%d/%Y %I:%M%p",
    "%d/%m/%Y %I:%M%p",
    "%d.%m.%Y %I:%M%p",
    "%Y-%m-%d %I:%M%p",
    "%d-%b %I:%M%p",
    "%d-%b-%Y %I:%M%p",
)

_LEADING_NUMBER = re.compile(r"\s*([+-]?\d+)")


def validate_date_format(index: int) -> int:
    """
    Check that a date format selector points into the table.

    Args:
        index: The 1-based table index

    Returns:
        The index unchanged

    Raises:
        InvalidDateFormatError: If the index is outside 1-12
    """
    if not isinstance(index, int) or isinstance(index, bool) or not 1 <= index < len(LOTUS_DATE_FORMATS):
        raise InvalidDateFormatError(f"invalid date format requested: {index!r}")
    return index


def parse_date_format_selector(value: Optional[str]) -> int:
    """
    Parse the value of a {d} tag into a table index.

    Only the leading integer counts; anything after it is ignored and a
    value without one reads as 0, which is rejected.
    """
    match = _LEADING_NUMBER.match(value or "")
    index = int(match.group(1)) if match else 0
    return validate_date_format(index)


def format_json_timestamp(moment: datetime, year: Optional[int] = None) -> str:
    """
    Render a parsed date in the output timestamp format.

    year replaces the parsed year, for dates that were read without one.
    """
    year = moment.year if year is None else year
    return f"{year:04d}-{moment.month:02d}-{moment.day:02d}T{moment:%H:%M:%S}Z"


def _year_variants(pattern: str) -> List[str]:
    if "%Y" in pattern:
        return [pattern, pattern.replace("%Y", "%y")]
    return [pattern]


def _strptime_prefix(text: str, pattern: str, suffix: str = "") -> datetime:
    """
    Parse the longest run of leading words of text that matches pattern.

    Words left over after a match are ignored, like C strptime does.
    """
    words = text.split()
    for count in range(len(words), 0, -1):
        try:
            return datetime.strptime(" ".join(words[:count]) + suffix, pattern)
        except ValueError:
            continue
    raise ValueError(f"'{text}' does not match '{pattern}'")


def parse_lotus_date(text: str, date_format: int) -> str:
    """
    Parse a category date with the selected table format.

    Args:
        text: The unescaped date text, e.g. "12/31/2020 23:59"
        date_format: 1-based index into LOTUS_DATE_FORMATS

    Returns:
        The date formatted as YYYY-MM-DDTHH:MM:SSZ

    Raises:
        InvalidDateFormatError: If date_format is out of range
        DateParseError: If the text does not match the format
    """
    pattern = LOTUS_DATE_FORMATS[validate_date_format(date_format)]
    text = text.strip()

    for candidate in _year_variants(pattern):
        try:
            if "%Y" in candidate or "%y" in candidate:
                return format_json_timestamp(_strptime_prefix(text, candidate))
            # Parse against a leap year so 29-Feb is accepted.
            parsed = _strptime_prefix(text, f"{candidate} %Y", f" {PARSE_LEAP_YEAR}")
            return format_json_timestamp(parsed, year=DEFAULT_YEAR)
        except ValueError:
            continue

    raise DateParseError(f"failed to parse date '{text}' with format {date_format} ({pattern})")


def parse_header_timestamp(text: Optional[str]) -> str:
    """
    Parse the value of an {STF} header tag.

    Raises:
        DateParseError: If the header does not match MM/DD/YY;HH:MM:SS;002
    """
    try:
        parsed = _strptime_prefix((text or "").strip(), HEADER_DATE_FORMAT)
    except ValueError as e:
        raise DateParseError(f"failed to parse STF header tag, '{text}'") from e
    return format_json_timestamp(parsed)
