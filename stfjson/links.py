"""
Category link parsing.

Inside an item, each {C} tag names a category the item belongs to. The
value ends with a type symbol (Appendix B-11):

    \\    standard
    /    exclusive
    |    unindexed
    @|   date, followed by the date value
    #|   numeric, followed by the numeric value

Agenda escapes literal symbols with % (Appendix B-13). The part before the
symbol is a ';'-separated list: name, short name, then any "also match"
names.
"""

from typing import List, Optional, Tuple

from .dates import parse_lotus_date
from .errors import InvalidLinkSyntaxError
from .models import CategoryLink, LinkType


LINK_ESCAPE = "%"
NAME_SEPARATOR = ";"
DATE_MARKER = "@|"
NUMERIC_MARKER = "#|"

_SUFFIX_TYPES = (
    ("\\", LinkType.STANDARD),
    ("/", LinkType.EXCLUSIVE),
    ("|", LinkType.UNINDEXED),
)


def _classify(raw: str) -> Tuple[LinkType, str, Optional[str]]:
    """Split a link into its type, name portion and raw value."""
    last, before = raw[-1], raw[-2]

    for symbol, link_type in _SUFFIX_TYPES:
        if last != symbol or before == LINK_ESCAPE:
            continue
        # A trailing | may belong to @| or #|.
        if link_type is LinkType.UNINDEXED and before in "@#":
            continue
        return link_type, raw[:-1], None

    # A value separator that is not real would have its | escaped.
    for marker, link_type in ((DATE_MARKER, LinkType.DATE), (NUMERIC_MARKER, LinkType.NUMERIC)):
        if marker in raw:
            names, _, value = raw.partition(marker)
            return link_type, names, value

    raise InvalidLinkSyntaxError(f"could not determine type of link {raw}")


def unescape_link_value(value: str) -> str:
    """
    Remove % escapes from a link value.

    When the unescaped text still holds a ';', only the part after the last
    one is kept.
    """
    unescaped = value.replace(LINK_ESCAPE, "")
    return unescaped.rpartition(NAME_SEPARATOR)[2]


def parse_link(raw: Optional[str], date_format: int) -> CategoryLink:
    """
    Parse the value of an item's {C} tag.

    Args:
        raw: The raw tag value, e.g. "Date;D@|12/31/20 23:59"
        date_format: The current {d} table index, used for date links

    Returns:
        The parsed CategoryLink

    Raises:
        InvalidLinkSyntaxError: If the link is too short, has no
            recognisable type symbol, has no name, or is a numeric link
            (numeric values are not supported)
        DateParseError: If a date link's value does not match date_format
    """
    # At least a one character name and a one character type.
    if raw is None or len(raw) < 2:
        raise InvalidLinkSyntaxError(f"attempted to parse invalid category link {raw!r}")

    link_type, names, raw_value = _classify(raw)

    tokens: List[str] = [token for token in names.split(NAME_SEPARATOR) if token]
    if not tokens:
        raise InvalidLinkSyntaxError(f"a category must have a name: {raw}")

    link = CategoryLink(
        type=link_type,
        name=tokens[0],
        shortname=tokens[1] if len(tokens) > 1 else None,
        alsomatch=tokens[2:] or None,
    )

    if link_type is LinkType.DATE:
        link.value = parse_lotus_date(unescape_link_value(raw_value or ""), date_format)
    elif link_type is LinkType.NUMERIC and raw_value is not None:
        raise InvalidLinkSyntaxError(f"didn't expect a {link_type.value} link to have a value: {raw}")

    return link
