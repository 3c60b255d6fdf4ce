"""Library for parsing TEXT values."""

from __future__ import annotations

import re

from ical_codec.parsing.property import ParsedProperty

from .data_types import DATA_TYPE

UNESCAPE_CHAR = {"\\\\": "\\", "\\;": ";", "\\,": ",", "\\N": "\n", "\\n": "\n"}
ESCAPE_CHAR = {"\\": "\\\\", ";": "\\;", ",": "\\,", "\r\n": "\\n", "\n": "\\n"}

_UNESCAPE_RE = re.compile(r"\\[\\;,nN]")
_ESCAPE_RE = re.compile(r"\r\n|[\\;,\n]")


def unescape(value: str) -> str:
    """Remove rfc5545 backslash escapes from a TEXT value."""
    return _UNESCAPE_RE.sub(lambda match: UNESCAPE_CHAR[match.group(0)], value)


def escape(value: str) -> str:
    """Add rfc5545 backslash escapes to a TEXT value."""
    return _ESCAPE_RE.sub(lambda match: ESCAPE_CHAR[match.group(0)], value)


def split_unescaped(value: str, sep: str = ",") -> list[str]:
    """Split a raw value on separators that are not backslash escaped."""
    parts: list[str] = []
    current: list[str] = []
    chars = iter(value)
    for char in chars:
        if char == "\\":
            current.append(char)
            current.append(next(chars, ""))
        elif char == sep:
            parts.append("".join(current))
            current = []
        else:
            current.append(char)
    parts.append("".join(current))
    return parts


@DATA_TYPE.register("TEXT")
class TextEncoder:
    """Encode an rfc5545 TEXT value."""

    @classmethod
    def __property_type__(cls) -> type:
        return str

    @classmethod
    def __parse_property_value__(cls, prop: ParsedProperty) -> str:
        """Parse a rfc5545 into a text value."""
        return unescape(prop.value)

    @classmethod
    def __encode_property_value__(cls, value: str) -> str:
        """Serialize text as an ICS value."""
        return escape(value)
