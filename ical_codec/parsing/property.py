"""Library for handling rfc5545 properties and parameters.

A property is the definition of an individual attribute describing a
calendar object or a calendar component. A property is also really
just a "contentline", however properties in this file are the
output of the parser and are provided in the context of where
they live on a component hierarchy (e.g. attached to a component,
or sub component).

This is a very simple parser that converts lines in an iCalendar file into an
object structure with necessary relationships to interpret the meaning of the
contentlines and how the parts break down into properties and parameters. This
library does not attempt to interpret the meaning of the property values
themselves, which is handled by the `ical_codec.types` decoders.

For example, given a content line of:

  DUE;VALUE=DATE:20070501

This library would create a ParsedProperty object with this structure:

  ParsedProperty(
    name='due',
    value='20070501',
    params=[
        ParsedPropertyParameter(
            name='value',
            values=['DATE']
        )
    ]
  }

Note: This specific example may be a bit confusing because one of the property
parameters is named "VALUE" which refers to the value type.
"""
from __future__ import annotations

import re
from collections.abc import Generator, Iterable
from dataclasses import dataclass, field
from typing import Optional

from ical_codec.exceptions import CalendarParseError

_NAME_END_RE = re.compile(r"[;:]")
_NAME_RE = re.compile(r"[A-Za-z0-9-]+")
_PARAM_VALUE_RE = re.compile(r'"([^"]*)"|([^",;:]*)')
_PARAM_ESCAPE_RE = re.compile(r"\\([\\;,nN])")
_CONTROL_CHARS_RE = re.compile("[\x00-\x08\x0a-\x1f\x7f]")
_QUOTED_CHARS_RE = re.compile(r"[,:;]")
_PARAM_DELIMITERS = ",;:"
_QUOTE = '"'


def _unescape_param_value(value: str) -> str:
    """Remove backslash escapes from a parameter value."""
    return _PARAM_ESCAPE_RE.sub(
        lambda match: "\n" if match.group(1) in "nN" else match.group(1), value
    )


def _encode_param_value(value: str) -> str:
    """Encode a parameter value, quoting it when it contains unsafe characters."""
    # A DQUOTE can not appear in a parameter value, even when quoted
    value = value.replace(_QUOTE, "'")
    value = value.replace("\\", "\\\\").replace("\r\n", "\\n").replace("\n", "\\n")
    if _QUOTED_CHARS_RE.search(value):
        return f'"{value}"'
    return value


@dataclass
class ParsedPropertyParameter:
    """An rfc5545 property parameter."""

    name: str
    """Lowercase parameter name."""

    values: list[str] = field(default_factory=list)
    """One or more parameter values, unquoted and unescaped."""


@dataclass
class ParsedProperty:
    """An rfc5545 property."""

    name: str
    value: str
    params: Optional[list[ParsedPropertyParameter]] = None

    def get_parameter(self, name: str) -> ParsedPropertyParameter | None:
        """Return a single ParsedPropertyParameter with the specified name."""
        name = name.lower()
        for param in self.params or ():
            if param.name.lower() == name:
                return param
        return None

    def get_parameter_value(self, name: str) -> str | None:
        """Return the property parameter value."""
        if not (param := self.get_parameter(name)):
            return None
        if len(param.values) > 1:
            raise ValueError(
                f"Expected only a single parameter string value, got {param.values}"
            )
        return param.values[0] if param.values else None

    def ics(self) -> str:
        """Encode a ParsedProperty into the serialized format."""
        parts = [self.name.upper()]
        for param in self.params or ():
            values = ",".join(_encode_param_value(value) for value in param.values)
            parts.append(f"{param.name.upper()}={values}")
        return f"{';'.join(parts)}:{self.value}"

    @classmethod
    def from_ics(cls, contentline: str) -> ParsedProperty:
        """Decode a ParsedProperty from an rfc5545 iCalendar content line.

        Will raise a CalendarParseError on failure.
        """
        return _parse_line(contentline)


def _parse_parameter(line: str, pos: int) -> tuple[ParsedPropertyParameter, int]:
    """Parse the parameter starting at pos.

    Returns the parameter and the position of the ';' or ':' that follows it.
    """
    if (name_end := line.find("=", pos)) == -1:
        raise CalendarParseError(
            f"Invalid parameter format: missing '=' after parameter name part '{line[pos:]}'",
            detailed_error=line,
        )
    name = line[pos:name_end]
    if not _NAME_RE.fullmatch(name):
        raise CalendarParseError(f"Invalid parameter name '{name}'", detailed_error=line)

    values: list[str] = []
    pos = name_end + 1
    while True:
        match = _PARAM_VALUE_RE.match(line, pos)
        assert match  # The unquoted alternative always matches
        quoted, unquoted = match.groups()
        if quoted is None and line.startswith(_QUOTE, pos):
            raise CalendarParseError(
                "Unexpected end of line: unclosed quoted parameter value.",
                detailed_error=line,
            )
        value = quoted if quoted is not None else unquoted
        if _CONTROL_CHARS_RE.search(value):
            raise CalendarParseError(
                f"Invalid parameter value '{value}' for parameter '{name}'",
                detailed_error=line,
            )
        values.append(_unescape_param_value(value))

        pos = match.end()
        if pos >= len(line):
            raise CalendarParseError(
                f"Unexpected end of line after parameter value '{value}'. "
                f"Expected one of '{_PARAM_DELIMITERS}'.",
                detailed_error=line,
            )
        if (delimiter := line[pos]) not in _PARAM_DELIMITERS:
            raise CalendarParseError(
                f"Parameter value for parameter '{name}' is improperly quoted, "
                f"got '{delimiter}'",
                detailed_error=line,
            )
        if delimiter != ",":
            return ParsedPropertyParameter(name=name.lower(), values=values), pos
        pos += 1


def _parse_line(line: str) -> ParsedProperty:
    """Parse a single content line into a property."""
    if not (match := _NAME_END_RE.search(line)):
        raise CalendarParseError(
            "Invalid property line, expected ';' or ':' after property name",
            detailed_error=line,
        )
    name = line[: match.start()]
    if not _NAME_RE.fullmatch(name):
        raise CalendarParseError(f"Invalid property name '{name}'", detailed_error=line)

    # A repeated parameter name adds more values to the same parameter
    params: dict[str, ParsedPropertyParameter] = {}
    pos = match.start()
    while line[pos] == ";":
        param, pos = _parse_parameter(line, pos + 1)
        if existing := params.get(param.name):
            existing.values.extend(param.values)
        else:
            params[param.name] = param

    value = line[pos + 1 :]
    if _CONTROL_CHARS_RE.search(value):
        raise CalendarParseError(
            f"Property value contains control characters: {value}",
            detailed_error=line,
        )
    return ParsedProperty(
        name=name.lower(), value=value, params=list(params.values()) or None
    )


def parse_contentlines(
    contentlines: Iterable[str],
) -> Generator[ParsedProperty, None, None]:
    """Parse a contentlines into ParsedProperty objects."""
    for contentline in contentlines:
        if not contentline:
            continue
        try:
            yield ParsedProperty.from_ics(contentline)
        except CalendarParseError as err:
            raise CalendarParseError(
                f"Failed to parse calendar contents: {err.message}",
                detailed_error=err.detailed_error,
            ) from err
