"""Builds the tree of rfc5545 components from unfolded content lines.

A BEGIN line opens a child of the current component and the matching END
line closes it. Every other line is a property of the innermost open
component. The tree is purely structural: the VEVENT and VFREEBUSY
mappers give it meaning.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Generator
from dataclasses import dataclass, field

from ical_codec.exceptions import CalendarParseError

from .const import (
    ATTR_BEGIN,
    ATTR_BEGIN_LOWER,
    ATTR_END,
    ATTR_END_LOWER,
    CRLF,
    FOLD,
    FOLD_INDENT,
    FOLD_LEN,
    ROOT_COMPONENT,
)
from .property import ParsedProperty, parse_contentlines

_LOGGER = logging.getLogger(__name__)

FOLD_RE = re.compile(FOLD, flags=re.MULTILINE)
FOLD_AT_END_RE = re.compile(r"\r?\n[ \t]\s*$")
LINES_RE = re.compile(r"\r?\n")
BEGIN_CALENDAR_RE = re.compile(
    rf"^{ATTR_BEGIN}:{ROOT_COMPONENT}\s*$", flags=re.MULTILINE | re.IGNORECASE
)


@dataclass
class ParsedComponent:
    """An rfc5545 component."""

    name: str
    properties: list[ParsedProperty] = field(default_factory=list)
    components: list[ParsedComponent] = field(default_factory=list)

    def get_properties(self, name: str) -> list[ParsedProperty]:
        """Return all properties with the specified name, in order."""
        return [prop for prop in self.properties if prop.name == name]

    def get_property(self, name: str) -> ParsedProperty | None:
        """Return the first property with the specified name."""
        for prop in self.properties:
            if prop.name == name:
                return prop
        return None

    def get_components(self, name: str) -> list[ParsedComponent]:
        """Return all child components with the specified name, in order."""
        return [component for component in self.components if component.name == name]

    def ics(self) -> str:
        """Encode the component and its children as folded content lines."""
        name = self.name.upper()
        return CRLF.join(
            [
                f"{ATTR_BEGIN}:{name}",
                *(line for prop in self.properties for line in fold(prop.ics())),
                *(component.ics() for component in self.components),
                f"{ATTR_END}:{name}",
            ]
        )


def fold(contentline: str) -> list[str]:
    """Split a content line into lines of at most FOLD_LEN octets.

    Continuation lines start with a single space, which counts toward the
    limit. Multi-octet UTF-8 characters are never split across lines.
    """
    if len(contentline.encode("utf-8")) <= FOLD_LEN:
        return [contentline]
    lines: list[str] = []
    current: list[str] = []
    size = 0
    limit = FOLD_LEN
    for char in contentline:
        char_len = len(char.encode("utf-8"))
        if size + char_len > limit:
            lines.append("".join(current))
            current = [FOLD_INDENT]
            size = len(FOLD_INDENT)
        current.append(char)
        size += char_len
    lines.append("".join(current))
    return lines


def unfolded_lines(content: str) -> Generator[str, None, None]:
    """Yield the logical content lines, joining folded continuations."""
    if FOLD_AT_END_RE.search(content):
        raise CalendarParseError(
            "Unexpected end of content in the middle of a folded line",
            detailed_error=content[-FOLD_LEN:],
        )
    unfolded = FOLD_RE.sub("", content)
    if not BEGIN_CALENDAR_RE.search(unfolded):
        raise CalendarParseError(
            f"Content does not contain {ATTR_BEGIN}:{ROOT_COMPONENT.upper()}",
            detailed_error=unfolded[:FOLD_LEN],
        )
    yield from LINES_RE.split(unfolded)


def parse_content(content: str) -> list[ParsedComponent]:
    """Parse content into a list of top level components.

    Only the structure is checked here. Property values are left as text for
    the data types to decode.
    """
    root = ParsedComponent(name="stream")
    stack = [root]
    for prop in parse_contentlines(unfolded_lines(content)):
        if prop.name == ATTR_BEGIN_LOWER:
            component = ParsedComponent(name=prop.value.lower())
            stack[-1].components.append(component)
            stack.append(component)
        elif prop.name == ATTR_END_LOWER:
            if len(stack) == 1:
                raise CalendarParseError(
                    f"Unexpected '{ATTR_END}:{prop.value}' without a matching {ATTR_BEGIN}",
                    detailed_error=prop.ics(),
                )
            component = stack.pop()
            if prop.value.lower() != component.name:
                raise CalendarParseError(
                    f"Unexpected '{ATTR_END}:{prop.value}', expected {ATTR_END}:{component.name.upper()}",
                    detailed_error=prop.ics(),
                )
        elif len(stack) == 1:
            raise CalendarParseError(
                f"Unexpected property '{prop.name.upper()}' outside of a component",
                detailed_error=prop.ics(),
            )
        else:
            stack[-1].properties.append(prop)

    if len(stack) > 1:
        unclosed = ", ".join(component.name.upper() for component in stack[1:])
        raise CalendarParseError(
            f"Unexpected end of content, components were not closed: {unclosed}"
        )
    return root.components


def parse_calendar(content: str) -> ParsedComponent:
    """Parse content that must hold exactly one VCALENDAR component."""
    components = parse_content(content)
    names = [component.name for component in components]
    if names != [ROOT_COMPONENT]:
        raise CalendarParseError(
            f"Expected a single {ROOT_COMPONENT.upper()} component, got {names}"
        )
    _LOGGER.debug(
        "Parsed calendar with components %s",
        [component.name for component in components[0].components],
    )
    return components[0]


def encode_content(components: list[ParsedComponent]) -> str:
    """Encode a set of parsed components into content."""
    return CRLF.join([component.ics() for component in components])
