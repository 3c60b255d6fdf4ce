"""Utility methods used by multiple components."""

from __future__ import annotations

import datetime
from typing import Any

from .parsing.property import ParsedProperty
from .types.date import DATE_REGEX, DateEncoder
from .types.date_time import DATETIME_REGEX, parse_property_value

__all__ = [
    "parse_date_and_datetime",
    "normalize_key",
]


def parse_date_and_datetime(value: Any) -> Any:
    """Coerce str into date and datetime value.

    Accepts both the ics basic form (20210315T100000Z, 20210315) and the
    ISO 8601 extended form (2021-03-15T10:00:00Z, 2021-03-15).
    """
    if not isinstance(value, str):
        return value
    value = value.strip()
    if DATETIME_REGEX.fullmatch(value):
        return parse_property_value(ParsedProperty(name="ignored", value=value))
    if DATE_REGEX.fullmatch(value):
        return DateEncoder.__parse_property_value__(
            ParsedProperty(name="ignored", value=value)
        )
    if "T" in value or " " in value:
        return datetime.datetime.fromisoformat(value)
    return datetime.date.fromisoformat(value)


def normalize_key(name: str) -> str:
    """Return the attribute name used for a property or parameter name."""
    return name.lower().replace("-", "_")


def denormalize_key(key: str) -> str:
    """Return the property or parameter name for an attribute name."""
    return key.lower().replace("_", "-")
