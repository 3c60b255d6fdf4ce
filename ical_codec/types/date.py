"""Library for parsing and encoding DATE values."""

from __future__ import annotations

import datetime
import re

from ical_codec.parsing.property import ParsedProperty

from .data_types import DATA_TYPE

DATE_REGEX = re.compile(r"(\d{4})(\d{2})(\d{2})")


@DATA_TYPE.register("DATE")
class DateEncoder:
    """Encode and decode an rfc5545 DATE as a datetime.date."""

    @classmethod
    def __property_type__(cls) -> type:
        return datetime.date

    @classmethod
    def __parse_property_value__(cls, prop: ParsedProperty) -> datetime.date:
        if not (match := DATE_REGEX.fullmatch(prop.value)):
            raise ValueError(f"Expected value to match DATE pattern: '{prop.value}'")
        year, month, day = (int(part) for part in match.groups())
        return datetime.date(year, month, day)

    @classmethod
    def __encode_property_value__(cls, value: datetime.date) -> str:
        return f"{value.year:04d}{value.month:02d}{value.day:02d}"
