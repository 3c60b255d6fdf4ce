"""Library for parsing and encoding INTEGER and FLOAT values."""

from __future__ import annotations

from ical_codec.parsing.property import ParsedProperty

from .data_types import DATA_TYPE


@DATA_TYPE.register("INTEGER")
class IntEncoder:
    """Encode an int ICS value."""

    @classmethod
    def __property_type__(cls) -> type:
        return int

    @classmethod
    def __parse_property_value__(cls, prop: ParsedProperty) -> int:
        """Parse a rfc5545 int value."""
        return int(prop.value)

    @classmethod
    def __encode_property_value__(cls, value: int) -> str:
        return str(value)


@DATA_TYPE.register("FLOAT")
class FloatEncoder:
    """Encode a float ICS value."""

    @classmethod
    def __property_type__(cls) -> type:
        return float

    @classmethod
    def __parse_property_value__(cls, prop: ParsedProperty) -> float:
        """Parse a rfc5545 float value."""
        return float(prop.value)

    @classmethod
    def __encode_property_value__(cls, value: float) -> str:
        return str(value)
