"""Library for parsing and encoding URI and CAL-ADDRESS values."""

from __future__ import annotations

from urllib.parse import urlparse

from ical_codec.parsing.property import ParsedProperty

from .data_types import DATA_TYPE


@DATA_TYPE.register("URI", python_type=False)
class UriEncoder:
    """A value type for a property that contains a uniform resource identifier."""

    @classmethod
    def __parse_property_value__(cls, prop: ParsedProperty) -> str:
        """Parse a uri, which is never escaped."""
        urlparse(prop.value)
        return prop.value

    @classmethod
    def __encode_property_value__(cls, value: str) -> str:
        return str(value)


@DATA_TYPE.register("CAL-ADDRESS", python_type=False)
class CalAddressEncoder(UriEncoder):
    """A calendar user address is a uri, typically with the mailto scheme.

    The value is the bare address. Parameters such as CN or PARTSTAT are
    interpreted by `ical_codec.types.cal_address.Attendee`.
    """
