"""Library for parsing and encoding DATE-TIME types.

Decoding never converts between timezones. A trailing 'Z' produces a UTC
value, a TZID parameter is resolved only when the caller supplies a
resolver, and otherwise the value is kept as the literal (naive) local time
with the TZID left on the property for the caller to interpret.
"""

from __future__ import annotations

import datetime
import logging
import re
from collections.abc import Callable

from ical_codec.parsing.property import ParsedProperty, ParsedPropertyParameter

from .data_types import DATA_TYPE

_LOGGER = logging.getLogger(__name__)


DATETIME_REGEX = re.compile(r"(\d{4})(\d{2})(\d{2})T(\d{2})(\d{2})(\d{2})(Z)?")
TZID = "TZID"

TzInfoResolver = Callable[[str], "datetime.tzinfo | None"]


def _resolve_tzinfo(
    tzid: str, tzinfo_resolver: TzInfoResolver | None
) -> datetime.tzinfo | None:
    """Return the tzinfo for the TZID, or None when it can't be resolved."""
    if tzinfo_resolver is None:
        return None
    try:
        return tzinfo_resolver(tzid)
    except (KeyError, ValueError) as err:
        _LOGGER.debug("Unable to resolve TZID '%s', using local time: %s", tzid, err)
    return None


def parse_property_value(
    prop: ParsedProperty, tzinfo_resolver: TzInfoResolver | None = None
) -> datetime.datetime:
    """Parse a rfc5545 DATE-TIME such as 19980119T070000Z."""
    if not (match := DATETIME_REGEX.fullmatch(prop.value)):
        raise ValueError(f"Expected value to match DATE-TIME pattern: {prop.value}")
    *fields, utc = match.groups()
    timezone: datetime.tzinfo | None = None
    if tzid := prop.get_parameter_value(TZID):
        timezone = _resolve_tzinfo(tzid, tzinfo_resolver)
    elif utc:
        timezone = datetime.timezone.utc
    return datetime.datetime(*(int(field) for field in fields), tzinfo=timezone)


def tzid_for(value: datetime.datetime) -> str | None:
    """Return the TZID that describes an aware, non-UTC datetime."""
    if value.tzinfo is None or is_utc(value):
        return None
    return getattr(value.tzinfo, "key", None)


def is_utc(value: datetime.datetime) -> bool:
    """Return true if the datetime is explicitly in UTC."""
    return value.tzinfo == datetime.timezone.utc or (
        getattr(value.tzinfo, "key", None) in ("UTC", "Etc/UTC")
    )


@DATA_TYPE.register("DATE-TIME")
class DateTimeEncoder:
    """Class to handle encoding for a datetime.datetime."""

    @classmethod
    def __property_type__(cls) -> type:
        return datetime.datetime

    @classmethod
    def __parse_property_value__(cls, prop: ParsedProperty) -> datetime.datetime:
        """Parse a rfc5545 into a datetime.datetime."""
        return parse_property_value(prop)

    @classmethod
    def __encode_property_value__(cls, value: datetime.datetime) -> str:
        """Encode the datetime as local time, UTC, or local time in its TZID."""
        if value.tzinfo is None or tzid_for(value):
            return value.strftime("%Y%m%dT%H%M%S")
        return value.astimezone(datetime.timezone.utc).strftime("%Y%m%dT%H%M%SZ")

    @classmethod
    def __encode_property_params__(
        cls, value: datetime.datetime
    ) -> list[ParsedPropertyParameter]:
        """Encode parameters for the property value."""
        if tzid := tzid_for(value):
            return [ParsedPropertyParameter(name="tzid", values=[tzid])]
        return []
