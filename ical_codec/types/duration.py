"""Library for parsing and encoding DURATION values."""

import datetime
import re

from ical_codec.parsing.property import ParsedProperty

from .data_types import DATA_TYPE

_DURATION_RE = re.compile(
    r"(?P<sign>[-+]?)P(?:(?P<weeks>\d+)W|(?:(?P<days>\d+)D)?"
    r"(?:T(?:(?P<hours>\d+)H)?(?:(?P<minutes>\d+)M)?(?:(?P<seconds>\d+)S)?)?)"
)


@DATA_TYPE.register("DURATION")
class DurationEncoder:
    """Encode and decode an rfc5545 DURATION as a datetime.timedelta."""

    @classmethod
    def __property_type__(cls) -> type:
        return datetime.timedelta

    @classmethod
    def __parse_property_value__(cls, prop: ParsedProperty) -> datetime.timedelta:
        match = _DURATION_RE.fullmatch(prop.value)
        # A designator with no amounts after it is not a valid duration
        if not match or prop.value[-1] in "PT":
            raise ValueError(f"Expected value to match DURATION pattern: {prop.value}")
        amounts = {
            unit: int(amount)
            for unit, amount in match.groupdict().items()
            if unit != "sign" and amount is not None
        }
        result = datetime.timedelta(**amounts)
        return -result if match.group("sign") == "-" else result

    @classmethod
    def __encode_property_value__(cls, duration: datetime.timedelta) -> str:
        sign = ""
        if duration < datetime.timedelta(0):
            sign = "-"
            duration = -duration
        days, seconds = duration.days, duration.seconds
        if days and not seconds and days % 7 == 0:
            return f"{sign}P{days // 7}W"
        hours, remainder = divmod(seconds, 3600)
        minutes, seconds = divmod(remainder, 60)
        text = f"{sign}P"
        if days:
            text += f"{days}D"
        if hours or minutes or seconds or not days:
            text += "T"
            if hours:
                text += f"{hours}H"
            if minutes:
                text += f"{minutes}M"
            if seconds or not (hours or minutes):
                text += f"{seconds}S"
        return text
