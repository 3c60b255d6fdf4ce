"""Library for parsing and encoding PERIOD values.

A period is a start date-time followed by either an explicit end date-time
or a duration, as in `19970308T160000Z/PT8H30M`. FREEBUSY properties carry
a comma separated list of periods, with an optional FBTYPE parameter.
"""

from __future__ import annotations

import datetime
import enum
from typing import Annotated, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

from ical_codec.parsing.property import ParsedProperty, ParsedPropertyParameter
from ical_codec.util import parse_date_and_datetime

from .data_types import DATA_TYPE
from .date_time import DateTimeEncoder
from .duration import DurationEncoder

FBTYPE = "fbtype"

_DateTime = Annotated[datetime.datetime, BeforeValidator(parse_date_and_datetime)]


class FreeBusyType(str, enum.Enum):
    """Well known FBTYPE values."""

    FREE = "FREE"
    BUSY = "BUSY"
    BUSY_UNAVAILABLE = "BUSY-UNAVAILABLE"
    BUSY_TENTATIVE = "BUSY-TENTATIVE"


def _decode(encoder: type, value: str) -> object:
    return encoder.__parse_property_value__(ParsedProperty(name="period", value=value))


@DATA_TYPE.register("PERIOD")
class Period(BaseModel):
    """A span of time with a start and either an end or a duration."""

    start: _DateTime
    end: Optional[_DateTime] = None
    duration: Optional[datetime.timedelta] = None

    free_busy_type: Optional[str] = Field(alias="fbtype", default=None)
    """The FBTYPE parameter, usually one of `FreeBusyType`.

    Kept as a string since calendars may use values this library does
    not know about.
    """

    model_config = ConfigDict(populate_by_name=True)

    @property
    def end_value(self) -> datetime.datetime:
        """Return the end, computing it from the duration if needed."""
        if self.end is not None:
            return self.end
        if self.duration is None:
            raise ValueError("Invalid period missing both end and duration")
        return self.start + self.duration

    @classmethod
    def __parse_property_value__(cls, prop: ParsedProperty) -> Period:
        start_text, sep, end_text = prop.value.partition("/")
        if not sep or not end_text or "/" in end_text:
            raise ValueError(f"Period did not have two time values: {prop.value}")
        start = _decode(DateTimeEncoder, start_text)
        fbtype = prop.get_parameter_value(FBTYPE)
        if end_text.lstrip("+-").startswith("P"):
            return cls(
                start=start,
                duration=_decode(DurationEncoder, end_text),
                free_busy_type=fbtype,
            )
        return cls(
            start=start, end=_decode(DateTimeEncoder, end_text), free_busy_type=fbtype
        )

    @classmethod
    def __encode_property_value__(cls, value: Period) -> str:
        start = DateTimeEncoder.__encode_property_value__(value.start)
        if value.end is not None:
            end = DateTimeEncoder.__encode_property_value__(value.end)
        elif value.duration is not None:
            end = DurationEncoder.__encode_property_value__(value.duration)
        else:
            raise ValueError(f"Invalid period missing both end and duration: {value}")
        return f"{start}/{end}"

    @classmethod
    def __encode_property_params__(cls, value: Period) -> list[ParsedPropertyParameter]:
        if not value.free_busy_type:
            return []
        return [ParsedPropertyParameter(name=FBTYPE, values=[value.free_busy_type])]
