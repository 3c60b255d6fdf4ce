"""Implementation of recurrence rules for calendar components.

This library only models the RRULE data. Consumers that need the actual
occurrences can convert a rule with `Recur.as_rrule`, which relies on the
`dateutil.rrule` implementation for the date and time repetition.

This is an example of creating a rule from a string RRULE, then printing
out the start dates of the expanded rule:

```python
import datetime
from ical_codec.types.recur import Recur

recur = Recur.from_rrule("FREQ=WEEKLY;COUNT=3")
print(list(recur.as_rrule(datetime.datetime(2022, 8, 29, 9, 0, 0))))
```

Which prints the first three instances:
```
[datetime.datetime(2022, 8, 29, 9, 0),
 datetime.datetime(2022, 9, 5, 9, 0),
 datetime.datetime(2022, 9, 12, 9, 0)]
```
"""

from __future__ import annotations

import datetime
import enum
import logging
import re
from dataclasses import dataclass
from typing import Annotated, Any, Optional, Union

from dateutil import rrule
from pydantic import (
    BaseModel,
    BeforeValidator,
    PrivateAttr,
    model_validator,
)

from ical_codec.parsing.property import ParsedProperty
from ical_codec.util import parse_date_and_datetime

from .data_types import DATA_TYPE
from .date import DateEncoder
from .date_time import DateTimeEncoder

_LOGGER = logging.getLogger(__name__)


class Weekday(str, enum.Enum):
    """A BYDAY or WKST day of the week."""

    SUNDAY = "SU"
    MONDAY = "MO"
    TUESDAY = "TU"
    WEDNESDAY = "WE"
    THURSDAY = "TH"
    FRIDAY = "FR"
    SATURDAY = "SA"

    def __str__(self) -> str:
        return self.value


WEEKDAY_REGEX = re.compile(r"([-+]?[0-9]*)([A-Z]{2})")


@dataclass
class WeekdayValue:
    """A BYDAY entry such as MO or -1FR."""

    weekday: Weekday
    occurrence: Optional[int] = None
    """The nth occurrence within the month or year, negative counting from the end."""

    def __str__(self) -> str:
        """Encode as a BYDAY entry."""
        return f"{self.occurrence or ''}{Weekday(self.weekday).value}"

    @classmethod
    def parse(cls, value: str) -> WeekdayValue:
        """Parse a BYDAY token such as 'MO' or '-1FR'."""
        if not (match := WEEKDAY_REGEX.fullmatch(value.strip().upper())):
            raise ValueError(f"Expected value to match BYDAY pattern: {value}")
        occurrence, weekday = match.groups()
        return cls(
            weekday=Weekday(weekday),
            occurrence=int(occurrence) if occurrence not in ("", "+", "-") else None,
        )

    def as_rrule_weekday(self) -> rrule.weekday:
        """Return the dateutil weekday, with the occurrence applied."""
        wd = RRULE_WEEKDAY[Weekday(self.weekday)]
        if self.occurrence is None:
            return wd
        return wd(self.occurrence)


class Frequency(str, enum.Enum):
    """Type of recurrence rule."""

    SECONDLY = "SECONDLY"
    MINUTELY = "MINUTELY"
    HOURLY = "HOURLY"
    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"
    YEARLY = "YEARLY"

    def __str__(self) -> str:
        return self.value


RRULE_FREQ = {
    Frequency.SECONDLY: rrule.SECONDLY,
    Frequency.MINUTELY: rrule.MINUTELY,
    Frequency.HOURLY: rrule.HOURLY,
    Frequency.DAILY: rrule.DAILY,
    Frequency.WEEKLY: rrule.WEEKLY,
    Frequency.MONTHLY: rrule.MONTHLY,
    Frequency.YEARLY: rrule.YEARLY,
}
RRULE_WEEKDAY = {
    Weekday.MONDAY: rrule.MO,
    Weekday.TUESDAY: rrule.TU,
    Weekday.WEDNESDAY: rrule.WE,
    Weekday.THURSDAY: rrule.TH,
    Weekday.FRIDAY: rrule.FR,
    Weekday.SATURDAY: rrule.SA,
    Weekday.SUNDAY: rrule.SU,
}

# Rule parts holding a comma separated list of integers
INT_LIST_PARTS = (
    "bysecond",
    "byminute",
    "byhour",
    "bymonthday",
    "byyearday",
    "byweekno",
    "bymonth",
    "bysetpos",
)
INT_PARTS = ("count", "interval")


def _as_list(value: Any) -> Any:
    """Accept a single value where a list is expected."""
    if value is None:
        return []
    if isinstance(value, str):
        return value.split(",")
    if not isinstance(value, (list, tuple)):
        return [value]
    return value


def _parse_weekdays(value: Any) -> Any:
    """Accept BYDAY tokens as strings."""
    return [
        WeekdayValue.parse(item) if isinstance(item, str) else item
        for item in _as_list(value)
    ]


IntList = Annotated[list[int], BeforeValidator(_as_list)]


@DATA_TYPE.register("RECUR")
class Recur(BaseModel):
    """A RECUR value, as used by the RRULE property.

    Field names follow the rfc5545 rule part names. Parts that are not set
    are omitted when encoding, and the encoded rule lists FREQ first then the
    remaining parts in the order they were provided.
    """

    freq: Frequency

    until: Annotated[
        Union[datetime.datetime, datetime.date, None],
        BeforeValidator(parse_date_and_datetime),
    ] = None
    """Inclusive bound on the last instance."""

    count: Optional[int] = None
    """Number of instances, exclusive with until."""

    interval: Optional[int] = None
    """Interval at which the recurrence rule repeats."""

    wkst: Optional[Weekday] = None
    """The day on which the workweek starts."""

    bysecond: IntList = []
    byminute: IntList = []
    byhour: IntList = []

    byday: Annotated[list[WeekdayValue], BeforeValidator(_parse_weekdays)] = []
    """Days of the week, optionally with an occurrence within the month or year."""

    bymonthday: IntList = []
    """Days of the month between 1 to 31, or -31 to -1."""

    byyearday: IntList = []
    byweekno: IntList = []

    bymonth: IntList = []

    bysetpos: IntList = []

    _part_order: list[str] = PrivateAttr(default_factory=list)

    @model_validator(mode="wrap")
    @classmethod
    def record_part_order(cls, data: Any, handler: Any) -> Any:
        """Remember the order the rule parts were supplied in."""
        result = handler(data)
        if isinstance(data, dict) and not result._part_order:
            result._part_order = [str(key).lower() for key in data]
        return result

    @classmethod
    def from_rrule(cls, rrule_str: str) -> Recur:
        """Create a Recur object from an RRULE string."""
        return cls.__parse_property_value__(ParsedProperty(name="rrule", value=rrule_str))

    def as_rrule_str(self) -> str:
        """Return the Recur instance as an RRULE string."""
        return self.__encode_property_value__(self)

    def as_rrule(self, dtstart: datetime.datetime | datetime.date) -> rrule.rrule:
        """Create a dateutil rrule for the specified start date."""
        if not isinstance(dtstart, datetime.datetime):
            dtstart = datetime.datetime.combine(dtstart, datetime.time())
        until = self.until
        if until is not None and not isinstance(until, datetime.datetime):
            until = datetime.datetime.combine(until, datetime.time.max)
        return rrule.rrule(
            freq=RRULE_FREQ[self.freq],
            dtstart=dtstart,
            interval=self.interval or 1,
            wkst=RRULE_WEEKDAY[self.wkst] if self.wkst else None,
            count=self.count,
            until=until,
            bysetpos=self.bysetpos or None,
            bymonth=self.bymonth or None,
            bymonthday=self.bymonthday or None,
            byyearday=self.byyearday or None,
            byweekno=self.byweekno or None,
            byweekday=[value.as_rrule_weekday() for value in self.byday] or None,
            byhour=self.byhour or None,
            byminute=self.byminute or None,
            bysecond=self.bysecond or None,
            cache=True,
        )

    def _ordered_parts(self) -> list[str]:
        """Return the rule part names in encoding order."""
        parts = ["freq"]
        for name in self._part_order + list(type(self).model_fields):
            if name in type(self).model_fields and name not in parts:
                parts.append(name)
        return parts

    @classmethod
    def __encode_property_value__(cls, value: Recur) -> str:
        """Encode as RRULE text, FREQ first."""
        result = []
        for key in value._ordered_parts():
            part = getattr(value, key)
            if part is None or part == []:
                continue
            encoded: str
            if isinstance(part, list):
                encoded = ",".join(str(item) for item in part)
            elif isinstance(part, datetime.datetime):
                encoded = DateTimeEncoder.__encode_property_value__(part)
            elif isinstance(part, datetime.date):
                encoded = DateEncoder.__encode_property_value__(part)
            else:
                encoded = str(part)
            result.append(f"{key.upper()}={encoded}")
        return ";".join(result)

    @classmethod
    def __parse_property_value__(cls, prop: ParsedProperty) -> Recur:
        """Parse the recurrence rule text.

        An input rule like 'FREQ=YEARLY;BYMONTH=4' is converted into a
        dictionary of rule parts, then validated as a Recur.
        """
        result: dict[str, Any] = {}
        for part in prop.value.split(";"):
            if not part:
                continue
            if "=" not in part:
                raise ValueError(
                    f"Recurrence rule had unexpected format missing '=': {prop.value}"
                )
            key, value = part.split("=", 1)
            key = key.lower()
            if key == "until":
                new_value: datetime.datetime | datetime.date
                try:
                    new_value = DateTimeEncoder.__parse_property_value__(
                        ParsedProperty(name="ignored", value=value)
                    )
                except ValueError:
                    new_value = DateEncoder.__parse_property_value__(
                        ParsedProperty(name="ignored", value=value)
                    )
                result[key] = new_value
            elif key in INT_LIST_PARTS:
                result[key] = [int(item) for item in value.split(",")]
            elif key in INT_PARTS:
                result[key] = int(value)
            elif key == "byday":
                result[key] = [WeekdayValue.parse(item) for item in value.split(",")]
            elif key in ("freq", "wkst"):
                result[key] = value.upper()
            else:
                _LOGGER.debug("Ignoring unsupported recurrence rule part: %s", part)
        if "freq" not in result:
            raise ValueError(f"Recurrence rule is missing FREQ: {prop.value}")
        try:
            return cls.model_validate(result)
        except ValueError as err:
            raise ValueError(f"Invalid recurrence rule '{prop.value}': {err}") from err
