"""A grouping of component properties that describe a calendar event.

An event start and end time may either be a date and time or just a day
alone. Events may also span more than one day. Alternatively, an event
can have a start and a duration.

A `CalendarEvent` is the application friendly form of a VEVENT. The
properties with a dedicated meaning (see `ICAL_PROPERTIES`) are mapped to
fields, a VALARM is flattened into the `alarm` mapping, and every other
property is kept by name in `extended_props`.

Example:
```python
import datetime
from ical_codec.event import CalendarEvent

event = CalendarEvent(
    id="morning-exercise",
    title="Morning exercise",
    start=datetime.datetime(2022, 8, 31, 7, 00, 00),
    end=datetime.datetime(2022, 8, 31, 7, 30, 00),
)
```
"""

from __future__ import annotations

import datetime
import logging
from typing import Annotated, Any, Optional, Union

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
)

from .const import ICAL_PROPERTIES, ORGANIZER, VALARM, VEVENT
from .exceptions import (
    CalendarParseError,
    InvalidEventObjectError,
    InvalidPropertyValueError,
)
from .parsing.component import ParsedComponent
from .parsing.property import ParsedProperty, ParsedPropertyParameter
from .property_values import (
    PropertyValue,
    decode_properties,
    decode_property,
    encode_property,
)
from .types import Attendee, Recur
from .types.cal_address import organizer_property
from .types.date_time import TZID, TzInfoResolver
from .types.text import TextEncoder
from .util import parse_date_and_datetime

_LOGGER = logging.getLogger(__name__)

DateOrDateTime = Annotated[
    Union[datetime.datetime, datetime.date],
    BeforeValidator(parse_date_and_datetime),
]


def _decode_date(
    prop: ParsedProperty, tzinfo_resolver: TzInfoResolver | None
) -> datetime.datetime | datetime.date:
    """Decode a property that must hold a DATE or DATE-TIME."""
    value = decode_property(prop, tzinfo_resolver)
    if not isinstance(value, datetime.date):
        raise InvalidPropertyValueError(prop.name, prop.value, "expected a date")
    return value


def _decode_text(prop: ParsedProperty | None) -> str | None:
    if prop is None:
        return None
    return TextEncoder.__parse_property_value__(prop)


def _parse_recur(value: Any) -> Any:
    if isinstance(value, str):
        return Recur.from_rrule(value)
    return value


def _difference(
    start: datetime.datetime | datetime.date, end: datetime.datetime | datetime.date
) -> datetime.timedelta | None:
    """Return the time between start and end when they are comparable."""
    try:
        return end - start
    except TypeError as err:
        _LOGGER.debug("Unable to compute duration from %s to %s: %s", start, end, err)
    return None


def _is_floating(value: Any) -> bool:
    """Return true for a local time, or a list of local times."""
    values = value if isinstance(value, list) else [value]
    return bool(values) and all(
        isinstance(item, datetime.datetime) and item.tzinfo is None for item in values
    )


def _add_tzid(prop: ParsedProperty, tzid: str) -> None:
    prop.params = (prop.params or []) + [
        ParsedPropertyParameter(name=TZID.lower(), values=[tzid])
    ]


class CalendarEvent(BaseModel):
    """A single event on a calendar, with its recurrence exceptions."""

    id: str
    """A globally unique identifier for the event, from the UID property."""

    title: Optional[str] = None
    """A short summary or subject for the event."""

    start: Optional[DateOrDateTime] = None
    """The start time or start day of the event."""

    end: Optional[DateOrDateTime] = None
    """The end time or end day of the event.

    When parsed from an event without DTEND, this is computed from the
    duration, or is the next day for an all day event.
    """

    all_day: bool = Field(default=False, alias="allDay")
    """True when the start is a date with no time component."""

    duration: Optional[datetime.timedelta] = None
    """The duration of the event, either explicit or computed from start/end."""

    description: Optional[str] = None
    location: Optional[str] = None

    timezone: Optional[str] = None
    """The TZID of the start time, kept verbatim and never interpreted."""

    timezones: dict[str, Optional[str]] = Field(default_factory=dict)
    """The TZID of each other date property, by lowercase property name.

    A property listed here with None is a floating time. DTEND and
    RECURRENCE-ID are only listed when their TZID differs from `timezone`,
    which they use otherwise.
    """

    attendees: list[Attendee] = Field(default_factory=list)
    """Specifies participants in a group-scheduled calendar."""

    alarm: Optional[dict[str, PropertyValue]] = None
    """The properties of the event alarm, by lowercase property name."""

    rrule: Annotated[Optional[Recur], BeforeValidator(_parse_recur)] = None
    """The recurrence rule for a recurring event, also accepted as RRULE text."""

    recurrence_id: Optional[DateOrDateTime] = Field(default=None, alias="recurrenceId")
    """Identifies this event as an alternate instance of a recurring event."""

    exceptions: list[CalendarEvent] = Field(default_factory=list)
    """Alternate instances of this recurring event with the same id."""

    extended_props: dict[str, PropertyValue] = Field(
        default_factory=dict, alias="extendedProps"
    )
    """All other event properties, by lowercase property name."""

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("extended_props", mode="before")
    @classmethod
    def verify_extended_props(cls, values: Any) -> Any:
        """Verify extended properties never shadow the event fields."""
        if not isinstance(values, dict):
            return values
        result = {}
        for key, value in values.items():
            key = str(key).lower()
            if key in ICAL_PROPERTIES:
                raise ValueError(f"Property '{key}' can't be an extended property")
            result[key] = value
        return result

    @field_validator("alarm", mode="before")
    @classmethod
    def normalize_alarm_keys(cls, values: Any) -> Any:
        """Use lowercase property names for the alarm."""
        if not isinstance(values, dict):
            return values
        return {str(key).lower(): value for key, value in values.items()}

    @classmethod
    def from_component(
        cls,
        component: ParsedComponent,
        tzinfo_resolver: TzInfoResolver | None = None,
    ) -> CalendarEvent:
        """Create an event from a parsed VEVENT component.

        Exceptions are not attached here since they are separate VEVENT
        components in the calendar; see `ical_codec.calendar_stream.parse`.
        """
        if not (uid := component.get_property("uid")):
            raise CalendarParseError(
                f"Failed to parse calendar {VEVENT.upper()} component: missing UID"
            )
        if not (dtstart := component.get_property("dtstart")):
            raise CalendarParseError(
                f"Failed to parse calendar {VEVENT.upper()} component: missing DTSTART",
                detailed_error=uid.value,
            )
        start = _decode_date(dtstart, tzinfo_resolver)
        all_day = not isinstance(start, datetime.datetime)

        duration: datetime.timedelta | None = None
        if prop := component.get_property("duration"):
            value = decode_property(prop)
            if not isinstance(value, datetime.timedelta):
                raise InvalidPropertyValueError(prop.name, prop.value)
            duration = value

        end: datetime.datetime | datetime.date
        if prop := component.get_property("dtend"):
            end = _decode_date(prop, tzinfo_resolver)
        elif duration is not None:
            end = start + duration
        elif all_day:
            end = start + datetime.timedelta(days=1)
        else:
            end = start
        if duration is None:
            duration = _difference(start, end)

        recurrence_id = None
        if prop := component.get_property("recurrence-id"):
            recurrence_id = _decode_date(prop, tzinfo_resolver)

        rrule = None
        if rrules := component.get_properties("rrule"):
            if len(rrules) > 1:
                _LOGGER.debug("Ignoring additional RRULE properties on '%s'", uid.value)
            value = decode_property(rrules[0])
            if not isinstance(value, Recur):
                raise InvalidPropertyValueError(rrules[0].name, rrules[0].value)
            rrule = value

        alarm = None
        if alarms := component.get_components(VALARM):
            if len(alarms) > 1:
                _LOGGER.debug("Ignoring additional VALARM components on '%s'", uid.value)
            alarm = decode_properties(alarms[0].properties, tzinfo_resolver)

        extended = [
            prop for prop in component.properties if prop.name not in ICAL_PROPERTIES
        ]
        extended_props = decode_properties(extended, tzinfo_resolver)

        timezone = dtstart.get_parameter_value(TZID)
        timezones: dict[str, Optional[str]] = {}
        for name in ("dtend", "recurrence-id"):
            if (prop := component.get_property(name)) and (
                tzid := prop.get_parameter_value(TZID)
            ) != timezone:
                timezones[name] = tzid
        for prop in extended:
            if (tzid := prop.get_parameter_value(TZID)) and prop.name not in timezones:
                timezones[prop.name] = tzid

        try:
            return cls(
                id=_decode_text(uid),
                title=_decode_text(component.get_property("summary")),
                start=start,
                end=end,
                all_day=all_day,
                duration=duration,
                # Empty values are encoded for a missing description or location
                description=_decode_text(component.get_property("description"))
                or None,
                location=_decode_text(component.get_property("location")) or None,
                timezone=timezone,
                timezones=timezones,
                attendees=[
                    Attendee.__parse_property_value__(prop)
                    for prop in component.get_properties("attendee")
                ],
                alarm=alarm,
                rrule=rrule,
                recurrence_id=recurrence_id,
                extended_props=extended_props,
            )
        except ValidationError as err:
            _LOGGER.debug("Failed to parse component %s", err)
            message = [f"Failed to parse calendar {VEVENT.upper()} component"]
            for error in err.errors():
                if msg := error.get("msg"):
                    message.append(msg)
            raise CalendarParseError(": ".join(message), detailed_error=str(err)) from err

    def _encode_date(
        self,
        name: str,
        value: datetime.datetime | datetime.date,
        tzid: str | None,
        all_day: bool = False,
    ) -> ParsedProperty:
        """Encode a DTSTART, DTEND or RECURRENCE-ID property."""
        if all_day and isinstance(value, datetime.datetime):
            value = value.date()
        prop = encode_property(name, value)[0]
        if tzid and _is_floating(value):
            _add_tzid(prop, tzid)
        return prop

    def _tzid(self, name: str) -> str | None:
        """Return the TZID to encode on a local time DTEND or RECURRENCE-ID."""
        return self.timezones.get(name, self.timezone)

    def __encode_component__(self) -> ParsedComponent:
        """Encode this event as a VEVENT component."""
        missing = [
            name
            for name, value in (
                ("id", self.id),
                ("title", self.title),
                ("start", self.start),
                ("end", self.end),
            )
            if value is None
        ]
        if missing:
            raise InvalidEventObjectError(
                f"Event '{self.id}' is missing required fields: {', '.join(missing)}"
            )
        assert self.start is not None and self.end is not None

        component = ParsedComponent(name=VEVENT)
        properties = component.properties
        properties.extend(encode_property("uid", self.id))
        properties.extend(encode_property("summary", self.title or ""))
        properties.extend(encode_property("location", self.location or ""))
        properties.extend(encode_property("description", self.description or ""))
        properties.append(
            self._encode_date("dtstart", self.start, self.timezone, self.all_day)
        )
        properties.append(
            self._encode_date("dtend", self.end, self._tzid("dtend"), self.all_day)
        )
        if self.recurrence_id is not None:
            properties.append(
                self._encode_date(
                    "recurrence-id", self.recurrence_id, self._tzid("recurrence-id")
                )
            )
        for attendee in self.attendees:
            properties.append(attendee.__encode_property__("attendee"))
        if self.rrule is not None:
            properties.extend(encode_property("rrule", self.rrule))
        if self.alarm and self.alarm.get("trigger") is not None:
            alarm = ParsedComponent(name=VALARM)
            for key, value in self.alarm.items():
                alarm.properties.extend(encode_property(key, value))
            component.components.append(alarm)
        for key, value in self.extended_props.items():
            if key == ORGANIZER:
                for address in value if isinstance(value, list) else [value]:
                    properties.append(organizer_property(str(address)))
                continue
            encoded = encode_property(key, value)
            if (tzid := self.timezones.get(key)) and _is_floating(value):
                for prop in encoded:
                    _add_tzid(prop, tzid)
            properties.extend(encoded)
        return component
