"""Tests for Event component."""

import datetime
import textwrap
import zoneinfo

import pytest

from ical_codec.const import ICAL_PROPERTIES
from ical_codec.event import CalendarEvent
from ical_codec.exceptions import (
    CalendarParseError,
    InvalidEventObjectError,
    InvalidPropertyValueError,
)
from ical_codec.parsing.component import ParsedComponent, parse_content
from ical_codec.parsing.property import ParsedProperty
from ical_codec.types import Attendee, Frequency

SUMMARY = "test summary"


def _vevent(*lines: str) -> ParsedComponent:
    """Build a VEVENT component from its content lines."""
    content = "\n".join(["BEGIN:VCALENDAR", "BEGIN:VEVENT", *lines, "END:VEVENT", "END:VCALENDAR"])
    return parse_content(content)[0].components[0]


def test_from_component() -> None:
    """Test the event fields of a VEVENT."""
    component = _vevent(
        "UID:event-1",
        r"SUMMARY:Meeting\, with notes",
        "DTSTART:20210315T100000",
        "DTEND:20210315T110000",
        "DESCRIPTION:Line one\\nLine two",
        "LOCATION:Room 1",
    )
    event = CalendarEvent.from_component(component)
    assert event.id == "event-1"
    assert event.title == "Meeting, with notes"
    assert event.start == datetime.datetime(2021, 3, 15, 10, 0, 0)
    assert event.end == datetime.datetime(2021, 3, 15, 11, 0, 0)
    assert not event.all_day
    assert event.duration == datetime.timedelta(hours=1)
    assert event.description == "Line one\nLine two"
    assert event.location == "Room 1"
    assert event.attendees == []
    assert event.alarm is None
    assert event.rrule is None
    assert event.recurrence_id is None
    assert event.exceptions == []
    assert event.extended_props == {}
    assert event.timezone is None


def test_all_day() -> None:
    """Test an event with a date and no time."""
    event = CalendarEvent.from_component(
        _vevent("UID:event-1", "DTSTART;VALUE=DATE:20210315", "DTEND;VALUE=DATE:20210317")
    )
    assert event.all_day
    assert event.start == datetime.date(2021, 3, 15)
    assert event.end == datetime.date(2021, 3, 17)
    assert event.duration == datetime.timedelta(days=2)


@pytest.mark.parametrize(
    ("lines", "end", "duration"),
    [
        (
            ["DTSTART:20210315T100000", "DURATION:PT1H30M"],
            datetime.datetime(2021, 3, 15, 11, 30, 0),
            datetime.timedelta(hours=1, minutes=30),
        ),
        (
            ["DTSTART;VALUE=DATE:20210315"],
            datetime.date(2021, 3, 16),
            datetime.timedelta(days=1),
        ),
        (
            ["DTSTART:20210315T100000"],
            datetime.datetime(2021, 3, 15, 10, 0, 0),
            datetime.timedelta(0),
        ),
    ],
)
def test_derived_end(
    lines: list[str], end: datetime.date, duration: datetime.timedelta
) -> None:
    """Test the end of an event without DTEND."""
    event = CalendarEvent.from_component(_vevent("UID:event-1", *lines))
    assert event.end == end
    assert event.duration == duration


def test_timezone() -> None:
    """Test the TZID of the start is recorded."""
    component = _vevent(
        "UID:event-1",
        "DTSTART;TZID=America/New_York:20210315T100000",
        "DTEND;TZID=America/New_York:20210315T110000",
    )
    event = CalendarEvent.from_component(component)
    assert event.timezone == "America/New_York"
    assert event.start == datetime.datetime(2021, 3, 15, 10, 0, 0)

    event = CalendarEvent.from_component(component, tzinfo_resolver=zoneinfo.ZoneInfo)
    new_york = zoneinfo.ZoneInfo("America/New_York")
    assert event.start == datetime.datetime(2021, 3, 15, 10, 0, 0, tzinfo=new_york)
    assert event.end == datetime.datetime(2021, 3, 15, 11, 0, 0, tzinfo=new_york)


def test_attendees() -> None:
    """Test the attendees of an event."""
    event = CalendarEvent.from_component(
        _vevent(
            "UID:event-1",
            "DTSTART:20210315T100000",
            "ATTENDEE;CN=A B;PARTSTAT=ACCEPTED:mailto:a@b.com",
            "ATTENDEE;RSVP=TRUE;ROLE=OPT-PARTICIPANT:mailto:c@d.com",
        )
    )
    assert event.attendees == [
        Attendee(cn="A B", partstat="ACCEPTED", email="mailto:a@b.com"),
        Attendee(rsvp="TRUE", role="OPT-PARTICIPANT", email="mailto:c@d.com"),
    ]


def test_alarm() -> None:
    """Test the alarm properties are flattened."""
    event = CalendarEvent.from_component(
        _vevent(
            "UID:event-1",
            "DTSTART:20210315T100000",
            "BEGIN:VALARM",
            "ACTION:DISPLAY",
            "TRIGGER:-PT15M",
            "DESCRIPTION:Reminder",
            "UID:alarm-1",
            "END:VALARM",
        )
    )
    assert event.alarm == {
        "action": "DISPLAY",
        "trigger": datetime.timedelta(minutes=-15),
        "description": "Reminder",
        "uid": "alarm-1",
    }
    assert event.description is None


def test_rrule_and_extended_props() -> None:
    """Test the recurrence rule and the extended properties."""
    event = CalendarEvent.from_component(
        _vevent(
            "UID:event-1",
            "DTSTART:20210315T100000",
            "RRULE:FREQ=WEEKLY;BYDAY=MO,TU,WE,TH,FR",
            "ORGANIZER;CN=jane:mailto:jane@example.com",
            "SEQUENCE:2",
            "STATUS:CONFIRMED",
            "CATEGORIES:WORK,MEETING",
            "DTSTAMP:20210301T080000Z",
            "X-CUSTOM:not a number",
        )
    )
    assert event.rrule
    assert event.rrule.freq == Frequency.WEEKLY
    assert [str(day) for day in event.rrule.byday] == ["MO", "TU", "WE", "TH", "FR"]
    assert event.extended_props == {
        "organizer": "mailto:jane@example.com",
        "sequence": 2,
        "status": "CONFIRMED",
        "categories": ["WORK", "MEETING"],
        "dtstamp": datetime.datetime(2021, 3, 1, 8, 0, 0, tzinfo=datetime.timezone.utc),
        "x-custom": "not a number",
    }
    assert not set(event.extended_props) & set(ICAL_PROPERTIES)


def test_recurrence_id() -> None:
    """Test an exception instance of a recurring event."""
    event = CalendarEvent.from_component(
        _vevent(
            "UID:event-1",
            "DTSTART:20201106T083000Z",
            "RECURRENCE-ID:20201106T083000Z",
        )
    )
    assert event.recurrence_id == datetime.datetime(
        2020, 11, 6, 8, 30, 0, tzinfo=datetime.timezone.utc
    )


def test_lenient_extended_value() -> None:
    """Test an invalid value of an extended property falls back to text."""
    event = CalendarEvent.from_component(
        _vevent("UID:event-1", "DTSTART:20210315T100000", "SEQUENCE:first")
    )
    assert event.extended_props == {"sequence": "first"}


@pytest.mark.parametrize(
    ("lines", "match"),
    [
        (["DTSTART:20210315T100000"], "missing UID"),
        (["UID:event-1"], "missing DTSTART"),
    ],
)
def test_missing_required(lines: list[str], match: str) -> None:
    """Test a VEVENT without the properties required to identify it."""
    with pytest.raises(CalendarParseError, match=match):
        CalendarEvent.from_component(_vevent(*lines))


@pytest.mark.parametrize(
    "lines",
    [
        ["DTSTART:2021-03-15"],
        ["DTSTART:20210315T100000", "DTEND:tomorrow"],
        ["DTSTART:20210315T100000", "RRULE:FREQ=SOMETIMES"],
        ["DTSTART:20210315T100000", "DURATION:1 hour"],
        ["DTSTART:20210315T100000", "RECURRENCE-ID:yesterday"],
    ],
)
def test_invalid_event_values(lines: list[str]) -> None:
    """Test values of event fields that can't be decoded."""
    with pytest.raises(InvalidPropertyValueError):
        CalendarEvent.from_component(_vevent("UID:event-1", *lines))


def test_create_event() -> None:
    """Test creating an event from python values and aliases."""
    event = CalendarEvent(
        id="event-1",
        title=SUMMARY,
        start="2021-03-15T10:00:00",
        end="20210315T110000",
        allDay=False,
        recurrenceId="2020-11-06T08:30:00Z",
        extendedProps={"X-Custom": "value"},
    )
    assert event.start == datetime.datetime(2021, 3, 15, 10, 0, 0)
    assert event.end == datetime.datetime(2021, 3, 15, 11, 0, 0)
    assert event.recurrence_id == datetime.datetime(
        2020, 11, 6, 8, 30, 0, tzinfo=datetime.timezone.utc
    )
    assert event.extended_props == {"x-custom": "value"}


@pytest.mark.parametrize("key", ["summary", "RRULE", "uid"])
def test_extended_props_known_property(key: str) -> None:
    """Test a known property can't be an extended property."""
    with pytest.raises(ValueError, match="can't be an extended property"):
        CalendarEvent(id="event-1", extended_props={key: "value"})


def _encode(event: CalendarEvent) -> str:
    return event.__encode_component__().ics()


def test_encode_event() -> None:
    """Test encoding a minimal event."""
    event = CalendarEvent(
        id="123456",
        title="test",
        start=datetime.datetime(2021, 3, 15, 10, 0, 0),
        end=datetime.datetime(2021, 3, 15, 11, 0, 0),
    )
    assert _encode(event) == "\r\n".join(
        [
            "BEGIN:VEVENT",
            "UID:123456",
            "SUMMARY:test",
            "LOCATION:",
            "DESCRIPTION:",
            "DTSTART:20210315T100000",
            "DTEND:20210315T110000",
            "END:VEVENT",
        ]
    )


def test_encode_all_day() -> None:
    """Test an all day event is encoded with dates."""
    event = CalendarEvent(
        id="event-1",
        title=SUMMARY,
        start=datetime.datetime(2021, 3, 15, 0, 0, 0),
        end=datetime.date(2021, 3, 16),
        all_day=True,
    )
    lines = _encode(event).split("\r\n")
    assert "DTSTART;VALUE=DATE:20210315" in lines
    assert "DTEND;VALUE=DATE:20210316" in lines


def test_encode_timezone() -> None:
    """Test the timezone of the event is encoded on local times."""
    event = CalendarEvent(
        id="event-1",
        title=SUMMARY,
        start=datetime.datetime(2021, 3, 15, 10, 0, 0),
        end=datetime.datetime(2021, 3, 15, 11, 0, 0),
        timezone="America/New_York",
    )
    lines = _encode(event).split("\r\n")
    assert "DTSTART;TZID=America/New_York:20210315T100000" in lines
    assert "DTEND;TZID=America/New_York:20210315T110000" in lines


def test_encode_aware_timezone() -> None:
    """Test an aware time is encoded with the key of its zone."""
    new_york = zoneinfo.ZoneInfo("America/New_York")
    event = CalendarEvent(
        id="event-1",
        title=SUMMARY,
        start=datetime.datetime(2021, 3, 15, 10, 0, 0, tzinfo=new_york),
        end=datetime.datetime(2021, 3, 15, 15, 0, 0, tzinfo=datetime.timezone.utc),
    )
    lines = _encode(event).split("\r\n")
    assert "DTSTART;TZID=America/New_York:20210315T100000" in lines
    assert "DTEND:20210315T150000Z" in lines


def test_encode_attendee_folding() -> None:
    """Test a long attendee line is folded."""
    event = CalendarEvent(
        id="event-1",
        title=SUMMARY,
        start=datetime.datetime(2021, 3, 15, 10, 0, 0),
        end=datetime.datetime(2021, 3, 15, 11, 0, 0),
        attendees=[
            Attendee(
                cn="user1",
                partstat="ACCEPTED",
                role="ROLE",
                cutype="type",
                rsvp="false",
                email="user1@example.com",
            )
        ],
    )
    assert (
        "ATTENDEE;CN=user1;PARTSTAT=ACCEPTED;ROLE=ROLE;CUTYPE=type;RSVP=false:user1@"
        "\r\n example.com"
    ) in _encode(event)


def test_encode_alarm() -> None:
    """Test the alarm is encoded as a VALARM component."""
    event = CalendarEvent(
        id="event-1",
        title=SUMMARY,
        start=datetime.datetime(2021, 3, 15, 10, 0, 0),
        end=datetime.datetime(2021, 3, 15, 11, 0, 0),
        alarm={
            "ACTION": "DISPLAY",
            "TRIGGER": datetime.timedelta(minutes=-15),
            "DESCRIPTION": "Reminder",
        },
    )
    assert _encode(event).endswith(
        "\r\n".join(
            [
                "BEGIN:VALARM",
                "ACTION:DISPLAY",
                "TRIGGER:-PT15M",
                "DESCRIPTION:Reminder",
                "END:VALARM",
                "END:VEVENT",
            ]
        )
    )


def test_encode_alarm_without_trigger() -> None:
    """Test an alarm without a trigger is not encoded."""
    event = CalendarEvent(
        id="event-1",
        title=SUMMARY,
        start=datetime.datetime(2021, 3, 15, 10, 0, 0),
        end=datetime.datetime(2021, 3, 15, 11, 0, 0),
        alarm={"action": "DISPLAY"},
    )
    assert "VALARM" not in _encode(event)


def test_encode_rrule_recurrence_id_and_extended_props() -> None:
    """Test the order of the encoded properties."""
    event = CalendarEvent(
        id="event-1",
        title=SUMMARY,
        start=datetime.datetime(2021, 3, 15, 10, 0, 0),
        end=datetime.datetime(2021, 3, 15, 11, 0, 0),
        recurrence_id="2020-11-06T08:30:00Z",
        rrule="FREQ=WEEKLY;BYDAY=MO,TU,WE,TH,FR",
        extended_props={
            "organizer": "mailto:jane@example.com",
            "x-note": "a;b",
            "sequence": 1,
        },
    )
    lines = _encode(event).split("\r\n")
    assert lines[5:] == [
        "DTSTART:20210315T100000",
        "DTEND:20210315T110000",
        "RECURRENCE-ID:20201106T083000Z",
        "RRULE:FREQ=WEEKLY;BYDAY=MO,TU,WE,TH,FR",
        "ORGANIZER;CN=jane@example.com:mailto:jane@example.com",
        r"X-NOTE:a\;b",
        "SEQUENCE:1",
        "END:VEVENT",
    ]


@pytest.mark.parametrize(
    ("fields", "missing"),
    [
        ({"start": "20210315T100000", "end": "20210315T110000"}, "title"),
        ({"title": SUMMARY, "end": "20210315T110000"}, "start"),
        ({"title": SUMMARY}, "start, end"),
    ],
)
def test_encode_missing_fields(fields: dict[str, str], missing: str) -> None:
    """Test an event without the fields required for encoding."""
    event = CalendarEvent(id="event-1", **fields)
    with pytest.raises(InvalidEventObjectError, match=missing):
        event.__encode_component__()


def test_encode_then_decode() -> None:
    """Test an encoded event decodes into the same event."""
    component = _vevent(
        *textwrap.dedent(
            """\
            UID:event-1
            SUMMARY:Planning\\, part 2
            DTSTART;TZID=Europe/Paris:20210315T100000
            DTEND;TZID=Europe/Paris:20210315T113000
            DESCRIPTION:Agenda:\\n- one\\n- two
            LOCATION:Room 4
            ATTENDEE;CN=A B;PARTSTAT=ACCEPTED:mailto:a@b.com
            RRULE:FREQ=MONTHLY;BYDAY=-1FR;COUNT=6
            STATUS:TENTATIVE
            CATEGORIES:WORK,PLANNING
            X-DAY;VALUE=DATE:20210320
            BEGIN:VALARM
            ACTION:DISPLAY
            TRIGGER:-PT10M
            END:VALARM"""
        ).split("\n")
    )
    event = CalendarEvent.from_component(component)
    decoded = CalendarEvent.from_component(
        parse_content(
            "\r\n".join(["BEGIN:VCALENDAR", _encode(event), "END:VCALENDAR"])
        )[0].components[0]
    )
    assert decoded.model_dump(exclude={"rrule"}) == event.model_dump(exclude={"rrule"})
    assert decoded.rrule
    assert event.rrule
    assert decoded.rrule.as_rrule_str() == event.rrule.as_rrule_str()


def test_property_order_in_component() -> None:
    """Test the uid property is looked up by name."""
    component = ParsedComponent(
        name="vevent",
        properties=[
            ParsedProperty(name="dtstart", value="20210315T100000"),
            ParsedProperty(name="uid", value="event-1"),
        ],
    )
    assert CalendarEvent.from_component(component).id == "event-1"


def test_encode_alarm_text_values() -> None:
    """Test alarm values given as text are encoded as their default type."""
    event = CalendarEvent(
        id="event-1",
        title=SUMMARY,
        start=datetime.datetime(2021, 3, 15, 10, 0, 0),
        end=datetime.datetime(2021, 3, 15, 11, 0, 0),
        alarm={
            "trigger": "-PT15M",
            "action": "EMAIL",
            "description": "Reminder",
            "attendee": "mailto:a@example.com",
        },
    )
    lines = _encode(event).split("\r\n")
    assert "TRIGGER:-PT15M" in lines
    assert "ACTION:EMAIL" in lines
    assert "ATTENDEE:mailto:a@example.com" in lines
    assert not [line for line in lines if "VALUE=TEXT" in line]


@pytest.mark.parametrize(
    ("key", "value", "line"),
    [
        ("dtstamp", "20210101T000000Z", "DTSTAMP:20210101T000000Z"),
        ("dtstamp", "2021-01-01T00:00:00Z", "DTSTAMP:20210101T000000Z"),
        ("due", "2021-03-15", "DUE;VALUE=DATE:20210315"),
        ("sequence", "3", "SEQUENCE:3"),
        ("dtstamp", "soon", "DTSTAMP;VALUE=TEXT:soon"),
        ("x-note", "soon", "X-NOTE:soon"),
    ],
)
def test_encode_extended_text_values(key: str, value: str, line: str) -> None:
    """Test extended properties given as text are encoded as their default type."""
    event = CalendarEvent(
        id="event-1",
        title=SUMMARY,
        start=datetime.datetime(2021, 3, 15, 10, 0, 0),
        end=datetime.datetime(2021, 3, 15, 11, 0, 0),
        extended_props={key: value},
    )
    assert line in _encode(event).split("\r\n")


def test_date_timezones() -> None:
    """Test the TZID of each date property is recorded."""
    event = CalendarEvent.from_component(
        _vevent(
            "UID:flight-1",
            "DTSTART;TZID=Europe/Paris:20210315T100000",
            "DTEND;TZID=America/New_York:20210315T120000",
            "RECURRENCE-ID;TZID=Europe/Paris:20210315T100000",
            "EXDATE;TZID=Europe/Paris:20210322T100000",
            "DUE:20210316T100000",
        )
    )
    assert event.timezone == "Europe/Paris"
    assert event.timezones == {
        "dtend": "America/New_York",
        "exdate": "Europe/Paris",
    }
    lines = _encode(event).split("\r\n")
    assert "DTSTART;TZID=Europe/Paris:20210315T100000" in lines
    assert "DTEND;TZID=America/New_York:20210315T120000" in lines
    assert "RECURRENCE-ID;TZID=Europe/Paris:20210315T100000" in lines
    assert "EXDATE;TZID=Europe/Paris:20210322T100000" in lines
    assert "DUE:20210316T100000" in lines


def test_floating_end_with_start_timezone() -> None:
    """Test a local time DTEND is not given the TZID of the start."""
    event = CalendarEvent.from_component(
        _vevent(
            "UID:event-1",
            "DTSTART;TZID=Europe/Paris:20210315T100000",
            "DTEND:20210315T110000",
        )
    )
    assert event.timezones == {"dtend": None}
    lines = _encode(event).split("\r\n")
    assert "DTSTART;TZID=Europe/Paris:20210315T100000" in lines
    assert "DTEND:20210315T110000" in lines
