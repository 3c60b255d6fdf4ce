"""Entry points for converting between ics content and calendar objects.

This is an example of parsing the events of an ics file:
```python
from pathlib import Path
from ical_codec import parse

filename = Path("example/calendar.ics")
with filename.open() as ics_file:
    events = parse(ics_file.read())
    print("File contains %s event(s)" % len(events))
```

An event is encoded back into ics content with `translate`, which emits a
complete calendar holding the event and its recurrence exceptions:

```python
from pathlib import Path
from ical_codec import translate

filename = Path("/tmp/output.ics")
with filename.open(mode="w") as ics_file:
    ics_file.write(translate(events[0]))
```
"""

from __future__ import annotations

import logging

from .compat.value_compat import is_orphan_exceptions_enabled
from .const import VEVENT, VFREEBUSY
from .event import CalendarEvent
from .exceptions import NoFreeBusyDataError
from .freebusy import FreeBusy
from .parsing.component import ParsedComponent, encode_content, parse_calendar
from .parsing.const import ROOT_COMPONENT
from .parsing.property import ParsedProperty
from .types.date_time import TzInfoResolver

_LOGGER = logging.getLogger(__name__)

VERSION = "2.0"
CALSCALE = "GREGORIAN"


def _group_exceptions(instances: list[CalendarEvent]) -> list[CalendarEvent]:
    """Nest each recurrence exception under the master event with its id.

    The master is the first event for an id without a recurrence id. The
    order of the events and of the exceptions of each master is preserved.
    """
    masters: dict[str, CalendarEvent] = {}
    for instance in instances:
        if instance.recurrence_id is None:
            masters.setdefault(instance.id, instance)

    result: list[CalendarEvent] = []
    for instance in instances:
        if instance.recurrence_id is None:
            result.append(instance)
        elif master := masters.get(instance.id):
            master.exceptions.append(instance)
        elif is_orphan_exceptions_enabled():
            _LOGGER.debug("Keeping recurrence exception without master '%s'", instance.id)
            result.append(instance)
        else:
            _LOGGER.debug(
                "Dropping recurrence exception '%s' (%s) without a master event",
                instance.id,
                instance.recurrence_id,
            )
    return result


def parse(
    ics: str, tzinfo_resolver: TzInfoResolver | None = None
) -> list[CalendarEvent]:
    """Parse the events of an rfc5545 calendar.

    Every VEVENT of the calendar is decoded first, then recurrence exceptions
    are grouped under their master event so only master events are returned
    at the top level. Components other than VEVENT are ignored.

    Raises CalendarParseError when the content is malformed.
    """
    calendar = parse_calendar(ics)
    instances = [
        CalendarEvent.from_component(component, tzinfo_resolver)
        for component in calendar.get_components(VEVENT)
    ]
    _LOGGER.debug("Parsed %d event instances", len(instances))
    return _group_exceptions(instances)


def parse_freebusy(
    ics: str, tzinfo_resolver: TzInfoResolver | None = None
) -> list[FreeBusy]:
    """Parse the free/busy replies of an rfc5545 calendar.

    Raises NoFreeBusyDataError when the calendar has no VFREEBUSY component.
    """
    calendar = parse_calendar(ics)
    if not (components := calendar.get_components(VFREEBUSY)):
        raise NoFreeBusyDataError(
            f"Calendar contains no {VFREEBUSY.upper()} component"
        )
    return [
        FreeBusy.from_component(component, tzinfo_resolver)
        for component in components
    ]


def translate(event: CalendarEvent) -> str:
    """Encode the event and its recurrence exceptions as an rfc5545 calendar.

    Raises InvalidEventObjectError when a field required by the output is
    missing from the event or one of its exceptions.
    """
    calendar = ParsedComponent(
        name=ROOT_COMPONENT,
        properties=[
            ParsedProperty(name="version", value=VERSION),
            ParsedProperty(name="calscale", value=CALSCALE),
        ],
    )
    for instance in [event, *event.exceptions]:
        calendar.components.append(instance.__encode_component__())
    return encode_content([calendar])
