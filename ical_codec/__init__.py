"""A bidirectional codec between rfc5545 iCalendar text and calendar objects.

The parse direction unfolds the content lines, builds the component tree,
then maps VEVENT components into `CalendarEvent` objects with `parse`, or
VFREEBUSY components into `FreeBusy` objects with `parse_freebusy`. The
translate direction encodes a `CalendarEvent` back into folded and escaped
ics text with `translate`.
"""

from .calendar_stream import parse, parse_freebusy, translate
from .const import ICAL_PROPERTIES

__all__ = [
    "ICAL_PROPERTIES",
    "calendar_stream",
    "compat",
    "event",
    "exceptions",
    "freebusy",
    "parse",
    "parse_freebusy",
    "parsing",
    "property_values",
    "translate",
    "types",
    "util",
]
