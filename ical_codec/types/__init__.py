"""Library for parsing rfc5545 Property Value Data Types."""

# Import all types for the registry
from . import boolean, date, date_time, duration, integer, text, uri  # noqa: F401
from .cal_address import Attendee, CalendarUserType, ParticipationStatus, Role
from .period import FreeBusyType, Period
from .recur import Frequency, Recur, Weekday, WeekdayValue

__all__ = [
    "Attendee",
    "CalendarUserType",
    "Frequency",
    "FreeBusyType",
    "ParticipationStatus",
    "Period",
    "Recur",
    "Role",
    "Weekday",
    "WeekdayValue",
]
