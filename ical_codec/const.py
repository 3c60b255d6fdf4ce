"""Constants for the ical_codec library."""

# Properties of a VEVENT that are mapped to dedicated fields of an event,
# and are never included in its extended properties.
ICAL_PROPERTIES = (
    "uid",
    "summary",
    "dtstart",
    "dtend",
    "attendee",
    "rrule",
    "recurrence-id",
    "description",
    "location",
    "duration",
)

VEVENT = "vevent"
VALARM = "valarm"
VFREEBUSY = "vfreebusy"

ORGANIZER = "organizer"
