"""Exceptions for ical_codec library."""


class CalendarError(Exception):
    """Base exception for all ical_codec errors."""


class CalendarParseError(CalendarError):
    """Exception raised when ics content is structurally malformed.

    The 'message' attribute contains a human-readable message about the
    error that occurred. The 'detailed_error' attribute can provide additional
    information about the error, such as the offending content line or the
    nested error, useful for debugging purposes.
    """

    def __init__(self, message: str, *, detailed_error: str | None = None) -> None:
        """Initialize the CalendarParseError with a message."""
        super().__init__(message)
        self.message = message
        self.detailed_error = detailed_error


class InvalidPropertyValueError(CalendarError, ValueError):
    """Exception raised when a property value can't be decoded as its type.

    The 'name' attribute is the lowercase property name and 'raw' is the
    undecoded value from the content line.
    """

    def __init__(self, name: str, raw: str, reason: str | None = None) -> None:
        """Initialize InvalidPropertyValueError."""
        message = f"Invalid value for property '{name}': '{raw}'"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
        self.name = name
        self.raw = raw


class NoFreeBusyDataError(CalendarError):
    """Exception raised when a calendar has no VFREEBUSY component."""


class InvalidEventObjectError(CalendarError):
    """Exception raised when an event is missing fields required to encode it."""
