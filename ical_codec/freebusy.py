"""A grouping of component properties that describe busy or free time.

A VFREEBUSY component is a reply to a request for free/busy time. The
`FreeBusy` model holds the identifying properties along with the busy or free
periods, and keeps every other property as an extra field.
"""

from __future__ import annotations

import datetime
import logging
from typing import Annotated, Any, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, ValidationError

from .const import VFREEBUSY
from .exceptions import CalendarParseError, InvalidPropertyValueError
from .parsing.component import ParsedComponent
from .parsing.property import ParsedProperty
from .property_values import add_property_value, decode_property, decode_property_or_text
from .types import Attendee, Period
from .types.date_time import TzInfoResolver
from .types.text import TextEncoder
from .util import normalize_key, parse_date_and_datetime

_LOGGER = logging.getLogger(__name__)

DateTime = Annotated[datetime.datetime, BeforeValidator(parse_date_and_datetime)]

# Property names mapped to a field with a different name
_FIELD_NAMES = {
    "dtstart": "start",
    "dtend": "end",
    "dtstamp": "timestamp",
}


class FreeBusy(BaseModel):
    """A single free/busy reply with the time periods it describes."""

    uid: Optional[str] = None
    """A globally unique identifier for the reply."""

    organizer: Optional[Attendee] = None
    """The calendar user who requested the free/busy information."""

    attendee: Optional[Attendee] = None
    """The calendar user whose free/busy time is described."""

    start: Optional[DateTime] = None
    """Start of the time range covered by the reply."""

    end: Optional[DateTime] = None
    """End of the time range covered by the reply."""

    timestamp: Optional[DateTime] = None
    """Time the reply was created, from the DTSTAMP property."""

    free_busy: Optional[Period] = Field(default=None, alias="freeBusy")
    """The first free/busy period of the reply."""

    periods: list[Period] = Field(default_factory=list)
    """All free/busy periods of the reply, in content order."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    @classmethod
    def from_component(
        cls,
        component: ParsedComponent,
        tzinfo_resolver: TzInfoResolver | None = None,
    ) -> FreeBusy:
        """Create a FreeBusy from a parsed VFREEBUSY component.

        Any property other than the ones with a dedicated field is decoded
        by its value type and kept as an extra field, named after the
        property in lowercase with '-' replaced by '_'.
        """
        data: dict[str, Any] = {}
        extras: dict[str, Any] = {}
        periods: list[Period] = []
        for prop in component.properties:
            if prop.name == "uid":
                data.setdefault("uid", TextEncoder.__parse_property_value__(prop))
            elif prop.name in ("organizer", "attendee"):
                data.setdefault(prop.name, Attendee.__parse_property_value__(prop))
            elif field_name := _FIELD_NAMES.get(prop.name):
                data.setdefault(field_name, decode_property(prop, tzinfo_resolver))
            elif prop.name == "freebusy":
                periods.extend(_decode_periods(prop, tzinfo_resolver))
            else:
                key = normalize_key(prop.name)
                if key in cls.model_fields:
                    _LOGGER.debug("Ignoring property '%s' on %s", prop.name, VFREEBUSY)
                    continue
                add_property_value(
                    extras, key, decode_property_or_text(prop, tzinfo_resolver)
                )
        if periods:
            data["free_busy"] = periods[0]
            data["periods"] = periods
        try:
            return cls.model_validate({**extras, **data})
        except ValidationError as err:
            _LOGGER.debug("Failed to parse component %s", err)
            message = [f"Failed to parse calendar {VFREEBUSY.upper()} component"]
            for error in err.errors():
                if msg := error.get("msg"):
                    message.append(msg)
            raise CalendarParseError(": ".join(message), detailed_error=str(err)) from err


def _decode_periods(
    prop: ParsedProperty, tzinfo_resolver: TzInfoResolver | None
) -> list[Period]:
    """Decode the comma separated periods of a FREEBUSY property."""
    value = decode_property(prop, tzinfo_resolver)
    values = value if isinstance(value, list) else [value]
    for item in values:
        if not isinstance(item, Period):
            raise InvalidPropertyValueError(prop.name, prop.value, "expected a period")
    return values  # type: ignore[return-value]
