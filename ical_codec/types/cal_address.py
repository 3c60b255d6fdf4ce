"""Library for parsing and encoding calendar users such as attendees.

The value of an ATTENDEE or ORGANIZER property is a CAL-ADDRESS, which is
the bare uri of the calendar user. The parameters of the property describe
the user (common name, participation status, role, etc) and are flattened
into fields next to the address.
"""

from __future__ import annotations

import enum
import logging
from typing import Annotated, Any, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict

from ical_codec.parsing.property import ParsedProperty, ParsedPropertyParameter
from ical_codec.util import denormalize_key, normalize_key

from .boolean import BooleanEncoder

_LOGGER = logging.getLogger(__name__)

MAILTO = "mailto:"
COMMON_NAME = "cn"


class CalendarUserType(str, enum.Enum):
    """The type of calendar user."""

    INDIVIDUAL = "INDIVIDUAL"
    GROUP = "GROUP"
    RESOURCE = "RESOURCE"
    ROOM = "ROOM"
    UNKNOWN = "UNKNOWN"


class ParticipationStatus(str, enum.Enum):
    """Participation status for a calendar user."""

    NEEDS_ACTION = "NEEDS-ACTION"
    ACCEPTED = "ACCEPTED"
    DECLINED = "DECLINED"
    # Additional statuses for Events and Todos
    TENTATIVE = "TENTATIVE"
    DELEGATED = "DELEGATED"


class Role(str, enum.Enum):
    """Role for the calendar user."""

    CHAIR = "CHAIR"
    REQUIRED = "REQ-PARTICIPANT"
    OPTIONAL = "OPT-PARTICIPANT"
    NON_PARTICIPANT = "NON-PARTICIPANT"


def _parameter_str(value: Any) -> Any:
    """Accept booleans for parameters like RSVP."""
    if isinstance(value, bool):
        return BooleanEncoder.__encode_property_value__(value)
    return value


ParameterStr = Annotated[Optional[str], BeforeValidator(_parameter_str)]


class Attendee(BaseModel):
    """A calendar user, flattened from a CAL-ADDRESS property and its parameters.

    Property parameters without a dedicated field (e.g. DELEGATED-TO or
    X-NUM-GUESTS) are kept as extra fields, named after the parameter in
    lowercase with '-' replaced by '_'.
    """

    cn: ParameterStr = None
    """The common name associated with the calendar user."""

    partstat: ParameterStr = None
    """The participation status for the calendar user.

    Common values are defined in ParticipationStatus, though also supports
    other values not known by this library so it uses a string.
    """

    role: ParameterStr = None
    """The participation role for the calendar user."""

    cutype: ParameterStr = None
    """The type of calendar user specified by the property."""

    rsvp: ParameterStr = None
    """Whether there is an expectation of a reply from the calendar user."""

    email: str = ""
    """The calendar user address, typically a mailto: uri."""

    model_config = ConfigDict(extra="allow")

    @classmethod
    def __parse_property_value__(cls, prop: ParsedProperty) -> Attendee:
        """Create an Attendee from an ATTENDEE or ORGANIZER property."""
        data: dict[str, Any] = {}
        for param in prop.params or []:
            key = normalize_key(param.name)
            if key in cls.model_fields or len(param.values) == 1:
                data[key] = param.values[0] if param.values else None
            else:
                data[key] = list(param.values)
        data["email"] = prop.value
        return cls.model_validate(data)

    def __encode_property__(self, name: str) -> ParsedProperty:
        """Encode the Attendee as a property with one parameter per field."""
        params = []
        for key, value in self.model_dump(exclude_none=True).items():
            if key == "email":
                continue
            values = value if isinstance(value, list) else [value]
            params.append(
                ParsedPropertyParameter(
                    name=denormalize_key(key), values=[str(item) for item in values]
                )
            )
        return ParsedProperty(name=name, value=self.email, params=params or None)


def organizer_property(address: str) -> ParsedProperty:
    """Encode an organizer address, deriving its common name from a mailto uri."""
    params = None
    if address[: len(MAILTO)].lower() == MAILTO:
        params = [
            ParsedPropertyParameter(name=COMMON_NAME, values=[address[len(MAILTO) :]])
        ]
    else:
        _LOGGER.debug("Organizer '%s' is not a mailto address, omitting cn", address)
    return ParsedProperty(name="organizer", value=address, params=params)
