"""Decoding and encoding of property values by their rfc5545 value type.

The value type of a property is determined by its VALUE parameter when
present, otherwise by a default for well known property names, otherwise it
is TEXT. Properties that are not mapped to a dedicated field of a model are
decoded into a `PropertyValue`, a python value whose type follows the value
type (e.g. a `datetime.datetime` for DATE-TIME, a `Recur` for RECUR).
"""

from __future__ import annotations

import datetime
import logging
from collections.abc import Iterable
from typing import Any, Union

from .compat.value_compat import is_strict_values_enabled
from .exceptions import InvalidPropertyValueError
from .parsing.property import ParsedProperty, ParsedPropertyParameter
from .types.data_types import DATA_TYPE
from .types.date import DATE_REGEX
from .types.date_time import TzInfoResolver, parse_property_value
from .types.period import Period
from .types.recur import Recur
from .types.text import TextEncoder, split_unescaped
from .util import parse_date_and_datetime

_LOGGER = logging.getLogger(__name__)

ATTR_VALUE = "value"

TEXT = "TEXT"
DATE = "DATE"
DATE_TIME = "DATE-TIME"
DURATION = "DURATION"
RECUR = "RECUR"
PERIOD = "PERIOD"
CAL_ADDRESS = "CAL-ADDRESS"
URI = "URI"
INTEGER = "INTEGER"

DEFAULT_VALUE_TYPES = {
    "dtstart": DATE_TIME,
    "dtend": DATE_TIME,
    "dtstamp": DATE_TIME,
    "created": DATE_TIME,
    "last-modified": DATE_TIME,
    "due": DATE_TIME,
    "completed": DATE_TIME,
    "recurrence-id": DATE_TIME,
    "exdate": DATE_TIME,
    "rdate": DATE_TIME,
    "duration": DURATION,
    "trigger": DURATION,
    "rrule": RECUR,
    "exrule": RECUR,
    "freebusy": PERIOD,
    "attendee": CAL_ADDRESS,
    "organizer": CAL_ADDRESS,
    "url": URI,
    "tzurl": URI,
    "attach": URI,
    "sequence": INTEGER,
    "priority": INTEGER,
    "percent-complete": INTEGER,
    "repeat": INTEGER,
}

# Repeated values can either be specified as multiple separate values, but
# also some values support repeated values within a single value with a
# comma delimiter, listed here.
MULTI_VALUED = {
    "categories",
    "resources",
    "exdate",
    "rdate",
    "freebusy",
}

# Value types where a python str is encoded verbatim rather than escaped
_STR_VALUE_TYPES = (TEXT, URI, CAL_ADDRESS)

# Value types a property also accepts with an explicit VALUE parameter
_ALTERNATE_VALUE_TYPES = {"trigger": (DATE_TIME,)}

ScalarValue = Union[
    bool,
    datetime.datetime,
    datetime.date,
    datetime.timedelta,
    Recur,
    Period,
    int,
    float,
    str,
]
PropertyValue = Union[ScalarValue, list[ScalarValue]]


def value_type_name(prop: ParsedProperty) -> str:
    """Return the value type of the property."""
    if value_type := prop.get_parameter_value(ATTR_VALUE):
        return value_type.upper()
    return DEFAULT_VALUE_TYPES.get(prop.name, TEXT)


def _decode_single(
    prop: ParsedProperty, type_name: str, tzinfo_resolver: TzInfoResolver | None
) -> ScalarValue:
    """Decode a single value of the property as the specified type."""
    if type_name == DATE_TIME:
        if not prop.get_parameter(ATTR_VALUE) and DATE_REGEX.fullmatch(prop.value):
            type_name = DATE
        else:
            return parse_property_value(prop, tzinfo_resolver)
    if not (decoder := DATA_TYPE.parse_parameter_by_name.get(type_name)):
        _LOGGER.debug(
            "Unsupported value type '%s' for '%s', using raw value", type_name, prop.name
        )
        return prop.value
    return decoder(prop)


def decode_property(
    prop: ParsedProperty, tzinfo_resolver: TzInfoResolver | None = None
) -> PropertyValue:
    """Decode the property value according to its value type.

    Raises InvalidPropertyValueError when the value does not match the type.
    """
    type_name = value_type_name(prop)
    _LOGGER.debug("Decoding '%s' as value type '%s'", prop.name, type_name)
    try:
        if prop.name not in MULTI_VALUED:
            return _decode_single(prop, type_name, tzinfo_resolver)
        parts = (
            split_unescaped(prop.value) if type_name == TEXT else prop.value.split(",")
        )
        return [
            _decode_single(
                ParsedProperty(name=prop.name, value=part, params=prop.params),
                type_name,
                tzinfo_resolver,
            )
            for part in parts
        ]
    except InvalidPropertyValueError:
        raise
    except ValueError as err:
        raise InvalidPropertyValueError(prop.name, prop.value, str(err)) from err


def decode_property_or_text(
    prop: ParsedProperty, tzinfo_resolver: TzInfoResolver | None = None
) -> PropertyValue:
    """Decode the property value, falling back to text for invalid values."""
    try:
        return decode_property(prop, tzinfo_resolver)
    except InvalidPropertyValueError as err:
        if is_strict_values_enabled():
            raise
        _LOGGER.debug("Using text value for property '%s': %s", prop.name, err)
        return TextEncoder.__parse_property_value__(prop)


def add_property_value(
    values: dict[str, PropertyValue], name: str, value: PropertyValue
) -> None:
    """Add a decoded value, accumulating values of a repeated property."""
    if name not in values:
        values[name] = value
        return
    existing = values[name]
    if name in MULTI_VALUED:
        existing_list = existing if isinstance(existing, list) else [existing]
        values[name] = existing_list + (value if isinstance(value, list) else [value])
    elif isinstance(existing, list):
        existing.append(value)  # type: ignore[arg-type]
    else:
        values[name] = [existing, value]  # type: ignore[list-item]


def decode_properties(
    props: Iterable[ParsedProperty], tzinfo_resolver: TzInfoResolver | None = None
) -> dict[str, PropertyValue]:
    """Decode the properties into a mapping of property name to value."""
    values: dict[str, PropertyValue] = {}
    for prop in props:
        add_property_value(values, prop.name, decode_property_or_text(prop, tzinfo_resolver))
    return values


def _coerce_str(name: str, value: Any) -> Any:
    """Decode a str given for a property whose default value type is not text.

    The value is tried as the default type, then as any alternate type of the
    property, and is left as a str when none of them accept it.
    """
    default_type = DEFAULT_VALUE_TYPES.get(name, TEXT)
    if not isinstance(value, str) or default_type in _STR_VALUE_TYPES:
        return value
    for type_name in (default_type, *_ALTERNATE_VALUE_TYPES.get(name, ())):
        try:
            if type_name == DATE_TIME:
                return parse_date_and_datetime(value)
            return _decode_single(
                ParsedProperty(name=name, value=value), type_name, None
            )
        except ValueError as err:
            _LOGGER.debug("Value for '%s' is not %s: %s", name, type_name, err)
    return value


def _encode_type_name(name: str, value: Any) -> str:
    """Return the value type used to encode the python value."""
    default_type = DEFAULT_VALUE_TYPES.get(name, TEXT)
    if isinstance(value, str):
        return default_type if default_type in _STR_VALUE_TYPES else TEXT
    if (type_name := DATA_TYPE.type_name(value)) is None:
        raise ValueError(f"Unable to encode value for property '{name}': {value!r}")
    return type_name


def _encode_single(type_name: str, value: Any) -> str:
    return DATA_TYPE.encode_property_value[type_name](value)


def _new_property(name: str, type_name: str, value: str, sample: Any) -> ParsedProperty:
    params: list[ParsedPropertyParameter] = []
    if type_name != DEFAULT_VALUE_TYPES.get(name, TEXT):
        params.append(ParsedPropertyParameter(name=ATTR_VALUE, values=[type_name]))
    if params_encoder := DATA_TYPE.encode_property_params.get(type_name):
        params.extend(params_encoder(sample))
    return ParsedProperty(name=name, value=value, params=params or None)


def encode_property(name: str, value: PropertyValue) -> list[ParsedProperty]:
    """Encode a python value as one or more properties.

    Multi-valued property names produce a single comma separated property,
    and any other list produces one property per item.
    """
    name = name.lower()
    values: list[Any] = [
        _coerce_str(name, item)
        for item in (value if isinstance(value, list) else [value])
    ]
    if not values:
        return []
    if name in MULTI_VALUED:
        type_name = _encode_type_name(name, values[0])
        encoded = ",".join(_encode_single(type_name, item) for item in values)
        return [_new_property(name, type_name, encoded, values[0])]
    result = []
    for item in values:
        type_name = _encode_type_name(name, item)
        result.append(
            _new_property(name, type_name, _encode_single(type_name, item), item)
        )
    return result
