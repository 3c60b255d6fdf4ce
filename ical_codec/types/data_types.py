"""Registry of the rfc5545 value data types.

Each data type is a class registered under its VALUE name (e.g. `DATE-TIME`)
that implements some of the hooks in `DataType`. The registry indexes those
hooks by name, and indexes the python type of each data type so that a
python value can be encoded without an explicit VALUE.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Protocol, TypeVar

from ical_codec.parsing.property import ParsedProperty, ParsedPropertyParameter

_T = TypeVar("_T", bound=type)

_PARSE_HOOK = "__parse_property_value__"
_ENCODE_HOOK = "__encode_property_value__"
_PARAMS_HOOK = "__encode_property_params__"


class DataType(Protocol):
    """Hooks implemented by a data type, each of them optional."""

    @classmethod
    def __property_type__(cls) -> type:
        """Python type of decoded values, when it is not the class itself."""

    @classmethod
    def __parse_property_value__(cls, prop: ParsedProperty) -> Any:
        """Decode the property value into a python value."""

    @classmethod
    def __encode_property_value__(cls, value: Any) -> str:
        """Encode the python value as the ics string value."""

    @classmethod
    def __encode_property_params__(cls, value: Any) -> list[ParsedPropertyParameter]:
        """Encode the property parameters implied by the python value."""


class Registry:
    """Data types indexed by VALUE name and by python type."""

    def __init__(self) -> None:
        self._hooks: dict[str, dict[str, Callable[..., Any]]] = {
            _PARSE_HOOK: {},
            _ENCODE_HOOK: {},
            _PARAMS_HOOK: {},
        }
        self._names_by_type: dict[type, str] = {}

    def register(self, name: str, python_type: bool = True) -> Callable[[_T], _T]:
        """Return a class decorator that registers a data type as `name`.

        Values of the data type's python type are encoded as `name` unless
        `python_type` is False, which is used when several VALUE names share
        one python type.
        """

        def decorator(data_type: _T) -> _T:
            for hook, registered in self._hooks.items():
                if (func := getattr(data_type, hook, None)) is not None:
                    registered[name] = func
            if python_type:
                property_type = getattr(data_type, "__property_type__", None)
                key = property_type() if property_type else data_type
                self._names_by_type[key] = name
            return data_type

        return decorator

    def type_name(self, value: Any) -> str | None:
        """Return the VALUE name used to encode the python value."""
        for value_type in type(value).__mro__:
            if value_type in self._names_by_type:
                return self._names_by_type[value_type]
        return None

    @property
    def parse_parameter_by_name(self) -> dict[str, Callable[[ParsedProperty], Any]]:
        """Decoders by VALUE name."""
        return self._hooks[_PARSE_HOOK]

    @property
    def encode_property_value(self) -> dict[str, Callable[[Any], str]]:
        """Value encoders by VALUE name."""
        return self._hooks[_ENCODE_HOOK]

    @property
    def encode_property_params(
        self,
    ) -> dict[str, Callable[[Any], list[ParsedPropertyParameter]]]:
        """Parameter encoders by VALUE name."""
        return self._hooks[_PARAMS_HOOK]


DATA_TYPE: Registry = Registry()
