"""
Argsmith parse results.

Namespace is the read-only mapping a successful parse hands back: argument
names to the raw strings seen on the command line ("true" for booleans).
Values are kept as strings; conversion happens on retrieval, where failures
are recoverable exceptions rather than process exits.

Retrieval
- get(name, type=str, default=Unset): convert the stored string with `type`.
  • bool accepts exactly "true" / "false".
  • int accepts an optional sign followed by decimal digits.
  • any other callable is applied to the raw string; TypeError/ValueError
    become ConversionError.
  • a missing name raises ArgumentLookupError unless a default is given.
- get_raw(name): the stored string or None.
- has(name): presence, no parsing.

Quick example:
    >>> namespace = Namespace({"count": "5", "verbose": "true"})
    >>> namespace.get("count", int)
    5
    >>> namespace.get("json", bool, False)
    False
"""
import re
from collections.abc import Mapping
from types import MappingProxyType

from .faults import *
from .utils import *


def _boolean(value, /):
    match value:
        case "true":
            return True
        case "false":
            return False
    raise ValueError(f"invalid boolean literal {value!r}")


def _integer(value, /):
    if not re.fullmatch(r"[+-]?[0-9]+", value):
        raise ValueError(f"invalid integer literal {value!r}")
    return int(value)


# str(...) and float(...) are lenient enough; bool(...) and int(...) are not.
_converters = {
    bool: _boolean,
    int: _integer,
}


class Namespace(metaclass=SpecType):
    """
    Immutable mapping of argument names to raw string values.
    """

    __introspectable__ = (
        "raw",
    )

    def __init__(self, mapping=(), /):
        self._raw = MappingProxyType(dict(mapping))

    def get(self, name, type=str, /, default=Unset):
        """
        Return the value of `name` converted with `type`.

        Raises
        - ArgumentLookupError: `name` was never seen and no default was given.
        - ConversionError: the stored string cannot be converted into `type`.
        """
        if not callable(type):
            raise TypeError(f"{__class__.__typename__} get() 'type' must be callable")
        try:
            value = self._raw[name]
        except KeyError:
            if default is not Unset:
                return default
            raise ArgumentLookupError(
                "inexistent %r value requested" % name,
                title="unknown value",
                code=FaultCode.LOOKUP_FAILURE,
                input=name,
                hint="check has(%r) first or pass a default" % name,
                docs=getdoc(FaultCode.LOOKUP_FAILURE),
            ) from None

        try:
            return _converters.get(type, type)(value)
        except (TypeError, ValueError):
            raise ConversionError(
                "cannot convert value `%s` into type `%s`" % (value, getattr(type, "__name__", type)),
                title="conversion failure",
                code=FaultCode.CONVERSION_FAILURE,
                input=name,
                hint="request %r with a type matching its declared kind" % name,
                docs=getdoc(FaultCode.CONVERSION_FAILURE),
            ) from None

    def get_raw(self, name, /):
        return self._raw.get(name)

    def has(self, name, /):
        return name in self._raw

    def __contains__(self, name, /):
        return name in self._raw

    def __iter__(self):
        return iter(self._raw)

    def __len__(self):
        return len(self._raw)

    def __eq__(self, other, /):
        if isinstance(other, Namespace):
            return dict(self._raw) == dict(other._raw)
        if isinstance(other, Mapping):
            return dict(self._raw) == dict(other)
        return NotImplemented

    __hash__ = None


__all__ = (
    "Namespace",
)
