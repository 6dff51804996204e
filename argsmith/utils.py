"""
Shared building blocks for the argsmith specs.

- Unset: "nothing given" marker for parameters where None is a real value.
- coalesce(): resolve Unset to a fallback.
- rename(): give generated callables readable names in tracebacks.
- mirror(): read-only property over a "_field", copying containers out.
- SpecType: metaclass of Argument, Group, Parser and Namespace.
"""
import builtins
import functools
import operator
import re
from collections.abc import Sequence, Mapping, Set
from typing import final


@final
class UnsetType:
    """
    Type of the Unset marker.

    There is exactly one instance; it is falsy, prints as "Unset" and may
    appear in isinstance() unions (``str | None | Unset``).
    """

    def __or__(self, other, /):
        try:
            return type(self) | other
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


Unset = UnsetType()



def coalesce(object, default=None, /):
    """
    Return `object`, or `default` when `object` is Unset.

    None, 0 and "" are real values and are returned untouched.
    """
    return object if object is not Unset else default


def rename(*parameters):
    """
    rename(callable, name) -> callable
    rename(name) -> decorator

    Overwrite __name__ and __qualname__ of a Python-level callable.
    """
    match len(parameters):
        case 2:
            callable, name = parameters
            if not builtins.callable(callable):
                raise TypeError("rename() first argument must be callable")
            if not isinstance(name, str):
                raise TypeError("rename() second argument must be a string")
            try:
                callable.__name__ = callable.__qualname__ = name
            except (AttributeError, TypeError):
                raise TypeError("rename() cannot update %r" % callable) from None
            return callable
        case 1:
            name, = parameters
            if not isinstance(name, str):
                raise TypeError("@rename() argument must be a string")

            def decorator(callable):
                return rename(callable, name)

            return decorator
        case _:
            raise TypeError("rename() takes 1 or 2 arguments but %d were given" % len(parameters))


def _detach(object):
    # Containers come out as fresh immutable copies; strings are left alone.
    match object:
        case str():
            return object
        case Sequence():
            return tuple(map(_detach, object))
        case Mapping():
            return {key: _detach(value) for key, value in object.items()}
        case Set():
            return frozenset(map(_detach, object))
    return object


def mirror(name, /):
    """
    Property reading "_{name}" from the instance.

    Lists come out as tuples, sets as frozensets and mappings as new dicts,
    so nothing handed to a caller aliases the instance's own state.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _detach(getattr(self, "_" + name))

    return property(getter)


class SpecType(type):
    """
    Metaclass for the declarative argsmith types.

    Every class built by it gets
    - __typename__: class name in kebab case ("Argument" -> "argument"),
      used as the subject of validation messages;
    - one read-only mirror() property per name in __introspectable__;
    - __repr__ and __rich_repr__ listing __displayable__ (or, when that is
      not set, __introspectable__).
    """
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
        properties = {field: mirror(field) for field in namespace.get("__introspectable__", ())}
        typename = re.sub(r"(?<!^)(?=[A-Z])", "-", name).lower()
        self = super().__new__(cls, name, bases, namespace | properties | {"__typename__": typename})

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for field in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield field, getattr(self, field)

        @rename("__repr__")
        def __repr__(self):
            fields = map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__())
            return "%s(%s)" % (type(self).__typename__, ", ".join(fields))

        self.__rich_repr__ = __rich_repr__
        self.__repr__ = __repr__
        return self


__all__ = (
    "coalesce",
    "rename",
    "mirror",
    "UnsetType",
    "SpecType",
    "Unset",
)
