"""
Argsmith constraint groups.

A group declares a relationship over a set of argument names, checked by the
parser once every token has been scanned:

- exclusive: at most one member may be observed; when required, exactly one.
- conditional: when any member is observed, at least one parent must be
  observed too; when required, at least one member must be observed at all.

Names are stored without their leading dashes, so "--verbose" and "verbose"
denote the same member. Groups are not cross-checked against a parser: a name
that no argument declares is simply never observed.

Quick example:
    >>> from argsmith import Group
    >>> output = Group.exclusive("output", True, {"json", "csv"})
    >>> tls = Group.conditional("tls", False, {"cert", "key"}, {"secure"})
"""
from collections.abc import Iterable
from enum import Enum

from rich.text import Text

from .utils import *


class GroupKind(Enum):
    EXCLUSIVE = "exclusive"
    CONDITIONAL = "conditional"


def _sanitize_names(cls, field, names, /):
    """
    Internal: validate an iterable of argument names and normalize it.

    Result
    - frozenset of names with leading dashes stripped.

    Raises
    - TypeError: when names is not an iterable of strings (a plain string is
      rejected as a container).
    - ValueError: when a name is empty once trimmed and undashed.
    """
    if not isinstance(names, Iterable) or isinstance(names, str | Text):
        raise TypeError(f"{cls.__typename__} {field!r} must be an iterable of strings")

    sanitized = set()
    for name in names:
        if not isinstance(name, str):
            raise TypeError(f"{cls.__typename__} {field!r} must be an iterable of strings")
        elif not (name := name.strip().lstrip("-")):
            raise ValueError(f"{cls.__typename__} {field!r} cannot contain empty names")
        sanitized.add(name)
    return frozenset(sanitized)


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: validate and normalize group metadata in place.
    """
    if not isinstance(name := metadata["name"], str):
        raise TypeError(f"{cls.__typename__} 'name' must be a string")
    elif not (name := name.strip()):
        raise ValueError(f"{cls.__typename__} 'name' cannot be empty")
    metadata["name"] = name

    if not isinstance(metadata["kind"], GroupKind):
        raise TypeError(f"{cls.__typename__} 'kind' must be a group kind")

    metadata["required"] = bool(metadata["required"])

    if not (members := _sanitize_names(cls, "members", metadata["members"])):
        raise ValueError(f"{cls.__typename__} must have at least one member")
    metadata["members"] = members

    parents = _sanitize_names(cls, "parents", metadata["parents"])
    if metadata["kind"] is GroupKind.CONDITIONAL and not parents:
        raise ValueError(f"conditional {cls.__typename__} must have at least one parent")
    if metadata["kind"] is GroupKind.EXCLUSIVE and parents:
        raise ValueError(f"exclusive {cls.__typename__} cannot have parents")
    metadata["parents"] = parents


class Group(metaclass=SpecType):
    """
    Declared relationship between arguments, evaluated after a scan.

    Properties
    - name: label used in diagnostics and in the help trailer.
    - kind: GroupKind.EXCLUSIVE or GroupKind.CONDITIONAL.
    - required: whether the group has to be satisfied by at least one member.
    - members: names governed by the group.
    - parents: names that must co-occur with any observed member (conditional only).
    """

    __introspectable__ = (
        "name",
        "kind",
        "required",
        "members",
        "parents",
    )

    def __new__(cls, name, kind, /, required=False, members=(), parents=()):
        metadata = {
            "name": name,
            "kind": kind,
            "required": required,
            "members": members,
            "parents": parents,
        }
        _sanitize_metadata(cls, metadata)

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        return self

    @classmethod
    def exclusive(cls, name, required, members):
        """
        At most one of `members` may be observed (exactly one when required).
        """
        return cls(name, GroupKind.EXCLUSIVE, required, members)

    @classmethod
    def conditional(cls, name, required, members, parents):
        """
        Observed `members` need at least one observed parent; when required,
        at least one member must be observed.
        """
        return cls(name, GroupKind.CONDITIONAL, required, members, parents)


__all__ = (
    "GroupKind",
    "Group",
)
