r"""
Argsmith argument specifications.

Overview
- ArgumentKind: the four value kinds a command line argument can carry
  (string, integer, float, boolean).
- Argument: immutable descriptor for one recognized argument (name, alias,
  kind, required, descr). It has no behavior beyond construction; matching,
  conversion and observation belong to the parser.

- Factories
  • Argument.boolean(name, alias, descr): presence-only switch, never required.
  • Argument.string(name, alias, required, descr): raw string value.
  • Argument.integer(name, alias, required, descr): signed 32-bit integer value.
  • Argument.float(name, alias, required, descr): 32-bit floating point value.

Metadata (sanitized on construction)
- name: non-empty str, no whitespace and no leading "-" (the parser strips
  dashes from tokens before lookup, so a dashed name could never match).
- alias: None | single character (not "-" and not whitespace).
- kind: ArgumentKind.
- required: bool (forced to False for booleans, their presence is the signal).
- descr: str (trimmed, "" when omitted).

Introspection
- SpecType publishes the fields listed in __introspectable__ as read-only
  properties and provides stable __repr__/__rich_repr__.

Quick example:
    >>> from argsmith import Argument
    >>> verbose = Argument.boolean("verbose", "V", "verbose execution")
    >>> path = Argument.string("path", "f", True, "directory to examine")
    >>> path.metavar
    'PATH'
"""
import re
from enum import Enum

from rich.text import Text

from .utils import *


class ArgumentKind(Enum):
    """
    value kinds recognized by the parser.

    the kind drives token consumption during a scan:
    - BOOLEAN consumes no value token (presence stores "true").
    - STRING consumes the next token verbatim.
    - INTEGER / FLOAT consume the next token and validate its literal shape.
    """
    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: validate and normalize argument metadata in place.

    Raises
    - TypeError: when a field has the wrong type.
    - ValueError: when a string field has an invalid shape.
    """
    if not isinstance(name := metadata["name"], str):
        raise TypeError(f"{cls.__typename__} 'name' must be a string")
    elif not (name := name.strip()):
        raise ValueError(f"{cls.__typename__} 'name' cannot be empty")
    elif name.startswith("-"):
        raise ValueError(f"{cls.__typename__} 'name' cannot start with '-'")
    elif re.search(r"\s", name):
        raise ValueError(f"{cls.__typename__} 'name' cannot contain whitespaces")
    metadata["name"] = name

    # None is accepted next to Unset: "no alias" is a legitimate user value here.
    if not isinstance(alias := metadata["alias"], str | None | Unset):
        raise TypeError(f"{cls.__typename__} 'alias' must be a single character string")
    elif isinstance(alias, str) and (len(alias) != 1 or alias == "-" or alias.isspace()):
        raise ValueError(f"{cls.__typename__} 'alias' must be a single character other than '-'")
    metadata["alias"] = coalesce(alias)

    if not isinstance(metadata["kind"], ArgumentKind):
        raise TypeError(f"{cls.__typename__} 'kind' must be an argument kind")

    # Boolean arguments are always optional.
    metadata["required"] = bool(metadata["required"]) and metadata["kind"] is not ArgumentKind.BOOLEAN

    if not isinstance(descr := metadata["descr"], str | Text | Unset):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    metadata["descr"] = str(coalesce(descr, "")).strip()


class Argument(metaclass=SpecType):
    """
    Declared, typed, named command line argument.

    Argument is a plain value object: the parser never writes to it, so the
    same instance can be registered on several parsers or scanned many times.
    Whether an argument was seen during a scan is tracked by the parser itself.

    Properties
    - name, alias, kind, required, descr: sanitized construction metadata.
    - metavar: placeholder shown in help and usage ("PATH" for "path").
    """

    __introspectable__ = (
        "name",
        "alias",
        "kind",
        "required",
        "descr",
    )

    def __new__(
            cls,
            name,
            /,
            alias=Unset,
            kind=ArgumentKind.STRING,
            required=False,
            descr=Unset,
    ):
        """
        Construct an Argument spec with the provided metadata.

        Parameters
        - name: str
          Unique identifier and lookup key ("path" matches "--path").
        - alias: None | str
          Optional single character short form ("f" matches "-f").
        - kind: ArgumentKind
          Value kind; drives token consumption and validation.
        - required: bool
          Whether the argument must appear on the command line. Ignored for
          boolean arguments.
        - descr: str
          Help text; display only.
        """
        metadata = {
            "name": name,
            "alias": alias,
            "kind": kind,
            "required": required,
            "descr": descr,
        }
        _sanitize_metadata(cls, metadata)

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        return self

    @property
    def metavar(self):
        return self._name.upper()

    @classmethod
    def boolean(cls, name, alias=None, descr=""):
        """
        Presence-only argument; storing "true" when seen. Always optional.
        """
        return cls(name, alias, ArgumentKind.BOOLEAN, False, descr)

    @classmethod
    def string(cls, name, alias=None, required=False, descr=""):
        """
        Argument carrying a raw string value (the next token, verbatim).
        """
        return cls(name, alias, ArgumentKind.STRING, required, descr)

    @classmethod
    def integer(cls, name, alias=None, required=False, descr=""):
        """
        Argument carrying a signed 32-bit integer value.
        """
        return cls(name, alias, ArgumentKind.INTEGER, required, descr)

    @classmethod
    def float(cls, name, alias=None, required=False, descr=""):
        """
        Argument carrying a 32-bit floating point value.
        """
        return cls(name, alias, ArgumentKind.FLOAT, required, descr)

    def matches(self, candidate, /):
        """
        Whether a dash-stripped token refers to this argument.

        A candidate matches by full name, or by alias when it is exactly one
        character long.
        """
        if not isinstance(candidate, str):
            raise TypeError(f"{type(self).__typename__} candidate must be a string")
        return candidate == self._name or (len(candidate) == 1 and candidate == self._alias)


__all__ = (
    "ArgumentKind",
    "Argument",
)
