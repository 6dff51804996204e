"""
Argsmith faults (errors and signals) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for all user-facing issues.
  Codes are grouped by domain to keep copy consistent and make logs/searches predictable.
- ParserException: base type that carries message + options and knows how to
  render itself in a friendly, lowercased, and actionable way.
- HelpRequested: signal raised when "--help" or "-h" is scanned.
- trigger(): central entry point to surface any fault (respecting shell/fancy/colorful).
- getdoc(): host-provided documentation for a code (via __docs__ in __main__).

UX goals
- Position-first messages: every scan-time message includes the ordinal position
  of the offending token (“at third position”).
- Short titles, one-sentence bodies and at most one hint.
- Every fatal fault is followed by the usage line of the tool.

Integration
- The parser raises faults from its pure scan; the parse boundary calls
  trigger(fault, **ctx). In non-shell mode the fault is raised; in shell mode
  it is rendered via rich on stderr and the process exits with status 1.
- Retrieval faults (ArgumentLookupError, ConversionError raised by Namespace.get)
  are plain exceptions for the caller to handle.
"""
import copy
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the parser (stable identifiers).

    grouping (by high-level domain)
    - tokens (1111x)
      • UNKNOWN_ARGUMENT, MISSING_VALUE
    - values (1112x)
      • UNEXPECTED_POSITIONAL, UNEXPECTED_VALUE, CONVERSION_FAILURE
    - constraints (1113x)
      • MISSING_REQUIRED, GROUP_VIOLATION
    - retrieval (1114x)
      • LOOKUP_FAILURE

    normalize() allows host remapping to custom labels while keeping code-stability.
    """
    # --- token errors (1111x) ---
    UNKNOWN_ARGUMENT            = 11112
    MISSING_VALUE               = 11117

    # --- value errors (1112x) ---
    UNEXPECTED_POSITIONAL       = 11121
    UNEXPECTED_VALUE            = 11123
    CONVERSION_FAILURE          = 11124

    # --- constraint errors (1113x) ---
    MISSING_REQUIRED            = 11131
    GROUP_VIOLATION             = 11132

    # --- retrieval errors (1114x) ---
    LOOKUP_FAILURE              = 11141

    def normalize(self):
        """
        label shown for this code in rendered faults.

        a __codes__ mapping defined in __main__ may relabel any code;
        codes it does not mention render as their number.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _program(options):
    main = __import__("__main__")
    try:
        return getattr(main, "__prog__", options["tool"].program)
    except (KeyError, AttributeError):
        return getattr(main, "__prog__", "argsmith")


class ParserException(Exception):
    """
    base fault raised while scanning or validating a command line.

    options
    - title, code, hint: copy used by the renderer.
    - input, index, argument, group: context of the fault (when applicable).
    - usage: rich Text appended after the hint (the tool's usage line).
    - tool, shell, fancy, colorful: runtime flags merged by the parser.
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return str(self.message) if self.message is not Unset else ""

    def __rich__(self):
        main = __import__("__main__")
        colorful = self.options.get("colorful", False)
        fancy = self.options.get("fancy", False)

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",
            "code": "bold #00E5FF",
            "error-title": "bold #FF4DA6",

            # body
            "error-message": "#C8C8D0",
            "hint-arrow": "#9CE19C dim",
            "hint": "italic #9CE19C",
        } | getattr(main, "__styles__", {}))

        def styler(style):
            return styles[style] if colorful else ""

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not colorful:
                return Text(str(fragment))
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), style)

        code = self.options.get("code")
        header = Text.assemble(
            "[ ",
            text(_program(self.options), styler("prog-name")),
            " — ",
            text(code.normalize() if isinstance(code, FaultCode) else "-", styler("code")),
            " | ",
            text(self.options.get("title", "error").title(), styler("error-title")),
            " ]"
        )
        message = text(self.message or "", styler("error-message"))
        renders = [message]
        if hint := self.options.get("hint"):
            renders.append(Text.assemble(text(" → ", styler("hint-arrow")), text(hint, styler("hint"))))
        if usage := self.options.get("usage"):
            renders.append(usage if colorful else Text(str(usage)))

        if fancy:
            return Panel(Group(*renders), title=header, title_align="left")

        return Group(header, *renders)

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "only keyword overrides are accepted"
        return type(self)(self.message, **{**self.options, **overrides})


class UnknownArgumentError(ParserException): ...
class UnexpectedPositionalError(ParserException): ...
class MissingValueError(ParserException): ...
class UnexpectedValueError(ParserException): ...
class ConversionError(ParserException, ValueError): ...
class GroupViolationError(ParserException): ...
class MissingRequiredError(ParserException): ...
class ArgumentLookupError(ParserException, LookupError): ...


class HelpRequested(Exception):
    """
    signal raised by a scan that met "--help" or "-h".

    not a fault: in shell mode the tool's help page is printed to stdout and
    the process exits with status 0; otherwise the signal is raised so callers
    can decide what to do.
    """

    def __init__(self, token="--help", /, **options):
        super().__init__(token)
        self.token = token
        self.options = MappingProxyType(options)

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        self.options["tool"].print_help()
        sys.exit(0)

    def __replace__(self, *unused, **overrides):
        assert not unused, "only keyword overrides are accepted"
        return type(self)(self.token, **{**self.options, **overrides})


def trigger(fault, /, **options):
    """
    merge `options` into a copy of `fault` and let the copy decide how to surface.

    contract
    - faults and HelpRequested qualify; anything without __trigger__/__replace__ does not.
    - options are merged into the fault via copy.replace(fault, **options) before triggering.
    - shell=True prints and exits, anything else raises the merged copy.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must be a fault or a help request")
    copy.replace(fault, **options).__trigger__()


def getdoc(code, /):
    """
    documentation registered by the host for `code`, or None.

    the host application may expose a __docs__ mapping in __main__ where keys
    are FaultCode members.
    when not found, returns None.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "ParserException",
    "UnknownArgumentError",
    "UnexpectedPositionalError",
    "MissingValueError",
    "UnexpectedValueError",
    "ConversionError",
    "GroupViolationError",
    "MissingRequiredError",
    "ArgumentLookupError",
    "HelpRequested",
    "FaultCode",
    "trigger",
    "getdoc",
)
