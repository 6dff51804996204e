"""
Argsmith parsing and validation engine.

What this module provides
- Parser: registers Argument specs and Group constraints, scans a token
  stream, and yields a Namespace or a fault.
  • scan(tokens): pure, single-pass, left-to-right scan + post-scan checks.
    Raises faults (see argsmith.faults) and never prints or exits.
  • parse(): process boundary. Scans the injected argv, renders help or the
    first fault, and terminates the process in shell mode.
  • usage() / format_help() / print_help(): rich-based rendering.

Scan rules (strict policy)
- "--help" / "-h" at any position raises HelpRequested.
- tokens starting with "-" are stripped of every leading dash and matched by
  name, or by alias when exactly one character remains; no match is fatal.
- booleans store "true"; strings take the next token verbatim (but never a
  token that looks like an option); integers and floats take the next token
  once it proves a valid 32-bit literal.
- bare tokens are fatal: the parser declares no positionals.
- an argument given twice keeps the value of its last occurrence.

Post-scan checks (first failure wins)
- groups in declaration order: exclusive counts, then conditional parents.
- arguments in declaration order: required arguments must have been observed.

Quick start
    from argsmith import Parser, Argument, Group

    parser = (
        Parser("find duplicate files.")
        .argument(Argument.boolean("verbose", "V", "verbose execution"))
        .argument(Argument.string("path", "f", True, "directory to examine"))
        .argument(Argument.boolean("json", None, "format output as json"))
        .argument(Argument.boolean("csv", None, "format output as csv"))
        .group(Group.exclusive("format", False, {"json", "csv"}))
    )
    arguments = parser.parse()
    path = arguments.get("path")
    verbose = arguments.get("verbose", bool, False)
"""
import difflib
import functools
import re
import shlex
import sys
from collections import defaultdict, deque
from collections.abc import Iterable

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from .arguments import Argument, ArgumentKind
from .faults import *
from .groups import Group, GroupKind
from .namespace import Namespace
from .utils import *

_HELP = ("--help", "-h")

_INTEGER = re.compile(r"[+-]?[0-9]+")
_FLOAT = re.compile(r"[+-]?(?:inf|infinity|nan|(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:e[+-]?[0-9]+)?)", re.IGNORECASE)

_INT32 = range(-2 ** 31, 2 ** 31)


@functools.cache
def _ordinal(number):
    """
    Return a human-friendly ordinal label for a 1-based position.

    - 1..10 are rendered as words ("first"…"tenth").
    - Other numbers use numeric ordinals with correct English suffixes.
    """
    try:
        return {
            1: "first",
            2: "second",
            3: "third",
            4: "fourth",
            5: "fifth",
            6: "sixth",
            7: "seventh",
            8: "eighth",
            9: "ninth",
            10: "tenth",
        }[number]
    except KeyError:
        pass

    # 11th, 12th, 13th (and 111th, 112th, 113th, …)
    if 10 < number % 100 < 20:
        return f"{number}th"

    return f'{number}%s' % {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")


def _tokenize(argv, /):
    """
    Normalize the injected argument vector into a list of strings.

    - Unset: sys.argv.
    - str: shell-like string, split with shlex.split.
    - Iterable[str]: used as-is (values are not trimmed; "" is a legal value).
    """
    if argv is Unset:
        return list(sys.argv)
    if isinstance(argv, str):
        return shlex.split(argv)
    if isinstance(argv, Iterable):
        tokens = list(argv)
        if not all(isinstance(token, str) for token in tokens):
            raise TypeError("parser 'argv' must be a string or an iterable of strings")
        return tokens
    raise TypeError("parser 'argv' must be a string or an iterable of strings")


def _basename(program, /):
    # "/" and "\\" both separate path components.
    return re.split(r"[\\/]", program)[-1]


def _flags(names, /):
    return ", ".join("--" + name for name in sorted(names))


class Parser(metaclass=SpecType):
    """
    Argument parser built from declarative specs and constraint groups.

    Lifecycle
    - construct (optionally injecting argv), register arguments and groups,
      then parse() once. A parser that produced a Namespace is consumed and
      refuses further parse() and registration calls.
    - scan(tokens) can be called any number of times; every call builds its
      own observation state, the registered specs are never mutated.

    Runtime flags
    - shell: print faults/help and exit the process (True) or raise (False).
    - fancy: wrap help and faults in rich panels.
    - colorful: apply the style palette (overridable via __styles__ in __main__).
    """

    __introspectable__ = (
        "descr",
        "program",
        "tokens",
        "arguments",
        "groups",
        "shell",
        "fancy",
        "colorful",
        "consumed",
    )

    __displayable__ = (
        "descr",
        "program",
        "arguments",
        "groups",
        "shell",
    )

    def __new__(
            cls,
            descr="",
            /,
            arguments=(),
            groups=(),
            *,
            argv=Unset,
            shell=True,
            fancy=False,
            colorful=False,
    ):
        """
        Construct a Parser.

        Parameters
        - descr: str
          Purpose of the executable, printed at the top of the help page.
        - arguments: Iterable[Argument]
          Registered in order through argument().
        - groups: Iterable[Group]
          Registered in order through group().
        - argv: Unset | str | Iterable[str]
          Full argument vector including the program name at index 0.
          Unset reads sys.argv.
        - shell, fancy, colorful: bool
          Runtime flags (see class docstring).
        """
        if not isinstance(descr, str | Text):
            raise TypeError(f"{cls.__typename__} 'descr' must be a string")

        vector = _tokenize(argv)
        if not vector:
            raise ValueError(f"{cls.__typename__} 'argv' must start with the program name")

        self = super().__new__(cls)
        self._descr = str(descr).strip()
        self._program = _basename(vector[0])
        self._tokens = vector[1:]
        self._arguments = []
        self._groups = []
        self._shell = bool(shell)
        self._fancy = bool(fancy)
        self._colorful = bool(colorful)
        self._consumed = False

        for argument in arguments:
            self.argument(argument)
        for group in groups:
            self.group(group)
        return self

    def argument(self, argument, /):
        """
        Register an argument spec; returns the parser for chaining.

        Rules
        - an argument named "help" or aliased "h" is dropped silently
          (the built-in help switch cannot be overridden).
        - names and aliases must be unique within the parser.
        """
        if self._consumed:
            raise RuntimeError(f"{type(self).__typename__} was already consumed")
        if not isinstance(argument, Argument):
            raise TypeError(f"{type(self).__typename__} argument() expects an argument spec")

        if argument.name == "help" or argument.alias == "h":
            return self

        for registered in self._arguments:
            if registered.name == argument.name:
                raise ValueError(f"{type(self).__typename__} argument name {argument.name!r} is already in use")
            if argument.alias is not None and registered.alias == argument.alias:
                raise ValueError(f"{type(self).__typename__} argument alias {argument.alias!r} is already in use")

        self._arguments.append(argument)
        return self

    def group(self, group, /):
        """
        Register a constraint group; returns the parser for chaining.
        """
        if self._consumed:
            raise RuntimeError(f"{type(self).__typename__} was already consumed")
        if not isinstance(group, Group):
            raise TypeError(f"{type(self).__typename__} group() expects a group spec")
        self._groups.append(group)
        return self

    def _lookup(self, candidate):
        for argument in self._arguments:
            if argument.matches(candidate):
                return argument
        return None

    def _getvalue(self, argument, input, tokens, index):
        """
        consume and validate the value token of a value-bearing argument.

        parameters
        - argument: the matched spec (never a boolean).
        - input: the option token as typed by the user (e.g., '-c').
        - tokens: deque of the remaining tokens.
        - index: 1-based position of the option token.

        returns
        - the raw value token (validated for its kind).
        """
        try:
            value = tokens.popleft()
        except IndexError:
            raise MissingValueError(
                "missing value for argument %r at %s position" % (input, _ordinal(index)),
                title="missing value",
                code=FaultCode.MISSING_VALUE,
                input=input,
                index=index,
                argument=argument,
                hint="pass a value after the option (for example: %s <%s>)" % (input, argument.metavar),
                docs=getdoc(FaultCode.MISSING_VALUE),
            ) from None

        index += 1
        if value in _HELP:
            raise HelpRequested(value, index=index)

        match argument.kind:
            case ArgumentKind.STRING:
                # option-shaped tokens are never taken as values
                if value.startswith("-"):
                    raise UnexpectedValueError(
                        "unexpected value %r for argument %r at %s position" % (value, input, _ordinal(index)),
                        title="unexpected value",
                        code=FaultCode.UNEXPECTED_VALUE,
                        input=input,
                        value=value,
                        index=index,
                        argument=argument,
                        hint="pass a value for %s before any other option" % input,
                        docs=getdoc(FaultCode.UNEXPECTED_VALUE),
                    )
            case ArgumentKind.INTEGER:
                if not _INTEGER.fullmatch(value) or int(value) not in _INT32:
                    raise ConversionError(
                        "cannot convert `%s` into integer at %s position" % (value, _ordinal(index)),
                        title="conversion failure",
                        code=FaultCode.CONVERSION_FAILURE,
                        input=input,
                        value=value,
                        index=index,
                        argument=argument,
                        hint="%s expects a 32-bit integer (for example: %s 42)" % (input, input),
                        docs=getdoc(FaultCode.CONVERSION_FAILURE),
                    )
            case ArgumentKind.FLOAT:
                if not _FLOAT.fullmatch(value):
                    raise ConversionError(
                        "cannot convert `%s` into floating point number at %s position" % (value, _ordinal(index)),
                        title="conversion failure",
                        code=FaultCode.CONVERSION_FAILURE,
                        input=input,
                        value=value,
                        index=index,
                        argument=argument,
                        hint="%s expects a floating point number (for example: %s 0.5)" % (input, input),
                        docs=getdoc(FaultCode.CONVERSION_FAILURE),
                    )
        return value

    def scan(self, tokens, /):
        """
        scan tokens into a Namespace, then validate groups and required arguments.

        the scan is a single left-to-right pass with no backtracking. the set of
        observed names and the raw mapping are local to this call, so the parser
        and its specs are left untouched.

        raises
        - HelpRequested on "--help" / "-h".
        - UnknownArgumentError, UnexpectedPositionalError,
          MissingValueError, UnexpectedValueError, ConversionError while scanning.
        - GroupViolationError, MissingRequiredError after scanning.
        """
        if isinstance(tokens, str) or not isinstance(tokens, Iterable):
            raise TypeError(f"{type(self).__typename__} scan() expects an iterable of strings")

        tokens = deque(tokens)
        namespace = {}
        observed = set()
        index = 0

        while tokens:
            token = tokens.popleft()
            index += 1
            if not isinstance(token, str):
                raise TypeError(f"{type(self).__typename__} scan() expects an iterable of strings")

            if token in _HELP:
                raise HelpRequested(token, index=index)

            if not token.startswith("-"):
                raise UnexpectedPositionalError(
                    "unexpected positional argument %r at %s position" % (token, _ordinal(index)),
                    title="unexpected positional",
                    code=FaultCode.UNEXPECTED_POSITIONAL,
                    input=token,
                    index=index,
                    hint="values must follow their option; run '%s --help' to see the expected usage" % self._program,
                    docs=getdoc(FaultCode.UNEXPECTED_POSITIONAL),
                )

            if (argument := self._lookup(token.lstrip("-"))) is None:
                suggestions = difflib.get_close_matches(
                    token.lstrip("-"), [argument.name for argument in self._arguments], 5
                )
                try:
                    hint = "did you mean '--%s'? you can also run '%s --help' to see all options" % (
                        suggestions[0], self._program
                    )
                except IndexError:
                    hint = "try '%s --help' to see all available options" % self._program
                raise UnknownArgumentError(
                    "unknown argument %r at %s position" % (token, _ordinal(index)),
                    title="unknown argument",
                    code=FaultCode.UNKNOWN_ARGUMENT,
                    input=token,
                    index=index,
                    suggestions=suggestions,
                    hint=hint,
                    docs=getdoc(FaultCode.UNKNOWN_ARGUMENT),
                )

            if argument.kind is ArgumentKind.BOOLEAN:
                value = "true"
            else:
                value = self._getvalue(argument, token, tokens, index)
                index += 1

            observed.add(argument.name)
            namespace[argument.name] = value

        self._validate(observed)
        return Namespace(namespace)

    def _validate(self, observed):
        """
        run the post-scan checks against the names observed by a scan.

        order
        - every group in declaration order, then every argument in declaration
          order; the first failing check raises and nothing else is evaluated.
        """
        for group in self._groups:
            members = group.members & observed

            if group.required and not members:
                raise MissingRequiredError(
                    "one of %s is required by group %r" % (_flags(group.members), group.name),
                    title="missing required group",
                    code=FaultCode.MISSING_REQUIRED,
                    group=group,
                    hint="add one of %s" % _flags(group.members),
                    docs=getdoc(FaultCode.MISSING_REQUIRED),
                )

            match group.kind:
                case GroupKind.EXCLUSIVE if len(members) > 1:
                    raise GroupViolationError(
                        "%s cannot be used together (group %r)" % (_flags(members), group.name),
                        title="exclusive group violation",
                        code=FaultCode.GROUP_VIOLATION,
                        group=group,
                        observed=frozenset(members),
                        hint="keep only one of %s" % _flags(group.members),
                        docs=getdoc(FaultCode.GROUP_VIOLATION),
                    )
                case GroupKind.CONDITIONAL if members and not group.parents & observed:
                    raise GroupViolationError(
                        "%s requires one of %s (group %r)" % (_flags(members), _flags(group.parents), group.name),
                        title="conditional group violation",
                        code=FaultCode.GROUP_VIOLATION,
                        group=group,
                        observed=frozenset(members),
                        hint="add one of %s" % _flags(group.parents),
                        docs=getdoc(FaultCode.GROUP_VIOLATION),
                    )

        for argument in self._arguments:
            if argument.required and argument.name not in observed:
                raise MissingRequiredError(
                    "missing required argument '--%s'" % argument.name,
                    title="missing required argument",
                    code=FaultCode.MISSING_REQUIRED,
                    input="--" + argument.name,
                    argument=argument,
                    hint="add --%s <%s>" % (argument.name, argument.metavar),
                    docs=getdoc(FaultCode.MISSING_REQUIRED),
                )

    def trigger(self, fault, /, **options):
        """
        surface a fault (or the help request) with this parser's runtime flags.

        faults carry the usage line so the renderer can print it after the hint.
        """
        if isinstance(fault, ParserException):
            options.setdefault("usage", self.usage())
        trigger(fault, **options, tool=self, shell=self.shell, fancy=self.fancy, colorful=self.colorful)

    def parse(self):
        """
        Parse the injected argv and consume the parser.

        Behavior
        - success: returns the Namespace; the parser cannot be parsed again.
        - help: shell mode prints the help page and exits with status 0.
        - fault: shell mode prints the fault and the usage line to stderr and
          exits with status 1. Outside shell mode the fault (or HelpRequested)
          is raised with the rendering options attached.
        """
        if self._consumed:
            raise RuntimeError(f"{type(self).__typename__} was already consumed")
        try:
            namespace = self.scan(self._tokens)
        except (ParserException, HelpRequested) as fault:
            self.trigger(fault)
        else:
            self._consumed = True
            return namespace

    def _palette(self):
        """
        Build the (styler, text) pair shared by the renderers.

        Palette keys
        - usage-label, program-name, usage-section, description-section
        - section-label, option-name, metavar, alias, argument-description
        - group-name, group-description, panel-title

        Customization
        - Define a mapping named __styles__ in __main__ to override any palette entry.
        - When colorful is False, styling is suppressed.
        """
        styles = defaultdict(str, {
            # === Head sections ===
            "usage-label": "bold #00E6FF",
            "program-name": "bold #FF4D94",
            "usage-section": "bold #36C5F0",
            "description-section": "italic #A3A3A3",

            # === Arguments ===
            "section-label": "bold #FFFFFF",
            "option-name": "bold #00E6FF",
            "alias": "bold #22C55E",
            "metavar": "bold #FFD600",
            "argument-description": "#9CA3AF",

            # === Groups ===
            "group-name": "bold #FF4D94",
            "group-description": "#D1D5DB",

            # === Fancy panel ===
            "panel-title": "bold #FF4D94",
        } | getattr(__import__("__main__"), "__styles__", {}))

        def styler(style):
            return styles[style] if self.colorful else ""

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not self.colorful:
                return Text(str(fragment))
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), style)

        return styler, text

    def usage(self):
        """
        Build the usage synopsis.

        Shape
        - usage: <prog> [options] --name <NAME> ... <--a | --b>
        - "[options]" only when an optional argument exists.
        - required value arguments as "--name <NAME>".
        - members of required exclusive groups as "<--a | --b>".
        """
        styler, text = self._palette()

        usage = Text()
        usage.append("usage", styler("usage-label")).append(":")
        usage.append(" ")
        usage.append(text(getattr(__import__("__main__"), "__prog__", self.program), styler("program-name")))

        if any(not argument.required for argument in self._arguments):
            usage.append(" ").append(text("[options]", styler("usage-section")))

        for argument in filter(lambda x: x.required, self._arguments):
            usage.append(" ").append(Text.assemble(
                text("--" + argument.name, styler("option-name")),
                " ",
                text("<%s>" % argument.metavar, styler("metavar")),
            ))

        for group in filter(lambda x: x.kind is GroupKind.EXCLUSIVE and x.required, self._groups):
            usage.append(" ").append(Text.assemble(
                "<",
                Text(" | ").join(text("--" + name, styler("option-name")) for name in sorted(group.members)),
                ">",
            ))

        return usage

    def format_help(self):
        """
        Build the full help page as a single rich Text.

        Layout
        - description paragraph (when set) and the usage synopsis.
        - "options:" section: alias column ("-x," or blank padding), "--name",
          "<NAME>" for value kinds, then descriptions aligned on one column
          computed from the longest entry; a trailing "-h, --help" line.
        - "groups:" trailer describing every relationship in prose (when any).
        """
        styler, text = self._palette()

        renders = Text()
        if self.descr:
            renders.append(text(self.descr, styler("description-section"))).append("\n")
        renders.append(self.usage()).append("\n\n")

        rows = []
        for argument in self._arguments:
            sample = text("--" + argument.name, styler("option-name"))
            if argument.kind is not ArgumentKind.BOOLEAN:
                sample = Text.assemble(sample, " ", text("<%s>" % argument.metavar, styler("metavar")))
            alias = text("-%s," % argument.alias, styler("alias")) if argument.alias else Text("   ")
            rows.append((alias, sample, argument.descr))
        rows.append((
            text("-h,", styler("alias")),
            text("--help", styler("option-name")),
            "print this help message and exit",
        ))

        width = max(len(sample) for _, sample, _ in rows) + 2

        renders.append(text("options", styler("section-label"))).append(":").append("\n")
        renders.append("-------").append("\n")
        for alias, sample, descr in rows:
            renders.append(alias).append(" ").append(sample)
            if descr:
                renders.append(" " * (width - len(sample)))
                renders.append(text(descr, styler("argument-description")))
            renders.append("\n")

        if self._groups:
            renders.append("\n").append(text("groups", styler("section-label"))).append(":").append("\n")
            for group in self._groups:
                if group.kind is GroupKind.EXCLUSIVE:
                    prose = "only one of %s may be used" % _flags(group.members)
                    if group.required:
                        prose += ", and one of them is required"
                else:
                    prose = "%s %s one of %s" % (
                        _flags(group.members),
                        "requires" if len(group.members) == 1 else "require",
                        _flags(group.parents),
                    )
                    if group.required:
                        prose += "; at least one of %s is required" % _flags(group.members)
                renders.append("  ").append(text(group.name, styler("group-name"))).append(": ")
                renders.append(text(prose, styler("group-description"))).append("\n")

        renders.rstrip()
        return renders

    def print_help(self):
        """
        Print the help page to stdout (inside a panel when fancy is set).
        """
        console = Console()
        styler, _ = self._palette()

        renderable = self.format_help()
        if self.fancy:
            renderable = Panel(
                renderable,
                title=Text.assemble("[", " ", f"{self.program} HELP".upper(), " ", "]", style=styler("panel-title")),
                title_align="left",
            )
        console.print(renderable)


__all__ = (
    "Parser",
)
