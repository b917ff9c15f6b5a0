"""
cliengine faults and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing
  problem, grouped by domain so logs and searches stay predictable.
- CommandException: base type carrying a message plus read-only options; it
  knows how to render itself with rich (single line, or a panel when fancy).
- Concrete faults for routing, missing fields and invalid values.
- trigger(): render a fault on a console with runtime options merged in.

UX goals
- Position-first messages for positionals ("at second position") and
  name-first messages for flags.
- Lowercased, one-sentence bodies with a single hint.
- Styles and program name are configurable from __main__ (__styles__,
  __prog__) and codes can be relabelled with __codes__.
"""
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset, coalesce

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping
    - routing (1110x)
      • UNKNOWN_COMMAND
    - flags (1111x)
      • MISSING_FLAG, INVALID_FLAG
    - positionals (1112x)
      • MISSING_ARGUMENT, INVALID_ARGUMENT
    - values (1113x)
      • INVALID_VALUE

    gaps between groups leave room for new codes without renumbering.
    """
    # --- routing errors ---
    UNKNOWN_COMMAND  = 11101

    # --- flag errors ---
    MISSING_FLAG     = 11111
    INVALID_FLAG     = 11112

    # --- positional errors ---
    MISSING_ARGUMENT = 11121
    INVALID_ARGUMENT = 11122

    # --- value errors ---
    INVALID_VALUE    = 11131

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__ to
        override numeric ids with friendlier labels.
        """
        return str(getattr(sys.modules["__main__"], "__codes__", {}).get(self, self.value))


_STYLES = {
    # header parts
    "prog-name": "bold #E6E6F0",
    "code": "bold #00E5FF",
    "error-title": "bold #FF4DA6",

    # body
    "error-message": "#C8C8D0",
    "hint-arrow": "#9CE19C dim",
    "hint": "italic #9CE19C",
}


class CommandException(Exception):
    """
    Base class for every fault raised or reported by cliengine.

    Options are free-form and read-only; the renderer understands
    code, title, hint, prog, fancy and colorful. Faults are copied with new
    options through __replace__ rather than mutated.
    """
    __code__ = Unset
    __title__ = "command error"

    def __init__(self, message, /, **options):
        if not isinstance(message, str):
            raise TypeError(f"{type(self).__name__} message must be a string")
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType({
            "code": type(self).__code__,
            "title": type(self).__title__,
        } | options)

    @property
    def code(self):
        return self.options["code"]

    @property
    def hint(self):
        return self.options.get("hint")

    def __str__(self):
        return self.message

    def __rich__(self):
        main = sys.modules["__main__"]
        colorful = self.options.get("colorful", True)
        fancy = self.options.get("fancy", False)

        styles = defaultdict(str, _STYLES | getattr(main, "__styles__", {}))

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if isinstance(fragment, Text):
                return fragment if colorful else Text(fragment.plain)
            return Text(str(fragment), styles[style] if colorful else "")

        prog = coalesce(self.options.get("prog", Unset), getattr(main, "__prog__", "cliengine"))
        code = self.code.normalize() if isinstance(self.code, FaultCode) else coalesce(self.code, "-")

        header = Text.assemble(
            "[ ",
            text(prog, "prog-name"),
            " — ",
            text(code, "code"),
            " | ",
            text(self.options["title"].title(), "error-title"),
            " ]",
        )
        message = text(self.message, "error-message")
        hint = Text.assemble(text(" → ", "hint-arrow"), text(self.hint, "hint")) if self.hint else Text("")

        if fancy:
            return Panel(Group(message, hint) if self.hint else message, title=header, title_align="left")

        return Text.assemble(header, " ", message, hint)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})

    def __reduce__(self):
        return _rebuild, (type(self), self.message, dict(self.options))


def _rebuild(cls, message, options):
    return cls(message, **options)


class UnknownCommandError(CommandException):
    __code__ = FaultCode.UNKNOWN_COMMAND
    __title__ = "unknown command"


class MissingFieldError(CommandException):
    """A required positional argument or flag was not supplied."""
    __title__ = "missing field"

    @property
    def field(self):
        return self.options.get("field")


class MissingArgumentError(MissingFieldError):
    __code__ = FaultCode.MISSING_ARGUMENT
    __title__ = "missing argument"


class MissingFlagError(MissingFieldError):
    __code__ = FaultCode.MISSING_FLAG
    __title__ = "missing flag"


class InvalidValueError(CommandException):
    """A raw string could not be coerced to the expected argument type."""
    __code__ = FaultCode.INVALID_VALUE
    __title__ = "invalid value"


class InvalidFieldError(CommandException):
    """A field's raw value could not be parsed; `cause` holds the value fault."""
    __title__ = "invalid field"

    @property
    def field(self):
        return self.options.get("field")

    @property
    def cause(self):
        return self.options.get("cause")


class InvalidArgumentError(InvalidFieldError):
    __code__ = FaultCode.INVALID_ARGUMENT
    __title__ = "invalid argument"


class InvalidFlagError(InvalidFieldError):
    __code__ = FaultCode.INVALID_FLAG
    __title__ = "invalid flag"


def trigger(fault, /, console=console, **options):
    """
    render a fault on a console, merging runtime options into it first.

    contract
    - fault must provide __replace__ and __rich__ (see CommandException).
    - options are merged via __replace__ before printing (prog, fancy, colorful...).
    - returns the merged fault so callers can keep or inspect it.
    """
    if (
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__) or
        not hasattr(fault, "__rich__")
    ):
        raise TypeError("trigger() argument must have __replace__ and __rich__ methods")
    fault = fault.__replace__(**options)
    console.print(fault, soft_wrap=not fault.options.get("fancy", False))
    return fault


__all__ = (
    "FaultCode",
    "CommandException",
    "UnknownCommandError",
    "MissingFieldError",
    "MissingArgumentError",
    "MissingFlagError",
    "InvalidValueError",
    "InvalidFieldError",
    "InvalidArgumentError",
    "InvalidFlagError",
    "trigger",
)
