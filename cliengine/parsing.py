"""
cliengine parsing: raw strings to typed values, raw tokens to parsed input.

What this module provides
- parse_value(raw, type): coerce one raw string into a Value, or raise
  InvalidValueError.
- parse(definition, tokens): validate a command's tokens against its
  CommandDef and return a Result holding either a ParsedInput or the first
  fault found.
- ParsedInput: the schema-complete, immutable outcome of a successful parse.
- Result: fail-fast discriminated result (success or failure).

Coercion rules (in precedence order)
1. NONE with an empty raw string          → Absent
2. STRING with a non-empty raw string     → String(raw), verbatim
3. BOOLEAN "true"/"True" | "false"/"False" → Boolean(True | False)
4. otherwise the raw string must be a plain base-10 decimal number:
   • FLOAT   → Float(number)
   • INTEGER → Integer(number truncated toward zero), so "3.9" → Integer(3)
5. anything else is an invalid value.

Field resolution
- positionals first, in declaration order, then flags in declaration order;
  the first failure ends the parse.
- a missing optional field resolves to Absent; a missing required one fails.
- a flag given without a value is parsed from "", so only presence-only
  flags accept it.
- surplus positionals and undeclared flags are ignored.
"""
import math
import re
from types import MappingProxyType

from .arguments import CommandDef
from .faults import *
from .tokens import split
from .utils import *
from .values import *

# Plain decimal: optional sign, digits with an optional fraction (or a bare
# fraction), optional exponent. No whitespace, inf/nan, hex or underscores.
_DECIMAL = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


def _decimal(raw, /):
    """
    interpret raw as a finite base-10 number, or return None.
    """
    if not _DECIMAL.fullmatch(raw):
        return None
    number = float(raw)
    return number if math.isfinite(number) else None


def parse_value(raw, type, /):
    """
    coerce a raw string into a Value of the expected type.

    parameters
    - raw: str, the token as typed by the user ("" for presence-only flags).
    - type: ArgumentType (or anything ArgumentType.coerce accepts).

    returns
    - Value: Absent, String, Integer, Float or Boolean.

    raises
    - InvalidValueError: when raw does not fit the type (options carry raw and type).
    - TypeError: when raw is not a string.
    """
    if not isinstance(raw, str):
        raise TypeError("parse_value() raw value must be a string")
    type = ArgumentType.coerce(type)

    if type is ArgumentType.NONE and not raw:
        return Absent

    if type is ArgumentType.STRING and raw:
        return String(raw)

    if type is ArgumentType.BOOLEAN:
        if raw in ("true", "True"):
            return Boolean(True)
        if raw in ("false", "False"):
            return Boolean(False)

    if (number := _decimal(raw)) is not None:
        if type is ArgumentType.FLOAT:
            return Float(number)
        if type is ArgumentType.INTEGER:
            return Integer(math.trunc(number))

    if type is ArgumentType.NONE:
        message = "unexpected value %r for a presence-only field" % raw
    elif not raw:
        message = "empty value where %s %s was expected" % ("an" if type is ArgumentType.INTEGER else "a", type.value)
    else:
        message = "invalid %s value %r" % (type.value, raw)

    raise InvalidValueError(message, raw=raw, type=type)


class ParsedInput:
    """
    Schema-complete result of parsing one command invocation.

    Fields
    - command: str, the CommandDef name (never the raw user token).
    - args: tuple[Value, ...], aligned 1:1 with CommandDef.args.
    - flags: read-only mapping flag name → Value, one entry per declared flag.

    Access
    - input[0] → first positional value; input["--volume"] → flag value.
    - input.get("file") → value by positional or flag name.
    """
    __slots__ = ("_definition", "_args", "_flags")

    def __init__(self, definition, args, flags):
        if not isinstance(definition, CommandDef):
            raise TypeError("parsed input definition must be a command definition")
        if len(args := tuple(args)) != len(definition.args):
            raise ValueError("parsed input must have exactly one value per declared argument")
        if set(flags) != {flag.name for flag in definition.flags}:
            raise ValueError("parsed input must have exactly one value per declared flag")
        if not all(isinstance(value, Value) for value in (*args, *flags.values())):
            raise TypeError("parsed input values must be Value instances")
        object.__setattr__(self, "_definition", definition)
        object.__setattr__(self, "_args", args)
        object.__setattr__(self, "_flags", MappingProxyType(dict(flags)))

    definition = property(lambda self: self._definition, doc="the CommandDef this input was parsed against")
    command = property(lambda self: self._definition.name, doc="name of the parsed command")
    args = property(lambda self: self._args, doc="positional values in declaration order")
    flags = property(lambda self: self._flags, doc="flag values by flag name")

    def __getitem__(self, key, /):
        if isinstance(key, int):
            return self._args[key]
        return self._flags[key]

    def get(self, name, default=Unset, /):
        """
        look up a value by positional argument name or flag name.

        raises KeyError for unknown names unless a default is given.
        """
        for definition, value in zip(self._definition.args, self._args):
            if definition.name == name:
                return value
        if name in self._flags:
            return self._flags[name]
        if default is Unset:
            raise KeyError(name)
        return default

    def __setattr__(self, name, value, /):
        raise AttributeError("parsed input is read-only")

    def __eq__(self, other, /):
        if not isinstance(other, ParsedInput):
            return NotImplemented
        return (self.command, self._args, dict(self._flags)) == (other.command, other._args, dict(other._flags))

    __hash__ = None

    def __repr__(self):
        return f"ParsedInput(command={self.command!r}, args={list(self._args)!r}, flags={dict(self._flags)!r})"

    def __rich_repr__(self):
        yield "command", self.command
        yield "args", self._args
        yield "flags", dict(self._flags)


class Result:
    """
    Fail-fast outcome of a command parse.

    Exactly one of `input` (a ParsedInput) or `fault` (a CommandException) is
    set. A Result is truthy iff it succeeded.

        result = parse(definition, tokens)
        if result:
            handler(result.input)
        else:
            report(result.fault)

    Pattern matching binds (input, fault), one of which is None:

        match result:
            case Result(input, None): ...
            case Result(None, fault): ...
    """
    __slots__ = ("_input", "_fault")
    __match_args__ = ("_input", "_fault")

    def __init__(self, input=Unset, fault=Unset):
        if (input is Unset) == (fault is Unset):
            raise TypeError("result requires exactly one of 'input' or 'fault'")
        if input is not Unset and not isinstance(input, ParsedInput):
            raise TypeError("result 'input' must be a parsed input")
        if fault is not Unset and not isinstance(fault, CommandException):
            raise TypeError("result 'fault' must be a command exception")
        object.__setattr__(self, "_input", coalesce(input))
        object.__setattr__(self, "_fault", coalesce(fault))

    @classmethod
    def success(cls, input, /):
        return cls(input=input)

    @classmethod
    def failure(cls, fault, /):
        return cls(fault=fault)

    @property
    def ok(self):
        return self._fault is None

    @property
    def input(self):
        if self._input is None:
            raise AttributeError("failed result has no input")
        return self._input

    @property
    def fault(self):
        if self._fault is None:
            raise AttributeError("successful result has no fault")
        return self._fault

    def unwrap(self):
        """
        return the parsed input, or raise the fault of a failed result.
        """
        if self._fault is not None:
            raise self._fault
        return self._input

    def __bool__(self):
        return self.ok

    def __setattr__(self, name, value, /):
        raise AttributeError("result is read-only")

    def __repr__(self):
        if self.ok:
            return f"Result.success({self._input!r})"
        return f"Result.failure({type(self._fault).__name__}({self._fault.message!r}))"


def _parse_positionals(definition, positionals):
    values = []
    for index, argument in enumerate(definition.args, 1):
        if index > len(positionals):
            if argument.required:
                raise MissingArgumentError(
                    "missing required argument %r at %s position" % (argument.name, ordinal(index)),
                    field=argument.name,
                    index=index,
                    argument=argument,
                    hint="add a %s value for %r" % (argument.type.value, argument.name),
                )
            values.append(Absent)
            continue

        try:
            values.append(parse_value(positionals[index - 1], argument.type))
        except InvalidValueError as e:
            raise InvalidArgumentError(
                "argument %r at %s position: %s" % (argument.name, ordinal(index), e.message),
                field=argument.name,
                index=index,
                argument=argument,
                cause=e,
                hint="pass %s %s for %r" % (
                    "an" if argument.type is ArgumentType.INTEGER else "a", argument.type.value, argument.name
                ),
            ) from e
    return values


def _parse_flags(definition, flags):
    values = {}
    for argument in definition.flags:
        try:
            raw = flags[argument.name]
        except KeyError:
            if argument.required:
                raise MissingFlagError(
                    "missing required flag %r" % argument.name,
                    field=argument.name,
                    argument=argument,
                    hint="add %s" % (argument.name if argument.presence else "%s <%s>" % (argument.name, argument.type.value)),
                ) from None
            values[argument.name] = Absent
            continue

        try:
            values[argument.name] = parse_value(raw, argument.type)
        except InvalidValueError as e:
            if argument.presence:
                hint = "use %s on its own, without a value" % argument.name
            else:
                hint = "pass a %s value after %s" % (argument.type.value, argument.name)
            raise InvalidFlagError(
                "flag %r: %s" % (argument.name, e.message),
                field=argument.name,
                argument=argument,
                cause=e,
                hint=hint,
            ) from e
    return values


def parse(definition, tokens, /):
    """
    parse the tokens that follow a command name against its definition.

    parameters
    - definition: CommandDef
    - tokens: Iterable[str], raw tokens after the command name.

    returns
    - Result.success(ParsedInput) or Result.failure(fault), where fault is the
      first MissingArgumentError, InvalidArgumentError, MissingFlagError or
      InvalidFlagError encountered.
    """
    if not isinstance(definition, CommandDef):
        raise TypeError("parse() first argument must be a command definition")

    raw = split(tokens)
    try:
        args = _parse_positionals(definition, raw.positionals)
        flags = _parse_flags(definition, raw.flags)
    except (MissingFieldError, InvalidFieldError) as e:
        return Result.failure(e)

    return Result.success(ParsedInput(definition, args, flags))


__all__ = (
    "parse_value",
    "parse",
    "ParsedInput",
    "Result",
)
