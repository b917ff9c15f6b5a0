"""
cliengine value domain.

Overview
- ArgumentType: the expected shape of a raw token (string, integer, float,
  boolean, or none for presence-only flags).
- Value: sealed sum type for parsed values, with exactly five variants:
  • Absent       → nothing was provided (singleton, falsy)
  • String(str)  → verbatim text
  • Integer(int) → whole number
  • Float(float) → floating-point number
  • Boolean(bool)→ truth value

Semantics
- Values are immutable: assignment and deletion raise AttributeError.
- Equality is structural and variant-aware: Integer(1) != Float(1.0) != Boolean(True).
- Values support structural pattern matching on their payload:

    match value:
        case Integer(number): ...
        case String(text): ...
        case AbsentType(): ...

- Rich renders values with a colored "variant(payload)" form.
"""
import functools
import re
from enum import Enum

from rich.text import Text

from .utils import Unset


class ArgumentType(Enum):
    """
    expected shape of a raw token before it is parsed.

    NONE describes presence-only input: the token carries no value.
    """
    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"
    NONE = "none"

    @classmethod
    def coerce(cls, object, /):
        """
        resolve a member from a member, its value name, or a python builtin.

        accepted forms
        - ArgumentType.INTEGER
        - "integer" (case-insensitive)
        - str, int, float, bool, None
        """
        if isinstance(object, cls):
            return object
        if isinstance(object, str):
            try:
                return cls(object.strip().lower())
            except ValueError:
                raise ValueError(f"unknown argument type {object!r}") from None
        try:
            return {str: cls.STRING, int: cls.INTEGER, float: cls.FLOAT, bool: cls.BOOLEAN, None: cls.NONE}[object]
        except (KeyError, TypeError):
            raise TypeError(f"cannot resolve an argument type from {object!r}") from None

    @property
    def variant(self):
        """
        the Value variant produced for this type on a successful parse.
        """
        return {
            ArgumentType.STRING: String,
            ArgumentType.INTEGER: Integer,
            ArgumentType.FLOAT: Float,
            ArgumentType.BOOLEAN: Boolean,
            ArgumentType.NONE: AbsentType,
        }[self]


class Value:
    """
    Abstract base of the parsed-value sum type.

    Variants are declared with `sealed=True`; a sealed class (and, once the
    module is loaded, Value itself) rejects any further subclass.
    """
    __slots__ = ("_payload",)
    __match_args__ = ("payload",)
    __sealed__ = False

    # Per-variant rich styles for the payload part of the rendering.
    __style__ = ""

    def __init_subclass__(cls, /, sealed=False, **options):
        for base in cls.__mro__[1:]:
            if base.__dict__.get("__sealed__", False):
                raise TypeError(f"type {base.__name__!r} is not an acceptable base type")
        super().__init_subclass__(**options)
        cls.__sealed__ = bool(sealed)
        cls.__typename__ = re.sub(r"(?<!^)(?=[A-Z])", r"-", cls.__name__.removesuffix("Type")).lower()

    def __new__(cls, payload=Unset, /):
        if cls is Value:
            raise TypeError("type 'Value' is abstract, use one of its variants")
        if payload is Unset:
            raise TypeError(f"{cls.__typename__}() missing required payload")
        self = super().__new__(cls)
        object.__setattr__(self, "_payload", payload)
        return self

    @property
    def payload(self):
        """
        the python object carried by this value (None for Absent).
        """
        return self._payload

    def __setattr__(self, name, value, /):
        raise AttributeError(f"{type(self).__typename__} values are immutable")

    def __delattr__(self, name, /):
        raise AttributeError(f"{type(self).__typename__} values are immutable")

    def __eq__(self, other, /):
        if not isinstance(other, Value):
            return NotImplemented
        return type(self) is type(other) and self._payload == other._payload

    def __hash__(self):
        return hash((type(self), self._payload))

    def __repr__(self):
        return f"{type(self).__typename__}({self._payload!r})"

    def __rich__(self):
        return Text.assemble(
            (type(self).__typename__, "bold cyan"),
            ("(", "yellow"),
            (repr(self._payload), type(self).__style__),
            (")", "yellow"),
        )

    def __copy__(self):
        return self

    def __deepcopy__(self, memo, /):
        return self

    def __reduce__(self):
        return type(self), (self._payload,)


class AbsentType(Value, sealed=True):
    """
    Singleton variant for "no value".

    - Falsy, repr is "absent".
    - AbsentType() always returns the module-level `Absent`.
    - Copy, deepcopy and pickle preserve identity.
    """
    __slots__ = ()

    @functools.cache
    def __new__(cls):
        return super().__new__(cls, None)

    def __bool__(self):
        return False

    def __repr__(self):
        return "absent"

    def __rich__(self):
        return Text("absent", style="dim")

    def __reduce__(self):
        return "Absent"


class String(Value, sealed=True):
    """Verbatim text value."""
    __slots__ = ()
    __style__ = "green"

    def __new__(cls, payload, /):
        if not isinstance(payload, str):
            raise TypeError("string payload must be a str")
        return super().__new__(cls, payload)


class Integer(Value, sealed=True):
    """Whole-number value; booleans are rejected."""
    __slots__ = ()
    __style__ = "magenta"

    def __new__(cls, payload, /):
        if not isinstance(payload, int) or isinstance(payload, bool):
            raise TypeError("integer payload must be an int")
        return super().__new__(cls, payload)


class Float(Value, sealed=True):
    """Floating-point value; integral payloads are widened to float."""
    __slots__ = ()
    __style__ = "magenta"

    def __new__(cls, payload, /):
        if not isinstance(payload, int | float) or isinstance(payload, bool):
            raise TypeError("float payload must be a float or an int")
        return super().__new__(cls, float(payload))


class Boolean(Value, sealed=True):
    """Truth value."""
    __slots__ = ()
    __style__ = "italic blue"

    def __new__(cls, payload, /):
        if not isinstance(payload, bool):
            raise TypeError("boolean payload must be a bool")
        return super().__new__(cls, payload)


# The sum type is closed: no variant may be added after this point.
Value.__sealed__ = True

Absent = AbsentType()


__all__ = (
    "ArgumentType",
    "Value",
    "AbsentType",
    "Absent",
    "String",
    "Integer",
    "Float",
    "Boolean",
)
