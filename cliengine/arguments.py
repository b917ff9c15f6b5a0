"""
cliengine schema model: argument and command definitions.

Overview
- ArgumentDef: one positional argument or one named flag
  (name, expected ArgumentType, required marker).
- CommandDef: a command's name, description, ordered positional definitions
  and flag definitions.
- argument(...) / flag(...): keyword-friendly builders for ArgumentDef with
  defaults that fit each role (positionals default to strings, flags to
  presence-only switches).

Definitions are declarative and immutable: metadata is sanitized once on
construction, exposed through read-only properties, and any later attempt to
assign an attribute raises AttributeError.

Validation highlights
- names are trimmed, non-empty strings without whitespace.
- positional names are unique within a command; so are flag names.
- flag names must be flag tokens ("--" and at least one more character),
  otherwise the splitter could never match them.
- command names cannot look like flags.

Quick example:
    >>> play = CommandDef(
    ...     "play",
    ...     "play an audio file",
    ...     args=[argument("file", required=True)],
    ...     flags=[flag("--volume", type=int)],
    ... )
    >>> play.flag("--volume").type
    <ArgumentType.INTEGER: 'integer'>
"""
import functools
import operator
import re
from collections.abc import Iterable

from .tokens import isflag
from .utils import *
from .values import ArgumentType


class DefinitionType(type):
    """
    Metaclass for declarative definitions.

    Responsibilities
    - Expose the fields listed in __introspectable__ as read-only properties
      (mirror() over the private "_<field>" attributes).
    - Provide stable __repr__/__rich_repr__ built from those fields.
    - Derive a hyphenated __typename__ used in validation messages.
    - Seal definition classes against subclassing.
    """

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name.removesuffix("Def")).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            return f"{type(self).__name__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        @rename("__init_subclass__")
        def __init_subclass__(cls, **options):  # NOQA: F-841
            raise TypeError(f"type {self.__name__!r} is not an acceptable base type")
        self.__init_subclass__ = classmethod(__init_subclass__)

        return self


class _Frozen:
    """
    Mixin for write-once definitions.

    Attributes can only be assigned while `_building` is set by the
    constructor; afterwards the instance is read-only.
    """
    __slots__ = ()

    def __setattr__(self, name, value, /):
        if not self.__dict__.get("_building", False):
            raise AttributeError(f"{type(self).__typename__} definitions are read-only")
        object.__setattr__(self, name, value)

    def __delattr__(self, name, /):
        raise AttributeError(f"{type(self).__typename__} definitions are read-only")

    def __eq__(self, other, /):
        if type(self) is not type(other):
            return NotImplemented
        return all(getattr(self, name) == getattr(other, name) for name in type(self).__introspectable__)

    def __hash__(self):
        return hash(tuple(getattr(self, name) for name in type(self).__introspectable__))


def _build(cls, metadata, /):
    """
    Internal: allocate a definition and store sanitized metadata as private fields.
    """
    self = object.__new__(cls)
    object.__setattr__(self, "_building", True)
    for name, object_ in metadata.items():
        setattr(self, "_" + name, object_)
    object.__delattr__(self, "_building")
    return self


def _sanitize_name(cls, name, /, *, what="name"):
    """
    Internal: a name must be a non-empty string without inner whitespace.
    """
    if not isinstance(name, str):
        raise TypeError(f"{cls.__typename__} {what} must be a string")
    elif not (name := name.strip()):
        raise ValueError(f"{cls.__typename__} {what} cannot be empty")
    elif re.search(r"\s", name):
        raise ValueError(f"{cls.__typename__} {what} {name!r} cannot contain whitespace")
    return name


def _sanitize_definitions(cls, metadata, field, /):
    """
    Internal: validate an iterable of ArgumentDef and freeze it into a tuple.

    Raises
    - TypeError: when the value is not iterable (or is a string), or an item is
      not an ArgumentDef.
    - ValueError: on duplicated names, or on flag names that are not flag tokens.
    """
    definitions = metadata[field]
    if not isinstance(definitions, Iterable) or isinstance(definitions, str):
        raise TypeError(f"{cls.__typename__} {field!r} must be an iterable of argument definitions")

    seen = set()
    sanitized = []
    for definition in definitions:
        if not isinstance(definition, ArgumentDef):
            raise TypeError(f"{cls.__typename__} {field!r} must be an iterable of argument definitions")
        if definition.name in seen:
            raise ValueError(f"{cls.__typename__} {field!r} name {definition.name!r} is already in use")
        if field == "flags" and not isflag(definition.name):
            raise ValueError(f"{cls.__typename__} flag name {definition.name!r} must start with '--'")
        seen.add(definition.name)
        sanitized.append(definition)

    metadata[field] = tuple(sanitized)


class ArgumentDef(_Frozen, metaclass=DefinitionType):
    """
    Definition of a positional argument or a named flag.

    Fields
    - name: str, unique within its list (flags are conventionally "--name").
    - type: ArgumentType, what the raw token must parse as. NONE means the
      token carries no value (a presence-only switch).
    - required: bool, whether the field must appear in the input.

    A required NONE flag is valid: it must be present but carries no value.
    """

    __introspectable__ = (
        "name",
        "type",
        "required",
    )

    def __new__(cls, name, /, type=ArgumentType.NONE, required=False):
        """
        Construct an argument definition.

        Parameters
        - name: str (positional-only), trimmed and non-empty.
        - type: ArgumentType | str | builtin, resolved with ArgumentType.coerce.
        - required: truthy/falsy, stored as a bool.
        """
        metadata = {
            "name": _sanitize_name(cls, name),
            "type": ArgumentType.coerce(type),
            "required": bool(required),
        }
        return _build(cls, metadata)

    @property
    def presence(self):
        """
        true for presence-only definitions (type NONE).
        """
        return self.type is ArgumentType.NONE


class CommandDef(_Frozen, metaclass=DefinitionType):
    """
    Definition of a command.

    Fields
    - name: str, unique within a registry; cannot look like a flag.
    - description: str | None, short human-readable summary.
    - args: tuple[ArgumentDef, ...], matched by position in this order.
    - flags: tuple[ArgumentDef, ...], matched by exact name; order is not significant.
    """

    __introspectable__ = (
        "name",
        "description",
        "args",
        "flags",
    )

    def __new__(cls, name, /, description=Unset, args=(), flags=()):
        metadata = {
            "name": _sanitize_name(cls, name),
            "description": description,
            "args": args,
            "flags": flags,
        }

        if isflag(metadata["name"]):
            raise ValueError(f"{cls.__typename__} name {metadata['name']!r} cannot look like a flag")

        if not isinstance(description, str | Unset):
            raise TypeError(f"{cls.__typename__} 'description' must be a string")
        elif isinstance(description, str) and not (description := description.strip()):
            raise ValueError(f"{cls.__typename__} 'description' cannot be empty")
        metadata["description"] = coalesce(description)

        _sanitize_definitions(cls, metadata, "args")
        _sanitize_definitions(cls, metadata, "flags")

        return _build(cls, metadata)

    def flag(self, name, /):
        """
        return the flag definition with the given name, or raise KeyError.
        """
        for definition in self.flags:
            if definition.name == name:
                return definition
        raise KeyError(name)


def argument(name, /, type=ArgumentType.STRING, required=False):
    """
    Build a positional ArgumentDef; positionals default to string values.

        argument("file", required=True)
        argument("count", type=int)
    """
    return ArgumentDef(name, type, required)


def flag(name, /, type=ArgumentType.NONE, required=False):
    """
    Build a flag ArgumentDef; flags default to presence-only switches.

        flag("--loop")
        flag("--volume", type=int)
    """
    return ArgumentDef(name, type, required)


__all__ = (
    "ArgumentDef",
    "CommandDef",
    "argument",
    "flag",
)

# Remove the internal metaclass from the module namespace; not part of the public API.
del DefinitionType
