"""
cliengine utilities (internal helpers, carefully exposed)

Scope
- Small building blocks shared by the schema, parsing, registry and engine layers.

Overview
- UnsetType / Unset
  • Singleton sentinel for "not provided" when None is a meaningful value.
  • Falsey, printable as "Unset", non-subclassable.

- coalesce(value, default=None)
  • Replace Unset with a concrete default, keep every other value (None included).

- rename(callable, name) / @rename("name")
  • Assign stable __name__/__qualname__ to generated accessors.

- mirror("attr")
  • Read-only property over a private backing field (self._attr); containers are
    exposed as tuples / read-only mappings.

- ordinal(number)
  • "first", "second", ..., "11th", "22nd" for position-first messages.

- mglob(pattern)
  • Expand "pkg.**.commands" style module globs into importable module names
    (used by Registry.include()).

Quick examples
    >>> coalesce(Unset, "fallback")
    'fallback'
    >>> coalesce(None, "fallback") is None
    True
    >>> ordinal(2), ordinal(23)
    ('second', '23rd')
"""
import builtins
import functools
import importlib
import itertools
import pkgutil
import re
from collections.abc import Mapping, Sequence, Set
from types import MappingProxyType
from typing import final


@final
class UnsetType:
    """
    Internal sentinel type representing a value that was not provided.

    Characteristics
    - Boolean-false: bool(Unset) is False, but it is distinct from None.
    - Printable: repr(Unset) -> "Unset".
    - Non-subclassable and a singleton per process.
    """

    def __or__(self, other, /):
        """
        Support PEP 604 unions in isinstance checks (e.g., str | Unset).
        """
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

    def __reduce__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """
    Resolve the Unset sentinel to a concrete default.

    Falsey values like None, 0, "" or () are preserved; only Unset is replaced.
    """
    return object if object is not Unset else default


def rename(*parameters):
    """
    Set a stable __name__/__qualname__ on a callable, or return a decorator
    that will do so later.

    - Function form: rename(callable, name) -> callable
    - Decorator form: rename(name) -> decorator
    """
    match len(parameters):
        case 2:
            callable, name = parameters
            if not builtins.callable(callable):
                raise TypeError("rename() first argument must be callable")
            if not isinstance(name, str):
                raise TypeError("rename() second argument must be a string")
            try:
                callable.__qualname__ = name
                callable.__name__ = name
            except (AttributeError, TypeError):
                raise TypeError("rename() first argument must be a updatable callable") from None
            return callable
        case 1:
            name, = parameters
            if not isinstance(name, str):
                raise TypeError("@rename() argument must be a string")

            def wrapper(callable):
                if not builtins.callable(callable):
                    raise TypeError("@rename() must be applied to a callable")
                return rename(callable, name)

            return rename(wrapper, "rename")
        case _:
            raise TypeError("rename takes 1 to 2 arguments but %d were given" % len(parameters))


def _freeze(object):
    """
    Shallow read-only view of a container value.

    - Sequence (non-string) → tuple
    - Mapping → MappingProxyType
    - Set → frozenset
    - anything else → as-is
    """
    if isinstance(object, Sequence) and not isinstance(object, (str, bytes, bytearray)):
        return tuple(object)
    if isinstance(object, Mapping):
        return MappingProxyType(object)
    if isinstance(object, Set):
        return frozenset(object)
    return object


def mirror(name, /):
    """
    Define a read-only property that mirrors the private attribute "_{name}".

    Container values are handed out frozen so the public API cannot be used
    to mutate internal state.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _freeze(getattr(self, "_" + name))

    return property(getter)


@functools.cache
def ordinal(number, /):
    """
    Return a human-friendly ordinal label for a 1-based position.

    - 1..10 are rendered as words ("first"…"tenth").
    - Other numbers use numeric ordinals with the right English suffix.
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

    return f"{number}%s" % {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")


@functools.cache
def _pattern(source, /):
    """
    compile a dotted module glob into an anchored regex.

    - "*" matches any run of characters inside one segment, "?" exactly one.
    - a "**" segment matches zero or more whole segments.
    """
    body = ""
    for segment in source.split("."):
        if segment == "**":
            body += r"(?:\.[A-Za-z_]\w*)*"
            continue
        body += r"\." + "".join(
            r"[^.]*" if char == "*" else r"[^.]" if char == "?" else re.escape(char)
            for char in segment
        )
    return re.compile(body.removeprefix(r"\."))


def mglob(source, /):
    """
    expand a dot-separated module glob into fully-qualified module names.

    rules
    - must start with at least one concrete segment (the package to walk).
    - matches are case-sensitive and returned sorted.
    - a pattern without wildcards is returned as-is, in a one-item list.
    - an unimportable package yields no matches.

    examples
    - "pkg.*"          → direct children of pkg
    - "pkg.**.cli"     → any cli module under pkg
    """
    if not isinstance(source, str):
        raise TypeError("mglob() argument must be a string")
    elif not (source := source.strip()):
        raise ValueError("mglob() argument must be a non-empty string")

    segments = source.split(".")
    concrete = list(itertools.takewhile(str.isidentifier, segments))
    if len(concrete) == len(segments):
        return [source]
    if not concrete:
        raise ValueError("mglob() pattern must start with a concrete package segment")

    try:
        package = importlib.import_module(prefix := ".".join(concrete))
    except ImportError:
        return []

    pattern = _pattern(source)
    names = {prefix} if pattern.fullmatch(prefix) else set()
    for module in pkgutil.walk_packages(getattr(package, "__path__", ()), prefix + "."):
        if pattern.fullmatch(module.name):
            names.add(module.name)
    return sorted(names)


Unset = UnsetType()
"""
Internal sentinel for "not provided".

Typical pattern: value = coalesce(user_value, default).
"""


__all__ = (
    "coalesce",
    "rename",
    "mirror",
    "ordinal",
    "mglob",
    "UnsetType",
    "Unset",
)
