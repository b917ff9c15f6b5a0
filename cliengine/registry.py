"""
cliengine command registry.

A Registry is the read-only source of command definitions an Engine routes
against. It is filled once, before any dispatch:

- from definitions given up front: Registry([play, stop])
- one by one: registry.add(CommandDef(...))
- by discovery: registry.include("myapp.commands.*") imports every module
  matched by the glob and registers each module-level CommandDef.

Lookups go through the Mapping interface (registry["play"], "play" in
registry, len(registry), iteration in registration order).
"""
import importlib
import inspect
from collections.abc import Iterable, Mapping

from .arguments import CommandDef
from .utils import mglob


class Registry(Mapping):
    """
    Ordered mapping of command name → CommandDef.

    Rules
    - only CommandDef instances can be added (TypeError otherwise).
    - command names are unique (ValueError on a second definition with the
      same name, unless it is the very same object).
    """

    def __init__(self, definitions=(), /):
        self._definitions = {}
        for definition in Registry._iterate(definitions):
            self.add(definition)

    @staticmethod
    def _iterate(source):
        if isinstance(source, Mapping):
            for name, definition in source.items():
                if isinstance(definition, CommandDef) and definition.name != name:
                    raise ValueError(f"registry key {name!r} does not match command name {definition.name!r}")
                yield definition
        elif isinstance(source, Iterable) and not isinstance(source, str):
            yield from source
        else:
            raise TypeError("registry definitions must be a mapping or an iterable of command definitions")

    @classmethod
    def coerce(cls, source, /):
        """
        return source itself when it is a Registry, otherwise build one from it.
        """
        if isinstance(source, cls):
            return source
        return cls(source)

    def add(self, definition, /):
        """
        register a command definition and return it.
        """
        if not isinstance(definition, CommandDef):
            raise TypeError("registry accepts only command definitions")
        if self._definitions.setdefault(definition.name, definition) is not definition:
            raise ValueError(f"command name {definition.name!r} is already in use")
        return definition

    def include(self, source, /):
        """
        Discover and register module-level command definitions.

        Parameters
        - source: str, a dotted module glob expanded with mglob()
          ("pkg.commands.*", "pkg.**.cli", or a plain module name).

        Behavior
        - imports each matched module in sorted order.
        - registers every CommandDef bound at module level, by attribute name.
          the same definition bound twice is registered once.
        - returns the tuple of newly registered definitions.

        Raises
        - TypeError: when source is not a string or a module cannot be imported.
        - ValueError: on duplicated command names.
        """
        if not isinstance(source, str):
            raise TypeError("include() argument must be a string")

        def imp(module):
            try:
                return importlib.import_module(module)
            except ImportError:
                raise TypeError(f"unable to import module {module!r}") from None

        added = []
        for module in map(imp, mglob(source)):
            for name, object in inspect.getmembers(module, lambda x: isinstance(x, CommandDef)):
                if self._definitions.get(object.name) is object:
                    continue
                added.append(self.add(object))
        return tuple(added)

    def __getitem__(self, name, /):
        return self._definitions[name]

    def __iter__(self):
        return iter(self._definitions)

    def __len__(self):
        return len(self._definitions)

    def __repr__(self):
        return f"Registry({list(self._definitions.values())!r})"

    def __rich_repr__(self):
        yield from self._definitions.values()


__all__ = (
    "Registry",
)
