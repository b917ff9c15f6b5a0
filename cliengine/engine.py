"""
cliengine dispatch engine: route a command line to a registered handler.

What this module provides
- Engine: owns a Registry of command definitions and the handlers the host
  registers for them; execute() parses argv and calls the matching handler.
- invoke(engine, argv): convenience runner returning the dispatch outcome.
- main(engine, argv): same, as a process exit status for sys.exit().

Dispatch policy
- no tokens                     → success, nothing runs.
- unknown command               → the fault is reported, dispatch fails.
- known command without handler → success, nothing runs.
- parse failure                 → the fault is reported, dispatch fails.
- otherwise the handler runs synchronously with the ParsedInput; whatever
  it raises reaches the caller unchanged.

Registering a handler for a name the registry does not know is a silent
no-op, so registration order never crashes a program.

Quick start
    from cliengine import CommandDef, Engine, argument, flag, main

    engine = Engine([
        CommandDef("play", "play a file",
                   args=[argument("file", required=True)],
                   flags=[flag("--volume", type=int)]),
    ])

    @engine.callback("play")
    def play(input):
        print(input.args[0].payload, input.flags["--volume"])

    if __name__ == "__main__":
        raise SystemExit(main(engine))
"""
import difflib
import os.path
import shlex
import sys
from collections.abc import Iterable

from .faults import UnknownCommandError, console as stderr, trigger
from .parsing import parse
from .registry import Registry
from .utils import *


def _tokenize(argv, /):
    """
    normalize argv into a list of raw tokens (program name excluded).

    - Unset: sys.argv[1:]
    - str: shell-like string, split with shlex.split
    - Iterable[str]: used as-is (items are not trimmed)
    """
    if argv is Unset:
        return sys.argv[1:]
    if isinstance(argv, str):
        return shlex.split(argv)
    if isinstance(argv, Iterable):
        tokens = list(argv)
        if not all(isinstance(token, str) for token in tokens):
            raise TypeError("execute() argument must be a string or an iterable of strings")
        return tokens
    raise TypeError("execute() argument must be a string or an iterable of strings")


class Engine:
    """
    Command dispatcher owned by the host program.

    Parameters
    - registry: Registry | Mapping[str, CommandDef] | Iterable[CommandDef]
      the command definitions to route against; read-only once dispatching.
    - console: rich Console used as the diagnostics sink (default: stderr).
    - prog: program name shown in diagnostics (default: __main__.__prog__,
      then the basename of sys.argv[0]).
    - fancy: render diagnostics inside a panel.
    - colorful: style diagnostics; False prints plain text.

    Notes
    - An Engine is plain mutable state; it defines no locking and is meant to
      be driven from one thread.
    """

    def __init__(self, registry=(), /, *, console=Unset, prog=Unset, fancy=False, colorful=True):
        self._registry = Registry.coerce(registry)
        self._callbacks = {}
        self._console = coalesce(console, stderr)
        if not isinstance(prog, str | Unset):
            raise TypeError("engine 'prog' must be a string")
        self._prog = coalesce(prog, getattr(sys.modules["__main__"], "__prog__", Unset))
        if self._prog is Unset:
            self._prog = os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else "cliengine"
        self._fancy = bool(fancy)
        self._colorful = bool(colorful)

    registry = property(lambda self: self._registry, doc="the Registry this engine routes against")
    callbacks = mirror("callbacks")
    console = property(lambda self: self._console, doc="diagnostics sink")
    prog = mirror("prog")
    fancy = mirror("fancy")
    colorful = mirror("colorful")

    def register_callback(self, name, callback, /):
        """
        Register (or replace) the handler of a known command.

        Parameters
        - name: str, a command name from the registry.
        - callback: Callable[[ParsedInput], Any]

        Behavior
        - unknown names are ignored without any error.
        - returns the callback unchanged, so it can back a decorator.

        Raises
        - TypeError: when callback is not callable.
        """
        if not callable(callback):
            raise TypeError("register_callback() second argument must be callable")
        if name in self._registry:
            self._callbacks[name] = callback
        return callback

    def callback(self, name, /):
        """
        Decorator form of register_callback():

            @engine.callback("play")
            def play(input): ...
        """

        @rename("callback")
        def wrapper(callback, /):
            return self.register_callback(name, callback)

        return wrapper

    def report(self, fault, /):
        """
        Render a fault on the diagnostics sink with this engine's options.
        """
        return trigger(fault, self._console, prog=self._prog, fancy=self._fancy, colorful=self._colorful)

    def execute(self, argv=Unset, /):
        """
        Parse argv and dispatch it to the matching handler.

        Parameters
        - argv: Unset | str | Iterable[str]
          tokens after the program name; the first one names the command.

        Returns
        - bool: True when nothing had to run or the handler ran; False when
          the command is unknown or its input failed to parse.
        """
        tokens = _tokenize(argv)
        if not tokens:
            return True

        name, *tokens = tokens

        try:
            definition = self._registry[name]
        except KeyError:
            suggestions = difflib.get_close_matches(name, self._registry.keys(), 5)
            try:
                hint = "did you mean %r?" % suggestions[0]
            except IndexError:
                hint = "available commands: %s" % (", ".join(self._registry) or "none")
            self.report(UnknownCommandError(
                "unknown command %r" % name,
                input=name,
                suggestions=suggestions,
                hint=hint,
            ))
            return False

        try:
            callback = self._callbacks[name]
        except KeyError:
            return True

        result = parse(definition, tokens)
        if not result:
            self.report(result.fault)
            return False

        callback(result.input)
        return True

    __invoke__ = execute

    def __repr__(self):
        return f"Engine(commands={list(self._registry)!r}, callbacks={list(self._callbacks)!r})"


def invoke(object, argv=Unset, /):
    """
    Run an engine-like object (anything with __invoke__) and return its outcome.
    """
    if not hasattr(object, "__invoke__") or not callable(object.__invoke__):
        raise TypeError("invoke() first argument must implement __invoke__ method")
    return object.__invoke__(argv)


def main(object, argv=Unset, /):
    """
    Run an engine-like object and return a process exit status (0 or 1).

        raise SystemExit(main(engine))
    """
    return 0 if invoke(object, argv) else 1


__all__ = (
    "Engine",
    "invoke",
    "main",
)
