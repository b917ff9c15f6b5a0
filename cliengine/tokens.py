"""
cliengine token splitter.

Turns the raw token stream (program and command names already removed) into
raw flag values and positional strings, without looking at any schema.

Grammar
- a flag token is longer than two characters and starts with "--".
- every other token is positional (including "-x", "--" and "-").
- a flag followed by a non-flag token takes it as its value; a flag followed
  by another flag, or by nothing, is presence-only and maps to "".
- repeated flags: the last occurrence wins.

There is no quoting, escaping, "--" separator or "--name=value" form; the
splitter never fails, it only does a best-effort split.

    >>> split(["song.mp3", "--volume", "7", "--loop"])
    Split(flags={'--volume': '7', '--loop': ''}, positionals=('song.mp3',))
"""
from collections import deque, namedtuple

Split = namedtuple("Split", ("flags", "positionals"))
Split.__doc__ = """
raw split of a token stream.

- flags: dict[str, str], flag token → raw value ("" when presence-only),
  in first-seen order.
- positionals: tuple[str, ...], positional tokens in input order.
"""


def isflag(token, /):
    """
    true when the token is a flag token ("--" followed by at least one character).
    """
    return len(token) > 2 and token.startswith("--")


def split(tokens, /):
    """
    split raw tokens into flags and positionals in a single left-to-right pass.

    parameters
    - tokens: Iterable[str], raw tokens after the command name.

    returns
    - Split(flags, positionals)
    """
    flags = {}
    positionals = []

    stream = deque(tokens)
    while stream:
        token = stream.popleft()
        if not isflag(token):
            positionals.append(token)
            continue
        # A following non-flag token is this flag's value; otherwise presence-only.
        flags[token] = stream.popleft() if stream and not isflag(stream[0]) else ""

    return Split(flags, tuple(positionals))


__all__ = (
    "Split",
    "isflag",
    "split",
)
