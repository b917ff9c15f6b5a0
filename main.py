from rich.pretty import pprint

from cliengine import *

engine = Engine([
    CommandDef(
        "play",
        "play an audio file",
        args=[argument("file", required=True)],
        flags=[flag("--volume", type=int), flag("--loop")],
    ),
    CommandDef("stop", "stop playback"),
], prog="player")


@engine.callback("play")
def play(input):
    pprint(input)


if __name__ == '__main__':
    raise SystemExit(main(engine))
