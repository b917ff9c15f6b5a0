from cliengine import CommandDef, argument

scan = CommandDef("scan", "index a music folder", args=[argument("folder", required=True)])
