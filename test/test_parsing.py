"""
Parsing tests (value coercion, command parsing, results).

Scope
- parse_value precedence rules for every ArgumentType.
- parse(): positional and flag resolution, required/optional handling,
  fail-fast ordering, schema-complete output.
- ParsedInput access helpers and Result semantics.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from cliengine import (
    Absent,
    ArgumentType,
    Boolean,
    CommandDef,
    Float,
    Integer,
    InvalidArgumentError,
    InvalidFlagError,
    InvalidValueError,
    MissingArgumentError,
    MissingFlagError,
    ParsedInput,
    Result,
    String,
    argument,
    flag,
    parse,
    parse_value,
)

PLAY = CommandDef(
    "play",
    "play an audio file",
    args=[argument("file", required=True)],
    flags=[flag("--volume", int)],
)


class TestParseValue(TestCase):
    """Coercion of raw strings into values."""

    def testNoneEmptyIsAbsent(self):
        self.assertIs(parse_value("", ArgumentType.NONE), Absent)

    def testNoneWithValueIsInvalid(self):
        for raw in ("x", "7", "true"):
            with self.subTest(raw=raw):
                with self.assertRaises(InvalidValueError):
                    parse_value(raw, ArgumentType.NONE)

    def testStringIsVerbatim(self):
        for raw in ("song.mp3", "  padded ", "7", "--", "true"):
            with self.subTest(raw=raw):
                self.assertEqual(parse_value(raw, ArgumentType.STRING), String(raw))

    def testEmptyStringIsInvalid(self):
        with self.assertRaises(InvalidValueError):
            parse_value("", ArgumentType.STRING)

    def testBooleanLiterals(self):
        self.assertEqual(parse_value("true", ArgumentType.BOOLEAN), Boolean(True))
        self.assertEqual(parse_value("True", ArgumentType.BOOLEAN), Boolean(True))
        self.assertEqual(parse_value("false", ArgumentType.BOOLEAN), Boolean(False))
        self.assertEqual(parse_value("False", ArgumentType.BOOLEAN), Boolean(False))

    def testBooleanOtherLiteralsAreInvalid(self):
        for raw in ("yes", "TRUE", "1", "0", "", "t"):
            with self.subTest(raw=raw):
                with self.assertRaises(InvalidValueError):
                    parse_value(raw, ArgumentType.BOOLEAN)

    def testInteger(self):
        self.assertEqual(parse_value("7", ArgumentType.INTEGER), Integer(7))
        self.assertEqual(parse_value("-12", ArgumentType.INTEGER), Integer(-12))
        self.assertEqual(parse_value("+4", ArgumentType.INTEGER), Integer(4))

    def testIntegerTruncatesTowardZero(self):
        self.assertEqual(parse_value("3.9", ArgumentType.INTEGER), Integer(3))
        self.assertEqual(parse_value("-3.9", ArgumentType.INTEGER), Integer(-3))
        self.assertEqual(parse_value(".5", ArgumentType.INTEGER), Integer(0))
        self.assertEqual(parse_value("1e3", ArgumentType.INTEGER), Integer(1000))

    def testFloat(self):
        self.assertEqual(parse_value("0.25", ArgumentType.FLOAT), Float(0.25))
        self.assertEqual(parse_value("2", ArgumentType.FLOAT), Float(2.0))
        self.assertEqual(parse_value("-1.5e-3", ArgumentType.FLOAT), Float(-0.0015))
        self.assertEqual(parse_value("5.", ArgumentType.FLOAT), Float(5.0))

    def testNumbersMustBePlainDecimals(self):
        for raw in ("", "abc", "7abc", " 7", "7 ", "inf", "nan", "0x10", "1_000", "1,5", "1e400", "."):
            for type in (ArgumentType.INTEGER, ArgumentType.FLOAT):
                with self.subTest(raw=raw, type=type):
                    with self.assertRaises(InvalidValueError):
                        parse_value(raw, type)

    def testFaultCarriesRawAndType(self):
        with self.assertRaises(InvalidValueError) as context:
            parse_value("x", ArgumentType.FLOAT)
        self.assertEqual(context.exception.options["raw"], "x")
        self.assertIs(context.exception.options["type"], ArgumentType.FLOAT)
        self.assertEqual(str(context.exception), "invalid float value 'x'")

    def testTypeIsCoerced(self):
        self.assertEqual(parse_value("7", int), Integer(7))

    def testRawMustBeString(self):
        with self.assertRaises(TypeError):
            parse_value(7, ArgumentType.INTEGER)


class TestParse(TestCase):
    """Command parsing against a definition."""

    def testPlayScenario(self):
        result = parse(PLAY, ["song.mp3", "--volume", "7"])
        self.assertTrue(result)
        self.assertEqual(result.input.command, "play")
        self.assertEqual(result.input.args, (String("song.mp3"),))
        self.assertEqual(dict(result.input.flags), {"--volume": Integer(7)})

    def testMissingRequiredArgument(self):
        result = parse(PLAY, [])
        self.assertFalse(result)
        self.assertIsInstance(result.fault, MissingArgumentError)
        self.assertEqual(result.fault.field, "file")
        self.assertEqual(result.fault.options["index"], 1)
        self.assertIn("first position", result.fault.message)

    def testOptionalArgumentsBecomeAbsent(self):
        definition = CommandDef("copy", args=[
            argument("source", required=True),
            argument("target", required=True),
            argument("mode"),
            argument("count", int),
        ])
        self.assertIsInstance(parse(definition, ["a"]).fault, MissingArgumentError)
        self.assertEqual(parse(definition, ["a", "b"]).input.args, (String("a"), String("b"), Absent, Absent))
        self.assertEqual(parse(definition, ["a", "b", "c"]).input.args, (String("a"), String("b"), String("c"), Absent))
        self.assertEqual(
            parse(definition, ["a", "b", "c", "4"]).input.args,
            (String("a"), String("b"), String("c"), Integer(4)),
        )

    def testExtraPositionalsIgnored(self):
        result = parse(PLAY, ["a.mp3", "b.mp3", "c.mp3"])
        self.assertEqual(result.input.args, (String("a.mp3"),))

    def testInvalidArgumentWrapsCause(self):
        definition = CommandDef("seek", args=[argument("file", required=True), argument("offset", int)])
        result = parse(definition, ["a.mp3", "soon"])
        self.assertIsInstance(result.fault, InvalidArgumentError)
        self.assertEqual(result.fault.field, "offset")
        self.assertEqual(result.fault.options["index"], 2)
        self.assertIsInstance(result.fault.cause, InvalidValueError)
        self.assertIn("second position", result.fault.message)

    def testIntegerTruncationOnPositional(self):
        definition = CommandDef("skip", args=[argument("count", int, True)])
        self.assertEqual(parse(definition, ["3.9"]).input.args, (Integer(3),))

    def testOptionalFlagMissingIsAbsent(self):
        result = parse(PLAY, ["song.mp3"])
        self.assertIs(result.input.flags["--volume"], Absent)

    def testRequiredFlagMissing(self):
        definition = CommandDef("login", flags=[flag("--user", str, True)])
        result = parse(definition, [])
        self.assertIsInstance(result.fault, MissingFlagError)
        self.assertEqual(result.fault.field, "--user")

    def testRequiredPresenceOnlyFlag(self):
        definition = CommandDef("wipe", flags=[flag("--confirm", required=True)])
        self.assertIsInstance(parse(definition, []).fault, MissingFlagError)
        self.assertIs(parse(definition, ["--confirm"]).input.flags["--confirm"], Absent)

    def testPresenceOnlyFlagWithValueIsInvalid(self):
        definition = CommandDef("run", flags=[flag("--dry")])
        result = parse(definition, ["--dry", "now"])
        self.assertIsInstance(result.fault, InvalidFlagError)
        self.assertEqual(result.fault.field, "--dry")

    def testTrailingValuedFlagIsInvalid(self):
        result = parse(PLAY, ["song.mp3", "--volume"])
        self.assertIsInstance(result.fault, InvalidFlagError)
        self.assertEqual(result.fault.field, "--volume")
        self.assertEqual(result.fault.cause.options["raw"], "")

    def testValuedFlagFollowedByFlagIsInvalid(self):
        definition = CommandDef("play", flags=[flag("--volume", int), flag("--loop")])
        result = parse(definition, ["--volume", "--loop"])
        self.assertIsInstance(result.fault, InvalidFlagError)
        self.assertEqual(result.fault.field, "--volume")

    def testRequiredValuedFlagWithoutValueIsInvalid(self):
        definition = CommandDef("login", flags=[flag("--user", str, True)])
        self.assertIsInstance(parse(definition, ["--user"]).fault, InvalidFlagError)
        self.assertIsInstance(parse(definition, ["--user", "--verbose"]).fault, InvalidFlagError)

    def testEmptyFlagValueIsInvalid(self):
        definition = CommandDef("tag", flags=[flag("--name", str)])
        self.assertIsInstance(parse(definition, ["--name", ""]).fault, InvalidFlagError)

    def testEveryValuedTypeRejectsMissingValue(self):
        for type in (ArgumentType.STRING, ArgumentType.INTEGER, ArgumentType.FLOAT, ArgumentType.BOOLEAN):
            with self.subTest(type=type):
                definition = CommandDef("set", flags=[flag("--flag", type)])
                self.assertIsInstance(parse(definition, ["--flag"]).fault, InvalidFlagError)

    def testTrailingPresenceFlagIsAbsent(self):
        definition = CommandDef("run", flags=[flag("--dry")])
        self.assertIs(parse(definition, ["--dry"]).input.flags["--dry"], Absent)

    def testFlagRoundTripForEveryType(self):
        cases = (
            (ArgumentType.STRING, "value", String("value")),
            (ArgumentType.INTEGER, "42", Integer(42)),
            (ArgumentType.FLOAT, "4.5", Float(4.5)),
            (ArgumentType.BOOLEAN, "True", Boolean(True)),
        )
        for type, raw, expected in cases:
            with self.subTest(type=type):
                definition = CommandDef("set", flags=[flag("--flag", type)])
                result = parse(definition, ["--flag", raw])
                self.assertEqual(result.input.flags["--flag"], parse_value(raw, type))
                self.assertEqual(result.input.flags["--flag"], expected)

    def testBooleanFlagScenario(self):
        definition = CommandDef("set", flags=[flag("--enabled", bool)])
        self.assertEqual(parse(definition, ["--enabled", "True"]).input.flags["--enabled"], Boolean(True))
        result = parse(definition, ["--enabled", "yes"])
        self.assertIsInstance(result.fault, InvalidFlagError)
        self.assertIsInstance(result.fault.cause, InvalidValueError)

    def testUndeclaredFlagsIgnored(self):
        result = parse(PLAY, ["song.mp3", "--speed", "2", "--volume", "3"])
        self.assertEqual(dict(result.input.flags), {"--volume": Integer(3)})

    def testPositionalsCheckedBeforeFlags(self):
        definition = CommandDef(
            "play",
            args=[argument("file", required=True)],
            flags=[flag("--volume", int, True)],
        )
        self.assertIsInstance(parse(definition, ["--volume", "x"]).fault, MissingArgumentError)

    def testFlagsCheckedInDeclarationOrder(self):
        definition = CommandDef("mix", flags=[flag("--a", int, True), flag("--b", int, True)])
        self.assertEqual(parse(definition, ["--b", "x"]).fault.field, "--a")

    def testCommandWithoutFields(self):
        result = parse(CommandDef("stop"), [])
        self.assertEqual(result.input.args, ())
        self.assertEqual(dict(result.input.flags), {})

    def testOutputIsSchemaComplete(self):
        definition = CommandDef(
            "play",
            args=[argument("file"), argument("speed", float)],
            flags=[flag("--volume", int), flag("--loop"), flag("--device", str)],
        )
        result = parse(definition, ["--loop"])
        self.assertEqual(len(result.input.args), len(definition.args))
        self.assertEqual(set(result.input.flags), {"--volume", "--loop", "--device"})

    def testCommandNameComesFromDefinition(self):
        self.assertEqual(parse(PLAY, ["x"]).input.command, PLAY.name)

    def testDefinitionMustBeCommandDef(self):
        with self.assertRaises(TypeError):
            parse("play", [])


class TestParsedInput(TestCase):
    """Access helpers and immutability of ParsedInput."""

    def setUp(self):
        self.input = parse(PLAY, ["song.mp3", "--volume", "7"]).input

    def testIndexing(self):
        self.assertEqual(self.input[0], String("song.mp3"))
        self.assertEqual(self.input["--volume"], Integer(7))

    def testGetByName(self):
        self.assertEqual(self.input.get("file"), String("song.mp3"))
        self.assertEqual(self.input.get("--volume"), Integer(7))
        self.assertIsNone(self.input.get("missing", None))
        with self.assertRaises(KeyError):
            self.input.get("missing")

    def testDefinition(self):
        self.assertIs(self.input.definition, PLAY)

    def testReadOnly(self):
        with self.assertRaises(AttributeError):
            self.input.command = "stop"
        with self.assertRaises(TypeError):
            self.input.flags["--volume"] = Integer(1)

    def testEquality(self):
        self.assertEqual(self.input, ParsedInput(PLAY, [String("song.mp3")], {"--volume": Integer(7)}))

    def testMustBeSchemaComplete(self):
        with self.assertRaises(ValueError):
            ParsedInput(PLAY, [], {"--volume": Absent})
        with self.assertRaises(ValueError):
            ParsedInput(PLAY, [String("x")], {})
        with self.assertRaises(TypeError):
            ParsedInput(PLAY, ["x"], {"--volume": Absent})

    def testRepr(self):
        self.assertEqual(
            repr(self.input),
            "ParsedInput(command='play', args=[string('song.mp3')], flags={'--volume': integer(7)})",
        )


class TestResult(TestCase):
    """Fail-fast result semantics."""

    def setUp(self):
        self.success = parse(PLAY, ["song.mp3"])
        self.failure = parse(PLAY, [])

    def testTruthiness(self):
        self.assertTrue(self.success)
        self.assertTrue(self.success.ok)
        self.assertFalse(self.failure)
        self.assertFalse(self.failure.ok)

    def testExclusiveAccess(self):
        with self.assertRaises(AttributeError):
            self.success.fault
        with self.assertRaises(AttributeError):
            self.failure.input

    def testUnwrap(self):
        self.assertIs(self.success.unwrap(), self.success.input)
        with self.assertRaises(MissingArgumentError):
            self.failure.unwrap()

    def testPatternMatching(self):
        def outcome(result):
            match result:
                case Result(input, None):
                    return input.command
                case Result(None, fault):
                    return type(fault).__name__

        self.assertEqual(outcome(self.success), "play")
        self.assertEqual(outcome(self.failure), "MissingArgumentError")

    def testExactlyOneSide(self):
        with self.assertRaises(TypeError):
            Result()
        with self.assertRaises(TypeError):
            Result(self.success.input, self.failure.fault)
        with self.assertRaises(TypeError):
            Result.success("input")
        with self.assertRaises(TypeError):
            Result.failure(ValueError("nope"))

    def testReadOnly(self):
        with self.assertRaises(AttributeError):
            self.success._fault = self.failure.fault


if __name__ == "__main__":
    unittest.main()
