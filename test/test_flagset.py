"""
Flag set behavioral tests (definition, token grammar, faults).

Scope
- Validate Cell/Flag storage and conversion rules.
- Validate the token grammar: single/double dash, inline values, spaced values,
  boolean flags, terminators and stop-at-first-positional.
- Validate faults for malformed, unknown, valueless and unconvertible flags.
- Validate shell mode (render then exit) for errors and help.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import io
import unittest
from contextlib import redirect_stderr
from unittest import TestCase

from structflags import (
    Cell,
    FaultCode,
    Flag,
    FlagSet,
    FlagRedefinedError,
    HelpRequestedError,
    InvalidFlagNameError,
    InvalidFlagValueError,
    MalformedTokenError,
    MissingFlagValueError,
    UnderlyingParseError,
    UnknownFlagError,
)


class TestCell(TestCase):
    """Storage slots start at the zero value of their kind."""

    def testZeroValues(self):
        self.assertIs(Cell(bool).value, False)
        self.assertEqual(Cell(int).value, 0)
        self.assertEqual(Cell(str).value, "")

    def testUnsupportedKindRejected(self):
        with self.assertRaises(TypeError):
            Cell(float)

    def testFlagsShareCell(self):
        cell = Cell(int)
        long = Flag("number", cell)
        short = Flag("n", cell)
        short.set("42")
        self.assertEqual(long.get(), 42)
        self.assertEqual(cell.value, 42)

    def testFlagDefaultIsCellValueAtDefinition(self):
        cell = Cell(str)
        flag = Flag("message", cell, "what to say")
        flag.set("hello")
        self.assertEqual(flag.default, "")
        self.assertEqual(flag.usage, "what to say")


class TestFlagSetDefinition(TestCase):
    """Behavioral tests for FlagSet.define()."""

    def testDefineReturnsFlag(self):
        flags = FlagSet("tool")
        flag = flags.define("verbose", Cell(bool), "talk more")
        self.assertIsInstance(flag, Flag)
        self.assertIs(flags.lookup("verbose"), flag)
        self.assertIsNone(flags.lookup("quiet"))

    def testRedefinitionRaises(self):
        flags = FlagSet("tool")
        flags.define("x", Cell(int))
        with self.assertRaises(FlagRedefinedError):
            flags.define("x", Cell(str))

    def testInvalidNamesRejected(self):
        flags = FlagSet("tool")
        for name in ("", "-x", "a=b"):
            with self.subTest(name=name), self.assertRaises(InvalidFlagNameError) as context:
                flags.define(name, Cell(bool))
            self.assertIs(context.exception.options["code"], FaultCode.INVALID_FLAG_NAME)
            self.assertEqual(context.exception.options["prog"], "tool")
        self.assertEqual(flags.flags, ())

    def testStorageMustBeCell(self):
        with self.assertRaises(TypeError):
            FlagSet("tool").define("x", 0)

    def testFlagsSortedByName(self):
        flags = FlagSet("tool")
        for name in ("zeta", "alpha", "mid"):
            flags.define(name, Cell(bool))
        self.assertEqual([flag.name for flag in flags.flags], ["alpha", "mid", "zeta"])


class TestFlagSetParsing(TestCase):
    """Behavioral tests for FlagSet.parse()."""

    def setUp(self):
        self.verbose = Cell(bool)
        self.number = Cell(int)
        self.message = Cell(str)
        self.flags = FlagSet("tool")
        self.flags.define("verbose", self.verbose, "talk more")
        self.flags.define("v", self.verbose, "talk more (shorthand)")
        self.flags.define("number", self.number, "how many")
        self.flags.define("message", self.message, "what to say")

    def testSingleAndDoubleDash(self):
        self.flags.parse(["-number", "3", "--message", "hi"])
        self.assertEqual(self.number.value, 3)
        self.assertEqual(self.message.value, "hi")

    def testInlineValues(self):
        self.flags.parse(["-number=7", "--message=a=b"])
        self.assertEqual(self.number.value, 7)
        self.assertEqual(self.message.value, "a=b")

    def testEmptyInlineText(self):
        self.flags.parse(["-message="])
        self.assertEqual(self.message.value, "")
        self.assertTrue(self.flags.isset("message"))

    def testIntegerBasePrefixes(self):
        self.flags.parse(["-number", "0x1f"])
        self.assertEqual(self.number.value, 31)

    def testNegativeIntegerAsSpacedValue(self):
        self.flags.parse(["-number", "-5"])
        self.assertEqual(self.number.value, -5)

    def testBooleanPresenceMeansTrue(self):
        self.flags.parse(["-v"])
        self.assertIs(self.verbose.value, True)

    def testBooleanInlineFalse(self):
        self.verbose.value = True
        self.flags.parse(["-verbose=false"])
        self.assertIs(self.verbose.value, False)
        self.assertTrue(self.flags.isset("verbose"))

    def testBooleanNeverConsumesNextToken(self):
        self.flags.parse(["-v", "false"])
        self.assertIs(self.verbose.value, True)
        self.assertEqual(self.flags.args, ["false"])

    def testStopsAtFirstPositional(self):
        self.flags.parse(["-v", "build", "-number", "3"])
        self.assertEqual(self.flags.args, ["build", "-number", "3"])
        self.assertEqual(self.number.value, 0)
        self.assertFalse(self.flags.isset("number"))

    def testLoneDashStops(self):
        self.flags.parse(["-", "-v"])
        self.assertEqual(self.flags.args, ["-", "-v"])
        self.assertFalse(self.flags.isset("v"))

    def testDoubleDashTerminatorConsumed(self):
        self.flags.parse(["-v", "--", "-number", "3"])
        self.assertEqual(self.flags.args, ["-number", "3"])

    def testIssetTracksSpellingUsed(self):
        self.flags.parse(["-v"])
        self.assertTrue(self.flags.isset("v"))
        self.assertFalse(self.flags.isset("verbose"))

    def testArgsIsACopy(self):
        self.flags.parse(["rest"])
        self.flags.args.append("more")
        self.assertEqual(self.flags.args, ["rest"])

    def testMalformedToken(self):
        for token in ("---x", "-=x", "--=x"):
            with self.subTest(token=token), self.assertRaises(MalformedTokenError):
                self.flags.parse([token])

    def testUnknownFlagWithSuggestion(self):
        with self.assertRaises(UnknownFlagError) as context:
            self.flags.parse(["-verbos"])
        self.assertIn("verbose", context.exception.options["suggestions"])
        self.assertIn("-verbos", str(context.exception))

    def testHelpRequested(self):
        with redirect_stderr(io.StringIO()), self.assertRaises(HelpRequestedError):
            self.flags.parse(["-h"])
        with redirect_stderr(io.StringIO()), self.assertRaises(HelpRequestedError):
            self.flags.parse(["--help"])

    def testHelpPrintsUsage(self):
        stderr = io.StringIO()
        with redirect_stderr(stderr), self.assertRaises(HelpRequestedError):
            self.flags.parse(["-help"])
        output = stderr.getvalue()
        self.assertIn("usage:", output)
        for name in ("-verbose", "-v", "-number", "-message"):
            self.assertIn(name, output)
        self.assertIn("talk more", output)

    def testOtherFaultsStayQuiet(self):
        stderr = io.StringIO()
        with redirect_stderr(stderr), self.assertRaises(UnknownFlagError):
            self.flags.parse(["-nope"])
        self.assertEqual(stderr.getvalue(), "")

    def testDefinedHelpIsAnOrdinaryFlag(self):
        help = Cell(bool)
        self.flags.define("h", help)
        self.flags.parse(["-h"])
        self.assertIs(help.value, True)

    def testMissingValue(self):
        with self.assertRaises(MissingFlagValueError):
            self.flags.parse(["-number"])

    def testInvalidInteger(self):
        with self.assertRaises(InvalidFlagValueError):
            self.flags.parse(["-number", "abc"])

    def testIntegerRejectsPaddingAndForeignDigits(self):
        for value in (" 7", "7 ", "\t7\n", "٣", "１２"):
            with self.subTest(value=value), self.assertRaises(InvalidFlagValueError):
                self.flags.parse(["-number", value])
        self.assertEqual(self.number.value, 0)

    def testInvalidBoolean(self):
        with self.assertRaises(InvalidFlagValueError):
            self.flags.parse(["-v=maybe"])

    def testParseFailuresShareBase(self):
        with self.assertRaises(UnderlyingParseError):
            self.flags.parse(["-nope"])

    def testNonStringTokensRejected(self):
        with self.assertRaises(TypeError):
            self.flags.parse(["-number", 3])


class TestFlagSetShell(TestCase):
    """Shell mode renders the usage and the fault, then exits."""

    def testErrorExitsWithTwo(self):
        flags = FlagSet("tool", shell=True, colorful=False)
        flags.define("x", Cell(int))
        with self.assertRaises(SystemExit) as context:
            flags.parse(["-y"])
        self.assertEqual(context.exception.code, 2)

    def testHelpExitsWithZero(self):
        flags = FlagSet("tool", shell=True, fancy=True)
        flags.define("x", Cell(int), "a number")
        with self.assertRaises(SystemExit) as context:
            flags.parse(["-help"])
        self.assertEqual(context.exception.code, 0)


if __name__ == "__main__":
    unittest.main()
