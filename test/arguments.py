"""
Arguments module tests (definitions and the format mini-language).

Scope
- Formats round-trip through the formatted name.
- Malformed formats and contract violations fail at construction.
- Query matching for flags and options is exact.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from keelson import Flag, Option, Argument, flag, option, argument, switch


class TestFormats(TestCase):
    """Mini-parser behaviour for flag, option and argument formats."""

    def testSwitchFormatsRoundTrip(self):
        for format in (
                "-v",
                "--verbose",
                "-v, --verbose",
                "-s, --separator <char>",
                "--output [file]",
                "-o [file]",
                "--tag <value>",
        ):
            with self.subTest(format=format):
                self.assertEqual(switch(format).formatted, format)

    def testArgumentFormatsRoundTrip(self):
        for format in ("<input>", "[output]", "<items...>", "[files...]"):
            with self.subTest(format=format):
                self.assertEqual(argument(format).formatted, format)

    def testFlagFormatIsStripped(self):
        parsed = flag("  -v ,   --verbose  ")
        self.assertEqual(parsed.short, "v")
        self.assertEqual(parsed.long, "verbose")
        self.assertEqual(parsed.formatted, "-v, --verbose")

    def testOptionPlaceholderDecidesRequired(self):
        required = option("-s, --separator <char>")
        optional = option("--output [file]")

        self.assertTrue(required.required)
        self.assertEqual(required.param, "char")
        self.assertEqual(required.short, "s")
        self.assertEqual(required.long, "separator")

        self.assertFalse(optional.required)
        self.assertEqual(optional.param, "file")
        self.assertIsNone(optional.short)

    def testArgumentVariadicSuffixIsStripped(self):
        parsed = argument("[files...]")
        self.assertEqual(parsed.name, "files")
        self.assertTrue(parsed.variadic)
        self.assertFalse(parsed.required)

        parsed = argument("<input>")
        self.assertEqual(parsed.name, "input")
        self.assertFalse(parsed.variadic)
        self.assertTrue(parsed.required)

    def testSwitchChoosesKind(self):
        self.assertIs(type(switch("--first")), Flag)
        self.assertIs(type(switch("-s, --separator <char>")), Option)
        self.assertIs(type(switch("--output [file]")), Option)

    def testMalformedFlagFormatsRaise(self):
        for format in (
                "v",                 # no dash
                "-ab",               # short form longer than one character
                "-",                 # empty short form
                "--",                # empty long form
                "-a, -b",            # two short names
                "--a, --b",          # two long names
                "-a, --b, --c",      # too many names
                "",
        ):
            with self.subTest(format=format), self.assertRaises(ValueError):
                flag(format)

    def testMalformedOptionFormatsRaise(self):
        for format in (
                "--x",               # no placeholder
                "--x char",          # placeholder not bracketed
                "--x <char]",        # mismatched brackets
                "--x <>",            # empty placeholder
                "-a, --b --c <x>",   # too many segments
                "-s --separator <char>",  # names must be comma separated
        ):
            with self.subTest(format=format), self.assertRaises(ValueError):
                option(format)

    def testMalformedArgumentFormatsRaise(self):
        for format in ("input", "<input]", "[input>", "<...>", "<>", "<in put>"):
            with self.subTest(format=format), self.assertRaises(ValueError):
                argument(format)

    def testNonStringFormatsRaiseTypeError(self):
        for factory in (flag, option, argument, switch):
            with self.subTest(factory=factory.__name__), self.assertRaises(TypeError):
                factory(42)

    def testFlagFormatCannotHaveDefault(self):
        with self.assertRaises(ValueError):
            switch("--first", "Return only the first element", "yes")


class TestDefinitions(TestCase):
    """Construction-time invariants of Flag, Option and Argument."""

    def testFlagNeedsAName(self):
        with self.assertRaises(ValueError):
            Flag()

    def testShortNameMustBeOneCharacter(self):
        with self.assertRaises(ValueError):
            Flag(short="vv")

    def testLongNameCannotStartWithDash(self):
        with self.assertRaises(ValueError):
            Flag(long="-verbose")

    def testNamesMustBeStrings(self):
        with self.assertRaises(TypeError):
            Flag(short=1)

    def testRequiredWithDefaultIsRejected(self):
        with self.assertRaises(ValueError):
            option("-t, --target <name>", "Target", "prod")
        with self.assertRaises(ValueError):
            argument("<input>", "Input file", "in.txt")
        with self.assertRaises(ValueError):
            argument("<items...>", "Items", "x")
        with self.assertRaises(ValueError):
            Option(long="target", param="name", required=True, default="prod")
        with self.assertRaises(ValueError):
            Argument("input", required=True, default="in.txt")

    def testRequiredWithDefaultMessage(self):
        with self.assertRaises(ValueError) as context:
            option("-t, --target <name>", "Target", "prod")
        self.assertEqual(str(context.exception), "option 'default' cannot be combined with a required parameter")

        with self.assertRaises(ValueError) as context:
            argument("<input>", "Input file", "in.txt")
        self.assertEqual(str(context.exception), "argument 'default' cannot be combined with a required parameter")

    def testOptionalWithDefaultIsAccepted(self):
        self.assertEqual(option("--output [file]", "Output", "out.txt").default, "out.txt")
        self.assertEqual(argument("[output]", "Output", "out.txt").default, "out.txt")
        self.assertIsNone(option("--output [file]").default)

    def testDefaultMustBeAString(self):
        with self.assertRaises(TypeError):
            option("--count [n]", "Count", 3)

    def testDescriptionIsTrimmedAndNonEmpty(self):
        self.assertEqual(flag("-v", "  Verbose output  ").descr, "Verbose output")
        self.assertIsNone(flag("-v").descr)
        with self.assertRaises(ValueError):
            flag("-v", "   ")
        with self.assertRaises(TypeError):
            flag("-v", 42)

    def testVariadicMustBeBoolean(self):
        with self.assertRaises(TypeError):
            Argument("files", variadic="yes")

    def testKeyPrefersLongName(self):
        self.assertEqual(flag("-v, --verbose").key, "--verbose")
        self.assertEqual(flag("-v").key, "-v")
        self.assertEqual(argument("[files...]").key, "files")

    def testPaddedNameIndentsLongOnlySwitches(self):
        self.assertEqual(flag("--first").padded, "    --first")
        self.assertEqual(flag("-h, --help").padded, "-h, --help")
        self.assertEqual(option("--output [file]").padded, "    --output [file]")

    def testEqualityUsesFormattedName(self):
        self.assertEqual(flag("-v, --verbose"), Flag(short="v", long="verbose", descr="Verbose"))
        self.assertNotEqual(flag("-v"), flag("--v"))
        self.assertNotEqual(flag("--tag"), option("--tag <value>"))
        self.assertEqual(len({flag("-v"), Flag(short="v"), flag("-q")}), 2)
        self.assertEqual(argument("<input>"), Argument("input"))

    def testPropertiesAreReadOnly(self):
        parsed = flag("-v")
        with self.assertRaises(AttributeError):
            parsed.short = "q"  # type: ignore[misc]

    def testRepr(self):
        self.assertEqual(repr(flag("-v")), "flag(short='v', long=None, descr=None)")
        self.assertTrue(repr(argument("[files...]")).startswith("argument(name='files'"))


class TestMatching(TestCase):
    """Exact query matching of flags and options."""

    def setUp(self):
        self.separator = option("-s, --separator <char>")
        self.first = flag("--first")

    def testPrefixedQueries(self):
        self.assertTrue(self.separator.matches("--separator"))
        self.assertTrue(self.separator.matches("-s"))
        self.assertFalse(self.separator.matches("--s"))
        self.assertFalse(self.separator.matches("-separator"))

    def testBareQueries(self):
        self.assertTrue(self.separator.matches("separator"))
        self.assertTrue(self.separator.matches("s"))
        self.assertTrue(self.first.matches("first"))

    def testNoAbbreviationOrCaseFolding(self):
        self.assertFalse(self.separator.matches("--sep"))
        self.assertFalse(self.separator.matches("--Separator"))
        self.assertFalse(self.separator.matches("-S"))

    def testMissingSlotNeverMatches(self):
        self.assertFalse(self.first.matches("-f"))
        self.assertFalse(self.first.matches("-"))
        self.assertFalse(self.first.matches("--"))


if __name__ == "__main__":
    unittest.main()
