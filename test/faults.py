"""
Faults tests (rendering, surfacing and replacement).

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import contextlib
import copy
import io
import unittest
from unittest import TestCase

from keelson import (
    CommandException,
    DelegatedCommandError,
    FaultCode,
    UnknownOptionError,
    trigger,
)


class TestFaults(TestCase):

    def testRendersErrorLine(self):
        stderr = io.StringIO()
        with contextlib.redirect_stderr(stderr), self.assertRaises(SystemExit) as context:
            trigger(UnknownOptionError("unknown option '--nope'"))
        self.assertEqual(context.exception.code, 2)
        self.assertEqual(stderr.getvalue(), "error: unknown option '--nope'\n")

    def testMessageIsNotMarkup(self):
        stderr = io.StringIO()
        with contextlib.redirect_stderr(stderr), self.assertRaises(SystemExit):
            trigger(CommandException("unknown command '[bold]x[/bold]'"))
        self.assertEqual(stderr.getvalue(), "error: unknown command '[bold]x[/bold]'\n")

    def testExplicitStatus(self):
        stderr = io.StringIO()
        with contextlib.redirect_stderr(stderr), self.assertRaises(SystemExit) as context:
            trigger(DelegatedCommandError("disk is full"), status=5)
        self.assertEqual(context.exception.code, 5)

    def testDeferredAndStatusNoneOnlyPrint(self):
        stderr = io.StringIO()
        with contextlib.redirect_stderr(stderr):
            trigger(CommandException("first"), deferred=True)
            trigger(CommandException("second"), status=None)
        self.assertEqual(stderr.getvalue(), "error: first\nerror: second\n")

    def testReplaceMergesOptions(self):
        fault = UnknownOptionError("unknown option '--x'", code=FaultCode.UNKNOWN_OPTION)
        replaced = copy.replace(fault, status=3)

        self.assertIsNot(replaced, fault)
        self.assertIs(type(replaced), UnknownOptionError)
        self.assertEqual(replaced.message, fault.message)
        self.assertEqual(replaced.code, FaultCode.UNKNOWN_OPTION)
        self.assertEqual(replaced.status, 3)
        self.assertEqual(fault.status, 2)

    def testOptionsAreReadOnly(self):
        fault = CommandException("boom", code=FaultCode.DELEGATED_ERROR)
        with self.assertRaises(TypeError):
            fault.options["code"] = FaultCode.UNKNOWN_COMMAND  # type: ignore[index]

    def testStr(self):
        self.assertEqual(str(CommandException("boom")), "boom")
        self.assertEqual(str(CommandException()), "")

    def testTriggerRejectsPlainObjects(self):
        with self.assertRaises(TypeError):
            trigger(ValueError("boom"))

    def testFaultCodes(self):
        self.assertEqual(FaultCode.UNKNOWN_COMMAND, 11101)
        self.assertEqual(FaultCode.UNKNOWN_OPTION, 11112)
        self.assertEqual(FaultCode.MISSING_OPTION_VALUE, 11117)
        self.assertEqual(FaultCode.MISSING_REQUIRED_OPTION, 11119)
        self.assertEqual(FaultCode.UNEXPECTED_ARGUMENT, 11121)
        self.assertEqual(FaultCode.MISSING_REQUIRED_ARGUMENT, 11125)
        self.assertEqual(FaultCode.DELEGATED_ERROR, 11131)
        self.assertEqual(len(set(FaultCode)), len(FaultCode.__members__))


if __name__ == "__main__":
    unittest.main()
