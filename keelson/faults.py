"""
Keelson faults (user-facing errors) and their rendering.

Scope
- FaultCode: stable numeric identifiers for every user input error, so
  fallbacks and tests can branch on a fault without matching message text.
- CommandException: base type carrying a message plus runtime options; it
  renders itself through rich and knows how to surface itself.
- trigger(): central entry point to surface a fault with extra options.

Output contract
- Every fault is printed as a single line "error: <message>" on standard error.
- Styling is applied only when the owning program is colorful; palette entries
  can be overridden through a __styles__ mapping in __main__.
- After printing, the process exits with the fault's status (2 for parse
  errors) unless the fault is deferred.

Options understood by CommandException
- code: FaultCode
- status: int | None (exit status, defaults to 2)
- tool: the Command that raised the fault
- colorful: bool
- deferred: bool (print only, do not exit)
"""
import copy
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping
    - routing (1110x): UNKNOWN_COMMAND
    - switches (1111x): UNKNOWN_OPTION, MISSING_OPTION_VALUE, MISSING_REQUIRED_OPTION
    - positionals (1112x): UNEXPECTED_ARGUMENT, MISSING_REQUIRED_ARGUMENT
    - delegated (1113x): DELEGATED_ERROR, reported by command handlers
    """
    # --- routing errors ---
    UNKNOWN_COMMAND             = 11101

    # --- option/flag errors ---
    UNKNOWN_OPTION              = 11112
    MISSING_OPTION_VALUE        = 11117
    MISSING_REQUIRED_OPTION     = 11119

    # --- positional errors ---
    UNEXPECTED_ARGUMENT         = 11121
    MISSING_REQUIRED_ARGUMENT   = 11125

    # --- delegated errors ---
    DELEGATED_ERROR             = 11131


class CommandException(Exception):
    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def code(self):
        return self.options.get("code")

    @property
    def status(self):
        return self.options.get("status", 2)

    def __str__(self):
        return "" if self.message is Unset else self.message

    def __rich__(self):
        styles = defaultdict(str, {
            "error-label": "bold #FF4DA6",  # friendly pinky label
            "error-message": "#C8C8D0",  # soft light gray message
        } | getattr(__import__("__main__"), "__styles__", {}))

        colorful = self.options.get("colorful", False)

        def text(fragment, style=""):
            return Text(str(fragment), styles[style] if colorful else "")

        return Text.assemble(text("error", "error-label"), ": ", text(self, "error-message"))

    def __trigger__(self) -> None:
        console.print(self, soft_wrap=True, highlight=False)
        if self.options.get("deferred", False) or self.status is None:
            return
        sys.exit(self.status)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class UnknownCommandError(CommandException): ...
class UnknownOptionError(CommandException): ...
class MissingOptionValueError(CommandException): ...
class UnexpectedArgumentError(CommandException): ...
class MissingRequiredOptionError(CommandException): ...
class MissingRequiredArgumentError(CommandException): ...
class DelegatedCommandError(CommandException): ...


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see CommandException).
    - options are merged into the fault via copy.replace() before triggering.
    - a terminal fault prints "error: <message>" and exits with its status.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


__all__ = (
    "CommandException",
    "UnknownCommandError",
    "UnknownOptionError",
    "MissingOptionValueError",
    "UnexpectedArgumentError",
    "MissingRequiredOptionError",
    "MissingRequiredArgumentError",
    "DelegatedCommandError",
    "FaultCode",
    "trigger",
)
