"""
Keelson parsed results.

A Namespace is what a command handler receives: the outcome of one parse,
bound to the resolved command and to the root program. It is filled by the
parser (counts, option values, positionals, defaults) and sealed before the
handler sees it; after that it only answers queries.

Lookups
- Every query accepts a bare name ("separator"), a short form ("-s") or a long
  form ("--separator"); the forms are tried in that order until one resolves
  to a stored value. A Flag/Option/Argument definition is accepted as well.
- Flags and options are stored once, under their canonical key ("--long",
  else "-short"); the other spellings are resolved through the command's
  definitions.

Example
    >>> args.flag("first")            # occurrence count, 0 when absent
    >>> args.option("-s")             # first value, KeyError when absent
    >>> args.option_list("tag")       # every value, in input order
    >>> args.argument_list("items")   # collected values of a variadic argument
"""
import functools
import operator

from .arguments import Flag, Argument
from .utils import *


class Namespace:
    """
    Read-only view over the values of one invocation.

    Attributes
    - command: the command whose handler runs (the resolved subcommand).
    - program: the root program of that command.
    """

    command = mirror("command")
    program = mirror("program")

    def __init__(self, command, program, /):
        self._command = command
        self._program = program
        self._flags = {}
        self._options = {}
        self._arguments = {}
        self._variadic = []
        self._sealed = False

    # --- parser side ---------------------------------------------------------

    def _check(self):
        if self._sealed:
            raise TypeError("namespace cannot be modified after parsing")

    def _count(self, flag, /):
        self._check()
        self._flags[flag.key] = self._flags.get(flag.key, 0) + 1

    def _set_option(self, option, values, /):
        self._check()
        assert option.key not in self._options, f"option '{option.formatted}' already present"
        self._options[option.key] = list(values)

    def _set_argument(self, argument, value, /):
        self._check()
        assert argument.key not in self._arguments, f"argument '{argument.name}' already present"
        self._arguments[argument.key] = value

    def _set_variadic(self, values, /):
        self._check()
        assert not self._variadic, "variadic values already present"
        self._variadic = list(values)

    def _seal(self):
        self._sealed = True
        return self

    # --- queries -------------------------------------------------------------

    def _resolve(self, storage, query, /, *, switches=True):
        """
        Return the stored key designated by query, or Unset.

        With switches, a prefixed spelling that is not itself a stored key
        ("-v" for a switch stored as "--verbose") is resolved through the
        command's flag and option definitions. A prefixed query naming a
        declared switch designates that switch only, so "-v" never reads a
        "--v" switch.
        """
        if isinstance(query, Flag | Argument):
            return query.key if query.key in storage else Unset
        if not isinstance(query, str):
            raise TypeError("namespace query must be a string or a definition")

        if switches and query.startswith("-") and (switch := self._command.switch(query)) is not None:
            return switch.key if switch.key in storage else Unset

        for candidate in (query, "-" + query, "--" + query):
            if candidate in storage:
                return candidate
            if not switches or not candidate.startswith("-"):
                continue
            if (switch := self._command.switch(candidate)) is not None and switch.key in storage:
                return switch.key
        return Unset

    def has_flag(self, name, /):
        return self._resolve(self._flags, name) is not Unset

    def flag(self, name, /):
        """Number of times the flag appeared (0 when it never did)."""
        if (key := self._resolve(self._flags, name)) is Unset:
            return 0
        return self._flags[key]

    def has_option(self, name, /):
        return self._resolve(self._options, name) is not Unset

    def option(self, name, /, default=Unset):
        """
        First value of an option.

        Raises KeyError when the option was never given and has no declared
        default, unless a fallback default is passed here.
        """
        try:
            return self.option_list(name)[0]
        except KeyError:
            if default is Unset:
                raise
            return default

    def option_list(self, name, /):
        """Every value of an option, in input order (a copy)."""
        if (key := self._resolve(self._options, name)) is Unset:
            raise KeyError(f"option {name!r} not found")
        return list(self._options[key])

    def _variadic_of(self, name):
        if isinstance(name, Argument):
            name = name.name
        argument = self._command.find(name)
        return argument is not None and argument.variadic and bool(self._variadic)

    def has_argument(self, name, /):
        return self._resolve(self._arguments, name, switches=False) is not Unset or self._variadic_of(name)

    def argument(self, name, /, default=Unset):
        """
        Value of a positional argument (first collected value for a variadic one).

        Raises KeyError when absent and not defaulted, unless a fallback default
        is passed here.
        """
        try:
            return self.argument_list(name)[0]
        except KeyError:
            if default is Unset:
                raise
            return default

    def argument_list(self, name, /):
        """
        Values of a positional argument as a list.

        A variadic argument returns its collected values; any other argument
        returns a single-element list.
        """
        if (key := self._resolve(self._arguments, name, switches=False)) is not Unset:
            return [self._arguments[key]]
        if self._variadic_of(name):
            return list(self._variadic)
        raise KeyError(f"argument {getattr(name, "name", name)!r} not found")

    def __rich_repr__(self):
        yield "command", self._command.name
        yield "flags", dict(self._flags)
        yield "options", {key: list(values) for key, values in self._options.items()}
        yield "arguments", dict(self._arguments)
        if self._variadic:
            yield "variadic", list(self._variadic)

    def __repr__(self):
        return f"namespace({
            ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
        })"


__all__ = (
    "Namespace",
)
