"""
Keelson command layer: define, compose, parse and run CLI commands.

What this module provides
- Command: a named node of the dispatch tree, owning flags, options and
  positional arguments, or subcommands (never both).
  • Builders validate structure as they go (name collisions, single parent,
    variadic-last) and return the command for chaining.
  • parse() turns a token vector into a Namespace bound to the resolved
    (sub)command; run() parses and calls that command's handler.
  • usage()/print_help() render help from the definitions (rich-based).

- Program: the root command. It owns the version string and may designate a
  version switch and a help switch that work at every level of the tree.

- Factories and helpers:
  • command(...): build a detached Command from a handler function, directly
    or as a decorator; attach it later with add().
  • helper(...): the built-in "help [command...]" subcommand.
  • invoke(program, prompt): convenience runner returning the exit code.

Quick start
    from keelson import Program, invoke

    program = Program("split", "Split a string", version="1.0.0")
    program.version_option("--version", "Show version information")
    program.help_option("-h, --help", "Show help for command")
    program.argument("<string>", "String to split")
    program.option("-s, --separator <char>", "Separator character")
    program.option("--first", "Return only the first element")

    @program.action
    def split(args):
        parts = args.argument("string").split(args.option("separator"))
        print(parts[0] if args.flag("first") else parts)
        return 0

    if __name__ == "__main__":
        program.main()

Parsing rules (per level)
- With subcommands, the first non-empty token that does not start with '-'
  selects the subcommand; it is removed and the rest is parsed there.
- '-x', '--name', '-x=value', '--name=value', '-x value', '--name value'.
- Version/help switches short-circuit (print, exit 0).
- User errors print "error: <message>" and exit with status 2.
"""
import copy
import inspect
import itertools
import os.path
import re
import shlex
import sys
from collections import defaultdict, deque
from collections.abc import Iterable

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from .arguments import Flag, Option, Argument, flag, switch, argument
from .faults import *
from .namespaces import Namespace
from .utils import *


class CommandType(type):
    """
    Metaclass that makes commands introspectable.

    Responsibilities
    - Derive __typename__ from the class name for messages ("command",
      "program", ...).
    - Expose every name listed in __introspectable__ as a read-only property
      backed by "_{name}" (containers are copied on access).
    - Provide stable __repr__/__rich_repr__ for diagnostics and rich.pretty;
      __displayable__ (if set) narrows the shown fields. The chain is never
      displayed so a tree prints without cycles.
    """
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            return f"{type(self).__typename__}({
                ", ".join("%s=%r" % item for item in self.__rich_repr__())
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: validate and normalize command metadata in place.

    - name: non-empty string, no whitespace, must not start with '-'.
    - descr: Unset becomes None; strings are trimmed and must not be empty.
    - action: Unset or a callable.
    - colorful/fancy: Unset or bool (Unset defers to the root program).
    """
    if not isinstance(name := metadata["name"], str):
        raise TypeError(f"{cls.__typename__} 'name' must be a string")
    elif not (name := name.strip()):
        raise ValueError(f"{cls.__typename__} 'name' cannot be empty")
    elif not re.fullmatch(r"[^\s\-]\S*", name):
        raise ValueError(f"{cls.__typename__} 'name' {name!r} is not a valid command name")
    metadata["name"] = name

    if not isinstance(descr := metadata["descr"], str | Text | Unset):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    elif isinstance(descr, str) and not (descr := descr.strip()):
        raise ValueError(f"{cls.__typename__} 'descr' cannot be empty")
    metadata["descr"] = coalesce(descr)

    if metadata["action"] is not Unset and not callable(metadata["action"]):
        raise TypeError(f"{cls.__typename__} 'action' must be callable")

    for key in ("colorful", "fancy"):
        if not isinstance(metadata[key], bool | Unset):
            raise TypeError(f"{cls.__typename__} {key!r} must be a boolean")


class Command(metaclass=CommandType):
    """
    Named node of the dispatch tree.

    Structure
    - flags / options: named switches; no two may share a short or a long name.
    - arguments: positionals in declaration order; at most one is variadic and
      it must be the last one.
    - commands: ordered subcommands with unique names. A command has either
      arguments or subcommands.
    - chain: (program, ..., self), assigned once when the command becomes
      reachable from a Program. None while detached.

    Handler
    - action(callable) sets the handler, called with the Namespace of a
      successful parse; its return value is the exit code.
    - Without an action the command prints its help and returns 0.

    Runtime options
    - colorful / fancy: Unset defers to the root program.
    """

    __introspectable__ = (
        "name",
        "descr",
        "flags",
        "options",
        "arguments",
        "commands",
        "chain",
    )

    __displayable__ = (
        "name",
        "descr",
        "flags",
        "options",
        "arguments",
        "commands",
    )

    def __init__(self, name, /, descr=Unset, action=Unset, *, colorful=Unset, fancy=Unset):
        metadata = dict(name=name, descr=descr, action=action, colorful=colorful, fancy=fancy)
        _sanitize_metadata(type(self), metadata)

        self._name = metadata["name"]
        self._descr = metadata["descr"]
        self._colorful = metadata["colorful"]
        self._fancy = metadata["fancy"]

        self._flags = []
        self._options = []
        self._arguments = []
        self._commands = []
        self._chain = None

        self._action = Unset
        self._fallback = Unset

        if metadata["action"] is not Unset:
            self.action(metadata["action"])

    @property
    def root(self):
        """Topmost node: the program when attached, else the command itself."""
        return self._chain[0] if self._chain else self

    @property
    def parent(self):
        return self._chain[-2] if self._chain and len(self._chain) > 1 else None

    @property
    def colorful(self):
        if self._colorful is Unset and self.root is not self:
            return self.root.colorful
        return bool(self._colorful)

    @property
    def fancy(self):
        if self._fancy is Unset and self.root is not self:
            return self.root.fancy
        return bool(self._fancy)

    @property
    def handler(self):
        """The callable run for this command (the action, or the help printer)."""
        return coalesce(self._action, self._helper)

    def _helper(self, namespace, /):
        return self.print_help()

    # --- builders ------------------------------------------------------------

    def add(self, item, /):
        """
        Attach a Flag, Option, Argument or subcommand.

        Raises
        - TypeError: item is none of the above.
        - ValueError: the item breaks a structural rule (see _add_* helpers).
        """
        match item:
            case Flag():
                self._add_switch(item)
            case Argument():
                self._add_argument(item)
            case Command():
                self._add_command(item)
            case _:
                raise TypeError(f"{type(self).__typename__} add() argument must be a flag, an option, an argument or a command")
        return self

    def _add_switch(self, item):
        for other in itertools.chain(self._flags, self._options):
            if item.short is not None and item.short == other.short:
                raise ValueError(f"{type(self).__typename__} {self._name!r} already has a switch named '-{item.short}'")
            if item.long is not None and item.long == other.long:
                raise ValueError(f"{type(self).__typename__} {self._name!r} already has a switch named '--{item.long}'")
        (self._options if isinstance(item, Option) else self._flags).append(item)

    def _add_argument(self, item):
        if self._commands:
            raise ValueError(f"{type(self).__typename__} {self._name!r} has subcommands and cannot take arguments")
        if self.find(item.name) is not None:
            raise ValueError(f"{type(self).__typename__} {self._name!r} already has an argument named {item.name!r}")
        if self._arguments and self._arguments[-1].variadic:
            raise ValueError(
                f"{type(self).__typename__} {self._name!r} argument {item.name!r} "
                f"cannot follow variadic argument {self._arguments[-1].name!r}"
            )
        self._arguments.append(item)

    def _add_command(self, child):
        if child._chain is not None:
            raise ValueError(f"{type(child).__typename__} {child.name!r} is already attached")
        if child is self or any(node is self for node in child._descendants()):
            raise ValueError(f"{type(child).__typename__} {child.name!r} cannot be attached below itself")
        if self._arguments:
            raise ValueError(f"{type(self).__typename__} {self._name!r} has arguments and cannot take subcommands")
        if self.find_command(child.name) is not None:
            raise ValueError(f"{type(self).__typename__} {self._name!r} already has a subcommand named {child.name!r}")

        self._commands.append(child)
        if self._chain is not None:
            child._attach(self._chain)

    def _attach(self, chain):
        assert self._chain is None, "command chain is assigned once"
        self._chain = (*chain, self)
        for child in self._commands:
            child._attach(self._chain)

    def _descendants(self):
        for child in self._commands:
            yield child
            yield from child._descendants()

    def option(self, format, /, descr=Unset, default=Unset):
        """Add a flag or an option from its format ("--first", "-s, --separator <char>")."""
        return self.add(switch(format, descr, default))

    def argument(self, format, /, descr=Unset, default=Unset):
        """Add a positional argument from its format ("<input>", "[files...]")."""
        return self.add(argument(format, descr, default))

    def command(self, name, /, descr=Unset, action=Unset):
        """
        Create a subcommand, attach it under this command and return it.

            deploy = program.command("deploy", "Deploy the application")
            deploy.option("--dry-run", "Print what would change")
        """
        self.add(child := Command(name, descr, action))
        return child

    def action(self, action, /):
        """
        Set the handler of this command.

        Rules
        - Must be callable; it receives the Namespace and returns the exit code.
        - Can be set only once per command (cannot be overridden).

        Returns
        - The same callable, enabling decorator-style usage: @cmd.action
        """
        if not callable(action):
            raise TypeError(f"{type(self).__typename__} action must be callable")
        if self._action is not Unset:
            raise TypeError(f"{type(self).__typename__} action cannot be overridden")
        self._action = action
        return action

    def fallback(self, fallback, /):
        """
        Register a one-time fallback handler for faults.

        Contract
        - fallback: callable invoked with the fault instead of the default
          "error: <message>" printer. The nearest fallback on the chain wins.
        - A terminal fault still exits with its status after the fallback returns.

        Returns
        - The same callable, enabling decorator-style usage: @cmd.fallback
        """
        if not callable(fallback):
            raise TypeError(f"{type(self).__typename__} fallback must be callable")
        if self._fallback is not Unset:
            raise TypeError(f"{type(self).__typename__} fallback cannot be overridden")
        self._fallback = fallback
        return fallback

    # --- lookups -------------------------------------------------------------

    def switch(self, query, /):
        """
        Resolve a flag or an option by query ("-s", "--separator" or "separator").

        Flags are tried before options. Returns None when nothing matches.
        """
        if not isinstance(query, str):
            raise TypeError(f"{type(self).__typename__} switch() argument must be a string")
        for item in itertools.chain(self._flags, self._options):
            if item.matches(query):
                return item
        return None

    def find(self, name, /):
        """Resolve an argument by exact name, or None."""
        for item in self._arguments:
            if item.name == name:
                return item
        return None

    def find_command(self, name, /, *, recursive=False):
        """
        Resolve a subcommand by exact name, or None.

        With recursive, the whole subtree is searched: immediate children first,
        then each child's subtree in declaration order.
        """
        for child in self._commands:
            if child.name == name:
                return child
        if recursive:
            for child in self._commands:
                if (found := child.find_command(name, recursive=True)) is not None:
                    return found
        return None

    # --- faults --------------------------------------------------------------

    def trigger(self, fault, /, **options):
        if (
                not hasattr(fault, "__trigger__") or
                not callable(fault.__trigger__) or
                not hasattr(fault, "__replace__") or
                not callable(fault.__replace__)
        ):
            raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
        fault = copy.replace(fault, **options, tool=self, colorful=self.colorful)

        for node in reversed(self._chain or (self,)):
            if node._fallback is not Unset:
                node._fallback(fault)
                break
        else:
            return trigger(fault)

        if not fault.options.get("deferred", False) and (status := getattr(fault, "status", None)) is not None:
            sys.exit(status)

    def error(self, message, /, status=Unset):
        """
        Report a handler-side error as "error: <message>" on standard error.

        Without a status the message is only printed; with a status the process
        exits with it.
        """
        if not isinstance(message, str):
            raise TypeError(f"{type(self).__typename__} error() message must be a string")
        if not isinstance(status, int | Unset):
            raise TypeError(f"{type(self).__typename__} error() status must be an integer")
        self.trigger(DelegatedCommandError(message), code=FaultCode.DELEGATED_ERROR, status=coalesce(status))

    # --- rendering -----------------------------------------------------------

    def usage(self):
        """
        Build the usage line from the chain.

        "<program> [global options] <path...> <command> ..." for commands with
        subcommands, else "<program> <path...> [options] <arguments...>".
        """
        if self._chain is None:
            raise ValueError(f"{type(self).__typename__} {self._name!r} is not attached to a program")

        program, *path = self._chain
        shared = program.version_switch is not None or program.help_switch is not None

        usage = [program.name]
        if path and shared:
            usage.append("[global options]")
        usage.extend(node.name for node in path)

        if self._commands:
            if not path and shared:
                usage.append("[options]")
            usage.append("<command> ...")
        else:
            if any(item.required for item in self._options):
                usage.append("<options>")
            elif self._flags or self._options or (not path and shared):
                usage.append("[options]")
            usage.extend(item.formatted for item in self._arguments)

        return " ".join(usage)

    def print_help(self):
        """
        Render help for this command on standard output and return 0.

        Sections
        - Usage, Description (when set), Commands (sorted by name), Arguments
          (declaration order), Options (flags and options sorted by long name,
          else short name). Names are aligned on one column.

        Customization
        - Define a mapping named __styles__ in __main__ to override palette entries.
        - When colorful is False, styling is suppressed.
        - When fancy is True, the help is wrapped in a panel.
        """
        console = Console()
        styles = defaultdict(str, {
            "section-label": "bold #FFFFFF",  # pure white headers
            "usage": "bold #36C5F0",  # sky-blue usage line
            "description": "italic #A3A3A3",  # neutral gray
            "command-name": "bold #36C5F0",  # sky-blue subcommands
            "argument-name": "bold #FFD600",  # amber positionals
            "flag-name": "bold #22C55E",  # green flags
            "option-name": "bold #00E6FF",  # cyan options
            "entry-description": "#9CA3AF",  # muted gray
            "panel-title": "bold #FF4D94",  # magenta branding
        } | getattr(__import__("__main__"), "__styles__", {}))

        def styler(style):
            return styles[style] if self.colorful else ""

        def text(fragment, style=""):
            if not self.colorful:
                return Text(str(fragment))
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), style)

        commands = sorted(self._commands, key=lambda item: item.name)
        switches = sorted(
            itertools.chain(self._flags, self._options),
            key=lambda item: item.long if item.long is not None else item.short,
        )

        entries = [item.name for item in commands]
        entries += [item.name for item in self._arguments]
        entries += [item.padded for item in switches]
        longest = max(map(len, entries), default=0)

        def section(label, rows):
            lines = [Text(), text(label, styler("section-label"))]
            for name, style, descr in rows:
                line = Text("  ").append_text(text(name, styler(style)))
                if descr:
                    line.append(" " * (longest - len(name) + 2))
                    line.append_text(text(descr, styler("entry-description")))
                lines.append(line)
            return lines

        lines = [text("Usage:", styler("section-label")), Text("  ").append_text(text(self.usage(), styler("usage")))]

        if self._descr:
            lines += [Text(), text("Description:", styler("section-label"))]
            lines.append(Text("  ").append_text(text(self._descr, styler("description"))))

        if commands:
            lines += section("Commands:", [(item.name, "command-name", item.descr) for item in commands])

        if self._arguments:
            lines += section("Arguments:", [(item.name, "argument-name", item.descr) for item in self._arguments])

        if switches:
            lines += section("Options:", [
                (item.padded, "option-name" if isinstance(item, Option) else "flag-name", item.descr)
                for item in switches
            ])

        renderable = Text("\n").join(lines)

        if self.fancy:
            renderable = Panel(
                renderable,
                title=Text.assemble("[", " ", self.root.name.upper(), " ", "]", style=styler("panel-title")),
                title_align="left",
            )

        console.print(renderable, soft_wrap=True, highlight=False)
        return 0

    # --- parsing -------------------------------------------------------------

    def parse(self, tokens, program=Unset, /):
        """
        Parse a token vector (without the program name) into a Namespace.

        Parameters
        - tokens: Iterable[str]; left untouched (a copy is consumed).
        - program: the root Program; defaults to the root of this command's chain.

        Subcommand resolution
        - When this command has subcommands, the first non-empty token that does
          not start with '-' names the subcommand. It is removed and the
          remaining tokens (switches before and after it included, in order)
          are parsed by that subcommand.
        - When no such token exists, every token belongs to this level.

        Termination
        - Version/help switches print and exit 0.
        - User errors print "error: <message>" and exit 2.
        """
        program = coalesce(program, self.root)
        if not isinstance(program, Program):
            raise ValueError(f"{type(self).__typename__} {self._name!r} is not attached to a program")

        tokens = list(tokens)
        if self._commands:
            for index, token in enumerate(tokens):
                if not token or token.startswith("-"):
                    continue
                if (child := self.find_command(token)) is None:
                    self.trigger(UnknownCommandError(f"unknown command '{token}'"), code=FaultCode.UNKNOWN_COMMAND)
                return child.parse(tokens[:index] + tokens[index + 1:], program)

        return self._parseargs(tokens, program)

    def _parseargs(self, tokens, program):
        """
        classify tokens at this level, then finalize defaults and requirements.

        loop
        - '-'-prefixed: version switch, help switch, local flag (counted), local
          option (inline "=value" or the next token). anything else is an
          unknown option.
        - otherwise positional: next free non-variadic argument, then the
          variadic argument, else an unexpected argument.

        finalize
        - commit variadic values, then option values.
        - missing options: required fails, else the default is committed.
        - missing arguments: required fails, else the default is committed.
        """
        namespace = Namespace(self, program)
        values = {}
        remaining = []

        pending = deque(item for item in self._arguments if not item.variadic)
        variadic = next((item for item in self._arguments if item.variadic), None)

        tokens = deque(tokens)
        while tokens:
            token = tokens.popleft()

            if token.startswith("-"):
                if program.version_switch is not None and program.version_switch.matches(token):
                    sys.exit(program.print_version())
                if program.help_switch is not None and program.help_switch.matches(token):
                    sys.exit(self.print_help())

                if (item := next((item for item in self._flags if item.matches(token)), None)) is not None:
                    namespace._count(item)
                    continue

                name, separator, value = token.partition("=")
                if (item := next((item for item in self._options if item.matches(name)), None)) is None:
                    self.trigger(UnknownOptionError(f"unknown option '{name}'"), code=FaultCode.UNKNOWN_OPTION)
                if not separator:
                    if not tokens:
                        self.trigger(
                            MissingOptionValueError(f"missing value for option '{name}'"),
                            code=FaultCode.MISSING_OPTION_VALUE,
                        )
                    value = tokens.popleft()
                values.setdefault(item.key, []).append(value)
            elif pending:
                namespace._set_argument(pending.popleft(), token)
            elif variadic is not None:
                remaining.append(token)
            else:
                self.trigger(UnexpectedArgumentError(f"unexpected argument '{token}'"), code=FaultCode.UNEXPECTED_ARGUMENT)

        if remaining:
            namespace._set_variadic(remaining)

        for item in self._options:
            if item.key in values:
                namespace._set_option(item, values[item.key])

        for item in self._options:
            if namespace.has_option(item):
                continue
            if item.required:
                self.trigger(
                    MissingRequiredOptionError(f"missing required option '{item.formatted}'"),
                    code=FaultCode.MISSING_REQUIRED_OPTION,
                )
            elif item.default is not None:
                namespace._set_option(item, [item.default])

        for item in self._arguments:
            if namespace.has_argument(item):
                continue
            if item.required:
                self.trigger(
                    MissingRequiredArgumentError(f"missing required argument '{item.name}'"),
                    code=FaultCode.MISSING_REQUIRED_ARGUMENT,
                )
            elif item.default is not None and item.variadic:
                namespace._set_variadic([item.default])
            elif item.default is not None:
                namespace._set_argument(item, item.default)

        return namespace._seal()

    def run(self, tokens, program=Unset, /):
        """
        Parse tokens and call the resolved command's handler.

        Returns
        - whatever the handler returns (the exit code).
        """
        namespace = self.parse(tokens, program)
        return namespace.command.handler(namespace)

    def __invoke__(self, prompt=Unset):
        """
        Execute this command with a token stream.

        Parameters
        - prompt:
          • Unset: read tokens from sys.argv[1:].
          • str: shell-like string; will be split via shlex.split.
          • Iterable[str]: pre-tokenized sequence, used as-is.

        Raises
        - TypeError: when prompt is not Unset/str/Iterable[str], or when an
          iterable contains a non-string element.
        """
        if prompt is Unset:
            tokens = sys.argv[1:]
        elif isinstance(prompt, str):
            tokens = shlex.split(prompt)
        elif isinstance(prompt, Iterable):
            tokens = list(prompt)
            if not all(isinstance(token, str) for token in tokens):
                raise TypeError("__invoke__() argument must be a string or an iterable of strings")
        else:
            raise TypeError("__invoke__() argument must be a string or an iterable of strings")

        return self.run(tokens)


class Program(Command):
    """
    Root command of a CLI.

    Additions over Command
    - version: the string printed by print_version() and the version switch.
    - version_option()/help_option(): designate the switches that print the
      version or the help of the current command, at any depth of the tree.
    - main(): run with the full process argv and exit with the handler's code.

    The program's chain is (program,) from construction, so a program cannot be
    attached under another command.
    """

    __introspectable__ = Command.__introspectable__ + (
        "version",
        "version_switch",
        "help_switch",
    )

    __displayable__ = (
        "name",
        "descr",
        "version",
        "flags",
        "options",
        "arguments",
        "commands",
    )

    def __init__(self, name=Unset, /, descr=Unset, version=Unset, action=Unset, *, colorful=Unset, fancy=Unset):
        super().__init__(
            coalesce(name, os.path.basename(sys.argv[0])),
            descr,
            action,
            colorful=colorful,
            fancy=fancy,
        )

        if not isinstance(version, str | Unset):
            raise TypeError(f"{type(self).__typename__} 'version' must be a string")
        elif isinstance(version, str) and not (version := version.strip()):
            raise ValueError(f"{type(self).__typename__} 'version' cannot be empty")

        self._version = coalesce(version)
        self._version_switch = None
        self._help_switch = None
        self._chain = (self,)

    def _designate(self, source, descr, /):
        if isinstance(source, str):
            source = flag(source, descr)
        elif not isinstance(source, Flag) or isinstance(source, Option):
            raise TypeError(f"{type(self).__typename__} switch must be a flag or a flag format")
        elif descr is not Unset:
            raise TypeError(f"{type(self).__typename__} switch description goes with a flag format only")
        self.add(source)
        return source

    def version_option(self, source, /, descr=Unset):
        """Designate the flag (or flag format) that prints the version and exits 0."""
        if self._version is None:
            raise ValueError(f"{type(self).__typename__} {self._name!r} has no version to show")
        if self._version_switch is not None:
            raise ValueError(f"{type(self).__typename__} {self._name!r} already has a version switch")
        self._version_switch = self._designate(source, descr)
        return self

    def help_option(self, source, /, descr=Unset):
        """Designate the flag (or flag format) that prints help for the current command and exits 0."""
        if self._help_switch is not None:
            raise ValueError(f"{type(self).__typename__} {self._name!r} already has a help switch")
        self._help_switch = self._designate(source, descr)
        return self

    def print_version(self):
        """Print the version string on standard output and return 0."""
        if self._version is None:
            raise ValueError(f"{type(self).__typename__} {self._name!r} has no version to show")
        Console().print(Text(self._version), soft_wrap=True, highlight=False)
        return 0

    def main(self, argv=Unset, /):
        """
        Run with a full argv (program name first) and exit with the handler's code.
        """
        argv = list(coalesce(argv, sys.argv))
        sys.exit(self.run(argv[1:]))


def helper(descr="Show help for command"):
    """
    Build the built-in "help" subcommand: help [command...].

    - No argument: print the program help.
    - Names: walk them from the program down and print that command's help;
      an unknown name fails with "unknown command: <name>" (exit 2).
    """
    help = Command("help", descr)
    help.argument("[command...]", "Command to show help for")

    @help.action
    @rename("help")
    def action(namespace):
        target = namespace.program
        for name in namespace.argument_list("command") if namespace.has_argument("command") else ():
            if (child := target.find_command(name)) is None:
                help.error(f"unknown command: {name}", 2)
            target = child
        return target.print_help()

    return help


def command(source=Unset, /, **metadata):
    """
    Create a detached Command from a handler, or return a decorator doing so.

    Invocation modes
    - Direct:     greet = command(greet_handler, name="greet")
    - Decorator:  @command(name="greet", descr="Greet someone")

    Defaults
    - name: the handler's __name__ (underscores become hyphens).
    - descr: the handler's docstring, when it has one.

    The returned command is not attached; use add() on a parent.
    """
    @rename("command")
    def wrapper(source, /):
        if not callable(source):
            raise TypeError("@command() must be applied to a callable")
        options = {
            "name": getattr(source, "__name__", "").replace("_", "-"),
            "descr": inspect.getdoc(source) or Unset,
        } | metadata
        return Command(options.pop("name"), action=source, **options)

    return wrapper(source) if source is not Unset else wrapper


def invoke(object, prompt=Unset, /):
    """
    Convenience runner for commands.

    Parameters
    - object: an instance providing __invoke__(prompt), typically a Program.
    - prompt: Unset (sys.argv[1:]), a shell-like string, or an iterable of tokens.

    Returns
    - the handler's exit code.
    """
    if hasattr(object, "__invoke__") and callable(object.__invoke__):
        return object.__invoke__(prompt)

    target = "argument" if prompt is Unset else "first argument"
    raise TypeError(f"invoke() {target} must implement __invoke__ method") from None


__all__ = (
    "Command",
    "Program",
    "command",
    "helper",
    "invoke",
)

del CommandType
