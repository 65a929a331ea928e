r"""
Keelson argument definitions and the format mini-language.

Overview
- Definitions
  • Flag: presence-only switch with a short and/or long name, e.g. -v, --verbose.
    Repeated occurrences are counted.
  • Option: a Flag with a parameter placeholder, e.g. -s, --separator <char>.
    Repeated occurrences collect values in input order.
  • Argument: positional parameter, e.g. <input>, [output], <items...>.

- Mini-parser (pure, deterministic)
  • flag("-v, --verbose", descr) -> Flag
  • option("-s, --separator <char>", descr, default) -> Option
  • argument("[files...]", descr, default) -> Argument
  • switch(format, descr, default) -> Flag | Option, chosen by the presence of
    a placeholder bracket ('<' or '[').

- Introspection & representation
  • ArgumentType metaclass provides stable __repr__/__rich_repr__ and exposes
    the fields declared in __introspectable__ as read-only properties.

Grammar
- names:        "-x" | "--name" | "-x, --name" (comma separated, stripped)
- placeholder:  "<param>" (required) | "[param]" (optional)
- option:       names placeholder (two or three whitespace separated segments)
- argument:     "<name>" | "[name]" | "<name...>" | "[name...]"

Validation (construction-time contract, never user input)
- Malformed formats, bad names, empty descriptions and required definitions
  with a default raise ValueError; wrong types raise TypeError.
- Messages start with the definition type name ("option", "argument", ...).

Quick example:
    >>> from keelson.arguments import option, argument
    >>> option("-s, --separator <char>").formatted
    '-s, --separator <char>'
    >>> argument("[files...]").variadic
    True
"""
import functools
import operator
import re

from rich.text import Text

from .utils import *


class ArgumentType(type):
    """
    Metaclass that makes definitions introspectable.

    Responsibilities
    - Derive __typename__ from the class name (camel-case split with hyphens)
      for use in messages.
    - Expose every name listed in __introspectable__ as a read-only property
      backed by "_{name}" (see mirror()).
    - Provide stable __repr__/__rich_repr__ implementations; __displayable__
      (if set) narrows which properties are shown.
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
            """
            Return a concise, stable representation with key metadata.

            Example
            - option(short='s', long='separator', param='char', ...)
            """
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
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
    Internal: normalize the shared 'descr' field.

    - descr: Unset becomes None; a string is trimmed and must not be empty;
      rich Text is kept as-is.

    Raises
    - TypeError: descr is not a string, Text or Unset.
    - ValueError: descr is an empty string after trimming.
    """
    if not isinstance(descr := metadata["descr"], str | Text | Unset):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    elif isinstance(descr, str) and not (descr := descr.strip()):
        raise ValueError(f"{cls.__typename__} 'descr' cannot be empty")

    metadata["descr"] = coalesce(descr)


def _sanitize_named_metadata(cls, metadata, /):
    r"""
    Internal: validate the short/long names of Flag and Option.

    Rules
    - short: Unset/None means absent; otherwise exactly one character that is
      not '-', '=', ',' or whitespace.
    - long: Unset/None means absent; otherwise a non-empty string without
      '=', ',' or whitespace that does not start with '-'.
    - at least one of short/long must be present.

    The dict is modified in place: absent names become None.
    """
    short = coalesce(metadata["short"])
    long = coalesce(metadata["long"])

    if not isinstance(short, str | None):
        raise TypeError(f"{cls.__typename__} 'short' must be a string")
    elif isinstance(short, str) and len(short) != 1:
        raise ValueError(f"{cls.__typename__} 'short' must be exactly one character, got {short!r}")
    elif isinstance(short, str) and not re.fullmatch(r"[^\s=,\-]", short):
        raise ValueError(f"{cls.__typename__} 'short' {short!r} is not a valid name")

    if not isinstance(long, str | None):
        raise TypeError(f"{cls.__typename__} 'long' must be a string")
    elif isinstance(long, str) and not long:
        raise ValueError(f"{cls.__typename__} 'long' cannot be empty")
    elif isinstance(long, str) and not re.fullmatch(r"[^\s=,\-][^\s=,]*", long):
        raise ValueError(f"{cls.__typename__} 'long' {long!r} is not a valid name")

    if short is None and long is None:
        raise ValueError(f"{cls.__typename__} must have a short or a long name")

    metadata["short"] = short
    metadata["long"] = long


def _sanitize_param_metadata(cls, metadata, /):
    """
    Internal: validate the value-bearing fields shared by Option and Argument.

    - name: the key given by the caller ('param' for options, 'name' for
      arguments); non-empty, no whitespace and no placeholder brackets.
    - required: bool.
    - default: Unset becomes None; otherwise a string. A required definition
      cannot declare a default.
    """
    key = "param" if "param" in metadata else "name"

    if not isinstance(name := metadata[key], str):
        raise TypeError(f"{cls.__typename__} '{key}' must be a string")
    elif not name:
        raise ValueError(f"{cls.__typename__} '{key}' cannot be empty")
    elif not re.fullmatch(r"[^\s<>\[\]]+", name):
        raise ValueError(f"{cls.__typename__} '{key}' {name!r} is not a valid name")

    if not isinstance(metadata["required"], bool):
        raise TypeError(f"{cls.__typename__} 'required' must be a boolean")

    if not isinstance(default := metadata["default"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'default' must be a string")
    elif metadata["required"] and default is not Unset:
        raise ValueError(f"{cls.__typename__} 'default' cannot be combined with a required parameter")

    metadata["default"] = coalesce(default)


class Flag(metaclass=ArgumentType):
    """
    Presence-only switch.

    A flag carries no value; the parser counts how many times it appears
    (so "-v -v -v" can mean a verbosity of three).

    Parameters (keyword-only)
    - short: single character, without the leading '-'.
    - long: long name, without the leading '--'.
    - descr: short help text.
    """
    __introspectable__ = (
        "short",
        "long",
        "descr",
    )

    def __init__(self, *, short=Unset, long=Unset, descr=Unset):
        metadata = dict(short=short, long=long, descr=descr)

        _sanitize_metadata(type(self), metadata)
        _sanitize_named_metadata(type(self), metadata)

        self._short = metadata["short"]
        self._long = metadata["long"]
        self._descr = metadata["descr"]

    @property
    def key(self):
        """Canonical storage key: "--long", else "-short"."""
        return "--" + self._long if self._long is not None else "-" + self._short

    @property
    def names(self):
        return ", ".join(
            name for name in (
                self._short and "-" + self._short,
                self._long and "--" + self._long,
            ) if name
        )

    @property
    def formatted(self):
        return self.names

    @property
    def padded(self):
        """Formatted name, indented when there is no short name so long names line up."""
        return self.formatted if self._short is not None else " " * 4 + self.formatted

    def matches(self, query, /):
        """
        Tell whether a query string designates this switch.

        - "--name" matches the long name.
        - "-x" matches the short name.
        - a bare query matches either name.

        Matching is exact: no abbreviation and no case folding.
        """
        if query.startswith("--"):
            return self._long is not None and query[2:] == self._long
        if query.startswith("-"):
            return self._short is not None and query[1:] == self._short
        return query == self._short or query == self._long

    def __eq__(self, other):
        if not isinstance(other, Flag | Argument):
            return NotImplemented
        return self.formatted == other.formatted

    def __hash__(self):
        return hash(self.formatted)


class Option(Flag):
    """
    Named switch that takes one value per occurrence.

    Parameters (keyword-only)
    - short / long / descr: see Flag.
    - param: placeholder label shown in help ("char" in "<char>").
    - required: when True the option must appear at least once.
    - default: value used when the option never appears (optional options only).
    """
    __introspectable__ = (
        "short",
        "long",
        "descr",
        "param",
        "required",
        "default",
    )

    def __init__(self, *, short=Unset, long=Unset, param, required=True, default=Unset, descr=Unset):
        super().__init__(short=short, long=long, descr=descr)

        metadata = dict(param=param, required=required, default=default)
        _sanitize_param_metadata(type(self), metadata)

        self._param = metadata["param"]
        self._required = metadata["required"]
        self._default = metadata["default"]

    @property
    def formatted(self):
        return "%s %s" % (self.names, ("<%s>" if self._required else "[%s]") % self._param)


class Argument(metaclass=ArgumentType):
    """
    Positional parameter.

    Non-variadic arguments take exactly one token; a variadic argument collects
    the trailing run of positionals (one or more when required, zero or more
    otherwise).
    """
    __introspectable__ = (
        "name",
        "required",
        "variadic",
        "default",
        "descr",
    )

    def __init__(self, name, /, *, required=True, variadic=False, default=Unset, descr=Unset):
        metadata = dict(name=name, required=required, default=default, descr=descr)

        _sanitize_metadata(type(self), metadata)
        _sanitize_param_metadata(type(self), metadata)

        if not isinstance(variadic, bool):
            raise TypeError(f"{type(self).__typename__} 'variadic' must be a boolean")

        self._name = metadata["name"]
        self._required = metadata["required"]
        self._variadic = variadic
        self._default = metadata["default"]
        self._descr = metadata["descr"]

    @property
    def key(self):
        return self._name

    @property
    def formatted(self):
        return ("<%s>" if self._required else "[%s]") % (self._name + "..." * self._variadic)

    def __eq__(self, other):
        if not isinstance(other, Flag | Argument):
            return NotImplemented
        return self.formatted == other.formatted

    def __hash__(self):
        return hash(self.formatted)


def _parse_names(cls, format, /):
    """
    Internal: split "-x, --name" into {'short': 'x', 'long': 'name'}.

    Absent slots are left Unset; the definition constructor validates the rest.
    """
    tokens = [token.strip() for token in format.split(",")]
    if not 1 <= len(tokens) <= 2:
        raise ValueError(f"{cls.__typename__} format {format!r} must declare one or two names")

    names = {"short": Unset, "long": Unset}
    for token in tokens:
        if token.startswith("--"):
            slot, name = "long", token[2:]
        elif token.startswith("-"):
            slot, name = "short", token[1:]
            if len(name) != 1:
                raise ValueError(f"{cls.__typename__} format {format!r} short name {token!r} must be a single character")
        else:
            raise ValueError(f"{cls.__typename__} format {format!r} name {token!r} must start with '-' or '--'")

        if names[slot] is not Unset:
            raise ValueError(f"{cls.__typename__} format {format!r} declares more than one {slot} name")
        names[slot] = name

    return names


def _parse_placeholder(cls, segment, format, /):
    """
    Internal: unwrap "<name>" / "[name]" into (name, required).
    """
    match segment[:1], segment[-1:]:
        case "<", ">" if len(segment) > 1:
            required = True
        case "[", "]" if len(segment) > 1:
            required = False
        case _:
            raise ValueError(f"{cls.__typename__} format {format!r} must wrap {segment!r} in '<...>' or '[...]'")
    return segment[1:-1].strip(), required


def flag(format, /, descr=Unset):
    """
    Parse a flag format such as "-v", "--verbose" or "-v, --verbose".

    Raises
    - TypeError: format is not a string.
    - ValueError: malformed format (see module grammar).
    """
    if not isinstance(format, str):
        raise TypeError("flag() format must be a string")
    return Flag(**_parse_names(Flag, format), descr=descr)


def option(format, /, descr=Unset, default=Unset):
    """
    Parse an option format such as "-s, --separator <char>" or "--output [file]".

    The last whitespace-separated segment is the placeholder; '<...>' makes the
    option required, '[...]' optional. The segments before it follow the flag
    grammar.
    """
    if not isinstance(format, str):
        raise TypeError("option() format must be a string")

    segments = format.split()
    if len(segments) not in (2, 3):
        raise ValueError(f"option format {format!r} must have a name part and a placeholder")

    param, required = _parse_placeholder(Option, segments[-1], format)
    return Option(
        **_parse_names(Option, " ".join(segments[:-1])),
        param=param,
        required=required,
        default=default,
        descr=descr,
    )


def argument(format, /, descr=Unset, default=Unset):
    """
    Parse an argument format: "<name>", "[name]", "<name...>" or "[name...]".

    A trailing "..." inside the brackets makes the argument variadic; the
    suffix is not part of the name.
    """
    if not isinstance(format, str):
        raise TypeError("argument() format must be a string")

    name, required = _parse_placeholder(Argument, format.strip(), format)
    if variadic := name.endswith("..."):
        name = name[:-3].strip()

    return Argument(name, required=required, variadic=variadic, default=default, descr=descr)


def switch(format, /, descr=Unset, default=Unset):
    """
    Parse a flag or an option format, depending on whether it has a placeholder.
    """
    if not isinstance(format, str):
        raise TypeError("switch() format must be a string")
    if "<" in format or "[" in format:
        return option(format, descr, default)
    if default is not Unset:
        raise ValueError(f"flag format {format!r} cannot declare a default")
    return flag(format, descr)


__all__ = (
    # Classes
    "Flag",
    "Option",
    "Argument",

    # Mini-parser
    "flag",
    "option",
    "argument",
    "switch",
)

del ArgumentType
