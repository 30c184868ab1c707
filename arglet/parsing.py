"""
Arglet parser: walk the raw tokens once and build the result mapping.

What this module provides
- parse(schema, tokens): the pure, fail-fast state machine. Returns Ok(Values)
  or Error(message); never prints, never exits.
- Parser: facade bound to one normalized schema, with parse(), parse_or_exit(),
  usage() and fallback() (the injected failure handler).
- parser(schema, *, prog=...): factory returning a Parser.

Token classification (priority order)
- "--name" / "--name=value": long option (inline value after the first '=').
- "-abc": short option group, each character resolved on its own.
- anything else (including a bare "-"): next unfilled positional.

Values
- string: the raw token.
- number: int for integer spellings (decimal or 0x/0o/0b), float otherwise.
- boolean: presence only; never read from a token.
- custom: the declared parse callable (Ok / Error / bare value / ValueError).

Quick start
    from arglet import parser, Argument

    args = parser({
        "source": Argument(positional=True, required=True),
        "count": Argument(type="number", short="c", default=1),
        "verbose": Argument(type="boolean", short="v"),
    }).parse_or_exit()

    print(args.source, args.count, args.verbose)
"""
import math
import os.path
import re
import sys
from collections import deque
from collections.abc import Iterable

from rich.console import Console
from rich.text import Text

from .arguments import normalize
from .faults import *
from .results import Ok, Error, Values
from .usage import render_usage
from .utils import *

_RADIX = re.compile(r"[+-]?0([xX][0-9a-fA-F]+|[oO][0-7]+|[bB][01]+)")


def _number(token):
    """
    coerce a token to int or float; raises ValueError("Invalid number").
    """
    text = token.strip()
    if not text or not text.isascii() or "_" in text:
        raise ValueError("Invalid number")
    try:
        return int(text)
    except ValueError:
        pass
    if _RADIX.fullmatch(text):
        return int(text, 0)
    try:
        value = float(text)
    except ValueError:
        raise ValueError("Invalid number") from None
    if math.isnan(value):
        raise ValueError("Invalid number")
    return value


def _custom(spec, token):
    """
    run a custom converter and unwrap its outcome.

    - Ok(value)       → value
    - Error(message)  → ValueError(message)
    - anything else   → taken as the value itself
    """
    match spec.parse(token):
        case Ok(value):
            return value
        case Error(message):
            raise ValueError(message)
        case value:
            return value


class _Scanner:
    """
    per-call parsing state (keeps Parser reentrant).

    - _tokens: deque of the remaining tokens.
    - _index: 1-based position of the token being handled (fault context).
    - _values: result mapping, pre-seeded with declared defaults.
    - _present: keys set during the scan (drives boolean materialization).
    """

    def __init__(self, schema, tokens):
        self._schema = schema
        self._tokens = deque(tokens)
        self._index = 0
        self._values = {spec.key: spec.default for spec in schema.specs if spec.default is not Unset}
        self._present = set()

    def _store(self, spec, value):
        self._values[spec.key] = value
        self._present.add(spec.key)

    def _convert(self, spec, token, label):
        """
        parse a raw token according to the spec's value kind.

        failures become InvalidValueError("Failed to parse value for <label>: <reason>").
        """
        try:
            match spec.value_kind:
                case "string":
                    return token
                case "number":
                    return _number(token)
                case "custom":
                    return _custom(spec, token)
                case kind:
                    raise RuntimeError(f"bug: should not be parsing a value for a {kind} argument")
        except (ValueError, TypeError) as exception:
            raise InvalidValueError(
                "Failed to parse value for %s: %s" % (label, exception),
                code=FaultCode.INVALID_VALUE,
                title="invalid value",
                token=token,
                index=self._index,
                argument=spec.key,
                exception=exception,
            ) from exception

    def _take(self, spec, label):
        """
        consume the next whole token as the value of `spec`.
        """
        if not self._tokens or self._tokens[0].startswith("-"):
            raise MissingOptionValueError(
                "Missing value for %s" % label,
                code=FaultCode.MISSING_OPTION_VALUE,
                title="missing option value",
                index=self._index,
                argument=spec.key,
            )
        self._index += 1
        return self._tokens.popleft()

    def _parse_long(self, token):
        name, equals, inline = token[2:].partition("=")

        for spec in self._schema.options:
            if spec.long is not None and spec.long == name:
                break
        else:
            raise UnrecognizedOptionError(
                "Unrecognized option --%s" % name,
                code=FaultCode.UNRECOGNIZED_OPTION,
                title="unrecognized option",
                token=token,
                index=self._index,
            )

        label = "option --%s" % name

        if spec.boolean:
            if equals:
                raise BooleanValueError(
                    "Unexpected value provided for boolean option --%s" % name,
                    code=FaultCode.BOOLEAN_VALUE,
                    title="boolean option with value",
                    token=token,
                    index=self._index,
                    argument=spec.key,
                )
            self._store(spec, True)
        elif equals:
            self._store(spec, self._convert(spec, inline, label))
        else:
            self._store(spec, self._convert(spec, self._take(spec, label), label))

    def _parse_short(self, token):
        group = token[1:]

        for position, char in enumerate(group):
            for spec in self._schema.options:
                if spec.short == char:
                    break
            else:
                raise UnrecognizedOptionError(
                    "Unrecognized option -%s" % char,
                    code=FaultCode.UNRECOGNIZED_OPTION,
                    title="unrecognized option",
                    token=token,
                    index=self._index,
                )

            if spec.boolean:
                self._store(spec, True)
                continue

            # only the trailing flag of a group may take the following token
            if position != len(group) - 1:
                raise GroupedValueOptionError(
                    "Option -%s takes a value and must be the last flag in %s" % (char, token),
                    code=FaultCode.GROUPED_VALUE_OPTION,
                    title="value option inside a group",
                    token=token,
                    index=self._index,
                    argument=spec.key,
                )

            label = "option -%s" % char
            self._store(spec, self._convert(spec, self._take(spec, label), label))

    def _parse_positional(self, token, positionals):
        try:
            spec = positionals.popleft()
        except IndexError:
            raise UnexpectedPositionalError(
                "Unexpected positional argument: %s" % token,
                code=FaultCode.UNEXPECTED_POSITIONAL,
                title="unexpected positional",
                token=token,
                index=self._index,
            ) from None
        self._store(spec, self._convert(spec, token, spec.identity))

    def run(self):
        """
        scan every token, then materialize booleans and check required specs.

        returns the result dict; raises the first ArgumentFault encountered.
        """
        positionals = deque(self._schema.positionals)

        while self._tokens:
            token = self._tokens.popleft()
            self._index += 1

            if token.startswith("--"):
                self._parse_long(token)
            elif token.startswith("-") and len(token) > 1:
                self._parse_short(token)
            else:
                self._parse_positional(token, positionals)

        for spec in self._schema.specs:
            if spec.boolean:
                self._values[spec.key] = spec.key in self._present

            if spec.required and spec.key not in self._values:
                raise MissingRequiredError(
                    "Missing required value for %s" % spec.identity,
                    code=FaultCode.MISSING_REQUIRED,
                    title="missing required value",
                    argument=spec.key,
                )

        return self._values


def parse(schema, tokens, /):
    """
    Parse `tokens` against `schema` in a single left-to-right pass.

    parameters
    - schema: Schema | Mapping - normalized on the fly when not already.
    - tokens: Iterable[str] - the arguments only (no interpreter/script prefix).

    returns
    - Ok(Values) on success.
    - Error(message) for the first fault found; the fault itself is kept on
      Error.fault.
    """
    schema = normalize(schema)
    try:
        values = _Scanner(schema, tokens).run()
    except ArgumentFault as fault:
        return Error(fault.message, fault)
    return Ok(Values(values))


class Parser:
    """
    Parser bound to one normalized schema.

    Responsibilities
    - parse(argv): skip the two leading invocation tokens and parse the rest.
    - parse_or_exit(argv): same, but hand failures to the failure handler.
    - usage(argv): render the help text for this schema.
    - fallback(handler): install the failure handler (once).

    argv
    - Unset reads the running process: [basename(sys.executable), *sys.argv],
      so the invocation prefix is interpreter + script path.
    - otherwise an iterable of strings whose first two items are the prefix.
    """

    def __init__(self, schema, /, *, prog=Unset):
        if not isinstance(prog, str | Unset):
            raise TypeError("parser 'prog' must be a string")
        self._schema = normalize(schema)
        self._prog = prog
        self._fallback = Unset

    @property
    def schema(self):
        return self._schema

    @property
    def positionals(self):
        return self._schema.positionals

    @property
    def options(self):
        return self._schema.options

    def _argv(self, argv):
        if argv is Unset:
            return [os.path.basename(sys.executable), *sys.argv]
        if isinstance(argv, str) or not isinstance(argv, Iterable):
            raise TypeError("argv must be an iterable of strings")
        argv = list(argv)
        if not all(isinstance(item, str) for item in argv):
            raise TypeError("argv must be an iterable of strings")
        return argv

    def parse(self, argv=Unset, /):
        """
        Parse the process arguments (or `argv`) into Ok(Values) | Error(message).
        """
        return parse(self._schema, self._argv(argv)[2:])

    def usage(self, argv=Unset, /, *, colorful=False):
        """
        Render the help text; the usage prefix is `prog` when set, otherwise the
        first two tokens of `argv`.
        """
        prefix = coalesce(self._prog, self._argv(argv)[:2])
        return render_usage(prefix, self._schema.positionals, self._schema.options, colorful=colorful)

    def fallback(self, fallback, /):
        """
        Register the failure handler used by parse_or_exit().

        Contract
        - fallback: callable receiving the ArgumentFault of the failed parse.
        - can be set only once per parser.

        Returns
        - the same callable, so it can be used as a decorator: @parser.fallback
        """
        if not callable(fallback):
            raise TypeError("parser fallback must be callable")
        if self._fallback is not Unset:
            raise TypeError("parser fallback cannot be overridden")
        self._fallback = fallback
        return fallback

    def _report(self, fault, argv):
        """
        default failure handler: error + usage on stderr, then exit status 1.
        """
        console = Console(stderr=True, highlight=False)
        console.print(fault.__replace__(colorful=True), soft_wrap=True)
        console.print()
        console.print(Text.from_ansi(self.usage(argv, colorful=True)), soft_wrap=True)
        console.print()
        sys.exit(1)

    def parse_or_exit(self, argv=Unset, /):
        """
        Parse and return the Values directly; never returns on failure.

        On failure the registered fallback (or the default reporter) receives
        the fault. If a fallback returns normally, the fault is raised.
        """
        argv = self._argv(argv)
        match self.parse(argv):
            case Ok(values):
                return values
            case Error() as error:
                fault = error.fault

        if self._fallback is Unset:
            self._report(fault, argv)
        else:
            self._fallback(fault)
        raise fault


def parser(schema, /, *, prog=Unset):
    """
    Build a Parser for `schema` (Mapping[str, Argument | Mapping]).
    """
    return Parser(schema, prog=prog)


__all__ = (
    "parse",
    "Parser",
    "parser",
)
