"""
Arglet faults (parse errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing parse
  error. Codes are grouped by domain so logs and searches stay predictable.
- ArgumentFault: base exception carrying the message plus read-only context
  options (code, title, token, argument key) and able to render itself for rich.
- One subclass per error kind, raised by the scanner and turned into an
  Error(...) result by Parser.parse().

Integration
- The scanner raises faults; nothing in this module performs I/O on its own.
- The default failure handler prints a fault through a rich console; hosts can
  restyle it with a __styles__ mapping in __main__.
"""
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.text import Text

from .utils import Unset


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping
    - options (1111x): UNRECOGNIZED_OPTION, BOOLEAN_VALUE, MISSING_OPTION_VALUE,
      GROUPED_VALUE_OPTION
    - values (1112x): INVALID_VALUE
    - positionals (1113x): UNEXPECTED_POSITIONAL
    - post-processing (1114x): MISSING_REQUIRED
    """
    # --- option errors (1111x) ---
    UNRECOGNIZED_OPTION         = 11111
    BOOLEAN_VALUE               = 11112
    MISSING_OPTION_VALUE        = 11113
    GROUPED_VALUE_OPTION        = 11114

    # --- value errors (1112x) ---
    INVALID_VALUE               = 11121

    # --- positional errors (1113x) ---
    UNEXPECTED_POSITIONAL       = 11131

    # --- post-processing errors (1114x) ---
    MISSING_REQUIRED            = 11141


class ArgumentFault(Exception):
    """
    base type for every parse error.

    - message: the user-facing, single-line description (str(fault) returns it).
    - options: read-only mapping with context; the scanner always sets 'code'
      and 'title', and sets 'token' / 'argument' when they are known.
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def code(self):
        return self.options.get("code")

    def __str__(self):
        return str(self.message)

    def __rich__(self):
        styles = defaultdict(str, {
            "error-label": "bold #FF4DA6",
            "error-message": "",
        } | getattr(__import__("__main__"), "__styles__", {}))

        colorful = self.options.get("colorful", False)

        def styler(style):
            return styles[style] if colorful else ""

        return Text.assemble(
            Text("Error:", styler("error-label")),
            " ",
            Text(str(self.message), styler("error-message")),
        )

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class UnrecognizedOptionError(ArgumentFault): ...
class BooleanValueError(ArgumentFault): ...
class MissingOptionValueError(ArgumentFault): ...
class GroupedValueOptionError(ArgumentFault): ...
class InvalidValueError(ArgumentFault): ...
class UnexpectedPositionalError(ArgumentFault): ...
class MissingRequiredError(ArgumentFault): ...


__all__ = (
    "FaultCode",
    "ArgumentFault",
    "UnrecognizedOptionError",
    "BooleanValueError",
    "MissingOptionValueError",
    "GroupedValueOptionError",
    "InvalidValueError",
    "UnexpectedPositionalError",
    "MissingRequiredError",
)
