r"""
Arglet argument declarations and schema normalization.

Overview
- Argument: one declared argument (option or positional). Built with keyword
  arguments; plain mappings using the same keys are accepted by normalize().
    • positional: bool - identified by position instead of a flag.
    • type: "string" | "number" | "boolean" (default "string").
    • parse: Callable - custom converter; makes the value kind "custom".
    • required / default / short / long / value_name / description.

- normalize(schema) -> Schema(positionals, options)
  Turns the sparse, user-declared mapping into flat Spec records with every
  field resolved (derived long flag, value kind, positional display name).

Metadata (sanitized on construction)
- type and parse are mutually exclusive (except type="custom", which requires
  parse); parse must be callable.
- short: exactly one character, neither '-' nor '='.
- long: non-empty string without '=' and not starting with '-', or False to
  disable the long form. Unset derives it from the key (see utils.kebab).
- value_name / description: non-empty strings after trimming.
- default: must match the value kind (str / int|float / bool / anything).
- positionals cannot be boolean and cannot declare short or a string long.

Policy
- No cross-argument validation happens here: two options sharing a short or
  long name are accepted and the parser resolves lookups by first match in
  declaration order.

Examples
    >>> schema = {
    ...     "source": Argument(positional=True, required=True),
    ...     "outFile": Argument(short="o", description="where to write"),
    ...     "verbose": {"type": "boolean", "short": "v"},
    ... }
    >>> normalize(schema).options[0].long
    'out-file'
"""
import builtins
import functools
import operator
import re
from collections import namedtuple
from collections.abc import Mapping

from rich.text import Text

from .utils import *

_KINDS = ("string", "number", "boolean")

# Spelling used by schemas written in the camel-case convention.
_ALIASES = {"valueName": "value_name"}

_LONG = re.compile(r"[^\s=-][^\s=]*")


class ArgumentType(type):
    """
    Metaclass that exposes sanitized metadata as read-only properties.

    Responsibilities
    - Derive __typename__ from the class name (camel-case split with hyphens)
      for consistent labels in messages.
    - Expose every name listed in __introspectable__ through mirror(), so the
      sanitized value stored under '_' + name is readable but not writable.
    - Provide stable __repr__/__rich_repr__ implementations.
    """
    __introspectable__ = ()

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
            Return a concise representation listing the set fields only.

            Example
            - argument(type='number', short='n')
            """
            return "%s(%s)" % (type(self).__typename__, ", ".join(
                map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__())
            ))
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            """
            Yield (name, value) pairs for pretty printers, skipping unset fields.
            """
            for name in type(self).__introspectable__:
                if (value := getattr(self, name)) is not Unset:
                    yield name, value
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_value_metadata(cls, metadata, /):
    """
    Internal: resolve 'type' / 'parse' into a single value kind.

    - neither given → "string".
    - type given    → must be one of "string", "number", "boolean".
    - parse given   → must be callable; the kind becomes "custom".

    Mutates metadata in place, adding the 'kind' entry.
    """
    type, parse = metadata["type"], metadata["parse"]

    if type == "custom" and parse is Unset:
        raise TypeError(f"{cls.__typename__} custom 'type' requires 'parse'")
    if type not in (Unset, "custom") and parse is not Unset:
        raise TypeError(f"{cls.__typename__} cannot specify both 'type' and 'parse'")

    if parse is not Unset:
        if not callable(parse):
            raise TypeError(f"{cls.__typename__} 'parse' must be callable")
        metadata["kind"] = "custom"
        return

    if not isinstance(type, str | Unset):
        raise TypeError(f"{cls.__typename__} 'type' must be a string")
    if isinstance(type, str) and type not in _KINDS:
        raise ValueError(f"{cls.__typename__} 'type' must be one of %s" % ", ".join(map(repr, _KINDS)))
    metadata["kind"] = metadata["type"] = coalesce(type, "string")


def _sanitize_named_metadata(cls, metadata, /):
    """
    Internal: validate the 'short' and 'long' flag names.
    """
    if not isinstance(short := metadata["short"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'short' must be a string")
    elif isinstance(short, str) and (len(short) != 1 or short in "-=" or short.isspace()):
        raise ValueError(f"{cls.__typename__} 'short' must be a single character other than '-' or '='")

    # 'long' is tri-state: Unset (derive), False (disabled) or an explicit name
    if (long := metadata["long"]) is not False and not isinstance(long, str | Unset):
        raise TypeError(f"{cls.__typename__} 'long' must be a string or False")
    elif isinstance(long, str) and not _LONG.fullmatch(long):
        raise ValueError(f"{cls.__typename__} 'long' must be a non-empty name without '=', spaces or leading '-'")


def _sanitize_display_metadata(cls, metadata, /):
    """
    Internal: trim and validate the help-only fields.
    """
    for name in ("value_name", "description"):
        if not isinstance(value := metadata[name], str | Text | Unset):
            raise TypeError(f"{cls.__typename__} {name!r} must be a string")
        elif isinstance(value, str) and not (value := value.strip()):
            raise ValueError(f"{cls.__typename__} {name!r} cannot be empty")
        metadata[name] = value


def _sanitize_default(cls, metadata, /):
    """
    Internal: check that a declared default matches the value kind.
    """
    if (default := metadata["default"]) is Unset:
        return

    match metadata["kind"]:
        case "string" if not isinstance(default, str):
            raise TypeError(f"{cls.__typename__} string 'default' must be a str")
        case "number" if isinstance(default, bool) or not isinstance(default, int | float):
            raise TypeError(f"{cls.__typename__} number 'default' must be an int or a float")
        case "boolean" if not isinstance(default, bool):
            raise TypeError(f"{cls.__typename__} boolean 'default' must be a bool")


def _sanitize_positional(cls, metadata, /):
    """
    Internal: positionals carry no flag names and no presence semantics.
    """
    if not metadata["positional"]:
        return
    if metadata["kind"] == "boolean":
        raise TypeError(f"positional {cls.__typename__} cannot be boolean")
    if metadata["short"] is not Unset:
        raise TypeError(f"positional {cls.__typename__} cannot specify 'short'")
    if isinstance(metadata["long"], str):
        raise TypeError(f"positional {cls.__typename__} cannot specify 'long'")


class Argument(metaclass=ArgumentType):
    """
    Declaration of one command-line argument.

    An Argument says nothing about its own key: the key comes from the schema
    mapping it is stored in, and normalize() pairs both into a Spec.

    Properties
    - The names listed in __introspectable__ are exposed as read-only attributes
      mirroring the sanitized metadata. Unset marks fields that were not given.
    """
    __slots__ = (
        "_positional",
        "_type",
        "_parse",
        "_kind",
        "_required",
        "_default",
        "_short",
        "_long",
        "_value_name",
        "_description",
    )

    __introspectable__ = (
        "positional",
        "type",
        "parse",
        "required",
        "default",
        "short",
        "long",
        "value_name",
        "description",
    )

    def __init__(
            self,
            *,
            positional=False,
            type=Unset,
            parse=Unset,
            required=False,
            default=Unset,
            short=Unset,
            long=Unset,
            value_name=Unset,
            description=Unset,
    ):
        """
        Construct an Argument with the provided metadata.

        Raises
        - TypeError / ValueError: on malformed metadata (see module docstring).
          These are programming errors in the schema, never parse errors.
        """
        metadata = {
            "positional": bool(positional),
            "type": type,
            "parse": parse,
            "required": bool(required),
            "default": default,
            "short": short,
            "long": long,
            "value_name": value_name,
            "description": description,
        }
        _sanitize_value_metadata(builtins.type(self), metadata)
        _sanitize_named_metadata(builtins.type(self), metadata)
        _sanitize_display_metadata(builtins.type(self), metadata)
        _sanitize_default(builtins.type(self), metadata)
        _sanitize_positional(builtins.type(self), metadata)

        for name, object in metadata.items():
            setattr(self, "_" + name, object)

    @property
    def kind(self):
        """
        resolved value kind: "string", "number", "boolean" or "custom".
        """
        return self._kind


class Spec(namedtuple("Spec", (
    "key",
    "kind",
    "value_kind",
    "parse",
    "long",
    "short",
    "required",
    "default",
    "description",
    "value_name",
    "display",
    "index",
))):
    """
    Normalized, immutable description of one declared argument.

    fields
    - key: schema key (result mapping key).
    - kind: "positional" | "option".
    - value_kind: "string" | "number" | "boolean" | "custom".
    - parse: custom converter (None unless value_kind is "custom").
    - long / short: flag names without dashes, or None when absent/disabled.
    - default: Unset when no default was declared.
    - display: upper-cased name for positionals (None for options).
    - index: position of the key in the declared schema.
    """
    __slots__ = ()

    @property
    def positional(self):
        return self.kind == "positional"

    @property
    def boolean(self):
        return self.value_kind == "boolean"

    @property
    def identity(self):
        """
        human label used in messages: "option --long", "option -s" or
        "positional NAME" (long form preferred over short).
        """
        if self.positional:
            return "positional %s" % self.display
        if self.long:
            return "option --%s" % self.long
        if self.short:
            return "option -%s" % self.short
        return "option %s" % self.key


class Schema(namedtuple("Schema", ("positionals", "options"))):
    """
    Normalized schema: positionals (consumption order) and options.
    """
    __slots__ = ()

    @property
    def specs(self):
        """
        every spec, positionals and options interleaved in declaration order.
        """
        return tuple(sorted((*self.positionals, *self.options), key=operator.attrgetter("index")))


def _resolve(index, key, argument, /):
    """
    Internal: pair a key with its Argument and resolve derived fields.
    """
    if argument.positional:
        return Spec(
            key=key,
            kind="positional",
            value_kind=argument.kind,
            parse=coalesce(argument.parse),
            long=None,
            short=None,
            required=argument.required,
            default=argument._default,
            description=coalesce(argument.description),
            value_name=coalesce(argument.value_name),
            display=kebab(key).upper(),
            index=index,
        )

    if argument.long is False:
        long = None
    else:
        long = coalesce(argument.long, kebab(key))
        if not _LONG.fullmatch(long):
            raise ValueError(f"schema key {key!r} does not make a valid long name; set 'long' explicitly or disable it")

    return Spec(
        key=key,
        kind="option",
        value_kind=argument.kind,
        parse=coalesce(argument.parse),
        long=long,
        short=coalesce(argument.short),
        required=argument.required,
        default=argument._default,
        description=coalesce(argument.description),
        value_name=coalesce(argument.value_name),
        display=None,
        index=index,
    )


def normalize(schema, /):
    """
    Turn a declared schema into a Schema(positionals, options) of Spec records.

    parameters
    - schema: Mapping[str, Argument | Mapping]
      mapping entries are converted with Argument(**entry); "valueName" is
      accepted as an alias of "value_name".

    returns
    - Schema whose 'positionals' keep declaration order (consumption order)
      and whose 'options' keep declaration order (first-match order).

    raises
    - TypeError: schema is not a mapping, a key is not a non-empty string, or
      an entry is neither an Argument nor a mapping (or has unknown fields).
    - ValueError: malformed entry metadata (see Argument), or an option key
      whose derived long name would contain spaces or "=" or start with "-".
    """
    if isinstance(schema, Schema):
        return schema
    if not isinstance(schema, Mapping):
        raise TypeError("normalize() argument must be a mapping")

    positionals = []
    options = []

    for index, (key, argument) in enumerate(schema.items()):
        if not isinstance(key, str) or not key:
            raise TypeError("schema keys must be non-empty strings")
        if isinstance(argument, Mapping):
            argument = Argument(**{_ALIASES.get(name, name): value for name, value in argument.items()})
        elif not isinstance(argument, Argument):
            raise TypeError(f"schema entry {key!r} must be an argument or a mapping")

        spec = _resolve(index, key, argument)
        (positionals if spec.positional else options).append(spec)

    return Schema(tuple(positionals), tuple(options))


__all__ = (
    "Argument",
    "Spec",
    "Schema",
    "normalize",
)
