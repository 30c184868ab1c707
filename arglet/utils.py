import functools
import re
from collections.abc import Sequence, Mapping, Set
from types import MappingProxyType
from typing import final


@final
class UnsetType:
    """
    internal singleton sentinel representing an "unset" value.

    intent
    - distinguishes "not provided" from a user-supplied value (including None,
      False or other falsy values), e.g. an absent `default` in a schema.

    behavior
    - truthiness: bool(Unset) is False.
    - identity: Unset is a process-wide singleton (see __new__).
    - display: repr(Unset) -> "Unset".
    - final: subclassing is forbidden to preserve semantics.

    typing helpers
    - union: UnsetType participates in PEP 604 unions via | so sentinel-or-T
      checks read naturally: isinstance(value, str | Unset).
    """

    def __or__(self, other, /):
        try:
            return type(self) | other
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __reduce__(self):
        return "Unset"

    def __init_subclass__(cls):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


Unset = UnsetType()


def coalesce(object, default=None, /):
    """
    return `default` when `object` is Unset; otherwise return `object`.
    """
    return default if object is Unset else object


def rename(x, /, name=None):
    """
    set a stable __name__/__qualname__ on a callable, or return a curried renamer.

    - callable → renamed in place and returned.
    - str      → a partial that renames a future callable to that string.
    """
    if isinstance(x, str):
        return functools.partial(rename, name=x)
    if not isinstance(name, str):
        raise TypeError("callable name must be a string")
    x.__qualname__ = name
    x.__name__ = name
    return x


def mirror(name):
    """
    build a read-only property over the private field '_' + name.

    the returned value is a shallow immutable view:
    - Sequence (non-str) → tuple
    - Mapping            → MappingProxyType
    - Set                → frozenset
    - anything else      → as-is
    """

    @rename(name)
    def getter(self):
        value = getattr(self, "_" + name)
        if isinstance(value, Sequence) and not isinstance(value, str):
            return tuple(value)
        if isinstance(value, Mapping):
            return MappingProxyType(value)
        if isinstance(value, Set):
            return frozenset(value)
        return value

    return property(getter)


def kebab(name, /):
    """
    turn a schema key into its hyphenated command-line spelling.

    rules
    - every upper-case letter after the first character becomes '-' + lower-case
      ("outFile" → "out-file"); the first character is kept as written.
    - underscores become hyphens ("out_file" → "out-file").

    examples
    - kebab("dryRun")         → "dry-run"
    - kebab("max_depth")      → "max-depth"
    - kebab("first")          → "first"
    """
    head, tail = name[:1], name[1:]
    tail = re.sub(r"[A-Z]", lambda match: "-" + match[0].lower(), tail)
    return (head + tail).replace("_", "-")


__all__ = (
    "UnsetType",
    "Unset",
    "coalesce",
    "rename",
    "mirror",
    "kebab",
)
