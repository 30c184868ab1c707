"""
Parse outcomes: Ok / Error and the Values mapping.

- Ok(values) and Error(message) are the two tagged results of a parse. Both
  support structural pattern matching:

    match parser.parse(argv):
        case Ok(values):
            ...
        case Error(message):
            ...

- Values is the read-only mapping handed to callers. It adds attribute access
  and runtime-checked accessors so callers can rely on the shape guarantees
  (required and boolean keys always present, defaulted keys present) without
  static typing of the schema.
"""
from collections.abc import Mapping
from numbers import Real
from types import MappingProxyType

from .utils import Unset


class Ok:
    """
    successful parse carrying the result mapping.
    """
    __slots__ = ("value",)
    __match_args__ = ("value",)

    def __init__(self, value, /):
        self.value = value

    def __bool__(self):
        return True

    def __eq__(self, other):
        if not isinstance(other, Ok):
            return NotImplemented
        return self.value == other.value

    __hash__ = None

    def __repr__(self):
        return f"Ok({self.value!r})"


class Error:
    """
    failed parse carrying the first error message found.

    the originating fault (an ArgumentFault) is kept on `fault` for callers that
    want the code or the context; it does not take part in equality.
    """
    __slots__ = ("message", "fault")
    __match_args__ = ("message",)

    def __init__(self, message, /, fault=None):
        if not isinstance(message, str):
            raise TypeError("Error() message must be a string")
        self.message = message
        self.fault = fault

    @property
    def code(self):
        return getattr(self.fault, "code", None)

    def __bool__(self):
        return False

    def __eq__(self, other):
        if not isinstance(other, Error):
            return NotImplemented
        return self.message == other.message

    __hash__ = None

    def __repr__(self):
        return f"Error({self.message!r})"


class Values(Mapping):
    """
    read-only mapping from argument key to parsed value.

    access
    - values["out_file"] / values.out_file
    - string(key), number(key), boolean(key): return the value after checking its
      type; with optional=True an absent key yields None instead of KeyError.
    - attribute access only reaches keys that are not method names: keys such
      as "get", "keys", "items", "values", "string", "number" or "boolean"
      (and any key starting with '_') must be read with values[key].

    errors
    - KeyError: key absent (and optional is False).
    - TypeError: value present but of the wrong type.
    """
    __slots__ = ("_data",)

    def __init__(self, data=(), /):
        object.__setattr__(self, "_data", MappingProxyType(dict(data)))

    def __getitem__(self, key, /):
        return self._data[key]

    def __iter__(self):
        return iter(self._data)

    def __len__(self):
        return len(self._data)

    def __getattr__(self, name, /):
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self._data[name]
        except KeyError:
            raise AttributeError(f"no value for {name!r}") from None

    def __setattr__(self, name, value, /):
        raise AttributeError("values are read-only")

    def __repr__(self):
        return f"Values({dict(self._data)!r})"

    def _typed(self, key, types, label, optional):
        value = self._data.get(key, Unset)
        if value is Unset:
            if optional:
                return None
            raise KeyError(key)
        if not isinstance(value, types):
            raise TypeError(f"value for {key!r} is not a {label} (got {type(value).__name__})")
        return value

    def string(self, key, /, *, optional=False):
        return self._typed(key, str, "string", optional)

    def number(self, key, /, *, optional=False):
        value = self._typed(key, Real, "number", optional)
        if isinstance(value, bool):
            raise TypeError(f"value for {key!r} is not a number (got bool)")
        return value

    def boolean(self, key, /, *, optional=False):
        return self._typed(key, bool, "boolean", optional)


__all__ = (
    "Ok",
    "Error",
    "Values",
)
