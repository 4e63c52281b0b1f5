"""
Argentum value conversion.

Scope
- Converter: the contract every value converter follows.
  • convert(text) -> value, raising ConversionError on bad input.
  • describe() -> short description of the expected value ("integer").
- Built-in converters for str, bool, numbers (int, float, complex, Decimal),
  enum.Enum subclasses and arbitrary callables.
- NullableConverter: wraps another converter for "T | None" types; the empty
  string converts to None.
- resolve(type): map a type descriptor to a converter, once, at schema build.

Notes
- Converters are stateless and shared by every parse of a schema.
- A callable converter signals bad input by raising ValueError or TypeError;
  both are turned into ConversionError.
"""
import builtins
import decimal
import enum
import functools
import types
import typing

from .utils import *


class ConversionError(ValueError):
    """raised by Converter.convert when the text is not a valid value."""

    def __init__(self, message, /, *, expected=None):
        super().__init__(message)
        self.message = message
        self.expected = expected


class Converter:
    """
    Base class for value converters.

    Subclasses override convert() and describe(). Instances are callable, so a
    converter can be used wherever a plain conversion function is expected.
    """
    nullable = False

    def convert(self, text, /):
        raise NotImplementedError

    def describe(self):
        return "value"

    def __call__(self, text, /):
        return self.convert(text)

    def __repr__(self):
        return f"{type(self).__name__}({self.describe()!r})"


class StringConverter(Converter):
    def convert(self, text, /):
        return text

    def describe(self):
        return "string"


class BooleanConverter(Converter):
    """
    accepts true/false, yes/no, on/off and 1/0 (case-insensitive).
    """
    _literals = {
        "true": True, "yes": True, "on": True, "1": True,
        "false": False, "no": False, "off": False, "0": False,
    }

    def convert(self, text, /):
        try:
            return self._literals[text.strip().casefold()]
        except KeyError:
            raise ConversionError(f"{text!r} is not a boolean", expected=self.describe()) from None

    def describe(self):
        return "boolean"


class CallableConverter(Converter):
    """
    adapt any callable taking a string (int, float, Decimal, a user function).

    ValueError, TypeError and ArithmeticError raised by the callable are
    reported as ConversionError.
    """

    def __init__(self, function, /, description=Unset):
        if not callable(function):
            raise TypeError("converter must be callable")
        self.function = function
        self.description = coalesce(description, _describe(function))

    def convert(self, text, /):
        try:
            return self.function(text)
        except ConversionError:
            raise
        except (ValueError, TypeError, ArithmeticError) as exception:
            raise ConversionError(
                f"{text!r} is not a valid {self.description}",
                expected=self.description
            ) from exception

    def describe(self):
        return self.description


class EnumConverter(Converter):
    """
    convert by member name or by member value, case-insensitive.
    """

    def __init__(self, enumeration, /):
        if not isinstance(enumeration, type) or not issubclass(enumeration, enum.Enum):
            raise TypeError("enum converter requires an enum.Enum subclass")
        self.enumeration = enumeration

    def convert(self, text, /):
        folded = text.strip().casefold()
        for name, member in self.enumeration.__members__.items():
            if name.casefold() == folded or str(member.value).casefold() == folded:
                return member
        raise ConversionError(f"{text!r} is not {self.describe()}", expected=self.describe())

    def describe(self):
        return "one of %s" % ", ".join(map(repr, map(str.lower, self.enumeration.__members__)))


class NullableConverter(Converter):
    """
    wrap an inner converter; the empty string converts to None.
    """
    nullable = True

    def __init__(self, inner, /):
        if not isinstance(inner, Converter):
            raise TypeError("nullable converter requires a converter")
        self.inner = inner

    def convert(self, text, /):
        if text == "":
            return None
        return self.inner.convert(text)

    def describe(self):
        return self.inner.describe()


_descriptions = {
    str: "string",
    int: "integer",
    float: "number",
    complex: "complex number",
    decimal.Decimal: "decimal number",
    bool: "boolean",
}


def _describe(function):
    for known, description in _descriptions.items():
        if function is known:
            return description
    return getattr(function, "__name__", type(function).__name__).replace("_", " ")


def _unwrap_optional(type, /):
    """return T for 'T | None' / Optional[T], else Unset."""
    if typing.get_origin(type) not in (typing.Union, types.UnionType):
        return Unset
    members = [member for member in typing.get_args(type) if member is not types.NoneType]
    if len(members) != 1 or len(members) == len(typing.get_args(type)):
        return Unset
    return members[0]


@functools.cache
def _resolve_hashable(type, /):
    if type is str:
        return StringConverter()
    if type is bool:
        return BooleanConverter()
    if isinstance(type, builtins.type) and issubclass(type, enum.Enum):
        return EnumConverter(type)
    if (inner := _unwrap_optional(type)) is not Unset:
        return NullableConverter(resolve(inner))
    if callable(type):
        return CallableConverter(type)
    raise TypeError(f"cannot convert strings to {type!r}")


def resolve(type=str, /):
    """
    return the converter for a type descriptor.

    accepted descriptors
    - Converter instances (returned as-is).
    - str, bool, int, float, complex, decimal.Decimal, any enum.Enum subclass.
    - "T | None" / Optional[T] (nullable wrapper around T's converter).
    - any other callable taking one string.
    """
    if isinstance(type, Converter):
        return type
    try:
        return _resolve_hashable(type)
    except TypeError:
        if not callable(type):
            raise TypeError(f"cannot convert strings to {type!r}") from None
        return CallableConverter(type)


__all__ = (
    "ConversionError",
    "Converter",
    "StringConverter",
    "BooleanConverter",
    "CallableConverter",
    "EnumConverter",
    "NullableConverter",
    "resolve",
)
