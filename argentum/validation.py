"""
Argentum argument validators.

Overview
- Argument validators (attached with Argument(..., validators=[...]))
  • ValidateNotEmpty, ValidateStringLength, ValidatePattern: check the raw
    text before conversion.
  • ValidateRange, ValidateNotNull: check every converted value.
  • ValidateCount: check the number of collected items once parsing is done.
  • Requires, Prohibits: dependencies between arguments, checked once
    parsing is done and only when the argument was supplied.

- Schema validators (attached with ArgumentSchema(..., validators=[...]))
  • RequiresAny: at least one of the named arguments must be supplied.

Failures
- Argument validators report VALIDATION_FAILED, dependency validators report
  DEPENDENCY_FAILED; both carry the argument name and a reason.
- Names given to Requires/Prohibits/RequiresAny are checked when the schema
  is built; an unknown name is a configuration error (ValueError).

Custom validators subclass Validator (or SchemaValidator), pick a mode and
implement is_valid() and reason().
"""
import enum
import re
from collections.abc import Sized

from .faults import ErrorCategory
from .utils import *


class ValidationMode(enum.Enum):
    BEFORE_CONVERSION = "before-conversion"
    AFTER_CONVERSION = "after-conversion"
    AFTER_PARSING = "after-parsing"


class Validator(metaclass=DescriptorType):
    """
    Base class for argument validators.

    Contract
    - mode: when the validator runs (ValidationMode).
    - is_valid(argument, value, /, **context) -> bool
      • BEFORE_CONVERSION: value is the raw string.
      • AFTER_CONVERSION: value is the converted element (each element for
        multi-value and dictionary arguments).
      • AFTER_PARSING: value is the final collected value; context carries
        'supplied', the canonical names of every supplied argument.
    - reason(argument, value, /) -> str: lowercased explanation used in the
      error message.
    """
    mode = ValidationMode.AFTER_CONVERSION
    category = ErrorCategory.VALIDATION_FAILED
    names = ()

    def is_valid(self, argument, value, /, **context):
        raise NotImplementedError

    def reason(self, argument, value, /):
        return "the value is not valid"


class ValidateNotEmpty(Validator):
    mode = ValidationMode.BEFORE_CONVERSION

    def is_valid(self, argument, value, /, **context):
        return value != ""

    def reason(self, argument, value, /):
        return "the value cannot be empty"


class ValidateStringLength(Validator):
    """raw text length must lie within [minimum, maximum] (maximum may be None)."""
    __introspectable__ = ("minimum", "maximum")
    mode = ValidationMode.BEFORE_CONVERSION

    def __init__(self, minimum=0, maximum=None):
        if not isinstance(minimum, int) or not isinstance(maximum, int | None):
            raise TypeError(f"{type(self).__typename__} bounds must be integers")
        if minimum < 0 or maximum is not None and maximum < minimum:
            raise ValueError(f"{type(self).__typename__} bounds must satisfy 0 <= minimum <= maximum")
        self._minimum = minimum
        self._maximum = maximum
        self._sealed = True

    def is_valid(self, argument, value, /, **context):
        return self._minimum <= len(value) and (self._maximum is None or len(value) <= self._maximum)

    def reason(self, argument, value, /):
        if self._maximum is None:
            return f"the value must be at least {self._minimum} characters long"
        return f"the value must be between {self._minimum} and {self._maximum} characters long"


class ValidatePattern(Validator):
    """
    raw text must match a regular expression (re.search semantics; anchor the
    pattern to match the whole value).
    """
    __introspectable__ = ("pattern",)
    mode = ValidationMode.BEFORE_CONVERSION

    def __init__(self, pattern, /, flags=0, *, message=None):
        if not isinstance(pattern, str | re.Pattern):
            raise TypeError(f"{type(self).__typename__} pattern must be a string or a compiled pattern")
        self._pattern = re.compile(pattern, flags) if isinstance(pattern, str) else pattern
        self._message = message
        self._sealed = True

    def is_valid(self, argument, value, /, **context):
        return self._pattern.search(value) is not None

    def reason(self, argument, value, /):
        return self._message or f"the value must match {self._pattern.pattern!r}"


class ValidateRange(Validator):
    """converted value must lie within [minimum, maximum]; either bound may be None."""
    __introspectable__ = ("minimum", "maximum")

    def __init__(self, minimum=None, maximum=None):
        if minimum is None and maximum is None:
            raise ValueError(f"{type(self).__typename__} needs at least one bound")
        if minimum is not None and maximum is not None and maximum < minimum:
            raise ValueError(f"{type(self).__typename__} minimum cannot exceed maximum")
        self._minimum = minimum
        self._maximum = maximum
        self._sealed = True

    def is_valid(self, argument, value, /, **context):
        if value is None:
            return True
        return (self._minimum is None or self._minimum <= value) and (self._maximum is None or value <= self._maximum)

    def reason(self, argument, value, /):
        if self._maximum is None:
            return f"the value must be at least {self._minimum}"
        if self._minimum is None:
            return f"the value must be at most {self._maximum}"
        return f"the value must be between {self._minimum} and {self._maximum}"


class ValidateNotNull(Validator):
    def is_valid(self, argument, value, /, **context):
        return value is not None

    def reason(self, argument, value, /):
        return "the value cannot be null"


class ValidateCount(Validator):
    """number of collected items (multi-value or dictionary) within [minimum, maximum]."""
    __introspectable__ = ("minimum", "maximum")
    mode = ValidationMode.AFTER_PARSING

    def __init__(self, minimum=0, maximum=None):
        if not isinstance(minimum, int) or not isinstance(maximum, int | None):
            raise TypeError(f"{type(self).__typename__} bounds must be integers")
        if minimum < 0 or maximum is not None and maximum < minimum:
            raise ValueError(f"{type(self).__typename__} bounds must satisfy 0 <= minimum <= maximum")
        self._minimum = minimum
        self._maximum = maximum
        self._sealed = True

    def is_valid(self, argument, value, /, **context):
        count = len(value) if isinstance(value, Sized) else 1
        return self._minimum <= count and (self._maximum is None or count <= self._maximum)

    def reason(self, argument, value, /):
        if self._maximum is None:
            return f"at least {self._minimum} values are required"
        return f"between {self._minimum} and {self._maximum} values are required"


class _Dependency(Validator):
    __introspectable__ = ("names",)
    mode = ValidationMode.AFTER_PARSING
    category = ErrorCategory.DEPENDENCY_FAILED

    def __init__(self, *names):
        if not names:
            raise TypeError(f"{type(self).__typename__} requires at least one argument name")
        if not all(isinstance(name, str) and name for name in names):
            raise TypeError(f"{type(self).__typename__} names must be non-empty strings")
        self._names = tuple(names)
        self._sealed = True


class Requires(_Dependency):
    """every named argument must also be supplied."""

    def is_valid(self, argument, value, /, *, supplied=frozenset(), **context):
        return all(name in supplied for name in self._names)

    def reason(self, argument, value, /):
        return "requires"


class Prohibits(_Dependency):
    """none of the named arguments may be supplied as well."""

    def is_valid(self, argument, value, /, *, supplied=frozenset(), **context):
        return not any(name in supplied for name in self._names)

    def reason(self, argument, value, /):
        return "cannot be used together with"


class SchemaValidator(metaclass=DescriptorType):
    """
    Base class for validators that look at the whole parse.

    is_valid(values, /) receives a mapping of canonical name -> value for
    every supplied argument.
    """
    names = ()

    def is_valid(self, values, /):
        raise NotImplementedError

    def reason(self):
        return "the arguments are not valid"


class RequiresAny(SchemaValidator):
    __introspectable__ = ("names",)

    def __init__(self, *names):
        if len(names) < 2:
            raise TypeError(f"{type(self).__typename__} requires at least two argument names")
        if not all(isinstance(name, str) and name for name in names):
            raise TypeError(f"{type(self).__typename__} names must be non-empty strings")
        self._names = tuple(names)
        self._sealed = True

    def is_valid(self, values, /):
        return any(name in values for name in self._names)

    def reason(self):
        return "at least one of %s must be supplied" % ", ".join(map(repr, self._names))


__all__ = (
    "ValidationMode",
    "Validator",
    "ValidateNotEmpty",
    "ValidateStringLength",
    "ValidatePattern",
    "ValidateRange",
    "ValidateNotNull",
    "ValidateCount",
    "Requires",
    "Prohibits",
    "SchemaValidator",
    "RequiresAny",
)
