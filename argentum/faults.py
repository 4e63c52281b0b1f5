"""
Argentum faults (errors and warnings) and rendering.

Scope
- ErrorCategory: canonical, stable numeric identifiers for every runtime input
  error the parser can report. Codes are grouped by domain so logs and
  searches stay predictable.
- ParseError / ParseWarning: base types that carry a message plus structured
  payload (argument name, raw value, token, candidates, ...) and know how to
  render themselves with rich.
- report(): the error reporter; turns a category and a payload into the
  matching ParseError subclass with a position-first message and one hint.
- trigger(): surface a fault (raise it, or render it in shell mode).

Configuration errors (bad descriptors, duplicate names) are not faults: they
are raised as TypeError/ValueError while the schema is being built.

Integration
- The engine raises ParseError subclasses internally and converts them into a
  ParseResult at its boundary; nothing in this module is raised out of a parse.
- The CLI surface (argentum.parser) calls trigger(fault, shell=True, ...) to
  print the fault on stderr and exit.
"""
import inspect
import os.path
import sys
import warnings
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset, ordinal

console = Console(stderr=True)


class ErrorCategory(IntEnum):
    """
    canonical error categories (stable identifiers).

    grouping (by high-level domain)
    - names (2110x)
      • UNKNOWN_ARGUMENT, AMBIGUOUS_PREFIX_ALIAS, COMBINED_SHORT_NAME_NON_SWITCH
    - arity (2111x)
      • MISSING_NAMED_ARGUMENT_VALUE, MISSING_REQUIRED_ARGUMENT,
        DUPLICATE_ARGUMENT, TOO_MANY_ARGUMENTS
    - values (2112x)
      • ARGUMENT_VALUE_CONVERSION, INVALID_DICTIONARY_VALUE, NULL_ARGUMENT_VALUE
    - validation (2113x)
      • VALIDATION_FAILED, DEPENDENCY_FAILED
    - warnings (2210x)
      • DUPLICATE_ARGUMENT_WARNING

    normalize() lets the host remap codes to custom labels through a
    __codes__ mapping on __main__.
    """
    # --- names (2110x) ---
    UNKNOWN_ARGUMENT               = 21101
    AMBIGUOUS_PREFIX_ALIAS         = 21102
    COMBINED_SHORT_NAME_NON_SWITCH = 21103

    # --- arity (2111x) ---
    MISSING_NAMED_ARGUMENT_VALUE   = 21111
    MISSING_REQUIRED_ARGUMENT      = 21112
    DUPLICATE_ARGUMENT             = 21113
    TOO_MANY_ARGUMENTS             = 21114

    # --- values (2112x) ---
    ARGUMENT_VALUE_CONVERSION      = 21121
    INVALID_DICTIONARY_VALUE       = 21122
    NULL_ARGUMENT_VALUE            = 21123

    # --- validation (2113x) ---
    VALIDATION_FAILED              = 21131
    DEPENDENCY_FAILED              = 21132

    # --- warnings (2210x) ---
    DUPLICATE_ARGUMENT_WARNING     = 22101

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(sys.modules.get("__main__"), "__codes__", {}).get(self, self.value))


def _styles(defaults):
    return defaultdict(str, defaults | getattr(sys.modules.get("__main__"), "__styles__", {}))


def _render(self, kind, defaults):
    """
    shared rich renderer for errors and warnings.

    options honored
    - colorful: style fragments (default True).
    - fancy: wrap in a Panel with the header as title (default False).
    - prog: program name shown in the header (falls back to __main__.__prog__,
      then to the executable name).
    """
    main = sys.modules.get("__main__")
    styles = _styles(defaults)
    colorful = self.options.get("colorful", True)
    fancy = self.options.get("fancy", False)

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if not colorful:
            return Text(str(fragment))
        if isinstance(fragment, Text):
            return fragment
        return Text(str(fragment), styles[style])

    prog = self.options.get("prog") or getattr(main, "__prog__", None) or _executable()

    header = Text.assemble(
        "[ ",
        text(prog, "prog-name"),
        " | ",
        text(self.category.normalize(), "code"),
        " | ",
        text(self.title.title(), kind + "-title"),
        " ]"
    )
    message = text(self.message, kind + "-message")
    hint = Text.assemble(text(" → ", "hint-arrow"), text(self.hint, "hint")) if self.hint else Text("")

    if fancy:
        return Panel(Group(message, hint), title=header, title_align="left")
    return Group(header, message, hint)


def _executable():
    return os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else "python"


class ParseError(Exception):
    """
    Base class for every runtime input error.

    Carries
    - message: one-sentence, lowercased description.
    - options: read-only payload (argument, value, token, index, hint, title,
      plus category-specific keys such as candidates or expected).

    Subclasses pin their ErrorCategory in the class attribute 'category'.
    """
    category = None
    title = "parse error"

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __init_subclass__(cls, **options):
        super().__init_subclass__(**options)
        if cls.category is not None:
            _registry[cls.category] = cls

    @property
    def argument(self):
        """name of the argument involved (as typed by the user when known)."""
        return self.options.get("argument")

    @property
    def value(self):
        """raw value involved, when there is one."""
        return self.options.get("value")

    @property
    def token(self):
        """whole raw token that triggered the error, verbatim."""
        return self.options.get("token")

    @property
    def index(self):
        """0-based index of that token in the argument list."""
        return self.options.get("index")

    @property
    def hint(self):
        return self.options.get("hint")

    def __str__(self):
        return str(self.message)

    def __rich__(self):
        return _render(self, "error", {
            "prog-name": "bold #E6E6F0",
            "code": "bold #00E5FF",
            "error-title": "bold #FF4DA6",
            "error-message": "#C8C8D0",
            "hint-arrow": "#9CE19C dim",
            "hint": "italic #9CE19C",
        })

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        if self.options.get("deferred", False):
            return
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


_registry = {}


class UnknownArgumentError(ParseError):
    category = ErrorCategory.UNKNOWN_ARGUMENT
    title = "unknown argument"

    @property
    def suggestions(self):
        """close matches among the known names, best first."""
        return self.options.get("suggestions", ())


class AmbiguousPrefixAliasError(ParseError):
    category = ErrorCategory.AMBIGUOUS_PREFIX_ALIAS
    title = "ambiguous argument"

    @property
    def candidates(self):
        """every argument name the prefix could stand for (at least two)."""
        return self.options.get("candidates", ())


class CombinedShortNameNonSwitchError(ParseError):
    category = ErrorCategory.COMBINED_SHORT_NAME_NON_SWITCH
    title = "combined non-switch"


class MissingNamedArgumentValueError(ParseError):
    category = ErrorCategory.MISSING_NAMED_ARGUMENT_VALUE
    title = "missing argument value"


class MissingRequiredArgumentError(ParseError):
    category = ErrorCategory.MISSING_REQUIRED_ARGUMENT
    title = "missing required argument"


class DuplicateArgumentError(ParseError):
    category = ErrorCategory.DUPLICATE_ARGUMENT
    title = "duplicate argument"


class TooManyArgumentsError(ParseError):
    category = ErrorCategory.TOO_MANY_ARGUMENTS
    title = "too many arguments"


class ArgumentValueConversionError(ParseError):
    category = ErrorCategory.ARGUMENT_VALUE_CONVERSION
    title = "invalid value"

    @property
    def expected(self):
        """description of the expected value type (e.g., 'integer')."""
        return self.options.get("expected")


class InvalidDictionaryValueError(ParseError):
    category = ErrorCategory.INVALID_DICTIONARY_VALUE
    title = "invalid key/value pair"

    @property
    def inner(self):
        """message of the underlying key or value failure, when there is one."""
        return self.options.get("inner")


class NullArgumentValueError(ParseError):
    category = ErrorCategory.NULL_ARGUMENT_VALUE
    title = "null value"


class ValidationFailedError(ParseError):
    category = ErrorCategory.VALIDATION_FAILED
    title = "validation failed"


class DependencyFailedError(ParseError):
    category = ErrorCategory.DEPENDENCY_FAILED
    title = "dependency failed"

    @property
    def dependencies(self):
        """names of the arguments the failing argument depends on (or excludes)."""
        return self.options.get("dependencies", ())


class ParseWarning(Warning):
    """
    Base class for non-fatal parse notices.

    Emitted with warnings.warn outside shell mode, rendered with rich inside it.
    """
    category = None
    title = "parse warning"

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def argument(self):
        return self.options.get("argument")

    @property
    def hint(self):
        return self.options.get("hint")

    def __str__(self):
        return str(self.message)

    def __rich__(self):
        return _render(self, "warning", {
            "prog-name": "bold #E6E6F0",
            "code": "bold #FFB400",
            "warning-title": "bold #FFC2E0",
            "warning-message": "#D6D6DE",
            "hint-arrow": "#B8EFAF dim",
            "hint": "italic #B8EFAF",
        })

    def __trigger__(self):
        if not self.options.get("shell", False):
            return warnings.warn(self, stacklevel=len(inspect.stack()))
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class DuplicateArgumentWarning(ParseWarning):
    category = ErrorCategory.DUPLICATE_ARGUMENT_WARNING
    title = "duplicate argument"


def _where(options):
    index = options.get("index")
    return " at %s position" % ordinal(index + 1) if isinstance(index, int) and index >= 0 else ""


def _names(names):
    return ", ".join(map(repr, names))


# message, hint per category; formatted with the report() payload
_templates = {
    ErrorCategory.UNKNOWN_ARGUMENT: (
        "unknown argument %(name)r%(where)s",
        "check the spelling; run with --help to see every argument",
    ),
    ErrorCategory.AMBIGUOUS_PREFIX_ALIAS: (
        "argument %(name)r%(where)s is ambiguous, it could be any of %(choices)s",
        "type more of the name so only one argument matches",
    ),
    ErrorCategory.COMBINED_SHORT_NAME_NON_SWITCH: (
        "combined short name %(token)r%(where)s includes an argument that is not a switch",
        "pass arguments that take a value on their own (for example: -x value)",
    ),
    ErrorCategory.MISSING_NAMED_ARGUMENT_VALUE: (
        "argument %(name)r%(where)s requires a value",
        "provide a value after the argument name",
    ),
    ErrorCategory.MISSING_REQUIRED_ARGUMENT: (
        "required argument %(name)r was not supplied",
        "add a value for %(name)r",
    ),
    ErrorCategory.DUPLICATE_ARGUMENT: (
        "argument %(name)r%(where)s was already supplied",
        "keep a single occurrence; this argument accepts only one value",
    ),
    ErrorCategory.TOO_MANY_ARGUMENTS: (
        "unexpected positional value %(value)r%(where)s",
        "remove the extra value; every positional argument already has one",
    ),
    ErrorCategory.ARGUMENT_VALUE_CONVERSION: (
        "value %(value)r for argument %(name)r%(where)s is not a valid %(expected)s",
        "provide a valid %(expected)s",
    ),
    ErrorCategory.INVALID_DICTIONARY_VALUE: (
        "value %(value)r for argument %(name)r%(where)s is not a valid key/value pair: %(inner)s",
        "use the form key%(separator)svalue with a unique key",
    ),
    ErrorCategory.NULL_ARGUMENT_VALUE: (
        "argument %(name)r%(where)s cannot be null",
        "provide a non-empty value",
    ),
    ErrorCategory.VALIDATION_FAILED: (
        "argument %(name)r%(where)s is invalid: %(reason)s",
        "check the accepted values with --help",
    ),
    ErrorCategory.DEPENDENCY_FAILED: (
        "argument %(name)r %(reason)s %(dependents)s",
        "adjust the arguments so their dependencies are satisfied",
    ),
}


def report(category, /, **payload):
    """
    build the ParseError matching a category from a structured payload.

    this is the error reporter used by the engine and the binder: callers
    pass what they know (argument, value, token, index, expected, candidates,
    suggestions, inner, reason, dependencies, separator) and get back a ready-to-raise
    exception with a position-first message and a single hint.

    the 'argument' key is the name as typed when available; 'name' in the
    templates falls back to the token so unresolvable tokens are still shown
    verbatim.
    """
    if not isinstance(category, ErrorCategory) or category not in _registry:
        raise TypeError("report() argument must be an error category")
    message, hint = _templates[category]
    fields = defaultdict(str, payload)
    fields["name"] = payload.get("argument") or payload.get("token") or ""
    fields["where"] = _where(payload)
    fields["choices"] = _names(payload.get("candidates", ()))
    fields["dependents"] = _names(payload.get("dependencies", ()))
    fields["expected"] = payload.get("expected") or "value"
    fields["separator"] = payload.get("separator") or "="
    if category is ErrorCategory.VALIDATION_FAILED and not fields["name"]:
        # schema-level validators have no single argument to blame
        message = "%(reason)s"
    return _registry[category](
        message % fields,
        title=_registry[category].title,
        hint=payload.pop("hint", None) or hint % fields,
        **payload,
    )


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods.
    - options are merged into the fault via __replace__(**options) before triggering.
    - in shell mode, rendering happens via the rich console; otherwise errors are
      raised and warnings are emitted through the warnings module.

    typical options
    - shell, fancy, colorful, deferred, prog.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    fault.__replace__(**options).__trigger__()


__all__ = (
    "ErrorCategory",
    "ParseError",
    "UnknownArgumentError",
    "AmbiguousPrefixAliasError",
    "CombinedShortNameNonSwitchError",
    "MissingNamedArgumentValueError",
    "MissingRequiredArgumentError",
    "DuplicateArgumentError",
    "TooManyArgumentsError",
    "ArgumentValueConversionError",
    "InvalidDictionaryValueError",
    "NullArgumentValueError",
    "ValidationFailedError",
    "DependencyFailedError",
    "ParseWarning",
    "DuplicateArgumentWarning",
    "report",
    "trigger",
)
