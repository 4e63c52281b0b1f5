"""
Argentum parse options.

Scope
- ParseOptions: immutable configuration shared by every parse of a schema.
- Enumerations used by the options and by the engine:
  • ParsingMode: DEFAULT (one prefix family, single names) or LONG_SHORT
    (long "--name" and short "-n" names, combined short switches).
  • PrefixTermination: what the bare long prefix ("--") does.
  • ErrorMode: how a repeated single-value argument is handled.
  • UsageMode: which usage help the caller should show after a failure.

Notes
- ParseOptions(posix=True) is a shortcut for LONG_SHORT mode with
  case-sensitive names, the convention most POSIX tools follow.
- Prefixes default to "-" (and also "/" on Windows).
- Invalid values raise TypeError/ValueError at construction.
- auto_help and auto_version ask ArgumentSchema to add the Help and Version
  method arguments; they only cancel the parse, printing help is left to
  the caller through ParseResult.usage.
"""
import enum
import os

from .utils import *


class ParsingMode(enum.Enum):
    DEFAULT = "default"
    LONG_SHORT = "long-short"


class PrefixTermination(enum.Enum):
    """
    behavior of a token equal to the long prefix (e.g., "--").

    - NONE: the token is an ordinary value.
    - POSITIONAL_ONLY: every following token is a positional value.
    - CANCEL_WITH_SUCCESS: parsing stops; the rest is returned unparsed.
    """
    NONE = "none"
    POSITIONAL_ONLY = "positional-only"
    CANCEL_WITH_SUCCESS = "cancel-with-success"


class ErrorMode(enum.Enum):
    ERROR = "error"
    WARNING = "warning"
    ALLOW = "allow"


class UsageMode(enum.Enum):
    """usage help signal attached to a parse result (rendering is left to the caller)."""
    NONE = "none"
    SYNTAX_ONLY = "syntax-only"
    FULL = "full"


def _default_prefixes():
    return ("-", "/") if os.name == "nt" else ("-",)


def _sanitize_enum(cls, metadata, key, enumeration, /):
    if isinstance(value := metadata[key], str):
        try:
            value = enumeration(value)
        except ValueError:
            raise ValueError(f"{cls.__typename__} {key!r} must be one of %s" % ", ".join(
                repr(member.value) for member in enumeration
            )) from None
    if not isinstance(value, enumeration):
        raise TypeError(f"{cls.__typename__} {key!r} must be a {enumeration.__name__}")
    metadata[key] = value


def _sanitize_strings(cls, metadata, key, /):
    if isinstance(metadata[key], str):
        raise TypeError(f"{cls.__typename__} {key!r} must be an iterable of strings, not a string")
    strings = []
    for string in metadata[key]:
        if not isinstance(string, str):
            raise TypeError(f"{cls.__typename__} {key!r} must contain only strings")
        elif not string or any(character.isspace() for character in string):
            raise ValueError(f"{cls.__typename__} {key!r} cannot contain empty or whitespace strings")
        elif string in strings:
            raise ValueError(f"{cls.__typename__} {key!r} cannot contain duplicates")
        strings.append(string)
    if not strings:
        raise ValueError(f"{cls.__typename__} {key!r} cannot be empty")
    metadata[key] = tuple(strings)


class ParseOptions(metaclass=DescriptorType):
    """
    Immutable parser configuration.

    Fields
    - mode: ParsingMode (DEFAULT).
    - prefixes: argument name prefixes; short prefixes in LONG_SHORT mode.
    - long_prefix: long name prefix in LONG_SHORT mode, and the terminator
      token in every mode ("--").
    - case_sensitive: compare names exactly (False).
    - posix: LONG_SHORT mode + case-sensitive names (False).
    - separators: characters splitting "name:value" / "name=value".
    - whitespace: allow the value as the next argument ("-name value").
    - prefix_aliases: accept any unique prefix of a long name (True).
    - duplicates: ErrorMode for repeated single-value arguments (ERROR).
    - termination: PrefixTermination (NONE).
    - usage: UsageMode signalled on error (SYNTAX_ONLY).
    - auto_help: add a "Help" switch (aliases "?" and "h", short names in
      LONG_SHORT mode) that cancels with full usage help (False).
    - auto_version: version text; when set, add a "Version" switch that
      prints it and cancels without help (None).
    """
    __introspectable__ = (
        "mode",
        "prefixes",
        "long_prefix",
        "case_sensitive",
        "posix",
        "separators",
        "whitespace",
        "prefix_aliases",
        "duplicates",
        "termination",
        "usage",
        "auto_help",
        "auto_version",
    )

    def __init__(
            self,
            *,
            mode=ParsingMode.DEFAULT,
            prefixes=Unset,
            long_prefix="--",
            case_sensitive=False,
            posix=False,
            separators=(":", "="),
            whitespace=True,
            prefix_aliases=True,
            duplicates=ErrorMode.ERROR,
            termination=PrefixTermination.NONE,
            usage=UsageMode.SYNTAX_ONLY,
            auto_help=False,
            auto_version=None
    ):
        metadata = {
            "mode": mode,
            "prefixes": coalesce(prefixes, _default_prefixes()),
            "long_prefix": long_prefix,
            "case_sensitive": bool(case_sensitive),
            "posix": bool(posix),
            "separators": separators,
            "whitespace": bool(whitespace),
            "prefix_aliases": bool(prefix_aliases),
            "duplicates": duplicates,
            "termination": termination,
            "usage": usage,
            "auto_help": bool(auto_help),
            "auto_version": auto_version,
        }
        cls = type(self)
        _sanitize_enum(cls, metadata, "mode", ParsingMode)
        _sanitize_enum(cls, metadata, "duplicates", ErrorMode)
        _sanitize_enum(cls, metadata, "termination", PrefixTermination)
        _sanitize_enum(cls, metadata, "usage", UsageMode)
        _sanitize_strings(cls, metadata, "prefixes")
        _sanitize_strings(cls, metadata, "separators")

        if not isinstance(long_prefix, str):
            raise TypeError(f"{cls.__typename__} 'long_prefix' must be a string")
        elif not long_prefix or any(character.isspace() for character in long_prefix):
            raise ValueError(f"{cls.__typename__} 'long_prefix' cannot be empty or contain whitespace")

        if auto_version is not None and not isinstance(auto_version, str):
            raise TypeError(f"{cls.__typename__} 'auto_version' must be a string or None")

        if any(len(separator) != 1 for separator in metadata["separators"]):
            raise ValueError(f"{cls.__typename__} 'separators' must be single characters")

        if metadata["posix"]:
            metadata["mode"] = ParsingMode.LONG_SHORT
            metadata["case_sensitive"] = True

        if metadata["mode"] is ParsingMode.LONG_SHORT and long_prefix in metadata["prefixes"]:
            raise ValueError(f"{cls.__typename__} 'long_prefix' cannot also be a short prefix")

        for name, value in metadata.items():
            setattr(self, "_" + name, value)
        self._sealed = True

    @property
    def candidates(self):
        """
        every prefix that can start a named token, longest first.

        in LONG_SHORT mode this includes the long prefix; in DEFAULT mode the
        long prefix only acts as the terminator token.
        """
        prefixes = list(self._prefixes)
        if self._mode is ParsingMode.LONG_SHORT:
            prefixes.append(self._long_prefix)
        return tuple(sorted(prefixes, key=len, reverse=True))

    def fold(self, name, /):
        """return the comparison key of a name under the configured comparer."""
        return name if self._case_sensitive else name.casefold()

    def __eq__(self, other):
        if not isinstance(other, ParseOptions):
            return NotImplemented
        return all(getattr(self, name) == getattr(other, name) for name in type(self).__introspectable__)

    def __hash__(self):
        return hash(tuple(getattr(self, name) for name in type(self).__introspectable__))

    def __replace__(self, **overrides):
        """return a copy with some fields replaced (copy.replace protocol)."""
        fields = {name: getattr(self, name) for name in type(self).__introspectable__}
        if overrides.get("posix") is False and self._posix:
            fields.update(mode=ParsingMode.DEFAULT, case_sensitive=False)
        return type(self)(**(fields | overrides))


__all__ = (
    "ParsingMode",
    "PrefixTermination",
    "ErrorMode",
    "UsageMode",
    "ParseOptions",
)
