"""
Argentum tokenizer.

Scope
- Classify one raw argument at a time; the engine drives the cursor.
- Token: the classification, keeping the whole raw argument for errors.

Rules (checked in this order)
- after a positional-only terminator every argument is a positional value.
- the long prefix alone ("--") is a TERMINATOR.
- an argument that does not start with a known prefix, a bare prefix ("-"),
  or a prefix followed by a digit ("-1", "-2.5") is a POSITIONAL_VALUE.
- otherwise the text after the prefix is split at the first name/value
  separator (":" or "=" by default):
  • "-name:value" is NAMED_WITH_VALUE, "-name" is NAMED_NO_VALUE.
  • in LONG_SHORT mode, a short prefix with more than one character
    ("-abc") is COMBINED_SHORT_SWITCHES.

Prefixes are tried longest first, so in LONG_SHORT mode "--x" is always a
long name and "-x" always a short one.
"""
import enum
from typing import NamedTuple

from .options import ParsingMode


class TokenKind(enum.Enum):
    NAMED_WITH_VALUE = "named-with-value"
    NAMED_NO_VALUE = "named-no-value"
    COMBINED_SHORT_SWITCHES = "combined-short-switches"
    POSITIONAL_VALUE = "positional-value"
    TERMINATOR = "terminator"


class Token(NamedTuple):
    """
    one classified raw argument.

    - raw: the argument, verbatim.
    - kind: TokenKind.
    - name: name without prefix (None for values and terminators).
    - value: inline value ("-name:value"), or the raw argument for positional
      values; None otherwise.
    - prefix: prefix the argument started with (None for values).
    - short: True when the name is a short name (LONG_SHORT mode, short prefix).
    - index: 0-based index of the argument in the argument list.
    - switches_only: for combined short switches, True when every character is
      the short name of a switch.
    """
    raw: str
    kind: TokenKind
    name: str | None = None
    value: str | None = None
    prefix: str | None = None
    short: bool = False
    index: int = 0
    switches_only: bool = False

    @property
    def named(self):
        return self.kind in (
            TokenKind.NAMED_WITH_VALUE,
            TokenKind.NAMED_NO_VALUE,
            TokenKind.COMBINED_SHORT_SWITCHES
        )


class Tokenizer:
    """
    Classify raw arguments against a schema's options.

    The tokenizer is stateless: next_token(arguments, cursor) only reads
    arguments[cursor], so it can be shared by concurrent parses.
    """

    def __init__(self, schema, /):
        self.schema = schema
        self.options = schema.options

    def next_token(self, arguments, cursor, /, *, positional=False):
        """
        return the Token for arguments[cursor], or None past the end.
        """
        if cursor >= len(arguments):
            return None
        return self.classify(arguments[cursor], cursor, positional=positional)

    def classify(self, raw, index=0, /, *, positional=False):
        options = self.options
        if positional:
            return Token(raw, TokenKind.POSITIONAL_VALUE, value=raw, index=index)
        if raw == options.long_prefix:
            return Token(raw, TokenKind.TERMINATOR, prefix=raw, index=index)

        for prefix in options.candidates:
            if raw.startswith(prefix):
                break
        else:
            return Token(raw, TokenKind.POSITIONAL_VALUE, value=raw, index=index)

        rest = raw[len(prefix):]
        if not rest or rest[0].isdigit():
            return Token(raw, TokenKind.POSITIONAL_VALUE, value=raw, index=index)

        name, value = rest, None
        positions = [position for separator in options.separators if (position := rest.find(separator)) >= 0]
        if positions:
            name, value = rest[:min(positions)], rest[min(positions) + 1:]
        if not name:
            return Token(raw, TokenKind.POSITIONAL_VALUE, value=raw, index=index)

        short = options.mode is ParsingMode.LONG_SHORT and prefix != options.long_prefix
        if short and len(name) > 1:
            return Token(
                raw,
                TokenKind.COMBINED_SHORT_SWITCHES,
                name=name,
                value=value,
                prefix=prefix,
                short=True,
                index=index,
                switches_only=all(
                    (argument := self.schema.find_short(character)) is not None and argument.switch
                    for character in name
                ),
            )

        return Token(
            raw,
            TokenKind.NAMED_NO_VALUE if value is None else TokenKind.NAMED_WITH_VALUE,
            name=name,
            value=value,
            prefix=prefix,
            short=short,
            index=index,
        )


__all__ = (
    "TokenKind",
    "Token",
    "Tokenizer",
)
