"""
Argentum name resolution.

Scope
- Map a name as typed on the command line to an argument descriptor.

Resolution (NameResolver.resolve)
- SHORT style: exact match on short names and short aliases.
- LONG style: exact match on canonical names and aliases; when no name
  matches exactly and prefix aliases are enabled, every unique prefix of a
  long name resolves to its argument:
  • no matching argument: Unknown.
  • one matching argument (through any number of its names): Exact.
  • two or more: AmbiguousPrefix, listing every matching name in
    declaration order.
- Names are compared with the schema's comparer (case-insensitive unless
  case_sensitive or posix is set).

Names that resolve (exactly or ambiguously) are memoized per resolver, so
resolving a name twice yields equal results; unknown names are never kept,
so the memo stays bounded by the schema's own names and their prefixes.
Resolution never mutates the schema.
"""
import enum
from typing import NamedTuple


class NameStyle(enum.Enum):
    LONG = "long"
    SHORT = "short"


class Exact(NamedTuple):
    argument: object
    name: str


class AmbiguousPrefix(NamedTuple):
    name: str
    candidates: tuple


class Unknown(NamedTuple):
    name: str


class NameResolver:
    """
    Resolve typed names against a schema.

    One resolver belongs to one schema; the memo is keyed by the folded name
    and the style and holds only names the schema knows.
    """

    def __init__(self, schema, /):
        self.schema = schema
        self._memo = {}

    def resolve(self, name, style=NameStyle.LONG, /):
        key = (self.schema.options.fold(name), style)
        if (result := self._memo.get(key)) is not None:
            return result._replace(name=name)
        result = self._resolve(name, style)
        if not isinstance(result, Unknown):
            self._memo[key] = result
        return result

    def _resolve(self, name, style):
        schema = self.schema
        if style is NameStyle.SHORT:
            if (argument := schema.find_short(name)) is not None:
                return Exact(argument, name)
            return Unknown(name)

        if (argument := schema.find_long(name)) is not None:
            return Exact(argument, name)
        if not schema.options.prefix_aliases:
            return Unknown(name)

        folded = schema.options.fold(name)
        matches = [
            (candidate, argument) for candidate, argument in schema.names
            if schema.options.fold(candidate).startswith(folded)
        ]
        arguments = {id(argument): argument for _, argument in matches}
        match len(arguments):
            case 0:
                return Unknown(name)
            case 1:
                return Exact(matches[0][1], name)
            case _:
                return AmbiguousPrefix(name, tuple(candidate for candidate, _ in matches))


__all__ = (
    "NameStyle",
    "Exact",
    "AmbiguousPrefix",
    "Unknown",
    "NameResolver",
)
