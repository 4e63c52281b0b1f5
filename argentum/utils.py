"""
Argentum utilities (internal helpers, carefully exposed)

Scope
- Small building blocks shared by the schema, the engine and the faults.

Overview
- UnsetType / Unset
  • Singleton sentinel for “value not provided”, distinct from None.
  • Falsey, printable as "Unset", non-subclassable.

- coalesce(value, default=None)
  • Replace Unset with a concrete default; None/0/""/[] are preserved.

- rename(callable, name) / @rename("name")
  • Stable __name__/__qualname__ for generated callables.

- mirror("attr")
  • Read-only property over a private backing field (self._attr); mutable
    containers are handed out as copies.

- ordinal(number)
  • "first", "second", ..., "11th", "22nd" for position-first messages.

- identifier(name)
  • Turn an argument name ("dry-run", "Output File") into a python attribute.

- DescriptorType
  • Metaclass for immutable value objects (options, argument descriptors,
    schemas): read-only mirrored fields, typename, repr and rich repr.

Stability and contract
- Names in __all__ are part of the package surface; everything else may change.

Quick examples
    >>> coalesce(Unset, "fallback")
    'fallback'
    >>> coalesce(None, "fallback") is None
    True
    >>> ordinal(3), ordinal(12), ordinal(23)
    ('third', '12th', '23rd')
    >>> identifier("dry-run")
    'dry_run'
"""
import builtins
import functools
import keyword
import operator
import re
from typing import final


@final
class UnsetType:
    """
    Sentinel type for a value that was not provided.

    Used wherever None is a legitimate user value (a default of None, a
    converter returning None) and the library still has to tell “absent”
    apart from “explicitly None”.

    Characteristics
    - Boolean-false: bool(Unset) is False.
    - Printable: repr(Unset) -> "Unset".
    - Sealed and singleton: UnsetType() always yields the same instance.
    """

    def __or__(self, other, /):
        """
        Support PEP 604 unions in annotations (e.g., str | UnsetType).
        """
        try:
            return other | type(self)
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

    def __copy__(self):
        return self

    def __deepcopy__(self, memo, /):
        return self

    def __reduce__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """
    Resolve the Unset sentinel to a concrete default.

    Returns object unless it is Unset, in which case default is returned.
    Falsey values like None, 0, "" or [] are not treated as “unset”.
    """
    return object if object is not Unset else default


def rename(*parameters):
    """
    Set a stable __name__/__qualname__ on a callable, or return a decorator
    that will do so later.

    Forms
    - rename(callable, name) -> callable (updated in place)
    - rename(name) -> decorator
    """
    match len(parameters):
        case 2:
            callable, name = parameters
            if not builtins.callable(callable):
                raise TypeError("rename() first argument must be callable")
            if not isinstance(name, str):
                raise TypeError("rename() second argument must be a string")
            try:
                callable.__qualname__ = name
                callable.__name__ = name
            except (AttributeError, TypeError):
                raise TypeError("rename() first argument must be a updatable callable") from None
            return callable
        case 1:
            name, = parameters
            if not isinstance(name, str):
                raise TypeError("@rename() argument must be a string")

            def wrapper(callable):
                if not builtins.callable(callable):
                    raise TypeError("@rename() must be applied to a callable")
                return rename(callable, name)

            return rename(wrapper, "rename")
        case _:
            raise TypeError("rename takes 1 to 2 arguments but %d were given" % len(parameters))


def _detach(object):
    """
    Copy mutable containers so callers cannot reach into private state.

    - list/dict/set are copied (recursively for their items/values).
    - tuples, frozensets, strings and everything else are returned as-is,
      they are already immutable from the caller's point of view.
    """
    if isinstance(object, list):
        return list(map(_detach, object))
    elif isinstance(object, dict):
        return dict(zip(object.keys(), map(_detach, object.values())))
    elif isinstance(object, set):
        return set(map(_detach, object))
    return object


def mirror(name, /):
    """
    Define a read-only property that mirrors the private attribute "_{name}".

    Mutable containers are copied on every access (see _detach), so the
    public view of a descriptor or a schema can never be used to mutate it.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _detach(getattr(self, "_" + name))

    return property(getter)


@functools.cache
def ordinal(number, /):
    """
    Return a human-friendly ordinal label for a 1-based position.

    - 1..10 are rendered as words ("first"…"tenth").
    - Other numbers use numeric ordinals with the right English suffix,
      including the 11th/12th/13th exception.
    """
    if not isinstance(number, int) or isinstance(number, bool):
        raise TypeError("ordinal() argument must be an integer")
    try:
        return (
            "first",
            "second",
            "third",
            "fourth",
            "fifth",
            "sixth",
            "seventh",
            "eighth",
            "ninth",
            "tenth",
        )[number - 1] if number > 0 else str(number)
    except IndexError:
        pass

    if 10 < number % 100 < 20:
        return f"{number}th"

    return f"{number}%s" % {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")


@functools.cache
def identifier(name, /):
    """
    Derive a python attribute name from an argument name.

    Non-word characters become underscores, a leading digit gets an
    underscore prefix and python keywords get an underscore suffix
    ("class" -> "class_"), following the usual PEP 8 convention.
    """
    if not isinstance(name, str):
        raise TypeError("identifier() argument must be a string")
    result = re.sub(r"\W", "_", name.strip())
    if not result:
        raise ValueError("identifier() argument cannot be empty")
    if result[0].isdigit():
        result = "_" + result
    if keyword.iskeyword(result):
        result += "_"
    return result


class DescriptorType(type):
    """
    Metaclass for immutable, introspectable value objects.

    Responsibilities
    - Expose every name listed in __introspectable__ as a read-only property
      backed by the private "_{name}" attribute (see mirror).
    - Derive __typename__ from the class name ("ParseOptions" -> "parse-options")
      for use in configuration error messages.
    - Provide stable __repr__/__rich_repr__ implementations driven by
      __displayable__ (when set) or __introspectable__.
    - Forbid attribute assignment once an instance is sealed (self._sealed).
    """
    __introspectable__ = ()
    __displayable__ = None

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
            **options
        )

        @rename("__repr__")
        def __repr__(self):
            return f"{type(self).__typename__}({', '.join(map(functools.partial(operator.mod, '%s=%r'), self.__rich_repr__()))})"
        if "__repr__" not in namespace:
            self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in type(self).__displayable__ or type(self).__introspectable__:
                yield name, getattr(self, name)
        if "__rich_repr__" not in namespace:
            self.__rich_repr__ = __rich_repr__

        @rename("__setattr__")
        def __setattr__(self, name, value):
            if getattr(self, "_sealed", False):
                raise AttributeError(f"{type(self).__typename__} objects are read-only")
            object.__setattr__(self, name, value)
        if "__setattr__" not in namespace:
            self.__setattr__ = __setattr__

        return self


Unset = UnsetType()
"""
Sentinel for “not provided”.

Use Unset as a default when None is a valid, user-meaningful value; resolve it
with coalesce(value, default).
"""


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "mirror",
    "ordinal",
    "identifier",

    # Types
    "UnsetType",
    "DescriptorType",

    # Constants
    "Unset",
)
