r"""
Argentum argument descriptors and schemas.

Overview
- Argument: immutable description of one command-line argument.
  • named-only or positional (position), single/multi/dictionary/method kind.
  • converter(s) resolved once from the type descriptor (see conversion).
  • switches, nullability, defaults, multi-value separators, dictionary
    key/value separators, cancel behavior, validators.

- Builders
  • switch(...), multi(...), dictionary(...), positional(...): shorthands for
    the common Argument shapes.
  • @method(...): bind a callback invoked when the argument is supplied.

- ArgumentSchema: the compiled, immutable set of arguments of a command line.
  • positional arguments sorted by position, then named arguments in
    declaration order.
  • precomputed long/short name maps under the configured comparer.
  • ParseOptions, target factory and schema-level validators.

Validation highlights (configuration errors, raised at construction)
- TypeError: wrong types (non-string names, non-callable converters, ...).
- ValueError: inconsistent shapes (duplicate names, a multi-value positional
  that is not last, a required positional after an optional one, names that
  contain a name/value separator, ...).

Quick example:
    >>> from argentum import ArgumentSchema, Argument, switch, multi, positional
    >>> schema = ArgumentSchema(
    ...     positional("Source", 0, required=True),
    ...     switch("Verbose", short="v"),
    ...     multi("Tag", separator=","),
    ... )
"""
import builtins
import enum
import inspect
from types import SimpleNamespace

from . import conversion
from .options import ParseOptions, ParsingMode
from .validation import Validator, SchemaValidator
from .utils import *


class ArgumentKind(enum.Enum):
    SINGLE = "single"
    MULTI = "multi"
    DICTIONARY = "dictionary"
    METHOD = "method"


class CancelMode(enum.Enum):
    """
    what happens once an argument has been parsed.

    - NONE: parsing continues.
    - SUCCESS: parsing stops; required arguments are still checked and the
      result succeeds with the remaining arguments.
    - ABORT: parsing stops; the result is canceled, no value.
    - ABORT_WITH_HELP: like ABORT, and full usage help is requested.
    """
    NONE = "none"
    SUCCESS = "success"
    ABORT = "abort"
    ABORT_WITH_HELP = "abort-with-help"


def _sanitize_name(cls, name, key, /):
    if not isinstance(name, str):
        raise TypeError(f"{cls.__typename__} {key} must be a string")
    elif not name:
        raise ValueError(f"{cls.__typename__} {key} cannot be empty")
    elif any(character.isspace() for character in name):
        raise ValueError(f"{cls.__typename__} {key} cannot contain whitespace")
    return name


def _sanitize_names(cls, metadata, /):
    """
    validate the canonical name, aliases and short names.

    - name: non-empty string without whitespace.
    - aliases: iterable of such strings, without duplicates (order kept).
    - short: Unset/None (no short name), True (first character of the name)
      or a single non-digit character.
    - short_aliases: iterable of single non-digit characters.
    """
    metadata["name"] = _sanitize_name(cls, metadata["name"], "name")

    if isinstance(metadata["aliases"], str):
        raise TypeError(f"{cls.__typename__} 'aliases' must be an iterable of strings, not a string")
    aliases = []
    for alias in metadata["aliases"]:
        if _sanitize_name(cls, alias, "aliases") in aliases or alias == metadata["name"]:
            raise ValueError(f"{cls.__typename__} 'aliases' cannot contain duplicates")
        aliases.append(alias)
    metadata["aliases"] = tuple(aliases)

    if (short := metadata["short"]) is True:
        short = metadata["name"][0]
    elif short is Unset or short is False:
        short = None
    shorts = [] if short is None else [short]
    if isinstance(metadata["short_aliases"], str):
        metadata["short_aliases"] = tuple(metadata["short_aliases"])
    shorts.extend(metadata["short_aliases"])
    for character in shorts:
        if not isinstance(character, str):
            raise TypeError(f"{cls.__typename__} short names must be strings")
        elif len(character) != 1 or character.isspace():
            raise ValueError(f"{cls.__typename__} short names must be a single character")
        elif character.isdigit():
            raise ValueError(f"{cls.__typename__} short names cannot be digits")
    if len(set(shorts)) != len(shorts):
        raise ValueError(f"{cls.__typename__} short names cannot contain duplicates")
    if shorts and short is None:
        raise ValueError(f"{cls.__typename__} 'short_aliases' require a 'short' name")
    metadata["short"] = short
    metadata["short_aliases"] = tuple(shorts[1:])


def _sanitize_kind(cls, metadata, /):
    """
    validate kind-specific fields and resolve converters.

    - kind: ArgumentKind (or its string value).
    - switch: defaults to True for bool-typed single/multi arguments; a switch
      must be bool-typed unless it is a method.
    - converter: resolved from 'type' unless given; dictionaries resolve
      key_converter/value_converter from key_type/value_type instead.
    - separator/greedy: multi-value and dictionary arguments only.
    - key_value_separator: dictionaries only, defaults to "=".
    - callback: method arguments only.
    """
    if isinstance(kind := metadata["kind"], str):
        try:
            kind = ArgumentKind(kind)
        except ValueError:
            raise ValueError(f"{cls.__typename__} 'kind' must be an argument kind") from None
    if not isinstance(kind, ArgumentKind):
        raise TypeError(f"{cls.__typename__} 'kind' must be an argument kind")
    metadata["kind"] = kind

    type = metadata["type"]
    switch = coalesce(metadata["switch"], type is bool and kind is not ArgumentKind.DICTIONARY)
    if switch and kind is ArgumentKind.DICTIONARY:
        raise TypeError(f"dictionary {cls.__typename__} cannot be a switch")
    if switch and kind is not ArgumentKind.METHOD and type is not bool:
        raise TypeError(f"switch {cls.__typename__} must be bool-typed")
    metadata["switch"] = bool(switch)

    if kind is ArgumentKind.DICTIONARY:
        metadata["converter"] = None
        metadata["key_converter"] = conversion.resolve(coalesce(metadata["key_converter"], metadata["key_type"]))
        metadata["value_converter"] = conversion.resolve(coalesce(metadata["value_converter"], metadata["value_type"]))
        if not isinstance(separator := coalesce(metadata["key_value_separator"], "="), str):
            raise TypeError(f"{cls.__typename__} 'key_value_separator' must be a string")
        elif not separator:
            raise ValueError(f"{cls.__typename__} 'key_value_separator' cannot be empty")
        metadata["key_value_separator"] = separator
    else:
        if metadata["key_converter"] is not Unset or metadata["value_converter"] is not Unset:
            raise TypeError(f"only dictionary {cls.__typename__} can have key/value converters")
        if metadata["key_value_separator"] is not Unset:
            raise TypeError(f"only dictionary {cls.__typename__} can have a 'key_value_separator'")
        if metadata["duplicate_keys"]:
            raise TypeError(f"only dictionary {cls.__typename__} can allow duplicate keys")
        metadata["converter"] = conversion.resolve(coalesce(metadata["converter"], type))
        metadata["key_converter"] = metadata["value_converter"] = None
        metadata["key_value_separator"] = None

    collection = kind in (ArgumentKind.MULTI, ArgumentKind.DICTIONARY)
    if (separator := metadata["separator"]) is not None:
        if not collection:
            raise TypeError(f"only multi-value {cls.__typename__} can have a 'separator'")
        if not isinstance(separator, str):
            raise TypeError(f"{cls.__typename__} 'separator' must be a string")
        elif not separator or separator.isspace():
            raise ValueError(f"{cls.__typename__} 'separator' cannot be empty or whitespace")
    if metadata["greedy"] and not collection:
        raise TypeError(f"only multi-value {cls.__typename__} can be greedy")

    if kind is ArgumentKind.METHOD:
        if metadata["callback"] is not Unset and not callable(metadata["callback"]):
            raise TypeError(f"{cls.__typename__} 'callback' must be callable")
    elif metadata["callback"] is not Unset:
        raise TypeError(f"only method {cls.__typename__} can have a 'callback'")

    if metadata["nullable"] is Unset:
        converters = (metadata["converter"], metadata["value_converter"])
        metadata["nullable"] = any(getattr(converter, "nullable", False) for converter in converters)
    metadata["nullable"] = bool(metadata["nullable"])


def _sanitize_metadata(cls, metadata, /):
    """
    validate the remaining shared fields.

    - position: None or a non-negative integer.
    - required: a required argument cannot have a default; methods and
      switches cannot be required.
    - cancel: CancelMode (or its string value).
    - validators: iterable of Validator instances.
    - attribute: python identifier for the target field (defaults to the
      canonical name turned into an identifier).
    - descr: None or a non-empty string.
    """
    if (position := metadata["position"]) is not None:
        if not isinstance(position, int) or isinstance(position, bool):
            raise TypeError(f"{cls.__typename__} 'position' must be an integer")
        elif position < 0:
            raise ValueError(f"{cls.__typename__} 'position' cannot be negative")

    if metadata["required"]:
        if metadata["default"] is not Unset:
            raise TypeError(f"required {cls.__typename__} cannot have a default")
        if metadata["kind"] is ArgumentKind.METHOD or metadata["switch"]:
            raise TypeError(f"switch and method {cls.__typename__} cannot be required")

    if isinstance(cancel := metadata["cancel"], str):
        cancel = CancelMode(cancel)
    if not isinstance(cancel, CancelMode):
        raise TypeError(f"{cls.__typename__} 'cancel' must be a cancel mode")
    metadata["cancel"] = cancel

    validators = tuple(metadata["validators"])
    if not all(isinstance(validator, Validator) for validator in validators):
        raise TypeError(f"{cls.__typename__} 'validators' must contain only validators")
    metadata["validators"] = validators

    if metadata["kind"] is ArgumentKind.METHOD:
        metadata["attribute"] = None
    else:
        if not isinstance(attribute := coalesce(metadata["attribute"], identifier(metadata["name"])), str):
            raise TypeError(f"{cls.__typename__} 'attribute' must be a string")
        elif not attribute.isidentifier():
            raise ValueError(f"{cls.__typename__} 'attribute' must be a python identifier")
        metadata["attribute"] = attribute

    if not isinstance(descr := metadata["descr"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    elif isinstance(descr, str) and not (descr := descr.strip()):
        raise ValueError(f"{cls.__typename__} 'descr' cannot be empty")
    metadata["descr"] = coalesce(descr)


class Argument(metaclass=DescriptorType):
    """
    Immutable argument descriptor.

    Identity
    - name: canonical long name; aliases: extra long names (ordered).
    - short / short_aliases: single-character names, used in LONG_SHORT mode.
    - position: index among positional arguments, None for named-only.

    Value
    - kind: ArgumentKind.
    - type / converter: element type and its resolved converter.
    - key_type, value_type / key_converter, value_converter: dictionaries.
    - nullable: a converted None is accepted.
    - switch: presence means True; an explicit value is still accepted
      ("-Verbose:false").
    - separator: split every value of a multi-value argument.
    - greedy: a multi-value argument keeps consuming following values.
    - key_value_separator / duplicate_keys: dictionaries.

    Behavior
    - required, default, cancel, callback (methods), validators.

    Presentation
    - attribute: name of the field on the target object.
    - descr, hidden.
    """
    __introspectable__ = (
        "name",
        "aliases",
        "short",
        "short_aliases",
        "position",
        "kind",
        "type",
        "converter",
        "key_type",
        "value_type",
        "key_converter",
        "value_converter",
        "nullable",
        "required",
        "switch",
        "separator",
        "greedy",
        "key_value_separator",
        "duplicate_keys",
        "default",
        "cancel",
        "callback",
        "validators",
        "attribute",
        "descr",
        "hidden",
    )
    __displayable__ = (
        "name",
        "aliases",
        "short",
        "position",
        "kind",
        "type",
        "required",
        "switch",
        "default",
    )

    def __init__(
            self,
            name,
            /,
            *,
            aliases=(),
            short=Unset,
            short_aliases=(),
            position=None,
            kind=ArgumentKind.SINGLE,
            type=str,
            converter=Unset,
            key_type=str,
            value_type=str,
            key_converter=Unset,
            value_converter=Unset,
            nullable=Unset,
            required=False,
            switch=Unset,
            separator=None,
            greedy=False,
            key_value_separator=Unset,
            duplicate_keys=False,
            default=Unset,
            cancel=CancelMode.NONE,
            callback=Unset,
            validators=(),
            attribute=Unset,
            descr=Unset,
            hidden=False
    ):
        parameters = {
            key: value for key, value in locals().items() if key not in ("self", "__class__")
        }
        metadata = parameters | {
            "required": bool(required),
            "greedy": bool(greedy),
            "duplicate_keys": bool(duplicate_keys),
            "hidden": bool(hidden),
        }
        cls = builtins.type(self)
        _sanitize_names(cls, metadata)
        _sanitize_kind(cls, metadata)
        _sanitize_metadata(cls, metadata)

        self._parameters = parameters
        for key, value in metadata.items():
            setattr(self, "_" + key, value)
        self._sealed = True

    @property
    def named(self):
        """True for named-only arguments."""
        return self._position is None

    @property
    def collection(self):
        """True for multi-value and dictionary arguments."""
        return self._kind in (ArgumentKind.MULTI, ArgumentKind.DICTIONARY)

    @property
    def names(self):
        """canonical name followed by the aliases."""
        return (self._name,) + self._aliases

    @property
    def shorts(self):
        """short name followed by the short aliases (empty without a short name)."""
        return () if self._short is None else (self._short,) + self._short_aliases

    def describe(self):
        """description of the expected value ("integer", "key=value", ...)."""
        if self._kind is ArgumentKind.DICTIONARY:
            return "%s%s%s" % (
                self._key_converter.describe(),
                self._key_value_separator,
                self._value_converter.describe()
            )
        return self._converter.describe()

    def __replace__(self, **overrides):
        """return a new descriptor built from the same parameters plus overrides."""
        parameters = self._parameters | overrides
        return builtins.type(self)(parameters.pop("name"), **parameters)

    def __eq__(self, other):
        if not isinstance(other, Argument):
            return NotImplemented
        return self is other

    __hash__ = object.__hash__


def switch(name, /, **metadata):
    """
    build a switch: present means True (e.g., -Verbose, -v).
    """
    return Argument(name, type=bool, switch=True, **metadata)


def multi(name, /, type=str, **metadata):
    """
    build a multi-value argument collecting every occurrence into a list.
    """
    return Argument(name, kind=ArgumentKind.MULTI, type=type, **metadata)


def dictionary(name, /, key_type=str, value_type=str, **metadata):
    """
    build a dictionary argument collecting "key=value" pairs into a dict.
    """
    return Argument(
        name,
        kind=ArgumentKind.DICTIONARY,
        key_type=key_type,
        value_type=value_type,
        **metadata
    )


def positional(name, position, /, **metadata):
    """
    build a positional argument (also settable by name).
    """
    return Argument(name, position=position, **metadata)


def method(name, /, **metadata):
    """
    Decorator for a method argument.

    Usage
        @method("Version", cancel=CancelMode.ABORT)
        def version():
            print("1.0")

    Behavior
    - the callback is called with no argument for switches (the default when
      the argument is untyped or bool-typed), otherwise with the converted
      value.
    - returning False (or a CancelMode other than NONE) cancels the parse
      without an error.
    - the decorator returns the Argument; it must be applied only once.
    """
    if "callback" in metadata:
        raise TypeError("@method() binds its callback by decoration")
    metadata.setdefault("type", bool)
    argument = Argument(name, kind=ArgumentKind.METHOD, **metadata)
    bound = []

    @rename("method")
    def wrapper(callback, /):
        if not callable(callback):
            raise TypeError("@method() must be applied to a callable")
        if bound:
            raise TypeError("@method() must be applied only once")
        bound.append(argument.__replace__(callback=callback))
        return bound[0]

    return wrapper


def _method_arity(callback):
    try:
        parameters = inspect.signature(callback).parameters.values()
    except (TypeError, ValueError):
        return
    return sum(1 for parameter in parameters if parameter.default is parameter.empty and parameter.kind in (
        parameter.POSITIONAL_ONLY,
        parameter.POSITIONAL_OR_KEYWORD
    ))


def _help():
    """usage help is rendered by the caller from ParseResult.usage."""


def _version(text):
    @rename("version")
    def callback():
        print(text)

    return callback


def _automatic(options, arguments, /):
    """
    the Help and Version arguments the options ask for, skipping any whose
    names are already taken by the caller's arguments.
    """
    longs = {options.fold(name) for argument in arguments for name in argument.names}
    shorts = {options.fold(character) for argument in arguments for character in argument.shorts}
    automatic = []
    if options.auto_help:
        if options.mode is ParsingMode.LONG_SHORT:
            names, taken = {"short": "?", "short_aliases": ("h",)}, shorts
        else:
            names, taken = {"aliases": ("?", "h")}, longs
        if options.fold("Help") not in longs and not taken & {options.fold("?"), options.fold("h")}:
            automatic.append(method("Help", cancel=CancelMode.ABORT_WITH_HELP, descr="show usage help", **names)(_help))
    if options.auto_version is not None and options.fold("Version") not in longs:
        automatic.append(method("Version", cancel=CancelMode.ABORT, descr="show version information")(_version(options.auto_version)))
    return automatic


class ArgumentSchema(metaclass=DescriptorType):
    """
    Compiled, immutable set of arguments.

    Fields
    - arguments: positional arguments sorted by position, then named
      arguments in declaration order.
    - positionals: the positional arguments only (index = effective position).
    - options: ParseOptions.
    - target: factory called with one keyword per argument attribute.
    - validators: schema-level validators (SchemaValidator).

    Lookups
    - find_long(name) / find_short(character): exact lookup under the
      configured comparer, or None.
    - names: every (long name, argument) pair in declaration order (used for
      prefix aliases).
    - schema[name]: argument by canonical name (KeyError otherwise).

    Automatic arguments
    - ParseOptions(auto_help=True) appends a "Help" method argument and
      ParseOptions(auto_version=...) a "Version" one, after the caller's
      arguments, unless one of their names is already used.

    Positions
    - positions only define an order: they are renumbered 0..n-1 after
      sorting; two arguments cannot share a position.
    """
    __introspectable__ = (
        "arguments",
        "positionals",
        "options",
        "target",
        "validators",
    )
    __displayable__ = (
        "arguments",
        "options",
    )

    def __init__(self, *arguments, options=Unset, target=SimpleNamespace, validators=()):
        cls = type(self)
        options = coalesce(options, ParseOptions())
        if not isinstance(options, ParseOptions):
            raise TypeError(f"{cls.__typename__} 'options' must be parse options")
        if not callable(target):
            raise TypeError(f"{cls.__typename__} 'target' must be callable")
        for argument in arguments:
            if not isinstance(argument, Argument):
                raise TypeError(f"{cls.__typename__} arguments must be argument descriptors, not %s" % (
                    "unbound methods (apply @method() to a callable)" if callable(argument) else type(argument).__name__
                ))
        arguments += tuple(_automatic(options, arguments))
        validators = tuple(validators)
        if not all(isinstance(validator, SchemaValidator) for validator in validators):
            raise TypeError(f"{cls.__typename__} 'validators' must contain only schema validators")

        positionals = sorted(
            (argument for argument in arguments if argument.position is not None),
            key=lambda argument: argument.position
        )
        named = [argument for argument in arguments if argument.position is None]

        long = {}
        short = {}
        names = []
        attributes = set()
        canonical = {}
        for argument in arguments:
            if argument.kind is ArgumentKind.METHOD and argument.callback is Unset:
                raise TypeError(f"method argument {argument.name!r} has no callback")
            for name in argument.names:
                if any(separator in name for separator in options.separators):
                    raise ValueError(f"argument name {name!r} cannot contain a name/value separator")
                if options.fold(name) in long:
                    raise ValueError(f"argument name {name!r} is used more than once")
                long[options.fold(name)] = argument
                names.append((name, argument))
            if options.mode is ParsingMode.LONG_SHORT:
                for character in argument.shorts:
                    if options.fold(character) in short:
                        raise ValueError(f"short argument name {character!r} is used more than once")
                    short[options.fold(character)] = argument
            if argument.attribute is not None:
                if argument.attribute in attributes:
                    raise ValueError(f"argument attribute {argument.attribute!r} is used more than once")
                attributes.add(argument.attribute)
            canonical[argument.name] = argument

        for previous, current in zip(positionals, positionals[1:]):
            if previous.position == current.position:
                raise ValueError(f"arguments {previous.name!r} and {current.name!r} share position {current.position}")
            if previous.collection:
                raise ValueError(f"multi-value positional argument {previous.name!r} must be the last positional")
            if current.required and not previous.required:
                raise ValueError(
                    f"required positional argument {current.name!r} cannot follow optional {previous.name!r}"
                )

        for argument in arguments:
            for validator in argument.validators:
                for name in validator.names:
                    if name not in canonical:
                        raise ValueError(f"argument {argument.name!r} depends on unknown argument {name!r}")
                    if name == argument.name:
                        raise ValueError(f"argument {argument.name!r} cannot depend on itself")
            if argument.kind is ArgumentKind.METHOD and not argument.switch and _method_arity(argument.callback) == 0:
                raise TypeError(f"method argument {argument.name!r} takes a value but its callback accepts none")
        for validator in validators:
            for name in validator.names:
                if name not in canonical:
                    raise ValueError(f"{cls.__typename__} validator refers to unknown argument {name!r}")

        self._arguments = tuple(positionals) + tuple(named)
        self._positionals = tuple(positionals)
        self._options = options
        self._target = target
        self._validators = validators
        self._long = long
        self._short = short
        self._names = tuple(names)
        self._canonical = canonical
        self._sealed = True

    @property
    def names(self):
        return self._names

    def find_long(self, name, /):
        return self._long.get(self._options.fold(name))

    def find_short(self, character, /):
        return self._short.get(self._options.fold(character))

    def __getitem__(self, name):
        return self._canonical[name]

    def __contains__(self, name):
        return name in self._canonical

    def __iter__(self):
        return iter(self._arguments)

    def __len__(self):
        return len(self._arguments)


__all__ = (
    "ArgumentKind",
    "CancelMode",
    "Argument",
    "ArgumentSchema",
    "switch",
    "multi",
    "dictionary",
    "positional",
    "method",
)
