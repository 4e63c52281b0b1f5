"""
Argentum argument binder.

Scope
- BindingState: the per-parse state (values, supplied arguments, names used,
  positional cursor).
- ArgumentBinder: convert one raw value for one argument and merge it into
  the state, or raise the matching ParseError.

Binding rules
- single: a second occurrence is a DUPLICATE_ARGUMENT error, unless the
  options allow duplicates (the last value wins; ErrorMode.WARNING also emits
  a DuplicateArgumentWarning, and a warning the host's filters turn into an
  exception is reported as DUPLICATE_ARGUMENT instead).
- multi: the value is split on the argument's separator (if any); every
  piece is converted and appended in order.
- dictionary: every piece is split once on the key/value separator; key and
  value are converted by their own converters. A repeated key is an
  INVALID_DICTIONARY_VALUE error unless duplicate keys are allowed, in which
  case the value is replaced in place.
- method: the callback runs with no argument (switches) or the converted
  value; returning False or a CancelMode requests cancellation.
- a converted None for a non-nullable argument is a NULL_ARGUMENT_VALUE error.

Every conversion and validation happens before the state is touched, so a
failing bind leaves the state exactly as it was.
"""
from .conversion import ConversionError
from .faults import ErrorCategory, DuplicateArgumentWarning, ParseWarning, report, trigger
from .options import ErrorMode
from .schema import ArgumentKind, CancelMode
from .validation import ValidationMode


class BindingState:
    """
    Mutable, per-parse state; never shared between parses.

    - values: argument -> accumulated value (list for multi, dict for
      dictionaries).
    - supplied: argument -> name used (None when bound by position), in the
      order the arguments were first supplied.
    - cursor: index of the next positional argument to fill.
    """

    def __init__(self):
        self.values = {}
        self.supplied = {}
        self.cursor = 0

    def __contains__(self, argument):
        return argument in self.supplied


class ArgumentBinder:
    """
    Bind raw values to arguments of one schema.

    bind() returns the CancelMode requested by a method callback (None for
    other arguments); every input problem is raised as a ParseError.
    """

    def __init__(self, schema, /):
        self.schema = schema
        self.options = schema.options

    def bind(self, state, argument, raw, /, *, name=None, token=None, index=None):
        """
        convert raw and merge it into state for argument.

        - raw: the value text, or None for a switch given by presence.
        - name: the name as typed (None for positional values).
        - token, index: the raw argument and its 0-based index, for errors.
        """
        payload = {"argument": argument.name, "token": token, "index": index}

        if argument.kind is ArgumentKind.SINGLE and argument in state:
            match self.options.duplicates:
                case ErrorMode.ERROR:
                    raise report(ErrorCategory.DUPLICATE_ARGUMENT, **payload)
                case ErrorMode.WARNING:
                    duplicate = True
                case _:
                    duplicate = False
        else:
            duplicate = False

        match argument.kind:
            case ArgumentKind.METHOD:
                return self._invoke(state, argument, raw, name, payload)
            case ArgumentKind.DICTIONARY:
                value = self._collect(argument, state.values.get(argument, {}), raw, payload)
            case ArgumentKind.MULTI:
                value = state.values.get(argument, []) + self._convert(argument, raw, payload)
            case _:
                value, = self._convert(argument, raw, payload, split=False)

        if duplicate:
            try:
                trigger(_duplicate_warning(argument, token, index))
            except ParseWarning as warning:
                # the host turned warnings into errors
                raise report(ErrorCategory.DUPLICATE_ARGUMENT, **payload) from warning
        state.values[argument] = value
        state.supplied.setdefault(argument, name)
        return None

    def _pieces(self, argument, raw, split=True):
        if split and argument.separator is not None:
            return raw.split(argument.separator)
        return [raw]

    def _validate(self, argument, value, mode, payload, raw):
        for validator in argument.validators:
            if validator.mode is mode and not validator.is_valid(argument, value):
                raise report(
                    ErrorCategory.VALIDATION_FAILED,
                    value=raw,
                    reason=validator.reason(argument, value),
                    **payload
                )

    def _convert_one(self, argument, converter, raw, payload, nullable):
        try:
            value = converter.convert(raw)
        except ConversionError as exception:
            raise report(
                ErrorCategory.ARGUMENT_VALUE_CONVERSION,
                value=raw,
                expected=exception.expected or argument.describe(),
                **payload
            ) from exception
        if value is None and not nullable:
            raise report(ErrorCategory.NULL_ARGUMENT_VALUE, value=raw, **payload)
        return value

    def _convert(self, argument, raw, payload, split=True):
        """convert every piece of raw (True for a presence-only switch)."""
        if raw is None:
            return [True]
        values = []
        for piece in self._pieces(argument, raw, split):
            self._validate(argument, piece, ValidationMode.BEFORE_CONVERSION, payload, piece)
            value = self._convert_one(argument, argument.converter, piece, payload, argument.nullable)
            self._validate(argument, value, ValidationMode.AFTER_CONVERSION, payload, piece)
            values.append(value)
        return values

    def _collect(self, argument, current, raw, payload):
        """return a new dict: current plus every key/value pair in raw."""
        result = dict(current)
        for piece in self._pieces(argument, raw):
            self._validate(argument, piece, ValidationMode.BEFORE_CONVERSION, payload, piece)
            key, separator, value = piece.partition(argument.key_value_separator)
            if not separator:
                raise report(
                    ErrorCategory.INVALID_DICTIONARY_VALUE,
                    value=piece,
                    inner=f"missing the key/value separator {argument.key_value_separator!r}",
                    separator=argument.key_value_separator,
                    **payload
                )
            key = self._convert_one(argument, argument.key_converter, key, payload, False)
            value = self._convert_one(argument, argument.value_converter, value, payload, argument.nullable)
            self._validate(argument, value, ValidationMode.AFTER_CONVERSION, payload, piece)
            if key in result and not argument.duplicate_keys:
                raise report(
                    ErrorCategory.INVALID_DICTIONARY_VALUE,
                    value=piece,
                    inner=f"the key {key!r} was already supplied",
                    separator=argument.key_value_separator,
                    **payload
                )
            result[key] = value
        return result

    def _invoke(self, state, argument, raw, name, payload):
        if raw is None:
            value = None
        else:
            value, = self._convert(argument, raw, payload, split=False)
        state.supplied.setdefault(argument, name)
        if argument.switch and raw is None:
            outcome = argument.callback()
        elif argument.switch:
            # "-Method:false" on a switch method: nothing to run
            outcome = argument.callback() if value else None
        else:
            outcome = argument.callback(value)
        if outcome is False:
            return CancelMode.ABORT
        if isinstance(outcome, CancelMode) and outcome is not CancelMode.NONE:
            return outcome
        return None


def _duplicate_warning(argument, token, index):
    return DuplicateArgumentWarning(
        f"argument {argument.name!r} was supplied more than once; the last value is used",
        title=DuplicateArgumentWarning.title,
        argument=argument.name,
        token=token,
        index=index,
        hint="remove the earlier occurrences to silence this warning",
    )


__all__ = (
    "BindingState",
    "ArgumentBinder",
)
