"""
Argentum parse engine.

Scope
- ParseEngine: drive the tokenizer, the name resolver and the binder over a
  list of raw arguments and produce a ParseResult.
- ParseResult: status (success, error, canceled), the target value, the
  error, the unparsed remainder, the argument that stopped parsing and the
  usage help signal.

States
- AWAITING_TOKEN: read the next token.
- CONSUMING_NAMED: resolve a name, take its value (inline, or the next
  argument when whitespace separation is allowed), bind it.
- CONSUMING_COMBINED: check every character of "-abc" first, then bind the
  switches left to right.
- CONSUMING_POSITIONAL: bind a value at the positional cursor.
- SUCCEEDED, FAILED, CANCELED: terminal.

End of input
- the first required argument that was not supplied is reported, in schema
  order; then after-parsing validators, dependency validators and schema
  validators run; then defaults are applied and the target is built.

ParseError never escapes ParseEngine.parse: it is returned in
ParseResult.error. Exceptions raised by hooks, callbacks, converters other
than ConversionError, or the target factory are programming errors and
propagate.
"""
import difflib
import enum
import logging

from .binder import ArgumentBinder, BindingState
from .events import Hooks, ArgumentParsedEvent, UnknownArgumentEvent, HookResult
from .faults import ErrorCategory, ParseError, report
from .names import NameResolver, NameStyle, Exact, AmbiguousPrefix
from .options import PrefixTermination, UsageMode
from .schema import ArgumentKind, CancelMode
from .tokens import Tokenizer, TokenKind
from .utils import *
from .validation import ValidationMode

logger = logging.getLogger(__name__)


class ParseStatus(enum.Enum):
    SUCCESS = "success"
    ERROR = "error"
    CANCELED = "canceled"


class ParseState(enum.Enum):
    AWAITING_TOKEN = "awaiting-token"
    CONSUMING_NAMED = "consuming-named"
    CONSUMING_COMBINED = "consuming-combined"
    CONSUMING_POSITIONAL = "consuming-positional"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELED = "canceled"


class ParseResult(metaclass=DescriptorType):
    """
    Outcome of one parse.

    - status: ParseStatus.
    - value: the target instance (success only).
    - error: the ParseError (error only).
    - remaining_arguments: raw arguments left unparsed after a cancellation,
      or from the failing argument onward after an error (empty when the
      error was found at the end of input).
    - triggering_argument: canonical name of the argument that canceled
      parsing (None when the terminator or nothing did).
    - usage: UsageMode the caller should show (FULL after a cancellation with
      help, the options' error usage after an error, NONE otherwise).
    """
    __introspectable__ = (
        "status",
        "value",
        "error",
        "remaining_arguments",
        "triggering_argument",
        "usage",
    )

    def __init__(
            self,
            status,
            /,
            *,
            value=None,
            error=None,
            remaining_arguments=(),
            triggering_argument=None,
            usage=UsageMode.NONE
    ):
        self._status = status
        self._value = value
        self._error = error
        self._remaining_arguments = tuple(remaining_arguments)
        self._triggering_argument = triggering_argument
        self._usage = usage
        self._sealed = True

    @property
    def success(self):
        return self._status is ParseStatus.SUCCESS

    def __bool__(self):
        return self.success


class _Stop(Exception):
    """internal: stop the token loop (cancel modes, hook results, terminators)."""

    def __init__(self, mode, argument, cursor):
        super().__init__(mode)
        self.mode = mode
        self.argument = argument
        self.cursor = cursor


def _default(argument):
    if argument.default is not Unset:
        return argument.default
    if argument.switch and argument.kind is ArgumentKind.SINGLE and not argument.nullable:
        return False
    return None


class ParseEngine:
    """
    Parse raw arguments against one schema.

    The engine holds only schema-derived, read-only collaborators (the
    tokenizer, the memoizing resolver and the binder); every parse creates
    its own BindingState, so one engine can serve many parses.
    """

    def __init__(self, schema, /):
        self.schema = schema
        self.options = schema.options
        self.tokenizer = Tokenizer(schema)
        self.resolver = NameResolver(schema)
        self.binder = ArgumentBinder(schema)

    def parse(self, arguments, index=0, /, *, on_parsed=None, on_unknown=None):
        """
        parse arguments[index:] and return a ParseResult.

        hooks
        - on_parsed(ArgumentParsedEvent) -> HookResult | None
        - on_unknown(UnknownArgumentEvent) -> HookResult | None
        """
        if isinstance(arguments, str):
            raise TypeError("parse() arguments must be a sequence of strings, not a string")
        arguments = tuple(arguments)
        if not all(isinstance(argument, str) for argument in arguments):
            raise TypeError("parse() arguments must be strings")
        if not isinstance(index, int) or not 0 <= index <= len(arguments):
            raise ValueError("parse() index must be within the arguments")

        hooks = Hooks(on_parsed, on_unknown)
        state = BindingState()
        try:
            try:
                self._loop(state, arguments, index, hooks)
            except _Stop as stop:
                return self._stopped(state, arguments, stop)
            value = self._finish(state)
        except ParseError as error:
            self._transition(ParseState.FAILED, error.category.name)
            # errors found at the end of input have no token to point at
            remaining = arguments[error.index:] if error.index is not None else ()
            return ParseResult(
                ParseStatus.ERROR,
                error=error,
                remaining_arguments=remaining,
                usage=self.options.usage
            )
        self._transition(ParseState.SUCCEEDED)
        return ParseResult(ParseStatus.SUCCESS, value=value)

    def _transition(self, state, detail=None):
        if detail is None:
            logger.debug("argentum: %s", state.value)
        else:
            logger.debug("argentum: %s (%s)", state.value, detail)

    def _stopped(self, state, arguments, stop):
        remaining = arguments[stop.cursor:]
        if stop.mode is CancelMode.SUCCESS:
            value = self._finish(state)
            self._transition(ParseState.SUCCEEDED, "stopped by %s" % (stop.argument or "terminator"))
            return ParseResult(
                ParseStatus.SUCCESS,
                value=value,
                remaining_arguments=remaining,
                triggering_argument=stop.argument
            )
        self._transition(ParseState.CANCELED, stop.argument)
        return ParseResult(
            ParseStatus.CANCELED,
            remaining_arguments=remaining,
            triggering_argument=stop.argument,
            usage=UsageMode.FULL if stop.mode is CancelMode.ABORT_WITH_HELP else UsageMode.NONE
        )

    def _named_ahead(self, arguments, cursor):
        """True when arguments[cursor] would be read as a name (or an active terminator)."""
        token = self.tokenizer.classify(arguments[cursor], cursor)
        if token.kind is TokenKind.TERMINATOR:
            return self.options.termination is not PrefixTermination.NONE
        return token.named

    def _loop(self, state, arguments, cursor, hooks):
        positional = False
        while True:
            self._transition(ParseState.AWAITING_TOKEN)
            token = self.tokenizer.next_token(arguments, cursor, positional=positional)
            if token is None:
                return
            cursor += 1
            match token.kind:
                case TokenKind.TERMINATOR if self.options.termination is PrefixTermination.POSITIONAL_ONLY:
                    positional = True
                case TokenKind.TERMINATOR if self.options.termination is PrefixTermination.CANCEL_WITH_SUCCESS:
                    raise _Stop(CancelMode.SUCCESS, None, cursor)
                case TokenKind.TERMINATOR | TokenKind.POSITIONAL_VALUE:
                    self._positional(state, token, cursor, hooks)
                case TokenKind.COMBINED_SHORT_SWITCHES:
                    self._combined(state, token, cursor, hooks)
                case _:
                    cursor = self._named(state, token, arguments, cursor, hooks)

    def _unknown(self, token, name, cursor, hooks, combined=False, matches=()):
        """
        offer an unresolved name to on_unknown; matches holds the names an
        ambiguous prefix could stand for (empty for unknown names).
        """
        if combined or token.short:
            known = [short for argument in self.schema.arguments for short in argument.shorts]
        else:
            known = [candidate for candidate, _ in self.schema.names]
        suggestions = tuple(difflib.get_close_matches(name, known, 5))
        event = UnknownArgumentEvent(name, token.value, token.raw, token.index, combined, matches, suggestions)
        match hooks.unknown(event):
            case HookResult.IGNORE:
                return
            case HookResult.CANCEL:
                raise _Stop(CancelMode.ABORT, None, cursor)
            case HookResult.CANCEL_WITH_HELP:
                raise _Stop(CancelMode.ABORT_WITH_HELP, None, cursor)
            case HookResult.SUCCESS:
                raise _Stop(CancelMode.SUCCESS, None, cursor)
        if matches:
            raise report(
                ErrorCategory.AMBIGUOUS_PREFIX_ALIAS,
                argument=name,
                token=token.raw,
                index=token.index,
                candidates=matches
            )
        raise report(
            ErrorCategory.UNKNOWN_ARGUMENT,
            argument=name,
            token=token.raw,
            index=token.index,
            suggestions=suggestions,
            hint="did you mean %r?" % suggestions[0] if suggestions else None
        )

    def _parsed(self, state, argument, name, raw, source, requested, cursor, hooks):
        if requested is not None:
            raise _Stop(requested, argument.name, cursor)
        event = ArgumentParsedEvent(argument, name, state.values.get(argument), raw, source, argument.cancel)
        if (mode := hooks.parsed(event)) is not CancelMode.NONE:
            raise _Stop(mode, argument.name, cursor)

    def _named(self, state, token, arguments, cursor, hooks):
        self._transition(ParseState.CONSUMING_NAMED, token.raw)
        style = NameStyle.SHORT if token.short else NameStyle.LONG
        match self.resolver.resolve(token.name, style):
            case Exact(argument=argument):
                pass
            case AmbiguousPrefix(candidates=candidates):
                self._unknown(token, token.name, cursor, hooks, matches=candidates)
                return cursor
            case _:
                self._unknown(token, token.name, cursor, hooks)
                return cursor

        raw = token.value
        if raw is None and not argument.switch:
            if not self.options.whitespace or cursor >= len(arguments) or self._named_ahead(arguments, cursor):
                raise report(
                    ErrorCategory.MISSING_NAMED_ARGUMENT_VALUE,
                    argument=argument.name,
                    token=token.raw,
                    index=token.index
                )
            raw = arguments[cursor]
            cursor += 1

        requested = self.binder.bind(state, argument, raw, name=token.name, token=token.raw, index=token.index)
        self._parsed(state, argument, token.name, raw, token.raw, requested, cursor, hooks)
        if argument.greedy and raw is not None:
            while cursor < len(arguments) and not self._named_ahead(arguments, cursor):
                value = arguments[cursor]
                requested = self.binder.bind(state, argument, value, name=token.name, token=value, index=cursor)
                cursor += 1
                self._parsed(state, argument, token.name, value, value, requested, cursor, hooks)
        return cursor

    def _combined(self, state, token, cursor, hooks):
        self._transition(ParseState.CONSUMING_COMBINED, token.raw)
        if token.switches_only:
            switches = [(character, self.schema.find_short(character)) for character in token.name]
        else:
            switches = self._combined_switches(token, cursor, hooks)

        for character, argument in switches:
            requested = self.binder.bind(state, argument, token.value, name=character, token=token.raw, index=token.index)
            self._parsed(state, argument, character, token.value, token.raw, requested, cursor, hooks)

    def _combined_switches(self, token, cursor, hooks):
        """resolve every character first; a non-switch fails the whole token."""
        switches = []
        for character in token.name:
            match self.resolver.resolve(character, NameStyle.SHORT):
                case Exact(argument=argument) if argument.switch:
                    switches.append((character, argument))
                case Exact():
                    raise report(ErrorCategory.COMBINED_SHORT_NAME_NON_SWITCH, token=token.raw, index=token.index)
                case _:
                    self._unknown(token, character, cursor, hooks, combined=True)
        return switches

    def _positional(self, state, token, cursor, hooks):
        self._transition(ParseState.CONSUMING_POSITIONAL, token.raw)
        positionals = self.schema.positionals
        while (
            state.cursor < len(positionals) and
            positionals[state.cursor] in state and
            not positionals[state.cursor].collection
        ):
            state.cursor += 1
        if state.cursor >= len(positionals):
            raise report(ErrorCategory.TOO_MANY_ARGUMENTS, value=token.raw, token=token.raw, index=token.index)

        argument = positionals[state.cursor]
        requested = self.binder.bind(state, argument, token.raw, token=token.raw, index=token.index)
        if not argument.collection:
            state.cursor += 1
        self._parsed(state, argument, None, token.raw, token.raw, requested, cursor, hooks)

    def _finish(self, state):
        """check required arguments and validators, then build the target."""
        schema = self.schema
        for argument in schema.arguments:
            if argument.required and argument not in state:
                raise report(ErrorCategory.MISSING_REQUIRED_ARGUMENT, argument=argument.name)

        supplied = frozenset(argument.name for argument in state.supplied)
        values = {argument.name: state.values.get(argument) for argument in state.supplied}

        for category in (ErrorCategory.VALIDATION_FAILED, ErrorCategory.DEPENDENCY_FAILED):
            for argument in schema.arguments:
                if argument not in state:
                    continue
                for validator in argument.validators:
                    if validator.mode is not ValidationMode.AFTER_PARSING or validator.category is not category:
                        continue
                    if not validator.is_valid(argument, values[argument.name], supplied=supplied):
                        raise report(
                            category,
                            argument=argument.name,
                            reason=validator.reason(argument, values[argument.name]),
                            dependencies=validator.names
                        )

        for validator in schema.validators:
            if not validator.is_valid(values):
                raise report(
                    ErrorCategory.VALIDATION_FAILED,
                    reason=validator.reason(),
                    dependencies=validator.names
                )

        return schema.target(**{
            argument.attribute: state.values[argument] if argument in state.values else _default(argument)
            for argument in schema.arguments
            if argument.attribute is not None
        })


__all__ = (
    "ParseStatus",
    "ParseState",
    "ParseResult",
    "ParseEngine",
)
