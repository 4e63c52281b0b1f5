"""
Argentum parse hooks.

Hooks are plain callables passed to a parse:
- on_parsed(ArgumentParsedEvent) -> HookResult
  called after every successful bind of a named or positional value.
- on_unknown(UnknownArgumentEvent) -> HookResult
  called when a named argument does not resolve to any descriptor, or when
  its name is a prefix of several arguments.

A hook returning None means CONTINUE. Hooks run synchronously; the engine
acts on the result right after the call returns. Exceptions raised by a hook
are not parse errors and propagate to the caller.

Results
- CONTINUE: default behavior (the argument's cancel mode; an unknown
  argument or an ambiguous prefix is an error).
- IGNORE: skip the unknown argument / ignore the argument's cancel mode.
- OVERRIDE: same as IGNORE for on_parsed (parsing continues whatever the
  argument's cancel mode says).
- CANCEL, CANCEL_WITH_HELP: stop; the result is canceled (with usage help).
- SUCCESS: stop; the result succeeds with the remaining arguments.
"""
import enum
from typing import NamedTuple

from .schema import CancelMode


class HookResult(enum.Enum):
    CONTINUE = "continue"
    IGNORE = "ignore"
    OVERRIDE = "override"
    CANCEL = "cancel"
    CANCEL_WITH_HELP = "cancel-with-help"
    SUCCESS = "success"


class ArgumentParsedEvent(NamedTuple):
    """
    - argument: the descriptor that received a value.
    - name: the name as typed (None for values bound by position).
    - value: the argument's value after this occurrence was bound (the whole
      list or dict for collections; None for methods).
    - raw: the raw text of the value (None for switches given by presence).
    - token: the whole raw argument.
    - cancel: the descriptor's cancel mode, applied on CONTINUE.
    """
    argument: object
    name: str | None
    value: object
    raw: str | None
    token: str
    cancel: CancelMode


class UnknownArgumentEvent(NamedTuple):
    """
    - name: the unresolved name as typed.
    - value: its inline value, if any.
    - token: the whole raw argument.
    - index: 0-based index of the argument.
    - combined: True when the name is one character of combined short switches.
    - candidates: every name an ambiguous prefix could stand for (at least
      two, declaration order); empty when the name matches nothing.
    - suggestions: close matches among the known names ("did you mean").
    """
    name: str
    value: str | None
    token: str
    index: int
    combined: bool = False
    candidates: tuple = ()
    suggestions: tuple = ()


def _result(result, hook):
    if result is None:
        return HookResult.CONTINUE
    if not isinstance(result, HookResult):
        raise TypeError(f"{hook} hook must return a hook result, not {type(result).__name__}")
    return result


class Hooks:
    """dispatch events to the optional on_parsed/on_unknown callables."""

    def __init__(self, on_parsed=None, on_unknown=None):
        for name, hook in (("on_parsed", on_parsed), ("on_unknown", on_unknown)):
            if hook is not None and not callable(hook):
                raise TypeError(f"{name} must be callable")
        self.on_parsed = on_parsed
        self.on_unknown = on_unknown

    def parsed(self, event, /):
        """
        run on_parsed and return the effective CancelMode for the event.
        """
        if self.on_parsed is None:
            return event.cancel
        match _result(self.on_parsed(event), "on_parsed"):
            case HookResult.CONTINUE:
                return event.cancel
            case HookResult.IGNORE | HookResult.OVERRIDE:
                return CancelMode.NONE
            case HookResult.CANCEL:
                return CancelMode.ABORT
            case HookResult.CANCEL_WITH_HELP:
                return CancelMode.ABORT_WITH_HELP
            case HookResult.SUCCESS:
                return CancelMode.SUCCESS

    def unknown(self, event, /):
        """
        run on_unknown; CONTINUE (also without a hook) means "report an error".
        """
        if self.on_unknown is None:
            return HookResult.CONTINUE
        result = _result(self.on_unknown(event), "on_unknown")
        if result is HookResult.OVERRIDE:
            return HookResult.IGNORE
        return result


__all__ = (
    "HookResult",
    "ArgumentParsedEvent",
    "UnknownArgumentEvent",
    "Hooks",
)
