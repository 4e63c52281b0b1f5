"""
Argentum command-line surface.

What this module provides
- parse(schema, arguments, index, **hooks) -> ParseResult
  • arguments: Unset (sys.argv[1:]), a shell-like string (split with
    shlex.split) or an iterable of strings.
- parse_or_exit(schema, arguments, ...) -> value
  • returns the target on success; renders the error with rich on stderr and
    exits with status 1 on failure; exits with status 0 when canceled.
- invoke(schema, prompt, callback=..., **hooks) -> int
  • parse, run the callback with the value, and return a process exit code
    (0 success or cancellation, 1 error, or the callback's integer result).

Engines are cached per schema (weakly), so repeated parses reuse the name
resolver's memo.

Quick start
    from argentum import ArgumentSchema, positional, switch, parse_or_exit

    schema = ArgumentSchema(positional("path", 0, required=True), switch("verbose", short="v"))

    if __name__ == "__main__":
        arguments = parse_or_exit(schema)
        print(arguments.path, arguments.verbose)
"""
import shlex
import sys
import weakref
from collections.abc import Iterable

from .engine import ParseEngine, ParseStatus
from .faults import trigger
from .schema import ArgumentSchema
from .utils import *

_engines = weakref.WeakKeyDictionary()


def _engine(schema):
    if not isinstance(schema, ArgumentSchema):
        raise TypeError("first argument must be an argument schema")
    try:
        return _engines[schema]
    except KeyError:
        engine = _engines[schema] = ParseEngine(schema)
        return engine


def _tokens(arguments, function):
    if arguments is Unset:
        return sys.argv[1:]
    if isinstance(arguments, str):
        return shlex.split(arguments)
    if isinstance(arguments, Iterable):
        tokens = list(arguments)
        if all(isinstance(token, str) for token in tokens):
            return tokens
    raise TypeError(f"{function}() arguments must be a string or an iterable of strings")


def parse(schema, arguments=Unset, index=0, /, **hooks):
    """
    Parse arguments against schema.

    Parameters
    - schema: ArgumentSchema.
    - arguments: Unset | str | Iterable[str] (see module docs).
    - index: number of leading arguments to skip.
    - hooks: on_parsed, on_unknown (see argentum.events).

    Returns
    - ParseResult; parse errors are reported in ParseResult.error, never raised.
    """
    return _engine(schema).parse(_tokens(arguments, "parse"), index, **hooks)


def parse_or_exit(schema, arguments=Unset, index=0, /, *, fancy=False, colorful=True, prog=Unset, **hooks):
    """
    Parse arguments and return the target value, or terminate the process.

    - error: the fault is rendered on stderr (rich) and the process exits
      with status 1.
    - canceled: the process exits with status 0.
    """
    result = parse(schema, _tokens(arguments, "parse_or_exit"), index, **hooks)
    match result.status:
        case ParseStatus.SUCCESS:
            return result.value
        case ParseStatus.ERROR:
            trigger(result.error, shell=True, fancy=fancy, colorful=colorful, prog=coalesce(prog))
        case _:
            sys.exit(0)


def invoke(schema, prompt=Unset, /, callback=None, *, fancy=False, colorful=True, prog=Unset, **hooks):
    """
    Convenience runner returning a process exit code.

    Behavior
    - error: render the fault on stderr, return 1.
    - canceled: return 0.
    - success: call callback(value) when given; return its result when it is
      an integer, 0 otherwise.

    Typical use
        sys.exit(invoke(schema, callback=main))
    """
    if callback is not None and not callable(callback):
        raise TypeError("invoke() callback must be callable")
    result = parse(schema, _tokens(prompt, "invoke"), **hooks)
    match result.status:
        case ParseStatus.ERROR:
            trigger(result.error, shell=True, deferred=True, fancy=fancy, colorful=colorful, prog=coalesce(prog))
            return 1
        case ParseStatus.CANCELED:
            return 0
    if callback is None:
        return 0
    code = callback(result.value)
    return code if isinstance(code, int) and not isinstance(code, bool) else 0


__all__ = (
    "parse",
    "parse_or_exit",
    "invoke",
)
