"""Application engine for lispy.

This module centralizes function application semantics for the interpreter:
- Builtins are called directly with the caller's environment and the
  evaluated arguments.
- Closures bind arguments to formals front to back. Running out of arguments
  early yields a partially applied closure; the variadic marker `&` collects
  whatever is left into a Q-expression.
- A fully bound closure evaluates its body in its invocation environment,
  whose parent is the *caller's* environment.
"""

from __future__ import annotations

from lispy import EvaluatorFn, LispValue
from lispy.errors import ErrorKind
from lispy.types.environment import Environment
from lispy.types.lambda_fn import Closure
from lispy.types.symbol import VARIADIC_MARKER
from lispy.types.values import Builtin, Error, QuotedList, Value


def _malformed_variadic() -> Error:
    return Error(
        ErrorKind.MALFORMED_SPECIAL_FORM,
        "Function format invalid. Symbol '&' not followed by single symbol.",
    )


def apply_lambda(
    fn: Closure,
    args: list[Value],
    caller_env: Environment,
    evaluate_fn: EvaluatorFn,
) -> LispValue:
    """Apply a Closure to already-evaluated arguments.

    Binding happens on a clone, so the closure value the caller holds keeps
    its formals and environment untouched.
    """
    fn = fn.clone()
    formals = list(fn.formals.cells)
    pending = list(args)
    given = len(pending)
    total = len(formals)

    while pending:
        if not formals:
            return Error(
                ErrorKind.ARITY_MISMATCH,
                f"Function passed too many arguments. Got {given}, Expected {total}.",
            )

        sym = formals.pop(0)

        if sym == VARIADIC_MARKER:
            if len(formals) != 1:
                return _malformed_variadic()
            fn.env.define(formals.pop(0), QuotedList(pending))
            pending = []
            break

        fn.env.define(sym, pending.pop(0))

    # A trailing `& rest` with no arguments left binds rest to {}
    if formals and formals[0] == VARIADIC_MARKER:
        if len(formals) != 2:
            return _malformed_variadic()
        fn.env.define(formals[1], QuotedList())
        formals = []

    if formals:
        # Partial application: keep the bindings, expect the remaining formals
        fn.formals = QuotedList(formals)
        return fn

    fn.env.outer = caller_env
    return evaluate_fn(fn.env, fn.body.evaluable())


def apply(
    head: Value,
    args: list[Value],
    env: Environment,
    evaluate_fn: EvaluatorFn,
) -> LispValue:
    """Apply either a Builtin or a Closure.

    Anything else in head position is a TYPE_MISMATCH error value.
    """
    if isinstance(head, Closure):
        return apply_lambda(head, args, env, evaluate_fn)
    elif isinstance(head, Builtin):
        return head.call(env, args)
    else:
        return Error(ErrorKind.TYPE_MISMATCH, "first element is not a function!")
