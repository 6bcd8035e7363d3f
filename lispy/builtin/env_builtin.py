"""Built-in functions for the lispy runtime environment.

This module defines arithmetic, comparison, list processing, definition,
lambda construction, conditionals and file loading, plus the `register`
helper that installs them into a root environment.

Every builtin has the signature fn(env, args) -> value, where `args` are the
already-evaluated arguments. Precondition failures return an Error value and
leave the arguments untouched.
"""
from __future__ import annotations

from typing import Callable

from lispy import BuiltinFn, LispValue
from lispy.errors import ErrorKind
from lispy.evaluation.evaluator import evaluate
from lispy.modules.loader import Reporter, load_file, print_error
from lispy.types.environment import Environment
from lispy.types.lambda_fn import Closure
from lispy.types.symbol import Symbol
from lispy.types.values import (
    Boolean,
    Error,
    EvaluableList,
    Number,
    QuotedList,
    String,
    Value,
)


def _arity_error(message: str) -> Error:
    return Error(ErrorKind.ARITY_MISMATCH, message)


def _type_error(message: str) -> Error:
    return Error(ErrorKind.TYPE_MISMATCH, message)


def _bad_type(name: str, got: Value) -> Error:
    return _type_error(f"Function '{name}' passed incorrect type! Got {got.type_name()}")


# -------------------------------
# Arithmetic
# -------------------------------
def _trunc_div(x: int, y: int) -> int:
    """Integer division rounding toward zero."""
    q = abs(x) // abs(y)
    return -q if (x < 0) != (y < 0) else q


def _trunc_mod(x: int, y: int) -> int:
    """Remainder carrying the sign of the dividend, so x == y * q + r."""
    return x - y * _trunc_div(x, y)


def power(x: int, y: int) -> int:
    """Exponentiation by repeated squaring, y >= 0."""
    r = 1
    while y != 0:
        if y & 1:
            r *= x
        y >>= 1
        x *= x
    return r


def _pow_op(x: int, y: int) -> int | Error:
    if y < 0:
        return _type_error("Cannot raise to a negative power!")
    return power(x, y)


def _div_op(x: int, y: int) -> int | Error:
    if y == 0:
        return Error(ErrorKind.DIVISION_BY_ZERO, "Can't divide by 0")
    return _trunc_div(x, y)


def _mod_op(x: int, y: int) -> int | Error:
    if y == 0:
        return Error(ErrorKind.DIVISION_BY_ZERO, "Can't take modulo by 0")
    return _trunc_mod(x, y)


OPERATORS: dict[str, Callable[[int, int], int | Error]] = {
    "+": lambda x, y: x + y,
    "-": lambda x, y: x - y,
    "*": lambda x, y: x * y,
    "/": _div_op,
    "%": _mod_op,
    "^": _pow_op,
}


def builtin_op(env: Environment, args: list[Value], op: str) -> Value:
    """Fold `op` left to right over Number arguments; unary `-` negates."""
    if not args:
        return _arity_error(f"Function '{op}' passed no arguments!")
    for arg in args:
        if not isinstance(arg, Number):
            return _bad_type(op, arg)

    x = args[0].value
    if op == "-" and len(args) == 1:
        return Number(-x)

    fn = OPERATORS[op]
    for y in args[1:]:
        x = fn(x, y.value)
        if isinstance(x, Error):
            return x
    return Number(x)


def add(env: Environment, args: list[Value]) -> Value:
    return builtin_op(env, args, "+")


def sub(env: Environment, args: list[Value]) -> Value:
    return builtin_op(env, args, "-")


def mul(env: Environment, args: list[Value]) -> Value:
    return builtin_op(env, args, "*")


def div(env: Environment, args: list[Value]) -> Value:
    return builtin_op(env, args, "/")


def mod(env: Environment, args: list[Value]) -> Value:
    return builtin_op(env, args, "%")


def pow_(env: Environment, args: list[Value]) -> Value:
    return builtin_op(env, args, "^")


# -------------------------------
# Comparison
# -------------------------------
COMPARISONS: dict[str, Callable[[int, int], bool]] = {
    "<": lambda x, y: x < y,
    ">": lambda x, y: x > y,
    "=": lambda x, y: x == y,
    "!=": lambda x, y: x != y,
    ">=": lambda x, y: x >= y,
    "<=": lambda x, y: x <= y,
}


def builtin_comp(env: Environment, args: list[Value], comp: str) -> Value:
    """Compare exactly two Numbers."""
    if len(args) != 2:
        return _arity_error(f"Comparison expected 2 numbers, got {len(args)}.")
    x, y = args
    if not isinstance(x, Number) or not isinstance(y, Number):
        bad = y if isinstance(x, Number) else x
        return _bad_type(comp, bad)
    return Boolean(COMPARISONS[comp](x.value, y.value))


def lt(env: Environment, args: list[Value]) -> Value:
    return builtin_comp(env, args, "<")


def gt(env: Environment, args: list[Value]) -> Value:
    return builtin_comp(env, args, ">")


def neq(env: Environment, args: list[Value]) -> Value:
    return builtin_comp(env, args, "!=")


def gte(env: Environment, args: list[Value]) -> Value:
    return builtin_comp(env, args, ">=")


def lte(env: Environment, args: list[Value]) -> Value:
    return builtin_comp(env, args, "<=")


def eqv(env: Environment, args: list[Value]) -> Value:
    """(eqv? a b) -> #t when a and b are structurally equal."""
    if len(args) != 2:
        return _arity_error(f"'eqv?' expects 2 arguments, got {len(args)}.")
    return Boolean(args[0] == args[1])


# -------------------------------
# List operations
# -------------------------------
def _single_qexpr(name: str, args: list[Value], non_empty: bool = True) -> Error | None:
    if len(args) != 1:
        return _arity_error(f"Function '{name}' expects 1 argument, got {len(args)}!")
    if not isinstance(args[0], QuotedList):
        return _bad_type(name, args[0])
    if non_empty and not args[0].cells:
        return _type_error(f"Function '{name}' passed {{}}!")
    return None


def list_builtin(env: Environment, args: list[Value]) -> Value:
    """(list a b ...) -> {a b ...}"""
    return QuotedList(args)


def head(env: Environment, args: list[Value]) -> Value:
    """(head {a b c}) -> {a}"""
    err = _single_qexpr("head", args)
    if err is not None:
        return err
    return QuotedList(args[0].cells[:1])


def tail(env: Environment, args: list[Value]) -> Value:
    """(tail {a b c}) -> {b c}"""
    err = _single_qexpr("tail", args)
    if err is not None:
        return err
    return QuotedList(args[0].cells[1:])


def init(env: Environment, args: list[Value]) -> Value:
    """(init {a b c}) -> {a b}"""
    err = _single_qexpr("init", args)
    if err is not None:
        return err
    return QuotedList(args[0].cells[:-1])


def eval_builtin(env: Environment, args: list[Value]) -> LispValue:
    """(eval {expr}) evaluates the Q-expression as an S-expression in the caller's scope."""
    err = _single_qexpr("eval", args, non_empty=False)
    if err is not None:
        return err
    return evaluate(env, args[0].evaluable())


def join(env: Environment, args: list[Value]) -> Value:
    """Concatenate one or more Q-expressions."""
    if not args:
        return _arity_error("Function 'join' passed no arguments!")
    result: list[Value] = []
    for arg in args:
        if not isinstance(arg, QuotedList):
            return _bad_type("join", arg)
        result.extend(arg.cells)
    return QuotedList(result)


def cons(env: Environment, args: list[Value]) -> Value:
    """(cons x {a b}) -> {x a b}"""
    if len(args) != 2:
        return _arity_error("Function 'cons' should be passed two arguments!")
    first, rest = args
    if not isinstance(rest, QuotedList):
        return _bad_type("cons", rest)
    return QuotedList([first, *rest.cells])


# -------------------------------
# Definitions and functions
# -------------------------------
def builtin_var(env: Environment, args: list[Value], func: str) -> Value:
    """Bind each symbol of the leading Q-expression to the matching value."""
    if not args:
        return _arity_error(f"Function '{func}' passed no arguments!")
    syms = args[0]
    if not isinstance(syms, QuotedList):
        return _bad_type(func, syms)
    for sym in syms:
        if not isinstance(sym, Symbol):
            return _type_error(
                f"Function '{func}' cannot define non-symbol! Got {sym.type_name()}"
            )
    if len(syms) != len(args) - 1:
        return _arity_error(
            f"Function '{func}' cannot define incorrect number of values to symbols."
        )

    for sym, value in zip(syms, args[1:]):
        if func == "def":
            env.define_global(sym, value)
        else:
            env.define(sym, value)
    return EvaluableList()


def define(env: Environment, args: list[Value]) -> Value:
    """(def {a b} 1 2) binds a and b in the global scope."""
    return builtin_var(env, args, "def")


def put(env: Environment, args: list[Value]) -> Value:
    """(= {a} 1) binds a in the local scope."""
    return builtin_var(env, args, "=")


def equals(env: Environment, args: list[Value]) -> Value:
    """`=` is local definition when given a Q-expression of symbols, numeric equality otherwise."""
    if args and isinstance(args[0], QuotedList):
        return put(env, args)
    return builtin_comp(env, args, "=")


def lambda_builtin(env: Environment, args: list[Value]) -> Value:
    """(\\ {formals} {body}) -> a closure with a fresh, empty environment."""
    if len(args) != 2:
        return _arity_error("'\\' expects formals and a body.")
    formals, body = args
    if not isinstance(formals, QuotedList):
        return _bad_type("\\", formals)
    if not isinstance(body, QuotedList):
        return _bad_type("\\", body)
    for sym in formals:
        if not isinstance(sym, Symbol):
            return _type_error("Cannot define a non-symbol")
    return Closure(formals.clone(), body.clone())


def if_builtin(env: Environment, args: list[Value]) -> LispValue:
    """(if cond {then} {else}) evaluates only the selected branch."""
    if len(args) != 3:
        return _arity_error(f"Arity mismatch, 'if' expects 3 values but got {len(args)}")
    cond, then_branch, else_branch = args
    if not isinstance(cond, Boolean):
        return _bad_type("if", cond)
    for branch in (then_branch, else_branch):
        if not isinstance(branch, QuotedList):
            return _bad_type("if", branch)

    branch = then_branch if cond.value else else_branch
    return evaluate(env, branch.evaluable())


# -------------------------------
# Loading
# -------------------------------
def make_load(report: Reporter = print_error) -> BuiltinFn:
    """Build the `load` builtin, sending per-form errors to `report`."""

    def load(env: Environment, args: list[Value]) -> Value:
        """(load "file.lspy") evaluates each form of the file in the caller's scope."""
        if len(args) != 1:
            return _arity_error("'load' expects 1 argument.")
        if not isinstance(args[0], String):
            return _bad_type("load", args[0])
        return load_file(env, args[0].value, report)

    return load


def register(env: Environment, report: Reporter = print_error) -> None:
    """Register all builtin functions into the given environment."""
    env.update(
        {
            # List functions
            "cons": cons,
            "list": list_builtin,
            "head": head,
            "tail": tail,
            "eval": eval_builtin,
            "join": join,
            "init": init,
            # Variable functions
            "def": define,
            "=": equals,
            "\\": lambda_builtin,
            "if": if_builtin,
            # Mathematical functions
            "+": add,
            "-": sub,
            "*": mul,
            "/": div,
            "%": mod,
            "^": pow_,
            # Comparisons
            "eqv?": eqv,
            "<": lt,
            ">": gt,
            "!=": neq,
            ">=": gte,
            "<=": lte,
            "load": make_load(report),
        }
    )
