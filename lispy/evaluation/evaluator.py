"""Core evaluator for the lispy interpreter.

Plain recursive evaluation: symbols are looked up, S-expressions are reduced,
everything else evaluates to itself. There is no trampoline, so every closure
application costs Python stack frames.
"""

from __future__ import annotations

from lispy import LispValue
from lispy.evaluation.apply import apply
from lispy.types.environment import Environment
from lispy.types.symbol import Symbol
from lispy.types.values import Error, EvaluableList, Value


def evaluate(env: Environment, expr: Value) -> LispValue:
    """Evaluate `expr` in `env` and return the resulting value (possibly an Error)."""
    match expr:
        case Symbol():
            return env.lookup(expr)
        case EvaluableList():
            return evaluate_sexpr(env, expr)

    # --- Atoms, Q-expressions, functions and errors return as-is ---
    return expr


def evaluate_sexpr(env: Environment, expr: EvaluableList) -> LispValue:
    # Evaluate every child first, in order; side effects happen left to right
    cells = [evaluate(env, cell) for cell in expr.cells]

    # The first error wins, later ones are discarded
    for cell in cells:
        if isinstance(cell, Error):
            return cell

    if not cells:
        return expr

    if len(cells) == 1:
        return cells[0]

    head, *args = cells
    return apply(head, args, env, evaluate)
