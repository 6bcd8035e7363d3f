"""User-defined function (closure) representation for lispy."""

from __future__ import annotations

from io import StringIO

from lispy.types.environment import Environment
from lispy.types.values import Function, QuotedList


class Closure(Function):
    """A first-class lambda with formal parameters, body, and its own environment.

    The environment is owned by the closure: it starts empty, accumulates the
    bindings of a partial application, and is copied whenever the closure is
    cloned. Equality ignores the environment.
    """

    __slots__ = ("formals", "body", "env")

    def __init__(
        self, formals: QuotedList, body: QuotedList, env: Environment | None = None
    ):
        self.formals: QuotedList = formals
        self.body: QuotedList = body
        # Avoid shared default Environment across instances
        self.env: Environment = env if env is not None else Environment()

    def clone(self) -> Closure:
        return Closure(self.formals.clone(), self.body.clone(), self.env.copy())

    def __eq__(self, other: object) -> bool:
        return (
            isinstance(other, Closure)
            and self.formals == other.formals
            and self.body == other.body
        )

    __hash__ = None  # type: ignore[assignment]

    def __str__(self) -> str:
        with StringIO() as buffer:
            buffer.write("(\\ ")
            buffer.write(str(self.formals))
            buffer.write(" ")
            buffer.write(str(self.body))
            buffer.write(")")
            return buffer.getvalue()

    def __repr__(self) -> str:
        return str(self)
