"""Runtime values for lispy.

Every datum the evaluator touches is one of a closed set of variants:

    Number, Boolean, String, Symbol, Error,
    EvaluableList  ``( ... )``  evaluated when reduced,
    QuotedList     ``{ ... }``  self-evaluating data (also lambda formals/bodies),
    Builtin / Closure           the two kinds of Function.

Values are immutable once built. ``clone`` is the copy taken at every storage
boundary (argument binding, definition, environment copy); atoms have no
mutable state and clone to themselves, lists copy their cells and closures
copy their captured environment. ``__eq__`` is structural, ``__str__`` renders
the value the way the REPL prints it.
"""

from __future__ import annotations

from io import StringIO
from typing import Iterator

from lispy import BuiltinFn
from lispy.errors import ErrorKind


# C-style escapes understood by string literals, in both directions.
ESCAPES: dict[str, str] = {
    "\a": "\\a",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\v": "\\v",
    "\\": "\\\\",
    "'": "\\'",
    '"': '\\"',
    "\0": "\\0",
}


def escape_string(text: str) -> str:
    return "".join(ESCAPES.get(ch, ch) for ch in text)


class Value:
    """Common base for every runtime value."""

    __slots__ = ()

    def clone(self) -> Value:
        return self

    def type_name(self) -> str:
        return type(self).__name__.lower()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self)!r})"


class Number(Value):
    __slots__ = ("value",)

    def __init__(self, value: int):
        self.value: int = value

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Number) and self.value == other.value

    def __hash__(self) -> int:
        return hash(("number", self.value))

    def __str__(self) -> str:
        return str(self.value)


class Boolean(Value):
    __slots__ = ("value",)

    def __init__(self, value: bool):
        self.value: bool = bool(value)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Boolean) and self.value == other.value

    def __hash__(self) -> int:
        return hash(("boolean", self.value))

    def __str__(self) -> str:
        return "#t" if self.value else "#f"


class String(Value):
    __slots__ = ("value",)

    def __init__(self, value: str):
        self.value: str = value

    def __eq__(self, other: object) -> bool:
        return isinstance(other, String) and self.value == other.value

    def __hash__(self) -> int:
        return hash(("string", self.value))

    def __str__(self) -> str:
        return f'"{escape_string(self.value)}"'


class Error(Value):
    """An error is an ordinary value: it is returned, never raised."""

    __slots__ = ("kind", "message")

    def __init__(self, kind: ErrorKind, message: str):
        self.kind: ErrorKind = kind
        self.message: str = message

    def __eq__(self, other: object) -> bool:
        return (
            isinstance(other, Error)
            and self.kind == other.kind
            and self.message == other.message
        )

    def __hash__(self) -> int:
        return hash(("error", self.kind, self.message))

    def __str__(self) -> str:
        return f"Error: {self.message}"

    def __repr__(self) -> str:
        return f"Error({self.kind.name}, {self.message!r})"


class ListValue(Value):
    """Shared behaviour of the two list flavours."""

    __slots__ = ("cells",)

    OPEN = ""
    CLOSE = ""

    def __init__(self, cells: list[Value] | None = None):
        self.cells: list[Value] = list(cells) if cells is not None else []

    def __len__(self) -> int:
        return len(self.cells)

    def __iter__(self) -> Iterator[Value]:
        return iter(self.cells)

    def __eq__(self, other: object) -> bool:
        if type(self) is not type(other):
            return False
        if len(self.cells) != len(other.cells):
            return False
        return all(x == y for x, y in zip(self.cells, other.cells))

    __hash__ = None  # type: ignore[assignment]

    def clone(self) -> ListValue:
        return type(self)([cell.clone() for cell in self.cells])

    def __str__(self) -> str:
        with StringIO() as buffer:
            buffer.write(self.OPEN)
            buffer.write(" ".join(str(cell) for cell in self.cells))
            buffer.write(self.CLOSE)
            return buffer.getvalue()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.cells!r})"


class EvaluableList(ListValue):
    """S-expression: its cells are evaluated and the first one applied."""

    __slots__ = ()

    OPEN = "("
    CLOSE = ")"

    def type_name(self) -> str:
        return "s-expression"


class QuotedList(ListValue):
    """Q-expression: literal list data, returned unevaluated."""

    __slots__ = ()

    OPEN = "{"
    CLOSE = "}"

    def type_name(self) -> str:
        return "q-expression"

    def evaluable(self) -> EvaluableList:
        return EvaluableList(self.cells)


class Function(Value):
    __slots__ = ()

    def type_name(self) -> str:
        return "function"


class Builtin(Function):
    """A native operation. Two builtins are equal when they wrap the same callable."""

    __slots__ = ("name", "fn")

    def __init__(self, name: str, fn: BuiltinFn):
        self.name: str = name
        self.fn: BuiltinFn = fn

    def call(self, env, args: list[Value]) -> Value:
        return self.fn(env, args)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Builtin) and self.fn is other.fn

    def __hash__(self) -> int:
        return id(self.fn)

    def __str__(self) -> str:
        return "<builtin>"

    def __repr__(self) -> str:
        return f"Builtin({self.name!r})"
