"""Reader: turn a parser syntax tree into lispy values.

The tree is walked depth first. Comment, bracket and anchor nodes are skipped;
the root and every ``sexpr`` node become an EvaluableList, ``qexpr`` nodes a
QuotedList. Problems with literal text (a number that does not fit) become
PARSE_FAILURE Error values in place, they never abort the read.
"""

from __future__ import annotations

import re

from lispy.errors import ErrorKind
from lispy.reader import parser
from lispy.reader.parser import SyntaxNode
from lispy.types.symbol import Symbol
from lispy.types.values import (
    ESCAPES,
    Boolean,
    Error,
    EvaluableList,
    Number,
    QuotedList,
    String,
    Value,
)

# Numbers are signed 64-bit, as read by strtol on the platforms lispy grew up on.
NUMBER_MIN = -(2 ** 63)
NUMBER_MAX = 2 ** 63 - 1

_UNESCAPES: dict[str, str] = {v: k for k, v in ESCAPES.items()}
_ESCAPE_RE = re.compile(r"\\.", re.DOTALL)

SKIPPED_TAGS = frozenset({parser.COMMENT, parser.CHAR, parser.REGEX})


def unescape_string(text: str) -> str:
    """Replace backslash escapes; unknown escapes are kept as written."""
    return _ESCAPE_RE.sub(lambda m: _UNESCAPES.get(m.group(), m.group()), text)


def read_number(node: SyntaxNode) -> Value:
    try:
        x = int(node.contents, 10)
    except ValueError:
        return Error(ErrorKind.PARSE_FAILURE, "invalid number")
    if not NUMBER_MIN <= x <= NUMBER_MAX:
        return Error(ErrorKind.PARSE_FAILURE, "invalid number")
    return Number(x)


def read_string(node: SyntaxNode) -> Value:
    # Cut off the surrounding quote characters
    return String(unescape_string(node.contents[1:-1]))


def read(node: SyntaxNode) -> Value:
    """Convert one syntax node (and its children) into a value."""
    match node.tag:
        case parser.NUMBER:
            return read_number(node)
        case parser.BOOLEAN:
            return Boolean(node.contents == "#t")
        case parser.SYMBOL:
            return Symbol(node.contents)
        case parser.STRING:
            return read_string(node)
        case parser.QEXPR:
            return QuotedList(_read_children(node))
        case parser.ROOT | parser.SEXPR:
            return EvaluableList(_read_children(node))
    raise ValueError(f"Cannot read syntax node tagged {node.tag!r}")


def _read_children(node: SyntaxNode) -> list[Value]:
    return [read(child) for child in node.children if child.tag not in SKIPPED_TAGS]


def read_source(source: str) -> EvaluableList:
    """Parse and read a whole input; raises LispySyntaxError on malformed text."""
    return read(parser.parse(source))
