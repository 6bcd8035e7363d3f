r"""
  Lexer and parser for lispy source text.

- Streaming lexer yielding (token_type, token_text) pairs
- Parser emits a tagged syntax tree, not runtime values:

    - every node is a SyntaxNode(tag, contents, children)
    - terminals carry their literal text: number, string, boolean, symbol, comment
    - ( ... ) -> "sexpr" node, { ... } -> "qexpr" node
    - brackets are kept as "char" children, the whole input is a ">" root node
      wrapped in two empty "regex" anchor nodes

  The tree keeps everything the source had (comments and punctuation included);
  lispy.reader.reader decides what matters when it builds values.

  Grammar, alternatives tried in order at each position:

    number   : /-?[0-9]+/
    string   : /"(\\.|[^"])*"/
    comment  : /;[^\r\n]*/
    boolean  : /#[tf]/
    symbol   : /[\^%a-zA-Z0-9_+\-*\/\\=<>!&?]+/
    sexpr    : '(' <expr>* ')'
    qexpr    : '{' <expr>* '}'
    lispy    : /^/ <expr>* /$/
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterator, Optional, Iterable

from lispy.errors import LispySyntaxError


# Node tags
ROOT = ">"
NUMBER = "number"
STRING = "string"
BOOLEAN = "boolean"
SYMBOL = "symbol"
COMMENT = "comment"
SEXPR = "sexpr"
QEXPR = "qexpr"
CHAR = "char"
REGEX = "regex"


TOKEN_RE = re.compile(
    r"(?P<number>-?[0-9]+)"
    r'|(?P<string>"(?:\\.|[^\\"])*")'
    r"|(?P<comment>;[^\r\n]*)"
    r"|(?P<boolean>#[tf])"
    r"|(?P<symbol>[\^%a-zA-Z0-9_+\-*/\\=<>!&?]+)"
    r"|(?P<lparen>\()"
    r"|(?P<rparen>\))"
    r"|(?P<lbrace>\{)"
    r"|(?P<rbrace>\})",
    re.DOTALL,
)

WHITESPACE_RE = re.compile(r"\s+")

CLOSERS: dict[str, str] = {"lparen": "rparen", "lbrace": "rbrace"}
LIST_TAGS: dict[str, str] = {"lparen": SEXPR, "lbrace": QEXPR}


@dataclass
class SyntaxNode:
    """One node of the syntax tree; `contents` is empty for interior nodes."""
    tag: str
    contents: str = ""
    children: list[SyntaxNode] = field(default_factory=list)
    position: int = 0

    def __str__(self) -> str:
        if self.children:
            children_str = " ".join(str(child) for child in self.children)
            return f"{self.tag}[{children_str}]"
        return f"{self.tag}:{self.contents!r}"


def lex(source: str) -> Iterator[tuple[str, str, int]]:
    """Token generator: yields (token_type, token_text, offset) tuples."""
    pos = 0
    n = len(source)
    while pos < n:
        ws = WHITESPACE_RE.match(source, pos)
        if ws:
            pos = ws.end()
            continue
        m = TOKEN_RE.match(source, pos)
        if not m:
            if source[pos] == '"':
                raise LispySyntaxError("Unterminated string literal", pos)
            raise LispySyntaxError(f"Unexpected character {source[pos]!r}", pos)
        yield m.lastgroup, m.group(), pos
        pos = m.end()


class TokenStream:
    def __init__(self, token_iter: Iterable[tuple[str, str, int]]):
        self.tokens = iter(token_iter)
        self.buffer: list[tuple[str, str, int]] = []

    def peek(self) -> tuple[Optional[str], Optional[str], int]:
        if not self.buffer:
            try:
                self.buffer.append(next(self.tokens))
            except StopIteration:
                return None, None, -1
        return self.buffer[0]

    def advance(self) -> tuple[Optional[str], Optional[str], int]:
        if self.buffer:
            return self.buffer.pop(0)
        return next(self.tokens, (None, None, -1))

    def parse_expr(self) -> Optional[SyntaxNode]:
        """Parse one expression; returns None at end of input."""
        tok_type, tok_val, pos = self.peek()
        if tok_type is None:
            return None

        if tok_type in (NUMBER, STRING, COMMENT, BOOLEAN, SYMBOL):
            self.advance()
            return SyntaxNode(tok_type, tok_val, position=pos)

        if tok_type in LIST_TAGS:
            self.advance()
            node = SyntaxNode(LIST_TAGS[tok_type], position=pos)
            node.children.append(SyntaxNode(CHAR, tok_val, position=pos))
            closer = CLOSERS[tok_type]
            while True:
                next_type, next_val, next_pos = self.peek()
                if next_type is None:
                    raise LispySyntaxError(f"Unmatched '{tok_val}'", pos)
                if next_type == closer:
                    self.advance()
                    node.children.append(SyntaxNode(CHAR, next_val, position=next_pos))
                    return node
                node.children.append(self.parse_expr())

        raise LispySyntaxError(f"Unexpected '{tok_val}'", pos)

    def parse_all(self) -> Iterator[SyntaxNode]:
        while (node := self.parse_expr()) is not None:
            yield node


def parse(source: str) -> SyntaxNode:
    """Parse a whole input into a root node holding every top-level expression."""
    root = SyntaxNode(ROOT)
    root.children.append(SyntaxNode(REGEX))
    root.children.extend(TokenStream(lex(source)).parse_all())
    root.children.append(SyntaxNode(REGEX, position=len(source)))
    return root
