from enum import Enum


class ErrorKind(Enum):
    """ Category carried by every Error value"""
    UNBOUND_SYMBOL = "unbound-symbol"
    ARITY_MISMATCH = "arity-mismatch"
    TYPE_MISMATCH = "type-mismatch"
    DIVISION_BY_ZERO = "division-by-zero"
    MALFORMED_SPECIAL_FORM = "malformed-special-form"
    PARSE_FAILURE = "parse-failure"


class LispyError(Exception):
    """ Base class for host-side lispy failures"""
    pass

class LispySyntaxError(LispyError):
    """ Raised by the parser when source text does not match the grammar"""

    def __init__(self, message: str, position: int | None = None):
        self.message = message
        self.position = position
        if position is not None:
            message = f"{message} at offset {position}"
        super().__init__(message)
