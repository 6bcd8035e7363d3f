from __future__ import annotations

import logging
from typing import Optional

from lispy import LispValue
from lispy.builtin.env_builtin import register
from lispy.errors import ErrorKind, LispySyntaxError
from lispy.evaluation.evaluator import evaluate
from lispy.modules.loader import Reporter, load_file, load_source, print_error
from lispy.reader.reader import read_source
from lispy.types.environment import Environment
from lispy.types.values import Error


class Interpreter:
    """
    Orchestrates reading and evaluating lispy code.
    Each instance owns its own root Environment, populated with the builtins.
    """

    def __init__(self, env: Optional[Environment] = None, report: Reporter = print_error):
        self._logger = logging.getLogger("Interpreter")
        self.env: Environment = env if env is not None else Environment()
        self.report = report
        register(self.env, report)

    def eval(self, code: str) -> LispValue:
        """Read the whole input as one S-expression and evaluate it.

        This is how a REPL line is treated: `+ 1 2` and `(+ 1 2)` both give 3.
        Malformed input yields a PARSE_FAILURE Error value.
        """
        try:
            expr = read_source(code)
        except LispySyntaxError as e:
            self._logger.debug("parse failure: %s", e)
            return Error(ErrorKind.PARSE_FAILURE, str(e))
        return evaluate(self.env, expr)

    def eval_prelude(self, code: str) -> LispValue:
        """Evaluate each top-level form of `code` in turn, reporting Errors."""
        return load_source(self.env, code, self.report)

    def load(self, path: str) -> LispValue:
        """Evaluate each top-level form of the file at `path`."""
        result = load_file(self.env, path, self.report)
        if isinstance(result, Error):
            self._logger.debug("could not load %s: %s", path, result.message)
        return result
