"""Source file loading.

A file is parsed as a whole and its top-level forms are evaluated one by one
in the target environment. A form that evaluates to an Error is reported and
loading moves on to the next form; only a file that cannot be read or parsed
fails the load as a whole.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Optional

from lispy.config import get_load_roots
from lispy.errors import ErrorKind, LispySyntaxError
from lispy.evaluation.evaluator import evaluate
from lispy.reader.reader import read_source
from lispy.types.environment import Environment
from lispy.types.values import Error, EvaluableList, Value

Reporter = Callable[[Error], None]

_logger = logging.getLogger("Loader")


def print_error(err: Error) -> None:
    print(err)


def resolve_path(name: str) -> Optional[Path]:
    """Find `name` as given, or underneath one of the LISPY_PATH roots."""
    path = Path(name)
    if path.is_absolute():
        return path if path.is_file() else None
    for root in get_load_roots():
        candidate = root / path
        if candidate.is_file():
            return candidate
    return None


def load_source(env: Environment, source: str, report: Reporter = print_error) -> Value:
    """Evaluate every top-level form of `source` in `env`."""
    try:
        forms = read_source(source)
    except LispySyntaxError as e:
        return Error(ErrorKind.PARSE_FAILURE, f"Could not load Library {e}")

    for form in forms:
        result = evaluate(env, form)
        if isinstance(result, Error):
            _logger.debug("form %s failed: %s", form, result.message)
            report(result)

    return EvaluableList()


def load_file(env: Environment, name: str, report: Reporter = print_error) -> Value:
    """Read the file called `name` and evaluate its forms in `env`."""
    path = resolve_path(name)
    if path is None:
        return Error(ErrorKind.PARSE_FAILURE, f"Could not load Library {name}: file not found")

    try:
        source = path.read_text(encoding='utf-8')
    except (OSError, UnicodeDecodeError) as e:
        return Error(ErrorKind.PARSE_FAILURE, f"Could not load Library {name}: {e}")

    _logger.debug("loading %s", path)
    return load_source(env, source, report)
