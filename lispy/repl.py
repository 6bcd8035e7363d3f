"""Interactive read-eval-print loop and command line entry point."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Callable, Optional, Sequence

from lispy import __version__
from lispy.config import get_log_level, get_prompt, get_recursion_limit
from lispy.interpreter import Interpreter
from lispy.types.values import Error

_logger = logging.getLogger("Repl")

RECURSION_MESSAGE = "Error: maximum recursion depth exceeded"


def repl(
    interp: Interpreter,
    read_line: Callable[[str], str] = input,
    prompt: Optional[str] = None,
) -> None:
    """Read lines until end of input, printing each result.

    Errors are printed like any other value and never end the session.
    """
    if prompt is None:
        prompt = get_prompt()
    while True:
        try:
            line = read_line(prompt)
        except EOFError:
            print()
            break
        if not line.strip():
            continue
        try:
            result = interp.eval(line)
        except RecursionError:
            _logger.debug("maximum recursion depth exceeded evaluating %r", line)
            print(RECURSION_MESSAGE)
            continue
        print(result)


def _enable_line_editing() -> None:
    try:
        import readline  # noqa: F401  (installs line editing for input())
    except ImportError:
        _logger.debug("readline not available, line editing disabled")


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="lispy", description="lispy interpreter")
    parser.add_argument("files", nargs="*", help="source files to load before the prompt")
    parser.add_argument(
        "--no-repl",
        action="store_true",
        help="exit after loading the given files",
    )
    parser.add_argument("--version", action="version", version=f"lispy {__version__}")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)

    logging.basicConfig(level=get_log_level(), format="%(name)s: %(levelname)s: %(message)s")
    limit = get_recursion_limit()
    if limit is not None:
        sys.setrecursionlimit(limit)

    interp = Interpreter()

    if not args.no_repl:
        print(f"lispy Version {__version__}")
        print("Press Ctrl+c to Exit\n")

    status = 0
    for path in args.files:
        try:
            result = interp.load(path)
        except RecursionError:
            _logger.debug("maximum recursion depth exceeded loading %s", path)
            print(RECURSION_MESSAGE)
            status = 1
            continue
        if isinstance(result, Error):
            print(result)
            status = 1

    if args.no_repl:
        return status

    _enable_line_editing()
    try:
        repl(interp)
    except KeyboardInterrupt:
        print()
    return 0
