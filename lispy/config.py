from __future__ import annotations
import os
from pathlib import Path
from typing import Iterable, List, Optional


# Defaults
_DEFAULT_LOAD_DIRS = [Path('.')]
_DEFAULT_LOG_LEVEL = 'WARNING'
_DEFAULT_PROMPT = 'lispy> '


def paths_from_env(var: str, defaults: Iterable[Path]) -> List[Path]:
    raw = os.environ.get(var)
    if not raw:
        return [Path(p) for p in defaults]
    return [Path(p.strip()) for p in raw.split(os.pathsep) if p.strip()]


def get_load_roots() -> List[Path]:
    """Directories searched, in order, for relative paths given to `load`."""
    return paths_from_env('LISPY_PATH', _DEFAULT_LOAD_DIRS)


def get_log_level() -> str:
    return os.environ.get('LISPY_LOG_LEVEL', _DEFAULT_LOG_LEVEL).upper()


def get_recursion_limit() -> Optional[int]:
    raw = os.environ.get('LISPY_RECURSION_LIMIT')
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"LISPY_RECURSION_LIMIT must be an integer, got {raw!r}") from None


def get_prompt() -> str:
    return os.environ.get('LISPY_PROMPT', _DEFAULT_PROMPT)
