import pytest

from lispy.builtin.env_builtin import register
from lispy.evaluation.evaluator import evaluate
from lispy.reader.reader import read_source
from lispy.types.environment import Environment


@pytest.fixture
def env():
    """Fresh root environment with builtins loaded."""
    e = Environment()
    register(e)
    return e


@pytest.fixture
def run(env):
    """Evaluate every top-level form of a source string in `env`, returning the last result."""
    def _run(source: str):
        result = None
        for form in read_source(source):
            result = evaluate(env, form)
        return result
    return _run
