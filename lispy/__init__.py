# Core type aliases for lispy's data model.
#
# Every runtime datum is an instance of one of the classes in lispy.types.values.
# Syntax trees produced by the parser (lispy.reader.parser) are converted into
# those values by the reader before evaluation, so code and data share one model.
#
# Naming guidance:
# - LispValue:   a runtime value (result of reading or evaluation).
# - BuiltinFn:   the native-operation protocol, fn(env, args) -> LispValue.
# - EvaluatorFn: evaluate(env, value) -> LispValue, passed to the apply engine.

from typing import Any, Callable

LispValue = Any

BuiltinFn = Callable[..., LispValue]

EvaluatorFn = Callable[..., LispValue]

__version__ = "0.0.10"
