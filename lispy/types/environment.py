"""Runtime environment for lispy.

The Environment stores ordered, unique bindings of Symbols to values and links
to a parent scope through `outer`. Values are cloned on the way in and on the
way out, so no caller ever holds a live alias into a scope.

The parent link is not ownership: an environment never frees or copies its
parent, and a closure's invocation environment is re-parented onto the
caller's environment for the duration of a call.
"""

from __future__ import annotations

from io import StringIO
from typing import Optional

from lispy import BuiltinFn
from lispy.errors import ErrorKind
from lispy.types.symbol import Symbol
from lispy.types.values import Builtin, Error, Value


class Environment:
    """Hierarchical mapping from Symbols to lispy values."""

    __slots__ = ("vars", "outer")

    def __init__(self, outer: Optional[Environment] = None):
        # dicts keep insertion order, which is the binding order
        self.vars: dict[Symbol, Value] = {}
        self.outer: Environment | None = outer

    def define(self, name: Symbol, value: Value) -> None:
        """Bind `name` to a clone of `value` in this scope, replacing any existing binding."""
        self.vars[name] = value.clone()

    def define_global(self, name: Symbol, value: Value) -> None:
        """Bind `name` in the root (parentless) environment of this chain."""
        self.root().define(name, value)

    def root(self) -> Environment:
        env = self
        while env.outer is not None:
            env = env.outer
        return env

    def find(self, symbol: Symbol) -> Optional[Environment]:
        """Find the nearest environment in the chain that binds `symbol`."""
        env: Optional[Environment] = self
        while env is not None:
            if symbol in env.vars:
                return env
            env = env.outer
        return None

    def lookup(self, name: Symbol) -> Value:
        """Return a clone of the value bound to `name`.

        An unbound name is not an exception: the result is an UNBOUND_SYMBOL Error.
        """
        env = self.find(name)
        if env is None:
            return Error(ErrorKind.UNBOUND_SYMBOL, f"unbound symbol '{name}'!")
        return env.vars[name].clone()

    def copy(self) -> Environment:
        """Independent environment with the same parent and cloned bindings."""
        new_env = Environment(self.outer)
        for k, v in self.vars.items():
            new_env.vars[k] = v.clone()
        return new_env

    def register(self, name: str, fn: BuiltinFn) -> None:
        """Install a native operation under `name` in this scope."""
        self.vars[Symbol(name)] = Builtin(name, fn)

    def update(self, mapping: dict[str, BuiltinFn]) -> None:
        """Bulk-register native operations in the current frame."""
        for name, fn in mapping.items():
            self.register(name, fn)

    def __contains__(self, name: Symbol) -> bool:
        return self.find(name) is not None

    def __len__(self) -> int:
        return len(self.vars)

    def _write_vars(self, buffer: StringIO) -> None:
        """Write this frame's variables into the buffer in a compact form."""
        buffer.write("{")
        buffer.write(", ".join(f"{k}: {v}" for k, v in self.vars.items()))
        buffer.write("}")

    def __str__(self) -> str:
        """Human-readable single-frame view with an indicator for parent."""
        with StringIO() as buffer:
            self._write_vars(buffer)
            if self.outer is not None:
                buffer.write(" -> ...")  # indicate parent exists
            return buffer.getvalue()

    def __repr__(self) -> str:
        """Detailed chain representation for debugging purposes."""
        chain = []
        env: Optional[Environment] = self
        while env is not None:
            with StringIO() as env_buf:
                env._write_vars(env_buf)
                chain.append(env_buf.getvalue())
            env = env.outer
        return "<Environment chain: " + " -> ".join(chain) + ">"
