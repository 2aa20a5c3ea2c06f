from __future__ import annotations
import time
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Callable, List

from lox.ast_nodes import Function
from lox.environment import Environment

if TYPE_CHECKING:
    from lox.interpreter import Interpreter


class LoxCallable(ABC):
    """Anything a Lox call expression can invoke."""

    @property
    @abstractmethod
    def arity(self) -> int:
        ...

    @abstractmethod
    def call(self, interpreter: Interpreter, arguments: List[Any]) -> Any:
        ...


class LoxFunction(LoxCallable):
    """A user function paired with the scope it was declared in."""

    def __init__(self, declaration: Function, closure: Environment):
        self.declaration = declaration
        self.closure = closure
        self._arity = len(declaration.params)

    @property
    def arity(self) -> int:
        return self._arity

    def call(self, interpreter, arguments):
        # parent is the captured scope, not the caller's
        env = Environment(parent=self.closure)
        for param, arg in zip(self.declaration.params, arguments):
            env.define(param.lexeme, arg)
        return interpreter.call_body(self.declaration.body, env)

    def __repr__(self):
        return f"<fn {self.declaration.name.lexeme}>"


class NativeFunction(LoxCallable):
    def __init__(self, name: str, arity: int, fn: Callable[..., Any]):
        self.name = name
        self._arity = arity
        self.fn = fn

    @property
    def arity(self) -> int:
        return self._arity

    def call(self, interpreter, arguments):
        return self.fn(*arguments)

    def __repr__(self):
        return "<native fn>"


def clock() -> NativeFunction:
    return NativeFunction("clock", 0, lambda: time.time())


def builtins() -> List[NativeFunction]:
    """Natives installed into every interpreter's global scope."""
    return [clock()]
