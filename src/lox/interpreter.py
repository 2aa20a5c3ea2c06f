from __future__ import annotations
import math
from dataclasses import dataclass
from typing import Any, Callable, List, Optional

from lox.ast_nodes import *
from lox.callables import LoxCallable, LoxFunction, builtins
from lox.environment import Environment
from lox.errors import FatalError, LoxRuntimeError
from lox.lexer import Token


@dataclass(frozen=True)
class Returning:
    """Result of executing a `return`; unwinds to the nearest call."""
    value: Any = None
    keyword: Optional[Token] = None


def is_truthy(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    return True


def is_equal(a: Any, b: Any) -> bool:
    # no coercion: true != 1, 1 != "1"
    if type(a) is not type(b):
        return False
    if isinstance(a, float) and math.isnan(a) and math.isnan(b):
        return True
    return a == b


def stringify(value: Any) -> str:
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value.is_integer():
            text = str(int(value))
            return "-0" if text == "0" and math.copysign(1.0, value) < 0 else text
        return repr(value)
    if isinstance(value, LoxCallable):
        return repr(value)
    return str(value)


def _check_number(operator: Token, *operands: Any):
    for operand in operands:
        if not isinstance(operand, float):
            if len(operands) == 1:
                raise LoxRuntimeError(operator, "Operand must be a number.")
            raise LoxRuntimeError(operator, "Operands must be numbers.")


def _divide(left: float, right: float) -> float:
    if right == 0.0:
        if left == 0.0 or math.isnan(left):
            return math.nan
        return math.copysign(math.inf, left) * math.copysign(1.0, right)
    return left / right


class Interpreter:
    def __init__(self, output: Callable[[str], None] = print):
        self.output = output
        self.globals = Environment(parent=None)
        for native in builtins():
            self.globals.define(native.name, native)

    def interpret(self, statements: List[Optional[Stmt]]) -> Optional[LoxRuntimeError]:
        """Executes top-level statements against the global scope.

        Returns the runtime error that stopped execution, or None. Running out
        of host stack raises FatalError.
        """
        try:
            for st in statements:
                if st is None:
                    continue
                result = self.execute(st, self.globals)
                if result is not None:
                    # a return only ever unwinds to a call
                    raise LoxRuntimeError(result.keyword, "Can't return from top-level code.")
        except LoxRuntimeError as e:
            return e
        except RecursionError:
            raise FatalError("Stack overflow.") from None
        return None

    # ---------- Statements ----------
    def execute(self, st: Stmt, env: Environment) -> Optional[Returning]:
        if isinstance(st, Expression):
            self.evaluate(st.expression, env)
        elif isinstance(st, Print):
            self.output(stringify(self.evaluate(st.expression, env)))
        elif isinstance(st, Var):
            value = None
            if st.initializer is not None:
                value = self.evaluate(st.initializer, env)
            env.define(st.name.lexeme, value)
        elif isinstance(st, Block):
            return self.execute_block(st.statements, env.child())
        elif isinstance(st, If):
            if is_truthy(self.evaluate(st.condition, env)):
                return self.execute(st.then_branch, env)
            if st.else_branch is not None:
                return self.execute(st.else_branch, env)
        elif isinstance(st, While):
            while is_truthy(self.evaluate(st.condition, env)):
                result = self.execute(st.body, env)
                if result is not None:
                    return result
        elif isinstance(st, Function):
            env.define(st.name.lexeme, LoxFunction(st, env))
        elif isinstance(st, Return):
            value = None
            if st.value is not None:
                value = self.evaluate(st.value, env)
            return Returning(value, st.keyword)
        else:
            raise TypeError(f"unknown statement {type(st).__name__}")
        return None

    def execute_block(self, statements: List[Optional[Stmt]], env: Environment) -> Optional[Returning]:
        for st in statements:
            if st is None:
                continue
            result = self.execute(st, env)
            if result is not None:
                return result
        return None

    def call_body(self, body: List[Optional[Stmt]], env: Environment) -> Any:
        result = self.execute_block(body, env)
        if result is None:
            return None
        return result.value

    # ---------- Expressions ----------
    def evaluate(self, e: Expr, env: Environment) -> Any:
        if isinstance(e, Literal):
            return e.value
        if isinstance(e, Grouping):
            return self.evaluate(e.expression, env)
        if isinstance(e, Variable):
            return env.get(e.name)
        if isinstance(e, Assign):
            value = self.evaluate(e.value, env)
            env.assign(e.name, value)
            return value
        if isinstance(e, Logical):
            left = self.evaluate(e.left, env)
            if e.operator.kind == "OR":
                if is_truthy(left):
                    return left
            elif not is_truthy(left):
                return left
            return self.evaluate(e.right, env)
        if isinstance(e, Unary):
            return self._unary(e, env)
        if isinstance(e, Binary):
            return self._binary(e, env)
        if isinstance(e, Call):
            return self._call(e, env)
        raise TypeError(f"unknown expression {type(e).__name__}")

    def _unary(self, e: Unary, env: Environment) -> Any:
        right = self.evaluate(e.right, env)
        if e.operator.kind == "BANG":
            return not is_truthy(right)
        _check_number(e.operator, right)
        return -right

    def _binary(self, e: Binary, env: Environment) -> Any:
        left = self.evaluate(e.left, env)
        right = self.evaluate(e.right, env)
        op = e.operator.kind

        if op == "EQUAL_EQUAL":
            return is_equal(left, right)
        if op == "BANG_EQUAL":
            return not is_equal(left, right)
        if op == "PLUS":
            if isinstance(left, float) and isinstance(right, float):
                return left + right
            if isinstance(left, str) and isinstance(right, str):
                return left + right
            raise LoxRuntimeError(e.operator, "Operands must be two numbers or two strings.")

        _check_number(e.operator, left, right)
        if op == "MINUS":
            return left - right
        if op == "STAR":
            return left * right
        if op == "SLASH":
            return _divide(left, right)
        if op == "GREATER":
            return left > right
        if op == "GREATER_EQUAL":
            return left >= right
        if op == "LESS":
            return left < right
        if op == "LESS_EQUAL":
            return left <= right
        raise LoxRuntimeError(e.operator, f"Unknown operator '{e.operator.lexeme}'.")

    def _call(self, e: Call, env: Environment) -> Any:
        callee = self.evaluate(e.callee, env)
        args = [self.evaluate(a, env) for a in e.arguments]

        if not isinstance(callee, LoxCallable):
            raise LoxRuntimeError(e.paren, f"Can only call functions; {stringify(callee)} is not callable.")
        if len(args) != callee.arity:
            raise LoxRuntimeError(e.paren, f"Expected {callee.arity} arguments but got {len(args)}.")
        return callee.call(self, args)
