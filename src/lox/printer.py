"""Debug rendering of syntax trees.

AstPrinter gives the parenthesised form used by the `--ast` CLI mode;
unparse gives back Lox source for an expression.
"""

from __future__ import annotations
from decimal import Decimal
from typing import List, Optional

from lox.ast_nodes import *


def _literal(value) -> str:
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        # plain digits, the lexer has no exponent syntax
        return format(Decimal(repr(value)), "f")
    return str(value)


class AstPrinter:
    def print(self, node) -> str:
        if isinstance(node, Stmt):
            return self.stmt(node)
        return self.expr(node)

    def expr(self, e: Expr) -> str:
        if isinstance(e, Literal):
            if isinstance(e.value, str):
                return f'"{e.value}"'
            return _literal(e.value)
        if isinstance(e, Grouping):
            return self.parenthesize("group", e.expression)
        if isinstance(e, Unary):
            return self.parenthesize(e.operator.lexeme, e.right)
        if isinstance(e, (Binary, Logical)):
            return self.parenthesize(e.operator.lexeme, e.left, e.right)
        if isinstance(e, Variable):
            return e.name.lexeme
        if isinstance(e, Assign):
            return f"(= {e.name.lexeme} {self.expr(e.value)})"
        if isinstance(e, Call):
            return self.parenthesize("call", e.callee, *e.arguments)
        raise TypeError(f"unknown expression {type(e).__name__}")

    def stmt(self, st: Optional[Stmt]) -> str:
        if st is None:
            return "(error)"
        if isinstance(st, Expression):
            return self.parenthesize(";", st.expression)
        if isinstance(st, Print):
            return self.parenthesize("print", st.expression)
        if isinstance(st, Var):
            if st.initializer is None:
                return f"(var {st.name.lexeme})"
            return f"(var {st.name.lexeme} {self.expr(st.initializer)})"
        if isinstance(st, Block):
            return self._block("block", st.statements)
        if isinstance(st, If):
            parts = [self.expr(st.condition), self.stmt(st.then_branch)]
            if st.else_branch is not None:
                parts.append(self.stmt(st.else_branch))
            return f"(if {' '.join(parts)})"
        if isinstance(st, While):
            return f"(while {self.expr(st.condition)} {self.stmt(st.body)})"
        if isinstance(st, Function):
            params = " ".join(p.lexeme for p in st.params)
            return self._block(f"fun {st.name.lexeme} ({params})", st.body)
        if isinstance(st, Return):
            if st.value is None:
                return "(return)"
            return self.parenthesize("return", st.value)
        raise TypeError(f"unknown statement {type(st).__name__}")

    def _block(self, head: str, statements: List[Optional[Stmt]]) -> str:
        inner = "".join(" " + self.stmt(s) for s in statements)
        return f"({head}{inner})"

    def parenthesize(self, name: str, *exprs: Expr) -> str:
        inner = "".join(" " + self.expr(e) for e in exprs)
        return f"({name}{inner})"


def unparse(e: Expr) -> str:
    """Renders an expression as Lox source that parses back to the same tree."""
    if isinstance(e, Literal):
        if isinstance(e.value, str):
            return f'"{e.value}"'
        return _literal(e.value)
    if isinstance(e, Grouping):
        return f"({unparse(e.expression)})"
    if isinstance(e, Unary):
        return f"{e.operator.lexeme}{unparse(e.right)}"
    if isinstance(e, (Binary, Logical)):
        return f"{unparse(e.left)} {e.operator.lexeme} {unparse(e.right)}"
    if isinstance(e, Variable):
        return e.name.lexeme
    if isinstance(e, Assign):
        return f"{e.name.lexeme} = {unparse(e.value)}"
    if isinstance(e, Call):
        args = ", ".join(unparse(a) for a in e.arguments)
        return f"{unparse(e.callee)}({args})"
    raise TypeError(f"unknown expression {type(e).__name__}")
