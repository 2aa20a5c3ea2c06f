from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from lox.errors import LoxRuntimeError
from lox.lexer import Token


@dataclass(eq=False)
class Environment:
    """One lexical scope. Closures keep a reference to the scope they were
    declared in, so a scope lives as long as its longest holder."""
    parent: Optional["Environment"] = None
    values: Dict[str, Any] = field(default_factory=dict)

    def define(self, name: str, value: Any):
        # redefinition in the same scope is allowed
        self.values[name] = value

    def get(self, name: Token) -> Any:
        cur = self
        while cur:
            if name.lexeme in cur.values:
                return cur.values[name.lexeme]
            cur = cur.parent
        raise LoxRuntimeError(name, f"Undefined variable '{name.lexeme}'.")

    def assign(self, name: Token, value: Any):
        cur = self
        while cur:
            if name.lexeme in cur.values:
                cur.values[name.lexeme] = value
                return
            cur = cur.parent
        raise LoxRuntimeError(name, f"Undefined variable '{name.lexeme}'.")

    def child(self) -> "Environment":
        return Environment(parent=self)
