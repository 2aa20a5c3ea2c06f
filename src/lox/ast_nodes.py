from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, List, Optional

from lox.lexer import Token

# Nodes are frozen once the parser builds them. A function body list is shared
# by the declaration and every closure made from it, and is only ever read.

# ---------- Expressions ----------
class Expr: ...

@dataclass(frozen=True)
class Literal(Expr):
    value: Any = None

@dataclass(frozen=True)
class Grouping(Expr):
    expression: Expr = None

@dataclass(frozen=True)
class Unary(Expr):
    operator: Token = None
    right: Expr = None

@dataclass(frozen=True)
class Binary(Expr):
    left: Expr = None
    operator: Token = None
    right: Expr = None

@dataclass(frozen=True)
class Logical(Expr):
    left: Expr = None
    operator: Token = None
    right: Expr = None

@dataclass(frozen=True)
class Variable(Expr):
    name: Token = None

@dataclass(frozen=True)
class Assign(Expr):
    name: Token = None
    value: Expr = None

@dataclass(frozen=True)
class Call(Expr):
    callee: Expr = None
    paren: Token = None
    arguments: List[Expr] = field(default_factory=list)

# ---------- Statements ----------
class Stmt: ...

@dataclass(frozen=True)
class Expression(Stmt):
    expression: Expr = None

@dataclass(frozen=True)
class Print(Stmt):
    expression: Expr = None

@dataclass(frozen=True)
class Var(Stmt):
    name: Token = None
    initializer: Optional[Expr] = None

@dataclass(frozen=True)
class Block(Stmt):
    # None marks a member that failed to parse
    statements: List[Optional[Stmt]] = field(default_factory=list)

@dataclass(frozen=True)
class If(Stmt):
    condition: Expr = None
    then_branch: Stmt = None
    else_branch: Optional[Stmt] = None

@dataclass(frozen=True)
class While(Stmt):
    condition: Expr = None
    body: Stmt = None

@dataclass(frozen=True)
class Function(Stmt):
    name: Token = None
    params: List[Token] = field(default_factory=list)
    body: List[Optional[Stmt]] = field(default_factory=list)

@dataclass(frozen=True)
class Return(Stmt):
    keyword: Token = None
    value: Optional[Expr] = None
