from __future__ import annotations
from typing import Callable, List, Optional

from lox.ast_nodes import *
from lox.errors import FatalError, StaticError
from lox.lexer import Token

MAX_ARGS = 255

# Tokens that begin a new declaration or statement; recovery stops in front of them.
STATEMENT_STARTS = ("CLASS", "FUN", "VAR", "FOR", "IF", "WHILE", "PRINT", "RETURN")


class ParseError(Exception):
    def __init__(self, message: str, token: Token):
        super().__init__(f"ParseError at line {token.line} - {message}")
        self.message = message
        self.token = token


class TokenStream:
    """Cursor over a token list that always ends with an EOF token."""

    def __init__(self, tokens: List[Token]):
        self.tokens = tokens
        self.i = 0

    def peek(self) -> Token:
        return self.tokens[self.i]

    def previous(self) -> Token:
        return self.tokens[self.i - 1]

    def at_end(self) -> bool:
        return self.peek().kind == "EOF"

    def advance(self) -> Token:
        if not self.at_end():
            self.i += 1
        return self.previous()

    def check(self, kind: str) -> bool:
        if self.at_end():
            return False
        return self.peek().kind == kind

    def match(self, *kinds: str) -> Optional[Token]:
        for kind in kinds:
            if self.check(kind):
                return self.advance()
        return None


def _where(token: Token) -> str:
    if token.kind == "EOF":
        return " at end"
    return f" at '{token.lexeme}'"


class Parser:
    def __init__(self, tokens: List[Token]):
        self.ts = TokenStream(tokens)
        self.errors: List[StaticError] = []
        self.function_depth = 0

    def parse(self) -> List[Optional[Stmt]]:
        """Parses declarations until EOF. A declaration that failed to parse
        leaves None in its slot; the error is recorded on self.errors.
        Input nested deeper than the host stack allows raises FatalError."""
        statements: List[Optional[Stmt]] = []
        try:
            while not self.ts.at_end():
                statements.append(self.declaration())
        except RecursionError:
            raise FatalError("Stack overflow while parsing.") from None
        return statements

    def parse_expression(self) -> Optional[Expr]:
        """Parses a single expression that must span the whole token list."""
        try:
            expr = self.expression()
            if not self.ts.at_end():
                raise self.error(self.ts.peek(), "Expect end of expression.")
            return expr
        except ParseError:
            return None
        except RecursionError:
            raise FatalError("Stack overflow while parsing.") from None

    # ---------------- errors ----------------
    def error(self, token: Token, message: str) -> ParseError:
        self.errors.append(StaticError("parse", message, token.line, _where(token)))
        return ParseError(message, token)

    def expect(self, kind: str, message: str) -> Token:
        if self.ts.check(kind):
            return self.ts.advance()
        raise self.error(self.ts.peek(), message)

    def synchronize(self):
        self.ts.advance()
        while not self.ts.at_end():
            if self.ts.previous().kind == "SEMICOLON":
                return
            if self.ts.peek().kind in STATEMENT_STARTS:
                return
            self.ts.advance()

    # ---------------- DECLARATIONS ----------------
    def declaration(self) -> Optional[Stmt]:
        try:
            if self.ts.match("FUN"):
                return self.function("function")
            if self.ts.match("VAR"):
                return self.var_declaration()
            return self.statement()
        except ParseError:
            self.synchronize()
            return None

    def function(self, kind: str) -> Function:
        name = self.expect("IDENTIFIER", f"Expect {kind} name.")
        self.expect("LEFT_PAREN", f"Expect '(' after {kind} name.")
        params: List[Token] = []
        if not self.ts.check("RIGHT_PAREN"):
            while True:
                if len(params) >= MAX_ARGS:
                    # reported, but the parameter list is still consumed
                    self.error(self.ts.peek(), f"Can't have more than {MAX_ARGS} parameters.")
                params.append(self.expect("IDENTIFIER", "Expect parameter name."))
                if not self.ts.match("COMMA"):
                    break
        self.expect("RIGHT_PAREN", "Expect ')' after parameters.")
        self.expect("LEFT_BRACE", f"Expect '{{' before {kind} body.")
        self.function_depth += 1
        try:
            body = self.block()
        finally:
            self.function_depth -= 1
        return Function(name=name, params=params, body=body)

    def var_declaration(self) -> Var:
        name = self.expect("IDENTIFIER", "Expect variable name.")
        initializer = None
        if self.ts.match("EQUAL"):
            initializer = self.expression()
        self.expect("SEMICOLON", "Expect ';' after variable declaration.")
        return Var(name=name, initializer=initializer)

    # ---------------- STATEMENTS ----------------
    def statement(self) -> Stmt:
        if self.ts.match("FOR"):
            return self.for_statement()
        if self.ts.match("IF"):
            return self.if_statement()
        if self.ts.match("WHILE"):
            return self.while_statement()
        if self.ts.match("PRINT"):
            return self.print_statement()
        if self.ts.match("RETURN"):
            return self.return_statement()
        if self.ts.match("LEFT_BRACE"):
            return Block(statements=self.block())
        return self.expression_statement()

    def for_statement(self) -> Stmt:
        self.expect("LEFT_PAREN", "Expect '(' after 'for'.")
        if self.ts.match("SEMICOLON"):
            initializer = None
        elif self.ts.match("VAR"):
            initializer = self.var_declaration()
        else:
            initializer = self.expression_statement()

        condition = None
        if not self.ts.check("SEMICOLON"):
            condition = self.expression()
        self.expect("SEMICOLON", "Expect ';' after loop condition.")

        increment = None
        if not self.ts.check("RIGHT_PAREN"):
            increment = self.expression()
        self.expect("RIGHT_PAREN", "Expect ')' after for clauses.")

        # for (init; cond; incr) body  =>  { init; while (cond) { body; incr; } }
        body = self.statement()
        if increment is not None:
            body = Block(statements=[body, Expression(expression=increment)])
        if condition is None:
            condition = Literal(value=True)
        body = While(condition=condition, body=body)
        if initializer is not None:
            body = Block(statements=[initializer, body])
        return body

    def if_statement(self) -> If:
        self.expect("LEFT_PAREN", "Expect '(' after 'if'.")
        condition = self.expression()
        self.expect("RIGHT_PAREN", "Expect ')' after if condition.")
        then_branch = self.statement()
        else_branch = None
        if self.ts.match("ELSE"):
            else_branch = self.statement()
        return If(condition=condition, then_branch=then_branch, else_branch=else_branch)

    def while_statement(self) -> While:
        self.expect("LEFT_PAREN", "Expect '(' after 'while'.")
        condition = self.expression()
        self.expect("RIGHT_PAREN", "Expect ')' after condition.")
        return While(condition=condition, body=self.statement())

    def print_statement(self) -> Print:
        value = self.expression()
        self.expect("SEMICOLON", "Expect ';' after value.")
        return Print(expression=value)

    def return_statement(self) -> Return:
        keyword = self.ts.previous()
        if self.function_depth == 0:
            # reported without unwinding, like an invalid assignment target
            self.error(keyword, "Can't return from top-level code.")
        value = None
        if not self.ts.check("SEMICOLON"):
            value = self.expression()
        self.expect("SEMICOLON", "Expect ';' after return value.")
        return Return(keyword=keyword, value=value)

    def block(self) -> List[Optional[Stmt]]:
        statements: List[Optional[Stmt]] = []
        while not self.ts.check("RIGHT_BRACE") and not self.ts.at_end():
            statements.append(self.declaration())
        self.expect("RIGHT_BRACE", "Expect '}' after block.")
        return statements

    def expression_statement(self) -> Expression:
        expr = self.expression()
        self.expect("SEMICOLON", "Expect ';' after expression.")
        return Expression(expression=expr)

    # ---------------- EXPRESSIONS (precedence) ----------------
    def expression(self) -> Expr:
        return self.assignment()

    def assignment(self) -> Expr:
        expr = self.logic_or()
        equals = self.ts.match("EQUAL")
        if equals:
            value = self.assignment()
            if isinstance(expr, Variable):
                return Assign(name=expr.name, value=value)
            # reported without unwinding; the left side is kept as the result
            self.error(equals, "Invalid assignment target.")
        return expr

    def logic_or(self) -> Expr:
        expr = self.logic_and()
        while self.ts.match("OR"):
            op_tok = self.ts.previous()
            rhs = self.logic_and()
            expr = Logical(left=expr, operator=op_tok, right=rhs)
        return expr

    def logic_and(self) -> Expr:
        expr = self.equality()
        while self.ts.match("AND"):
            op_tok = self.ts.previous()
            rhs = self.equality()
            expr = Logical(left=expr, operator=op_tok, right=rhs)
        return expr

    def binary(self, operand: Callable[[], Expr], *kinds: str) -> Expr:
        expr = operand()
        while self.ts.match(*kinds):
            op_tok = self.ts.previous()
            rhs = operand()
            expr = Binary(left=expr, operator=op_tok, right=rhs)
        return expr

    def equality(self) -> Expr:
        return self.binary(self.comparison, "BANG_EQUAL", "EQUAL_EQUAL")

    def comparison(self) -> Expr:
        return self.binary(self.term, "GREATER", "GREATER_EQUAL", "LESS", "LESS_EQUAL")

    def term(self) -> Expr:
        return self.binary(self.factor, "MINUS", "PLUS")

    def factor(self) -> Expr:
        return self.binary(self.unary, "SLASH", "STAR")

    def unary(self) -> Expr:
        op_tok = self.ts.match("BANG", "MINUS")
        if op_tok:
            return Unary(operator=op_tok, right=self.unary())
        return self.call()

    def call(self) -> Expr:
        expr = self.primary()
        while self.ts.match("LEFT_PAREN"):
            expr = self.finish_call(expr)
        return expr

    def finish_call(self, callee: Expr) -> Call:
        args: List[Expr] = []
        if not self.ts.check("RIGHT_PAREN"):
            while True:
                if len(args) >= MAX_ARGS:
                    self.error(self.ts.peek(), f"Can't have more than {MAX_ARGS} arguments.")
                args.append(self.expression())
                if not self.ts.match("COMMA"):
                    break
        paren = self.expect("RIGHT_PAREN", "Expect ')' after arguments.")
        return Call(callee=callee, paren=paren, arguments=args)

    def primary(self) -> Expr:
        if self.ts.match("FALSE"):
            return Literal(value=False)
        if self.ts.match("TRUE"):
            return Literal(value=True)
        if self.ts.match("NIL"):
            return Literal(value=None)
        if self.ts.match("NUMBER", "STRING"):
            return Literal(value=self.ts.previous().literal)
        if self.ts.match("IDENTIFIER"):
            return Variable(name=self.ts.previous())
        if self.ts.match("LEFT_PAREN"):
            expr = self.expression()
            self.expect("RIGHT_PAREN", "Expect ')' after expression.")
            return Grouping(expression=expr)
        raise self.error(self.ts.peek(), "Expect expression.")


def parse(tokens: List[Token]) -> tuple[List[Optional[Stmt]], List[StaticError]]:
    parser = Parser(tokens)
    statements = parser.parse()
    return statements, parser.errors
