from __future__ import annotations
from dataclasses import dataclass
from typing import Any, List, Optional

import ply.lex as lex

from lox.errors import StaticError


@dataclass(frozen=True)
class Token:
    kind: str
    lexeme: str
    literal: Any
    line: int

    def __str__(self):
        return f"{self.kind} {self.lexeme} {self.literal}"


class LoxLexer:

    reserved = {
        'and': 'AND',
        'class': 'CLASS',
        'else': 'ELSE',
        'false': 'FALSE',
        'for': 'FOR',
        'fun': 'FUN',
        'if': 'IF',
        'nil': 'NIL',
        'or': 'OR',
        'print': 'PRINT',
        'return': 'RETURN',
        'super': 'SUPER',
        'this': 'THIS',
        'true': 'TRUE',
        'var': 'VAR',
        'while': 'WHILE',
    }

    tokens = (
        # Single-character tokens
        'LEFT_PAREN', 'RIGHT_PAREN', 'LEFT_BRACE', 'RIGHT_BRACE',
        'COMMA', 'DOT', 'MINUS', 'PLUS', 'SEMICOLON', 'SLASH', 'STAR',

        # One or two character tokens
        'BANG', 'BANG_EQUAL', 'EQUAL', 'EQUAL_EQUAL',
        'GREATER', 'GREATER_EQUAL', 'LESS', 'LESS_EQUAL',

        # Literals
        'IDENTIFIER', 'STRING', 'NUMBER',
    ) + tuple(reserved.values())

    # Ignored characters
    t_ignore = ' \t\r'

    # ply sorts string rules by decreasing regex length, so the two-character
    # operators are tried before their one-character prefixes
    t_BANG_EQUAL = r'!='
    t_EQUAL_EQUAL = r'=='
    t_GREATER_EQUAL = r'>='
    t_LESS_EQUAL = r'<='

    t_BANG = r'!'
    t_EQUAL = r'='
    t_GREATER = r'>'
    t_LESS = r'<'

    t_LEFT_PAREN = r'\('
    t_RIGHT_PAREN = r'\)'
    t_LEFT_BRACE = r'\{'
    t_RIGHT_BRACE = r'\}'
    t_COMMA = r','
    t_DOT = r'\.'
    t_MINUS = r'-'
    t_PLUS = r'\+'
    t_SEMICOLON = r';'
    t_SLASH = r'/'
    t_STAR = r'\*'

    def __init__(self):
        self.lexer = None
        self.errors: List[StaticError] = []

    # Function rules are matched in definition order, ahead of string rules.
    def t_COMMENT(self, t):
        r'//[^\n]*'
        pass

    def t_STRING(self, t):
        r'"[^"]*"'
        t.lexer.lineno += t.value.count('\n')
        return t

    def t_UNTERMINATED_STRING(self, t):
        r'"[^"]*'
        t.lexer.lineno += t.value.count('\n')
        self.error(t.lexer.lineno, "Unterminated string.")

    def t_NUMBER(self, t):
        r'[0-9]+(?:\.[0-9]+)?'
        return t

    def t_IDENTIFIER(self, t):
        r'[a-zA-Z_][a-zA-Z_0-9]*'
        t.type = self.reserved.get(t.value, 'IDENTIFIER')
        return t

    def t_newline(self, t):
        r'\n+'
        t.lexer.lineno += len(t.value)

    def t_error(self, t):
        self.error(t.lineno, f"Unexpected character '{t.value[0]}'.")
        t.lexer.skip(1)

    def error(self, line: int, message: str):
        self.errors.append(StaticError("lex", message, line))

    def build(self, **kwargs):
        """Build the lexer"""
        self.lexer = lex.lex(module=self, **kwargs)
        return self.lexer

    def tokenize(self, data: str) -> List[Token]:
        if not self.lexer:
            self.build()

        self.errors = []
        self.lexer.lineno = 1
        self.lexer.input(data)
        tokens = []

        while True:
            tok = self.lexer.token()
            if not tok:
                break
            tokens.append(Token(tok.type, tok.value, _literal(tok.type, tok.value), tok.lineno))

        tokens.append(Token('EOF', '', None, self.lexer.lineno))
        return tokens


def _literal(kind: str, lexeme: str) -> Optional[Any]:
    if kind == 'NUMBER':
        return float(lexeme)
    if kind == 'STRING':
        return lexeme[1:-1]
    return None


def scan(source: str) -> tuple[List[Token], List[StaticError]]:
    """Tokenize source with a fresh lexer, returning the tokens and any lexical errors."""
    lexer = LoxLexer()
    tokens = lexer.tokenize(source)
    return tokens, lexer.errors


def print_tokens(tokens: List[Token]):
    if not tokens:
        print("No tokens found!")
        return

    print(f"{'Line':<6}| {'Token':<16}| {'Lexeme':<24}| Literal")
    print("-" * 70)

    for tok in tokens:
        lexeme = tok.lexeme
        # Limit length for display
        if len(lexeme) > 24:
            lexeme = lexeme[:21] + "..."
        # Display escape characters
        lexeme = repr(lexeme)[1:-1] if '\n' in lexeme or '\t' in lexeme else lexeme
        literal = "" if tok.literal is None else tok.literal

        print(f"{tok.line:<6}| {tok.kind:<16}| {lexeme:<24}| {literal}")
