"""Runs Lox source through the lexer, parser and interpreter, in file mode or
one prompt line at a time. Global state lives as long as the session."""

from __future__ import annotations
from enum import Enum
from typing import Optional

from lox.ast_nodes import Print
from lox.errors import ErrorReporter
from lox.interpreter import Interpreter
from lox.lexer import LoxLexer
from lox.parser import Parser


class RunStatus(Enum):
    OK = "ok"
    STATIC_ERROR = "static error"
    RUNTIME_ERROR = "runtime error"


class Session:
    """Governs one interpreter and the reporter its errors go to."""

    def __init__(self, reporter: Optional[ErrorReporter] = None, interpreter: Optional[Interpreter] = None):
        self.reporter = reporter if reporter is not None else ErrorReporter()
        self.interpreter = interpreter if interpreter is not None else Interpreter()
        self.lexer = LoxLexer()

    def run(self, source: str) -> RunStatus:
        """Scans, parses and executes source. Nothing executes if any lexical
        or parse error was found. FatalError propagates to the caller."""
        tokens = self.lexer.tokenize(source)
        parser = Parser(tokens)
        statements = parser.parse()

        errors = self.lexer.errors + parser.errors
        if errors:
            errors.sort(key=lambda er: er.line)
            self.reporter.static_errors(errors)
            return RunStatus.STATIC_ERROR

        error = self.interpreter.interpret(statements)
        if error is not None:
            self.reporter.runtime_error(error)
            return RunStatus.RUNTIME_ERROR
        return RunStatus.OK

    def run_line(self, line: str) -> RunStatus:
        """Prompt mode: a bare expression is evaluated and its value echoed,
        anything else runs as a program. Error flags reset afterwards."""
        try:
            tokens = self.lexer.tokenize(line)
            if not self.lexer.errors:
                parser = Parser(tokens)
                expr = parser.parse_expression()
                if expr is not None and not parser.errors:
                    error = self.interpreter.interpret([Print(expression=expr)])
                    if error is not None:
                        self.reporter.runtime_error(error)
                        return RunStatus.RUNTIME_ERROR
                    return RunStatus.OK
            return self.run(line)
        finally:
            self.reporter.reset()
