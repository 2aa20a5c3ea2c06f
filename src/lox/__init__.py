"""Lox: lexer, recursive-descent parser and tree-walking interpreter."""

from lox.errors import ErrorReporter, FatalError, LoxRuntimeError, StaticError
from lox.interpreter import Interpreter
from lox.session import RunStatus, Session

__version__ = "0.1.0"
