"""Error records, exceptions and the terminal error reporter.

Lexical and parse errors are accumulated as StaticError records and never
raised past the parser. Runtime errors are raised as LoxRuntimeError and abort
the rest of the current run. Stack exhaustion is a FatalError.
"""

from __future__ import annotations
import sys
from dataclasses import dataclass
from enum import IntEnum
from typing import TYPE_CHECKING, List

from termcolor import colored

if TYPE_CHECKING:
    from lox.lexer import Token


class ExitCode(IntEnum):
    """BSD sysexits codes used by the command line driver."""
    OK = 0
    USAGE = 64
    DATAERR = 65
    SOFTWARE = 70


@dataclass
class StaticError:
    phase: str  # "lex" or "parse"
    message: str
    line: int
    where: str = ""

    def __str__(self):
        return f"[line {self.line}] Error{self.where}: {self.message}"


class LoxRuntimeError(Exception):
    def __init__(self, token: Token, message: str):
        super().__init__(message)
        self.token = token
        self.message = message

    @property
    def line(self) -> int:
        return self.token.line

    def __str__(self):
        return f"{self.message}\n[line {self.token.line}]"


class FatalError(Exception):
    """Non-recoverable failure, such as exhausting the host stack."""


class ErrorReporter:
    """Prints errors to the terminal and remembers which category occurred.

    Also usable as a context manager around a run: fatal errors, interrupts and
    unexpected Python exceptions are reported instead of escaping as tracebacks.
    """
    ERROR = "red"
    FATAL = "magenta"

    def __init__(self, color: bool = True, stream=None):
        self.color = color
        self.stream = stream
        self.had_error = False
        self.had_runtime_error = False
        self.had_fatal_error = False

    def _paint(self, text, color):
        if not self.color:
            return text
        return colored(text, color, attrs=["bold"])

    def _emit(self, text):
        print(text, file=self.stream if self.stream is not None else sys.stderr)

    def static_errors(self, errors: List[StaticError]):
        for error in errors:
            self.static_error(error)

    def static_error(self, error: StaticError):
        where = f"Error{error.where}"
        self._emit(f"[line {error.line}] {self._paint(where, self.ERROR)}: {error.message}")
        self.had_error = True

    def runtime_error(self, error: LoxRuntimeError):
        self._emit(f"{self._paint(error.message, self.ERROR)}\n[line {error.line}]")
        self.had_runtime_error = True

    def fatal(self, message: str):
        self._emit(self._paint("fatal: ", self.FATAL) + message)
        self.had_fatal_error = True

    def reset(self):
        """Clears the error flags; the prompt calls this after every line."""
        self.had_error = False
        self.had_runtime_error = False

    @property
    def exit_code(self) -> ExitCode:
        if self.had_error:
            return ExitCode.DATAERR
        if self.had_runtime_error or self.had_fatal_error:
            return ExitCode.SOFTWARE
        return ExitCode.OK

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None or exc_type is SystemExit:
            return False
        if exc_type is KeyboardInterrupt:
            self.fatal("keyboard interrupt")
        elif issubclass(exc_type, FatalError):
            self.fatal(str(exc_val))
        elif issubclass(exc_type, LoxRuntimeError):
            self.runtime_error(exc_val)
        else:
            self.fatal(f"internal error: '{exc_type.__name__}: {exc_val}'")
        return True
