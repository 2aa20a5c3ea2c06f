"""Pytest configuration for the Lox test suite."""

import io
import sys
from pathlib import Path

import pytest

# Allow running the suite from a checkout without installing
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from lox.errors import ErrorReporter
from lox.interpreter import Interpreter
from lox.session import Session


class LoxRun:
    """Outcome of running one source unit through a fresh session."""

    def __init__(self, status, output, errors):
        self.status = status
        self.output = output
        self.errors = errors


@pytest.fixture
def run_lox():
    """Runs source in a new session, capturing printed lines and reported errors."""

    def _run(source):
        output = []
        stream = io.StringIO()
        session = Session(ErrorReporter(color=False, stream=stream), Interpreter(output=output.append))
        status = session.run(source)
        return LoxRun(status, output, stream.getvalue())

    return _run
