"""Tests for the recursive-descent parser and its error recovery."""

import pytest

from lox.ast_nodes import (
    Block,
    Call,
    Expression,
    Function,
    Literal,
    Print,
    Return,
    Var,
    Variable,
    While,
)
from lox.errors import FatalError
from lox.lexer import scan
from lox.parser import Parser, parse
from lox.printer import AstPrinter


def _parse(source: str):
    tokens, lex_errors = scan(source)
    assert lex_errors == []
    return parse(tokens)


def _ok(source: str):
    statements, errors = _parse(source)
    assert errors == [], [str(e) for e in errors]
    return statements


def _tree(source: str) -> str:
    return " ".join(AstPrinter().stmt(st) for st in _ok(source))


def test_multiplication_binds_tighter_than_addition():
    assert _tree("1 + 2 * 3;") == "(; (+ 1 (* 2 3)))"


def test_grouping_overrides_precedence():
    assert _tree("(1 + 2) * 3;") == "(; (* (group (+ 1 2)) 3))"


def test_binary_operators_are_left_associative():
    assert _tree("1 - 2 - 3;") == "(; (- (- 1 2) 3))"
    assert _tree("8 / 4 / 2;") == "(; (/ (/ 8 4) 2))"


def test_precedence_ladder():
    assert _tree("a or b and c == d < e + f * -g;") == "(; (or a (and b (== c (< d (+ e (* f (- g))))))))"


def test_unary_is_right_recursive():
    assert _tree("!!true;") == "(; (! (! true)))"
    assert _tree("--1;") == "(; (- (- 1)))"


def test_assignment_is_right_associative():
    assert _tree("a = b = 1;") == "(; (= a (= b 1)))"


def test_calls_chain():
    assert _tree("f(1)(2, 3)();") == "(; (call (call (call f 1) 2 3)))"


def test_call_keeps_closing_paren_for_locations():
    (stmt,) = _ok("f(\n1\n);")
    assert isinstance(stmt.expression, Call)
    assert stmt.expression.paren.kind == "RIGHT_PAREN"
    assert stmt.expression.paren.line == 3


def test_var_declaration_with_and_without_initializer():
    a, b = _ok("var a; var b = 2;")
    assert isinstance(a, Var) and a.initializer is None
    assert b.name.lexeme == "b" and b.initializer == Literal(2.0)


def test_function_declaration():
    (fn,) = _ok("fun add(a, b) { return a + b; }")
    assert isinstance(fn, Function)
    assert fn.name.lexeme == "add"
    assert [p.lexeme for p in fn.params] == ["a", "b"]
    assert len(fn.body) == 1 and isinstance(fn.body[0], Return)


def test_bare_return_has_no_value():
    (fn,) = _ok("fun f() { return; }")
    assert fn.body[0].value is None
    assert fn.body[0].keyword.lexeme == "return"


def test_if_else_binds_to_nearest_if():
    assert _tree("if (a) if (b) print 1; else print 2;") == "(if a (if b (print 1) (print 2)))"


def test_for_is_desugared_into_while():
    (stmt,) = _ok("for (var i = 0; i < 3; i = i + 1) print i;")
    assert isinstance(stmt, Block)
    init, loop = stmt.statements
    assert isinstance(init, Var)
    assert isinstance(loop, While)
    body, increment = loop.body.statements
    assert isinstance(body, Print)
    assert isinstance(increment, Expression)
    assert AstPrinter().print(increment) == "(; (= i (+ i 1)))"


def test_for_without_clauses_loops_on_true():
    (stmt,) = _ok("for (;;) print 1;")
    assert isinstance(stmt, While)
    assert stmt.condition == Literal(True)
    assert isinstance(stmt.body, Print)


def test_for_with_expression_initializer():
    assert _tree("for (i = 0; i < 1;) print i;") == "(block (; (= i 0)) (while (< i 1) (print i)))"


def test_invalid_assignment_target_does_not_stop_parsing():
    statements, errors = _parse("1 = 2; print 3;")
    assert [str(e) for e in errors] == ["[line 1] Error at '=': Invalid assignment target."]
    assert isinstance(statements[0], Expression)
    assert isinstance(statements[1], Print)


def test_recovery_skips_to_next_statement():
    statements, errors = _parse("var = 1; print 2;")
    assert len(errors) == 1
    assert errors[0].message == "Expect variable name."
    assert statements[0] is None
    assert isinstance(statements[1], Print)


def test_recovery_stops_before_statement_keyword():
    statements, errors = _parse("var x = (1 + ; fun f() {} while (true) {}")
    assert errors[0].message == "Expect expression."
    assert statements[0] is None
    assert isinstance(statements[1], Function)
    assert isinstance(statements[2], While)


def test_errors_inside_block_leave_a_gap():
    statements, errors = _parse("{ var = 1; print 2; }")
    assert len(errors) == 1
    (block,) = statements
    assert block.statements[0] is None
    assert isinstance(block.statements[1], Print)


def test_errors_accumulate():
    _, errors = _parse("print ; var 1; x = ;")
    assert [e.message for e in errors] == [
        "Expect expression.",
        "Expect variable name.",
        "Expect expression.",
    ]


def test_error_at_end_of_input():
    _, errors = _parse("print 1")
    assert str(errors[0]) == "[line 1] Error at end: Expect ';' after value."


def test_missing_closing_brace():
    _, errors = _parse("{ print 1;")
    assert errors[0].message == "Expect '}' after block."


def test_too_many_arguments_is_reported_but_call_is_built():
    args = ", ".join(["1"] * 256)
    statements, errors = _parse(f"f({args});")
    assert [e.message for e in errors] == ["Can't have more than 255 arguments."]
    assert len(statements[0].expression.arguments) == 256


def test_too_many_parameters_is_reported():
    params = ", ".join(f"p{i}" for i in range(256))
    statements, errors = _parse(f"fun f({params}) {{}}")
    assert [e.message for e in errors] == ["Can't have more than 255 parameters."]
    assert len(statements[0].params) == 256


def test_exactly_255_arguments_is_fine():
    args = ", ".join(["1"] * 255)
    _ok(f"f({args});")


def test_parse_expression():
    tokens, _ = scan("a + 1")
    parser = Parser(tokens)
    expr = parser.parse_expression()
    assert parser.errors == []
    assert isinstance(expr.left, Variable)

    tokens, _ = scan("a + 1;")
    parser = Parser(tokens)
    assert parser.parse_expression() is None
    assert parser.errors[0].message == "Expect end of expression."


def test_return_outside_function_is_reported():
    statements, errors = _parse("{ return 1; print 2; } print 3;")
    assert [str(e) for e in errors] == ["[line 1] Error at 'return': Can't return from top-level code."]
    assert isinstance(statements[0], Block)
    assert isinstance(statements[1], Print)


def test_return_inside_nested_function_is_allowed():
    _ok("fun outer() { { fun inner() { if (true) return 1; } } return inner; }")
    _, errors = _parse("fun f() {} return;")
    assert [e.message for e in errors] == ["Can't return from top-level code."]


def test_nesting_deeper_than_the_stack_is_fatal():
    tokens, _ = scan("print " + "(" * 5000 + "1" + ")" * 5000 + ";")
    with pytest.raises(FatalError):
        Parser(tokens).parse()


def test_deep_expression_is_fatal_too():
    tokens, _ = scan("-" * 5000 + "1")
    with pytest.raises(FatalError):
        Parser(tokens).parse_expression()
