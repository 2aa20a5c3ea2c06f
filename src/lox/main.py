"""Command line driver: runs a script, dumps its tokens or syntax tree, or
starts the interactive prompt."""

import argparse
import sys

from lox.errors import ErrorReporter, ExitCode
from lox.interpreter import Interpreter
from lox.lexer import LoxLexer, print_tokens
from lox.parser import Parser
from lox.printer import AstPrinter
from lox.session import Session
from lox.shell import Shell


def read_input(path):
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def build_arg_parser():
    parser = argparse.ArgumentParser(prog="lox", description="Tree-walking interpreter for the Lox language.")
    parser.add_argument("script", nargs="?", help="file to run (if empty, starts the interactive prompt)")
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--tokens", action="store_true", help="print the token table instead of running")
    mode.add_argument("--ast", action="store_true", help="print the syntax tree instead of running")
    parser.add_argument("--no-color", action="store_true", help="disable coloured error output")
    parser.add_argument("--recursion-limit", type=int, default=10000,
                        help="host recursion limit; bounds how deep Lox calls may nest (default: %(default)s)")
    return parser


def dump(source, args, reporter):
    lexer = LoxLexer()
    tokens = lexer.tokenize(source)

    if args.tokens:
        reporter.static_errors(lexer.errors)
        print_tokens(tokens)
        return

    parser = Parser(tokens)
    statements = parser.parse()
    reporter.static_errors(lexer.errors + parser.errors)
    printer = AstPrinter()
    for st in statements:
        print(printer.stmt(st))


def main(argv=None):
    try:
        args = build_arg_parser().parse_args(argv)
    except SystemExit as e:
        # argparse exits with 2 on bad usage
        return ExitCode.USAGE if e.code else ExitCode.OK

    sys.setrecursionlimit(max(args.recursion_limit, sys.getrecursionlimit()))
    reporter = ErrorReporter(color=not args.no_color)

    if args.script is None:
        if args.tokens or args.ast:
            print("lox: --tokens and --ast need a script", file=sys.stderr)
            return ExitCode.USAGE
        Shell(Session(reporter, Interpreter())).cmdloop()
        return ExitCode.OK

    with reporter:
        try:
            source = read_input(args.script)
        except OSError as e:
            print(f"lox: cannot open '{args.script}': {e.strerror}", file=sys.stderr)
            return ExitCode.USAGE

        if args.tokens or args.ast:
            dump(source, args, reporter)
        else:
            Session(reporter, Interpreter()).run(source)

    return reporter.exit_code


if __name__ == "__main__":
    sys.exit(main())
