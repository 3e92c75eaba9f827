"""
Command line front end.

    symbolic-calculus --eval "x^2 + 1" x=3
    symbolic-calculus --diff "sin(x)" --by x
"""
import argparse
import sys
from typing import Dict, List, Optional

from .errors import ExpressionError
from .expression_tree import evaluate, derivative, simplify, render
from .expression_tree.core.operators import format_constant
from .logging_system import LogLevel, configure_logging, log_debug, log_info
from .parsing import parse


class BindingError(ExpressionError):
    """Malformed name=value assignment on the command line"""


def parse_bindings(assignments: List[str]) -> Dict[str, float]:
    bindings = {}
    for assignment in assignments:
        name, sep, value = assignment.partition('=')
        name = name.strip()
        if not sep or not name:
            raise BindingError(f"Invalid variable assignment {assignment!r}, expected name=value")
        try:
            bindings[name] = float(value)
        except ValueError:
            raise BindingError(f"Invalid value for {name}: {value!r}") from None
    return bindings


def run_eval(expression: str, assignments: List[str]) -> str:
    bindings = parse_bindings(assignments)
    tree = parse(expression)
    log_info("Evaluating %s with %s", tree, bindings)
    return format_constant(evaluate(tree, bindings))


def run_diff(expression: str, variable: str) -> str:
    tree = parse(expression)
    raw = derivative(tree, variable)
    log_debug("unsimplified derivative: %s", raw)
    return render(simplify(raw))


MODE_FLAGS = ("--eval", "--diff")
_OPTION_STRINGS = MODE_FLAGS + ("--by", "-v", "--verbose", "-h", "--help")


def attach_expression(argv: List[str]) -> List[str]:
    """
    Rewrite `--eval EXPR` as `--eval=EXPR`.

    argparse reads a separate value starting with '-' ("-x^2") as an option
    flag; attached with '=' it is always taken as the flag's value.
    """
    argv = list(argv)
    for i, arg in enumerate(argv[:-1]):
        if arg in MODE_FLAGS and argv[i + 1] not in _OPTION_STRINGS:
            argv[i:i + 2] = [f"{arg}={argv[i + 1]}"]
            break
    return argv


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="symbolic-calculus",
        description="Evaluate or differentiate arithmetic expressions",
    )
    mode = parser.add_mutually_exclusive_group(required=True)
    mode.add_argument("--eval", metavar="EXPRESSION", dest="eval_expression",
                      help="expression to evaluate")
    mode.add_argument("--diff", metavar="EXPRESSION", help="expression to differentiate")
    parser.add_argument("bindings", nargs="*", metavar="NAME=VALUE",
                        help="variable bindings (with --eval)")
    parser.add_argument("--by", metavar="VARIABLE", help="differentiation variable (with --diff)")
    parser.add_argument("-v", "--verbose", action="store_true", help="log every step to stderr")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(attach_expression(sys.argv[1:] if argv is None else argv))

    if args.diff is not None:
        if not args.by:
            parser.error("--diff requires --by VARIABLE")
        if args.bindings:
            parser.error("NAME=VALUE bindings are only valid with --eval")
    if args.eval_expression is not None and args.by:
        parser.error("--by is only valid with --diff")

    configure_logging(LogLevel.VERBOSE if args.verbose else LogLevel.MINIMAL)

    try:
        if args.eval_expression is not None:
            output = run_eval(args.eval_expression, args.bindings)
        else:
            output = run_diff(args.diff, args.by)
    except ExpressionError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
