from __future__ import annotations

import logging
import sys
import traceback
from pathlib import Path
from typing import List, Optional

from .environment import Environment
from .evaluator import evaluate
from .parser import ParseError, parse_source
from .types import NULL, MonkeyObject, is_error
from .utils import configure_logging, debug_py_trace_enabled

logger = logging.getLogger(__name__)

RECURSION_MESSAGE = "maximum recursion depth exceeded"


def run(source: str, env: Optional[Environment] = None) -> MonkeyObject:
    """Parse and evaluate *source*; raises ParseError if the parser reported anything."""
    program, errors = parse_source(source)
    logger.debug("parsed %d statement(s), %d diagnostic(s)", len(program.statements), len(errors))

    if errors:
        raise ParseError(errors)

    return evaluate(program, env)


def format_parse_errors(errors: List[str]) -> str:
    return "\n".join(f"\t{msg}" for msg in errors)


def report_host_error(exc: BaseException) -> None:
    """Print a host-level failure (deep recursion) as a Monkey-style error line."""
    if isinstance(exc, RecursionError):
        print(f"Error: {RECURSION_MESSAGE}", file=sys.stderr)
    else:
        print(f"Error: {exc}", file=sys.stderr)

    if debug_py_trace_enabled():
        print("\nPython traceback:", file=sys.stderr)
        print("".join(traceback.format_exception(type(exc), exc, exc.__traceback__)), file=sys.stderr, end="")


def _load_source(arg: Optional[str]) -> str:
    """
    Resolve CLI input into source text.
    - None or "-" => read stdin.
    - Existing path => read file contents.
    - Otherwise treat the argument as literal source.
    """

    if arg is None or arg == "-":
        data = sys.stdin.read()
        if not data:
            raise SystemExit("No input provided on stdin")
        return data

    candidate = Path(arg)
    if candidate.is_file():
        return candidate.read_text(encoding="utf-8")

    return arg


def main(argv: Optional[List[str]] = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    configure_logging()

    if len(args) > 1:
        raise SystemExit(f"Unexpected argument: {args[1]}")

    arg = args[0] if args else None

    if arg is None and sys.stdin.isatty():
        from .repl import repl
        repl()
        return 0

    source = _load_source(arg)
    code = execute(source)

    if argv is None:
        sys.exit(code)
    return code


def execute(source: str) -> int:
    """Run *source* for the CLI, printing the outcome; returns the exit status."""
    try:
        result = run(source)
    except ParseError as exc:
        print("parser errors:", file=sys.stderr)
        print(format_parse_errors(exc.errors), file=sys.stderr)
        return 1
    except RecursionError as exc:
        report_host_error(exc)
        return 1

    if is_error(result):
        print(result.inspect(), file=sys.stderr)
        return 1

    if result is not NULL:
        print(result.inspect())

    return 0


if __name__ == "__main__":
    main()
