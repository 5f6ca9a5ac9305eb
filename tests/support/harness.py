from __future__ import annotations

from typing import List, Optional, Tuple

from monkey.environment import Environment
from monkey.evaluator import evaluate
from monkey.lexer import tokenize
from monkey.parser import ParseError, parse_source
from monkey.runner import run as run_program
from monkey.token_types import TT, Tok
from monkey.tree import ExpressionStatement, Program
from monkey.types import (
    FALSE,
    NULL,
    TRUE,
    Array,
    Boolean,
    Builtin,
    Error,
    Function,
    Hash,
    Integer,
    MonkeyObject,
    Null,
    String,
)

RuntimeExpectation = Tuple[str, object]


def parse_ok(source: str) -> Program:
    """Parse *source* and assert the parser reported nothing."""
    program, errors = parse_source(source)
    assert errors == [], f"unexpected parser errors: {errors}"
    return program


def parse_errors(source: str) -> List[str]:
    _program, errors = parse_source(source)
    return errors


def single_expression(source: str) -> object:
    """Parse a one-statement program and return its expression node."""
    program = parse_ok(source)
    assert len(program.statements) == 1, f"expected 1 statement, got {len(program.statements)}"
    stmt = program.statements[0]
    assert isinstance(stmt, ExpressionStatement), f"expected ExpressionStatement, got {type(stmt).__name__}"
    return stmt.expression


def eval_source(source: str, env: Optional[Environment] = None) -> MonkeyObject:
    """Parse (asserting no diagnostics) and evaluate *source*."""
    return evaluate(parse_ok(source), env)


def verify_result(value: MonkeyObject, kind: str, expected: object) -> None:
    """Assert the shape and payload of an evaluation result."""
    match kind:
        case "int":
            assert isinstance(value, Integer), f"expected Integer, got {type(value).__name__}: {value!r}"
            assert value.value == expected, f"expected {expected!r}, got {value.value!r}"
            return
        case "string":
            assert isinstance(value, String), f"expected String, got {type(value).__name__}: {value!r}"
            assert value.value == expected, f"expected {expected!r}, got {value.value!r}"
            return
        case "bool":
            assert isinstance(value, Boolean), f"expected Boolean, got {type(value).__name__}: {value!r}"
            assert value is (TRUE if expected else FALSE), "booleans must be the shared singletons"
            return
        case "null":
            assert value is NULL, f"expected NULL, got {type(value).__name__}: {value!r}"
            return
        case "error":
            assert isinstance(value, Error), f"expected Error, got {type(value).__name__}: {value!r}"
            assert value.message == expected, f"expected {expected!r}, got {value.message!r}"
            return
        case "inspect":
            assert value.inspect() == expected, f"expected {expected!r}, got {value.inspect()!r}"
            return
        case "array":
            assert isinstance(value, Array), f"expected Array, got {type(value).__name__}"
            actual_items = [item.inspect() for item in value.elements]
            assert actual_items == expected, f"expected {expected!r}, got {actual_items!r}"
            return
        case _:
            raise AssertionError(f"unknown expectation kind {kind}")


def run_runtime_case(source: str, expectation: RuntimeExpectation) -> None:
    """Evaluate one scenario in a fresh environment and check the result."""
    result = eval_source(source)
    verify_result(result, expectation[0], expectation[1])


__all__ = [
    "Array",
    "Boolean",
    "Builtin",
    "Environment",
    "Error",
    "FALSE",
    "Function",
    "Hash",
    "Integer",
    "NULL",
    "Null",
    "ParseError",
    "String",
    "TRUE",
    "TT",
    "Tok",
    "eval_source",
    "parse_errors",
    "parse_ok",
    "run_program",
    "run_runtime_case",
    "single_expression",
    "tokenize",
    "verify_result",
]
