from __future__ import annotations

from typing import Sequence

from ..environment import Environment
from ..tree import Statement
from ..types import NULL, Error, MonkeyObject, ReturnValue
from .helpers import EvalFunc


def eval_program(statements: Sequence[Statement], env: Environment, eval_func: EvalFunc) -> MonkeyObject:
    """Top level: stop on the first return or error; a return is unwrapped here."""
    result: MonkeyObject = NULL

    for stmt in statements:
        result = eval_func(stmt, env)

        match result:
            case ReturnValue(value=value):
                return value
            case Error():
                return result

    return result


def eval_block_statement(statements: Sequence[Statement], env: Environment, eval_func: EvalFunc) -> MonkeyObject:
    """Nested block: stop on the first return or error, keeping the ReturnValue
    wrapped so enclosing blocks unwind too."""
    result: MonkeyObject = NULL

    for stmt in statements:
        result = eval_func(stmt, env)

        if isinstance(result, (ReturnValue, Error)):
            return result

    return result
