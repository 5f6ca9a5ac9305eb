from __future__ import annotations

from ..environment import Environment
from ..runtime import apply_function
from ..tree import CallExpression, FunctionLiteral
from ..types import Function, MonkeyObject, is_error
from .helpers import EvalFunc, eval_expressions


def eval_function_literal(n: FunctionLiteral, env: Environment) -> Function:
    # Captures the defining frame itself, not a snapshot of it
    return Function(parameters=n.parameters, body=n.body, env=env)


def eval_call_expression(n: CallExpression, env: Environment, eval_func: EvalFunc) -> MonkeyObject:
    function = eval_func(n.function, env)
    if is_error(function):
        return function

    args = eval_expressions(n.arguments, env, eval_func)
    if is_error(args):
        return args

    return apply_function(function, args)
