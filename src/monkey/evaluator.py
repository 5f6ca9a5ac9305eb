from __future__ import annotations

from typing import Optional

from .environment import Environment
from .runtime import init_builtins, lookup_builtin, new_error
from .tree import (
    ArrayLiteral,
    BlockStatement,
    BooleanLiteral,
    CallExpression,
    ExpressionStatement,
    FunctionLiteral,
    HashLiteral,
    Identifier,
    IfExpression,
    IndexExpression,
    InfixExpression,
    IntegerLiteral,
    LetStatement,
    Node,
    PrefixExpression,
    Program,
    ReturnStatement,
    StringLiteral,
)
from .types import NULL, Integer, MonkeyObject, ReturnValue, String, is_error

from .eval.blocks import eval_block_statement, eval_program
from .eval.expr import eval_infix_expression, eval_prefix_expression
from .eval.fn import eval_call_expression, eval_function_literal
from .eval.helpers import is_truthy, native_bool
from .eval.objects import eval_array_literal, eval_hash_literal, eval_index_expression

# ---------------- Public API ----------------

def evaluate(node: Optional[Node], env: Optional[Environment] = None) -> MonkeyObject:
    """Evaluate *node* (normally a Program) in *env*, creating a global frame if omitted.

    Runtime failures come back as Error values, never as exceptions.
    """
    init_builtins()

    if env is None:
        env = Environment()

    return eval_node(node, env)

# ---------------- Core evaluator ----------------

def eval_node(n: Optional[Node], env: Environment) -> MonkeyObject:
    match n:
        # statements
        case Program(statements=stmts):
            return eval_program(stmts, env, eval_node)
        case BlockStatement(statements=stmts):
            return eval_block_statement(stmts, env, eval_node)
        case ExpressionStatement(expression=expr):
            return eval_node(expr, env)
        case ReturnStatement(value=value_node):
            value = eval_node(value_node, env)
            if is_error(value):
                return value
            return ReturnValue(value)
        case LetStatement():
            return eval_let_statement(n, env)

        # literals
        case IntegerLiteral(value=v):
            return Integer(v)
        case StringLiteral(value=s):
            return String(s)
        case BooleanLiteral(value=b):
            return native_bool(b)
        case ArrayLiteral():
            return eval_array_literal(n, env, eval_node)
        case HashLiteral():
            return eval_hash_literal(n, env, eval_node)
        case FunctionLiteral():
            return eval_function_literal(n, env)

        # operators
        case PrefixExpression(operator=op, right=right_node):
            right = eval_node(right_node, env)
            if is_error(right):
                return right
            return eval_prefix_expression(op, right)
        case InfixExpression(left=left_node, operator=op, right=right_node):
            left = eval_node(left_node, env)
            if is_error(left):
                return left
            right = eval_node(right_node, env)
            if is_error(right):
                return right
            return eval_infix_expression(op, left, right)
        case IndexExpression(left=left_node, index=index_node):
            left = eval_node(left_node, env)
            if is_error(left):
                return left
            index = eval_node(index_node, env)
            if is_error(index):
                return index
            return eval_index_expression(left, index)

        # control flow + names
        case IfExpression():
            return eval_if_expression(n, env)
        case Identifier(value=name):
            return eval_identifier(name, env)
        case CallExpression():
            return eval_call_expression(n, env, eval_node)

        case None:
            # Absent child of an incomplete tree
            return NULL
        case _:
            raise TypeError(f"unhandled node type {type(n).__name__}")


def eval_let_statement(n: LetStatement, env: Environment) -> MonkeyObject:
    value = eval_node(n.value, env)
    if is_error(value):
        return value

    if n.name is not None:
        env.set(n.name.value, value)

    return NULL


def eval_if_expression(n: IfExpression, env: Environment) -> MonkeyObject:
    condition = eval_node(n.condition, env)
    if is_error(condition):
        return condition

    if is_truthy(condition):
        return eval_node(n.consequence, env)
    if n.alternative is not None:
        return eval_node(n.alternative, env)

    return NULL


def eval_identifier(name: str, env: Environment) -> MonkeyObject:
    value = env.get(name)
    if value is not None:
        return value

    builtin = lookup_builtin(name)
    if builtin is not None:
        return builtin

    return new_error(f"identifier not found: {name}")
