from __future__ import annotations

from ..runtime import new_error
from ..types import (
    FALSE,
    NULL,
    TRUE,
    Integer,
    MonkeyObject,
    String,
    wrap_int64,
)
from .helpers import native_bool


def eval_prefix_expression(op: str, right: MonkeyObject) -> MonkeyObject:
    match op:
        case '!':
            return eval_bang_operator(right)
        case '-':
            return eval_minus_prefix_operator(right)
        case _:
            return new_error(f"unknown operator: {op}{right.type_name}")


def eval_bang_operator(right: MonkeyObject) -> MonkeyObject:
    if right is FALSE or right is NULL:
        return TRUE
    return FALSE


def eval_minus_prefix_operator(right: MonkeyObject) -> MonkeyObject:
    if not isinstance(right, Integer):
        return new_error(f"unknown operator: -{right.type_name}")

    return Integer(wrap_int64(-right.value))


def eval_infix_expression(op: str, left: MonkeyObject, right: MonkeyObject) -> MonkeyObject:
    """
    Order of checks:
    1. INTEGER op INTEGER -> arithmetic / comparison
    2. STRING op STRING -> concatenation only
    3. == / != on anything else -> identity of the canonical values
    4. differing types -> type mismatch
    5. otherwise -> unknown operator
    """
    match (left, right):
        case (Integer(), Integer()):
            return eval_integer_infix(op, left, right)
        case (String(), String()):
            return eval_string_infix(op, left, right)

    if op == '==':
        return native_bool(left is right)
    if op == '!=':
        return native_bool(left is not right)

    if left.type_name != right.type_name:
        return new_error(f"type mismatch: {left.type_name} {op} {right.type_name}")

    return new_error(f"unknown operator: {left.type_name} {op} {right.type_name}")


def eval_integer_infix(op: str, left: Integer, right: Integer) -> MonkeyObject:
    lhs, rhs = left.value, right.value

    match op:
        case '+':
            return Integer(wrap_int64(lhs + rhs))
        case '-':
            return Integer(wrap_int64(lhs - rhs))
        case '*':
            return Integer(wrap_int64(lhs * rhs))
        case '/':
            if rhs == 0:
                return new_error("division by zero")
            return Integer(wrap_int64(truncating_div(lhs, rhs)))
        case '<':
            return native_bool(lhs < rhs)
        case '>':
            return native_bool(lhs > rhs)
        case '==':
            return native_bool(lhs == rhs)
        case '!=':
            return native_bool(lhs != rhs)
        case _:
            return new_error(f"unknown operator: {left.type_name} {op} {right.type_name}")


def truncating_div(lhs: int, rhs: int) -> int:
    """Integer division rounding toward zero (Python's // floors)."""
    quotient = abs(lhs) // abs(rhs)
    return quotient if (lhs < 0) == (rhs < 0) else -quotient


def eval_string_infix(op: str, left: String, right: String) -> MonkeyObject:
    if op != '+':
        return new_error(f"unknown operator: {left.type_name} {op} {right.type_name}")

    return String(left.value + right.value)
