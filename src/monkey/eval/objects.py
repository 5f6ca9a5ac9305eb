from __future__ import annotations

from typing import Dict

from ..environment import Environment
from ..runtime import new_error
from ..tree import ArrayLiteral, HashLiteral
from ..types import NULL, Array, Hash, HashKey, HashPair, Integer, MonkeyObject, is_error, is_hashable
from .helpers import EvalFunc, eval_expressions


def eval_array_literal(n: ArrayLiteral, env: Environment, eval_func: EvalFunc) -> MonkeyObject:
    elements = eval_expressions(n.elements, env, eval_func)
    if is_error(elements):
        return elements

    return Array(elements)


def eval_hash_literal(n: HashLiteral, env: Environment, eval_func: EvalFunc) -> MonkeyObject:
    """Key then value per entry, left to right; later duplicate keys win."""
    pairs: Dict[HashKey, HashPair] = {}

    for key_node, value_node in n.pairs:
        key = eval_func(key_node, env)
        if is_error(key):
            return key

        # Reject the key before its value runs
        if not is_hashable(key):
            return new_error(f"unusable as hash key: {key.type_name}")

        value = eval_func(value_node, env)
        if is_error(value):
            return value

        pairs[key.hash_key()] = HashPair(key=key, value=value)

    return Hash(pairs=pairs)


def eval_index_expression(left: MonkeyObject, index: MonkeyObject) -> MonkeyObject:
    match (left, index):
        case (Array(), Integer()):
            return eval_array_index(left, index)
        case (Hash(), _):
            return eval_hash_index(left, index)
        case _:
            return new_error(f"index operator not supported: {left.type_name}")


def eval_array_index(array: Array, index: Integer) -> MonkeyObject:
    idx = index.value

    # Out of range reads as null; negative indexes do not wrap
    if idx < 0 or idx >= len(array.elements):
        return NULL

    return array.elements[idx]


def eval_hash_index(hash_obj: Hash, index: MonkeyObject) -> MonkeyObject:
    if not is_hashable(index):
        return new_error(f"unusable as hash key: {index.type_name}")

    pair = hash_obj.pairs.get(index.hash_key())
    if pair is None:
        return NULL

    return pair.value
