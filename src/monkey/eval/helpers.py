from __future__ import annotations

from typing import Callable, List, Optional, Sequence, Union

from ..environment import Environment
from ..tree import Node
from ..types import FALSE, NULL, TRUE, Boolean, Error, MonkeyObject, is_error

EvalFunc = Callable[[Optional[Node], Environment], MonkeyObject]


def is_truthy(val: MonkeyObject) -> bool:
    """Everything is truthy except `false` and null."""
    return val is not FALSE and val is not NULL


def native_bool(value: bool) -> Boolean:
    return TRUE if value else FALSE


def eval_expressions(
    nodes: Sequence[Optional[Node]],
    env: Environment,
    eval_func: EvalFunc,
) -> Union[List[MonkeyObject], Error]:
    """Evaluate left to right; the first Error is returned in place of the list."""
    out: List[MonkeyObject] = []

    for node in nodes:
        val = eval_func(node, env)
        if is_error(val):
            return val
        out.append(val)

    return out
