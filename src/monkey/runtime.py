from __future__ import annotations

import importlib
import logging
from typing import Dict, List, Optional, Sequence

from .environment import Environment, new_enclosed_environment
from .types import (
    NULL,
    Array,
    Boolean,
    Builtin,
    BuiltinFn,
    Error,
    Function,
    Hash,
    HashKey,
    HashPair,
    Integer,
    MonkeyObject,
    Null,
    ReturnValue,
    String,
    TRUE,
    FALSE,
    is_error,
)

logger = logging.getLogger(__name__)

_STDLIB_INITIALIZED = False


class Builtins:
    """Process-wide registry of native functions, consulted after the environment chain."""
    functions: Dict[str, Builtin] = {}


def init_builtins() -> None:
    """Load the stdlib module (idempotent) so its register_builtin hooks run."""
    global _STDLIB_INITIALIZED

    if _STDLIB_INITIALIZED:
        return

    importlib.import_module("monkey.stdlib")
    _STDLIB_INITIALIZED = True


def register_builtin(name: str):
    def dec(fn: BuiltinFn):
        if name in Builtins.functions:
            logger.debug("overwriting builtin %s", name)
        else:
            logger.debug("registering builtin %s", name)
        Builtins.functions[name] = Builtin(name=name, fn=fn)
        return fn

    return dec


def lookup_builtin(name: str) -> Optional[Builtin]:
    init_builtins()
    return Builtins.functions.get(name)


def new_error(message: str) -> Error:
    return Error(message)


def expect_arity(args: Sequence[MonkeyObject], want: int) -> Optional[Error]:
    if len(args) != want:
        return new_error(f"wrong number of arguments. got={len(args)}, want={want}")
    return None


def apply_function(fn: MonkeyObject, args: List[MonkeyObject]) -> MonkeyObject:
    """
    Call semantics:
    - Function: fresh frame enclosing the closure frame, params bound
      positionally. Extra args are dropped; missing params bind NULL.
    - Builtin: native call with the evaluated args.
    - Anything else: not a function.
    """
    match fn:
        case Function():
            extended = extend_function_env(fn, args)
            from .evaluator import eval_node  # local import to avoid cycle
            evaluated = eval_node(fn.body, extended)
            return unwrap_return_value(evaluated)
        case Builtin():
            return fn.fn(*args)
        case _:
            return new_error(f"not a function: {fn.type_name}")


def extend_function_env(fn: Function, args: List[MonkeyObject]) -> Environment:
    env = new_enclosed_environment(fn.env)

    for idx, param in enumerate(fn.parameters):
        env.set(param.value, args[idx] if idx < len(args) else NULL)

    return env


def unwrap_return_value(obj: MonkeyObject) -> MonkeyObject:
    if isinstance(obj, ReturnValue):
        return obj.value
    return obj


__all__ = [
    "Array",
    "Boolean",
    "Builtin",
    "Builtins",
    "Environment",
    "Error",
    "FALSE",
    "Function",
    "Hash",
    "HashKey",
    "HashPair",
    "Integer",
    "MonkeyObject",
    "NULL",
    "Null",
    "ReturnValue",
    "String",
    "TRUE",
    "apply_function",
    "expect_arity",
    "init_builtins",
    "is_error",
    "lookup_builtin",
    "new_error",
    "register_builtin",
]
