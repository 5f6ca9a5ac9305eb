"""Built-in functions (len, first, last, rest, push, puts) registered via monkey.runtime."""

from __future__ import annotations

from .runtime import (
    NULL,
    Array,
    Integer,
    MonkeyObject,
    String,
    expect_arity,
    new_error,
    register_builtin,
)


def _require_array(name: str, arg: MonkeyObject):
    if not isinstance(arg, Array):
        return new_error(f"argument to `{name}` must be ARRAY, got {arg.type_name}")
    return None


@register_builtin("len")
def builtin_len(*args: MonkeyObject) -> MonkeyObject:
    err = expect_arity(args, 1)
    if err is not None:
        return err

    match args[0]:
        case String(value=s):
            return Integer(len(s))
        case Array(elements=items):
            return Integer(len(items))
        case other:
            return new_error(f"argument to `len` not supported, got {other.type_name}")


@register_builtin("first")
def builtin_first(*args: MonkeyObject) -> MonkeyObject:
    err = expect_arity(args, 1) or _require_array("first", args[0])
    if err is not None:
        return err

    items = args[0].elements
    return items[0] if items else NULL


@register_builtin("last")
def builtin_last(*args: MonkeyObject) -> MonkeyObject:
    err = expect_arity(args, 1) or _require_array("last", args[0])
    if err is not None:
        return err

    items = args[0].elements
    return items[-1] if items else NULL


@register_builtin("rest")
def builtin_rest(*args: MonkeyObject) -> MonkeyObject:
    err = expect_arity(args, 1) or _require_array("rest", args[0])
    if err is not None:
        return err

    items = args[0].elements
    if not items:
        return NULL

    return Array(list(items[1:]))


@register_builtin("push")
def builtin_push(*args: MonkeyObject) -> MonkeyObject:
    err = expect_arity(args, 2) or _require_array("push", args[0])
    if err is not None:
        return err

    # The input array is left untouched
    return Array([*args[0].elements, args[1]])


@register_builtin("puts")
def builtin_puts(*args: MonkeyObject) -> MonkeyObject:
    for arg in args:
        print(arg.inspect())

    return NULL
