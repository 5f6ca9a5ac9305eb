from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, ClassVar, Dict, List, Optional, Tuple

from typing_extensions import Protocol, TypeGuard, runtime_checkable

from .tree import BlockStatement, Identifier

if TYPE_CHECKING:
    from .environment import Environment

# ---------- Type tags ----------

INTEGER_OBJ = "INTEGER"
BOOLEAN_OBJ = "BOOLEAN"
STRING_OBJ = "STRING"
NULL_OBJ = "NULL"
ARRAY_OBJ = "ARRAY"
HASH_OBJ = "HASH"
FUNCTION_OBJ = "FUNCTION"
BUILTIN_OBJ = "BUILTIN"
ERROR_OBJ = "ERROR"
RETURN_VALUE_OBJ = "RETURN_VALUE"

_U64_MASK = (1 << 64) - 1
_FNV64_OFFSET = 0xCBF29CE484222325
_FNV64_PRIME = 0x100000001B3


def wrap_int64(value: int) -> int:
    """Reduce *value* to the signed 64-bit range with two's complement wraparound."""
    value &= _U64_MASK
    return value - (1 << 64) if value >= (1 << 63) else value


def fnv1a_64(data: bytes) -> int:
    h = _FNV64_OFFSET
    for byte in data:
        h ^= byte
        h = (h * _FNV64_PRIME) & _U64_MASK
    return h

# ---------- Hash keys ----------

@dataclass(frozen=True)
class HashKey:
    type: str
    value: int


@runtime_checkable
class HashableObject(Protocol):
    def hash_key(self) -> HashKey: ...

# ---------- Value Model ----------

class MonkeyObject:
    type_name: ClassVar[str] = ""

    def inspect(self) -> str:
        raise NotImplementedError

    def __str__(self) -> str:
        return self.inspect()


@dataclass(frozen=True)
class Integer(MonkeyObject):
    type_name: ClassVar[str] = INTEGER_OBJ
    value: int

    def inspect(self) -> str:
        return str(self.value)

    def hash_key(self) -> HashKey:
        return HashKey(INTEGER_OBJ, self.value & _U64_MASK)


@dataclass(frozen=True, eq=False)
class Boolean(MonkeyObject):
    type_name: ClassVar[str] = BOOLEAN_OBJ
    value: bool

    def inspect(self) -> str:
        return "true" if self.value else "false"

    def hash_key(self) -> HashKey:
        return HashKey(BOOLEAN_OBJ, 1 if self.value else 0)


@dataclass(frozen=True)
class String(MonkeyObject):
    type_name: ClassVar[str] = STRING_OBJ
    value: str

    def inspect(self) -> str:
        return self.value

    def hash_key(self) -> HashKey:
        return HashKey(STRING_OBJ, fnv1a_64(self.value.encode("utf-8")))


@dataclass(frozen=True, eq=False)
class Null(MonkeyObject):
    type_name: ClassVar[str] = NULL_OBJ

    def inspect(self) -> str:
        return "null"


@dataclass(eq=False)
class Array(MonkeyObject):
    type_name: ClassVar[str] = ARRAY_OBJ
    elements: List[MonkeyObject] = field(default_factory=list)

    def inspect(self) -> str:
        return "[" + ", ".join(e.inspect() for e in self.elements) + "]"


@dataclass(frozen=True)
class HashPair:
    key: MonkeyObject
    value: MonkeyObject


@dataclass(eq=False)
class Hash(MonkeyObject):
    type_name: ClassVar[str] = HASH_OBJ
    pairs: Dict[HashKey, HashPair] = field(default_factory=dict)

    def inspect(self) -> str:
        items = [f"{p.key.inspect()}: {p.value.inspect()}" for p in self.pairs.values()]
        return "{" + ", ".join(items) + "}"


@dataclass(eq=False)
class Function(MonkeyObject):
    type_name: ClassVar[str] = FUNCTION_OBJ
    parameters: Tuple[Identifier, ...]
    body: BlockStatement
    env: 'Environment'   # closure frame, shared with its definer

    def inspect(self) -> str:
        params = ", ".join(str(p) for p in self.parameters)
        return f"fn({params}) {{\n{self.body}\n}}"

    def __repr__(self) -> str:
        return f"<fn params={[p.value for p in self.parameters]}>"


BuiltinFn = Callable[..., MonkeyObject]


@dataclass(frozen=True, eq=False)
class Builtin(MonkeyObject):
    type_name: ClassVar[str] = BUILTIN_OBJ
    name: str
    fn: BuiltinFn

    def inspect(self) -> str:
        return "builtin function"

    def __repr__(self) -> str:
        return f"<builtin {self.name}>"


@dataclass(frozen=True)
class Error(MonkeyObject):
    type_name: ClassVar[str] = ERROR_OBJ
    message: str

    def inspect(self) -> str:
        return "ERROR: " + self.message


@dataclass(frozen=True)
class ReturnValue(MonkeyObject):
    """Control-flow marker for `return`; unwrapped before leaving a call or program."""
    type_name: ClassVar[str] = RETURN_VALUE_OBJ
    value: MonkeyObject

    def inspect(self) -> str:
        return self.value.inspect()


# Canonical singletons; equality on these is identity
TRUE = Boolean(True)
FALSE = Boolean(False)
NULL = Null()


def is_hashable(obj: MonkeyObject) -> TypeGuard[HashableObject]:
    return isinstance(obj, HashableObject)


def is_error(obj: Optional[MonkeyObject]) -> TypeGuard[Error]:
    return isinstance(obj, Error)


