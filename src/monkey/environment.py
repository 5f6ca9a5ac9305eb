from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Iterator, Optional

if TYPE_CHECKING:
    from .types import MonkeyObject


class Environment:
    """One lexical scope: local bindings plus an optional enclosing scope.

    Frames are shared, never copied. A closure keeps its defining frame alive
    after the block that created it has finished. Only ``set`` mutates, and
    only the frame it is called on.
    """

    def __init__(self, outer: Optional['Environment'] = None):
        self.outer = outer
        self.store: Dict[str, MonkeyObject] = {}

    def get(self, name: str) -> Optional[MonkeyObject]:
        """Look *name* up through the chain; ``None`` means not bound anywhere."""
        env: Optional[Environment] = self

        while env is not None:
            if name in env.store:
                return env.store[name]
            env = env.outer

        return None

    def set(self, name: str, value: MonkeyObject) -> MonkeyObject:
        self.store[name] = value
        return value

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.get(name) is not None

    def __iter__(self) -> Iterator[str]:
        return iter(self.store)

    def __repr__(self) -> str:
        depth = 0
        env = self.outer
        while env is not None:
            depth += 1
            env = env.outer
        return f"<Environment names={sorted(self.store)} depth={depth}>"


def new_enclosed_environment(outer: Environment) -> Environment:
    return Environment(outer=outer)
