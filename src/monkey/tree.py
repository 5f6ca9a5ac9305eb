"""Abstract syntax tree for Monkey programs.

Nodes are frozen dataclasses split into two families, statements and
expressions. Each node keeps the token that started it (ignored by equality)
and renders a canonical source form through ``str()``. Child slots typed
``Optional`` hold ``None`` when the parser could not complete that child.
"""
from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Iterator, Optional, Tuple

from .token_types import Tok, TT

_NO_TOKEN = Tok(TT.ILLEGAL, '')


def _render(node: Optional[Node]) -> str:
    return '' if node is None else str(node)


@dataclass(frozen=True)
class Node:
    """Base class for all AST nodes."""
    token: Tok = field(default=_NO_TOKEN, compare=False, repr=False)

    def token_literal(self) -> str:
        return self.token.literal


class Statement(Node):
    pass


class Expression(Node):
    pass


# ---------- Expressions ----------

@dataclass(frozen=True)
class Identifier(Expression):
    value: str = ''

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class IntegerLiteral(Expression):
    value: int = 0

    def __str__(self) -> str:
        return self.token.literal or str(self.value)


@dataclass(frozen=True)
class StringLiteral(Expression):
    value: str = ''

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class BooleanLiteral(Expression):
    value: bool = False

    def __str__(self) -> str:
        return 'true' if self.value else 'false'


@dataclass(frozen=True)
class ArrayLiteral(Expression):
    elements: Tuple[Optional[Expression], ...] = ()

    def __str__(self) -> str:
        return '[' + ', '.join(_render(e) for e in self.elements) + ']'


@dataclass(frozen=True)
class HashLiteral(Expression):
    pairs: Tuple[Tuple[Optional[Expression], Optional[Expression]], ...] = ()

    def __str__(self) -> str:
        items = [f'{_render(k)}:{_render(v)}' for k, v in self.pairs]
        return '{' + ', '.join(items) + '}'


@dataclass(frozen=True)
class PrefixExpression(Expression):
    operator: str = ''
    right: Optional[Expression] = None

    def __str__(self) -> str:
        return f'({self.operator}{_render(self.right)})'


@dataclass(frozen=True)
class InfixExpression(Expression):
    left: Optional[Expression] = None
    operator: str = ''
    right: Optional[Expression] = None

    def __str__(self) -> str:
        return f'({_render(self.left)} {self.operator} {_render(self.right)})'


@dataclass(frozen=True)
class IndexExpression(Expression):
    left: Optional[Expression] = None
    index: Optional[Expression] = None

    def __str__(self) -> str:
        return f'({_render(self.left)}[{_render(self.index)}])'


@dataclass(frozen=True)
class IfExpression(Expression):
    condition: Optional[Expression] = None
    consequence: Optional[BlockStatement] = None
    alternative: Optional[BlockStatement] = None

    def __str__(self) -> str:
        out = f'if{_render(self.condition)} {_render(self.consequence)}'
        if self.alternative is not None:
            out += f'else {self.alternative}'
        return out


@dataclass(frozen=True)
class FunctionLiteral(Expression):
    parameters: Tuple[Identifier, ...] = ()
    body: Optional[BlockStatement] = None

    def __str__(self) -> str:
        params = ', '.join(str(p) for p in self.parameters)
        return f'{self.token_literal() or "fn"}({params}) {_render(self.body)}'


@dataclass(frozen=True)
class CallExpression(Expression):
    function: Optional[Expression] = None
    arguments: Tuple[Optional[Expression], ...] = ()

    def __str__(self) -> str:
        args = ', '.join(_render(a) for a in self.arguments)
        return f'{_render(self.function)}({args})'


# ---------- Statements ----------

@dataclass(frozen=True)
class LetStatement(Statement):
    name: Optional[Identifier] = None
    value: Optional[Expression] = None

    def __str__(self) -> str:
        return f'let {_render(self.name)} = {_render(self.value)};'


@dataclass(frozen=True)
class ReturnStatement(Statement):
    value: Optional[Expression] = None

    def __str__(self) -> str:
        return f'return {_render(self.value)};'


@dataclass(frozen=True)
class ExpressionStatement(Statement):
    expression: Optional[Expression] = None

    def __str__(self) -> str:
        return _render(self.expression)


@dataclass(frozen=True)
class BlockStatement(Statement):
    statements: Tuple[Statement, ...] = ()

    def __str__(self) -> str:
        return ''.join(str(s) for s in self.statements)


@dataclass(frozen=True)
class Program(Node):
    statements: Tuple[Statement, ...] = ()

    def token_literal(self) -> str:
        if self.statements:
            return self.statements[0].token_literal()
        return ''

    def __str__(self) -> str:
        return ''.join(str(s) for s in self.statements)


def iter_children(node: Node) -> Iterator[Node]:
    """Yield the direct child nodes of *node* in field order, skipping absent ones."""
    for f in fields(node):
        if f.name == 'token':
            continue
        val = getattr(node, f.name)
        yield from _flatten(val)


def _flatten(val: object) -> Iterator[Node]:
    if isinstance(val, Node):
        yield val
    elif isinstance(val, tuple):
        for item in val:
            yield from _flatten(item)


def walk(node: Node) -> Iterator[Node]:
    """Depth-first, pre-order traversal of the tree rooted at *node*."""
    yield node
    for child in iter_children(node):
        yield from walk(child)
