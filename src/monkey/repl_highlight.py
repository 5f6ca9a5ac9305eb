"""Syntax colouring for the REPL input buffer."""

from __future__ import annotations

from functools import lru_cache
from typing import Callable, Dict, FrozenSet, Tuple

from prompt_toolkit.document import Document
from prompt_toolkit.formatted_text import StyleAndTextTuples
from prompt_toolkit.lexers import Lexer

from .lexer import Lexer as TokenLexer, tokenize
from .runtime import Builtins, init_builtins
from .token_types import TT, Tok

STYLES: Dict[str, str] = {
    "keyword": "bold ansicyan",
    "literal": "ansicyan",
    "number": "ansimagenta",
    "string": "ansigreen",
    "builtin": "bold ansiyellow",
    "illegal": "bold ansired",
}

# Everything not listed (identifiers, operators, punctuation) stays unstyled
_CATEGORY: Dict[TT, str] = {tt: "keyword" for tt in TokenLexer.KEYWORDS.values()}
_CATEGORY.update({
    TT.TRUE: "literal",
    TT.FALSE: "literal",
    TT.INT: "number",
    TT.STRING: "string",
    TT.ILLEGAL: "illegal",
})


def builtin_names() -> FrozenSet[str]:
    """Names currently in the builtin registry."""
    init_builtins()
    return frozenset(Builtins.functions)


def style_for(tok: Tok, builtins: FrozenSet[str] = frozenset()) -> str:
    if tok.type is TT.IDENT:
        return STYLES["builtin"] if tok.literal in builtins else ""
    return STYLES.get(_CATEGORY.get(tok.type, ""), "")


def source_width(tok: Tok) -> int:
    # STRING literals are stored without their quotes
    return len(tok.literal) + 2 if tok.type is TT.STRING else len(tok.literal)


def highlight_line(line: str) -> Tuple[Tuple[str, str], ...]:
    """Split *line* into (style, text) fragments that join back to *line*."""
    return _highlight_line(line, builtin_names())


# Keyed on the registry snapshot so a newly registered builtin is picked up
@lru_cache(maxsize=256)
def _highlight_line(line: str, builtins: FrozenSet[str]) -> Tuple[Tuple[str, str], ...]:
    fragments = []
    cursor = 0

    for tok in tokenize(line):
        if tok.type is TT.EOF:
            break

        start = tok.column - 1
        end = start + source_width(tok)
        if start < cursor or end == start:
            continue

        if start > cursor:
            fragments.append(("", line[cursor:start]))
        fragments.append((style_for(tok, builtins), line[start:end]))
        cursor = end

    if cursor < len(line) or not fragments:
        fragments.append(("", line[cursor:]))

    return tuple(fragments)


class MonkeyLexer(Lexer):
    def lex_document(self, document: Document) -> Callable[[int], StyleAndTextTuples]:
        lines = document.lines
        builtins = builtin_names()

        def get_line(lineno: int) -> StyleAndTextTuples:
            if lineno >= len(lines):
                return [("", "")]
            return list(_highlight_line(lines[lineno], builtins))

        return get_line
