"""
Lexer for Monkey

Tokenizes Monkey source code into a stream of tokens.

Features:
- Terminal set generated from the keyword and operator tables below
- Scanning delegated to lark's basic lexer (longest-match, keyword re-typing)
- Position tracking (line, column)
- Never raises: unclassifiable characters become ILLEGAL tokens
"""

import logging
from functools import lru_cache
from typing import Iterator, List

from lark import Lark

from .token_types import TT, Tok

logger = logging.getLogger(__name__)

# ============================================================================
# Lexer Implementation
# ============================================================================

class Lexer:
    """
    Monkey lexer.

    The keyword and operator tables are the single source of truth; the lark
    grammar is derived from them once per process.
    """

    # Keyword mapping
    KEYWORDS = {
        'fn': TT.FUNCTION,
        'let': TT.LET,
        'true': TT.TRUE,
        'false': TT.FALSE,
        'if': TT.IF,
        'else': TT.ELSE,
        'return': TT.RETURN,
    }

    # Operator mapping; lark orders same-priority literals longest first
    OPERATORS = [
        # Two-character operators
        ('==', TT.EQ),
        ('!=', TT.NOT_EQ),

        # Single-character operators
        ('=', TT.ASSIGN),
        ('+', TT.PLUS),
        ('-', TT.MINUS),
        ('!', TT.BANG),
        ('*', TT.ASTERISK),
        ('/', TT.SLASH),
        ('<', TT.LT),
        ('>', TT.GT),
        (',', TT.COMMA),
        (';', TT.SEMICOLON),
        (':', TT.COLON),
        ('(', TT.LPAREN),
        (')', TT.RPAREN),
        ('{', TT.LBRACE),
        ('}', TT.RBRACE),
        ('[', TT.LBRACKET),
        (']', TT.RBRACKET),
    ]

    # Regex-shaped terminals
    PATTERNS = [
        (TT.INT, r'/[0-9]+/'),
        (TT.STRING, r'/"[^"]*"/'),
        (TT.IDENT, r'/[A-Za-z_][A-Za-z0-9_]*/'),
    ]

    def __init__(self, source: str):
        self.source = source
        self.tokens: List[Tok] = []

    # ========================================================================
    # Main Tokenization
    # ========================================================================

    def tokenize(self) -> List[Tok]:
        """Tokenize entire source, return token list ending in EOF"""
        self.tokens = []
        line, column = 1, 1

        for raw in _lark_lexer().lex(self.source):
            tok = self.convert(raw)
            self.tokens.append(tok)
            line, column = raw.end_line or tok.line, raw.end_column or tok.column

        self.tokens.append(Tok(TT.EOF, '', line, column))
        return self.tokens

    def __iter__(self) -> Iterator[Tok]:
        return iter(self.tokenize())

    @staticmethod
    def convert(raw) -> Tok:
        """Map a lark token onto our Tok; strings drop their quotes"""
        token_type = TT[raw.type]
        literal = str(raw)

        if token_type is TT.STRING:
            literal = literal[1:-1]
        elif token_type is TT.ILLEGAL:
            logger.debug("illegal character %r at %d:%d", literal, raw.line, raw.column)

        return Tok(token_type, literal, raw.line, raw.column)


def build_grammar() -> str:
    """Render the lark grammar for the token tables above"""
    lines = []

    for token_type, pattern in Lexer.PATTERNS:
        lines.append(f'{token_type.name}: {pattern}')

    for word, token_type in Lexer.KEYWORDS.items():
        lines.append(f'{token_type.name}: "{word}"')

    for op, token_type in Lexer.OPERATORS:
        lines.append(f'{token_type.name}: "{op}"')

    # Lowest priority so any real terminal wins on the same character
    lines.append(f'{TT.ILLEGAL.name}.-1: /./')
    lines.append(r'WS: /[ \t\f\r\n]+/')
    lines.append('%ignore WS')

    names = [t.name for t, _ in Lexer.PATTERNS]
    names += [t.name for t in Lexer.KEYWORDS.values()]
    names += [t.name for _, t in Lexer.OPERATORS]
    names.append(TT.ILLEGAL.name)
    lines.insert(0, f'start: ({" | ".join(names)})*')

    return '\n'.join(lines) + '\n'


@lru_cache(maxsize=None)
def _lark_lexer() -> Lark:
    logger.debug("building lark lexer")
    return Lark(build_grammar(), parser='lalr', lexer='basic')


def tokenize(source: str) -> List[Tok]:
    """Convenience function to tokenize source"""
    return Lexer(source).tokenize()
