"""
Pratt Parser for Monkey

Structure:
- Token stream: any iterable of Tok ending in EOF (see lexer.py)
- Parser: recursive descent for statements, precedence climbing for
  expressions via per-token prefix/infix handler tables
- AST: frozen node classes from tree.py

The parser never raises on malformed input. Every problem is appended to
``Parser.errors`` and parsing resumes at the end of the offending statement.
"""

import logging
from enum import IntEnum
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Tuple

from .lexer import tokenize
from .token_types import TT, Tok
from .tree import (
    ArrayLiteral,
    BlockStatement,
    BooleanLiteral,
    CallExpression,
    Expression,
    ExpressionStatement,
    FunctionLiteral,
    HashLiteral,
    Identifier,
    IfExpression,
    IndexExpression,
    InfixExpression,
    IntegerLiteral,
    LetStatement,
    PrefixExpression,
    Program,
    ReturnStatement,
    Statement,
    StringLiteral,
)

logger = logging.getLogger(__name__)

INT64_MAX = 2**63 - 1

PrefixParseFn = Callable[[], Optional[Expression]]
InfixParseFn = Callable[[Expression], Optional[Expression]]


class ParseError(Exception):
    """Raised by hosting code that refuses to evaluate a program with diagnostics."""
    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors) if self.errors else "parse failed")


class Precedence(IntEnum):
    LOWEST = 1
    EQUALS = 2       # ==
    LESSGREATER = 3  # > or <
    SUM = 4          # +
    PRODUCT = 5      # *
    PREFIX = 6       # -x or !x
    CALL = 7         # fn(x)
    INDEX = 8        # array[index]


PRECEDENCES: Dict[TT, Precedence] = {
    TT.EQ: Precedence.EQUALS,
    TT.NOT_EQ: Precedence.EQUALS,
    TT.LT: Precedence.LESSGREATER,
    TT.GT: Precedence.LESSGREATER,
    TT.PLUS: Precedence.SUM,
    TT.MINUS: Precedence.SUM,
    TT.SLASH: Precedence.PRODUCT,
    TT.ASTERISK: Precedence.PRODUCT,
    TT.LPAREN: Precedence.CALL,
    TT.LBRACKET: Precedence.INDEX,
}

# ============================================================================
# Parser
# ============================================================================

class Parser:
    """
    Pratt parser for Monkey.

    Expression precedence (lowest to highest):
    1. equality (==, !=)
    2. relational (<, >)
    3. additive (+, -)
    4. multiplicative (*, /)
    5. unary prefix (-, !)
    6. call (f(x))
    7. index (a[i])
    """

    def __init__(self, tokens: Iterable[Tok]):
        self._tokens: Iterator[Tok] = iter(tokens)
        self.errors: List[str] = []
        self._last = Tok(TT.EOF, '')
        # Block nesting; an error only triggers recovery at the depth it happened
        self._depth = 0
        self._error_depth = 0

        self.cur_token = self._next_from_stream()
        self.peek_token = self._next_from_stream()

        self.prefix_parse_fns: Dict[TT, PrefixParseFn] = {
            TT.IDENT: self.parse_identifier,
            TT.INT: self.parse_integer_literal,
            TT.STRING: self.parse_string_literal,
            TT.BANG: self.parse_prefix_expression,
            TT.MINUS: self.parse_prefix_expression,
            TT.TRUE: self.parse_boolean,
            TT.FALSE: self.parse_boolean,
            TT.LPAREN: self.parse_grouped_expression,
            TT.IF: self.parse_if_expression,
            TT.FUNCTION: self.parse_function_literal,
            TT.LBRACKET: self.parse_array_literal,
            TT.LBRACE: self.parse_hash_literal,
        }

        self.infix_parse_fns: Dict[TT, InfixParseFn] = {
            TT.PLUS: self.parse_infix_expression,
            TT.MINUS: self.parse_infix_expression,
            TT.SLASH: self.parse_infix_expression,
            TT.ASTERISK: self.parse_infix_expression,
            TT.EQ: self.parse_infix_expression,
            TT.NOT_EQ: self.parse_infix_expression,
            TT.LT: self.parse_infix_expression,
            TT.GT: self.parse_infix_expression,
            TT.LPAREN: self.parse_call_expression,
            TT.LBRACKET: self.parse_index_expression,
        }

    # ========================================================================
    # Token Navigation
    # ========================================================================

    def _next_from_stream(self) -> Tok:
        """Pull the next token; a stream that runs dry keeps yielding EOF"""
        tok = next(self._tokens, None)
        if tok is None:
            return Tok(TT.EOF, '', self._last.line, self._last.column)
        self._last = tok
        return tok

    def next_token(self) -> None:
        """Advance current and peek in lock-step"""
        self.cur_token = self.peek_token
        self.peek_token = self._next_from_stream()

    def cur_is(self, *types: TT) -> bool:
        return self.cur_token.type in types

    def peek_is(self, *types: TT) -> bool:
        return self.peek_token.type in types

    def expect_peek(self, token_type: TT) -> bool:
        """Advance if the peek token matches, otherwise record a diagnostic"""
        if self.peek_is(token_type):
            self.next_token()
            return True

        self.peek_error(token_type)
        return False

    def peek_precedence(self) -> Precedence:
        return PRECEDENCES.get(self.peek_token.type, Precedence.LOWEST)

    def cur_precedence(self) -> Precedence:
        return PRECEDENCES.get(self.cur_token.type, Precedence.LOWEST)

    # ========================================================================
    # Diagnostics
    # ========================================================================

    def add_error(self, msg: str) -> None:
        tok = self.cur_token
        logger.debug("parse error at %d:%d: %s", tok.line, tok.column, msg)
        self.errors.append(msg)
        self._error_depth = self._depth

    def peek_error(self, token_type: TT) -> None:
        self.add_error(f"expected next token to be {token_type}, got {self.peek_token.type} instead")

    def no_prefix_parse_fn_error(self, token_type: TT) -> None:
        self.add_error(f"no prefix parse function for {token_type} found")

    def synchronize(self) -> None:
        """Skip the rest of a broken statement.

        Stops on a ';' or just before a '}' / EOF so the enclosing loop's
        own advance lands on the closing token.
        """
        while not self.cur_is(TT.SEMICOLON, TT.EOF) and not self.peek_is(TT.RBRACE, TT.EOF):
            self.next_token()

    # ========================================================================
    # Top-Level Parsing
    # ========================================================================

    def parse_program(self) -> Program:
        """Parse entire program"""
        start = self.cur_token
        statements = self._parse_statement_list(TT.EOF)
        return Program(token=start, statements=tuple(statements))

    def _parse_statement_list(self, *terminators: TT) -> List[Statement]:
        statements: List[Statement] = []

        while not self.cur_is(*terminators, TT.EOF):
            errors_before = len(self.errors)
            stmt = self.parse_statement()

            if stmt is not None:
                statements.append(stmt)

            if len(self.errors) > errors_before and self._error_depth == self._depth:
                self.synchronize()

            self.next_token()

        return statements

    # ========================================================================
    # Statements
    # ========================================================================

    def parse_statement(self) -> Optional[Statement]:
        """Dispatch on the leading token"""
        if self.cur_is(TT.LET):
            return self.parse_let_statement()
        if self.cur_is(TT.RETURN):
            return self.parse_return_statement()
        return self.parse_expression_statement()

    def parse_let_statement(self) -> Optional[LetStatement]:
        """let <identifier> = <expression>;"""
        let_tok = self.cur_token

        if not self.expect_peek(TT.IDENT):
            return None

        name = Identifier(token=self.cur_token, value=self.cur_token.literal)

        if not self.expect_peek(TT.ASSIGN):
            return None

        self.next_token()
        value = self.parse_expression(Precedence.LOWEST)

        if self.peek_is(TT.SEMICOLON):
            self.next_token()

        return LetStatement(token=let_tok, name=name, value=value)

    def parse_return_statement(self) -> ReturnStatement:
        """return <expression>;"""
        ret_tok = self.cur_token
        self.next_token()

        value = self.parse_expression(Precedence.LOWEST)

        if self.peek_is(TT.SEMICOLON):
            self.next_token()

        return ReturnStatement(token=ret_tok, value=value)

    def parse_expression_statement(self) -> ExpressionStatement:
        start = self.cur_token
        expr = self.parse_expression(Precedence.LOWEST)

        if self.peek_is(TT.SEMICOLON):
            self.next_token()

        return ExpressionStatement(token=start, expression=expr)

    def parse_block_statement(self) -> BlockStatement:
        """{ <statement>* } -- entered with cur on '{', leaves cur on '}'"""
        brace = self.cur_token
        self.next_token()

        self._depth += 1
        try:
            statements = self._parse_statement_list(TT.RBRACE)
            if self.cur_is(TT.EOF):
                self.add_error(f"expected next token to be {TT.RBRACE}, got {TT.EOF} instead")
        finally:
            self._depth -= 1

        return BlockStatement(token=brace, statements=tuple(statements))

    # ========================================================================
    # Expressions
    # ========================================================================

    def parse_expression(self, precedence: Precedence) -> Optional[Expression]:
        """
        Precedence climbing:
        prefix handler for the current token builds the left side, then
        infix handlers fold in operators that bind tighter than *precedence*.
        """
        prefix = self.prefix_parse_fns.get(self.cur_token.type)
        if prefix is None:
            self.no_prefix_parse_fn_error(self.cur_token.type)
            return None

        left = prefix()

        while left is not None and not self.peek_is(TT.SEMICOLON) and precedence < self.peek_precedence():
            infix = self.infix_parse_fns.get(self.peek_token.type)
            if infix is None:
                return left

            self.next_token()
            left = infix(left)

        return left

    def parse_identifier(self) -> Identifier:
        return Identifier(token=self.cur_token, value=self.cur_token.literal)

    def parse_integer_literal(self) -> Optional[IntegerLiteral]:
        tok = self.cur_token
        try:
            value = int(tok.literal, 10)
        except ValueError:
            value = None

        if value is None or value > INT64_MAX:
            self.add_error(f'could not parse "{tok.literal}" as integer')
            return None

        return IntegerLiteral(token=tok, value=value)

    def parse_string_literal(self) -> StringLiteral:
        return StringLiteral(token=self.cur_token, value=self.cur_token.literal)

    def parse_boolean(self) -> BooleanLiteral:
        return BooleanLiteral(token=self.cur_token, value=self.cur_is(TT.TRUE))

    def parse_prefix_expression(self) -> PrefixExpression:
        op_tok = self.cur_token
        self.next_token()

        right = self.parse_expression(Precedence.PREFIX)
        return PrefixExpression(token=op_tok, operator=op_tok.literal, right=right)

    def parse_infix_expression(self, left: Expression) -> InfixExpression:
        op_tok = self.cur_token
        precedence = self.cur_precedence()
        self.next_token()

        right = self.parse_expression(precedence)
        return InfixExpression(token=op_tok, left=left, operator=op_tok.literal, right=right)

    def parse_grouped_expression(self) -> Optional[Expression]:
        self.next_token()

        expr = self.parse_expression(Precedence.LOWEST)

        if not self.expect_peek(TT.RPAREN):
            return None

        return expr

    def parse_if_expression(self) -> Optional[IfExpression]:
        """if (<condition>) { ... } [else { ... }]"""
        if_tok = self.cur_token

        if not self.expect_peek(TT.LPAREN):
            return None

        self.next_token()
        condition = self.parse_expression(Precedence.LOWEST)

        if not self.expect_peek(TT.RPAREN):
            return None

        if not self.expect_peek(TT.LBRACE):
            return None

        consequence = self.parse_block_statement()
        alternative = None

        if self.peek_is(TT.ELSE):
            self.next_token()

            if not self.expect_peek(TT.LBRACE):
                return None

            alternative = self.parse_block_statement()

        return IfExpression(token=if_tok, condition=condition, consequence=consequence, alternative=alternative)

    def parse_function_literal(self) -> Optional[FunctionLiteral]:
        """fn(<p>, <p>) { ... }"""
        fn_tok = self.cur_token

        if not self.expect_peek(TT.LPAREN):
            return None

        parameters = self.parse_function_parameters()
        if parameters is None:
            return None

        if not self.expect_peek(TT.LBRACE):
            return None

        body = self.parse_block_statement()
        return FunctionLiteral(token=fn_tok, parameters=parameters, body=body)

    def parse_function_parameters(self) -> Optional[Tuple[Identifier, ...]]:
        """Identifier list after '('; empty tuple is valid, None is a failure"""
        identifiers: List[Identifier] = []

        if self.peek_is(TT.RPAREN):
            self.next_token()
            return ()

        if not self.expect_peek(TT.IDENT):
            return None
        identifiers.append(Identifier(token=self.cur_token, value=self.cur_token.literal))

        while self.peek_is(TT.COMMA):
            self.next_token()
            if not self.expect_peek(TT.IDENT):
                return None
            identifiers.append(Identifier(token=self.cur_token, value=self.cur_token.literal))

        if not self.expect_peek(TT.RPAREN):
            return None

        return tuple(identifiers)

    def parse_call_expression(self, function: Expression) -> Optional[CallExpression]:
        call_tok = self.cur_token
        arguments = self.parse_expression_list(TT.RPAREN)
        if arguments is None:
            return None

        return CallExpression(token=call_tok, function=function, arguments=arguments)

    def parse_index_expression(self, left: Expression) -> Optional[IndexExpression]:
        bracket = self.cur_token
        self.next_token()

        index = self.parse_expression(Precedence.LOWEST)

        if not self.expect_peek(TT.RBRACKET):
            return None

        return IndexExpression(token=bracket, left=left, index=index)

    def parse_array_literal(self) -> Optional[ArrayLiteral]:
        bracket = self.cur_token
        elements = self.parse_expression_list(TT.RBRACKET)
        if elements is None:
            return None

        return ArrayLiteral(token=bracket, elements=elements)

    def parse_expression_list(self, end: TT) -> Optional[Tuple[Optional[Expression], ...]]:
        """Comma-separated expressions up to *end*; cur starts on the opener"""
        items: List[Optional[Expression]] = []

        if self.peek_is(end):
            self.next_token()
            return ()

        self.next_token()
        items.append(self.parse_expression(Precedence.LOWEST))

        while self.peek_is(TT.COMMA):
            self.next_token()
            self.next_token()
            items.append(self.parse_expression(Precedence.LOWEST))

        if not self.expect_peek(end):
            return None

        return tuple(items)

    def parse_hash_literal(self) -> Optional[HashLiteral]:
        """{ <key>: <value>, ... }"""
        brace = self.cur_token
        pairs: List[Tuple[Optional[Expression], Optional[Expression]]] = []

        while not self.peek_is(TT.RBRACE):
            self.next_token()
            key = self.parse_expression(Precedence.LOWEST)

            if not self.expect_peek(TT.COLON):
                return None

            self.next_token()
            value = self.parse_expression(Precedence.LOWEST)
            pairs.append((key, value))

            if not self.peek_is(TT.RBRACE) and not self.expect_peek(TT.COMMA):
                return None

        if not self.expect_peek(TT.RBRACE):
            return None

        return HashLiteral(token=brace, pairs=tuple(pairs))


# ============================================================================
# Entry points
# ============================================================================

def parse_program(tokens: Iterable[Tok]) -> Tuple[Program, List[str]]:
    """Parse a token stream into a Program plus the list of diagnostics"""
    parser = Parser(tokens)
    program = parser.parse_program()
    return program, parser.errors


def parse_source(source: str) -> Tuple[Program, List[str]]:
    """Tokenize and parse *source*"""
    return parse_program(tokenize(source))
