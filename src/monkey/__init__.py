"""Monkey: a small expression-oriented scripting language.

Pipeline: ``lexer.tokenize`` -> ``parser.parse_program`` -> ``evaluator.evaluate``.
"""

import logging

from .environment import Environment
from .evaluator import evaluate
from .lexer import tokenize
from .parser import ParseError, parse_program, parse_source
from .runner import run

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "Environment",
    "ParseError",
    "evaluate",
    "parse_program",
    "parse_source",
    "run",
    "tokenize",
]
