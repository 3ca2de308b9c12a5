"""
Syntax checks run before an expression reaches the evaluator.

`ValidatedExpression.parse()` is the only way to build a
`ValidatedExpression`, so code holding one knows the text passed every
check below.
"""

import re

from evaluator import (
    BINARY, CONST, LOGIC_OPS, LPAREN, NOT, RPAREN, UNARY, VAR, VARIABLES, tokenize,
)
from exceptions import MalformedExpression
from logic_operations import extract_variables

BINARY_OPS = ''.join(LOGIC_OPS)

RE_DOUBLE_BINARY = re.compile(f'[{BINARY_OPS}]{{2,}}')
RE_LEADING_BINARY = re.compile(f'^[{BINARY_OPS}]')
RE_TRAILING_OP = re.compile(f'[{BINARY_OPS}{NOT}]$')

OPERAND_END = (VAR, CONST, RPAREN)
OPERAND_START = (VAR, CONST, LPAREN, UNARY)
EXPECTS_OPERAND = (LPAREN, UNARY, BINARY)


def is_operator(char):
    return char == NOT or char in LOGIC_OPS


def is_variable(char):
    return char in VARIABLES


def check_expression(expression):
    """
    Raise `MalformedExpression` if `expression` is not well formed.

    Returns the expression with whitespace removed.
    """
    if not expression or not str(expression).strip():
        raise MalformedExpression('Expression is empty', expression=expression)

    text = re.sub(r'\s+', '', str(expression))

    depth = 0
    for i, ch in enumerate(text):
        if ch == '(':
            depth += 1
        elif ch == ')':
            depth -= 1
        if depth < 0:
            raise MalformedExpression('Closing parenthesis without an opening one', expression=text, position=i)
    if depth:
        raise MalformedExpression('Unclosed parenthesis', expression=text, position=len(text))

    m = RE_DOUBLE_BINARY.search(text)
    if m:
        raise MalformedExpression('Two binary operators in a row', expression=text, position=m.start())
    if RE_LEADING_BINARY.search(text):
        raise MalformedExpression('Expression starts with a binary operator', expression=text, position=0)
    if RE_TRAILING_OP.search(text):
        raise MalformedExpression('Expression ends with an operator', expression=text, position=len(text) - 1)

    tokens = tokenize(text)
    for prev, tok in zip(tokens, tokens[1:]):
        if prev.kind == LPAREN and tok.kind == RPAREN:
            raise MalformedExpression('Empty parentheses', expression=text, position=prev.position)
        if prev.kind in OPERAND_END and tok.kind in OPERAND_START:
            raise MalformedExpression(f'Missing operator before {tok.text!r}', expression=text, position=tok.position)
        if prev.kind in EXPECTS_OPERAND and tok.kind in (BINARY, RPAREN):
            raise MalformedExpression(f'Missing operand after {prev.text!r}', expression=text, position=tok.position)
    return text


def validate_expression(expression):
    try:
        check_expression(expression)
    except MalformedExpression:
        return False
    return True


_PARSE_KEY = object()


class ValidatedExpression:
    """An expression string that passed `check_expression`."""

    __slots__ = ('_text', '_compact')

    def __init__(self, text, compact, _key=None):
        if _key is not _PARSE_KEY:
            raise TypeError('Use ValidatedExpression.parse() to build a validated expression')
        self._text = text
        self._compact = compact

    @classmethod
    def parse(cls, expression):
        compact = check_expression(expression)
        return cls(str(expression), compact, _key=_PARSE_KEY)

    @property
    def text(self):
        return self._text

    @property
    def compact(self):
        return self._compact

    @property
    def variables(self):
        return extract_variables(self._compact)

    def __str__(self):
        return self._text

    def __repr__(self):
        return f'ValidatedExpression({self._text!r})'

    def __eq__(self, other):
        if isinstance(other, ValidatedExpression):
            return self._compact == other._compact
        return NotImplemented

    def __hash__(self):
        return hash(self._compact)
