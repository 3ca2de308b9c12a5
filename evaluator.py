"""
Evaluation engine for propositional logic expressions.

The expression is rewritten as a string: variables are substituted by
'0'/'1', innermost parentheses are reduced first, then NOT and the binary
operators are resolved one operator at a time until a single digit is left.

Precedence is applied across the whole flat string, highest first:

    ¬  ∧  ∨  ⊼  ⊽  ⊕  ↔  →
"""

import logging
import re
from collections import namedtuple
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from exceptions import MalformedExpression, MissingAssignment
from logging_config import get_logger

logger = get_logger(__name__)

VARIABLES = ('p', 'q', 'r', 'x', 'y', 'z')
CONSTANTS = ('0', '1')
NOT = '¬'

# operator symbol -> python lambda
LOGIC_OPS = {
    '∧': lambda a, b: a and b,
    '∨': lambda a, b: a or b,
    '⊼': lambda a, b: not (a and b),
    '⊽': lambda a, b: not (a or b),
    '⊕': lambda a, b: a != b,
    '↔': lambda a, b: a == b,
    '→': lambda a, b: (not a) or b,
}

OP_NAMES = {
    '¬': 'NOT',
    '∧': 'AND',
    '∨': 'OR',
    '⊼': 'NAND',
    '⊽': 'NOR',
    '⊕': 'XOR',
    '↔': 'XNOR',
    '→': 'IMPLICATION',
}

# highest first
OP_PRIOR = ['∧', '∨', '⊼', '⊽', '⊕', '↔', '→']

RE_NOT = re.compile(r'¬([01])')
RE_PAREN = re.compile(r'\(([^()]+)\)')
RE_BINARY = {op: re.compile(rf'([01]){re.escape(op)}([01])') for op in OP_PRIOR}

# token kinds
VAR, CONST, UNARY, BINARY, LPAREN, RPAREN = 'var', 'const', 'unary', 'binary', 'lparen', 'rparen'

Token = namedtuple('Token', ['kind', 'text', 'position'])


@dataclass(frozen=True)
class EvaluationStep:
    operation: str
    description: str
    result: str
    sub_steps: Optional[Tuple['EvaluationStep', ...]] = None

    def to_dict(self):
        data = {
            'operation': self.operation,
            'description': self.description,
            'result': self.result,
        }
        if self.sub_steps is not None:
            data['sub_steps'] = [step.to_dict() for step in self.sub_steps]
        return data


@dataclass
class EvaluationResult:
    """
    Outcome of `evaluate`.

    `substitution_steps` and `expression` are only filled in when the
    evaluation was traced.
    """

    result: bool
    steps: List[EvaluationStep] = field(default_factory=list)
    substitution_steps: List[EvaluationStep] = field(default_factory=list)
    expression: Optional[str] = None

    @property
    def traced(self):
        return self.expression is not None

    def to_dict(self):
        data = {
            'result': self.result,
            'steps': [step.to_dict() for step in self.steps],
        }
        if self.traced:
            data['substitution_steps'] = [step.to_dict() for step in self.substitution_steps]
            data['expression'] = self.expression
        return data


def format_bool(val):
    return 'T' if val else 'F'


def to_digit(val):
    return '1' if val else '0'


def tokenize(expression):
    """
    Split an expression into tokens, skipping whitespace.

    Positions are indexes into the expression with whitespace removed.
    """
    tokens = []
    position = 0
    for ch in expression:
        if ch.isspace():
            continue
        if ch in VARIABLES:
            kind = VAR
        elif ch in CONSTANTS:
            kind = CONST
        elif ch == NOT:
            kind = UNARY
        elif ch in LOGIC_OPS:
            kind = BINARY
        elif ch == '(':
            kind = LPAREN
        elif ch == ')':
            kind = RPAREN
        else:
            raise MalformedExpression(
                f'Unexpected character {ch!r}', expression=expression, position=position
            )
        tokens.append(Token(kind, ch, position))
        position += 1
    return tokens


def substitute(tokens, assignment, steps=None, expression=None):
    """Replace variable tokens by '1'/'0' and return the working string."""
    texts = [token.text for token in tokens]
    for variable, value in assignment.items():
        digit = to_digit(value)
        changed = False
        for i, token in enumerate(tokens):
            if token.kind == VAR and token.text == variable:
                texts[i] = digit
                changed = True
        if steps is not None and changed:
            steps.append(EvaluationStep(
                operation=f'Substitution: {variable}',
                description=f'{variable} = {format_bool(value)}',
                result=''.join(texts),
            ))

    missing = [token.text for token, text in zip(tokens, texts) if token.kind == VAR and text == token.text]
    if missing:
        raise MissingAssignment(missing, expression=expression)
    return ''.join(texts)


def evaluate_flat(expr, steps=None):
    """
    Evaluate a parenthesis-free string of digits and operators.

        evaluate_flat('1∧0')  # False
        evaluate_flat('¬0')   # True
    """
    result = expr

    def negate(m):
        val = m.group(1) == '1'
        res = not val
        if steps is not None:
            steps.append(EvaluationStep(
                operation=m.group(0),
                description=f'¬{format_bool(val)} = {format_bool(res)}',
                result=to_digit(res),
            ))
        return to_digit(res)

    while NOT in result:
        new_result = RE_NOT.sub(negate, result)
        if new_result == result:
            break
        result = new_result

    for op in OP_PRIOR:
        pattern = RE_BINARY[op]

        def apply_op(m):
            a, b = m.group(1) == '1', m.group(2) == '1'
            res = LOGIC_OPS[op](a, b)
            if steps is not None:
                steps.append(EvaluationStep(
                    operation=m.group(0),
                    description=f'{format_bool(a)} {op} {format_bool(b)} = {format_bool(res)} ({OP_NAMES[op]})',
                    result=to_digit(res),
                ))
            return to_digit(res)

        while pattern.search(result):
            new_result = pattern.sub(apply_op, result)
            if new_result == result:
                break
            result = new_result

    if result not in CONSTANTS:
        raise MalformedExpression(f'Could not reduce {expr!r} to a single value', expression=expr)
    return result == '1'


def resolve_parentheses(working, steps=None):
    """Reduce innermost parenthesized groups until none are left."""

    def reduce_group(m):
        sub_steps = [] if steps is not None else None
        value = evaluate_flat(m.group(1), sub_steps)
        if steps is not None:
            steps.append(EvaluationStep(
                operation=f'Evaluation: {m.group(0)}',
                description=f'Parenthesis: {format_bool(value)}',
                result=to_digit(value),
                sub_steps=tuple(sub_steps),
            ))
        return to_digit(value)

    while '(' in working:
        new_working = RE_PAREN.sub(reduce_group, working)
        if new_working == working:
            break
        working = new_working

    if '(' in working or ')' in working:
        raise MalformedExpression('Unbalanced parentheses', expression=working, position=_first_paren(working))
    return working


def _first_paren(text):
    positions = [i for i in (text.find('('), text.find(')')) if i >= 0]
    return min(positions) if positions else None


def evaluate(expression, assignment=None, trace=False):
    """
    Evaluate `expression` under `assignment` (variable -> bool).

    Accepts a plain string or a `validator.ValidatedExpression`. An empty
    expression evaluates to False. Variables in `assignment` that do not
    occur in the expression are ignored.

        evaluate('p ∧ q', {'p': True, 'q': False}).result  # False
        evaluate('p ∧ q', {'p': True, 'q': True}, trace=True).steps
    """
    text = '' if expression is None else str(expression)
    if not text.strip():
        return EvaluationResult(result=False)

    assignment = assignment or {}
    steps = [] if trace else None
    substitution_steps = [] if trace else None

    if trace:
        substitution_steps.append(EvaluationStep(
            operation='Original expression',
            description=text,
            result=text,
        ))

    working = substitute(tokenize(text), assignment, substitution_steps, expression=text)

    if trace:
        steps.append(EvaluationStep(
            operation='Variable substitution',
            description=f'Expression with values: {working}',
            result=working,
        ))

    working = resolve_parentheses(working, steps)
    result = evaluate_flat(working, steps)

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            'Evaluated expression',
            extra={'extra_info': {'expression': text, 'result': result, 'traced': trace}},
        )

    if trace:
        return EvaluationResult(
            result=result,
            steps=steps,
            substitution_steps=substitution_steps,
            expression=text,
        )
    return EvaluationResult(result=result)
