"""
Helpers that feed the evaluator when building a full truth table.
"""

import itertools
import re
from dataclasses import dataclass, field
from typing import List

from evaluator import NOT, VARIABLES, evaluate, format_bool
from exceptions import ExpressionError

RE_NOT_VAR = re.compile(rf'{NOT}[{"".join(VARIABLES)}]')


@dataclass
class TruthTable:
    expression: str
    variables: List[str]
    combinations: List[List[bool]] = field(default_factory=list)
    results: List[bool] = field(default_factory=list)

    def __iter__(self):
        return iter(zip(self.combinations, self.results))

    def __len__(self):
        return len(self.combinations)

    def rows(self):
        for combination, result in self:
            row = create_variable_map(self.variables, combination)
            row['result'] = result
            yield row

    def to_dict(self):
        return {
            'expression': self.expression,
            'variables': list(self.variables),
            'combinations': [list(c) for c in self.combinations],
            'results': list(self.results),
        }


def extract_variables(expression):
    """Sorted alphabet symbols that appear anywhere in `expression`."""
    if not expression:
        return []
    return sorted({v for v in VARIABLES if v in str(expression)})


def count_variables(expression):
    return len(extract_variables(expression))


def generate_combinations(variables):
    """
    All 2^n assignments in ascending binary order, first variable as the
    most significant bit: row 0 is all False, the last row all True.
    """
    return [list(combo) for combo in itertools.product([False, True], repeat=len(variables))]


def create_variable_map(variables, values):
    values = list(values)
    if len(values) != len(variables):
        raise ValueError(f'Expected {len(variables)} values, got {len(values)}')
    return dict(zip(variables, values))


def build_truth_table(expression, max_variables=len(VARIABLES)):
    variables = extract_variables(expression)
    if len(variables) > max_variables:
        raise ExpressionError(
            f'Too many variables: {len(variables)} (maximum {max_variables})',
            context={'expression': str(expression), 'variables': ','.join(variables)},
        )

    table = TruthTable(expression=str(expression), variables=variables)
    for combo in generate_combinations(variables):
        values = create_variable_map(variables, combo)
        table.combinations.append(combo)
        table.results.append(evaluate(expression, values).result)
    return table


def extract_subexpressions(expr):
    """
    Intermediate columns of a truth table: negated variables first, then
    the content of every parenthesized group, innermost first.
    """
    expr = re.sub(r'\s+', '', str(expr))
    result = []
    for m in RE_NOT_VAR.finditer(expr):
        token = m.group(0)
        if token not in result:
            result.append(token)

    def extract_paren(s):
        out = []
        depth = 0
        start = None
        for i, ch in enumerate(s):
            if ch == '(':
                if depth == 0:
                    start = i
                depth += 1
            elif ch == ')' and depth:
                depth -= 1
                if depth == 0 and start is not None:
                    sub = s[start + 1:i]
                    for inner in extract_paren(sub):
                        if inner not in out:
                            out.append(inner)
                    if sub not in out:
                        out.append(sub)
        return out

    for se in extract_paren(expr):
        # a bare variable is already a column
        if se not in result and se not in VARIABLES:
            result.append(se)
    return [se for se in result if se != expr]


def build_table_rows(expression, max_variables=len(VARIABLES)):
    """
    Rows for the HTML table: one dict per assignment holding the variables,
    every intermediate sub-expression and the expression itself as 'T'/'F'.
    """
    variables = extract_variables(expression)
    if len(variables) > max_variables:
        raise ExpressionError(
            f'Too many variables: {len(variables)} (maximum {max_variables})',
            context={'expression': str(expression)},
        )
    columns = extract_subexpressions(expression)
    # a bare variable is already shown as its own column
    if re.sub(r'\s+', '', str(expression)) not in variables:
        columns.append(str(expression))

    rows = []
    for combo in generate_combinations(variables):
        values = create_variable_map(variables, combo)
        row = {var: format_bool(values[var]) for var in variables}
        for column in columns:
            row[column] = format_bool(evaluate(column, values).result)
        rows.append(row)
    return variables, columns, rows
