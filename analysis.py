"""
Properties of expressions computed from their truth tables: tautology,
contradiction, contingency, equivalence and canonical normal forms.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional

from evaluator import NOT, VARIABLES, evaluate
from logic_operations import build_truth_table, create_variable_map, extract_variables, generate_combinations

TAUTOLOGY = 'tautology'
CONTRADICTION = 'contradiction'
CONTINGENCY = 'contingency'


def _classify_results(results):
    if all(results):
        return TAUTOLOGY
    if not any(results):
        return CONTRADICTION
    return CONTINGENCY


def classify(expression, max_variables=len(VARIABLES)):
    return _classify_results(build_truth_table(expression, max_variables).results)


def is_tautology(expression):
    return classify(expression) == TAUTOLOGY


def is_contradiction(expression):
    return classify(expression) == CONTRADICTION


def is_satisfiable(expression):
    return classify(expression) != CONTRADICTION


@dataclass
class EquivalenceReport:
    equivalent: bool
    variables: List[str]
    counterexample: Optional[Dict[str, bool]] = None
    left_value: Optional[bool] = None
    right_value: Optional[bool] = None

    def to_dict(self):
        return {
            'equivalent': self.equivalent,
            'variables': self.variables,
            'counterexample': self.counterexample,
            'left_value': self.left_value,
            'right_value': self.right_value,
        }


def are_equivalent(left, right):
    """Compare both expressions on every assignment of their joint variables."""
    variables = sorted(set(extract_variables(left)) | set(extract_variables(right)))
    for combo in generate_combinations(variables):
        values = create_variable_map(variables, combo)
        left_value = evaluate(left, values).result
        right_value = evaluate(right, values).result
        if left_value != right_value:
            return EquivalenceReport(
                equivalent=False,
                variables=variables,
                counterexample=values,
                left_value=left_value,
                right_value=right_value,
            )
    return EquivalenceReport(equivalent=True, variables=variables)


def _literal(variable, positive):
    return variable if positive else NOT + variable


def _join(terms, op):
    if len(terms) == 1:
        return terms[0]
    return f' {op} '.join(terms)


def _group(term, size):
    return f'({term})' if size > 1 else term


def _dnf(table):
    if not table.variables:
        return '1' if table.results[0] else '0'

    n = len(table.variables)
    minterms = [
        _group(_join([_literal(v, val) for v, val in zip(table.variables, combo)], '∧'), n)
        for combo, result in table if result
    ]
    if not minterms:
        return '0'
    return _join(minterms, '∨')


def _cnf(table):
    if not table.variables:
        return '1' if table.results[0] else '0'

    n = len(table.variables)
    maxterms = [
        _group(_join([_literal(v, not val) for v, val in zip(table.variables, combo)], '∨'), n)
        for combo, result in table if not result
    ]
    if not maxterms:
        return '1'
    return _join(maxterms, '∧')


def to_dnf(expression, max_variables=len(VARIABLES)):
    """Canonical DNF: one minterm per row where the expression is true."""
    return _dnf(build_truth_table(expression, max_variables))


def to_cnf(expression, max_variables=len(VARIABLES)):
    """Canonical CNF: one maxterm per row where the expression is false."""
    return _cnf(build_truth_table(expression, max_variables))


def analyze(expression, max_variables=len(VARIABLES)):
    """Everything the properties page shows for one expression."""
    table = build_truth_table(expression, max_variables)
    return {
        'expression': str(expression),
        'variables': table.variables,
        'classification': _classify_results(table.results),
        'true_rows': sum(table.results),
        'rows': len(table),
        'dnf': _dnf(table),
        'cnf': _cnf(table),
    }
