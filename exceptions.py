"""
exceptions.py

Exception hierarchy for the logic calculator.

    LogicError
    ├── ExpressionError
    │   ├── MalformedExpression
    │   └── MissingAssignment
    └── ConfigurationError

An empty expression is not an error: it evaluates to False.
"""

from typing import Any, Dict, Iterable, Optional


class LogicError(Exception):
    """Base class for every error raised by the calculator."""

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.message = message
        self.context = context or {}
        self.original_exception = original_exception

    def __str__(self) -> str:
        base_msg = self.message

        if self.context:
            context_str = ', '.join(f'{k}={v}' for k, v in self.context.items())
            base_msg += f' | Context: {context_str}'

        if self.original_exception:
            base_msg += f' | Caused by: {type(self.original_exception).__name__}: {self.original_exception}'

        return base_msg

    def __repr__(self) -> str:
        return f'{self.__class__.__name__}(message={self.message!r}, context={self.context!r})'


class ExpressionError(LogicError):
    """An expression could not be evaluated."""


class MalformedExpression(ExpressionError):
    """
    Unbalanced parentheses, misplaced operators or unknown characters.

    `position` is the index in the whitespace-free expression where the
    problem was detected, when known.
    """

    def __init__(
        self,
        message: str,
        expression: Optional[str] = None,
        position: Optional[int] = None,
        **kwargs: Any,
    ):
        context = kwargs.pop('context', {}) or {}
        if expression is not None:
            context['expression'] = expression
        if position is not None:
            context['position'] = position
        super().__init__(message, context=context, **kwargs)
        self.expression = expression
        self.position = position


class MissingAssignment(ExpressionError):
    """A variable occurring in the expression has no value."""

    def __init__(self, variables: Iterable[str], expression: Optional[str] = None, **kwargs: Any):
        self.variables = sorted(set(variables))
        joined = ', '.join(self.variables)
        context = {'variables': ','.join(self.variables)}
        if expression is not None:
            context['expression'] = expression
        super().__init__(
            f'No value given for variable(s): {joined}',
            context=context,
            **kwargs,
        )
        self.expression = expression


class ConfigurationError(LogicError):
    """Invalid application configuration."""
