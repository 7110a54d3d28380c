"""
Buy/sell predicates and the condition evaluator.

A predicate is one of two variants sharing the same evaluate() interface:
- CallablePredicate wraps a Python callable f(values, bars, index) -> bool
- ExpressionPredicate wraps a textual expression (see expression.py)

The simulator only ever talks to ConditionEvaluator, which turns any
failure inside a predicate into "condition not met" and logs it.
"""
import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Mapping, Optional, Sequence

from .expression import Expression, parse_expression
from ..shared.errors import ExpressionError, StrategyValidationError
from ..shared.types import Bar

logger = logging.getLogger(__name__)

ConditionFunc = Callable[[Dict[str, float], Sequence[Bar], int], Any]


class Predicate(ABC):
    """A buy or sell decision evaluated per bar index."""

    @abstractmethod
    def evaluate(self, values: Mapping[str, float], bars: Sequence[Bar], index: int) -> bool:
        """
        Decide whether the condition holds at bars[index].

        Args:
            values: Defined indicator values at index (undefined keys omitted)
            bars: Full bar series
            index: Current bar index

        Raises:
            Any exception raised while deciding; ConditionEvaluator handles them.
        """
        pass


class CallablePredicate(Predicate):
    """Predicate backed by a Python callable."""

    def __init__(self, func: ConditionFunc):
        if not callable(func):
            raise StrategyValidationError(f"Condition must be callable, got {func!r}")
        self.func = func

    def evaluate(self, values: Mapping[str, float], bars: Sequence[Bar], index: int) -> bool:
        return bool(self.func(dict(values), bars, index))

    def __repr__(self) -> str:
        name = getattr(self.func, '__name__', type(self.func).__name__)
        return f"CallablePredicate({name})"


def build_expression_context(
    values: Mapping[str, float],
    bars: Sequence[Bar],
    index: int,
) -> Dict[str, float]:
    """
    Identifiers available to textual conditions at one bar.

    Indicator values plus the bar's open/high/low/close/volume, `price`
    (the close) and the raw `index`.
    """
    bar = bars[index]
    context: Dict[str, float] = dict(values)
    context.update({
        'open': bar.open,
        'high': bar.high,
        'low': bar.low,
        'close': bar.close,
        'volume': bar.volume,
        'price': bar.close,
        'index': index,
    })
    return context


class ExpressionPredicate(Predicate):
    """Predicate backed by a textual expression, parsed once on first use."""

    def __init__(self, expression: str):
        if not isinstance(expression, str):
            raise StrategyValidationError(f"Expression must be a string, got {expression!r}")
        self.expression = expression
        self._parsed: Optional[Expression] = None
        self._parse_error: Optional[ExpressionError] = None

    def parse(self) -> Expression:
        """Parsed expression; raises the (cached) ExpressionError for malformed text."""
        if self._parse_error is not None:
            raise self._parse_error
        if self._parsed is None:
            try:
                self._parsed = parse_expression(self.expression)
            except ExpressionError as e:
                self._parse_error = e
                raise
        return self._parsed

    def evaluate(self, values: Mapping[str, float], bars: Sequence[Bar], index: int) -> bool:
        context = build_expression_context(values, bars, index)
        return bool(self.parse().evaluate(context))

    def __repr__(self) -> str:
        return f"ExpressionPredicate({self.expression!r})"


class _Never(Predicate):
    """Condition that never holds (default for omitted sides of custom strategies)."""

    def evaluate(self, values: Mapping[str, float], bars: Sequence[Bar], index: int) -> bool:
        return False

    def __repr__(self) -> str:
        return "NEVER"


NEVER: Predicate = _Never()


def make_predicate(condition: Any) -> Predicate:
    """
    Build the predicate variant for a descriptor condition.

    Raises:
        StrategyValidationError: If condition is neither callable nor a string
    """
    if isinstance(condition, Predicate):
        return condition
    if isinstance(condition, str):
        return ExpressionPredicate(condition)
    if callable(condition):
        return CallablePredicate(condition)
    raise StrategyValidationError(
        f"Condition must be a callable or an expression string, got {type(condition).__name__}"
    )


class ConditionEvaluator:
    """Resolves predicates to booleans; failures count as 'not met'."""

    def evaluate(
        self,
        predicate: Predicate,
        values: Mapping[str, float],
        bars: Sequence[Bar],
        index: int,
    ) -> bool:
        try:
            return predicate.evaluate(values, bars, index)
        except Exception as e:
            logger.warning(f"Error evaluating condition {predicate!r} at index {index}: {e}")
            return False
