"""
Strategy descriptors.

A StrategyDescriptor bundles a name, the indicators it needs and its buy and
sell predicates. Descriptors can be built from mappings (Python dicts, YAML
documents) or JSON strings. Validation runs at construction time (fail fast
with clear errors) so a bad descriptor never reaches the simulator.
"""
import json
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional

from .conditions import NEVER, Predicate, make_predicate
from ..indicators.spec import IndicatorSpec, indicator_spec_from_dict
from ..shared.defaults import DEFAULT_STRATEGY_NAME, DEFAULT_STRATEGY_DESCRIPTION
from ..shared.errors import InvalidStrategyError, StrategyValidationError

REQUIRED_FIELDS = ('name', 'indicators', 'conditions')


@dataclass(frozen=True)
class Conditions:
    """Buy and sell predicates of a strategy."""
    buy: Predicate
    sell: Predicate


@dataclass(frozen=True)
class StrategyDescriptor:
    """Declarative strategy: indicator requirements + buy/sell conditions."""
    name: str
    indicators: IndicatorSpec
    conditions: Conditions
    description: str = ""


def _is_missing(value: Any) -> bool:
    if value is None or value is False:
        return True
    return isinstance(value, str) and not value.strip()


def validate_strategy(strategy: Mapping[str, Any]) -> bool:
    """
    Validate the shape of a strategy mapping.

    Raises:
        InvalidStrategyError: If strategy is not a mapping
        StrategyValidationError: If required fields or a condition side are missing

    Returns:
        True when valid
    """
    if not isinstance(strategy, Mapping):
        raise InvalidStrategyError(f"Invalid strategy format: expected a mapping, got {type(strategy).__name__}")

    missing = [f for f in REQUIRED_FIELDS if _is_missing(strategy.get(f))]
    if missing:
        raise StrategyValidationError(f"Missing required fields: {', '.join(missing)}", missing)

    conditions = strategy['conditions']
    if not isinstance(conditions, Mapping):
        raise StrategyValidationError(
            f"conditions must be a mapping with 'buy' and 'sell', got {type(conditions).__name__}"
        )
    missing_sides: List[str] = [
        f"conditions.{side}" for side in ('buy', 'sell') if _is_missing(conditions.get(side))
    ]
    if missing_sides:
        raise StrategyValidationError("Strategy must have both buy and sell conditions", missing_sides)

    return True


def strategy_from_dict(strategy: Mapping[str, Any]) -> StrategyDescriptor:
    """
    Build a descriptor from a mapping.

    Expected shape:
        {"name": ..., "description": ..., "indicators": {...},
         "conditions": {"buy": <callable or expression>, "sell": <callable or expression>}}
    """
    validate_strategy(strategy)
    conditions = strategy['conditions']
    return StrategyDescriptor(
        name=str(strategy['name']),
        description=str(strategy.get('description') or ''),
        indicators=indicator_spec_from_dict(strategy['indicators']),
        conditions=Conditions(
            buy=make_predicate(conditions['buy']),
            sell=make_predicate(conditions['sell']),
        ),
    )


def parse_strategy(strategy: Any) -> StrategyDescriptor:
    """
    Interpret a strategy given as a descriptor, a mapping or a JSON string.

    Raises:
        InvalidStrategyError: If the input has an unsupported type or the string is not JSON
        StrategyValidationError: If required fields are missing or parameters are invalid
    """
    if isinstance(strategy, StrategyDescriptor):
        return strategy
    if isinstance(strategy, str):
        try:
            strategy = json.loads(strategy)
        except json.JSONDecodeError as e:
            raise InvalidStrategyError("Invalid strategy string format") from e
        if not isinstance(strategy, Mapping):
            raise InvalidStrategyError("Invalid strategy string format")
    if isinstance(strategy, Mapping):
        return strategy_from_dict(strategy)
    raise InvalidStrategyError("Invalid strategy format")


def create_custom_strategy(
    name: Optional[str] = None,
    description: Optional[str] = None,
    indicators: Optional[Mapping[str, Any]] = None,
    buy_condition: Any = None,
    sell_condition: Any = None,
) -> StrategyDescriptor:
    """
    Create a validated strategy from loose parameters.

    Omitted fields fall back to defaults; an omitted condition never fires.
    """
    return strategy_from_dict({
        'name': name or DEFAULT_STRATEGY_NAME,
        'description': description or DEFAULT_STRATEGY_DESCRIPTION,
        'indicators': indicators if indicators is not None else {},
        'conditions': {
            'buy': buy_condition if buy_condition is not None else NEVER,
            'sell': sell_condition if sell_condition is not None else NEVER,
        },
    })
