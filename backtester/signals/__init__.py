"""
Strategy and condition module.

Strategy descriptors (indicator requirements + buy/sell conditions), the two
predicate forms (Python callables and textual expressions), the constrained
expression language, YAML loading and the strategy catalog.
"""
from .expression import Expression, parse_expression, evaluate_expression, tokenize
from .conditions import (
    Predicate,
    CallablePredicate,
    ExpressionPredicate,
    NEVER,
    ConditionEvaluator,
    build_expression_context,
    make_predicate,
)
from .strategy import (
    Conditions,
    StrategyDescriptor,
    validate_strategy,
    strategy_from_dict,
    parse_strategy,
    create_custom_strategy,
)
from .config_loader import load_strategy_from_yaml, load_strategies_from_dir
from .catalog import StrategyRegistry, DEFAULT_CATEGORIES, default_registry

__all__ = [
    'Expression',
    'parse_expression',
    'evaluate_expression',
    'tokenize',
    'Predicate',
    'CallablePredicate',
    'ExpressionPredicate',
    'NEVER',
    'ConditionEvaluator',
    'build_expression_context',
    'make_predicate',
    'Conditions',
    'StrategyDescriptor',
    'validate_strategy',
    'strategy_from_dict',
    'parse_strategy',
    'create_custom_strategy',
    'load_strategy_from_yaml',
    'load_strategies_from_dir',
    'StrategyRegistry',
    'DEFAULT_CATEGORIES',
    'default_registry',
]
