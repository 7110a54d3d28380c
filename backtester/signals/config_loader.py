"""
YAML configuration loader for trading strategies.

Loads strategy descriptors from YAML files, allowing easy sharing and
modification of strategies without code changes. Conditions in YAML files
are textual expressions, e.g.:

    name: RSI + MA Combined
    indicators:
      rsi:
        period: 14
      sma: [20]
    conditions:
      buy: "rsi < 30 && close > sma20"
      sell: "rsi > 70 || close < sma20"
"""
import yaml
from pathlib import Path
from typing import Dict, Union

from .strategy import StrategyDescriptor, strategy_from_dict
from ..shared.errors import InvalidStrategyError


def load_strategy_from_yaml(yaml_path: Union[str, Path]) -> StrategyDescriptor:
    """
    Load a strategy descriptor from a YAML file.

    Args:
        yaml_path: Path to YAML strategy file

    Returns:
        StrategyDescriptor (name defaults to the file stem)

    Raises:
        FileNotFoundError: If YAML file doesn't exist
        InvalidStrategyError: If YAML is empty, unparsable or not a mapping
        StrategyValidationError: If required fields are missing
    """
    yaml_path = Path(yaml_path)

    if not yaml_path.exists():
        raise FileNotFoundError(f"Config file not found: {yaml_path}")

    try:
        with open(yaml_path, 'r') as f:
            config_dict = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise InvalidStrategyError(f"Invalid YAML in {yaml_path}: {e}") from e

    if not config_dict:
        raise InvalidStrategyError(f"Empty config file: {yaml_path}")
    if not isinstance(config_dict, dict):
        raise InvalidStrategyError(f"Config file must contain a mapping: {yaml_path}")

    config_dict.setdefault('name', yaml_path.stem)
    return strategy_from_dict(config_dict)


def load_strategies_from_dir(config_dir: Union[str, Path]) -> Dict[str, StrategyDescriptor]:
    """
    Load every *.yaml / *.yml strategy in a directory, keyed by file stem.

    Raises:
        FileNotFoundError: If the directory doesn't exist
    """
    config_dir = Path(config_dir)
    if not config_dir.is_dir():
        raise FileNotFoundError(f"Config directory not found: {config_dir}")
    paths = sorted(list(config_dir.glob("*.yaml")) + list(config_dir.glob("*.yml")))
    return {p.stem: load_strategy_from_yaml(p) for p in paths}
