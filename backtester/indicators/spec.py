"""
Indicator requirements of a strategy descriptor.

An IndicatorSpec enumerates which indicator families a strategy needs and
with which periods. It is parsed from the descriptor's `indicators` mapping:

    {
        "sma": [5, 20],
        "ema": [10],
        "rsi": {"period": 14},
        "macd": {"fastPeriod": 12, "slowPeriod": 26, "signalPeriod": 9},
        "bollinger": {"period": 20, "stdDev": 2},
        "volume": {"period": 20},
    }

Validation runs at construction time (fail fast with clear errors).
"""
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional, Tuple

from ..shared.defaults import (
    RSI_PERIOD,
    MACD_FAST, MACD_SLOW, MACD_SIGNAL,
    BOLLINGER_PERIOD, BOLLINGER_STD_DEV,
    VOLUME_SMA_PERIOD,
)
from ..shared.errors import StrategyValidationError

KNOWN_INDICATORS = ('sma', 'ema', 'rsi', 'macd', 'bollinger', 'volume')


def _validate_period(name: str, value: Any) -> int:
    """Return value as int if it is a positive whole number, else raise."""
    if isinstance(value, bool):
        raise StrategyValidationError(f"{name} must be a positive integer, got {value!r}")
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if not isinstance(value, int) or value < 1:
        raise StrategyValidationError(f"{name} must be a positive integer, got {value!r}")
    return value


@dataclass(frozen=True)
class RsiParams:
    period: int = RSI_PERIOD

    def __post_init__(self):
        object.__setattr__(self, 'period', _validate_period("RSI period", self.period))


@dataclass(frozen=True)
class MacdParams:
    fast_period: int = MACD_FAST
    slow_period: int = MACD_SLOW
    signal_period: int = MACD_SIGNAL

    def __post_init__(self):
        object.__setattr__(self, 'fast_period', _validate_period("MACD fast period", self.fast_period))
        object.__setattr__(self, 'slow_period', _validate_period("MACD slow period", self.slow_period))
        object.__setattr__(self, 'signal_period', _validate_period("MACD signal period", self.signal_period))


@dataclass(frozen=True)
class BollingerParams:
    period: int = BOLLINGER_PERIOD
    std_dev: float = BOLLINGER_STD_DEV

    def __post_init__(self):
        object.__setattr__(self, 'period', _validate_period("Bollinger period", self.period))
        if isinstance(self.std_dev, bool) or not isinstance(self.std_dev, (int, float)) or self.std_dev <= 0:
            raise StrategyValidationError(
                f"Bollinger stdDev must be a positive number, got {self.std_dev!r}"
            )
        object.__setattr__(self, 'std_dev', float(self.std_dev))


@dataclass(frozen=True)
class VolumeParams:
    period: int = VOLUME_SMA_PERIOD

    def __post_init__(self):
        object.__setattr__(self, 'period', _validate_period("Volume period", self.period))


@dataclass(frozen=True)
class IndicatorSpec:
    """Indicators requested by a strategy. Empty spec = no indicators."""
    sma: Tuple[int, ...] = field(default_factory=tuple)
    ema: Tuple[int, ...] = field(default_factory=tuple)
    rsi: Optional[RsiParams] = None
    macd: Optional[MacdParams] = None
    bollinger: Optional[BollingerParams] = None
    volume: Optional[VolumeParams] = None

    def __post_init__(self):
        object.__setattr__(self, 'sma', _validate_periods("SMA period", self.sma))
        object.__setattr__(self, 'ema', _validate_periods("EMA period", self.ema))

    def periods(self) -> List[int]:
        """Every configured look-back period across all requested indicators."""
        periods = list(self.sma) + list(self.ema)
        if self.rsi is not None:
            periods.append(self.rsi.period)
        if self.macd is not None:
            periods.append(max(self.macd.fast_period, self.macd.slow_period))
        if self.bollinger is not None:
            periods.append(self.bollinger.period)
        if self.volume is not None:
            periods.append(self.volume.period)
        return periods

    def warmup_period(self) -> int:
        """Index of the first bar the simulator evaluates (0 without indicators)."""
        return max(self.periods(), default=0)

    @property
    def is_empty(self) -> bool:
        return not self.periods()


def _validate_periods(name: str, periods: Any) -> Tuple[int, ...]:
    if periods is None:
        return ()
    if isinstance(periods, (int, float)) and not isinstance(periods, bool):
        periods = [periods]
    if isinstance(periods, (str, bytes)) or not hasattr(periods, '__iter__'):
        raise StrategyValidationError(f"{name}s must be a list of integers, got {periods!r}")
    seen: List[int] = []
    for p in periods:
        p = _validate_period(name, p)
        if p not in seen:
            seen.append(p)
    return tuple(seen)


def _lookup(params: Mapping[str, Any], *names: str, default: Any) -> Any:
    """First present key among camelCase / snake_case aliases."""
    for name in names:
        if name in params and params[name] is not None:
            return params[name]
    return default


def _params(family: str, value: Any) -> Optional[Mapping[str, Any]]:
    """
    Normalize one indicator entry to a params mapping.

    None/False disable the indicator, True or {} request defaults and a bare
    number is shorthand for {"period": number}.
    """
    if value is None or value is False:
        return None
    if value is True:
        return {}
    if isinstance(value, (int, float)):
        return {'period': value}
    if isinstance(value, Mapping):
        return value
    raise StrategyValidationError(
        f"Indicator '{family}' must be a mapping of parameters, got {value!r}"
    )


def indicator_spec_from_dict(indicators: Optional[Mapping[str, Any]]) -> IndicatorSpec:
    """
    Build an IndicatorSpec from a descriptor's `indicators` mapping.

    Raises:
        StrategyValidationError: On unknown indicator keys or invalid periods
    """
    if indicators is None:
        return IndicatorSpec()
    if isinstance(indicators, IndicatorSpec):
        return indicators
    if not isinstance(indicators, Mapping):
        raise StrategyValidationError(f"indicators must be a mapping, got {type(indicators).__name__}")

    unknown = sorted(set(indicators) - set(KNOWN_INDICATORS))
    if unknown:
        raise StrategyValidationError(
            f"Unknown indicators: {', '.join(unknown)}. Supported: {', '.join(KNOWN_INDICATORS)}"
        )

    rsi = _params('rsi', indicators.get('rsi'))
    macd = _params('macd', indicators.get('macd'))
    bollinger = _params('bollinger', indicators.get('bollinger'))
    volume = _params('volume', indicators.get('volume'))

    return IndicatorSpec(
        sma=indicators.get('sma'),
        ema=indicators.get('ema'),
        rsi=None if rsi is None else RsiParams(
            period=_lookup(rsi, 'period', default=RSI_PERIOD),
        ),
        macd=None if macd is None else MacdParams(
            fast_period=_lookup(macd, 'fastPeriod', 'fast_period', 'fast', default=MACD_FAST),
            slow_period=_lookup(macd, 'slowPeriod', 'slow_period', 'slow', default=MACD_SLOW),
            signal_period=_lookup(macd, 'signalPeriod', 'signal_period', 'signal', default=MACD_SIGNAL),
        ),
        bollinger=None if bollinger is None else BollingerParams(
            period=_lookup(bollinger, 'period', default=BOLLINGER_PERIOD),
            std_dev=_lookup(bollinger, 'stdDev', 'std_dev', default=BOLLINGER_STD_DEV),
        ),
        volume=None if volume is None else VolumeParams(
            period=_lookup(volume, 'period', default=VOLUME_SMA_PERIOD),
        ),
    )
