"""
Centralized default values for indicator parameters.

This is the SINGLE SOURCE OF TRUTH for all indicator parameter defaults.
Strategy descriptors that omit a parameter fall back to these values.
"""

# RSI (Relative Strength Index) defaults
RSI_PERIOD = 14

# MACD (Moving Average Convergence Divergence) defaults
MACD_FAST = 12
MACD_SLOW = 26
MACD_SIGNAL = 9

# Bollinger Bands defaults
BOLLINGER_PERIOD = 20
BOLLINGER_STD_DEV = 2.0

# Volume SMA default
VOLUME_SMA_PERIOD = 20

# RSI value used when a window has neither gains nor losses (RS treated as 1)
RSI_FLAT_VALUE = 50.0
RSI_MAX_VALUE = 100.0

# Strategy naming
DEFAULT_STRATEGY_NAME = "Custom Strategy"
DEFAULT_STRATEGY_DESCRIPTION = "User-defined strategy"

# Marker styling handed to the chart layer
BUY_MARKER_COLOR = "green"
BUY_MARKER_SHAPE = "arrowUp"
BUY_MARKER_LABEL = "Buy"
SELL_MARKER_COLOR = "red"
SELL_MARKER_SHAPE = "arrowDown"
SELL_MARKER_LABEL = "Sell"
