"""RSI overbought/oversold strategy."""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from ..data import PriceBar
from ..indicators import rsi
from ..signals import Decision, Signal, StrategyName
from .base import BaseStrategy


class RSIStrategy(BaseStrategy):
    """Buy when RSI is oversold (<30), sell when overbought (>70)."""

    name = StrategyName.RSI
    min_bars = 15
    label = 'RSI'
    indicators = ('RSI',)

    def __init__(self, period: int = 14, oversold: float = 30.0, overbought: float = 70.0):
        if not 0 < oversold < overbought < 100:
            raise ValueError(f'Invalid RSI thresholds: oversold={oversold}, overbought={overbought}')
        self.period = period
        self.oversold = oversold
        self.overbought = overbought

    def _decide(self, closes: np.ndarray, bars: Sequence[PriceBar]) -> Decision:
        value = rsi(closes, self.period)

        if value < self.oversold:
            # Higher confidence as RSI gets lower
            return Decision(Signal.BUY, max(70.0, 100 - value), f'RSI is oversold at {value:.2f}', self.indicators)
        if value > self.overbought:
            return Decision(Signal.SELL, max(70.0, value), f'RSI is overbought at {value:.2f}', self.indicators)

        # Higher confidence near the boundaries
        return Decision(Signal.HOLD, 50 + abs(value - 50), f'RSI is neutral at {value:.2f}', self.indicators)
