"""Moving-average crossover strategy."""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from ..data import PriceBar
from ..indicators import sma
from ..signals import Decision, Signal, StrategyName
from .base import BaseStrategy


class MovingAverageCrossoverStrategy(BaseStrategy):
    """
    Buy when the short SMA crosses above the long SMA, sell on the opposite cross.

    Without a crossover the decision is HOLD, with confidence leaning above or
    below 50 by the percentage gap between the averages.
    """

    name = StrategyName.MOVING_AVERAGE
    min_bars = 50
    label = 'MA'
    indicators = ('SMA',)

    def __init__(self, short_window: int = 10, long_window: int = 50):
        if short_window >= long_window:
            raise ValueError(f'short_window must be < long_window, got {short_window} >= {long_window}')
        self.short_window = short_window
        self.long_window = long_window

    def _decide(self, closes: np.ndarray, bars: Sequence[PriceBar]) -> Decision:
        short_ma = sma(closes, self.short_window)
        long_ma = sma(closes, self.long_window)
        prev_short_ma = sma(closes[:-1], self.short_window)
        prev_long_ma = sma(closes[:-1], self.long_window)

        used = (f'SMA{self.short_window}', f'SMA{self.long_window}')

        if prev_short_ma <= prev_long_ma and short_ma > long_ma:
            return Decision(Signal.BUY, 75, 'Short-term MA crossed above long-term MA', used)
        if prev_short_ma >= prev_long_ma and short_ma < long_ma:
            return Decision(Signal.SELL, 75, 'Short-term MA crossed below long-term MA', used)

        trend_strength = abs(short_ma - long_ma) / long_ma * 100
        is_bullish = short_ma > long_ma
        return Decision(
            signal=Signal.HOLD,
            confidence=50 + trend_strength * (1 if is_bullish else -1),
            reason=f'Trending {"upward" if is_bullish else "downward"} but no crossover detected',
            indicators_used=used,
        )
