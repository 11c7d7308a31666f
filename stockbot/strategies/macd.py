"""MACD histogram crossover strategy."""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from ..data import PriceBar
from ..indicators import macd
from ..signals import Decision, Signal, StrategyName
from .base import BaseStrategy

MAX_TREND_STRENGTH = 10.0


class MACDStrategy(BaseStrategy):
    """Trade when the MACD histogram changes sign against the previous bar."""

    name = StrategyName.MACD
    min_bars = 35
    label = 'MACD'
    indicators = ('MACD',)

    def _decide(self, closes: np.ndarray, bars: Sequence[PriceBar]) -> Decision:
        current = macd(closes)
        prev_histogram = macd(closes[:-1]).histogram
        histogram = current.histogram

        used = ('MACD', 'Signal Line', 'Histogram')

        if prev_histogram <= 0 and histogram > 0:
            return Decision(Signal.BUY, 80, 'MACD histogram turned positive (bullish crossover)', used)
        if prev_histogram >= 0 and histogram < 0:
            return Decision(Signal.SELL, 80, 'MACD histogram turned negative (bearish crossover)', used)

        if current.signal_line != 0:
            trend_strength = abs(histogram / current.signal_line) * 100
        else:
            trend_strength = 0.0 if histogram == 0 else MAX_TREND_STRENGTH
        is_bullish = histogram > 0

        return Decision(
            signal=Signal.HOLD,
            confidence=50 + min(MAX_TREND_STRENGTH, trend_strength) * (1 if is_bullish else -1),
            reason=f'MACD trending {"bullish" if is_bullish else "bearish"} but no crossover detected',
            indicators_used=used,
        )
