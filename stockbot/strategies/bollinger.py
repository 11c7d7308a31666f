"""Bollinger Bands mean-reversion strategy."""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from ..data import PriceBar
from ..indicators import bollinger_bands
from ..signals import Decision, Signal, StrategyName
from .base import BaseStrategy


class BollingerBandsStrategy(BaseStrategy):
    """
    Buy below the lower band, sell above the upper band.

    Inside the bands the decision is always HOLD; the reason distinguishes a
    squeeze (contracting, narrow bands), a price near either band, and the
    normal mid-range case.
    """

    name = StrategyName.BOLLINGER
    min_bars = 20
    label = 'Bollinger Bands'
    indicators = ('Bollinger Bands',)

    def __init__(
        self,
        period: int = 20,
        num_std: float = 2.0,
        squeeze_width_pct: float = 2.0,
        squeeze_lookback: int = 5,
    ):
        if not 1 <= squeeze_lookback < self.min_bars:
            raise ValueError(f'squeeze_lookback must be in [1, {self.min_bars}), got {squeeze_lookback}')
        self.period = period
        self.num_std = num_std
        self.squeeze_width_pct = squeeze_width_pct
        self.squeeze_lookback = squeeze_lookback

    def _decide(self, closes: np.ndarray, bars: Sequence[PriceBar]) -> Decision:
        price = float(closes[-1])
        bands = bollinger_bands(closes, self.period, self.num_std)
        percent_b = bands.percent_b(price)

        if price < bands.lower:
            distance_pct = (bands.lower - price) / bands.lower * 100
            return Decision(
                Signal.BUY,
                min(90.0, 70 + distance_pct),
                'Price below lower Bollinger Band (oversold)',
                ('Bollinger Bands', '%B'),
            )
        if price > bands.upper:
            distance_pct = (price - bands.upper) / bands.upper * 100
            return Decision(
                Signal.SELL,
                min(90.0, 70 + distance_pct),
                'Price above upper Bollinger Band (overbought)',
                ('Bollinger Bands', '%B'),
            )

        earlier = bollinger_bands(closes[: -self.squeeze_lookback], self.period, self.num_std)
        is_contracting = bands.width_pct < earlier.width_pct
        if is_contracting and bands.width_pct < self.squeeze_width_pct:
            return Decision(
                Signal.HOLD,
                65,
                'Bollinger Band squeeze detected - preparing for breakout',
                ('Bollinger Bands', 'Band Width'),
            )

        if percent_b > 0.8:
            return Decision(
                Signal.HOLD, 60, 'Price near upper Bollinger Band but not overbought yet', ('Bollinger Bands', '%B')
            )
        if percent_b < 0.2:
            return Decision(
                Signal.HOLD, 60, 'Price near lower Bollinger Band but not oversold yet', ('Bollinger Bands', '%B')
            )
        return Decision(Signal.HOLD, 50, 'Price within normal Bollinger Band range', ('Bollinger Bands', '%B'))
