"""Base class for decision strategies."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence

import numpy as np

from ..data import PriceBar, closing_prices
from ..signals import Decision, Signal, StrategyName


class BaseStrategy(ABC):
    """Turns an ordered price history into a Decision.

    Subclasses declare the minimum history they need; shorter histories
    degrade to a neutral HOLD instead of failing.
    """

    name: StrategyName
    min_bars: int
    label: str
    indicators: tuple[str, ...]

    def decide(self, bars: Sequence[PriceBar]) -> Decision:
        """Evaluate ``bars`` (oldest first) and return a fresh Decision."""
        if len(bars) < self.min_bars:
            return self.insufficient_data()
        return self._decide(closing_prices(bars), bars)

    def insufficient_data(self) -> Decision:
        return Decision(
            signal=Signal.HOLD,
            confidence=50,
            reason=f'Insufficient historical data for {self.label} strategy',
            indicators_used=self.indicators,
        )

    @abstractmethod
    def _decide(self, closes: np.ndarray, bars: Sequence[PriceBar]) -> Decision:
        """Strategy-specific evaluation over a history that passed the gate."""
        ...
