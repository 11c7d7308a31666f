# stockbot/indicators/volatility.py
from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .moving_averages import PriceSeries, as_price_array, sma

DEFAULT_VOLATILITY = 0.02


@dataclass(frozen=True)
class BollingerBands:
    upper: float
    middle: float
    lower: float

    @property
    def width_pct(self) -> float:
        """Band width as a percentage of the middle band."""
        if self.middle == 0:
            return 0.0
        return (self.upper - self.lower) / self.middle * 100

    def percent_b(self, price: float) -> float:
        """Position of ``price`` within the bands (0 = lower, 1 = upper)."""
        spread = self.upper - self.lower
        if spread == 0:
            return 0.5
        return (price - self.lower) / spread


def bollinger_bands(prices: PriceSeries, period: int = 20, num_std: float = 2.0) -> BollingerBands:
    """
    Calculates Bollinger Bands (upper, middle, lower).

    Uses the population standard deviation of the last ``period`` prices.
    With fewer than ``period`` prices the bands fall back to the mean +/- 10%.
    """
    values = as_price_array(prices)
    if values.size == 0:
        raise ValueError('Cannot compute Bollinger Bands of an empty price series')
    if values.size < period:
        avg = float(values.mean())
        return BollingerBands(upper=avg * 1.1, middle=avg, lower=avg * 0.9)

    middle = sma(values, period)
    std_dev = float(np.sqrt(np.mean((values[-period:] - middle) ** 2)))
    return BollingerBands(
        upper=middle + std_dev * num_std,
        middle=middle,
        lower=middle - std_dev * num_std,
    )


def volatility(prices: PriceSeries, period: int = 10) -> float:
    """
    Standard deviation of the trailing ``period`` simple daily returns.

    Returns 0.02 when fewer than ``period + 1`` prices are available.
    """
    values = as_price_array(prices)
    if period < 1:
        raise ValueError(f'period must be >= 1, got {period}')
    if values.size < period + 1:
        return DEFAULT_VOLATILITY

    returns = values[1:] / values[:-1] - 1.0
    recent = returns[-period:]
    return float(np.sqrt(np.mean((recent - recent.mean()) ** 2)))
