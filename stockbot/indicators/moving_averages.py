# stockbot/indicators/moving_averages.py
from __future__ import annotations

from collections.abc import Sequence

import numpy as np

PriceSeries = Sequence[float] | np.ndarray


def as_price_array(prices: PriceSeries) -> np.ndarray:
    """Convert a price sequence into a 1-D float array."""
    values = np.asarray(prices, dtype=float)
    if values.ndim != 1:
        raise ValueError(f'prices must be one-dimensional, got shape {values.shape}')
    return values


def sma(prices: PriceSeries, period: int) -> float:
    """
    Simple Moving Average of the last ``period`` prices.

    With fewer than ``period`` prices the most recent price is returned.
    """
    values = as_price_array(prices)
    if period < 1:
        raise ValueError(f'period must be >= 1, got {period}')
    if values.size == 0:
        raise ValueError('Cannot compute SMA of an empty price series')
    if values.size < period:
        return float(values[-1])
    return float(values[-period:].sum() / period)


def ema(prices: PriceSeries, period: int) -> float:
    """
    Exponential Moving Average seeded with the SMA of the first ``period`` prices.

    With fewer than ``period`` prices this collapses to the mean of the whole input.
    """
    values = as_price_array(prices)
    if period < 1:
        raise ValueError(f'period must be >= 1, got {period}')
    if values.size == 0:
        raise ValueError('Cannot compute EMA of an empty price series')
    if values.size < period:
        return sma(values, values.size)

    multiplier = 2.0 / (period + 1)
    result = float(values[:period].sum() / period)
    for price in values[period:]:
        result = (float(price) - result) * multiplier + result
    return result
