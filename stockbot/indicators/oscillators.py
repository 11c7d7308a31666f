# stockbot/indicators/oscillators.py
from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .moving_averages import PriceSeries, as_price_array, ema

MACD_FAST_PERIOD = 12
MACD_SLOW_PERIOD = 26
MACD_SIGNAL_PERIOD = 9


def rsi(prices: PriceSeries, period: int = 14) -> float:
    """
    Calculates the Relative Strength Index (RSI).

    Uses Wilder's smoothing seeded with the simple average gain/loss of the
    first ``period`` changes. Returns 50 (neutral) when there are not more than
    ``period`` prices and 100 when the average loss is exactly zero.
    """
    values = as_price_array(prices)
    if period < 1:
        raise ValueError(f'period must be >= 1, got {period}')
    if values.size <= period:
        return 50.0

    changes = np.diff(values)
    seed = changes[:period]
    avg_gain = float(seed[seed >= 0].sum()) / period
    avg_loss = float(-seed[seed < 0].sum()) / period

    for change in changes[period:]:
        change = float(change)
        avg_gain = (avg_gain * (period - 1) + (change if change > 0 else 0.0)) / period
        avg_loss = (avg_loss * (period - 1) + (-change if change < 0 else 0.0)) / period

    if avg_loss == 0:
        return 100.0

    rs = avg_gain / avg_loss
    return 100.0 - (100.0 / (1.0 + rs))


@dataclass(frozen=True)
class MACDResult:
    macd_line: float
    signal_line: float
    histogram: float


def macd(prices: PriceSeries) -> MACDResult:
    """
    Calculates Moving Average Convergence Divergence (12/26/9).

    The signal line is the EMA of the MACD values recomputed from scratch at
    each of the last nine positions. Fewer than 26 prices yield all zeros.
    """
    values = as_price_array(prices)
    if values.size < MACD_SLOW_PERIOD:
        return MACDResult(0.0, 0.0, 0.0)

    macd_line = ema(values, MACD_FAST_PERIOD) - ema(values, MACD_SLOW_PERIOD)

    # TODO: replace the O(n * period) recomputation with a running EMA-of-MACD once callers need it per tick
    macd_values = [
        ema(values[: idx + 1], MACD_FAST_PERIOD) - ema(values[: idx + 1], MACD_SLOW_PERIOD)
        for idx in range(max(0, values.size - MACD_SIGNAL_PERIOD), values.size)
    ]
    signal_line = ema(macd_values, min(MACD_SIGNAL_PERIOD, len(macd_values)))

    return MACDResult(macd_line=macd_line, signal_line=signal_line, histogram=macd_line - signal_line)
