"""Discrete market state encoding for the Q-Learning strategy."""

from __future__ import annotations

from dataclasses import dataclass

from .indicators import rsi, sma, volatility
from .indicators.moving_averages import PriceSeries, as_price_array

INSUFFICIENT_DATA = 'insufficient_data'

MIN_STATE_BARS = 14
RSI_PERIOD = 14
TREND_SMA_PERIOD = 50
VOLATILITY_PERIOD = 10

RSI_OVERSOLD = 30.0
RSI_OVERBOUGHT = 70.0
LOW_VOLATILITY = 0.01
HIGH_VOLATILITY = 0.03


@dataclass(frozen=True)
class StateFeatures:
    """Indicator snapshot and the buckets it discretizes into."""

    close: float
    sma: float
    rsi: float
    volatility: float
    price_level: str
    rsi_level: str
    volatility_level: str

    @property
    def label(self) -> str:
        return f'{self.price_level}_{self.rsi_level}_{self.volatility_level}'


def rsi_bucket(value: float) -> str:
    if value < RSI_OVERSOLD:
        return 'oversold'
    if value > RSI_OVERBOUGHT:
        return 'overbought'
    return 'neutral'


def volatility_bucket(value: float) -> str:
    if value < LOW_VOLATILITY:
        return 'low'
    if value > HIGH_VOLATILITY:
        return 'high'
    return 'medium'


def extract_state_features(prices: PriceSeries) -> StateFeatures | None:
    """
    Compute the indicator snapshot used for state encoding.

    Returns None when fewer than 14 prices are available.
    """
    values = as_price_array(prices)
    if values.size < MIN_STATE_BARS:
        return None

    current = float(values[-1])
    trend_sma = sma(values, min(TREND_SMA_PERIOD, values.size))
    rsi_value = rsi(values, RSI_PERIOD)
    vol_value = volatility(values, VOLATILITY_PERIOD)

    return StateFeatures(
        close=current,
        sma=trend_sma,
        rsi=rsi_value,
        volatility=vol_value,
        price_level='above_sma50' if current > trend_sma else 'below_sma50',
        rsi_level=rsi_bucket(rsi_value),
        volatility_level=volatility_bucket(vol_value),
    )


def encode_state(prices: PriceSeries) -> str:
    """Map closing prices to a state label such as ``above_sma50_oversold_low``."""
    features = extract_state_features(prices)
    if features is None:
        return INSUFFICIENT_DATA
    return features.label
