# stockbot/indicators/__init__.py
from .moving_averages import ema, sma
from .oscillators import MACDResult, macd, rsi
from .volatility import BollingerBands, bollinger_bands, volatility

__all__ = [
    'sma',
    'ema',
    'rsi',
    'macd',
    'MACDResult',
    'bollinger_bands',
    'BollingerBands',
    'volatility',
]
