"""
StockBot Package - Trading Decision Engine

This package provides:
- Technical indicator library (SMA, EMA, RSI, MACD, Bollinger Bands, volatility)
- Four rule-based strategies and a Q-Learning strategy blended with indicators
- A bot controller that routes decisions and records executed trades
- Synthetic, in-memory and CSV price history providers
"""

from __future__ import annotations

import importlib
from types import ModuleType
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from . import bot as bot
    from . import config as config
    from . import data as data
    from . import errors as errors
    from . import indicators as indicators
    from . import interfaces as interfaces
    from . import ledger as ledger
    from . import logging as logging
    from . import monitoring as monitoring
    from . import performance as performance
    from . import persistence as persistence
    from . import providers as providers
    from . import qtable as qtable
    from . import runtime_settings as runtime_settings
    from . import signals as signals
    from . import state as state
    from . import strategies as strategies

__version__ = '1.0.0'
__all__ = [
    'bot',
    'config',
    'data',
    'errors',
    'indicators',
    'interfaces',
    'ledger',
    'monitoring',
    'performance',
    'persistence',
    'providers',
    'qtable',
    'runtime_settings',
    'signals',
    'state',
    'strategies',
    'logging',
]


def __getattr__(name: str) -> ModuleType:  # pragma: no cover
    """Lazy-load top-level module attributes to avoid importing heavy deps at package import time."""
    if name in __all__:
        module = importlib.import_module(f'{__name__}.{name}')
        globals()[name] = module
        return module
    raise AttributeError(f'module {__name__!r} has no attribute {name!r}')


def __dir__() -> list[str]:  # pragma: no cover
    return sorted(set(list(globals()) + __all__))
