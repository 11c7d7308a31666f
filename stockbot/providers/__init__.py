"""
Price history providers.

All providers return bars oldest first and an empty sequence for unknown symbols.
"""

from .csv_files import CSVPriceHistoryProvider
from .memory import InMemoryPriceHistoryProvider
from .synthetic import DEFAULT_CATALOGUE, DEFAULT_SEED, SymbolProfile, SyntheticPriceHistoryProvider

__all__ = [
    'CSVPriceHistoryProvider',
    'DEFAULT_CATALOGUE',
    'DEFAULT_SEED',
    'InMemoryPriceHistoryProvider',
    'SymbolProfile',
    'SyntheticPriceHistoryProvider',
]
