"""Protocol interfaces for the engine's external collaborators."""

from .ledger import TradeLedgerProtocol
from .price_history import PriceHistoryProviderProtocol

__all__ = [
    'PriceHistoryProviderProtocol',
    'TradeLedgerProtocol',
]
