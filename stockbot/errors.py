"""Exceptions raised by the decision engine."""

from __future__ import annotations


class StockBotError(Exception):
    """Base class for engine errors."""


class SymbolNotFound(StockBotError, LookupError):  # noqa: N818
    """The price history provider has no bars for the requested symbol."""

    def __init__(self, symbol: str):
        super().__init__(f'No price history for symbol {symbol!r}')
        self.symbol = symbol


class InvalidStrategy(StockBotError, ValueError):  # noqa: N818
    """Unrecognised strategy name passed to the bot controller."""

    def __init__(self, name: object):
        super().__init__(f'Unknown trading strategy: {name!r}')
        self.name = name


class PriceDataError(StockBotError, ValueError):  # noqa: N818
    """Stored price history for a symbol could not be loaded."""

    def __init__(self, symbol: str, detail: str):
        super().__init__(f'Unusable price history for symbol {symbol!r}: {detail}')
        self.symbol = symbol
