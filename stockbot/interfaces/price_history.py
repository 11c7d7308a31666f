"""Price history provider protocol interface."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from ..data import PriceBar


@runtime_checkable
class PriceHistoryProviderProtocol(Protocol):
    """Protocol defining the price history provider interface.

    This allows swapping data sources (synthetic, CSV, a market data service)
    without changing the decision logic.
    """

    def get_price_history(self, symbol: str) -> Sequence[PriceBar]:
        """Ordered daily bars for ``symbol``, oldest first.

        An empty sequence means the symbol is unknown.
        """
        ...
