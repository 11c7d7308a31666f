"""Dict-backed price history provider."""

from __future__ import annotations

import threading
from collections.abc import Iterable, Mapping

from ..data import PriceBar


class InMemoryPriceHistoryProvider:
    """Serves fixed bar sequences, e.g. for tests and paper-trading sessions."""

    def __init__(self, histories: Mapping[str, Iterable[PriceBar]] | None = None) -> None:
        self._lock = threading.Lock()
        self._histories: dict[str, tuple[PriceBar, ...]] = {}
        for symbol, bars in (histories or {}).items():
            self.set_history(symbol, bars)

    def set_history(self, symbol: str, bars: Iterable[PriceBar]) -> None:
        """Replace the history of ``symbol``; bars are re-sorted by date."""
        ordered = tuple(sorted(bars, key=lambda bar: bar.date))
        with self._lock:
            self._histories[symbol] = ordered

    def get_price_history(self, symbol: str) -> tuple[PriceBar, ...]:
        with self._lock:
            return self._histories.get(symbol, ())

    def symbols(self) -> list[str]:
        with self._lock:
            return sorted(self._histories)
