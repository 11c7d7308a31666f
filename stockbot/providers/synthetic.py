"""Deterministic synthetic daily price histories for demos and paper trading."""

from __future__ import annotations

import logging
import threading
import zlib
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date

import numpy as np
import pandas as pd

from ..data import PriceBar

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SymbolProfile:
    """Random-walk parameters for one symbol."""

    base_price: float
    volatility: float  # Max daily move as a fraction of price
    trend: float  # Daily drift


DEFAULT_CATALOGUE: dict[str, SymbolProfile] = {
    'TCS': SymbolProfile(base_price=3400.0, volatility=0.015, trend=0.0005),
    'RELIANCE': SymbolProfile(base_price=2400.0, volatility=0.02, trend=0.0007),
    'HDFCBANK': SymbolProfile(base_price=1680.0, volatility=0.018, trend=-0.0002),
    'INFY': SymbolProfile(base_price=1450.0, volatility=0.022, trend=0.001),
    'ICICIBANK': SymbolProfile(base_price=920.0, volatility=0.016, trend=0.0004),
    'TATASTEEL': SymbolProfile(base_price=120.0, volatility=0.025, trend=0.0003),
}

DEFAULT_SEED = 17


class SyntheticPriceHistoryProvider:
    """
    Generates a seeded random walk per catalogued symbol over business days.

    Each symbol's history is generated once and then served unchanged.
    Symbols outside the catalogue have no history.
    """

    def __init__(
        self,
        catalogue: Mapping[str, SymbolProfile] | None = None,
        days: int = 180,
        end_date: date | None = None,
        seed: int | None = DEFAULT_SEED,
    ) -> None:
        if days < 1:
            raise ValueError(f'days must be >= 1, got {days}')
        self.catalogue = dict(catalogue if catalogue is not None else DEFAULT_CATALOGUE)
        self.days = days
        self.end_date = end_date or date.today()
        self.seed = seed
        self._cache: dict[str, tuple[PriceBar, ...]] = {}
        self._lock = threading.Lock()

    def get_price_history(self, symbol: str) -> tuple[PriceBar, ...]:
        profile = self.catalogue.get(symbol)
        if profile is None:
            return ()
        with self._lock:
            if symbol not in self._cache:
                self._cache[symbol] = self._generate(symbol, profile)
            return self._cache[symbol]

    def symbols(self) -> list[str]:
        return sorted(self.catalogue)

    def _rng(self, symbol: str) -> np.random.Generator:
        if self.seed is None:
            return np.random.default_rng()
        return np.random.default_rng([self.seed, zlib.crc32(symbol.encode())])

    def _generate(self, symbol: str, profile: SymbolProfile) -> tuple[PriceBar, ...]:
        rng = self._rng(symbol)
        dates = pd.bdate_range(end=self.end_date, periods=self.days + 1)
        floor = profile.base_price * 0.5
        intraday_volatility = profile.volatility * 0.7

        bars: list[PriceBar] = []
        price = profile.base_price
        for day in dates:
            daily_change = rng.uniform(-1.0, 1.0) * profile.volatility + profile.trend
            price = max(price * (1 + daily_change), floor)

            open_price = price * (1 + rng.uniform(-0.005, 0.005))
            high = max(open_price, price) * (1 + rng.random() * intraday_volatility)
            low = min(open_price, price) * (1 - rng.random() * intraday_volatility)
            volume = round(profile.base_price * 1000 * (0.5 + rng.random()))

            bars.append(
                PriceBar(
                    date=day.date(),
                    open=round(open_price, 2),
                    high=round(high, 2),
                    low=round(low, 2),
                    close=round(price, 2),
                    volume=float(volume),
                )
            )

        logger.debug(f'Generated {len(bars)} synthetic bars for {symbol}')
        return tuple(bars)
