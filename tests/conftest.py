"""Shared fixtures for the stockbot test suite."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import date

import pandas as pd
import pytest

from stockbot.data import PriceBar


def make_bars(closes: Sequence[float], end: date = date(2024, 6, 28)) -> list[PriceBar]:
    """Daily bars on business days ending at ``end``, with a 1% range around each close."""
    days = pd.bdate_range(end=end, periods=len(closes))
    return [
        PriceBar(
            date=day.date(),
            open=float(close),
            high=float(close) * 1.01,
            low=float(close) * 0.99,
            close=float(close),
            volume=1_000.0,
        )
        for day, close in zip(days, closes)
    ]


@pytest.fixture
def bars_from_closes() -> Callable[..., list[PriceBar]]:
    return make_bars


@pytest.fixture
def rising_closes() -> list[float]:
    """60 strictly increasing closes."""
    return [100.0 + i for i in range(60)]


@pytest.fixture
def falling_closes() -> list[float]:
    """60 strictly decreasing closes."""
    return [200.0 - i for i in range(60)]
