"""
Price bar structure and loading utilities.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path

import numpy as np


@dataclass(frozen=True)
class PriceBar:
    """Single daily OHLCV bar."""

    date: date
    open: float
    high: float
    low: float
    close: float
    volume: float

    def __post_init__(self):
        """Validate bar data."""
        if isinstance(self.date, datetime):
            object.__setattr__(self, 'date', self.date.date())
        for name in ('open', 'high', 'low', 'close'):
            value = getattr(self, name)
            if not value > 0:
                raise ValueError(f'{name.capitalize()} must be positive: {value}')
        if self.high < self.low:
            raise ValueError(f'High ({self.high}) < Low ({self.low})')
        if self.open < self.low or self.open > self.high:
            raise ValueError(f'Open ({self.open}) outside High/Low range')
        if self.close < self.low or self.close > self.high:
            raise ValueError(f'Close ({self.close}) outside High/Low range')
        if self.volume < 0:
            raise ValueError(f'Volume cannot be negative: {self.volume}')


def closing_prices(bars: Sequence[PriceBar]) -> np.ndarray:
    """Closing prices of ``bars`` as a float array, oldest first."""
    return np.fromiter((bar.close for bar in bars), dtype=float, count=len(bars))


def load_csv_file(file_path: Path) -> list[PriceBar]:
    """
    Load a single CSV file and return its bars sorted by date.

    The file needs a ``date`` (or ``timestamp``) column plus open/high/low/close/volume.
    Rows with missing prices are dropped and duplicate dates keep the last row.

    Args:
        file_path: Path to CSV file

    Returns:
        List of PriceBar objects
    """
    import pandas as pd

    df = pd.read_csv(file_path)
    df.columns = [str(column).strip().lower() for column in df.columns]

    date_column = 'date' if 'date' in df.columns else 'timestamp'
    required = [date_column, 'open', 'high', 'low', 'close', 'volume']
    missing = [column for column in required if column not in df.columns]
    if missing:
        raise ValueError(f'{file_path} is missing columns: {missing}')

    df = df.dropna(subset=['open', 'high', 'low', 'close'])
    df[date_column] = pd.to_datetime(df[date_column]).dt.date
    df = df.drop_duplicates(subset=[date_column], keep='last').sort_values(date_column)

    bars: list[PriceBar] = []
    for row in df.itertuples(index=False):
        bars.append(
            PriceBar(
                date=getattr(row, date_column),
                open=float(row.open),
                high=float(row.high),
                low=float(row.low),
                close=float(row.close),
                volume=float(row.volume) if not pd.isna(row.volume) else 0.0,
            )
        )
    return bars
