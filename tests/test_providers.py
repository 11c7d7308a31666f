"""Tests for price history providers and bar loading."""

from __future__ import annotations

from datetime import date

import pandas as pd
import pytest

from stockbot.data import PriceBar, load_csv_file
from stockbot.errors import PriceDataError, StockBotError
from stockbot.interfaces import PriceHistoryProviderProtocol
from stockbot.providers import (
    DEFAULT_CATALOGUE,
    CSVPriceHistoryProvider,
    InMemoryPriceHistoryProvider,
    SymbolProfile,
    SyntheticPriceHistoryProvider,
)


class TestPriceBar:
    def test_valid_bar(self):
        bar = PriceBar(date(2024, 1, 2), open=10.0, high=11.0, low=9.5, close=10.5, volume=100)
        assert bar.close == 10.5

    @pytest.mark.parametrize(
        'kwargs,message',
        [
            ({'high': 9.0, 'low': 9.5}, 'High'),
            ({'open': 12.0}, 'Open'),
            ({'close': 9.0}, 'Close'),
            ({'volume': -1}, 'Volume'),
            ({'low': 0.0, 'open': 0.0, 'close': 0.0, 'high': 0.0}, 'must be positive'),
        ],
    )
    def test_invalid_bars_rejected(self, kwargs, message):
        fields = {'open': 10.0, 'high': 11.0, 'low': 9.5, 'close': 10.5, 'volume': 100}
        fields.update(kwargs)
        with pytest.raises(ValueError, match=message):
            PriceBar(date(2024, 1, 2), **fields)


class TestInMemoryProvider:
    def test_unknown_symbol_is_empty(self):
        assert InMemoryPriceHistoryProvider().get_price_history('TCS') == ()

    def test_history_is_sorted_and_immutable(self, bars_from_closes):
        bars = bars_from_closes([1.0, 2.0, 3.0])
        provider = InMemoryPriceHistoryProvider({'X': reversed(bars)})

        history = provider.get_price_history('X')

        assert isinstance(history, tuple)
        assert [bar.close for bar in history] == [1.0, 2.0, 3.0]
        assert provider.symbols() == ['X']

    def test_satisfies_protocol(self):
        assert isinstance(InMemoryPriceHistoryProvider(), PriceHistoryProviderProtocol)


class TestSyntheticProvider:
    def test_default_catalogue(self):
        provider = SyntheticPriceHistoryProvider(end_date=date(2024, 6, 28))
        assert provider.symbols() == sorted(DEFAULT_CATALOGUE)
        assert provider.get_price_history('UNKNOWN') == ()

    def test_business_day_history(self):
        provider = SyntheticPriceHistoryProvider(end_date=date(2024, 6, 28))
        bars = provider.get_price_history('TCS')

        assert len(bars) == 181
        assert bars[-1].date == date(2024, 6, 28)
        assert all(bar.date.weekday() < 5 for bar in bars)
        assert all(earlier.date < later.date for earlier, later in zip(bars, bars[1:]))

    def test_same_seed_same_history(self):
        first = SyntheticPriceHistoryProvider(end_date=date(2024, 6, 28), seed=5)
        second = SyntheticPriceHistoryProvider(end_date=date(2024, 6, 28), seed=5)
        other = SyntheticPriceHistoryProvider(end_date=date(2024, 6, 28), seed=6)

        assert first.get_price_history('INFY') == second.get_price_history('INFY')
        assert first.get_price_history('INFY') != other.get_price_history('INFY')

    def test_history_is_cached(self):
        provider = SyntheticPriceHistoryProvider(end_date=date(2024, 6, 28), seed=None)
        assert provider.get_price_history('RELIANCE') is provider.get_price_history('RELIANCE')

    def test_prices_floored_at_half_base(self):
        catalogue = {'CRASH': SymbolProfile(base_price=100.0, volatility=0.01, trend=-0.2)}
        provider = SyntheticPriceHistoryProvider(catalogue=catalogue, days=30, end_date=date(2024, 6, 28))

        bars = provider.get_price_history('CRASH')

        assert min(bar.close for bar in bars) == 50.0
        assert all(bar.low <= bar.close <= bar.high for bar in bars)

    def test_rejects_empty_range(self):
        with pytest.raises(ValueError, match='days must be >= 1'):
            SyntheticPriceHistoryProvider(days=0)


class TestCSVProvider:
    @pytest.fixture
    def data_dir(self, tmp_path):
        frame = pd.DataFrame(
            {
                'Date': ['2024-01-03', '2024-01-02', '2024-01-04', '2024-01-04'],
                'Open': [10.0, 9.8, 10.4, 10.5],
                'High': [10.5, 10.1, 10.9, 11.0],
                'Low': [9.9, 9.7, 10.2, 10.3],
                'Close': [10.2, 10.0, 10.6, 10.8],
                'Volume': [1000, 900, 1100, 1200],
            }
        )
        frame.to_csv(tmp_path / 'ACME.csv', index=False)
        return tmp_path

    def test_loads_sorted_deduplicated_bars(self, data_dir):
        bars = CSVPriceHistoryProvider(data_dir).get_price_history('ACME')

        assert [bar.date for bar in bars] == [date(2024, 1, 2), date(2024, 1, 3), date(2024, 1, 4)]
        assert bars[-1].close == 10.8

    def test_missing_symbol_is_empty(self, data_dir):
        provider = CSVPriceHistoryProvider(data_dir)
        assert provider.get_price_history('NONE') == ()
        assert provider.symbols() == ['ACME']

    def test_missing_directory_rejected(self, tmp_path):
        with pytest.raises(ValueError, match='does not exist'):
            CSVPriceHistoryProvider(tmp_path / 'absent')

    def test_timestamp_column_accepted(self, tmp_path):
        path = tmp_path / 'X.csv'
        path.write_text('timestamp,open,high,low,close,volume\n2024-02-01T00:00:00Z,5,6,4,5.5,10\n')
        bars = load_csv_file(path)
        assert bars == [PriceBar(date(2024, 2, 1), 5.0, 6.0, 4.0, 5.5, 10.0)]

    def test_missing_columns_rejected(self, tmp_path):
        path = tmp_path / 'Y.csv'
        path.write_text('date,close\n2024-02-01,5\n')
        with pytest.raises(ValueError, match='missing columns'):
            load_csv_file(path)

    def test_invalid_rows_raise_typed_error(self, tmp_path):
        path = tmp_path / 'BAD.csv'
        path.write_text('date,open,high,low,close,volume\n2024-02-01,10,11,9,15,100\n')
        provider = CSVPriceHistoryProvider(tmp_path)

        with pytest.raises(PriceDataError, match='outside High/Low range') as excinfo:
            provider.get_price_history('BAD')
        assert excinfo.value.symbol == 'BAD'
        assert isinstance(excinfo.value, StockBotError)

        path.write_text('date,open,high,low,close,volume\n2024-02-01,10,11,9,10.5,100\n')
        assert [bar.close for bar in provider.get_price_history('BAD')] == [10.5]
