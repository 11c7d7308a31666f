"""Tests for trade records and the in-memory ledger."""

from __future__ import annotations

import threading
from datetime import datetime, timezone

import pytest

from stockbot.interfaces import TradeLedgerProtocol
from stockbot.ledger import InMemoryTradeLedger, TradeRecord
from stockbot.signals import Signal

NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def record(user_id=1, action='BUY', quantity=5.0, price=20.0, profit_loss=None):
    return TradeRecord(
        user_id=user_id,
        symbol='TCS',
        action=action,
        quantity=quantity,
        price=price,
        timestamp=NOW,
        profit_loss=profit_loss,
    )


class TestTradeRecord:
    def test_action_is_normalised(self):
        assert record(action='sell').action is Signal.SELL

    def test_notional(self):
        assert record(quantity=3, price=12.5).notional == 37.5

    @pytest.mark.parametrize('field,value', [('quantity', 0), ('price', -1.0)])
    def test_non_positive_amounts_rejected(self, field, value):
        with pytest.raises(ValueError, match=f'{field} must be positive'):
            record(**{field: value})

    def test_to_dict(self):
        payload = record(action=Signal.SELL, profit_loss=3.0).to_dict()
        assert payload['action'] == 'SELL'
        assert payload['timestamp'] == '2024-05-01T12:00:00+00:00'
        assert payload['profit_loss'] == 3.0
        assert payload['id'] is None


class TestInMemoryTradeLedger:
    def test_assigns_sequential_ids(self):
        ledger = InMemoryTradeLedger()
        first = ledger.record_trade(record())
        second = ledger.record_trade(record(user_id=2))
        assert (first.id, second.id) == (1, 2)
        assert len(ledger) == 2

    def test_filters_by_user_in_insertion_order(self):
        ledger = InMemoryTradeLedger()
        a = ledger.record_trade(record(user_id=1, action='BUY'))
        ledger.record_trade(record(user_id=2))
        b = ledger.record_trade(record(user_id=1, action='SELL', profit_loss=1.0))

        assert ledger.get_trades(1) == [a, b]
        assert ledger.get_trades(3) == []
        assert len(ledger.all_trades()) == 3

    def test_seeded_trades_get_ids(self):
        ledger = InMemoryTradeLedger([record(), record()])
        assert [trade.id for trade in ledger.all_trades()] == [1, 2]

    def test_satisfies_protocol(self):
        assert isinstance(InMemoryTradeLedger(), TradeLedgerProtocol)

    def test_concurrent_appends_get_unique_ids(self):
        ledger = InMemoryTradeLedger()

        def worker():
            for _ in range(200):
                ledger.record_trade(record())

        threads = [threading.Thread(target=worker) for _ in range(5)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        ids = [trade.id for trade in ledger.all_trades()]
        assert sorted(ids) == list(range(1, 1001))
