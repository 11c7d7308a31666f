"""
Trade records and an in-memory ledger.
"""

from __future__ import annotations

import itertools
import threading
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Any

from .signals import Signal


@dataclass(frozen=True)
class TradeRecord:
    """An executed trade as written to the ledger."""

    user_id: int
    symbol: str
    action: Signal
    quantity: float
    price: float
    timestamp: datetime
    profit_loss: float | None = None
    id: int | None = None

    def __post_init__(self):
        object.__setattr__(self, 'action', Signal.parse(self.action))
        if self.quantity <= 0:
            raise ValueError(f'quantity must be positive, got {self.quantity}')
        if self.price <= 0:
            raise ValueError(f'price must be positive, got {self.price}')

    @property
    def notional(self) -> float:
        return self.quantity * self.price

    def to_dict(self) -> dict[str, Any]:
        return {
            'id': self.id,
            'user_id': self.user_id,
            'symbol': self.symbol,
            'action': self.action.value,
            'quantity': self.quantity,
            'price': self.price,
            'timestamp': self.timestamp.isoformat(),
            'profit_loss': self.profit_loss,
        }


class InMemoryTradeLedger:
    """Thread-safe append-only ledger assigning sequential trade ids."""

    def __init__(self, trades: list[TradeRecord] | None = None) -> None:
        self._lock = threading.Lock()
        self._trades: list[TradeRecord] = []
        self._id_seq = itertools.count(start=1)
        for trade in trades or []:
            self.record_trade(trade)

    def record_trade(self, trade: TradeRecord) -> TradeRecord:
        with self._lock:
            stored = replace(trade, id=next(self._id_seq))
            self._trades.append(stored)
        return stored

    def get_trades(self, user_id: int) -> list[TradeRecord]:
        with self._lock:
            return [trade for trade in self._trades if trade.user_id == user_id]

    def all_trades(self) -> list[TradeRecord]:
        with self._lock:
            return list(self._trades)

    def __len__(self) -> int:
        with self._lock:
            return len(self._trades)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)
