"""Trade ledger protocol interface."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ..ledger import TradeRecord


@runtime_checkable
class TradeLedgerProtocol(Protocol):
    """Append-only store of executed trades."""

    def record_trade(self, trade: TradeRecord) -> TradeRecord:
        """Persist ``trade`` and return the stored record (with its id assigned)."""
        ...

    def get_trades(self, user_id: int) -> Sequence[TradeRecord]:
        """All trades recorded for ``user_id`` in insertion order."""
        ...
