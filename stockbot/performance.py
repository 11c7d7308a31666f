"""
Performance metrics over the trade ledger.
"""

from __future__ import annotations

import random
from collections import defaultdict, deque
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Any

import pandas as pd

from .ledger import TradeRecord
from .signals import Signal


@dataclass(frozen=True)
class TimelinePoint:
    date: date
    value: float
    change: float

    def to_dict(self) -> dict[str, Any]:
        return {'date': self.date.isoformat(), 'value': self.value, 'change': self.change}


@dataclass
class PerformanceReport:
    """Aggregate trading statistics for one user."""

    total_return: float
    total_return_percentage: float
    win_rate: float  # Percentage
    total_trades: int
    successful_trades: int
    failed_trades: int
    average_holding_period: float  # Days
    performance_timeline: list[TimelinePoint] = field(default_factory=list)
    realized_pnl_curve: list[TimelinePoint] = field(default_factory=list)
    # The performance timeline is a random walk, not an equity curve
    timeline_is_synthetic: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {
            'total_return': self.total_return,
            'total_return_percentage': self.total_return_percentage,
            'win_rate': self.win_rate,
            'total_trades': self.total_trades,
            'successful_trades': self.successful_trades,
            'failed_trades': self.failed_trades,
            'average_holding_period': self.average_holding_period,
            'performance_timeline': [point.to_dict() for point in self.performance_timeline],
            'realized_pnl_curve': [point.to_dict() for point in self.realized_pnl_curve],
            'timeline_is_synthetic': self.timeline_is_synthetic,
        }


def total_return_percentage(total_pnl: float, trades: Sequence[TradeRecord]) -> float:
    """P&L as a percentage of the capital spent on BUY trades (0 without buys)."""
    invested = sum(trade.notional for trade in trades if trade.action is Signal.BUY)
    if invested == 0:
        return 0.0
    return total_pnl / invested * 100


def average_holding_period(trades: Sequence[TradeRecord]) -> float:
    """
    Mean days between each SELL and the oldest still-open BUY of the same symbol.

    Only timing is matched here; quantities and cost basis are not.
    Returns 0 when no SELL can be paired.
    """
    open_buys: dict[str, deque[datetime]] = defaultdict(deque)
    holding_days: list[float] = []

    for trade in sorted(trades, key=lambda t: t.timestamp):
        if trade.action is Signal.BUY:
            open_buys[trade.symbol].append(trade.timestamp)
        elif trade.action is Signal.SELL and open_buys[trade.symbol]:
            opened = open_buys[trade.symbol].popleft()
            holding_days.append((trade.timestamp - opened).total_seconds() / 86400.0)

    if not holding_days:
        return 0.0
    return sum(holding_days) / len(holding_days)


def realized_pnl_curve(trades: Sequence[TradeRecord]) -> list[TimelinePoint]:
    """Cumulative realized P&L at the end of each calendar day with trades."""
    realized = [(trade.timestamp, trade.profit_loss) for trade in trades if trade.profit_loss is not None]
    if not realized:
        return []

    frame = pd.DataFrame(realized, columns=['timestamp', 'profit_loss'])
    frame['day'] = pd.to_datetime(frame['timestamp'], utc=True).dt.date
    daily = frame.groupby('day', sort=True)['profit_loss'].sum()
    cumulative = daily.cumsum()

    return [
        TimelinePoint(date=day, value=round(float(value), 2), change=round(float(change), 2))
        for day, value, change in zip(cumulative.index, cumulative.to_numpy(), daily.to_numpy())
    ]


def generate_synthetic_timeline(
    rng: random.Random,
    as_of: date,
    days: int = 30,
    start_value: float = 1_000_000.0,
) -> list[TimelinePoint]:
    """
    Placeholder performance stream: one point per calendar day for ``days + 1`` days.

    Each day moves the value by a uniform random change in [-1.5%, +2%]. The
    stream is not derived from any trades.
    """
    timeline: list[TimelinePoint] = []
    value = start_value
    for offset in range(days, -1, -1):
        change = value * (rng.random() * 3.5 - 1.5) / 100
        value += change
        timeline.append(
            TimelinePoint(
                date=as_of - timedelta(days=offset),
                value=round(value, 2),
                change=round(change, 2),
            )
        )
    return timeline


def build_performance_report(
    trades: Sequence[TradeRecord],
    timeline: list[TimelinePoint] | None = None,
) -> PerformanceReport:
    """
    Aggregate a user's trades.

    A trade counts as successful when its recorded P&L is positive and as failed
    when it has a P&L that is zero or negative. Trades without P&L (buys) count
    toward the total only.
    """
    successful = sum(1 for trade in trades if trade.profit_loss is not None and trade.profit_loss > 0)
    failed = sum(1 for trade in trades if trade.profit_loss is not None and trade.profit_loss <= 0)
    total_pnl = sum(trade.profit_loss or 0.0 for trade in trades)

    return PerformanceReport(
        total_return=total_pnl,
        total_return_percentage=total_return_percentage(total_pnl, trades),
        win_rate=successful / len(trades) * 100 if successful > 0 else 0.0,
        total_trades=len(trades),
        successful_trades=successful,
        failed_trades=failed,
        average_holding_period=average_holding_period(trades),
        performance_timeline=list(timeline or []),
        realized_pnl_curve=realized_pnl_curve(trades),
    )
