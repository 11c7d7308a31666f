"""
Prometheus metrics collection for the trading decision engine.
"""

from prometheus_client import Counter, Gauge, Histogram


class MetricsCollector:
    """
    Centralized metrics collection using Prometheus client.

    Metrics Categories:
    - Decisions: Signals produced per strategy, evaluation latency
    - Execution: Trades recorded, executions rejected
    - Learning: Q-value updates, Q-table size
    """

    # Decision Metrics
    decisions_total = Counter(
        'stockbot_decisions_total', 'Total trading decisions produced', ['strategy', 'signal']
    )

    decision_latency = Histogram(
        'stockbot_decision_latency_seconds',
        'Time to evaluate the active strategy',
        ['strategy'],
        buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0],
    )

    # Execution Metrics
    trades_total = Counter('stockbot_trades_total', 'Total trades written to the ledger', ['action'])

    executions_rejected = Counter(
        'stockbot_executions_rejected_total', 'Execution requests that wrote nothing', ['reason']
    )

    # Learning Metrics
    q_updates_total = Counter('stockbot_q_updates_total', 'Total Q-value updates', ['action'])

    # Per-bot state, labelled by BotConfig.name
    q_table_entries = Gauge('stockbot_q_table_entries', 'Current number of (state, action) entries', ['bot'])

    bot_active = Gauge('stockbot_bot_active', 'Bot status (1=active, 0=inactive)', ['bot'])

    @classmethod
    def record_decision(cls, strategy: str, signal: str):
        """Record a decision produced by a strategy."""
        cls.decisions_total.labels(strategy=strategy, signal=signal).inc()

    @classmethod
    def record_trade(cls, action: str):
        """Record a trade written to the ledger."""
        cls.trades_total.labels(action=action).inc()

    @classmethod
    def record_rejected_execution(cls, reason: str):
        """Record an execution request that was refused."""
        cls.executions_rejected.labels(reason=reason).inc()

    @classmethod
    def record_q_update(cls, bot: str, action: str, table_size: int):
        """Record a learning step and the resulting table size."""
        cls.q_updates_total.labels(action=action).inc()
        cls.set_q_table_size(bot, table_size)

    @classmethod
    def set_q_table_size(cls, bot: str, table_size: int):
        """Update the number of Q-table entries held by a bot."""
        cls.q_table_entries.labels(bot=bot).set(table_size)

    @classmethod
    def set_bot_active(cls, bot: str, active: bool):
        """Update bot status."""
        cls.bot_active.labels(bot=bot).set(1 if active else 0)
