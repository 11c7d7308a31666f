"""
Trading bot controller.

Routes decision requests to the active strategy, records executed trades in
the ledger and feeds every execution back into the Q-Learning strategy.
"""

from __future__ import annotations

import logging
import random
import threading
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date
from enum import Enum
from pathlib import Path

from . import persistence
from .config import BotConfig, LearningConfig
from .data import PriceBar, closing_prices
from .errors import PriceDataError, SymbolNotFound
from .interfaces import PriceHistoryProviderProtocol, TradeLedgerProtocol
from .ledger import TradeRecord, utc_now
from .monitoring import MetricsCollector
from .performance import PerformanceReport, build_performance_report, generate_synthetic_timeline
from .qtable import QTable
from .signals import Decision, Signal, StrategyName
from .state import StateFeatures, extract_state_features
from .strategies import BaseStrategy, QLearningStrategy, QUpdate, build_strategy_set

logger = logging.getLogger(__name__)


class ExecutionStatus(str, Enum):
    EXECUTED = 'executed'
    BOT_INACTIVE = 'bot_inactive'
    SYMBOL_NOT_FOUND = 'symbol_not_found'
    INVALID_ORDER = 'invalid_order'
    LEDGER_ERROR = 'ledger_error'
    PRICE_DATA_ERROR = 'price_data_error'


@dataclass(frozen=True)
class ExecutionResult:
    """Outcome of an execution request."""

    status: ExecutionStatus
    trade: TradeRecord | None = None
    update: QUpdate | None = None  # Learning step applied after the trade, if any

    @property
    def executed(self) -> bool:
        return self.status is ExecutionStatus.EXECUTED

    @property
    def reward(self) -> float | None:
        return self.update.reward if self.update is not None else None


@dataclass
class BotState:
    active: bool = True
    current_strategy: StrategyName = StrategyName.REINFORCEMENT_LEARNING


class TradingBot:
    """
    Decision router and execution recorder.

    One instance owns its activation state, selected strategy, learning
    parameters and Q-table. Collaborators are injected so tests and the CLI
    can swap data sources and storage.

    Args:
        provider: Source of daily price history
        ledger: Store for executed trades
        config: Bot configuration (defaults to ``BotConfig()``)
        rng: Random source for exploration (defaults to one seeded by ``config.seed``)
    """

    def __init__(
        self,
        provider: PriceHistoryProviderProtocol,
        ledger: TradeLedgerProtocol,
        config: BotConfig | None = None,
        rng: random.Random | None = None,
    ):
        config = config or BotConfig()
        config.validate()

        self.config = config
        self.provider = provider
        self.ledger = ledger

        self._lock = threading.RLock()
        self._timeline_rng = random.Random(config.seed)
        self.state = BotState(
            active=config.start_active,
            current_strategy=StrategyName.parse(config.initial_strategy),
        )

        self.q_table = QTable(max_entries=config.q_table.max_entries)
        self._q_learning = QLearningStrategy(
            q_table=self.q_table,
            learning=config.learning,
            rng=rng or random.Random(config.seed),
        )
        self._strategies: dict[StrategyName, BaseStrategy] = build_strategy_set(self._q_learning)

        MetricsCollector.set_bot_active(config.name, self.state.active)
        logger.info(
            f'TradingBot {config.name!r} initialised: active={self.state.active} '
            f'strategy={self.state.current_strategy.value}'
        )

    # ------------------------------------------------------------------
    # Bot state
    # ------------------------------------------------------------------

    def is_active(self) -> bool:
        with self._lock:
            return self.state.active

    def toggle_active(self) -> bool:
        """Flip the activation flag and return the new value."""
        with self._lock:
            self.state.active = not self.state.active
            active = self.state.active
        MetricsCollector.set_bot_active(self.config.name, active)
        logger.info(f'Bot {"activated" if active else "deactivated"}')
        return active

    @property
    def current_strategy(self) -> StrategyName:
        with self._lock:
            return self.state.current_strategy

    def set_strategy(self, name: StrategyName | str) -> StrategyName:
        """
        Select the strategy used by ``decide``.

        Raises:
            InvalidStrategy: If ``name`` is not a known strategy (state is unchanged)
        """
        strategy = StrategyName.parse(name)
        with self._lock:
            previous = self.state.current_strategy
            self.state.current_strategy = strategy
        logger.info(f'Strategy changed: {previous.value} -> {strategy.value}')
        return strategy

    @property
    def learning(self) -> LearningConfig:
        with self._lock:
            return self._q_learning.learning

    def update_learning_config(
        self,
        learning_rate: float | None = None,
        exploration_rate: float | None = None,
    ) -> LearningConfig:
        """Apply new learning parameters, each clamped into its operating bounds."""
        with self._lock:
            updated = self._q_learning.learning.updated(
                learning_rate=learning_rate,
                exploration_rate=exploration_rate,
            )
            self._q_learning.learning = updated
        logger.info(
            f'Learning config updated: learning_rate={updated.learning_rate} '
            f'exploration_rate={updated.exploration_rate}'
        )
        return updated

    # ------------------------------------------------------------------
    # Decisions
    # ------------------------------------------------------------------

    def _history(self, symbol: str) -> Sequence[PriceBar]:
        bars = self.provider.get_price_history(symbol)
        if not bars:
            raise SymbolNotFound(symbol)
        return bars

    def decide(self, symbol: str) -> Decision:
        """
        Evaluate the active strategy on the symbol's price history.

        Raises:
            SymbolNotFound: If the provider has no bars for ``symbol``
        """
        bars = self._history(symbol)
        with self._lock:
            strategy_name = self.state.current_strategy
            strategy = self._strategies[strategy_name]
            with MetricsCollector.decision_latency.labels(strategy=strategy_name.value).time():
                decision = strategy.decide(bars)

        MetricsCollector.record_decision(strategy_name.value, decision.signal.value)
        logger.debug(
            f'{symbol}: {strategy_name.value} -> {decision.signal.value} '
            f'({decision.confidence:.1f}) {decision.reason}',
            extra={
                'symbol': symbol,
                'strategy': strategy_name.value,
                'signal': decision.signal.value,
                'confidence': decision.confidence,
            },
        )
        return decision

    def generate_signal(self, symbol: str) -> Signal:
        return self.decide(symbol).signal

    def describe_state(self, symbol: str) -> StateFeatures | None:
        """Indicator snapshot behind the Q-Learning state label, None below 14 bars."""
        return extract_state_features(closing_prices(self._history(symbol)))

    def q_value(self, state: str, action: Signal | str) -> float:
        return self.q_table.get(state, Signal.parse(action))

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def _reject(self, status: ExecutionStatus, symbol: str, message: str) -> ExecutionResult:
        MetricsCollector.record_rejected_execution(status.value)
        logger.info(f'Execution rejected ({status.value}): {message}', extra={'symbol': symbol, 'status': status.value})
        return ExecutionResult(status=status)

    def execute_trade(
        self,
        user_id: int,
        symbol: str,
        action: Signal | str,
        quantity: float,
    ) -> ExecutionResult:
        """
        Record a trade at the latest close and learn from it.

        SELL trades carry a placeholder realized gain of
        ``quantity * price * config.sell_profit_rate``. The Q-learning update
        runs after every recorded trade whichever strategy is active.
        """
        with self._lock:
            if not self.state.active:
                return self._reject(ExecutionStatus.BOT_INACTIVE, symbol, f'bot is inactive, {symbol} not traded')

            try:
                signal = Signal.parse(action)
            except ValueError as exc:
                return self._reject(ExecutionStatus.INVALID_ORDER, symbol, str(exc))
            if not quantity > 0:
                return self._reject(ExecutionStatus.INVALID_ORDER, symbol, f'quantity must be positive, got {quantity}')

            try:
                bars = self.provider.get_price_history(symbol)
            except PriceDataError as exc:
                return self._reject(ExecutionStatus.PRICE_DATA_ERROR, symbol, str(exc))
            if not bars:
                return self._reject(ExecutionStatus.SYMBOL_NOT_FOUND, symbol, f'no price history for {symbol!r}')

            price = bars[-1].close
            profit_loss = quantity * price * self.config.sell_profit_rate if signal is Signal.SELL else None
            trade = TradeRecord(
                user_id=user_id,
                symbol=symbol,
                action=signal,
                quantity=quantity,
                price=price,
                timestamp=utc_now(),
                profit_loss=profit_loss,
            )

            try:
                stored = self.ledger.record_trade(trade)
            except Exception:
                logger.error(f'Failed to record {signal.value} {quantity} {symbol} for user {user_id}', exc_info=True)
                MetricsCollector.record_rejected_execution(ExecutionStatus.LEDGER_ERROR.value)
                return ExecutionResult(status=ExecutionStatus.LEDGER_ERROR)

            MetricsCollector.record_trade(signal.value)
            logger.info(
                f'Executed {signal.value} {quantity} {symbol} @ {price:.2f} for user {user_id}',
                extra={
                    'symbol': symbol,
                    'strategy': self.state.current_strategy.value,
                    'signal': signal.value,
                    'quantity': quantity,
                    'price': price,
                    'user_id': user_id,
                },
            )

            update = self._learn(symbol, bars, signal)
            return ExecutionResult(status=ExecutionStatus.EXECUTED, trade=stored, update=update)

    def execute(self, user_id: int, symbol: str, action: Signal | str, quantity: float) -> bool:
        """True when the trade was written to the ledger."""
        return self.execute_trade(user_id, symbol, action, quantity).executed

    def _learn(self, symbol: str, bars: Sequence[PriceBar], action: Signal) -> QUpdate | None:
        try:
            update = self._q_learning.learn(bars, action)
        except Exception:
            logger.error(
                f'Q-learning update failed for {symbol} {action.value}',
                exc_info=True,
                extra={'symbol': symbol, 'signal': action.value},
            )
            return None
        if update is not None:
            MetricsCollector.record_q_update(self.config.name, update.action.value, len(self.q_table))
            logger.info(
                f'{symbol}: learned from {action.value}, reward {update.reward:.4f}',
                extra={
                    'symbol': symbol,
                    'signal': action.value,
                    'state': update.state,
                    'reward': update.reward,
                    'q_value': update.value,
                },
            )
        return update

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------

    def performance_metrics(self, user_id: int, as_of: date | None = None) -> PerformanceReport:
        """Trade statistics for ``user_id`` plus the placeholder performance timeline."""
        trades = list(self.ledger.get_trades(user_id))
        with self._lock:
            timeline = generate_synthetic_timeline(
                self._timeline_rng,
                as_of or date.today(),
                days=self.config.timeline_days,
                start_value=self.config.timeline_start_value,
            )
        return build_performance_report(trades, timeline)

    # ------------------------------------------------------------------
    # Q-table maintenance
    # ------------------------------------------------------------------

    def prune_q_table(self) -> int:
        """Drop near-zero Q-values; returns the number removed."""
        removed = self.q_table.prune(self.config.q_table.prune_threshold)
        MetricsCollector.set_q_table_size(self.config.name, len(self.q_table))
        return removed

    def save_q_table(self, path: str | Path) -> None:
        persistence.save_q_table(self.q_table, path)

    def load_q_table(self, path: str | Path) -> bool:
        """Replace the Q-table with one saved earlier. Returns False if nothing could be loaded."""
        table = persistence.load_q_table(path, max_entries=self.config.q_table.max_entries)
        if table is None:
            logger.info(f'No saved Q-table at {path}, starting fresh')
            return False
        with self._lock:
            self.q_table = table
            self._q_learning.q_table = table
        MetricsCollector.set_q_table_size(self.config.name, len(table))
        return True
