"""
Configuration objects for the trading bot.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from .signals import StrategyName

# Bounds applied whenever learning parameters are updated at runtime
MIN_LEARNING_RATE = 0.001
MAX_LEARNING_RATE = 0.1
MIN_EXPLORATION_RATE = 0.01
MAX_EXPLORATION_RATE = 0.3


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, float(value)))


@dataclass(frozen=True)
class LearningConfig:
    """Learning parameters for the Q-Learning strategy."""

    learning_rate: float = 0.01
    exploration_rate: float = 0.1  # Epsilon for the exploration/exploitation trade-off

    def validate(self) -> None:
        """
        Validate the mathematical domain of the parameters.

        Runtime updates go through ``updated()`` which clamps into the operating
        bounds; direct construction may pin exploration to 0 or 1 for simulations.

        Raises:
            ValueError: If any parameter is invalid
        """
        if not 0.0 < self.learning_rate <= 1.0:
            raise ValueError(f'learning_rate must be in (0, 1], got {self.learning_rate}')
        if not 0.0 <= self.exploration_rate <= 1.0:
            raise ValueError(f'exploration_rate must be in [0, 1], got {self.exploration_rate}')

    def updated(self, learning_rate: float | None = None, exploration_rate: float | None = None) -> LearningConfig:
        """Return a copy with each supplied parameter clamped into its operating bounds."""
        changes: dict[str, float] = {}
        if learning_rate is not None:
            changes['learning_rate'] = _clamp(learning_rate, MIN_LEARNING_RATE, MAX_LEARNING_RATE)
        if exploration_rate is not None:
            changes['exploration_rate'] = _clamp(exploration_rate, MIN_EXPLORATION_RATE, MAX_EXPLORATION_RATE)
        return replace(self, **changes)


@dataclass(frozen=True)
class QTableConfig:
    """Bounds for the state/action value table."""

    max_entries: int = 200_000  # LRU eviction beyond this many (state, action) pairs
    prune_threshold: float = 1e-6  # |Q| below this is considered near-zero by prune()

    def validate(self) -> None:
        if self.max_entries < 1:
            raise ValueError(f'max_entries must be >= 1, got {self.max_entries}')
        if self.prune_threshold < 0:
            raise ValueError(f'prune_threshold must be non-negative, got {self.prune_threshold}')


@dataclass
class BotConfig:
    """Configuration for a TradingBot instance."""

    name: str = 'stockbot'  # Label for per-bot metrics; give coexisting bots distinct names
    initial_strategy: StrategyName = StrategyName.REINFORCEMENT_LEARNING
    start_active: bool = True
    learning: LearningConfig = field(default_factory=LearningConfig)
    q_table: QTableConfig = field(default_factory=QTableConfig)

    # Placeholder realized-gain model applied to SELL executions
    sell_profit_rate: float = 0.03

    # Synthetic performance timeline
    timeline_days: int = 30
    timeline_start_value: float = 1_000_000.0

    seed: int | None = None

    def validate(self) -> None:
        """
        Validate bot configuration parameters.

        Raises:
            ValueError: If any parameter is invalid
        """
        if not self.name or not self.name.strip():
            raise ValueError(f'name must be a non-empty string, got {self.name!r}')
        StrategyName.parse(self.initial_strategy)
        self.learning.validate()
        self.q_table.validate()

        if self.sell_profit_rate < 0:
            raise ValueError(f'sell_profit_rate must be non-negative, got {self.sell_profit_rate}')
        if self.timeline_days < 0:
            raise ValueError(f'timeline_days must be non-negative, got {self.timeline_days}')
        if self.timeline_start_value <= 0:
            raise ValueError(f'timeline_start_value must be positive, got {self.timeline_start_value}')
