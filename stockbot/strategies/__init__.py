"""Decision strategies selectable by the bot controller."""

from __future__ import annotations

from .base import BaseStrategy
from .bollinger import BollingerBandsStrategy
from .macd import MACDStrategy
from .moving_average import MovingAverageCrossoverStrategy
from .reinforcement import QLearningStrategy, QUpdate, compute_reward
from .rsi import RSIStrategy
from ..signals import StrategyName


def build_strategy_set(q_learning: QLearningStrategy) -> dict[StrategyName, BaseStrategy]:
    """One instance of every strategy, keyed by name.

    The RSI and MACD instances are the ones the Q-Learning strategy ensembles with.
    """
    return {
        StrategyName.MOVING_AVERAGE: MovingAverageCrossoverStrategy(),
        StrategyName.RSI: q_learning.rsi_strategy,
        StrategyName.MACD: q_learning.macd_strategy,
        StrategyName.BOLLINGER: BollingerBandsStrategy(),
        StrategyName.REINFORCEMENT_LEARNING: q_learning,
    }


__all__ = [
    'BaseStrategy',
    'BollingerBandsStrategy',
    'MACDStrategy',
    'MovingAverageCrossoverStrategy',
    'QLearningStrategy',
    'QUpdate',
    'RSIStrategy',
    'build_strategy_set',
    'compute_reward',
]
