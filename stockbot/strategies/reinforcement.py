"""Q-Learning strategy blended with RSI and MACD confirmation.

The value table is keyed by the discrete state label from ``stockbot.state``
and learns only from executed trades. The update is one-step and
bandit-style (no discounted future term):

    Q(s,a) <- Q(s,a) + alpha * (reward - Q(s,a))
"""

from __future__ import annotations

import logging
import random
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

from ..config import LearningConfig
from ..data import PriceBar
from ..qtable import QTable
from ..signals import ACTIONS, Decision, Signal, StrategyName
from ..state import encode_state
from .base import BaseStrategy
from .macd import MACDStrategy
from .rsi import RSIStrategy

logger = logging.getLogger(__name__)

RL_INDICATORS = ('Reinforcement Learning', 'Q-Learning')

MAX_CONFIDENCE = 95.0
SINGLE_CONFIRMATION_CAP = 90.0
FULL_CONFIRMATION_BONUS = 15.0
SINGLE_CONFIRMATION_BONUS = 5.0
STABLE_PRICE_BAND = 0.01


@dataclass(frozen=True)
class QUpdate:
    """Outcome of one learning step."""

    state: str
    action: Signal
    price_change: float
    reward: float
    previous_value: float
    value: float


def compute_reward(action: Signal | str, price_change: float) -> float:
    """
    Reward for having taken ``action`` before a relative close-to-close move.

    BUY into a rise and SELL into a fall earn the move in percent, HOLD through
    a move under 1% earns 1, anything else is penalised by half the move.
    """
    action = Signal.parse(action)
    if action is Signal.BUY and price_change > 0:
        return price_change * 100
    if action is Signal.SELL and price_change < 0:
        return abs(price_change) * 100
    if action is Signal.HOLD and abs(price_change) < STABLE_PRICE_BAND:
        return 1.0
    return -abs(price_change) * 50


def action_difference(values: dict[Signal, float], best: Signal) -> float:
    """
    Gap between the best value and the mean of the other two, clamped to [0, 1].

    Exactly one action is left out even when several share the best value, so
    {BUY: 1, SELL: 1, HOLD: 0} gives 0.5 rather than 1.0. Tied leaders therefore
    read as a weaker preference than a single clear leader.
    """
    all_values = list(values.values())
    if all(value == all_values[0] for value in all_values):
        return 0.0
    others = [value for action, value in values.items() if action is not best]
    others_mean = sum(others) / len(others)
    return min(1.0, max(0.0, values[best] - others_mean))


class QLearningStrategy(BaseStrategy):
    """Epsilon-greedy tabular policy confirmed by the RSI and MACD strategies."""

    name = StrategyName.REINFORCEMENT_LEARNING
    min_bars = 30
    label = 'RL'
    indicators = ('Reinforcement Learning',)

    def __init__(
        self,
        q_table: QTable | None = None,
        learning: LearningConfig | None = None,
        rng: random.Random | None = None,
        rsi_strategy: RSIStrategy | None = None,
        macd_strategy: MACDStrategy | None = None,
    ):
        learning = learning or LearningConfig()
        learning.validate()

        self.q_table = q_table if q_table is not None else QTable()
        self.learning = learning
        self.rng = rng or random.Random()
        self.rsi_strategy = rsi_strategy or RSIStrategy()
        self.macd_strategy = macd_strategy or MACDStrategy()

    def select_action(self, state: str) -> tuple[Signal, bool]:
        """Epsilon-greedy action for ``state``.

        Returns:
            (action, explored) where ``explored`` is True for a random pick
        """
        if self.rng.random() < self.learning.exploration_rate:
            return self.rng.choice(ACTIONS), True

        values = self.q_table.action_values(state)
        best_action = ACTIONS[0]
        best_value = float('-inf')
        for action in ACTIONS:
            if values[action] > best_value:
                best_value = values[action]
                best_action = action
        return best_action, False

    def _decide(self, closes: np.ndarray, bars: Sequence[PriceBar]) -> Decision:
        state = encode_state(closes)
        action, explored = self.select_action(state)

        if explored:
            return Decision(action, 50, 'Exploration phase - trying new action', RL_INDICATORS)

        values = self.q_table.action_values(state)
        confidence = min(MAX_CONFIDENCE, 50 + action_difference(values, action) * 30)

        rsi_agrees = self.rsi_strategy.decide(bars).signal is action
        macd_agrees = self.macd_strategy.decide(bars).signal is action

        if rsi_agrees and macd_agrees:
            return Decision(
                action,
                min(MAX_CONFIDENCE, confidence + FULL_CONFIRMATION_BONUS),
                'Multiple indicators confirm the signal',
                ('Reinforcement Learning', 'RSI', 'MACD'),
            )
        if rsi_agrees or macd_agrees:
            return Decision(
                action,
                min(SINGLE_CONFIRMATION_CAP, confidence + SINGLE_CONFIRMATION_BONUS),
                'Signal confirmed by one additional indicator',
                ('Reinforcement Learning', 'RSI' if rsi_agrees else 'MACD'),
            )
        return Decision(
            action,
            confidence,
            'Decision based on RL model learning from historical patterns',
            RL_INDICATORS,
        )

    def learn(self, bars: Sequence[PriceBar], action: Signal | str) -> QUpdate | None:
        """
        Update the value of ``action`` in the current state from the latest close-to-close move.

        Called only when a trade is executed. Returns None when fewer than two bars exist.
        """
        if len(bars) < 2:
            return None

        action = Signal.parse(action)
        state = encode_state([bar.close for bar in bars])
        current_price = bars[-1].close
        prev_price = bars[-2].close
        price_change = (current_price - prev_price) / prev_price

        reward = compute_reward(action, price_change)
        previous_value = self.q_table.get(state, action)
        value = self.q_table.update(state, action, reward, self.learning.learning_rate)

        logger.debug(
            f'Q update: state={state} action={action.value} change={price_change:.4%} '
            f'reward={reward:.4f} Q {previous_value:.4f} -> {value:.4f}',
            extra={'state': state, 'signal': action.value, 'reward': reward, 'q_value': value},
        )
        return QUpdate(
            state=state,
            action=action,
            price_change=price_change,
            reward=reward,
            previous_value=previous_value,
            value=value,
        )
