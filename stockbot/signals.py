"""
Trading signal primitives shared by every strategy.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .errors import InvalidStrategy

MIN_CONFIDENCE = 0.0
MAX_CONFIDENCE = 100.0


class Signal(str, Enum):
    BUY = 'BUY'
    SELL = 'SELL'
    HOLD = 'HOLD'

    @classmethod
    def parse(cls, value: object) -> Signal:
        """Coerce a Signal or its (case-insensitive) name into a Signal.

        Raises:
            ValueError: If the value names no signal
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().upper())
            except ValueError:
                pass
        raise ValueError(f'Unknown trading signal: {value!r}')


# Order matters: exploitation breaks Q-value ties by the first action listed.
ACTIONS: tuple[Signal, ...] = (Signal.BUY, Signal.SELL, Signal.HOLD)


class StrategyName(str, Enum):
    MOVING_AVERAGE = 'MOVING_AVERAGE'
    RSI = 'RSI'
    MACD = 'MACD'
    BOLLINGER = 'BOLLINGER'
    REINFORCEMENT_LEARNING = 'REINFORCEMENT_LEARNING'

    @classmethod
    def parse(cls, value: object) -> StrategyName:
        """Coerce a StrategyName or its (case-insensitive) name.

        Raises:
            InvalidStrategy: If the value names no strategy
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().upper())
            except ValueError:
                pass
        raise InvalidStrategy(value)


def clamp_confidence(value: float) -> float:
    """Clamp a confidence score into [0, 100]."""
    return max(MIN_CONFIDENCE, min(MAX_CONFIDENCE, float(value)))


@dataclass(frozen=True)
class Decision:
    """Trade signal with confidence (0-100) and a human-readable justification."""

    signal: Signal
    confidence: float
    reason: str
    indicators_used: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, 'signal', Signal.parse(self.signal))
        object.__setattr__(self, 'confidence', clamp_confidence(self.confidence))
        object.__setattr__(self, 'indicators_used', tuple(self.indicators_used))

    def to_dict(self) -> dict[str, Any]:
        return {
            'signal': self.signal.value,
            'confidence': self.confidence,
            'reason': self.reason,
            'indicators_used': list(self.indicators_used),
        }
