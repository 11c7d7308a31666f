"""State/action value table with LRU eviction.

Keys are ``(state_label, action)`` pairs. Values are only ever written by
``update()``, which applies the one-step rule ``Q <- Q + alpha * (reward - Q)``.
Reads and updates both count as use, so the entry evicted at capacity is the
one least recently read or written.
"""

from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from collections.abc import Iterator
from typing import Any

from .signals import ACTIONS, Signal

logger = logging.getLogger(__name__)

QKey = tuple[str, Signal]


class QTable:
    """Bounded tabular value store shared by the Q-Learning strategy."""

    def __init__(self, max_entries: int = 200_000):
        """Initialize the table.

        Args:
            max_entries: Maximum (state, action) entries before LRU eviction
        """
        if max_entries < 1:
            raise ValueError(f'max_entries must be >= 1, got {max_entries}')
        self.max_entries = max_entries
        self._values: OrderedDict[QKey, float] = OrderedDict()
        self._lock = threading.Lock()
        self.total_updates = 0
        self.evictions = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._values)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._values

    def __iter__(self) -> Iterator[QKey]:
        with self._lock:
            return iter(list(self._values))

    def get(self, state: str, action: Signal | str, default: float = 0.0) -> float:
        """Value of ``(state, action)``, or ``default`` if never updated. Marks the entry as recently used."""
        key = (state, Signal.parse(action))
        with self._lock:
            if key not in self._values:
                return default
            self._values.move_to_end(key)
            return self._values[key]

    def action_values(self, state: str) -> dict[Signal, float]:
        """Values of every action in ``state``, in exploitation tie-break order.

        Stored entries are marked as recently used.
        """
        values: dict[Signal, float] = {}
        with self._lock:
            for action in ACTIONS:
                key = (state, action)
                if key in self._values:
                    self._values.move_to_end(key)
                values[action] = self._values.get(key, 0.0)
        return values

    def update(self, state: str, action: Signal | str, reward: float, learning_rate: float) -> float:
        """
        Move ``Q(state, action)`` toward ``reward`` by ``learning_rate``.

        Q(s,a) <- Q(s,a) + alpha * (reward - Q(s,a))

        Returns:
            The new value
        """
        key = (state, Signal.parse(action))
        with self._lock:
            current = self._values.get(key, 0.0)
            new_value = current + learning_rate * (reward - current)

            if key in self._values:
                self._values.move_to_end(key)
            elif len(self._values) >= self.max_entries:
                evicted, _ = self._values.popitem(last=False)
                self.evictions += 1
                logger.debug(f'Q-table full ({self.max_entries} entries), evicted {evicted}')

            self._values[key] = new_value
            self.total_updates += 1

        return new_value

    def prune(self, min_abs_value: float = 1e-6) -> int:
        """
        Remove entries whose magnitude is below ``min_abs_value``.

        Pruned entries read back as the default 0, so only near-zero knowledge is lost.

        Returns:
            Number of entries removed
        """
        with self._lock:
            stale = [key for key, value in self._values.items() if abs(value) < min_abs_value]
            for key in stale:
                del self._values[key]
        if stale:
            logger.info(f'Pruned {len(stale)} near-zero Q-table entries')
        return len(stale)

    def clear(self) -> None:
        with self._lock:
            self._values.clear()

    def items(self) -> list[tuple[QKey, float]]:
        """Snapshot of entries from least to most recently used."""
        with self._lock:
            return list(self._values.items())

    def to_dict(self) -> dict[str, Any]:
        with self._lock:
            return {
                'max_entries': self.max_entries,
                'total_updates': self.total_updates,
                'entries': [
                    {'state': state, 'action': action.value, 'value': value}
                    for (state, action), value in self._values.items()
                ],
            }

    @classmethod
    def from_dict(cls, payload: dict[str, Any], max_entries: int | None = None) -> QTable:
        """Rebuild a table serialized by ``to_dict()``.

        Entries beyond the capacity are dropped oldest first.
        """
        capacity = max_entries if max_entries is not None else int(payload.get('max_entries', 200_000))
        table = cls(max_entries=capacity)
        entries = payload.get('entries', [])
        if not isinstance(entries, list):
            raise ValueError('Q-table payload "entries" must be a list')

        for entry in entries[-capacity:]:
            key = (str(entry['state']), Signal.parse(entry['action']))
            table._values[key] = float(entry['value'])

        total_updates = payload.get('total_updates', 0)
        table.total_updates = int(total_updates) if isinstance(total_updates, (int, float)) else 0
        return table

    def get_stats(self) -> dict[str, Any]:
        with self._lock:
            num_entries = len(self._values)
            num_states = len({state for state, _ in self._values})
        return {
            'num_entries': num_entries,
            'num_states': num_states,
            'max_entries': self.max_entries,
            'total_updates': self.total_updates,
            'evictions': self.evictions,
        }
