"""
Runtime settings helpers for environment-driven configuration.

Motivation:
- Consolidate parsing of the STOCKBOT_* variables
- Fail fast when variables are malformed
- Let a `.env` file in the working directory supply defaults
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from dotenv import dotenv_values

from .config import BotConfig, LearningConfig, QTableConfig
from .signals import StrategyName

_LOG_LEVELS = {'CRITICAL', 'ERROR', 'WARNING', 'INFO', 'DEBUG'}


@dataclass(frozen=True)
class RuntimeSettings:
    """Top-level runtime settings consumed by the CLI."""

    log_level: str
    strategy: StrategyName
    learning_rate: float | None
    exploration_rate: float | None
    q_table_max_entries: int
    q_table_path: Path | None
    seed: int | None

    def to_bot_config(self) -> BotConfig:
        """Build a BotConfig, clamping learning parameters into their operating bounds."""
        learning = LearningConfig().updated(
            learning_rate=self.learning_rate,
            exploration_rate=self.exploration_rate,
        )
        return BotConfig(
            initial_strategy=self.strategy,
            learning=learning,
            q_table=QTableConfig(max_entries=self.q_table_max_entries),
            seed=self.seed,
        )


def load_runtime_settings(env: Mapping[str, str] | None = None) -> RuntimeSettings:
    """
    Parse runtime settings from environment variables.

    Args:
        env: Optional mapping for testability. Defaults to os.environ.
    """
    source = _apply_dotenv_overrides(os.environ) if env is None else env

    log_level = (_clean_str(source.get('STOCKBOT_LOG_LEVEL', 'INFO')) or 'INFO').upper()
    if log_level not in _LOG_LEVELS:
        raise ValueError(f'STOCKBOT_LOG_LEVEL must be one of {sorted(_LOG_LEVELS)}, got {log_level!r}')

    raw_strategy = _clean_str(source.get('STOCKBOT_STRATEGY'))
    strategy = StrategyName.parse(raw_strategy) if raw_strategy else StrategyName.REINFORCEMENT_LEARNING

    q_table_path = _clean_str(source.get('STOCKBOT_Q_TABLE_PATH'))
    max_entries = _parse_optional_int(source.get('STOCKBOT_Q_TABLE_MAX_ENTRIES'), 'STOCKBOT_Q_TABLE_MAX_ENTRIES')
    if max_entries is not None and max_entries < 1:
        raise ValueError(f'STOCKBOT_Q_TABLE_MAX_ENTRIES must be >= 1, got {max_entries}')

    return RuntimeSettings(
        log_level=log_level,
        strategy=strategy,
        learning_rate=_parse_optional_float(source.get('STOCKBOT_LEARNING_RATE'), 'STOCKBOT_LEARNING_RATE'),
        exploration_rate=_parse_optional_float(source.get('STOCKBOT_EXPLORATION_RATE'), 'STOCKBOT_EXPLORATION_RATE'),
        q_table_max_entries=max_entries if max_entries is not None else QTableConfig().max_entries,
        q_table_path=Path(q_table_path) if q_table_path else None,
        seed=_parse_optional_int(source.get('STOCKBOT_SEED'), 'STOCKBOT_SEED'),
    )


def _apply_dotenv_overrides(env: Mapping[str, str]) -> Mapping[str, str]:
    """
    Use `.env` in the current working directory (if present) as defaults.

    Explicit environment variables stay authoritative. Keys declared without a
    value are ignored.
    """
    path = Path('.env')
    if not path.is_file():
        return env
    defaults = {key: value for key, value in dotenv_values(path).items() if value is not None}
    return {**defaults, **env}


def _clean_str(value: str | None) -> str | None:
    cleaned = value.strip() if value is not None else ''
    return cleaned or None


def _parse_optional_int(raw: str | None, key: str) -> int | None:
    cleaned = _clean_str(raw)
    if cleaned is None:
        return None
    try:
        value = int(cleaned)
    except ValueError:
        raise ValueError(f'{key} must be an integer, got {raw!r}') from None
    if value < 0:
        raise ValueError(f'{key} must be non-negative, got {value}')
    return value


def _parse_optional_float(raw: str | None, key: str) -> float | None:
    cleaned = _clean_str(raw)
    if cleaned is None:
        return None
    try:
        return float(cleaned)
    except ValueError:
        raise ValueError(f'{key} must be a number, got {raw!r}') from None
