"""Helpers to persist the learned Q-table."""

from __future__ import annotations

import contextlib
import json
import logging
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from .qtable import QTable

logger = logging.getLogger(__name__)

Q_TABLE_FORMAT_VERSION = '1.0'

# Global lock for atomic file writes
_PERSISTENCE_LOCK = threading.Lock()


def _atomic_write_json(data: Any, filepath: Path) -> None:
    """
    Atomic write with locking to prevent corruption.

    Strategy:
    1. Write to temporary file
    2. Move the existing file (if any) to ``<name>.backup``
    3. Atomically rename temp file to target

    Args:
        data: JSON-serializable data
        filepath: Target file path
    """
    with _PERSISTENCE_LOCK:
        filepath.parent.mkdir(parents=True, exist_ok=True)

        temp_path = filepath.with_suffix('.tmp')
        backup_path = filepath.with_suffix('.backup')

        try:
            with temp_path.open('w') as handle:
                json.dump(data, handle, indent=2)

            if filepath.exists():
                filepath.replace(backup_path)

            temp_path.replace(filepath)

        except Exception as exc:
            raise RuntimeError(f'Atomic write failed for {filepath}: {exc}') from exc

        finally:
            if temp_path.exists():
                with contextlib.suppress(OSError):
                    temp_path.unlink()


def save_q_table(table: QTable, path: str | Path) -> None:
    """
    Persist Q-values to JSON.

    Args:
        table: Table to serialize
        path: Target file path (parent directories are created)
    """
    payload = {
        'version': Q_TABLE_FORMAT_VERSION,
        'timestamp': datetime.now(timezone.utc).isoformat(),
        **table.to_dict(),
    }
    _atomic_write_json(payload, Path(path))
    logger.info(f'Saved Q-table with {len(table)} entries to {path}')


def _read_json(path: Path) -> dict[str, Any] | None:
    if not path.exists():
        return None
    try:
        with path.open() as handle:
            payload = json.load(handle)
    except (json.JSONDecodeError, OSError) as exc:
        logger.warning(f'Could not read {path}: {exc}')
        return None
    if not isinstance(payload, dict):
        logger.warning(f'Ignoring {path}: expected a JSON object')
        return None
    return payload


def load_q_table(path: str | Path, max_entries: int | None = None) -> QTable | None:
    """
    Load Q-values saved by ``save_q_table``.

    The primary file is tried first; when it is missing or corrupted the
    ``.backup`` file written by the previous save is used instead.

    Returns:
        The loaded table, or None when neither file holds a readable table
    """
    primary = Path(path)
    for candidate in (primary, primary.with_suffix('.backup')):
        payload = _read_json(candidate)
        if payload is None:
            continue
        try:
            table = QTable.from_dict(payload, max_entries=max_entries)
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning(f'Ignoring malformed Q-table in {candidate}: {exc}')
            continue
        if candidate is not primary:
            logger.warning(f'Primary Q-table {primary} unreadable, restored from {candidate}')
        logger.info(f'Loaded Q-table with {len(table)} entries from {candidate}')
        return table
    return None
