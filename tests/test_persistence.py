"""Tests for Q-table persistence."""

from __future__ import annotations

import json

from stockbot.persistence import load_q_table, save_q_table
from stockbot.qtable import QTable
from stockbot.signals import Signal


def sample_table() -> QTable:
    table = QTable()
    table.update('above_sma50_neutral_low', Signal.BUY, 1.5, 0.1)
    table.update('below_sma50_oversold_high', Signal.SELL, -2.0, 0.1)
    return table


class TestQTablePersistence:
    def test_save_and_load(self, tmp_path):
        path = tmp_path / 'nested' / 'q_table.json'
        table = sample_table()

        save_q_table(table, path)
        restored = load_q_table(path)

        assert restored.items() == table.items()
        payload = json.loads(path.read_text())
        assert payload['version'] == '1.0'
        assert len(payload['entries']) == 2
        assert not path.with_suffix('.tmp').exists()

    def test_second_save_keeps_backup(self, tmp_path):
        path = tmp_path / 'q_table.json'
        save_q_table(sample_table(), path)
        save_q_table(QTable(), path)

        backup = json.loads(path.with_suffix('.backup').read_text())
        assert len(backup['entries']) == 2

    def test_corrupt_primary_falls_back_to_backup(self, tmp_path):
        path = tmp_path / 'q_table.json'
        table = sample_table()
        save_q_table(table, path)
        save_q_table(table, path)
        path.write_text('{not json')

        restored = load_q_table(path)

        assert restored is not None
        assert restored.items() == table.items()

    def test_nothing_readable_returns_none(self, tmp_path):
        path = tmp_path / 'q_table.json'
        assert load_q_table(path) is None

        path.write_text('[1, 2, 3]')
        assert load_q_table(path) is None

    def test_capacity_applied_on_load(self, tmp_path):
        path = tmp_path / 'q_table.json'
        save_q_table(sample_table(), path)

        restored = load_q_table(path, max_entries=1)

        assert restored.max_entries == 1
        assert list(restored) == [('below_sma50_oversold_high', Signal.SELL)]
