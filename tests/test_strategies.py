"""Tests for the rule-based strategies."""

from __future__ import annotations

import pytest

from stockbot.indicators import macd
from stockbot.signals import Signal
from stockbot.strategies import (
    BollingerBandsStrategy,
    MACDStrategy,
    MovingAverageCrossoverStrategy,
    QLearningStrategy,
    RSIStrategy,
)

ALL_STRATEGIES = [
    (MovingAverageCrossoverStrategy, 'MA'),
    (RSIStrategy, 'RSI'),
    (MACDStrategy, 'MACD'),
    (BollingerBandsStrategy, 'Bollinger Bands'),
    (QLearningStrategy, 'RL'),
]


class TestInsufficientData:
    @pytest.mark.parametrize('strategy_cls,label', ALL_STRATEGIES)
    def test_short_history_holds_at_50(self, strategy_cls, label, bars_from_closes):
        strategy = strategy_cls()
        for length in (0, 1, strategy.min_bars - 1):
            decision = strategy.decide(bars_from_closes([100.0 + i for i in range(length)]))
            assert decision.signal is Signal.HOLD
            assert decision.confidence == 50
            assert decision.reason == f'Insufficient historical data for {label} strategy'

    @pytest.mark.parametrize(
        'strategy_cls,gate',
        [
            (MovingAverageCrossoverStrategy, 50),
            (RSIStrategy, 15),
            (MACDStrategy, 35),
            (BollingerBandsStrategy, 20),
            (QLearningStrategy, 30),
        ],
    )
    def test_gate_lengths(self, strategy_cls, gate):
        assert strategy_cls.min_bars == gate


class TestMovingAverageCrossover:
    def test_single_buy_at_the_crossing_bar(self, rising_closes, bars_from_closes):
        """Walking a 60-bar uptrend bar by bar yields exactly one BUY, at the first evaluable bar."""
        strategy = MovingAverageCrossoverStrategy()
        bars = bars_from_closes(rising_closes)

        decisions = [strategy.decide(bars[:end]) for end in range(1, len(bars) + 1)]
        buys = [(end, d) for end, d in enumerate(decisions, start=1) if d.signal is Signal.BUY]

        assert len(buys) == 1
        end, decision = buys[0]
        assert end == 50
        assert decision.confidence == 75
        assert decision.reason == 'Short-term MA crossed above long-term MA'
        assert all(d.signal is not Signal.SELL for d in decisions)

    def test_single_sell_in_a_downtrend(self, falling_closes, bars_from_closes):
        strategy = MovingAverageCrossoverStrategy()
        bars = bars_from_closes(falling_closes)

        sells = [end for end in range(1, len(bars) + 1) if strategy.decide(bars[:end]).signal is Signal.SELL]
        assert sells == [50]

    def test_trend_without_crossover_leans_confidence(self, rising_closes, falling_closes, bars_from_closes):
        strategy = MovingAverageCrossoverStrategy()

        up = strategy.decide(bars_from_closes(rising_closes))
        assert up.signal is Signal.HOLD
        assert up.confidence > 50
        assert up.reason == 'Trending upward but no crossover detected'

        down = strategy.decide(bars_from_closes(falling_closes))
        assert down.signal is Signal.HOLD
        assert down.confidence < 50
        assert down.reason == 'Trending downward but no crossover detected'

    def test_rejects_inverted_windows(self):
        with pytest.raises(ValueError, match='short_window must be < long_window'):
            MovingAverageCrossoverStrategy(short_window=50, long_window=10)


class TestRSIStrategy:
    def test_sustained_slide_buys(self, bars_from_closes):
        closes = [300.0 * 0.995**i for i in range(180)]
        decision = RSIStrategy().decide(bars_from_closes(closes))
        assert decision.signal is Signal.BUY
        assert decision.confidence >= 70
        assert decision.reason.startswith('RSI is oversold at')

    def test_sustained_rally_sells(self, rising_closes, bars_from_closes):
        decision = RSIStrategy().decide(bars_from_closes(rising_closes))
        assert decision.signal is Signal.SELL
        assert decision.confidence == 100

    def test_neutral_market_holds(self, bars_from_closes):
        closes = [100.0 if i % 2 == 0 else 101.0 for i in range(40)]
        decision = RSIStrategy().decide(bars_from_closes(closes))
        assert decision.signal is Signal.HOLD
        assert 50 <= decision.confidence < 70
        assert decision.reason.startswith('RSI is neutral at')

    def test_rejects_inverted_thresholds(self):
        with pytest.raises(ValueError, match='Invalid RSI thresholds'):
            RSIStrategy(oversold=80, overbought=20)


class TestMACDStrategy:
    def test_flat_market_holds_at_50(self, bars_from_closes):
        decision = MACDStrategy().decide(bars_from_closes([50.0] * 40))
        assert decision.signal is Signal.HOLD
        assert decision.confidence == 50

    def test_bullish_crossover_buys_at_80(self, bars_from_closes):
        closes = [100.0 - i for i in range(40)] + [61.0 + 3 * i for i in range(1, 21)]
        strategy = MACDStrategy()

        crossings = [
            end
            for end in range(strategy.min_bars, len(closes) + 1)
            if macd(closes[: end - 1]).histogram <= 0 < macd(closes[:end]).histogram
        ]
        assert crossings, 'expected the reversal to flip the histogram positive'

        decision = strategy.decide(bars_from_closes(closes[: crossings[0]]))
        assert decision.signal is Signal.BUY
        assert decision.confidence == 80
        assert decision.indicators_used == ('MACD', 'Signal Line', 'Histogram')

    def test_hold_confidence_is_bounded(self, rising_closes, bars_from_closes):
        decision = MACDStrategy().decide(bars_from_closes(rising_closes))
        assert decision.signal is Signal.HOLD
        assert 40 <= decision.confidence <= 60


class TestBollingerBandsStrategy:
    def test_flat_prices_are_mid_range(self, bars_from_closes):
        decision = BollingerBandsStrategy().decide(bars_from_closes([42.0] * 25))
        assert decision.signal is Signal.HOLD
        assert decision.confidence == 50
        assert decision.reason == 'Price within normal Bollinger Band range'

    def test_break_below_lower_band_buys(self, bars_from_closes):
        closes = [99.0 if i % 2 == 0 else 101.0 for i in range(24)] + [80.0]
        decision = BollingerBandsStrategy().decide(bars_from_closes(closes))
        assert decision.signal is Signal.BUY
        assert 70 < decision.confidence <= 90

    def test_break_above_upper_band_sells(self, bars_from_closes):
        closes = [99.0 if i % 2 == 0 else 101.0 for i in range(24)] + [120.0]
        decision = BollingerBandsStrategy().decide(bars_from_closes(closes))
        assert decision.signal is Signal.SELL
        assert 70 < decision.confidence <= 90

    def test_contracting_narrow_bands_are_a_squeeze(self, bars_from_closes):
        wide = [95.0 if i % 2 == 0 else 105.0 for i in range(20)]
        narrow = [99.9 if i % 2 == 0 else 100.1 for i in range(20)]
        decision = BollingerBandsStrategy().decide(bars_from_closes(wide + narrow))
        assert decision.signal is Signal.HOLD
        assert decision.confidence == 65
        assert decision.indicators_used == ('Bollinger Bands', 'Band Width')

    def test_rejects_lookback_outside_history(self):
        with pytest.raises(ValueError, match='squeeze_lookback'):
            BollingerBandsStrategy(squeeze_lookback=0)
        with pytest.raises(ValueError, match='squeeze_lookback'):
            BollingerBandsStrategy(squeeze_lookback=20)
