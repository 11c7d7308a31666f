"""
Command-line entry point: ``python -m stockbot``.

Prints a decision per symbol, optionally executes it, then prints the
performance summary for the user.
"""

from __future__ import annotations

import argparse
import json
import sys
from collections.abc import Sequence
from pathlib import Path

from .bot import TradingBot
from .errors import StockBotError
from .ledger import InMemoryTradeLedger
from .logging import configure_logger
from .providers import DEFAULT_SEED, CSVPriceHistoryProvider, SyntheticPriceHistoryProvider
from .runtime_settings import load_runtime_settings
from .signals import StrategyName


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog='stockbot', description='Generate trading decisions for stock symbols.')
    parser.add_argument('--symbols', nargs='+', help='Symbols to evaluate (default: every symbol the provider knows).')
    parser.add_argument(
        '--strategy',
        choices=[name.value for name in StrategyName],
        type=str.upper,
        help='Strategy to use (default: STOCKBOT_STRATEGY or REINFORCEMENT_LEARNING).',
    )
    parser.add_argument('--days', type=int, default=180, help='Days of synthetic history to generate.')
    parser.add_argument('--seed', type=int, help='Seed for synthetic prices and exploration.')
    parser.add_argument(
        '--execute',
        type=float,
        metavar='QTY',
        help='Execute each decision with this quantity and learn from it.',
    )
    parser.add_argument('--user-id', type=int, default=1, help='User the executed trades belong to.')
    parser.add_argument('--q-table', type=Path, help='Q-table JSON file to load before and save after the run.')
    parser.add_argument('--log-level', help='Override STOCKBOT_LOG_LEVEL.')
    parser.add_argument('--structured-logs', action='store_true', help='Emit JSON log lines.')
    parser.add_argument('--data-dir', type=Path, help='Read <SYMBOL>.csv files from this directory instead.')
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)

    try:
        settings = load_runtime_settings()
    except (StockBotError, ValueError) as exc:
        print(f'Invalid configuration: {exc}', file=sys.stderr)
        return 2

    log_level = (args.log_level or settings.log_level).upper()
    configure_logger('stockbot', level=log_level, structured=args.structured_logs)

    config = settings.to_bot_config()
    if args.strategy:
        config.initial_strategy = StrategyName.parse(args.strategy)
    if args.seed is not None:
        config.seed = args.seed

    if args.data_dir is not None:
        provider: CSVPriceHistoryProvider | SyntheticPriceHistoryProvider = CSVPriceHistoryProvider(args.data_dir)
    else:
        seed = config.seed if config.seed is not None else DEFAULT_SEED
        provider = SyntheticPriceHistoryProvider(days=args.days, seed=seed)

    bot = TradingBot(provider, InMemoryTradeLedger(), config=config)
    q_table_path = args.q_table or settings.q_table_path
    if q_table_path is not None:
        bot.load_q_table(q_table_path)

    exit_code = 0
    for symbol in args.symbols or provider.symbols():
        try:
            decision = bot.decide(symbol)
        except StockBotError as exc:
            print(f'{symbol}: {exc}', file=sys.stderr)
            exit_code = 1
            continue

        line = (
            f'{symbol:<10} {decision.signal.value:<4} {decision.confidence:5.1f}  '
            f'{decision.reason} [{", ".join(decision.indicators_used)}]'
        )
        if args.execute is not None:
            result = bot.execute_trade(args.user_id, symbol, decision.signal, args.execute)
            line += f'  -> {result.status.value}'
        print(line)

    if args.execute is not None:
        report = bot.performance_metrics(args.user_id)
        summary = report.to_dict()
        summary.pop('performance_timeline')
        print(json.dumps(summary, indent=2, default=str))

    if q_table_path is not None:
        bot.save_q_table(q_table_path)

    return exit_code


if __name__ == '__main__':
    sys.exit(main())
