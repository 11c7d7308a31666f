"""Price history provider backed by one CSV file per symbol."""

from __future__ import annotations

import logging
import threading
from pathlib import Path

from ..data import PriceBar, load_csv_file
from ..errors import PriceDataError

logger = logging.getLogger(__name__)


class CSVPriceHistoryProvider:
    """Loads ``<directory>/<SYMBOL>.csv`` on first request and caches the bars.

    A file that cannot be parsed into valid bars raises ``PriceDataError`` and is
    not cached, so a corrected file is picked up on the next request.
    """

    def __init__(self, directory: str | Path) -> None:
        self.directory = Path(directory)
        if not self.directory.is_dir():
            raise ValueError(f'Data directory does not exist: {self.directory}')
        self._cache: dict[str, tuple[PriceBar, ...]] = {}
        self._lock = threading.Lock()

    def get_price_history(self, symbol: str) -> tuple[PriceBar, ...]:
        with self._lock:
            cached = self._cache.get(symbol)
            if cached is not None:
                return cached

            path = self.directory / f'{symbol}.csv'
            if not path.exists():
                logger.debug(f'No CSV history for {symbol} at {path}')
                return ()

            try:
                bars = tuple(load_csv_file(path))
            except (OSError, ValueError) as exc:
                logger.warning(f'Rejected CSV history for {symbol} at {path}: {exc}')
                raise PriceDataError(symbol, str(exc)) from exc
            self._cache[symbol] = bars
            logger.info(f'Loaded {len(bars)} bars for {symbol} from {path}')
            return bars

    def symbols(self) -> list[str]:
        return sorted(path.stem for path in self.directory.glob('*.csv'))
