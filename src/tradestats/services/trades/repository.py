"""Trade repository implementations.

InMemoryTradeRepository serves a fixed list (tests, embedding callers).
FileTradeRepository reads already-normalized trades from CSV or JSON.

CSV columns (header row required, snake_case or camelCase):
    id,date,symbol_code,symbol_name,trade_type,quantity,unit_price,amount,
    average_acquisition_price,realized_profit_loss

JSON: either a list of trade objects or {"trades": [...]} with the same keys.
"""

from __future__ import annotations

import csv
import json
from datetime import date
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Iterable

from pydantic import ValidationError

from tradestats.libraries.analytics.models import Trade
from tradestats.services.trades.interface import TradeRepositoryError
from tradestats.system import LoggerFactory

logger = LoggerFactory.get_logger()

# camelCase column → Trade field
_COLUMN_ALIASES = {
    "symbolCode": "symbol_code",
    "symbolName": "symbol_name",
    "tradeType": "trade_type",
    "unitPrice": "unit_price",
    "averageAcquisitionPrice": "average_acquisition_price",
    "realizedProfitLoss": "realized_profit_loss",
}

_DECIMAL_FIELDS = ("quantity", "unit_price", "amount", "average_acquisition_price", "realized_profit_loss")


def _in_range(trades: Iterable[Trade], start: date, end: date) -> list[Trade]:
    return [t for t in trades if start <= t.date <= end]


class InMemoryTradeRepository:
    """Repository over a caller-supplied list of trades."""

    def __init__(self, trades: Iterable[Trade] = ()) -> None:
        self._trades = list(trades)

    def get_trades_by_date_range(self, start: date, end: date) -> list[Trade]:
        return _in_range(self._trades, start, end)

    def get_all_trades(self) -> list[Trade]:
        return list(self._trades)


class FileTradeRepository:
    """
    Repository backed by a CSV or JSON file.

    The file is parsed lazily on first access and cached for the lifetime
    of the repository.

    Args:
        path: File path; format chosen by suffix (.csv or .json)
        encoding: Text encoding of the file

    Raises:
        TradeRepositoryError: On missing file, unsupported suffix or malformed rows

    Example:
        >>> repo = FileTradeRepository("data/trades.csv")
        >>> len(repo.get_all_trades())
        42
    """

    SUPPORTED_SUFFIXES = (".csv", ".json")

    def __init__(self, path: str | Path, encoding: str = "utf-8") -> None:
        self.path = Path(path)
        self.encoding = encoding
        self._trades: list[Trade] | None = None

    def get_trades_by_date_range(self, start: date, end: date) -> list[Trade]:
        return _in_range(self._load(), start, end)

    def get_all_trades(self) -> list[Trade]:
        return list(self._load())

    def _load(self) -> list[Trade]:
        if self._trades is not None:
            return self._trades

        if not self.path.exists():
            raise TradeRepositoryError(f"Trade file not found: {self.path}")

        suffix = self.path.suffix.lower()
        if suffix not in self.SUPPORTED_SUFFIXES:
            raise TradeRepositoryError(
                f"Unsupported trade file format '{suffix}' (expected one of {', '.join(self.SUPPORTED_SUFFIXES)})"
            )

        try:
            rows = self._read_csv() if suffix == ".csv" else self._read_json()
        except (OSError, UnicodeDecodeError, json.JSONDecodeError, csv.Error) as e:
            raise TradeRepositoryError(f"Failed to read {self.path}: {e}") from e

        trades = [self._parse_row(index, row) for index, row in enumerate(rows, start=1)]
        self._trades = trades

        logger.info("trades.loaded", path=str(self.path), count=len(trades))
        return trades

    def _read_csv(self) -> list[dict[str, Any]]:
        with self.path.open("r", encoding=self.encoding, newline="") as f:
            return list(csv.DictReader(f))

    def _read_json(self) -> list[dict[str, Any]]:
        with self.path.open("r", encoding=self.encoding) as f:
            data = json.load(f)

        if isinstance(data, dict):
            data = data.get("trades")
        if not isinstance(data, list):
            raise TradeRepositoryError(f"Expected a list of trades in {self.path}")
        return data

    def _parse_row(self, index: int, row: Any) -> Trade:
        """Convert one raw record into a Trade."""
        if not isinstance(row, dict):
            raise TradeRepositoryError(f"Row {index} in {self.path} is not an object")

        record = {_COLUMN_ALIASES.get(key, key): value for key, value in row.items() if key is not None}
        record["id"] = str(record.get("id") or index)

        try:
            for field in _DECIMAL_FIELDS:
                value = record.get(field)
                if value in (None, ""):
                    record[field] = None
                elif not isinstance(value, Decimal):
                    # str() first so JSON floats keep their printed digits
                    record[field] = Decimal(str(value).replace(",", ""))
            if record.get("trade_type") is None:
                record["trade_type"] = ""
            return Trade.model_validate(record)
        except (InvalidOperation, ValidationError) as e:
            logger.error("trades.parse_error", path=str(self.path), row=index, error=str(e))
            raise TradeRepositoryError(f"Invalid trade at row {index} in {self.path}: {e}") from e
