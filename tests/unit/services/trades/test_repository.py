"""
Unit tests for trade repositories.

Tests cover:
- CSV and JSON loading (snake_case and camelCase columns)
- Inclusive date filtering
- Error handling for missing files, unsupported formats and malformed rows
"""

import json
from datetime import date
from decimal import Decimal

import pytest

from tradestats.libraries.analytics.models import TradeCategory
from tradestats.services.trades import FileTradeRepository, InMemoryTradeRepository
from tradestats.services.trades.interface import TradeRepositoryError

CSV_CONTENT = """id,date,symbol_code,symbol_name,trade_type,quantity,unit_price,amount,average_acquisition_price,realized_profit_loss
T1,2025-01-06,7203,Toyota,現物売,100,"2,500",250000,2490,1000
T2,2025-01-07,6758,Sony,返済買,50,3000,150000,,-400.5
T3,2025-01-31,,,spot_sell,,,,,0
"""


@pytest.fixture
def csv_file(tmp_path):
    path = tmp_path / "trades.csv"
    path.write_text(CSV_CONTENT, encoding="utf-8")
    return path


@pytest.fixture
def json_file(tmp_path):
    path = tmp_path / "trades.json"
    path.write_text(
        json.dumps(
            {
                "trades": [
                    {
                        "id": "A",
                        "date": "2025-02-03",
                        "symbolCode": "9984",
                        "symbolName": "SoftBank",
                        "tradeType": "margin_repay_sell",
                        "realizedProfitLoss": 12.3,
                    },
                    {"date": "2025-02-04T10:15:00", "realizedProfitLoss": "-50"},
                ]
            }
        ),
        encoding="utf-8",
    )
    return path


class TestInMemoryTradeRepository:
    """Test InMemoryTradeRepository."""

    def test_get_all_trades(self, sample_trades):
        repo = InMemoryTradeRepository(sample_trades)

        assert repo.get_all_trades() == sample_trades

    def test_range_is_inclusive(self, sample_trades):
        repo = InMemoryTradeRepository(sample_trades)

        trades = repo.get_trades_by_date_range(date(2025, 1, 6), date(2025, 1, 8))

        assert len(trades) == 4
        assert all(date(2025, 1, 6) <= t.date <= date(2025, 1, 8) for t in trades)

    def test_returns_copy(self, sample_trades):
        repo = InMemoryTradeRepository(sample_trades)

        repo.get_all_trades().clear()

        assert len(repo.get_all_trades()) == 10

    def test_empty(self):
        assert InMemoryTradeRepository().get_all_trades() == []


class TestFileTradeRepositoryCsv:
    """Test CSV loading."""

    def test_loads_rows(self, csv_file):
        trades = FileTradeRepository(csv_file).get_all_trades()

        assert [t.id for t in trades] == ["T1", "T2", "T3"]
        first = trades[0]
        assert first.date == date(2025, 1, 6)
        assert first.symbol_code == "7203"
        assert first.category == TradeCategory.SPOT
        assert first.unit_price == Decimal("2500")
        assert first.realized_profit_loss == Decimal("1000")

    def test_blank_cells(self, csv_file):
        second, third = FileTradeRepository(csv_file).get_all_trades()[1:]

        assert second.average_acquisition_price is None
        assert second.realized_profit_loss == Decimal("-400.5")
        assert second.category == TradeCategory.MARGIN
        assert third.symbol_key == "unknown"
        assert third.quantity is None

    def test_camel_case_header(self, tmp_path):
        path = tmp_path / "trades.csv"
        path.write_text("date,symbolCode,tradeType,realizedProfitLoss\n2025-03-03,7203,返済売,-20\n", encoding="utf-8")

        (trade,) = FileTradeRepository(path).get_all_trades()

        assert trade.id == "1"
        assert trade.category == TradeCategory.MARGIN
        assert trade.realized_profit_loss == Decimal("-20")

    def test_date_range(self, csv_file):
        repo = FileTradeRepository(csv_file)

        trades = repo.get_trades_by_date_range(date(2025, 1, 7), date(2025, 1, 31))

        assert [t.id for t in trades] == ["T2", "T3"]

    def test_file_read_once(self, csv_file):
        repo = FileTradeRepository(csv_file)
        repo.get_all_trades()
        csv_file.unlink()

        assert len(repo.get_all_trades()) == 3

    def test_alternate_encoding(self, tmp_path):
        path = tmp_path / "trades.csv"
        path.write_text("date,trade_type,realized_profit_loss\n2025-03-03,現物買,5\n", encoding="cp932")

        (trade,) = FileTradeRepository(path, encoding="cp932").get_all_trades()

        assert trade.trade_type == "現物買"


class TestFileTradeRepositoryJson:
    """Test JSON loading."""

    def test_wrapped_list(self, json_file):
        first, second = FileTradeRepository(json_file).get_all_trades()

        assert first.symbol_code == "9984"
        assert first.realized_profit_loss == Decimal("12.3")
        assert first.category == TradeCategory.MARGIN
        assert second.id == "2"
        assert second.date == date(2025, 2, 4)
        assert second.trade_type == ""

    def test_bare_list(self, tmp_path):
        path = tmp_path / "trades.json"
        path.write_text('[{"id": "x", "date": "2025-01-01", "realized_profit_loss": 1}]', encoding="utf-8")

        (trade,) = FileTradeRepository(path).get_all_trades()

        assert trade.id == "x"

    def test_not_a_list(self, tmp_path):
        path = tmp_path / "trades.json"
        path.write_text('{"rows": []}', encoding="utf-8")

        with pytest.raises(TradeRepositoryError, match="Expected a list"):
            FileTradeRepository(path).get_all_trades()

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "trades.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(TradeRepositoryError, match="Failed to read"):
            FileTradeRepository(path).get_all_trades()


class TestFileTradeRepositoryErrors:
    """Test error handling."""

    def test_missing_file(self, tmp_path):
        repo = FileTradeRepository(tmp_path / "missing.csv")

        with pytest.raises(TradeRepositoryError, match="not found"):
            repo.get_all_trades()

    def test_unsupported_suffix(self, tmp_path):
        path = tmp_path / "trades.xlsx"
        path.write_text("", encoding="utf-8")

        with pytest.raises(TradeRepositoryError, match="Unsupported"):
            FileTradeRepository(path).get_all_trades()

    def test_bad_amount(self, tmp_path):
        path = tmp_path / "trades.csv"
        path.write_text("date,realized_profit_loss\n2025-01-01,12x\n", encoding="utf-8")

        with pytest.raises(TradeRepositoryError, match="row 1"):
            FileTradeRepository(path).get_all_trades()

    def test_missing_profit(self, tmp_path):
        path = tmp_path / "trades.csv"
        path.write_text("date,realized_profit_loss\n2025-01-01,\n", encoding="utf-8")

        with pytest.raises(TradeRepositoryError, match="row 1"):
            FileTradeRepository(path).get_all_trades()

    def test_bad_date(self, tmp_path):
        path = tmp_path / "trades.csv"
        path.write_text("date,realized_profit_loss\n2025-01-01,1\nyesterday,2\n", encoding="utf-8")

        with pytest.raises(TradeRepositoryError, match="row 2"):
            FileTradeRepository(path).get_all_trades()

    def test_wrong_encoding(self, tmp_path):
        path = tmp_path / "trades.csv"
        path.write_bytes("date,trade_type,realized_profit_loss\n2025-03-03,現物買,5\n".encode("cp932"))

        with pytest.raises(TradeRepositoryError, match="Failed to read"):
            FileTradeRepository(path).get_all_trades()
