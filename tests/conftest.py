"""Root conftest: shared trade factories and logging isolation."""

from datetime import date
from decimal import Decimal
from itertools import count

import pytest

from tradestats.libraries.analytics.models import Trade
from tradestats.system import LoggerFactory


@pytest.fixture(autouse=True)
def reset_logging():
    """Reset logging configuration before and after each test."""
    LoggerFactory.reset()
    yield
    LoggerFactory.reset()


@pytest.fixture
def make_trade():
    """
    Factory fixture for Trade records.

    Example:
        >>> trade = make_trade("1000", date(2025, 1, 6), symbol_code="7203")
    """
    ids = count(1)

    def _make(
        profit: str | int | Decimal,
        day: date = date(2025, 1, 6),
        symbol_code: str | None = "7203",
        symbol_name: str | None = "Toyota",
        trade_type: str = "現物売",
    ) -> Trade:
        return Trade(
            id=f"T{next(ids):04d}",
            date=day,
            symbol_code=symbol_code,
            symbol_name=symbol_name,
            trade_type=trade_type,
            realized_profit_loss=Decimal(str(profit)),
        )

    return _make


@pytest.fixture
def sample_trades(make_trade):
    """Mixed two-month trade set across three symbols and both categories."""
    return [
        make_trade("1000", date(2025, 1, 6), "7203", "Toyota", "現物売"),
        make_trade("-400", date(2025, 1, 6), "6758", "Sony", "返済売"),
        make_trade("200", date(2025, 1, 7), "7203", "Toyota", "現物売"),
        make_trade("-300", date(2025, 1, 8), "9984", "SoftBank", "返済買"),
        make_trade("1500", date(2025, 1, 14), "6758", "Sony", "spot_sell"),
        make_trade("0", date(2025, 1, 15), "9984", "SoftBank", "現物売"),
        make_trade("-800", date(2025, 2, 3), "7203", "Toyota", "返済売"),
        make_trade("2500", date(2025, 2, 4), "6758", "Sony", "現物売"),
        make_trade("-100", date(2025, 2, 4), "9984", "SoftBank", "other"),
        make_trade("600", date(2025, 2, 10), "7203", "Toyota", "現物売"),
    ]
