"""Tests for trade and result models."""

from datetime import date, datetime
from decimal import Decimal

import pytest
from pydantic import ValidationError

from tradestats.libraries.analytics.models import (
    INFINITY,
    AdvancedMetrics,
    RiskAnalysis,
    Trade,
    TradeCategory,
    TradeExtreme,
    categorize_trade_type,
)


class TestCategorizeTradeType:
    """Test trade-type label mapping."""

    @pytest.mark.parametrize(
        "label,expected",
        [
            ("現物売", TradeCategory.SPOT),
            ("購入", TradeCategory.SPOT),
            ("spot_buy", TradeCategory.SPOT),
            ("返済売", TradeCategory.MARGIN),
            ("margin_repay_buy", TradeCategory.MARGIN),
            ("  返済買 ", TradeCategory.MARGIN),
            ("信用新規", TradeCategory.UNKNOWN),
            ("", TradeCategory.UNKNOWN),
            (None, TradeCategory.UNKNOWN),
        ],
    )
    def test_mapping(self, label, expected):
        assert categorize_trade_type(label) == expected


class TestTrade:
    """Test Trade validation and derived properties."""

    def test_datetime_is_truncated_to_date(self):
        trade = Trade(id="1", date=datetime(2025, 1, 6, 14, 30), realized_profit_loss=Decimal("1"))

        assert trade.date == date(2025, 1, 6)

    def test_iso_string_date(self):
        trade = Trade(id="1", date="2025-01-06", realized_profit_loss="12.5")

        assert trade.date == date(2025, 1, 6)
        assert trade.realized_profit_loss == Decimal("12.5")

    @pytest.mark.parametrize("value", ["2025-01-06T23:59:00", "2025-01-06 09:00:00+09:00"])
    def test_timestamp_string_is_truncated(self, value):
        trade = Trade(id="1", date=value, realized_profit_loss=Decimal("1"))

        assert trade.date == date(2025, 1, 6)

    def test_blank_symbol_becomes_none(self):
        trade = Trade(id="1", date=date(2025, 1, 6), symbol_code="  ", symbol_name="", realized_profit_loss=0)

        assert trade.symbol_code is None
        assert trade.symbol_name is None
        assert trade.symbol_key == "unknown"

    def test_symbol_key_prefers_code(self, make_trade):
        assert make_trade("1", symbol_code="7203", symbol_name="Toyota").symbol_key == "7203"
        assert make_trade("1", symbol_code=None, symbol_name="Toyota").symbol_key == "Toyota"

    def test_winner_loser(self, make_trade):
        assert make_trade("1").is_winner
        assert make_trade("-1").is_loser
        flat = make_trade("0")
        assert not flat.is_winner
        assert not flat.is_loser

    def test_profit_is_required(self):
        with pytest.raises(ValidationError):
            Trade(id="1", date=date(2025, 1, 6))

    def test_frozen(self, make_trade):
        trade = make_trade("1")

        with pytest.raises(ValidationError):
            trade.realized_profit_loss = Decimal("2")


class TestResultModels:
    """Test serialization conventions shared by result models."""

    def test_camel_case_aliases(self):
        risk = RiskAnalysis(**{name: Decimal("0") for name in RiskAnalysis.model_fields})
        extreme = TradeExtreme(date=date(2025, 1, 6), amount=Decimal("5"))

        assert "valueAtRisk95" in risk.model_dump(by_alias=True)
        assert "maxDrawdownPercent" in risk.model_dump(by_alias=True)
        assert extreme.model_dump(by_alias=True) == {"date": date(2025, 1, 6), "amount": Decimal("5")}

    def test_ratio_accepts_infinity(self):
        fields = {name: Decimal("0") for name in AdvancedMetrics.model_fields}
        fields.update(profit_factor=INFINITY, profitability_index=INFINITY, max_consecutive_losses=0, trading_days=0)

        metrics = AdvancedMetrics(**fields)

        assert metrics.profit_factor == INFINITY
