"""Tests for per-symbol analysis."""

from datetime import date
from decimal import Decimal

from tradestats.libraries.analytics.models import INFINITY
from tradestats.libraries.analytics.stocks import calculate_stock_analysis, calculate_stock_performances


class TestStockPerformances:
    """Test per-symbol aggregation."""

    def test_aggregates_per_symbol(self, make_trade):
        trades = [
            make_trade("1000", date(2025, 1, 6), "7203", "Toyota"),
            make_trade("-400", date(2025, 1, 7), "7203", "Toyota"),
            make_trade("300", date(2025, 1, 8), "6758", "Sony"),
        ]

        stocks = {s.symbol: s for s in calculate_stock_performances(trades)}

        toyota = stocks["7203"]
        assert toyota.name == "Toyota"
        assert toyota.net_profit == Decimal("600")
        assert toyota.trades == 2
        assert toyota.win_rate == Decimal("0.5")
        assert toyota.profit_factor == Decimal("2.5")
        assert toyota.best_trade.amount == Decimal("1000")
        assert toyota.worst_trade.date == date(2025, 1, 7)
        assert stocks["6758"].profit_factor == INFINITY

    def test_contributions(self, make_trade):
        """Profit contribution is share of gross profit; risk contribution share of absolute P/L."""
        trades = [
            make_trade("300", symbol_code="A"),
            make_trade("-200", symbol_code="A"),
            make_trade("100", symbol_code="B"),
        ]

        stocks = {s.symbol: s for s in calculate_stock_performances(trades)}

        assert stocks["A"].profit_contribution == Decimal("75")
        assert stocks["B"].profit_contribution == Decimal("25")
        assert stocks["A"].risk_contribution == Decimal("500") / Decimal("600") * Decimal("100")

    def test_grouping_falls_back_to_name_then_unknown(self, make_trade):
        trades = [
            make_trade("100", symbol_code=None, symbol_name="Nameonly"),
            make_trade("100", symbol_code=None, symbol_name=None),
            make_trade("100", symbol_code="", symbol_name="  "),
        ]

        symbols = sorted(s.symbol for s in calculate_stock_performances(trades))

        assert symbols == ["Nameonly", "unknown"]


class TestStockAnalysis:
    """Test rankings."""

    def test_win_rate_ranking_requires_three_trades(self, make_trade):
        """A with 3 winning trades is ranked; B with 2 losing trades is excluded."""
        trades = [
            make_trade("100", symbol_code="A"),
            make_trade("200", symbol_code="A"),
            make_trade("300", symbol_code="A"),
            make_trade("-100", symbol_code="B"),
            make_trade("-200", symbol_code="B"),
        ]

        analysis = calculate_stock_analysis(trades)

        assert [s.symbol for s in analysis.highest_win_rate] == ["A"]
        assert analysis.highest_win_rate[0].win_rate == Decimal("1")

    def test_rankings_order(self, sample_trades):
        analysis = calculate_stock_analysis(sample_trades)

        assert [s.symbol for s in analysis.top_performers] == ["6758", "7203", "9984"]
        assert [s.symbol for s in analysis.worst_performers] == ["9984", "7203", "6758"]
        assert [s.symbol for s in analysis.most_traded] == ["7203", "6758", "9984"]

    def test_ties_break_alphabetically(self, make_trade):
        trades = [
            make_trade("100", symbol_code="ZZZ"),
            make_trade("100", symbol_code="AAA"),
            make_trade("100", symbol_code="MMM"),
        ]

        analysis = calculate_stock_analysis(trades)

        assert [s.symbol for s in analysis.top_performers] == ["AAA", "MMM", "ZZZ"]
        assert [s.symbol for s in analysis.worst_performers] == ["AAA", "MMM", "ZZZ"]
        assert [s.symbol for s in analysis.most_traded] == ["AAA", "MMM", "ZZZ"]

    def test_depth_truncates_each_ranking(self, make_trade):
        trades = [make_trade(str(i * 100), symbol_code=f"S{i:02d}") for i in range(1, 13)]

        assert len(calculate_stock_analysis(trades, depth=5).top_performers) == 5
        assert len(calculate_stock_analysis(trades, depth=10).most_traded) == 10
        assert len(calculate_stock_analysis(trades, depth=None).worst_performers) == 12

    def test_diversification(self, make_trade):
        trades = [make_trade("100", symbol_code=f"S{i}") for i in range(6)]

        analysis = calculate_stock_analysis(trades)

        assert analysis.diversification.total_stocks == 6
        # Top 5 of 6 equal contributors
        assert abs(analysis.diversification.concentration_risk - Decimal("83.3333")) < Decimal("0.001")

    def test_empty(self):
        analysis = calculate_stock_analysis([])

        assert analysis.top_performers == []
        assert analysis.highest_win_rate == []
        assert analysis.diversification.total_stocks == 0
        assert analysis.diversification.concentration_risk == Decimal("0")
