"""Per-symbol performance and rankings."""

from collections import defaultdict
from decimal import Decimal
from typing import Sequence

from tradestats.libraries.analytics.daily import sort_chronologically
from tradestats.libraries.analytics.models import (
    ZERO,
    Diversification,
    StockAnalysis,
    StockPerformance,
    Trade,
    TradeExtreme,
)
from tradestats.libraries.analytics.overview import HUNDRED, calculate_profit_factor, calculate_win_rate

DEFAULT_DEPTH = 5
MIN_TRADES_FOR_WIN_RATE = 3
CONCENTRATION_TOP_N = 5


def _symbol_name(trades: Sequence[Trade], key: str) -> str:
    for trade in trades:
        if trade.symbol_name:
            return trade.symbol_name
    return key


def _build_stock_performance(
    key: str,
    trades: Sequence[Trade],
    gross_profit_all: Decimal,
    absolute_total_all: Decimal,
) -> StockPerformance:
    """Aggregate one symbol's chronologically sorted trades."""
    profits = [t.realized_profit_loss for t in trades if t.is_winner]
    losses = [t.realized_profit_loss for t in trades if t.is_loser]
    total_profit = sum(profits, ZERO)
    total_loss = sum(losses, ZERO)
    absolute_total = sum((abs(t.realized_profit_loss) for t in trades), ZERO)

    # max()/min() return the first extreme, i.e. the earliest date on ties
    best = max(trades, key=lambda t: t.realized_profit_loss)
    worst = min(trades, key=lambda t: t.realized_profit_loss)

    return StockPerformance(
        symbol=key,
        name=_symbol_name(trades, key),
        net_profit=sum((t.realized_profit_loss for t in trades), ZERO),
        total_profit=total_profit,
        total_loss=total_loss,
        trades=len(trades),
        winning_trades=len(profits),
        losing_trades=len(losses),
        win_rate=calculate_win_rate(len(profits), len(trades)),
        profit_factor=calculate_profit_factor(total_profit, abs(total_loss)),
        average_profit=total_profit / len(profits) if profits else ZERO,
        average_loss=total_loss / len(losses) if losses else ZERO,
        max_profit=max(profits) if profits else ZERO,
        max_loss=min(losses) if losses else ZERO,
        profit_contribution=total_profit / gross_profit_all * HUNDRED if gross_profit_all > ZERO else ZERO,
        risk_contribution=absolute_total / absolute_total_all * HUNDRED if absolute_total_all > ZERO else ZERO,
        best_trade=TradeExtreme(date=best.date, amount=best.realized_profit_loss),
        worst_trade=TradeExtreme(date=worst.date, amount=worst.realized_profit_loss),
    )


def calculate_stock_performances(trades: Sequence[Trade]) -> list[StockPerformance]:
    """
    Aggregate trades per symbol.

    Symbols group by code, then by name, then under the "unknown" key.

    Returns:
        One StockPerformance per symbol, ordered by grouping key
    """
    grouped: dict[str, list[Trade]] = defaultdict(list)
    for trade in sort_chronologically(trades):
        grouped[trade.symbol_key].append(trade)

    gross_profit_all = sum((t.realized_profit_loss for t in trades if t.is_winner), ZERO)
    absolute_total_all = sum((abs(t.realized_profit_loss) for t in trades), ZERO)

    return [
        _build_stock_performance(key, grouped[key], gross_profit_all, absolute_total_all) for key in sorted(grouped)
    ]


def _truncate(stocks: list[StockPerformance], depth: int | None) -> list[StockPerformance]:
    return stocks if depth is None else stocks[:depth]


def calculate_stock_analysis(trades: Sequence[Trade], depth: int | None = DEFAULT_DEPTH) -> StockAnalysis:
    """
    Rank symbols four ways.

    Ties are broken alphabetically by grouping key. The win-rate ranking only
    considers symbols with at least three trades.

    Args:
        trades: Trades in any order
        depth: Entries kept per ranking (None keeps all)

    Returns:
        StockAnalysis with the rankings and a diversification summary

    Example:
        >>> analysis = calculate_stock_analysis(trades, depth=10)
        >>> [s.symbol for s in analysis.top_performers]
        ['7203', '6758']
    """
    stocks = calculate_stock_performances(trades)

    top = sorted(stocks, key=lambda s: (-s.net_profit, s.symbol))
    worst = sorted(stocks, key=lambda s: (s.net_profit, s.symbol))
    most_traded = sorted(stocks, key=lambda s: (-s.trades, s.symbol))
    eligible = [s for s in stocks if s.trades >= MIN_TRADES_FOR_WIN_RATE]
    highest_win_rate = sorted(eligible, key=lambda s: (-s.win_rate, s.symbol))

    concentration = sum((s.profit_contribution for s in top[:CONCENTRATION_TOP_N]), ZERO)

    return StockAnalysis(
        top_performers=_truncate(top, depth),
        worst_performers=_truncate(worst, depth),
        most_traded=_truncate(most_traded, depth),
        highest_win_rate=_truncate(highest_win_rate, depth),
        diversification=Diversification(total_stocks=len(stocks), concentration_risk=concentration),
    )
