"""Daily aggregation of trades.

The only temporal bucketing primitive: every analyzer that needs per-day
values consumes the DailySeries produced here.
"""

from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Iterable

from tradestats.libraries.analytics.models import ZERO, DailyAggregate, DailySeries, Trade


def aggregate_daily(trades: Iterable[Trade]) -> DailySeries:
    """
    Group trades by calendar day.

    Args:
        trades: Trades in any order

    Returns:
        DailySeries sorted chronologically (empty for no trades)

    Example:
        >>> series = aggregate_daily(trades)
        >>> series.by_date
        {'2025-01-06': Decimal('600'), '2025-01-07': Decimal('200')}
    """
    net: dict[date, Decimal] = defaultdict(lambda: ZERO)
    counts: dict[date, list[int]] = defaultdict(lambda: [0, 0, 0])  # trades, wins, losses

    for trade in trades:
        net[trade.date] += trade.realized_profit_loss
        bucket = counts[trade.date]
        bucket[0] += 1
        if trade.is_winner:
            bucket[1] += 1
        elif trade.is_loser:
            bucket[2] += 1

    days = tuple(
        DailyAggregate(
            date=day,
            net_profit=net[day],
            trade_count=counts[day][0],
            win_count=counts[day][1],
            loss_count=counts[day][2],
        )
        for day in sorted(net)
    )
    return DailySeries(days=days)


def sort_chronologically(trades: Iterable[Trade]) -> list[Trade]:
    """Sort trades by date; same-day trades keep their input order."""
    return sorted(trades, key=lambda t: t.date)
