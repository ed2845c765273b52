"""Calendar trend analysis: week-of-month, weekday, quarter and momentum."""

import math
from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Sequence

from tradestats.libraries.analytics.daily import aggregate_daily
from tradestats.libraries.analytics.models import (
    ZERO,
    DailyAggregate,
    DailySeries,
    DayOfWeekPerformance,
    MomentumTrend,
    PerformanceConsistency,
    SeasonalPerformance,
    Trade,
    TrendAnalysis,
    WeeklyTrendPoint,
)
from tradestats.libraries.analytics.overview import calculate_win_rate
from tradestats.libraries.analytics.risk import calculate_mean, calculate_volatility

DEFAULT_MOMENTUM_THRESHOLD = Decimal("1000")

# Sunday first, matching the week-of-month offset convention
DAY_NAMES = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")
QUARTERS = ("Q1", "Q2", "Q3", "Q4")
ALWAYS_REPORTED_WEEKS = 5
MAX_WEEKS_IN_MONTH = 6


class _Bucket:
    """Running totals for one calendar bucket."""

    __slots__ = ("profit", "trades", "wins")

    def __init__(self) -> None:
        self.profit = ZERO
        self.trades = 0
        self.wins = 0

    def add(self, day: DailyAggregate) -> None:
        self.profit += day.net_profit
        self.trades += day.trade_count
        self.wins += day.win_count

    @property
    def win_rate(self) -> Decimal:
        return calculate_win_rate(self.wins, self.trades)

    @property
    def average_profit(self) -> Decimal:
        return self.profit / self.trades if self.trades else ZERO


def sunday_weekday(day: date) -> int:
    """Weekday index with Sunday = 0 ... Saturday = 6."""
    return (day.weekday() + 1) % 7


def week_of_month(day: date) -> int:
    """
    Calendar week of the month (1-based, weeks start on Sunday).

    Example:
        >>> week_of_month(date(2025, 3, 1))  # Saturday the 1st
        1
        >>> week_of_month(date(2025, 3, 2))
        2
    """
    offset = sunday_weekday(day.replace(day=1))
    return math.ceil((day.day + offset) / 7)


def calculate_weekly_trend(daily: DailySeries) -> list[WeeklyTrendPoint]:
    """Profit per week-of-month; weeks 1-5 always present, week 6 only with data."""
    buckets: dict[int, _Bucket] = defaultdict(_Bucket)
    for day in daily.days:
        buckets[week_of_month(day.date)].add(day)

    weeks = list(range(1, ALWAYS_REPORTED_WEEKS + 1))
    if MAX_WEEKS_IN_MONTH in buckets:
        weeks.append(MAX_WEEKS_IN_MONTH)

    points = []
    for week in weeks:
        bucket = buckets.get(week) or _Bucket()
        points.append(
            WeeklyTrendPoint(week=week, profit=bucket.profit, trades=bucket.trades, win_rate=bucket.win_rate)
        )
    return points


def calculate_day_of_week_performance(daily: DailySeries) -> list[DayOfWeekPerformance]:
    buckets = [_Bucket() for _ in DAY_NAMES]
    for day in daily.days:
        buckets[sunday_weekday(day.date)].add(day)

    return [
        DayOfWeekPerformance(
            day=name,
            profit=bucket.profit,
            trades=bucket.trades,
            win_rate=bucket.win_rate,
            average_profit_per_trade=bucket.average_profit,
        )
        for name, bucket in zip(DAY_NAMES, buckets)
    ]


def calculate_seasonal_performance(daily: DailySeries) -> list[SeasonalPerformance]:
    buckets = [_Bucket() for _ in QUARTERS]
    for day in daily.days:
        buckets[(day.date.month - 1) // 3].add(day)

    return [
        SeasonalPerformance(
            quarter=quarter,
            profit=bucket.profit,
            trades=bucket.trades,
            average_profit=bucket.average_profit,
            win_rate=bucket.win_rate,
        )
        for quarter, bucket in zip(QUARTERS, buckets)
    ]


def calculate_momentum(weekly: Sequence[WeeklyTrendPoint]) -> Decimal:
    """Last active week's profit minus the previous active week's (0 with fewer than two)."""
    active = [point.profit for point in weekly if point.trades > 0]
    if len(active) < 2:
        return ZERO
    return active[-1] - active[-2]


def classify_momentum(momentum: Decimal, threshold: Decimal = DEFAULT_MOMENTUM_THRESHOLD) -> MomentumTrend:
    if momentum > threshold:
        return "improving"
    if momentum < -threshold:
        return "declining"
    return "stable"


def calculate_performance_consistency(daily: DailySeries) -> PerformanceConsistency:
    """
    Day-to-day stability of results.

    win_rate_consistency is 1 minus the standard deviation of daily win
    rates, floored at 0. All values are 0 when there are no trading days.
    """
    if not daily.days:
        return PerformanceConsistency(
            profit_standard_deviation=ZERO,
            win_rate_consistency=ZERO,
            trading_frequency_variance=ZERO,
        )

    win_rates = [calculate_win_rate(day.win_count, day.trade_count) for day in daily.days]
    frequencies = [Decimal(day.trade_count) for day in daily.days]
    frequency_mean = calculate_mean(frequencies)

    return PerformanceConsistency(
        profit_standard_deviation=calculate_volatility(daily.net_values),
        win_rate_consistency=max(ZERO, Decimal("1") - calculate_volatility(win_rates)),
        trading_frequency_variance=calculate_mean([(f - frequency_mean) ** 2 for f in frequencies]),
    )


def calculate_trend_analysis(
    trades: Sequence[Trade],
    daily: DailySeries | None = None,
    momentum_threshold: Decimal = DEFAULT_MOMENTUM_THRESHOLD,
) -> TrendAnalysis:
    """
    Calendar-based trend statistics.

    Args:
        trades: Trades in any order
        daily: Pre-computed daily aggregates of the same trades (built if omitted)
        momentum_threshold: Absolute momentum above which the trend is labeled
            improving/declining

    Returns:
        TrendAnalysis
    """
    if daily is None:
        daily = aggregate_daily(trades)

    weekly = calculate_weekly_trend(daily)
    momentum = calculate_momentum(weekly)

    return TrendAnalysis(
        weekly_trend=weekly,
        day_of_week=calculate_day_of_week_performance(daily),
        seasonal=calculate_seasonal_performance(daily),
        momentum_indicator=momentum,
        momentum_trend=classify_momentum(momentum, momentum_threshold),
        consistency=calculate_performance_consistency(daily),
    )
