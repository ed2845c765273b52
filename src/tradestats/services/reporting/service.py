"""Report generation service.

Runs the analytics pipeline over a trade window and assembles the Report
tree:

    repository → daily aggregation → overview / risk / streaks / stocks /
    trends / advanced metrics → monthly breakdown → transforms
"""

from collections import defaultdict
from datetime import date, datetime, timezone
from typing import Optional, Sequence

from tradestats.libraries.analytics.advanced import calculate_advanced_metrics
from tradestats.libraries.analytics.daily import aggregate_daily
from tradestats.libraries.analytics.models import ZERO, Trade
from tradestats.libraries.analytics.overview import calculate_performance_overview
from tradestats.libraries.analytics.risk import calculate_mean, calculate_risk_analysis, calculate_volatility
from tradestats.libraries.analytics.stocks import calculate_stock_analysis
from tradestats.libraries.analytics.streaks import calculate_streak_analysis
from tradestats.libraries.analytics.trends import calculate_trend_analysis
from tradestats.services.reporting.config import ExportOptions
from tradestats.services.reporting.models import (
    AdvancedMetricsSection,
    DateRange,
    DaySummary,
    MonthlyBreakdown,
    Report,
    ReportMetadata,
)
from tradestats.services.reporting.transforms import apply_relative_values, mask_symbol_names
from tradestats.services.trades.interface import ITradeRepository
from tradestats.system import LoggerFactory

logger = LoggerFactory.get_logger()

MONTHLY_TOP_STOCKS = 3


def _month_key(day: date) -> str:
    return f"{day.year:04d}-{day.month:02d}"


def calculate_monthly_breakdown(trades: Sequence[Trade]) -> list[MonthlyBreakdown]:
    """
    Re-run the core analysis for each calendar month present in the trades.

    Best/worst day ties resolve to the earliest date. A month whose days all
    net to zero still reports a zero-profit best and worst day.

    Returns:
        One MonthlyBreakdown per month, oldest first
    """
    by_month: dict[str, list[Trade]] = defaultdict(list)
    for trade in trades:
        by_month[_month_key(trade.date)].append(trade)

    breakdown = []
    for month in sorted(by_month):
        month_trades = by_month[month]
        daily = aggregate_daily(month_trades)
        values = daily.net_values

        best_day = worst_day = None
        if daily.days:
            # max()/min() keep the first extreme; days are chronological
            best = max(daily.days, key=lambda d: d.net_profit)
            worst = min(daily.days, key=lambda d: d.net_profit)
            best_day = DaySummary(date=best.date, profit=best.net_profit)
            worst_day = DaySummary(date=worst.date, profit=worst.net_profit)

        volatility = calculate_volatility(values)
        breakdown.append(
            MonthlyBreakdown(
                month=month,
                overview=calculate_performance_overview(month_trades),
                risk=calculate_risk_analysis(values),
                streaks=calculate_streak_analysis(month_trades),
                top_stocks=calculate_stock_analysis(month_trades, depth=MONTHLY_TOP_STOCKS).top_performers,
                best_day=best_day,
                worst_day=worst_day,
                max_daily_loss=min(min(values, default=ZERO), ZERO),
                consistency=calculate_mean(values) / volatility if volatility > ZERO else ZERO,
            )
        )
    return breakdown


def _covered_range(trades: Sequence[Trade], resolved: Optional[tuple[date, date]], today: date) -> DateRange:
    """Resolved window if any, else the span of the trades (today for no trades)."""
    if resolved is not None:
        return DateRange(start=resolved[0], end=resolved[1])
    if not trades:
        return DateRange(start=today, end=today)
    dates = [t.date for t in trades]
    return DateRange(start=min(dates), end=max(dates))


def generate_report(
    trades: Sequence[Trade],
    options: ExportOptions,
    date_range: Optional[tuple[date, date]] = None,
    generated_at: Optional[datetime] = None,
) -> Report:
    """
    Build a report from trades already fetched for the window.

    Disabled sections are not computed. Relative scaling and masking run
    last, on the finished tree.

    Args:
        trades: Trades in the window, any order
        options: Export options
        date_range: Resolved window recorded in the metadata (None = span of trades)
        generated_at: Generation timestamp (defaults to now, UTC)

    Returns:
        Report
    """
    generated_at = generated_at or datetime.now(timezone.utc)

    daily = aggregate_daily(trades)
    overview = calculate_performance_overview(trades)

    advanced = None
    if options.include_advanced_metrics:
        advanced = AdvancedMetricsSection(
            risk=calculate_risk_analysis(daily.net_values),
            streaks=calculate_streak_analysis(trades),
            trade_metrics=calculate_advanced_metrics(trades, daily.net_values),
        )

    stocks = calculate_stock_analysis(trades, options.depth_limit) if options.include_stock_analysis else None
    trends = (
        calculate_trend_analysis(trades, daily, options.momentum_threshold) if options.include_trend_analysis else None
    )
    monthly = calculate_monthly_breakdown(trades) if options.include_monthly_breakdown else None

    report = Report(
        metadata=ReportMetadata(
            generated_at=generated_at,
            date_range=_covered_range(trades, date_range, generated_at.date()),
            date_range_option=options.date_range,
            total_records=len(trades),
            sections=options.sections,
        ),
        performance_overview=overview,
        advanced_metrics=advanced,
        stock_analysis=stocks,
        trend_analysis=trends,
        monthly_breakdown=monthly,
    )

    if options.use_relative_values:
        report = apply_relative_values(report)
    if options.mask_stock_names:
        report = mask_symbol_names(report)

    logger.info(
        "report.generated",
        total_records=len(trades),
        trading_days=len(daily),
        sections=options.sections,
        relative=options.use_relative_values,
        masked=options.mask_stock_names,
    )
    return report


class ReportBuilder:
    """Fetches trades for the configured window and builds the report.

    Holds no state between builds; create one per repository.

    Attributes:
        repository: Trade source
        today: Fixed reference date for year/quarter/month windows (None = system date)

    Example:
        >>> builder = ReportBuilder(FileTradeRepository("data/trades.csv"))
        >>> report = builder.build(ExportOptions(date_range="year"))
        >>> report.performance_overview.net_profit
        Decimal('125000')
    """

    def __init__(self, repository: ITradeRepository, today: Optional[date] = None) -> None:
        self.repository = repository
        self.today = today

    def build(self, options: ExportOptions) -> Report:
        """Build a report.

        Args:
            options: Export options

        Returns:
            Report

        Raises:
            ReportConfigurationError: Invalid window; raised before the repository is called
            TradeRepositoryError: Propagated unchanged from the repository
        """
        today = self.today or date.today()
        window = options.resolve_date_range(today)

        if window is None:
            trades = self.repository.get_all_trades()
        else:
            trades = self.repository.get_trades_by_date_range(*window)

        logger.debug(
            "report.trades_fetched",
            date_range=options.date_range,
            start=window[0].isoformat() if window else None,
            end=window[1].isoformat() if window else None,
            count=len(trades),
        )
        return generate_report(trades, options, date_range=window)
