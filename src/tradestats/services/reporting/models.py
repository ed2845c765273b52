"""Report tree models.

The Report is the exported artifact. Every section produced by the
analytics library hangs off it; sections whose options are disabled are
None and serialize as null.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import ClassVar, Optional

from pydantic import Field

from tradestats.libraries.analytics.models import (
    AdvancedMetrics,
    AnalyticsModel,
    PerformanceOverview,
    RiskAnalysis,
    StockAnalysis,
    StockPerformance,
    StreakAnalysis,
    TrendAnalysis,
)

REPORT_VERSION = "1.0.0"


class DateRange(AnalyticsModel):
    start: date
    end: date


class ReportMetadata(AnalyticsModel):
    """Provenance of a report."""

    generated_at: datetime
    date_range: DateRange
    date_range_option: str
    total_records: int
    sections: list[str] = Field(default_factory=list)
    version: str = REPORT_VERSION


class AdvancedMetricsSection(AnalyticsModel):
    """Risk, streak and trade-efficiency metrics for the whole window."""

    risk: RiskAnalysis
    streaks: StreakAnalysis
    trade_metrics: AdvancedMetrics


class DaySummary(AnalyticsModel):
    date: date
    profit: Decimal

    relative_fields: ClassVar[tuple[str, ...]] = ("profit",)


class MonthlyBreakdown(AnalyticsModel):
    """Analysis re-run on one calendar month's trades."""

    month: str  # YYYY-MM
    overview: PerformanceOverview
    risk: RiskAnalysis
    streaks: StreakAnalysis
    top_stocks: list[StockPerformance] = Field(default_factory=list)
    best_day: Optional[DaySummary] = None
    worst_day: Optional[DaySummary] = None
    max_daily_loss: Decimal
    consistency: Decimal  # Mean / volatility of daily P/L

    relative_fields: ClassVar[tuple[str, ...]] = ("max_daily_loss",)


class Report(AnalyticsModel):
    """Complete exported performance report."""

    metadata: ReportMetadata
    performance_overview: PerformanceOverview
    advanced_metrics: Optional[AdvancedMetricsSection] = None
    stock_analysis: Optional[StockAnalysis] = None
    trend_analysis: Optional[TrendAnalysis] = None
    monthly_breakdown: Optional[list[MonthlyBreakdown]] = None
