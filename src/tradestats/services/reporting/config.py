"""Export options for report generation."""

import calendar
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, Field

DateRangeOption = Literal["all", "year", "quarter", "month", "custom"]
StockAnalysisDepth = Literal["top5", "top10", "all"]

DEPTH_LIMITS: dict[str, Optional[int]] = {"top5": 5, "top10": 10, "all": None}


class ReportConfigurationError(ValueError):
    """Export options are inconsistent (raised before any trades are fetched)."""


class ExportOptions(BaseModel):
    """
    Options controlling which trades are analyzed and how the report is shaped.

    Section flags gate computation: a disabled section is never calculated
    and serializes as null.
    """

    date_range: DateRangeOption = Field(default="all", description="Trade window (all|year|quarter|month|custom)")
    custom_start: Optional[date] = Field(default=None, description="First day of a custom window (inclusive)")
    custom_end: Optional[date] = Field(default=None, description="Last day of a custom window (inclusive)")
    include_advanced_metrics: bool = Field(default=True, description="Risk, streak and trade-efficiency metrics")
    include_stock_analysis: bool = Field(default=True, description="Per-symbol rankings")
    include_trend_analysis: bool = Field(default=True, description="Calendar trends and momentum")
    include_monthly_breakdown: bool = Field(default=False, description="Per-month re-run of the analysis")
    stock_analysis_depth: StockAnalysisDepth = Field(default="top5", description="Entries per ranking")
    mask_stock_names: bool = Field(default=False, description="Replace symbols with placeholders")
    use_relative_values: bool = Field(default=False, description="Scale money to % of the largest P/L total")
    momentum_threshold: Decimal = Field(default=Decimal("1000"), ge=0, description="Momentum labeling threshold")

    model_config = {"frozen": True, "extra": "forbid"}

    @property
    def depth_limit(self) -> Optional[int]:
        """Ranking length for the configured depth (None = unlimited)."""
        return DEPTH_LIMITS[self.stock_analysis_depth]

    @property
    def sections(self) -> list[str]:
        """Names of the report sections this option set produces."""
        enabled = ["performanceOverview"]
        if self.include_advanced_metrics:
            enabled.append("advancedMetrics")
        if self.include_stock_analysis:
            enabled.append("stockAnalysis")
        if self.include_trend_analysis:
            enabled.append("trendAnalysis")
        if self.include_monthly_breakdown:
            enabled.append("monthlyBreakdown")
        return enabled

    def resolve_date_range(self, today: date) -> Optional[tuple[date, date]]:
        """
        Resolve the configured window to concrete dates.

        Args:
            today: Reference date for year/quarter/month windows

        Returns:
            (start, end) inclusive, or None for "all"

        Raises:
            ReportConfigurationError: Custom window missing a bound or reversed

        Example:
            >>> ExportOptions(date_range="quarter").resolve_date_range(date(2025, 5, 17))
            (datetime.date(2025, 4, 1), datetime.date(2025, 6, 30))
        """
        if self.date_range == "all":
            return None

        if self.date_range == "year":
            return date(today.year, 1, 1), date(today.year, 12, 31)

        if self.date_range == "quarter":
            first_month = (today.month - 1) // 3 * 3 + 1
            last_month = first_month + 2
            return (
                date(today.year, first_month, 1),
                date(today.year, last_month, calendar.monthrange(today.year, last_month)[1]),
            )

        if self.date_range == "month":
            return (
                date(today.year, today.month, 1),
                date(today.year, today.month, calendar.monthrange(today.year, today.month)[1]),
            )

        # custom
        if self.custom_start is None or self.custom_end is None:
            raise ReportConfigurationError("Custom date range requires both a start and an end date")
        if self.custom_start > self.custom_end:
            raise ReportConfigurationError(
                f"Custom date range start {self.custom_start} is after end {self.custom_end}"
            )
        return self.custom_start, self.custom_end

    @classmethod
    def from_yaml(cls, path: Path | str) -> "ExportOptions":
        """Load options from the `report` key of a YAML file (or its top level)."""
        import yaml

        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        return cls(**data.get("report", data))
