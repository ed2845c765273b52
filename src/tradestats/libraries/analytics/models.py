"""Trade and analytics result models.

Pydantic models for the trade input and every analyzer output. Results are
frozen value objects; they serialize with camelCase keys for the exported
report. DailyAggregate/DailySeries are internal and never serialized.
"""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Annotated, ClassVar, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

ZERO = Decimal("0")
INFINITY = Decimal("Infinity")

# Ratios that may legitimately be +Infinity (profit factor with no losses)
Ratio = Annotated[Decimal, Field(allow_inf_nan=True)]

StreakType = Literal["win", "loss", "none"]
MomentumTrend = Literal["improving", "stable", "declining"]


class TradeCategory(str, Enum):
    """Position category derived from the broker's trade-type label."""

    SPOT = "spot"
    MARGIN = "margin"
    UNKNOWN = "unknown"


TRADE_TYPE_CATEGORIES: dict[str, TradeCategory] = {
    # Cash positions
    "現物売": TradeCategory.SPOT,
    "現物買": TradeCategory.SPOT,
    "売却": TradeCategory.SPOT,
    "購入": TradeCategory.SPOT,
    "買付": TradeCategory.SPOT,
    "spot_sell": TradeCategory.SPOT,
    "spot_buy": TradeCategory.SPOT,
    "sell": TradeCategory.SPOT,
    "buy": TradeCategory.SPOT,
    # Margin repayments
    "返済売": TradeCategory.MARGIN,
    "返済買": TradeCategory.MARGIN,
    "margin_repay_sell": TradeCategory.MARGIN,
    "margin_repay_buy": TradeCategory.MARGIN,
}

UNKNOWN_SYMBOL = "unknown"


def categorize_trade_type(trade_type: str | None) -> TradeCategory:
    """Map a trade-type label to its category (unknown when unmapped)."""
    if not trade_type:
        return TradeCategory.UNKNOWN
    return TRADE_TYPE_CATEGORIES.get(trade_type.strip(), TradeCategory.UNKNOWN)


class Trade(BaseModel):
    """
    A single executed (closed) trade.

    Only realized_profit_loss and date are used by the analytics; the
    remaining numeric fields are carried for completeness.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    date: date
    symbol_code: str | None = None
    symbol_name: str | None = None
    trade_type: str = ""
    quantity: Decimal | None = None
    unit_price: Decimal | None = None
    amount: Decimal | None = None
    average_acquisition_price: Decimal | None = None
    realized_profit_loss: Decimal

    @field_validator("date", mode="before")
    @classmethod
    def _truncate_time(cls, value: object) -> object:
        """Drop time-of-day; aggregation is by calendar date."""
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, str) and len(value) > 10 and value[10] in "T ":
            return value[:10]
        return value

    @field_validator("symbol_code", "symbol_name", mode="before")
    @classmethod
    def _blank_to_none(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @property
    def category(self) -> TradeCategory:
        return categorize_trade_type(self.trade_type)

    @property
    def is_winner(self) -> bool:
        """Trade was profitable."""
        return self.realized_profit_loss > ZERO

    @property
    def is_loser(self) -> bool:
        """Trade lost money."""
        return self.realized_profit_loss < ZERO

    @property
    def symbol_key(self) -> str:
        """Grouping key: code, else name, else 'unknown'."""
        return self.symbol_code or self.symbol_name or UNKNOWN_SYMBOL


@dataclass(frozen=True)
class DailyAggregate:
    """Net result of all trades executed on one calendar day."""

    date: date
    net_profit: Decimal
    trade_count: int
    win_count: int
    loss_count: int

    @property
    def date_key(self) -> str:
        return self.date.isoformat()


@dataclass(frozen=True)
class DailySeries:
    """Chronologically ordered daily aggregates."""

    days: tuple[DailyAggregate, ...] = ()

    @property
    def by_date(self) -> dict[str, Decimal]:
        """ISO date key → net profit."""
        return {day.date_key: day.net_profit for day in self.days}

    @property
    def net_values(self) -> list[Decimal]:
        """Daily net profits in chronological order."""
        return [day.net_profit for day in self.days]

    def __len__(self) -> int:
        return len(self.days)


class AnalyticsModel(BaseModel):
    """Base for report value objects (frozen, camelCase on export)."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    # Monetary fields rescaled when relative values are requested
    relative_fields: ClassVar[tuple[str, ...]] = ()


class DistributionBucket(AnalyticsModel):
    """Count and total of trades whose P/L falls in one amount range."""

    label: str
    lower: Decimal | None
    upper: Decimal | None
    count: int
    percentage: Decimal
    total_amount: Decimal

    relative_fields: ClassVar[tuple[str, ...]] = ("total_amount",)


class DistributionAnalysis(AnalyticsModel):
    profit_distribution: list[DistributionBucket] = Field(default_factory=list)
    loss_distribution: list[DistributionBucket] = Field(default_factory=list)


class PerformanceOverview(AnalyticsModel):
    """
    Basic totals over a trade set.

    total_loss, average_loss and max_loss keep their negative sign.
    spot_profit + margin_profit + unknown_profit == net_profit.
    """

    total_profit: Decimal
    total_loss: Decimal
    net_profit: Decimal
    total_trades: int
    winning_trades: int
    losing_trades: int
    break_even_trades: int
    win_rate: Decimal
    profit_factor: Ratio
    average_profit: Decimal
    average_loss: Decimal
    max_profit: Decimal
    max_loss: Decimal
    profit_per_trade: Decimal
    spot_profit: Decimal
    margin_profit: Decimal
    unknown_profit: Decimal
    distribution: DistributionAnalysis

    relative_fields: ClassVar[tuple[str, ...]] = (
        "total_profit",
        "total_loss",
        "net_profit",
        "average_profit",
        "average_loss",
        "max_profit",
        "max_loss",
        "profit_per_trade",
        "spot_profit",
        "margin_profit",
        "unknown_profit",
    )


class RiskAnalysis(AnalyticsModel):
    """Drawdown and dispersion statistics of the daily P/L series."""

    max_drawdown: Decimal
    max_drawdown_percent: Decimal
    volatility: Decimal
    sharpe_ratio: Decimal
    calmar_ratio: Decimal
    value_at_risk_95: Decimal
    value_at_risk_99: Decimal
    expected_shortfall: Decimal
    recovery_factor: Decimal
    total_return: Decimal

    relative_fields: ClassVar[tuple[str, ...]] = (
        "max_drawdown",
        "volatility",
        "value_at_risk_95",
        "value_at_risk_99",
        "expected_shortfall",
        "total_return",
    )


class StreakAnalysis(AnalyticsModel):
    """Win/loss streaks measured in trading days."""

    current_streak: int
    current_streak_type: StreakType
    longest_win_streak: int
    longest_loss_streak: int
    average_win_streak: Decimal
    average_loss_streak: Decimal


class TradeExtreme(AnalyticsModel):
    """Date and amount of a single best or worst trade."""

    date: date
    amount: Decimal

    relative_fields: ClassVar[tuple[str, ...]] = ("amount",)


class StockPerformance(AnalyticsModel):
    """Aggregated results for one symbol."""

    symbol: str
    name: str
    net_profit: Decimal
    total_profit: Decimal
    total_loss: Decimal
    trades: int
    winning_trades: int
    losing_trades: int
    win_rate: Decimal
    profit_factor: Ratio
    average_profit: Decimal
    average_loss: Decimal
    max_profit: Decimal
    max_loss: Decimal
    profit_contribution: Decimal
    risk_contribution: Decimal
    best_trade: TradeExtreme | None = None
    worst_trade: TradeExtreme | None = None

    relative_fields: ClassVar[tuple[str, ...]] = (
        "net_profit",
        "total_profit",
        "total_loss",
        "average_profit",
        "average_loss",
        "max_profit",
        "max_loss",
    )


class Diversification(AnalyticsModel):
    total_stocks: int
    concentration_risk: Decimal  # Profit contribution (%) of the top 5 performers


class StockAnalysis(AnalyticsModel):
    top_performers: list[StockPerformance] = Field(default_factory=list)
    worst_performers: list[StockPerformance] = Field(default_factory=list)
    most_traded: list[StockPerformance] = Field(default_factory=list)
    highest_win_rate: list[StockPerformance] = Field(default_factory=list)
    diversification: Diversification


class WeeklyTrendPoint(AnalyticsModel):
    week: int  # Week of month, 1-based
    profit: Decimal
    trades: int
    win_rate: Decimal

    relative_fields: ClassVar[tuple[str, ...]] = ("profit",)


class DayOfWeekPerformance(AnalyticsModel):
    day: str
    profit: Decimal
    trades: int
    win_rate: Decimal
    average_profit_per_trade: Decimal

    relative_fields: ClassVar[tuple[str, ...]] = ("profit", "average_profit_per_trade")


class SeasonalPerformance(AnalyticsModel):
    quarter: str
    profit: Decimal
    trades: int
    average_profit: Decimal
    win_rate: Decimal

    relative_fields: ClassVar[tuple[str, ...]] = ("profit", "average_profit")


class PerformanceConsistency(AnalyticsModel):
    profit_standard_deviation: Decimal
    win_rate_consistency: Decimal
    trading_frequency_variance: Decimal

    relative_fields: ClassVar[tuple[str, ...]] = ("profit_standard_deviation",)


class TrendAnalysis(AnalyticsModel):
    weekly_trend: list[WeeklyTrendPoint] = Field(default_factory=list)
    day_of_week: list[DayOfWeekPerformance] = Field(default_factory=list)
    seasonal: list[SeasonalPerformance] = Field(default_factory=list)
    momentum_indicator: Decimal
    momentum_trend: MomentumTrend
    consistency: PerformanceConsistency

    relative_fields: ClassVar[tuple[str, ...]] = ("momentum_indicator",)


class AdvancedMetrics(AnalyticsModel):
    """Trade-level and daily-level efficiency metrics."""

    profit_factor: Ratio
    profitability_index: Ratio
    sortino_ratio: Decimal
    max_consecutive_losses: int
    consistency_index: Decimal
    risk_return_ratio: Decimal
    average_win: Decimal
    average_loss: Decimal  # Absolute value
    max_win: Decimal
    max_loss: Decimal  # Absolute value
    win_rate: Decimal
    loss_rate: Decimal
    trading_days: int
    average_trades_per_day: Decimal
    best_day: Decimal
    worst_day: Decimal
    average_daily_profit: Decimal

    relative_fields: ClassVar[tuple[str, ...]] = (
        "average_win",
        "average_loss",
        "max_win",
        "max_loss",
        "best_day",
        "worst_day",
        "average_daily_profit",
    )
