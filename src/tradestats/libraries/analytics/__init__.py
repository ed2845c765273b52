"""Trading-performance analytics library.

Turns a list of executed trades into performance statistics:

1. **Models** (`models.py`): Pydantic data structures
   - Trade: Closed trade with realized P/L
   - DailyAggregate / DailySeries: Per-day net results (internal)
   - PerformanceOverview, RiskAnalysis, StreakAnalysis, StockAnalysis,
     TrendAnalysis, AdvancedMetrics: Frozen report sections

2. **Daily** (`daily.py`): The single day-bucketing primitive

3. **Analyzers**: Pure calculation functions
   - overview.py: totals, spot/margin breakdown, P/L distribution
   - risk.py: drawdown, volatility, Sharpe, Calmar, VaR, expected shortfall
   - streaks.py: winning/losing day streaks
   - stocks.py: per-symbol rankings
   - trends.py: week-of-month, weekday, quarter, momentum
   - advanced.py: profit factor, Sortino, consistency index

Usage:
    >>> from tradestats.libraries.analytics import aggregate_daily, calculate_risk_analysis
    >>> daily = aggregate_daily(trades)
    >>> risk = calculate_risk_analysis(daily.net_values)
    >>> print(f"Max DD: {risk.max_drawdown}")

Design Principles:
    - Decimal precision for money
    - Empty input yields zeroed results, never an exception or NaN
    - Inputs are never mutated
"""

from tradestats.libraries.analytics.advanced import (
    calculate_advanced_metrics,
    calculate_consistency_index,
    calculate_max_consecutive_losses,
    calculate_sortino_ratio,
)
from tradestats.libraries.analytics.daily import aggregate_daily, sort_chronologically
from tradestats.libraries.analytics.models import (
    AdvancedMetrics,
    DailyAggregate,
    DailySeries,
    PerformanceOverview,
    RiskAnalysis,
    StockAnalysis,
    StockPerformance,
    StreakAnalysis,
    Trade,
    TradeCategory,
    TrendAnalysis,
)
from tradestats.libraries.analytics.overview import (
    calculate_category_breakdown,
    calculate_performance_overview,
    calculate_profit_factor,
    calculate_win_rate,
)
from tradestats.libraries.analytics.risk import (
    calculate_drawdown,
    calculate_expected_shortfall,
    calculate_mean,
    calculate_risk_analysis,
    calculate_value_at_risk,
    calculate_volatility,
)
from tradestats.libraries.analytics.stocks import calculate_stock_analysis
from tradestats.libraries.analytics.streaks import calculate_streak_analysis
from tradestats.libraries.analytics.trends import calculate_trend_analysis

__all__ = [
    # Models
    "Trade",
    "TradeCategory",
    "DailyAggregate",
    "DailySeries",
    "PerformanceOverview",
    "RiskAnalysis",
    "StreakAnalysis",
    "StockPerformance",
    "StockAnalysis",
    "TrendAnalysis",
    "AdvancedMetrics",
    # Aggregation
    "aggregate_daily",
    "sort_chronologically",
    # Analyzers
    "calculate_performance_overview",
    "calculate_category_breakdown",
    "calculate_profit_factor",
    "calculate_win_rate",
    "calculate_risk_analysis",
    "calculate_mean",
    "calculate_volatility",
    "calculate_drawdown",
    "calculate_value_at_risk",
    "calculate_expected_shortfall",
    "calculate_streak_analysis",
    "calculate_stock_analysis",
    "calculate_trend_analysis",
    "calculate_advanced_metrics",
    "calculate_sortino_ratio",
    "calculate_max_consecutive_losses",
    "calculate_consistency_index",
]
