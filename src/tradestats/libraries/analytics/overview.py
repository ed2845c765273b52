"""Basic performance totals, category breakdown and P/L distribution."""

from decimal import Decimal
from typing import Iterable, Sequence

from tradestats.libraries.analytics.models import (
    INFINITY,
    ZERO,
    DistributionAnalysis,
    DistributionBucket,
    PerformanceOverview,
    Trade,
    TradeCategory,
)

HUNDRED = Decimal("100")

# (lower, upper, label); profits fall in (lower, upper], losses in [lower, upper)
PROFIT_RANGES: tuple[tuple[Decimal | None, Decimal | None, str], ...] = (
    (Decimal("0"), Decimal("1000"), "0-1,000"),
    (Decimal("1000"), Decimal("5000"), "1,000-5,000"),
    (Decimal("5000"), Decimal("10000"), "5,000-10,000"),
    (Decimal("10000"), Decimal("50000"), "10,000-50,000"),
    (Decimal("50000"), None, "50,000+"),
)

LOSS_RANGES: tuple[tuple[Decimal | None, Decimal | None, str], ...] = (
    (Decimal("-1000"), Decimal("0"), "0 to -1,000"),
    (Decimal("-5000"), Decimal("-1000"), "-1,000 to -5,000"),
    (Decimal("-10000"), Decimal("-5000"), "-5,000 to -10,000"),
    (Decimal("-50000"), Decimal("-10000"), "-10,000 to -50,000"),
    (None, Decimal("-50000"), "-50,000 or less"),
)


def calculate_profit_factor(gross_profit: Decimal, gross_loss: Decimal) -> Decimal:
    """
    Gross profit / gross loss.

    Args:
        gross_profit: Sum of winning amounts (>= 0)
        gross_loss: Absolute sum of losing amounts (>= 0)

    Returns:
        The ratio; Decimal('Infinity') when there are wins but no losses;
        0 when both are 0.
    """
    if gross_loss > ZERO:
        return gross_profit / gross_loss
    if gross_profit > ZERO:
        return INFINITY
    return ZERO


def calculate_win_rate(wins: int, total: int) -> Decimal:
    """Fraction of winning trades in [0, 1] (0 when there are no trades)."""
    if total == 0:
        return ZERO
    return Decimal(wins) / Decimal(total)


def calculate_category_breakdown(trades: Iterable[Trade]) -> dict[TradeCategory, Decimal]:
    """Net P/L per trade category; the values always sum to the overall net P/L."""
    breakdown = {category: ZERO for category in TradeCategory}
    for trade in trades:
        breakdown[trade.category] += trade.realized_profit_loss
    return breakdown


def _bucket(
    amounts: Sequence[Decimal],
    ranges: tuple[tuple[Decimal | None, Decimal | None, str], ...],
    upper_inclusive: bool,
) -> list[DistributionBucket]:
    buckets = []
    for lower, upper, label in ranges:
        if upper_inclusive:
            selected = [a for a in amounts if (lower is None or a > lower) and (upper is None or a <= upper)]
        else:
            selected = [a for a in amounts if (lower is None or a >= lower) and (upper is None or a < upper)]

        buckets.append(
            DistributionBucket(
                label=label,
                lower=lower,
                upper=upper,
                count=len(selected),
                percentage=Decimal(len(selected)) / Decimal(len(amounts)) * HUNDRED if amounts else ZERO,
                total_amount=sum(selected, ZERO),
            )
        )
    return buckets


def calculate_distribution(trades: Sequence[Trade]) -> DistributionAnalysis:
    """Histogram of winning and losing trade amounts over fixed ranges."""
    profits = [t.realized_profit_loss for t in trades if t.is_winner]
    losses = [t.realized_profit_loss for t in trades if t.is_loser]
    return DistributionAnalysis(
        profit_distribution=_bucket(profits, PROFIT_RANGES, upper_inclusive=True),
        loss_distribution=_bucket(losses, LOSS_RANGES, upper_inclusive=False),
    )


def calculate_performance_overview(trades: Sequence[Trade]) -> PerformanceOverview:
    """
    Basic totals for a trade set.

    Args:
        trades: Trades in any order

    Returns:
        PerformanceOverview (zeroed for an empty list)
    """
    profits = [t.realized_profit_loss for t in trades if t.is_winner]
    losses = [t.realized_profit_loss for t in trades if t.is_loser]

    total_profit = sum(profits, ZERO)
    total_loss = sum(losses, ZERO)
    net_profit = sum((t.realized_profit_loss for t in trades), ZERO)
    breakdown = calculate_category_breakdown(trades)

    return PerformanceOverview(
        total_profit=total_profit,
        total_loss=total_loss,
        net_profit=net_profit,
        total_trades=len(trades),
        winning_trades=len(profits),
        losing_trades=len(losses),
        break_even_trades=len(trades) - len(profits) - len(losses),
        win_rate=calculate_win_rate(len(profits), len(trades)),
        profit_factor=calculate_profit_factor(total_profit, abs(total_loss)),
        average_profit=total_profit / len(profits) if profits else ZERO,
        average_loss=total_loss / len(losses) if losses else ZERO,
        max_profit=max(profits) if profits else ZERO,
        max_loss=min(losses) if losses else ZERO,
        profit_per_trade=net_profit / len(trades) if trades else ZERO,
        spot_profit=breakdown[TradeCategory.SPOT],
        margin_profit=breakdown[TradeCategory.MARGIN],
        unknown_profit=breakdown[TradeCategory.UNKNOWN],
        distribution=calculate_distribution(trades),
    )
