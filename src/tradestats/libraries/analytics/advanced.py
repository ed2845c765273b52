"""Trade-efficiency metrics: profit factor, Sortino, consistency index."""

from decimal import ROUND_HALF_UP, Decimal
from typing import Sequence

from tradestats.libraries.analytics.daily import sort_chronologically
from tradestats.libraries.analytics.models import ZERO, AdvancedMetrics, Trade
from tradestats.libraries.analytics.overview import calculate_profit_factor, calculate_win_rate
from tradestats.libraries.analytics.risk import calculate_mean, calculate_volatility

WIN_RATE_WEIGHT = Decimal("0.6")
PAYOFF_WEIGHT = Decimal("0.4")


def calculate_downside_deviation(values: Sequence[Decimal]) -> Decimal:
    """Root-mean-square of the negative values (0 if there are none)."""
    negatives = [v for v in values if v < ZERO]
    if not negatives:
        return ZERO
    return calculate_mean([v * v for v in negatives]).sqrt()


def calculate_sortino_ratio(values: Sequence[Decimal]) -> Decimal:
    """
    Mean daily P/L over downside deviation, with a zero target.

    Example:
        >>> calculate_sortino_ratio([Decimal("300"), Decimal("-100")])
        Decimal('1')
    """
    downside = calculate_downside_deviation(values)
    if downside == ZERO:
        return ZERO
    return calculate_mean(values) / downside


def calculate_max_consecutive_losses(trades: Sequence[Trade]) -> int:
    """Longest run of losing trades in date order; any non-losing trade resets the run."""
    longest = 0
    run = 0
    for trade in sort_chronologically(trades):
        if trade.is_loser:
            run += 1
            longest = max(longest, run)
        else:
            run = 0
    return longest


def calculate_consistency_index(win_rate: Decimal, average_win: Decimal, average_loss: Decimal) -> Decimal:
    """0.6 * win rate + 0.4 * avg_win / (avg_win + |avg_loss|)."""
    payoff_denominator = average_win + abs(average_loss)
    payoff = average_win / payoff_denominator if payoff_denominator > ZERO else ZERO
    return WIN_RATE_WEIGHT * win_rate + PAYOFF_WEIGHT * payoff


def calculate_advanced_metrics(trades: Sequence[Trade], daily_values: Sequence[Decimal]) -> AdvancedMetrics:
    """
    Trade- and day-level efficiency metrics.

    Args:
        trades: Trades in any order
        daily_values: Chronological daily net P/L of the same trades

    Returns:
        AdvancedMetrics (profit_factor/profitability_index may be Infinity)
    """
    wins = [t.realized_profit_loss for t in trades if t.is_winner]
    losses = [abs(t.realized_profit_loss) for t in trades if t.is_loser]

    gross_profit = sum(wins, ZERO)
    gross_loss = sum(losses, ZERO)
    profit_factor = calculate_profit_factor(gross_profit, gross_loss)

    average_win = gross_profit / len(wins) if wins else ZERO
    average_loss = gross_loss / len(losses) if losses else ZERO
    win_rate = calculate_win_rate(len(wins), len(trades))
    loss_rate = calculate_win_rate(len(losses), len(trades))

    mean_daily = calculate_mean(daily_values)
    volatility = calculate_volatility(daily_values)

    trading_days = len(daily_values)
    trades_per_day = Decimal(len(trades)) / Decimal(trading_days) if trading_days else ZERO

    return AdvancedMetrics(
        profit_factor=profit_factor,
        profitability_index=profit_factor,
        sortino_ratio=calculate_sortino_ratio(daily_values),
        max_consecutive_losses=calculate_max_consecutive_losses(trades),
        consistency_index=calculate_consistency_index(win_rate, average_win, average_loss),
        risk_return_ratio=mean_daily / volatility if volatility > ZERO else ZERO,
        average_win=average_win,
        average_loss=average_loss,
        max_win=max(wins) if wins else ZERO,
        max_loss=max(losses) if losses else ZERO,
        win_rate=win_rate,
        loss_rate=loss_rate,
        trading_days=trading_days,
        average_trades_per_day=trades_per_day.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP),
        best_day=max(daily_values) if daily_values else ZERO,
        worst_day=min(daily_values) if daily_values else ZERO,
        average_daily_profit=mean_daily,
    )
