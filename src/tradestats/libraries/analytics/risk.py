"""Risk statistics over the daily P/L series.

Pure functions: same inputs always produce same outputs, inputs are never
modified. Every ratio falls back to 0 when its denominator is 0 so results
stay finite for serialization.

Usage:
    >>> from tradestats.libraries.analytics.risk import calculate_risk_analysis
    >>> risk = calculate_risk_analysis([Decimal("500"), Decimal("-300"), Decimal("-200"), Decimal("400")])
    >>> risk.max_drawdown
    Decimal('500')
    >>> risk.max_drawdown_percent
    Decimal('100')
"""

import math
from decimal import Decimal
from typing import Sequence

from tradestats.libraries.analytics.models import ZERO, RiskAnalysis

TRADING_DAYS_PER_YEAR = 252


def calculate_mean(values: Sequence[Decimal]) -> Decimal:
    """Arithmetic mean (0 for an empty sequence)."""
    if not values:
        return ZERO
    return sum(values, ZERO) / Decimal(len(values))


def calculate_volatility(values: Sequence[Decimal]) -> Decimal:
    """
    Population standard deviation of the values.

    Example:
        >>> calculate_volatility([Decimal("1"), Decimal("3")])
        Decimal('1')
    """
    if not values:
        return ZERO

    mean = calculate_mean(values)
    variance = sum(((v - mean) ** 2 for v in values), ZERO) / Decimal(len(values))
    return variance.sqrt()


def calculate_drawdown(values: Sequence[Decimal]) -> tuple[Decimal, Decimal]:
    """
    Maximum drawdown of the cumulative P/L curve.

    The running peak starts at 0, so losses before any gain count as drawdown
    from breakeven. The percentage is measured against the peak in force when
    the maximum was observed, and is 0 when that peak is not positive.

    Args:
        values: Chronological daily P/L

    Returns:
        (max_drawdown, max_drawdown_percent), both >= 0

    Example:
        >>> calculate_drawdown([Decimal("500"), Decimal("-300"), Decimal("-200"), Decimal("400")])
        (Decimal('500'), Decimal('100'))
    """
    cumulative = ZERO
    peak = ZERO
    max_drawdown = ZERO
    max_drawdown_percent = ZERO

    for value in values:
        cumulative += value
        if cumulative > peak:
            peak = cumulative

        drawdown = peak - cumulative
        if drawdown > max_drawdown:
            max_drawdown = drawdown
            max_drawdown_percent = drawdown / peak * Decimal("100") if peak > ZERO else ZERO

    return max_drawdown, max_drawdown_percent


def _tail_index(count: int, tail: Decimal) -> int:
    return math.floor(tail * count)


def calculate_value_at_risk(values: Sequence[Decimal], confidence: Decimal = Decimal("0.95")) -> Decimal:
    """
    Historical Value-at-Risk: the value at index floor((1 - confidence) * n) of the ascending sort.

    Example:
        >>> calculate_value_at_risk([Decimal(v) for v in range(-10, 10)])
        Decimal('-9')
    """
    if not values:
        return ZERO

    ordered = sorted(values)
    return ordered[_tail_index(len(ordered), Decimal("1") - confidence)]


def calculate_expected_shortfall(values: Sequence[Decimal], confidence: Decimal = Decimal("0.95")) -> Decimal:
    """Mean of the sorted values up to and including the VaR index."""
    if not values:
        return ZERO

    ordered = sorted(values)
    tail = ordered[: _tail_index(len(ordered), Decimal("1") - confidence) + 1]
    return calculate_mean(tail)


def calculate_risk_analysis(values: Sequence[Decimal]) -> RiskAnalysis:
    """
    Full risk profile of a chronological daily P/L series.

    Args:
        values: Daily net P/L, oldest first

    Returns:
        RiskAnalysis (all zeros for an empty series)
    """
    max_drawdown, max_drawdown_percent = calculate_drawdown(values)
    mean = calculate_mean(values)
    volatility = calculate_volatility(values)
    total_return = sum(values, ZERO)

    sharpe = mean / volatility if volatility > ZERO else ZERO
    calmar = mean * TRADING_DAYS_PER_YEAR / max_drawdown if max_drawdown > ZERO else ZERO
    recovery = total_return / max_drawdown if max_drawdown > ZERO else ZERO

    return RiskAnalysis(
        max_drawdown=max_drawdown,
        max_drawdown_percent=max_drawdown_percent,
        volatility=volatility,
        sharpe_ratio=sharpe,
        calmar_ratio=calmar,
        value_at_risk_95=calculate_value_at_risk(values, Decimal("0.95")),
        value_at_risk_99=calculate_value_at_risk(values, Decimal("0.99")),
        expected_shortfall=calculate_expected_shortfall(values, Decimal("0.95")),
        recovery_factor=recovery,
        total_return=total_return,
    )
