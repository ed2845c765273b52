"""Win/loss streak detection over trading days."""

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from tradestats.libraries.analytics.daily import aggregate_daily
from tradestats.libraries.analytics.models import ZERO, StreakAnalysis, StreakType, Trade


def _average_length(streaks: list[int]) -> Decimal:
    if not streaks:
        return Decimal("0.0")
    mean = Decimal(sum(streaks)) / Decimal(len(streaks))
    return mean.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)


def calculate_streak_analysis(trades: Iterable[Trade]) -> StreakAnalysis:
    """
    Measure streaks of winning and losing days.

    Trades are bucketed by day first. A positive day extends the win streak
    and closes any open loss streak (and vice versa). A break-even day closes
    both without starting a new one. Longest streaks include the streak still
    open at the end, which also becomes the current streak.

    Args:
        trades: Trades in any order

    Returns:
        StreakAnalysis (current_streak_type "none" when no streak is open)
    """
    win_run = 0
    loss_run = 0
    longest_win = 0
    longest_loss = 0
    win_streaks: list[int] = []
    loss_streaks: list[int] = []

    for day in aggregate_daily(trades).days:
        if day.net_profit > ZERO:
            win_run += 1
            if loss_run:
                loss_streaks.append(loss_run)
                loss_run = 0
        elif day.net_profit < ZERO:
            loss_run += 1
            if win_run:
                win_streaks.append(win_run)
                win_run = 0
        else:
            if win_run:
                win_streaks.append(win_run)
                win_run = 0
            if loss_run:
                loss_streaks.append(loss_run)
                loss_run = 0

        longest_win = max(longest_win, win_run)
        longest_loss = max(longest_loss, loss_run)

    current = 0
    current_type: StreakType = "none"
    if win_run:
        current, current_type = win_run, "win"
        win_streaks.append(win_run)
    elif loss_run:
        current, current_type = loss_run, "loss"
        loss_streaks.append(loss_run)

    return StreakAnalysis(
        current_streak=current,
        current_streak_type=current_type,
        longest_win_streak=longest_win,
        longest_loss_streak=longest_loss,
        average_win_streak=_average_length(win_streaks),
        average_loss_streak=_average_length(loss_streaks),
    )
