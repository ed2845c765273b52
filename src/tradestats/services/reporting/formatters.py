"""Rich console formatters for trade reports.

Terminal summary of a generated report: tables, colors and a closing panel.
The JSON export is the full artifact; this is the at-a-glance view.
"""

from decimal import Decimal
from typing import Literal

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from tradestats.libraries.analytics.models import (
    AdvancedMetrics,
    PerformanceOverview,
    RiskAnalysis,
    StockPerformance,
    StreakAnalysis,
    TrendAnalysis,
)
from tradestats.services.reporting.models import MonthlyBreakdown, Report


def _format_pct(value: Decimal, precision: int = 1) -> str:
    """Format a fraction in [0, 1] as a percentage."""
    return f"{float(value) * 100:.{precision}f}%"


def _format_amount(value: Decimal, precision: int = 0) -> str:
    """Format a monetary amount (currency-agnostic)."""
    return f"{float(value):,.{precision}f}"


def _format_ratio(value: Decimal) -> str:
    if not value.is_finite():
        return "∞"
    return f"{float(value):.2f}"


def _get_color(value: Decimal) -> str:
    """Get color based on positive/negative value."""
    if value > 0:
        return "green"
    elif value < 0:
        return "red"
    return "white"


def _colored(value: Decimal, text: str) -> str:
    color = _get_color(value)
    return f"[{color}]{text}[/{color}]"


def _create_overview_table(overview: PerformanceOverview) -> Table:
    """Create performance overview table."""
    table = Table(title="📊 Performance Overview", show_header=False, box=None, padding=(0, 2))

    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")

    table.add_row("Net Profit", _colored(overview.net_profit, _format_amount(overview.net_profit)))
    table.add_row("Total Profit", f"[green]{_format_amount(overview.total_profit)}[/green]")
    table.add_row("Total Loss", f"[red]{_format_amount(overview.total_loss)}[/red]")
    table.add_row("", "")  # Spacer

    table.add_row("Total Trades", f"{overview.total_trades:,}")
    table.add_row("Winning / Losing", f"[green]{overview.winning_trades:,}[/green] / [red]{overview.losing_trades:,}[/red]")

    win_rate_color = (
        "green" if overview.win_rate > Decimal("0.5") else "yellow" if overview.win_rate > Decimal("0.4") else "red"
    )
    table.add_row("Win Rate", f"[{win_rate_color}]{_format_pct(overview.win_rate)}[/{win_rate_color}]")

    if overview.profit_factor.is_finite():
        pf_color = (
            "green"
            if overview.profit_factor > Decimal("2.0")
            else "yellow"
            if overview.profit_factor > Decimal("1.0")
            else "red"
        )
        table.add_row("Profit Factor", f"[{pf_color}]{_format_ratio(overview.profit_factor)}[/{pf_color}]")
    else:
        table.add_row("Profit Factor", "[dim]∞ (no losses)[/dim]")

    table.add_row("", "")  # Spacer
    table.add_row("Spot", _colored(overview.spot_profit, _format_amount(overview.spot_profit)))
    table.add_row("Margin", _colored(overview.margin_profit, _format_amount(overview.margin_profit)))
    if overview.unknown_profit:
        table.add_row("Unclassified", _colored(overview.unknown_profit, _format_amount(overview.unknown_profit)))

    return table


def _create_risk_table(risk: RiskAnalysis, streaks: StreakAnalysis) -> Table:
    """Create risk and streak table."""
    table = Table(title="⚠️  Risk Metrics", show_header=False, box=None, padding=(0, 2))

    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")

    table.add_row(
        "Max Drawdown",
        f"[red]{_format_amount(risk.max_drawdown)} ({float(risk.max_drawdown_percent):.1f}%)[/red]",
    )
    table.add_row("Daily Volatility", _format_amount(risk.volatility))
    table.add_row("VaR 95%", _format_amount(risk.value_at_risk_95))
    table.add_row("Expected Shortfall", _format_amount(risk.expected_shortfall))

    sharpe_color = "green" if risk.sharpe_ratio > Decimal("1.0") else "yellow" if risk.sharpe_ratio > 0 else "red"
    table.add_row("Sharpe Ratio", f"[{sharpe_color}]{_format_ratio(risk.sharpe_ratio)}[/{sharpe_color}]")
    table.add_row("Calmar Ratio", _format_ratio(risk.calmar_ratio))
    table.add_row("Recovery Factor", _format_ratio(risk.recovery_factor))

    table.add_row("", "")  # Spacer
    table.add_row("Current Streak", f"{streaks.current_streak} ({streaks.current_streak_type})")
    table.add_row("Longest Win Streak", f"[green]{streaks.longest_win_streak} days[/green]")
    table.add_row("Longest Loss Streak", f"[red]{streaks.longest_loss_streak} days[/red]")

    return table


def _create_trade_metrics_table(metrics: AdvancedMetrics) -> Table:
    table = Table(title="💼 Trade Metrics", show_header=False, box=None, padding=(0, 2))

    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")

    table.add_row("Sortino Ratio", _format_ratio(metrics.sortino_ratio))
    table.add_row("Consistency Index", _format_ratio(metrics.consistency_index))
    table.add_row("Risk/Return", _format_ratio(metrics.risk_return_ratio))
    table.add_row("Max Consecutive Losses", f"{metrics.max_consecutive_losses:,}")
    table.add_row("", "")  # Spacer
    table.add_row("Avg Win", f"[green]{_format_amount(metrics.average_win)}[/green]")
    table.add_row("Avg Loss", f"[red]{_format_amount(metrics.average_loss)}[/red]")
    table.add_row("Best Day", _colored(metrics.best_day, _format_amount(metrics.best_day)))
    table.add_row("Worst Day", _colored(metrics.worst_day, _format_amount(metrics.worst_day)))
    table.add_row("Trading Days", f"{metrics.trading_days:,}")
    table.add_row("Avg Trades / Day", f"{float(metrics.average_trades_per_day):.1f}")

    return table


def _create_stock_table(stocks: list[StockPerformance], title: str) -> Table | None:
    """Create a symbol ranking table."""
    if not stocks:
        return None

    table = Table(title=title, box=None, padding=(0, 1))

    table.add_column("Rank", justify="right", style="dim")
    table.add_column("Symbol", style="cyan")
    table.add_column("Name")
    table.add_column("Net Profit", justify="right")
    table.add_column("Trades", justify="right")
    table.add_column("Win Rate", justify="right")

    for i, stock in enumerate(stocks, 1):
        table.add_row(
            str(i),
            stock.symbol,
            stock.name,
            _colored(stock.net_profit, _format_amount(stock.net_profit)),
            f"{stock.trades:,}",
            _format_pct(stock.win_rate),
        )

    return table


def _create_trend_table(trends: TrendAnalysis) -> Table:
    table = Table(title="📈 Day of Week", box=None, padding=(0, 1))

    table.add_column("Day", style="cyan")
    table.add_column("Profit", justify="right")
    table.add_column("Trades", justify="right")
    table.add_column("Win Rate", justify="right")

    for day in trends.day_of_week:
        table.add_row(day.day, _colored(day.profit, _format_amount(day.profit)), f"{day.trades:,}", _format_pct(day.win_rate))

    return table


def _create_monthly_table(months: list[MonthlyBreakdown]) -> Table | None:
    """Create monthly breakdown table."""
    if not months:
        return None

    table = Table(title="📅 Monthly Breakdown", box=None, padding=(0, 1))

    table.add_column("Month", style="cyan")
    table.add_column("Net Profit", justify="right")
    table.add_column("Trades", justify="right")
    table.add_column("Win Rate", justify="right")
    table.add_column("Best Day", justify="right", style="green")
    table.add_column("Worst Day", justify="right", style="red")

    for month in months:
        table.add_row(
            month.month,
            _colored(month.overview.net_profit, _format_amount(month.overview.net_profit)),
            f"{month.overview.total_trades:,}",
            _format_pct(month.overview.win_rate),
            _format_amount(month.best_day.profit) if month.best_day else "—",
            _format_amount(month.worst_day.profit) if month.worst_day else "—",
        )

    return table


def display_report_summary(
    report: Report,
    detail_level: Literal["summary", "standard", "full"] = "standard",
    console: Console | None = None,
) -> None:
    """
    Display a generated report in Rich-formatted console output.

    Args:
        report: Generated report
        detail_level: Level of detail to display:
            - "summary": Overview only
            - "standard": Overview + risk, trade metrics and top performers
            - "full": Everything including trends and the monthly breakdown
        console: Rich Console instance (creates new if None)

    Example:
        >>> report = ReportBuilder(repo).build(ExportOptions())
        >>> display_report_summary(report, detail_level="full")
    """
    if console is None:
        console = Console()

    console.print()  # Blank line
    console.print(_create_overview_table(report.performance_overview))
    console.print()

    if detail_level in ["standard", "full"]:
        if report.advanced_metrics is not None:
            console.print(_create_risk_table(report.advanced_metrics.risk, report.advanced_metrics.streaks))
            console.print()
            if report.performance_overview.total_trades > 0:
                console.print(_create_trade_metrics_table(report.advanced_metrics.trade_metrics))
                console.print()

        if report.stock_analysis is not None:
            table = _create_stock_table(report.stock_analysis.top_performers, "🏆 Top Performers")
            if table:
                console.print(table)
                console.print()

    if detail_level == "full":
        if report.stock_analysis is not None:
            table = _create_stock_table(report.stock_analysis.worst_performers, "📉 Worst Performers")
            if table:
                console.print(table)
                console.print()

        if report.trend_analysis is not None:
            console.print(_create_trend_table(report.trend_analysis))
            console.print(
                f"Momentum: {_colored(report.trend_analysis.momentum_indicator, _format_amount(report.trend_analysis.momentum_indicator))}"
                f" ({report.trend_analysis.momentum_trend})"
            )
            console.print()

        if report.monthly_breakdown:
            table = _create_monthly_table(report.monthly_breakdown)
            if table:
                console.print(table)
                console.print()

    # Final summary panel
    metadata = report.metadata
    net_profit = report.performance_overview.net_profit
    summary_text = Text()
    summary_text.append("🏁 Report Complete: ", style="bold")
    summary_text.append(f"{metadata.date_range.start} to {metadata.date_range.end}", style="bold cyan")
    summary_text.append(f" | {metadata.total_records:,} trades", style="bold")
    summary_text.append(f" | net {_format_amount(net_profit)}", style=f"bold {_get_color(net_profit)}")

    console.print(Panel(summary_text, border_style="green" if net_profit >= 0 else "red"))
    console.print()
