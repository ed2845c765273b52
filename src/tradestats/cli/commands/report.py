"""Report generation command."""

import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Literal, Optional, cast

import click
import yaml
from pydantic import ValidationError
from rich.console import Console

from tradestats.services.reporting import (
    ExportOptions,
    ReportBuilder,
    ReportConfigurationError,
    ReportSchemaError,
    display_report_summary,
    write_json_report,
)
from tradestats.services.trades import FileTradeRepository, TradeRepositoryError
from tradestats.system import LoggerFactory
from tradestats.system.config import SystemConfig, reload_system_config

console = Console()


def _load_options(options_file: Optional[Path], config: SystemConfig, overrides: dict[str, Any]) -> ExportOptions:
    """Options file (or the configured default) with CLI overrides on top."""
    source = options_file or config.reporting.default_options
    base = ExportOptions.from_yaml(source) if source else ExportOptions()

    values = base.model_dump()
    values.update({key: value for key, value in overrides.items() if value is not None})
    if (overrides.get("custom_start") or overrides.get("custom_end")) and overrides.get("date_range") is None:
        values["date_range"] = "custom"
    return ExportOptions(**values)


def _default_output_path(config: SystemConfig) -> Path:
    timestamp = datetime.now().strftime(config.reporting.timestamp_format)
    return Path(config.reporting.output_dir) / config.reporting.filename_template.format(timestamp=timestamp)


@click.command("report")
@click.option(
    "--trades",
    "-t",
    "trades_file",
    type=click.Path(path_type=Path),
    help="Trade file (CSV or JSON). Defaults to trades.path in system.yaml",
)
@click.option(
    "--range",
    "-r",
    "date_range",
    type=click.Choice(["all", "year", "quarter", "month", "custom"]),
    help="Trade window to analyze",
)
@click.option("--start", type=click.DateTime(formats=["%Y-%m-%d"]), help="Custom window start (YYYY-MM-DD)")
@click.option("--end", type=click.DateTime(formats=["%Y-%m-%d"]), help="Custom window end (YYYY-MM-DD)")
@click.option("--depth", type=click.Choice(["top5", "top10", "all"]), help="Entries per symbol ranking")
@click.option("--advanced/--no-advanced", default=None, help="Include risk, streak and trade metrics")
@click.option("--stocks/--no-stocks", default=None, help="Include per-symbol rankings")
@click.option("--trends/--no-trends", default=None, help="Include calendar trend analysis")
@click.option("--monthly/--no-monthly", default=None, help="Include the monthly breakdown")
@click.option("--mask", is_flag=True, default=None, help="Replace symbols with placeholders")
@click.option("--relative", is_flag=True, default=None, help="Report money as % of the largest P/L total")
@click.option(
    "--options",
    "-o",
    "options_file",
    type=click.Path(exists=True, path_type=Path),
    help="Export options file (YAML)",
)
@click.option("--output", type=click.Path(path_type=Path), help="Output JSON path")
@click.option(
    "--detail",
    type=click.Choice(["summary", "standard", "full"]),
    default="standard",
    show_default=True,
    help="Console summary detail level",
)
@click.option(
    "--log-level",
    "-l",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Set logging level",
)
def report_command(
    trades_file: Optional[Path],
    date_range: Optional[str],
    start: Optional[datetime],
    end: Optional[datetime],
    depth: Optional[str],
    advanced: Optional[bool],
    stocks: Optional[bool],
    trends: Optional[bool],
    monthly: Optional[bool],
    mask: Optional[bool],
    relative: Optional[bool],
    options_file: Optional[Path],
    output: Optional[Path],
    detail: str,
    log_level: Optional[str],
):
    """
    Generate a trading performance report.

    Reads trades, runs the analytics and writes the report as JSON. CLI
    options override the options file without modifying it.

    \b
    Examples:
        # Whole history with defaults
        tradestats report --trades data/trades.csv

        # Current quarter, top 10 rankings, masked symbols
        tradestats report -t data/trades.csv -r quarter --depth top10 --mask

        # Custom window with the monthly breakdown
        tradestats report -t data/trades.json \\
            --start 2025-01-01 --end 2025-06-30 --monthly

    \b
    Output:
        - Console summary of the report
        - JSON report (see reporting.output_dir in config/system.yaml)
    """
    try:
        console.rule("[bold blue]Trade Report[/bold blue]")
        console.print()

        config = reload_system_config()

        if log_level:
            # Type cast since click already validated the choice
            level = cast(Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], log_level.upper())
            config.logging.level = level
        LoggerFactory.configure(config.logging.to_logger_config())

        options = _load_options(
            options_file,
            config,
            {
                "date_range": date_range,
                "custom_start": start.date() if start else None,
                "custom_end": end.date() if end else None,
                "stock_analysis_depth": depth,
                "include_advanced_metrics": advanced,
                "include_stock_analysis": stocks,
                "include_trend_analysis": trends,
                "include_monthly_breakdown": monthly,
                "mask_stock_names": True if mask else None,
                "use_relative_values": True if relative else None,
            },
        )

        trades_path = trades_file or Path(config.trades.path)
        console.print(f"  Trades: [yellow]{trades_path}[/yellow]")
        console.print(f"  Range: [yellow]{options.date_range}[/yellow]")
        console.print(f"  Sections: [magenta]{', '.join(options.sections)}[/magenta]")
        console.print()

        repository = FileTradeRepository(trades_path, encoding=config.trades.encoding)
        report = ReportBuilder(repository).build(options)

        detail_level = cast(Literal["summary", "standard", "full"], detail)
        display_report_summary(report, detail_level=detail_level, console=console)

        output_path = write_json_report(
            report,
            output or _default_output_path(config),
            validate=config.reporting.validate_schema,
        )
        console.print(f"[bold green]✓ Report written:[/bold green] {output_path}")

    except (
        ReportConfigurationError,
        TradeRepositoryError,
        ReportSchemaError,
        ValidationError,
        ValueError,
        yaml.YAMLError,
        OSError,
    ) as e:
        console.print()
        console.print(f"[bold red]✗ Report failed:[/bold red] {e}")
        sys.exit(1)
