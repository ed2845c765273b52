"""
Unit tests for tradestats.cli.commands.report module.

Tests cover:
- Report generation from a trade file
- CLI option overrides on top of the options file
- Error handling for missing trade files and invalid windows
"""

import json

import pytest
from click.testing import CliRunner

from tradestats.cli.commands.report import report_command
from tradestats.cli.main import main
from tradestats.system.config import CONFIG_ENV_VAR

TRADES_CSV = """id,date,symbol_code,symbol_name,trade_type,realized_profit_loss
1,2025-01-06,7203,Toyota,現物売,1000
2,2025-01-06,6758,Sony,返済売,-400
3,2025-01-07,7203,Toyota,現物売,200
4,2025-02-03,9984,SoftBank,返済買,-300
5,2025-02-04,6758,Sony,現物売,2500
"""


@pytest.fixture
def cli_runner():
    """Fixture providing Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def workspace(tmp_path, monkeypatch):
    """Empty working directory with a trade file and no system config."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    (tmp_path / "trades.csv").write_text(TRADES_CSV, encoding="utf-8")
    return tmp_path


class TestReportCommand:
    """Test report command execution."""

    def test_writes_report(self, cli_runner, workspace):
        # Arrange
        output = workspace / "out" / "report.json"

        # Act
        result = cli_runner.invoke(report_command, ["--trades", "trades.csv", "--output", str(output)])

        # Assert
        assert result.exit_code == 0, result.output
        assert "Report written" in result.output
        payload = json.loads(output.read_text(encoding="utf-8"))
        assert payload["performanceOverview"]["totalTrades"] == 5
        assert payload["performanceOverview"]["netProfit"] == 3000.0
        assert payload["monthlyBreakdown"] is None

    def test_default_output_location(self, cli_runner, workspace):
        # Act
        result = cli_runner.invoke(report_command, ["--trades", "trades.csv"])

        # Assert
        assert result.exit_code == 0, result.output
        written = list((workspace / "output" / "reports").glob("trade_report_*.json"))
        assert len(written) == 1

    def test_flags_override_defaults(self, cli_runner, workspace):
        # Act
        result = cli_runner.invoke(
            report_command,
            ["-t", "trades.csv", "--no-trends", "--monthly", "--mask", "--output", "r.json", "--detail", "full"],
        )

        # Assert
        assert result.exit_code == 0, result.output
        payload = json.loads((workspace / "r.json").read_text(encoding="utf-8"))
        assert payload["trendAnalysis"] is None
        assert [m["month"] for m in payload["monthlyBreakdown"]] == ["2025-01", "2025-02"]
        assert payload["stockAnalysis"]["topPerformers"][0]["symbol"] == "Code 1"
        assert "monthlyBreakdown" in payload["metadata"]["sections"]

    def test_start_end_imply_custom_range(self, cli_runner, workspace):
        # Act
        result = cli_runner.invoke(
            report_command,
            ["-t", "trades.csv", "--start", "2025-01-01", "--end", "2025-01-31", "--output", "r.json"],
        )

        # Assert
        assert result.exit_code == 0, result.output
        payload = json.loads((workspace / "r.json").read_text(encoding="utf-8"))
        assert payload["metadata"]["dateRangeOption"] == "custom"
        assert payload["metadata"]["dateRange"] == {"start": "2025-01-01", "end": "2025-01-31"}
        assert payload["performanceOverview"]["totalTrades"] == 3

    def test_options_file_with_cli_override(self, cli_runner, workspace):
        # Arrange
        (workspace / "options.yaml").write_text(
            "report:\n  include_stock_analysis: false\n  include_advanced_metrics: false\n", encoding="utf-8"
        )

        # Act
        result = cli_runner.invoke(
            report_command,
            ["-t", "trades.csv", "-o", "options.yaml", "--stocks", "--output", "r.json"],
        )

        # Assert
        assert result.exit_code == 0, result.output
        payload = json.loads((workspace / "r.json").read_text(encoding="utf-8"))
        assert payload["stockAnalysis"] is not None
        assert payload["advancedMetrics"] is None

    def test_trade_path_from_system_config(self, cli_runner, workspace):
        # Arrange
        (workspace / "config").mkdir()
        (workspace / "config" / "system.yaml").write_text(
            "trades:\n  path: trades.csv\nreporting:\n  output_dir: reports\n", encoding="utf-8"
        )

        # Act
        result = cli_runner.invoke(report_command, [])

        # Assert
        assert result.exit_code == 0, result.output
        assert len(list((workspace / "reports").glob("*.json"))) == 1


class TestReportCommandErrors:
    """Test error handling."""

    def test_missing_trade_file(self, cli_runner, workspace):
        # Act
        result = cli_runner.invoke(report_command, ["--trades", "missing.csv", "--output", "r.json"])

        # Assert
        assert result.exit_code == 1
        assert "Report failed" in result.output
        assert "not found" in result.output
        assert not (workspace / "r.json").exists()

    def test_reversed_custom_range(self, cli_runner, workspace):
        # Act
        result = cli_runner.invoke(
            report_command,
            ["-t", "trades.csv", "--start", "2025-02-01", "--end", "2025-01-01", "--output", "r.json"],
        )

        # Assert
        assert result.exit_code == 1
        assert "after end" in result.output

    def test_custom_range_without_bounds(self, cli_runner, workspace):
        # Act
        result = cli_runner.invoke(report_command, ["-t", "trades.csv", "--range", "custom"])

        # Assert
        assert result.exit_code == 1
        assert "Report failed" in result.output

    def test_invalid_options_file(self, cli_runner, workspace):
        # Arrange
        (workspace / "options.yaml").write_text("report:\n  include_charts: true\n", encoding="utf-8")

        # Act
        result = cli_runner.invoke(report_command, ["-t", "trades.csv", "-o", "options.yaml"])

        # Assert
        assert result.exit_code == 1
        assert "Report failed" in result.output

    def test_unknown_system_config_key(self, cli_runner, workspace):
        # Arrange
        (workspace / "config").mkdir()
        (workspace / "config" / "system.yaml").write_text("reporting:\n  foo: 1\n", encoding="utf-8")

        # Act
        result = cli_runner.invoke(report_command, ["-t", "trades.csv", "--output", "r.json"])

        # Assert
        assert result.exit_code == 1
        assert "Report failed" in result.output
        assert "section 'reporting'" in result.output
        assert not (workspace / "r.json").exists()

    def test_malformed_trade_row(self, cli_runner, workspace):
        # Arrange
        (workspace / "bad.csv").write_text("date,realized_profit_loss\n2025-01-01,abc\n", encoding="utf-8")

        # Act
        result = cli_runner.invoke(report_command, ["-t", "bad.csv"])

        # Assert
        assert result.exit_code == 1
        assert "row 1" in result.output


class TestMainGroup:
    def test_report_registered(self, cli_runner):
        result = cli_runner.invoke(main, ["--help"])

        assert result.exit_code == 0
        assert "report" in result.output

    def test_version(self, cli_runner):
        result = cli_runner.invoke(main, ["--version"])

        assert result.exit_code == 0
