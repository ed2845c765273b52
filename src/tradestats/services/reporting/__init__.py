"""Reporting service: report assembly, transforms and export."""

from tradestats.services.reporting.config import ExportOptions, ReportConfigurationError
from tradestats.services.reporting.formatters import display_report_summary
from tradestats.services.reporting.models import Report
from tradestats.services.reporting.service import ReportBuilder, calculate_monthly_breakdown, generate_report
from tradestats.services.reporting.transforms import apply_relative_values, mask_symbol_names
from tradestats.services.reporting.writers import ReportSchemaError, report_to_dict, validate_report, write_json_report

__all__ = [
    "ReportBuilder",
    "generate_report",
    "calculate_monthly_breakdown",
    "ExportOptions",
    "ReportConfigurationError",
    "Report",
    "apply_relative_values",
    "mask_symbol_names",
    "display_report_summary",
    "report_to_dict",
    "validate_report",
    "write_json_report",
    "ReportSchemaError",
]
