"""Report serialization and JSON export.

The wire format cannot carry IEEE infinity, so infinite Decimals (profit
factor with no losses) become null here and only here. Finite Decimals
become JSON numbers, dates ISO-8601 strings and timestamps RFC3339 with Z.
"""

import json
from datetime import date, datetime, timezone
from decimal import Decimal
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any

import jsonschema
from jsonschema import Draft202012Validator, FormatChecker

from tradestats.services.reporting.models import Report
from tradestats.system import LoggerFactory

logger = LoggerFactory.get_logger()

# Schema package path (single source of truth for imports)
SCHEMA_PACKAGE = "tradestats.contracts.schemas"
REPORT_SCHEMA = "report.v1.json"


class ReportSchemaError(ValueError):
    """Serialized report does not satisfy the report contract."""


@lru_cache(maxsize=8)
def load_report_schema(schema_name: str = REPORT_SCHEMA) -> Draft202012Validator:
    """
    Load and compile the report JSON Schema validator (cached).

    Raises:
        FileNotFoundError: If the schema file is not bundled
    """
    try:
        schema_file = resources.files(SCHEMA_PACKAGE).joinpath(schema_name)
        with schema_file.open("r", encoding="utf-8") as f:
            schema = json.load(f)
    except FileNotFoundError:
        raise FileNotFoundError(f"Schema not found: {schema_name} in package {SCHEMA_PACKAGE}")

    return Draft202012Validator(schema, format_checker=FormatChecker())


def _to_wire(value: Any) -> Any:
    if isinstance(value, dict):
        return {key: _to_wire(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_wire(item) for item in value]
    if isinstance(value, Decimal):
        return float(value) if value.is_finite() else None
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.isoformat().replace("+00:00", "Z")
    if isinstance(value, date):
        return value.isoformat()
    return value


def report_to_dict(report: Report) -> dict[str, Any]:
    """
    Convert a report to a JSON-ready dict with camelCase keys.

    Example:
        >>> payload = report_to_dict(report)
        >>> payload["performanceOverview"]["profitFactor"] is None  # no losing trades
        True
    """
    return _to_wire(report.model_dump(by_alias=True))


def validate_report(payload: dict[str, Any]) -> None:
    """
    Validate a serialized report against the bundled contract.

    Raises:
        ReportSchemaError: With the failing path and message
    """
    validator = load_report_schema()
    try:
        validator.validate(payload)
    except jsonschema.ValidationError as e:
        raise ReportSchemaError(
            f"Report validation failed against {REPORT_SCHEMA}: {e.message}\n"
            f"Path: {list(e.path)}\n"
            f"Schema path: {list(e.schema_path)}"
        ) from e


def write_json_report(report: Report, output_path: Path | str, validate: bool = True) -> Path:
    """
    Serialize, optionally validate, and write a report as JSON.

    Args:
        report: Report to export
        output_path: Destination file (parent directories are created)
        validate: Check the payload against report.v1.json first

    Returns:
        Path written

    Raises:
        ReportSchemaError: Payload violates the contract (nothing is written)
    """
    payload = report_to_dict(report)
    if validate:
        validate_report(payload)

    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, ensure_ascii=False)

    logger.info("report.written", path=str(path), total_records=report.metadata.total_records)
    return path
