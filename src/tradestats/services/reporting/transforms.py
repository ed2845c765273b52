"""Post-processing transforms on a built report tree.

Both transforms return a new Report; the input tree and the analytics that
produced it are never touched.
"""

from decimal import Decimal
from typing import Any, Callable

from pydantic import BaseModel

from tradestats.libraries.analytics.models import ZERO, AnalyticsModel, StockPerformance
from tradestats.services.reporting.models import Report

HUNDRED = Decimal("100")


def _rebuild(value: Any, visit: Callable[[AnalyticsModel], dict[str, Any]]) -> Any:
    """Depth-first copy of a model tree; `visit` returns field overrides for each model."""
    if isinstance(value, list):
        return [_rebuild(item, visit) for item in value]
    if not isinstance(value, BaseModel):
        return value

    updates: dict[str, Any] = {}
    for name in type(value).model_fields:
        field_value = getattr(value, name)
        if isinstance(field_value, (BaseModel, list)):
            updates[name] = _rebuild(field_value, visit)
    if isinstance(value, AnalyticsModel):
        updates.update(visit(value))
    return value.model_copy(update=updates)


def relative_scale(report: Report) -> Decimal:
    """Largest magnitude of total profit and total loss (0 for a flat report)."""
    overview = report.performance_overview
    return max(abs(overview.total_profit), abs(overview.total_loss))


def apply_relative_values(report: Report) -> Report:
    """
    Express every monetary field as a percentage of the largest P/L total.

    Counts, win rates and dimensionless ratios are unchanged. No-op when
    both total profit and total loss are 0.

    Example:
        >>> relative = apply_relative_values(report)  # total_profit 2000, total_loss -500
        >>> relative.performance_overview.net_profit
        Decimal('75.00')
    """
    scale = relative_scale(report)
    if scale == ZERO:
        return report

    def scale_fields(model: AnalyticsModel) -> dict[str, Any]:
        updates = {}
        for name in model.relative_fields:
            value = getattr(model, name)
            if isinstance(value, Decimal) and value.is_finite():
                updates[name] = value / scale * HUNDRED
        return updates

    return _rebuild(report, scale_fields)


def mask_symbol_names(report: Report) -> Report:
    """
    Replace symbol codes and names with "Code N" / "Symbol N".

    Numbering follows first appearance while walking the report (stock
    rankings first, then the monthly breakdown); a symbol keeps the same
    placeholder everywhere in the report.
    """
    placeholders: dict[str, int] = {}

    def mask(model: AnalyticsModel) -> dict[str, Any]:
        if not isinstance(model, StockPerformance):
            return {}
        number = placeholders.setdefault(model.symbol, len(placeholders) + 1)
        return {"symbol": f"Code {number}", "name": f"Symbol {number}"}

    return _rebuild(report, mask)
