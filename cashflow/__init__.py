"""
Cashflow projection core — monthly aggregation, axis range, CSV export, charting.
"""

from .aggregator import MonthlySummaryPoint, aggregate_monthly, summary_points
from .axis import AxisRange, compute_axis_range
from .export import EmptyExportError, export_filename, projections_to_csv
from .totals import CashflowTotals, compute_totals

__all__ = [
    "MonthlySummaryPoint",
    "aggregate_monthly",
    "summary_points",
    "AxisRange",
    "compute_axis_range",
    "EmptyExportError",
    "export_filename",
    "projections_to_csv",
    "CashflowTotals",
    "compute_totals",
]
