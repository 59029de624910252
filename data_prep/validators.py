"""
Sanity checks on projection sequences received from the backend.

The aggregator and exporter do not depend on these passing; the cashflow page
shows warnings so upstream data problems are visible rather than silent.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List

import pandas as pd

from core.schema import MONEY_COLUMNS
from core.utils import to_calendar_dates

_YEAR_MONTH_RE = re.compile(r"^\d{4}-\d{2}$")


def validate_year_month(value: str) -> bool:
    """'YYYY-MM' with year 1900-2100 and month 1-12."""
    if not isinstance(value, str) or not _YEAR_MONTH_RE.match(value):
        return False
    year, month = (int(p) for p in value.split("-"))
    return 1900 <= year <= 2100 and 1 <= month <= 12


@dataclass
class ValidationResult:
    """Collects all validation warnings/errors for a projection sequence."""
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    def summary(self) -> str:
        lines = []
        if self.errors:
            lines.append(f"ERRORS ({len(self.errors)}):")
            for e in self.errors:
                lines.append(f"  ✗ {e}")
        if self.warnings:
            lines.append(f"WARNINGS ({len(self.warnings)}):")
            for w in self.warnings:
                lines.append(f"  ⚠ {w}")
        if not lines:
            lines.append("✓ All checks passed.")
        return "\n".join(lines)


def validate_projections(daily: pd.DataFrame) -> ValidationResult:
    """
    Run all checks on a daily projection frame.
    An empty frame is valid (the page renders its empty state).
    """
    result = ValidationResult()

    missing = [c for c in ("date",) + MONEY_COLUMNS if c not in daily.columns]
    if missing:
        result.errors.append(f"Missing required columns: {missing}")
        return result

    if len(daily) == 0:
        return result

    # --- Dates ---
    dates = to_calendar_dates(daily["date"])
    n_bad = int(dates.isna().sum())
    if n_bad > 0:
        result.errors.append(f"{n_bad} rows have an unparseable date.")

    n_dup = int(daily["date"].duplicated().sum())
    if n_dup > 0:
        result.warnings.append(f"{n_dup} duplicate dates found.")

    valid = pd.to_datetime(dates.dropna())
    if not valid.is_monotonic_increasing:
        result.warnings.append("Dates are not in ascending order.")

    # --- Amounts ---
    for col in ("income", "expense"):
        n_neg = int((daily[col] < 0).sum())
        if n_neg > 0:
            result.errors.append(f"{n_neg} rows have negative {col}.")

    return result
