from __future__ import annotations

from typing import Tuple

# Columns of a daily projection frame (see data_prep.loader).
# Money columns are integer minor units (value / 100 = yen).
PROJECTION_COLUMNS: Tuple[str, ...] = (
    "date",
    "income",
    "expense",
    "balance",
    "details",
)

MONEY_COLUMNS: Tuple[str, ...] = ("income", "expense", "balance")

# One row per calendar month, produced by cashflow.aggregator.
MONTHLY_COLUMNS: Tuple[str, ...] = (
    "year_month",
    "label",
    "balance",
    "income",
    "expense",
    "last_date",
)

# Balance axis: bounds snap to multiples of AXIS_STEP, padded by
# AXIS_PADDING_RATIO of the range (AXIS_MIN_PADDING when the range is zero).
AXIS_STEP: int = 10_000
AXIS_MIN_PADDING: int = 10_000
AXIS_PADDING_RATIO: float = 0.1

# CSV export
CSV_HEADER: Tuple[str, ...] = ("日付", "収入", "支出", "残高")
CSV_FILENAME_PATTERN: str = "cashflow_projection_{date}.csv"
CSV_MIME_TYPE: str = "text/csv;charset=utf-8"
