"""
CSV export of the raw daily projection (not the monthly roll-up).

Amounts are written in major units as plain decimal text (no separators,
no currency sign) so spreadsheets can parse them.
"""

from __future__ import annotations

from datetime import date
from typing import Optional

import pandas as pd

from core.logging_setup import get_logger
from core.schema import CSV_FILENAME_PATTERN, CSV_HEADER
from core.utils import minor_to_major_text, require_columns

log = get_logger(__name__)

NO_DATA_MESSAGE = "エクスポートするデータがありません"


class EmptyExportError(ValueError):
    """Raised instead of producing a header-only file."""


def projections_to_csv(daily: pd.DataFrame) -> str:
    """Daily frame -> CSV text with the fixed 日付,収入,支出,残高 header."""
    if len(daily) == 0:
        log.info("CSV export refused: no projection rows")
        raise EmptyExportError(NO_DATA_MESSAGE)
    require_columns(daily, ["date", "income", "expense", "balance"])

    date_h, income_h, expense_h, balance_h = CSV_HEADER
    out = pd.DataFrame({
        date_h: daily["date"].astype(str).to_numpy(),
        income_h: daily["income"].map(minor_to_major_text).to_numpy(),
        expense_h: daily["expense"].map(minor_to_major_text).to_numpy(),
        balance_h: daily["balance"].map(minor_to_major_text).to_numpy(),
    })
    return out.to_csv(index=False, lineterminator="\n")


def projections_to_csv_bytes(daily: pd.DataFrame) -> bytes:
    return projections_to_csv(daily).encode("utf-8")


def export_filename(today: Optional[date] = None) -> str:
    """cashflow_projection_<YYYY-MM-DD>.csv"""
    return CSV_FILENAME_PATTERN.format(date=(today or date.today()).isoformat())
