"""
Monthly roll-up of the daily cashflow projection.

One row per calendar month present in the input:
  balance  = balance of the month's latest record (a snapshot, not a sum)
  income   = sum of the month's daily income
  expense  = sum of the month's daily expense

The backend's running balance is never recomputed here, only re-bucketed.
Everything stays in integer minor units.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

import pandas as pd

from core.schema import MONTHLY_COLUMNS
from core.utils import format_year_month, require_columns, to_calendar_dates, to_instants


@dataclass(frozen=True)
class MonthlySummaryPoint:
    year_month: str
    label: str
    balance: int
    income: int
    expense: int
    last_date: str


def empty_monthly_frame() -> pd.DataFrame:
    df = pd.DataFrame({c: pd.Series(dtype="object") for c in MONTHLY_COLUMNS})
    for c in ("balance", "income", "expense"):
        df[c] = df[c].astype("int64")
    return df


def aggregate_monthly(daily: pd.DataFrame, *, date_col: str = "date") -> pd.DataFrame:
    """
    Aggregate daily projection rows into monthly summary rows.

    Parameters
    ----------
    daily : pd.DataFrame
        Output of data_prep.projections_to_frame(). Any row order; days with
        no movement may be absent.
    date_col : str
        Column holding the ISO date string.

    Returns
    -------
    DataFrame with columns year_month, label, balance, income, expense,
    last_date, ascending by year_month. Empty input gives an empty frame.
    """
    if len(daily) == 0:
        return empty_monthly_frame()
    require_columns(daily, [date_col, "income", "expense", "balance"])

    df = daily[[date_col, "income", "expense", "balance"]].reset_index(drop=True)
    df["_day"] = pd.to_datetime(to_calendar_dates(df[date_col]))
    df["year_month"] = df["_day"].dt.strftime("%Y-%m")
    df["_at"] = pd.to_datetime(to_instants(df[date_col]), utc=True)

    grouped = df.groupby("year_month", sort=True)
    sums = grouped[["income", "expense"]].sum()

    # months follow the date as written; "latest" compares real instants.
    # idxmax keeps the first row among equal instants.
    last_rows = df.loc[grouped["_at"].idxmax()]
    last = last_rows.set_index("year_month")[["balance", date_col]]

    out = sums.join(last).reset_index()
    out = out.rename(columns={date_col: "last_date"})
    out["label"] = out["year_month"].map(format_year_month)
    for c in ("balance", "income", "expense"):
        out[c] = out[c].astype("int64")

    out = out.sort_values("year_month").reset_index(drop=True)
    return out.loc[:, list(MONTHLY_COLUMNS)]


def summary_points(monthly: pd.DataFrame) -> List[MonthlySummaryPoint]:
    """Monthly frame -> list of MonthlySummaryPoint, in frame order."""
    return [
        MonthlySummaryPoint(
            year_month=str(r.year_month),
            label=str(r.label),
            balance=int(r.balance),
            income=int(r.income),
            expense=int(r.expense),
            last_date=str(r.last_date),
        )
        for r in monthly.itertuples(index=False)
    ]
