from __future__ import annotations

from dataclasses import dataclass

import pandas as pd


@dataclass(frozen=True)
class CashflowTotals:
    """Horizon-wide sums over the raw daily sequence, minor units."""
    income: int
    expense: int

    @property
    def net(self) -> int:
        return self.income - self.expense


def compute_totals(daily: pd.DataFrame) -> CashflowTotals:
    if len(daily) == 0:
        return CashflowTotals(income=0, expense=0)
    return CashflowTotals(
        income=int(daily["income"].sum()),
        expense=int(daily["expense"].sum()),
    )
