"""
Recompute pipeline for the cashflow and dashboard views.

A view is a pure function of the latest daily sequence: every successful
fetch rebuilds aggregation, axis and totals from scratch. ``ProjectionState``
is the only mutable piece and only changes on a discrete fetch outcome.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

import pandas as pd

from client.fetcher import FetchOutcome, ProjectionFetcher
from core.logging_setup import get_logger
from data_prep.loader import empty_projection_frame, projections_to_frame

from .aggregator import aggregate_monthly
from .axis import AxisRange, compute_axis_range
from .totals import CashflowTotals, compute_totals

log = get_logger(__name__)


@dataclass(frozen=True, eq=False)
class ProjectionView:
    daily: pd.DataFrame
    monthly: pd.DataFrame
    axis: Optional[AxisRange]
    totals: CashflowTotals

    @property
    def is_empty(self) -> bool:
        return len(self.daily) == 0


def build_view(daily: pd.DataFrame) -> ProjectionView:
    monthly = aggregate_monthly(daily)
    axis = compute_axis_range(monthly) if len(monthly) > 0 else None
    return ProjectionView(daily=daily, monthly=monthly, axis=axis, totals=compute_totals(daily))


def empty_view() -> ProjectionView:
    return build_view(empty_projection_frame())


@dataclass
class ProjectionState:
    view: ProjectionView = field(default_factory=empty_view)
    error: Optional[str] = None
    loaded: bool = False  # at least one fetch succeeded
    applied_ticket: int = 0

    def apply(self, outcome: FetchOutcome, fetcher: ProjectionFetcher) -> bool:
        """
        Apply a fetch outcome. Returns False when the outcome is stale.

        A failed fetch keeps the previous view (possibly empty) and records
        the error for the page to show.
        """
        if not fetcher.is_current(outcome):
            log.info(
                "Discarding stale projection result #%d (latest is #%d)",
                outcome.ticket, fetcher.latest_ticket,
            )
            return False

        self.applied_ticket = outcome.ticket
        if not outcome.ok:
            self.error = outcome.error
            return True

        self.view = build_view(projections_to_frame(outcome.projections or []))
        self.error = None
        self.loaded = True
        return True
