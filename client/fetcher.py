"""
Projection fetcher with last-request-wins.

Each fetch takes a ticket from a monotonic counter. Only the outcome holding
the newest ticket may be applied to the view; older outcomes that resolve
late are discarded by ``ProjectionState.apply``.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass
from typing import List, Optional

from core.logging_setup import get_logger

from .errors import ApiError
from .models import DailyProjection

log = get_logger(__name__)


@dataclass(frozen=True)
class FetchOutcome:
    ticket: int
    months: int
    only_changes: bool
    projections: Optional[List[DailyProjection]] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class ProjectionFetcher:
    def __init__(self, api):
        self._api = api
        self._counter = itertools.count(1)
        self._latest = 0

    @property
    def latest_ticket(self) -> int:
        return self._latest

    def next_ticket(self) -> int:
        self._latest = next(self._counter)
        return self._latest

    def fetch(self, months: int, *, only_changes: bool = False) -> FetchOutcome:
        ticket = self.next_ticket()
        try:
            projections = self._api.get_cashflow_projection(months, only_changes=only_changes)
        except ApiError as exc:
            log.warning("Projection fetch #%d (%d months) failed: %s", ticket, months, exc)
            return FetchOutcome(ticket, months, only_changes, error=str(exc))
        log.debug("Projection fetch #%d returned %d days", ticket, len(projections))
        return FetchOutcome(ticket, months, only_changes, projections=projections)

    def is_current(self, outcome: FetchOutcome) -> bool:
        return outcome.ticket == self._latest
