from __future__ import annotations

from client.errors import TransportError
from client.fetcher import FetchOutcome, ProjectionFetcher
from client.models import DailyProjection
from cashflow.axis import AxisRange
from cashflow.pipeline import ProjectionState, build_view, empty_view


class StubProjectionApi:
    def __init__(self, *script):
        self.script = list(script)
        self.requests = []

    def get_cashflow_projection(self, months, *, only_changes=False):
        self.requests.append((months, only_changes))
        nxt = self.script.pop(0)
        if isinstance(nxt, Exception):
            raise nxt
        return nxt


def _records(sample_records):
    return [DailyProjection.model_validate(r) for r in sample_records]


def test_fetch_success(sample_records):
    api = StubProjectionApi(_records(sample_records))
    fetcher = ProjectionFetcher(api)

    outcome = fetcher.fetch(12, only_changes=True)

    assert outcome.ok
    assert outcome.ticket == 1
    assert len(outcome.projections) == 3
    assert api.requests == [(12, True)]


def test_fetch_error_is_captured():
    fetcher = ProjectionFetcher(StubProjectionApi(TransportError("Request failed: refused")))
    outcome = fetcher.fetch(6)
    assert not outcome.ok
    assert outcome.projections is None
    assert "refused" in outcome.error


def test_tickets_increase():
    fetcher = ProjectionFetcher(StubProjectionApi([], []))
    first = fetcher.fetch(6)
    second = fetcher.fetch(12)
    assert (first.ticket, second.ticket) == (1, 2)
    assert fetcher.latest_ticket == 2
    assert not fetcher.is_current(first)
    assert fetcher.is_current(second)


def test_state_applies_latest_outcome(sample_records):
    fetcher = ProjectionFetcher(StubProjectionApi(_records(sample_records)))
    state = ProjectionState()

    assert state.apply(fetcher.fetch(6), fetcher)
    assert state.loaded
    assert state.error is None
    assert state.view.monthly["balance"].tolist() == [450000, 650000]
    assert state.view.axis == AxisRange(lower=430000, upper=670000)
    assert state.view.totals.income == 500000
    assert state.view.totals.expense == 150000
    assert state.view.totals.net == 350000


def test_stale_outcome_is_discarded(sample_records):
    fetcher = ProjectionFetcher(StubProjectionApi(_records(sample_records), []))
    state = ProjectionState()

    old = fetcher.fetch(6)
    new = fetcher.fetch(12)

    # the newer request resolves first, the older one arrives late
    assert state.apply(new, fetcher)
    assert not state.apply(old, fetcher)
    assert state.view.is_empty
    assert state.applied_ticket == new.ticket


def test_failed_fetch_keeps_previous_view(sample_records):
    fetcher = ProjectionFetcher(StubProjectionApi(_records(sample_records), TransportError("down")))
    state = ProjectionState()
    state.apply(fetcher.fetch(6), fetcher)
    before = state.view

    state.apply(fetcher.fetch(12), fetcher)

    assert state.view is before
    assert state.error == "down"
    assert state.loaded


def test_failed_first_fetch_leaves_empty_view():
    fetcher = ProjectionFetcher(StubProjectionApi(TransportError("down")))
    state = ProjectionState()
    state.apply(fetcher.fetch(6), fetcher)

    assert state.view.is_empty
    assert state.view.axis is None
    assert not state.loaded
    assert state.error == "down"


def test_success_after_error_clears_message(sample_records):
    fetcher = ProjectionFetcher(StubProjectionApi(TransportError("down"), _records(sample_records)))
    state = ProjectionState()
    state.apply(fetcher.fetch(6), fetcher)
    state.apply(fetcher.fetch(6), fetcher)
    assert state.error is None
    assert not state.view.is_empty


def test_outcome_for_unknown_ticket_is_stale():
    fetcher = ProjectionFetcher(StubProjectionApi())
    assert not ProjectionState().apply(FetchOutcome(ticket=7, months=6, only_changes=False), fetcher)


def test_build_view_and_empty_view(sample_daily):
    view = build_view(sample_daily)
    assert not view.is_empty
    assert len(view.monthly) == 2

    empty = empty_view()
    assert empty.is_empty
    assert empty.axis is None
    assert empty.totals.net == 0
