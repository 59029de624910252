"""Page-level behaviour of the Streamlit script, driven through AppTest.

The backend is replaced by ``StubApi`` seeded into ``st.session_state``;
the script only builds a real ``ApiClient`` when none is stored there.
"""

from __future__ import annotations

import time
from pathlib import Path
from typing import Dict, List

import pytest
from streamlit.testing.v1 import AppTest

from client.errors import TransportError
from client.models import BankAccount, DailyProjection, DashboardSummary, User

APP_PATH = Path(__file__).resolve().parents[1] / "app" / "streamlit_app.py"

DAY = DailyProjection(date="2024-01-10", income=500000, expense=120000, balance=880000)


class StubApi:
    """Scripted backend. ``projections`` maps a horizon to results served in
    order; the last one repeats. An exception instance is raised instead."""

    def __init__(self, projections: Dict[int, list]):
        self.projections = {months: list(results) for months, results in projections.items()}
        self.calls: List[tuple] = []
        self.accounts: List[BankAccount] = []

    def get_cashflow_projection(self, months, *, only_changes=False):
        self.calls.append((months, only_changes))
        script = self.projections.get(months, [[]])
        result = script.pop(0) if len(script) > 1 else script[0]
        if isinstance(result, Exception):
            raise result
        return result

    def get_dashboard_summary(self):
        return DashboardSummary(total_balance=100000, monthly_income=0, monthly_expense=0, total_assets=0)

    def get_bank_accounts(self):
        return list(self.accounts)

    def create_bank_account(self, payload):
        account = BankAccount(id=f"b{len(self.accounts) + 1}", **payload)
        self.accounts.append(account)
        return account


def _app(api: StubApi) -> AppTest:
    at = AppTest.from_file(str(APP_PATH), default_timeout=30)
    at.session_state["auth_token"] = "token-abc"
    at.session_state["user_data"] = User(id="u1", email="taro@example.com", name="Taro")
    at.session_state["auth_expires_at"] = time.time() + 3600
    at.session_state["api_client"] = api
    return at


def _open(at: AppTest, page: str) -> AppTest:
    at.run()
    return at.sidebar.radio[0].set_value(page).run()


def _metric(at: AppTest, label: str) -> str:
    return next(m.value for m in at.metric if m.label == label)


def _errors(at: AppTest) -> List[str]:
    return [e.value for e in at.error]


# ---------------------------------------------------------------------------
# Dashboard
# ---------------------------------------------------------------------------
def test_dashboard_recovers_after_failed_trend_fetch():
    api = StubApi({24: [TransportError("backend down"), [DAY]]})
    at = _app(api)

    at.run()
    assert any("backend down" in e for e in _errors(at))

    at.run()
    assert api.calls == [(24, False), (24, False)]
    assert _errors(at) == []
    assert "表示するデータがありません" not in [i.value for i in at.info]


def test_dashboard_does_not_refetch_unchanged_trend():
    api = StubApi({24: [[DAY]]})
    at = _app(api)

    at.run()
    at.run()

    assert api.calls == [(24, False)]


def test_dashboard_reload_button_refetches():
    api = StubApi({24: [[DAY]]})
    at = _app(api)

    at.run()
    at.button(key="dashboard_reload").click().run()

    assert api.calls == [(24, False), (24, False)]


# ---------------------------------------------------------------------------
# Cashflow
# ---------------------------------------------------------------------------
def test_cashflow_failed_reload_keeps_previous_totals():
    api = StubApi({6: [[DAY], TransportError("timeout")]})
    at = _open(_app(api), "キャッシュフロー")
    assert _metric(at, "期間収入") == "￥5,000"

    at.button(key="cashflow_reload").click().run()

    assert any("timeout" in e for e in _errors(at))
    assert _metric(at, "期間収入") == "￥5,000"
    assert _metric(at, "収支") == "￥3,800"


def test_cashflow_recovers_on_next_run_after_failure():
    api = StubApi({6: [TransportError("timeout"), [DAY]]})
    at = _open(_app(api), "キャッシュフロー")
    assert any("timeout" in e for e in _errors(at))

    at.run()

    assert _errors(at) == []
    assert _metric(at, "期間収入") == "￥5,000"


def test_cashflow_empty_projection_shows_notice_and_refuses_export():
    api = StubApi({6: [[]]})
    at = _open(_app(api), "キャッシュフロー")
    assert "表示するデータがありません" in [i.value for i in at.info]
    assert _metric(at, "期間収入") == "￥0"

    at.button(key="cashflow_export_empty").click().run()

    assert "エクスポートするデータがありません" in [w.value for w in at.warning]


def test_cashflow_offers_download_when_data_present():
    api = StubApi({6: [[DAY]]})
    at = _open(_app(api), "キャッシュフロー")

    assert len(at.get("download_button")) == 1


@pytest.mark.parametrize("months", [12, 24])
def test_cashflow_horizon_change_requests_new_range(months):
    api = StubApi({6: [[DAY]], months: [[DAY]]})
    at = _open(_app(api), "キャッシュフロー")

    at.selectbox(key="cashflow_months").set_value(months).run()

    assert api.calls[-1] == (months, False)


def test_cashflow_only_changes_toggle_requests_filtered_range():
    api = StubApi({6: [[DAY]]})
    at = _open(_app(api), "キャッシュフロー")

    at.toggle(key="cashflow_only_changes").set_value(True).run()

    assert api.calls[-1] == (6, True)


# ---------------------------------------------------------------------------
# Record pages
# ---------------------------------------------------------------------------
def test_added_record_confirmation_survives_rerun():
    api = StubApi({})
    at = _open(_app(api), "銀行口座")

    at.text_input(key="bank_accounts_new_name").input("Main")
    at.number_input(key="bank_accounts_new_balance").set_value(12000.0)
    next(b for b in at.button if b.label == "追加").click().run()

    assert [a.name for a in api.accounts] == ["Main"]
    assert "銀行口座を追加しました" in [s.value for s in at.success]

    at.run()
    assert "銀行口座を追加しました" not in [s.value for s in at.success]
