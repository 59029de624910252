"""
Flow Sight — personal finance client
=====================================

Pages:
  1. Dashboard:   summary cards, two-year balance trend, recent activity
  2. Cashflow:    projected daily cashflow rolled up by month, CSV export
  3. Records:     bank accounts, credit cards, assets, recurring payments,
                  income sources, settings

All data comes from the Flow Sight REST backend (FLOW_SIGHT_API_URL).

Run: streamlit run app/streamlit_app.py   (or the `flow-sight` command)
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import pandas as pd
import streamlit as st

# ---------------------------------------------------------------------------
# Make project root importable
# ---------------------------------------------------------------------------
PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from core.config import ClientConfig
from core.schema import CSV_MIME_TYPE
from core.logging_setup import configure_logging, get_logger
from core.utils import format_currency, format_date, horizon_caption

from client.api import ApiClient
from client.errors import ApiError
from client.fetcher import ProjectionFetcher
from client.session import AUTHENTICATED, AuthSession

from data_prep.validators import validate_projections

from cashflow.chart import build_balance_chart
from cashflow.export import EmptyExportError, export_filename, projections_to_csv, projections_to_csv_bytes
from cashflow.pipeline import ProjectionState, ProjectionView

from app.resources import (
    assets_page,
    bank_accounts_page,
    credit_cards_page,
    income_page,
    recurring_payments_page,
    settings_page,
    show_api_error,
)

CONFIG = ClientConfig.from_env()
configure_logging(CONFIG.log_level)
log = get_logger("app")

CALLBACK_MESSAGES = {
    "oauth_failed": "認証に失敗しました。もう一度お試しください。",
    "parse_failed": "ユーザー情報の解析に失敗しました。",
    "no_token": "認証情報が見つかりません。",
}


# ---------------------------------------------------------------------------
# Per-session objects
# ---------------------------------------------------------------------------
def _auth_session() -> AuthSession:
    return AuthSession(st.session_state, ttl_seconds=CONFIG.session_ttl_seconds)


def _api(session: AuthSession) -> ApiClient:
    if "api_client" not in st.session_state:
        st.session_state["api_client"] = ApiClient.from_config(CONFIG, token_provider=session.bearer_token)
    return st.session_state["api_client"]


def _projection_slot(key: str, api: ApiClient) -> dict:
    """Fetcher + state + last requested parameters, kept across reruns."""
    if key not in st.session_state:
        st.session_state[key] = {
            "fetcher": ProjectionFetcher(api),
            "state": ProjectionState(),
            "params": None,
        }
    return st.session_state[key]


def _load_projection(slot: dict, months: int, only_changes: bool, *, force: bool = False) -> ProjectionState:
    """Fetch when the parameters changed, the last fetch failed, or on demand; apply the newest outcome."""
    params = (months, only_changes)
    state: ProjectionState = slot["state"]
    if force or slot["params"] != params or state.error is not None:
        slot["params"] = params
        with st.spinner("キャッシュフローを取得中..."):
            outcome = slot["fetcher"].fetch(months, only_changes=only_changes)
        state.apply(outcome, slot["fetcher"])
    return state


# ---------------------------------------------------------------------------
# Display helpers
# ---------------------------------------------------------------------------
def _show_chart(view: ProjectionView, *, title: Optional[str] = None) -> None:
    if view.is_empty or view.axis is None:
        st.info("表示するデータがありません")
        return
    st.altair_chart(build_balance_chart(view.monthly, view.axis, title=title), use_container_width=True)


def _notify_downloaded() -> None:
    st.toast("CSVファイルをダウンロードしました")


def _display_date(value: str) -> str:
    try:
        return format_date(value)
    except (TypeError, ValueError):
        return str(value)


def _daily_table(view: ProjectionView) -> pd.DataFrame:
    d = view.daily
    return pd.DataFrame({
        "日付": d["date"].map(_display_date),
        "収入": d["income"].map(format_currency),
        "支出": d["expense"].map(format_currency),
        "残高": d["balance"].map(format_currency),
        "内訳": d["details"].map(lambda items: "、".join(i["description"] for i in items)),
    })


def _monthly_table(view: ProjectionView) -> pd.DataFrame:
    m = view.monthly
    return pd.DataFrame({
        "月": m["label"],
        "収入": m["income"].map(format_currency),
        "支出": m["expense"].map(format_currency),
        "月末残高": m["balance"].map(format_currency),
    })


# ═══════════════════════════════════════════════════════════════════════════
# LOGIN / CALLBACK
# ═══════════════════════════════════════════════════════════════════════════
def login_page() -> None:
    st.title("Flow Sight")
    st.caption("銀行口座・カード・定期支払いから将来の残高を見通す")
    st.link_button("Googleでログイン", f"{CONFIG.base_url}/auth/google", type="primary")


def handle_callback(session: AuthSession) -> None:
    params = st.query_params.to_dict()
    if not ({"token", "user", "error"} & set(params)):
        return
    result = session.handle_callback(params)
    st.query_params.clear()
    if result == AUTHENTICATED:
        st.toast("ログインしました")
    else:
        st.error(CALLBACK_MESSAGES[result])


# ═══════════════════════════════════════════════════════════════════════════
# DASHBOARD
# ═══════════════════════════════════════════════════════════════════════════
def dashboard_page(api: ApiClient) -> None:
    st.title("ダッシュボード")

    try:
        summary = api.get_dashboard_summary()
    except ApiError as exc:
        show_api_error(exc, "ダッシュボードの取得に失敗しました")
        summary = None

    if summary is not None:
        k1, k2, k3, k4 = st.columns(4)
        k1.metric("総残高", format_currency(summary.total_balance))
        k2.metric("今月の収入", format_currency(summary.monthly_income))
        k3.metric("今月の支出", format_currency(summary.monthly_expense))
        k4.metric("総資産", format_currency(summary.total_assets))

    st.divider()
    months = CONFIG.dashboard_horizon_months
    st.subheader("残高推移")
    st.caption(horizon_caption(months) + "の推移")

    refresh = st.button("再読み込み", key="dashboard_reload")
    slot = _projection_slot("dashboard_projection", api)
    state = _load_projection(slot, months, False, force=refresh)
    if state.error:
        st.error(f"キャッシュフローの取得に失敗しました（{state.error}）")
    _show_chart(state.view)

    st.divider()
    st.subheader("最近のアクティビティ")
    activities = summary.recent_activities if summary is not None else []
    if not activities:
        st.info("最近のアクティビティはありません")
        return
    rows = [
        {
            "日付": _display_date(a.date),
            "内容": "、".join(d.description for d in a.details) or "-",
            "収入": format_currency(a.income),
            "支出": format_currency(a.expense),
            "残高": format_currency(a.balance),
        }
        for a in activities
    ]
    st.dataframe(pd.DataFrame(rows), use_container_width=True, hide_index=True)


# ═══════════════════════════════════════════════════════════════════════════
# CASHFLOW
# ═══════════════════════════════════════════════════════════════════════════
def cashflow_page(api: ApiClient) -> None:
    st.title("キャッシュフロー予測")

    options = list(CONFIG.horizon_options)
    c1, c2, c3 = st.columns([2, 2, 1])
    with c1:
        months = st.selectbox(
            "予測期間",
            options,
            index=options.index(CONFIG.default_horizon_months),
            format_func=lambda m: f"{m}ヶ月",
            key="cashflow_months",
        )
    with c2:
        only_changes = st.toggle("変動がある日のみ", value=False, key="cashflow_only_changes")
    with c3:
        refresh = st.button("再読み込み", use_container_width=True, key="cashflow_reload")

    slot = _projection_slot("cashflow_projection", api)
    state = _load_projection(slot, int(months), bool(only_changes), force=refresh)
    if state.error:
        st.error(f"キャッシュフローの取得に失敗しました（{state.error}）")

    view = state.view
    st.caption(horizon_caption(int(months)) + "の推移")

    # --- Totals ---
    k1, k2, k3 = st.columns(3)
    k1.metric("期間収入", format_currency(view.totals.income))
    k2.metric("期間支出", format_currency(view.totals.expense))
    k3.metric("収支", format_currency(view.totals.net))

    # --- Trend ---
    _show_chart(view)

    # --- Export ---
    if view.is_empty:
        if st.button("CSVエクスポート", key="cashflow_export_empty"):
            try:
                projections_to_csv(view.daily)
            except EmptyExportError as exc:
                st.warning(str(exc))
    else:
        st.download_button(
            "CSVエクスポート",
            data=projections_to_csv_bytes(view.daily),
            file_name=export_filename(),
            mime=CSV_MIME_TYPE,
            key="cashflow_export",
            on_click=_notify_downloaded,
        )

    if view.is_empty:
        return

    vr = validate_projections(view.daily)
    if not vr.is_valid or vr.warnings:
        st.warning("受信したデータに問題があります:\n" + vr.summary())

    with st.expander("月別集計", expanded=False):
        st.dataframe(_monthly_table(view), use_container_width=True, hide_index=True)
    with st.expander("日別明細", expanded=False):
        st.dataframe(_daily_table(view), use_container_width=True, hide_index=True)


# ═══════════════════════════════════════════════════════════════════════════
# PAGE CONFIG
# ═══════════════════════════════════════════════════════════════════════════
PAGES = {
    "ダッシュボード": dashboard_page,
    "キャッシュフロー": cashflow_page,
    "銀行口座": bank_accounts_page,
    "クレジットカード": credit_cards_page,
    "資産": assets_page,
    "定期支払い": recurring_payments_page,
    "収入": income_page,
    "設定": settings_page,
}

st.set_page_config(page_title="Flow Sight", layout="wide")

session = _auth_session()
session.init()
handle_callback(session)

api = _api(session)
if session.token is not None and session.user is None:
    with st.spinner("ユーザー情報を確認中..."):
        session.restore(api)

if session.state != AUTHENTICATED:
    login_page()
    st.stop()

# ═══════════════════════════════════════════════════════════════════════════
# SIDEBAR — Navigation
# ═══════════════════════════════════════════════════════════════════════════
with st.sidebar:
    st.header("Flow Sight")
    user = session.user
    if user.picture:
        st.image(user.picture, width=48)
    st.caption(f"{user.name or user.email}")
    page = st.radio("メニュー", list(PAGES), label_visibility="collapsed")
    if st.button("ログアウト", use_container_width=True):
        session.logout()
        for key in ("api_client", "dashboard_projection", "cashflow_projection"):
            st.session_state.pop(key, None)
        st.rerun()

log.debug("Rendering page %s", page)
PAGES[page](api)
