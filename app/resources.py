"""
CRUD pages for backend-owned records: bank accounts, credit cards (with card
monthly totals), assets, recurring payments, income sources (with monthly
income records) and settings.

These pages pass records through unmodified; failures are shown as
notifications and never raised to the user.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, MutableMapping, Optional, Tuple

import pandas as pd
import streamlit as st

from client.api import ApiClient
from client.errors import ApiError, UnauthorizedError
from client.session import AuthSession
from core.logging_setup import get_logger
from core.utils import current_year_month, format_currency, format_year_month

from .forms import (
    BANK_ACCOUNT,
    CHOICE,
    COUNT,
    DAY,
    FLAG,
    TEXT,
    YEAR_MONTH,
    YEN,
    FormField,
    build_payload,
    form_defaults,
)

log = get_logger(__name__)


def show_api_error(exc: ApiError, message: str) -> None:
    """Notify instead of raising. A 401 ends the session."""
    log.warning("%s: %s", message, exc)
    if isinstance(exc, UnauthorizedError):
        AuthSession(st.session_state).logout()
        st.warning("セッションの有効期限が切れました。再度ログインしてください。")
        return
    st.error(f"{message}（{exc}）")


FLASH_KEY = "flash_message"


def set_flash(state: MutableMapping[str, Any], message: str) -> None:
    """Queue a confirmation for the next run; ``st.rerun()`` discards anything drawn now."""
    state[FLASH_KEY] = message


def pop_flash(state: MutableMapping[str, Any]) -> Optional[str]:
    return state.pop(FLASH_KEY, None)


def _show_flash() -> None:
    message = pop_flash(st.session_state)
    if message:
        st.success(message)


# ---------------------------------------------------------------------------
# Resource descriptions
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class ResourceSpec:
    key: str
    title: str
    fields: List[FormField]
    columns: List[Tuple[str, Callable[[Any], Any]]]
    list_items: Callable[[ApiClient], list]
    create: Callable[[ApiClient, Dict[str, Any]], Any]
    update: Callable[[ApiClient, str, Dict[str, Any]], Any]
    delete: Callable[[ApiClient, str], None]


def _yes_no(flag: bool) -> str:
    return "有効" if flag else "無効"


BANK_ACCOUNTS = ResourceSpec(
    key="bank_accounts",
    title="銀行口座",
    fields=[
        FormField("name", "口座名"),
        FormField("balance", "残高", kind=YEN, signed=True),
    ],
    columns=[
        ("口座名", lambda a: a.name),
        ("残高", lambda a: format_currency(a.balance)),
    ],
    list_items=lambda api: api.get_bank_accounts(),
    create=lambda api, p: api.create_bank_account(p),
    update=lambda api, i, p: api.update_bank_account(i, p),
    delete=lambda api, i: api.delete_bank_account(i),
)

CREDIT_CARDS = ResourceSpec(
    key="credit_cards",
    title="クレジットカード",
    fields=[
        FormField("name", "カード名"),
        FormField("bank_account", "引き落とし口座", kind=BANK_ACCOUNT),
        FormField("closing_day", "締め日", kind=DAY, default=25),
        FormField("payment_day", "支払日", kind=DAY, default=10),
    ],
    columns=[
        ("カード名", lambda c: c.name),
        ("締め日", lambda c: c.closing_day),
        ("支払日", lambda c: c.payment_day),
    ],
    list_items=lambda api: api.get_credit_cards(),
    create=lambda api, p: api.create_credit_card(p),
    update=lambda api, i, p: api.update_credit_card(i, p),
    delete=lambda api, i: api.delete_credit_card(i),
)

ASSETS = ResourceSpec(
    key="assets",
    title="資産",
    fields=[
        FormField("name", "名称"),
        FormField("asset_type", "種類", kind=CHOICE, choices=("card", "loan")),
        FormField("bank_account", "引き落とし口座", kind=BANK_ACCOUNT),
        FormField("closing_day", "締め日", kind=DAY, default=25),
        FormField("payment_day", "支払日", kind=DAY, default=10),
    ],
    columns=[
        ("名称", lambda a: a.name),
        ("種類", lambda a: "カード" if a.asset_type == "card" else "ローン"),
        ("支払日", lambda a: a.payment_day),
    ],
    list_items=lambda api: api.get_assets(),
    create=lambda api, p: api.create_asset(p),
    update=lambda api, i, p: api.update_asset(i, p),
    delete=lambda api, i: api.delete_asset(i),
)

RECURRING_PAYMENTS = ResourceSpec(
    key="recurring_payments",
    title="定期支払い",
    fields=[
        FormField("name", "名称"),
        FormField("amount", "金額", kind=YEN),
        FormField("payment_day", "支払日", kind=DAY, default=27),
        FormField("bank_account", "引き落とし口座", kind=BANK_ACCOUNT),
        FormField("start_year_month", "開始年月", kind=YEAR_MONTH),
        FormField("total_payments", "支払回数（ローンのみ）", kind=COUNT, required=False),
        FormField("is_active", "有効", kind=FLAG),
        FormField("note", "メモ", required=False),
    ],
    columns=[
        ("名称", lambda p: p.name),
        ("金額", lambda p: format_currency(p.amount)),
        ("支払日", lambda p: p.payment_day),
        ("開始", lambda p: format_year_month(p.start_year_month)),
        ("残り回数", lambda p: p.remaining_payments if p.remaining_payments is not None else "-"),
        ("状態", lambda p: _yes_no(p.is_active)),
    ],
    list_items=lambda api: api.get_recurring_payments(),
    create=lambda api, p: api.create_recurring_payment(p),
    update=lambda api, i, p: api.update_recurring_payment(i, p),
    delete=lambda api, i: api.delete_recurring_payment(i),
)

INCOME_SOURCES = ResourceSpec(
    key="income_sources",
    title="収入源",
    fields=[
        FormField("name", "名称"),
        FormField("income_type", "種類", kind=CHOICE, choices=("monthly_fixed", "one_time")),
        FormField("base_amount", "金額", kind=YEN),
        FormField("bank_account", "入金口座", kind=BANK_ACCOUNT),
        FormField("scheduled_year_month", "予定年月（単発のみ）", kind=YEAR_MONTH, required=False),
        FormField("is_active", "有効", kind=FLAG),
    ],
    columns=[
        ("名称", lambda s: s.name),
        ("種類", lambda s: "毎月固定" if s.income_type == "monthly_fixed" else "単発"),
        ("金額", lambda s: format_currency(s.base_amount)),
        ("状態", lambda s: _yes_no(s.is_active)),
    ],
    list_items=lambda api: api.get_income_sources(),
    create=lambda api, p: api.create_income_source(p),
    update=lambda api, i, p: api.update_income_source(i, p),
    delete=lambda api, i: api.delete_income_source(i),
)


def card_monthly_totals_spec(card_id: str) -> ResourceSpec:
    return ResourceSpec(
        key=f"card_totals_{card_id}",
        title="月別利用額",
        fields=[
            FormField("year_month", "年月", kind=YEAR_MONTH, default=current_year_month()),
            FormField("total_amount", "利用額", kind=YEN),
            FormField("is_confirmed", "確定", kind=FLAG, default=False),
        ],
        columns=[
            ("年月", lambda t: format_year_month(t.year_month)),
            ("利用額", lambda t: format_currency(t.total_amount)),
            ("確定", lambda t: "確定" if t.is_confirmed else "見込み"),
        ],
        list_items=lambda api: sorted(api.get_card_monthly_totals(card_id), key=lambda t: t.year_month),
        create=lambda api, p: api.create_card_monthly_total({**p, "asset_id": card_id}),
        update=lambda api, i, p: api.update_card_monthly_total(i, {**p, "asset_id": card_id}),
        delete=lambda api, i: api.delete_card_monthly_total(i),
    )


def monthly_income_records_spec(source_id: str) -> ResourceSpec:
    return ResourceSpec(
        key=f"income_records_{source_id}",
        title="月別実績",
        fields=[
            FormField("year_month", "年月", kind=YEAR_MONTH, default=current_year_month()),
            FormField("actual_amount", "実績額", kind=YEN),
            FormField("is_confirmed", "確定", kind=FLAG, default=False),
            FormField("note", "メモ", required=False),
        ],
        columns=[
            ("年月", lambda r: format_year_month(r.year_month)),
            ("実績額", lambda r: format_currency(r.actual_amount)),
            ("確定", lambda r: "確定" if r.is_confirmed else "見込み"),
            ("メモ", lambda r: r.note or ""),
        ],
        list_items=lambda api: sorted(api.get_monthly_income_records(source_id), key=lambda r: r.year_month),
        create=lambda api, p: api.create_monthly_income_record({**p, "income_source_id": source_id}),
        update=lambda api, i, p: api.update_monthly_income_record(i, {**p, "income_source_id": source_id}),
        delete=lambda api, i: api.delete_monthly_income_record(i),
    )


# ---------------------------------------------------------------------------
# Widgets
# ---------------------------------------------------------------------------
def _bank_options(api: ApiClient) -> Dict[str, str]:
    try:
        return {a.id: a.name for a in api.get_bank_accounts()}
    except ApiError as exc:
        show_api_error(exc, "銀行口座の取得に失敗しました")
        return {}


def _render_inputs(
    fields: List[FormField],
    defaults: Mapping[str, Any],
    key: str,
    bank_options: Mapping[str, str],
) -> Dict[str, Any]:
    values: Dict[str, Any] = {}
    for f in fields:
        wkey = f"{key}_{f.name}"
        current = defaults.get(f.name)
        if f.kind == YEN:
            values[f.name] = st.number_input(
                f"{f.label}（円）", value=float(current), step=1000.0, format="%.0f",
                min_value=None if f.signed else 0.0, key=wkey,
            )
        elif f.kind == DAY:
            values[f.name] = st.number_input(f.label, min_value=1, max_value=31, value=int(current), step=1, key=wkey)
        elif f.kind == COUNT:
            values[f.name] = st.number_input(f.label, min_value=0, value=int(current), step=1, key=wkey)
        elif f.kind == FLAG:
            values[f.name] = st.checkbox(f.label, value=bool(current), key=wkey)
        elif f.kind == CHOICE:
            index = f.choices.index(current) if current in f.choices else 0
            values[f.name] = st.selectbox(f.label, f.choices, index=index, key=wkey)
        elif f.kind == BANK_ACCOUNT:
            ids = list(bank_options)
            index = ids.index(current) if current in ids else 0
            values[f.name] = st.selectbox(
                f.label, ids, index=index if ids else None,
                format_func=lambda i: bank_options.get(i, i), key=wkey,
            )
        else:
            placeholder = "YYYY-MM" if f.kind == YEAR_MONTH else ""
            values[f.name] = st.text_input(f.label, value=str(current or ""), placeholder=placeholder, key=wkey)
    return values


def _submit(call: Callable[[Dict[str, Any]], Any], fields: List[FormField], values: Mapping[str, Any],
            success: str, failure: str) -> None:
    payload, errors = build_payload(fields, values)
    if errors:
        for e in errors:
            st.error(e)
        return
    try:
        call(payload)
    except ApiError as exc:
        show_api_error(exc, failure)
        return
    set_flash(st.session_state, success)
    st.rerun()


def render_resource(api: ApiClient, spec: ResourceSpec, *, bank_options: Optional[Mapping[str, str]] = None) -> list:
    """List + add + edit/delete for one resource. Returns the listed items."""
    _show_flash()
    bank_options = bank_options or {}
    if any(f.kind == BANK_ACCOUNT for f in spec.fields) and not bank_options:
        st.warning("先に銀行口座を登録してください。")

    try:
        items = spec.list_items(api)
    except ApiError as exc:
        show_api_error(exc, f"{spec.title}の取得に失敗しました")
        return []

    if not items:
        st.info(f"{spec.title}が登録されていません。")
    else:
        table = pd.DataFrame([{header: fn(item) for header, fn in spec.columns} for item in items])
        st.dataframe(table, use_container_width=True, hide_index=True)

    with st.expander(f"{spec.title}を追加", expanded=not items):
        with st.form(f"{spec.key}_create", clear_on_submit=True):
            values = _render_inputs(spec.fields, form_defaults(spec.fields), f"{spec.key}_new", bank_options)
            submitted = st.form_submit_button("追加", type="primary")
        if submitted:
            _submit(lambda p: spec.create(api, p), spec.fields, values,
                    f"{spec.title}を追加しました", f"{spec.title}の追加に失敗しました")

    if not items:
        return items

    with st.expander("編集・削除", expanded=False):
        by_id = {item.id: item for item in items}
        labels = {item.id: " / ".join(str(fn(item)) for _, fn in spec.columns[:2]) for item in items}
        selected = st.selectbox("対象", list(by_id), format_func=lambda i: labels[i], key=f"{spec.key}_target")
        record = by_id[selected].model_dump()

        with st.form(f"{spec.key}_edit_{selected}"):
            values = _render_inputs(
                spec.fields, form_defaults(spec.fields, record), f"{spec.key}_edit_{selected}", bank_options
            )
            saved = st.form_submit_button("更新")
        if saved:
            _submit(lambda p: spec.update(api, selected, p), spec.fields, values,
                    f"{spec.title}を更新しました", f"{spec.title}の更新に失敗しました")

        confirm = st.checkbox("削除してよろしいですか？", key=f"{spec.key}_confirm_{selected}")
        if st.button("削除", disabled=not confirm, key=f"{spec.key}_delete_{selected}"):
            try:
                spec.delete(api, selected)
            except ApiError as exc:
                show_api_error(exc, f"{spec.title}の削除に失敗しました")
            else:
                set_flash(st.session_state, f"{spec.title}を削除しました")
                st.rerun()

    return items


# ---------------------------------------------------------------------------
# Pages
# ---------------------------------------------------------------------------
def bank_accounts_page(api: ApiClient) -> None:
    st.title("銀行口座")
    render_resource(api, BANK_ACCOUNTS)


def credit_cards_page(api: ApiClient) -> None:
    st.title("クレジットカード")
    cards = render_resource(api, CREDIT_CARDS, bank_options=_bank_options(api))
    if not cards:
        return

    st.divider()
    st.subheader("月別利用額")
    by_id = {c.id: c for c in cards}
    card_id = st.selectbox("カード", list(by_id), format_func=lambda i: by_id[i].name, key="card_totals_card")
    render_resource(api, card_monthly_totals_spec(card_id))


def assets_page(api: ApiClient) -> None:
    st.title("資産")
    render_resource(api, ASSETS, bank_options=_bank_options(api))


def recurring_payments_page(api: ApiClient) -> None:
    st.title("定期支払い")
    render_resource(api, RECURRING_PAYMENTS, bank_options=_bank_options(api))


def income_page(api: ApiClient) -> None:
    st.title("収入")
    sources = render_resource(api, INCOME_SOURCES, bank_options=_bank_options(api))
    if not sources:
        return

    st.divider()
    st.subheader("月別実績")
    by_id = {s.id: s for s in sources}
    source_id = st.selectbox("収入源", list(by_id), format_func=lambda i: by_id[i].name, key="income_records_source")
    render_resource(api, monthly_income_records_spec(source_id))


SETTINGS_DEFAULTS: Dict[str, str] = {
    "minimum_monthly_expense": "0",
    "notification_enabled": "true",
    "theme": "light",
}
THEMES = ("light", "dark", "system")


def settings_page(api: ApiClient) -> None:
    st.title("設定")
    try:
        stored = {s.key: s.value for s in api.get_settings()}
    except ApiError as exc:
        show_api_error(exc, "設定の取得に失敗しました")
        return
    settings = {**SETTINGS_DEFAULTS, **stored}

    try:
        minimum = int(settings["minimum_monthly_expense"] or 0)
    except ValueError:
        minimum = 0

    with st.form("settings"):
        new_minimum = st.number_input("最低月間支出（円）", min_value=0, value=minimum, step=1000)
        notify = st.checkbox("通知を有効にする", value=settings["notification_enabled"] == "true")
        theme = st.selectbox(
            "テーマ", THEMES,
            index=THEMES.index(settings["theme"]) if settings["theme"] in THEMES else 0,
        )
        saved = st.form_submit_button("保存", type="primary")

    if saved:
        try:
            api.update_settings({
                "minimum_monthly_expense": str(int(new_minimum)),
                "notification_enabled": "true" if notify else "false",
                "theme": theme,
            })
        except ApiError as exc:
            show_api_error(exc, "設定の保存に失敗しました")
        else:
            st.success("設定を保存しました")
