from __future__ import annotations

import pytest

from app.forms import (
    BANK_ACCOUNT,
    CHOICE,
    COUNT,
    DAY,
    FLAG,
    YEAR_MONTH,
    YEN,
    FormField,
    build_payload,
    form_defaults,
    minor_to_yen,
    yen_to_minor,
)

PAYMENT_FIELDS = [
    FormField("name", "名称"),
    FormField("amount", "金額", kind=YEN),
    FormField("payment_day", "支払日", kind=DAY),
    FormField("bank_account", "引き落とし口座", kind=BANK_ACCOUNT),
    FormField("start_year_month", "開始年月", kind=YEAR_MONTH),
    FormField("total_payments", "支払回数", kind=COUNT, required=False),
    FormField("is_active", "有効", kind=FLAG),
    FormField("note", "メモ", required=False),
]


def test_yen_minor_conversion():
    assert yen_to_minor(1500) == 150000
    assert yen_to_minor("30.5") == 3050
    assert yen_to_minor(0.005) == 1
    assert minor_to_yen(150000) == 1500.0


def test_yen_to_minor_rejects_text():
    with pytest.raises(ValueError):
        yen_to_minor("abc")


def test_valid_payload():
    payload, errors = build_payload(PAYMENT_FIELDS, {
        "name": "  家賃 ",
        "amount": 80000.0,
        "payment_day": 27,
        "bank_account": "b1",
        "start_year_month": "2024-04",
        "total_payments": 0,
        "is_active": True,
        "note": "",
    })
    assert errors == []
    assert payload == {
        "name": "家賃",
        "amount": 8000000,
        "payment_day": 27,
        "bank_account": "b1",
        "start_year_month": "2024-04",
        "is_active": True,
    }


def test_optional_count_is_sent_when_positive():
    payload, _ = build_payload(PAYMENT_FIELDS, {
        "name": "ローン", "amount": 1, "payment_day": 1, "bank_account": "b1",
        "start_year_month": "2024-01", "total_payments": 24, "is_active": False,
    })
    assert payload["total_payments"] == 24
    assert payload["is_active"] is False


def test_errors_are_reported_per_field():
    _, errors = build_payload(PAYMENT_FIELDS, {
        "name": "",
        "amount": -1,
        "payment_day": 32,
        "bank_account": None,
        "start_year_month": "2024-13",
        "is_active": True,
    })
    assert errors == [
        "名称は必須です",
        "金額は0以上で入力してください",
        "支払日は1〜31で入力してください",
        "引き落とし口座は必須です",
        "開始年月はYYYY-MM形式で入力してください",
    ]


def test_signed_yen_allows_negative():
    fields = [FormField("balance", "残高", kind=YEN, signed=True)]
    payload, errors = build_payload(fields, {"balance": -1200})
    assert errors == []
    assert payload == {"balance": -120000}


def test_choice_must_be_offered():
    fields = [FormField("asset_type", "種類", kind=CHOICE, choices=("card", "loan"))]
    _, errors = build_payload(fields, {"asset_type": "bond"})
    assert errors == ["種類の値が不正です"]


def test_defaults_for_new_record():
    defaults = form_defaults(PAYMENT_FIELDS)
    assert defaults["name"] == ""
    assert defaults["amount"] == 0.0
    assert defaults["payment_day"] == 1
    assert defaults["total_payments"] == 0
    assert defaults["is_active"] is True


def test_defaults_from_existing_record():
    defaults = form_defaults(PAYMENT_FIELDS, {
        "name": "家賃", "amount": 8000000, "payment_day": 27, "bank_account": "b1",
        "start_year_month": "2024-04", "total_payments": None, "is_active": False, "note": None,
    })
    assert defaults["amount"] == 80000.0
    assert defaults["payment_day"] == 27
    assert defaults["is_active"] is False
    assert defaults["note"] == ""


def test_field_default_used_when_record_lacks_value():
    fields = [FormField("closing_day", "締め日", kind=DAY, default=25)]
    assert form_defaults(fields) == {"closing_day": 25}
    assert form_defaults(fields, {"closing_day": None}) == {"closing_day": 25}
