from __future__ import annotations

from datetime import date

import pytest

from cashflow.export import (
    NO_DATA_MESSAGE,
    EmptyExportError,
    export_filename,
    projections_to_csv,
    projections_to_csv_bytes,
)
from data_prep.loader import projections_to_frame


def test_scenario_rows(sample_daily):
    assert projections_to_csv(sample_daily) == (
        "日付,収入,支出,残高\n"
        "2024-01-05,3000,1000,5000\n"
        "2024-01-20,0,500,4500\n"
        "2024-02-03,2000,0,6500\n"
    )


def test_rows_follow_daily_order_not_months():
    daily = projections_to_frame([
        {"date": "2024-02-01", "income": 0, "expense": 0, "balance": 100},
        {"date": "2024-01-01", "income": 0, "expense": 0, "balance": 200},
    ])
    lines = projections_to_csv(daily).splitlines()
    assert lines[1].startswith("2024-02-01")
    assert lines[2].startswith("2024-01-01")


def test_fractional_and_negative_amounts_are_exact():
    daily = projections_to_frame([
        {"date": "2024-01-01", "income": 3050, "expense": 1, "balance": -123456789},
    ])
    assert projections_to_csv(daily).splitlines()[1] == "2024-01-01,30.5,0.01,-1234567.89"


def test_large_amounts_have_no_separators():
    daily = projections_to_frame([
        {"date": "2024-01-01", "income": 0, "expense": 0, "balance": 123456700},
    ])
    assert projections_to_csv(daily).splitlines()[1] == "2024-01-01,0,0,1234567"


def test_bytes_are_utf8(sample_daily):
    data = projections_to_csv_bytes(sample_daily)
    assert data.decode("utf-8").startswith("日付,収入,支出,残高")


def test_empty_export_is_refused():
    with pytest.raises(EmptyExportError) as info:
        projections_to_csv(projections_to_frame([]))
    assert str(info.value) == NO_DATA_MESSAGE


def test_filename_uses_export_date():
    assert export_filename(date(2024, 3, 9)) == "cashflow_projection_2024-03-09.csv"


def test_filename_defaults_to_today():
    assert export_filename() == f"cashflow_projection_{date.today().isoformat()}.csv"
