from __future__ import annotations

import pytest

from cashflow.aggregator import aggregate_monthly
from cashflow.axis import compute_axis_range
from cashflow.chart import build_balance_chart


@pytest.fixture
def chart_spec(sample_daily):
    monthly = aggregate_monthly(sample_daily)
    chart = build_balance_chart(monthly, compute_axis_range(monthly), title="残高推移")
    return chart.to_dict()


def test_y_domain_matches_axis_range(chart_spec):
    y = chart_spec["encoding"]["y"]
    assert y["field"] == "balance"
    assert y["scale"]["domain"] == [430000, 670000]
    assert y["scale"]["zero"] is False


def test_x_is_ordered_month_labels(chart_spec):
    x = chart_spec["encoding"]["x"]
    assert x["field"] == "label"
    assert x["sort"] == ["2024年1月", "2024年2月"]


def test_tooltip_shows_currency(chart_spec):
    titles = [t["title"] for t in chart_spec["encoding"]["tooltip"]]
    assert titles == ["月", "収入", "支出", "残高"]

    rows = list(chart_spec["datasets"].values())[0]
    assert rows[0]["balance_fmt"] == "￥4,500"
    assert rows[0]["expense_fmt"] == "￥1,500"
    assert rows[1]["income_fmt"] == "￥2,000"


def test_area_mark(chart_spec):
    assert chart_spec["mark"]["type"] == "area"
    assert chart_spec["title"] == "残高推移"


def test_empty_monthly_is_not_charted(sample_daily):
    monthly = aggregate_monthly(sample_daily)
    axis = compute_axis_range(monthly)
    with pytest.raises(ValueError):
        build_balance_chart(monthly.iloc[0:0], axis)


def test_months_are_sorted_even_if_frame_is_not(sample_daily):
    monthly = aggregate_monthly(sample_daily)
    reversed_frame = monthly.iloc[::-1].reset_index(drop=True)
    spec = build_balance_chart(reversed_frame, compute_axis_range(monthly)).to_dict()
    assert spec["encoding"]["x"]["sort"] == ["2024年1月", "2024年2月"]
