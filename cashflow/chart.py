"""
Balance trend chart — Altair area chart over the monthly roll-up.

x = month labels in year_month order, y = month-end balance with the padded
domain from cashflow.axis, tooltip = month income / expense / balance.
"""

from __future__ import annotations

from typing import Optional

import altair as alt
import pandas as pd

from core.utils import format_currency

from .axis import AxisRange

# y values are minor units; ticks are shown in yen
_YEN_TICK_EXPR = "'¥' + format(datum.value / 100, ',.0f')"


def build_balance_chart(
    monthly: pd.DataFrame,
    axis: AxisRange,
    *,
    title: Optional[str] = None,
    height: int = 320,
    color: str = "#3b82f6",
) -> alt.Chart:
    if len(monthly) == 0:
        raise ValueError("No monthly data to chart.")

    d = monthly[["year_month", "label", "balance", "income", "expense"]].copy()
    d = d.sort_values("year_month")
    d["income_fmt"] = d["income"].map(format_currency)
    d["expense_fmt"] = d["expense"].map(format_currency)
    d["balance_fmt"] = d["balance"].map(format_currency)

    chart = (
        alt.Chart(d)
        .mark_area(
            clip=True,
            opacity=0.35,
            color=color,
            line={"color": color, "strokeWidth": 3},
            interpolate="monotone",
        )
        .encode(
            x=alt.X(
                "label:N",
                sort=d["label"].tolist(),
                title=None,
                axis=alt.Axis(labelAngle=-45),
            ),
            y=alt.Y(
                "balance:Q",
                title="残高",
                scale=alt.Scale(domain=axis.as_domain(), zero=False),
                axis=alt.Axis(labelExpr=_YEN_TICK_EXPR),
            ),
            tooltip=[
                alt.Tooltip("label:N", title="月"),
                alt.Tooltip("income_fmt:N", title="収入"),
                alt.Tooltip("expense_fmt:N", title="支出"),
                alt.Tooltip("balance_fmt:N", title="残高"),
            ],
        )
    )
    if title:
        return chart.properties(title=title, height=height)
    return chart.properties(height=height)
