from __future__ import annotations

import re
from datetime import date, datetime, timezone
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Iterable, Optional, Union

import pandas as pd
from dateutil.parser import isoparse
from dateutil.relativedelta import relativedelta

DateLike = Union[str, date, datetime, pd.Timestamp]

_YEN = "￥"
_HUNDRED = Decimal(100)


def require_columns(df: pd.DataFrame, cols: Iterable[str]) -> None:
    missing = [c for c in cols if c not in df.columns]
    if missing:
        raise ValueError(f"Missing required columns: {missing}")


# ---------------------------------------------------------------------------
# Money (integer minor units, value / 100 = yen)
# ---------------------------------------------------------------------------
def format_currency(amount: int) -> str:
    """ja-JP yen display: 100000 -> '￥1,000', -50000 -> '-￥500'. Rounds half away from zero."""
    yen = (Decimal(int(amount)) / _HUNDRED).quantize(Decimal(1), rounding=ROUND_HALF_UP)
    sign = "-" if yen < 0 else ""
    return f"{sign}{_YEN}{abs(yen):,}"


def parse_currency(text: str) -> int:
    """Parse a displayed amount ('￥1,000', '1,000.50', '-￥500') back to minor units."""
    cleaned = re.sub(r"[^0-9.\-]", "", text or "")
    try:
        value = Decimal(cleaned)
    except InvalidOperation:
        raise ValueError(f"Not a currency amount: {text!r}") from None
    return int((value * _HUNDRED).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def minor_to_major_text(amount: int) -> str:
    """Exact decimal text of amount / 100 with no padding: 300000 -> '3000', 3050 -> '30.5'."""
    major = Decimal(int(amount)).scaleb(-2).normalize()
    return format(major, "f")


# ---------------------------------------------------------------------------
# Dates and year-month keys
# ---------------------------------------------------------------------------
def _as_date(value: DateLike) -> date:
    if isinstance(value, pd.Timestamp):
        return value.date()
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return isoparse(str(value)).date()


def to_calendar_dates(values: pd.Series) -> pd.Series:
    """ISO strings -> calendar dates as written (time and offset dropped); None where unparseable."""
    def _parse(v):
        try:
            return _as_date(v)
        except (TypeError, ValueError, OverflowError):
            return None
    return values.map(_parse)


def to_instants(values: pd.Series) -> pd.Series:
    """ISO strings -> UTC datetimes for ordering; naive values are read as UTC, None where unparseable."""
    def _parse(v):
        try:
            dt = v if isinstance(v, datetime) else isoparse(str(v))
        except (TypeError, ValueError, OverflowError):
            return None
        if dt.tzinfo is None:
            return dt.replace(tzinfo=timezone.utc)
        return dt.astimezone(timezone.utc)
    return values.map(_parse)


def format_date(value: DateLike) -> str:
    """'2024-01-15T00:00:00Z' -> '2024/01/15'."""
    return _as_date(value).strftime("%Y/%m/%d")


def year_month_key(value: DateLike) -> str:
    """Zero-padded 'YYYY-MM' bucket key; sorts lexicographically."""
    d = _as_date(value)
    return f"{d.year:04d}-{d.month:02d}"


def _split_year_month(year_month: str) -> date:
    year, month = year_month.split("-")
    return date(int(year), int(month), 1)


def format_year_month(year_month: str) -> str:
    """'2024-01' -> '2024年1月'."""
    d = _split_year_month(year_month)
    return f"{d.year}年{d.month}月"


def current_year_month(today: Optional[date] = None) -> str:
    return year_month_key(today or date.today())


def next_year_month(year_month: str) -> str:
    return year_month_key(_split_year_month(year_month) + relativedelta(months=1))


def previous_year_month(year_month: str) -> str:
    return year_month_key(_split_year_month(year_month) - relativedelta(months=1))


def horizon_caption(months: int) -> str:
    """Human caption for a projection horizon: 30 -> '当月から2年6ヶ月間'."""
    if months >= 12:
        years, rest = divmod(months, 12)
        tail = f"{rest}ヶ月" if rest > 0 else ""
        return f"当月から{years}年{tail}間"
    return f"当月から{months}ヶ月間"
