"""
Form field descriptions and payload building for the CRUD pages.

Kept free of Streamlit so the conversions (yen <-> minor units, day and
year-month checks) are plain functions.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Dict, List, Mapping, Optional, Tuple

from data_prep.validators import validate_year_month

TEXT = "text"
YEN = "yen"
DAY = "day"
YEAR_MONTH = "year_month"
CHOICE = "choice"
FLAG = "flag"
COUNT = "count"
BANK_ACCOUNT = "bank_account"


@dataclass(frozen=True)
class FormField:
    name: str
    label: str
    kind: str = TEXT
    required: bool = True
    choices: Tuple[str, ...] = ()
    signed: bool = False  # yen fields only: allow negative amounts
    default: Any = None


def yen_to_minor(value: Any) -> int:
    try:
        amount = Decimal(str(value))
    except InvalidOperation:
        raise ValueError(f"Not an amount: {value!r}") from None
    return int((amount * 100).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def minor_to_yen(value: int) -> float:
    return int(value) / 100


def form_defaults(fields: List[FormField], record: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
    """Initial widget values: the record's values (yen fields in major units) or field defaults."""
    out: Dict[str, Any] = {}
    for f in fields:
        value = record.get(f.name) if record is not None else None
        if value is None:
            value = f.default
        if f.kind == YEN:
            value = minor_to_yen(value) if value is not None else 0.0
        elif f.kind == FLAG:
            value = bool(value) if value is not None else True
        elif f.kind in (DAY, COUNT):
            value = int(value) if value is not None else (1 if f.kind == DAY else 0)
        elif value is None:
            value = ""
        out[f.name] = value
    return out


def build_payload(fields: List[FormField], values: Mapping[str, Any]) -> Tuple[Dict[str, Any], List[str]]:
    """
    Widget values -> (API payload, error messages).

    Optional fields left blank are omitted from the payload.
    """
    payload: Dict[str, Any] = {}
    errors: List[str] = []

    for f in fields:
        raw = values.get(f.name)

        if f.kind == FLAG:
            payload[f.name] = bool(raw)
            continue

        if f.kind == YEN:
            try:
                minor = yen_to_minor(raw if raw is not None else 0)
            except ValueError:
                errors.append(f"{f.label}は金額で入力してください")
                continue
            if minor < 0 and not f.signed:
                errors.append(f"{f.label}は0以上で入力してください")
                continue
            payload[f.name] = minor
            continue

        if f.kind == DAY:
            day = int(raw) if raw not in (None, "") else 0
            if not 1 <= day <= 31:
                errors.append(f"{f.label}は1〜31で入力してください")
                continue
            payload[f.name] = day
            continue

        if f.kind == COUNT:
            count = int(raw) if raw not in (None, "") else 0
            if count < 0:
                errors.append(f"{f.label}は0以上で入力してください")
            elif count > 0 or f.required:
                payload[f.name] = count
            continue

        text = str(raw).strip() if raw is not None else ""
        if not text:
            if f.required:
                errors.append(f"{f.label}は必須です")
            continue

        if f.kind == YEAR_MONTH and not validate_year_month(text):
            errors.append(f"{f.label}はYYYY-MM形式で入力してください")
            continue
        if f.kind == CHOICE and f.choices and text not in f.choices:
            errors.append(f"{f.label}の値が不正です")
            continue
        payload[f.name] = text

    return payload, errors
