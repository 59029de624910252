from __future__ import annotations

from typing import Any, Iterable, Mapping, Union

import pandas as pd
from pydantic import BaseModel

from core.schema import MONEY_COLUMNS, PROJECTION_COLUMNS

Record = Union[BaseModel, Mapping[str, Any]]


def empty_projection_frame() -> pd.DataFrame:
    df = pd.DataFrame({c: pd.Series(dtype="object") for c in PROJECTION_COLUMNS})
    for c in MONEY_COLUMNS:
        df[c] = df[c].astype("int64")
    return df


def projections_to_frame(records: Iterable[Record]) -> pd.DataFrame:
    """
    Daily projection records -> frame in input order.

    ``date`` keeps the backend's ISO string untouched (the CSV exporter writes
    it verbatim); money columns are int64 minor units.
    """
    rows = []
    for r in records:
        d = r.model_dump() if isinstance(r, BaseModel) else dict(r)
        rows.append({
            "date": str(d["date"]),
            "income": int(d.get("income", 0)),
            "expense": int(d.get("expense", 0)),
            "balance": int(d["balance"]),
            "details": list(d.get("details") or []),
        })
    if not rows:
        return empty_projection_frame()

    df = pd.DataFrame(rows, columns=list(PROJECTION_COLUMNS))
    for c in MONEY_COLUMNS:
        df[c] = df[c].astype("int64")
    return df
