from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np
import pandas as pd

from core.schema import AXIS_MIN_PADDING, AXIS_PADDING_RATIO, AXIS_STEP


@dataclass(frozen=True)
class AxisRange:
    """Inclusive render range of the balance axis, in minor units."""
    lower: int
    upper: int

    def as_domain(self) -> list:
        return [self.lower, self.upper]


def compute_axis_range(monthly: pd.DataFrame, *, value_col: str = "balance") -> AxisRange:
    """
    Padded [lower, upper] for the balance axis.

    Padding is 10% of the balance range (AXIS_MIN_PADDING when every point is
    equal), and both bounds snap outward to a multiple of AXIS_STEP so tick
    labels stay round.
    """
    values = np.asarray(monthly[value_col], dtype=np.int64)
    if values.size == 0:
        raise ValueError("Cannot compute an axis range for an empty sequence.")

    min_balance = int(values.min())
    max_balance = int(values.max())
    span = max_balance - min_balance
    padding = span * AXIS_PADDING_RATIO if span != 0 else AXIS_MIN_PADDING

    lower = math.floor((min_balance - padding) / AXIS_STEP) * AXIS_STEP
    upper = math.ceil((max_balance + padding) / AXIS_STEP) * AXIS_STEP
    return AxisRange(lower=int(lower), upper=int(upper))
