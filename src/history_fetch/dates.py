"""Normalize caller-supplied dates."""

from __future__ import annotations

from datetime import date, datetime

import pandas as pd

DateLike = date | datetime | str


def parse_date(value: DateLike) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    # pandas would read numbers as epoch nanoseconds.
    if not isinstance(value, str):
        raise TypeError(f"Expected a date or a date string, got {type(value).__name__}")
    try:
        stamp = pd.Timestamp(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Unparseable date: {value!r}") from exc
    if pd.isna(stamp):
        raise ValueError(f"Unparseable date: {value!r}")
    return stamp.date()
