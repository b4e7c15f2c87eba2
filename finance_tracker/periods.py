"""Year / month period selection."""

from __future__ import annotations

import numbers
from typing import Optional, Union

import numpy as np
import pandas as pd

from .models import TransactionsLike, ValidationError, transactions_frame

ALL = 'all'

MonthLike = Union[int, str, None]
YearLike = Union[int, str]


def parse_month(month: MonthLike) -> Optional[int]:
    """Return the 1-indexed month, or ``None`` for the whole year.

    Accepts ``"all"`` (any case), ``None``, an int or a numeric string.
    """
    if month is None:
        return None
    if isinstance(month, str):
        text = month.strip()
        if text.lower() == ALL:
            return None
        if not text.isdigit():
            raise ValidationError(f"Invalid month {month!r}: expected 'all' or 1..12")
        month = int(text)
    if isinstance(month, bool) or not isinstance(month, numbers.Integral) or not 1 <= month <= 12:
        raise ValidationError(f"Invalid month {month!r}: expected 'all' or 1..12")
    return int(month)


def year_mask(frame: pd.DataFrame, year: YearLike) -> pd.Series:
    """Rows whose calendar year equals ``year`` exactly (compared as text)."""
    return frame['year'].astype(str) == str(year).strip()


def year_rows(transactions: TransactionsLike, year: YearLike) -> pd.DataFrame:
    frame = transactions_frame(transactions)
    return frame[year_mask(frame, year)]


def filter_period(transactions: TransactionsLike, year: YearLike, month: MonthLike = ALL) -> pd.DataFrame:
    """Select the transactions of ``year`` and, unless ``"all"``, ``month``.

    Input order is preserved.  A period without transactions yields an
    empty frame.
    """
    frame = transactions_frame(transactions)
    mask = year_mask(frame, year)
    month_number = parse_month(month)
    if month_number is not None:
        mask &= frame['month'] == month_number
    return frame[mask]


def monthly_totals(rows: pd.DataFrame) -> np.ndarray:
    """Sum ``amount_in_home`` of ``rows`` into twelve calendar-month slots."""
    totals = np.zeros(12, dtype=float)
    if rows.empty:
        return totals
    np.add.at(
        totals,
        rows['month'].to_numpy(dtype='int64') - 1,
        rows['amount_in_home'].to_numpy(dtype=float),
    )
    return totals
