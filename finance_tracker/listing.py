"""Helpers for the transaction list: year choices, search and paging."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date
from typing import List, Optional, Union

import pandas as pd

from .config import ITEMS_PER_PAGE
from .models import TransactionsLike, transactions_frame
from .periods import ALL, MonthLike, parse_month, year_mask


@dataclass
class Page:
    rows: pd.DataFrame
    page: int
    total_pages: int
    total_rows: int


def available_years(transactions: TransactionsLike, today: Optional[date] = None) -> List[int]:
    """Years that have transactions, plus the current year, newest first."""
    frame = transactions_frame(transactions)
    years = set(int(y) for y in frame['year'].unique())
    years.add((today or date.today()).year)
    return sorted(years, reverse=True)


def search_transactions(
    transactions: TransactionsLike,
    year: Union[int, str] = ALL,
    month: MonthLike = ALL,
    search: str = '',
) -> pd.DataFrame:
    """Filter the transaction list and sort it newest first.

    ``year`` and ``month`` accept ``"all"``.  ``search`` is matched
    case-insensitively anywhere in the description.
    """
    frame = transactions_frame(transactions)
    mask = pd.Series(True, index=frame.index)
    if str(year).strip().lower() != ALL:
        mask &= year_mask(frame, year)
    month_number = parse_month(month)
    if month_number is not None:
        mask &= frame['month'] == month_number
    term = (search or '').strip().lower()
    if term:
        mask &= frame['description'].fillna('').astype(str).str.lower().str.contains(term, regex=False)
    return frame[mask].sort_values('date', ascending=False, kind='mergesort')


def paginate(frame: pd.DataFrame, page: int = 1, per_page: int = ITEMS_PER_PAGE) -> Page:
    """Slice ``frame`` into one page; the page number is clamped to what exists."""
    if per_page < 1:
        raise ValueError(f"per_page must be positive, got {per_page}")
    total_rows = len(frame)
    total_pages = max(1, math.ceil(total_rows / per_page))
    current = min(max(1, int(page)), total_pages)
    start = (current - 1) * per_page
    return Page(
        rows=frame.iloc[start:start + per_page],
        page=current,
        total_pages=total_pages,
        total_rows=total_rows,
    )
