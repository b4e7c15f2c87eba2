"""Yearly cash flow matrix: category x month totals with running balance."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional, Union

import numpy as np
import pandas as pd

from .categories import CategoryIndex, as_category_index, category_key
from .config import EXPENSE, INCOME, UNKNOWN_CATEGORY_NAME
from .formatting import MONTH_LABELS
from .logging_setup import get_logger
from .models import CategoriesLike, TransactionsLike
from .periods import YearLike, monthly_totals, year_rows

logger = get_logger(__name__)


@dataclass
class CashFlowRow:
    category_id: Any
    name: str
    monthly_totals: List[float]
    year_total: float


@dataclass
class CashFlowMatrix:
    """Cash flow of one calendar year.

    Every list holds twelve values, January first.  ``accumulated_balance``
    is the running sum of ``net_balance``; its yearly figure is
    ``accumulated_total`` (December's value), not the sum of its months.
    """

    year: str
    expense_rows: List[CashFlowRow] = field(default_factory=list)
    income_rows: List[CashFlowRow] = field(default_factory=list)
    expense_totals: List[float] = field(default_factory=lambda: [0.0] * 12)
    income_totals: List[float] = field(default_factory=lambda: [0.0] * 12)
    net_balance: List[float] = field(default_factory=lambda: [0.0] * 12)
    accumulated_balance: List[float] = field(default_factory=lambda: [0.0] * 12)

    @property
    def accumulated_total(self) -> float:
        return self.accumulated_balance[-1] if self.accumulated_balance else 0.0

    def to_frame(self) -> pd.DataFrame:
        """Lay the matrix out as the table shown to users.

        Columns are ``Section``, ``Category``, one column per month and
        ``Total``.
        """
        records = []

        def add(section: str, label: str, months: List[float], total: Optional[float] = None) -> None:
            record = {'Section': section, 'Category': label}
            record.update(zip(MONTH_LABELS, months))
            record['Total'] = float(sum(months)) if total is None else total
            records.append(record)

        for row in self.expense_rows:
            add('Expenses', row.name, row.monthly_totals, row.year_total)
        add('Expenses', 'Total expenses', self.expense_totals)
        for row in self.income_rows:
            add('Income', row.name, row.monthly_totals, row.year_total)
        add('Income', 'Total income', self.income_totals)
        add('Balance', 'Net cash balance', self.net_balance)
        add('Balance', 'Accumulated balance', self.accumulated_balance, self.accumulated_total)

        return pd.DataFrame(records, columns=['Section', 'Category', *MONTH_LABELS, 'Total'])


def _build_rows(rows: pd.DataFrame, categories: CategoryIndex) -> List[CashFlowRow]:
    result: List[CashFlowRow] = []
    if rows.empty:
        return result
    keys = rows['category_id'].map(category_key)
    for _, group in rows.groupby(keys, sort=False):
        months = monthly_totals(group)
        category_id = group['category_id'].iloc[0]
        result.append(CashFlowRow(
            category_id=category_id,
            name=categories.name_of(category_id),
            monthly_totals=months.tolist(),
            year_total=float(months.sum()),
        ))

    unresolved = [r.category_id for r in result if r.category_id not in categories]
    if unresolved:
        logger.warning(
            "%d cash flow categories not found, shown as %r: %s",
            len(unresolved), UNKNOWN_CATEGORY_NAME, unresolved,
        )
    # Equal totals keep first-appearance order
    return sorted(result, key=lambda r: r.year_total, reverse=True)


def _column_totals(rows: List[CashFlowRow]) -> np.ndarray:
    if not rows:
        return np.zeros(12, dtype=float)
    return np.sum([r.monthly_totals for r in rows], axis=0)


def build_cash_flow(
    transactions: TransactionsLike,
    categories: Union[CategoriesLike, CategoryIndex],
    year: YearLike,
) -> CashFlowMatrix:
    """Build the cash flow matrix of ``year``.

    The month filter never applies here: the matrix always covers the
    whole calendar year.
    """
    index = as_category_index(categories)
    rows = year_rows(transactions, year)

    expense_rows = _build_rows(rows[rows['type'] == EXPENSE], index)
    income_rows = _build_rows(rows[rows['type'] == INCOME], index)

    expense_totals = _column_totals(expense_rows)
    income_totals = _column_totals(income_rows)
    net_balance = income_totals - expense_totals
    accumulated = np.cumsum(net_balance)

    logger.debug(
        "Cash flow %s: %d expense rows, %d income rows",
        year, len(expense_rows), len(income_rows),
    )
    return CashFlowMatrix(
        year=str(year).strip(),
        expense_rows=expense_rows,
        income_rows=income_rows,
        expense_totals=expense_totals.tolist(),
        income_totals=income_totals.tolist(),
        net_balance=net_balance.tolist(),
        accumulated_balance=accumulated.tolist(),
    )
