"""Finance Analytics.

This module contains the aggregations behind the dashboard: period
summaries, the monthly income/expense trend and the expense distribution
by category.  ``FinanceAnalytics`` ties them together with the Pareto
classification and the cash flow matrix so a consumer can recompute every
derived view from one snapshot of transactions and categories.

All functions are pure: they read the records they are given and return
new objects.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Union

import pandas as pd

from .cash_flow import CashFlowMatrix, build_cash_flow
from .categories import CategoryIndex, as_category_index, category_key
from .config import EXPENSE, INCOME, UNKNOWN_CATEGORY_NAME
from .logging_setup import get_logger
from .models import CategoriesLike, TransactionsLike, transactions_frame
from .pareto import ParetoResult, classify
from .periods import ALL, MonthLike, YearLike, filter_period, monthly_totals, year_rows

logger = get_logger(__name__)

TREND_COLUMNS = ['month_index', 'month', 'income', 'expenses']
DISTRIBUTION_COLUMNS = ['category_id', 'name', 'color', 'total']


def summarize(transactions: TransactionsLike) -> Dict[str, float]:
    """Calculate income, expenses, balance and savings rate.

    ``transactions`` is normally the output of ``filter_period``.  The
    savings rate is a percentage of income and is 0 when there is no
    income.
    """
    frame = transactions_frame(transactions)
    income = float(frame.loc[frame['type'] == INCOME, 'amount_in_home'].sum())
    expenses = float(frame.loc[frame['type'] == EXPENSE, 'amount_in_home'].sum())
    balance = income - expenses
    savings_rate = (balance / income * 100) if income > 0 else 0.0

    return {
        'income': income,
        'expenses': expenses,
        'balance': balance,
        'savings_rate': savings_rate,
        'transaction_count': len(frame),
    }


def build_trend(transactions: TransactionsLike, year: YearLike) -> pd.DataFrame:
    """Income and expense totals for each month of ``year``.

    Always twelve rows, January first; ``month_index`` is 0-based and
    ``month`` 1-based.  Any month filter is deliberately not applied.
    """
    rows = year_rows(transactions, year)
    trend = pd.DataFrame({
        'month_index': range(12),
        'month': range(1, 13),
        'income': monthly_totals(rows[rows['type'] == INCOME]),
        'expenses': monthly_totals(rows[rows['type'] == EXPENSE]),
    })
    return trend[TREND_COLUMNS]


def expenses_by_category(
    transactions: TransactionsLike,
    categories: Union[CategoriesLike, CategoryIndex],
) -> pd.DataFrame:
    """Total expense per category, largest first.

    Only categories with at least one expense appear.  Equal totals keep
    the order in which their category first shows up in
    ``transactions``.  Unknown category ids are labelled with the
    fallback name and color.
    """
    index = as_category_index(categories)
    frame = transactions_frame(transactions)
    expenses = frame[frame['type'] == EXPENSE]
    if expenses.empty:
        return pd.DataFrame({
            'category_id': pd.Series(dtype=object),
            'name': pd.Series(dtype=object),
            'color': pd.Series(dtype=object),
            'total': pd.Series(dtype=float),
        })

    grouped = (
        expenses.assign(_key=expenses['category_id'].map(category_key))
        .groupby('_key', sort=False)
        .agg(category_id=('category_id', 'first'), total=('amount_in_home', 'sum'))
        .reset_index(drop=True)
    )
    grouped['name'] = grouped['category_id'].map(index.name_of)
    grouped['color'] = grouped['category_id'].map(index.color_of)

    unresolved = [cid for cid in grouped['category_id'] if cid not in index]
    if unresolved:
        logger.warning(
            "%d expense categories not found, shown as %r: %s",
            len(unresolved), UNKNOWN_CATEGORY_NAME, unresolved,
        )

    distribution = grouped.sort_values('total', ascending=False, kind='mergesort')
    return distribution[DISTRIBUTION_COLUMNS].reset_index(drop=True)


@dataclass
class DashboardData:
    """Every derived view for one (year, month) selection."""

    year: str
    month: str
    transactions: pd.DataFrame
    summary: Dict[str, float]
    trend: pd.DataFrame
    expenses_by_category: pd.DataFrame
    pareto: ParetoResult


class FinanceAnalytics:
    """Finance analytics over one snapshot of transactions and categories."""

    def __init__(self, transactions: TransactionsLike, categories: CategoriesLike = None):
        """Initialize with transaction and category records."""
        self.data = transactions_frame(transactions)
        self.categories: CategoryIndex = as_category_index(categories)

    def filter_period(self, year: YearLike, month: MonthLike = ALL) -> pd.DataFrame:
        return filter_period(self.data, year, month)

    def calculate_summary(self, year: YearLike, month: MonthLike = ALL) -> Dict[str, float]:
        return summarize(self.filter_period(year, month))

    def calculate_trend(self, year: YearLike) -> pd.DataFrame:
        return build_trend(self.data, year)

    def calculate_category_spending(self, year: YearLike, month: MonthLike = ALL) -> pd.DataFrame:
        return expenses_by_category(self.filter_period(year, month), self.categories)

    def calculate_pareto(
        self,
        year: YearLike,
        month: MonthLike = ALL,
        a_threshold: Optional[float] = None,
        b_threshold: Optional[float] = None,
    ) -> ParetoResult:
        return classify(self.calculate_category_spending(year, month), a_threshold, b_threshold)

    def calculate_cash_flow(self, year: YearLike) -> CashFlowMatrix:
        return build_cash_flow(self.data, self.categories, year)

    def dashboard(self, year: YearLike, month: MonthLike = ALL) -> DashboardData:
        """Compute the period views in one pass over the filtered data."""
        filtered = self.filter_period(year, month)
        distribution = expenses_by_category(filtered, self.categories)
        return DashboardData(
            year=str(year).strip(),
            month=str(month).strip().lower() if month is not None else ALL,
            transactions=filtered,
            summary=summarize(filtered),
            trend=build_trend(self.data, year),
            expenses_by_category=distribution,
            pareto=classify(distribution),
        )
