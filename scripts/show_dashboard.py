#!/usr/bin/env python3
"""Print the dashboard views for a JSON export of transactions and categories."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

import pandas as pd

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from finance_tracker import FinanceAnalytics, ValidationError
from finance_tracker.formatting import format_cash_flow_cell, format_currency, month_label
from finance_tracker.logging_setup import configure_logging, get_logger

logger = get_logger("finance_tracker.scripts.show_dashboard")


def main(data_path: Path, year: str, month: str = 'all') -> int:
    with data_path.open(encoding='utf-8') as fh:
        payload = json.load(fh)

    try:
        analytics = FinanceAnalytics(payload.get('transactions', []), payload.get('categories', []))
        data = analytics.dashboard(year, month)
    except ValidationError as exc:
        logger.error("Cannot build dashboard from %s: %s", data_path, exc)
        return 1

    summary = data.summary
    print(f"Period: {data.year} / {data.month}  ({summary['transaction_count']} transactions)")
    print(f"  Income:       {format_currency(summary['income'])}")
    print(f"  Expenses:     {format_currency(summary['expenses'])}")
    print(f"  Balance:      {format_currency(summary['balance'])}")
    print(f"  Savings rate: {summary['savings_rate']:.1f}%")

    print("\nTrend:")
    trend = data.trend.assign(month=data.trend['month_index'].map(month_label))
    print(trend[['month', 'income', 'expenses']].to_string(index=False))

    print("\nExpenses by category:")
    if data.expenses_by_category.empty:
        print("  (no expenses)")
    else:
        print(data.expenses_by_category[['name', 'total']].to_string(index=False))

    print("\nABC classification:")
    for group in data.pareto.groups:
        print(
            f"  {group.label}: {', '.join(group.members)} "
            f"({group.percent_of_total_value}% of spend, {group.percent_of_item_count}% of categories)"
        )

    print(f"\nCash flow {data.year}:")
    table = analytics.calculate_cash_flow(year).to_frame()
    numeric = table.columns[2:]
    table[numeric] = table[numeric].apply(lambda col: col.map(format_cash_flow_cell))
    with pd.option_context('display.width', 250, 'display.max_columns', None):
        print(table.to_string(index=False))
    return 0


if __name__ == '__main__':
    parser = argparse.ArgumentParser(description='Show the finance dashboard for a period.')
    parser.add_argument('--data', type=Path, required=True, help='JSON file with "transactions" and "categories"')
    parser.add_argument('--year', required=True, help='Calendar year, e.g. 2024')
    parser.add_argument('--month', default='all', help="Month number 1-12 or 'all'")
    parser.add_argument('--log-level', default=None, help='Logging level (defaults to FINTRACK_LOG_LEVEL or INFO)')
    args = parser.parse_args()
    configure_logging(args.log_level)
    sys.exit(main(args.data, args.year, args.month))
