import logging

import pytest

from finance_tracker.cash_flow import build_cash_flow
from finance_tracker.config import UNKNOWN_CATEGORY_NAME
from finance_tracker.formatting import MONTH_LABELS

from builders import make_txn


def sample_records():
    return [
        make_txn('2024-01-01', 1000, type='income', category_id=10),
        make_txn('2024-01-15', 300, category_id=1),
        make_txn('2024-01-20', 100, category_id=2),
        make_txn('2024-02-10', 250, category_id=1),
        make_txn('2024-03-05', 2, type='income', category_id=11, currency='USD', exchange_rate=500),
        make_txn('2024-03-06', 900, category_id=2),
        make_txn('2023-07-01', 5000, type='income', category_id=10),
    ]


def test_rows_per_category_and_month(categories):
    matrix = build_cash_flow(sample_records(), categories, 2024)

    assert [r.name for r in matrix.expense_rows] == ['Transporte', 'Alimentación']
    transporte, alimentacion = matrix.expense_rows
    assert transporte.monthly_totals[:3] == [100, 0, 900]
    assert transporte.year_total == 1000
    assert alimentacion.monthly_totals[:3] == [300, 250, 0]
    assert alimentacion.year_total == 550

    assert [r.name for r in matrix.income_rows] == ['Salario', 'Freelance']
    assert matrix.income_rows[1].monthly_totals[2] == 1000


def test_column_totals_net_and_accumulated_balance(categories):
    matrix = build_cash_flow(sample_records(), categories, '2024')

    assert matrix.expense_totals[:3] == [400, 250, 900]
    assert matrix.income_totals[:3] == [1000, 0, 1000]
    assert matrix.net_balance[:4] == [600, -250, 100, 0]
    assert matrix.accumulated_balance[:4] == [600, 350, 450, 450]
    assert matrix.accumulated_balance[11] == 450
    assert all(len(v) == 12 for v in (
        matrix.expense_totals, matrix.income_totals, matrix.net_balance, matrix.accumulated_balance,
    ))


def test_accumulated_total_is_last_running_value(categories):
    matrix = build_cash_flow(sample_records(), categories, 2024)

    assert matrix.accumulated_total == pytest.approx(sum(matrix.net_balance))
    assert matrix.accumulated_total != pytest.approx(sum(matrix.accumulated_balance))


def test_month_filter_is_not_applied_and_other_years_excluded(categories):
    matrix = build_cash_flow(sample_records(), categories, 2023)
    assert matrix.expense_rows == []
    assert matrix.income_totals[6] == 5000
    assert matrix.accumulated_balance[-1] == 5000


def test_empty_year(categories):
    matrix = build_cash_flow([], categories, 2024)
    assert matrix.expense_rows == [] and matrix.income_rows == []
    assert matrix.net_balance == [0.0] * 12
    assert matrix.accumulated_total == 0


def test_unknown_category_row(categories):
    matrix = build_cash_flow([make_txn('2024-05-05', 10, category_id=77)], categories, 2024)
    assert matrix.expense_rows[0].name == UNKNOWN_CATEGORY_NAME


def test_equal_totals_keep_first_appearance_order(categories):
    records = [
        make_txn('2024-05-01', 50, category_id=4),
        make_txn('2024-06-01', 50, category_id=3),
    ]
    matrix = build_cash_flow(records, categories, 2024)
    assert [r.category_id for r in matrix.expense_rows] == [4, 3]


def test_to_frame_layout(categories):
    table = build_cash_flow(sample_records(), categories, 2024).to_frame()

    assert list(table.columns) == ['Section', 'Category', *MONTH_LABELS, 'Total']
    assert table['Category'].tolist() == [
        'Transporte', 'Alimentación', 'Total expenses',
        'Salario', 'Freelance', 'Total income',
        'Net cash balance', 'Accumulated balance',
    ]
    totals = table.set_index('Category')['Total']
    assert totals['Total expenses'] == 1550
    assert totals['Net cash balance'] == 450
    assert totals['Accumulated balance'] == 450
    assert table.set_index('Category').loc['Accumulated balance', 'Feb'] == 350


def test_unknown_category_is_logged(categories, caplog):
    with caplog.at_level(logging.WARNING, logger='finance_tracker'):
        build_cash_flow([make_txn('2024-05-05', 10, category_id=77)], categories, 2024)
    assert '77' in caplog.text
