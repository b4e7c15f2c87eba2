import pytest

from finance_tracker.analytics import FinanceAnalytics, build_trend, expenses_by_category, summarize
from finance_tracker.config import FALLBACK_CATEGORY_COLOR, UNKNOWN_CATEGORY_NAME
from finance_tracker.periods import filter_period

from builders import make_txn


def sample_records():
    return [
        make_txn('2024-01-05', 1000, type='income', category_id=10),
        make_txn('2024-01-06', 400, category_id=1),
        make_txn('2024-01-20', 10, category_id=2, currency='USD', exchange_rate=50),
        make_txn('2024-02-03', 250, category_id=3),
        make_txn('2023-12-30', 999, category_id=1),
    ]


def test_summary_income_expenses_balance_savings_rate():
    records = [
        make_txn('2024-06-01', 1000, type='income', category_id=10),
        make_txn('2024-06-02', 400, category_id=1),
    ]
    summary = summarize(records)
    assert summary['income'] == 1000
    assert summary['expenses'] == 400
    assert summary['balance'] == 600
    assert summary['savings_rate'] == pytest.approx(60)
    assert summary['transaction_count'] == 2


def test_summary_without_income_has_zero_savings_rate():
    summary = summarize([make_txn('2024-06-02', 400)])
    assert summary['savings_rate'] == 0
    assert summary['balance'] == -400
    assert summarize([]) == {
        'income': 0.0, 'expenses': 0.0, 'balance': 0.0, 'savings_rate': 0.0, 'transaction_count': 0,
    }


def test_summary_is_additive_over_partitions():
    records = sample_records()
    whole = summarize(records)
    left, right = summarize(records[:2]), summarize(records[2:])
    assert whole['income'] == pytest.approx(left['income'] + right['income'])
    assert whole['expenses'] == pytest.approx(left['expenses'] + right['expenses'])
    assert summarize(list(reversed(records)))['expenses'] == pytest.approx(whole['expenses'])


def test_summary_uses_normalized_amounts():
    summary = summarize(filter_period(sample_records(), 2024, 1))
    assert summary['expenses'] == pytest.approx(400 + 500)


def test_trend_has_twelve_months_for_the_year():
    records = [
        make_txn('2024-01-10', 100, category_id=1),
        make_txn('2024-02-10', 200, category_id=1),
        make_txn('2024-03-10', 300, category_id=1),
        make_txn('2025-03-10', 800, category_id=1),
    ]
    trend = build_trend(records, '2024')

    assert len(trend) == 12
    assert trend['month_index'].tolist() == list(range(12))
    assert trend['expenses'].tolist() == [100, 200, 300] + [0] * 9
    assert trend['income'].tolist() == [0] * 12


def test_trend_is_dense_without_data():
    trend = build_trend([], 2024)
    assert len(trend) == 12
    assert trend['income'].sum() == 0 and trend['expenses'].sum() == 0


def test_trend_splits_income_and_expenses():
    trend = build_trend(sample_records(), 2024)
    january = trend.iloc[0]
    assert january['income'] == 1000
    assert january['expenses'] == pytest.approx(900)
    assert trend.iloc[1]['expenses'] == 250
    assert trend.iloc[11]['expenses'] == 0


def test_expenses_by_category_sorted_descending(categories):
    distribution = expenses_by_category(filter_period(sample_records(), 2024), categories)

    assert distribution['name'].tolist() == ['Transporte', 'Alimentación', 'Vivienda']
    assert distribution['total'].tolist() == [500, 400, 250]
    assert distribution['color'].tolist() == ['#fb923c', '#f87171', '#facc15']
    assert 'Salario' not in distribution['name'].tolist()


def test_expenses_by_category_groups_and_keeps_tie_order(categories):
    records = [
        make_txn('2024-04-01', 100, category_id=3),
        make_txn('2024-04-02', 60, category_id=2),
        make_txn('2024-04-03', 40, category_id=2),
        make_txn('2024-04-04', 50, category_id=1),
        make_txn('2024-04-05', 50, category_id=3),
    ]
    distribution = expenses_by_category(records, categories)
    # Vivienda 150, Transporte 100, Alimentación 50
    assert distribution['category_id'].tolist() == [3, 2, 1]
    assert distribution['total'].tolist() == [150, 100, 50]

    tie = expenses_by_category([
        make_txn('2024-04-01', 80, category_id=5),
        make_txn('2024-04-02', 80, category_id=4),
    ], categories)
    assert tie['category_id'].tolist() == [5, 4]


def test_deleted_category_is_shown_as_unknown(categories):
    records = [make_txn('2024-04-01', 75, category_id=404), make_txn('2024-04-02', 10, category_id=1)]
    distribution = expenses_by_category(records, categories)

    assert distribution.iloc[0]['name'] == UNKNOWN_CATEGORY_NAME
    assert distribution.iloc[0]['color'] == FALLBACK_CATEGORY_COLOR
    assert distribution.iloc[1]['name'] == 'Alimentación'


def test_expenses_by_category_empty_inputs():
    assert expenses_by_category([], []).empty
    only_income = [make_txn('2024-04-01', 75, type='income', category_id=10)]
    assert expenses_by_category(only_income, []).empty


def test_analytics_dashboard_bundle(categories):
    analytics = FinanceAnalytics(sample_records(), categories)
    data = analytics.dashboard('2024', '1')

    assert len(data.transactions) == 3
    assert data.summary['income'] == 1000
    # The trend ignores the month filter
    assert data.trend.iloc[1]['expenses'] == 250
    assert data.expenses_by_category['name'].tolist() == ['Transporte', 'Alimentación']
    assert data.pareto.group('A').members == ['Transporte']
    assert data.month == '1'


def test_analytics_methods_match_functions(categories):
    records = sample_records()
    analytics = FinanceAnalytics(records, categories)

    assert analytics.calculate_summary(2024) == summarize(filter_period(records, 2024))
    assert analytics.calculate_trend(2024).equals(build_trend(records, 2024))
    assert analytics.calculate_cash_flow(2024).accumulated_total == pytest.approx(1000 - 900 - 250)
    assert analytics.calculate_pareto(2023).group('A').members == ['Alimentación']
