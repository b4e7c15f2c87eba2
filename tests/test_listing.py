from datetime import date

import pandas as pd
import pytest

from finance_tracker.listing import available_years, paginate, search_transactions

from builders import make_txn


def sample_records():
    return [
        make_txn('2022-03-01', 10, description='Netflix'),
        make_txn('2024-01-10', 20, description='Supermercado Dia'),
        make_txn('2024-01-25', 30, description='NETFLIX.COM'),
        make_txn('2023-06-01', 40, description='Farmacia'),
    ]


def test_available_years_include_current_year():
    assert available_years(sample_records(), today=date(2025, 5, 1)) == [2025, 2024, 2023, 2022]
    assert available_years(sample_records(), today=date(2024, 5, 1)) == [2024, 2023, 2022]
    assert available_years([], today=date(2026, 1, 1)) == [2026]


def test_search_is_case_insensitive_and_newest_first():
    result = search_transactions(sample_records(), search='netflix')
    assert result['description'].tolist() == ['NETFLIX.COM', 'Netflix']


def test_search_with_year_and_month():
    result = search_transactions(sample_records(), year='2024', month='1')
    assert result['amount'].tolist() == [30, 20]
    assert search_transactions(sample_records(), year=2024, month=2).empty


def test_search_treats_term_literally():
    records = sample_records() + [make_txn('2024-02-01', 5, description='Cafe (Palermo)')]
    assert len(search_transactions(records, search='(palermo')) == 1


def test_paginate_clamps_page():
    frame = pd.DataFrame({'n': range(32)})

    first = paginate(frame, 1, per_page=15)
    assert first.total_pages == 3
    assert first.rows['n'].tolist() == list(range(15))

    last = paginate(frame, 99, per_page=15)
    assert last.page == 3
    assert last.rows['n'].tolist() == [30, 31]

    assert paginate(frame, 0, per_page=15).page == 1


def test_paginate_empty_frame_has_one_page():
    page = paginate(pd.DataFrame({'n': []}))
    assert page.total_pages == 1
    assert page.page == 1
    assert page.rows.empty
    with pytest.raises(ValueError):
        paginate(pd.DataFrame({'n': []}), per_page=0)
