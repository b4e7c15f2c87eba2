"""Record builders shared by the finance_tracker tests."""

from __future__ import annotations

import itertools

_ids = itertools.count(1)


def make_txn(date, amount, type='expense', category_id=1, currency='ARS', exchange_rate=None, description=None):
    """Build a storage-shaped transaction record with its normalized amount."""
    amount_in_home = amount * exchange_rate if currency == 'USD' else amount
    return {
        'id': next(_ids),
        'description': description or f"{type} {amount}",
        'amount': amount,
        'amountInHomeCurrency': amount_in_home,
        'currency': currency,
        'exchangeRate': exchange_rate,
        'categoryId': category_id,
        'date': date,
        'type': type,
    }
