"""Home-currency normalization and write-time transaction building.

The normalized amount is computed once, when a transaction is created or
edited.  Aggregations only ever read ``amount_in_home``.
"""

from __future__ import annotations

import math
import numbers
from dataclasses import replace
from datetime import date, datetime
from typing import Any, Iterable, Optional, Union

import pandas as pd

from . import config
from .categories import as_category_index
from .models import Category, Transaction, ValidationError


def _is_positive_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return False
    return math.isfinite(value) and value > 0


def normalize_amount(amount: float, currency: str, exchange_rate: Optional[float] = None) -> float:
    """Convert ``amount`` in ``currency`` into the home currency.

    Home-currency amounts are returned unchanged and any exchange rate is
    ignored.  Foreign amounts require a positive exchange rate.

    >>> normalize_amount(10, 'USD', 1000)
    10000.0
    """
    if not _is_positive_number(amount):
        raise ValidationError(f"Amount must be a positive number, got {amount!r}")

    code = str(currency).strip().upper()
    if code == config.HOME_CURRENCY:
        return float(amount)
    if code != config.FOREIGN_CURRENCY:
        raise ValidationError(
            f"Invalid currency {currency!r}: expected {config.HOME_CURRENCY} or {config.FOREIGN_CURRENCY}"
        )
    if exchange_rate is None:
        raise ValidationError(f"An exchange rate is required for {code} transactions")
    if not _is_positive_number(exchange_rate):
        raise ValidationError(f"Exchange rate must be greater than 0, got {exchange_rate!r}")
    return float(amount) * float(exchange_rate)


def _parse_date(value: Union[str, date, datetime]) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value or '').strip()
    if not text:
        raise ValidationError("Date cannot be empty")
    parsed = pd.to_datetime(text, format='ISO8601', errors='coerce')
    if pd.isna(parsed):
        raise ValidationError(f"Invalid ISO 8601 date: {value!r}")
    return parsed.date()


def _check_description(description: str) -> str:
    text = str(description or '').strip()
    if not text:
        raise ValidationError("Description cannot be empty")
    if len(text) > config.MAX_DESCRIPTION_LENGTH:
        raise ValidationError(
            f"Description cannot exceed {config.MAX_DESCRIPTION_LENGTH} characters"
        )
    return text


def _check_category(category_id: Any, txn_type: str, categories: Optional[Iterable[Category]]) -> None:
    if category_id is None or str(category_id).strip() == '':
        raise ValidationError("A category must be selected")
    if categories is None:
        return
    category = as_category_index(categories).by_id(category_id)
    if category is None:
        raise ValidationError(f"Category {category_id!r} does not exist")
    if category.type != txn_type:
        raise ValidationError(
            f"Category {category.name!r} is an {category.type} category, "
            f"cannot be used for an {txn_type} transaction"
        )


def build_transaction(
    *,
    id: Any,
    description: str,
    amount: float,
    currency: str,
    category_id: Any,
    date: Union[str, date, datetime],
    type: str,
    exchange_rate: Optional[float] = None,
    categories: Optional[Iterable[Category]] = None,
) -> Transaction:
    """Validate the inputs of a new transaction and return it normalized.

    When ``categories`` is given the referenced category must exist and
    share the transaction's type.
    """
    txn_type = str(type or '').strip().lower()
    if txn_type not in config.TRANSACTION_TYPES:
        raise ValidationError(f"Invalid type {type!r}: expected 'income' or 'expense'")

    code = str(currency or '').strip().upper()
    amount_in_home = normalize_amount(amount, code, exchange_rate)
    _check_category(category_id, txn_type, categories)

    return Transaction(
        id=id,
        description=_check_description(description),
        amount=float(amount),
        amount_in_home=amount_in_home,
        currency=code,
        exchange_rate=float(exchange_rate) if code == config.FOREIGN_CURRENCY else None,
        category_id=category_id,
        date=_parse_date(date),
        type=txn_type,
    )


def edit_transaction(
    transaction: Transaction,
    categories: Optional[Iterable[Category]] = None,
    **changes: Any,
) -> Transaction:
    """Return a copy of ``transaction`` with ``changes`` applied.

    The normalized amount is recomputed from the resulting fields; the
    original transaction is left as it was.
    """
    unknown = set(changes) - {
        'description', 'amount', 'currency', 'exchange_rate', 'category_id', 'date', 'type'
    }
    if unknown:
        raise ValidationError(f"Cannot edit field(s): {sorted(unknown)}")

    merged = replace(transaction, **{k: v for k, v in changes.items() if k != 'date'})
    rebuilt = build_transaction(
        id=merged.id,
        description=merged.description,
        amount=merged.amount,
        currency=merged.currency,
        category_id=merged.category_id,
        date=changes.get('date', transaction.date),
        type=merged.type,
        exchange_rate=merged.exchange_rate,
        categories=categories,
    )
    return replace(rebuilt, extra=dict(transaction.extra))
