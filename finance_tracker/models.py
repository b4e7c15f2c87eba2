"""Transaction and category records and their tabular form.

Records arrive from the storage layer either as plain dicts (camelCase or
snake_case field names, string or integer ids) or as the dataclasses
defined here.  ``transactions_frame`` turns any of those shapes into the
canonical DataFrame every aggregation works on.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

import pandas as pd

from .config import TRANSACTION_TYPES
from .logging_setup import get_logger

logger = get_logger(__name__)


class ValidationError(ValueError):
    """Raised when a transaction or its inputs break a domain rule."""


TRANSACTION_COLUMNS = [
    'id',
    'description',
    'amount',
    'amount_in_home',
    'currency',
    'exchange_rate',
    'category_id',
    'date',
    'type',
]

# Field names used by the different storage schemas, mapped to ours
FIELD_ALIASES = {
    'amountInHomeCurrency': 'amount_in_home',
    'amount_in_home_currency': 'amount_in_home',
    'amountInARS': 'amount_in_home',
    'amount_in_ars': 'amount_in_home',
    'exchangeRate': 'exchange_rate',
    'categoryId': 'category_id',
    'category': 'category_id',
    'createdAt': 'created_at',
    'updatedAt': 'updated_at',
    'isDefault': 'is_default',
}


@dataclass(frozen=True)
class Category:
    id: Any
    name: str
    type: str
    color: str = ''
    icon: str = ''
    is_default: bool = False


@dataclass(frozen=True)
class Transaction:
    """A single income or expense entry.

    ``amount_in_home`` is computed once when the transaction is built or
    edited (see ``finance_tracker.currency``) and never recomputed by the
    aggregations.
    """

    id: Any
    description: str
    amount: float
    amount_in_home: float
    currency: str
    category_id: Any
    date: date
    type: str
    exchange_rate: Optional[float] = None
    extra: Dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    def to_record(self) -> Dict[str, Any]:
        record = asdict(self)
        extra = record.pop('extra')
        record['date'] = self.date.isoformat()
        record.update(extra)
        return record


RecordLike = Union[Mapping[str, Any], Transaction]
TransactionsLike = Union[pd.DataFrame, Iterable[RecordLike], None]
CategoriesLike = Union[pd.DataFrame, Iterable[Union[Mapping[str, Any], Category]], None]


def canonical_field_names(record: Mapping[str, Any]) -> Dict[str, Any]:
    """Return a copy of ``record`` with aliased field names renamed."""
    renamed: Dict[str, Any] = {}
    for key, value in record.items():
        target = FIELD_ALIASES.get(key, key)
        # An explicit canonical field wins over its alias
        if target in renamed and key != target:
            continue
        renamed[target] = value
    return renamed


def _iso(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


def _wall_clock(value: Any) -> pd.Timestamp:
    """Parse one ISO 8601 value, keeping the date as written.

    Values are parsed one at a time because a snapshot may mix naive dates
    with timestamps carrying different UTC offsets.
    """
    parsed = pd.to_datetime(_iso(value), format='ISO8601', errors='coerce')
    if pd.isna(parsed):
        return pd.NaT
    if parsed.tzinfo is not None:
        parsed = parsed.tz_localize(None)
    return parsed


def _is_missing(value: Any) -> bool:
    return value is None or (pd.api.types.is_scalar(value) and pd.isna(value))


def _text(value: Any) -> str:
    return '' if _is_missing(value) else str(value)


def empty_transactions_frame() -> pd.DataFrame:
    frame = pd.DataFrame({col: pd.Series(dtype=object) for col in TRANSACTION_COLUMNS})
    frame['amount'] = frame['amount'].astype(float)
    frame['amount_in_home'] = frame['amount_in_home'].astype(float)
    frame['date'] = pd.Series(dtype='datetime64[ns]')
    frame['year'] = pd.Series(dtype='int64')
    frame['month'] = pd.Series(dtype='int64')
    return frame


def transactions_frame(records: TransactionsLike) -> pd.DataFrame:
    """Build the canonical transaction frame from any supported input.

    The returned frame always carries ``TRANSACTION_COLUMNS`` followed by
    derived ``year`` and ``month`` columns (calendar year and 1-indexed
    month of ``date``), then any extra columns found on the input.  Row
    order is preserved.  The input itself is never modified.
    """
    if records is None:
        return empty_transactions_frame()

    if isinstance(records, pd.DataFrame):
        # An explicit canonical column wins over its alias
        shadowed = [c for c in records.columns if FIELD_ALIASES.get(c) in records.columns]
        data = records.drop(columns=shadowed).rename(columns=lambda c: FIELD_ALIASES.get(c, c))
        data = data.loc[:, ~data.columns.duplicated()].copy()
    else:
        rows: List[Dict[str, Any]] = []
        for record in records:
            if isinstance(record, Transaction):
                rows.append(record.to_record())
            else:
                rows.append(canonical_field_names(record))
        if not rows:
            return empty_transactions_frame()
        data = pd.DataFrame(rows)

    if data.empty:
        return empty_transactions_frame()

    for col in TRANSACTION_COLUMNS:
        if col not in data.columns:
            data[col] = None

    if not pd.api.types.is_datetime64_any_dtype(data['date']):
        parsed = pd.to_datetime(data['date'].map(_wall_clock))
        bad = parsed.isna()
        if bad.any():
            ids = data.loc[bad, 'id'].tolist()
            raise ValidationError(f"Unparseable transaction dates for ids {ids}")
        data['date'] = parsed
    if data['date'].dt.tz is not None:
        data['date'] = data['date'].dt.tz_localize(None)
    data['date'] = data['date'].dt.normalize()

    data['type'] = data['type'].fillna('').astype(str).str.strip().str.lower()
    bad_types = ~data['type'].isin(TRANSACTION_TYPES)
    if bad_types.any():
        found = sorted(set(data.loc[bad_types, 'type']))
        raise ValidationError(f"Unknown transaction type(s): {found}")

    data['amount'] = pd.to_numeric(data['amount'], errors='coerce')
    data['amount_in_home'] = pd.to_numeric(data['amount_in_home'], errors='coerce')
    missing = data['amount_in_home'].isna()
    if missing.any():
        ids = data.loc[missing, 'id'].tolist()
        raise ValidationError(f"Transactions without a normalized amount: {ids}")
    data['amount_in_home'] = data['amount_in_home'].astype(float)

    data['year'] = data['date'].dt.year.astype('int64')
    data['month'] = data['date'].dt.month.astype('int64')

    extras = [c for c in data.columns if c not in TRANSACTION_COLUMNS and c not in ('year', 'month')]
    frame = data[TRANSACTION_COLUMNS + ['year', 'month'] + extras].reset_index(drop=True)
    logger.debug("Prepared %d transactions", len(frame))
    return frame


def coerce_categories(records: CategoriesLike) -> List[Category]:
    """Return ``records`` as a list of ``Category`` objects."""
    if records is None:
        return []
    if isinstance(records, pd.DataFrame):
        records = records.to_dict('records')

    categories: List[Category] = []
    for record in records:
        if isinstance(record, Category):
            categories.append(record)
            continue
        fields = canonical_field_names(record)
        categories.append(Category(
            id=fields.get('id'),
            name=_text(fields.get('name')),
            type=_text(fields.get('type')).strip().lower(),
            color=_text(fields.get('color')).strip(),
            icon=_text(fields.get('icon')),
            is_default=not _is_missing(fields.get('is_default')) and bool(fields.get('is_default')),
        ))
    return categories
