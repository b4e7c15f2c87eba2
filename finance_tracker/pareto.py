"""Pareto curve and ABC classification of expense categories.

Categories are taken in descending order of spend.  Walking that order,
each category is placed by the cumulative share of total spend reached
once it is included:

* **A** while the cumulative share is at most the A ceiling (80 by default)
* **B** while it is at most the B ceiling (90 by default)
* **C** for everything after that

Group A is never left empty when there is at least one category: the
first member of B (or, failing that, of C) is moved into A.

Percentages are rounded half-up: one decimal for the curve, whole
numbers for the group summaries.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable, List, Mapping, Optional, Union

import numpy as np
import pandas as pd

from .config import get_abc_thresholds
from .logging_setup import get_logger

logger = get_logger(__name__)

CURVE_COLUMNS = [
    'category_id',
    'name',
    'color',
    'total',
    'cumulative_percentage',
    'item_index_percentage',
]
ABC_LABELS = ('A', 'B', 'C')


@dataclass
class ABCGroup:
    label: str
    members: List[str] = field(default_factory=list)
    category_ids: List[Any] = field(default_factory=list)
    total_value: float = 0.0
    percent_of_total_value: int = 0
    percent_of_item_count: int = 0


@dataclass
class ParetoResult:
    curve: pd.DataFrame
    groups: List[ABCGroup]

    def group(self, label: str) -> Optional[ABCGroup]:
        for group in self.groups:
            if group.label == label:
                return group
        return None


def round_half_up(value: float, digits: int = 0) -> float:
    """Round like a calculator does: ties go away from zero."""
    quantum = Decimal(1).scaleb(-digits)
    return float(Decimal(repr(float(value))).quantize(quantum, rounding=ROUND_HALF_UP))


def _empty_curve() -> pd.DataFrame:
    curve = pd.DataFrame({col: pd.Series(dtype=object) for col in CURVE_COLUMNS})
    for col in ('total', 'cumulative_percentage', 'item_index_percentage'):
        curve[col] = curve[col].astype(float)
    return curve


def _as_distribution(distribution: Union[pd.DataFrame, Iterable[Mapping[str, Any]], None]) -> pd.DataFrame:
    if distribution is None:
        return pd.DataFrame(columns=['category_id', 'name', 'color', 'total'])
    frame = distribution.copy() if isinstance(distribution, pd.DataFrame) else pd.DataFrame(list(distribution))
    if 'total' not in frame.columns and 'value' in frame.columns:
        frame = frame.rename(columns={'value': 'total'})
    for col in ('category_id', 'name', 'color'):
        if col not in frame.columns:
            frame[col] = None
    if 'total' not in frame.columns:
        frame['total'] = 0.0
    frame['total'] = pd.to_numeric(frame['total'], errors='coerce').fillna(0.0).astype(float)
    return frame.reset_index(drop=True)


def classify(
    distribution: Union[pd.DataFrame, Iterable[Mapping[str, Any]], None],
    a_threshold: Optional[float] = None,
    b_threshold: Optional[float] = None,
) -> ParetoResult:
    """Build the Pareto curve and ABC groups of an expense distribution.

    ``distribution`` must already be sorted by descending ``total``, as
    returned by ``expenses_by_category``.  An empty distribution, or one
    whose totals sum to zero, yields an empty curve and no groups.
    """
    if a_threshold is None or b_threshold is None:
        default_a, default_b = get_abc_thresholds()
        a_threshold = default_a if a_threshold is None else a_threshold
        b_threshold = default_b if b_threshold is None else b_threshold
    if a_threshold > b_threshold:
        raise ValueError(f"ABC threshold A ({a_threshold}) cannot exceed B ({b_threshold})")

    data = _as_distribution(distribution)
    count = len(data)
    grand_total = float(data['total'].sum()) if count else 0.0
    if count == 0 or grand_total == 0:
        return ParetoResult(curve=_empty_curve(), groups=[])

    totals = data['total'].to_numpy(dtype=float)
    cumulative = np.cumsum(totals) * 100 / grand_total
    positions = np.arange(1, count + 1) * 100 / count

    curve = data[['category_id', 'name', 'color', 'total']].copy()
    curve['cumulative_percentage'] = [round_half_up(v, 1) for v in cumulative]
    curve['item_index_percentage'] = [round_half_up(v, 1) for v in positions]

    labels = np.where(cumulative <= a_threshold, 'A', np.where(cumulative <= b_threshold, 'B', 'C'))
    if not (labels == 'A').any():
        # Labels are in spend order, so entry 0 is the first of B (or C)
        labels[0] = 'A'

    groups: List[ABCGroup] = []
    for label in ABC_LABELS:
        members = data[labels == label]
        if members.empty:
            continue
        group_total = float(members['total'].sum())
        groups.append(ABCGroup(
            label=label,
            members=members['name'].tolist(),
            category_ids=members['category_id'].tolist(),
            total_value=group_total,
            percent_of_total_value=int(round_half_up(group_total * 100 / grand_total)),
            percent_of_item_count=int(round_half_up(len(members) * 100 / count)),
        ))

    logger.debug(
        "Classified %d categories: %s",
        count,
        ', '.join(f"{g.label}={len(g.members)}" for g in groups),
    )
    return ParetoResult(curve=curve.reset_index(drop=True), groups=groups)
