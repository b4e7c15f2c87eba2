"""Formatting utilities for currency, month and table display."""

from __future__ import annotations

from typing import Union

from .config import HOME_CURRENCY

MONTH_LABELS = ['Jan', 'Feb', 'Mar', 'Apr', 'May', 'Jun', 'Jul', 'Aug', 'Sep', 'Oct', 'Nov', 'Dec']


def month_label(month_index: int) -> str:
    """Short name for a 0-based month index (0 = January)."""
    if not 0 <= month_index < 12:
        raise IndexError(f"month index out of range: {month_index}")
    return MONTH_LABELS[month_index]


def format_currency(amount: Union[float, int], currency: str = HOME_CURRENCY) -> str:
    """Format an amount with thousands separators and its currency code.

    Example:
        >>> format_currency(1234.5)
        'ARS 1,234.50'
        >>> format_currency(-20, 'USD')
        '-USD 20.00'
    """
    sign = '-' if amount < 0 else ''
    return f"{sign}{currency} {abs(amount):,.2f}"


def _compact(n: float) -> str:
    return f"{n:.0f}" if n % 1 == 0 else f"{n:.1f}"


def format_compact(value: Union[float, int]) -> str:
    """Format a number compactly for chart axis labels.

    Only meant for display, never for storing values.

    Example:
        >>> format_compact(1500)
        '$1.5k'
        >>> format_compact(2300000)
        '$2.3M'
        >>> format_compact(1000000000)
        '$1B'
    """
    magnitude = abs(value)
    sign = '-' if value < 0 else ''

    if magnitude >= 1_000_000_000:
        return f"{sign}${_compact(magnitude / 1_000_000_000)}B"
    if magnitude >= 1_000_000:
        return f"{sign}${_compact(magnitude / 1_000_000)}M"
    if magnitude >= 1_000:
        return f"{sign}${_compact(magnitude / 1_000)}k"
    return f"{sign}${magnitude:g}"


def format_cash_flow_cell(value: Union[float, int], currency: str = HOME_CURRENCY) -> str:
    """Cash flow table cell: a dash for empty months, the amount otherwise."""
    if value == 0:
        return '-'
    return format_currency(value, currency)
