"""Category lookups with guaranteed display fallbacks.

Transactions can outlive their category (it may be deleted elsewhere), so
every name or color lookup here falls back to ``UNKNOWN_CATEGORY_NAME`` /
``FALLBACK_CATEGORY_COLOR`` instead of failing.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

from .config import EXPENSE, FALLBACK_CATEGORY_COLOR, INCOME, UNKNOWN_CATEGORY_NAME
from .models import CategoriesLike, Category, coerce_categories

DEFAULT_CATEGORIES: List[Category] = [
    Category(1, 'Alimentación', EXPENSE, '#f87171', 'Utensils', True),
    Category(2, 'Transporte', EXPENSE, '#fb923c', 'Car', True),
    Category(3, 'Vivienda', EXPENSE, '#facc15', 'Home', True),
    Category(4, 'Servicios', EXPENSE, '#a3e635', 'Zap', True),
    Category(5, 'Entretenimiento', EXPENSE, '#22d3ee', 'Gamepad2', True),
    Category(6, 'Salud', EXPENSE, '#f472b6', 'Heart', True),
    Category(7, 'Educación', EXPENSE, '#818cf8', 'GraduationCap', True),
    Category(8, 'Compras', EXPENSE, '#2dd4bf', 'ShoppingBag', True),
    Category(9, 'Otros', EXPENSE, '#9ca3af', 'MoreHorizontal', True),
    Category(10, 'Salario', INCOME, '#4ade80', 'Briefcase', True),
    Category(11, 'Freelance', INCOME, '#34d399', 'Laptop', True),
    Category(12, 'Inversiones', INCOME, '#60a5fa', 'TrendingUp', True),
    Category(13, 'Regalo', INCOME, '#c084fc', 'Gift', True),
    Category(14, 'Otros Ingresos', INCOME, '#94a3b8', 'Plus', True),
]


def category_key(category_id: Any) -> str:
    """Key used to compare ids across integer and string id schemes."""
    if isinstance(category_id, float) and category_id.is_integer():
        category_id = int(category_id)
    return str(category_id).strip()


class CategoryIndex:
    """Read-only id -> category lookup."""

    def __init__(self, categories: CategoriesLike):
        self._by_key: Dict[str, Category] = {}
        for category in coerce_categories(categories):
            # First definition of an id wins
            self._by_key.setdefault(category_key(category.id), category)

    def __len__(self) -> int:
        return len(self._by_key)

    def __contains__(self, category_id: Any) -> bool:
        return category_key(category_id) in self._by_key

    def by_id(self, category_id: Any) -> Optional[Category]:
        return self._by_key.get(category_key(category_id))

    def name_of(self, category_id: Any) -> str:
        category = self.by_id(category_id)
        return category.name if category is not None else UNKNOWN_CATEGORY_NAME

    def color_of(self, category_id: Any) -> str:
        category = self.by_id(category_id)
        if category is None or not category.color:
            return FALLBACK_CATEGORY_COLOR
        return category.color


def get_category_by_id(categories: CategoriesLike, category_id: Any) -> Optional[Category]:
    return CategoryIndex(categories).by_id(category_id)


def get_category_name(categories: CategoriesLike, category_id: Any) -> str:
    return CategoryIndex(categories).name_of(category_id)


def get_category_color(categories: CategoriesLike, category_id: Any) -> str:
    return CategoryIndex(categories).color_of(category_id)


def categories_of_type(categories: Iterable[Category], category_type: str) -> List[Category]:
    """Categories usable for transactions of ``category_type``, in input order."""
    wanted = category_type.strip().lower()
    return [c for c in coerce_categories(categories) if c.type == wanted]


def as_category_index(categories: Any) -> CategoryIndex:
    if isinstance(categories, CategoryIndex):
        return categories
    return CategoryIndex(categories)
