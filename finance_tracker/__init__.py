"""Top-level package for the Finance Tracker aggregation engine.

The primary modules are:

* ``currency`` – home-currency normalization and transaction building
* ``periods`` – year / month period selection
* ``categories`` – category lookups with display fallbacks
* ``analytics`` – summaries, monthly trend and expense distribution
* ``pareto`` – Pareto curve and ABC classification
* ``cash_flow`` – the yearly category x month cash flow matrix

To print every view for a JSON export from the command line you can run:

```bash
python scripts/show_dashboard.py --data export.json --year 2024
```
"""

from .analytics import FinanceAnalytics, build_trend, expenses_by_category, summarize
from .cash_flow import CashFlowMatrix, build_cash_flow
from .categories import CategoryIndex, get_category_color, get_category_name
from .currency import build_transaction, edit_transaction, normalize_amount
from .models import Category, Transaction, ValidationError, transactions_frame
from .pareto import classify
from .periods import filter_period

__all__ = [
    "Category",
    "CashFlowMatrix",
    "CategoryIndex",
    "FinanceAnalytics",
    "Transaction",
    "ValidationError",
    "build_cash_flow",
    "build_transaction",
    "build_trend",
    "classify",
    "edit_transaction",
    "expenses_by_category",
    "filter_period",
    "get_category_color",
    "get_category_name",
    "normalize_amount",
    "summarize",
    "transactions_frame",
]
