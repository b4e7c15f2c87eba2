from __future__ import annotations

import pytest

from finance_tracker.categories import DEFAULT_CATEGORIES


@pytest.fixture
def categories():
    return list(DEFAULT_CATEGORIES)
