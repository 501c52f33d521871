"""Shared fixtures."""

from datetime import date
from decimal import Decimal

import pytest

from workworth.models.finance import Label, Transaction
from workworth.services.storage import InMemoryKeyValueStore, SettingsStore, WorkworthRepository


@pytest.fixture
def today() -> date:
    return date(2026, 10, 17)


@pytest.fixture
def labels() -> list[Label]:
    return [
        Label.create("Food", 0xFF4CAF50),
        Label.create("Rent", 0xFF3F51B5),
        Label.create("Fun", 0xFFE91E63),
    ]


@pytest.fixture
def transactions() -> list[Transaction]:
    return [
        Transaction(
            id="t1", timestamp=1000, name="Coffee beans", amount=Decimal("12.50"),
            time_cost=Decimal("0.5"), month_year="October 2026", label_ids=("food",),
        ),
        Transaction(
            id="t2", timestamp=2000, name="Rent", amount=Decimal("900"),
            time_cost=Decimal("36"), month_year="October 2026", label_ids=("rent",),
        ),
        Transaction(
            id="t3", timestamp=500, name="Concert", amount=Decimal("60"),
            time_cost=Decimal("2.4"), month_year="September 2026",
            label_ids=("fun", "food"),
        ),
        Transaction(
            id="t4", timestamp=3000, name="Groceries", amount=Decimal("45"),
            time_cost=Decimal("1.8"), month_year="August 2026",
        ),
    ]


@pytest.fixture
def memory_store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def settings_store(memory_store) -> SettingsStore:
    return SettingsStore(memory_store)


@pytest.fixture
def repository(settings_store) -> WorkworthRepository:
    return WorkworthRepository(settings_store)
