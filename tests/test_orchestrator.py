"""
End-to-end tests of the orchestrator over an in-memory store.

The clock is fixed, so every test runs in October 2026.
"""

from datetime import date
from decimal import Decimal

import pytest
import pytest_asyncio

from workworth.activity import ActivityLogger
from workworth.config import WorkworthSettings
from workworth.models.activity import ActivityEventType
from workworth.models.finance import IconType, Label, SortOrder
from workworth.orchestrator import WorkworthOrchestrator, create_app_components
from workworth.services.storage import (
    InMemoryKeyValueStore,
    SettingsStore,
    StorageConnectionError,
    StoreKeys,
    WorkworthRepository,
)


class BrokenStore(InMemoryKeyValueStore):
    """Every write fails."""

    async def write(self, key, value):
        raise StorageConnectionError("disk full")

    async def write_many(self, values):
        raise StorageConnectionError("disk full")


def _orchestrator(store, today=date(2026, 10, 17), debug_mode=False):
    return WorkworthOrchestrator(
        repository=WorkworthRepository(SettingsStore(store)),
        activity_logger=ActivityLogger(),
        clock=lambda: today,
        debug_mode=debug_mode,
    )


@pytest.fixture
def orchestrator(memory_store) -> WorkworthOrchestrator:
    return _orchestrator(memory_store)


@pytest_asyncio.fixture
async def ready(orchestrator) -> WorkworthOrchestrator:
    """Loaded, with a 1000 / 20 days profile and three labels."""
    await orchestrator.load()
    await orchestrator.update_settings("1000", "20")
    for name in ["Food", "Rent", "Fun"]:
        await orchestrator.submit_label(name)
    return orchestrator


def _event_types(orchestrator) -> list[ActivityEventType]:
    return [e.event_type for e in orchestrator._activity.recent_events]


class TestLoadAndSetup:
    """Tests for loading and the salary profile."""

    @pytest.mark.asyncio
    async def test_empty_store_needs_setup(self, orchestrator):
        state = await orchestrator.load()
        assert not state.is_loading
        assert state.needs_setup
        assert state.current_month_key == "October 2026"
        assert state.calendar_days_left == 14

    @pytest.mark.asyncio
    async def test_update_settings(self, orchestrator):
        await orchestrator.load()
        result = await orchestrator.update_settings("4,400", "22")
        assert result.is_valid
        assert orchestrator.state.hourly_rate == Decimal("25")
        assert orchestrator.state.saved_month == "October 2026"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("salary,days", [("0", "22"), ("abc", "22"), ("4400", "")])
    async def test_invalid_settings_are_refused(self, orchestrator, memory_store, salary, days):
        await orchestrator.load()
        result = await orchestrator.update_settings(salary, days)
        assert not result.is_valid
        assert orchestrator.last_validation is result
        assert StoreKeys.SALARY not in memory_store.dump()
        assert ActivityEventType.INPUT_REJECTED in _event_types(orchestrator)

    @pytest.mark.asyncio
    async def test_new_month_rolls_over(self, memory_store):
        september = _orchestrator(memory_store, today=date(2026, 9, 30))
        await september.load()
        await september.update_settings("3000", "21")

        october = _orchestrator(memory_store)
        state = await october.load()
        assert state.needs_setup
        assert state.monthly_summaries["September 2026"].salary == Decimal("3000")
        assert ActivityEventType.MONTH_ROLLED_OVER in _event_types(october)

    @pytest.mark.asyncio
    async def test_preview_time_cost(self, ready):
        assert ready.preview_time_cost("25") == Decimal("4")
        assert ready.preview_time_cost("") == 0
        assert ready.preview_time_cost("-5") == 0


class TestTransactions:
    """Tests for the add, edit and delete flows."""

    @pytest.mark.asyncio
    async def test_add_expense(self, ready):
        assert ready.start_adding_transaction()
        transaction = await ready.submit_transaction("Morning coffee", "12.50", ["food"])
        assert transaction.time_cost == Decimal("2")
        assert transaction.month_year == "October 2026"
        assert transaction.icon_type == IconType.COFFEE.value

        state = ready.state
        assert not state.is_adding
        assert state.transactions == (transaction,)
        assert state.total_spent == Decimal("12.50")
        assert state.remaining_money == Decimal("987.50")
        assert state.money_days_left == Decimal("19.75")

    @pytest.mark.asyncio
    async def test_expense_needs_profile(self, orchestrator, memory_store):
        await orchestrator.load()
        assert await orchestrator.submit_transaction("Lunch", "10") is None
        issue_types = {i.issue_type for i in orchestrator.last_validation.issues}
        assert "missing_profile" in issue_types
        assert StoreKeys.TRANSACTIONS not in memory_store.dump()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("name,amount", [("", "10"), ("Lunch", "0"), ("Lunch", "x")])
    async def test_invalid_expense_is_refused(self, ready, name, amount):
        assert await ready.submit_transaction(name, amount) is None
        assert ready.state.transactions == ()

    @pytest.mark.asyncio
    async def test_time_cost_is_fixed_at_creation(self, ready):
        """Changing the salary later does not reprice old expenses."""
        transaction = await ready.submit_transaction("Lunch", "50")
        await ready.update_settings("2000", "20")
        [stored] = ready.state.transactions
        assert stored.time_cost == transaction.time_cost == Decimal("8")

    @pytest.mark.asyncio
    async def test_edit_keeps_identity(self, ready):
        original = await ready.submit_transaction("Lunch", "50")
        assert ready.start_editing_transaction(original)
        edited = await ready.submit_transaction("Dinner", "100", ["fun"])
        assert edited.id == original.id
        assert edited.timestamp == original.timestamp
        assert edited.time_cost == Decimal("16")

        [stored] = ready.state.transactions
        assert stored.name == "Dinner"
        assert ready.state.editing_transaction is None

    @pytest.mark.asyncio
    async def test_cannot_add_while_editing(self, ready):
        original = await ready.submit_transaction("Lunch", "50")
        ready.start_editing_transaction(original)
        assert not ready.start_adding_transaction()
        ready.cancel_editing()
        assert ready.start_adding_transaction()

    @pytest.mark.asyncio
    async def test_delete_needs_confirmation(self, ready):
        transaction = await ready.submit_transaction("Lunch", "50")
        assert not await ready.confirm_delete_transaction()

        assert ready.request_delete_transaction(transaction)
        ready.dismiss_delete_transaction()
        assert len(ready.state.transactions) == 1

        ready.request_delete_transaction(transaction)
        assert await ready.confirm_delete_transaction()
        assert ready.state.transactions == ()
        assert ready.state.transaction_to_delete is None


class TestLabels:
    """Tests for label management through the orchestrator."""

    @pytest.mark.asyncio
    async def test_duplicate_label_is_noop(self, ready):
        assert await ready.submit_label("FOOD", 0xFF000000) is None
        assert [label.id for label in ready.state.labels] == ["food", "rent", "fun"]

    @pytest.mark.asyncio
    async def test_blank_label_refused(self, ready):
        assert await ready.submit_label("   ") is None
        assert not ready.last_validation.is_valid

    @pytest.mark.asyncio
    async def test_rename_migrates_transactions(self, ready):
        await ready.submit_transaction("Lunch", "10", ["food", "fun"])
        food = ready.state.labels[0]
        assert ready.start_editing_label(food)
        renamed = await ready.submit_label("Groceries", food.color)
        assert renamed == Label(id="groceries", name="Groceries", color=food.color)

        [transaction] = ready.state.transactions
        assert transaction.label_ids == ("groceries", "fun")
        assert ready.state.editing_label is None

    @pytest.mark.asyncio
    async def test_delete_label_untags_transactions(self, ready):
        await ready.submit_transaction("Lunch", "10", ["food"])
        ready.toggle_label_filter("food")
        assert ready.request_delete_label(ready.state.labels[0])
        assert await ready.confirm_delete_label()

        state = ready.state
        assert [label.id for label in state.labels] == ["rent", "fun"]
        assert state.transactions[0].label_ids == ()
        assert state.history_filter.selected_label_ids == frozenset()
        assert ActivityEventType.LABEL_DELETED in _event_types(ready)

    @pytest.mark.asyncio
    async def test_dismissed_label_delete_keeps_label(self, ready):
        ready.request_delete_label(ready.state.labels[0])
        ready.dismiss_delete_label()
        assert not await ready.confirm_delete_label()
        assert len(ready.state.labels) == 3

    @pytest.mark.asyncio
    async def test_rename_onto_existing_label_returns_stored_label(self, ready):
        """Merging into 'fun' returns the surviving label, not the request."""
        fun = ready.state.labels[2]
        ready.start_editing_label(ready.state.labels[0])
        merged = await ready.submit_label("Fun", 0xFF000000)
        assert merged == fun
        assert [label.id for label in ready.state.labels] == ["rent", "fun"]

    @pytest.mark.asyncio
    async def test_selected_filter_follows_rename(self, ready):
        await ready.submit_transaction("Lunch", "10", ["food"])
        ready.toggle_label_filter("food")
        ready.start_editing_label(ready.state.labels[0])
        await ready.submit_label("Groceries")
        assert ready.state.history_filter.selected_label_ids == frozenset({"groceries"})
        assert [t.name for t in ready.state.filtered_transactions] == ["Lunch"]


class TestHistory:
    """Tests for the history screen controls."""

    @pytest.mark.asyncio
    async def test_search_filter_and_sort(self, ready):
        await ready.submit_transaction("Rent", "600", ["rent"])
        await ready.submit_transaction("Coffee", "4", ["food"])
        await ready.submit_transaction("Cinema", "15", ["fun"])

        ready.update_search_query("  C ")
        assert {t.name for t in ready.state.filtered_transactions} == {"Coffee", "Cinema"}

        ready.toggle_label_filter("fun")
        assert [t.name for t in ready.state.filtered_transactions] == ["Cinema"]

        ready.clear_filters()
        ready.update_price_range(min_price="10", max_price="not a number")
        ready.update_sort_order(SortOrder.AMOUNT_ASC)
        assert [t.name for t in ready.state.filtered_transactions] == ["Cinema", "Rent"]

        [october] = ready.state.history
        assert october.month_year == "October 2026"
        assert october.total_spent == Decimal("615")


class TestDebugAndReset:
    """Tests for the debug month offset and full reset."""

    @pytest.mark.asyncio
    async def test_offset_ignored_outside_debug_mode(self, ready):
        assert not await ready.set_debug_month_offset(1)
        assert ready.state.current_month_key == "October 2026"

    @pytest.mark.asyncio
    async def test_stored_offset_ignored_outside_debug_mode(self):
        """A leftover offset neither moves the month nor clears the profile."""
        store = InMemoryKeyValueStore(initial={StoreKeys.DEBUG_MONTH_OFFSET: 1})
        debug = _orchestrator(store, debug_mode=True)
        normal = _orchestrator(store)
        await normal.load()
        await normal.update_settings("1000", "20")

        state = await normal.load()
        assert state.current_month_key == "October 2026"
        assert state.today == date(2026, 10, 17)
        assert not state.needs_setup
        assert state.saved_month == "October 2026"

        assert (await debug.load()).current_month_key == "November 2026"

    @pytest.mark.asyncio
    async def test_offset_moves_current_month(self, memory_store):
        orchestrator = _orchestrator(memory_store, debug_mode=True)
        await orchestrator.load()
        await orchestrator.update_settings("1000", "20")
        assert await orchestrator.set_debug_month_offset(1)

        state = orchestrator.state
        assert state.current_month_key == "November 2026"
        assert state.needs_setup
        assert "October 2026" in state.monthly_summaries

    @pytest.mark.asyncio
    async def test_reset_all(self, ready, memory_store):
        await ready.submit_transaction("Lunch", "10")
        await ready.reset_all()
        assert memory_store.dump() == {}
        assert ready.state.needs_setup
        assert ready.state.transactions == ()
        assert ready.state.labels == ()


class TestStorageFailures:
    """Storage errors are logged and propagate."""

    @pytest.mark.asyncio
    async def test_failed_write_raises_and_is_logged(self):
        orchestrator = _orchestrator(BrokenStore())
        await orchestrator.load()
        with pytest.raises(StorageConnectionError):
            await orchestrator.update_settings("1000", "20")
        assert ActivityEventType.STORAGE_ERROR in _event_types(orchestrator)
        assert orchestrator.state.needs_setup


class TestFactory:
    """Tests for create_app_components."""

    @pytest.mark.asyncio
    async def test_factory_wires_settings(self, tmp_path):
        settings = WorkworthSettings(
            storage_path=tmp_path / "store.json",
            hours_per_workday=4,
            log_json=False,
        )
        orchestrator = create_app_components(
            settings=settings, clock=lambda: date(2026, 10, 17),
        )
        await orchestrator.load()
        await orchestrator.update_settings("1000", "25")
        assert orchestrator.state.hourly_rate == Decimal("10")
        assert (tmp_path / "store.json").exists()
