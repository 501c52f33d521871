"""
Tests for the UI state snapshot and its reducer.

The reducer is pure, so every test builds a state, applies events and
inspects the result.
"""

from decimal import Decimal

import pytest

from workworth.models.finance import Label, SortOrder, TransactionFilter
from workworth.services.storage.settings_store import StoreSnapshot
from workworth.state import (
    CancelEditing,
    CancelEditingLabel,
    DataLoaded,
    DismissDeleteLabel,
    DismissDeleteTransaction,
    FiltersCleared,
    LabelDeleted,
    LabelFilterToggled,
    LabelRenamed,
    LabelSaved,
    PriceRangeChanged,
    RequestDeleteLabel,
    RequestDeleteTransaction,
    SearchQueryChanged,
    SortOrderChanged,
    StartAddingTransaction,
    StartEditingLabel,
    StartEditingTransaction,
    StateEvent,
    TransactionDeleted,
    TransactionSaved,
    WorkWorthUiState,
    reduce,
)


@pytest.fixture
def snapshot(transactions, labels) -> StoreSnapshot:
    return StoreSnapshot(
        salary=Decimal("1000"),
        days_worked=Decimal("20"),
        saved_month="October 2026",
        transactions=tuple(transactions),
        labels=tuple(labels),
    )


@pytest.fixture
def loaded(snapshot, today) -> WorkWorthUiState:
    return reduce(
        WorkWorthUiState(),
        DataLoaded(snapshot=snapshot, current_month_key="October 2026", today=today),
    )


def _apply(state, *events):
    for event in events:
        state = reduce(state, event)
    return state


class TestDataLoaded:
    """Tests for loading a store snapshot."""

    def test_initial_state_is_loading(self):
        state = WorkWorthUiState()
        assert state.is_loading
        assert state.needs_setup

    def test_loaded_fields(self, loaded, today):
        assert not loaded.is_loading
        assert not loaded.needs_setup
        assert loaded.current_month_key == "October 2026"
        assert loaded.today == today
        assert len(loaded.transactions) == 4

    def test_reload_drops_stale_edit_and_delete(self, loaded, snapshot, today, transactions):
        state = _apply(
            loaded,
            StartEditingTransaction(transaction=transactions[0]),
            RequestDeleteTransaction(transaction=transactions[0]),
        )
        trimmed = snapshot.model_copy(update={"transactions": tuple(transactions[1:])})
        state = reduce(state, DataLoaded(
            snapshot=trimmed, current_month_key="October 2026", today=today,
        ))
        assert state.editing_transaction is None
        assert state.transaction_to_delete is None

    def test_reload_prunes_selected_labels(self, loaded, snapshot, today, labels):
        state = _apply(
            loaded,
            LabelFilterToggled(label_id="food"),
            LabelFilterToggled(label_id="fun"),
        )
        fewer = snapshot.model_copy(update={"labels": tuple(labels[1:])})
        state = reduce(state, DataLoaded(
            snapshot=fewer, current_month_key="October 2026", today=today,
        ))
        assert state.history_filter.selected_label_ids == frozenset({"fun"})

    def test_unknown_event_is_ignored(self, loaded):
        class Unhandled(StateEvent):
            pass

        assert reduce(loaded, Unhandled()) is loaded


class TestDerivedFigures:
    """Tests for the computed properties of the snapshot."""

    def test_home_screen_totals(self, loaded):
        """912.50 spent of 1000 this month leaves 87.50, i.e. 1.75 days."""
        assert [t.id for t in loaded.current_month_transactions] == ["t2", "t1"]
        assert loaded.total_spent == Decimal("912.50")
        assert loaded.remaining_money == Decimal("87.50")
        assert loaded.money_days_left == Decimal("1.75")
        assert loaded.calendar_days_left == 14

    def test_hourly_rate_and_preview(self, loaded):
        assert loaded.hourly_rate == Decimal("6.25")
        assert loaded.preview_time_cost(Decimal("25")) == Decimal("4")

    def test_history_groups_filtered_transactions(self, loaded):
        state = reduce(loaded, SearchQueryChanged(query="con"))
        [september] = state.history
        assert september.month_year == "September 2026"
        assert [t.id for t in september.transactions] == ["t3"]

    def test_labels_for(self, loaded, transactions):
        assert [label.id for label in loaded.labels_for(transactions[2])] == ["fun", "food"]


class TestTransactionEditFlow:
    """Idle -> Editing -> (Saved | Cancelled) -> Idle."""

    def test_add_then_save(self, loaded):
        state = reduce(loaded, StartAddingTransaction())
        assert state.is_adding
        state = reduce(state, TransactionSaved())
        assert not state.is_adding
        assert state.editing_transaction is None

    def test_edit_then_cancel(self, loaded, transactions):
        state = reduce(loaded, StartEditingTransaction(transaction=transactions[0]))
        assert state.editing_transaction == transactions[0]
        state = reduce(state, CancelEditing())
        assert state.editing_transaction is None

    def test_only_one_edit_at_a_time(self, loaded, transactions):
        state = _apply(
            loaded,
            StartEditingTransaction(transaction=transactions[0]),
            StartEditingTransaction(transaction=transactions[1]),
        )
        assert state.editing_transaction == transactions[0]

    def test_cannot_edit_while_adding(self, loaded, transactions):
        state = _apply(
            loaded,
            StartAddingTransaction(),
            StartEditingTransaction(transaction=transactions[0]),
        )
        assert state.is_adding
        assert state.editing_transaction is None

    def test_cannot_add_while_editing(self, loaded, transactions):
        state = _apply(
            loaded,
            StartEditingTransaction(transaction=transactions[0]),
            StartAddingTransaction(),
        )
        assert not state.is_adding

    def test_refused_transition_returns_same_state(self, loaded, transactions):
        editing = reduce(loaded, StartEditingTransaction(transaction=transactions[0]))
        assert reduce(editing, StartAddingTransaction()) is editing


class TestTransactionDeleteFlow:
    """Idle -> PendingDelete -> (Confirmed | Dismissed) -> Idle."""

    def test_request_then_dismiss(self, loaded, transactions):
        state = reduce(loaded, RequestDeleteTransaction(transaction=transactions[1]))
        assert state.transaction_to_delete == transactions[1]
        state = reduce(state, DismissDeleteTransaction())
        assert state.transaction_to_delete is None
        assert len(state.transactions) == 4

    def test_request_then_confirm(self, loaded, transactions):
        state = _apply(
            loaded,
            RequestDeleteTransaction(transaction=transactions[1]),
            TransactionDeleted(transaction_id="t2"),
        )
        assert state.transaction_to_delete is None
        assert [t.id for t in state.transactions] == ["t1", "t3", "t4"]

    def test_second_request_is_refused(self, loaded, transactions):
        state = _apply(
            loaded,
            RequestDeleteTransaction(transaction=transactions[1]),
            RequestDeleteTransaction(transaction=transactions[0]),
        )
        assert state.transaction_to_delete == transactions[1]

    def test_deleting_edited_transaction_ends_edit(self, loaded, transactions):
        state = _apply(
            loaded,
            StartEditingTransaction(transaction=transactions[0]),
            TransactionDeleted(transaction_id="t1"),
        )
        assert state.editing_transaction is None


class TestLabelFlows:
    """Tests for label edit and delete."""

    def test_edit_label_then_save(self, loaded, labels):
        state = reduce(loaded, StartEditingLabel(label=labels[0]))
        assert state.editing_label == labels[0]
        assert reduce(state, LabelSaved()).editing_label is None

    def test_only_one_label_edit(self, loaded, labels):
        state = _apply(
            loaded,
            StartEditingLabel(label=labels[0]),
            StartEditingLabel(label=labels[1]),
        )
        assert state.editing_label == labels[0]
        assert reduce(state, CancelEditingLabel()).editing_label is None

    def test_dismiss_label_delete(self, loaded, labels):
        state = _apply(
            loaded,
            RequestDeleteLabel(label=labels[0]),
            DismissDeleteLabel(),
        )
        assert state.label_to_delete is None
        assert len(state.labels) == 3

    def test_label_deleted_cascades(self, loaded, labels):
        state = _apply(
            loaded,
            LabelFilterToggled(label_id="food"),
            RequestDeleteLabel(label=labels[0]),
            LabelDeleted(label_id="food"),
        )
        assert [label.id for label in state.labels] == ["rent", "fun"]
        assert not any("food" in t.label_ids for t in state.transactions)
        assert state.history_filter.selected_label_ids == frozenset()
        assert state.label_to_delete is None

    def test_label_renamed_moves_selection(self, loaded, labels):
        state = _apply(
            loaded,
            LabelFilterToggled(label_id="food"),
            LabelFilterToggled(label_id="rent"),
            StartEditingLabel(label=labels[0]),
            LabelRenamed(old_id="food", new_id="groceries"),
        )
        assert state.history_filter.selected_label_ids == frozenset({"groceries", "rent"})
        assert state.editing_label is None


class TestHistoryControls:
    """Tests for search, filter and sort events."""

    def test_toggle_label_twice_clears_it(self, loaded):
        state = _apply(
            loaded,
            LabelFilterToggled(label_id="rent"),
            LabelFilterToggled(label_id="rent"),
        )
        assert state.history_filter.selected_label_ids == frozenset()

    def test_price_range(self, loaded):
        state = reduce(loaded, PriceRangeChanged(min_price=Decimal("50")))
        assert [t.id for t in state.filtered_transactions] == ["t2", "t3"]

    def test_sort_order(self, loaded):
        state = reduce(loaded, SortOrderChanged(sort_order=SortOrder.AMOUNT_ASC))
        assert [t.id for t in state.filtered_transactions] == ["t1", "t4", "t3", "t2"]

    def test_filters_cleared(self, loaded):
        state = _apply(
            loaded,
            SearchQueryChanged(query="rent"),
            LabelFilterToggled(label_id="rent"),
            PriceRangeChanged(max_price=Decimal("10")),
            FiltersCleared(),
        )
        assert state.history_filter == TransactionFilter()
        assert len(state.filtered_transactions) == 4

    def test_state_is_not_mutated(self, loaded):
        reduce(loaded, SearchQueryChanged(query="rent"))
        assert loaded.history_filter.query == ""


class TestSnapshotImmutability:
    """The snapshot can only be replaced."""

    def test_frozen(self, loaded):
        with pytest.raises(ValueError):
            loaded.salary = Decimal("1")

    def test_label_model_unchanged_by_reducer(self, loaded):
        before = tuple(loaded.labels)
        reduce(loaded, LabelDeleted(label_id="food"))
        assert loaded.labels == before
        assert isinstance(before[0], Label)
