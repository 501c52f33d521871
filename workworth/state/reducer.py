"""
UI State Reducer

    reduce(previous_state, event) -> new_state

Pure: no I/O, no clock, no mutation. The two screen flows it guards:

Edit:   Idle -> Editing(txn) -> (Saved | Cancelled) -> Idle
        Only one transaction is edited at a time, and an add cannot start
        while an edit is open (or the other way round). Refused
        transitions return the state unchanged.

Delete: Idle -> PendingDelete(entity) -> (Confirmed | Dismissed) -> Idle
        Destructive actions need two steps.
"""

from typing import Callable, TypeVar

from workworth.models.finance import TransactionFilter
from workworth.state.events import (
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
)
from workworth.state.ui_state import WorkWorthUiState

E = TypeVar("E", bound=StateEvent)
Handler = Callable[[WorkWorthUiState, StateEvent], WorkWorthUiState]

_HANDLERS: dict[type, Handler] = {}


def _handles(event_type: type[E]):
    def register(fn: Callable[[WorkWorthUiState, E], WorkWorthUiState]):
        _HANDLERS[event_type] = fn
        return fn
    return register


def reduce(state: WorkWorthUiState, event: StateEvent) -> WorkWorthUiState:
    """Apply one event. Unknown events leave the state unchanged."""
    handler = _HANDLERS.get(type(event))
    if handler is None:
        return state
    return handler(state, event)


def _update(state: WorkWorthUiState, **changes) -> WorkWorthUiState:
    return state.model_copy(update=changes)


# =============================================================================
# STORAGE
# =============================================================================

@_handles(DataLoaded)
def _data_loaded(state: WorkWorthUiState, event: DataLoaded) -> WorkWorthUiState:
    """
    Replace persisted fields with a fresh snapshot.

    Pending edits and deletes that point at records which no longer
    exist are dropped, as are filter selections for deleted labels.
    """
    snapshot = event.snapshot
    transaction_ids = {t.id for t in snapshot.transactions}
    label_ids = {label.id for label in snapshot.labels}

    editing = state.editing_transaction
    if editing is not None and editing.id not in transaction_ids:
        editing = None
    to_delete = state.transaction_to_delete
    if to_delete is not None and to_delete.id not in transaction_ids:
        to_delete = None
    editing_label = state.editing_label
    if editing_label is not None and editing_label.id not in label_ids:
        editing_label = None
    label_to_delete = state.label_to_delete
    if label_to_delete is not None and label_to_delete.id not in label_ids:
        label_to_delete = None

    history_filter = state.history_filter.model_copy(update={
        "selected_label_ids": state.history_filter.selected_label_ids & label_ids,
    })

    return _update(
        state,
        salary=snapshot.salary,
        days_worked=snapshot.days_worked,
        saved_month=snapshot.saved_month,
        transactions=snapshot.transactions,
        labels=snapshot.labels,
        monthly_summaries=snapshot.monthly_summaries,
        debug_month_offset=snapshot.debug_month_offset,
        current_month_key=event.current_month_key,
        today=event.today,
        is_loading=False,
        editing_transaction=editing,
        transaction_to_delete=to_delete,
        editing_label=editing_label,
        label_to_delete=label_to_delete,
        history_filter=history_filter,
    )


# =============================================================================
# TRANSACTION EDIT FLOW
# =============================================================================

@_handles(StartAddingTransaction)
def _start_adding(state: WorkWorthUiState, event: StartAddingTransaction) -> WorkWorthUiState:
    if state.editing_transaction is not None:
        return state
    return _update(state, is_adding=True)


@_handles(StartEditingTransaction)
def _start_editing(state: WorkWorthUiState, event: StartEditingTransaction) -> WorkWorthUiState:
    if state.is_adding:
        return state
    current = state.editing_transaction
    if current is not None and current.id != event.transaction.id:
        return state
    return _update(state, editing_transaction=event.transaction)


@_handles(CancelEditing)
@_handles(TransactionSaved)
def _finish_editing(state: WorkWorthUiState, event: StateEvent) -> WorkWorthUiState:
    return _update(state, is_adding=False, editing_transaction=None)


# =============================================================================
# TRANSACTION DELETE FLOW
# =============================================================================

@_handles(RequestDeleteTransaction)
def _request_delete(state: WorkWorthUiState, event: RequestDeleteTransaction) -> WorkWorthUiState:
    if state.transaction_to_delete is not None:
        return state
    return _update(state, transaction_to_delete=event.transaction)


@_handles(DismissDeleteTransaction)
def _dismiss_delete(state: WorkWorthUiState, event: DismissDeleteTransaction) -> WorkWorthUiState:
    return _update(state, transaction_to_delete=None)


@_handles(TransactionDeleted)
def _transaction_deleted(state: WorkWorthUiState, event: TransactionDeleted) -> WorkWorthUiState:
    editing = state.editing_transaction
    if editing is not None and editing.id == event.transaction_id:
        editing = None
    return _update(
        state,
        transactions=tuple(t for t in state.transactions if t.id != event.transaction_id),
        transaction_to_delete=None,
        editing_transaction=editing,
    )


# =============================================================================
# LABEL FLOWS
# =============================================================================

@_handles(StartEditingLabel)
def _start_editing_label(state: WorkWorthUiState, event: StartEditingLabel) -> WorkWorthUiState:
    current = state.editing_label
    if current is not None and current.id != event.label.id:
        return state
    return _update(state, editing_label=event.label)


@_handles(CancelEditingLabel)
@_handles(LabelSaved)
def _finish_editing_label(state: WorkWorthUiState, event: StateEvent) -> WorkWorthUiState:
    return _update(state, editing_label=None)


@_handles(LabelRenamed)
def _label_renamed(state: WorkWorthUiState, event: LabelRenamed) -> WorkWorthUiState:
    """The label moved to a new id; a history selection follows it."""
    selected = state.history_filter.selected_label_ids
    if event.old_id in selected:
        selected = (selected - {event.old_id}) | {event.new_id}
    return _update(
        state,
        editing_label=None,
        history_filter=state.history_filter.model_copy(
            update={"selected_label_ids": selected}
        ),
    )


@_handles(RequestDeleteLabel)
def _request_delete_label(state: WorkWorthUiState, event: RequestDeleteLabel) -> WorkWorthUiState:
    if state.label_to_delete is not None:
        return state
    return _update(state, label_to_delete=event.label)


@_handles(DismissDeleteLabel)
def _dismiss_delete_label(state: WorkWorthUiState, event: DismissDeleteLabel) -> WorkWorthUiState:
    return _update(state, label_to_delete=None)


@_handles(LabelDeleted)
def _label_deleted(state: WorkWorthUiState, event: LabelDeleted) -> WorkWorthUiState:
    editing_label = state.editing_label
    if editing_label is not None and editing_label.id == event.label_id:
        editing_label = None
    history_filter = state.history_filter.model_copy(update={
        "selected_label_ids": state.history_filter.selected_label_ids - {event.label_id},
    })
    return _update(
        state,
        labels=tuple(label for label in state.labels if label.id != event.label_id),
        transactions=tuple(t.without_label(event.label_id) for t in state.transactions),
        label_to_delete=None,
        editing_label=editing_label,
        history_filter=history_filter,
    )


# =============================================================================
# HISTORY SCREEN
# =============================================================================

@_handles(SearchQueryChanged)
def _search_changed(state: WorkWorthUiState, event: SearchQueryChanged) -> WorkWorthUiState:
    return _update(
        state,
        history_filter=state.history_filter.model_copy(update={"query": event.query}),
    )


@_handles(LabelFilterToggled)
def _label_toggled(state: WorkWorthUiState, event: LabelFilterToggled) -> WorkWorthUiState:
    selected = state.history_filter.selected_label_ids
    if event.label_id in selected:
        selected = selected - {event.label_id}
    else:
        selected = selected | {event.label_id}
    return _update(
        state,
        history_filter=state.history_filter.model_copy(
            update={"selected_label_ids": selected}
        ),
    )


@_handles(PriceRangeChanged)
def _price_changed(state: WorkWorthUiState, event: PriceRangeChanged) -> WorkWorthUiState:
    return _update(
        state,
        history_filter=state.history_filter.model_copy(update={
            "min_price": event.min_price,
            "max_price": event.max_price,
        }),
    )


@_handles(FiltersCleared)
def _filters_cleared(state: WorkWorthUiState, event: FiltersCleared) -> WorkWorthUiState:
    return _update(state, history_filter=TransactionFilter())


@_handles(SortOrderChanged)
def _sort_changed(state: WorkWorthUiState, event: SortOrderChanged) -> WorkWorthUiState:
    return _update(state, sort_order=event.sort_order)
