"""Immutable UI state, its events and the reducer."""

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
from workworth.state.reducer import reduce
from workworth.state.ui_state import WorkWorthUiState

__all__ = [
    "CancelEditing",
    "CancelEditingLabel",
    "DataLoaded",
    "DismissDeleteLabel",
    "DismissDeleteTransaction",
    "FiltersCleared",
    "LabelDeleted",
    "LabelFilterToggled",
    "LabelRenamed",
    "LabelSaved",
    "PriceRangeChanged",
    "RequestDeleteLabel",
    "RequestDeleteTransaction",
    "SearchQueryChanged",
    "SortOrderChanged",
    "StartAddingTransaction",
    "StartEditingLabel",
    "StartEditingTransaction",
    "StateEvent",
    "TransactionDeleted",
    "TransactionSaved",
    "WorkWorthUiState",
    "reduce",
]
