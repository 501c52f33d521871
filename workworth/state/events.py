"""
State events.

Each event describes something that happened: data arrived from the
store, or the user did something on screen. The reducer turns
(state, event) into the next state.
"""

from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict

from workworth.models.finance import Label, SortOrder, Transaction
from workworth.services.storage.settings_store import StoreSnapshot


class StateEvent(BaseModel):
    """Base class of all reducer events."""
    model_config = ConfigDict(frozen=True)


# Storage
class DataLoaded(StateEvent):
    snapshot: StoreSnapshot
    current_month_key: str
    today: date


# Transaction add / edit
class StartAddingTransaction(StateEvent):
    pass


class StartEditingTransaction(StateEvent):
    transaction: Transaction


class CancelEditing(StateEvent):
    pass


class TransactionSaved(StateEvent):
    pass


# Transaction delete
class RequestDeleteTransaction(StateEvent):
    transaction: Transaction


class DismissDeleteTransaction(StateEvent):
    pass


class TransactionDeleted(StateEvent):
    transaction_id: str


# Labels
class StartEditingLabel(StateEvent):
    label: Label


class CancelEditingLabel(StateEvent):
    pass


class LabelSaved(StateEvent):
    pass


class LabelRenamed(StateEvent):
    old_id: str
    new_id: str


class RequestDeleteLabel(StateEvent):
    label: Label


class DismissDeleteLabel(StateEvent):
    pass


class LabelDeleted(StateEvent):
    label_id: str


# History screen
class SearchQueryChanged(StateEvent):
    query: str


class LabelFilterToggled(StateEvent):
    label_id: str


class PriceRangeChanged(StateEvent):
    min_price: Optional[Decimal] = None
    max_price: Optional[Decimal] = None


class FiltersCleared(StateEvent):
    pass


class SortOrderChanged(StateEvent):
    sort_order: SortOrder
