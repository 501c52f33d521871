"""
Main Orchestrator for WorkWorth

Ties the components together and defines what each user action does:
1. Validate the input (refuse invalid input without writing)
2. Write through the repository
3. Reload the store and reduce the new snapshot into the UI state

The orchestrator is the only place that reads the clock. Everything it
calls receives the current month key and today's date as arguments.

The UI state itself is immutable. `state` always returns the latest
snapshot; every action replaces it.
"""

from contextlib import contextmanager
from datetime import date
from decimal import Decimal
from typing import Callable, Iterable, Optional

import structlog

from workworth.activity import ActivityLogger, configure_logging
from workworth.config import WorkworthSettings, get_settings
from workworth.engine.financial import HOURS_PER_WORKDAY, ZERO, calculate_time_cost
from workworth.engine.months import MONTH_KEY_FORMAT, current_month_key, shift_months
from workworth.models.activity import ActivityEventType, ActivitySeverity
from workworth.models.finance import DEFAULT_LABEL_COLOR, Label, SortOrder, Transaction
from workworth.models.validation import ValidationResult
from workworth.queries.aggregation import infer_icon_type
from workworth.queries.labels import find_label
from workworth.services.storage import (
    JsonFileKeyValueStore,
    KeyValueStoreInterface,
    SettingsStore,
    StorageError,
    WorkworthRepository,
)
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
from workworth.validation import InputValidator, parse_decimal

logger = structlog.get_logger(__name__)


class WorkworthOrchestrator:
    """
    Controller behind the setup, home, history and label screens.

    Flow for every write:
        input -> validator -> repository -> reload -> reducer -> state

    Invalid input is refused: nothing is written, the method returns
    None/False and `last_validation` holds the reasons.
    """

    def __init__(
        self,
        repository: WorkworthRepository,
        validator: Optional[InputValidator] = None,
        activity_logger: Optional[ActivityLogger] = None,
        clock: Optional[Callable[[], date]] = None,
        hours_per_workday: int = HOURS_PER_WORKDAY,
        month_key_format: str = MONTH_KEY_FORMAT,
        debug_mode: bool = False,
    ):
        self._repository = repository
        self._validator = validator or InputValidator()
        self._activity = activity_logger or ActivityLogger()
        self._clock = clock or date.today
        self._hours_per_workday = hours_per_workday
        self._month_key_format = month_key_format
        self._debug_mode = debug_mode
        self._state = self._initial_state()
        self._last_validation = ValidationResult()

    def _initial_state(self) -> WorkWorthUiState:
        return WorkWorthUiState(
            hours_per_workday=self._hours_per_workday,
            month_key_format=self._month_key_format,
        )

    @property
    def state(self) -> WorkWorthUiState:
        return self._state

    @property
    def last_validation(self) -> ValidationResult:
        """Validation outcome of the most recent submit action."""
        return self._last_validation

    def dispatch(self, event: StateEvent) -> WorkWorthUiState:
        self._state = reduce(self._state, event)
        return self._state

    def _dispatch_changed(self, event: StateEvent) -> bool:
        """Dispatch and report whether the reducer accepted the event."""
        before = self._state
        return self.dispatch(event) is not before

    # =========================================================================
    # LOADING
    # =========================================================================

    async def load(self) -> WorkWorthUiState:
        """
        Read the store into the UI state.

        If the saved profile belongs to an earlier month, it is archived
        and cleared first so the setup screen asks for this month's
        salary.
        """
        offset = self._month_offset((await self._repository.snapshot()).debug_month_offset)
        month = current_month_key(self._clock(), offset, self._month_key_format)
        if await self._repository.roll_over_month(month):
            self._activity.log_simple(
                ActivityEventType.MONTH_ROLLED_OVER,
                f"New month started: {month}",
                current_month=month,
            )
        return await self._reload()

    async def _reload(self) -> WorkWorthUiState:
        snapshot = await self._repository.snapshot()
        offset = self._month_offset(snapshot.debug_month_offset)
        return self.dispatch(DataLoaded(
            snapshot=snapshot,
            current_month_key=current_month_key(
                self._clock(), offset, self._month_key_format
            ),
            today=shift_months(self._clock(), offset),
        ))

    def _month_offset(self, stored_offset: int) -> int:
        """A stored debug offset only applies in debug mode."""
        return stored_offset if self._debug_mode else 0

    def _current_month(self) -> str:
        if self._state.current_month_key:
            return self._state.current_month_key
        return current_month_key(
            self._clock(),
            self._month_offset(self._state.debug_month_offset),
            self._month_key_format,
        )

    @contextmanager
    def _storage_guard(self, action: str):
        """Log storage failures before they propagate."""
        try:
            yield
        except StorageError as e:
            self._activity.log_simple(
                ActivityEventType.STORAGE_ERROR,
                f"Storage failed during {action}",
                severity=ActivitySeverity.ERROR,
                action=action,
                error=str(e),
            )
            raise

    def _refuse(self, action: str, result: ValidationResult) -> None:
        self._activity.log_input_rejected(
            action,
            [issue.model_dump() for issue in result.issues],
        )

    # =========================================================================
    # SALARY PROFILE
    # =========================================================================

    async def update_settings(self, salary, days_worked) -> ValidationResult:
        """Save this month's salary and days worked."""
        salary_value = parse_decimal(salary)
        days_value = parse_decimal(days_worked)
        result = self._validator.validate_salary_profile(salary_value, days_value)
        self._last_validation = result
        if not result.is_valid:
            self._refuse("update_settings", result)
            return result

        month = self._current_month()
        with self._storage_guard("update_settings"):
            await self._repository.update_settings(salary_value, days_value, month)
        self._activity.log_settings_updated(salary_value, days_value, month)
        await self._reload()
        return result

    def preview_time_cost(self, amount) -> Decimal:
        """Hours an amount would cost; 0 for invalid or missing input."""
        value = parse_decimal(amount)
        if value is None or value <= 0:
            return ZERO
        return calculate_time_cost(
            value,
            self._state.salary,
            self._state.days_worked,
            self._hours_per_workday,
        )

    async def set_debug_month_offset(self, offset: int) -> bool:
        """Pretend the calendar is `offset` months away. Debug mode only."""
        if not self._debug_mode:
            return False
        with self._storage_guard("set_debug_month_offset"):
            await self._repository.set_debug_month_offset(offset)
        self._activity.log_simple(
            ActivityEventType.DEBUG_MONTH_OFFSET_CHANGED,
            f"Debug month offset set to {offset}",
            offset=offset,
        )
        await self.load()
        return True

    async def reset_all(self) -> None:
        """Erase all stored data and start over."""
        with self._storage_guard("reset_all"):
            await self._repository.clear_all()
        self._activity.log_simple(
            ActivityEventType.DATA_RESET,
            "All data erased",
            severity=ActivitySeverity.WARNING,
        )
        self._state = self._initial_state()
        await self._reload()

    # =========================================================================
    # TRANSACTIONS
    # =========================================================================

    def start_adding_transaction(self) -> bool:
        return self._dispatch_changed(StartAddingTransaction())

    def start_editing_transaction(self, transaction: Transaction) -> bool:
        return self._dispatch_changed(StartEditingTransaction(transaction=transaction))

    def cancel_editing(self) -> None:
        self.dispatch(CancelEditing())

    async def submit_transaction(
        self,
        name: str,
        amount,
        label_ids: Iterable[str] = (),
    ) -> Optional[Transaction]:
        """
        Save the expense being added or edited.

        The time cost is computed now, from the profile active now. An
        edited transaction keeps its id, timestamp and month.
        """
        state = self._state
        amount_value = parse_decimal(amount)
        result = self._validator.validate_expense(
            name, amount_value, state.salary, state.days_worked
        )
        self._last_validation = result
        if not result.is_valid:
            self._refuse("submit_transaction", result)
            return None

        name = name.strip()
        label_ids = tuple(label_ids)
        time_cost = calculate_time_cost(
            amount_value, state.salary, state.days_worked, self._hours_per_workday
        )
        icon_type = infer_icon_type(name).value

        editing = state.editing_transaction
        if editing is not None:
            updated = editing.edited(name, amount_value, time_cost, label_ids, icon_type)
            with self._storage_guard("update_transaction"):
                saved = await self._repository.update_transaction(updated)
            if not saved:
                logger.warning("edited_transaction_missing", transaction_id=editing.id)
                self.dispatch(CancelEditing())
                await self._reload()
                return None
            self._activity.log_transaction_updated(updated.id, amount_value, time_cost)
            self.dispatch(TransactionSaved())
            await self._reload()
            return updated

        transaction = Transaction.create(
            name=name,
            amount=amount_value,
            time_cost=time_cost,
            month_year=self._current_month(),
            label_ids=label_ids,
            icon_type=icon_type,
        )
        with self._storage_guard("add_transaction"):
            await self._repository.save_transaction(transaction)
        self._activity.log_transaction_added(
            transaction.id, amount_value, time_cost, transaction.month_year
        )
        self.dispatch(TransactionSaved())
        await self._reload()
        return transaction

    def request_delete_transaction(self, transaction: Transaction) -> bool:
        return self._dispatch_changed(RequestDeleteTransaction(transaction=transaction))

    def dismiss_delete_transaction(self) -> None:
        self.dispatch(DismissDeleteTransaction())

    async def confirm_delete_transaction(self) -> bool:
        """Delete the transaction awaiting confirmation, if any."""
        pending = self._state.transaction_to_delete
        if pending is None:
            return False
        with self._storage_guard("delete_transaction"):
            deleted = await self._repository.delete_transaction(pending.id)
        self.dispatch(TransactionDeleted(transaction_id=pending.id))
        if deleted:
            self._activity.log_transaction_deleted(pending.id)
        await self._reload()
        return deleted

    # =========================================================================
    # LABELS
    # =========================================================================

    def start_editing_label(self, label: Label) -> bool:
        return self._dispatch_changed(StartEditingLabel(label=label))

    def cancel_editing_label(self) -> None:
        self.dispatch(CancelEditingLabel())

    async def submit_label(
        self,
        name: str,
        color: int = DEFAULT_LABEL_COLOR,
    ) -> Optional[Label]:
        """
        Add a label, or rename the one being edited.

        Adding a name whose id already exists does nothing and returns
        None.
        """
        result = self._validator.validate_label(name)
        self._last_validation = result
        if not result.is_valid:
            self._refuse("submit_label", result)
            return None

        editing = self._state.editing_label
        if editing is not None:
            new_label = Label.create(name, color)
            with self._storage_guard("rename_label"):
                renamed = await self._repository.rename_label(editing.id, new_label)
            if not renamed:
                self.dispatch(LabelSaved())
                await self._reload()
                return None
            self.dispatch(LabelRenamed(old_id=editing.id, new_id=new_label.id))
            self._activity.log_label_renamed(editing.id, new_label.id)
            await self._reload()
            return find_label(self._state.labels, new_label.id)

        with self._storage_guard("add_label"):
            label = await self._repository.save_label(name, color)
        if label is not None:
            self._activity.log_label_added(label.id)
        await self._reload()
        return label

    def request_delete_label(self, label: Label) -> bool:
        return self._dispatch_changed(RequestDeleteLabel(label=label))

    def dismiss_delete_label(self) -> None:
        self.dispatch(DismissDeleteLabel())

    async def confirm_delete_label(self) -> bool:
        """Delete the label awaiting confirmation and untag its transactions."""
        pending = self._state.label_to_delete
        if pending is None:
            return False
        with self._storage_guard("delete_label"):
            await self._repository.delete_label(pending.id)
        self.dispatch(LabelDeleted(label_id=pending.id))
        self._activity.log_label_deleted(pending.id)
        await self._reload()
        return True

    # =========================================================================
    # HISTORY SCREEN
    # =========================================================================

    def update_search_query(self, query: str) -> None:
        self.dispatch(SearchQueryChanged(query=query))

    def toggle_label_filter(self, label_id: str) -> None:
        self.dispatch(LabelFilterToggled(label_id=label_id))

    def update_price_range(self, min_price=None, max_price=None) -> None:
        """Set the price bounds; unparsable input clears that bound."""
        self.dispatch(PriceRangeChanged(
            min_price=parse_decimal(min_price),
            max_price=parse_decimal(max_price),
        ))

    def clear_filters(self) -> None:
        self.dispatch(FiltersCleared())

    def update_sort_order(self, sort_order: SortOrder) -> None:
        self.dispatch(SortOrderChanged(sort_order=sort_order))


def create_app_components(
    settings: Optional[WorkworthSettings] = None,
    store: Optional[KeyValueStoreInterface] = None,
    clock: Optional[Callable[[], date]] = None,
) -> WorkworthOrchestrator:
    """
    Factory function to create all application components.

    Args:
        settings: Settings to use. Defaults to the cached environment settings.
        store: Key-value store to use. Defaults to the JSON file at
               `settings.storage_path`.
        clock: Source of today's date. Defaults to date.today.

    Returns:
        The orchestrator, not yet loaded (await `load()` before use)
    """
    settings = settings or get_settings()
    configure_logging(settings)

    store = store or JsonFileKeyValueStore(settings.storage_path)
    repository = WorkworthRepository(
        SettingsStore(store),
        cascade_max_attempts=settings.cascade_max_attempts,
    )
    return WorkworthOrchestrator(
        repository=repository,
        validator=InputValidator(),
        activity_logger=ActivityLogger(),
        clock=clock,
        hours_per_workday=settings.hours_per_workday,
        month_key_format=settings.month_key_format,
        debug_mode=settings.debug_mode,
    )
