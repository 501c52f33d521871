"""
UI State Snapshot

WorkWorthUiState is the single immutable value a UI renders. It is only
ever replaced, never mutated: the reducer takes the previous snapshot
and an event and returns the next one.

Derived figures (totals, money-days left, filtered history) are
properties computed from the stored fields, so they cannot go stale.
"""

from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from workworth.engine.financial import (
    HOURS_PER_WORKDAY,
    calculate_remaining_days,
    calculate_time_cost,
    hourly_rate,
)
from workworth.engine.months import MONTH_KEY_FORMAT, calendar_days_left
from workworth.models.finance import (
    Label,
    MonthlySummary,
    MonthOverview,
    SalaryProfile,
    SortOrder,
    Transaction,
    TransactionFilter,
)
from workworth.queries.aggregation import (
    apply_filter,
    month_overviews,
    sort_transactions,
    total_spent,
    transactions_for_month,
)
from workworth.queries.labels import labels_for_transaction


class WorkWorthUiState(BaseModel):
    """Everything the setup, home, history and label screens show."""
    model_config = ConfigDict(frozen=True)

    # Persisted data
    salary: Decimal = Decimal("0")
    days_worked: Decimal = Decimal("0")
    saved_month: Optional[str] = None
    transactions: tuple[Transaction, ...] = ()
    labels: tuple[Label, ...] = ()
    monthly_summaries: dict[str, MonthlySummary] = Field(default_factory=dict)
    debug_month_offset: int = 0

    # Calendar context, set when data is loaded
    current_month_key: str = ""
    today: Optional[date] = None
    hours_per_workday: int = HOURS_PER_WORKDAY
    month_key_format: str = MONTH_KEY_FORMAT
    is_loading: bool = True

    # Transaction edit / delete flow
    is_adding: bool = False
    editing_transaction: Optional[Transaction] = None
    transaction_to_delete: Optional[Transaction] = None

    # Label edit / delete flow
    editing_label: Optional[Label] = None
    label_to_delete: Optional[Label] = None

    # History screen
    history_filter: TransactionFilter = TransactionFilter()
    sort_order: SortOrder = SortOrder.DATE_DESC

    # -- profile --------------------------------------------------------------

    @property
    def needs_setup(self) -> bool:
        """True until a positive salary and day count are stored."""
        return self.salary <= 0 or self.days_worked <= 0

    @property
    def profile(self) -> Optional[SalaryProfile]:
        if self.needs_setup:
            return None
        return SalaryProfile(
            salary=self.salary,
            days_worked=self.days_worked,
            month_year=self.saved_month or self.current_month_key,
        )

    @property
    def hourly_rate(self) -> Decimal:
        return hourly_rate(self.salary, self.days_worked, self.hours_per_workday)

    def preview_time_cost(self, amount: Decimal) -> Decimal:
        """What an expense would cost in hours with the current profile."""
        return calculate_time_cost(
            amount, self.salary, self.days_worked, self.hours_per_workday
        )

    # -- home screen ----------------------------------------------------------

    @property
    def current_month_transactions(self) -> list[Transaction]:
        """This month's expenses, newest first."""
        return sort_transactions(
            transactions_for_month(self.transactions, self.current_month_key),
            SortOrder.DATE_DESC,
        )

    @property
    def total_spent(self) -> Decimal:
        return total_spent(self.current_month_transactions)

    @property
    def remaining_money(self) -> Decimal:
        return self.salary - self.total_spent

    @property
    def money_days_left(self) -> Decimal:
        return calculate_remaining_days(
            self.remaining_money, self.salary, self.days_worked
        )

    @property
    def calendar_days_left(self) -> int:
        if self.today is None:
            return 0
        return calendar_days_left(self.today)

    # -- history screen -------------------------------------------------------

    @property
    def filtered_transactions(self) -> list[Transaction]:
        return sort_transactions(
            apply_filter(self.transactions, self.history_filter),
            self.sort_order,
        )

    @property
    def history(self) -> list[MonthOverview]:
        """Filtered transactions grouped by month, newest month first."""
        return month_overviews(
            self.filtered_transactions,
            self.monthly_summaries,
            self.profile,
            self.current_month_key,
            self.today or date.min,
            self.month_key_format,
        )

    def labels_for(self, transaction: Transaction) -> list[Label]:
        return labels_for_transaction(transaction, self.labels)
