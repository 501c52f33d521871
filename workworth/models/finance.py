"""
Core Data Models for WorkWorth

These models define the records kept in local storage and the derived
views built from them. They are designed to:
1. Be immutable - every change produces a new record
2. Serialize to the same camelCase JSON the store has always held
3. Normalize input (trimmed names, de-duplicated label ids)

Changes go through explicit builder methods (`Transaction.edited`,
`Transaction.replacing_label`, ...) instead of ad-hoc copies.
"""

import time
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


# =============================================================================
# ENUMS
# =============================================================================

class SortOrder(str, Enum):
    """Ordering options for the history list."""
    DATE_DESC = "date_desc"
    DATE_ASC = "date_asc"
    AMOUNT_DESC = "amount_desc"
    AMOUNT_ASC = "amount_asc"

    @property
    def label(self) -> str:
        return {
            SortOrder.DATE_DESC: "Newest First",
            SortOrder.DATE_ASC: "Oldest First",
            SortOrder.AMOUNT_DESC: "Highest Amount",
            SortOrder.AMOUNT_ASC: "Lowest Amount",
        }[self]


class IconType(str, Enum):
    """Icon shown next to a transaction, inferred from its name."""
    DEFAULT = "default"
    HOUSE = "house"
    PAYMENTS = "payments"
    COFFEE = "coffee"
    ELECTRICITY = "electricity"
    FUEL = "fuel"
    SHOPPING = "shopping"


# ARGB colors offered when creating a label
DEFAULT_LABEL_COLOR = 0xFF008080
LABEL_COLOR_PALETTE = (
    0xFF008080, 0xFFE91E63, 0xFF9C27B0,
    0xFF673AB7, 0xFF3F51B5, 0xFF2196F3,
    0xFF4CAF50, 0xFFFFC107, 0xFFFF5722,
)


class _Record(BaseModel):
    """Base for persisted records: frozen, camelCase on the wire."""
    model_config = ConfigDict(
        frozen=True,
        str_strip_whitespace=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def _replace(self, **changes):
        """Build a validated copy with some fields replaced."""
        return type(self)(**{**self.model_dump(), **changes})


def _now_millis() -> int:
    return int(time.time() * 1000)


def _dedupe(ids) -> tuple[str, ...]:
    seen: dict[str, None] = {}
    for label_id in ids:
        seen.setdefault(label_id, None)
    return tuple(seen)


# =============================================================================
# LABELS
# =============================================================================

class Label(_Record):
    """
    A user-defined tag for transactions.

    The id IS the normalized name: lowercase, trimmed. Two labels whose
    names differ only by case or surrounding spaces share one id.
    """

    id: str = Field(
        ...,
        min_length=1,
        description="Lowercase trimmed name"
    )
    name: str = Field(
        ...,
        min_length=1,
        description="Display name (trimmed)"
    )
    color: int = Field(
        default=DEFAULT_LABEL_COLOR,
        ge=-(2**31),
        le=0xFFFFFFFF,
        description="ARGB color; signed 32-bit values are accepted"
    )

    @field_validator('color', mode='after')
    @classmethod
    def unsigned_color(cls, v: int) -> int:
        """The mobile app stores ARGB as a signed Int: 0xFF008080 is -16744320."""
        return v & 0xFFFFFFFF

    @staticmethod
    def normalize_id(name: str) -> str:
        return name.strip().lower()

    @classmethod
    def create(cls, name: str, color: int = DEFAULT_LABEL_COLOR) -> "Label":
        """Build a label whose id is derived from its name."""
        trimmed = name.strip()
        return cls(id=cls.normalize_id(trimmed), name=trimmed, color=color)


# =============================================================================
# TRANSACTIONS
# =============================================================================

class Transaction(_Record):
    """
    A single expense.

    `time_cost` is fixed when the transaction is created or edited, using
    the salary profile active at that moment. Later profile changes do
    not touch it.
    """

    id: str = Field(
        default_factory=lambda: str(uuid4()),
        description="Unique, stable identifier"
    )
    timestamp: int = Field(
        default_factory=_now_millis,
        ge=0,
        description="Creation time, epoch milliseconds"
    )
    name: str = Field(
        ...,
        min_length=1,
        description="Display name"
    )
    amount: Decimal = Field(
        ...,
        gt=0,
        description="Amount spent"
    )
    time_cost: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        description="Hours of work this expense cost"
    )
    month_year: str = Field(
        default="",
        description="Month bucket the transaction belongs to"
    )
    label_ids: tuple[str, ...] = Field(
        default_factory=tuple,
        description="Ids of attached labels (may dangle)"
    )
    icon_type: str = Field(
        default=IconType.DEFAULT.value,
        description="Icon hint"
    )

    @field_validator('label_ids', mode='after')
    @classmethod
    def dedupe_label_ids(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        """Keep the first occurrence of each id."""
        return _dedupe(v)

    @classmethod
    def create(
        cls,
        name: str,
        amount: Decimal,
        time_cost: Decimal,
        month_year: str,
        label_ids=(),
        icon_type: str = IconType.DEFAULT.value,
        timestamp: Optional[int] = None,
    ) -> "Transaction":
        """Build a new transaction with a fresh id."""
        fields = dict(
            name=name,
            amount=amount,
            time_cost=time_cost,
            month_year=month_year,
            label_ids=tuple(label_ids),
            icon_type=icon_type,
        )
        if timestamp is not None:
            fields["timestamp"] = timestamp
        return cls(**fields)

    def edited(
        self,
        name: str,
        amount: Decimal,
        time_cost: Decimal,
        label_ids,
        icon_type: Optional[str] = None,
    ) -> "Transaction":
        """Full replacement of the user-editable fields; identity is kept."""
        return self._replace(
            name=name,
            amount=amount,
            time_cost=time_cost,
            label_ids=tuple(label_ids),
            icon_type=icon_type or self.icon_type,
        )

    def with_label_ids(self, label_ids) -> "Transaction":
        return self._replace(label_ids=tuple(label_ids))

    def replacing_label(self, old_id: str, new_id: str) -> "Transaction":
        """Point references to `old_id` at `new_id`."""
        if old_id not in self.label_ids:
            return self
        return self.with_label_ids(
            new_id if label_id == old_id else label_id
            for label_id in self.label_ids
        )

    def without_label(self, label_id: str) -> "Transaction":
        if label_id not in self.label_ids:
            return self
        return self.with_label_ids(i for i in self.label_ids if i != label_id)


# =============================================================================
# SALARY
# =============================================================================

class SalaryProfile(_Record):
    """The salary and working days that apply to one month."""

    salary: Decimal = Field(
        ...,
        gt=0,
        description="Monthly salary"
    )
    days_worked: Decimal = Field(
        ...,
        gt=0,
        description="Days worked in the month"
    )
    month_year: str = Field(
        default="",
        description="Month the profile applies to"
    )

    def summary(self) -> "MonthlySummary":
        return MonthlySummary(salary=self.salary, days_worked=self.days_worked)


class MonthlySummary(_Record):
    """Salary snapshot kept per month for the history view."""

    salary: Decimal = Field(
        default=Decimal("0"),
        ge=0,
    )
    days_worked: Decimal = Field(
        default=Decimal("0"),
        ge=0,
    )


# =============================================================================
# DERIVED VIEWS
# =============================================================================

class MonthOverview(BaseModel):
    """
    One month of history: its transactions and what was left.

    `remaining` is 0 when no salary is known for the month, so a month
    without a profile never shows a negative balance.
    """
    model_config = ConfigDict(frozen=True)

    month_year: str
    transactions: tuple[Transaction, ...] = ()
    salary: Decimal = Decimal("0")
    days_worked: Decimal = Decimal("0")
    total_spent: Decimal = Decimal("0")
    remaining: Decimal = Decimal("0")

    @property
    def has_salary(self) -> bool:
        return self.salary > 0

    @property
    def is_overspent(self) -> bool:
        return self.remaining < 0


class TransactionFilter(BaseModel):
    """Search and filter criteria of the history screen."""
    model_config = ConfigDict(frozen=True)

    query: str = ""
    selected_label_ids: frozenset[str] = frozenset()
    min_price: Optional[Decimal] = None
    max_price: Optional[Decimal] = None

    @property
    def is_active(self) -> bool:
        """True when anything beyond the text query narrows the list."""
        return bool(self.selected_label_ids) or (
            self.min_price is not None or self.max_price is not None
        )
