"""
Typed access to the key-value store.

Maps each logical key to a typed value with a documented default:
- numbers default to 0
- collections default to empty
- the saved month defaults to None

Collections are stored as JSON strings in the camelCase layout the
mobile app always used. A value that fails to decode is replaced by the
default and logged; corrupted data never propagates as an exception.
"""

from decimal import Decimal
from typing import Mapping, Optional, Sequence

import structlog
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from workworth.models.finance import Label, MonthlySummary, SalaryProfile, Transaction
from workworth.services.storage.interface import KeyValueStoreInterface
from workworth.validation.validator import parse_decimal

logger = structlog.get_logger(__name__)


class StoreKeys:
    """Logical keys of the store."""
    SALARY = "salary"
    DAYS_WORKED = "daysWorked"
    SAVED_MONTH = "savedMonth"
    TRANSACTIONS = "transactions"
    LABELS = "labels"
    MONTHLY_SUMMARIES = "monthlySummaries"
    DEBUG_MONTH_OFFSET = "debugMonthOffset"


_TRANSACTIONS = TypeAdapter(list[Transaction])
_LABELS = TypeAdapter(list[Label])
_SUMMARIES = TypeAdapter(dict[str, MonthlySummary])


# =============================================================================
# CODECS
# =============================================================================

def encode_transactions(transactions: Sequence[Transaction]) -> str:
    return _TRANSACTIONS.dump_json(list(transactions), by_alias=True).decode()


def decode_transactions(raw: Optional[str]) -> list[Transaction]:
    return _decode(_TRANSACTIONS, raw, StoreKeys.TRANSACTIONS, [])


def encode_labels(labels: Sequence[Label]) -> str:
    return _LABELS.dump_json(list(labels), by_alias=True).decode()


def decode_labels(raw: Optional[str]) -> list[Label]:
    return _decode(_LABELS, raw, StoreKeys.LABELS, [])


def encode_summaries(summaries: Mapping[str, MonthlySummary]) -> str:
    return _SUMMARIES.dump_json(dict(summaries), by_alias=True).decode()


def decode_summaries(raw: Optional[str]) -> dict[str, MonthlySummary]:
    return _decode(_SUMMARIES, raw, StoreKeys.MONTHLY_SUMMARIES, {})


def _decode(adapter: TypeAdapter, raw, key: str, default):
    if raw is None or raw == "":
        return default
    try:
        return adapter.validate_json(raw)
    except (ValidationError, ValueError, TypeError) as e:
        logger.warning("store_value_undecodable", key=key, error=str(e))
        return default


def _decimal_or_zero(raw, key: str) -> Decimal:
    if raw is None:
        return Decimal("0")
    value = parse_decimal(raw)
    if value is None:
        logger.warning("store_value_undecodable", key=key, raw=str(raw))
        return Decimal("0")
    return value


class StoreSnapshot(BaseModel):
    """Everything in the store, read in one pass."""
    model_config = ConfigDict(frozen=True)

    salary: Decimal = Decimal("0")
    days_worked: Decimal = Decimal("0")
    saved_month: Optional[str] = None
    transactions: tuple[Transaction, ...] = ()
    labels: tuple[Label, ...] = ()
    monthly_summaries: dict[str, MonthlySummary] = Field(default_factory=dict)
    debug_month_offset: int = 0

    @property
    def profile(self) -> Optional[SalaryProfile]:
        """Active salary profile, if one has been set up."""
        if self.salary <= 0 or self.days_worked <= 0:
            return None
        return SalaryProfile(
            salary=self.salary,
            days_worked=self.days_worked,
            month_year=self.saved_month or "",
        )


class SettingsStore:
    """
    Typed reads and writes over a KeyValueStoreInterface.

    Each method is a single read or a single read-modify-write. Callers
    that combine several of them must serialize access themselves (the
    repository does).
    """

    def __init__(self, store: KeyValueStoreInterface):
        self._store = store

    # -- reads ---------------------------------------------------------------

    async def get_salary(self) -> Decimal:
        return _decimal_or_zero(await self._store.read(StoreKeys.SALARY), StoreKeys.SALARY)

    async def get_days_worked(self) -> Decimal:
        return _decimal_or_zero(
            await self._store.read(StoreKeys.DAYS_WORKED), StoreKeys.DAYS_WORKED
        )

    async def get_saved_month(self) -> Optional[str]:
        value = await self._store.read(StoreKeys.SAVED_MONTH)
        return value if isinstance(value, str) and value else None

    async def get_transactions(self) -> list[Transaction]:
        return decode_transactions(await self._store.read(StoreKeys.TRANSACTIONS))

    async def get_labels(self) -> list[Label]:
        return decode_labels(await self._store.read(StoreKeys.LABELS))

    async def get_monthly_summaries(self) -> dict[str, MonthlySummary]:
        return decode_summaries(await self._store.read(StoreKeys.MONTHLY_SUMMARIES))

    async def get_debug_month_offset(self) -> int:
        raw = await self._store.read(StoreKeys.DEBUG_MONTH_OFFSET)
        if raw is None:
            return 0
        try:
            return int(raw)
        except (TypeError, ValueError):
            logger.warning(
                "store_value_undecodable",
                key=StoreKeys.DEBUG_MONTH_OFFSET,
                raw=str(raw),
            )
            return 0

    async def snapshot(self) -> StoreSnapshot:
        return StoreSnapshot(
            salary=await self.get_salary(),
            days_worked=await self.get_days_worked(),
            saved_month=await self.get_saved_month(),
            transactions=tuple(await self.get_transactions()),
            labels=tuple(await self.get_labels()),
            monthly_summaries=await self.get_monthly_summaries(),
            debug_month_offset=await self.get_debug_month_offset(),
        )

    # -- writes --------------------------------------------------------------

    async def save_settings(
        self,
        salary: Decimal,
        days_worked: Decimal,
        month_year: str,
    ) -> None:
        """Store the active profile and record it in the month history."""
        summaries = await self.get_monthly_summaries()
        summaries[month_year] = MonthlySummary(salary=salary, days_worked=days_worked)
        await self._store.write_many({
            StoreKeys.SALARY: str(salary),
            StoreKeys.DAYS_WORKED: str(days_worked),
            StoreKeys.SAVED_MONTH: month_year,
            StoreKeys.MONTHLY_SUMMARIES: encode_summaries(summaries),
        })

    async def save_monthly_summaries(
        self,
        summaries: Mapping[str, MonthlySummary],
    ) -> None:
        """Merge `summaries` into the stored map."""
        current = await self.get_monthly_summaries()
        current.update(summaries)
        await self._store.write(StoreKeys.MONTHLY_SUMMARIES, encode_summaries(current))

    async def save_transactions(self, transactions: Sequence[Transaction]) -> None:
        await self._store.write(StoreKeys.TRANSACTIONS, encode_transactions(transactions))

    async def save_labels(self, labels: Sequence[Label]) -> None:
        await self._store.write(StoreKeys.LABELS, encode_labels(labels))

    async def update_labels_and_transactions(
        self,
        labels: Sequence[Label],
        transactions: Sequence[Transaction],
    ) -> None:
        """Persist both collections in one atomic write."""
        await self._store.write_many({
            StoreKeys.LABELS: encode_labels(labels),
            StoreKeys.TRANSACTIONS: encode_transactions(transactions),
        })

    async def update_saved_month(self, month_year: str) -> None:
        await self._store.write(StoreKeys.SAVED_MONTH, month_year)

    async def update_debug_month_offset(self, offset: int) -> None:
        await self._store.write(StoreKeys.DEBUG_MONTH_OFFSET, offset)

    async def clear_current_month_settings(self) -> None:
        await self._store.remove(
            StoreKeys.SALARY,
            StoreKeys.DAYS_WORKED,
            StoreKeys.SAVED_MONTH,
        )

    async def clear(self) -> None:
        await self._store.clear()
