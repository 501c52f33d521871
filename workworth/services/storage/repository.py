"""
WorkWorth Repository

Read-modify-write operations over the stored collections.

Each collection (transactions, labels, salary profile) has its own
asyncio.Lock, and every read-modify-write cycle runs under the lock of
the collection it changes. Label cascades touch both labels and
transactions: they take the labels lock, then the transactions lock,
and persist both collections in one atomic write.

If that atomic write fails, the whole cycle (read, compute, write) is
retried with tenacity, so labels and transactions are never left in a
mismatched pairing.
"""

import asyncio
from decimal import Decimal
from typing import Mapping, Optional

import structlog
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from workworth.models.finance import DEFAULT_LABEL_COLOR, Label, MonthlySummary, Transaction
from workworth.queries.labels import add_label, delete_label, find_label, rename_label
from workworth.services.storage.interface import AtomicWriteError
from workworth.services.storage.settings_store import SettingsStore, StoreSnapshot

logger = structlog.get_logger(__name__)


def _log_cascade_retry(retry_state: RetryCallState) -> None:
    error = retry_state.outcome.exception() if retry_state.outcome else None
    logger.warning(
        "label_cascade_retry",
        attempt=retry_state.attempt_number,
        error=str(error),
    )


class WorkworthRepository:
    """
    The single writer for WorkWorth's stored state.

    Transactions, labels and the salary profile are only ever changed
    through this class.
    """

    def __init__(
        self,
        settings_store: SettingsStore,
        cascade_max_attempts: int = 3,
    ):
        self._settings = settings_store
        self._cascade_max_attempts = cascade_max_attempts
        self._transactions_lock = asyncio.Lock()
        self._labels_lock = asyncio.Lock()
        self._profile_lock = asyncio.Lock()

    async def snapshot(self) -> StoreSnapshot:
        """Everything currently stored."""
        return await self._settings.snapshot()

    # =========================================================================
    # TRANSACTIONS
    # =========================================================================

    async def save_transaction(self, transaction: Transaction) -> None:
        """Append a new transaction."""
        async with self._transactions_lock:
            current = await self._settings.get_transactions()
            await self._settings.save_transactions([*current, transaction])

    async def update_transaction(self, transaction: Transaction) -> bool:
        """
        Replace the stored transaction with the same id.

        Returns False (and writes nothing) if no such transaction exists.
        """
        async with self._transactions_lock:
            current = await self._settings.get_transactions()
            if not any(t.id == transaction.id for t in current):
                return False
            await self._settings.save_transactions([
                transaction if t.id == transaction.id else t for t in current
            ])
            return True

    async def delete_transaction(self, transaction_id: str) -> bool:
        async with self._transactions_lock:
            current = await self._settings.get_transactions()
            remaining = [t for t in current if t.id != transaction_id]
            if len(remaining) == len(current):
                return False
            await self._settings.save_transactions(remaining)
            return True

    # =========================================================================
    # LABELS
    # =========================================================================

    async def save_label(
        self,
        name: str,
        color: int = DEFAULT_LABEL_COLOR,
    ) -> Optional[Label]:
        """
        Add a label.

        Returns the new label, or None when the name is blank or its id
        is already taken (the existing label wins).
        """
        async with self._labels_lock:
            current = await self._settings.get_labels()
            updated = add_label(current, name, color)
            if len(updated) == len(current):
                return None
            await self._settings.save_labels(updated)
            return updated[-1]

    async def rename_label(self, old_id: str, new_label: Label) -> bool:
        """
        Replace a label and move its transactions to the new id.

        Returns False if `old_id` does not exist.
        """
        async for attempt in self._cascade_retrying():
            with attempt:
                async with self._labels_lock, self._transactions_lock:
                    labels = await self._settings.get_labels()
                    if find_label(labels, old_id) is None:
                        return False
                    transactions = await self._settings.get_transactions()
                    new_labels, new_transactions = rename_label(
                        labels, transactions, old_id, new_label
                    )
                    await self._settings.update_labels_and_transactions(
                        new_labels, new_transactions
                    )
        return True

    async def delete_label(self, label_id: str) -> None:
        """Remove a label and strip it from every transaction."""
        async for attempt in self._cascade_retrying():
            with attempt:
                async with self._labels_lock, self._transactions_lock:
                    labels = await self._settings.get_labels()
                    transactions = await self._settings.get_transactions()
                    new_labels, new_transactions = delete_label(
                        labels, transactions, label_id
                    )
                    await self._settings.update_labels_and_transactions(
                        new_labels, new_transactions
                    )

    def _cascade_retrying(self) -> AsyncRetrying:
        return AsyncRetrying(
            stop=stop_after_attempt(self._cascade_max_attempts),
            wait=wait_exponential(multiplier=0.01, max=0.5),
            retry=retry_if_exception_type(AtomicWriteError),
            before_sleep=_log_cascade_retry,
            reraise=True,
        )

    # =========================================================================
    # SALARY PROFILE
    # =========================================================================

    async def update_settings(
        self,
        salary: Decimal,
        days_worked: Decimal,
        month_year: str,
    ) -> None:
        async with self._profile_lock:
            await self._settings.save_settings(salary, days_worked, month_year)

    async def save_monthly_summaries(
        self,
        summaries: Mapping[str, MonthlySummary],
    ) -> None:
        async with self._profile_lock:
            await self._settings.save_monthly_summaries(summaries)

    async def roll_over_month(self, current_month_key: str) -> bool:
        """
        Start a new month if the saved profile belongs to an older one.

        The old month's profile stays in the monthly summaries; only the
        active salary, days and saved month are cleared, so the setup
        screen asks for the new month's figures. Returns True if the
        profile was cleared.
        """
        async with self._profile_lock:
            saved_month = await self._settings.get_saved_month()
            if saved_month is None or saved_month == current_month_key:
                return False

            salary = await self._settings.get_salary()
            days_worked = await self._settings.get_days_worked()
            if salary > 0 and days_worked > 0:
                await self._settings.save_monthly_summaries({
                    saved_month: MonthlySummary(salary=salary, days_worked=days_worked),
                })
            await self._settings.clear_current_month_settings()
            logger.info(
                "month_rolled_over",
                previous_month=saved_month,
                current_month=current_month_key,
            )
            return True

    async def set_debug_month_offset(self, offset: int) -> None:
        async with self._profile_lock:
            await self._settings.update_debug_month_offset(offset)

    async def clear_all(self) -> None:
        """Erase everything."""
        async with self._labels_lock, self._transactions_lock, self._profile_lock:
            await self._settings.clear()
