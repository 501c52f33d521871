"""
Transaction Aggregation

Deterministic views over the stored transaction list: per-month totals,
search/filter, sorting and month grouping for the history screen.

Every function takes immutable snapshots and returns new values. The
current month and "today" are always passed in, never read from the
clock, so the same inputs always give the same output.
"""

from datetime import date
from decimal import Decimal
from typing import Iterable, Mapping, Optional, Sequence

from workworth.engine.months import MONTH_KEY_FORMAT, parse_month_key
from workworth.models.finance import (
    IconType,
    MonthlySummary,
    MonthOverview,
    SalaryProfile,
    SortOrder,
    Transaction,
    TransactionFilter,
)


def transactions_for_month(
    transactions: Iterable[Transaction],
    month_key: str,
) -> list[Transaction]:
    """Transactions whose bucket is exactly `month_key`."""
    return [t for t in transactions if t.month_year == month_key]


def total_spent(transactions: Iterable[Transaction]) -> Decimal:
    """Sum of amounts; 0 for no transactions."""
    return sum((t.amount for t in transactions), Decimal("0"))


def remaining_money(salary: Decimal, transactions: Iterable[Transaction]) -> Decimal:
    return salary - total_spent(transactions)


def _matches(
    transaction: Transaction,
    query: str,
    selected_label_ids: frozenset[str],
    min_price: Optional[Decimal],
    max_price: Optional[Decimal],
) -> bool:
    if query and query not in transaction.name.lower():
        return False
    if selected_label_ids and selected_label_ids.isdisjoint(transaction.label_ids):
        return False
    if min_price is not None and transaction.amount < min_price:
        return False
    if max_price is not None and transaction.amount > max_price:
        return False
    return True


def filter_transactions(
    transactions: Iterable[Transaction],
    query: str = "",
    selected_label_ids: Iterable[str] = (),
    min_price: Optional[Decimal] = None,
    max_price: Optional[Decimal] = None,
) -> list[Transaction]:
    """
    Search the history.

    A transaction is kept when all of these hold:
    - the query is empty or the name contains it (case-insensitive)
    - no labels are selected or it carries at least one selected label
    - it is not below `min_price` and not above `max_price`
    """
    needle = query.strip().lower()
    selected = frozenset(selected_label_ids)
    return [
        t for t in transactions
        if _matches(t, needle, selected, min_price, max_price)
    ]


def apply_filter(
    transactions: Iterable[Transaction],
    criteria: TransactionFilter,
) -> list[Transaction]:
    return filter_transactions(
        transactions,
        query=criteria.query,
        selected_label_ids=criteria.selected_label_ids,
        min_price=criteria.min_price,
        max_price=criteria.max_price,
    )


def sort_transactions(
    transactions: Iterable[Transaction],
    order: SortOrder = SortOrder.DATE_DESC,
) -> list[Transaction]:
    """Sort by creation time or amount; ties keep their input order."""
    if order == SortOrder.DATE_ASC:
        return sorted(transactions, key=lambda t: t.timestamp)
    if order == SortOrder.AMOUNT_DESC:
        return sorted(transactions, key=lambda t: t.amount, reverse=True)
    if order == SortOrder.AMOUNT_ASC:
        return sorted(transactions, key=lambda t: t.amount)
    return sorted(transactions, key=lambda t: t.timestamp, reverse=True)


def group_by_month(
    transactions: Iterable[Transaction],
    today: date,
    fmt: str = MONTH_KEY_FORMAT,
) -> dict[str, list[Transaction]]:
    """
    Group by stored month key, newest month first.

    Keys that cannot be parsed sort as if they were `today`'s month.
    Within a month the input order is kept.
    """
    groups: dict[str, list[Transaction]] = {}
    for transaction in transactions:
        groups.setdefault(transaction.month_year, []).append(transaction)

    def month_date(key: str) -> date:
        return parse_month_key(key, fmt) or today

    ordered = sorted(groups, key=month_date, reverse=True)
    return {key: groups[key] for key in ordered}


def month_overviews(
    transactions: Sequence[Transaction],
    summaries: Mapping[str, MonthlySummary],
    profile: Optional[SalaryProfile],
    current_month_key: str,
    today: date,
    fmt: str = MONTH_KEY_FORMAT,
) -> list[MonthOverview]:
    """
    Build the month headers of the history screen.

    Salary for a month comes from its stored summary. The current month
    falls back to the active profile; any other month without a summary
    has no known salary and reports 0 remaining.
    """
    overviews = []
    for key, month_transactions in group_by_month(transactions, today, fmt).items():
        summary = summaries.get(key)
        if summary is not None:
            salary, days = summary.salary, summary.days_worked
        elif profile is not None and key == current_month_key:
            salary, days = profile.salary, profile.days_worked
        else:
            salary, days = Decimal("0"), Decimal("0")

        spent = total_spent(month_transactions)
        overviews.append(MonthOverview(
            month_year=key,
            transactions=tuple(month_transactions),
            salary=salary,
            days_worked=days,
            total_spent=spent,
            remaining=salary - spent if salary > 0 else Decimal("0"),
        ))
    return overviews


# Checked in order; first match wins
_ICON_KEYWORDS: tuple[tuple[tuple[str, ...], IconType], ...] = (
    (("rent",), IconType.HOUSE),
    (("salary", "income"), IconType.PAYMENTS),
    (("coffee", "food", "grocer"), IconType.COFFEE),
    (("electric",), IconType.ELECTRICITY),
    (("gas", "fuel"), IconType.FUEL),
    (("shop",), IconType.SHOPPING),
)


def infer_icon_type(name: str) -> IconType:
    """Pick an icon from keywords in the transaction name."""
    lowered = name.lower()
    for keywords, icon in _ICON_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return icon
    return IconType.PAYMENTS
