"""Aggregation and label queries over stored collections."""

from workworth.queries.aggregation import (
    apply_filter,
    filter_transactions,
    group_by_month,
    infer_icon_type,
    month_overviews,
    remaining_money,
    sort_transactions,
    total_spent,
    transactions_for_month,
)
from workworth.queries.labels import (
    add_label,
    create_label,
    delete_label,
    find_label,
    labels_for_transaction,
    rename_label,
)

__all__ = [
    "add_label",
    "apply_filter",
    "create_label",
    "delete_label",
    "filter_transactions",
    "find_label",
    "group_by_month",
    "infer_icon_type",
    "labels_for_transaction",
    "month_overviews",
    "remaining_money",
    "rename_label",
    "sort_transactions",
    "total_spent",
    "transactions_for_month",
]
