"""
Data Models Package

This package contains all Pydantic models used in WorkWorth.
All data flowing through the system must conform to these schemas.
"""

from workworth.models.finance import (
    DEFAULT_LABEL_COLOR,
    LABEL_COLOR_PALETTE,
    IconType,
    Label,
    MonthlySummary,
    MonthOverview,
    SalaryProfile,
    SortOrder,
    Transaction,
    TransactionFilter,
)
from workworth.models.validation import (
    ValidationIssue,
    ValidationResult,
)
from workworth.models.activity import (
    ActivityEvent,
    ActivityEventBuilder,
    ActivityEventType,
    ActivitySeverity,
)

__all__ = [
    # Activity models
    "ActivityEvent",
    "ActivityEventBuilder",
    "ActivityEventType",
    "ActivitySeverity",
    # Finance models
    "DEFAULT_LABEL_COLOR",
    "LABEL_COLOR_PALETTE",
    "IconType",
    "Label",
    "MonthlySummary",
    "MonthOverview",
    "SalaryProfile",
    "SortOrder",
    "Transaction",
    "TransactionFilter",
    # Validation models
    "ValidationIssue",
    "ValidationResult",
]
