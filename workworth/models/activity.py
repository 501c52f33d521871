"""
Activity Models

Significant user actions are written to the structured log so a session
can be traced when debugging. They are logged only; nothing here is
persisted.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field


class ActivityEventType(str, Enum):
    """Types of actions we log."""
    # Salary profile
    SETTINGS_UPDATED = "settings_updated"
    MONTH_ROLLED_OVER = "month_rolled_over"
    DEBUG_MONTH_OFFSET_CHANGED = "debug_month_offset_changed"

    # Transactions
    TRANSACTION_ADDED = "transaction_added"
    TRANSACTION_UPDATED = "transaction_updated"
    TRANSACTION_DELETED = "transaction_deleted"

    # Labels
    LABEL_ADDED = "label_added"
    LABEL_RENAMED = "label_renamed"
    LABEL_DELETED = "label_deleted"

    # Refusals and failures
    INPUT_REJECTED = "input_rejected"
    DATA_RESET = "data_reset"
    STORAGE_ERROR = "storage_error"


class ActivitySeverity(str, Enum):
    """Severity level for activity events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class ActivityEvent(BaseModel):
    """One logged action."""

    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )
    event_type: ActivityEventType
    severity: ActivitySeverity = ActivitySeverity.INFO

    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'transaction', 'label')"
    )
    entity_id: Optional[str] = None

    description: str = Field(
        ...,
        max_length=500,
    )
    details: dict[str, Any] = Field(default_factory=dict)

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "description": self.description,
            "details": self.details,
        }


class ActivityEventBuilder:
    """
    Helper class to build activity events with common patterns.

    Usage:
        event = ActivityEventBuilder.transaction_added(transaction)
        event = ActivityEventBuilder.label_renamed("food", label)
    """

    @staticmethod
    def settings_updated(salary: str, days_worked: str, month_year: str) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.SETTINGS_UPDATED,
            entity_type="salary_profile",
            entity_id=month_year,
            description=f"Salary profile set for {month_year}",
            details={"salary": salary, "days_worked": days_worked},
        )

    @staticmethod
    def transaction_added(
        transaction_id: str,
        amount: str,
        time_cost: str,
        month_year: str,
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.TRANSACTION_ADDED,
            entity_type="transaction",
            entity_id=transaction_id,
            description=f"Expense added to {month_year}",
            details={"amount": amount, "time_cost_hours": time_cost},
        )

    @staticmethod
    def transaction_updated(transaction_id: str, amount: str, time_cost: str) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.TRANSACTION_UPDATED,
            entity_type="transaction",
            entity_id=transaction_id,
            description="Expense edited",
            details={"amount": amount, "time_cost_hours": time_cost},
        )

    @staticmethod
    def transaction_deleted(transaction_id: str) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.TRANSACTION_DELETED,
            entity_type="transaction",
            entity_id=transaction_id,
            description="Expense deleted",
        )

    @staticmethod
    def label_added(label_id: str) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.LABEL_ADDED,
            entity_type="label",
            entity_id=label_id,
            description=f"Label '{label_id}' added",
        )

    @staticmethod
    def label_renamed(old_id: str, new_id: str) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.LABEL_RENAMED,
            entity_type="label",
            entity_id=new_id,
            description=f"Label '{old_id}' renamed to '{new_id}'",
            details={"old_id": old_id},
        )

    @staticmethod
    def label_deleted(label_id: str) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.LABEL_DELETED,
            entity_type="label",
            entity_id=label_id,
            description=f"Label '{label_id}' deleted",
        )

    @staticmethod
    def input_rejected(action: str, issues: list[dict]) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.INPUT_REJECTED,
            severity=ActivitySeverity.WARNING,
            description=f"Refused {action}: invalid input",
            details={"action": action, "issues": issues},
        )
