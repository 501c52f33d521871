"""
Activity Logger

Every user action that changes stored data is logged through structlog.
This provides:
1. Traceability of what happened in a session
2. Debugging capability when numbers look wrong

Logging never raises into the caller.
"""

import logging
import sys
from typing import Optional

import structlog

from workworth.config import WorkworthSettings
from workworth.models.activity import (
    ActivityEvent,
    ActivityEventBuilder,
    ActivityEventType,
    ActivitySeverity,
)


def configure_logging(settings: Optional[WorkworthSettings] = None) -> None:
    """
    Configure structlog and the stdlib root logger.

    JSON lines by default; a console renderer when `log_json` is off.
    """
    level_name = settings.log_level if settings else "INFO"
    render_json = settings.log_json if settings else True

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level_name),
    )

    renderer = (
        structlog.processors.JSONRenderer()
        if render_json
        else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


class ActivityLogger:
    """
    Central activity logging service.

    Keeps the last events in memory so a UI or a test can inspect what
    was logged during this session.
    """

    def __init__(self, history_size: int = 100):
        self._logger = structlog.get_logger("workworth.activity")
        self._history_size = history_size
        self._recent: list[ActivityEvent] = []

    @property
    def recent_events(self) -> list[ActivityEvent]:
        """Most recent events, oldest first."""
        return list(self._recent)

    def log(self, event: ActivityEvent) -> None:
        log_dict = event.to_log_dict()

        if event.severity == ActivitySeverity.ERROR:
            self._logger.error("activity_event", **log_dict)
        elif event.severity == ActivitySeverity.WARNING:
            self._logger.warning("activity_event", **log_dict)
        else:
            self._logger.info("activity_event", **log_dict)

        self._recent.append(event)
        del self._recent[:-self._history_size]

    def log_settings_updated(self, salary, days_worked, month_year: str) -> None:
        self.log(ActivityEventBuilder.settings_updated(
            salary=str(salary),
            days_worked=str(days_worked),
            month_year=month_year,
        ))

    def log_transaction_added(self, transaction_id: str, amount, time_cost, month_year: str) -> None:
        self.log(ActivityEventBuilder.transaction_added(
            transaction_id=transaction_id,
            amount=str(amount),
            time_cost=str(time_cost),
            month_year=month_year,
        ))

    def log_transaction_updated(self, transaction_id: str, amount, time_cost) -> None:
        self.log(ActivityEventBuilder.transaction_updated(
            transaction_id=transaction_id,
            amount=str(amount),
            time_cost=str(time_cost),
        ))

    def log_transaction_deleted(self, transaction_id: str) -> None:
        self.log(ActivityEventBuilder.transaction_deleted(transaction_id))

    def log_label_added(self, label_id: str) -> None:
        self.log(ActivityEventBuilder.label_added(label_id))

    def log_label_renamed(self, old_id: str, new_id: str) -> None:
        self.log(ActivityEventBuilder.label_renamed(old_id, new_id))

    def log_label_deleted(self, label_id: str) -> None:
        self.log(ActivityEventBuilder.label_deleted(label_id))

    def log_input_rejected(self, action: str, issues: list[dict]) -> None:
        self.log(ActivityEventBuilder.input_rejected(action, issues))

    def log_simple(
        self,
        event_type: ActivityEventType,
        description: str,
        severity: ActivitySeverity = ActivitySeverity.INFO,
        **details,
    ) -> None:
        """Log an event that has no dedicated builder."""
        self.log(ActivityEvent(
            event_type=event_type,
            severity=severity,
            description=description,
            details=details,
        ))
