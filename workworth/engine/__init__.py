"""Pure calculation functions: time cost and month buckets."""

from workworth.engine.financial import (
    HOURS_PER_WORKDAY,
    calculate_remaining_days,
    calculate_time_cost,
    hourly_rate,
    to_decimal,
)
from workworth.engine.months import (
    MONTH_KEY_FORMAT,
    calendar_days_left,
    current_month_key,
    month_key,
    parse_month_key,
    shift_months,
)

__all__ = [
    "HOURS_PER_WORKDAY",
    "MONTH_KEY_FORMAT",
    "calculate_remaining_days",
    "calculate_time_cost",
    "calendar_days_left",
    "current_month_key",
    "hourly_rate",
    "month_key",
    "parse_month_key",
    "shift_months",
    "to_decimal",
]
