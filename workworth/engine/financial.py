"""
Financial Engine

Converts money into working time.

    Hourly rate = Salary / (DaysWorked * 8)
    Time cost (hours) = Amount / Hourly rate

All functions are pure: no caching, no rounding, no clock access.
Formatting (one decimal place, thousands separators) belongs to whoever
renders the numbers.

Invalid inputs never raise. A non-positive salary or day count means the
rate is unknown, and an unknown rate costs nothing.
"""

from decimal import Decimal
from typing import Union

HOURS_PER_WORKDAY = 8

ZERO = Decimal("0")

Number = Union[Decimal, int, float, str]


def to_decimal(value: Number) -> Decimal:
    """Coerce a number to Decimal, going through str() for floats."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def hourly_rate(
    salary: Number,
    days_worked: Number,
    hours_per_day: int = HOURS_PER_WORKDAY,
) -> Decimal:
    """
    Salary earned per working hour.

    Returns 0 unless both salary and days_worked are strictly positive.
    """
    salary = to_decimal(salary)
    days_worked = to_decimal(days_worked)
    if salary <= 0 or days_worked <= 0 or hours_per_day <= 0:
        return ZERO
    return salary / (days_worked * hours_per_day)


def calculate_time_cost(
    amount: Number,
    salary: Number,
    days_worked: Number,
    hours_per_day: int = HOURS_PER_WORKDAY,
) -> Decimal:
    """
    Hours of work needed to pay for `amount`.

    The amount itself is not validated; rejecting negative or zero
    amounts is up to the caller.
    """
    rate = hourly_rate(salary, days_worked, hours_per_day)
    if rate <= 0:
        return ZERO
    return to_decimal(amount) / rate


def calculate_remaining_days(
    remaining_money: Number,
    salary: Number,
    days_worked: Number,
) -> Decimal:
    """
    Express a remaining balance as days of salary.

    Overspending gives a negative result; callers decide how to show it.
    """
    salary = to_decimal(salary)
    if salary <= 0:
        return ZERO
    return (to_decimal(remaining_money) / salary) * to_decimal(days_worked)
