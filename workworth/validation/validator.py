"""
Input Validation

Checks user input before the orchestrator acts on it.

Invalid input is not an error condition: the action is refused and the
ValidationResult says why, so a UI can disable its submit button or
show a hint. Nothing here raises for bad user input, and nothing is
silently corrected.
"""

from decimal import Decimal, InvalidOperation
from typing import Optional, Union

from workworth.models.validation import ValidationIssue, ValidationResult


def parse_decimal(value: Union[str, int, float, Decimal, None]) -> Optional[Decimal]:
    """
    Parse numeric user input.

    Returns None for empty or unparsable input and for NaN/infinity.
    """
    if value is None:
        return None
    if isinstance(value, Decimal):
        number = value
    else:
        text = str(value).strip().replace(",", "")
        if not text:
            return None
        try:
            number = Decimal(text)
        except InvalidOperation:
            return None
    if not number.is_finite():
        return None
    return number


class InputValidator:
    """
    Validates the three kinds of user input: salary setup, expenses and
    labels.
    """

    def _require_positive(
        self,
        issues: list[ValidationIssue],
        field: str,
        value: Optional[Decimal],
        label: str,
    ) -> None:
        if value is None:
            issues.append(ValidationIssue(
                field=field,
                issue_type="invalid_number",
                message=f"{label} must be a number",
            ))
        elif value <= 0:
            issues.append(ValidationIssue(
                field=field,
                issue_type="not_positive",
                message=f"{label} must be greater than zero",
            ))

    def _require_name(
        self,
        issues: list[ValidationIssue],
        field: str,
        name: Optional[str],
        label: str,
    ) -> None:
        if name is None or not name.strip():
            issues.append(ValidationIssue(
                field=field,
                issue_type="missing",
                message=f"{label} cannot be blank",
            ))

    def validate_salary_profile(
        self,
        salary: Optional[Decimal],
        days_worked: Optional[Decimal],
    ) -> ValidationResult:
        """Both salary and days worked must be positive."""
        issues: list[ValidationIssue] = []
        self._require_positive(issues, "salary", salary, "Monthly salary")
        self._require_positive(issues, "days_worked", days_worked, "Days worked")
        if days_worked is not None and days_worked > 31:
            issues.append(ValidationIssue(
                field="days_worked",
                issue_type="suspicious_value",
                message="More than 31 days worked in a month",
                severity="warning",
            ))
        return ValidationResult(issues=issues)

    def validate_expense(
        self,
        name: Optional[str],
        amount: Optional[Decimal],
        salary: Decimal,
        days_worked: Decimal,
    ) -> ValidationResult:
        """
        An expense needs a name, a positive amount and a configured
        salary profile to price it in hours.
        """
        issues: list[ValidationIssue] = []
        self._require_name(issues, "name", name, "Expense name")
        self._require_positive(issues, "amount", amount, "Amount")
        if salary <= 0 or days_worked <= 0:
            issues.append(ValidationIssue(
                field="salary",
                issue_type="missing_profile",
                message="Set your salary and days worked first",
            ))
        return ValidationResult(issues=issues)

    def validate_label(self, name: Optional[str]) -> ValidationResult:
        issues: list[ValidationIssue] = []
        self._require_name(issues, "name", name, "Label name")
        return ValidationResult(issues=issues)
