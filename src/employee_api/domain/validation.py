"""Input validation rules.

Every rule runs and every violation is collected, so callers can report all
field errors at once. Nothing here raises or touches storage.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING

from employee_api.domain.types import PERCENTAGE_TOLERANCE, as_decimal

if TYPE_CHECKING:
    from employee_api.domain.types import BusinessEmployee

ROUTING_NUMBER_PATTERN = re.compile(r"^\d{9}$")
EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+$")

BUSINESS_EMPLOYEE_NAME_MAX = 200
EMAIL_MAX = 320
EMPLOYEE_NAME_MIN, EMPLOYEE_NAME_MAX = 2, 100
DEPARTMENT_MIN, DEPARTMENT_MAX = 2, 50
SALARY_MAX = Decimal("1000000")


@dataclass(frozen=True)
class FieldError:
    """A validation message scoped to a field path."""

    field: str
    message: str


@dataclass
class ValidationResult:
    """Outcome of a validation pass."""

    errors: list[FieldError] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def add(self, field_path: str, message: str) -> None:
        self.errors.append(FieldError(field_path, message))

    def messages_for(self, field_path: str) -> list[str]:
        return [e.message for e in self.errors if e.field == field_path]

    def as_dict(self) -> dict[str, list[str]]:
        """Group messages by field path."""
        grouped: dict[str, list[str]] = {}
        for error in self.errors:
            grouped.setdefault(error.field, []).append(error.message)
        return grouped


def validate_business_employee(employee: BusinessEmployee) -> ValidationResult:
    """Validate a business employee and its bank accounts."""
    result = ValidationResult()

    name = employee.name or ""
    if not name.strip():
        result.add("name", "Name is required")
    elif len(name) > BUSINESS_EMPLOYEE_NAME_MAX:
        result.add("name", f"Name cannot exceed {BUSINESS_EMPLOYEE_NAME_MAX} characters")

    email = employee.email or ""
    if not email.strip():
        result.add("email", "Email is required")
    else:
        if not EMAIL_PATTERN.match(email):
            result.add("email", "Email is not a valid email address")
        if len(email) > EMAIL_MAX:
            result.add("email", f"Email cannot exceed {EMAIL_MAX} characters")

    accounts = employee.bank_accounts or []
    if not accounts:
        result.add("bank_accounts", "At least one bank account is required")
        return result

    total = Decimal("0")
    for index, account in enumerate(accounts):
        path = f"bank_accounts[{index}]"
        if not account.account_id or not account.account_id.strip():
            result.add(f"{path}.account_id", "Account ID is required")
        if not ROUTING_NUMBER_PATTERN.match(account.routing_number or ""):
            result.add(
                f"{path}.routing_number", "Routing number must be exactly 9 digits"
            )

        try:
            percentage = as_decimal(account.pay_percentage)
        except (InvalidOperation, TypeError, ValueError):
            result.add(f"{path}.pay_percentage", "Pay percentage must be between 0 and 100%")
            continue
        # NaN and infinities are reported here and left out of the total
        if not percentage.is_finite():
            result.add(f"{path}.pay_percentage", "Pay percentage must be between 0 and 100%")
            continue
        if not (Decimal("0") < percentage <= Decimal("1")):
            result.add(f"{path}.pay_percentage", "Pay percentage must be between 0 and 100%")
        total += percentage

    if abs(total - Decimal("1")) > PERCENTAGE_TOLERANCE:
        result.add("bank_accounts", "Bank account percentages must total exactly 100%")

    return result


def validate_employee_create(
    name: str, department: str, salary: Decimal | None
) -> ValidationResult:
    """Validate the fields required to add an employee."""
    result = ValidationResult()
    _check_length(result, "name", "Employee name", name, EMPLOYEE_NAME_MIN, EMPLOYEE_NAME_MAX)
    _check_length(
        result, "department", "Department", department, DEPARTMENT_MIN, DEPARTMENT_MAX
    )
    _check_salary(result, salary)
    return result


def validate_employee_update(
    employee_id: str,
    name: str | None = None,
    department: str | None = None,
    salary: Decimal | None = None,
) -> ValidationResult:
    """Validate a partial employee update; omitted fields are not checked."""
    result = ValidationResult()
    if not employee_id or not employee_id.strip():
        result.add("employee_id", "Employee ID is required")
    if name:
        _check_length(
            result, "name", "Employee name", name, EMPLOYEE_NAME_MIN, EMPLOYEE_NAME_MAX
        )
    if department:
        _check_length(
            result, "department", "Department", department, DEPARTMENT_MIN, DEPARTMENT_MAX
        )
    if salary is not None:
        _check_salary(result, salary)
    return result


def _check_length(
    result: ValidationResult,
    field_path: str,
    label: str,
    value: str | None,
    minimum: int,
    maximum: int,
) -> None:
    if not value or not value.strip():
        result.add(field_path, f"{label} is required")
    elif len(value) < minimum:
        result.add(field_path, f"{label} must be at least {minimum} characters long")
    elif len(value) > maximum:
        result.add(field_path, f"{label} cannot exceed {maximum} characters")


def _check_salary(result: ValidationResult, salary: Decimal | None) -> None:
    if salary is None or salary <= 0:
        result.add("salary", "Salary must be greater than 0")
    elif salary > SALARY_MAX:
        result.add("salary", "Salary cannot exceed 1,000,000")
