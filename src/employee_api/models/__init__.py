"""SQLAlchemy ORM models."""

from employee_api.models.base import Base, TimestampMixin
from employee_api.models.employee import BusinessEmployee, Employee
from employee_api.models.pay import PAY_ENTRY_OWNER_CHECK, Disbursement, PayEntry, PayGroup

__all__ = [
    "Base",
    "BusinessEmployee",
    "Disbursement",
    "Employee",
    "PAY_ENTRY_OWNER_CHECK",
    "PayEntry",
    "PayGroup",
    "TimestampMixin",
]
