"""Persistence gateway over the SQLAlchemy models."""

from employee_api.repositories.employees import BusinessEmployeeRepository, EmployeeRepository
from employee_api.repositories.pay import (
    CascadeResult,
    DisbursementRepository,
    PayEntryRepository,
    PayGroupRepository,
)

__all__ = [
    "BusinessEmployeeRepository",
    "CascadeResult",
    "DisbursementRepository",
    "EmployeeRepository",
    "PayEntryRepository",
    "PayGroupRepository",
]
