"""Command and query handlers over the persistence gateway."""

from employee_api.services.employee_service import BusinessEmployeeService, EmployeeService
from employee_api.services.pay_service import ParentType, PayService

__all__ = [
    "BusinessEmployeeService",
    "EmployeeService",
    "ParentType",
    "PayService",
]
