"""Employee and business employee command/query handlers."""

from __future__ import annotations

import logging
from decimal import Decimal
from uuid import UUID, uuid4

from sqlalchemy.ext.asyncio import AsyncSession

from employee_api.domain.types import BankAccount, BusinessEmployee, Employee, utcnow
from employee_api.domain.validation import (
    validate_business_employee,
    validate_employee_create,
    validate_employee_update,
)
from employee_api.exceptions import (
    AlreadyExistsError,
    EmployeeNotFoundError,
    NotFoundError,
    ValidationError,
)
from employee_api.repositories import BusinessEmployeeRepository, EmployeeRepository

logger = logging.getLogger(__name__)


class EmployeeService:
    """Add, read, update and delete employees."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.repository = EmployeeRepository(session)

    async def add_employee(self, name: str, department: str, salary: Decimal) -> Employee:
        result = validate_employee_create(name, department, salary)
        if not result.is_valid:
            raise ValidationError(result.errors)

        now = utcnow()
        employee = Employee(
            employee_id=str(uuid4()),
            name=name,
            department=department,
            salary=salary,
            hire_date=now,
            last_modified=now,
        )
        logger.info("Creating employee %s - %s", employee.employee_id, employee.name)
        await self.repository.save(employee)
        logger.info("Successfully created employee %s", employee.employee_id)
        return employee

    async def get_employee(self, employee_id: str) -> Employee:
        employee = await self.repository.get(employee_id)
        if employee is None:
            logger.warning("Employee %s not found", employee_id)
            raise EmployeeNotFoundError(employee_id)
        return employee

    async def list_employees(self) -> list[Employee]:
        employees = await self.repository.list_all()
        logger.info("Retrieved %d employees", len(employees))
        return employees

    async def update_employee(
        self,
        employee_id: str,
        name: str | None = None,
        department: str | None = None,
        salary: Decimal | None = None,
    ) -> Employee:
        """Apply a partial update; fields left as None are unchanged."""
        result = validate_employee_update(employee_id, name, department, salary)
        if not result.is_valid:
            raise ValidationError(result.errors)

        employee = await self.repository.get(employee_id)
        if employee is None:
            logger.warning("Employee %s not found for update", employee_id)
            raise EmployeeNotFoundError(employee_id)

        if name:
            employee.name = name
        if department:
            employee.department = department
        if salary is not None:
            employee.salary = salary
        employee.last_modified = utcnow()

        await self.repository.save(employee)
        logger.info("Successfully updated employee %s", employee_id)
        return employee

    async def delete_employee(self, employee_id: str) -> bool:
        logger.info("Deleting employee %s", employee_id)
        if not await self.repository.delete(employee_id):
            logger.warning("Employee %s not found for deletion", employee_id)
            raise EmployeeNotFoundError(employee_id)
        logger.info("Successfully deleted employee %s", employee_id)
        return True


class BusinessEmployeeService:
    """Create, read, replace and delete business employees.

    Every write runs ``validate_business_employee`` first and stops before
    touching storage if anything fails.
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.repository = BusinessEmployeeRepository(session)

    async def create(
        self, name: str, email: str, bank_accounts: list[BankAccount]
    ) -> BusinessEmployee:
        employee = BusinessEmployee(name=name, email=email, bank_accounts=list(bank_accounts))
        await self._validate(employee)
        await self.repository.save(employee)
        logger.info("Created business employee %s", employee.id)
        return employee

    async def get(self, employee_id: UUID) -> BusinessEmployee:
        employee = await self.repository.get(employee_id)
        if employee is None:
            logger.warning("Business employee %s not found", employee_id)
            raise NotFoundError("BusinessEmployee", employee_id)
        return employee

    async def replace(
        self,
        employee_id: UUID,
        name: str,
        email: str,
        bank_accounts: list[BankAccount],
    ) -> BusinessEmployee:
        await self.get(employee_id)
        employee = BusinessEmployee(
            id=employee_id, name=name, email=email, bank_accounts=list(bank_accounts)
        )
        await self._validate(employee)
        await self.repository.save(employee)
        logger.info("Updated business employee %s", employee_id)
        return employee

    async def delete(self, employee_id: UUID) -> bool:
        if not await self.repository.delete(employee_id):
            logger.warning("Business employee %s not found for deletion", employee_id)
            raise NotFoundError("BusinessEmployee", employee_id)
        logger.info("Deleted business employee %s", employee_id)
        return True

    async def _validate(self, employee: BusinessEmployee) -> None:
        result = validate_business_employee(employee)
        if not result.is_valid:
            raise ValidationError(result.errors)
        if await self.repository.email_taken(employee.email, exclude_id=employee.id):
            raise AlreadyExistsError("BusinessEmployee", "email", employee.email)

