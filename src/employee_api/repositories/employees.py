"""Persistence for employees and business employees."""

from __future__ import annotations

import logging
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from employee_api import models
from employee_api.domain import types as domain
from employee_api.exceptions import ConstraintViolation
from employee_api.repositories import mapper

logger = logging.getLogger(__name__)


class EmployeeRepository:
    """CRUD storage for employees."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, employee_id: str) -> domain.Employee | None:
        row = await self.session.get(models.Employee, employee_id)
        return mapper.employee_to_domain(row) if row is not None else None

    async def list_all(self) -> list[domain.Employee]:
        result = await self.session.execute(
            select(models.Employee).order_by(models.Employee.name)
        )
        return [mapper.employee_to_domain(row) for row in result.scalars()]

    async def save(self, employee: domain.Employee) -> domain.Employee:
        """Insert or update an employee by id."""
        row = await self.session.get(models.Employee, employee.employee_id)
        if row is None:
            row = models.Employee(employee_id=employee.employee_id)
            self.session.add(row)
        row.name = employee.name
        row.department = employee.department
        row.salary = employee.salary
        row.hire_date = employee.hire_date
        row.last_modified = employee.last_modified

        try:
            await self.session.flush()
        except IntegrityError as exc:
            await self.session.rollback()
            logger.error("Storage rejected Employee %s: %s", employee.employee_id, exc.orig)
            raise ConstraintViolation("Employee", employee.employee_id, str(exc.orig)) from exc
        return employee

    async def delete(self, employee_id: str) -> bool:
        result = await self.session.execute(
            delete(models.Employee)
            .where(models.Employee.employee_id == employee_id)
            .execution_options(synchronize_session=False)
        )
        self.session.expunge_all()
        return result.rowcount > 0


class BusinessEmployeeRepository:
    """CRUD storage for business employees."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, employee_id: UUID) -> domain.BusinessEmployee | None:
        row = await self.session.get(models.BusinessEmployee, employee_id)
        return mapper.business_employee_to_domain(row) if row is not None else None

    async def email_taken(self, email: str, exclude_id: UUID | None = None) -> bool:
        """Check whether another business employee already uses ``email``."""
        query = select(func.count()).where(
            func.lower(models.BusinessEmployee.email) == email.lower()
        )
        if exclude_id is not None:
            query = query.where(models.BusinessEmployee.id != exclude_id)
        return bool(await self.session.scalar(query))

    async def save(self, employee: domain.BusinessEmployee) -> domain.BusinessEmployee:
        """Insert or update a business employee by id."""
        row = await self.session.get(models.BusinessEmployee, employee.id)
        if row is None:
            row = models.BusinessEmployee(id=employee.id)
            self.session.add(row)
        row.name = employee.name
        row.email = employee.email
        row.bank_accounts = mapper.bank_accounts_to_json(employee.bank_accounts)

        try:
            await self.session.flush()
        except IntegrityError as exc:
            await self.session.rollback()
            logger.error("Storage rejected BusinessEmployee %s: %s", employee.id, exc.orig)
            raise ConstraintViolation("BusinessEmployee", employee.id, str(exc.orig)) from exc
        return employee

    async def delete(self, employee_id: UUID) -> bool:
        result = await self.session.execute(
            delete(models.BusinessEmployee)
            .where(models.BusinessEmployee.id == employee_id)
            .execution_options(synchronize_session=False)
        )
        self.session.expunge_all()
        return result.rowcount > 0
