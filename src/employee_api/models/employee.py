"""Employee and business employee models."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import DateTime, Index, Numeric, String, func
from sqlalchemy.orm import Mapped, mapped_column

from employee_api.models.base import Base, JsonType, TimestampMixin


class Employee(Base):
    """Employee record."""

    __tablename__ = "employees"

    employee_id: Mapped[str] = mapped_column(String(36), primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    department: Mapped[str] = mapped_column(String(50), nullable=False)
    salary: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False)
    hire_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    last_modified: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )

    __table_args__ = (Index("ix_employees_department", "department"),)


class BusinessEmployee(Base, TimestampMixin):
    """Employee paid into one or more bank accounts.

    Bank accounts have no identity of their own and are stored inline as a
    JSON list of ``{account_id, routing_number, pay_percentage}`` objects.
    """

    __tablename__ = "business_employees"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[str] = mapped_column(String(320), nullable=False)
    bank_accounts: Mapped[list[dict[str, Any]]] = mapped_column(
        JsonType, nullable=False, default=list
    )


# Uniqueness is case-insensitive, matching BusinessEmployeeRepository.email_taken
Index(
    "ix_business_employees_email_lower",
    func.lower(BusinessEmployee.email),
    unique=True,
)
