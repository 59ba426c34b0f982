"""Pydantic schemas for API request/response models."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from employee_api.domain.pay_entry import (
    OwnedByPayGroup,
    PayEntry,
    PayEntryParent,
)
from employee_api.domain.types import (
    BankAccount,
    BusinessEmployee,
    Disbursement,
    DisbursementState,
    PayGroup,
    PayType,
)
from employee_api.repositories import CascadeResult
from employee_api.services import ParentType


# ============================================================================
# Errors
# ============================================================================


class ErrorResponse(BaseModel):
    """Error body for application errors and request validation failures."""

    detail: str
    code: str
    errors: dict[str, list[str]] | None = None


# ============================================================================
# Employee schemas
# ============================================================================


class EmployeeCreate(BaseModel):
    """Schema for adding an employee."""

    name: str = ""
    department: str = ""
    salary: Decimal = Decimal("0")


class EmployeeUpdate(BaseModel):
    """Schema for a partial employee update."""

    name: str | None = None
    department: str | None = None
    salary: Decimal | None = None


class EmployeeResponse(BaseModel):
    """Schema for employee response."""

    model_config = ConfigDict(from_attributes=True)

    employee_id: str
    name: str
    department: str
    salary: Decimal
    hire_date: datetime
    last_modified: datetime


# ============================================================================
# Business employee schemas
# ============================================================================


class BankAccountSchema(BaseModel):
    """A bank account receiving a share of pay."""

    model_config = ConfigDict(from_attributes=True)

    account_id: str = ""
    routing_number: str = ""
    pay_percentage: Decimal = Decimal("0")

    def to_domain(self) -> BankAccount:
        return BankAccount(
            account_id=self.account_id,
            routing_number=self.routing_number,
            pay_percentage=self.pay_percentage,
        )


class BusinessEmployeeWrite(BaseModel):
    """Schema for creating or replacing a business employee."""

    name: str = ""
    email: str = ""
    bank_accounts: list[BankAccountSchema] = Field(default_factory=list)

    def domain_accounts(self) -> list[BankAccount]:
        return [a.to_domain() for a in self.bank_accounts]


class BusinessEmployeeResponse(BaseModel):
    """Schema for business employee response."""

    id: UUID
    name: str
    email: str
    bank_accounts: list[BankAccountSchema]
    is_valid: bool

    @classmethod
    def from_domain(cls, employee: BusinessEmployee) -> BusinessEmployeeResponse:
        return cls(
            id=employee.id,
            name=employee.name,
            email=employee.email,
            bank_accounts=[
                BankAccountSchema.model_validate(a) for a in employee.bank_accounts
            ],
            is_valid=employee.is_valid,
        )


# ============================================================================
# Pay group and disbursement schemas
# ============================================================================


class PayGroupCreate(BaseModel):
    """Schema for creating a pay group."""

    name: str = ""
    pay_type: PayType
    approvers: list[str] = Field(default_factory=list)


class PayGroupResponse(BaseModel):
    """Schema for pay group response."""

    id: UUID
    name: str
    pay_type: PayType
    approvers: list[str]

    @classmethod
    def from_domain(cls, pay_group: PayGroup) -> PayGroupResponse:
        return cls(
            id=pay_group.id,
            name=pay_group.name,
            pay_type=pay_group.pay_type,
            approvers=sorted(pay_group.approvers),
        )


class CascadeDeleteResponse(BaseModel):
    """Rows removed by a cascading delete."""

    pay_entries: int
    disbursements: int

    @classmethod
    def from_result(cls, result: CascadeResult) -> CascadeDeleteResponse:
        return cls(pay_entries=result.pay_entries, disbursements=result.disbursements)


class DisbursementCreate(BaseModel):
    """Schema for creating a disbursement under a pay group."""

    disbursement_date: datetime


class DisbursementTransition(BaseModel):
    """Schema for moving a disbursement to a new state."""

    to_state: DisbursementState


class DisbursementResponse(BaseModel):
    """Schema for disbursement response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    pay_group_id: UUID
    disbursement_date: datetime
    created_at: datetime
    updated_at: datetime
    updated_by: UUID
    state: DisbursementState


# ============================================================================
# Pay entry schemas
# ============================================================================


class PayEntryCreate(BaseModel):
    """Schema for adding a pay entry to a pay group or disbursement."""

    parent_type: ParentType
    parent_id: UUID
    employee_id: str = ""
    account_number: str = ""
    routing_number: str = ""
    amount: Decimal


class PayEntryResponse(BaseModel):
    """Schema for pay entry response."""

    id: UUID
    entry_type: Literal["pay_group", "disbursement"]
    pay_group_id: UUID | None
    disbursement_id: UUID | None
    employee_id: str
    account_number: str
    routing_number: str
    amount: Decimal

    @classmethod
    def from_domain(cls, entry: PayEntry) -> PayEntryResponse:
        return cls(
            id=entry.id,
            entry_type="pay_group" if isinstance(entry.owner, OwnedByPayGroup) else "disbursement",
            pay_group_id=entry.pay_group_id,
            disbursement_id=entry.disbursement_id,
            employee_id=entry.employee_id,
            account_number=entry.account_number,
            routing_number=entry.routing_number,
            amount=entry.amount,
        )


class PayEntryParentResponse(BaseModel):
    """The aggregate that owns a pay entry."""

    type: Literal["pay_group", "disbursement"]
    pay_group: PayGroupResponse | None = None
    disbursement: DisbursementResponse | None = None

    @classmethod
    def from_domain(cls, parent: PayEntryParent) -> PayEntryParentResponse:
        if isinstance(parent, Disbursement):
            return cls(
                type="disbursement",
                disbursement=DisbursementResponse.model_validate(parent),
            )
        return cls(type="pay_group", pay_group=PayGroupResponse.from_domain(parent))


class PayEntryDetailResponse(PayEntryResponse):
    """Pay entry with its resolved parent."""

    parent: PayEntryParentResponse
