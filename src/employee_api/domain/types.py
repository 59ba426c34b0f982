"""Type definitions for the pay domain."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum, IntEnum
from uuid import UUID, uuid4


# Bank account percentages may miss 100% by at most this much (inclusive)
# to absorb decimal rounding; a 0.999 or 1.002 total is accepted.
PERCENTAGE_TOLERANCE = Decimal("0.002")


class PayType(str, Enum):
    """Pay group category."""

    PAYROLL = "payroll"
    HSA = "hsa"


class DisbursementState(str, Enum):
    """Disbursement lifecycle states."""

    PENDING = "pending"
    REJECTED = "rejected"
    APPROVED = "approved"
    SCHEDULED = "scheduled"


class EntryType(IntEnum):
    """Pay entry discriminator, stored as an integer."""

    PAY_GROUP = 0
    DISBURSEMENT = 1


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_decimal(value: Decimal | float | int | str) -> Decimal:
    """Convert without picking up binary float noise."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


@dataclass
class PayGroup:
    """A group of payees paid together."""

    name: str
    pay_type: PayType
    approvers: frozenset[str] = frozenset()
    id: UUID = field(default_factory=uuid4)


@dataclass
class Disbursement:
    """A scheduled payout under a pay group."""

    pay_group_id: UUID
    disbursement_date: datetime
    updated_by: UUID
    state: DisbursementState = DisbursementState.PENDING
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)
    id: UUID = field(default_factory=uuid4)
    pay_group: PayGroup | None = None


@dataclass(frozen=True)
class BankAccount:
    """Bank account receiving a share of an employee's pay."""

    account_id: str
    routing_number: str
    pay_percentage: Decimal


@dataclass
class BusinessEmployee:
    """Employee paid through one or more bank accounts."""

    name: str
    email: str
    bank_accounts: list[BankAccount] = field(default_factory=list)
    id: UUID = field(default_factory=uuid4)

    @property
    def total_percentage(self) -> Decimal:
        return sum((as_decimal(a.pay_percentage) for a in self.bank_accounts), Decimal("0"))

    @property
    def is_valid(self) -> bool:
        """Whether bank account percentages add up to 100%."""
        if not all(as_decimal(a.pay_percentage).is_finite() for a in self.bank_accounts):
            return False
        return abs(self.total_percentage - Decimal("1")) <= PERCENTAGE_TOLERANCE


@dataclass
class Employee:
    """Employee record managed by the CRUD endpoints."""

    employee_id: str
    name: str
    department: str
    salary: Decimal
    hire_date: datetime = field(default_factory=utcnow)
    last_modified: datetime = field(default_factory=utcnow)
