"""Pay entries and their single owning parent.

A pay entry belongs to exactly one parent: a pay group or a disbursement.
The owner is held as one of two variant types, so an entry can never carry
both parent ids or neither. In storage the same shape is an integer
discriminator plus two nullable foreign keys guarded by a check constraint
(see ``employee_api.models.pay``).

Entries are built with ``create_for_pay_group`` or
``create_for_disbursement``; there is no way to move an entry to another
parent after creation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Union
from uuid import UUID, uuid4

from employee_api.domain.types import Disbursement, EntryType, PayGroup, as_decimal
from employee_api.domain.validation import FieldError
from employee_api.exceptions import InconsistentEntryState, ValidationError

logger = logging.getLogger(__name__)


class AmountPolicy(str, Enum):
    """Sign rule applied to pay entry amounts at construction."""

    ANY = "any"
    NON_NEGATIVE = "non_negative"
    POSITIVE = "positive"

    def check(self, amount: Decimal) -> str | None:
        """Return an error message if ``amount`` breaks this policy."""
        if self is AmountPolicy.POSITIVE and amount <= 0:
            return "Amount must be greater than 0"
        if self is AmountPolicy.NON_NEGATIVE and amount < 0:
            return "Amount cannot be negative"
        return None


@dataclass(frozen=True)
class OwnedByPayGroup:
    """Owner variant: the entry belongs to a pay group."""

    pay_group_id: UUID
    pay_group: PayGroup | None = field(default=None, compare=False)

    discriminator = EntryType.PAY_GROUP


@dataclass(frozen=True)
class OwnedByDisbursement:
    """Owner variant: the entry belongs to a disbursement."""

    disbursement_id: UUID
    disbursement: Disbursement | None = field(default=None, compare=False)

    discriminator = EntryType.DISBURSEMENT


PayEntryOwner = Union[OwnedByPayGroup, OwnedByDisbursement]
PayEntryParent = Union[PayGroup, Disbursement]


@dataclass(frozen=True)
class PayEntry:
    """Payment line for one employee account under a single parent."""

    id: UUID
    owner: PayEntryOwner
    employee_id: str
    account_number: str
    routing_number: str
    amount: Decimal

    @property
    def discriminator(self) -> EntryType:
        return self.owner.discriminator

    @property
    def pay_group_id(self) -> UUID | None:
        if isinstance(self.owner, OwnedByPayGroup):
            return self.owner.pay_group_id
        return None

    @property
    def disbursement_id(self) -> UUID | None:
        if isinstance(self.owner, OwnedByDisbursement):
            return self.owner.disbursement_id
        return None

    @property
    def parent_id(self) -> UUID:
        if isinstance(self.owner, OwnedByPayGroup):
            return self.owner.pay_group_id
        return self.owner.disbursement_id


def create_for_pay_group(
    pay_group_id: UUID,
    employee_id: str,
    account_number: str,
    routing_number: str,
    amount: Decimal | str | int,
    *,
    amount_policy: AmountPolicy = AmountPolicy.ANY,
) -> PayEntry:
    """Create a pay entry owned by a pay group.

    Raises:
        ValidationError: if any argument is empty or the amount breaks
            ``amount_policy``.
    """
    errors = _check_parent_id("pay_group_id", pay_group_id)
    value, amount_errors = _check_entry_fields(
        employee_id, account_number, routing_number, amount, amount_policy
    )
    errors.extend(amount_errors)
    if errors:
        raise ValidationError(errors)

    return PayEntry(
        id=uuid4(),
        owner=OwnedByPayGroup(pay_group_id=pay_group_id),
        employee_id=employee_id,
        account_number=account_number,
        routing_number=routing_number,
        amount=value,
    )


def create_for_disbursement(
    disbursement_id: UUID,
    employee_id: str,
    account_number: str,
    routing_number: str,
    amount: Decimal | str | int,
    *,
    amount_policy: AmountPolicy = AmountPolicy.ANY,
) -> PayEntry:
    """Create a pay entry owned by a disbursement.

    Raises:
        ValidationError: if any argument is empty or the amount breaks
            ``amount_policy``.
    """
    errors = _check_parent_id("disbursement_id", disbursement_id)
    value, amount_errors = _check_entry_fields(
        employee_id, account_number, routing_number, amount, amount_policy
    )
    errors.extend(amount_errors)
    if errors:
        raise ValidationError(errors)

    return PayEntry(
        id=uuid4(),
        owner=OwnedByDisbursement(disbursement_id=disbursement_id),
        employee_id=employee_id,
        account_number=account_number,
        routing_number=routing_number,
        amount=value,
    )


def resolve_parent(entry: PayEntry) -> PayEntryParent:
    """Return the hydrated parent that owns ``entry``.

    The parent must already be loaded onto the owner; no I/O happens here.

    Raises:
        InconsistentEntryState: if the owner's parent is missing or does not
            match the owner id.
    """
    owner = entry.owner
    if isinstance(owner, OwnedByPayGroup):
        parent, parent_id, reference = owner.pay_group, owner.pay_group_id, "pay_group"
    elif isinstance(owner, OwnedByDisbursement):
        parent, parent_id, reference = (
            owner.disbursement,
            owner.disbursement_id,
            "disbursement",
        )
    else:
        logger.error(
            "Pay entry %s has unknown owner type %s", entry.id, type(owner).__name__
        )
        raise InconsistentEntryState(entry.id, type(owner).__name__, "owner")

    if parent is None or parent.id != parent_id:
        logger.error(
            "Pay entry %s inconsistent: discriminator=%s missing=%s parent_id=%s",
            entry.id,
            owner.discriminator.name,
            reference,
            parent_id,
        )
        raise InconsistentEntryState(entry.id, owner.discriminator.name, reference)
    return parent


def _check_parent_id(field_name: str, parent_id: UUID | None) -> list[FieldError]:
    if not isinstance(parent_id, UUID) or parent_id.int == 0:
        return [FieldError(field_name, "Parent ID is required")]
    return []


def _check_entry_fields(
    employee_id: str,
    account_number: str,
    routing_number: str,
    amount: Decimal | str | int,
    amount_policy: AmountPolicy,
) -> tuple[Decimal, list[FieldError]]:
    errors: list[FieldError] = []
    if not employee_id or not employee_id.strip():
        errors.append(FieldError("employee_id", "Employee ID is required"))
    if not account_number or not account_number.strip():
        errors.append(FieldError("account_number", "Account number is required"))
    if not routing_number or not routing_number.strip():
        errors.append(FieldError("routing_number", "Routing number is required"))

    try:
        value = as_decimal(amount)
    except (InvalidOperation, TypeError, ValueError):
        errors.append(FieldError("amount", "Amount must be a decimal number"))
        return Decimal("0"), errors

    if not value.is_finite():
        errors.append(FieldError("amount", "Amount must be a decimal number"))
    else:
        message = amount_policy.check(value)
        if message:
            errors.append(FieldError("amount", message))
    return value, errors
