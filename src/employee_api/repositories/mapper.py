"""Conversion between ORM rows and domain objects.

Loading never triggers lazy I/O: a relationship that was not eagerly loaded
maps to ``None``.
"""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import inspect

from employee_api import models
from employee_api.domain import types as domain
from employee_api.domain.pay_entry import OwnedByDisbursement, OwnedByPayGroup, PayEntry
from employee_api.exceptions import InconsistentEntryState

logger = logging.getLogger(__name__)


def _loaded(row: Any, attribute: str) -> Any:
    """Return an already-loaded relationship value, or None."""
    if attribute in inspect(row).unloaded:
        return None
    return getattr(row, attribute)


# ---------------------------------------------------------------------------
# Pay groups and disbursements
# ---------------------------------------------------------------------------


def pay_group_to_domain(row: models.PayGroup) -> domain.PayGroup:
    return domain.PayGroup(
        id=row.id,
        name=row.name,
        pay_type=domain.PayType(row.pay_type),
        approvers=frozenset(row.approvers or ()),
    )


def pay_group_to_row(pay_group: domain.PayGroup) -> models.PayGroup:
    return models.PayGroup(
        id=pay_group.id,
        name=pay_group.name,
        pay_type=pay_group.pay_type.value,
        approvers=sorted(pay_group.approvers),
    )


def disbursement_to_domain(row: models.Disbursement) -> domain.Disbursement:
    pay_group_row = _loaded(row, "pay_group")
    return domain.Disbursement(
        id=row.id,
        pay_group_id=row.pay_group_id,
        disbursement_date=row.disbursement_date,
        created_at=row.created_at,
        updated_at=row.updated_at,
        updated_by=row.updated_by,
        state=domain.DisbursementState(row.state),
        pay_group=pay_group_to_domain(pay_group_row) if pay_group_row is not None else None,
    )


def disbursement_to_row(disbursement: domain.Disbursement) -> models.Disbursement:
    return models.Disbursement(
        id=disbursement.id,
        pay_group_id=disbursement.pay_group_id,
        disbursement_date=disbursement.disbursement_date,
        created_at=disbursement.created_at,
        updated_at=disbursement.updated_at,
        updated_by=disbursement.updated_by,
        state=disbursement.state.value,
    )


# ---------------------------------------------------------------------------
# Pay entries
# ---------------------------------------------------------------------------


def pay_entry_to_domain(row: models.PayEntry) -> PayEntry:
    """Map a stored pay entry, hydrating whichever parent was loaded.

    Raises:
        InconsistentEntryState: if the discriminator and foreign keys
            disagree.
    """
    try:
        entry_type = domain.EntryType(row.entry_type)
    except ValueError:
        logger.error("Pay entry %s has unknown entry_type %r", row.id, row.entry_type)
        raise InconsistentEntryState(row.id, row.entry_type, "entry_type") from None

    if entry_type is domain.EntryType.PAY_GROUP:
        if row.pay_group_id is None or row.disbursement_id is not None:
            missing = "pay_group_id" if row.pay_group_id is None else "disbursement_id (unexpected)"
            logger.error(
                "Pay entry %s inconsistent on load: entry_type=%s pay_group_id=%s disbursement_id=%s",
                row.id,
                entry_type.name,
                row.pay_group_id,
                row.disbursement_id,
            )
            raise InconsistentEntryState(row.id, entry_type.name, missing)
        parent_row = _loaded(row, "pay_group")
        owner: OwnedByPayGroup | OwnedByDisbursement = OwnedByPayGroup(
            pay_group_id=row.pay_group_id,
            pay_group=pay_group_to_domain(parent_row) if parent_row is not None else None,
        )
    else:
        if row.disbursement_id is None or row.pay_group_id is not None:
            missing = (
                "disbursement_id" if row.disbursement_id is None else "pay_group_id (unexpected)"
            )
            logger.error(
                "Pay entry %s inconsistent on load: entry_type=%s pay_group_id=%s disbursement_id=%s",
                row.id,
                entry_type.name,
                row.pay_group_id,
                row.disbursement_id,
            )
            raise InconsistentEntryState(row.id, entry_type.name, missing)
        parent_row = _loaded(row, "disbursement")
        owner = OwnedByDisbursement(
            disbursement_id=row.disbursement_id,
            disbursement=disbursement_to_domain(parent_row) if parent_row is not None else None,
        )

    return PayEntry(
        id=row.id,
        owner=owner,
        employee_id=row.employee_id,
        account_number=row.account_number,
        routing_number=row.routing_number,
        amount=row.amount,
    )


def pay_entry_to_row(entry: PayEntry) -> models.PayEntry:
    return models.PayEntry(
        id=entry.id,
        entry_type=int(entry.discriminator),
        pay_group_id=entry.pay_group_id,
        disbursement_id=entry.disbursement_id,
        employee_id=entry.employee_id,
        account_number=entry.account_number,
        routing_number=entry.routing_number,
        amount=entry.amount,
    )


# ---------------------------------------------------------------------------
# Employees
# ---------------------------------------------------------------------------


def bank_accounts_to_json(accounts: list[domain.BankAccount]) -> list[dict[str, str]]:
    return [
        {
            "account_id": a.account_id,
            "routing_number": a.routing_number,
            "pay_percentage": str(domain.as_decimal(a.pay_percentage)),
        }
        for a in accounts
    ]


def bank_accounts_from_json(data: list[dict[str, Any]] | None) -> list[domain.BankAccount]:
    return [
        domain.BankAccount(
            account_id=item["account_id"],
            routing_number=item["routing_number"],
            pay_percentage=domain.as_decimal(item["pay_percentage"]),
        )
        for item in data or []
    ]


def business_employee_to_domain(row: models.BusinessEmployee) -> domain.BusinessEmployee:
    return domain.BusinessEmployee(
        id=row.id,
        name=row.name,
        email=row.email,
        bank_accounts=bank_accounts_from_json(row.bank_accounts),
    )


def employee_to_domain(row: models.Employee) -> domain.Employee:
    return domain.Employee(
        employee_id=row.employee_id,
        name=row.name,
        department=row.department,
        salary=row.salary,
        hire_date=row.hire_date,
        last_modified=row.last_modified,
    )
