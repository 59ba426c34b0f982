"""Pay group, disbursement and pay entry command/query handlers."""

from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Iterable
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from employee_api.domain.pay_entry import (
    AmountPolicy,
    PayEntry,
    PayEntryParent,
    create_for_disbursement,
    create_for_pay_group,
    resolve_parent,
)
from employee_api.domain.state_machine import DisbursementStateMachine
from employee_api.domain.types import (
    Disbursement,
    DisbursementState,
    PayGroup,
    PayType,
    utcnow,
)
from employee_api.domain.validation import ValidationResult
from employee_api.exceptions import InconsistentEntryState, NotFoundError, ValidationError
from employee_api.repositories import (
    CascadeResult,
    DisbursementRepository,
    PayEntryRepository,
    PayGroupRepository,
)

logger = logging.getLogger(__name__)

PAY_GROUP_NAME_MAX = 100


class ParentType(str, Enum):
    """Caller-facing name for which parent a new pay entry belongs to."""

    PAY_GROUP = "pay_group"
    DISBURSEMENT = "disbursement"


class PayService:
    """Service for pay groups, their disbursements and pay entries.

    Operations:
    - create_pay_group / delete_pay_group (cascades to everything it owns)
    - create_disbursement / transition_disbursement / delete_disbursement
    - add_pay_entry: picks exactly one factory from the caller's parent type
    - get_pay_entry_with_parent: loads an entry and resolves its owner
    """

    def __init__(
        self,
        session: AsyncSession,
        amount_policy: AmountPolicy = AmountPolicy.ANY,
    ):
        self.session = session
        self.amount_policy = amount_policy
        self.pay_groups = PayGroupRepository(session)
        self.disbursements = DisbursementRepository(session)
        self.pay_entries = PayEntryRepository(session)

    # ------------------------------------------------------------------
    # Pay groups
    # ------------------------------------------------------------------

    async def create_pay_group(
        self, name: str, pay_type: PayType, approvers: Iterable[str] = ()
    ) -> PayGroup:
        approvers = list(approvers)
        result = ValidationResult()
        if not name or not name.strip():
            result.add("name", "Name is required")
        elif len(name) > PAY_GROUP_NAME_MAX:
            result.add("name", f"Name cannot exceed {PAY_GROUP_NAME_MAX} characters")
        if any(not a or not a.strip() for a in approvers):
            result.add("approvers", "Approver IDs cannot be empty")
        if not result.is_valid:
            raise ValidationError(result.errors)

        pay_group = PayGroup(name=name, pay_type=PayType(pay_type), approvers=frozenset(approvers))
        await self.pay_groups.add(pay_group)
        logger.info("Created pay group %s (%s)", pay_group.id, pay_group.pay_type.value)
        return pay_group

    async def list_pay_groups(self) -> list[PayGroup]:
        return await self.pay_groups.list_all()

    async def get_pay_group(self, pay_group_id: UUID) -> PayGroup:
        pay_group = await self.pay_groups.get(pay_group_id)
        if pay_group is None:
            logger.warning("Pay group %s not found", pay_group_id)
            raise NotFoundError("PayGroup", pay_group_id)
        return pay_group

    async def delete_pay_group(self, pay_group_id: UUID) -> CascadeResult:
        result = await self.pay_groups.delete(pay_group_id)
        if result is None:
            logger.warning("Pay group %s not found for deletion", pay_group_id)
            raise NotFoundError("PayGroup", pay_group_id)
        logger.info(
            "Deleted pay group %s with %d disbursement(s) and %d pay entries",
            pay_group_id,
            result.disbursements,
            result.pay_entries,
        )
        return result

    # ------------------------------------------------------------------
    # Disbursements
    # ------------------------------------------------------------------

    async def create_disbursement(
        self,
        pay_group_id: UUID,
        disbursement_date: datetime,
        actor_id: UUID,
    ) -> Disbursement:
        """Create a pending disbursement under an existing pay group."""
        pay_group = await self.get_pay_group(pay_group_id)
        now = utcnow()
        disbursement = Disbursement(
            pay_group_id=pay_group.id,
            disbursement_date=disbursement_date,
            updated_by=actor_id,
            created_at=now,
            updated_at=now,
            pay_group=pay_group,
        )
        await self.disbursements.add(disbursement)
        logger.info("Created disbursement %s for pay group %s", disbursement.id, pay_group_id)
        return disbursement

    async def get_disbursement(self, disbursement_id: UUID) -> Disbursement:
        disbursement = await self.disbursements.get(disbursement_id)
        if disbursement is None:
            logger.warning("Disbursement %s not found", disbursement_id)
            raise NotFoundError("Disbursement", disbursement_id)
        return disbursement

    async def list_disbursements(self, pay_group_id: UUID) -> list[Disbursement]:
        await self.get_pay_group(pay_group_id)
        return await self.disbursements.list_for_pay_group(pay_group_id)

    async def transition_disbursement(
        self,
        disbursement_id: UUID,
        to_state: DisbursementState,
        actor_id: UUID,
    ) -> Disbursement:
        """Move a disbursement to a new state.

        Raises InvalidTransitionError if the move is not allowed.
        """
        disbursement = await self.get_disbursement(disbursement_id)
        from_state = disbursement.state
        DisbursementStateMachine.validate_transition(from_state, to_state)

        disbursement.state = DisbursementState(to_state)
        disbursement.updated_at = utcnow()
        disbursement.updated_by = actor_id
        await self.disbursements.update_state(disbursement)
        logger.info(
            "Disbursement %s: %s -> %s by %s",
            disbursement_id,
            from_state.value,
            disbursement.state.value,
            actor_id,
        )
        return disbursement

    async def delete_disbursement(self, disbursement_id: UUID) -> CascadeResult:
        result = await self.disbursements.delete(disbursement_id)
        if result is None:
            logger.warning("Disbursement %s not found for deletion", disbursement_id)
            raise NotFoundError("Disbursement", disbursement_id)
        logger.info(
            "Deleted disbursement %s with %d pay entries",
            disbursement_id,
            result.pay_entries,
        )
        return result

    # ------------------------------------------------------------------
    # Pay entries
    # ------------------------------------------------------------------

    async def add_pay_entry(
        self,
        parent_type: ParentType | str,
        parent_id: UUID,
        employee_id: str,
        account_number: str,
        routing_number: str,
        amount: Decimal,
    ) -> PayEntry:
        """Create and store a pay entry under the named parent.

        The parent must exist. Raises ValidationError for bad input and
        NotFoundError for a missing parent.
        """
        try:
            kind = ParentType(parent_type)
        except ValueError:
            result = ValidationResult()
            result.add("parent_type", "Parent type must be 'pay_group' or 'disbursement'")
            raise ValidationError(result.errors) from None

        if kind is ParentType.PAY_GROUP:
            entry = create_for_pay_group(
                parent_id,
                employee_id,
                account_number,
                routing_number,
                amount,
                amount_policy=self.amount_policy,
            )
            await self.get_pay_group(parent_id)
        else:
            entry = create_for_disbursement(
                parent_id,
                employee_id,
                account_number,
                routing_number,
                amount,
                amount_policy=self.amount_policy,
            )
            await self.get_disbursement(parent_id)

        await self.pay_entries.add(entry)
        logger.info(
            "Created pay entry %s for %s %s", entry.id, kind.value, entry.parent_id
        )
        return entry

    async def get_pay_entry(self, entry_id: UUID) -> PayEntry:
        entry = await self.pay_entries.get(entry_id)
        if entry is None:
            logger.warning("Pay entry %s not found", entry_id)
            raise NotFoundError("PayEntry", entry_id)
        return entry

    async def get_pay_entry_with_parent(
        self, entry_id: UUID
    ) -> tuple[PayEntry, PayEntryParent]:
        """Load a pay entry and the aggregate that owns it.

        Raises InconsistentEntryState if the stored entry has no loadable
        parent; this is an integrity fault, not a caller error.
        """
        entry = await self.get_pay_entry(entry_id)
        try:
            parent = resolve_parent(entry)
        except InconsistentEntryState:
            logger.exception("Integrity fault resolving parent of pay entry %s", entry_id)
            raise
        return entry, parent

    async def list_pay_entries(
        self, parent_type: ParentType | str, parent_id: UUID
    ) -> list[PayEntry]:
        if ParentType(parent_type) is ParentType.PAY_GROUP:
            await self.get_pay_group(parent_id)
            return await self.pay_entries.list_for_pay_group(parent_id)
        await self.get_disbursement(parent_id)
        return await self.pay_entries.list_for_disbursement(parent_id)
