"""Persistence for pay groups, disbursements and pay entries."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from employee_api import models
from employee_api.domain import types as domain
from employee_api.domain.pay_entry import PayEntry
from employee_api.exceptions import ConstraintViolation
from employee_api.repositories import mapper

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CascadeResult:
    """Rows removed by a cascading delete."""

    pay_entries: int = 0
    disbursements: int = 0


async def _flush(session: AsyncSession, entity: str, entity_id: UUID) -> None:
    """Flush pending writes, translating storage rejections."""
    try:
        await session.flush()
    except IntegrityError as exc:
        await session.rollback()
        logger.error("Storage rejected %s %s: %s", entity, entity_id, exc.orig)
        raise ConstraintViolation(entity, entity_id, str(exc.orig)) from exc


class PayGroupRepository:
    """Load, store and delete pay groups."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def add(self, pay_group: domain.PayGroup) -> domain.PayGroup:
        self.session.add(mapper.pay_group_to_row(pay_group))
        await _flush(self.session, "PayGroup", pay_group.id)
        return pay_group

    async def get(self, pay_group_id: UUID) -> domain.PayGroup | None:
        row = await self.session.get(models.PayGroup, pay_group_id)
        return mapper.pay_group_to_domain(row) if row is not None else None

    async def list_all(self) -> list[domain.PayGroup]:
        result = await self.session.execute(
            select(models.PayGroup).order_by(models.PayGroup.name)
        )
        return [mapper.pay_group_to_domain(row) for row in result.scalars()]

    async def delete(self, pay_group_id: UUID) -> CascadeResult | None:
        """Delete a pay group and everything it owns in one transaction.

        Entries of its disbursements go first, then its own entries, then
        the disbursements, then the group. Returns None if the group does
        not exist.
        """
        exists = await self.session.scalar(
            select(models.PayGroup.id).where(models.PayGroup.id == pay_group_id)
        )
        if exists is None:
            return None

        disbursement_ids = select(models.Disbursement.id).where(
            models.Disbursement.pay_group_id == pay_group_id
        )
        via_disbursements = await self.session.execute(
            delete(models.PayEntry)
            .where(models.PayEntry.disbursement_id.in_(disbursement_ids))
            .execution_options(synchronize_session=False)
        )
        direct = await self.session.execute(
            delete(models.PayEntry)
            .where(models.PayEntry.pay_group_id == pay_group_id)
            .execution_options(synchronize_session=False)
        )
        disbursements = await self.session.execute(
            delete(models.Disbursement)
            .where(models.Disbursement.pay_group_id == pay_group_id)
            .execution_options(synchronize_session=False)
        )
        await self.session.execute(
            delete(models.PayGroup)
            .where(models.PayGroup.id == pay_group_id)
            .execution_options(synchronize_session=False)
        )
        self.session.expunge_all()

        return CascadeResult(
            pay_entries=via_disbursements.rowcount + direct.rowcount,
            disbursements=disbursements.rowcount,
        )


class DisbursementRepository:
    """Load, store and delete disbursements."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def add(self, disbursement: domain.Disbursement) -> domain.Disbursement:
        self.session.add(mapper.disbursement_to_row(disbursement))
        await _flush(self.session, "Disbursement", disbursement.id)
        return disbursement

    async def get(self, disbursement_id: UUID) -> domain.Disbursement | None:
        result = await self.session.execute(
            select(models.Disbursement)
            .where(models.Disbursement.id == disbursement_id)
            .options(selectinload(models.Disbursement.pay_group))
            .execution_options(populate_existing=True)
        )
        row = result.scalar_one_or_none()
        return mapper.disbursement_to_domain(row) if row is not None else None

    async def list_for_pay_group(self, pay_group_id: UUID) -> list[domain.Disbursement]:
        result = await self.session.execute(
            select(models.Disbursement)
            .where(models.Disbursement.pay_group_id == pay_group_id)
            .order_by(models.Disbursement.disbursement_date)
        )
        return [mapper.disbursement_to_domain(row) for row in result.scalars()]

    async def update_state(self, disbursement: domain.Disbursement) -> domain.Disbursement:
        """Persist state and audit fields of an existing disbursement."""
        row = await self.session.get(models.Disbursement, disbursement.id)
        if row is None:
            raise ConstraintViolation("Disbursement", disbursement.id, "row no longer exists")
        row.state = disbursement.state.value
        row.updated_at = disbursement.updated_at
        row.updated_by = disbursement.updated_by
        await _flush(self.session, "Disbursement", disbursement.id)
        return disbursement

    async def delete(self, disbursement_id: UUID) -> CascadeResult | None:
        """Delete a disbursement and its pay entries."""
        exists = await self.session.scalar(
            select(models.Disbursement.id).where(models.Disbursement.id == disbursement_id)
        )
        if exists is None:
            return None

        entries = await self.session.execute(
            delete(models.PayEntry)
            .where(models.PayEntry.disbursement_id == disbursement_id)
            .execution_options(synchronize_session=False)
        )
        await self.session.execute(
            delete(models.Disbursement)
            .where(models.Disbursement.id == disbursement_id)
            .execution_options(synchronize_session=False)
        )
        self.session.expunge_all()
        return CascadeResult(pay_entries=entries.rowcount, disbursements=1)


class PayEntryRepository:
    """Load and store pay entries."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def add(self, entry: PayEntry) -> PayEntry:
        """Store a new entry; the owner check constraint runs on flush."""
        self.session.add(mapper.pay_entry_to_row(entry))
        await _flush(self.session, "PayEntry", entry.id)
        return entry

    async def get(self, entry_id: UUID) -> PayEntry | None:
        """Load an entry with its parent hydrated."""
        result = await self.session.execute(
            select(models.PayEntry)
            .where(models.PayEntry.id == entry_id)
            .options(
                selectinload(models.PayEntry.pay_group),
                selectinload(models.PayEntry.disbursement).selectinload(
                    models.Disbursement.pay_group
                ),
            )
            .execution_options(populate_existing=True)
        )
        row = result.scalar_one_or_none()
        return mapper.pay_entry_to_domain(row) if row is not None else None

    async def list_for_pay_group(self, pay_group_id: UUID) -> list[PayEntry]:
        result = await self.session.execute(
            select(models.PayEntry)
            .where(models.PayEntry.pay_group_id == pay_group_id)
            .options(selectinload(models.PayEntry.pay_group))
        )
        return [mapper.pay_entry_to_domain(row) for row in result.scalars()]

    async def list_for_disbursement(self, disbursement_id: UUID) -> list[PayEntry]:
        result = await self.session.execute(
            select(models.PayEntry)
            .where(models.PayEntry.disbursement_id == disbursement_id)
            .options(selectinload(models.PayEntry.disbursement))
        )
        return [mapper.pay_entry_to_domain(row) for row in result.scalars()]
