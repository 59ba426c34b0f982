"""Pay group, disbursement and pay entry models."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from uuid import UUID, uuid4

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from employee_api.models.base import Base, JsonType, TimestampMixin

# entry_type values: 0 = pay group, 1 = disbursement
PAY_ENTRY_OWNER_CHECK = (
    "(entry_type = 0 AND pay_group_id IS NOT NULL AND disbursement_id IS NULL) OR "
    "(entry_type = 1 AND pay_group_id IS NULL AND disbursement_id IS NOT NULL)"
)


class PayGroup(Base, TimestampMixin):
    """Group of payees paid together."""

    __tablename__ = "pay_groups"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    pay_type: Mapped[str] = mapped_column(String(20), nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    approvers: Mapped[list[str]] = mapped_column(JsonType, nullable=False, default=list)

    __table_args__ = (
        CheckConstraint("pay_type IN ('payroll', 'hsa')", name="pay_group_pay_type_check"),
    )

    # Relationships
    pay_entries: Mapped[list[PayEntry]] = relationship(
        back_populates="pay_group",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    disbursements: Mapped[list[Disbursement]] = relationship(
        back_populates="pay_group",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class Disbursement(Base):
    """Scheduled payout under a pay group."""

    __tablename__ = "disbursements"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    pay_group_id: Mapped[UUID] = mapped_column(
        ForeignKey("pay_groups.id", ondelete="CASCADE"),
        nullable=False,
    )
    disbursement_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_by: Mapped[UUID] = mapped_column(nullable=False)
    state: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")

    __table_args__ = (
        CheckConstraint(
            "state IN ('pending', 'rejected', 'approved', 'scheduled')",
            name="disbursement_state_check",
        ),
        Index("ix_disbursements_state", "state"),
        Index("ix_disbursements_pay_group_id", "pay_group_id"),
        Index("ix_disbursements_disbursement_date", "disbursement_date"),
    )

    # Relationships
    pay_group: Mapped[PayGroup] = relationship(back_populates="disbursements")
    pay_entries: Mapped[list[PayEntry]] = relationship(
        back_populates="disbursement",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class PayEntry(Base, TimestampMixin):
    """Pay entry row owned by exactly one pay group or disbursement.

    ``entry_type`` is the discriminator; the check constraint rejects any row
    where it disagrees with which foreign key is set.
    """

    __tablename__ = "pay_entries"

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    entry_type: Mapped[int] = mapped_column(Integer, nullable=False)
    pay_group_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("pay_groups.id", ondelete="CASCADE"),
        nullable=True,
    )
    disbursement_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("disbursements.id", ondelete="CASCADE"),
        nullable=True,
    )
    employee_id: Mapped[str] = mapped_column(String(36), nullable=False)
    account_number: Mapped[str] = mapped_column(String(50), nullable=False)
    routing_number: Mapped[str] = mapped_column(String(20), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False)

    __table_args__ = (
        CheckConstraint(PAY_ENTRY_OWNER_CHECK, name="pay_entry_owner_check"),
        Index("ix_pay_entries_employee_id", "employee_id"),
        Index("ix_pay_entries_pay_group_id", "pay_group_id"),
        Index("ix_pay_entries_disbursement_id", "disbursement_id"),
    )

    # Relationships
    pay_group: Mapped[PayGroup | None] = relationship(back_populates="pay_entries")
    disbursement: Mapped[Disbursement | None] = relationship(back_populates="pay_entries")
