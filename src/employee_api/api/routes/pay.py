"""Pay group, disbursement and pay entry endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path, status

from employee_api.api.dependencies import ActorId, Pay
from employee_api.api.schemas import (
    CascadeDeleteResponse,
    DisbursementCreate,
    DisbursementResponse,
    DisbursementTransition,
    ErrorResponse,
    PayEntryCreate,
    PayEntryDetailResponse,
    PayEntryParentResponse,
    PayEntryResponse,
    PayGroupCreate,
    PayGroupResponse,
)
from employee_api.services import ParentType

router = APIRouter(tags=["pay"])


# ============================================================================
# Pay groups
# ============================================================================


@router.post(
    "/pay-groups",
    response_model=PayGroupResponse,
    status_code=status.HTTP_201_CREATED,
    responses={422: {"model": ErrorResponse}},
)
async def create_pay_group(service: Pay, payload: PayGroupCreate) -> PayGroupResponse:
    """Create a pay group."""
    pay_group = await service.create_pay_group(
        payload.name, payload.pay_type, payload.approvers
    )
    return PayGroupResponse.from_domain(pay_group)


@router.get("/pay-groups", response_model=list[PayGroupResponse])
async def list_pay_groups(service: Pay) -> list[PayGroupResponse]:
    """List pay groups ordered by name."""
    return [PayGroupResponse.from_domain(g) for g in await service.list_pay_groups()]


@router.get(
    "/pay-groups/{pay_group_id}",
    response_model=PayGroupResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_pay_group(
    service: Pay,
    pay_group_id: Annotated[UUID, Path()],
) -> PayGroupResponse:
    """Get a pay group by ID."""
    return PayGroupResponse.from_domain(await service.get_pay_group(pay_group_id))


@router.delete(
    "/pay-groups/{pay_group_id}",
    response_model=CascadeDeleteResponse,
    responses={404: {"model": ErrorResponse}},
)
async def delete_pay_group(
    service: Pay,
    pay_group_id: Annotated[UUID, Path()],
) -> CascadeDeleteResponse:
    """Delete a pay group together with its disbursements and pay entries."""
    return CascadeDeleteResponse.from_result(await service.delete_pay_group(pay_group_id))


@router.get(
    "/pay-groups/{pay_group_id}/pay-entries",
    response_model=list[PayEntryResponse],
    responses={404: {"model": ErrorResponse}},
)
async def list_pay_group_entries(
    service: Pay,
    pay_group_id: Annotated[UUID, Path()],
) -> list[PayEntryResponse]:
    """List pay entries owned directly by a pay group."""
    entries = await service.list_pay_entries(ParentType.PAY_GROUP, pay_group_id)
    return [PayEntryResponse.from_domain(e) for e in entries]


# ============================================================================
# Disbursements
# ============================================================================


@router.post(
    "/pay-groups/{pay_group_id}/disbursements",
    response_model=DisbursementResponse,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"model": ErrorResponse}},
)
async def create_disbursement(
    service: Pay,
    actor_id: ActorId,
    pay_group_id: Annotated[UUID, Path()],
    payload: DisbursementCreate,
) -> DisbursementResponse:
    """Create a pending disbursement under a pay group."""
    disbursement = await service.create_disbursement(
        pay_group_id, payload.disbursement_date, actor_id
    )
    return DisbursementResponse.model_validate(disbursement)


@router.get(
    "/pay-groups/{pay_group_id}/disbursements",
    response_model=list[DisbursementResponse],
    responses={404: {"model": ErrorResponse}},
)
async def list_disbursements(
    service: Pay,
    pay_group_id: Annotated[UUID, Path()],
) -> list[DisbursementResponse]:
    """List a pay group's disbursements by date."""
    disbursements = await service.list_disbursements(pay_group_id)
    return [DisbursementResponse.model_validate(d) for d in disbursements]


@router.get(
    "/disbursements/{disbursement_id}",
    response_model=DisbursementResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_disbursement(
    service: Pay,
    disbursement_id: Annotated[UUID, Path()],
) -> DisbursementResponse:
    """Get a disbursement by ID."""
    return DisbursementResponse.model_validate(await service.get_disbursement(disbursement_id))


@router.post(
    "/disbursements/{disbursement_id}/transition",
    response_model=DisbursementResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def transition_disbursement(
    service: Pay,
    actor_id: ActorId,
    disbursement_id: Annotated[UUID, Path()],
    payload: DisbursementTransition,
) -> DisbursementResponse:
    """Move a disbursement to a new lifecycle state."""
    disbursement = await service.transition_disbursement(
        disbursement_id, payload.to_state, actor_id
    )
    return DisbursementResponse.model_validate(disbursement)


@router.delete(
    "/disbursements/{disbursement_id}",
    response_model=CascadeDeleteResponse,
    responses={404: {"model": ErrorResponse}},
)
async def delete_disbursement(
    service: Pay,
    disbursement_id: Annotated[UUID, Path()],
) -> CascadeDeleteResponse:
    """Delete a disbursement together with its pay entries."""
    return CascadeDeleteResponse.from_result(
        await service.delete_disbursement(disbursement_id)
    )


@router.get(
    "/disbursements/{disbursement_id}/pay-entries",
    response_model=list[PayEntryResponse],
    responses={404: {"model": ErrorResponse}},
)
async def list_disbursement_entries(
    service: Pay,
    disbursement_id: Annotated[UUID, Path()],
) -> list[PayEntryResponse]:
    """List pay entries owned by a disbursement."""
    entries = await service.list_pay_entries(ParentType.DISBURSEMENT, disbursement_id)
    return [PayEntryResponse.from_domain(e) for e in entries]


# ============================================================================
# Pay entries
# ============================================================================


@router.post(
    "/pay-entries",
    response_model=PayEntryResponse,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def create_pay_entry(service: Pay, payload: PayEntryCreate) -> PayEntryResponse:
    """Add a pay entry to exactly one pay group or disbursement."""
    entry = await service.add_pay_entry(
        payload.parent_type,
        payload.parent_id,
        payload.employee_id,
        payload.account_number,
        payload.routing_number,
        payload.amount,
    )
    return PayEntryResponse.from_domain(entry)


@router.get(
    "/pay-entries/{entry_id}",
    response_model=PayEntryDetailResponse,
    responses={404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def get_pay_entry(
    service: Pay,
    entry_id: Annotated[UUID, Path()],
) -> PayEntryDetailResponse:
    """Get a pay entry along with the pay group or disbursement that owns it."""
    entry, parent = await service.get_pay_entry_with_parent(entry_id)
    return PayEntryDetailResponse(
        **PayEntryResponse.from_domain(entry).model_dump(),
        parent=PayEntryParentResponse.from_domain(parent),
    )
