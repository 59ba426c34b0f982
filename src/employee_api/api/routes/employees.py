"""Employee and business employee endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path, status

from employee_api.api.dependencies import BusinessEmployees, Employees
from employee_api.api.schemas import (
    BusinessEmployeeResponse,
    BusinessEmployeeWrite,
    EmployeeCreate,
    EmployeeResponse,
    EmployeeUpdate,
    ErrorResponse,
)

router = APIRouter(tags=["employees"])


# ============================================================================
# Employees
# ============================================================================


@router.post(
    "/employees",
    response_model=EmployeeResponse,
    status_code=status.HTTP_201_CREATED,
    responses={422: {"model": ErrorResponse}},
)
async def add_employee(service: Employees, payload: EmployeeCreate) -> EmployeeResponse:
    """Add a new employee."""
    employee = await service.add_employee(payload.name, payload.department, payload.salary)
    return EmployeeResponse.model_validate(employee)


@router.get("/employees", response_model=list[EmployeeResponse])
async def list_employees(service: Employees) -> list[EmployeeResponse]:
    """List all employees."""
    return [EmployeeResponse.model_validate(e) for e in await service.list_employees()]


@router.get(
    "/employees/{employee_id}",
    response_model=EmployeeResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_employee(
    service: Employees,
    employee_id: Annotated[str, Path()],
) -> EmployeeResponse:
    """Get a specific employee by ID."""
    return EmployeeResponse.model_validate(await service.get_employee(employee_id))


@router.patch(
    "/employees/{employee_id}",
    response_model=EmployeeResponse,
    responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def update_employee(
    service: Employees,
    employee_id: Annotated[str, Path()],
    payload: EmployeeUpdate,
) -> EmployeeResponse:
    """Update the provided fields of an employee."""
    employee = await service.update_employee(
        employee_id,
        name=payload.name,
        department=payload.department,
        salary=payload.salary,
    )
    return EmployeeResponse.model_validate(employee)


@router.delete(
    "/employees/{employee_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
)
async def delete_employee(
    service: Employees,
    employee_id: Annotated[str, Path()],
) -> None:
    """Delete an employee."""
    await service.delete_employee(employee_id)


# ============================================================================
# Business employees
# ============================================================================


@router.post(
    "/business-employees",
    response_model=BusinessEmployeeResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def create_business_employee(
    service: BusinessEmployees,
    payload: BusinessEmployeeWrite,
) -> BusinessEmployeeResponse:
    """Create a business employee after validating its bank accounts."""
    employee = await service.create(payload.name, payload.email, payload.domain_accounts())
    return BusinessEmployeeResponse.from_domain(employee)


@router.get(
    "/business-employees/{employee_id}",
    response_model=BusinessEmployeeResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_business_employee(
    service: BusinessEmployees,
    employee_id: Annotated[UUID, Path()],
) -> BusinessEmployeeResponse:
    """Get a business employee by ID."""
    return BusinessEmployeeResponse.from_domain(await service.get(employee_id))


@router.put(
    "/business-employees/{employee_id}",
    response_model=BusinessEmployeeResponse,
    responses={
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
)
async def replace_business_employee(
    service: BusinessEmployees,
    employee_id: Annotated[UUID, Path()],
    payload: BusinessEmployeeWrite,
) -> BusinessEmployeeResponse:
    """Replace a business employee's name, email and bank accounts."""
    employee = await service.replace(
        employee_id, payload.name, payload.email, payload.domain_accounts()
    )
    return BusinessEmployeeResponse.from_domain(employee)


@router.delete(
    "/business-employees/{employee_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
)
async def delete_business_employee(
    service: BusinessEmployees,
    employee_id: Annotated[UUID, Path()],
) -> None:
    """Delete a business employee."""
    await service.delete(employee_id)
