"""FastAPI dependencies for dependency injection."""

from collections.abc import AsyncGenerator
from typing import Annotated
from uuid import UUID

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from employee_api.config import Settings, get_settings
from employee_api.database import init_db
from employee_api.services import BusinessEmployeeService, EmployeeService, PayService


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Get database session dependency; commits when the request succeeds."""
    _, factory = init_db()
    async with factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def get_actor_id(
    x_actor_id: Annotated[str | None, Header()] = None
) -> UUID:
    """Extract the acting user ID from header."""
    if not x_actor_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="X-Actor-ID header is required",
        )
    try:
        return UUID(x_actor_id)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid X-Actor-ID format",
        )


# Type aliases for cleaner dependency injection
DbSession = Annotated[AsyncSession, Depends(get_db_session)]
ActorId = Annotated[UUID, Depends(get_actor_id)]
AppSettings = Annotated[Settings, Depends(get_settings)]


def get_employee_service(db: DbSession) -> EmployeeService:
    return EmployeeService(db)


def get_business_employee_service(db: DbSession) -> BusinessEmployeeService:
    return BusinessEmployeeService(db)


def get_pay_service(db: DbSession, settings: AppSettings) -> PayService:
    return PayService(db, amount_policy=settings.pay_entry_amount_policy)


Employees = Annotated[EmployeeService, Depends(get_employee_service)]
BusinessEmployees = Annotated[BusinessEmployeeService, Depends(get_business_employee_service)]
Pay = Annotated[PayService, Depends(get_pay_service)]
