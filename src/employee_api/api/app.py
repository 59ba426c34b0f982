"""FastAPI application factory."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from employee_api import __version__
from employee_api.api.routes import employees_router, health_router, pay_router
from employee_api.config import configure_logging, get_settings
from employee_api.database import create_tables, dispose_db, init_db
from employee_api.domain.state_machine import InvalidTransitionError
from employee_api.domain.validation import FieldError
from employee_api.exceptions import (
    AlreadyExistsError,
    ConstraintViolation,
    EmployeeApiError,
    InconsistentEntryState,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)

# Client-caused errors and the status they map to; anything else is a 500
ERROR_STATUS: dict[type[EmployeeApiError], int] = {
    ValidationError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    AlreadyExistsError: status.HTTP_409_CONFLICT,
    InvalidTransitionError: status.HTTP_409_CONFLICT,
}

REQUEST_LOCATIONS = {"body", "query", "path", "header", "cookie"}


def field_path(loc: tuple[int | str, ...]) -> str:
    """Render a pydantic error location as ``bank_accounts[0].pay_percentage``."""
    parts = list(loc)
    if parts and parts[0] in REQUEST_LOCATIONS:
        parts = parts[1:]
    path = ""
    for part in parts:
        if isinstance(part, int):
            path += f"[{part}]"
        else:
            path += f".{part}" if path else str(part)
    return path or "body"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    engine, _ = init_db()
    await create_tables(engine)
    yield
    await dispose_db()


def create_app(*, use_lifespan: bool = True) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Employee API",
        description="Employees, pay groups, disbursements and pay entries",
        version=__version__,
        lifespan=lifespan if use_lifespan else None,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(EmployeeApiError)
    async def application_error_handler(
        request: Request, exc: EmployeeApiError
    ) -> JSONResponse:
        """Map application errors to status codes and error bodies."""
        for error_type, status_code in ERROR_STATUS.items():
            if isinstance(exc, error_type):
                content: dict = {"detail": str(exc), "code": exc.code}
                if isinstance(exc, ValidationError):
                    content["errors"] = exc.as_dict()
                return JSONResponse(status_code=status_code, content=content)

        if isinstance(exc, ConstraintViolation):
            logger.error("Save failed for %s %s: %s", exc.entity, exc.entity_id, exc.detail)
            detail = "Save failed"
        elif isinstance(exc, InconsistentEntryState):
            logger.error(
                "Inconsistent pay entry %s (discriminator=%s, missing=%s)",
                exc.entry_id,
                exc.discriminator,
                exc.missing_reference,
            )
            detail = "An unexpected error occurred"
        else:
            logger.error("Unhandled application error on %s: %s", request.url.path, exc)
            detail = "An unexpected error occurred"

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": detail, "code": exc.code},
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Render schema failures in the same shape as domain validation errors."""
        error = ValidationError(
            [FieldError(field_path(e["loc"]), e["msg"]) for e in exc.errors()]
        )
        logger.warning(
            "Request validation failed on %s: %s", request.url.path, error.as_dict()
        )
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": str(error), "code": error.code, "errors": error.as_dict()},
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.error("Unexpected error on %s", request.url.path, exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "detail": "An unexpected error occurred",
                "code": "INTERNAL_ERROR",
            },
        )

    app.include_router(health_router)
    app.include_router(employees_router, prefix="/api/v1")
    app.include_router(pay_router, prefix="/api/v1")

    return app


# Default app instance for uvicorn
app = create_app()
