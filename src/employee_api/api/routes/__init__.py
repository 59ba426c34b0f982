"""API routes."""

from employee_api.api.routes.employees import router as employees_router
from employee_api.api.routes.health import router as health_router
from employee_api.api.routes.pay import router as pay_router

__all__ = ["employees_router", "health_router", "pay_router"]
