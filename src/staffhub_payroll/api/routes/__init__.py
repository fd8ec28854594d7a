"""API routes."""

from staffhub_payroll.api.routes.health import router as health_router
from staffhub_payroll.api.routes.payrolls import router as payrolls_router

__all__ = ["health_router", "payrolls_router"]
