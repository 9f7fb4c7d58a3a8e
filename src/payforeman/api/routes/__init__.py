"""API routes."""

from payforeman.api.routes.chat import router as chat_router
from payforeman.api.routes.deadlines import router as deadlines_router
from payforeman.api.routes.health import router as health_router
from payforeman.api.routes.invoices import router as invoices_router
from payforeman.api.routes.llm import router as llm_router
from payforeman.api.routes.projects import router as projects_router

__all__ = [
    "chat_router",
    "deadlines_router",
    "health_router",
    "invoices_router",
    "llm_router",
    "projects_router",
]
