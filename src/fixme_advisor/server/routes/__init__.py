"""API routes for the fixme-advisor bridge."""

from fixme_advisor.server.routes.ml import router as ml_router
from fixme_advisor.server.routes.usage import router as usage_router

__all__ = ["ml_router", "usage_router"]
