"""Shared dependencies for API routes."""

from __future__ import annotations

from fixme_advisor.service import AdvisorService


async def get_service() -> AdvisorService:
    """
    Dependency to get the advisor service.

    This is overridden by the application at startup.
    """
    raise NotImplementedError("Service not configured")
