"""Local HTTP bridge for the advisor service."""

from fixme_advisor.server.app import create_app

__all__ = ["create_app"]
