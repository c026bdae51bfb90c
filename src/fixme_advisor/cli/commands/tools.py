"""Utility tool commands: serve, version."""

from __future__ import annotations

from typing import Annotated

import typer

from fixme_advisor.utils.config import get_config as get_server_config


def serve(
    host: Annotated[str | None, typer.Option("--host", "-h", help="Host to bind to")] = None,
    port: Annotated[int | None, typer.Option("--port", "-p", help="Port to bind to")] = None,
    reload: Annotated[
        bool, typer.Option("--reload", "-r", help="Enable auto-reload for development")
    ] = False,
) -> None:
    """Run the local HTTP bridge.

    Host and port default to FIXME_ADVISOR_HOST / FIXME_ADVISOR_PORT.

    Examples:
        fixme-advisor serve                 # Run on localhost:8765
        fixme-advisor serve -p 9000         # Run on port 9000
        fixme-advisor serve --reload        # Development mode
    """
    import uvicorn

    server_config = get_server_config()
    host = host or server_config.host
    port = port or server_config.port

    typer.echo(f"Starting fixme-advisor bridge on http://{host}:{port}")
    typer.echo(f"  Docs: http://{host}:{port}/docs")

    uvicorn.run(
        "fixme_advisor.server.app:create_app",
        host=host,
        port=port,
        reload=reload,
        factory=True,
    )


def version() -> None:
    """Show version information."""
    from fixme_advisor import __version__

    typer.echo(f"fixme-advisor v{__version__}")


def register(app: typer.Typer) -> None:
    """Register tool commands on the app."""
    app.command()(serve)
    app.command()(version)
