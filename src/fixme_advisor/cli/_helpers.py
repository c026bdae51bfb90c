"""Shared CLI helpers for configuration, services, and output formatting."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Coroutine
from typing import Annotated, Any, TypeVar

import typer

from fixme_advisor.core.snapshot import HardwareSnapshot
from fixme_advisor.service import AdvisorService
from fixme_advisor.storage.base import EventStoreError
from fixme_advisor.storage.factory import create_store
from fixme_advisor.unified_config import AdvisorConfig

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Services opened during a CLI command, closed before the event loop shuts
# down (aiosqlite's worker thread must not outlive the loop).
_active_services: list[AdvisorService] = []

JsonOption = Annotated[bool, typer.Option("--json", "-j", help="Output as JSON")]
CpuOption = Annotated[float, typer.Option("--cpu", help="CPU utilization percent")]
MemoryOption = Annotated[float, typer.Option("--memory", help="Memory utilization percent")]
GpuOption = Annotated[float, typer.Option("--gpu", help="GPU utilization percent")]
ProcessesOption = Annotated[float, typer.Option("--processes", help="Running process count")]


def get_config() -> AdvisorConfig:
    """Get CLI configuration."""
    return AdvisorConfig.load()


def run_async(coro: Coroutine[Any, Any, T]) -> T:
    """Run an async CLI command with service cleanup.

    Event store failures end the command with exit code 1 instead of a
    traceback.
    """

    async def _with_cleanup() -> T:
        try:
            return await coro
        finally:
            for service in _active_services:
                try:
                    await service.close()
                except Exception:
                    logger.debug("Failed to close service during cleanup", exc_info=True)
            _active_services.clear()
            await asyncio.sleep(0)

    try:
        return asyncio.run(_with_cleanup())
    except EventStoreError as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1) from e


async def get_service(config: AdvisorConfig | None = None) -> AdvisorService:
    """Open the configured event store and wrap it in a service."""
    config = config or get_config()
    store = await create_store(config)
    service = AdvisorService(store, config)
    _active_services.append(service)
    return service


def snapshot_from_options(
    cpu: float, memory: float, gpu: float, processes: float
) -> HardwareSnapshot:
    return HardwareSnapshot(
        cpu_percent=cpu,
        memory_percent=memory,
        gpu_percent=gpu,
        process_count=processes,
    )


def output_result(data: dict[str, Any], as_json: bool = False) -> None:
    """Output result in appropriate format."""
    if as_json:
        typer.echo(json.dumps(data, indent=2, default=str))
        return
    if "error" in data:
        typer.secho(f"Error: {data['error']}", fg=typer.colors.RED)
        return
    for key, value in data.items():
        typer.echo(f"{key}: {value}")
