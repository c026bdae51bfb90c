"""Recommendation model commands: predict, train, feedback, stats."""

from __future__ import annotations

from typing import Annotated

import typer

from fixme_advisor.cli._helpers import (
    CpuOption,
    GpuOption,
    JsonOption,
    MemoryOption,
    ProcessesOption,
    get_service,
    output_result,
    run_async,
    snapshot_from_options,
)
from fixme_advisor.core.action_type import get_label


def predict(
    cpu: CpuOption = 0.0,
    memory: MemoryOption = 0.0,
    gpu: GpuOption = 0.0,
    processes: ProcessesOption = 0.0,
    json_output: JsonOption = False,
) -> None:
    """Recommend optimizations for a hardware state.

    Examples:
        fixme-advisor predict --cpu 85 --memory 70 --processes 240
        fixme-advisor predict --cpu 20 --json
    """

    async def _predict() -> dict:
        service = await get_service()
        snapshot = snapshot_from_options(cpu, memory, gpu, processes)
        result = await service.predict(snapshot)
        data = result.to_dict()
        for item in data["predictions"]:
            item["label"] = get_label(item["type"], service.policies)
        return data

    result = run_async(_predict())

    if json_output:
        output_result(result, True)
        return

    typer.echo(result["message"])
    for i, item in enumerate(result["predictions"], 1):
        typer.echo(
            f"  {i}. {item['label']}: score {item['score']:.2f}, "
            f"confidence {item['confidence']}%"
        )


def train(
    action_type: Annotated[str, typer.Argument(help="Action type to train")],
    effectiveness: Annotated[
        float, typer.Option("--effectiveness", "-e", help="Outcome score, clamped to 0-1")
    ],
    cpu: CpuOption = 0.0,
    memory: MemoryOption = 0.0,
    gpu: GpuOption = 0.0,
    processes: ProcessesOption = 0.0,
    json_output: JsonOption = False,
) -> None:
    """Add a training sample for an action.

    Examples:
        fixme-advisor train clear_ram -e 0.8 --memory 92
    """

    async def _train() -> dict:
        service = await get_service()
        snapshot = snapshot_from_options(cpu, memory, gpu, processes)
        sample = await service.train(snapshot, action_type, effectiveness)
        return sample.to_dict()

    result = run_async(_train())

    if json_output:
        output_result(result, True)
    else:
        typer.secho(
            f"Trained {result['action_type']} (effectiveness {result['effectiveness']:.2f})",
            fg=typer.colors.GREEN,
        )


def feedback(
    action_type: Annotated[str, typer.Argument(help="Action type being rated")],
    rating: Annotated[int, typer.Argument(min=1, max=5, help="Rating from 1 (bad) to 5 (great)")],
    cpu: CpuOption = 0.0,
    memory: MemoryOption = 0.0,
    gpu: GpuOption = 0.0,
    processes: ProcessesOption = 0.0,
) -> None:
    """Rate how well an action worked; the rating trains the model.

    Examples:
        fixme-advisor feedback high_performance 5 --cpu 90
    """

    async def _feedback() -> dict:
        service = await get_service()
        snapshot = snapshot_from_options(cpu, memory, gpu, processes)
        sample = await service.record_feedback(snapshot, action_type, rating)
        return sample.to_dict()

    result = run_async(_feedback())
    typer.secho(
        f"Feedback recorded for {result['action_type']} "
        f"(effectiveness {result['effectiveness']:.2f})",
        fg=typer.colors.GREEN,
    )


def stats(json_output: JsonOption = False) -> None:
    """Show training set statistics.

    Examples:
        fixme-advisor stats
        fixme-advisor stats --json
    """

    async def _stats() -> dict:
        service = await get_service()
        model_stats = await service.get_model_stats()
        return model_stats.to_dict()

    result = run_async(_stats())

    if json_output:
        output_result(result, True)
        return

    typer.echo(f"Samples: {result['total_samples']}")
    typer.echo(f"Average effectiveness: {result['avg_effectiveness']:.2f}")
    if result["is_ready"]:
        typer.secho("Model ready", fg=typer.colors.GREEN)
    else:
        typer.secho("Model not ready (needs more samples)", fg=typer.colors.YELLOW)
    for action_type, count in sorted(result["type_counts"].items()):
        typer.echo(f"  {action_type}: {count}")


def register(app: typer.Typer) -> None:
    """Register model commands on the app."""
    app.command()(predict)
    app.command()(train)
    app.command()(feedback)
    app.command()(stats)
