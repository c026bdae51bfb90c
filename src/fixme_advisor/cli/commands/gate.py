"""Usage gate commands: check, log, usage, policies."""

from __future__ import annotations

from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from fixme_advisor.cli._helpers import (
    JsonOption,
    get_config,
    get_service,
    output_result,
    run_async,
)
from fixme_advisor.core.action_type import get_label
from fixme_advisor.engine.usage_gate import GateDecision
from fixme_advisor.service import blocked_message

console = Console()


def _parse_details(pairs: list[str]) -> dict[str, str]:
    details: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"Expected key=value, got {pair!r}", param_hint="--detail")
        details[key.strip()] = value.strip()
    return details


def check(
    action_type: Annotated[str, typer.Argument(help="Action type to check")],
    json_output: JsonOption = False,
) -> None:
    """Check whether an action may run now.

    Exits with code 2 when the action is blocked.

    Examples:
        fixme-advisor check clear_ram
    """

    async def _check() -> GateDecision:
        service = await get_service()
        return await service.can_execute(action_type)

    decision = run_async(_check())

    if json_output:
        output_result(decision.to_dict(), True)
    elif decision.allowed:
        typer.secho(
            f"{action_type}: allowed ({decision.remaining} left today)",
            fg=typer.colors.GREEN,
        )
    else:
        typer.secho(
            f"{action_type}: blocked. {blocked_message(decision)}", fg=typer.colors.YELLOW
        )

    if not decision.allowed:
        raise typer.Exit(2)


def log_action(
    action_type: Annotated[str, typer.Argument(help="Action type that ran")],
    failed: Annotated[bool, typer.Option("--failed", help="Record the run as a failure")] = False,
    detail: Annotated[
        list[str] | None, typer.Option("--detail", "-d", help="Extra context as key=value")
    ] = None,
) -> None:
    """Record an executed action in the usage log.

    Examples:
        fixme-advisor log clear_ram
        fixme-advisor log high_performance --failed -d error=denied
    """
    details = _parse_details(detail or [])

    async def _log() -> dict:
        service = await get_service()
        record = await service.log_request(action_type, not failed, details)
        return record.to_dict()

    result = run_async(_log())
    outcome = "success" if result["success"] else "failure"
    typer.echo(f"Logged {result['action_type']} ({outcome})")


def usage(json_output: JsonOption = False) -> None:
    """Show per-action usage for today and overall.

    Examples:
        fixme-advisor usage
    """

    async def _usage() -> dict:
        service = await get_service()
        stats = await service.get_usage_stats()
        return {action: s.to_dict() for action, s in stats.items()}

    result = run_async(_usage())

    if json_output:
        output_result(result, True)
        return

    config = get_config()
    table = Table(title="Usage")
    table.add_column("Action")
    table.add_column("Today", justify="right")
    table.add_column("Total", justify="right")
    table.add_column("Success", justify="right")
    table.add_column("Last used")
    for action_type, s in result.items():
        table.add_row(
            get_label(action_type, config.policies),
            f"{s['today_count']}/{s['limit']}",
            str(s["total_count"]),
            f"{s['success_rate']}%",
            s["last_used"],
        )
    console.print(table)


def policies(json_output: JsonOption = False) -> None:
    """List configured cooldowns and daily limits."""
    config = get_config()
    policies = {str(name): p.to_dict() for name, p in config.policies.items()}

    if json_output:
        output_result(policies, True)
        return

    table = Table(title="Policies")
    table.add_column("Action")
    table.add_column("Label")
    table.add_column("Cooldown", justify="right")
    table.add_column("Daily limit", justify="right")
    for name, p in policies.items():
        table.add_row(name, p["label"], f"{p['cooldown_ms'] // 1000}s", str(p["daily_limit"]))
    console.print(table)


def register(app: typer.Typer) -> None:
    """Register usage gate commands on the app."""
    app.command()(check)
    app.command(name="log")(log_action)
    app.command()(usage)
    app.command()(policies)
