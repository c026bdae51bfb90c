"""fixme-advisor CLI main entry point."""

from __future__ import annotations

import logging
import sys
from typing import Annotated

import typer

from fixme_advisor.cli.commands import gate, model, tools

app = typer.Typer(
    name="fixme-advisor",
    help="fixme-advisor - adaptive optimization recommendations with usage gating",
    no_args_is_help=True,
)


@app.callback()
def _main_callback(
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Log debug output to stderr")
    ] = False,
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


model.register(app)
gate.register(app)
tools.register(app)


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
