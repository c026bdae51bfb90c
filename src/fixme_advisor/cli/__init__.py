"""fixme-advisor CLI.

Usage:
    fixme-advisor predict --cpu 85 --memory 70     Recommend actions
    fixme-advisor check clear_ram                  Gate decision
    fixme-advisor log clear_ram                    Record an execution
    fixme-advisor usage                            Usage per action
    fixme-advisor serve                            Run the HTTP bridge
"""

from fixme_advisor.cli.main import app, main

__all__ = ["app", "main"]
