"""
Console entry point for `dj-automation` and `python -m dj_automation`.
"""

import asyncio
import logging
import sys

import typer
from rich.console import Console

from dj_automation.cli.app import app
from dj_automation.cli.formatters import format_error_with_suggestions
from dj_automation.exceptions import ApiError, DjAutomationError

log = logging.getLogger("dj_automation")


def _error_context(error: Exception) -> dict | None:
    if isinstance(error, ApiError) and (error.endpoint or error.status):
        return {"endpoint": error.endpoint, "status": error.status}
    if not isinstance(error, DjAutomationError):
        return {"type": "Unexpected"}
    return None


def main() -> None:
    console = Console(stderr=True)
    try:
        app()
    except (typer.Exit, typer.Abort):
        pass
    except (KeyboardInterrupt, asyncio.CancelledError):
        console.print("\n[yellow]⚠️  Interrupted, remaining search terms skipped.[/yellow]")
        sys.exit(0)
    except Exception as e:
        console.print(format_error_with_suggestions(e, _error_context(e)))
        log.debug("Full traceback:", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
