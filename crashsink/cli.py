"""Typer CLI for checking the Sentry sink.

Commands:
    - tags: Host environment tags attached to every report
    - ping: Send one test error report and print its Sentry event id
"""

from __future__ import annotations

from typing import Annotated

import typer
from loguru import logger
from rich.console import Console
from rich.table import Table

from crashsink.environment import collect_host_info
from crashsink.exceptions import get_report_id
from crashsink.logger import get_sentry_sink, setup_logger

app = typer.Typer(no_args_is_help=True)
console = Console()


@app.command()
def tags() -> None:
    """Show the host environment tags."""
    table = Table(show_header=True, header_style="bold")
    table.add_column("Tag", style="cyan")
    table.add_column("Value")
    for key, value in collect_host_info().as_tags().items():
        table.add_row(key, value or "[dim]-[/dim]")
    console.print(table)


@app.command()
def ping(
    dsn: Annotated[str, typer.Option(envvar="SENTRY_DSN", help="Sentry DSN")],
    message: Annotated[str, typer.Option(help="Message of the test report")] = "crashsink test report",
    production: Annotated[bool, typer.Option(help="Report under the prod environment")] = False,
    timeout: Annotated[float, typer.Option(help="Seconds to wait for delivery")] = 5.0,
) -> None:
    """Send one ERROR report through the Sentry sink."""
    setup_logger(dsn, console_level="WARNING", production=production)
    sink = get_sentry_sink()
    if sink is None:
        console.print("[red]Sentry sink is not configured.[/red]")
        raise typer.Exit(code=1)

    error = RuntimeError(message)
    logger.opt(exception=error).error(message)
    sink.client.flush(timeout=timeout)

    report_id = get_report_id(error)
    if report_id is None:
        console.print("[red]Report was not sent.[/red]")
        raise typer.Exit(code=1)
    console.print(f"[green]Reported[/green] event_id={report_id}")
