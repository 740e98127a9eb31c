"""
IVIS Signal Data Access - CLI Application
"""
from typing import List, Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich import box

from ivis_data.config import settings
from ivis_data.core.exceptions import DataAccessError
from ivis_data.logger import logger, logger_manager

# Create Typer app
app = typer.Typer(
    name="ivis-data",
    help="IVIS signal data access CLI",
    add_completion=False,
)

console = Console()


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: bool = typer.Option(False, "--version", "-v", help="Show version and exit")
):
    """
    IVIS Signal Data Access CLI

    Query signal sets from a signals server over an absolute time window.
    """
    if version:
        console.print(f"[cyan]{settings.APP_NAME}[/cyan] v{settings.APP_VERSION}")
        raise typer.Exit()

    if ctx.invoked_subcommand is None:
        console.print(Panel.fit(
            f"[bold cyan]{settings.APP_NAME}[/bold cyan]\n"
            f"[dim]Version {settings.APP_VERSION}[/dim]\n\n"
            f"[yellow]Use --help to see available commands[/yellow]",
            box=box.ROUNDED,
            border_style="cyan"
        ))


@app.command()
def query(
    signal_set: str = typer.Argument(..., help="Signal set id"),
    signals: List[str] = typer.Argument(..., help="Signals as name or name:agg1,agg2"),
    start: str = typer.Option(..., "--start", "-s", help="Window start (ISO-8601)"),
    end: str = typer.Option(..., "--end", "-e", help="Window end (ISO-8601, exclusive)"),
    step: float = typer.Option(0.0, "--step", help="Aggregation step in seconds (0 = raw documents)"),
    ts_signal: Optional[str] = typer.Option(None, "--ts-signal", help="Timestamp signal of the set"),
    base_url: Optional[str] = typer.Option(None, "--base-url", help="Signals server URL"),
):
    """
    Fetch one signal set for a time window
    """
    from ivis_data.cli.query_commands import query_command

    try:
        query_command(signal_set, signals, start, end, step, ts_signal, base_url)
    except (DataAccessError, ValueError) as e:
        console.print(f"[red]Query failed: {e}[/red]")
        logger.error(f"Query command failed: {e}")
        raise typer.Exit(code=1)


@app.command("log-level")
def log_level(
    level: Optional[str] = typer.Argument(None, help="New level (omit to show the current one)")
):
    """
    Show or change the log level
    """
    if level is None:
        console.print(f"Current log level: [cyan]{logger_manager.get_level()}[/cyan]")
        console.print(f"[dim]Available: {', '.join(logger_manager.get_available_levels())}[/dim]")
        return

    try:
        new_level = logger_manager.set_level(level)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(code=1)

    console.print(f"[green]Log level set to {new_level}[/green]")


if __name__ == "__main__":
    app()
