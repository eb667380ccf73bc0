"""APERFlow CLI - Typer-based command line interface."""

import logging
from dataclasses import replace
from pathlib import Path
from typing import Annotated

import click
import typer
from rich.console import Console

from aperflow.cli.commands import (
    create_command,
    draft_app,
    list_command,
    reject_command,
    reopen_command,
    show_command,
    stats_command,
    submit_command,
)
from aperflow.cli.utils import CLIContext
from aperflow.config import AperConfig
from aperflow.constants import SUPPORTED_BACKENDS
from aperflow.exceptions import ConfigValidationError

# Create main app and console
app = typer.Typer(
    name="aperflow",
    help="APERFlow: annual performance evaluation report lifecycle",
    no_args_is_help=True,
)
console = Console()


@app.callback()
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Enable verbose output")
    ] = False,
    storage_dir: Annotated[
        Path | None,
        typer.Option("--storage-dir", help="Directory holding records and drafts (overrides APERFLOW_STORAGE_DIR)"),
    ] = None,
    backend: Annotated[
        str | None,
        typer.Option(
            "--backend",
            click_type=click.Choice(SUPPORTED_BACKENDS, case_sensitive=False),
            help="Storage backend (overrides APERFLOW_BACKEND)",
        ),
    ] = None,
):
    """
    APERFlow CLI callback - sets up context for all commands.

    Configuration comes from APERFLOW_* environment variables; the options
    here override them for a single invocation.
    """
    try:
        config = AperConfig.from_env()
        overrides = {}
        if storage_dir is not None:
            overrides["storage_dir"] = storage_dir.expanduser().resolve()
        if backend is not None:
            overrides["backend"] = backend.lower()
        if verbose and logging.getLevelName(config.log_level) > logging.INFO:
            overrides["log_level"] = "INFO"
        if overrides:
            config = replace(config, **overrides)
    except ConfigValidationError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1) from e

    config.configure_logging()
    ctx.obj = CLIContext(console=console, config=config, verbose=verbose)


app.command(name="create")(create_command)
app.command(name="list")(list_command)
app.command(name="show")(show_command)
app.command(name="stats")(stats_command)
app.command(name="submit")(submit_command)
app.command(name="reject")(reject_command)
app.command(name="reopen")(reopen_command)

# Register draft command group
app.add_typer(draft_app)


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
