"""Draft command group: save and load work-in-progress section payloads."""

from pathlib import Path
from typing import Annotated

import typer

from aperflow.cli.utils import handle_cli_errors
from aperflow.gate import Denied
from aperflow.models import Role

draft_app = typer.Typer(
    name="draft",
    help="Save and load section drafts",
    no_args_is_help=True,
)


@draft_app.command("save")
@handle_cli_errors("Failed to save draft")
def save_command(
    ctx: typer.Context,
    record_id: Annotated[str, typer.Argument(help="Evaluation record id")],
    role: Annotated[Role, typer.Option("--role", "-r", help="Role saving the draft", case_sensitive=False)],
    data: Annotated[str | None, typer.Option("--data", "-d", help="Section payload as inline JSON")] = None,
    file: Annotated[
        Path | None,
        typer.Option("--file", "-f", exists=True, dir_okay=False, help="Section payload as a JSON/YAML file"),
    ] = None,
    json_output: Annotated[bool, typer.Option("--json", help="Output in JSON format")] = False,
):
    """Save a draft for the record's current stage."""
    cli_ctx = ctx.obj
    cli_ctx.set_json_mode(json_output)

    payload = cli_ctx.load_payload_or_exit(data, file)
    cli_ctx.require_record_or_exit(record_id)
    decision = cli_ctx.store.save_draft(record_id, role, payload)

    if isinstance(decision, Denied):
        cli_ctx.printer.print_denied(decision)
        raise typer.Exit(code=1)

    if json_output:
        cli_ctx.printer.print_json({"id": record_id, "saved": True})
        return
    cli_ctx.print_success(f"Draft saved for {record_id}")


@draft_app.command("load")
@handle_cli_errors("Failed to load draft")
def load_command(
    ctx: typer.Context,
    record_id: Annotated[str, typer.Argument(help="Evaluation record id")],
    role: Annotated[Role, typer.Option("--role", "-r", help="Role loading the draft", case_sensitive=False)],
):
    """Print the role's draft for the record's current stage as JSON."""
    cli_ctx = ctx.obj
    cli_ctx.set_json_mode(True)

    cli_ctx.require_record_or_exit(record_id)
    draft = cli_ctx.store.load_draft(record_id, role)
    cli_ctx.printer.print_json(draft)
