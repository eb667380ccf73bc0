"""Transition commands: submit a section, reject and reopen."""

from pathlib import Path
from typing import Annotated

import typer

from aperflow.cli.utils import handle_cli_errors
from aperflow.models import Role
from aperflow.store import CommitResult


def _report(cli_ctx, result: CommitResult, verb: str) -> None:
    """Print the outcome of a transition; exit with code 1 if it was denied."""
    if result.denied is not None:
        cli_ctx.printer.print_denied(result.denied)
        raise typer.Exit(code=1)

    record = result.record
    if cli_ctx.json_mode:
        cli_ctx.printer.print_json({"id": record.id, "stage": record.stage.value})
        return
    cli_ctx.print_success(f"Evaluation {record.id} {verb}; stage is now {record.stage.value}")


@handle_cli_errors("Failed to submit section")
def submit_command(
    ctx: typer.Context,
    record_id: Annotated[str, typer.Argument(help="Evaluation record id")],
    role: Annotated[Role, typer.Option("--role", "-r", help="Role submitting its section", case_sensitive=False)],
    data: Annotated[str | None, typer.Option("--data", "-d", help="Section payload as inline JSON")] = None,
    file: Annotated[
        Path | None,
        typer.Option("--file", "-f", exists=True, dir_okay=False, help="Section payload as a JSON/YAML file"),
    ] = None,
    from_draft: Annotated[
        bool, typer.Option("--from-draft", help="Submit the saved draft for the current stage")
    ] = False,
    json_output: Annotated[bool, typer.Option("--json", help="Output in JSON format")] = False,
):
    """Commit the role's section and advance the record one stage."""
    cli_ctx = ctx.obj
    cli_ctx.set_json_mode(json_output)

    store = cli_ctx.store
    cli_ctx.require_record_or_exit(record_id)
    if from_draft:
        payload = store.load_draft(record_id, role) or {}
    else:
        payload = cli_ctx.load_payload_or_exit(data, file)

    cli_ctx.print_verbose(f"[dim]Submitting {len(payload)} field(s) as {role.value}[/dim]")
    _report(cli_ctx, store.commit_section(record_id, role, payload), "submitted")


@handle_cli_errors("Failed to reject evaluation")
def reject_command(
    ctx: typer.Context,
    record_id: Annotated[str, typer.Argument(help="Evaluation record id")],
    role: Annotated[
        Role, typer.Option("--role", "-r", help="Role rejecting the record", case_sensitive=False)
    ] = Role.COUNTERSIGNING_OFFICER,
    json_output: Annotated[bool, typer.Option("--json", help="Output in JSON format")] = False,
):
    """Reject an assessed evaluation."""
    cli_ctx = ctx.obj
    cli_ctx.set_json_mode(json_output)

    cli_ctx.require_record_or_exit(record_id)
    _report(cli_ctx, cli_ctx.store.reject(record_id, role), "rejected")


@handle_cli_errors("Failed to reopen evaluation")
def reopen_command(
    ctx: typer.Context,
    record_id: Annotated[str, typer.Argument(help="Evaluation record id")],
    role: Annotated[
        Role, typer.Option("--role", "-r", help="Role reopening the record", case_sensitive=False)
    ] = Role.EMPLOYEE,
    json_output: Annotated[bool, typer.Option("--json", help="Output in JSON format")] = False,
):
    """Return a rejected evaluation to draft."""
    cli_ctx = ctx.obj
    cli_ctx.set_json_mode(json_output)

    cli_ctx.require_record_or_exit(record_id)
    _report(cli_ctx, cli_ctx.store.reopen(record_id, role), "reopened")
