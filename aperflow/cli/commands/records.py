"""Record commands: create, list, show and dashboard stats."""

from datetime import datetime, timedelta
from typing import Annotated

import typer

from aperflow.cli.utils import handle_cli_errors
from aperflow.composer import SectionComposer
from aperflow.models import DisplayStatus, Role, utcnow


@handle_cli_errors("Failed to create evaluation")
def create_command(
    ctx: typer.Context,
    employee_name: Annotated[str, typer.Argument(help="Employee the evaluation is for")],
    due_days: Annotated[
        int | None,
        typer.Option("--due-days", min=0, help="Days until the evaluation is due (defaults to config)"),
    ] = None,
    json_output: Annotated[bool, typer.Option("--json", help="Output in JSON format")] = False,
):
    """Create a new evaluation record in draft."""
    cli_ctx = ctx.obj
    cli_ctx.set_json_mode(json_output)

    due_at = utcnow() + timedelta(days=due_days) if due_days is not None else None
    record_id = cli_ctx.store.create(employee_name=employee_name, due_at=due_at)

    if json_output:
        cli_ctx.printer.print_json({"id": record_id})
        return
    cli_ctx.print_success(f"Created evaluation {record_id} for {employee_name}")


@handle_cli_errors("Failed to list evaluations")
def list_command(
    ctx: typer.Context,
    search: Annotated[
        str, typer.Option("--search", "-s", help="Case-insensitive employee name filter")
    ] = "",
    status: Annotated[
        list[DisplayStatus] | None,
        typer.Option("--status", help="Display status to include (repeatable)", case_sensitive=False),
    ] = None,
    json_output: Annotated[bool, typer.Option("--json", help="Output in JSON format")] = False,
):
    """List evaluation records with their display status and progress."""
    cli_ctx = ctx.obj
    cli_ctx.set_json_mode(json_output)

    store = cli_ctx.store
    now = utcnow()
    records = store.list(name_query=search, statuses=status or (), now=now)
    rows = []
    for record in records:
        draft = store.drafts.load_draft(record.id, record.stage)
        rows.append((record, store.projector.project(record, now), store.projector.completion(record, draft)))

    cli_ctx.print_verbose(f"[dim]{len(rows)} of {len(store.all())} evaluations match[/dim]")
    cli_ctx.printer.print_records(rows)


@handle_cli_errors("Failed to show evaluation")
def show_command(
    ctx: typer.Context,
    record_id: Annotated[str, typer.Argument(help="Evaluation record id")],
    role: Annotated[Role, typer.Option("--role", "-r", help="Role viewing the record", case_sensitive=False)],
    json_output: Annotated[bool, typer.Option("--json", help="Output in JSON format")] = False,
):
    """Show the committed sections visible to a role."""
    cli_ctx = ctx.obj
    cli_ctx.set_json_mode(json_output)

    store = cli_ctx.store
    record = cli_ctx.require_record_or_exit(record_id)
    view = SectionComposer(store.gate).compose(record, role)
    cli_ctx.printer.print_view(view, store.projector.project(record))


@handle_cli_errors("Failed to compute dashboard")
def stats_command(
    ctx: typer.Context,
    role: Annotated[Role, typer.Option("--role", "-r", help="Role whose dashboard to show", case_sensitive=False)],
    as_of: Annotated[
        datetime | None,
        typer.Option("--as-of", help="Reference time for the overdue overlay"),
    ] = None,
    json_output: Annotated[bool, typer.Option("--json", help="Output in JSON format")] = False,
):
    """Show dashboard counts for a role."""
    cli_ctx = ctx.obj
    cli_ctx.set_json_mode(json_output)

    store = cli_ctx.store
    now = as_of.astimezone() if as_of is not None else utcnow()
    stats = store.projector.summarize(store.all(), role, now)
    cli_ctx.printer.print_stats(stats)
