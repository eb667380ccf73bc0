"""CLI Printer for consistent output formatting."""

from datetime import datetime
from typing import Any

from rich.console import Console
from rich.table import Table

from aperflow.composer import ReadOnlyView
from aperflow.gate import Denied
from aperflow.models import DisplayStatus, EvaluationRecord
from aperflow.status import DashboardStats

STATUS_STYLES: dict[DisplayStatus, str] = {
    DisplayStatus.DRAFT: "dim",
    DisplayStatus.IN_PROGRESS: "blue",
    DisplayStatus.PENDING_REVIEW: "yellow",
    DisplayStatus.UNDER_REVIEW: "magenta",
    DisplayStatus.COMPLETED: "green",
    DisplayStatus.OVERDUE: "red",
    DisplayStatus.REJECTED: "red",
}


def _format_time(value: datetime | None) -> str:
    return value.strftime("%Y-%m-%d") if value is not None else "-"


class CliPrinter:
    """Centralized printer for CLI output.

    This class handles all printing operations for the CLI, ensuring consistent
    formatting across commands and proper handling of JSON mode.
    """

    def __init__(self, console: Console, json_mode: bool = False):
        self.console = console
        self.json_mode = json_mode

    def print_records(
        self,
        rows: list[tuple[EvaluationRecord, DisplayStatus, int]],
        json_mode: bool | None = None,
    ) -> None:
        """Print a record listing as a table, or as JSON.

        Args:
            rows: Tuples of (record, display status, completion percentage)
            json_mode: If True, output as JSON. If None, uses self.json_mode
        """
        json_mode = json_mode if json_mode is not None else self.json_mode

        if json_mode:
            self.console.print_json(
                data=[
                    {
                        "id": record.id,
                        "employee": record.display_name,
                        "stage": record.stage.value,
                        "status": status.value,
                        "completion": completion,
                        "due_at": record.due_at.isoformat() if record.due_at else None,
                    }
                    for record, status, completion in rows
                ]
            )
            return

        if not rows:
            self.console.print("No evaluations found")
            return

        table = Table(title="Evaluations")
        table.add_column("ID", no_wrap=True)
        table.add_column("Employee")
        table.add_column("Status")
        table.add_column("Progress", justify="right")
        table.add_column("Due")
        for record, status, completion in rows:
            style = STATUS_STYLES.get(status, "")
            table.add_row(
                record.id,
                record.display_name or "-",
                f"[{style}]{status.value}[/{style}]" if style else status.value,
                f"{completion}%",
                _format_time(record.due_at),
            )
        self.console.print(table)

    def print_view(self, view: ReadOnlyView, status: DisplayStatus, json_mode: bool | None = None) -> None:
        """Print the read-only sections a role may see."""
        json_mode = json_mode if json_mode is not None else self.json_mode

        if json_mode:
            data: dict[str, Any] = view.to_dict()
            data["status"] = status.value
            self.console.print_json(data=data)
            return

        self.console.print(f"[bold]Evaluation {view.record_id}[/bold]  status: {status.value}")
        if not view.sections:
            self.console.print("[dim]No sections visible yet[/dim]")
        for section in view.sections:
            for group in section.groups:
                table = Table(title=group.title, show_header=False)
                table.add_column("Field", style="cyan")
                table.add_column("Value")
                for name, value in group.fields.items():
                    table.add_row(name, "-" if value in (None, "") else str(value))
                self.console.print(table)

    def print_denied(self, denied: Denied, json_mode: bool | None = None) -> None:
        json_mode = json_mode if json_mode is not None else self.json_mode
        if json_mode:
            self.console.print_json(data={"denied": denied.to_dict()})
            return
        self.print_error(f"{denied.action.value} denied: {denied.reason.value}")
        for message in denied.messages:
            self.console.print(f"  [red]- {message}[/red]")

    def print_stats(self, stats: DashboardStats, json_mode: bool | None = None) -> None:
        json_mode = json_mode if json_mode is not None else self.json_mode
        if json_mode:
            self.console.print_json(data=stats.to_dict())
            return
        table = Table(title="Dashboard")
        table.add_column("Metric")
        table.add_column("Count", justify="right")
        for name, value in stats.to_dict().items():
            table.add_row(name.capitalize(), str(value))
        self.console.print(table)

    def show_success(self, message: str) -> None:
        self.console.print(f"[green]✓[/green] {message}")

    def print_json(self, data: Any) -> None:
        self.console.print_json(data=data)

    def print_error(self, message: str) -> None:
        self.console.print(f"[red]Error:[/red] {message}")
