"""
CLI Context for APERFlow.

Provides centralized store access and context management for all CLI commands.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from aperflow.cli.utils.printer import CliPrinter
from aperflow.config import AperConfig
from aperflow.exceptions import RecordNotFoundError
from aperflow.models import EvaluationRecord
from aperflow.store import RecordStore


@dataclass
class CLIContext:
    """
    Context object for CLI commands.

    This context is created once and passed to all commands via Typer's
    context injection. It centralizes:
    - Configuration and record store construction
    - Payload loading from inline JSON or files
    - Error handling and reporting
    - Verbose and JSON mode control

    Attributes:
        console: Rich console for output
        config: Resolved configuration
        verbose: Enable verbose output (ignored when json_mode is True)
        printer: CLI printer for formatted output
        json_mode: When True, suppress all non-JSON output (set by commands)
    """

    console: Console
    config: AperConfig
    verbose: bool = False
    printer: CliPrinter = field(init=False)
    json_mode: bool = False
    _store: RecordStore | None = field(default=None, init=False, repr=False)

    def __post_init__(self):
        self.printer = CliPrinter(console=self.console)

    @property
    def store(self) -> RecordStore:
        if self._store is None:
            self._store = self.config.build_store()
        return self._store

    def set_json_mode(self, json_mode: bool) -> None:
        self.json_mode = json_mode
        self.printer.json_mode = json_mode

    def print_verbose(self, message: str, **kwargs) -> None:
        if self.verbose and not self.json_mode:
            self.console.print(message, **kwargs)

    def print_error(self, message: str) -> None:
        if self.json_mode:
            self.printer.print_json({"error": message})
        else:
            self.printer.print_error(message)

    def print_success(self, message: str) -> None:
        if not self.json_mode:
            self.printer.show_success(message)

    def require_record_or_exit(self, record_id: str) -> EvaluationRecord:
        """Fetch a record, or report it missing and exit with code 1."""
        try:
            return self.store.require(record_id)
        except RecordNotFoundError as e:
            self.print_error(str(e))
            raise typer.Exit(code=1) from e

    def load_payload_or_exit(self, data: str | None, file: Path | None) -> dict[str, Any]:
        """
        Load a section payload from an inline JSON string or a JSON/YAML file.

        Raises:
            typer.Exit: If neither or both sources are given, or parsing fails
        """
        if (data is None) == (file is None):
            self.print_error("Provide exactly one of --data or --file")
            raise typer.Exit(code=1)

        try:
            if data is not None:
                payload = json.loads(data)
            else:
                yaml = YAML(typ="safe", pure=True)
                with file.open("r", encoding="utf-8") as f:
                    payload = yaml.load(f)
        except (json.JSONDecodeError, YAMLError, OSError) as e:
            self.print_error(f"Could not read payload: {e}")
            raise typer.Exit(code=1) from e

        if not isinstance(payload, dict):
            self.print_error("Payload must be a JSON/YAML object")
            raise typer.Exit(code=1)
        return payload
