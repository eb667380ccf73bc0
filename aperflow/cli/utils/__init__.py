"""CLI utilities package.

- CLIContext: Context management for commands
- CliPrinter: Rich output formatting
- handle_cli_errors: Error handling decorator
"""

from aperflow.cli.utils.context import CLIContext
from aperflow.cli.utils.decorators import handle_cli_errors
from aperflow.cli.utils.printer import CliPrinter

__all__ = [
    "CLIContext",
    "CliPrinter",
    "handle_cli_errors",
]
