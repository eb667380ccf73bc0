"""CLI commands module for APERFlow."""

from aperflow.cli.commands.drafts import draft_app
from aperflow.cli.commands.records import create_command, list_command, show_command, stats_command
from aperflow.cli.commands.review import reject_command, reopen_command, submit_command

__all__ = [
    "create_command",
    "draft_app",
    "list_command",
    "reject_command",
    "reopen_command",
    "show_command",
    "stats_command",
    "submit_command",
]
