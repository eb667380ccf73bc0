"""Decorators for CLI error handling and consistent output formatting."""

from collections.abc import Callable
from functools import wraps

import typer

from aperflow.exceptions import AperFlowError


def handle_cli_errors(error_message: str) -> Callable:
    """Decorator to handle CLI errors with consistent formatting.

    Catches APERFlow errors (storage failures, access denials, configuration
    problems) and reports them through the CLI context, honoring json_mode.

    Args:
        error_message: Base error message template (can include {error} placeholder)

    Returns:
        Decorated function that handles errors consistently
    """

    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args, **kwargs):
            ctx = args[0] if args else kwargs.get("ctx")
            if not ctx or not hasattr(ctx, "obj"):
                return func(*args, **kwargs)

            cli_ctx = ctx.obj

            try:
                return func(*args, **kwargs)
            except typer.Exit:
                raise
            except AperFlowError as e:
                if "{error}" in error_message:
                    formatted_message = error_message.format(error=e)
                else:
                    formatted_message = f"{error_message}: {e}"
                cli_ctx.print_error(formatted_message)
                raise typer.Exit(1) from e

        return wrapper

    return decorator
