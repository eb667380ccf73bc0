"""APERFlow command line interface."""

from aperflow.cli.main import app, main

__all__ = ["app", "main"]
