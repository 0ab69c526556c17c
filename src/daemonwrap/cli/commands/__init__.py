"""CLI command modules."""

from daemonwrap.cli.commands import service

__all__ = ["service"]
