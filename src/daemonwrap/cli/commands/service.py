"""Service life-cycle commands."""

from typing import Any

import typer

from daemonwrap.cli.console import console, dim, error, success
from daemonwrap.errors import DaemonError
from daemonwrap.service.manager import Daemon


def build_daemon(options: dict[str, Any]) -> Daemon:
    return Daemon.new(**options)


def _get_daemon(ctx: typer.Context) -> Daemon:
    try:
        return build_daemon(ctx.obj or {})
    except DaemonError as e:
        error(str(e))
        raise typer.Exit(1) from None


def _run_action(ctx: typer.Context, action_name: str) -> None:
    """Run a Daemon life-cycle action and report the outcome.

    Args:
        action_name: Name of the Daemon method to call (install, start, ...).
    """
    daemon = _get_daemon(ctx)
    try:
        getattr(daemon, action_name)()
    except DaemonError as e:
        error(str(e))
        raise typer.Exit(1) from None
    success("Succeeded")


def register(app: typer.Typer) -> None:
    """Register life-cycle commands."""

    @app.command("install")
    def install(ctx: typer.Context) -> None:
        """Install the service and register it for boot."""
        _run_action(ctx, "install")

    @app.command("enable")
    def enable(ctx: typer.Context) -> None:
        """Activate the service at boot."""
        _run_action(ctx, "enable")

    @app.command("disable")
    def disable(ctx: typer.Context) -> None:
        """Deactivate the service at boot."""
        _run_action(ctx, "disable")

    @app.command("remove")
    def remove(ctx: typer.Context) -> None:
        """Stop and uninstall the service."""
        _run_action(ctx, "remove")

    @app.command("start")
    def start(ctx: typer.Context) -> None:
        """Start the service."""
        _run_action(ctx, "start")

    @app.command("stop")
    def stop(ctx: typer.Context) -> None:
        """Stop the service."""
        _run_action(ctx, "stop")

    @app.command("status")
    def status(ctx: typer.Context) -> None:
        """Show whether the service is running."""
        daemon = _get_daemon(ctx)
        try:
            result = daemon.status()
        except DaemonError as e:
            error(str(e))
            raise typer.Exit(1) from None
        console.print(result.describe())
        if result.message:
            dim(result.message)

    @app.command("log")
    def log(ctx: typer.Context) -> None:
        """Follow the service log."""
        daemon = _get_daemon(ctx)
        dim("==> Press Ctrl-C to exit <==")
        try:
            daemon.log()
        except DaemonError as e:
            error(str(e))
            raise typer.Exit(1) from None
