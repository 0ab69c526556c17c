"""Main CLI application."""

from pathlib import Path
from typing import Annotated

import typer

from daemonwrap.cli.commands import service
from daemonwrap.cli.console import error
from daemonwrap.config.loader import load_options
from daemonwrap.errors import ConfigError
from daemonwrap.logging import configure_logging

app = typer.Typer(
    name="daemonwrap",
    help="Run a program as a background service",
    no_args_is_help=True,
)


@app.callback()
def main(
    ctx: typer.Context,
    config: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="TOML file with a [service] table"),
    ] = None,
    name: Annotated[
        str | None, typer.Option("--name", "-n", help="Service name")
    ] = None,
    exec_path: Annotated[
        str | None,
        typer.Option("--exec", "-e", help="Executable to run (default: this program)"),
    ] = None,
    args: Annotated[
        str | None, typer.Option("--args", help="Command-line arguments")
    ] = None,
    work_dir: Annotated[
        str | None, typer.Option("--work-dir", help="Working directory")
    ] = None,
    dependencies: Annotated[
        str | None,
        typer.Option("--dependencies", help="Init-system specific dependency list"),
    ] = None,
    user: Annotated[str | None, typer.Option("--user", help="Run as user")] = None,
    group: Annotated[
        str | None, typer.Option("--group", help="Run as group")
    ] = None,
    description: Annotated[
        str | None, typer.Option("--description", help="Service description")
    ] = None,
    log_file: Annotated[str | None, typer.Option("--log-file")] = None,
    pid_file: Annotated[str | None, typer.Option("--pid-file")] = None,
    lock_file: Annotated[str | None, typer.Option("--lock-file")] = None,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Log every command run")
    ] = False,
) -> None:
    """Manage a program as a systemd, SysV or supervisord service."""
    configure_logging("DEBUG" if verbose else None, use_rich=True)

    options: dict[str, str] = {}
    if config is not None:
        try:
            options.update(load_options(config))
        except (FileNotFoundError, ConfigError) as e:
            error(str(e))
            raise typer.Exit(1) from None

    overrides = {
        "name": name,
        "exec": exec_path,
        "args": args,
        "work_dir": work_dir,
        "dependencies": dependencies,
        "user": user,
        "group": group,
        "description": description,
        "log_file": log_file,
        "pid_file": pid_file,
        "lock_file": lock_file,
    }
    options.update({k: v for k, v in overrides.items() if v is not None})
    ctx.obj = options


service.register(app)


if __name__ == "__main__":
    app()
