"""Load service options from TOML files.

Example file:

    [service]
    name = "wrapother"
    exec = "/home/shgsec/wrapother"
    user = "shgsec"
    group = "shgsec"
"""

import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError

from daemonwrap.errors import ConfigError


class ServiceOptions(BaseModel):
    """The ``[service]`` table of an option file. All keys are optional."""

    model_config = ConfigDict(extra="forbid")

    description: str | None = None
    name: str | None = None
    exec: str | None = None
    args: str | None = None
    work_dir: str | None = None
    dependencies: str | None = None
    user: str | None = None
    group: str | None = None
    log_file: str | None = None
    pid_file: str | None = None
    lock_file: str | None = None


def load_options(path: Path) -> dict[str, Any]:
    """Read builder options from a TOML file.

    Args:
        path: Path to the option file.

    Returns:
        Mapping of option name to value, containing only keys that were set.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigError: If the file is not valid TOML or has unknown keys.
    """
    path = Path(path).expanduser()
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    try:
        with path.open("rb") as f:
            raw = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {path}: {e}") from e

    section = raw.get("service", {})
    if not isinstance(section, dict):
        raise ConfigError(f"[service] in {path} must be a table")

    try:
        options = ServiceOptions.model_validate(section)
    except ValidationError as e:
        raise ConfigError(f"Invalid service options in {path}: {e}") from e

    return options.model_dump(exclude_none=True)
