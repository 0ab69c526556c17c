"""Abstract base for init system backends."""

import logging
import os
import tempfile
from abc import ABC, abstractmethod
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from daemonwrap.config.spec import ServiceSpec
from daemonwrap.errors import (
    AlreadyInstalledError,
    DaemonError,
    InstallError,
    NotInstalledError,
)
from daemonwrap.service.host import check_privileges, executable_path
from daemonwrap.service.process import CommandRunner

logger = logging.getLogger(__name__)


class ServiceState(Enum):
    """Service running state."""

    RUNNING = "running"
    STOPPED = "stopped"
    STARTING = "starting"


@dataclass
class ServiceStatus:
    """Service status information."""

    state: ServiceState
    pid: int | None = None
    message: str | None = None

    def describe(self) -> str:
        """Human-readable one-line summary."""
        if self.state == ServiceState.STARTING:
            return "Service is starting..."
        if self.state == ServiceState.RUNNING:
            if self.pid is not None:
                return f"Service (pid {self.pid}) is running"
            return "Service is running"
        return "Service has stopped"


class ServiceBackend(ABC):
    """Uniform life-cycle contract over one init system.

    The generated artifact file is the only record of installation:
    ``is_installed`` is true exactly when it exists.
    """

    name: str

    def __init__(self, spec: ServiceSpec, runner: CommandRunner | None = None):
        self.spec = spec
        self.runner = runner or CommandRunner()

    @property
    @abstractmethod
    def artifact_path(self) -> Path:
        """Path of the generated service definition."""
        ...

    @abstractmethod
    def install(self) -> None:
        """Write the service definition and register it with the init system."""
        ...

    @abstractmethod
    def enable(self) -> None:
        """Activate the service at boot."""
        ...

    @abstractmethod
    def disable(self) -> None:
        """Deactivate the service at boot."""
        ...

    @abstractmethod
    def remove(self) -> None:
        """Stop, deregister and delete the service definition."""
        ...

    @abstractmethod
    def start(self) -> None: ...

    @abstractmethod
    def stop(self) -> None: ...

    @abstractmethod
    def status(self) -> ServiceStatus: ...

    @abstractmethod
    def log(self) -> None:
        """Stream the service log until interrupted."""
        ...

    @abstractmethod
    def is_running(self) -> bool: ...

    def is_installed(self) -> bool:
        return self.artifact_path.exists()

    # ------------------------------------------------------------------
    # Guards
    # ------------------------------------------------------------------

    def _require_root(self) -> None:
        check_privileges(self.runner)

    def _require_installed(self) -> None:
        if not self.is_installed():
            raise NotInstalledError()

    def _require_not_installed(self) -> None:
        if self.is_installed():
            raise AlreadyInstalledError()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @contextmanager
    def _install_transaction(self, *artifacts: Path) -> Iterator[None]:
        """Delete the ``artifacts`` this install created if the block fails.

        Host and filesystem failures are raised as ``InstallError``; anything
        else propagates unchanged after the rollback.
        """
        created = [path for path in artifacts if not path.exists()]
        try:
            yield
        except BaseException as e:
            for path in created:
                try:
                    path.unlink(missing_ok=True)
                except OSError as cleanup_error:
                    logger.warning("Could not roll back %s: %s", path, cleanup_error)
            if isinstance(e, (DaemonError, OSError)):
                raise InstallError(e) from e
            raise

    def _ignore_failure(self, step: str, error: object) -> None:
        logger.debug("Ignoring %s failure for %s: %s", step, self.spec.name, error)

    def _resolve_exec(self) -> None:
        self.spec.exec = executable_path(self.spec.exec)
        if not self.spec.work_dir:
            self.spec.work_dir = os.path.dirname(self.spec.exec)

    def _ensure_log_file(self, log_file: str | None = None) -> None:
        """Create the log file (and its directory) if missing."""
        path = Path(log_file or self.spec.log_file)
        if path.exists():
            return
        path.parent.mkdir(parents=True, exist_ok=True)
        path.touch()
        logger.debug("Created log file %s", path)


def write_atomic(path: Path, content: str, mode: int = 0o644) -> None:
    """Write a file via a temporary sibling so readers never see a partial file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.")
    try:
        with os.fdopen(fd, "w") as f:
            f.write(content)
        os.chmod(tmp_name, mode)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    logger.debug("Wrote %s", path)
