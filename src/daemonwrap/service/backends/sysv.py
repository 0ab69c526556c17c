"""SysV init script backend (``service`` + ``chkconfig``)."""

import logging
import os
import re
from pathlib import Path

from daemonwrap.config import paths
from daemonwrap.config.spec import ServiceSpec
from daemonwrap.errors import (
    AlreadyRunningError,
    AlreadyStoppedError,
    CommandError,
    DaemonError,
    DisableError,
    EnableError,
    RemoveError,
)
from daemonwrap.service.base import (
    ServiceBackend,
    ServiceState,
    ServiceStatus,
    write_atomic,
)
from daemonwrap.service.process import CommandResult, CommandRunner
from daemonwrap.service.templates import render

logger = logging.getLogger(__name__)

_PID_PATTERN = re.compile(r"pid\s+(\d+)")


def parse_status(output: str, name: str, succeeded: bool = True) -> ServiceStatus:
    """Interpret ``service <name> status`` output.

    A failing status command means the service is stopped. Output that does
    not mention the service is passed along as the status message.
    """
    if not succeeded:
        return ServiceStatus(state=ServiceState.STOPPED)
    if name in output:
        match = _PID_PATTERN.search(output)
        pid = int(match.group(1)) if match else None
        return ServiceStatus(state=ServiceState.RUNNING, pid=pid)
    return ServiceStatus(state=ServiceState.STOPPED, message=output.strip() or None)


def parse_is_running(output: str, name: str, succeeded: bool = True) -> bool:
    return succeeded and name in output


class SysvBackend(ServiceBackend):
    """Legacy init script backend.

    Installs /etc/init.d/<name> plus a logrotate config in
    /etc/logrotate.d/<name>, and registers boot activation with chkconfig.
    """

    name = "sysv"

    def __init__(
        self,
        spec: ServiceSpec,
        runner: CommandRunner | None = None,
        init_dir: Path = paths.SYSV_INIT_DIR,
        logrotate_dir: Path = paths.LOGROTATE_DIR,
    ):
        super().__init__(spec, runner)
        self.init_dir = Path(init_dir)
        self.logrotate_dir = Path(logrotate_dir)

    @property
    def artifact_path(self) -> Path:
        return self.init_dir / self.spec.name

    @property
    def logrotate_path(self) -> Path:
        return self.logrotate_dir / self.spec.name

    def _service(self, action: str, check: bool = False) -> CommandResult:
        return self.runner.run("service", self.spec.name, action, check=check)

    def _chkconfig(self, flag: str) -> None:
        self.runner.run("chkconfig", flag, self.spec.name, check=True)

    def install(self) -> None:
        """Write the init script and logrotate config, then register with chkconfig."""
        self._require_root()
        self._require_not_installed()

        with self._install_transaction(self.artifact_path, self.logrotate_path):
            self._resolve_exec()
            write_atomic(self.artifact_path, render("sysv", self.spec), mode=0o755)
            self._configure_logrotate()
            self._chkconfig("--add")

        logger.info("Installed %s", self.artifact_path)

    def enable(self) -> None:
        self._require_root()
        self._require_installed()
        try:
            self._chkconfig("--add")
        except CommandError as e:
            raise EnableError(e) from e
        logger.info("Enabled %s", self.spec.name)

    def disable(self) -> None:
        self._require_root()
        self._require_installed()
        try:
            self._chkconfig("--del")
        except CommandError as e:
            raise DisableError(e) from e
        logger.info("Disabled %s", self.spec.name)

    def remove(self) -> None:
        """Stop and deregister the service, then delete its files.

        Only failing to delete the files is an error.
        """
        self._require_root()
        self._require_installed()

        result = self._service("stop")
        if not result.ok:
            self._ignore_failure("stop", result.stderr.strip())
        try:
            self._chkconfig("--del")
        except DaemonError as e:
            self._ignore_failure("chkconfig --del", e)

        try:
            self.artifact_path.unlink()
            self.logrotate_path.unlink(missing_ok=True)
        except OSError as e:
            raise RemoveError(e) from e
        logger.info("Removed %s", self.artifact_path)

    def start(self) -> None:
        self._require_root()
        self._require_installed()
        if self.is_running():
            raise AlreadyRunningError()
        self._ensure_log_file()
        self._service("start", check=True)
        logger.info("Started %s", self.spec.name)

    def stop(self) -> None:
        self._require_root()
        self._require_installed()
        if not self.is_running():
            raise AlreadyStoppedError()
        self._service("stop", check=True)
        logger.info("Stopped %s", self.spec.name)

    def status(self) -> ServiceStatus:
        self._require_root()
        self._require_installed()
        result = self._service("status")
        return parse_status(result.stdout, self.spec.name, result.ok)

    def log(self) -> None:
        self._require_installed()
        self._ensure_log_file()
        self.runner.stream("tail", "-f", self.spec.log_file)

    def is_running(self) -> bool:
        result = self._service("status")
        return parse_is_running(result.stdout, self.spec.name, result.ok)

    def _configure_logrotate(self) -> None:
        self._ensure_log_file()
        lock_dir = os.path.dirname(self.spec.lock_file)
        os.makedirs(lock_dir, exist_ok=True)
        self.runner.run(
            "chown", "-R", f"{self.spec.user}:{self.spec.group}", lock_dir, check=True
        )
        write_atomic(self.logrotate_path, render("logrotate", self.spec))
