"""Supervisord program backend."""

import logging
import re
from pathlib import Path

from daemonwrap.config import paths
from daemonwrap.config.spec import ServiceSpec
from daemonwrap.errors import AlreadyRunningError, AlreadyStoppedError, DaemonError
from daemonwrap.service.base import (
    ServiceBackend,
    ServiceState,
    ServiceStatus,
    write_atomic,
)
from daemonwrap.service.process import CommandResult, CommandRunner
from daemonwrap.service.templates import render

logger = logging.getLogger(__name__)

_STATE_PATTERN = re.compile(r"(STARTING|RUNNING|STOPPED)")
_PID_PATTERN = re.compile(r"pid (\d+)")
_RUNNING_PATTERN = re.compile(r"(RUNNING|STARTING)")


def parse_status(output: str) -> ServiceStatus:
    """Interpret ``supervisorctl status <name>`` output.

    Example line: ``myapp  RUNNING   pid 1234, uptime 0:01:02``
    """
    match = _STATE_PATTERN.search(output)
    state = match.group(1) if match else ""
    if state == "STARTING":
        return ServiceStatus(state=ServiceState.STARTING)
    if state == "RUNNING":
        pid_match = _PID_PATTERN.search(output)
        pid = int(pid_match.group(1)) if pid_match else None
        return ServiceStatus(state=ServiceState.RUNNING, pid=pid)
    return ServiceStatus(state=ServiceState.STOPPED)


def parse_is_running(output: str) -> bool:
    return _RUNNING_PATTERN.search(output) is not None


class SupervisorBackend(ServiceBackend):
    """Supervisord backend.

    Program block stored in /etc/supervisor/conf.d/<name>.ini. Supervisor
    autostarts programs itself, so enable/disable are no-ops.
    """

    name = "supervisor"

    def __init__(
        self,
        spec: ServiceSpec,
        runner: CommandRunner | None = None,
        conf_dir: Path = paths.SUPERVISOR_CONF_DIR,
    ):
        super().__init__(spec, runner)
        self.conf_dir = Path(conf_dir)

    @property
    def artifact_path(self) -> Path:
        return self.conf_dir / f"{self.spec.name}.ini"

    def _supervisorctl(self, *args: str, check: bool = False) -> CommandResult:
        return self.runner.run("supervisorctl", *args, check=check)

    def install(self) -> None:
        """Write the program block and register it with supervisord."""
        self._require_root()
        self._require_not_installed()

        with self._install_transaction(self.artifact_path):
            self._resolve_exec()
            write_atomic(self.artifact_path, render("supervisor", self.spec))
            self._ensure_log_file()
            self._supervisorctl("reread", check=True)
            self._supervisorctl("add", self.spec.name, check=True)

        logger.info("Installed %s", self.artifact_path)

    def enable(self) -> None:
        logger.debug("supervisor programs autostart, nothing to enable")

    def disable(self) -> None:
        logger.debug("supervisor programs autostart, nothing to disable")

    def remove(self) -> None:
        self._require_root()
        self._require_installed()

        try:
            self.stop()
        except DaemonError as e:
            self._ignore_failure("stop", e)

        result = self._supervisorctl("remove", self.spec.name)
        if not result.ok:
            self._ignore_failure("remove", result.stderr.strip())

        try:
            self.artifact_path.unlink()
        except OSError as e:
            logger.warning("Could not delete %s: %s", self.artifact_path, e)

        self._supervisorctl("reread")
        logger.info("Removed %s", self.artifact_path)

    def start(self) -> None:
        self._require_root()
        self._require_installed()
        if self.is_running():
            raise AlreadyRunningError()
        self._ensure_log_file()
        self._supervisorctl("start", self.spec.name, check=True)
        logger.info("Started %s", self.spec.name)

    def stop(self) -> None:
        self._require_root()
        self._require_installed()
        if not self.is_running():
            raise AlreadyStoppedError()
        self._supervisorctl("stop", self.spec.name, check=True)
        logger.info("Stopped %s", self.spec.name)

    def status(self) -> ServiceStatus:
        self._require_installed()
        result = self._supervisorctl("status", self.spec.name)
        return parse_status(result.stdout)

    def log(self) -> None:
        self._require_installed()
        self._ensure_log_file()
        self.runner.stream("supervisorctl", "tail", "-f", self.spec.name)

    def is_running(self) -> bool:
        result = self._supervisorctl("status", self.spec.name)
        return parse_is_running(result.stdout)
