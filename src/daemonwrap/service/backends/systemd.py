"""Systemd system service backend."""

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

_ACTIVE_PATTERN = re.compile(r"Active:\s+(\w+)")
_MAIN_PID_PATTERN = re.compile(r"Main PID:\s+(\d+)")

# `systemctl is-active` answers that count as running
_RUNNING_STATES = frozenset({"active", "activating", "reloading"})


def parse_status(output: str) -> ServiceStatus:
    """Interpret ``systemctl status <unit>`` output."""
    match = _ACTIVE_PATTERN.search(output)
    active = match.group(1) if match else ""
    if active in ("active", "reloading"):
        pid_match = _MAIN_PID_PATTERN.search(output)
        pid = int(pid_match.group(1)) if pid_match else None
        return ServiceStatus(state=ServiceState.RUNNING, pid=pid)
    if active == "activating":
        return ServiceStatus(state=ServiceState.STARTING)
    return ServiceStatus(state=ServiceState.STOPPED)


def parse_is_running(output: str) -> bool:
    """Interpret ``systemctl is-active <unit>`` output."""
    return output.strip().lower() in _RUNNING_STATES


class SystemdBackend(ServiceBackend):
    """Systemd backend.

    Unit file stored in /etc/systemd/system/<name>.service. Boot activation
    is registered at install time, so enable/disable are no-ops.
    """

    name = "systemd"

    def __init__(
        self,
        spec: ServiceSpec,
        runner: CommandRunner | None = None,
        unit_dir: Path = paths.SYSTEMD_UNIT_DIR,
    ):
        super().__init__(spec, runner)
        self.unit_dir = Path(unit_dir)

    @property
    def unit_name(self) -> str:
        return f"{self.spec.name}.service"

    @property
    def artifact_path(self) -> Path:
        return self.unit_dir / self.unit_name

    def _systemctl(self, *args: str, check: bool = False) -> CommandResult:
        return self.runner.run("systemctl", *args, check=check)

    def install(self) -> None:
        """Write the unit file, reload systemd and enable the unit."""
        self._require_root()
        self._require_not_installed()

        with self._install_transaction(self.artifact_path):
            self._resolve_exec()
            write_atomic(self.artifact_path, render("systemd", self.spec))
            self._systemctl("daemon-reload", check=True)
            self._systemctl("enable", self.unit_name, check=True)

        logger.info("Installed %s", self.artifact_path)

    def enable(self) -> None:
        logger.debug("systemd units are enabled at install time")

    def disable(self) -> None:
        logger.debug("systemd units are disabled at remove time")

    def remove(self) -> None:
        self._require_root()
        self._require_installed()

        try:
            self.stop()
        except DaemonError as e:
            self._ignore_failure("stop", e)

        result = self._systemctl("disable", self.unit_name)
        if not result.ok:
            self._ignore_failure("disable", result.stderr.strip())

        try:
            self.artifact_path.unlink()
        except OSError as e:
            logger.warning("Could not delete %s: %s", self.artifact_path, e)

        self._systemctl("daemon-reload")
        logger.info("Removed %s", self.artifact_path)

    def start(self) -> None:
        self._require_root()
        self._require_installed()
        if self.is_running():
            raise AlreadyRunningError()
        self._systemctl("start", self.spec.name, check=True)
        logger.info("Started %s", self.spec.name)

    def stop(self) -> None:
        self._require_root()
        self._require_installed()
        if not self.is_running():
            raise AlreadyStoppedError()
        self._systemctl("stop", self.spec.name, check=True)
        logger.info("Stopped %s", self.spec.name)

    def status(self) -> ServiceStatus:
        self._require_root()
        self._require_installed()
        # Exit code is non-zero for inactive units, the output still parses
        result = self._systemctl("status", self.unit_name)
        return parse_status(result.stdout)

    def log(self) -> None:
        self._require_installed()
        self.runner.stream("journalctl", "-fu", self.spec.name)

    def is_running(self) -> bool:
        result = self._systemctl("is-active", self.unit_name)
        return parse_is_running(result.stdout)
