"""Host inspection: init system detection and privilege checks."""

import logging
import os
import re
import shutil
from enum import Enum

from daemonwrap.errors import (
    CommandError,
    ExecutableNotFoundError,
    RootPrivilegesError,
    UnsupportedSystemError,
)
from daemonwrap.service.process import CommandRunner

logger = logging.getLogger(__name__)

_INIT_PATTERN = re.compile(r"(init|systemd)")

SUPERVISOR_DAEMON = "supervisord"


class InitSystem(Enum):
    """Init systems a service can be registered with."""

    SYSTEMD = "systemd"
    SYSV = "sysv"
    SUPERVISOR = "supervisor"


def detect_init_system(runner: CommandRunner) -> InitSystem:
    """Decide which backend manages services on this host.

    Detection order:
    1. PID 1 is systemd: systemd, even if supervisord is installed
    2. supervisord is on PATH: supervisor
    3. PID 1 is a legacy init: sysv

    Raises:
        UnsupportedSystemError: If none of the above applies.
    """
    result = runner.run("ps", "-p1")
    if not result.ok:
        cause = CommandError(result.args, result.returncode, result.stderr.strip())
        logger.debug("Init system probe failed: %s", cause)
        raise UnsupportedSystemError() from cause

    match = _INIT_PATTERN.search(result.stdout)
    init_name = match.group(1) if match else None
    if init_name == "systemd":
        return InitSystem.SYSTEMD

    if runner.run("which", SUPERVISOR_DAEMON).ok:
        return InitSystem.SUPERVISOR

    if init_name == "init":
        return InitSystem.SYSV

    raise UnsupportedSystemError()


def check_privileges(runner: CommandRunner) -> None:
    """Require the caller to run with root group privileges.

    Raises:
        RootPrivilegesError: If the effective group is not root.
        UnsupportedSystemError: If the group cannot be determined.
    """
    result = runner.run("id", "-g")
    if result.ok:
        try:
            gid = int(result.stdout.strip())
        except ValueError:
            pass
        else:
            if gid == 0:
                return
            raise RootPrivilegesError()
    raise UnsupportedSystemError()


def executable_path(name: str) -> str:
    """Resolve an executable name or path to an absolute path.

    Raises:
        ExecutableNotFoundError: If it is not an executable file.
    """
    found = shutil.which(name)
    if found is None:
        raise ExecutableNotFoundError(name)
    return os.path.abspath(found)
