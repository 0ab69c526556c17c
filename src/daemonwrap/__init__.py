"""Run a program as a background service under systemd, SysV init or supervisord.

The module-level functions manage the running program itself; use
``new(...)`` to manage another executable.
"""

from daemonwrap.errors import (
    AlreadyInstalledError,
    AlreadyRunningError,
    AlreadyStoppedError,
    ConfigIsNilError,
    DaemonError,
    MissingExecValueError,
    NotInstalledError,
    RootPrivilegesError,
    UnsupportedSystemError,
)
from daemonwrap.service.manager import (
    Daemon,
    disable,
    enable,
    install,
    log,
    new,
    remove,
    start,
    status,
    stop,
)

__all__ = [
    "AlreadyInstalledError",
    "AlreadyRunningError",
    "AlreadyStoppedError",
    "ConfigIsNilError",
    "Daemon",
    "DaemonError",
    "MissingExecValueError",
    "NotInstalledError",
    "RootPrivilegesError",
    "UnsupportedSystemError",
    "disable",
    "enable",
    "install",
    "log",
    "new",
    "remove",
    "start",
    "status",
    "stop",
]
