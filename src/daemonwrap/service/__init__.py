"""Background service management.

Registers a program as a service with whichever init system the host runs:
- systemd units
- SysV init scripts (service + chkconfig)
- supervisord programs

Example:
    from daemonwrap.service import Daemon

    daemon = Daemon.new(name="wrapother", exec="/home/shgsec/wrapother")
    daemon.install()
    daemon.start()
"""

from daemonwrap.service.base import ServiceBackend, ServiceState, ServiceStatus
from daemonwrap.service.host import InitSystem, detect_init_system
from daemonwrap.service.manager import Daemon, get_default_daemon
from daemonwrap.service.process import CommandResult, CommandRunner

__all__ = [
    "CommandResult",
    "CommandRunner",
    "Daemon",
    "InitSystem",
    "ServiceBackend",
    "ServiceState",
    "ServiceStatus",
    "detect_init_system",
    "get_default_daemon",
]
