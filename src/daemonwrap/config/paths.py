"""Default locations for service artifacts and runtime files.

Artifact directories are where each init system expects its configuration.
Runtime paths (log, pid, lock) are templated from the service name.
"""

from pathlib import Path

ENV_LOG_LEVEL = "DAEMONWRAP_LOG_LEVEL"

DEFAULT_DESCRIPTION = "manage the {name} daemon"
DEFAULT_USER = "root"
DEFAULT_GROUP = "root"
DEFAULT_LOG_FILE = "/var/log/{name}/{name}.log"
DEFAULT_PID_FILE = "/var/run/{name}.pid"
DEFAULT_LOCK_FILE = "/var/lock/subsys/{name}.lock"

SYSTEMD_UNIT_DIR = Path("/etc/systemd/system")
SYSV_INIT_DIR = Path("/etc/init.d")
LOGROTATE_DIR = Path("/etc/logrotate.d")
SUPERVISOR_CONF_DIR = Path("/etc/supervisor/conf.d")


def default_log_file(name: str) -> str:
    return DEFAULT_LOG_FILE.format(name=name)


def default_pid_file(name: str) -> str:
    return DEFAULT_PID_FILE.format(name=name)


def default_lock_file(name: str) -> str:
    return DEFAULT_LOCK_FILE.format(name=name)


def default_description(name: str) -> str:
    return DEFAULT_DESCRIPTION.format(name=name)
