"""Artifact templates and rendering.

Placeholders use ``@{field}`` so the shell ``$`` in the init script passes
through untouched. Every field of ``ServiceSpec`` is available, plus
``deps``: the service's dependencies, or the template's default when empty.
"""

from dataclasses import dataclass
from string import Template

from daemonwrap.config.spec import ServiceSpec
from daemonwrap.errors import TemplateError


class ArtifactTemplate(Template):
    delimiter = "@"


@dataclass(frozen=True)
class TemplateInfo:
    source: str
    default_deps: str = ""


SYSTEMD_DEFAULT_DEPS = (
    "network-online.target local-fs.target time-sync.target nss-lookup.target"
)
SYSV_DEFAULT_DEPS = "$network $time $named $local_fs"

SYSTEMD_UNIT = """\
[Unit]
Description=@{description}
Requires=@{deps}
After=@{deps}

[Service]
User=@{user}
Group=@{group}
StartLimitInterval=5
StartLimitBurst=10
WorkingDirectory=@{work_dir}
PIDFile=@{pid_file}
ExecStartPre=/bin/rm -f @{pid_file}
ExecStart=@{exec} @{args}
Restart=on-failure
RestartSec=30

[Install]
WantedBy=default.target
"""

SUPERVISOR_PROGRAM = """\
[program:@{name}]
directory=@{work_dir}
command=@{exec} @{args}
user=@{user}
autostart=true
autorestart=unexpected
exitcodes=0
redirect_stderr=true
stdout_logfile_maxbytes=50MB
stdout_logfile_backups=10
stdout_logfile=@{log_file}
"""

LOGROTATE_CONF = """\
@{log_file} {
    copytruncate
    daily
    rotate 10
    missingok
    notifempty
    dateext
    dateformat %Y%m%d
    compress
    delaycompress
    nomail
    noolddir
}
"""

SYSV_INIT_SCRIPT = """\
#! /bin/sh
#
#       /etc/rc.d/init.d/@{name}
#
#       Starts @{name} as a daemon
#
# chkconfig: 2345 87 17
# description: @{description}

### BEGIN INIT INFO
# Provides: @{name}
# Required-Start: @{deps}
# Required-Stop: @{deps}
# Default-Start: 2 3 4 5
# Default-Stop: 0 1 6
# Short-Description: start and stop @{name}.
# Description: @{description}
### END INIT INFO

#
# Source function library.
#
if [ -f /etc/rc.d/init.d/functions ]; then
    . /etc/rc.d/init.d/functions
fi
exec="@{exec}"
args="@{args}"
servname="@{name}"
user="@{user}"
group="@{group}"
pidfile="@{pid_file}"
lockfile="@{lock_file}"
workingDirectory="@{work_dir}"
logFile="@{log_file}"
[ -d $(dirname $lockfile) ] || mkdir -p $(dirname $lockfile)
[ -e /etc/sysconfig/$servname ] && . /etc/sysconfig/$servname

execPrefix=""
userName=`whoami`
if [ "$userName" = "root" ]; then
    execPrefix="su -l $user -c "
elif [ "$userName" != "$user" ]; then
    echo "only run with user root or $user"
    exit 1
fi

start() {
    [ -x $exec ] || exit 5
    if [ -f $pidfile ]; then
        if ! [ -d "/proc/$(cat $pidfile)" ]; then
            rm $pidfile
            if [ -f $lockfile ]; then
                rm $lockfile
            fi
        fi
    fi
    if ! [ -f $pidfile ]; then
        printf "Starting $servname:\\t"
        cd ${workingDirectory}
        $execPrefix $exec $args >> $logFile 2>&1 &
        echo $! > $pidfile
        touch $lockfile
        chown -R $user:$group $(dirname $logFile)
        chown -R $user:$group $(dirname $pidfile)
        chown -R $user:$group $(dirname $lockfile)
        success
        echo
    else
        echo
        printf "$pidfile still exists...\\n"
        exit 7
    fi
}
stop() {
    echo -n $"Stopping $servname: "
    killproc -p $pidfile $servname
    retval=$?
    echo
    [ $retval -eq 0 ] && rm -f $lockfile
    return $retval
}
restart() {
    stop
    start
}
rh_status() {
    status -p $pidfile $servname
}
rh_status_q() {
    rh_status >/dev/null 2>&1
}
case "$1" in
    start)
        rh_status_q && exit 0
        $1
        ;;
    stop)
        rh_status_q || exit 0
        $1
        ;;
    restart)
        $1
        ;;
    status)
        rh_status
        ;;
    *)
        echo $"Usage: $0 {start|stop|status|restart}"
        exit 2
esac
exit $?
"""

TEMPLATES: dict[str, TemplateInfo] = {
    "systemd": TemplateInfo(SYSTEMD_UNIT, SYSTEMD_DEFAULT_DEPS),
    "sysv": TemplateInfo(SYSV_INIT_SCRIPT, SYSV_DEFAULT_DEPS),
    "supervisor": TemplateInfo(SUPERVISOR_PROGRAM),
    "logrotate": TemplateInfo(LOGROTATE_CONF),
}


def render(template_name: str, spec: ServiceSpec) -> str:
    """Render a named artifact template for a service.

    Raises:
        TemplateError: If the template is unknown or malformed.
    """
    info = TEMPLATES.get(template_name)
    if info is None:
        raise TemplateError(f"unknown template: {template_name}")
    return render_source(info.source, spec, info.default_deps)


def render_source(source: str, spec: ServiceSpec, default_deps: str = "") -> str:
    values = spec.model_dump()
    values["deps"] = spec.dependencies or default_deps
    try:
        return ArtifactTemplate(source).substitute(values)
    except (KeyError, ValueError) as e:
        raise TemplateError(f"cannot render template: {e!r}") from e
