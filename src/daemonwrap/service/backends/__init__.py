"""Backend construction for each supported init system."""

from daemonwrap.config.spec import ServiceSpec
from daemonwrap.service.base import ServiceBackend
from daemonwrap.service.host import InitSystem
from daemonwrap.service.process import CommandRunner


def create_backend(
    kind: InitSystem,
    spec: ServiceSpec,
    runner: CommandRunner | None = None,
) -> ServiceBackend:
    """Build the backend for an init system.

    Args:
        kind: Init system chosen by host detection.
        spec: Service to manage.
        runner: Command runner shared with the backend.
    """
    match kind:
        case InitSystem.SYSTEMD:
            from daemonwrap.service.backends.systemd import SystemdBackend

            return SystemdBackend(spec, runner)
        case InitSystem.SYSV:
            from daemonwrap.service.backends.sysv import SysvBackend

            return SysvBackend(spec, runner)
        case InitSystem.SUPERVISOR:
            from daemonwrap.service.backends.supervisor import SupervisorBackend

            return SupervisorBackend(spec, runner)
    raise ValueError(f"Unknown init system: {kind!r}")


def get_backend(
    name: str,
    spec: ServiceSpec,
    runner: CommandRunner | None = None,
) -> ServiceBackend:
    """Get a backend by name ('systemd', 'sysv', 'supervisor').

    Raises:
        ValueError: If the named backend doesn't exist.
    """
    try:
        kind = InitSystem(name)
    except ValueError:
        available = [k.value for k in InitSystem]
        raise ValueError(f"Unknown backend: {name}. Available: {available}") from None
    return create_backend(kind, spec, runner)


__all__ = ["create_backend", "get_backend"]
