"""High-level daemon interface."""

import logging
from functools import lru_cache
from typing import Any

from daemonwrap.config.builder import SpecBuilder
from daemonwrap.config.spec import ServiceSpec
from daemonwrap.errors import DaemonError, UnsupportedSystemError
from daemonwrap.service.backends import create_backend
from daemonwrap.service.base import ServiceBackend, ServiceStatus
from daemonwrap.service.host import InitSystem, detect_init_system
from daemonwrap.service.process import CommandRunner

logger = logging.getLogger(__name__)


class Daemon:
    """Manages one named service through the host's init system.

    The backend is chosen once, at construction, and never changes.

    Example:
        daemon = Daemon.new(name="wrapother", exec="/home/shgsec/wrapother")
        daemon.install()
        daemon.start()
        print(daemon.status().describe())
    """

    def __init__(self, backend: ServiceBackend):
        self._backend = backend

    @classmethod
    def new(cls, runner: CommandRunner | None = None, **options: Any) -> "Daemon":
        """Build a spec from host defaults plus ``options`` and detect the backend.

        Args:
            runner: Command runner for detection and the backend.
            **options: Spec fields (name, exec, args, work_dir, ...).

        Raises:
            ConfigIsNilError: If no defaults could be derived.
            MissingExecValueError: If the executable is empty.
            UnsupportedSystemError: If no supported init system is found.
        """
        spec = SpecBuilder.from_defaults().apply(**options).build()
        return cls.from_spec(spec, runner)

    @classmethod
    def from_spec(
        cls, spec: ServiceSpec, runner: CommandRunner | None = None
    ) -> "Daemon":
        runner = runner or CommandRunner()
        kind = detect_init_system(runner)
        logger.debug("Using %s backend for %s", kind.value, spec.name)
        return cls(create_backend(kind, spec, runner))

    @property
    def backend(self) -> ServiceBackend:
        return self._backend

    @property
    def kind(self) -> InitSystem:
        """Init system the service is registered with."""
        return InitSystem(self._backend.name)

    @property
    def spec(self) -> ServiceSpec:
        return self._backend.spec

    def install(self) -> None:
        self._backend.install()

    def enable(self) -> None:
        self._backend.enable()

    def disable(self) -> None:
        self._backend.disable()

    def remove(self) -> None:
        self._backend.remove()

    def start(self) -> None:
        self._backend.start()

    def stop(self) -> None:
        self._backend.stop()

    def status(self) -> ServiceStatus:
        return self._backend.status()

    def log(self) -> None:
        self._backend.log()


def new(runner: CommandRunner | None = None, **options: Any) -> Daemon:
    return Daemon.new(runner, **options)


@lru_cache(maxsize=1)
def get_default_daemon() -> Daemon | None:
    """Daemon for the running program itself, or None if unsupported here."""
    try:
        return Daemon.new()
    except DaemonError as e:
        logger.debug("No default daemon: %s", e)
        return None


def _default() -> Daemon:
    daemon = get_default_daemon()
    if daemon is None:
        raise UnsupportedSystemError()
    return daemon


def install() -> None:
    _default().install()


def enable() -> None:
    _default().enable()


def disable() -> None:
    _default().disable()


def remove() -> None:
    _default().remove()


def start() -> None:
    _default().start()


def stop() -> None:
    _default().stop()


def status() -> ServiceStatus:
    return _default().status()


def log() -> None:
    _default().log()
