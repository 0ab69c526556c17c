"""Tests for the daemon facade and backend selection."""

from pathlib import Path
from unittest.mock import MagicMock

import pytest

import daemonwrap
from daemonwrap.errors import (
    ConfigIsNilError,
    MissingExecValueError,
    UnsupportedSystemError,
)
from daemonwrap.service import manager
from daemonwrap.service.backends import create_backend, get_backend
from daemonwrap.service.backends.supervisor import SupervisorBackend
from daemonwrap.service.backends.systemd import SystemdBackend
from daemonwrap.service.backends.sysv import SysvBackend
from daemonwrap.service.base import ServiceState, ServiceStatus
from daemonwrap.service.host import InitSystem
from daemonwrap.service.manager import Daemon
from tests.conftest import FakeRunner

# =============================================================================
# Backend Selection Tests
# =============================================================================


class TestBackendSelection:
    """Tests for choosing a backend from the host's init system."""

    @pytest.mark.parametrize(
        ("runner", "backend_cls", "kind"),
        [
            (FakeRunner(init="systemd"), SystemdBackend, InitSystem.SYSTEMD),
            (
                FakeRunner(init="systemd", supervisord=True),
                SystemdBackend,
                InitSystem.SYSTEMD,
            ),
            (
                FakeRunner(init="init", supervisord=True),
                SupervisorBackend,
                InitSystem.SUPERVISOR,
            ),
            (FakeRunner(init="init"), SysvBackend, InitSystem.SYSV),
        ],
    )
    def test_new_picks_backend(self, runner, backend_cls, kind, exec_file: Path):
        daemon = Daemon.new(runner, exec=str(exec_file))

        assert isinstance(daemon.backend, backend_cls)
        assert daemon.kind is kind

    def test_new_unsupported_host(self, exec_file: Path):
        with pytest.raises(UnsupportedSystemError):
            Daemon.new(FakeRunner(init="bash"), exec=str(exec_file))

    def test_new_builds_spec(self, exec_file: Path):
        daemon = Daemon.new(
            FakeRunner(),
            name="wrapother",
            exec=str(exec_file),
            user="shgsec",
            group="shgsec",
        )

        assert daemon.spec.name == "wrapother"
        assert daemon.spec.user == "shgsec"
        assert daemon.spec.work_dir == str(exec_file.parent)
        assert daemon.spec.log_file == "/var/log/wrapother/wrapother.log"

    def test_missing_exec_fails_before_detection(self):
        runner = FakeRunner()

        with pytest.raises(MissingExecValueError):
            Daemon.new(runner, exec="")

        assert runner.calls == []

    def test_module_level_new(self, exec_file: Path):
        daemon = daemonwrap.new(FakeRunner(), exec=str(exec_file))

        assert isinstance(daemon, Daemon)

    def test_create_backend(self, spec, runner):
        backend = create_backend(InitSystem.SYSV, spec, runner)

        assert isinstance(backend, SysvBackend)
        assert backend.spec is spec

    def test_get_backend_by_name(self, spec, runner):
        assert isinstance(get_backend("supervisor", spec, runner), SupervisorBackend)

    def test_get_backend_unknown(self, spec, runner):
        with pytest.raises(ValueError, match="Unknown backend: launchd"):
            get_backend("launchd", spec, runner)


# =============================================================================
# Facade Tests
# =============================================================================


class TestDaemon:
    """Tests for forwarding operations to the selected backend."""

    @pytest.mark.parametrize(
        "operation",
        ["install", "enable", "disable", "remove", "start", "stop", "log"],
    )
    def test_forwards_operation(self, operation):
        backend = MagicMock()
        daemon = Daemon(backend)

        getattr(daemon, operation)()

        getattr(backend, operation).assert_called_once_with()

    def test_status_returns_backend_status(self):
        backend = MagicMock()
        backend.status.return_value = ServiceStatus(
            state=ServiceState.RUNNING, pid=7
        )

        status = Daemon(backend).status()

        assert status.describe() == "Service (pid 7) is running"

    @pytest.mark.parametrize("kind", list(InitSystem))
    def test_kind_matches_backend(self, make_backend, kind):
        assert Daemon(make_backend(kind.value)).kind is kind

    def test_lifecycle_against_fake_host(self, make_backend):
        daemon = Daemon(make_backend("systemd"))

        daemon.install()
        daemon.start()
        assert daemon.status().state == ServiceState.RUNNING
        daemon.stop()
        assert daemon.status().state == ServiceState.STOPPED
        daemon.remove()

        assert not daemon.backend.is_installed()


# =============================================================================
# Default Daemon Tests
# =============================================================================


@pytest.fixture
def clear_default():
    manager.get_default_daemon.cache_clear()
    yield
    manager.get_default_daemon.cache_clear()


class TestDefaultDaemon:
    """Tests for the daemon managing the running program."""

    def test_unsupported_host_yields_none(self, clear_default, monkeypatch):
        def unsupported(cls, *args, **kwargs):
            raise UnsupportedSystemError()

        monkeypatch.setattr(Daemon, "new", classmethod(unsupported))

        assert manager.get_default_daemon() is None

    def test_missing_config_yields_none(self, clear_default, monkeypatch):
        def no_config(cls, *args, **kwargs):
            raise ConfigIsNilError()

        monkeypatch.setattr(Daemon, "new", classmethod(no_config))

        assert manager.get_default_daemon() is None

    def test_default_is_cached(self, clear_default, monkeypatch):
        created = []

        def fake_new(cls, *args, **kwargs):
            daemon = Daemon(MagicMock())
            created.append(daemon)
            return daemon

        monkeypatch.setattr(Daemon, "new", classmethod(fake_new))

        first = manager.get_default_daemon()

        assert manager.get_default_daemon() is first
        assert len(created) == 1

    @pytest.mark.parametrize(
        "operation",
        ["install", "enable", "disable", "remove", "start", "stop", "status", "log"],
    )
    def test_operations_without_default(self, operation, monkeypatch):
        monkeypatch.setattr(manager, "get_default_daemon", lambda: None)

        with pytest.raises(UnsupportedSystemError):
            getattr(daemonwrap, operation)()

    @pytest.mark.parametrize(
        "operation",
        ["install", "enable", "disable", "remove", "start", "stop", "status", "log"],
    )
    def test_operations_use_default(self, operation, monkeypatch):
        backend = MagicMock()
        monkeypatch.setattr(manager, "get_default_daemon", lambda: Daemon(backend))

        getattr(daemonwrap, operation)()

        getattr(backend, operation).assert_called_once_with()
