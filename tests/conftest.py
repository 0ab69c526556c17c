"""Shared test fixtures and factories."""

import stat
from collections.abc import Callable
from pathlib import Path

import pytest

from daemonwrap.config.builder import SpecBuilder
from daemonwrap.config.spec import ServiceSpec
from daemonwrap.service.backends.supervisor import SupervisorBackend
from daemonwrap.service.backends.systemd import SystemdBackend
from daemonwrap.service.backends.sysv import SysvBackend
from daemonwrap.service.base import ServiceBackend
from daemonwrap.service.process import CommandResult, CommandRunner

FAKE_PID = 4242

# =============================================================================
# Fake Command Runner
# =============================================================================


class FakeRunner(CommandRunner):
    """Simulates the host's management commands in memory.

    Tracks which services are running so start/stop/status behave like a
    real init system. Commands matching a prefix passed to ``fail()`` exit 1.
    """

    def __init__(
        self,
        gid: str = "0",
        init: str | None = "systemd",
        supervisord: bool = False,
    ):
        self.gid = gid
        self.init = init
        self.supervisord = supervisord
        self.running: set[str] = set()
        self.calls: list[tuple[str, ...]] = []
        self.streams: list[tuple[str, ...]] = []
        self._failures: list[tuple[str, ...]] = []

    def fail(self, *prefix: str) -> None:
        self._failures.append(prefix)

    def run(self, *args: str, check: bool = False) -> CommandResult:
        self.calls.append(args)
        result = self._respond(args)
        if check:
            result.check()
        return result

    def stream(self, *args: str) -> int:
        self.streams.append(args)
        return 0

    def called(self, *prefix: str) -> bool:
        return any(call[: len(prefix)] == prefix for call in self.calls)

    def _respond(self, args: tuple[str, ...]) -> CommandResult:
        def ok(stdout: str = "") -> CommandResult:
            return CommandResult(args, 0, stdout)

        def failed(returncode: int = 1, stdout: str = "") -> CommandResult:
            return CommandResult(args, returncode, stdout, "forced failure")

        for prefix in self._failures:
            if args[: len(prefix)] == prefix:
                return failed()

        match args:
            case ("id", "-g"):
                return ok(f"{self.gid}\n")
            case ("ps", "-p1"):
                if self.init is None:
                    return failed()
                return ok(
                    "  PID TTY          TIME CMD\n"
                    f"    1 ?        00:00:02 {self.init}\n"
                )
            case ("which", "supervisord"):
                if self.supervisord:
                    return ok("/usr/bin/supervisord\n")
                return failed()

            case ("systemctl", "start", name):
                self.running.add(name)
            case ("systemctl", "stop", name):
                self.running.discard(name)
            case ("systemctl", "is-active", unit):
                if unit.removesuffix(".service") in self.running:
                    return ok("active\n")
                return failed(3, "inactive\n")
            case ("systemctl", "status", unit):
                name = unit.removesuffix(".service")
                if name in self.running:
                    return ok(
                        f"● {unit} - test service\n"
                        f"     Loaded: loaded (/etc/systemd/system/{unit}; enabled)\n"
                        "     Active: active (running) since Mon 2026-10-19 10:00:00 UTC\n"
                        f"   Main PID: {FAKE_PID} ({name})\n"
                    )
                return failed(
                    3,
                    f"○ {unit} - test service\n"
                    "     Active: inactive (dead)\n",
                )

            case ("service", name, "start"):
                self.running.add(name)
            case ("service", name, "stop"):
                self.running.discard(name)
            case ("service", name, "status"):
                if name in self.running:
                    return ok(f"{name} (pid  {FAKE_PID}) is running...\n")
                return failed(3, f"{name} is stopped\n")

            case ("supervisorctl", "start", name):
                self.running.add(name)
            case ("supervisorctl", "stop", name):
                self.running.discard(name)
            case ("supervisorctl", "status", name):
                if name in self.running:
                    return ok(
                        f"{name:<32} RUNNING   pid {FAKE_PID}, uptime 0:00:05\n"
                    )
                return failed(3, f"{name:<32} STOPPED   Not started\n")

        return ok()


# =============================================================================
# Service Fixtures
# =============================================================================


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def exec_file(tmp_path: Path) -> Path:
    """An executable standing in for the managed program."""
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    path = bin_dir / "wrapother"
    path.write_text("#!/bin/sh\nexit 0\n")
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


@pytest.fixture
def spec(tmp_path: Path, exec_file: Path) -> ServiceSpec:
    return (
        SpecBuilder()
        .exec(str(exec_file))
        .description("test wrapother service")
        .user("shgsec")
        .group("shgsec")
        .log_file(str(tmp_path / "log" / "wrapother" / "wrapother.log"))
        .pid_file(str(tmp_path / "run" / "wrapother.pid"))
        .lock_file(str(tmp_path / "lock" / "wrapother.lock"))
        .build()
    )


BackendFactory = Callable[[str], ServiceBackend]


@pytest.fixture
def make_backend(
    spec: ServiceSpec, runner: FakeRunner, tmp_path: Path
) -> BackendFactory:
    """Build a backend whose artifact directories live under tmp_path."""

    def factory(kind: str) -> ServiceBackend:
        etc = tmp_path / "etc"
        if kind == "systemd":
            return SystemdBackend(spec, runner, unit_dir=etc / "systemd" / "system")
        if kind == "sysv":
            return SysvBackend(
                spec,
                runner,
                init_dir=etc / "init.d",
                logrotate_dir=etc / "logrotate.d",
            )
        if kind == "supervisor":
            return SupervisorBackend(
                spec, runner, conf_dir=etc / "supervisor" / "conf.d"
            )
        raise ValueError(kind)

    return factory


@pytest.fixture(params=["systemd", "sysv", "supervisor"])
def backend(request, make_backend: BackendFactory) -> ServiceBackend:
    """Each backend in turn."""
    return make_backend(request.param)


def snapshot(root: Path) -> dict[str, bytes]:
    """Contents of every file under root, keyed by relative path."""
    return {
        str(p.relative_to(root)): p.read_bytes()
        for p in sorted(root.rglob("*"))
        if p.is_file()
    }


# =============================================================================
# CLI Test Helpers
# =============================================================================


@pytest.fixture
def cli_runner():
    """Create a Typer CLI test runner with colors disabled."""
    from typer.testing import CliRunner

    return CliRunner(env={"NO_COLOR": "1"})
