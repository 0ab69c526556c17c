"""Error types for daemon management.

Guards raise the sentinel errors below before any side effect happens, so
callers can catch them directly. Failures in the middle of an operation are
wrapped in an operation error (``InstallError`` etc.) chained to the cause.
"""

from collections.abc import Sequence


class DaemonError(Exception):
    """Base class for all user-facing daemon errors."""

    message = "daemon error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)


class UnsupportedSystemError(DaemonError):
    message = "unsupported system"


class RootPrivilegesError(DaemonError):
    message = (
        "you must have root user privileges. "
        "possibly using 'sudo' command should help"
    )


class AlreadyInstalledError(DaemonError):
    message = "service has already been installed"


class NotInstalledError(DaemonError):
    message = "service is not installed"


class AlreadyRunningError(DaemonError):
    message = "service is already running"


class AlreadyStoppedError(DaemonError):
    message = "service has already been stopped"


class MissingExecValueError(DaemonError):
    message = "you must specify the executable path"


class ConfigIsNilError(DaemonError):
    message = "the config can't be nil"


class ExecutableNotFoundError(DaemonError):
    """The service executable could not be resolved."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"executable not found: {name}")


class CommandError(DaemonError):
    """An external management command exited unsuccessfully."""

    def __init__(
        self,
        args: Sequence[str],
        returncode: int,
        output: str = "",
    ):
        self.command = tuple(args)
        self.returncode = returncode
        self.output = output
        detail = f": {output}" if output else ""
        super().__init__(
            f"command '{' '.join(self.command)}' exited with {returncode}{detail}"
        )


class _OperationError(DaemonError):
    operation = "run"

    def __init__(self, cause: BaseException):
        self.cause = cause
        super().__init__(f"failed to {self.operation}: {cause}")


class InstallError(_OperationError):
    operation = "install service"


class EnableError(_OperationError):
    operation = "enable service"


class DisableError(_OperationError):
    operation = "disable service"


class RemoveError(_OperationError):
    operation = "remove service"


class ConfigError(DaemonError):
    """Option file could not be loaded."""


class TemplateError(RuntimeError):
    """A bundled artifact template is broken.

    Indicates a packaging defect rather than bad input, and is not a
    ``DaemonError``.
    """
