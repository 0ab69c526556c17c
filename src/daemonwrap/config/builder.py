"""Builder that turns named options into a validated ``ServiceSpec``."""

import logging
import os
import sys
from typing import Any, Self

from daemonwrap.config import paths
from daemonwrap.config.spec import SPEC_FIELDS, ServiceSpec
from daemonwrap.errors import ConfigIsNilError, MissingExecValueError

logger = logging.getLogger(__name__)


def host_defaults(argv0: str | None = None) -> dict[str, str] | None:
    """Derive the default draft from the running program.

    Returns None when the program path cannot be determined.
    """
    if argv0 is None:
        argv0 = sys.argv[0] if sys.argv else ""
    if not argv0:
        return None
    return {
        "exec": os.path.abspath(argv0),
        "user": paths.DEFAULT_USER,
        "group": paths.DEFAULT_GROUP,
    }


class SpecBuilder:
    """Collects option values and validates them into a ``ServiceSpec``.

    Each setter overwrites its field, so the last value applied wins.
    Fields left unset are derived in ``build()``: name and working directory
    from the executable, log/pid/lock paths and description from the name.

    Example:
        spec = (
            SpecBuilder.from_defaults()
            .name("wrapother")
            .exec("/home/shgsec/wrapother")
            .build()
        )
    """

    def __init__(self, draft: dict[str, str] | None = None):
        self._draft = dict(draft) if draft is not None else None

    @classmethod
    def from_defaults(cls, argv0: str | None = None) -> "SpecBuilder":
        return cls(host_defaults(argv0))

    def _set(self, field: str, value: str) -> Self:
        if self._draft is None:
            self._draft = {}
        self._draft[field] = value
        return self

    def description(self, value: str) -> Self:
        return self._set("description", value)

    def name(self, value: str) -> Self:
        return self._set("name", value)

    def exec(self, value: str) -> Self:
        return self._set("exec", value)

    def args(self, value: str) -> Self:
        return self._set("args", value)

    def work_dir(self, value: str) -> Self:
        return self._set("work_dir", value)

    def dependencies(self, value: str) -> Self:
        return self._set("dependencies", value)

    def user(self, value: str) -> Self:
        return self._set("user", value)

    def group(self, value: str) -> Self:
        return self._set("group", value)

    def log_file(self, value: str) -> Self:
        return self._set("log_file", value)

    def pid_file(self, value: str) -> Self:
        return self._set("pid_file", value)

    def lock_file(self, value: str) -> Self:
        return self._set("lock_file", value)

    def apply(self, **options: Any) -> Self:
        """Apply named options in order.

        Raises:
            TypeError: If an option name is not a spec field.
        """
        for key, value in options.items():
            if key not in SPEC_FIELDS:
                raise TypeError(f"unknown service option: {key}")
            if value is None:
                continue
            getattr(self, key)(str(value))
        return self

    def build(self) -> ServiceSpec:
        """Validate the draft and fill derived defaults.

        Raises:
            ConfigIsNilError: If there is no draft at all.
            MissingExecValueError: If no executable was given.
        """
        if self._draft is None:
            raise ConfigIsNilError()
        fields = dict(self._draft)
        exec_path = fields.get("exec", "")
        if not exec_path:
            raise MissingExecValueError()

        name = fields.get("name") or os.path.basename(exec_path)
        fields["name"] = name
        # A bare name is looked up on PATH at install time, which fills work_dir
        fields.setdefault("work_dir", "")
        if not fields["work_dir"] and os.sep in exec_path:
            fields["work_dir"] = os.path.dirname(os.path.abspath(exec_path))
        fields.setdefault("description", paths.default_description(name))
        fields.setdefault("user", paths.DEFAULT_USER)
        fields.setdefault("group", paths.DEFAULT_GROUP)
        fields.setdefault("log_file", paths.default_log_file(name))
        fields.setdefault("pid_file", paths.default_pid_file(name))
        fields.setdefault("lock_file", paths.default_lock_file(name))

        spec = ServiceSpec(**fields)
        logger.debug("Built service spec for %s (exec=%s)", spec.name, spec.exec)
        return spec
