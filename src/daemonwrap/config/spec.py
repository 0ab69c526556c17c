"""Service definition model."""

from pydantic import BaseModel, ConfigDict


class ServiceSpec(BaseModel):
    """Everything a backend needs to know about the managed service.

    Built once by ``SpecBuilder`` and treated as read-only afterwards, except
    that ``exec`` is rewritten to its absolute path during install.
    """

    model_config = ConfigDict(extra="forbid")

    description: str
    name: str  # unique key; all artifact paths derive from it
    exec: str
    args: str = ""
    work_dir: str
    dependencies: str = ""  # backend-specific syntax, verbatim
    user: str
    group: str
    log_file: str
    pid_file: str
    lock_file: str


SPEC_FIELDS: tuple[str, ...] = tuple(ServiceSpec.model_fields)
