"""Service definition and option handling."""

from daemonwrap.config.builder import SpecBuilder, host_defaults
from daemonwrap.config.loader import ServiceOptions, load_options
from daemonwrap.config.spec import SPEC_FIELDS, ServiceSpec

__all__ = [
    "SPEC_FIELDS",
    "ServiceOptions",
    "ServiceSpec",
    "SpecBuilder",
    "host_defaults",
    "load_options",
]
