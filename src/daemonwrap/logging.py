"""Centralized logging configuration for daemonwrap.

Library modules only create loggers with ``logging.getLogger(__name__)``.
Entry points (the CLI, or a program embedding daemonwrap) call
configure_logging() once.

Logging Levels:
- DEBUG: Every external command run, ignored best-effort failures
- INFO: Life-cycle transitions (installed, started, stopped, removed)
- WARNING: Cleanup that could not be completed
- ERROR: Failures that abort an operation
"""

import logging
import os

from daemonwrap.config.paths import ENV_LOG_LEVEL

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


class ComponentFormatter(logging.Formatter):
    """Formatter that extracts component name from logger path.

    Converts full module paths to short component names:
    - daemonwrap.service.backends.systemd -> service
    - daemonwrap.config.builder -> config
    """

    def format(self, record: logging.LogRecord) -> str:
        parts = record.name.split(".")
        if len(parts) >= 2 and parts[0] == "daemonwrap":
            record.component = parts[1]
        else:
            record.component = parts[0]
        return super().format(record)


def resolve_level(level: str | None = None, default: str = "WARNING") -> int:
    """Resolve a level name from the argument or DAEMONWRAP_LOG_LEVEL."""
    if level is None:
        level = os.environ.get(ENV_LOG_LEVEL, default)
    level = level.upper()
    if level not in LOG_LEVELS:
        level = default
    return getattr(logging, level)


def configure_logging(
    level: str | None = None,
    use_rich: bool = False,
) -> None:
    """Configure logging for daemonwrap.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR).
            If None, uses DAEMONWRAP_LOG_LEVEL env var or WARNING.
        use_rich: Use Rich handler for colorful terminal output.
    """
    log_level = resolve_level(level)

    if use_rich:
        from rich.logging import RichHandler

        handler: logging.Handler = RichHandler(
            rich_tracebacks=False,
            show_path=False,
            show_time=True,
            markup=False,
        )
        handler.setFormatter(ComponentFormatter("%(component)s | %(message)s"))
    else:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
                datefmt="%H:%M:%S",
            )
        )

    logging.basicConfig(
        level=log_level,
        handlers=[handler],
        force=True,
    )
