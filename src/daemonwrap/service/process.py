"""External command execution.

All management commands (systemctl, service, supervisorctl, ...) go through
a ``CommandRunner`` so backends can be exercised against a fake runner.
"""

import asyncio
import logging
import shlex
import signal
import subprocess
from dataclasses import dataclass

from daemonwrap.errors import CommandError

logger = logging.getLogger(__name__)

# Return code reported when the binary itself cannot be executed
COMMAND_NOT_FOUND = 127

CANCEL_SIGNALS = (signal.SIGINT, signal.SIGTERM)


@dataclass
class CommandResult:
    """Captured result of a finished command."""

    args: tuple[str, ...]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    def check(self) -> "CommandResult":
        """Raise ``CommandError`` unless the command succeeded."""
        if not self.ok:
            output = (self.stderr.strip() or self.stdout.strip())
            raise CommandError(self.args, self.returncode, output)
        return self


class CommandRunner:
    """Runs host management commands."""

    def run(self, *args: str, check: bool = False) -> CommandResult:
        """Run a command to completion and capture its output.

        Args:
            args: Command and arguments.
            check: Raise ``CommandError`` on a non-zero exit.
        """
        logger.debug("Running %s", shlex.join(args))
        try:
            proc = subprocess.run(list(args), capture_output=True, text=True)
            result = CommandResult(args, proc.returncode, proc.stdout, proc.stderr)
        except OSError as e:
            result = CommandResult(args, COMMAND_NOT_FOUND, stderr=str(e))
        if check:
            result.check()
        return result

    def stream(self, *args: str) -> int:
        """Run a command with output passed through until it exits or is interrupted.

        SIGINT and SIGTERM terminate the child instead of the caller, so a
        live tail can be interrupted without leaving an orphaned process.

        Returns:
            The command's return code.

        Raises:
            CommandError: If the command fails on its own (not by interruption).
        """
        return asyncio.run(self._stream(args))

    async def _stream(self, args: tuple[str, ...]) -> int:
        logger.debug("Streaming %s", shlex.join(args))
        loop = asyncio.get_running_loop()
        interrupted = asyncio.Event()
        for sig in CANCEL_SIGNALS:
            loop.add_signal_handler(sig, interrupted.set)
        try:
            try:
                proc = await asyncio.create_subprocess_exec(*args)
            except OSError as e:
                raise CommandError(args, COMMAND_NOT_FOUND, str(e)) from e

            wait_task = asyncio.create_task(proc.wait())
            interrupt_task = asyncio.create_task(interrupted.wait())
            done, _ = await asyncio.wait(
                {wait_task, interrupt_task},
                return_when=asyncio.FIRST_COMPLETED,
            )
            if wait_task not in done:
                logger.debug("Interrupted, terminating %s", args[0])
                try:
                    proc.terminate()
                except ProcessLookupError:
                    pass
                await wait_task
            interrupt_task.cancel()
        finally:
            for sig in CANCEL_SIGNALS:
                loop.remove_signal_handler(sig)

        returncode = proc.returncode if proc.returncode is not None else 0
        if not interrupted.is_set() and returncode != 0:
            raise CommandError(args, returncode)
        return returncode
