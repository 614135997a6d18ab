"""Command execution for dispatched actions.

The dispatcher only talks to the abstract CommandRunner so tests can
substitute a runner that never spawns a process. ShellCommandRunner is
the real implementation: it hands the command string to ``sh -c``
verbatim, so whoever can POST to the listener can run arbitrary shell
code as the listener's user.
"""

from __future__ import annotations

import abc
import asyncio
import logging

from eventrelay.domain.models import CommandResult

logger = logging.getLogger(__name__)

# Exit code reported when the shell itself cannot be started
SPAWN_FAILED_EXIT_CODE = 127
# Exit code reported when the command is killed after a timeout
TIMEOUT_EXIT_CODE = -1


class CommandRunner(abc.ABC):
    """Runs an external command and reports its exit code and output."""

    @abc.abstractmethod
    async def run(self, cmd: str) -> CommandResult:
        """Run ``cmd`` to completion.

        Returns the exit code with stdout and stderr combined. A non-zero
        exit is reported in the result, not raised.
        """


class ShellCommandRunner(CommandRunner):
    """Runs commands through ``<shell> -c <cmd>``.

    Args:
        shell: Path to the POSIX shell used to interpret commands.
        timeout: Seconds to wait before killing the command. None waits
                 for as long as it takes.
    """

    def __init__(self, shell: str = "/bin/sh", timeout: float | None = None) -> None:
        self._shell = shell
        self._timeout = timeout

    @property
    def shell(self) -> str:
        return self._shell

    @property
    def timeout(self) -> float | None:
        return self._timeout

    async def run(self, cmd: str) -> CommandResult:
        logger.debug("Running %s -c %r", self._shell, cmd)
        try:
            process = await asyncio.create_subprocess_exec(
                self._shell, "-c", cmd,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
            )
        except OSError as e:
            logger.warning("Failed to start %s: %s", self._shell, e)
            return CommandResult(exit_code=SPAWN_FAILED_EXIT_CODE, output=str(e))

        try:
            stdout, _ = await asyncio.wait_for(process.communicate(), timeout=self._timeout)
        except asyncio.TimeoutError:
            process.kill()
            await process.wait()
            logger.warning("Command timed out after %ss: %r", self._timeout, cmd)
            return CommandResult(
                exit_code=TIMEOUT_EXIT_CODE,
                output=f"command timed out after {self._timeout}s",
            )

        output = stdout.decode("utf-8", errors="replace") if stdout else ""
        return CommandResult(exit_code=process.returncode or 0, output=output)
