# Copyright (c) 2026 Mark Ferrell. MIT License.
"""Blocking subprocess execution with captured output.

Wraps subprocess.run so callers get a CommandResult on success and a
CommandFailed exception (never a bare return code) on failure or timeout.
Credentials embedded in command lines or git output are redacted from
every rendered error message.

References:
    - subprocess.run: https://docs.python.org/3/library/subprocess.html#subprocess.run
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path

from milestone_release.repository import redact_credentials

logger = logging.getLogger(__name__)

__all__ = ["CommandFailed", "CommandResult", "CommandTimedOut", "run"]


@dataclass(frozen=True)
class CommandResult:
    """Captured result of a finished command."""

    command: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str


class CommandFailed(Exception):
    """A command exited non-zero or could not be started."""

    def __init__(self, command: tuple[str, ...], returncode: int, stdout: str = "", stderr: str = "") -> None:
        self.command = command
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        super().__init__(self._describe())

    def _describe(self) -> str:
        cmd_str = redact_credentials(" ".join(self.command[:4]))
        if len(self.command) > 4:
            cmd_str += " ..."
        message = f"{cmd_str} failed (exit {self.returncode})"
        detail = redact_credentials(self.stderr.strip())
        if detail:
            message += f": {detail}"
        return message


class CommandTimedOut(CommandFailed):
    """A command did not finish within its timeout."""

    def __init__(self, command: tuple[str, ...], timeout: float) -> None:
        self.timeout = timeout
        super().__init__(command, -1, stderr=f"Command timed out after {timeout}s")


def run(
    cmd: list[str],
    cwd: Path,
    *,
    timeout: float | None = None,
    check: bool = True,
) -> CommandResult:
    """Execute a command and capture its output.

    Args:
        cmd: Command and arguments to execute.
        cwd: Working directory for the command.
        timeout: Maximum seconds to wait (None for no limit).
        check: If True, raise CommandFailed on a non-zero exit.

    Returns:
        CommandResult with the captured stdout and stderr.

    Raises:
        CommandTimedOut: If the timeout expires.
        CommandFailed: If the command cannot be started, or exits non-zero and check is True.
    """
    command = tuple(cmd)
    logger.debug("Running %s in %s", redact_credentials(" ".join(command)), cwd)

    try:
        proc = subprocess.run(
            cmd,
            cwd=str(cwd),
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired as e:
        raise CommandTimedOut(command, timeout or 0.0) from e
    except OSError as e:
        raise CommandFailed(command, -1, stderr=str(e)) from e

    result = CommandResult(
        command=command,
        returncode=proc.returncode,
        stdout=proc.stdout,
        stderr=proc.stderr,
    )

    if check and proc.returncode != 0:
        raise CommandFailed(command, proc.returncode, stdout=proc.stdout, stderr=proc.stderr)

    return result
