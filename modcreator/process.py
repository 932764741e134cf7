"""Child-process capability used by the pipeline steps.

The pipeline never spawns processes directly; it is handed a
``CommandRunner`` so its control flow can be exercised without npm, npx or
git being installed.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from modcreator.utils import run_command


class CommandError(Exception):
    """Raised when an external command exits non-zero, times out, or is missing."""

    def __init__(self, command: list[str], returncode: int, stderr: str = "") -> None:
        self.command = list(command)
        self.returncode = returncode
        self.stderr = stderr
        message = f"Command failed with exit code {returncode}: {' '.join(command)}"
        if stderr:
            message = f"{message}\n{stderr}"
        super().__init__(message)


@dataclass(frozen=True)
class CommandOutput:
    """Captured output of a successful command."""

    command: list[str]
    stdout: str = ""
    stderr: str = ""


class CommandRunner(Protocol):
    async def run(self, command: list[str], cwd: Path) -> CommandOutput: ...


class SubprocessRunner:
    """Runs commands as real child processes with their output captured.

    Standard output and error are captured rather than shown so the task
    spinners stay readable; stderr is attached to ``CommandError`` when the
    command fails.
    """

    def __init__(self, timeout: int = 600, env: dict[str, str] | None = None) -> None:
        self.timeout = timeout
        self.env = env

    async def run(self, command: list[str], cwd: Path) -> CommandOutput:
        try:
            returncode, stdout, stderr = await run_command(
                command, cwd=cwd, timeout=self.timeout, env=self.env
            )
        except FileNotFoundError as exc:
            raise CommandError(command, 127, f"Executable not found: {command[0]}") from exc

        if returncode != 0:
            raise CommandError(command, returncode, stderr)
        return CommandOutput(command=list(command), stdout=stdout, stderr=stderr)
