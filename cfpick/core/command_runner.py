"""Utilities for executing external commands with timeouts."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Sequence
import shlex
import subprocess

DEFAULT_TIMEOUT = 30.0
"""Seconds an external command may run before it is abandoned."""


@dataclass
class CommandResult:
    """Represents the outcome of an executed command."""

    command: Sequence[str]
    returncode: int
    stdout: str
    stderr: str
    streamed: bool = False
    timed_out: bool = False

    @property
    def ok(self) -> bool:
        return self.returncode == 0 and not self.timed_out

    @property
    def stdout_lines(self) -> List[str]:
        return self.stdout.splitlines()

    @property
    def stderr_lines(self) -> List[str]:
        return self.stderr.splitlines()


class CommandError(RuntimeError):
    """Raised when a command fails."""

    def __init__(self, result: CommandResult):
        command = " ".join(map(shlex.quote, result.command))
        if result.timed_out:
            message = f"Command timed out: {command}"
        else:
            message = f"Command failed with exit code {result.returncode}: {command}"
        if result.streamed:
            message = f"{message}\nstdout/stderr already streamed above."
        else:
            message = (
                f"{message}\n"
                f"stdout: {result.stdout}\n"
                f"stderr: {result.stderr}"
            )
        super().__init__(message)
        self.result = result


def _decode(data: bytes | str | None) -> str:
    if data is None:
        return ""
    if isinstance(data, bytes):
        return data.decode("utf-8", errors="replace")
    return data


class CommandRunner:
    """Abstract command runner interface."""

    def run(
        self,
        command: Sequence[str],
        *,
        cwd: Path | None = None,
        check: bool = True,
        stream: bool = False,
        timeout: float | None = None,
    ) -> CommandResult:
        raise NotImplementedError

    def format_command(self, command: Sequence[str]) -> str:
        return " ".join(shlex.quote(part) for part in command)


class SubprocessCommandRunner(CommandRunner):
    """Command runner that executes commands via :mod:`subprocess`.

    A command that outlives ``timeout`` is killed and reported with
    ``timed_out=True`` and ``returncode=-1``. A missing executable is reported
    with ``returncode=127`` instead of raising.
    """

    def _finalize(self, result: CommandResult, *, check: bool) -> CommandResult:
        if check and not result.ok:
            raise CommandError(result)
        return result

    def run(
        self,
        command: Sequence[str],
        *,
        cwd: Path | None = None,
        check: bool = True,
        stream: bool = False,
        timeout: float | None = None,
    ) -> CommandResult:
        try:
            process = subprocess.run(
                list(command),
                cwd=str(cwd) if cwd else None,
                capture_output=not stream,
                text=True,
                check=False,
                timeout=timeout,
            )
        except subprocess.TimeoutExpired as exc:
            result = CommandResult(
                command=command,
                returncode=-1,
                stdout=_decode(exc.stdout),
                stderr=_decode(exc.stderr),
                streamed=stream,
                timed_out=True,
            )
            return self._finalize(result, check=check)
        except FileNotFoundError as exc:
            result = CommandResult(
                command=command,
                returncode=127,
                stdout="",
                stderr=str(exc),
                streamed=stream,
            )
            return self._finalize(result, check=check)

        return self._finalize(
            CommandResult(
                command=command,
                returncode=process.returncode,
                stdout="" if stream else process.stdout,
                stderr="" if stream else process.stderr,
                streamed=stream,
            ),
            check=check,
        )


@dataclass(slots=True)
class RecordedCommand:
    command: List[str]
    cwd: str | None
    stream: bool
    timeout: float | None


@dataclass
class RecordingCommandRunner(CommandRunner):
    """Command runner that records commands instead of executing them.

    ``responses`` maps a formatted command line to the stdout it should
    produce, which lets callers replay canned CLI output.
    """

    responses: Dict[str, str] = field(default_factory=dict)
    commands: List[RecordedCommand] = field(default_factory=list)

    def run(
        self,
        command: Sequence[str],
        *,
        cwd: Path | None = None,
        check: bool = True,
        stream: bool = False,
        timeout: float | None = None,
    ) -> CommandResult:
        self.commands.append(
            RecordedCommand(
                command=list(command),
                cwd=str(cwd) if cwd else None,
                stream=stream,
                timeout=timeout,
            )
        )
        stdout = self.responses.get(self.format_command(command), "")
        return CommandResult(command=command, returncode=0, stdout=stdout, stderr="", streamed=stream)


__all__ = [
    "DEFAULT_TIMEOUT",
    "CommandError",
    "CommandResult",
    "CommandRunner",
    "RecordedCommand",
    "RecordingCommandRunner",
    "SubprocessCommandRunner",
]
