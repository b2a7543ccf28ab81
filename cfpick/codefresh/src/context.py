"""
Context and dry-run runner for the codefresh pickers.
"""
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

from cfpick.core.command_runner import CommandResult, CommandRunner, SubprocessCommandRunner
from cfpick.core.console import Console

from .settings import Settings


class DryRunCommandRunner(SubprocessCommandRunner):
    """Command runner that prints commands instead of executing them."""

    def __init__(self, console: Console):
        self.console = console

    def run(
        self,
        command: Sequence[str],
        *,
        cwd: Path | None = None,
        check: bool = True,
        stream: bool = False,
        timeout: float | None = None,
    ) -> CommandResult:
        self.console.dry(self.format_command(command))
        if cwd:
            self.console.dry(f"  (cwd: {cwd})")
        return CommandResult(
            command=command,
            returncode=0,
            stdout="",
            stderr="",
            streamed=stream,
        )


@dataclass
class Context:
    """Everything a picker session needs.

    ``runner`` executes listing commands. ``write_runner`` executes commands
    that change server state (terminate, restart) and defaults to ``runner``;
    in dry-run mode it is a :class:`DryRunCommandRunner`.
    """

    settings: Settings
    console: Console
    runner: CommandRunner
    write_runner: Optional[CommandRunner] = None

    def __post_init__(self) -> None:
        if self.write_runner is None:
            self.write_runner = self.runner
