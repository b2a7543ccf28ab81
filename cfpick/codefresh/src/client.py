"""Wrapper around the ``codefresh`` CLI."""

from __future__ import annotations

from pathlib import Path
from typing import Any, List, Optional

from cfpick.core.command_runner import CommandResult, CommandRunner

from .context import Context
from .records import (
    ParsedRow,
    PipelineRecord,
    malformed_rows,
    parse_build_rows,
    parse_pipeline_rows,
)

BUILD_COLUMNS = "id,status,started,pipeline-name"


def _is_argument_list(args: Any) -> bool:
    return (
        isinstance(args, (list, tuple))
        and len(args) > 0
        and all(isinstance(arg, str) for arg in args)
    )


class CodefreshClient:
    """
    Runs ``codefresh`` subcommands in the current working directory.

    Every invocation is a single blocking call bounded by the configured
    timeout. Failures never raise: they are logged and yield no output.
    """

    def __init__(self, ctx: Context) -> None:
        self.ctx = ctx

    @property
    def settings(self):
        return self.ctx.settings

    @property
    def console(self):
        return self.ctx.console

    def _run(self, args: Any, runner: Optional[CommandRunner] = None) -> Optional[CommandResult]:
        if not _is_argument_list(args):
            self.console.error(f"codefresh command has to be a list of strings, got {args!r}")
            return None

        command = [self.settings.executable, *args]
        result = (runner or self.ctx.runner).run(
            command,
            cwd=Path.cwd(),
            check=False,
            timeout=self.settings.timeout,
        )
        for line in result.stderr_lines:
            self.console.debug(f"stderr: {line}")

        if result.timed_out:
            self.console.error(
                f"'{' '.join(command)}' timed out after {self.settings.timeout:g}s"
            )
        elif result.returncode != 0:
            self.console.error(
                f"'{' '.join(command)}' exited with code {result.returncode}"
            )
        return result

    def output_lines(self, args: Any) -> List[str]:
        """
        Run ``codefresh <args>`` and return its stdout lines.

        Returns an empty list when ``args`` is not a non-empty list of strings,
        when the command times out, or when it exits non-zero.
        """
        result = self._run(args)
        if result is None or not result.ok:
            return []
        return result.stdout_lines

    # --- Listings ---

    def get_builds(self, branch: str) -> List[ParsedRow]:
        args = ["get", "builds", "--select-columns", BUILD_COLUMNS]
        if branch:
            args += ["--branch", branch]
        rows = parse_build_rows(self.output_lines(args))
        self._report_malformed(rows, "build")
        return rows

    def get_pipelines(self) -> List[ParsedRow]:
        rows = parse_pipeline_rows(
            self.output_lines(["get", "pipelines", "--all", "--select-columns", "name"])
        )
        self._report_malformed(rows, "pipeline")
        return rows

    def _report_malformed(self, rows: List[ParsedRow], label: str) -> None:
        bad = malformed_rows(rows)
        for row in bad:
            self.console.debug(f"skipped {label} row ({row.reason}): {row.line!r}")
        if bad:
            self.console.info(f"Skipped {len(bad)} unrecognised {label} row(s)")

    # --- Build commands ---

    def terminate(self, build_id: str) -> bool:
        result = self._run(["terminate", build_id], runner=self.ctx.write_runner)
        return result is not None and result.ok

    def restart(self, build_id: str) -> bool:
        result = self._run(["restart", build_id], runner=self.ctx.write_runner)
        return result is not None and result.ok

    def stream_logs(self, build_id: str) -> None:
        """Follow build logs on the terminal until the stream ends or Ctrl-C."""
        command = [self.settings.executable, "logs", "-f", build_id]
        try:
            self.ctx.runner.run(command, cwd=Path.cwd(), check=False, stream=True)
        except KeyboardInterrupt:
            self.console.info(f"Stopped following logs for build ID {build_id}")

    # --- URLs ---

    def build_url(self, build_id: str) -> str:
        return f"https://{self.settings.host}/build/{build_id}"

    def pipeline_url(self, pipeline: PipelineRecord) -> str:
        return (
            f"https://{self.settings.host}/pipelines/all/?filter="
            "pageSize:10;field:name~Name;order:asc~Asc;"
            f"search:{pipeline.name};projects:{pipeline.project}"
        )
