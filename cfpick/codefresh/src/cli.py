"""CLI entry point for the codefresh build and pipeline pickers."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from cfpick.core.command_runner import SubprocessCommandRunner
from cfpick.core.console import Console
from cfpick.core.git_api import current_branch

from .context import Context, DryRunCommandRunner
from .finder import make_picker
from .pickers import BuildPickerSession, PipelinePickerSession
from .settings import LOG_LEVELS, PICKER_CHOICES, ConfigError, load_settings


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cfpick",
        description="Fuzzy pickers for Codefresh builds and pipelines",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=None,
        help="Path to configuration file or directory (default: $CFPICK_CONFIG or ~/.config/cfpick/config.toml)",
    )
    parser.add_argument(
        "--dry-run",
        "-n",
        action="store_true",
        help="Print terminate/restart commands instead of running them",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable verbose output (maps to debug)"
    )
    parser.add_argument(
        "--log",
        "-l",
        choices=LOG_LEVELS,
        default=None,
        help="Set log level (default: from config, else none)",
    )
    parser.add_argument(
        "--picker", choices=PICKER_CHOICES, default=None, help="Picker backend (default: auto)"
    )
    parser.add_argument("--host", default=None, help="Codefresh web host (default: g.codefresh.io)")
    parser.add_argument(
        "--timeout", type=float, default=None, help="Seconds before a codefresh call is abandoned"
    )

    subparsers = parser.add_subparsers(dest="command")

    builds_parser = subparsers.add_parser(
        "builds",
        aliases=["codefresh"],
        help="Pick a build on the current branch (default)",
    )
    builds_parser.add_argument(
        "--branch", "-b", default=None, help="Branch to list builds for (default: current branch)"
    )

    subparsers.add_parser("pipelines", help="Pick a pipeline and open it in the browser")

    return parser


def _log_level(args: argparse.Namespace, configured: str) -> str:
    if args.log:
        return args.log
    if args.verbose:
        return "debug"
    return configured


def main(args: Optional[List[str]] = None) -> int:
    parsed_args = build_parser().parse_args(args)
    command = parsed_args.command or "builds"

    try:
        settings = load_settings(parsed_args.config)
        if parsed_args.timeout is not None and parsed_args.timeout <= 0:
            raise ConfigError("--timeout must be positive")
        settings = settings.with_overrides(
            picker=parsed_args.picker,
            host=parsed_args.host,
            timeout=parsed_args.timeout,
        )
    except (ConfigError, OSError, ValueError, TypeError) as e:
        print(f"Error: Failed to load config: {e}", file=sys.stderr)
        return 1

    console = Console(level=_log_level(parsed_args, settings.log_level), dry_run=parsed_args.dry_run)
    runner = SubprocessCommandRunner()
    ctx = Context(
        settings=settings,
        console=console,
        runner=runner,
        write_runner=DryRunCommandRunner(console) if parsed_args.dry_run else runner,
    )

    try:
        picker, is_fzf = make_picker(settings)
        console.debug(f"Using {'fzf' if is_fzf else 'prompt'} picker")

        if command in ("builds", "codefresh"):
            branch = getattr(parsed_args, "branch", None)
            if branch is None:
                branch = current_branch(Path.cwd())
            if not branch:
                console.info("No current branch detected; listing builds for all branches")
            return BuildPickerSession(ctx, picker, branch, use_fzf_keys=is_fzf).run()
        if command == "pipelines":
            return PipelinePickerSession(ctx, picker).run()
    except KeyboardInterrupt:
        return 130
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


def run() -> None:
    """Console-script wrapper."""
    sys.exit(main(sys.argv[1:]))
