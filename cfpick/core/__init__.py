"""Shared core utilities: command execution, configuration and git access."""

from .command_runner import (
    DEFAULT_TIMEOUT,
    CommandError,
    CommandResult,
    CommandRunner,
    RecordingCommandRunner,
    SubprocessCommandRunner,
)
from .config_loader import (
    FILE_LOADERS,
    load_config_file,
    load_config_path,
    merge_mappings,
    resolve_config_path,
)
from .console import Console
from .git_api import GitRepository, current_branch

__all__ = [
    "DEFAULT_TIMEOUT",
    "CommandError",
    "CommandResult",
    "CommandRunner",
    "RecordingCommandRunner",
    "SubprocessCommandRunner",
    "FILE_LOADERS",
    "load_config_file",
    "load_config_path",
    "merge_mappings",
    "resolve_config_path",
    "Console",
    "GitRepository",
    "current_branch",
]
