"""Read-only Git helpers backed by pygit2."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import pygit2


class GitRepository:
    """
    Minimal read API over a working tree.

    The repository is discovered upward from ``path``, so any directory inside
    a working tree can be used.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path).resolve()
        self._repo: Optional[pygit2.Repository] = None

    def open(self) -> None:
        """Opens the repository. Raises RuntimeError if none is found."""
        try:
            discovered = pygit2.discover_repository(str(self.path))
        except (KeyError, pygit2.GitError):
            discovered = None
        if discovered is None:
            raise RuntimeError(f"No git repository found at {self.path}")
        try:
            self._repo = pygit2.Repository(discovered)
        except pygit2.GitError as e:
            raise RuntimeError(f"Failed to open repository at {self.path}: {e}")

    @property
    def repo(self) -> pygit2.Repository:
        if self._repo is None:
            self.open()
        return self._repo  # type: ignore

    @property
    def is_valid(self) -> bool:
        """Checks if the path is inside a git repository."""
        if not self.path.exists():
            return False
        try:
            self.open()
            return True
        except RuntimeError:
            return False

    def get_head_branch(self) -> Optional[str]:
        """Returns the current branch name, or None if detached HEAD."""
        try:
            if self.repo.head_is_detached:
                return None
            return self.repo.head.shorthand
        except pygit2.GitError:
            # Unborn HEAD: the symbolic ref still names the branch
            try:
                target = self.repo.lookup_reference("HEAD").target
                if isinstance(target, str) and target.startswith("refs/heads/"):
                    return target[len("refs/heads/"):]
            except (KeyError, pygit2.GitError):
                pass
            return None


def current_branch(path: Path | str) -> str:
    """Branch checked out at ``path``, or an empty string when there is none."""
    repo = GitRepository(path)
    if not repo.is_valid:
        return ""
    return repo.get_head_branch() or ""


__all__ = ["GitRepository", "current_branch"]
