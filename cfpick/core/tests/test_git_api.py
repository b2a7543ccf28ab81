import shutil
import tempfile
import unittest
from pathlib import Path

import pygit2

from cfpick.core.git_api import GitRepository, current_branch


class TestGitRepository(unittest.TestCase):
    def setUp(self):
        self.test_dir = tempfile.mkdtemp()
        self.path = Path(self.test_dir)
        self.signature = pygit2.Signature("Test User", "test@example.com")

    def tearDown(self):
        shutil.rmtree(self.test_dir)

    def _commit(self, repo: pygit2.Repository) -> None:
        tree = repo.TreeBuilder().write()
        repo.create_commit("HEAD", self.signature, self.signature, "initial", tree, [])

    def test_branch_after_commit(self):
        repo = pygit2.init_repository(str(self.path), initial_head="feature/picker")
        self._commit(repo)
        self.assertEqual(GitRepository(self.path).get_head_branch(), "feature/picker")
        self.assertEqual(current_branch(self.path), "feature/picker")

    def test_unborn_branch(self):
        pygit2.init_repository(str(self.path), initial_head="main")
        self.assertEqual(GitRepository(self.path).get_head_branch(), "main")

    def test_discovers_from_subdirectory(self):
        repo = pygit2.init_repository(str(self.path), initial_head="develop")
        self._commit(repo)
        nested = self.path / "a" / "b"
        nested.mkdir(parents=True)
        self.assertEqual(current_branch(nested), "develop")

    def test_detached_head(self):
        repo = pygit2.init_repository(str(self.path), initial_head="main")
        self._commit(repo)
        repo.set_head(repo.head.target)
        self.assertIsNone(GitRepository(self.path).get_head_branch())
        self.assertEqual(current_branch(self.path), "")

    def test_not_a_repository(self):
        repo = GitRepository(self.path / "missing")
        self.assertFalse(repo.is_valid)
        self.assertEqual(current_branch(self.path / "missing"), "")


if __name__ == "__main__":
    unittest.main()
