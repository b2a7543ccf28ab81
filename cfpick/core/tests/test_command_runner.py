import subprocess
import sys
import time
import unittest
from pathlib import Path
from unittest.mock import patch

from cfpick.core.command_runner import (
    DEFAULT_TIMEOUT,
    CommandError,
    CommandResult,
    RecordingCommandRunner,
    SubprocessCommandRunner,
)


class TestSubprocessCommandRunner(unittest.TestCase):
    def setUp(self):
        self.runner = SubprocessCommandRunner()

    def test_collects_stdout_and_stderr_separately(self):
        result = self.runner.run(
            [
                sys.executable,
                "-c",
                "import sys; print('out1'); print('out2'); print('err', file=sys.stderr)",
            ],
            check=False,
        )
        self.assertEqual(result.returncode, 0)
        self.assertEqual(result.stdout_lines, ["out1", "out2"])
        self.assertEqual(result.stderr_lines, ["err"])
        self.assertTrue(result.ok)

    def test_check_raises_on_failure(self):
        with self.assertRaises(CommandError) as cm:
            self.runner.run([sys.executable, "-c", "import sys; sys.exit(3)"])
        self.assertEqual(cm.exception.result.returncode, 3)

    def test_timeout_returns_instead_of_blocking(self):
        start = time.monotonic()
        result = self.runner.run(
            [sys.executable, "-c", "import time; time.sleep(10)"],
            check=False,
            timeout=0.5,
        )
        self.assertLess(time.monotonic() - start, 5)
        self.assertTrue(result.timed_out)
        self.assertEqual(result.returncode, -1)
        self.assertFalse(result.ok)

    def test_timeout_with_check_raises(self):
        with self.assertRaises(CommandError) as cm:
            self.runner.run(
                [sys.executable, "-c", "import time; time.sleep(10)"],
                timeout=0.5,
            )
        self.assertIn("timed out", str(cm.exception))

    @patch("cfpick.core.command_runner.subprocess.run")
    def test_timeout_keeps_partial_output(self, mock_run):
        mock_run.side_effect = subprocess.TimeoutExpired(
            cmd=["codefresh"], timeout=DEFAULT_TIMEOUT, output=b"partial\n", stderr=None
        )
        result = self.runner.run(["codefresh"], check=False, timeout=DEFAULT_TIMEOUT)
        self.assertTrue(result.timed_out)
        self.assertEqual(result.stdout, "partial\n")
        self.assertEqual(result.stderr, "")
        self.assertEqual(mock_run.call_args.kwargs["timeout"], DEFAULT_TIMEOUT)

    def test_missing_executable(self):
        result = self.runner.run(["definitely-not-a-real-binary-cfpick"], check=False)
        self.assertEqual(result.returncode, 127)
        self.assertFalse(result.ok)

    def test_default_timeout_is_thirty_seconds(self):
        self.assertEqual(DEFAULT_TIMEOUT, 30.0)


class TestRecordingCommandRunner(unittest.TestCase):
    def test_records_and_replays(self):
        runner = RecordingCommandRunner(responses={"codefresh get builds": "line1\nline2\n"})
        result = runner.run(["codefresh", "get", "builds"], timeout=30)
        self.assertEqual(result.stdout_lines, ["line1", "line2"])
        other = runner.run(["codefresh", "logs", "abc", "-f"], stream=True)
        self.assertEqual(other.stdout, "")
        self.assertTrue(other.streamed)

        self.assertEqual(
            [recorded.command for recorded in runner.commands],
            [["codefresh", "get", "builds"], ["codefresh", "logs", "abc", "-f"]],
        )
        self.assertEqual(runner.commands[0].timeout, 30)
        self.assertFalse(runner.commands[0].stream)
        self.assertTrue(runner.commands[1].stream)
        self.assertIsNone(runner.commands[1].timeout)

    def test_records_working_directory(self):
        runner = RecordingCommandRunner()
        runner.run(["codefresh", "get", "pipelines"], cwd=Path("/tmp/work"))
        self.assertEqual(runner.commands[0].cwd, "/tmp/work")


class TestCommandResult(unittest.TestCase):
    def test_command_error_message(self):
        result = CommandResult(command=["codefresh", "restart", "x"], returncode=2, stdout="", stderr="boom")
        error = CommandError(result)
        self.assertIn("exit code 2", str(error))
        self.assertIn("boom", str(error))


if __name__ == "__main__":
    unittest.main()
