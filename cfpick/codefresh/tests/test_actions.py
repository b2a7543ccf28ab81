import unittest
from unittest.mock import MagicMock

from cfpick.core.command_runner import RecordingCommandRunner
from cfpick.core.console import Console
from cfpick.codefresh.src.actions import (
    DECLINED_MESSAGE,
    ActionDispatcher,
    BuildAction,
    key_bindings,
)
from cfpick.codefresh.src.client import CodefreshClient
from cfpick.codefresh.src.context import Context
from cfpick.codefresh.src.finder import Picker
from cfpick.codefresh.src.records import BuildRecord, BuildStatus
from cfpick.codefresh.src.settings import DEFAULT_KEYS, Settings


def make_build(status: BuildStatus, build_id: str = "b1") -> BuildRecord:
    return BuildRecord(id=build_id, status=status, started="2023-09-01, 10:15:42", pipeline="web/ci")


class TestActionDispatcher(unittest.TestCase):
    def setUp(self):
        self.console = MagicMock(spec=Console)
        self.runner = RecordingCommandRunner()
        self.client = CodefreshClient(
            Context(settings=Settings(), console=self.console, runner=self.runner)
        )
        self.picker = MagicMock(spec=Picker)
        self.refresh = MagicMock()
        self.opener = MagicMock(return_value=True)
        self.dispatcher = ActionDispatcher(
            self.client, self.picker, self.console, refresh=self.refresh, opener=self.opener
        )

    def commands(self):
        return [c.command for c in self.runner.commands]

    def test_terminate_confirmed(self):
        self.picker.confirm.return_value = True
        self.dispatcher.dispatch(BuildAction.TERMINATE, make_build(BuildStatus.RUNNING))
        self.picker.confirm.assert_called_once_with(
            "Are you sure you want to terminate build ID b1? (y/N) "
        )
        self.assertEqual(self.commands(), [["codefresh", "terminate", "b1"]])
        self.console.notify.assert_called_once_with("Terminating build ID b1")

    def test_terminate_declined_never_runs_command(self):
        self.picker.confirm.return_value = False
        self.dispatcher.dispatch(BuildAction.TERMINATE, make_build(BuildStatus.RUNNING))
        self.assertEqual(self.commands(), [])
        self.console.notify.assert_called_once_with(DECLINED_MESSAGE)

    def test_restart_allowed_for_terminal_statuses(self):
        for status in (
            BuildStatus.SUCCESS,
            BuildStatus.ERROR,
            BuildStatus.TERMINATED,
            BuildStatus.TERMINATING,
        ):
            with self.subTest(status=status):
                self.runner.commands.clear()
                self.console.reset_mock()
                self.picker.confirm.return_value = True
                self.dispatcher.dispatch(BuildAction.RESTART, make_build(status))
                self.assertEqual(self.commands(), [["codefresh", "restart", "b1"]])
                self.console.notify.assert_called_once_with("Restarting build ID b1")

    def test_restart_refused_for_active_statuses(self):
        for status in (
            BuildStatus.RUNNING,
            BuildStatus.PENDING,
            BuildStatus.DELAYED,
            BuildStatus.ELECTED,
        ):
            with self.subTest(status=status):
                self.runner.commands.clear()
                self.console.reset_mock()
                self.picker.reset_mock()
                self.dispatcher.dispatch(BuildAction.RESTART, make_build(status))
                self.assertEqual(self.commands(), [])
                self.picker.confirm.assert_not_called()
                self.console.notify.assert_called_once_with("Build b1 is not restartable")

    def test_restart_declined_never_runs_command(self):
        self.picker.confirm.return_value = False
        self.dispatcher.dispatch(BuildAction.RESTART, make_build(BuildStatus.ERROR))
        self.assertEqual(self.commands(), [])
        self.console.notify.assert_called_once_with(DECLINED_MESSAGE)

    def test_failed_command_is_reported(self):
        client = MagicMock(spec=CodefreshClient)
        client.terminate.return_value = False
        dispatcher = ActionDispatcher(
            client, self.picker, self.console, refresh=self.refresh, opener=self.opener
        )
        self.picker.confirm.return_value = True
        dispatcher.dispatch(BuildAction.TERMINATE, make_build(BuildStatus.RUNNING))
        self.console.notify.assert_called_once_with(
            "Failed to terminate build ID b1", level="ERROR"
        )

    def test_logs_are_unconditional(self):
        self.dispatcher.dispatch(BuildAction.LOGS, make_build(BuildStatus.RUNNING))
        self.picker.confirm.assert_not_called()
        self.assertEqual(self.commands(), [["codefresh", "logs", "-f", "b1"]])

    def test_open_uses_build_url(self):
        self.dispatcher.dispatch(BuildAction.OPEN, make_build(BuildStatus.SUCCESS, "xyz"))
        self.opener.assert_called_once_with("https://g.codefresh.io/build/xyz")

    def test_refresh_without_selection(self):
        self.dispatcher.dispatch(BuildAction.REFRESH, None)
        self.refresh.assert_called_once_with()
        self.console.notify.assert_called_once_with("Refreshing...")

    def test_action_without_selection(self):
        self.dispatcher.dispatch(BuildAction.TERMINATE, None)
        self.picker.confirm.assert_not_called()
        self.console.notify.assert_called_once_with("No build selected")


class TestKeyBindings(unittest.TestCase):
    def test_default_bindings(self):
        self.assertEqual(
            key_bindings(DEFAULT_KEYS),
            {
                "x": BuildAction.TERMINATE,
                "r": BuildAction.RESTART,
                "l": BuildAction.LOGS,
                "R": BuildAction.REFRESH,
            },
        )


if __name__ == "__main__":
    unittest.main()
