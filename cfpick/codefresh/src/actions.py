"""Build actions bound to picker keys."""

from __future__ import annotations

from enum import Enum
from typing import Callable, Dict, Mapping, Optional

from cfpick.core.console import Console

from .client import CodefreshClient
from .finder import Picker
from .records import BuildRecord

DECLINED_MESSAGE = "Backing away slowly!!"


class BuildAction(Enum):
    OPEN = "open"
    TERMINATE = "terminate"
    RESTART = "restart"
    LOGS = "logs"
    REFRESH = "refresh"

    @property
    def needs_record(self) -> bool:
        return self is not BuildAction.REFRESH


def key_bindings(keys: Mapping[str, str]) -> Dict[str, BuildAction]:
    """Map picker keys to actions. ``keys`` is a settings table keyed by action name."""
    return {key: BuildAction(action) for action, key in keys.items()}


class ActionDispatcher:
    """
    Runs one :class:`BuildAction` against a selected build.

    Terminate and restart ask for confirmation first; a declined confirmation
    never reaches the CLI. Restart is also refused for builds that are still in
    flight. Logs, open and refresh run unconditionally.
    """

    def __init__(
        self,
        client: CodefreshClient,
        picker: Picker,
        console: Console,
        refresh: Callable[[], None],
        opener: Callable[[str], bool],
    ) -> None:
        self.client = client
        self.picker = picker
        self.console = console
        self.refresh = refresh
        self.opener = opener

    def dispatch(self, action: BuildAction, build: Optional[BuildRecord]) -> None:
        if action.needs_record and build is None:
            self.console.notify("No build selected")
            return

        if action is BuildAction.OPEN:
            self.open(build)
        elif action is BuildAction.TERMINATE:
            self.terminate(build)
        elif action is BuildAction.RESTART:
            self.restart(build)
        elif action is BuildAction.LOGS:
            self.logs(build)
        elif action is BuildAction.REFRESH:
            self.console.notify("Refreshing...")
            self.refresh()
        else:
            raise ValueError(f"Unhandled build action: {action}")

    def _confirmed(self, prompt: str) -> bool:
        if self.picker.confirm(prompt):
            return True
        self.console.notify(DECLINED_MESSAGE)
        return False

    def open(self, build: BuildRecord) -> None:
        url = self.client.build_url(build.id)
        self.console.info(f"Opening {url}")
        self.opener(url)

    def terminate(self, build: BuildRecord) -> None:
        if not self._confirmed(
            f"Are you sure you want to terminate build ID {build.id}? (y/N) "
        ):
            return
        if self.client.terminate(build.id):
            self.console.notify(f"Terminating build ID {build.id}")
        else:
            self.console.notify(f"Failed to terminate build ID {build.id}", level="ERROR")

    def restart(self, build: BuildRecord) -> None:
        if not build.status.restartable:
            self.console.notify(f"Build {build.id} is not restartable")
            return
        if not self._confirmed(
            f"Are you sure you want to restart build ID {build.id}? (y/N) "
        ):
            return
        if self.client.restart(build.id):
            self.console.notify(f"Restarting build ID {build.id}")
        else:
            self.console.notify(f"Failed to restart build ID {build.id}", level="ERROR")

    def logs(self, build: BuildRecord) -> None:
        self.client.stream_logs(build.id)
