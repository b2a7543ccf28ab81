"""Build and pipeline picker sessions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Mapping, Tuple

from .actions import ActionDispatcher, BuildAction, key_bindings
from .client import CodefreshClient
from .context import Context
from .finder import Picker, PickerEntry, open_url
from .records import BuildRecord, PipelineRecord, malformed_rows, records_of


@dataclass
class BuildListing:
    """
    The builds shown by one picker session.

    ``records`` is replaced as a whole by :meth:`refresh`; nothing else
    mutates it.
    """

    client: CodefreshClient
    branch: str
    records: Tuple[BuildRecord, ...] = ()
    skipped: int = 0

    def refresh(self) -> None:
        rows = self.client.get_builds(self.branch)
        self.records = tuple(records_of(rows))
        self.skipped = len(malformed_rows(rows))

    def entries(self) -> List[PickerEntry]:
        return [
            PickerEntry(value=build.id, display=build.display, ordinal=build.ordinal, record=build)
            for build in self.records
        ]


def _help_header(bindings: Mapping[str, BuildAction]) -> str:
    parts = ["enter: open"]
    parts.extend(f"{key}: {action.value}" for key, action in bindings.items())
    return " | ".join(parts)


class BuildPickerSession:
    """Lists builds for a branch and applies actions until the user quits."""

    def __init__(
        self,
        ctx: Context,
        picker: Picker,
        branch: str,
        *,
        use_fzf_keys: bool = False,
        opener: Callable[[str], bool] = open_url,
    ) -> None:
        self.ctx = ctx
        self.picker = picker
        self.client = CodefreshClient(ctx)
        self.listing = BuildListing(self.client, branch)
        keys = ctx.settings.fzf_keys if use_fzf_keys else ctx.settings.keys
        self.bindings = key_bindings(keys)
        self.dispatcher = ActionDispatcher(
            self.client,
            picker,
            ctx.console,
            refresh=self.listing.refresh,
            opener=opener,
        )

    @property
    def title(self) -> str:
        return f"Codefresh Builds for {self.listing.branch}"

    def run(self) -> int:
        self.listing.refresh()
        header = _help_header(self.bindings)
        while True:
            selection = self.picker.pick(
                self.title,
                self.listing.entries(),
                keys=list(self.bindings),
                header=header,
            )
            if selection is None:
                return 0

            action = BuildAction.OPEN
            if selection.key is not None:
                action = self.bindings.get(selection.key, BuildAction.OPEN)
            build = selection.entry.record if selection.entry is not None else None
            self.ctx.console.debug(f"{action.value} -> {build}")
            self.dispatcher.dispatch(action, build)


class PipelinePickerSession:
    """Lists every pipeline; choosing one opens it in the browser."""

    title = "Codefresh Pipelines"

    def __init__(
        self,
        ctx: Context,
        picker: Picker,
        *,
        opener: Callable[[str], bool] = open_url,
    ) -> None:
        self.ctx = ctx
        self.picker = picker
        self.client = CodefreshClient(ctx)
        self.opener = opener

    def entries(self) -> List[PickerEntry]:
        pipelines: List[PipelineRecord] = records_of(self.client.get_pipelines())
        return [
            PickerEntry(
                value=pipeline.full_name,
                display=pipeline.display,
                ordinal=pipeline.ordinal,
                record=pipeline,
            )
            for pipeline in pipelines
        ]

    def run(self) -> int:
        selection = self.picker.pick(self.title, self.entries())
        if selection is None or selection.entry is None:
            return 0
        url = self.client.pipeline_url(selection.entry.record)
        self.ctx.console.info(f"Opening {url}")
        self.opener(url)
        return 0
