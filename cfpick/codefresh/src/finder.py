"""
Interactive list pickers.

Two backends share the :class:`Picker` interface:

* :class:`FzfPicker` drives an external ``fzf`` process. Extra actions are
  bound through ``--expect`` so the key that closed fzf is reported back.
* :class:`PromptPicker` prints a numbered list and reads commands from the
  terminal. It is used when fzf is not installed.
"""

from __future__ import annotations

import shutil
import subprocess
import webbrowser
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Sequence, Tuple

from .settings import Settings


@dataclass(frozen=True)
class PickerEntry:
    value: str
    display: str
    ordinal: str
    record: Any = None


@dataclass(frozen=True)
class Selection:
    """``key`` is None for the default (Enter) action."""

    key: Optional[str]
    entry: Optional[PickerEntry]


def fuzzy_score(query: str, text: str) -> Optional[int]:
    """
    Score ``query`` as a case-insensitive subsequence of ``text``.

    Returns the length of the shortest window containing the match (lower is
    better), or None when ``text`` does not contain the query characters in
    order.
    """
    needle = query.lower()
    haystack = text.lower()
    if not needle:
        return 0

    best: Optional[int] = None
    for start, char in enumerate(haystack):
        if char != needle[0]:
            continue
        pos = start
        matched = True
        for wanted in needle[1:]:
            pos = haystack.find(wanted, pos + 1)
            if pos < 0:
                matched = False
                break
        if not matched:
            break
        span = pos - start + 1
        if best is None or span < best:
            best = span
    return best


def fuzzy_filter(query: str, entries: Sequence[PickerEntry]) -> List[PickerEntry]:
    """Entries whose ordinal matches ``query``, tightest matches first."""
    scored: List[Tuple[int, int, PickerEntry]] = []
    for index, entry in enumerate(entries):
        score = fuzzy_score(query, entry.ordinal)
        if score is not None:
            scored.append((score, index, entry))
    scored.sort(key=lambda item: (item[0], item[1]))
    return [entry for _, _, entry in scored]


class Picker:
    """Abstract picker interface."""

    def pick(
        self,
        title: str,
        entries: Sequence[PickerEntry],
        keys: Sequence[str] = (),
        header: str = "",
    ) -> Optional[Selection]:
        raise NotImplementedError

    def confirm(self, prompt: str) -> bool:
        raise NotImplementedError


class FzfPicker(Picker):
    def __init__(self, command: Sequence[str] = ("fzf",)) -> None:
        self.command = list(command)

    def _run_fzf(self, lines: Sequence[str], options: List[str]) -> Tuple[int, List[str]]:
        process = subprocess.run(
            self.command + options,
            input="\n".join(lines),
            stdout=subprocess.PIPE,
            text=True,
            check=False,
        )
        return process.returncode, process.stdout.splitlines()

    def pick(
        self,
        title: str,
        entries: Sequence[PickerEntry],
        keys: Sequence[str] = (),
        header: str = "",
    ) -> Optional[Selection]:
        # Line: index, display, ordinal. The index maps the selection back to
        # an entry and is hidden. --nth counts fields after --with-nth, so
        # field 2 there is the ordinal and only it is matched.
        lines = [
            f"{index}\t{entry.display}\t{entry.ordinal}" for index, entry in enumerate(entries)
        ]
        options = [
            "--delimiter=\t",
            "--with-nth=2..",
            "--nth=2",
            f"--prompt={title}> ",
        ]
        if keys:
            options.append(f"--expect={','.join(keys)}")
        if header:
            options.append(f"--header={header}")

        returncode, output = self._run_fzf(lines, options)
        # 1: no match, 130: aborted. Neither has a usable selection.
        if returncode not in (0, 1):
            return None

        # Output: the expected key line (when --expect), then the item
        key: Optional[str] = None
        if keys:
            pressed = output[0] if output else ""
            key = pressed or None
            output = output[1:]

        entry: Optional[PickerEntry] = None
        if output:
            index_text = output[0].split("\t", 1)[0]
            if index_text.isdigit() and int(index_text) < len(entries):
                entry = entries[int(index_text)]

        if key is None and entry is None:
            return None
        return Selection(key=key, entry=entry)

    def confirm(self, prompt: str) -> bool:
        returncode, output = self._run_fzf(
            ["Yes", "No"], [f"--prompt={prompt}", "--no-sort", "--height=4"]
        )
        return returncode == 0 and bool(output) and output[0] == "Yes"


class PromptPicker(Picker):
    """
    Numbered list picker on plain stdin/stdout.

    Commands:
      <n>          select entry n (default action)
      <key> <n>    apply the action bound to <key> to entry n
      <key>        apply the action to the only listed entry (or to none)
      <text>       fuzzy filter the list by its ordinal
      (empty)      quit
    """

    MAX_ROWS = 50

    def __init__(
        self,
        input_func: Callable[[str], str] = input,
        output_func: Callable[[str], None] = print,
    ) -> None:
        self.input = input_func
        self.output = output_func

    def _read(self, prompt: str) -> Optional[str]:
        try:
            return self.input(prompt).strip()
        except EOFError:
            return None

    def _render(self, title: str, header: str, shown: Sequence[PickerEntry], query: str) -> None:
        self.output("")
        self.output(f"{title}" + (f" [filter: {query}]" if query else ""))
        if header:
            self.output(header)
        if not shown:
            self.output("  (no results)")
        for number, entry in enumerate(shown[: self.MAX_ROWS], start=1):
            self.output(f"  {number:>3}  {entry.display}")
        if len(shown) > self.MAX_ROWS:
            self.output(f"  ... {len(shown) - self.MAX_ROWS} more, type to filter")

    def pick(
        self,
        title: str,
        entries: Sequence[PickerEntry],
        keys: Sequence[str] = (),
        header: str = "",
    ) -> Optional[Selection]:
        query = ""
        shown = list(entries)
        while True:
            self._render(title, header, shown, query)
            answer = self._read("> ")
            if not answer:
                return None

            parts = answer.split()
            if len(parts) == 1 and parts[0] in keys:
                only = shown[0] if len(shown) == 1 else None
                return Selection(key=parts[0], entry=only)

            if len(parts) == 2 and parts[0] in keys and parts[1].isdigit():
                entry = self._by_number(shown, parts[1])
                if entry is not None:
                    return Selection(key=parts[0], entry=entry)
                continue

            if answer.isdigit():
                entry = self._by_number(shown, answer)
                if entry is not None:
                    return Selection(key=None, entry=entry)
                continue

            query = answer
            shown = fuzzy_filter(query, entries)

    def _by_number(self, shown: Sequence[PickerEntry], text: str) -> Optional[PickerEntry]:
        number = int(text)
        if 1 <= number <= min(len(shown), self.MAX_ROWS):
            return shown[number - 1]
        self.output(f"No entry numbered {number}")
        return None

    def confirm(self, prompt: str) -> bool:
        answer = self._read(prompt)
        return bool(answer) and answer.lower() in ("y", "yes")


def make_picker(settings: Settings) -> Tuple[Picker, bool]:
    """
    Build the configured picker. Returns the picker and whether it is fzf.

    ``auto`` uses fzf when its executable is on PATH.
    """
    choice = settings.picker
    if choice == "auto":
        choice = "fzf" if shutil.which(settings.fzf_command[0]) else "prompt"
    if choice == "fzf":
        return FzfPicker(settings.fzf_command), True
    return PromptPicker(), False


def open_url(url: str) -> bool:
    return webbrowser.open(url)
