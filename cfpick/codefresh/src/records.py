"""Build and pipeline records parsed from ``codefresh get`` table output."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Union


class BuildStatus(Enum):
    RUNNING = "running"
    SUCCESS = "success"
    ERROR = "error"
    TERMINATED = "terminated"
    TERMINATING = "terminating"
    DELAYED = "delayed"
    PENDING = "pending"
    ELECTED = "elected"

    @property
    def glyph(self) -> str:
        return _GLYPHS[self]

    @property
    def restartable(self) -> bool:
        """Terminal states from which a build may be restarted."""
        return self in _RESTARTABLE


_GLYPHS = {
    BuildStatus.RUNNING: "🚧",
    BuildStatus.SUCCESS: "✅",
    BuildStatus.ERROR: "❌",
    BuildStatus.TERMINATED: "☠️",
    BuildStatus.TERMINATING: "☠️",
    BuildStatus.DELAYED: "✋",
    BuildStatus.PENDING: "🚧",
    BuildStatus.ELECTED: "🗳️",
}

_RESTARTABLE = frozenset(
    {
        BuildStatus.TERMINATING,
        BuildStatus.TERMINATED,
        BuildStatus.ERROR,
        BuildStatus.SUCCESS,
    }
)


@dataclass(frozen=True)
class BuildRecord:
    id: str
    status: BuildStatus
    started: str
    pipeline: str

    @property
    def display(self) -> str:
        return f"{self.status.glyph} - {self.started} - {self.pipeline}"

    @property
    def ordinal(self) -> str:
        return self.pipeline


@dataclass(frozen=True)
class PipelineRecord:
    project: str
    name: str

    @property
    def full_name(self) -> str:
        return f"{self.project}/{self.name}"

    @property
    def display(self) -> str:
        return self.full_name

    @property
    def ordinal(self) -> str:
        return self.name


Record = Union[BuildRecord, PipelineRecord]


class RowKind(Enum):
    RECORD = "record"
    HEADER = "header"
    MALFORMED = "malformed"


@dataclass(frozen=True)
class ParsedRow:
    """Outcome of parsing one line of CLI output."""

    kind: RowKind
    line: str
    record: Optional[Record] = None
    reason: Optional[str] = None


# Columns: id, status, started ("YYYY-MM-DD, HH:MM:SS"), pipeline-name
_BUILD_ROW = re.compile(
    r"(?P<id>[0-9A-Za-z]+)\s*"
    r"(?P<status>[0-9A-Za-z]+)\s*"
    r"(?P<started>\d+-\d+-\d+,\s\d+:\d+:\d+)\s*"
    r"(?P<pipeline>\S+)"
)

# Greedy project: the split happens on the last '/'
_PIPELINE_ROW = re.compile(r"(?P<project>\S+)/(?P<name>\S+)")


def parse_build_row(line: str) -> ParsedRow:
    text = line.strip()
    if not text:
        return ParsedRow(RowKind.MALFORMED, line, reason="empty line")
    if text.split()[0] == "ID":
        return ParsedRow(RowKind.HEADER, line)

    match = _BUILD_ROW.search(text)
    if match is None:
        return ParsedRow(RowKind.MALFORMED, line, reason="does not match build columns")

    try:
        status = BuildStatus(match.group("status").lower())
    except ValueError:
        return ParsedRow(
            RowKind.MALFORMED, line, reason=f"unknown status '{match.group('status')}'"
        )

    record = BuildRecord(
        id=match.group("id"),
        status=status,
        started=match.group("started"),
        pipeline=match.group("pipeline"),
    )
    return ParsedRow(RowKind.RECORD, line, record=record)


def parse_pipeline_row(line: str) -> ParsedRow:
    text = line.strip()
    if not text:
        return ParsedRow(RowKind.MALFORMED, line, reason="empty line")
    if text.split()[0] == "NAME":
        return ParsedRow(RowKind.HEADER, line)

    match = _PIPELINE_ROW.search(text)
    if match is None:
        return ParsedRow(RowKind.MALFORMED, line, reason="expected <project>/<name>")

    record = PipelineRecord(project=match.group("project"), name=match.group("name"))
    return ParsedRow(RowKind.RECORD, line, record=record)


def parse_build_rows(lines: Iterable[str]) -> List[ParsedRow]:
    """Parse every non-blank line."""
    return [parse_build_row(line) for line in lines if line.strip()]


def parse_pipeline_rows(lines: Iterable[str]) -> List[ParsedRow]:
    return [parse_pipeline_row(line) for line in lines if line.strip()]


def records_of(rows: Iterable[ParsedRow]) -> List[Record]:
    """Only the rows that produced a record, in input order."""
    return [row.record for row in rows if row.kind is RowKind.RECORD and row.record is not None]


def malformed_rows(rows: Iterable[ParsedRow]) -> List[ParsedRow]:
    return [row for row in rows if row.kind is RowKind.MALFORMED]
