"""Codefresh build and pipeline pickers."""

from .actions import ActionDispatcher, BuildAction
from .client import CodefreshClient
from .pickers import BuildListing, BuildPickerSession, PipelinePickerSession
from .records import (
    BuildRecord,
    BuildStatus,
    ParsedRow,
    PipelineRecord,
    RowKind,
    parse_build_row,
    parse_build_rows,
    parse_pipeline_row,
    parse_pipeline_rows,
    records_of,
)

__all__ = [
    "ActionDispatcher",
    "BuildAction",
    "CodefreshClient",
    "BuildListing",
    "BuildPickerSession",
    "PipelinePickerSession",
    "BuildRecord",
    "BuildStatus",
    "ParsedRow",
    "PipelineRecord",
    "RowKind",
    "parse_build_row",
    "parse_build_rows",
    "parse_pipeline_row",
    "parse_pipeline_rows",
    "records_of",
]
