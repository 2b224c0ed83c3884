from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import replace

from ..excel.reader import check_file_type, parse
from ..models.batch_state import BatchState, PipelineStage
from ..models.row_data import SourceRow
from ..models.upload_result import UploadResult
from .catalog_client import ItemCreator
from .grouping import group_rows
from .orchestrator import upload
from .validation import validate

"""Batch state transitions for the bulk item upload.

Each function takes a BatchState and returns a new one; nothing is mutated in
place. Calling a transition from the wrong stage raises InvalidTransitionError.
Upload is refused with UploadBlockedError unless validation found nothing.
"""

__all__ = [
    "PipelineError",
    "InvalidTransitionError",
    "UploadBlockedError",
    "cleared",
    "parsed",
    "grouped",
    "validated",
    "uploading",
    "uploaded",
    "select_file",
    "run_upload",
]

logger = logging.getLogger(__name__)


class PipelineError(Exception):
    """Base exception for batch state misuse."""


class InvalidTransitionError(PipelineError):
    def __init__(self, action: str, stage: PipelineStage) -> None:
        super().__init__(f"cannot {action} from stage '{stage.value}'")
        self.action = action
        self.stage = stage


class UploadBlockedError(PipelineError):
    """Raised when upload is requested while validation violations remain."""


def _require(state: BatchState, action: str, *stages: PipelineStage) -> None:
    if state.stage not in stages:
        raise InvalidTransitionError(action, state.stage)


def cleared() -> BatchState:
    """Discard everything, upload results included."""
    return BatchState()


def parsed(source_name: str, rows: Sequence[SourceRow]) -> BatchState:
    """Start a fresh batch from parsed rows; any previous state is dropped."""
    return BatchState(stage=PipelineStage.FILE_PARSED, source_name=source_name, rows=tuple(rows))


def grouped(state: BatchState) -> BatchState:
    _require(state, "group", PipelineStage.FILE_PARSED)
    outcome = group_rows(state.rows)
    return replace(
        state,
        stage=PipelineStage.GROUPED,
        drafts=tuple(outcome.drafts),
        warnings=tuple(outcome.warnings),
    )


def validated(state: BatchState) -> BatchState:
    """Recompute the full validation report."""
    _require(state, "validate", PipelineStage.GROUPED, PipelineStage.VALIDATED)
    return replace(state, stage=PipelineStage.VALIDATED, report=validate(state.drafts))


def uploading(state: BatchState) -> BatchState:
    _require(state, "upload", PipelineStage.VALIDATED)
    if not state.is_valid:
        raise UploadBlockedError(
            f"{len(state.report or ())} product(s) have validation errors; fix the file and re-select it"
        )
    return replace(state, stage=PipelineStage.UPLOADING, results=(), progress=0)


def uploaded(state: BatchState, results: Sequence[UploadResult]) -> BatchState:
    _require(state, "complete upload", PipelineStage.UPLOADING)
    return replace(
        state,
        stage=PipelineStage.COMPLETED,
        results=tuple(results),
        progress=100 if results else 0,
    )


def select_file(source_name: str, file_bytes: bytes) -> BatchState:
    """Parse, group and validate a newly selected file.

    Raises:
        ParseError: the file cannot be used; no batch state is produced
    """
    check_file_type(source_name)
    rows = parse(file_bytes)
    logger.info("parsed file=%s rows=%d", source_name, len(rows))
    state = validated(grouped(parsed(source_name, rows)))
    logger.info(
        "file=%s products=%d invalid=%d warnings=%d",
        source_name,
        len(state.drafts),
        len(state.report or ()),
        len(state.warnings),
    )
    return state


def run_upload(
    state: BatchState,
    creator: ItemCreator,
    on_progress: Callable[[int], None] | None = None,
) -> BatchState:
    """Upload a validated batch and return the completed state."""
    in_flight = uploading(state)
    results = upload(in_flight.drafts, creator, on_progress=on_progress)
    return uploaded(in_flight, results)
