from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from .product import GroupingWarning, ProductDraft
from .row_data import SourceRow
from .upload_result import UploadResult
from .validation_report import ValidationReport

"""BatchState model and PipelineStage enum for the bulk item upload.

BatchState is the whole state of one bulk run held as a single immutable value.
Transition functions in bulk_upload.services.pipeline return a new BatchState
instead of mutating the current one.

State transitions:
    idle → file_parsed → grouped → validated → uploading → completed
A new file may be selected from any stage; clear returns to idle.
"""

__all__ = [
    "PipelineStage",
    "BatchState",
]


class PipelineStage(Enum):
    IDLE = "idle"
    FILE_PARSED = "file_parsed"
    GROUPED = "grouped"
    VALIDATED = "validated"
    UPLOADING = "uploading"
    COMPLETED = "completed"


@dataclass(frozen=True)
class BatchState:
    stage: PipelineStage = PipelineStage.IDLE
    source_name: str | None = None  # 選択されたファイル名
    rows: tuple[SourceRow, ...] = field(default_factory=tuple)
    drafts: tuple[ProductDraft, ...] = field(default_factory=tuple)
    warnings: tuple[GroupingWarning, ...] = field(default_factory=tuple)
    report: ValidationReport | None = None
    results: tuple[UploadResult, ...] = field(default_factory=tuple)
    progress: int = 0  # 0-100

    @property
    def is_valid(self) -> bool:
        """True when validation ran and found no violations."""
        return self.report is not None and self.report.is_valid

    @property
    def success_count(self) -> int:
        return sum(1 for r in self.results if r.success)

    @property
    def failure_count(self) -> int:
        return sum(1 for r in self.results if not r.success)
