"""Domain models for the bulk item upload pipeline.

Rows, drafts, reports and results flow through the pipeline as immutable
dataclasses defined here.
"""

from .batch_state import BatchState, PipelineStage
from .product import GroupingWarning, ProductDraft, SizeVariant, WarningKind
from .row_data import SourceRow
from .schema import EXPECTED_COLUMNS
from .upload_result import UploadProgress, UploadResult
from .validation_report import ValidationReport

__all__ = [
    # Schema
    "EXPECTED_COLUMNS",
    # Pipeline values
    "SourceRow",
    "SizeVariant",
    "ProductDraft",
    "GroupingWarning",
    "WarningKind",
    "ValidationReport",
    "UploadResult",
    "UploadProgress",
    # State
    "BatchState",
    "PipelineStage",
]
