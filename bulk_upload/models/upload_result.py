from __future__ import annotations

from dataclasses import dataclass

"""Upload outcome models for the bulk item upload.

UploadResult is produced once per draft during an upload run and never changed
afterwards. UploadProgress is the event emitted by the orchestrator after each
draft completes.
"""

__all__ = [
    "UploadResult",
    "UploadProgress",
]


@dataclass(frozen=True)
class UploadResult:
    """Per-draft outcome of one upload run.

    On success remote_id holds the identifier returned by the catalog service
    (None when the service did not return one); on failure error holds the
    message reported by the service.
    """
    product_name: str
    success: bool
    remote_id: str | None = None
    error: str | None = None

    @classmethod
    def succeeded(cls, product_name: str, remote_id: str | None) -> UploadResult:
        return cls(product_name=product_name, success=True, remote_id=remote_id)

    @classmethod
    def failed(cls, product_name: str, error: str) -> UploadResult:
        return cls(product_name=product_name, success=False, error=error)


@dataclass(frozen=True)
class UploadProgress:
    """Emitted after each draft is attempted, success or failure."""
    index: int  # 0-based draft position
    result: UploadResult
    completed: int
    total: int
    percent: int
