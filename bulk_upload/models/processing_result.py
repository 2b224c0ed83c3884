from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime

from .upload_result import UploadResult

"""Upload run summary model for the bulk item upload.

Aggregates the per-draft UploadResult list into the counters printed on the
SUMMARY line.
"""

__all__ = [
    "UploadSummary",
]


@dataclass(frozen=True)
class UploadSummary:
    """Aggregated metrics of one upload run."""
    total_products: int
    success_products: int
    failed_products: int
    total_sizes: int  # 成功した商品のサイズ数合計
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    throughput_products_per_sec: float

    @classmethod
    def from_results(
        cls,
        results: Sequence[UploadResult],
        sizes_per_product: Sequence[int],
        start_time: datetime,
        end_time: datetime,
    ) -> UploadSummary:
        """Build a summary from results and the matching draft size counts.

        sizes_per_product must be aligned with results (same draft order).
        """
        success = sum(1 for r in results if r.success)
        sizes = sum(n for r, n in zip(results, sizes_per_product, strict=False) if r.success)
        elapsed = (end_time - start_time).total_seconds()
        throughput = len(results) / elapsed if elapsed > 0 else 0.0
        return cls(
            total_products=len(results),
            success_products=success,
            failed_products=len(results) - success,
            total_sizes=sizes,
            start_time=start_time,
            end_time=end_time,
            elapsed_seconds=elapsed,
            throughput_products_per_sec=throughput,
        )
