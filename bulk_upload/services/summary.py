from __future__ import annotations

from ..models.processing_result import UploadSummary

"""SUMMARY line rendering for the bulk item upload.

Format:
    SUMMARY products={total} success={success} failed={failed} sizes={sizes}
    elapsed_sec={elapsed} throughput_pps={throughput}
"""


def _format_number(value: float) -> str:
    # 整数値は小数点なし, 極小値は指数表記を避ける
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return str(round(value, 3))


def render_summary_line(summary: UploadSummary) -> str:
    """Render a SUMMARY line from an UploadSummary.

    Examples:
        >>> from datetime import datetime, timezone
        >>> start = datetime(2025, 1, 1, 10, 0, 0, tzinfo=timezone.utc)
        >>> end = datetime(2025, 1, 1, 10, 0, 2, tzinfo=timezone.utc)
        >>> s = UploadSummary(
        ...     total_products=4, success_products=3, failed_products=1, total_sizes=9,
        ...     start_time=start, end_time=end, elapsed_seconds=2.0,
        ...     throughput_products_per_sec=2.0,
        ... )
        >>> render_summary_line(s)
        'SUMMARY products=4 success=3 failed=1 sizes=9 elapsed_sec=2 throughput_pps=2'
    """
    return (
        f"SUMMARY products={summary.total_products} "
        f"success={summary.success_products} "
        f"failed={summary.failed_products} "
        f"sizes={summary.total_sizes} "
        f"elapsed_sec={_format_number(summary.elapsed_seconds)} "
        f"throughput_pps={_format_number(summary.throughput_products_per_sec)}"
    )
